"""Text measurement and layout for SVG output.

Measurements are made with fonts available on this machine, which is a
best guess at how the text will look wherever the SVG is finally rendered.
"""

from __future__ import annotations

import enum
import math
import os
import sys
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, Iterable, Sequence, Union

from PIL import ImageFont

from vectorpaint.color import Color
from vectorpaint.errors import FontLoadingFailedError
from vectorpaint.font import FontFamily, FontStyle, FontWeight
from vectorpaint.geometry import Rect, Size

__all__ = [
    "TextAlignment",
    "AttributeKind",
    "TextAttribute",
    "LineMetric",
    "FontFace",
    "Text",
    "TextLayoutBuilder",
    "TextLayout",
]

# The SVG renderer scales for high-DPI displays, so 96 DPI is assumed.
_DPI = 96.0
_POINTS_PER_INCH = 72.0
_MEASURE_SIZE = 1000
_PROBE_SIZE = 12
_FONT_SUFFIXES = {".ttf", ".otf", ".ttc"}

_GENERIC_FALLBACKS = {
    "sans-serif": (
        "DejaVu Sans", "Liberation Sans", "Arial", "Helvetica",
        "Noto Sans", "Segoe UI", "Verdana",
    ),
    "serif": (
        "DejaVu Serif", "Liberation Serif", "Times New Roman", "Times",
        "Noto Serif", "Georgia",
    ),
    "monospace": (
        "DejaVu Sans Mono", "Liberation Mono", "Courier New", "Courier",
        "Noto Sans Mono", "Consolas", "Menlo",
    ),
}
_GENERIC_FALLBACKS["system-ui"] = _GENERIC_FALLBACKS["sans-serif"]

_WEIGHT_KEYWORDS = (
    ("extralight", 200), ("ultralight", 200), ("semibold", 600),
    ("demibold", 600), ("extrabold", 800), ("ultrabold", 800),
    ("hairline", 100), ("thin", 100), ("light", 300), ("medium", 500),
    ("bold", 700), ("black", 900), ("heavy", 900),
)


class TextAlignment(enum.Enum):
    """Horizontal alignment of text within its maximum width."""

    START = "start"
    END = "end"
    CENTER = "center"
    JUSTIFIED = "justified"


class AttributeKind(enum.Enum):
    """The property a :class:`TextAttribute` sets."""

    FONT_FAMILY = "font_family"
    FONT_SIZE = "font_size"
    WEIGHT = "weight"
    TEXT_COLOR = "text_color"
    STYLE = "style"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"


@dataclass(frozen=True)
class TextAttribute:
    """One attribute of a run of text."""

    kind: AttributeKind
    value: Any

    @classmethod
    def font_family(cls, family: FontFamily) -> TextAttribute:
        return cls(AttributeKind.FONT_FAMILY, family)

    @classmethod
    def font_size(cls, size: float) -> TextAttribute:
        return cls(AttributeKind.FONT_SIZE, float(size))

    @classmethod
    def weight(cls, weight: FontWeight) -> TextAttribute:
        return cls(AttributeKind.WEIGHT, weight)

    @classmethod
    def text_color(cls, color: Color) -> TextAttribute:
        return cls(AttributeKind.TEXT_COLOR, color)

    @classmethod
    def style(cls, style: FontStyle) -> TextAttribute:
        return cls(AttributeKind.STYLE, style)

    @classmethod
    def underline(cls, on: bool) -> TextAttribute:
        return cls(AttributeKind.UNDERLINE, bool(on))

    @classmethod
    def strikethrough(cls, on: bool) -> TextAttribute:
        return cls(AttributeKind.STRIKETHROUGH, bool(on))

    @classmethod
    def coerce(cls, value: AttributeLike) -> TextAttribute:
        """Turn a family, weight, style or color into the matching attribute."""
        if isinstance(value, TextAttribute):
            return value
        if isinstance(value, FontFamily):
            return cls.font_family(value)
        if isinstance(value, FontWeight):
            return cls.weight(value)
        if isinstance(value, FontStyle):
            return cls.style(value)
        if isinstance(value, Color):
            return cls.text_color(value)
        raise TypeError(f"cannot use {value!r} as a text attribute")


AttributeLike = Union[TextAttribute, FontFamily, FontWeight, FontStyle, Color]


@dataclass(frozen=True)
class LineMetric:
    """Offsets (in UTF-8 bytes) and vertical metrics of one line."""

    start_offset: int = 0
    end_offset: int = 0
    trailing_whitespace: int = 0
    baseline: float = 0.0
    height: float = 0.0
    y_offset: float = 0.0


@dataclass(frozen=True)
class FontFace:
    """Everything that identifies a font face except its size."""

    family: FontFamily = FontFamily.SYSTEM_UI
    weight: FontWeight = FontWeight.REGULAR
    style: FontStyle = FontStyle.REGULAR

    def family_names(self) -> Sequence[str]:
        """Family names to try, in order, when looking this face up."""
        if self.family.is_generic():
            return _GENERIC_FALLBACKS[self.family.name()]
        return (self.family.name(),)

    @property
    def italic(self) -> bool:
        return self.style is FontStyle.ITALIC


def _weight_from_style(style: str) -> int:
    compact = style.casefold().replace(" ", "").replace("-", "")
    return next((w for key, w in _WEIGHT_KEYWORDS if key in compact), 400)


@dataclass
class _FontEntry:
    family: str
    weight: int
    italic: bool
    path: Path | None = None
    data: bytes | None = None

    def read(self) -> bytes:
        if self.data is not None:
            return self.data
        assert self.path is not None
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise FontLoadingFailedError() from exc


def _probe(source: Union[str, BytesIO]) -> tuple[str, int, bool] | None:
    """Read family, weight and italic flag from a font, or None if unnamed."""
    font = ImageFont.truetype(source, _PROBE_SIZE)
    family, style = font.getname()
    if not family:
        return None
    style = style or ""
    lowered = style.casefold()
    return family, _weight_from_style(style), "italic" in lowered or "oblique" in lowered


def _default_font_dirs() -> list[Path]:
    home = Path.home()
    if sys.platform == "win32":
        return [Path(os.environ.get("WINDIR", r"C:\Windows")) / "Fonts"]
    if sys.platform == "darwin":
        return [Path("/System/Library/Fonts"), Path("/Library/Fonts"), home / "Library/Fonts"]
    return [
        home / ".fonts",
        home / ".local/share/fonts",
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
    ]


class _FontSource:
    """System fonts found in font directories, plus fonts loaded from memory."""

    def __init__(self, font_dirs: Iterable[Union[str, os.PathLike]] | None) -> None:
        self._dirs = (
            _default_font_dirs() if font_dirs is None else [Path(d) for d in font_dirs]
        )
        self._system: list[_FontEntry] | None = None
        self._memory: list[_FontEntry] = []

    def _system_entries(self) -> list[_FontEntry]:
        if self._system is None:
            entries = []
            for directory in self._dirs:
                if not directory.is_dir():
                    continue
                for path in sorted(directory.rglob("*")):
                    if path.suffix.lower() not in _FONT_SUFFIXES or not path.is_file():
                        continue
                    try:
                        info = _probe(str(path))
                    except (OSError, ValueError):
                        continue
                    if info is not None:
                        entries.append(_FontEntry(*info, path=path))
            self._system = entries
        return self._system

    def add_font(self, data: bytes) -> _FontEntry:
        try:
            info = _probe(BytesIO(data))
        except (OSError, ValueError) as exc:
            raise FontLoadingFailedError() from exc
        if info is None:
            raise FontLoadingFailedError()
        entry = _FontEntry(*info, data=bytes(data))
        self._memory.append(entry)
        return entry

    def select_best_match(
        self, families: Sequence[str], weight: int, italic: bool
    ) -> _FontEntry:
        entries = [*self._system_entries(), *self._memory]
        for name in families:
            wanted = name.casefold()
            candidates = [e for e in entries if e.family.casefold() == wanted]
            if candidates:
                return min(
                    candidates,
                    key=lambda e: (e.italic != italic, abs(e.weight - weight)),
                )
        raise FontLoadingFailedError()

    def find(self, face: FontFace) -> _FontEntry:
        return self.select_best_match(face.family_names(), face.weight.to_raw(), face.italic)


class Text:
    """Font lookup and text layout factory.

    ``font_dirs`` lists directories searched for system fonts; ``None``
    uses the platform's usual font directories.
    """

    def __init__(self, font_dirs: Iterable[Union[str, os.PathLike]] | None = None) -> None:
        self._source = _FontSource(font_dirs)
        # Faces drawn so far, which the SVG output embeds.
        self.seen_fonts: set[FontFace] = set()

    def font_family(self, family_name: str) -> FontFamily | None:
        """The named family if a matching font exists, otherwise None."""
        try:
            self._source.select_best_match([family_name], 400, False)
        except FontLoadingFailedError:
            return None
        return FontFamily.new_unchecked(family_name)

    def load_font(self, data: bytes) -> FontFamily:
        """Register font data and return its family."""
        entry = self._source.add_font(data)
        return FontFamily.new_unchecked(entry.family)

    def font_data(self, face: FontFace) -> bytes:
        """The raw data of the font that best matches ``face``."""
        return self._source.find(face).read()

    def new_text_layout(self, text: str) -> TextLayoutBuilder:
        """Start building a layout for ``text``."""
        return TextLayoutBuilder(text, self)


class TextLayoutBuilder:
    """Collects layout settings; :meth:`build` measures the text."""

    def __init__(self, text: str, ctx: Text) -> None:
        self._text = str(text)
        self._ctx = ctx
        self._alignment = TextAlignment.START
        self._font_face = FontFace()
        self._font_size = 12.0
        self._text_color = Color.BLACK
        self._underline = False
        self._strikethrough = False
        self._max_width = math.inf

    def max_width(self, width: float) -> TextLayoutBuilder:
        """Set the maximum width; it is not used when measuring."""
        self._max_width = float(width)
        return self

    def alignment(self, alignment: TextAlignment) -> TextLayoutBuilder:
        self._alignment = alignment
        return self

    def default_attribute(self, attribute: AttributeLike) -> TextLayoutBuilder:
        """Apply an attribute to the whole text."""
        attr = TextAttribute.coerce(attribute)
        kind, value = attr.kind, attr.value
        face = self._font_face
        if kind is AttributeKind.FONT_FAMILY:
            self._font_face = FontFace(value, face.weight, face.style)
        elif kind is AttributeKind.WEIGHT:
            self._font_face = FontFace(face.family, value, face.style)
        elif kind is AttributeKind.STYLE:
            self._font_face = FontFace(face.family, face.weight, value)
        elif kind is AttributeKind.FONT_SIZE:
            self._font_size = float(value)
        elif kind is AttributeKind.TEXT_COLOR:
            self._text_color = value
        elif kind is AttributeKind.UNDERLINE:
            self._underline = bool(value)
        elif kind is AttributeKind.STRIKETHROUGH:
            self._strikethrough = bool(value)
        return self

    def range_attribute(
        self, start: int | None, end: int | None, attribute: AttributeLike
    ) -> TextLayoutBuilder:
        """Apply an attribute to the byte range ``start..end``.

        Only ranges covering the whole text take effect; ``None`` leaves a
        side unbounded.
        """

        def contains(i: int) -> bool:
            return (start is None or start <= i) and (end is None or i < end)

        last = len(self._text.encode("utf-8")) - 1
        if contains(0) and contains(last):
            self.default_attribute(attribute)
        return self

    def build(self) -> TextLayout:
        """Measure the text and return the finished layout."""
        data = self._ctx.font_data(self._font_face)
        try:
            font = ImageFont.truetype(BytesIO(data), _MEASURE_SIZE)
            advance = font.getlength(self._text)
            ascent, descent = font.getmetrics()
        except (OSError, ValueError) as exc:
            raise FontLoadingFailedError() from exc
        px_per_em = _DPI / _POINTS_PER_INCH * self._font_size
        scale = px_per_em / _MEASURE_SIZE
        extent = Size(advance * scale, (ascent + descent) * scale)
        return TextLayout(
            content=self._text,
            max_width=self._max_width,
            alignment=self._alignment,
            font_size=self._font_size,
            font_face=self._font_face,
            text_color=self._text_color,
            underline=self._underline,
            strikethrough=self._strikethrough,
            extent=extent,
        )


@dataclass(frozen=True)
class TextLayout:
    """A single line of measured text with its styling."""

    content: str
    max_width: float
    alignment: TextAlignment
    font_size: float
    font_face: FontFace
    text_color: Color
    underline: bool
    strikethrough: bool
    extent: Size = field(default=Size.ZERO)

    def size(self) -> Size:
        """The measured size of the text."""
        return self.extent

    def trailing_whitespace_width(self) -> float:
        """Not measured; always zero."""
        return 0.0

    def image_bounds(self) -> Rect:
        return self.extent.to_rect()

    def line_text(self, line_number: int) -> str | None:
        return self.content if line_number == 0 else None

    def line_metric(self, line_number: int) -> LineMetric | None:
        if line_number != 0:
            return None
        total = len(self.content.encode("utf-8"))
        trimmed = len(self.content.rstrip().encode("utf-8"))
        return LineMetric(start_offset=0, end_offset=total, trailing_whitespace=total - trimmed)

    def line_count(self) -> int:
        return 1

    def text(self) -> str:
        return self.content