"""A render context that records drawing operations as an SVG document."""

from __future__ import annotations

import base64
import enum
import io
import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Callable, ClassVar, Optional, Sequence, Tuple, Union

from PIL import Image as PILImage

from vectorpaint.color import Color
from vectorpaint.errors import (
    InvalidInputError,
    StackUnbalanceError,
    UnimplementedError,
)
from vectorpaint.font import FontStyle
from vectorpaint.geometry import Affine, Circle, Point, Rect, RoundedRect, Size
from vectorpaint.gradient import (
    FixedLinearGradient,
    FixedRadialGradient,
    LinearGradient,
    RadialGradient,
)
from vectorpaint.image import ImageFormat, unpremul
from vectorpaint.text import FontFace, Text, TextAlignment, TextLayout

__all__ = [
    "LineJoin",
    "LineCap",
    "StrokeStyle",
    "InterpolationMode",
    "Brush",
    "SvgImage",
    "RenderContext",
]

_SVG_NS = "http://www.w3.org/2000/svg"
_ID_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_JOIN_KINDS = ("miter", "round", "bevel")


def _fmt(x: float) -> str:
    """Format a number as a plain decimal: no exponent and no trailing '.0'."""
    x = float(x)
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    if x == 0.0:
        return "-0" if math.copysign(1.0, x) < 0 else "0"
    if x.is_integer():
        return str(int(x))
    text = repr(x)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def _id_string(n: int) -> str:
    """Encode an id as letters, least significant digit first."""
    base = len(_ID_ALPHABET)
    digits = []
    while True:
        n, digit = divmod(n, base)
        digits.append(_ID_ALPHABET[digit])
        if n == 0:
            return "".join(digits)


def _url(ident: int) -> str:
    return f"url(#{_id_string(ident)})"


def _fmt_color(color: Color) -> str:
    return f"#{color.as_rgba_u32() >> 8:06x}"


def _fmt_opacity(color: Color) -> str:
    return _fmt(color.as_rgba()[3])


def _xf_val(xf: Affine) -> str:
    return "matrix({})".format(" ".join(_fmt(c) for c in xf.as_coeffs()))


def _style_name(style: FontStyle) -> str:
    return "italic" if style is FontStyle.ITALIC else "normal"


@dataclass(frozen=True)
class LineJoin:
    """How the corners of a stroked path are joined."""

    kind: str = "miter"
    limit: float = 10.0

    DEFAULT_MITER_LIMIT: ClassVar[float] = 10.0
    MITER: ClassVar[LineJoin]
    ROUND: ClassVar[LineJoin]
    BEVEL: ClassVar[LineJoin]

    def __post_init__(self) -> None:
        if self.kind not in _JOIN_KINDS:
            raise ValueError(f"unknown line join {self.kind!r}")

    @classmethod
    def miter(cls, limit: float = 10.0) -> LineJoin:
        """A miter join with the given limit."""
        return cls("miter", float(limit))


LineJoin.MITER = LineJoin()
LineJoin.ROUND = LineJoin("round")
LineJoin.BEVEL = LineJoin("bevel")


class LineCap(enum.Enum):
    """How the ends of a stroked path are drawn."""

    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


@dataclass(frozen=True)
class StrokeStyle:
    """Join, cap and dash settings for strokes."""

    line_join: LineJoin = field(default_factory=LineJoin)
    line_cap: LineCap = LineCap.BUTT
    dash_pattern: Tuple[float, ...] = ()
    dash_offset: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "dash_pattern", tuple(float(d) for d in self.dash_pattern))


class InterpolationMode(enum.Enum):
    """How an image is sampled when scaled."""

    NEAREST_NEIGHBOR = "nearest_neighbor"
    BILINEAR = "bilinear"


@dataclass(frozen=True)
class Brush:
    """Either a solid color or a reference to a gradient defined in the document."""

    solid: Optional[Color] = None
    ref: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.solid is None) == (self.ref is None):
            raise ValueError("a brush is either a solid color or a gradient reference")

    def paint(self) -> str:
        """The value for a ``fill`` or ``stroke`` attribute."""
        if self.solid is not None:
            return _fmt_color(self.solid)
        return _url(self.ref)

    def opacity(self) -> Optional[str]:
        """The opacity attribute value, or None for gradient references."""
        if self.solid is not None:
            return _fmt_opacity(self.solid)
        return None


@dataclass(frozen=True)
class SvgImage:
    """A bitmap image ready to embed in the SVG."""

    image: PILImage.Image

    def size(self) -> Size:
        """The size of the image in pixels."""
        width, height = self.image.size
        return Size(float(width), float(height))


@dataclass(frozen=True)
class _State:
    xf: Affine = Affine.IDENTITY
    clip: Optional[int] = None


BrushLike = Union[
    Brush, Color, FixedLinearGradient, FixedRadialGradient, LinearGradient, RadialGradient
]


class RenderContext:
    """Records drawing operations into an SVG document of the given size."""

    def __init__(self, size: Size, text: Optional[Text] = None) -> None:
        self._size = size
        self._stack: list[_State] = []
        self._state = _State()
        self._doc = ET.Element("svg", {"xmlns": _SVG_NS})
        self._next_id = 0
        self._text = text if text is not None else Text()

    def __str__(self) -> str:
        return self.display()

    def size(self) -> Size:
        """The size used for the view box."""
        return self._size

    def write(self, writer: Any) -> None:
        """Write the document so far to a text or binary stream."""
        data = self.display()
        if isinstance(writer, io.TextIOBase):
            writer.write(data)
        else:
            writer.write(data.encode("utf-8"))

    def display(self) -> str:
        """The document so far as SVG markup."""
        return ET.tostring(self._doc, encoding="unicode")

    def _new_id(self) -> int:
        ident = self._next_id
        self._next_id += 1
        return ident

    def status(self) -> None:
        """Report a pending error; this backend never has one."""
        return None

    def clear(self, rect: Optional[Rect], color: Color) -> None:
        """Paint ``rect`` (or the whole canvas when None) with ``color``."""
        if rect is not None:
            attrs = {
                "width": _fmt(rect.width()),
                "height": _fmt(rect.height()),
                "x": _fmt(rect.x0),
                "y": _fmt(rect.y0),
            }
        else:
            attrs = {"width": "100%", "height": "100%"}
        attrs["fill"] = _fmt_color(color)
        attrs["fill-opacity"] = _fmt_opacity(color)
        if self._state.clip is not None:
            attrs["clip-path"] = _url(self._state.clip)
        ET.SubElement(self._doc, "rect", attrs)

    def solid_brush(self, color: Color) -> Brush:
        """A brush painting a single color."""
        return Brush(solid=color)

    def gradient(self, gradient: Union[FixedLinearGradient, FixedRadialGradient]) -> Brush:
        """Define a gradient in the document and return a brush referring to it."""
        ident = self._new_id()
        if isinstance(gradient, FixedLinearGradient):
            node = ET.SubElement(
                self._doc,
                "linearGradient",
                {
                    "gradientUnits": "userSpaceOnUse",
                    "id": _id_string(ident),
                    "x1": _fmt(gradient.start.x),
                    "y1": _fmt(gradient.start.y),
                    "x2": _fmt(gradient.end.x),
                    "y2": _fmt(gradient.end.y),
                },
            )
        elif isinstance(gradient, FixedRadialGradient):
            center, offset = gradient.center, gradient.origin_offset
            node = ET.SubElement(
                self._doc,
                "radialGradient",
                {
                    "gradientUnits": "userSpaceOnUse",
                    "id": _id_string(ident),
                    "cx": _fmt(center.x),
                    "cy": _fmt(center.y),
                    "fx": _fmt(center.x + offset.x),
                    "fy": _fmt(center.y + offset.y),
                    "r": _fmt(gradient.radius),
                },
            )
        else:
            raise TypeError(f"not a fixed gradient: {gradient!r}")
        for stop in gradient.stops:
            ET.SubElement(
                node,
                "stop",
                {
                    "offset": _fmt(stop.pos),
                    "stop-color": _fmt_color(stop.color),
                    "stop-opacity": _fmt_opacity(stop.color),
                },
            )
        return Brush(ref=ident)

    def _make_brush(self, brush: BrushLike, bbox: Callable[[], Rect]) -> Brush:
        if isinstance(brush, Brush):
            return brush
        if isinstance(brush, Color):
            return self.solid_brush(brush)
        if isinstance(brush, (FixedLinearGradient, FixedRadialGradient)):
            return self.gradient(brush)
        if isinstance(brush, (LinearGradient, RadialGradient)):
            return self.gradient(brush.resolve(bbox()))
        raise TypeError(f"cannot paint with {brush!r}")

    def _add_shape(
        self,
        parent: ET.Element,
        shape: Any,
        fill: Optional[Tuple[Brush, Optional[str]]] = None,
        stroke: Optional[Tuple[Brush, float, StrokeStyle]] = None,
    ) -> None:
        if isinstance(shape, Circle):
            attrs = {
                "cx": _fmt(shape.center.x),
                "cy": _fmt(shape.center.y),
                "r": _fmt(shape.radius),
            }
            tag = "circle"
        elif isinstance(shape, RoundedRect):
            origin = shape.origin()
            attrs = {
                "x": _fmt(origin.x),
                "y": _fmt(origin.y),
                "width": _fmt(shape.width()),
                "height": _fmt(shape.height()),
                "rx": _fmt(shape.radius),
                "ry": _fmt(shape.radius),
            }
            tag = "rect"
        elif isinstance(shape, Rect):
            origin = shape.origin()
            attrs = {
                "x": _fmt(origin.x),
                "y": _fmt(origin.y),
                "width": _fmt(shape.width()),
                "height": _fmt(shape.height()),
            }
            tag = "rect"
        else:
            attrs = {"d": shape.to_path().to_svg()}
            tag = "path"
        attrs.update(self._style_attrs(fill, stroke))
        ET.SubElement(parent, tag, attrs)

    def _style_attrs(
        self,
        fill: Optional[Tuple[Brush, Optional[str]]],
        stroke: Optional[Tuple[Brush, float, StrokeStyle]],
    ) -> dict[str, str]:
        attrs = {"transform": _xf_val(self._state.xf)}
        if self._state.clip is not None:
            attrs["clip-path"] = _url(self._state.clip)
        if fill is not None:
            brush, rule = fill
            attrs["fill"] = brush.paint()
            opacity = brush.opacity()
            if opacity is not None:
                attrs["fill-opacity"] = opacity
            if rule is not None:
                attrs["fill-rule"] = rule
        else:
            attrs["fill"] = "none"
        if stroke is not None:
            brush, width, style = stroke
            attrs["stroke"] = brush.paint()
            opacity = brush.opacity()
            if opacity is not None:
                attrs["stroke-opacity"] = opacity
            if width != 1.0:
                attrs["stroke-width"] = _fmt(width)
            join = style.line_join
            if join.kind == "miter":
                if join.limit != LineJoin.DEFAULT_MITER_LIMIT:
                    attrs["stroke-miterlimit"] = _fmt(join.limit)
            else:
                attrs["stroke-linejoin"] = join.kind
            if style.line_cap is not LineCap.BUTT:
                attrs["stroke-linecap"] = style.line_cap.value
            if style.dash_pattern:
                attrs["stroke-dasharray"] = " ".join(_fmt(d) for d in style.dash_pattern)
            if style.dash_offset != 0.0:
                attrs["stroke-dashoffset"] = _fmt(style.dash_offset)
        return attrs

    def fill(self, shape: Any, brush: BrushLike) -> None:
        """Fill ``shape`` using the non-zero winding rule."""
        made = self._make_brush(brush, shape.bounding_box)
        self._add_shape(self._doc, shape, fill=(made, None))

    def fill_even_odd(self, shape: Any, brush: BrushLike) -> None:
        """Fill ``shape`` using the even-odd rule."""
        made = self._make_brush(brush, shape.bounding_box)
        self._add_shape(self._doc, shape, fill=(made, "evenodd"))

    def clip(self, shape: Any) -> None:
        """Restrict subsequent drawing to ``shape``."""
        ident = self._new_id()
        clip_node = ET.SubElement(self._doc, "clipPath", {"id": _id_string(ident)})
        self._add_shape(clip_node, shape)
        self._state = replace(self._state, clip=ident)

    def stroke(self, shape: Any, brush: BrushLike, width: float) -> None:
        """Stroke the outline of ``shape`` with the default style."""
        self.stroke_styled(shape, brush, width, StrokeStyle())

    def stroke_styled(
        self, shape: Any, brush: BrushLike, width: float, style: StrokeStyle
    ) -> None:
        """Stroke the outline of ``shape`` with ``style``."""
        made = self._make_brush(brush, shape.bounding_box)
        self._add_shape(self._doc, shape, stroke=(made, width, style))

    def text(self) -> Text:
        """The text factory used by this context."""
        return self._text

    def draw_text(self, layout: TextLayout, pos: Union[Point, Tuple[float, float]]) -> None:
        """Draw ``layout`` with its top-left corner at ``pos``."""
        px, py = pos
        r, g, b, a = layout.text_color.as_rgba8()
        color = f"rgba({r}, {g}, {b}, {_fmt(a * (100.0 / 255.0))})"

        x = float(px)
        anchor = ""
        width = layout.max_width
        if math.isfinite(width) and width > 0.0:
            if layout.alignment is TextAlignment.END:
                x += width
                anchor = "text-anchor:end"
            elif layout.alignment is TextAlignment.CENTER:
                x += width * 0.5
                anchor = "text-anchor:middle"

        self._text.seen_fonts.add(layout.font_face)

        decoration = {
            (False, False): "none",
            (False, True): "line-through",
            (True, False): "underline",
            (True, True): "underline line-through",
        }[(bool(layout.underline), bool(layout.strikethrough))]
        face = layout.font_face
        style = (
            f"font-size:{_fmt(layout.font_size)}pt;"
            f'font-family:"{face.family.name()}";'
            f"font-weight:{face.weight.to_raw()};"
            f"font-style:{_style_name(face.style)};"
            f"text-decoration:{decoration};"
            f"fill:{color};"
            f"{anchor}"
        )
        attrs = {
            "x": _fmt(x),
            "y": _fmt(py + layout.size().height),
            "style": style,
        }
        affine = self.current_transform()
        if affine != Affine.IDENTITY:
            attrs["transform"] = _xf_val(affine)
        if self._state.clip is not None:
            attrs["clip-path"] = _url(self._state.clip)
        node = ET.SubElement(self._doc, "text", attrs)
        node.text = layout.text()

    def save(self) -> None:
        """Push the current transform and clip."""
        self._stack.append(self._state)

    def restore(self) -> None:
        """Pop the transform and clip saved by the matching :meth:`save`."""
        if not self._stack:
            raise StackUnbalanceError()
        self._state = self._stack.pop()

    def finish(self) -> None:
        """Set the view box and embed the fonts used by drawn text."""
        w, h = self._size.width, self._size.height
        self._doc.set("viewBox", f"0 0 {_fmt(w)} {_fmt(h)}")
        self._doc.set("style", f"width:{_fmt(w)}px;height:{_fmt(h)}px;")

        seen = self._text.seen_fonts
        if seen:
            rules = []
            for face in sorted(seen, key=_face_key):
                name = face.family.name()
                if '"' in name:
                    raise ValueError('font family name contains `"`')
                data = base64.b64encode(self._text.font_data(face)).decode("ascii")
                rules.append(
                    "@font-face {\n"
                    f'font-family: "{name}";\n'
                    f"font-weight: {face.weight.to_raw()};\n"
                    f"font-style: {_style_name(face.style)};\n"
                    "src: url(\"data:application/x-font-opentype;"
                    f'charset=utf-8;base64,{data}");\n'
                    "}\n"
                )
            ET.SubElement(self._doc, "style").text = "".join(rules)
        seen.clear()

    def transform(self, transform: Affine) -> None:
        """Apply ``transform`` after the current transform."""
        self._state = replace(self._state, xf=self._state.xf * transform)

    def current_transform(self) -> Affine:
        """The current transform."""
        return self._state.xf

    def make_image(
        self, width: int, height: int, buf: bytes, format: ImageFormat
    ) -> SvgImage:
        """Create an image from raw pixel bytes."""
        if not isinstance(format, ImageFormat):
            raise UnimplementedError()
        needed = width * height * format.bytes_per_pixel()
        if width < 0 or height < 0 or len(buf) < needed:
            raise InvalidInputError()
        data = bytes(buf[:needed])
        if format is ImageFormat.GRAYSCALE:
            mode = "L"
        elif format is ImageFormat.RGB:
            mode = "RGB"
        else:
            mode = "RGBA"
            if format is ImageFormat.RGBA_PREMUL:
                pixels = bytearray(data)
                for start in range(0, len(pixels), 4):
                    a = pixels[start + 3]
                    for channel in range(start, start + 3):
                        pixels[channel] = unpremul(pixels[channel], a)
                data = bytes(pixels)
        return SvgImage(PILImage.frombytes(mode, (width, height), data))

    def draw_image(
        self, image: SvgImage, dst_rect: Rect, interp: InterpolationMode
    ) -> None:
        """Draw the whole image into ``dst_rect``."""
        self._draw_image(image, None, dst_rect, interp)

    def draw_image_area(
        self,
        image: SvgImage,
        src_rect: Rect,
        dst_rect: Rect,
        interp: InterpolationMode,
    ) -> None:
        """Draw an image into ``dst_rect``; the source area is not yet honoured."""
        self._draw_image(image, src_rect, dst_rect, interp)

    def _draw_image(
        self,
        image: SvgImage,
        src_rect: Optional[Rect],
        dst_rect: Rect,
        interp: InterpolationMode,
    ) -> None:
        out = io.BytesIO()
        image.image.save(out, format="PNG")
        encoded = base64.b64encode(out.getvalue()).decode("ascii")
        ET.SubElement(
            self._doc,
            "image",
            {
                "x": _fmt(dst_rect.x0),
                "y": _fmt(dst_rect.y0),
                "width": _fmt(dst_rect.x1 - dst_rect.x0),
                "height": _fmt(dst_rect.y1 - dst_rect.y0),
                "href": f"data:image/png;base64,{encoded}",
            },
        )

    def capture_image_area(self, src_rect: Rect) -> SvgImage:
        """Not available for SVG output."""
        raise UnimplementedError()

    def blurred_rect(self, rect: Rect, blur_radius: float, brush: BrushLike) -> None:
        """Fill ``rect``; the blur is not applied."""
        self.fill(rect, brush)


def _face_key(face: FontFace) -> Tuple[str, int, str]:
    return (face.family.name(), face.weight.to_raw(), face.style.value)


_ = Sequence  # typing alias kept for annotations of callers