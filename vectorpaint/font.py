"""Font families, weights and styles."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar

__all__ = ["FontFamily", "FontWeight", "FontStyle"]


class _FamilyKind(enum.Enum):
    SERIF = "serif"
    SANS_SERIF = "sans-serif"
    MONOSPACE = "monospace"
    SYSTEM_UI = "system-ui"
    NAMED = "named"


@dataclass(frozen=True)
class FontFamily:
    """A generic family (serif, sans-serif, ...) or an explicitly named family."""

    _kind: _FamilyKind
    _name: str

    SANS_SERIF: ClassVar[FontFamily]
    SERIF: ClassVar[FontFamily]
    SYSTEM_UI: ClassVar[FontFamily]
    MONOSPACE: ClassVar[FontFamily]

    def __repr__(self) -> str:
        if self.is_generic():
            return f"FontFamily.{self._kind.name}"
        return f"FontFamily.new_unchecked({self._name!r})"

    @classmethod
    def new_unchecked(cls, name: str) -> FontFamily:
        """Create a named family without checking that it exists."""
        return cls(_FamilyKind.NAMED, str(name))

    def name(self) -> str:
        """The name of the font family."""
        return self._name

    def is_generic(self) -> bool:
        """True if this is a generic font family."""
        return self._kind is not _FamilyKind.NAMED


FontFamily.SANS_SERIF = FontFamily(_FamilyKind.SANS_SERIF, "sans-serif")
FontFamily.SERIF = FontFamily(_FamilyKind.SERIF, "serif")
FontFamily.SYSTEM_UI = FontFamily(_FamilyKind.SYSTEM_UI, "system-ui")
FontFamily.MONOSPACE = FontFamily(_FamilyKind.MONOSPACE, "monospace")


@dataclass(frozen=True, order=True)
class FontWeight:
    """A font weight in the range 1..=1000, as in CSS ``font-weight``."""

    value: int

    THIN: ClassVar[FontWeight]
    HAIRLINE: ClassVar[FontWeight]
    EXTRA_LIGHT: ClassVar[FontWeight]
    LIGHT: ClassVar[FontWeight]
    REGULAR: ClassVar[FontWeight]
    NORMAL: ClassVar[FontWeight]
    MEDIUM: ClassVar[FontWeight]
    SEMI_BOLD: ClassVar[FontWeight]
    BOLD: ClassVar[FontWeight]
    EXTRA_BOLD: ClassVar[FontWeight]
    BLACK: ClassVar[FontWeight]
    HEAVY: ClassVar[FontWeight]
    EXTRA_BLACK: ClassVar[FontWeight]

    def __post_init__(self) -> None:
        if not 1 <= self.value <= 1000:
            raise ValueError(f"font weight must be in 1..=1000, got {self.value}")

    @classmethod
    def new(cls, raw: int) -> FontWeight:
        """Create a weight, clamping ``raw`` to 1..=1000."""
        return cls(min(max(int(raw), 1), 1000))

    def to_raw(self) -> int:
        """The raw weight value."""
        return self.value


FontWeight.THIN = FontWeight(100)
FontWeight.HAIRLINE = FontWeight.THIN
FontWeight.EXTRA_LIGHT = FontWeight(200)
FontWeight.LIGHT = FontWeight(300)
FontWeight.REGULAR = FontWeight(400)
FontWeight.NORMAL = FontWeight.REGULAR
FontWeight.MEDIUM = FontWeight(500)
FontWeight.SEMI_BOLD = FontWeight(600)
FontWeight.BOLD = FontWeight(700)
FontWeight.EXTRA_BOLD = FontWeight(800)
FontWeight.BLACK = FontWeight(900)
FontWeight.HEAVY = FontWeight.BLACK
FontWeight.EXTRA_BLACK = FontWeight(950)


class FontStyle(enum.Enum):
    """Regular or italic style."""

    REGULAR = "regular"
    ITALIC = "italic"