"""A simple 32-bit RGBA color type."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar

__all__ = ["Color", "ColorParseError", "WrongSizeError", "NotHexError"]


class ColorParseError(ValueError):
    """Raised when a hex color string cannot be parsed."""


class WrongSizeError(ColorParseError):
    """The input string has an incorrect length."""

    def __init__(self, size: int) -> None:
        self.size = size
        super().__init__(f"Input string has invalid length {size}")


class NotHexError(ColorParseError):
    """A byte of the input is not one of ``0-9``, ``a-f`` or ``A-F``."""

    def __init__(self, idx: int, byte: int) -> None:
        self.idx = idx
        self.byte = byte
        super().__init__(f"byte {byte:X} at index {idx} is not valid hex digit")


def _check_byte(value: int, name: str) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must be in 0..=255, got {value}")
    return value


def _unit_to_byte(x: float) -> int:
    """Clamp ``x`` to 0.0..=1.0 and scale it to a byte, rounding half up."""
    if math.isnan(x):
        x = 0.0
    x = min(max(x, 0.0), 1.0)
    return int(math.floor(x * 255.0 + 0.5))


def _hex_digit(byte: int) -> int | None:
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    if 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    if 0x61 <= byte <= 0x66:
        return byte - 0x61 + 10
    return None


def _expand_channels(raw: bytes) -> bytes:
    """Expand a hex body into eight nibble characters (rrggbbaa)."""
    if len(raw) == 3:
        r, g, b = raw
        return bytes([r, r, g, g, b, b]) + b"ff"
    if len(raw) == 4:
        r, g, b, a = raw
        return bytes([r, r, g, g, b, b, a, a])
    if len(raw) == 6:
        return raw + b"ff"
    return raw


@dataclass(frozen=True)
class Color:
    """A color stored as a 32-bit RGBA value, alpha in the least significant byte."""

    rgba32: int

    AQUA: ClassVar[Color]
    BLACK: ClassVar[Color]
    BLUE: ClassVar[Color]
    FUCHSIA: ClassVar[Color]
    GRAY: ClassVar[Color]
    GREEN: ClassVar[Color]
    LIME: ClassVar[Color]
    MAROON: ClassVar[Color]
    NAVY: ClassVar[Color]
    OLIVE: ClassVar[Color]
    PURPLE: ClassVar[Color]
    RED: ClassVar[Color]
    SILVER: ClassVar[Color]
    TEAL: ClassVar[Color]
    TRANSPARENT: ClassVar[Color]
    WHITE: ClassVar[Color]
    YELLOW: ClassVar[Color]

    def __post_init__(self) -> None:
        if not 0 <= self.rgba32 <= 0xFFFFFFFF:
            raise ValueError(f"rgba value out of 32-bit range: {self.rgba32}")

    def __repr__(self) -> str:
        return f"#{self.rgba32:08x}"

    @classmethod
    def rgb8(cls, r: int, g: int, b: int) -> Color:
        """Create an opaque color from 8-bit channels."""
        return cls.rgba8(r, g, b, 0xFF)

    @classmethod
    def rgba8(cls, r: int, g: int, b: int, a: int) -> Color:
        """Create a color from 8-bit channels including alpha."""
        r = _check_byte(r, "r")
        g = _check_byte(g, "g")
        b = _check_byte(b, "b")
        a = _check_byte(a, "a")
        return cls((r << 24) | (g << 16) | (b << 8) | a)

    @classmethod
    def from_rgba32_u32(cls, rgba: int) -> Color:
        """Create a color from a 32-bit RGBA value."""
        return cls(rgba)

    @classmethod
    def from_hex_str(cls, hex: str) -> Color:
        """Parse ``rgb``, ``rgba``, ``rrggbb`` or ``rrggbbaa``, with or without ``#``."""
        raw = hex.encode("utf-8")
        if raw.startswith(b"#") and len(raw) - 1 in (3, 4, 6, 8):
            body = raw[1:]
        elif len(raw) in (3, 4, 6, 8):
            body = raw
        else:
            raise WrongSizeError(len(raw))

        nibbles = []
        for idx, byte in enumerate(_expand_channels(body)):
            digit = _hex_digit(byte)
            if digit is None:
                raise NotHexError(idx, byte)
            nibbles.append(digit)

        r, g, b, a = (
            (hi << 4) | lo for hi, lo in zip(nibbles[0::2], nibbles[1::2])
        )
        return cls.rgba8(r, g, b, a)

    @classmethod
    def grey8(cls, grey: int) -> Color:
        """Create an opaque grey from an 8-bit value."""
        return cls.rgb8(grey, grey, grey)

    @classmethod
    def grey(cls, grey: float) -> Color:
        """Create an opaque grey from a value in 0.0..=1.0."""
        return cls.rgb(grey, grey, grey)

    @classmethod
    def rgba(cls, r: float, g: float, b: float, a: float) -> Color:
        """Create a color from four floats, each clamped to 0.0..=1.0."""
        return cls.rgba8(
            _unit_to_byte(r), _unit_to_byte(g), _unit_to_byte(b), _unit_to_byte(a)
        )

    @classmethod
    def rgb(cls, r: float, g: float, b: float) -> Color:
        """Create an opaque color from three floats, each clamped to 0.0..=1.0."""
        return cls.rgb8(_unit_to_byte(r), _unit_to_byte(g), _unit_to_byte(b))

    @classmethod
    def hlc(cls, h: float, l: float, c: float) -> Color:  # noqa: E741
        """Create a color from CIE L*a*b* polar (HCL) coordinates, clipped to sRGB.

        ``h`` is the hue angle in degrees, ``l`` the luminance (0 to 100)
        and ``c`` the chroma (nominally 0 to 127).
        """

        def f_inv(t: float) -> float:
            d = 6.0 / 29.0
            if t > d:
                return t**3
            return 3.0 * d * d * (t - 4.0 / 29.0)

        def gamma(u: float) -> float:
            if u <= 0.0031308:
                return 12.92 * u
            return 1.055 * u ** (1.0 / 2.4) - 0.055

        th = h * (math.pi / 180.0)
        a = c * math.cos(th)
        b = c * math.sin(th)
        ll = (l + 16.0) * (1.0 / 116.0)
        x = f_inv(ll + a * (1.0 / 500.0))
        y = f_inv(ll)
        z = f_inv(ll - b * (1.0 / 200.0))
        # D50 white point, D50->D65 adaptation, then XYZ -> linear sRGB.
        r_lin = 3.02172918 * x - 1.61692294 * y - 0.40480625 * z
        g_lin = -0.94339358 * x + 1.91584267 * y + 0.02755094 * z
        b_lin = 0.06945666 * x - 0.22903204 * y + 1.15957526 * z
        return cls.rgb(gamma(r_lin), gamma(g_lin), gamma(b_lin))

    @classmethod
    def hlca(cls, h: float, l: float, c: float, a: float) -> Color:  # noqa: E741
        """Create a color from polar L*a*b* coordinates and an alpha in 0.0..=1.0."""
        return cls.hlc(h, c, l).with_alpha(a)

    def with_alpha(self, a: float) -> Color:
        """Return this color with its alpha replaced by ``a`` (0.0..=1.0)."""
        return Color((self.rgba32 & ~0xFF & 0xFFFFFFFF) | _unit_to_byte(a))

    def as_rgba_u32(self) -> int:
        """The color as a 32-bit RGBA integer."""
        return self.rgba32

    def as_rgba8(self) -> tuple[int, int, int, int]:
        """The color as four 8-bit channels."""
        v = self.rgba32
        return ((v >> 24) & 0xFF, (v >> 16) & 0xFF, (v >> 8) & 0xFF, v & 0xFF)

    def as_rgba(self) -> tuple[float, float, float, float]:
        """The color as four floats in 0.0..=1.0."""
        r, g, b, a = self.as_rgba8()
        return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


Color.AQUA = Color.rgb8(0, 255, 255)
Color.BLACK = Color.rgb8(0, 0, 0)
Color.BLUE = Color.rgb8(0, 0, 255)
Color.FUCHSIA = Color.rgb8(255, 0, 255)
Color.GRAY = Color.grey8(128)
Color.GREEN = Color.rgb8(0, 128, 0)
Color.LIME = Color.rgb8(0, 255, 0)
Color.MAROON = Color.rgb8(128, 0, 0)
Color.NAVY = Color.rgb8(0, 0, 128)
Color.OLIVE = Color.rgb8(128, 128, 0)
Color.PURPLE = Color.rgb8(128, 0, 128)
Color.RED = Color.rgb8(255, 0, 0)
Color.SILVER = Color.grey8(192)
Color.TEAL = Color.rgb8(0, 128, 128)
Color.TRANSPARENT = Color.rgba8(0, 0, 0, 0)
Color.WHITE = Color.grey8(255)
Color.YELLOW = Color.rgb8(255, 255, 0)