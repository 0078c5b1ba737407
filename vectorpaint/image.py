"""In-memory pixel buffers and the image formats they use."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from vectorpaint.color import Color
from vectorpaint.geometry import Size

__all__ = ["ImageFormat", "ImageBuf", "unpremul"]


class ImageFormat(enum.Enum):
    """The layout of the bytes of one pixel."""

    GRAYSCALE = "grayscale"
    RGB = "rgb"
    RGBA_SEPARATE = "rgba_separate"
    RGBA_PREMUL = "rgba_premul"

    def bytes_per_pixel(self) -> int:
        """The number of bytes each pixel takes in this format."""
        return _BYTES_PER_PIXEL[self]


_BYTES_PER_PIXEL = {
    ImageFormat.GRAYSCALE: 1,
    ImageFormat.RGB: 3,
    ImageFormat.RGBA_SEPARATE: 4,
    ImageFormat.RGBA_PREMUL: 4,
}


def unpremul(x: int, a: int) -> int:
    """Undo alpha premultiplication of one 8-bit channel value."""
    if a == 0:
        return 0
    return min(255, (x * 255 + a // 2) // a)


def _decode_pixel(pixel: tuple[int, ...], fmt: ImageFormat) -> Color:
    if fmt is ImageFormat.GRAYSCALE:
        return Color.grey8(pixel[0])
    if fmt is ImageFormat.RGB:
        r, g, b = pixel
        return Color.rgb8(r, g, b)
    r, g, b, a = pixel
    if fmt is ImageFormat.RGBA_PREMUL:
        return Color.rgba8(unpremul(r, a), unpremul(g, a), unpremul(b, a), a)
    return Color.rgba8(r, g, b, a)


def _chunks(data: Iterable[int], size: int) -> Iterator[tuple[int, ...]]:
    """Split ``data`` into tuples of ``size`` items, dropping any remainder."""
    it = iter(data)
    return zip(*[it] * size)


@dataclass(frozen=True, eq=False)
class ImageBuf:
    """Raw pixel bytes together with their dimensions and format.

    The pixel data must be exactly ``width * height * format.bytes_per_pixel()``
    bytes long. Copies made with :func:`dataclasses.replace` share the data.
    """

    pixels: bytes = field(default=b"", repr=False)
    format: ImageFormat = ImageFormat.RGBA_SEPARATE
    width: int = 0
    height: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.pixels, bytes):
            object.__setattr__(self, "pixels", bytes(self.pixels))
        if self.width < 0 or self.height < 0:
            raise ValueError("image dimensions must not be negative")
        expected = self.width * self.height * self.format.bytes_per_pixel()
        if len(self.pixels) != expected:
            raise ValueError(
                f"pixel data has length {len(self.pixels)}, expected {expected}"
            )

    def __repr__(self) -> str:
        return (
            f"ImageBuf(size={len(self.pixels)}, width={self.width}, "
            f"height={self.height}, format={self.format.name})"
        )

    @classmethod
    def empty(cls) -> ImageBuf:
        """An image with no pixels."""
        return cls()

    @classmethod
    def from_raw(
        cls, pixels: bytes | bytearray | memoryview, format: ImageFormat, width: int, height: int
    ) -> ImageBuf:
        """Create an image buffer, checking the length of ``pixels``."""
        return cls(pixels=pixels, format=format, width=width, height=height)

    def raw_pixels(self) -> bytes:
        """The raw pixel bytes."""
        return self.pixels

    def size(self) -> Size:
        """The size of the image in pixels."""
        return Size(float(self.width), float(self.height))

    def pixel_colors(self) -> Iterator[Iterator[Color]]:
        """Iterate over rows, each an iterator over the colors of its pixels."""
        bpp = self.format.bytes_per_pixel()
        stride = self.width * bpp
        if stride == 0:
            return iter(())
        fmt = self.format
        return (
            (_decode_pixel(pixel, fmt) for pixel in _chunks(row, bpp))
            for row in _chunks(self.pixels, stride)
        )

    def to_image(self, ctx: Any) -> Any:
        """Convert into an image ready for drawing with ``ctx``."""
        return ctx.make_image(self.width, self.height, self.pixels, self.format)

    def ptr_eq(self, other: ImageBuf) -> bool:
        """True if both buffers share the same pixel data object."""
        return self.pixels is other.pixels