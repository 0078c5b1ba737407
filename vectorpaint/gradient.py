"""Gradient specifications, in unit-square and in image-space coordinates."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import ClassVar, Iterable, Tuple, Union

from vectorpaint.color import Color
from vectorpaint.geometry import Point, Rect, Size, Vec2

__all__ = [
    "GradientStop",
    "gradient_stops",
    "FixedLinearGradient",
    "FixedRadialGradient",
    "FixedGradient",
    "ScaleMode",
    "UnitPoint",
    "LinearGradient",
    "RadialGradient",
]


@dataclass(frozen=True)
class GradientStop:
    """A color at a position along a gradient."""

    pos: float
    color: Color


def gradient_stops(stops: Iterable[Union[GradientStop, Color]]) -> Tuple[GradientStop, ...]:
    """Normalize stops: explicit stops pass through, bare colors are spaced evenly."""
    items = tuple(stops)
    if not items:
        return ()
    if all(isinstance(s, GradientStop) for s in items):
        return items
    if all(isinstance(c, Color) for c in items):
        denom = float(max(len(items) - 1, 1))
        return tuple(GradientStop(i / denom, c) for i, c in enumerate(items))
    raise TypeError("gradient stops must be all GradientStop or all Color")


@dataclass(frozen=True)
class FixedLinearGradient:
    """A linear gradient in image-space coordinates."""

    start: Point
    end: Point
    stops: Tuple[GradientStop, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "stops", gradient_stops(self.stops))


@dataclass(frozen=True)
class FixedRadialGradient:
    """A radial gradient in image-space coordinates."""

    center: Point
    origin_offset: Vec2
    radius: float
    stops: Tuple[GradientStop, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "stops", gradient_stops(self.stops))


FixedGradient = Union[FixedLinearGradient, FixedRadialGradient]


class ScaleMode(enum.Enum):
    """How the unit square maps onto a non-square rectangle."""

    FIT = "fit"
    FILL = "fill"


@dataclass(frozen=True)
class UnitPoint:
    """A point relative to a unit rectangle; (0, 0) is top-left, (1, 1) bottom-right."""

    u: float
    v: float

    TOP_LEFT: ClassVar[UnitPoint]
    TOP: ClassVar[UnitPoint]
    TOP_RIGHT: ClassVar[UnitPoint]
    LEFT: ClassVar[UnitPoint]
    CENTER: ClassVar[UnitPoint]
    RIGHT: ClassVar[UnitPoint]
    BOTTOM_LEFT: ClassVar[UnitPoint]
    BOTTOM: ClassVar[UnitPoint]
    BOTTOM_RIGHT: ClassVar[UnitPoint]

    def resolve(self, rect: Rect) -> Point:
        """The point within ``rect`` that this unit point refers to."""
        return Point(
            rect.x0 + self.u * (rect.x1 - rect.x0),
            rect.y0 + self.v * (rect.y1 - rect.y0),
        )


UnitPoint.TOP_LEFT = UnitPoint(0.0, 0.0)
UnitPoint.TOP = UnitPoint(0.5, 0.0)
UnitPoint.TOP_RIGHT = UnitPoint(1.0, 0.0)
UnitPoint.LEFT = UnitPoint(0.0, 0.5)
UnitPoint.CENTER = UnitPoint(0.5, 0.5)
UnitPoint.RIGHT = UnitPoint(1.0, 0.5)
UnitPoint.BOTTOM_LEFT = UnitPoint(0.0, 1.0)
UnitPoint.BOTTOM = UnitPoint(0.5, 1.0)
UnitPoint.BOTTOM_RIGHT = UnitPoint(1.0, 1.0)


@dataclass(frozen=True)
class LinearGradient:
    """A linear gradient whose endpoints are relative to the shape's bounds."""

    start: UnitPoint
    end: UnitPoint
    stops: Tuple[GradientStop, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "stops", gradient_stops(self.stops))

    def resolve(self, rect: Rect) -> FixedLinearGradient:
        """Map the unit square onto ``rect``."""
        return FixedLinearGradient(
            start=self.start.resolve(rect),
            end=self.end.resolve(rect),
            stops=self.stops,
        )


def _equalize_sides_preserving_center(rect: Rect, new_len: float) -> Rect:
    size = Size(new_len, new_len)
    origin = rect.center() - size.to_vec2() / 2.0
    return Rect.from_origin_size(origin, size)


@dataclass(frozen=True)
class RadialGradient:
    """A radial gradient relative to the shape's bounds.

    Center and origin default to the middle of the unit square and the
    scale mode defaults to ``FILL``.
    """

    radius: float
    stops: Tuple[GradientStop, ...] = field(default=())
    center: UnitPoint = UnitPoint.CENTER
    origin: UnitPoint = UnitPoint.CENTER
    scale_mode: ScaleMode = ScaleMode.FILL

    def __post_init__(self) -> None:
        object.__setattr__(self, "stops", gradient_stops(self.stops))

    def with_center(self, center: UnitPoint) -> RadialGradient:
        """A copy with a different center; the origin is unchanged."""
        return replace(self, center=center)

    def with_origin(self, origin: UnitPoint) -> RadialGradient:
        """A copy with a different origin."""
        return replace(self, origin=origin)

    def with_scale_mode(self, scale_mode: ScaleMode) -> RadialGradient:
        """A copy with a different scale mode."""
        return replace(self, scale_mode=scale_mode)

    def resolve(self, rect: Rect) -> FixedRadialGradient:
        """Map the unit square onto a square centered on ``rect``."""
        if self.scale_mode is ScaleMode.FILL:
            scale_len = max(rect.width(), rect.height())
        else:
            scale_len = min(rect.width(), rect.height())
        square = _equalize_sides_preserving_center(rect, scale_len)
        center = self.center.resolve(square)
        origin = self.origin.resolve(square)
        return FixedRadialGradient(
            center=center,
            origin_offset=origin - center,
            radius=self.radius * scale_len,
            stops=self.stops,
        )