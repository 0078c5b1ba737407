"""2D geometry primitives: vectors, points, sizes, shapes, paths and affine maps."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar, Iterator, Tuple, Union

__all__ = [
    "Vec2",
    "Point",
    "Size",
    "Rect",
    "RoundedRect",
    "Circle",
    "BezPath",
    "Affine",
]

# Control-point distance for approximating a quarter circle with a cubic curve.
_ARC_K = 4.0 * (math.sqrt(2.0) - 1.0) / 3.0


def _format_number(x: float) -> str:
    """Format a float the way a plain decimal display would: no exponent, no '.0'."""
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


@dataclass(frozen=True)
class Vec2:
    """A 2D vector."""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Vec2:
        if not isinstance(k, (int, float)):
            return NotImplemented
        return Vec2(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __truediv__(self, k: float) -> Vec2:
        if not isinstance(k, (int, float)):
            return NotImplemented
        return Vec2(self.x / k, self.y / k)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)


@dataclass(frozen=True)
class Point:
    """A point in 2D space."""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: Vec2) -> Point:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Union[Point, Vec2]) -> Union[Point, Vec2]:
        if isinstance(other, Point):
            return Vec2(self.x - other.x, self.y - other.y)
        if isinstance(other, Vec2):
            return Point(self.x - other.x, self.y - other.y)
        return NotImplemented


@dataclass(frozen=True)
class Size:
    """A width and a height."""

    width: float
    height: float

    ZERO: ClassVar[Size]

    def __iter__(self) -> Iterator[float]:
        yield self.width
        yield self.height

    def to_rect(self) -> Rect:
        """A rectangle at the origin with this size."""
        return Rect(0.0, 0.0, self.width, self.height)

    def to_vec2(self) -> Vec2:
        """This size as a vector."""
        return Vec2(self.width, self.height)


Size.ZERO = Size(0.0, 0.0)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by two corners."""

    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_origin_size(cls, origin: Point, size: Size) -> Rect:
        """A rectangle from its origin and size, with corners ordered."""
        ox, oy = origin
        far_x, far_y = ox + size.width, oy + size.height
        return cls(min(ox, far_x), min(oy, far_y), max(ox, far_x), max(oy, far_y))

    def width(self) -> float:
        """The horizontal extent, ``x1 - x0``."""
        return self.x1 - self.x0

    def height(self) -> float:
        """The vertical extent, ``y1 - y0``."""
        return self.y1 - self.y0

    def origin(self) -> Point:
        """The corner ``(x0, y0)``."""
        return Point(self.x0, self.y0)

    def center(self) -> Point:
        """The center point."""
        return Point(0.5 * (self.x0 + self.x1), 0.5 * (self.y0 + self.y1))

    def bounding_box(self) -> Rect:
        """The rectangle with its corners ordered."""
        return Rect(
            min(self.x0, self.x1),
            min(self.y0, self.y1),
            max(self.x0, self.x1),
            max(self.y0, self.y1),
        )

    def to_path(self) -> BezPath:
        """The outline of this rectangle as a closed path."""
        path = BezPath()
        path.move_to(Point(self.x0, self.y0))
        path.line_to(Point(self.x1, self.y0))
        path.line_to(Point(self.x1, self.y1))
        path.line_to(Point(self.x0, self.y1))
        path.close_path()
        return path


def _quarter_arc(path: BezPath, center: Point, radius: float, u: Vec2, v: Vec2) -> None:
    """Append a cubic approximating the quarter circle from direction ``u`` to ``v``."""
    p1 = center + (u + v * _ARC_K) * radius
    p2 = center + (v + u * _ARC_K) * radius
    p3 = center + v * radius
    path.curve_to(p1, p2, p3)


_RIGHT = Vec2(1.0, 0.0)
_DOWN = Vec2(0.0, 1.0)
_LEFT = Vec2(-1.0, 0.0)
_UP = Vec2(0.0, -1.0)


@dataclass(frozen=True)
class RoundedRect:
    """A rectangle whose corners are rounded with one radius."""

    rect: Rect
    radius: float

    def width(self) -> float:
        """The width of the underlying rectangle."""
        return self.rect.width()

    def height(self) -> float:
        """The height of the underlying rectangle."""
        return self.rect.height()

    def origin(self) -> Point:
        """The origin of the underlying rectangle."""
        return self.rect.origin()

    def bounding_box(self) -> Rect:
        """The bounding box of the shape."""
        return self.rect.bounding_box()

    def to_path(self) -> BezPath:
        """The outline as a closed path, corner radius clamped to fit."""
        r = self.rect.bounding_box()
        radius = max(0.0, min(abs(self.radius), r.width() / 2.0, r.height() / 2.0))
        path = BezPath()
        path.move_to(Point(r.x0 + radius, r.y0))
        path.line_to(Point(r.x1 - radius, r.y0))
        _quarter_arc(path, Point(r.x1 - radius, r.y0 + radius), radius, _UP, _RIGHT)
        path.line_to(Point(r.x1, r.y1 - radius))
        _quarter_arc(path, Point(r.x1 - radius, r.y1 - radius), radius, _RIGHT, _DOWN)
        path.line_to(Point(r.x0 + radius, r.y1))
        _quarter_arc(path, Point(r.x0 + radius, r.y1 - radius), radius, _DOWN, _LEFT)
        path.line_to(Point(r.x0, r.y0 + radius))
        _quarter_arc(path, Point(r.x0 + radius, r.y0 + radius), radius, _LEFT, _UP)
        path.close_path()
        return path


@dataclass(frozen=True)
class Circle:
    """A circle given by its center and radius."""

    center: Point
    radius: float

    def bounding_box(self) -> Rect:
        """The square that encloses the circle."""
        r = abs(self.radius)
        cx, cy = self.center
        return Rect(cx - r, cy - r, cx + r, cy + r)

    def to_path(self) -> BezPath:
        """The circle as four cubic segments."""
        r = abs(self.radius)
        directions = (_RIGHT, _DOWN, _LEFT, _UP)
        path = BezPath()
        path.move_to(self.center + _RIGHT * r)
        for u, v in zip(directions, directions[1:] + directions[:1]):
            _quarter_arc(path, self.center, r, u, v)
        path.close_path()
        return path


_PathElement = Tuple[str, Tuple[Point, ...]]


def _quad_extrema(p0: float, p1: float, p2: float) -> list[float]:
    denom = p0 - 2.0 * p1 + p2
    if denom == 0.0:
        return []
    t = (p0 - p1) / denom
    if 0.0 < t < 1.0:
        mt = 1.0 - t
        return [mt * mt * p0 + 2.0 * mt * t * p1 + t * t * p2]
    return []


def _cubic_extrema(p0: float, p1: float, p2: float, p3: float) -> list[float]:
    a = p3 - 3.0 * p2 + 3.0 * p1 - p0
    b = 2.0 * (p2 - 2.0 * p1 + p0)
    c = p1 - p0
    if abs(a) < 1e-12:
        roots = [-c / b] if b != 0.0 else []
    else:
        disc = b * b - 4.0 * a * c
        if disc < 0.0:
            roots = []
        else:
            sq = math.sqrt(disc)
            roots = [(-b + sq) / (2.0 * a), (-b - sq) / (2.0 * a)]
    values = []
    for t in roots:
        if 0.0 < t < 1.0:
            mt = 1.0 - t
            values.append(
                mt**3 * p0 + 3.0 * mt * mt * t * p1 + 3.0 * mt * t * t * p2 + t**3 * p3
            )
    return values


@dataclass
class BezPath:
    """A path built from move, line, quadratic, cubic and close elements.

    Iterating yields ``(command, points)`` pairs where the command is one of
    ``"M"``, ``"L"``, ``"Q"``, ``"C"`` or ``"Z"``.
    """

    _elements: list[_PathElement] = field(default_factory=list)

    def __iter__(self) -> Iterator[_PathElement]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def move_to(self, p: Point) -> None:
        """Start a new subpath at ``p``."""
        self._elements.append(("M", (Point(*p),)))

    def line_to(self, p: Point) -> None:
        """Add a straight line to ``p``."""
        self._elements.append(("L", (Point(*p),)))

    def quad_to(self, p1: Point, p2: Point) -> None:
        """Add a quadratic curve with control ``p1`` ending at ``p2``."""
        self._elements.append(("Q", (Point(*p1), Point(*p2))))

    def curve_to(self, p1: Point, p2: Point, p3: Point) -> None:
        """Add a cubic curve with controls ``p1``, ``p2`` ending at ``p3``."""
        self._elements.append(("C", (Point(*p1), Point(*p2), Point(*p3))))

    def close_path(self) -> None:
        """Close the current subpath."""
        self._elements.append(("Z", ()))

    def bounding_box(self) -> Rect:
        """The tight bounding box of the path, or a zero rect when empty."""
        xs: list[float] = []
        ys: list[float] = []
        current: Point | None = None
        start: Point | None = None
        for command, points in self._elements:
            if command == "M":
                current = start = points[0]
                xs.append(current.x)
                ys.append(current.y)
            elif command == "Z":
                current = start
            elif command == "L":
                current = points[0]
                xs.append(current.x)
                ys.append(current.y)
            elif command == "Q":
                p0 = current if current is not None else points[0]
                p1, p2 = points
                xs.extend([p0.x, p2.x, *_quad_extrema(p0.x, p1.x, p2.x)])
                ys.extend([p0.y, p2.y, *_quad_extrema(p0.y, p1.y, p2.y)])
                current = p2
            elif command == "C":
                p0 = current if current is not None else points[0]
                p1, p2, p3 = points
                xs.extend([p0.x, p3.x, *_cubic_extrema(p0.x, p1.x, p2.x, p3.x)])
                ys.extend([p0.y, p3.y, *_cubic_extrema(p0.y, p1.y, p2.y, p3.y)])
                current = p3
        if not xs:
            return Rect(0.0, 0.0, 0.0, 0.0)
        return Rect(min(xs), min(ys), max(xs), max(ys))

    def to_path(self) -> BezPath:
        """A copy of this path."""
        return BezPath(list(self._elements))

    def to_svg(self) -> str:
        """The path in SVG path-data syntax."""
        parts = []
        for command, points in self._elements:
            coords = " ".join(
                f"{_format_number(p.x)},{_format_number(p.y)}" for p in points
            )
            parts.append(command + coords)
        return " ".join(parts)


_Coeffs = Tuple[float, float, float, float, float, float]


@dataclass(frozen=True)
class Affine:
    """A 2D affine transform, coefficients ``(a, b, c, d, e, f)``.

    A point maps to ``(a*x + c*y + e, b*x + d*y + f)``.
    """

    coeffs: _Coeffs = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    IDENTITY: ClassVar[Affine]

    def __post_init__(self) -> None:
        values = tuple(float(c) for c in self.coeffs)
        if len(values) != 6:
            raise ValueError(f"an affine transform needs 6 coefficients, got {len(values)}")
        object.__setattr__(self, "coeffs", values)

    def as_coeffs(self) -> _Coeffs:
        """The six coefficients."""
        return self.coeffs

    @classmethod
    def translate(cls, v: Vec2) -> Affine:
        """A translation by the vector ``v``."""
        x, y = v
        return cls((1.0, 0.0, 0.0, 1.0, x, y))

    @classmethod
    def scale(cls, s: float) -> Affine:
        """A uniform scale by ``s``."""
        return cls((s, 0.0, 0.0, s, 0.0, 0.0))

    @classmethod
    def rotate(cls, theta: float) -> Affine:
        """A rotation by ``theta`` radians."""
        s, c = math.sin(theta), math.cos(theta)
        return cls((c, s, -s, c, 0.0, 0.0))

    def __mul__(self, other: Union[Affine, Point]) -> Union[Affine, Point]:
        a0, a1, a2, a3, a4, a5 = self.coeffs
        if isinstance(other, Affine):
            b0, b1, b2, b3, b4, b5 = other.coeffs
            return Affine(
                (
                    a0 * b0 + a2 * b1,
                    a1 * b0 + a3 * b1,
                    a0 * b2 + a2 * b3,
                    a1 * b2 + a3 * b3,
                    a0 * b4 + a2 * b5 + a4,
                    a1 * b4 + a3 * b5 + a5,
                )
            )
        if isinstance(other, Point):
            return Point(a0 * other.x + a2 * other.y + a4, a1 * other.x + a3 * other.y + a5)
        return NotImplemented


Affine.IDENTITY = Affine()