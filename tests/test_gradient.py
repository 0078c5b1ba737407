import pytest

from vectorpaint.color import Color
from vectorpaint.geometry import Point, Rect, Vec2
from vectorpaint.gradient import (
    FixedLinearGradient,
    FixedRadialGradient,
    GradientStop,
    LinearGradient,
    RadialGradient,
    ScaleMode,
    UnitPoint,
    gradient_stops,
)


RECT = Rect(10.0, 20.0, 110.0, 70.0)


def test_two_colors_span_unit_interval():
    stops = gradient_stops([Color.WHITE, Color.BLACK])
    assert [s.pos for s in stops] == [0.0, 1.0]
    assert [s.color for s in stops] == [Color.WHITE, Color.BLACK]


def test_many_colors_are_evenly_spaced():
    colors = [Color.RED, Color.GREEN, Color.BLUE, Color.AQUA, Color.NAVY]
    stops = gradient_stops(colors)
    positions = [s.pos for s in stops]
    assert positions[0] == 0.0
    assert positions[-1] == 1.0
    gaps = [b - a for a, b in zip(positions, positions[1:])]
    assert all(abs(g - gaps[0]) < 1e-12 for g in gaps)
    assert [s.color for s in stops] == colors


def test_single_color_sits_at_zero():
    stops = gradient_stops((Color.RED,))
    assert stops == (GradientStop(0.0, Color.RED),)


def test_empty_stops():
    assert gradient_stops([]) == ()


def test_explicit_stops_pass_through():
    explicit = [GradientStop(0.2, Color.RED), GradientStop(0.9, Color.BLUE)]
    assert gradient_stops(explicit) == tuple(explicit)


def test_mixed_stops_are_rejected():
    with pytest.raises(TypeError):
        gradient_stops([Color.RED, GradientStop(0.5, Color.BLUE)])


def test_gradient_stop_equality_and_hash():
    a = GradientStop(0.5, Color.RED)
    b = GradientStop(0.5, Color.RED)
    assert a == b
    assert hash(a) == hash(b)
    assert a != GradientStop(0.5, Color.BLUE)


def test_unit_point_corners_resolve_to_rect_corners():
    assert UnitPoint.TOP_LEFT.resolve(RECT) == Point(RECT.x0, RECT.y0)
    assert UnitPoint.BOTTOM_RIGHT.resolve(RECT) == Point(RECT.x1, RECT.y1)
    assert UnitPoint.TOP_RIGHT.resolve(RECT) == Point(RECT.x1, RECT.y0)
    assert UnitPoint.BOTTOM_LEFT.resolve(RECT) == Point(RECT.x0, RECT.y1)
    assert UnitPoint.CENTER.resolve(RECT) == RECT.center()


def test_unit_point_edges_are_midpoints():
    top = UnitPoint.TOP.resolve(RECT)
    assert top.y == RECT.y0
    assert top.x == RECT.center().x
    left = UnitPoint.LEFT.resolve(RECT)
    assert left.x == RECT.x0
    assert left.y == RECT.center().y


def test_linear_gradient_resolve():
    grad = LinearGradient(UnitPoint.TOP, UnitPoint.BOTTOM, (Color.WHITE, Color.BLACK))
    fixed = grad.resolve(RECT)
    assert isinstance(fixed, FixedLinearGradient)
    assert fixed.start == UnitPoint.TOP.resolve(RECT)
    assert fixed.end == UnitPoint.BOTTOM.resolve(RECT)
    assert fixed.stops == grad.stops
    assert len(fixed.stops) == 2


def test_radial_defaults():
    grad = RadialGradient(0.5, (Color.WHITE, Color.BLACK))
    assert grad.center == UnitPoint.CENTER
    assert grad.origin == UnitPoint.CENTER
    assert grad.scale_mode is ScaleMode.FILL


def test_radial_fill_uses_longer_side():
    grad = RadialGradient(0.5, (Color.WHITE, Color.BLACK))
    fixed = grad.resolve(RECT)
    assert isinstance(fixed, FixedRadialGradient)
    assert fixed.radius == 0.5 * max(RECT.width(), RECT.height())
    assert fixed.center == RECT.center()
    assert fixed.origin_offset == Vec2(0.0, 0.0)


def test_radial_fit_uses_shorter_side():
    grad = RadialGradient(1.0, (Color.WHITE, Color.BLACK)).with_scale_mode(ScaleMode.FIT)
    fixed = grad.resolve(RECT)
    assert fixed.radius == min(RECT.width(), RECT.height())
    assert fixed.center == RECT.center()


def test_radial_origin_offset_follows_origin():
    grad = RadialGradient(0.5, (Color.WHITE, Color.BLACK)).with_origin(UnitPoint.TOP_LEFT)
    fixed = grad.resolve(RECT)
    side = max(RECT.width(), RECT.height())
    assert fixed.origin_offset == Vec2(-side / 2.0, -side / 2.0)
    assert fixed.center == RECT.center()


def test_with_center_leaves_origin_and_original_untouched():
    grad = RadialGradient(0.5, (Color.WHITE, Color.BLACK))
    moved = grad.with_center(UnitPoint.TOP_LEFT)
    assert moved.center == UnitPoint.TOP_LEFT
    assert moved.origin == UnitPoint.CENTER
    assert grad.center == UnitPoint.CENTER
    assert moved.stops == grad.stops


def test_fixed_gradients_normalize_color_stops():
    fixed = FixedLinearGradient(Point(0.0, 0.0), Point(1.0, 1.0), [Color.RED, Color.BLUE])
    assert fixed.stops == gradient_stops([Color.RED, Color.BLUE])
    radial = FixedRadialGradient(Point(0.0, 0.0), Vec2(0.0, 0.0), 3.0, [Color.RED])
    assert radial.stops == (GradientStop(0.0, Color.RED),)