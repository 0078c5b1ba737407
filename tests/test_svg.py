import base64
import io
import xml.etree.ElementTree as ET

import pytest
from PIL import Image as PILImage

from vectorpaint.color import Color
from vectorpaint.errors import (
    FontLoadingFailedError,
    InvalidInputError,
    StackUnbalanceError,
    UnimplementedError,
)
from vectorpaint.font import FontFamily, FontWeight
from vectorpaint.geometry import Affine, BezPath, Circle, Point, Rect, RoundedRect, Size, Vec2
from vectorpaint.gradient import (
    FixedLinearGradient,
    FixedRadialGradient,
    LinearGradient,
    UnitPoint,
)
from vectorpaint.image import ImageFormat, unpremul
from vectorpaint.svg import (
    Brush,
    InterpolationMode,
    LineCap,
    LineJoin,
    RenderContext,
    StrokeStyle,
)
from vectorpaint.text import FontFace, Text, TextAlignment, TextLayout


def _ctx():
    return RenderContext(Size(200.0, 100.0), text=Text(font_dirs=[]))


def _tag(el):
    return el.tag.split("}")[-1]


def _root(ctx):
    return ET.fromstring(ctx.display())


def _children(ctx, name):
    return [e for e in _root(ctx) if _tag(e) == name]


def _coeffs(attr):
    assert attr.startswith("matrix(") and attr.endswith(")")
    return tuple(float(v) for v in attr[len("matrix("):-1].split())


def _layout(**overrides):
    values = dict(
        content="hi there",
        max_width=50.0,
        alignment=TextAlignment.END,
        font_size=12.0,
        font_face=FontFace(),
        text_color=Color.from_hex_str("#336699"),
        underline=True,
        strikethrough=False,
        extent=Size(30.0, 12.0),
    )
    values.update(overrides)
    return TextLayout(**values)


def test_fill_rect_with_solid_brush():
    ctx = _ctx()
    color = Color.from_hex_str("#12ab34")
    ctx.fill(Rect(1.0, 2.0, 11.0, 22.0), ctx.solid_brush(color))
    (rect,) = _children(ctx, "rect")
    assert float(rect.get("x")) == 1.0
    assert float(rect.get("y")) == 2.0
    assert float(rect.get("width")) == 10.0
    assert float(rect.get("height")) == 20.0
    assert rect.get("fill") == "#12ab34"
    assert float(rect.get("fill-opacity")) == color.as_rgba()[3]
    assert _coeffs(rect.get("transform")) == Affine.IDENTITY.as_coeffs()
    assert rect.get("clip-path") is None


def test_translucent_fill_opacity():
    ctx = _ctx()
    color = Color.rgba8(10, 20, 30, 51)
    ctx.fill(Rect(0.0, 0.0, 1.0, 1.0), color)
    (rect,) = _children(ctx, "rect")
    assert float(rect.get("fill-opacity")) == pytest.approx(color.as_rgba()[3])


def test_fill_circle():
    ctx = _ctx()
    ctx.fill(Circle(Point(5.0, 6.0), 3.0), ctx.solid_brush(Color.RED))
    (circle,) = _children(ctx, "circle")
    assert (circle.get("cx"), circle.get("cy"), circle.get("r")) == ("5", "6", "3")


def test_fill_rounded_rect():
    ctx = _ctx()
    ctx.fill(RoundedRect(Rect(0.0, 0.0, 10.0, 8.0), 2.5), Color.BLUE)
    (rect,) = _children(ctx, "rect")
    assert rect.get("rx") == "2.5"
    assert rect.get("ry") == "2.5"
    assert float(rect.get("width")) == 10.0


def test_fill_path_uses_svg_path_data():
    ctx = _ctx()
    path = BezPath()
    path.move_to(Point(0.0, 0.0))
    path.line_to(Point(10.0, 0.0))
    path.quad_to(Point(10.0, 10.0), Point(0.0, 10.0))
    path.close_path()
    ctx.fill_even_odd(path, Color.BLACK)
    (node,) = _children(ctx, "path")
    assert node.get("d") == path.to_svg()
    assert node.get("fill-rule") == "evenodd"


def test_stroke_width_one_is_omitted():
    ctx = _ctx()
    ctx.stroke(Rect(0.0, 0.0, 5.0, 5.0), Color.RED, 1.0)
    ctx.stroke(Rect(0.0, 0.0, 5.0, 5.0), Color.RED, 2.0)
    first, second = _children(ctx, "rect")
    assert first.get("fill") == "none"
    assert first.get("stroke") == "#ff0000"
    assert first.get("stroke-width") is None
    assert float(second.get("stroke-width")) == 2.0
    assert first.get("stroke-linejoin") is None
    assert first.get("stroke-linecap") is None


def test_stroke_styled_attributes():
    ctx = _ctx()
    style = StrokeStyle(
        line_join=LineJoin.ROUND,
        line_cap=LineCap.SQUARE,
        dash_pattern=(4.0, 2.0),
        dash_offset=1.5,
    )
    ctx.stroke_styled(Rect(0.0, 0.0, 5.0, 5.0), Color.RED, 3.0, style)
    (rect,) = _children(ctx, "rect")
    assert rect.get("stroke-linejoin") == "round"
    assert rect.get("stroke-linecap") == "square"
    assert [float(v) for v in rect.get("stroke-dasharray").split()] == [4.0, 2.0]
    assert float(rect.get("stroke-dashoffset")) == 1.5


def test_miter_limit_only_when_not_default():
    ctx = _ctx()
    shape = Rect(0.0, 0.0, 5.0, 5.0)
    ctx.stroke_styled(shape, Color.RED, 1.0, StrokeStyle(line_join=LineJoin.miter()))
    ctx.stroke_styled(shape, Color.RED, 1.0, StrokeStyle(line_join=LineJoin.miter(4.0)))
    default, custom = _children(ctx, "rect")
    assert default.get("stroke-miterlimit") is None
    assert float(custom.get("stroke-miterlimit")) == 4.0


def test_linear_gradient_definition_and_reference():
    ctx = _ctx()
    grad = FixedLinearGradient(Point(0.0, 0.0), Point(10.0, 0.0), (Color.RED, Color.BLUE))
    brush = ctx.gradient(grad)
    ctx.fill(Rect(0.0, 0.0, 10.0, 10.0), brush)
    (node,) = _children(ctx, "linearGradient")
    assert node.get("id") == "a"
    assert node.get("gradientUnits") == "userSpaceOnUse"
    assert float(node.get("x2")) == 10.0
    stops = [s for s in node if _tag(s) == "stop"]
    assert [float(s.get("offset")) for s in stops] == [s.pos for s in grad.stops]
    (rect,) = _children(ctx, "rect")
    assert rect.get("fill") == "url(#a)"
    assert rect.get("fill-opacity") is None


def test_unit_gradient_resolved_against_bounding_box():
    ctx = _ctx()
    shape = Rect(10.0, 20.0, 30.0, 60.0)
    grad = LinearGradient(UnitPoint.TOP, UnitPoint.BOTTOM, (Color.WHITE, Color.BLACK))
    ctx.fill(shape, grad)
    expected = grad.resolve(shape.bounding_box())
    (node,) = _children(ctx, "linearGradient")
    assert float(node.get("x1")) == expected.start.x
    assert float(node.get("y1")) == expected.start.y
    assert float(node.get("y2")) == expected.end.y


def test_radial_gradient_focus():
    ctx = _ctx()
    grad = FixedRadialGradient(Point(5.0, 5.0), Vec2(1.0, -2.0), 4.0, (Color.RED, Color.BLUE))
    ctx.gradient(grad)
    (node,) = _children(ctx, "radialGradient")
    assert float(node.get("fx")) == grad.center.x + grad.origin_offset.x
    assert float(node.get("fy")) == grad.center.y + grad.origin_offset.y
    assert float(node.get("r")) == grad.radius


def test_gradient_ids_are_unique():
    ctx = _ctx()
    grad = FixedLinearGradient(Point(0.0, 0.0), Point(1.0, 0.0), (Color.RED, Color.BLUE))
    brushes = [ctx.gradient(grad) for _ in range(60)]
    ids = [n.get("id") for n in _children(ctx, "linearGradient")]
    assert len(set(ids)) == 60
    assert [b.paint() for b in brushes] == [f"url(#{i})" for i in ids]


def test_clip_applies_until_restore():
    ctx = _ctx()
    ctx.save()
    ctx.clip(Rect(0.0, 0.0, 50.0, 50.0))
    ctx.fill(Rect(0.0, 0.0, 10.0, 10.0), Color.RED)
    ctx.restore()
    ctx.fill(Rect(0.0, 0.0, 10.0, 10.0), Color.RED)
    (clip,) = _children(ctx, "clipPath")
    assert clip.get("id") == "a"
    assert len(list(clip)) == 1
    clipped, free = _children(ctx, "rect")
    assert clipped.get("clip-path") == "url(#a)"
    assert free.get("clip-path") is None


def test_restore_without_save_raises():
    ctx = _ctx()
    with pytest.raises(StackUnbalanceError):
        ctx.restore()


def test_transform_composes_and_restores():
    ctx = _ctx()
    t = Affine.translate(Vec2(5.0, 7.0))
    s = Affine.scale(2.0)
    ctx.save()
    ctx.transform(t)
    ctx.transform(s)
    assert ctx.current_transform() == t * s
    ctx.fill(Rect(0.0, 0.0, 1.0, 1.0), Color.RED)
    ctx.restore()
    assert ctx.current_transform() == Affine.IDENTITY
    (rect,) = _children(ctx, "rect")
    assert _coeffs(rect.get("transform")) == (t * s).as_coeffs()


def test_clear_whole_canvas():
    ctx = _ctx()
    ctx.clear(None, Color.from_hex_str("#abcdef"))
    (rect,) = _children(ctx, "rect")
    assert rect.get("width") == "100%"
    assert rect.get("height") == "100%"
    assert rect.get("fill") == "#abcdef"


def test_clear_region():
    ctx = _ctx()
    ctx.clear(Rect(2.0, 3.0, 12.0, 8.0), Color.WHITE)
    (rect,) = _children(ctx, "rect")
    assert (float(rect.get("x")), float(rect.get("y"))) == (2.0, 3.0)
    assert float(rect.get("width")) == 10.0


def test_finish_sets_view_box():
    ctx = _ctx()
    ctx.finish()
    root = _root(ctx)
    assert ctx.size() == Size(200.0, 100.0)
    assert [float(v) for v in root.get("viewBox").split()] == [0.0, 0.0, 200.0, 100.0]
    assert root.get("style") == "width:200px;height:100px;"
    assert _children(ctx, "style") == []


def test_draw_text_element():
    ctx = _ctx()
    layout = _layout()
    pos = Point(10.0, 20.0)
    ctx.draw_text(layout, pos)
    (node,) = _children(ctx, "text")
    assert node.text == layout.text()
    assert float(node.get("x")) == pos.x + layout.max_width
    assert float(node.get("y")) == pos.y + layout.size().height
    style = node.get("style")
    assert "text-anchor:end" in style
    assert "text-decoration:underline;" in style
    assert f'font-family:"{FontFamily.SYSTEM_UI.name()}";' in style
    assert f"font-weight:{FontWeight.REGULAR.to_raw()};" in style
    assert node.get("transform") is None
    assert FontFace() in ctx.text().seen_fonts


def test_draw_text_without_width_has_no_anchor():
    ctx = _ctx()
    layout = _layout(max_width=float("inf"), alignment=TextAlignment.CENTER)
    ctx.transform(Affine.scale(2.0))
    ctx.draw_text(layout, Point(4.0, 0.0))
    (node,) = _children(ctx, "text")
    assert float(node.get("x")) == 4.0
    assert "text-anchor" not in node.get("style")
    assert _coeffs(node.get("transform")) == Affine.scale(2.0).as_coeffs()


def test_finish_without_fonts_fails_for_drawn_text():
    ctx = _ctx()
    ctx.draw_text(_layout(), Point(0.0, 0.0))
    with pytest.raises(FontLoadingFailedError):
        ctx.finish()


def test_write_text_and_binary_streams():
    ctx = _ctx()
    ctx.fill(Rect(0.0, 0.0, 1.0, 1.0), Color.RED)
    text_out, bytes_out = io.StringIO(), io.BytesIO()
    ctx.write(text_out)
    ctx.write(bytes_out)
    assert text_out.getvalue() == ctx.display()
    assert bytes_out.getvalue().decode("utf-8") == ctx.display()


def test_make_image_size_and_invalid_input():
    ctx = _ctx()
    image = ctx.make_image(3, 2, bytes(range(18)), ImageFormat.RGB)
    assert image.size() == Size(3.0, 2.0)
    with pytest.raises(InvalidInputError):
        ctx.make_image(3, 2, bytes(5), ImageFormat.RGB)


def test_make_image_unpremultiplies():
    ctx = _ctx()
    pixel = (64, 32, 0, 128)
    image = ctx.make_image(1, 1, bytes(pixel), ImageFormat.RGBA_PREMUL)
    expected = tuple(unpremul(c, pixel[3]) for c in pixel[:3]) + (pixel[3],)
    assert image.image.getpixel((0, 0)) == expected


def test_draw_image_embeds_png_round_trip():
    ctx = _ctx()
    pixels = bytes([0, 128, 255, 64])
    image = ctx.make_image(2, 2, pixels, ImageFormat.GRAYSCALE)
    ctx.draw_image(image, Rect(1.0, 2.0, 21.0, 12.0), InterpolationMode.BILINEAR)
    (node,) = _children(ctx, "image")
    href = node.get("href")
    prefix = "data:image/png;base64,"
    assert href.startswith(prefix)
    decoded = PILImage.open(io.BytesIO(base64.b64decode(href[len(prefix):])))
    assert decoded.tobytes() == pixels
    assert float(node.get("width")) == 20.0
    assert float(node.get("height")) == 10.0


def test_capture_image_area_unimplemented():
    ctx = _ctx()
    with pytest.raises(UnimplementedError):
        ctx.capture_image_area(Rect(0.0, 0.0, 1.0, 1.0))


def test_blurred_rect_is_plain_fill():
    blurred, filled = _ctx(), _ctx()
    rect = Rect(0.0, 0.0, 4.0, 4.0)
    blurred.blurred_rect(rect, 3.0, Color.GREEN)
    filled.fill(rect, Color.GREEN)
    assert blurred.display() == filled.display()


def test_brush_requires_exactly_one_kind():
    with pytest.raises(ValueError):
        Brush()
    with pytest.raises(ValueError):
        Brush(solid=Color.RED, ref=1)
    assert Brush(ref=0).opacity() is None
    assert Brush(ref=0).paint() == "url(#a)"


def test_status_reports_nothing():
    ctx = _ctx()
    assert ctx.status() is None