# vectorpaint

vectorpaint is a small 2D drawing library. You draw shapes, gradients, text
and images onto a `RenderContext`, and it records them as an SVG document that
you can write to any text or binary stream.

## Installation

```
pip install vectorpaint
```

To run the test suite, install the `test` extra:

```
pip install "vectorpaint[test]"
pytest
```

## Drawing a picture

```python
import sys

from vectorpaint.color import Color
from vectorpaint.geometry import Circle, Point, Rect, Size
from vectorpaint.gradient import LinearGradient, UnitPoint
from vectorpaint.svg import RenderContext

ctx = RenderContext(Size(200, 120))
ctx.clear(None, Color.WHITE)

# A solid red circle
ctx.fill(Circle(Point(60, 60), 40), ctx.solid_brush(Color.RED))

# A rectangle filled with a gradient laid out in the shape's own box
fade = LinearGradient(UnitPoint.TOP, UnitPoint.BOTTOM, [Color.BLUE, Color.from_hex_str("#0f6")])
ctx.fill(Rect(110, 20, 190, 100), fade)

ctx.finish()
ctx.write(sys.stdout)
```

`display()` returns the markup as a string; `write()` sends it to a stream
(text streams get a string, anything else gets UTF-8 bytes). Both show what has
been drawn so far, and drawing may continue afterwards. `finish()` sets the
view box and size of the document and embeds the fonts used by drawn text.

## Modules

- `vectorpaint.color` — `Color`, a 32-bit RGBA value, and the parse errors
  `ColorParseError`, `WrongSizeError` and `NotHexError`.
- `vectorpaint.geometry` — `Vec2`, `Point`, `Size`, `Rect`, `RoundedRect`,
  `Circle`, `BezPath` and `Affine`.
- `vectorpaint.gradient` — `LinearGradient` and `RadialGradient` in unit-square
  coordinates, `FixedLinearGradient` and `FixedRadialGradient` in image space,
  `GradientStop`, `UnitPoint`, `ScaleMode` and `gradient_stops`.
- `vectorpaint.font` — `FontFamily`, `FontWeight` and `FontStyle`.
- `vectorpaint.image` — `ImageFormat`, `ImageBuf` and `unpremul`.
- `vectorpaint.text` — `Text`, `TextLayoutBuilder`, `TextLayout`,
  `TextAttribute`, `TextAlignment`, `LineMetric` and `FontFace`.
- `vectorpaint.svg` — `RenderContext`, `Brush`, `StrokeStyle`, `LineJoin`,
  `LineCap`, `InterpolationMode` and `SvgImage`.
- `vectorpaint.errors` — the exception classes.

## Colours

- `Color.rgb8(r, g, b)` and `Color.rgba8(r, g, b, a)` from byte channels
- `Color.rgb(...)`, `Color.rgba(...)` and `Color.grey(...)` from floats,
  clamped to 0.0–1.0; `Color.grey8(...)` from a byte
- `Color.from_hex_str("#BAD")` accepts `rgb`, `rgba`, `rrggbb` and `rrggbbaa`,
  with or without a leading `#`; a bad length raises `WrongSizeError`, a bad
  digit `NotHexError`, both subclasses of `ColorParseError`
- `Color.hlc(h, l, c)` from CIE HCL coordinates, clipped to sRGB
- `with_alpha`, `as_rgba_u32`, `as_rgba8` and `as_rgba` to change or read values
- named constants such as `Color.RED`, `Color.WHITE` and `Color.TRANSPARENT`

## Brushes and gradients

`fill`, `fill_even_odd`, `stroke`, `stroke_styled` and `blurred_rect` accept a
`Brush`, a `Color`, a fixed gradient, or a `LinearGradient` / `RadialGradient`.
Unit-square gradients are resolved against the bounding box of the shape being
drawn. `gradient()` defines a fixed gradient in the document and returns a
brush that refers to it. Stops may be given as `GradientStop`s or as bare
colours, which are spaced evenly.

## State, clipping and transforms

`save()` and `restore()` push and pop the current transform and clip.
Restoring with nothing saved raises `StackUnbalanceError`. `transform()`
composes an `Affine` (for example `Affine.translate(...)`, `Affine.scale(...)`,
`Affine.rotate(...)`) after the current one, and `clip()` limits every later
drawing operation to a shape.

## Strokes

`stroke(shape, brush, width)` draws an outline; `stroke_styled` also takes a
`StrokeStyle` with a `LineJoin` (`LineJoin.MITER`, `LineJoin.miter(limit)`,
`LineJoin.ROUND`, `LineJoin.BEVEL`), a `LineCap`, a dash pattern and a dash
offset.

## Text

`ctx.text().new_text_layout("Hello")` returns a builder; set a family, weight,
style, colour or size with `default_attribute(...)` (for example
`TextAttribute.font_size(18)`), an alignment with `alignment(...)`, and a width
with `max_width(...)`, then call `build()`. Building measures the text with a
matching font found on this machine (96 DPI is assumed); if no font matches,
`FontLoadingFailedError` is raised. By default the usual font directories of
the platform are searched; `Text(font_dirs=[...])` searches other directories,
and `load_font(data)` registers font bytes directly. `draw_text(layout, pos)`
adds a `<text>` element, and `finish()` embeds the data of every font face
drawn as base64 `@font-face` rules.

## Images

`make_image(width, height, buf, format)` turns raw pixels in an `ImageFormat`
(`GRAYSCALE`, `RGB`, `RGBA_SEPARATE`, `RGBA_PREMUL`) into an `SvgImage`; a
buffer that is too short raises `InvalidInputError`. `draw_image` embeds it
as PNG data. An `ImageBuf` keeps raw pixels in memory (its length must match
the dimensions, or `ValueError` is raised), yields their colours row by row
with `pixel_colors()`, and can be turned into an image with `to_image(ctx)`.

## Errors

Rendering failures raise subclasses of `vectorpaint.errors.PietError`:
`InvalidInputError`, `NotSupportedError`, `UnimplementedError`,
`MissingFeatureError`, `StackUnbalanceError`, `BackendError`,
`MissingFontError` and `FontLoadingFailedError`.

## What it does not do

- It only produces SVG; it does not rasterise to pixels or display anything.
- There is no command-line tool; it is used as a library.
- Text is laid out as a single line; ranged attributes only take effect when
  they cover the whole text, and hit testing is not provided.
- `blurred_rect` fills the rectangle without a blur, `draw_image_area` ignores
  the source rectangle, interpolation modes are not applied, and
  `capture_image_area` raises `UnimplementedError`.