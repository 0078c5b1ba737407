"""Record 2D drawing operations (shapes, gradients, text, images) as SVG documents."""

__version__ = "0.1.0"

__all__ = ["color", "errors", "font", "geometry", "gradient", "image", "text", "svg"]