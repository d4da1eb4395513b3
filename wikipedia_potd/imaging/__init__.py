"""Image download, scaling, dithering and SVG rasterization."""

from .image_service import ImageService
from .svg_converter import SvgConverter

__all__ = ["ImageService", "SvgConverter"]
