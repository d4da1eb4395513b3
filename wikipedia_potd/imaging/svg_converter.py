"""SVG detection and rasterization."""

from wikipedia_potd.core.errors import ImageProcessingError
from wikipedia_potd.core.logging_config import get_logger

logger = get_logger(__name__)

_HEAD_BYTES = 100
_XML_HEAD_BYTES = 1024


class SvgConverter:
    """Detects SVG payloads and converts them to PNG with CairoSVG."""

    @staticmethod
    def is_svg(data: bytes) -> bool:
        """Check whether ``data`` looks like an SVG document.

        Only the start of the payload is inspected. Documents with an XML
        prolog get a larger window since the ``<svg`` tag follows it.
        """
        if not data:
            return False
        head = data[:_HEAD_BYTES].decode("utf-8", errors="replace").strip().lower()
        if "<svg" in head:
            return True
        if "<?xml" in head:
            head = data[:_XML_HEAD_BYTES].decode("utf-8", errors="replace").lower()
            return "<svg" in head
        return False

    @staticmethod
    def convert_svg_to_png(data: bytes) -> bytes:
        """Rasterize an SVG document to PNG.

        Raises:
            ImageProcessingError: If the document cannot be rendered.
        """
        try:
            # libcairo is loaded on import
            import cairosvg

            png = cairosvg.svg2png(bytestring=data)
        except Exception as e:
            logger.error(f"SVG conversion failed: {e}")
            raise ImageProcessingError("Failed to convert SVG to PNG") from e
        logger.debug(f"Converted SVG ({len(data)} bytes) to PNG ({len(png)} bytes)")
        return png
