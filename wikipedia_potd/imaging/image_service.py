"""Image download and processing.

Every processing operation takes encoded image bytes (any format Pillow can
read) and returns PNG bytes. Processing is CPU bound and synchronous; async
callers run it in a worker thread.
"""

import io
from typing import Optional

import httpx
from PIL import Image, ImageChops

from wikipedia_potd.core.errors import ImageProcessingError, ScrapeError
from wikipedia_potd.core.logging_config import get_logger
from wikipedia_potd.core.metrics import image_download_size_bytes
from wikipedia_potd.core.monitoring import traced
from wikipedia_potd.server.core.config import DEFAULT_USER_AGENT

from .svg_converter import SvgConverter

logger = get_logger(__name__)

# Standard deviation of the gaussian noise mixed in before dithering
DITHER_NOISE_SIGMA = 3.0


def _open(data: bytes, operation: str) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageProcessingError(f"Failed to {operation}: unreadable image data") from e
    return image


def _to_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class ImageService:
    """Downloads, rescales and dithers images."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_seconds: float = 30.0,
        *,
        client: Optional[httpx.AsyncClient] = None,
        svg_converter: Optional[SvgConverter] = None,
    ) -> None:
        self.user_agent = user_agent
        self.timeout_seconds = timeout_seconds
        self._client = client
        self.svg_converter = svg_converter or SvgConverter()

    async def _get(self, url: str) -> httpx.Response:
        headers = {"User-Agent": self.user_agent}
        if self._client is not None:
            return await self._client.get(url, headers=headers, follow_redirects=True)
        async with httpx.AsyncClient(timeout=self.timeout_seconds, follow_redirects=True) as client:
            return await client.get(url, headers=headers)

    @traced("ImageService.download_image")
    async def download_image(self, url: str) -> bytes:
        """Download an image, rasterizing SVG documents to PNG.

        Args:
            url: Absolute image URL

        Returns:
            Raw image bytes (PNG for SVG sources)

        Raises:
            ScrapeError: On transport errors or non-2xx responses.
            ImageProcessingError: If an SVG payload cannot be rasterized.
        """
        logger.info(f"Downloading image: {url}")
        try:
            response = await self._get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ScrapeError(f"Failed to download image {url}: {e}") from e

        data = response.content
        image_download_size_bytes.observe(len(data))
        logger.debug(f"Downloaded {len(data)} bytes from {url}")

        if self.svg_converter.is_svg(data):
            logger.info("Image is an SVG document, converting to PNG")
            data = self.svg_converter.convert_svg_to_png(data)
        return data

    @staticmethod
    def media_type(data: bytes) -> str:
        """MIME type of encoded image bytes, ``image/png`` when unknown."""
        try:
            with Image.open(io.BytesIO(data)) as image:
                return image.get_format_mimetype() or "image/png"
        except (OSError, ValueError):
            return "image/png"

    @traced("ImageService.scale_image")
    def scale_image(self, data: bytes, width: Optional[int] = None, height: Optional[int] = None) -> bytes:
        """Scale an image.

        Without width and height the input is returned unchanged. With only
        one of them the other is derived from the aspect ratio.

        Args:
            data: Encoded image
            width: Target width in pixels
            height: Target height in pixels

        Returns:
            PNG bytes
        """
        if width is None and height is None:
            return data

        image = _open(data, "scale image")
        original_width, original_height = image.size
        if width is None:
            width = int(height / original_height * original_width)
        elif height is None:
            height = int(width / original_width * original_height)

        size = (max(1, width), max(1, height))
        logger.debug(f"Scaling image {image.size} -> {size}")
        scaled = image.convert("RGB").resize(size, Image.Resampling.LANCZOS)
        return _to_png(scaled)

    @traced("ImageService.scale_image_and_center")
    def scale_image_and_center(self, data: bytes, target_width: int, target_height: int) -> bytes:
        """Scale an image to cover the target size and center it.

        The image is scaled by the larger of the two axis ratios, so it fills
        the whole canvas; the overflow on one axis is cropped evenly on both
        sides.

        Args:
            data: Encoded image
            target_width: Canvas width in pixels
            target_height: Canvas height in pixels

        Returns:
            PNG bytes of exactly ``target_width`` x ``target_height``
        """
        image = _open(data, "scale and center image")
        original_width, original_height = image.size

        ratio = max(target_width / original_width, target_height / original_height)
        new_width = max(1, int(original_width * ratio))
        new_height = max(1, int(original_height * ratio))

        canvas = Image.new("RGB", (target_width, target_height), "white")
        scaled = image.convert("RGB").resize((new_width, new_height), Image.Resampling.BICUBIC)
        canvas.paste(scaled, (int((target_width - new_width) / 2), int((target_height - new_height) / 2)))
        return _to_png(canvas)

    @traced("ImageService.dither_image")
    def dither_image(self, data: bytes) -> bytes:
        """Convert an image to 1-bit black and white with Floyd-Steinberg dithering.

        The luma channel gets a little gaussian noise before error diffusion,
        which breaks up the regular patterns dithering produces on flat areas.

        Args:
            data: Encoded image

        Returns:
            PNG bytes of a mode ``"1"`` image with the input's size
        """
        image = _open(data, "dither image")
        gray = image.convert("L")

        noise = Image.effect_noise(gray.size, DITHER_NOISE_SIGMA)
        noisy = ImageChops.add(gray, noise, scale=1.0, offset=-128)

        dithered = noisy.convert("1", dither=Image.Dither.FLOYDSTEINBERG)
        return _to_png(dithered)
