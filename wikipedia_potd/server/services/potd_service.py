"""
Picture of the Day read service.

Backs the REST endpoints: looks pictures up, renders scaled, dithered and
TRMNL variants of the stored images and caches the results in the named
response caches.
"""

import asyncio
import datetime as dt
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from wikipedia_potd.core import cache as cache_names
from wikipedia_potd.core.cache import CacheManager, get_cache_manager
from wikipedia_potd.core.database.entities.picture_of_the_day import PictureOfTheDay
from wikipedia_potd.core.database.repositories.picture_of_the_day import PictureOfTheDayRepository
from wikipedia_potd.core.logging_config import get_logger
from wikipedia_potd.core.models.io import PictureOfTheDayDTO
from wikipedia_potd.imaging.image_service import ImageService
from wikipedia_potd.server.core.constant import TRMNL_HEIGHT, TRMNL_WIDTH

logger = get_logger(__name__)


def _image_cache_name(dithered: bool, width: Optional[int], height: Optional[int]) -> str:
    if width is None:
        return cache_names.POTD_IMAGE_DITHERED if dithered else cache_names.POTD_IMAGE
    if height is None:
        return cache_names.POTD_IMAGE_DITHERED_SCALED_W if dithered else cache_names.POTD_IMAGE_SCALED_W
    return cache_names.POTD_IMAGE_DITHERED_SCALED_WH if dithered else cache_names.POTD_IMAGE_SCALED_WH


class PotdService:
    """Read side of the Picture of the Day data."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        image_service: ImageService,
        cache_manager: CacheManager,
        *,
        today: Callable[[], dt.date] = dt.date.today,
    ) -> None:
        self.session_factory = session_factory
        self.image_service = image_service
        self.cache_manager = cache_manager
        self._today = today

    async def _find_by_date(self, date: dt.date) -> Optional[PictureOfTheDay]:
        async with self.session_factory() as session:
            return await PictureOfTheDayRepository(session).find_by_date(date)

    async def _find_today_or_latest(self) -> Optional[PictureOfTheDay]:
        today = self._today()
        async with self.session_factory() as session:
            repository = PictureOfTheDayRepository(session)
            potd = await repository.find_by_date(today)
            if potd is not None:
                logger.info(f"Serving POTD for today: {today}")
                return potd

            logger.warning(f"POTD for today ({today}) not found. Attempting fallback to latest available image.")
            potd = await repository.find_latest()
            if potd is not None:
                logger.info(f"Fallback successful. Serving POTD from {potd.date}")
            else:
                logger.error("Fallback failed. No POTD records found in database.")
            return potd

    async def get_today(self) -> Optional[PictureOfTheDayDTO]:
        """Today's picture, or the most recent one when today's is missing."""
        potd = await self._find_today_or_latest()
        return PictureOfTheDayDTO.from_entity(potd) if potd is not None else None

    async def get_by_date(self, date: dt.date) -> Optional[PictureOfTheDayDTO]:
        async def load() -> Optional[PictureOfTheDayDTO]:
            potd = await self._find_by_date(date)
            if potd is None:
                logger.warning(f"POTD not found for date: {date}")
                return None
            return PictureOfTheDayDTO.from_entity(potd)

        return await self.cache_manager.get_cache(cache_names.POTD_DATE).get_or_load(date.isoformat(), load)

    async def get_image(
        self,
        date: dt.date,
        width: Optional[int] = None,
        height: Optional[int] = None,
        *,
        dithered: bool = False,
    ) -> Optional[bytes]:
        """Stored image for ``date``, optionally rescaled.

        Returns:
            Image bytes, or None when there is no picture or no image data.

        Raises:
            ImageProcessingError: If the stored image cannot be decoded.
        """

        async def load() -> Optional[bytes]:
            potd = await self._find_by_date(date)
            data = None
            if potd is not None:
                data = potd.dithered_image if dithered else potd.original_image
            if data is None:
                return None
            return await asyncio.to_thread(self.image_service.scale_image, data, width, height)

        key = ":".join(str(part) for part in (date.isoformat(), width, height) if part is not None)
        cache = self.cache_manager.get_cache(_image_cache_name(dithered, width, height))
        return await cache.get_or_load(key, load)

    async def get_trmnl_image(self) -> Optional[bytes]:
        """Today's (or the latest) picture as an 800x480 dithered PNG."""
        potd = await self._find_today_or_latest()
        if potd is None:
            logger.error("TRMNL Request: No POTD found.")
            return None

        async def load() -> Optional[bytes]:
            if potd.original_image is None:
                logger.warning(f"TRMNL image generation failed. Image data missing for date: {potd.date}")
                return None
            scaled = await asyncio.to_thread(
                self.image_service.scale_image_and_center, potd.original_image, TRMNL_WIDTH, TRMNL_HEIGHT
            )
            dithered = await asyncio.to_thread(self.image_service.dither_image, scaled)
            logger.info(f"TRMNL image generated for date: {potd.date}")
            return dithered

        logger.info(f"TRMNL Request: Serving POTD from date {potd.date}")
        cache = self.cache_manager.get_cache(cache_names.POTD_TRMNL_DATE)
        return await cache.get_or_load(potd.date.isoformat(), load)


_potd_service: Optional[PotdService] = None


def get_potd_service() -> PotdService:
    """Get the global Picture of the Day service instance."""
    global _potd_service
    if _potd_service is None:
        from wikipedia_potd.core.database.session import async_session_maker
        from wikipedia_potd.server.core.config import settings

        wikipedia = settings.wikipedia
        _potd_service = PotdService(
            async_session_maker,
            ImageService(wikipedia.user_agent, wikipedia.timeout_seconds),
            get_cache_manager(),
        )
    return _potd_service
