"""Wikipedia Picture of the Day scraper.

The scraper reads the featured picture block (``#mp-tfp``) of the Wikipedia
Main Page, stores the picture with its description, credit, a dithered
rendition and an AI generated short description, one row per day.
"""

import asyncio
import datetime as dt
import time
from enum import Enum
from typing import Callable, Optional, Tuple

from bs4 import BeautifulSoup
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from wikipedia_potd.ai.description_service import DescriptionAiService
from wikipedia_potd.core.cache import CacheClearer
from wikipedia_potd.core.database.entities.picture_of_the_day import PictureOfTheDay
from wikipedia_potd.core.database.repositories.picture_of_the_day import PictureOfTheDayRepository
from wikipedia_potd.core.errors import ImageProcessingError, ScrapeError
from wikipedia_potd.core.logging_config import get_logger
from wikipedia_potd.core.metrics import (
    scraper_duration_seconds,
    scraper_execution_total,
    scraper_last_success_timestamp,
)
from wikipedia_potd.core.monitoring import traced
from wikipedia_potd.imaging.image_service import ImageService
from wikipedia_potd.server.core.config import WikipediaConfig

from .page_fetcher import WikipediaPageFetcher

logger = get_logger(__name__)

FEATURED_PICTURE_ID = "mp-tfp"
CREDIT_SEPARATORS = ("Photograph credit:", "Photograph:")
DESCRIPTION_UNAVAILABLE = "Description unavailable"


class ScrapeOutcome(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"


def resolve_image_url(src: str) -> str:
    """Turn an ``<img src>`` into an absolute URL of the full resolution file.

    Thumbnail URLs look like
    ``//upload.wikimedia.org/wikipedia/commons/thumb/a/a4/Name.jpg/300px-Name.jpg``;
    the original lives at ``.../commons/a/a4/Name.jpg``.
    """
    url = "https:" + src if src.startswith("//") else src
    if "/thumb/" in url:
        last_slash = url.rfind("/")
        if last_slash > 0:
            return url[:last_slash].replace("/thumb/", "/")
    return url


def split_description_and_credit(text: str) -> Tuple[str, str]:
    """Split the featured picture text into description and photo credit.

    Returns:
        ``(description, credit)``; the credit is empty when the text names none.
    """
    separator = next((s for s in CREDIT_SEPARATORS if s in text), None)
    if separator is None:
        return text, ""

    parts = text.split(separator)
    while parts and parts[-1] == "":
        parts.pop()
    if len(parts) < 2:
        return text, ""
    return parts[0].strip(), parts[1].strip()


class WikipediaScraper:
    """Scrapes and stores today's featured picture."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        page_fetcher: WikipediaPageFetcher,
        image_service: ImageService,
        description_service: DescriptionAiService,
        *,
        config: Optional[WikipediaConfig] = None,
        cache_clearer: Optional[CacheClearer] = None,
        today: Callable[[], dt.date] = dt.date.today,
    ) -> None:
        self.session_factory = session_factory
        self.page_fetcher = page_fetcher
        self.image_service = image_service
        self.description_service = description_service
        self.config = config or WikipediaConfig()
        self.cache_clearer = cache_clearer
        self._today = today

    @traced("Scraper.scrape")
    async def scrape(self) -> ScrapeOutcome:
        """Scrape today's Picture of the Day unless it is already stored.

        Returns:
            The outcome of the run.

        Raises:
            ScrapeError: When the page or image could not be fetched or
                processed, or the result could not be stored.
        """
        started = time.perf_counter()
        logger.info("Starting Wikipedia Picture of the Day scrape")
        try:
            async with self.session_factory() as session:
                outcome = await self._scrape(PictureOfTheDayRepository(session))
        except (ScrapeError, ImageProcessingError, SQLAlchemyError) as e:
            logger.error(f"Error scraping Wikipedia: {e}")
            self._record("failure", started)
            if isinstance(e, ScrapeError):
                raise
            raise ScrapeError(f"Scrape failed: {e}") from e

        if outcome is ScrapeOutcome.SUCCESS:
            scraper_last_success_timestamp.set(int(time.time() * 1000))
            self._record("success", started)
            if self.cache_clearer is not None:
                await self.cache_clearer.clear_all_caches()
        elif outcome is ScrapeOutcome.SKIPPED:
            self._record("skipped", started)
        else:
            self._record("failure", started)
        return outcome

    @staticmethod
    def _record(result: str, started: float) -> None:
        scraper_execution_total.labels(result=result).inc()
        scraper_duration_seconds.labels(result=result).observe(time.perf_counter() - started)

    async def _scrape(self, repository: PictureOfTheDayRepository) -> ScrapeOutcome:
        today = self._today()
        if await repository.find_by_date(today) is not None:
            logger.info("Picture of the Day for today already exists. Skipping.")
            return ScrapeOutcome.SKIPPED

        logger.info(f"Fetching Wikipedia Main Page from: {self.config.url}")
        document: BeautifulSoup = await self.page_fetcher.fetch(self.config.url, self.config.user_agent)
        featured = document.find(id=FEATURED_PICTURE_ID)
        if featured is None:
            logger.error(f"Could not find '{FEATURED_PICTURE_ID}' element on the page. The structure might have changed.")
            return ScrapeOutcome.NOT_FOUND

        img = featured.find("img")
        if img is None or not img.get("src"):
            logger.error(f"No image found in '{FEATURED_PICTURE_ID}' container.")
            return ScrapeOutcome.NOT_FOUND

        src = img["src"]
        image_url = resolve_image_url(src)
        logger.info(f"Found image URL: {src}. Resolved to original URL: {image_url}")

        text = " ".join(featured.get_text().split())
        description, credit = split_description_and_credit(text)

        existing = await repository.find_by_image_url(image_url)
        if existing is not None:
            logger.info(f"Image already stored (date: {existing.date}). Reusing binary data and AI summary.")
            original_image = existing.original_image
            dithered_image = existing.dithered_image
            short_description = existing.short_description
        else:
            logger.info(f"Image not stored yet. Downloading from: {image_url}")
            original_image = await self.image_service.download_image(image_url)
            logger.info(f"Image downloaded. Size: {len(original_image)} bytes. Proceeding to dither.")
            dithered_image = await asyncio.to_thread(self.image_service.dither_image, original_image)
            short_description = await self._summarize(description)

        potd = PictureOfTheDay(
            date=today,
            description=description,
            short_description=short_description,
            credit=credit,
            image_url=image_url,
            original_image=original_image,
            dithered_image=dithered_image,
            created_at=dt.datetime.now(),
        )
        await repository.create(potd)
        logger.info(f"Successfully scraped and saved Picture of the Day for {today}")
        return ScrapeOutcome.SUCCESS

    async def _summarize(self, description: str) -> str:
        try:
            logger.info("Generating short description via AI")
            return await self.description_service.summarize(description)
        except Exception as e:
            logger.error(f"Failed to generate short description via AI: {e}")
            return DESCRIPTION_UNAVAILABLE
