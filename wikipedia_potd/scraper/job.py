"""Scrape job: the scraper guarded by the fault tolerance policies."""

from typing import Optional

from wikipedia_potd.core.fault_tolerance import FaultTolerance
from wikipedia_potd.core.logging_config import get_logger

from .scraper import ScrapeOutcome, WikipediaScraper

logger = get_logger(__name__)


class ScrapeJob:
    """Runs ``WikipediaScraper.scrape`` through retry, circuit breaker and rate limit.

    Both the scheduler and the manual trigger endpoint go through the same
    job instance, so they share circuit breaker and rate limit state.
    """

    def __init__(self, scraper: WikipediaScraper, fault_tolerance: Optional[FaultTolerance] = None) -> None:
        self.scraper = scraper
        self.fault_tolerance = fault_tolerance or FaultTolerance()

    async def run(self) -> ScrapeOutcome:
        outcome = await self.fault_tolerance.call(self.scraper.scrape)
        logger.info(f"Scrape job finished: {outcome.value}")
        return outcome


_scrape_job: Optional[ScrapeJob] = None


def build_scrape_job() -> ScrapeJob:
    """Wire a scrape job from the application settings and global resources."""
    from wikipedia_potd.ai.description_service import DescriptionAiService
    from wikipedia_potd.core.cache import CacheClearer, get_cache_manager
    from wikipedia_potd.core.database.session import async_session_maker
    from wikipedia_potd.imaging.image_service import ImageService
    from wikipedia_potd.server.core.config import settings

    from .page_fetcher import WikipediaPageFetcher

    wikipedia = settings.wikipedia
    scraper = WikipediaScraper(
        async_session_maker,
        WikipediaPageFetcher(wikipedia.timeout_seconds),
        ImageService(wikipedia.user_agent, wikipedia.timeout_seconds),
        DescriptionAiService(settings.google),
        config=wikipedia,
        cache_clearer=CacheClearer(get_cache_manager()),
    )
    return ScrapeJob(scraper, FaultTolerance.from_config(settings.fault_tolerance))


def get_scrape_job() -> ScrapeJob:
    """Get the global scrape job instance."""
    global _scrape_job
    if _scrape_job is None:
        _scrape_job = build_scrape_job()
    return _scrape_job
