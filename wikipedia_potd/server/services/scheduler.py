"""
Background scheduler for the scrape job.
"""

import asyncio
from typing import Optional

from wikipedia_potd.core.errors import PotdError
from wikipedia_potd.core.logging_config import get_logger
from wikipedia_potd.scraper.job import ScrapeJob, get_scrape_job

logger = get_logger(__name__)


class ScrapeScheduler:
    """Runs the scrape job right away and then at a fixed interval."""

    def __init__(self, job: ScrapeJob, interval_seconds: float = 3600.0) -> None:
        self.job = job
        self.interval_seconds = interval_seconds
        self.running = False
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Start the scheduler loop."""
        if self.running:
            logger.warning("Scrape scheduler is already running")
            return

        self.running = True
        logger.info(f"Starting scrape scheduler (every {self.interval_seconds}s)")
        self._task = asyncio.create_task(self._scheduler_loop())

    async def stop(self) -> None:
        """Stop the scheduler loop and wait for it to finish."""
        self.running = False
        logger.info("Stopping scrape scheduler...")
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def run_once(self) -> None:
        """Run the scrape job once; failures are logged."""
        try:
            await self.job.run()
        except PotdError as e:
            logger.warning(f"Scheduled scrape did not complete: {e}")
        except Exception as e:
            logger.error(f"Error in scheduled scrape: {e}", exc_info=True)

    async def _scheduler_loop(self) -> None:
        while self.running:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)


_scheduler: Optional[ScrapeScheduler] = None


def get_scrape_scheduler() -> ScrapeScheduler:
    """Get the global scrape scheduler instance."""
    global _scheduler
    if _scheduler is None:
        from wikipedia_potd.server.core.config import settings

        _scheduler = ScrapeScheduler(get_scrape_job(), settings.scheduler.interval_seconds)
    return _scheduler
