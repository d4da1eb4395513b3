import datetime as dt
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from wikipedia_potd.imaging.image_service import ImageService
from wikipedia_potd.scraper.job import ScrapeJob, get_scrape_job
from wikipedia_potd.scraper.scraper import ScrapeOutcome
from wikipedia_potd.server.services.potd_service import PotdService, get_potd_service

# Fixed "today" for the API tests
TODAY = dt.date(2024, 5, 17)


@pytest.fixture
def today() -> dt.date:
    return TODAY


@pytest.fixture
def potd_service(session_factory, cache_manager) -> PotdService:
    return PotdService(session_factory, ImageService(), cache_manager, today=lambda: TODAY)


@pytest.fixture
def scrape_job() -> MagicMock:
    job = MagicMock(spec=ScrapeJob)
    job.run = AsyncMock(return_value=ScrapeOutcome.SUCCESS)
    return job


@pytest_asyncio.fixture(name="client")
async def client_fixture(potd_service: PotdService, scrape_job: MagicMock) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with overridden dependencies.

    The ASGI transport does not run lifespan events, so the scheduler and
    the application database are never touched.
    """
    from wikipedia_potd.server.main import app

    app.dependency_overrides[get_potd_service] = lambda: potd_service
    app.dependency_overrides[get_scrape_job] = lambda: scrape_job

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()
