"""
Integration test: scrape the Main Page and serve the result over the API.

The Wikipedia page, the image download and the Gemini call are faked at
their transport boundaries; everything in between (scraper, fault
tolerance, repository, caches, service and FastAPI routes) is real.
"""

import datetime as dt
import io
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

from wikipedia_potd.ai.description_service import DescriptionAiService
from wikipedia_potd.core.cache import CacheClearer
from wikipedia_potd.core.fault_tolerance import FaultTolerance, RateLimiter
from wikipedia_potd.imaging.image_service import ImageService
from wikipedia_potd.scraper.job import ScrapeJob, get_scrape_job
from wikipedia_potd.scraper.page_fetcher import WikipediaPageFetcher
from wikipedia_potd.scraper.scraper import WikipediaScraper
from wikipedia_potd.server.core.config import WikipediaConfig
from wikipedia_potd.server.services.potd_service import PotdService, get_potd_service

pytestmark = pytest.mark.asyncio

TODAY = dt.date(2024, 5, 17)
MAIN_PAGE_URL = "https://mock.wikipedia.test/wiki/Main_Page"
IMAGE_URL = "https://mock.wikimedia.test/wikipedia/commons/b/b2/Aurora.jpg"

MAIN_PAGE_HTML = """
<html><body>
<div id="mp-tfp">
  <a href="/wiki/File:Aurora.jpg">
    <img src="//mock.wikimedia.test/wikipedia/commons/thumb/b/b2/Aurora.jpg/250px-Aurora.jpg">
  </a>
  <p>An <b>aurora</b> over a frozen lake in northern Finland.</p>
  <p>Photograph: Matti Virtanen</p>
</div>
</body></html>
"""


def _summarize(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
    return ModelResponse(parts=[TextPart("Northern lights over a frozen Finnish lake.")])


@pytest.fixture
def wikimedia_transport(make_png):
    png = make_png(120, 80, color=(20, 120, 90))

    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == MAIN_PAGE_URL:
            return httpx.Response(200, text=MAIN_PAGE_HTML)
        if str(request.url) == IMAGE_URL:
            return httpx.Response(200, content=png, headers={"Content-Type": "image/png"})
        return httpx.Response(404)

    return httpx.MockTransport(handler)


@pytest_asyncio.fixture
async def client(session_factory, cache_manager, wikimedia_transport) -> AsyncGenerator[AsyncClient, None]:
    from wikipedia_potd.server.main import app

    http = httpx.AsyncClient(transport=wikimedia_transport)
    image_service = ImageService("IntegrationTest/1.0", client=http)
    scraper = WikipediaScraper(
        session_factory,
        WikipediaPageFetcher(client=http),
        image_service,
        DescriptionAiService(model=FunctionModel(_summarize)),
        config=WikipediaConfig(url=MAIN_PAGE_URL, user_agent="IntegrationTest/1.0"),
        cache_clearer=CacheClearer(cache_manager),
        today=lambda: TODAY,
    )
    job = ScrapeJob(scraper, FaultTolerance(rate_limiter=RateLimiter(1, 600)))
    service = PotdService(session_factory, image_service, cache_manager, today=lambda: TODAY)

    app.dependency_overrides[get_potd_service] = lambda: service
    app.dependency_overrides[get_scrape_job] = lambda: job

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as api:
        yield api

    app.dependency_overrides.clear()
    await http.aclose()


async def test_scrape_then_serve(client: AsyncClient):
    assert (await client.get("/api/potd/today")).status_code == 204

    scrape = await client.post("/api/potd/scrape")
    assert scrape.status_code == 200

    today = await client.get("/api/potd/today")
    assert today.status_code == 200
    body = today.json()
    assert body["date"] == "2024-05-17"
    assert body["description"] == "An aurora over a frozen lake in northern Finland."
    assert body["credit"] == "Matti Virtanen"
    assert body["shortDescription"] == "Northern lights over a frozen Finnish lake."

    original = await client.get(body["imageUrl"])
    assert Image.open(io.BytesIO(original.content)).size == (120, 80)

    dithered = Image.open(io.BytesIO((await client.get(body["ditheredImageUrl"])).content))
    assert dithered.mode == "1"

    trmnl = Image.open(io.BytesIO((await client.get("/api/potd/today/trmnl")).content))
    assert trmnl.size == (800, 480)
    assert trmnl.mode == "1"


async def test_second_manual_scrape_is_rate_limited(client: AsyncClient):
    assert (await client.post("/api/potd/scrape")).status_code == 200

    response = await client.post("/api/potd/scrape")

    assert response.status_code == 429
    assert response.json()["error_type"] == "RateLimitExceededError"


async def test_scrape_refreshes_cached_fallback(client: AsyncClient, session, make_potd, make_png):
    yesterday = TODAY - dt.timedelta(days=1)
    session.add(make_potd(yesterday, original_image=make_png()))
    await session.commit()

    # Cached TRMNL rendering of yesterday's picture
    assert (await client.get("/api/potd/today/trmnl")).status_code == 200
    assert (await client.get("/api/potd/2024-05-17")).status_code == 204

    await client.post("/api/potd/scrape")

    assert (await client.get("/api/potd/today")).json()["date"] == "2024-05-17"
    assert (await client.get("/api/potd/2024-05-17")).status_code == 200
