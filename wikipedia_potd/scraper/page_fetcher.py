"""HTML page download and parsing."""

from typing import Optional

import httpx
from bs4 import BeautifulSoup

from wikipedia_potd.core.errors import ScrapeError
from wikipedia_potd.core.logging_config import get_logger

logger = get_logger(__name__)


class WikipediaPageFetcher:
    """Fetches a page over HTTP and parses it with BeautifulSoup."""

    def __init__(self, timeout_seconds: float = 30.0, *, client: Optional[httpx.AsyncClient] = None) -> None:
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _get(self, url: str, headers: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, headers=headers, follow_redirects=True)
        async with httpx.AsyncClient(timeout=self.timeout_seconds, follow_redirects=True) as client:
            return await client.get(url, headers=headers)

    async def fetch(self, url: str, user_agent: str) -> BeautifulSoup:
        """Download ``url`` and return the parsed document.

        Raises:
            ScrapeError: On transport errors or non-2xx responses.
        """
        logger.debug(f"Fetching page: {url}")
        try:
            response = await self._get(url, {"User-Agent": user_agent})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ScrapeError(f"Failed to fetch {url}: {e}") from e
        return BeautifulSoup(response.text, "html.parser")
