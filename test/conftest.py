from __future__ import annotations

import datetime as dt
import io
import os
from pathlib import Path
from typing import AsyncGenerator, Callable, Iterable

import httpx
import pytest
import pytest_asyncio

# Load dotenv files early so test fixtures can read secrets via os.getenv
try:  # pragma: no cover
    from dotenv import load_dotenv

    TEST_ROOT = Path(__file__).resolve().parent
    load_dotenv(TEST_ROOT / ".env", override=False)
except Exception:
    pass

# Settings are read on import; configure them before any service module loads
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["LOGFIRE_ENABLED"] = "false"

from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from wikipedia_potd.core.cache import CacheManager  # noqa: E402
from wikipedia_potd.core.database.entities.picture_of_the_day import PictureOfTheDay  # noqa: E402
from wikipedia_potd.core.database.utils import create_all, create_engine, create_sessionmaker  # noqa: E402


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://0.0.0.0",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    """Factory producing PNG bytes of a solid color image."""

    def _make(width: int = 40, height: int = 20, color=(200, 100, 50), mode: str = "RGB") -> bytes:
        buffer = io.BytesIO()
        Image.new(mode, (width, height), color).save(buffer, format="PNG")
        return buffer.getvalue()

    return _make


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory database with all tables, one per test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache_manager() -> CacheManager:
    return CacheManager(max_size=16)


@pytest.fixture
def make_potd() -> Callable[..., PictureOfTheDay]:
    """Factory for unsaved PictureOfTheDay entities."""

    def _make(date: dt.date, image_url: str = "https://upload.wikimedia.org/a/a4/Image.jpg", **kwargs) -> PictureOfTheDay:
        fields = {
            "description": f"Description for {date}",
            "short_description": "Short",
            "credit": "Jane Doe",
            "original_image": b"original",
            "dithered_image": b"dithered",
            "created_at": dt.datetime(2024, 1, 1, 12, 0),
        }
        fields.update(kwargs)
        return PictureOfTheDay(date=date, image_url=image_url, **fields)

    return _make
