"""Unit tests for database engine and session helpers."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from wikipedia_potd.core.database.utils import create_sessionmaker, normalize_database_url


class TestNormalizeDatabaseUrl:
    """Test Postgres URL normalization."""

    @pytest.mark.parametrize(
        "url",
        [
            "postgres://u:p@db:5432/potd",
            "postgresql://u:p@db:5432/potd",
            "postgresql+psycopg2://u:p@db:5432/potd",
            "postgresql+asyncpg://u:p@db:5432/potd",
        ],
    )
    def test_postgres_urls_use_asyncpg(self, url):
        assert normalize_database_url(url) == "postgresql+asyncpg://u:p@db:5432/potd"

    def test_sqlite_url_unchanged(self):
        url = "sqlite+aiosqlite:///./potd.db"
        assert normalize_database_url(url) == url


class TestEngineAndSchema:
    """Test table creation and session factory."""

    @pytest.mark.asyncio
    async def test_create_all_creates_picture_of_the_day(self, test_engine):
        async with test_engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
            columns = await conn.run_sync(
                lambda sync_conn: {c["name"] for c in inspect(sync_conn).get_columns("picture_of_the_day")}
            )

        assert "picture_of_the_day" in tables
        assert columns == {
            "id",
            "date",
            "description",
            "short_description",
            "credit",
            "image_url",
            "original_image",
            "dithered_image",
            "created_at",
        }

    @pytest.mark.asyncio
    async def test_sessionmaker_does_not_expire_on_commit(self, test_engine):
        factory = create_sessionmaker(test_engine)
        async with factory() as session:
            assert isinstance(session, AsyncSession)
            assert session.sync_session.expire_on_commit is False
