"""
Picture of the Day repository.

Data access for the ``picture_of_the_day`` table: lookups by date and by
image URL, the latest entry, and creation.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.picture_of_the_day import PictureOfTheDay
from .base import BaseRepository, QueryBuilder


class PictureOfTheDayRepository(BaseRepository[PictureOfTheDay]):
    """Repository for Picture of the Day data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PictureOfTheDay)

    async def create(self, entity: PictureOfTheDay) -> PictureOfTheDay:
        """Persist a new Picture of the Day.

        Args:
            entity: PictureOfTheDay instance

        Returns:
            Persisted PictureOfTheDay with generated id
        """
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: int) -> Optional[PictureOfTheDay]:
        stmt = select(PictureOfTheDay).where(PictureOfTheDay.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_date(self, date: dt.date) -> Optional[PictureOfTheDay]:
        """Get the Picture of the Day for a calendar date.

        Args:
            date: Calendar date

        Returns:
            PictureOfTheDay instance or None
        """
        stmt = select(PictureOfTheDay).where(PictureOfTheDay.date == date)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_image_url(self, image_url: str) -> Optional[PictureOfTheDay]:
        """Get the first Picture of the Day that used the given image.

        Args:
            image_url: Full resolution image URL

        Returns:
            PictureOfTheDay instance or None
        """
        stmt = (
            select(PictureOfTheDay)
            .where(PictureOfTheDay.image_url == image_url)
            .order_by(PictureOfTheDay.date)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_latest(self) -> Optional[PictureOfTheDay]:
        """Get the Picture of the Day with the most recent date."""
        stmt = select(PictureOfTheDay).order_by(PictureOfTheDay.date.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[PictureOfTheDay]:
        """List pictures, most recent first.

        Args:
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            List of PictureOfTheDay instances
        """
        stmt = select(PictureOfTheDay).order_by(PictureOfTheDay.date.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_all(self) -> int:
        """Delete every row.

        Returns:
            Number of deleted rows
        """
        result = await self.session.execute(delete(PictureOfTheDay))
        await self.session.commit()
        return result.rowcount or 0
