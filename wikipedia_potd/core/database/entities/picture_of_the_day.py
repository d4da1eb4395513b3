"""
Picture of the Day entity model.

One row per calendar date holding the scraped metadata together with the
original image and its dithered rendition.
"""

import datetime as dt
from typing import Optional

from sqlalchemy import Column, Date, LargeBinary
from sqlmodel import Field

from ..base import Base


class PictureOfTheDayBase(Base):
    """Base fields for a Picture of the Day."""

    description: Optional[str] = Field(default=None, max_length=5000, description="Full description text")
    short_description: Optional[str] = Field(
        default=None, max_length=1000, description="AI generated one sentence summary"
    )
    credit: Optional[str] = Field(default=None, description="Photograph credit")
    image_url: Optional[str] = Field(default=None, index=True, description="Full resolution image URL")


class PictureOfTheDay(PictureOfTheDayBase, table=True):
    """Persistent Picture of the Day.

    Table: picture_of_the_day
    """

    __tablename__ = "picture_of_the_day"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    date: dt.date = Field(sa_column=Column("date", Date, unique=True, nullable=False))

    original_image: Optional[bytes] = Field(default=None, sa_column=Column("original_image", LargeBinary))
    dithered_image: Optional[bytes] = Field(default=None, sa_column=Column("dithered_image", LargeBinary))

    created_at: Optional[dt.datetime] = Field(default=None)

    def __repr__(self) -> str:
        return f"<PictureOfTheDay(id={self.id}, date={self.date}, image_url={self.image_url})>"
