"""
Picture of the Day I/O model.

The JSON contract uses camelCase keys; image bytes are never inlined, the
DTO links to the image endpoints instead.
"""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict

from wikipedia_potd.server.core.constant import API_PREFIX

if TYPE_CHECKING:
    from wikipedia_potd.core.database.entities.picture_of_the_day import PictureOfTheDay


def _to_camel(s: str) -> str:
    """Convert snake_case to camelCase for JSON aliasing."""
    parts = s.split("_")
    return parts[0] + "".join(p.capitalize() or "_" for p in parts[1:])


class PictureOfTheDayDTO(BaseModel):
    """Schema for reading a Picture of the Day from the API."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=_to_camel)

    date: dt.date
    description: Optional[str] = None
    short_description: Optional[str] = None
    credit: Optional[str] = None
    image_url: str
    dithered_image_url: str

    @classmethod
    def from_entity(cls, potd: "PictureOfTheDay") -> "PictureOfTheDayDTO":
        day = potd.date.isoformat()
        return cls(
            date=potd.date,
            description=potd.description,
            short_description=potd.short_description,
            credit=potd.credit,
            image_url=f"{API_PREFIX}/{day}/image",
            dithered_image_url=f"{API_PREFIX}/{day}/image/dithered",
        )
