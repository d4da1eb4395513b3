"""
Database repository layer using SQLModel.

Modules:
- base: BaseRepository interface and QueryBuilder utilities
- picture_of_the_day: Picture of the Day data access
"""

from .base import BaseRepository, QueryBuilder
from .picture_of_the_day import PictureOfTheDayRepository

__all__ = ["BaseRepository", "PictureOfTheDayRepository", "QueryBuilder"]
