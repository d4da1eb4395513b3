"""
Database entity models.

Modules:
- picture_of_the_day: One scraped Picture of the Day per calendar date
"""

from . import picture_of_the_day
from .picture_of_the_day import PictureOfTheDay

__all__ = ["PictureOfTheDay", "picture_of_the_day"]
