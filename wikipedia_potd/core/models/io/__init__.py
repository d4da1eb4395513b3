"""
I/O models for API responses.

These models are separate from database entities to allow independent
evolution of the API contract.

Modules:
- picture_of_the_day: Picture of the Day response model
"""

from .picture_of_the_day import PictureOfTheDayDTO

__all__ = ["PictureOfTheDayDTO"]
