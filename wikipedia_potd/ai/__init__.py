"""Gemini backed text summarization."""

from .description_service import DescriptionAiService

__all__ = ["DescriptionAiService"]
