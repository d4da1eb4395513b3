"""Exception handlers for the FastAPI application."""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
