"""
Core utilities and configuration for the Wikipedia POTD service.

This package provides core functionality including logging configuration,
monitoring, caching, fault tolerance, database setup and other shared utilities.
"""

from wikipedia_potd.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
