"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware
(CORS, request monitoring), exception handlers and all API routers, and
runs the scrape scheduler for the lifetime of the application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wikipedia_potd.core.database.session import dispose_engine, engine, init_db
from wikipedia_potd.core.logging_config import get_logger, setup_logging
from wikipedia_potd.core.monitoring import initialize_logfire

from .api.v1 import health, metrics, potd
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.scheduler import get_scrape_scheduler

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup creates missing tables and starts the scrape scheduler;
    shutdown stops the scheduler and closes the database pool.
    """
    logger.info("Starting up Wikipedia POTD Server...")
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    scheduler = None
    if settings.scheduler.enabled:
        scheduler = get_scrape_scheduler()
        await scheduler.start()
    else:
        logger.info("Scrape scheduler is disabled")

    yield

    logger.info("Shutting down Wikipedia POTD Server...")
    if scheduler is not None:
        await scheduler.stop()
    await dispose_engine()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title=constant.PROJECT_NAME,
        description="""
        Wikipedia Picture of the Day API

        Serves the featured picture of the English Wikipedia Main Page as JSON
        metadata and as PNG images, including 1-bit dithered renditions for
        e-ink displays.
        """,
        version=constant.VERSION,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(LogfireMiddleware)
    setup_exception_handlers(application)

    application.include_router(health.router, tags=["health"])
    if settings.metrics_enabled:
        application.include_router(metrics.router, tags=["metrics"])
    application.include_router(potd.router, prefix=constant.API_PREFIX, tags=["potd"])

    initialize_logfire(application, engine)
    return application


app = create_app()
