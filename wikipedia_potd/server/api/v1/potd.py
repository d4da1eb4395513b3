"""
Picture of the Day Endpoints.

JSON metadata for today's or a given day's featured picture, the stored
images (original and dithered, optionally rescaled), a pre-rendered TRMNL
image and a manual scrape trigger.
"""

import datetime as dt
import re
from typing import Annotated, Optional

from fastapi import APIRouter, HTTPException, Path, Response
from fastapi.responses import PlainTextResponse

from wikipedia_potd.core.logging_config import get_logger
from wikipedia_potd.core.metrics import potd_requests_total, scraper_triggered_total
from wikipedia_potd.core.models.io import PictureOfTheDayDTO
from wikipedia_potd.server.core import constant
from wikipedia_potd.server.services.deps import PotdServiceDep, ScrapeJobDep

logger = get_logger(__name__)

router = APIRouter()

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Scaled image sides, in pixels
ImageDimension = Annotated[int, Path(gt=0, le=constant.MAX_IMAGE_DIMENSION)]

_IMAGE_RESPONSES = {
    200: {"content": {"image/png": {}}, "description": "Image bytes."},
    400: {"description": "Invalid date format"},
    404: {"description": "No picture or image data for that date"},
}


def parse_date(value: str) -> dt.date:
    """Parse a ``YYYY-MM-DD`` path parameter or fail with HTTP 400."""
    try:
        if not _DATE_PATTERN.match(value):
            raise ValueError(value)
        return dt.date.fromisoformat(value)
    except ValueError:
        logger.error(f"Invalid date format received: {value}")
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")


async def _image_response(
    service: PotdServiceDep,
    date: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
    *,
    dithered: bool = False,
) -> Response:
    day = parse_date(date)
    data = await service.get_image(day, width, height, dithered=dithered)
    if data is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return Response(content=data, media_type=service.image_service.media_type(data))


@router.get(
    "/today",
    response_model=PictureOfTheDayDTO,
    summary="Get Today's Picture",
    description="Today's featured picture, falling back to the most recent one.",
    responses={204: {"description": "No picture stored yet"}},
)
async def get_today(service: PotdServiceDep):
    """
    Get today's Picture of the Day.

    When today's picture has not been scraped yet the latest stored picture
    is returned instead.
    """
    potd_requests_total.labels(type="today").inc()
    logger.info("GET /api/potd/today")
    dto = await service.get_today()
    if dto is None:
        return Response(status_code=204)
    return dto


@router.get(
    "/today/trmnl",
    summary="Get TRMNL Image",
    description="Today's (or the latest) picture scaled to cover 800x480 and dithered to black and white.",
    responses=_IMAGE_RESPONSES,
    response_class=Response,
)
async def get_trmnl_image(service: PotdServiceDep) -> Response:
    potd_requests_total.labels(type="trmnl").inc()
    logger.info("GET /api/potd/today/trmnl")
    data = await service.get_trmnl_image()
    if data is None:
        raise HTTPException(status_code=404, detail="No picture available")
    return Response(content=data, media_type="image/png")


@router.post(
    "/scrape",
    summary="Trigger Scrape",
    description="Run the scrape job now, subject to its rate limit and circuit breaker.",
    response_class=PlainTextResponse,
    responses={
        429: {"description": "Rate limit exceeded"},
        502: {"description": "Scraping failed"},
        503: {"description": "Circuit breaker open"},
    },
)
async def trigger_scrape(job: ScrapeJobDep) -> PlainTextResponse:
    """
    Trigger a scrape.

    Errors are mapped to HTTP statuses by the domain exception handlers.
    """
    scraper_triggered_total.inc()
    logger.info("POST /api/potd/scrape")
    await job.run()
    return PlainTextResponse("Scrape triggered")


@router.get(
    "/{date}",
    response_model=PictureOfTheDayDTO,
    summary="Get Picture By Date",
    description="The featured picture of a given day (YYYY-MM-DD).",
    responses={204: {"description": "No picture for that date"}, 400: {"description": "Invalid date format"}},
)
async def get_by_date(date: str, service: PotdServiceDep):
    potd_requests_total.labels(type="date").inc()
    day = parse_date(date)
    logger.info(f"GET /api/potd/{day}")
    dto = await service.get_by_date(day)
    if dto is None:
        return Response(status_code=204)
    return dto


@router.get("/{date}/image", summary="Get Image", responses=_IMAGE_RESPONSES, response_class=Response)
async def get_image(date: str, service: PotdServiceDep) -> Response:
    return await _image_response(service, date)


@router.get("/{date}/image/dithered", summary="Get Dithered Image", responses=_IMAGE_RESPONSES, response_class=Response)
async def get_dithered_image(date: str, service: PotdServiceDep) -> Response:
    return await _image_response(service, date, dithered=True)


@router.get("/{date}/{width}/image", summary="Get Image Scaled To Width", responses=_IMAGE_RESPONSES, response_class=Response)
async def get_image_width(date: str, width: ImageDimension, service: PotdServiceDep) -> Response:
    return await _image_response(service, date, width)


@router.get(
    "/{date}/{width}/image/dithered",
    summary="Get Dithered Image Scaled To Width",
    responses=_IMAGE_RESPONSES,
    response_class=Response,
)
async def get_dithered_image_width(date: str, width: ImageDimension, service: PotdServiceDep) -> Response:
    return await _image_response(service, date, width, dithered=True)


@router.get(
    "/{date}/{width}/{height}/image",
    summary="Get Image Scaled To Size",
    responses=_IMAGE_RESPONSES,
    response_class=Response,
)
async def get_image_width_height(
    date: str, width: ImageDimension, height: ImageDimension, service: PotdServiceDep
) -> Response:
    return await _image_response(service, date, width, height)


@router.get(
    "/{date}/{width}/{height}/image/dithered",
    summary="Get Dithered Image Scaled To Size",
    responses=_IMAGE_RESPONSES,
    response_class=Response,
)
async def get_dithered_image_width_height(
    date: str, width: ImageDimension, height: ImageDimension, service: PotdServiceDep
) -> Response:
    return await _image_response(service, date, width, height, dithered=True)
