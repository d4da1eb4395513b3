"""
Prometheus metrics endpoint.
"""

from fastapi import APIRouter, Response

from wikipedia_potd.core.metrics import metrics_payload

router = APIRouter()


@router.get(
    "/metrics",
    summary="Prometheus Metrics",
    description="Expose service metrics in the Prometheus text exposition format.",
    include_in_schema=False,
)
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)
