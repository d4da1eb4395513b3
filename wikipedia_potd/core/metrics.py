"""
Prometheus metrics configuration
"""
import os

from prometheus_client import (CONTENT_TYPE_LATEST, CollectorRegistry, Counter,
                               Gauge, Histogram, Summary, generate_latest)
from prometheus_client.multiprocess import MultiProcessCollector
from prometheus_client.registry import REGISTRY

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

# ============================================================================
# Picture of the Day API Metrics
# ============================================================================

potd_requests_total = Counter(
    'potd_requests_total',
    'Total number of Picture of the Day API requests',
    ['type']  # type: 'today', 'date', 'trmnl'
)

# ============================================================================
# Scraper Metrics
# ============================================================================

scraper_triggered_total = Counter(
    'scraper_triggered_total',
    'Total number of manually triggered scrapes'
)

scraper_execution_total = Counter(
    'scraper_execution_total',
    'Total number of scraper executions',
    ['result']  # result: 'success', 'skipped', 'failure'
)

scraper_duration_seconds = Histogram(
    'scraper_duration_seconds',
    'Scraper execution duration in seconds',
    ['result'],
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0)
)

scraper_last_success_timestamp = Gauge(
    'scraper_last_success_timestamp',
    'Epoch milliseconds of the last successful scrape'
)

# ============================================================================
# Image Metrics
# ============================================================================

image_download_size_bytes = Summary(
    'image_download_size_bytes',
    'Size of downloaded images in bytes'
)


def metrics_payload() -> tuple[bytes, str]:
    """
    Render every registered metric in the Prometheus text format.

    Returns:
        The encoded payload and its content type.
    """
    registry = REGISTRY
    if os.environ.get('PROMETHEUS_MULTIPROC_DIR'):
        registry = CollectorRegistry()
        MultiProcessCollector(registry)
    return generate_latest(registry), CONTENT_TYPE_LATEST
