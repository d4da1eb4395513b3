"""Wikipedia Picture of the Day service.

Scrapes the featured picture of the English Wikipedia Main Page once an hour
and serves it to e-ink displays such as TRMNL.

Subpackages
-----------

- ``core``: configuration-independent building blocks (logging, metrics,
  tracing, errors, response caches, fault tolerance, database layer, I/O
  models).
- ``scraper``: page fetching, extraction of the featured picture and the
  fault tolerant scrape job.
- ``imaging``: image download, scaling, dithering and SVG rasterization.
- ``ai``: Gemini summaries of picture descriptions.
- ``server``: FastAPI application, endpoints, middleware and the background
  scheduler.
"""

__version__ = "1.0.0"
