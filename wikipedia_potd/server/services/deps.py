"""
Service Dependencies.

Annotated FastAPI dependencies for the singletons used by the endpoints.
"""

from typing import Annotated

from fastapi import Depends

from wikipedia_potd.scraper.job import ScrapeJob, get_scrape_job
from wikipedia_potd.server.services.potd_service import PotdService, get_potd_service

PotdServiceDep = Annotated[PotdService, Depends(get_potd_service)]
ScrapeJobDep = Annotated[ScrapeJob, Depends(get_scrape_job)]
