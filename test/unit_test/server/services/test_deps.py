"""Unit tests for server services dependencies.

Tests verify that the Annotated dependencies resolve through the global
service getters.
"""

from wikipedia_potd.scraper.job import ScrapeJob, get_scrape_job
from wikipedia_potd.server.services.deps import PotdServiceDep, ScrapeJobDep
from wikipedia_potd.server.services.potd_service import PotdService, get_potd_service


class TestPotdServiceDep:
    def test_is_annotated_with_depends(self):
        assert PotdServiceDep.__origin__ is PotdService
        assert PotdServiceDep.__metadata__[0].dependency is get_potd_service


class TestScrapeJobDep:
    def test_is_annotated_with_depends(self):
        assert ScrapeJobDep.__origin__ is ScrapeJob
        assert ScrapeJobDep.__metadata__[0].dependency is get_scrape_job
