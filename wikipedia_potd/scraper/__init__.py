"""Wikipedia Main Page scraping."""

from .job import ScrapeJob, get_scrape_job
from .page_fetcher import WikipediaPageFetcher
from .scraper import ScrapeOutcome, WikipediaScraper

__all__ = ["ScrapeJob", "ScrapeOutcome", "WikipediaPageFetcher", "WikipediaScraper", "get_scrape_job"]
