"""
Multi-site price comparison scrapers.

This package provides:
- Declarative retail site configurations grouped by country
- A per-site scraper with ordered selector fallback and bot-defense detection
- A manager that searches all sites of a country concurrently
"""

from .base import (
    SiteConfig,
    ScraperType,
    LinkMode,
    PriceCleanRule,
    ProductListing,
    ScrapeStatus,
    ScrapeOutcome,
    PriceSearchError,
    UnknownCountryError,
    AllSitesFailedError,
    NoResultsError,
)
from .config import COUNTRY_SITES, get_country_sites, list_countries
from .site_scraper import SiteScraper
from .manager import ScraperManager, SearchResult, create_crawler

__all__ = [
    'SiteConfig',
    'ScraperType',
    'LinkMode',
    'PriceCleanRule',
    'ProductListing',
    'ScrapeStatus',
    'ScrapeOutcome',
    'PriceSearchError',
    'UnknownCountryError',
    'AllSitesFailedError',
    'NoResultsError',
    'COUNTRY_SITES',
    'get_country_sites',
    'list_countries',
    'SiteScraper',
    'ScraperManager',
    'SearchResult',
    'create_crawler',
]
