"""
Scraper Manager - orchestrates the site scrapers of a country.

Fans one query out to every configured site concurrently, isolates
per-site failures and merges the listings into one price-sorted result.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import logging

from .base import (
    AllSitesFailedError,
    Colors,
    NoResultsError,
    ProductListing,
    ScrapeOutcome,
    ScraperType,
    SiteConfig,
)
from .config import COUNTRY_SITES, get_country_sites
from .crawlers.base import Crawler
from .crawlers.static import DEFAULT_USER_AGENT, StaticCrawler
from .crawlers.stealth import StealthCrawler
from .site_scraper import DEFAULT_NAVIGATION_TIMEOUT, SiteScraper

logger = logging.getLogger(__name__)


CrawlerFactory = Callable[[SiteConfig], Crawler]


def create_crawler(
    config: SiteConfig,
    headless: bool = True,
    user_agent: str = DEFAULT_USER_AGENT
) -> Crawler:
    """
    Create a fresh crawler matching the site's scraper type.

    Args:
        config: Site configuration
        headless: Run the browser headless (JavaScript sites)
        user_agent: User-Agent for requests

    Returns:
        Unopened crawler owned by a single scrape
    """
    if config.scraper_type == ScraperType.STATIC:
        return StaticCrawler(user_agent=user_agent)
    return StealthCrawler(headless=headless, user_agent=user_agent)


@dataclass
class SearchResult:
    """Merged listings of a search plus the outcome of every site."""
    country: str
    query: str
    listings: List[ProductListing] = field(default_factory=list)
    outcomes: List[ScrapeOutcome] = field(default_factory=list)

    @property
    def failures(self) -> Dict[str, str]:
        return {o.site: o.status.value for o in self.outcomes if not o.is_success}

    def to_list(self) -> List[Dict]:
        return [listing.to_dict() for listing in self.listings]


class ScraperManager:
    """
    Manages and orchestrates the site scrapers.

    Usage:
        manager = ScraperManager()
        result = await manager.search('US', 'iPhone 128GB')
        for listing in result.listings:
            print(listing.price, listing.source_site)
    """

    def __init__(
        self,
        crawler_factory: Optional[CrawlerFactory] = None,
        navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT,
        sites: Optional[Dict[str, List[SiteConfig]]] = None,
    ):
        """
        Initialize the scraper manager.

        Args:
            crawler_factory: Creates one crawler per site scrape (defaults to create_crawler)
            navigation_timeout: Navigation timeout in seconds for every site
            sites: Country -> site table (defaults to COUNTRY_SITES)
        """
        self.crawler_factory = crawler_factory or create_crawler
        self.navigation_timeout = navigation_timeout
        self.sites = COUNTRY_SITES if sites is None else sites

    def get_scraper(self, config: SiteConfig) -> SiteScraper:
        """Get a scraper instance for a site."""
        return SiteScraper(config, self.crawler_factory, self.navigation_timeout)

    async def scrape_site(self, config: SiteConfig, query: str) -> ScrapeOutcome:
        """Run scraper for a single site."""
        return await self.get_scraper(config).run(query)

    async def scrape_all(self, configs: List[SiteConfig], query: str) -> List[ScrapeOutcome]:
        """
        Run scrapers for several sites concurrently.

        Returns:
            One outcome per config, in config order
        """
        tasks = [self.scrape_site(config, query) for config in configs]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes = []
        for config, result in zip(configs, results):
            if isinstance(result, Exception):
                logger.error(f"Scraper failed for {config.name}: {result}")
                outcomes.append(ScrapeOutcome.scrape_error(config.name, f"{type(result).__name__}: {result}"))
            else:
                outcomes.append(result)
        return outcomes

    async def search(self, country: str, query: str) -> SearchResult:
        """
        Search every site configured for a country.

        Args:
            country: Country code (case-insensitive)
            query: Free-text product query

        Returns:
            SearchResult with listings sorted ascending by price

        Raises:
            UnknownCountryError: No sites configured for the country
            AllSitesFailedError: No listings and at least one site failed
            NoResultsError: No listings and no site failed
        """
        configs = get_country_sites(country, self.sites)
        country = country.strip().upper()
        logger.info(f"Received search request: Country={country}, Query=\"{query}\" ({len(configs)} sites)")

        outcomes = await self.scrape_all(configs, query)

        listings: List[ProductListing] = []
        for outcome in outcomes:
            if outcome.is_success:
                listings.extend(outcome.listings)
            else:
                logger.info(f"   {Colors.yellow(outcome.status.value)} {outcome.describe(query)}")

        # Stable sort: equal prices keep site order
        listings.sort(key=lambda listing: listing.price)

        logger.info(f"Total results found for \"{query}\" in {country}: {len(listings)}")

        if listings:
            return SearchResult(country=country, query=query, listings=listings, outcomes=outcomes)
        if any(not o.is_success for o in outcomes):
            raise AllSitesFailedError(query, outcomes)
        raise NoResultsError(country, query)


# Convenience function for standalone usage

async def search(country: str, query: str) -> SearchResult:
    """Search a country's sites with the default crawlers."""
    manager = ScraperManager()
    return await manager.search(country, query)
