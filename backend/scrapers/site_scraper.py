"""
Site scraper: one rendering session, one site, one query.

Drives a crawler through navigation, bot-defense detection, container
enumeration and extraction, and reports a typed ScrapeOutcome. Nothing
raised inside a run escapes it.
"""

from enum import Enum
from typing import Callable, List, Optional
from datetime import datetime, timezone
import logging

from .base import Colors, LinkMode, ProductListing, ScrapeOutcome, SiteConfig
from .crawlers.base import Crawler, Element, NavigationError
from .utils.detection import detect_bot_defense, has_block_page_markers
from .utils.extractors import extract_attribute, extract_text, find_containers
from .utils.normalizers import normalize_listing


DEFAULT_NAVIGATION_TIMEOUT = 60.0

# Vendor link modes: (container attribute, URL template)
VENDOR_LINK_TEMPLATES = {
    LinkMode.AMAZON_ASIN: ('data-asin', '{base_url}/dp/{value}'),
}


class ScrapeState(Enum):
    """Steps of a single site scrape."""
    INIT = "init"
    NAVIGATING = "navigating"
    NAVIGATION_FAILED = "navigation_failed"
    LOADED = "loaded"
    DETECTING_BOT_DEFENSE = "detecting_bot_defense"
    BLOCKED = "blocked"
    CLEAR = "clear"
    ENUMERATING_CONTAINERS = "enumerating_containers"
    NO_CONTAINERS = "no_containers"
    CONTAINERS_FOUND = "containers_found"
    EXTRACTING_LISTINGS = "extracting_listings"
    DONE = "done"
    FAILED = "failed"


class SiteScraper:
    """
    Scrapes the first result page of one site.

    Usage:
        scraper = SiteScraper(config, crawler_factory)
        outcome = await scraper.run('iPhone 128GB')
    """

    def __init__(
        self,
        config: SiteConfig,
        crawler_factory: Callable[[SiteConfig], Crawler],
        navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT,
    ):
        """
        Initialize the scraper.

        Args:
            config: Site configuration
            crawler_factory: Creates a fresh, unopened crawler for this site
            navigation_timeout: Upper bound in seconds for the page to settle
        """
        self.config = config
        self.crawler_factory = crawler_factory
        self.navigation_timeout = navigation_timeout
        self.state = ScrapeState.INIT
        self.logger = logging.getLogger(f"scraper.{config.short_name}")

    def _enter(self, state: ScrapeState):
        self.logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state

    async def run(self, query: str) -> ScrapeOutcome:
        """
        Main entry point - scrape the site for one query.

        1. Navigate to the search page
        2. Check for CAPTCHA / block pages
        3. Locate product cards
        4. Extract and normalize each card

        Returns:
            ScrapeOutcome for this site (never raises)
        """
        started_at = datetime.now(timezone.utc)
        site = self.config.name
        self.state = ScrapeState.INIT
        crawler: Optional[Crawler] = None

        try:
            url = self.config.build_search_url(query)
            self.logger.info(f"[{site}] Starting scrape for: \"{query}\"")

            crawler = self.crawler_factory(self.config)
            await crawler.open()

            # Step 1: Navigate
            self._enter(ScrapeState.NAVIGATING)
            try:
                await crawler.goto(url, timeout=self.navigation_timeout)
            except NavigationError as e:
                self._enter(ScrapeState.NAVIGATION_FAILED)
                self.logger.error(f"[{site}] {e}")
                if has_block_page_markers(e.partial_content):
                    self.logger.warning(f"[{site}] {Colors.yellow('Block page')} after navigation failure on {url}")
                    return ScrapeOutcome.bot_defense_detected(site, str(e), started_at=started_at)
                return ScrapeOutcome.scrape_error(site, str(e), started_at=started_at)
            self._enter(ScrapeState.LOADED)

            # Step 2: Bot defense
            self._enter(ScrapeState.DETECTING_BOT_DEFENSE)
            if await detect_bot_defense(crawler):
                self._enter(ScrapeState.BLOCKED)
                self.logger.warning(f"[{site}] {Colors.yellow('Potential CAPTCHA/Bot detected')} on {url}")
                return ScrapeOutcome.bot_defense_detected(site, f"Bot defense detected on {url}", started_at=started_at)
            self._enter(ScrapeState.CLEAR)

            # Step 3: Product cards
            self._enter(ScrapeState.ENUMERATING_CONTAINERS)
            selector, containers = await find_containers(crawler, self.config.product_card_selectors)
            if not containers:
                self._enter(ScrapeState.NO_CONTAINERS)
                self.logger.warning(f"[{site}] No product cards found for query \"{query}\" with any provided selector")
                return ScrapeOutcome.no_products_found(site, started_at=started_at)
            self._enter(ScrapeState.CONTAINERS_FOUND)
            self.logger.info(f"[{site}] Found {len(containers)} product cards using selector: {selector}")

            # Step 4: Extract
            self._enter(ScrapeState.EXTRACTING_LISTINGS)
            listings = await self.extract_listings(containers, query)

            self._enter(ScrapeState.DONE)
            self.logger.info(f"[{site}] {Colors.green(f'Found {len(listings)} relevant items')}")
            return ScrapeOutcome.success(site, listings, started_at=started_at)

        except Exception as e:
            self._enter(ScrapeState.FAILED)
            self.logger.error(f"[{site}] {Colors.red('Critical error during scraping')}: {e}")
            return ScrapeOutcome.scrape_error(site, f"{type(e).__name__}: {e}", started_at=started_at)

        finally:
            if crawler is not None:
                await crawler.close()

    async def extract_listings(self, containers: List[Element], query: str) -> List[ProductListing]:
        """Extract every container, skipping candidates that fail normalization."""
        listings = []
        for container in containers:
            title = await extract_text(container, self.config.title_selectors)
            price_text = await extract_text(container, self.config.price_selectors)
            link = await self.resolve_link(container)

            listing = normalize_listing(title, price_text, link, self.config, query)
            if listing is not None:
                listings.append(listing)
        return listings

    async def resolve_link(self, container: Element) -> Optional[str]:
        """
        Link for one container according to the site's link mode.

        Vendor modes build the URL from a product identifier attribute on
        the container and fall back to the generic link selectors.
        """
        vendor = VENDOR_LINK_TEMPLATES.get(self.config.link_mode)
        if vendor is not None:
            attribute, template = vendor
            value = await container.get_attribute(attribute)
            if value:
                return template.format(base_url=self.config.base_url, value=value)

        return await extract_attribute(container, self.config.link_selectors, 'href')
