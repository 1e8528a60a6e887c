"""
Base data structures for the price comparison scrapers.

This module defines the site description model, the normalized listing,
the typed per-site scrape outcome and the search errors shared by the
site scraper, the manager and the API.
"""

import re
from typing import List, Dict, Optional, Tuple, Sequence
from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone
from urllib.parse import quote


# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'

    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def yellow(text):
        return f"{Colors.YELLOW}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"


class ScraperType(Enum):
    """Types of scrapers based on site requirements."""
    STATIC = "static"           # httpx + BeautifulSoup (fast)
    JAVASCRIPT = "javascript"   # Playwright (JS rendering)


class LinkMode(Enum):
    """How the product link is derived from a listing container."""
    GENERIC = "generic"             # href of the first matching link selector
    AMAZON_ASIN = "amazon_asin"     # /dp/<data-asin> built from the container


class PriceCleanRule(Enum):
    """Character class kept from raw price text before parsing."""
    DIGITS = "digits"
    DIGITS_AND_DOT = "digits_and_dot"

    @property
    def pattern(self) -> 're.Pattern':
        """Regex matching every character to strip."""
        if self is PriceCleanRule.DIGITS:
            return re.compile(r'[^0-9]')
        return re.compile(r'[^0-9.]')


# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class SiteConfig:
    """Scraping recipe for one retail site."""
    name: str                                   # Display name, e.g. 'Amazon US'
    short_name: str                             # Logger key, e.g. 'AMZ-US'
    base_url: str                               # Scheme + host, no trailing slash
    search_path: str                            # Path template with {query}
    product_card_selectors: Tuple[str, ...]     # First selector with matches wins
    title_selectors: Tuple[str, ...]
    link_selectors: Tuple[str, ...]
    price_selectors: Tuple[str, ...]
    currency: str
    price_clean_rule: PriceCleanRule = PriceCleanRule.DIGITS_AND_DOT
    relative_links: bool = False                # Resolve links against base_url
    link_mode: LinkMode = LinkMode.GENERIC
    scraper_type: ScraperType = ScraperType.JAVASCRIPT
    enabled: bool = True

    def __post_init__(self):
        if '{query}' not in self.search_path:
            raise ValueError(f"{self.name}: search_path must contain '{{query}}'")
        for attr in ('product_card_selectors', 'title_selectors', 'link_selectors', 'price_selectors'):
            selectors = getattr(self, attr)
            if isinstance(selectors, str):
                raise ValueError(f"{self.name}: {attr} must be a sequence of selectors, not a string")
            # Freeze lists passed in by callers
            object.__setattr__(self, attr, tuple(selectors))
            if not selectors:
                raise ValueError(f"{self.name}: {attr} must not be empty")

    def build_search_url(self, query: str) -> str:
        """Search page URL for a query, URL-encoded like encodeURIComponent."""
        encoded = quote(query, safe=_URI_COMPONENT_SAFE)
        return f"{self.base_url}{self.search_path.replace('{query}', encoded)}"


@dataclass(frozen=True)
class ProductListing:
    """One normalized product listing with a valid price."""
    product_name: str
    link: str
    price: float
    currency: str
    source_site: str
    parameter1: str = ''

    def to_dict(self) -> Dict:
        return {
            'productName': self.product_name,
            'link': self.link,
            'price': self.price,
            'currency': self.currency,
            'website_name': self.source_site,
            'parameter1': self.parameter1,
        }


class ScrapeStatus(Enum):
    """Why a site scrape did or did not yield listings."""
    SUCCESS = "success"
    NO_PRODUCTS_FOUND = "no_products_found"
    BOT_DEFENSE_DETECTED = "captcha_detected"
    SCRAPE_ERROR = "scrape_error"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ScrapeOutcome:
    """Terminal result of scraping one site for one query."""
    site: str
    status: ScrapeStatus
    listings: Tuple[ProductListing, ...] = ()
    detail: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: datetime = field(default_factory=_now)

    @classmethod
    def success(cls, site: str, listings: Sequence[ProductListing], **kwargs) -> 'ScrapeOutcome':
        return cls(site, ScrapeStatus.SUCCESS, listings=tuple(listings), **kwargs)

    @classmethod
    def no_products_found(cls, site: str, **kwargs) -> 'ScrapeOutcome':
        return cls(site, ScrapeStatus.NO_PRODUCTS_FOUND, **kwargs)

    @classmethod
    def bot_defense_detected(cls, site: str, detail: Optional[str] = None, **kwargs) -> 'ScrapeOutcome':
        return cls(site, ScrapeStatus.BOT_DEFENSE_DETECTED, detail=detail, **kwargs)

    @classmethod
    def scrape_error(cls, site: str, detail: str, **kwargs) -> 'ScrapeOutcome':
        return cls(site, ScrapeStatus.SCRAPE_ERROR, detail=detail, **kwargs)

    @property
    def is_success(self) -> bool:
        return self.status is ScrapeStatus.SUCCESS

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at and self.started_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def describe(self, query: str) -> str:
        """Human-readable line for the aggregated failure message."""
        if self.status is ScrapeStatus.BOT_DEFENSE_DETECTED:
            return f"CAPTCHA/Bot detected on {self.site}."
        if self.status is ScrapeStatus.NO_PRODUCTS_FOUND:
            return f'No products found on {self.site} for "{query}".'
        if self.status is ScrapeStatus.SCRAPE_ERROR:
            return f"Failed to scrape {self.site} (scrape error: {self.detail or 'unknown error'})."
        return f"Found {len(self.listings)} products on {self.site}."

    def to_dict(self) -> Dict:
        return {
            'site': self.site,
            'status': self.status.value,
            'listings': len(self.listings),
            'detail': self.detail,
            'duration_seconds': self.duration_seconds,
        }


# ============================================================
# SEARCH ERRORS
# ============================================================

class PriceSearchError(Exception):
    """Base class for search failures surfaced to the caller."""


class UnknownCountryError(PriceSearchError):
    """No site configuration exists for the requested country."""

    def __init__(self, country: str):
        super().__init__(f"No scraping configurations found for country: {country}.")
        self.country = country


class AllSitesFailedError(PriceSearchError):
    """Every site failed or was empty, and at least one reported a failure."""

    def __init__(self, query: str, outcomes: List[ScrapeOutcome]):
        self.query = query
        self.outcomes = outcomes
        self.failures: Dict[str, str] = {
            o.site: o.status.value for o in outcomes if not o.is_success
        }
        lines = [o.describe(query) for o in outcomes if not o.is_success]
        super().__init__(f"Scraping completed with issues: {'; '.join(lines)}")


class NoResultsError(PriceSearchError):
    """Every site succeeded but none produced a listing."""

    def __init__(self, country: str, query: str):
        super().__init__(f'No products found for "{query}" in {country} across all configured sites.')
        self.country = country
        self.query = query
