"""
Static HTML crawler using httpx and BeautifulSoup.

This crawler is for sites that serve their search results in the initial
HTML response. It's faster and more resource-efficient than the
Playwright-based crawler, but cannot run page scripts.
"""

from typing import Optional, Dict, List
from bs4 import BeautifulSoup, Tag
import httpx
import logging

from .base import Crawler, Element, NavigationError

logger = logging.getLogger(__name__)


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
)


class SoupElement(Element):
    """Element handle backed by a BeautifulSoup tag."""

    def __init__(self, tag: Tag):
        self._tag = tag

    async def query_selector(self, selector: str) -> Optional['SoupElement']:
        found = self._tag.select_one(selector)
        return SoupElement(found) if found is not None else None

    async def query_selector_all(self, selector: str) -> List['SoupElement']:
        return [SoupElement(tag) for tag in self._tag.select(selector)]

    async def inner_text(self) -> str:
        return self._tag.get_text(' ', strip=True)

    async def get_attribute(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        # Multi-valued attributes (class, rel) come back as lists
        if isinstance(value, list):
            return ' '.join(value)
        return value


class StaticCrawler(Crawler):
    """
    Rendering session for static HTML pages.

    Uses httpx for the async HTTP request and BeautifulSoup for parsing.
    One request per navigation, no retries.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the static crawler.

        Args:
            user_agent: User-Agent header sent with every request
            headers: Custom HTTP headers (override the defaults)
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self.headers = {
            'User-Agent': user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9',
            'Accept-Encoding': 'gzip, deflate',  # Some sites have issues with brotli
        }
        if headers:
            self.headers.update(headers)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._html = ''
        self._soup: Optional[BeautifulSoup] = None

    async def open(self):
        """Create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                headers=self.headers,
                transport=self._transport,
            )

    def _load_html(self, html: str):
        """Parse HTML into the queryable page."""
        self._html = html or ''
        self._soup = BeautifulSoup(self._html, 'html.parser')

    async def goto(self, url: str, timeout: float) -> None:
        """
        Fetch a URL and parse the response.

        An error status still loads the body, since block pages are
        usually served with 403/503 and are worth inspecting.
        """
        if self._client is None:
            await self.open()
        logger.debug(f"StaticCrawler fetching: {url}")

        try:
            response = await self._client.get(url, timeout=timeout)
        except httpx.HTTPError as e:
            self._load_html('')
            raise NavigationError(url, f"{type(e).__name__}: {e}")

        self._load_html(response.text)
        if response.status_code >= 400:
            raise NavigationError(url, f"HTTP {response.status_code}", response.text)

    async def content(self) -> str:
        return self._html

    async def query_selector(self, selector: str) -> Optional[SoupElement]:
        if self._soup is None:
            return None
        found = self._soup.select_one(selector)
        return SoupElement(found) if found is not None else None

    async def query_selector_all(self, selector: str) -> List[SoupElement]:
        if self._soup is None:
            return []
        return [SoupElement(tag) for tag in self._soup.select(selector)]

    async def close(self):
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            try:
                await self._client.aclose()
            except Exception as e:
                logger.warning(f"Error closing HTTP client: {e}")
        self._client = None
        self._soup = None
        self._html = ''
