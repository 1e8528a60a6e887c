"""
Rendering capability used by the site scrapers.

A crawler is one rendering session: it loads a URL, exposes the loaded
page as a queryable DOM and hands out element handles that stay valid
until the session is closed. The site scraper only talks to this
interface, so the Playwright backend and the static (httpx + BeautifulSoup)
backend are interchangeable, and tests can serve fixture pages.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class NavigationError(Exception):
    """
    Raised when a page could not be loaded within the navigation timeout.

    Carries whatever content the session managed to load before failing,
    so callers can still look for block-page markers.
    """

    def __init__(self, url: str, message: str, partial_content: str = ""):
        super().__init__(f"Navigation to {url} failed: {message}")
        self.url = url
        self.partial_content = partial_content or ""


class Element(ABC):
    """Handle to one element of a rendered page."""

    @abstractmethod
    async def query_selector(self, selector: str) -> Optional['Element']:
        """First descendant matching the selector, or None."""

    @abstractmethod
    async def query_selector_all(self, selector: str) -> List['Element']:
        """All descendants matching the selector, in document order."""

    @abstractmethod
    async def inner_text(self) -> str:
        """Rendered text of the element."""

    @abstractmethod
    async def get_attribute(self, name: str) -> Optional[str]:
        """Attribute value, or None when the attribute is absent."""


class Crawler(ABC):
    """
    One rendering session.

    Usage:
        async with crawler:
            await crawler.goto(url, timeout=60.0)
            cards = await crawler.query_selector_all('.product')
    """

    @abstractmethod
    async def open(self):
        """Acquire the underlying resources (browser, HTTP client)."""

    @abstractmethod
    async def goto(self, url: str, timeout: float) -> None:
        """
        Load a URL and wait for the page to settle.

        Raises:
            NavigationError: On timeout or any navigation failure
        """

    @abstractmethod
    async def content(self) -> str:
        """HTML of the currently loaded page ('' if nothing loaded)."""

    @abstractmethod
    async def query_selector(self, selector: str) -> Optional[Element]:
        """First element of the page matching the selector, or None."""

    @abstractmethod
    async def query_selector_all(self, selector: str) -> List[Element]:
        """All elements of the page matching the selector."""

    @abstractmethod
    async def close(self):
        """Release every resource. Must never raise."""

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
