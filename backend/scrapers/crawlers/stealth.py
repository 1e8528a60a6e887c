"""
Stealth crawler for JavaScript-rendered retail sites.

Uses Playwright with enhanced stealth features so search result pages
render the way they do for a regular visitor. This includes realistic
browser fingerprints, proper headers and a hidden webdriver flag.

One StealthCrawler is one browser: it is launched for a single scrape and
closed right after, never shared between sites.
"""

import asyncio
from typing import Optional, List
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    ElementHandle,
    Error as PlaywrightError,
)
import logging

from .base import Crawler, Element, NavigationError
from .static import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


LAUNCH_ARGS = [
    '--disable-blink-features=AutomationControlled',
    '--disable-dev-shm-usage',
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-gpu',
]

# Hide the most common automation indicators
STEALTH_INIT_SCRIPT = """
    Object.defineProperty(navigator, 'webdriver', {
        get: () => undefined
    });

    Object.defineProperty(navigator, 'plugins', {
        get: () => [1, 2, 3, 4, 5]
    });

    Object.defineProperty(navigator, 'languages', {
        get: () => ['en-US', 'en']
    });
"""


class BrowserElement(Element):
    """Element handle backed by a live Playwright ElementHandle."""

    def __init__(self, handle: ElementHandle):
        self._handle = handle

    async def query_selector(self, selector: str) -> Optional['BrowserElement']:
        found = await self._handle.query_selector(selector)
        return BrowserElement(found) if found is not None else None

    async def query_selector_all(self, selector: str) -> List['BrowserElement']:
        return [BrowserElement(h) for h in await self._handle.query_selector_all(selector)]

    async def inner_text(self) -> str:
        text = await self._handle.evaluate("el => el.innerText")
        return text or ''

    async def get_attribute(self, name: str) -> Optional[str]:
        return await self._handle.evaluate("(el, attr) => el.getAttribute(attr)", name)


class StealthCrawler(Crawler):
    """
    Stealth crawler using Playwright Chromium.

    Features:
    - Realistic browser fingerprint (viewport, locale, user agent)
    - Proper headers
    - Hidden automation flags
    - Waits for the network to settle so client-rendered results exist
    """

    def __init__(
        self,
        headless: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        locale: str = 'en-US',
    ):
        """
        Initialize the stealth crawler.

        Args:
            headless: Run browser in headless mode
            user_agent: User-Agent of the browser context
            locale: Browser locale
        """
        self.headless = headless
        self.user_agent = user_agent
        self.locale = locale
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def open(self):
        """Launch the browser, create the context and a page."""
        if self._page is not None:
            return

        self._playwright = await async_playwright().start()

        logger.debug("Launching Chromium browser...")
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=LAUNCH_ARGS,
            handle_sigint=False,
            handle_sigterm=False,
            handle_sighup=False,
        )

        self._context = await self._browser.new_context(
            viewport={'width': 1920, 'height': 1080},
            user_agent=self.user_agent,
            locale=self.locale,
            ignore_https_errors=True,
            extra_http_headers={
                'Accept-Language': 'en-US,en;q=0.9',
                'DNT': '1',
                'Upgrade-Insecure-Requests': '1',
            }
        )
        await self._context.add_init_script(STEALTH_INIT_SCRIPT)
        self._page = await self._context.new_page()

    async def goto(self, url: str, timeout: float) -> None:
        """
        Navigate and wait until the network is idle.

        Raises:
            NavigationError: On timeout or navigation failure
        """
        if self._page is None:
            await self.open()

        try:
            await self._page.goto(
                url,
                wait_until='networkidle',
                timeout=int(timeout * 1000)
            )
        except PlaywrightError as e:
            # TimeoutError is a subclass of Error; the page may still hold partial content
            raise NavigationError(url, (str(e).splitlines() or [type(e).__name__])[0], await self.content())

    async def content(self) -> str:
        if self._page is None:
            return ''
        try:
            return await self._page.content()
        except PlaywrightError as e:
            logger.debug(f"Could not read page content: {e}")
            return ''

    async def query_selector(self, selector: str) -> Optional[BrowserElement]:
        found = await self._page.query_selector(selector)
        return BrowserElement(found) if found is not None else None

    async def query_selector_all(self, selector: str) -> List[BrowserElement]:
        return [BrowserElement(h) for h in await self._page.query_selector_all(selector)]

    async def close(self):
        """Clean up browser resources with timeouts to prevent hanging."""
        cleanup_timeout = 2.0  # 2 second timeout per cleanup operation

        steps = [
            ('page', self._page, 'close'),
            ('context', self._context, 'close'),
            ('browser', self._browser, 'close'),
            ('playwright', self._playwright, 'stop'),
        ]
        for label, resource, method in steps:
            if resource is None:
                continue
            try:
                await asyncio.wait_for(getattr(resource, method)(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"{label.capitalize()} {method} timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error during {label} {method}: {e}")

        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None
