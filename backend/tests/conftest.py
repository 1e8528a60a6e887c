"""
Pytest configuration and fixtures for the price compare tests.

Pages are served from in-memory HTML through FixtureCrawler, so no test
touches the network or launches a browser.
"""

import pytest
from fastapi.testclient import TestClient

from scrapers.base import SiteConfig, LinkMode, PriceCleanRule, ScraperType
from scrapers.crawlers.base import NavigationError
from scrapers.crawlers.static import StaticCrawler
from scrapers.manager import ScraperManager


EMPTY_PAGE = "<html><body><p>Nothing here</p></body></html>"


class FixtureCrawler(StaticCrawler):
    """
    StaticCrawler serving pages from a dict instead of HTTP.

    Args:
        pages: URL -> HTML
        fail_navigation: URLs whose navigation fails after loading their HTML
    """

    def __init__(self, pages, fail_navigation=()):
        super().__init__()
        self.pages = pages
        self.fail_navigation = set(fail_navigation)
        self.visited = []
        self.opened = False
        self.closed = False

    async def open(self):
        self.opened = True

    async def goto(self, url, timeout):
        self.visited.append(url)
        html = self.pages.get(url, EMPTY_PAGE)
        self._load_html(html)
        if url in self.fail_navigation:
            raise NavigationError(url, f"Timeout {timeout * 1000:.0f}ms exceeded", html)

    async def close(self):
        self.closed = True
        await super().close()


class FixtureCrawlerFactory:
    """Crawler factory that records every crawler it hands out."""

    def __init__(self, pages, fail_navigation=()):
        self.pages = pages
        self.fail_navigation = fail_navigation
        self.crawlers = []

    def __call__(self, config):
        crawler = FixtureCrawler(self.pages, self.fail_navigation)
        self.crawlers.append(crawler)
        return crawler


def make_site(name, base_url, **overrides):
    """SiteConfig with simple fixture selectors."""
    options = dict(
        name=name,
        short_name=name.upper().replace(' ', '-'),
        base_url=base_url,
        search_path='/search?q={query}',
        product_card_selectors=('div.card', 'li.result'),
        title_selectors=('h2.title', '.name'),
        link_selectors=('a.product-link', 'a'),
        price_selectors=('span.price', '.cost'),
        currency='USD',
        price_clean_rule=PriceCleanRule.DIGITS_AND_DOT,
        relative_links=True,
        link_mode=LinkMode.GENERIC,
        scraper_type=ScraperType.STATIC,
    )
    options.update(overrides)
    return SiteConfig(**options)


def card(title=None, price=None, href=None, tag='div', cls='card', extra_attrs=''):
    """HTML for one product card; omitted fields are left out of the markup."""
    parts = [f'<{tag} class="{cls}" {extra_attrs}>']
    if title is not None:
        parts.append(f'<h2 class="title">{title}</h2>')
    if href is not None:
        parts.append(f'<a class="product-link" href="{href}">View</a>')
    if price is not None:
        parts.append(f'<span class="price">{price}</span>')
    parts.append(f'</{tag}>')
    return ''.join(parts)


def page(*cards):
    return f"<html><body><div id='results'>{''.join(cards)}</div></body></html>"


@pytest.fixture
def alpha_site():
    return make_site('Alpha Mart', 'https://alpha.example')


@pytest.fixture
def beta_site():
    return make_site('Beta Store', 'https://beta.example')


@pytest.fixture
def gamma_site():
    return make_site('Gamma Shop', 'https://gamma.example')


@pytest.fixture
def make_manager():
    """Build a ScraperManager over a fixture site table and page set."""
    def _make(sites, pages, fail_navigation=()):
        factory = FixtureCrawlerFactory(pages, fail_navigation)
        manager = ScraperManager(crawler_factory=factory, navigation_timeout=5.0, sites=sites)
        return manager, factory
    return _make


@pytest.fixture(scope="function")
def client():
    """Create a test client; tests override get_manager as needed."""
    from api.main import app

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
