"""
Site configurations for every supported country.

Each retail site has a SiteConfig that defines:
- Base URL and search path template
- Ordered selector fallbacks for product cards, titles, links and prices
- Currency, price cleaning rule and link handling
"""

from typing import Dict, Iterator, List, Tuple

from .base import SiteConfig, LinkMode, PriceCleanRule, UnknownCountryError


# Amazon search results share markup across storefronts
AMAZON_CARD_SELECTORS = ('div[data-component-type="s-search-result"][data-cel-widget]',)
AMAZON_TITLE_SELECTORS = ('h2 a span', '.a-size-medium')
AMAZON_LINK_SELECTORS = (
    'h2 a.a-link-normal',
    'a.a-link-normal.s-underline-text.s-underline-link-text.s-link-style.a-text-normal',
)
AMAZON_PRICE_SELECTORS = ('.a-price .a-offscreen', '.a-price-whole', '.a-color-price')


# ============================================================
# SITE CONFIGURATIONS
# ============================================================

COUNTRY_SITES: Dict[str, List[SiteConfig]] = {
    # ========== UNITED STATES ==========
    'US': [
        # Apple search rarely lists prices; kept for completeness
        SiteConfig(
            name='Apple US',
            short_name='APPLE-US',
            base_url='https://www.apple.com',
            search_path='/us/search/{query}',
            product_card_selectors=('div.as-search-result', 'div.rf-search-result'),
            title_selectors=('h3.as-search-result-title', '.rf-search-result-title'),
            link_selectors=('a.as-search-result-link', '.rf-search-result-link'),
            price_selectors=('.as-product-price', '.rf-price'),
            currency='USD',
        ),
        SiteConfig(
            name='Amazon US',
            short_name='AMZ-US',
            base_url='https://www.amazon.com',
            search_path='/s?k={query}',
            product_card_selectors=AMAZON_CARD_SELECTORS,
            title_selectors=AMAZON_TITLE_SELECTORS,
            link_selectors=AMAZON_LINK_SELECTORS,
            price_selectors=AMAZON_PRICE_SELECTORS,
            currency='USD',
            link_mode=LinkMode.AMAZON_ASIN,
        ),
        SiteConfig(
            name='Best Buy US',
            short_name='BBY-US',
            base_url='https://www.bestbuy.com',
            search_path='/site/searchpage.jsp?st={query}',
            product_card_selectors=('.sku-item', '.list-item'),
            title_selectors=('.sku-header > a', '.product-title'),
            link_selectors=('.sku-header > a', '.product-title a'),
            price_selectors=('.priceView-hero-price span[aria-hidden="true"]', '.price-box__price'),
            currency='USD',
        ),
        SiteConfig(
            name='Walmart US',
            short_name='WMT-US',
            base_url='https://www.walmart.com',
            search_path='/search?q={query}',
            product_card_selectors=(
                'div.mb0.ph0.pb0.ph1.bb.brdr-light-gray.flex.flex-wrap.w-100.flex-row.justify-content-start.items-center',
                '.sans-serif.dark-gray.relative.flex.flex-column.w-100.h-100',
            ),
            title_selectors=('a.product-title-link.line-clamp-2', 'a[data-automation-id="product-title"]'),
            link_selectors=('a.product-title-link.line-clamp-2', 'a[data-automation-id="product-title"]'),
            price_selectors=('.price-group', '.f6.f5-l.lh-copy.dark-gray.fw4.mb1'),
            currency='USD',
        ),
        SiteConfig(
            name='Target US',
            short_name='TGT-US',
            base_url='https://www.target.com',
            search_path='/s?searchTerm={query}',
            product_card_selectors=('.styles__StyledProductCard-sc-1g1zjtx-0', 'div[data-test="product-card"]'),
            title_selectors=('h2[data-test="product-title"]', '.styles__StyledTitle-sc-1g1zjtx-3'),
            link_selectors=('a[data-test="product-title-link"]', 'a[data-test="product-card-link"]'),
            price_selectors=('.styles__PriceText-sc-1g1zjtx-6', 'div[data-test="product-price"] span'),
            currency='USD',
            relative_links=True,
        ),
    ],

    # ========== INDIA ==========
    'IN': [
        SiteConfig(
            name='Flipkart IN',
            short_name='FK-IN',
            base_url='https://www.flipkart.com',
            search_path='/search?q={query}',
            product_card_selectors=('div[data-id][data-marketplace="FLIPKART"]', '._1AtVbE'),
            title_selectors=(
                '._4rR01T',
                '.s1Q9rs',
                '._2rpwqI',
                'div[data-id] > div > div:nth-child(2) > div:nth-child(1) > div:nth-child(1)',
            ),
            link_selectors=('a._1fQZEK', 'a._2Umfj-'),
            price_selectors=('._30jeq3', '._2rQ-NK', '._1_WHN1'),
            currency='INR',
            price_clean_rule=PriceCleanRule.DIGITS,  # Prices are whole rupees
            relative_links=True,
        ),
        SiteConfig(
            name='Amazon IN',
            short_name='AMZ-IN',
            base_url='https://www.amazon.in',
            search_path='/s?k={query}',
            product_card_selectors=AMAZON_CARD_SELECTORS,
            title_selectors=AMAZON_TITLE_SELECTORS,
            link_selectors=AMAZON_LINK_SELECTORS,
            price_selectors=AMAZON_PRICE_SELECTORS,
            currency='INR',
            link_mode=LinkMode.AMAZON_ASIN,
        ),
        SiteConfig(
            name='Tata CLiQ IN',
            short_name='TATA-IN',
            base_url='https://www.tatacliq.com',
            search_path='/search/?search={query}',
            product_card_selectors=('.ProductModule__productContainer', '.ProductCard__productCardContainer'),
            title_selectors=('.ProductModule__productName', '.ProductCard__productName'),
            link_selectors=('.ProductModule__productLink', '.ProductCard__link'),
            price_selectors=('.ProductModule__finalPrice', '.ProductCard__price'),
            currency='INR',
            relative_links=True,
        ),
        SiteConfig(
            name='Croma IN',
            short_name='CROMA-IN',
            base_url='https://www.croma.com',
            search_path='/search/?text={query}',
            product_card_selectors=('.product-item', '.product-grid-item'),
            title_selectors=('.product-title', '.product-name'),
            link_selectors=('.product-img-wrapper a', '.product-title a'),
            price_selectors=('.amount', '.new-price'),
            currency='INR',
        ),
    ],

    # ========== CHINA ==========
    'CN': [
        SiteConfig(
            name='JD China',
            short_name='JD-CN',
            base_url='https://search.jd.com',
            search_path='/Search?keyword={query}',
            product_card_selectors=('.gl-item',),
            title_selectors=('.p-name em',),
            link_selectors=('.p-name a',),
            price_selectors=('.p-price i',),
            currency='CNY',
        ),
    ],

    # ========== JAPAN ==========
    'JP': [
        SiteConfig(
            name='Rakuten JP',
            short_name='RAKUTEN-JP',
            base_url='https://search.rakuten.co.jp',
            search_path='/search/mall/{query}/',
            product_card_selectors=('.searchresultitem',),
            title_selectors=('.title',),
            link_selectors=('.title a',),
            price_selectors=('.important',),
            currency='JPY',
            price_clean_rule=PriceCleanRule.DIGITS,
        ),
    ],
}


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_country_sites(country: str, table: Dict[str, List[SiteConfig]] = None) -> List[SiteConfig]:
    """
    Get the enabled site configurations for a country.

    Args:
        country: Country code, case-insensitive (e.g., 'us', 'IN')
        table: Country table to search (defaults to COUNTRY_SITES)

    Returns:
        List of enabled SiteConfig for the country

    Raises:
        UnknownCountryError: If the country has no enabled sites
    """
    table = COUNTRY_SITES if table is None else table
    sites = [s for s in table.get((country or '').strip().upper(), []) if s.enabled]
    if not sites:
        raise UnknownCountryError(country)
    return sites


def list_countries(table: Dict[str, List[SiteConfig]] = None) -> List[str]:
    """List all country codes."""
    table = COUNTRY_SITES if table is None else table
    return sorted(table.keys())


def iter_all_sites(table: Dict[str, List[SiteConfig]] = None) -> Iterator[Tuple[str, SiteConfig]]:
    """Yield (country, config) for every configured site."""
    table = COUNTRY_SITES if table is None else table
    for country, sites in table.items():
        for config in sites:
            yield country, config


def get_site_summary(country: str = None, table: Dict[str, List[SiteConfig]] = None) -> List[Dict]:
    """Get a summary of configured sites for display."""
    summary = []
    for site_country, config in iter_all_sites(table):
        if country and site_country != country.strip().upper():
            continue
        summary.append({
            'country': site_country,
            'name': config.name,
            'short_name': config.short_name,
            'type': config.scraper_type.value,
            'currency': config.currency,
            'link_mode': config.link_mode.value,
            'enabled': config.enabled,
            'search_url': config.base_url + config.search_path,
        })
    return summary
