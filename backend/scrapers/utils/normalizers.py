"""
Data normalization utilities for scrapers.

These functions turn raw text pulled from a listing container into a
ProductListing with a numeric price and an absolute link.
"""

import re
import math
import logging
from typing import Optional
from urllib.parse import urljoin, urlparse

from ..base import PriceCleanRule, ProductListing, SiteConfig

logger = logging.getLogger(__name__)


# 64GB, 128gb, 1TB ...
STORAGE_PATTERN = re.compile(r'\b(\d{2,4}GB|\d{1,2}TB)\b', re.IGNORECASE)

# Longest leading decimal number, like JavaScript parseFloat
_LEADING_NUMBER = re.compile(r'\d+(?:\.\d*)?|\.\d+')


def clean_price(price_text: str, rule: PriceCleanRule) -> Optional[float]:
    """
    Convert raw price text to a number.

    Examples (DIGITS_AND_DOT):
        $1,299.00 -> 1299.0
        ₹ 79,900 -> 79900.0
        Free -> None

    Examples (DIGITS):
        ₹79,900 -> 79900.0
        12,800円 -> 12800.0
    """
    if not price_text:
        return None

    cleaned = rule.pattern.sub('', price_text)
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None
    price = float(match.group(0))
    # Overlong digit runs overflow to inf
    return price if math.isfinite(price) else None


def resolve_link(link: str, config: SiteConfig) -> str:
    """
    Make a link absolute for sites that emit relative hrefs.

    Examples (base https://www.target.com):
        /p/apple-iphone/-/A-123 -> https://www.target.com/p/apple-iphone/-/A-123
        https://www.target.com/p/x -> unchanged
    """
    link = link.strip()
    if config.relative_links and not urlparse(link).scheme:
        return urljoin(config.base_url + '/', link)
    return link


def extract_storage_tag(query: str) -> Optional[str]:
    """
    First storage capacity mentioned in a query, lower-cased.

    Examples:
        iPhone 128GB -> 128gb
        galaxy s23 1tb -> 1tb
        iPhone -> None
    """
    if not query:
        return None
    match = STORAGE_PATTERN.search(query)
    return match.group(1).lower() if match else None


def derive_parameter1(query: str, title: str) -> str:
    """Storage tag from the query if the title mentions it too, else ''."""
    storage = extract_storage_tag(query)
    if storage and storage in title.lower():
        return storage.upper()
    return ''


def normalize_listing(
    raw_title: Optional[str],
    raw_price: Optional[str],
    raw_link: Optional[str],
    config: SiteConfig,
    query: str
) -> Optional[ProductListing]:
    """
    Build a ProductListing from raw extracted values.

    Returns None (candidate dropped) when the title is empty, the link is
    missing or the price does not parse.
    """
    title = (raw_title or '').strip()
    if not title:
        return None

    if not raw_link or not raw_link.strip():
        return None

    price = clean_price(raw_price, config.price_clean_rule)
    if price is None:
        logger.debug(f"[{config.name}] Dropping '{title}': unparseable price {raw_price!r}")
        return None

    return ProductListing(
        product_name=title,
        link=resolve_link(raw_link, config),
        price=price,
        currency=config.currency,
        source_site=config.name,
        parameter1=derive_parameter1(query, title),
    )
