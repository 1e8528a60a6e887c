"""
Bot-defense detection.

Recognizes pages that are CAPTCHA or anti-automation challenges instead
of real search results.
"""

from typing import Sequence
import logging

logger = logging.getLogger(__name__)


# Challenge widgets: reCAPTCHA, PerimeterX, Akamai, Cloudflare, DataDome
CAPTCHA_SELECTORS = (
    'iframe[src*="recaptcha"]',
    'div.g-recaptcha',
    '#recaptcha-challenge',
    'div[aria-label="reCAPTCHA challenge"]',
    '#px-captcha',
    '#sec-captcha',
    '#challenge-form',
    '#cf-challenge-running',
    'iframe[src*="captcha-delivery.com"]',
    'form[action*="validateCaptcha"]',
)

# Text found on block pages served instead of results
BLOCK_PAGE_MARKERS = (
    'robot check',
    'verify you are human',
    'are you a robot',
    'unusual traffic from your computer network',
    'enter the characters you see below',
)

# Looser check for whatever loaded before a navigation failure
NAVIGATION_BLOCK_MARKERS = ('captcha',) + BLOCK_PAGE_MARKERS


def has_block_page_markers(html: str, markers: Sequence[str] = NAVIGATION_BLOCK_MARKERS) -> bool:
    """Whether the page source contains any block-page marker (case-insensitive)."""
    if not html:
        return False
    html_lower = html.lower()
    return any(marker in html_lower for marker in markers)


async def detect_bot_defense(page) -> bool:
    """
    Check a loaded page for any known blocking signature.

    Any single match counts; signatures are not ranked.

    Args:
        page: Crawler holding the loaded page

    Returns:
        True if the page looks like a CAPTCHA or block page
    """
    for selector in CAPTCHA_SELECTORS:
        if await page.query_selector(selector) is not None:
            logger.debug(f"Bot-defense widget matched: {selector}")
            return True

    if has_block_page_markers(await page.content(), BLOCK_PAGE_MARKERS):
        logger.debug("Block-page text marker found")
        return True

    return False
