"""
Tests for bot-defense detection.
"""

import pytest

from scrapers.utils.detection import detect_bot_defense, has_block_page_markers
from conftest import FixtureCrawler, card, page


URL = 'https://shop.example/search?q=x'


async def loaded(html):
    crawler = FixtureCrawler({URL: html})
    await crawler.goto(URL, timeout=1.0)
    return crawler


class TestDetectBotDefense:
    """Test signature matching on loaded pages."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("widget", [
        '<iframe src="https://www.google.com/recaptcha/api2/anchor"></iframe>',
        '<div class="g-recaptcha" data-sitekey="k"></div>',
        '<div id="px-captcha"></div>',
        '<div id="sec-captcha"></div>',
        '<div aria-label="reCAPTCHA challenge"></div>',
        '<form action="/errors/validateCaptcha"></form>',
    ])
    async def test_captcha_widgets(self, widget):
        crawler = await loaded(f"<html><body>{widget}</body></html>")

        assert await detect_bot_defense(crawler) is True

    @pytest.mark.asyncio
    async def test_block_page_text(self):
        crawler = await loaded("<html><body><h4>Robot Check</h4><p>Sorry, we just need to make sure you're not a robot.</p></body></html>")

        assert await detect_bot_defense(crawler) is True

    @pytest.mark.asyncio
    async def test_detected_even_with_product_cards(self):
        html = page(card('iPhone', '$1', '/p/1')).replace('</body>', '<div class="g-recaptcha"></div></body>')
        crawler = await loaded(html)

        assert await detect_bot_defense(crawler) is True

    @pytest.mark.asyncio
    async def test_regular_results_page(self):
        crawler = await loaded(page(card('iPhone 13', '$699', '/p/1')))

        assert await detect_bot_defense(crawler) is False


class TestBlockPageMarkers:
    """Test the text marker check used after navigation failures."""

    def test_captcha_marker(self):
        assert has_block_page_markers("<script src='/captcha.js'></script>") is True

    def test_verify_human_marker_case_insensitive(self):
        assert has_block_page_markers("<h1>Please Verify You Are Human</h1>") is True

    def test_clean_partial_content(self):
        assert has_block_page_markers("<html><body>Loading...</body></html>") is False

    def test_empty_content(self):
        assert has_block_page_markers("") is False
        assert has_block_page_markers(None) is False
