"""
Tests for application configuration and the site table.
"""

import pytest

from scrapers.base import SiteConfig, LinkMode, PriceCleanRule, UnknownCountryError
from scrapers.config import (
    COUNTRY_SITES,
    get_country_sites,
    get_site_summary,
    iter_all_sites,
    list_countries,
)


class TestSettings:
    """Test the Settings configuration class."""

    def test_settings_defaults(self):
        """Test that settings have sensible defaults."""
        from api.config import Settings

        defaults = Settings(_env_file=None)

        assert defaults.api_host == "0.0.0.0"
        assert defaults.api_port == 3000
        assert defaults.api_debug is False
        assert defaults.scraper_navigation_timeout == 60.0
        assert defaults.scraper_headless is True
        assert defaults.log_level == "INFO"

    def test_settings_from_environment(self, monkeypatch):
        from api.config import Settings

        monkeypatch.setenv("SCRAPER_NAVIGATION_TIMEOUT", "15")
        monkeypatch.setenv("SCRAPER_HEADLESS", "false")

        overridden = Settings(_env_file=None)

        assert overridden.scraper_navigation_timeout == 15.0
        assert overridden.scraper_headless is False

    def test_settings_cors_origins(self):
        """Test that CORS origins are configured."""
        from api.config import settings

        assert isinstance(settings.cors_origins, list)
        assert len(settings.cors_origins) > 0

    def test_settings_log_paths(self):
        """Test that log paths are valid."""
        from api.config import settings

        assert settings.log_dir is not None
        assert settings.log_file.name == "backend.log"


class TestSiteTable:
    """Invariants of the static site configuration."""

    def test_countries(self):
        assert list_countries() == ['CN', 'IN', 'JP', 'US']

    def test_every_selector_list_is_non_empty(self):
        for _, config in iter_all_sites():
            assert config.product_card_selectors, config.name
            assert config.title_selectors, config.name
            assert config.link_selectors, config.name
            assert config.price_selectors, config.name

    def test_every_site_belongs_to_one_country(self):
        names = [config.name for _, config in iter_all_sites()]
        assert len(names) == len(set(names))

    def test_search_paths_have_placeholder(self):
        for _, config in iter_all_sites():
            assert '{query}' in config.search_path
            assert not config.base_url.endswith('/')

    def test_amazon_sites_use_asin_links(self):
        amazon = [c for _, c in iter_all_sites() if c.name.startswith('Amazon')]
        assert {c.name for c in amazon} == {'Amazon US', 'Amazon IN'}
        assert all(c.link_mode == LinkMode.AMAZON_ASIN for c in amazon)

    def test_currencies(self):
        assert {c.currency for c in COUNTRY_SITES['US']} == {'USD'}
        assert {c.currency for c in COUNTRY_SITES['IN']} == {'INR'}
        assert {c.currency for c in COUNTRY_SITES['CN']} == {'CNY'}
        assert {c.currency for c in COUNTRY_SITES['JP']} == {'JPY'}

    def test_whole_number_price_sites(self):
        digits_only = {c.name for _, c in iter_all_sites() if c.price_clean_rule == PriceCleanRule.DIGITS}
        assert digits_only == {'Flipkart IN', 'Rakuten JP'}

    def test_amazon_search_url(self):
        amazon = next(c for c in COUNTRY_SITES['US'] if c.name == 'Amazon US')
        assert amazon.build_search_url('iPhone 256GB') == 'https://www.amazon.com/s?k=iPhone%20256GB'


class TestCountryLookup:
    """Test get_country_sites."""

    def test_case_insensitive(self):
        assert get_country_sites('in') == COUNTRY_SITES['IN']
        assert get_country_sites(' jp ') == COUNTRY_SITES['JP']

    @pytest.mark.parametrize("country", ['XX', '', None])
    def test_unknown_country(self, country):
        with pytest.raises(UnknownCountryError):
            get_country_sites(country)

    def test_site_summary_filter(self):
        summary = get_site_summary('cn')
        assert [s['name'] for s in summary] == ['JD China']
        assert summary[0]['search_url'] == 'https://search.jd.com/Search?keyword={query}'


class TestSiteConfigValidation:
    """SiteConfig rejects incomplete recipes."""

    def base_options(self, **overrides):
        options = dict(
            name='Shop',
            short_name='SHOP',
            base_url='https://shop.example',
            search_path='/s?q={query}',
            product_card_selectors=['.card'],
            title_selectors=['.title'],
            link_selectors=['a'],
            price_selectors=['.price'],
            currency='USD',
        )
        options.update(overrides)
        return options

    @pytest.mark.parametrize("field", [
        'product_card_selectors', 'title_selectors', 'link_selectors', 'price_selectors',
    ])
    def test_empty_selector_list(self, field):
        with pytest.raises(ValueError):
            SiteConfig(**self.base_options(**{field: []}))

    def test_bare_string_selector(self):
        with pytest.raises(ValueError):
            SiteConfig(**self.base_options(title_selectors='.title'))

    def test_missing_placeholder(self):
        with pytest.raises(ValueError):
            SiteConfig(**self.base_options(search_path='/s'))

    def test_lists_are_frozen(self):
        config = SiteConfig(**self.base_options())
        assert config.title_selectors == ('.title',)
