"""
Tests for the command-line search tool.
"""

import json

from scrapers import search_cli
from scrapers.base import NoResultsError, ProductListing, ScrapeOutcome
from scrapers.manager import SearchResult


class StubManager:
    """Stands in for ScraperManager inside the CLI."""

    result = None
    error = None

    def __init__(self, navigation_timeout=60.0):
        self.navigation_timeout = navigation_timeout

    async def search(self, country, query):
        if StubManager.error:
            raise StubManager.error
        return StubManager.result


def stub_result():
    listing = ProductListing('iPhone 13 128GB', 'https://alpha.example/p/1', 699.0, 'USD', 'Alpha Mart', '128GB')
    return SearchResult(
        country='US',
        query='iPhone 128GB',
        listings=[listing],
        outcomes=[
            ScrapeOutcome.success('Alpha Mart', [listing]),
            ScrapeOutcome.bot_defense_detected('Beta Store'),
        ],
    )


class TestSearchCli:
    """Test argument handling and output."""

    def setup_method(self):
        StubManager.result = None
        StubManager.error = None

    def test_list_sites(self, capsys):
        assert search_cli.main(['--list']) == 0

        out = capsys.readouterr().out
        assert 'Amazon US' in out
        assert 'Rakuten JP' in out

    def test_list_sites_for_country(self, capsys):
        assert search_cli.main(['JP', '--list']) == 0

        out = capsys.readouterr().out
        assert 'Rakuten JP' in out
        assert 'Amazon US' not in out

    def test_missing_arguments(self, capsys):
        assert search_cli.main(['US']) == 2

    def test_prints_results(self, monkeypatch, capsys):
        StubManager.result = stub_result()
        monkeypatch.setattr(search_cli, 'ScraperManager', StubManager)

        assert search_cli.main(['US', 'iPhone 128GB']) == 0

        out = capsys.readouterr().out
        assert '699.00 USD - iPhone 13 128GB [128GB]' in out
        assert 'CAPTCHA/Bot detected on Beta Store.' in out

    def test_json_output(self, monkeypatch, capsys):
        StubManager.result = stub_result()
        monkeypatch.setattr(search_cli, 'ScraperManager', StubManager)

        assert search_cli.main(['US', 'iPhone 128GB', '--json']) == 0

        data = json.loads(capsys.readouterr().out)
        assert data[0]['website_name'] == 'Alpha Mart'
        assert data[0]['price'] == 699.0

    def test_search_error_exit_code(self, monkeypatch, capsys):
        StubManager.error = NoResultsError('US', 'iPhone')
        monkeypatch.setattr(search_cli, 'ScraperManager', StubManager)

        assert search_cli.main(['US', 'iPhone']) == 1

        assert 'No products found for "iPhone" in US' in capsys.readouterr().out
