"""Crawler implementations for different site types."""

from .base import Crawler, Element, NavigationError
from .static import StaticCrawler
from .stealth import StealthCrawler

__all__ = ['Crawler', 'Element', 'NavigationError', 'StaticCrawler', 'StealthCrawler']
