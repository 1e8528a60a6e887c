"""Shared utilities for scrapers."""

from .normalizers import (
    clean_price,
    resolve_link,
    extract_storage_tag,
    derive_parameter1,
    normalize_listing,
)
from .extractors import (
    extract_text,
    extract_attribute,
    find_containers,
)
from .detection import (
    detect_bot_defense,
    has_block_page_markers,
)

__all__ = [
    'clean_price',
    'resolve_link',
    'extract_storage_tag',
    'derive_parameter1',
    'normalize_listing',
    'extract_text',
    'extract_attribute',
    'find_containers',
    'detect_bot_defense',
    'has_block_page_markers',
]
