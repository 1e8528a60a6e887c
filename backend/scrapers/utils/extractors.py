"""
Ordered-selector extraction helpers.

Every site lists several candidate selectors per field because retail
markup changes between A/B tests and regional templates. These helpers
try the candidates in order and stop at the first one that matches.
"""

from typing import Optional, List, Sequence, Tuple

from ..crawlers.base import Element


async def extract_text(container: Element, selectors: Sequence[str]) -> Optional[str]:
    """
    Rendered text of the first descendant matching any selector.

    The first selector that matches decides, even if its element is empty;
    later selectors are not consulted.

    Args:
        container: Listing container (or page) to search under
        selectors: Candidate selectors in priority order

    Returns:
        Element text, or None if no selector matched
    """
    for selector in selectors:
        element = await container.query_selector(selector)
        if element is not None:
            return await element.inner_text()
    return None


async def extract_attribute(
    container: Element,
    selectors: Sequence[str],
    attribute: str
) -> Optional[str]:
    """
    Attribute of the first descendant matching any selector.

    Same first-match rule as extract_text: None is returned both when no
    selector matched and when the matched element lacks the attribute.
    """
    for selector in selectors:
        element = await container.query_selector(selector)
        if element is not None:
            return await element.get_attribute(attribute)
    return None


async def find_containers(page, selectors: Sequence[str]) -> Tuple[Optional[str], List[Element]]:
    """
    Listing containers from the first selector yielding at least one match.

    Args:
        page: Crawler (or element) to search
        selectors: Product card selectors in priority order

    Returns:
        Tuple of (winning selector, containers); (None, []) if nothing matched
    """
    for selector in selectors:
        handles = await page.query_selector_all(selector)
        if handles:
            return selector, handles
    return None, []
