"""
Google Shopping Provider

Reads Google's shopping results. The result markup changes often, so
containers, titles, prices and merchants are each located through a list
of alternative selectors.
"""

import re
from typing import List, Optional
from urllib.parse import quote_plus, unquote

from bs4 import Tag

from ..common.text_utils import clean_price, clean_text
from ..extraction.document import RenderedDocument
from ..extraction.renderers import Renderer
from ..models import SearchResult
from .base import SearchProvider

RESULT_SELECTORS = [
    '.sh-dgr__gr-auto',
    '.sh-dlr__list-result',
    '[data-docid]',
    '.sh-pr__product-results-grid > div',
    '.KZmu8e',
]

FALLBACK_LINK_SELECTOR = 'a[href*="shopping/product"], a[href*="url?q="]'

TITLE_SELECTOR = 'h3, h4, [class*="title"], [class*="name"], .tAxDx, .Xjkr3b'
PRICE_SELECTOR = '[class*="price"], .a8Pemb, .kHxwFf, span[aria-label*="price"]'
STORE_SELECTOR = '[class*="merchant"], [class*="store"], .aULzUe, .IuHnof'
LINK_SELECTOR = 'a[href*="url?q="], a[href*="shopping/product"], a[href]'

_REDIRECT_PATTERN = re.compile(r'url\?q=([^&]+)')
_PRICE_PATTERN = re.compile(r'[£$€]?\s*(\d{1,3}(?:,\d{3})*(?:\.\d{2})?)')


def unwrap_redirect(href: str) -> str:
    """
    Extract the target of a Google /url?q= redirect link.

    Example:
        >>> unwrap_redirect("/url?q=https%3A%2F%2Fshop.example%2Fitem&sa=U")
        'https://shop.example/item'
    """
    match = _REDIRECT_PATTERN.search(href or "")
    if match:
        return unquote(match.group(1))
    return href


def _is_google_url(href: str) -> bool:
    return 'google.com' in href.lower()


class GoogleShoppingProvider(SearchProvider):
    """
    Google Shopping search.

    Results come back cheapest first (unpriced last). With a preferred
    store, that store's cheapest listing is moved to the front.

    Usage:
        provider = GoogleShoppingProvider(preferred_store="Argos")
        results = provider.search("Tefal AeroSteam Garment Steamer")
    """

    name = "google_shopping"

    SEARCH_URL = "https://www.google.com/search?q={query}&tbm=shop&hl=en"

    def __init__(self, renderer: Optional[Renderer] = None, preferred_store: Optional[str] = None):
        super().__init__(renderer=renderer)
        self.preferred_store = preferred_store

    def build_search_url(self, query: str) -> str:
        return self.SEARCH_URL.format(query=quote_plus(query))

    def parse_results(self, document: RenderedDocument) -> List[SearchResult]:
        containers: List[Tag] = []
        for selector in RESULT_SELECTORS:
            containers = document.select(selector)
            if containers:
                break

        if not containers:
            containers = document.select(FALLBACK_LINK_SELECTOR)

        results = []
        for container in containers:
            result = self._parse_container(container)
            if result:
                results.append(result)

        results.sort(key=lambda r: (r.price is None, r.price or 0))
        return self._promote_preferred(results)

    def _promote_preferred(self, results: List[SearchResult]) -> List[SearchResult]:
        if not self.preferred_store:
            return results

        preferred = self.preferred_store.lower()
        for i, result in enumerate(results):
            if preferred in (result.store_name or "").lower():
                return [result] + results[:i] + results[i + 1:]
        return results

    def _parse_container(self, container: Tag) -> Optional[SearchResult]:
        title_el = container.select_one(TITLE_SELECTOR)
        title = clean_text(title_el.get_text(" ")) if title_el else ""

        price = None
        price_el = container.select_one(PRICE_SELECTOR)
        if price_el:
            match = _PRICE_PATTERN.search(price_el.get_text(" "))
            if match:
                price = clean_price(match.group(1))

        store_el = container.select_one(STORE_SELECTOR)
        store_name = clean_text(store_el.get_text(" ")) if store_el else ""

        link = ""
        link_el = container if container.name == 'a' and container.get('href') else container.select_one(LINK_SELECTOR)
        if link_el is not None:
            href = unwrap_redirect(link_el.get('href', ''))
            if href and not _is_google_url(href):
                link = href

        image_el = container.select_one('img[src*="http"]')

        if not title or not (link or price):
            return None

        return SearchResult(
            title=title,
            price=price,
            store_name=store_name,
            product_url=link,
            image_url=image_el['src'] if image_el else None,
            source=self.name,
        )
