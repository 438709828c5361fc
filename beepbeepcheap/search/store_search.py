"""
Store Site Search Provider

Searches a retailer's own website (its site search page) using the
search_url template and product_link_selector from the store registry.
Besides returning listings, it can locate the product page for an item
seen elsewhere, optionally pinned to a known price.
"""

import logging
import re
from typing import List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import Tag

from ..common.text_utils import clean_price, clean_text, slug_to_title
from ..extraction.document import RenderedDocument
from ..extraction.renderers import Renderer
from ..extraction.store_registry import StoreProfile, StoreRegistry, get_store_registry
from ..models import SearchResult
from .base import SearchProvider, SearchProviderError

logger = logging.getLogger(__name__)

# Links on search pages that never lead to a product
IGNORED_URL_PATTERNS = [
    'onetrust.com', 'cookielaw.org', 'privacy', 'consent',
    'facebook.com', 'twitter.com', 'instagram.com', 'youtube.com', 'google.com',
    'javascript:', '#',
    '/services/', '/book-an-appointment', '/store-locator', '/customer-service',
    '/contact', '/about', '/faq', '/help',
    '/login', '/register', '/cart', '/checkout', '/wishlist', '/account',
    '/category', '/categories', '/collections',
]

PRODUCT_URL_PATTERNS = [
    '/product', '/p/', '/dp/', '/ip/', '/item',
    '/accessories/', '/bags/', '/clothing/', '/shoes/', '/jewellery/', '/gifts/',
]

CARD_SELECTOR = '[class*="product"], [class*="Product"], [class*="card"], [class*="tile"], [class*="item"]'
CARD_PRICE_SELECTOR = '[class*="price"], [class*="Price"]'

# Price on a search card may differ from the product page by rounding
PRICE_TOLERANCE = 1.0

# How far up from a result link to look for its card's price
_CARD_DEPTH = 4

_CARD_PRICE_PATTERN = re.compile(r'[£$€]?\s*(\d{1,3}(?:,\d{3})*(?:\.\d{2})?|\d+(?:\.\d{2})?)')


class StoreSiteSearchProvider(SearchProvider):
    """
    Searches one retailer's own site.

    Usage:
        provider = StoreSiteSearchProvider.for_store("Costco")
        results = provider.search("Philips Airfryer HD9252")
        url = provider.find_product_url("Philips Airfryer HD9252", target_price=89.99)
    """

    def __init__(self, profile: StoreProfile, renderer: Optional[Renderer] = None):
        """
        Initialize the provider.

        Args:
            profile: Store profile with search_url and product_link_selector

        Raises:
            ValueError: If the store has no site search configured
        """
        if not profile.searchable:
            raise ValueError(f"Store {profile.label!r} has no site search configured")
        super().__init__(renderer=renderer)
        self.profile = profile
        self.name = f"site:{profile.label}"
        self.domain = (urlparse(profile.search_url).hostname or "").lower()

    @classmethod
    def for_store(
        cls,
        label: str,
        registry: Optional[StoreRegistry] = None,
        renderer: Optional[Renderer] = None,
    ) -> "StoreSiteSearchProvider":
        """
        Create a provider for a store by label.

        Raises:
            ValueError: If the store is unknown or not searchable
        """
        registry = registry or get_store_registry()
        profile = registry.get_by_label(label)
        if profile is None:
            raise ValueError(f"Unknown store: {label}")
        return cls(profile, renderer=renderer)

    def build_search_url(self, query: str) -> str:
        return self.profile.build_search_url(query)

    def is_product_url(self, href: Optional[str]) -> bool:
        """
        Check whether a link on the search page looks like a product page.

        Example:
            >>> provider.is_product_url("/p/philips-airfryer/12345")
            True
            >>> provider.is_product_url("/customer-service/returns")
            False
        """
        if not href:
            return False
        lower = href.lower()

        if not href.startswith('/') and self.domain not in lower:
            return False

        if any(pattern in lower for pattern in IGNORED_URL_PATTERNS):
            return False

        if any(pattern in lower for pattern in PRODUCT_URL_PATTERNS):
            return True

        return '.html' in lower and '/search' not in lower

    def _absolute(self, href: str) -> str:
        if href.startswith('http'):
            return href
        return urljoin(f"https://{self.domain}", href)

    def _card_price(self, element: Tag) -> Optional[float]:
        node = element
        for _ in range(_CARD_DEPTH):
            price_el = node.select_one(CARD_PRICE_SELECTOR)
            if price_el is not None:
                match = _CARD_PRICE_PATTERN.search(price_el.get_text(" "))
                return clean_price(match.group(1)) if match else None
            if node.parent is None or node.parent.name in ('body', '[document]'):
                break
            node = node.parent
        return None

    def _link_title(self, link: Tag, url: str) -> str:
        title = clean_text(link.get_text(" ")) or clean_text(link.get('title', '')) or clean_text(link.get('aria-label', ''))
        if title:
            return title
        slug = urlparse(url).path.rstrip('/').split('/')[-1].split('.')[0]
        return slug_to_title(slug)

    def parse_results(self, document: RenderedDocument) -> List[SearchResult]:
        results: List[SearchResult] = []
        seen = set()

        for link in document.select(self.profile.product_link_selector):
            href = link.get('href')
            if not self.is_product_url(href):
                continue

            url = self._absolute(href)
            if url in seen:
                continue
            seen.add(url)

            image = link.find('img', src=True)
            results.append(SearchResult(
                title=self._link_title(link, url),
                price=self._card_price(link),
                store_name=self.profile.label,
                product_url=url,
                image_url=image['src'] if image else None,
                source=self.name,
            ))

        return results

    def find_product_url(self, product_name: str, target_price: Optional[float] = None) -> Optional[str]:
        """
        Locate the store's product page for an item.

        With a target price, only a result card priced within one currency
        unit of it is accepted; without one, the first product link wins.

        Args:
            product_name: Name to search for
            target_price: Price the item was seen at, if known

        Returns:
            Absolute product URL, or None if nothing suitable was found
        """
        url = self.build_search_url(product_name)
        logger.info("Searching %s for %r", self.profile.label, product_name)

        try:
            document = self.fetch(url)
        except SearchProviderError as e:
            logger.warning("%s", e)
            return None

        return self.pick_product_url(document, target_price)

    def pick_product_url(self, document: RenderedDocument, target_price: Optional[float] = None) -> Optional[str]:
        """Choose a product URL from a rendered search page."""
        if target_price:
            for card in document.select(CARD_SELECTOR):
                price_el = card.select_one(CARD_PRICE_SELECTOR)
                if price_el is None:
                    continue
                match = _CARD_PRICE_PATTERN.search(price_el.get_text(" "))
                price = clean_price(match.group(1)) if match else None
                if price is None or abs(price - target_price) > PRICE_TOLERANCE:
                    continue

                link = card.find('a', href=True)
                if link is not None and self.is_product_url(link['href']):
                    logger.debug("Price-matched product %s (target %s)", price, target_price)
                    return self._absolute(link['href'])

            logger.info("No result on %s priced near %s", self.profile.label, target_price)
            return None

        for link in document.select(self.profile.product_link_selector):
            href = link.get('href')
            if self.is_product_url(href):
                return self._absolute(href)

        return None
