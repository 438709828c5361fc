"""
Structured Data Parser

Extracts product information from JSON-LD structured data (schema.org).
Retailers embed it for search engines, so for some stores it is more
reliable than the visible markup.

Supported schema types: Product (including Product nodes inside @graph
and top-level arrays)
"""

import json
import logging
import re
from typing import Any, Dict, Iterator, List, Optional

from ..document import RenderedDocument

logger = logging.getLogger(__name__)

# Offer objects serialized into inline scripts (hydration state, analytics)
_INLINE_OFFER_PATTERNS = [
    re.compile(r'"@type"\s*:\s*"Offer"[^}]*"price"\s*:\s*"?(\d+(?:\.\d+)?)"?'),
    re.compile(r'"priceCurrency"\s*:\s*"GBP"[^}]*"price"\s*:\s*"?(\d+(?:\.\d+)?)"?'),
]


class StructuredDataParser:
    """
    Parses JSON-LD structured data from rendered pages.

    Usage:
        parser = StructuredDataParser()
        products = parser.parse(document)
        price = parser.extract_price(products)
        image = parser.extract_image(products)
    """

    SUPPORTED_TYPES = ['Product', 'ProductGroup']

    def parse(self, document: RenderedDocument) -> List[Dict[str, Any]]:
        """
        Extract every Product node from the page's JSON-LD blocks.

        Args:
            document: Rendered page

        Returns:
            Product dictionaries in document order (empty list if none)
        """
        products = []
        for block in document.json_ld_blocks():
            try:
                data = json.loads(block)
            except json.JSONDecodeError:
                logger.debug("Skipping malformed JSON-LD block")
                continue
            products.extend(self._iter_products(data))
        return products

    def _iter_products(self, data: Any) -> Iterator[Dict[str, Any]]:
        if isinstance(data, list):
            for item in data:
                yield from self._iter_products(item)
        elif isinstance(data, dict):
            if self._is_product(data):
                yield data
            graph = data.get('@graph')
            if isinstance(graph, list):
                yield from self._iter_products(graph)

    def _is_product(self, data: Dict[str, Any]) -> bool:
        node_type = data.get('@type')
        if isinstance(node_type, list):
            return any(t in self.SUPPORTED_TYPES for t in node_type)
        return node_type in self.SUPPORTED_TYPES

    def extract_price(self, products: List[Dict[str, Any]]) -> Optional[str]:
        """
        Extract the first offer price.

        Args:
            products: Product nodes from parse()

        Returns:
            Price as string (e.g., "7.71") or None
        """
        for product in products:
            for offer in self._offers(product):
                price = offer.get('price')
                if price in (None, ''):
                    price = offer.get('lowPrice')
                if price not in (None, ''):
                    return str(price)
        return None

    def _offers(self, product: Dict[str, Any]) -> List[Dict[str, Any]]:
        offers = product.get('offers', [])
        if isinstance(offers, dict):
            # AggregateOffer may nest its individual offers
            nested = offers.get('offers')
            offers = [offers] + (nested if isinstance(nested, list) else [])
        return [o for o in offers if isinstance(o, dict)]

    def extract_name(self, products: List[Dict[str, Any]]) -> Optional[str]:
        """Extract the first non-empty product name."""
        for product in products:
            name = product.get('name')
            if isinstance(name, str) and name.strip():
                return ' '.join(name.split())
        return None

    def extract_image(self, products: List[Dict[str, Any]]) -> Optional[str]:
        """
        Extract the main image URL.

        Handles plain strings, lists, and ImageObject dictionaries.

        Returns:
            Image URL or None
        """
        for product in products:
            url = self._image_url(product.get('image'))
            if url:
                return url
        return None

    def _image_url(self, image: Any) -> Optional[str]:
        if isinstance(image, list):
            image = image[0] if image else None
        if isinstance(image, dict):
            image = image.get('url') or image.get('contentUrl')
        if isinstance(image, str) and image.strip():
            return image.strip()
        return None

    def extract_brand(self, products: List[Dict[str, Any]]) -> Optional[str]:
        """Extract the brand name, if declared."""
        for product in products:
            brand = product.get('brand')
            if isinstance(brand, dict):
                brand = brand.get('name')
            if isinstance(brand, str) and brand.strip():
                return brand.strip()
        return None

    def find_inline_offer_price(self, html: str) -> Optional[str]:
        """
        Find an Offer price serialized into inline script data.

        Some retailers ship their schema.org offer inside a hydration blob
        rather than a JSON-LD tag.

        Args:
            html: Raw page HTML

        Returns:
            Price string or None
        """
        for pattern in _INLINE_OFFER_PATTERNS:
            match = pattern.search(html or "")
            if match:
                return match.group(1)
        return None
