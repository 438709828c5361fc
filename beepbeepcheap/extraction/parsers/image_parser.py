"""
Image Cascade

Resolves the main product image URL. Element candidates are read from the
usual lazy-loading attributes (data-src, srcset, Amazon's dynamic-image
JSON, ...) and every candidate is screened for logos, tracking pixels and
promotional banners before it is accepted.
"""

import json
import re
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import Tag

from ...common.config_loader import load_extraction_rules
from ..cascade import Strategy, first_success
from ..document import RenderedDocument
from ..store_registry import StoreProfile
from .structured_data import StructuredDataParser

# Image dimensions embedded in a filename, e.g. banner_1200x200.jpg
_DIMENSIONS_PATTERN = re.compile(r'(\d+)x(\d+)')

MIN_IMAGE_SIDE = 300
MAX_ASPECT_RATIO = 3

_SRCSET_ATTRIBUTES = ('srcset', 'data-srcset')


def largest_srcset_url(srcset: str) -> Optional[str]:
    """
    Pick the widest candidate from a srcset value.

    Example:
        >>> largest_srcset_url("a.jpg 320w, b.jpg 1080w, c.jpg 640w")
        'b.jpg'
    """
    best_url = None
    best_width = 0
    for part in srcset.split(','):
        pieces = part.strip().split()
        if not pieces:
            continue
        url = pieces[0]
        width = 0
        if len(pieces) > 1:
            digits = re.match(r'\d+', pieces[1])
            width = int(digits.group(0)) if digits else 0
        if best_url is None or width > best_width:
            best_url, best_width = url, width
    return best_url


def normalize_image_url(url: Optional[str], base_url: str = "") -> Optional[str]:
    """
    Make an image URL absolute.

    Protocol-relative URLs get https:, relative paths are resolved against
    the page URL, and data: URIs are dropped.
    """
    if not url:
        return None
    url = url.strip()
    if not url or url.startswith('data:'):
        return None
    if url.startswith('//'):
        return 'https:' + url
    if url.startswith(('http://', 'https://')):
        return url
    if base_url:
        return urljoin(base_url, url)
    return None


class ImageCascade:
    """
    Image extraction cascade.

    Usage:
        cascade = ImageCascade()
        image_url, method = cascade.extract(document, profile)
    """

    def __init__(
        self,
        rules: Optional[Dict[str, Any]] = None,
        structured_parser: Optional[StructuredDataParser] = None,
    ):
        """
        Initialize the cascade.

        Args:
            rules: Extraction rules. If None, loads from config.
            structured_parser: JSON-LD parser (shared with the other cascades)
        """
        if rules is None:
            rules = load_extraction_rules()
        self.generic_selectors: List[str] = list(rules.get('generic_image_selectors', []))
        self.attributes: List[str] = list(rules.get('image_attributes', []))
        self.reject_keywords: List[str] = [k.lower() for k in rules.get('image_reject_keywords', [])]
        self.structured = structured_parser or StructuredDataParser()

    def is_valid_product_image(self, url: Optional[str]) -> bool:
        """
        Screen out logos, icons, tracking pixels and banner-shaped images.

        Example:
            >>> cascade.is_valid_product_image("https://cdn.example.com/logo.png")
            False
            >>> cascade.is_valid_product_image("https://cdn.example.com/banner_1200x200.jpg")
            False
        """
        if not url:
            return False
        lower = url.lower()

        if any(keyword in lower for keyword in self.reject_keywords):
            return False

        if 'product' not in lower:
            match = _DIMENSIONS_PATTERN.search(lower)
            if match:
                width, height = int(match.group(1)), int(match.group(2))
                if width < MIN_IMAGE_SIDE or height < MIN_IMAGE_SIDE:
                    return False
                if width > height * MAX_ASPECT_RATIO or height > width * MAX_ASPECT_RATIO:
                    return False

        return True

    def url_from_element(self, element: Optional[Tag], base_url: str = "") -> Optional[str]:
        """
        Read the best image URL an element carries.

        Attributes are checked in configured order; the first one that
        yields a usable URL wins.
        """
        if element is None:
            return None

        for attribute in self.attributes:
            value = element.get(attribute)
            if isinstance(value, list):
                value = ' '.join(value)
            if not value:
                continue
            value = value.strip()

            if value.startswith('{'):
                # Amazon data-a-dynamic-image: {"url": [width, height], ...}
                try:
                    urls = list(json.loads(value))
                except json.JSONDecodeError:
                    continue
                candidate = urls[0] if urls else None
            elif attribute in _SRCSET_ATTRIBUTES:
                candidate = largest_srcset_url(value)
            else:
                candidate = value

            url = normalize_image_url(candidate, base_url)
            if url:
                return url

        return None

    def _read_selector(self, document: RenderedDocument, selector: str) -> Optional[str]:
        element = document.select_one(selector)
        url = self.url_from_element(element, document.url)
        if url:
            return url

        # <picture> carries its candidates on <source> children
        if element is not None and (element.name == 'picture' or 'picture' in selector):
            source = element.find('source') if element.name == 'picture' else None
            if source is None and 'img' in selector:
                source = document.select_one(selector.replace('img', 'source'))
            return self.url_from_element(source, document.url)

        return None

    def _selector_strategies(self, prefix: str, selectors: List[str]) -> List[Strategy[str]]:
        return [
            Strategy(f"{prefix}:{selector}", lambda document, s=selector: self._read_selector(document, s))
            for selector in selectors
        ]

    def _json_ld_image(self, document: RenderedDocument) -> Optional[str]:
        image = self.structured.extract_image(self.structured.parse(document))
        return normalize_image_url(image, document.url)

    def _meta_image(self, selector: str):
        def read(document: RenderedDocument) -> Optional[str]:
            return normalize_image_url(document.get_attribute(selector, 'content'), document.url)
        return read

    def strategies(self, profile: Optional[StoreProfile] = None) -> List[Strategy[str]]:
        """Build the ordered strategy list for a store (None for unknown stores)."""
        strategies: List[Strategy[str]] = []

        if profile and profile.structured_data_priority:
            strategies.append(Strategy('json_ld_priority', self._json_ld_image))

        if profile:
            strategies.extend(self._selector_strategies('store_selector', list(profile.image_selectors)))

        strategies.extend(self._selector_strategies('generic_selector', self.generic_selectors))
        strategies.append(Strategy('og_image', self._meta_image('meta[property="og:image"]')))
        strategies.append(Strategy('twitter_image', self._meta_image('meta[name="twitter:image"]')))
        strategies.append(Strategy('json_ld', self._json_ld_image))

        return strategies

    def extract(
        self,
        document: RenderedDocument,
        profile: Optional[StoreProfile] = None,
    ) -> Tuple[Optional[str], Optional[str]]:
        """
        Resolve the main product image.

        Args:
            document: Rendered product page
            profile: Store profile for the page, if known

        Returns:
            Tuple of (image_url, strategy_name); (None, None) if nothing passed
        """
        return first_success(
            self.strategies(profile), document,
            validate=lambda url: url if self.is_valid_product_image(url) else None,
        )
