"""
Price Cascade

Resolves the current selling price of a product page by trying, in order:
- JSON-LD offer price and inline Offer data (stores flagged for structured data)
- Store-specific CSS selectors
- Generic price selectors
- Currency-prefixed amounts in the visible page text
- Price meta tags (product:price:amount, og:price:amount)
- JSON-LD offer price

The first candidate that parses to a price in the sane band wins.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from ...common.config_loader import load_extraction_rules
from ...common.constants import TEXT_SCAN_MAX_PRICE, TEXT_SCAN_MIN_PRICE
from ...common.text_utils import clean_price
from ..cascade import Strategy, first_success, selector_strategies
from ..document import RenderedDocument
from ..store_registry import StoreProfile
from .structured_data import StructuredDataParser

# "£19.99", "$ 1,299.00", "€45"
CURRENCY_AMOUNT_PATTERN = re.compile(
    r'[£$€]\s*(\d{1,3}(?:,\d{3})*(?:\.\d{2})?|\d+(?:\.\d{2})?)'
)

# Attributes holding a machine-readable price when the element has no text
_PRICE_ATTRIBUTES = ['content', 'data-price']


def read_price_element(document: RenderedDocument, selector: str) -> Optional[str]:
    """Element text, or its content/data-price attribute when the text is empty."""
    element = document.select_one(selector)
    if element is None:
        return None

    text = element.get_text(" ").strip()
    if text:
        return text

    for attribute in _PRICE_ATTRIBUTES:
        value = element.get(attribute)
        if value:
            return value

    return None


def scan_text_for_price(text: str) -> Optional[str]:
    """
    Find the first currency-prefixed amount within the text-scan band.

    Example:
        >>> scan_text_for_price("Was £0.50 now £24.99 | Save £5.00")
        '24.99'
    """
    for match in CURRENCY_AMOUNT_PATTERN.finditer(text or ""):
        amount = match.group(1)
        value = clean_price(amount)
        if value is not None and TEXT_SCAN_MIN_PRICE <= value <= TEXT_SCAN_MAX_PRICE:
            return amount
    return None


class PriceCascade:
    """
    Price extraction cascade.

    Usage:
        cascade = PriceCascade()
        price, method = cascade.extract(document, profile)
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
        self.generic_selectors: List[str] = list(rules.get('generic_price_selectors', []))
        self.meta_selectors: List[str] = list(rules.get('price_meta_selectors', []))
        self.structured = structured_parser or StructuredDataParser()

    def strategies(self, profile: Optional[StoreProfile] = None) -> List[Strategy[str]]:
        """Build the ordered strategy list for a store (None for unknown stores)."""
        strategies: List[Strategy[str]] = []

        if profile and profile.structured_data_priority:
            strategies.append(Strategy('json_ld_priority', self._json_ld_price))
            strategies.append(Strategy('inline_offer', self._inline_offer_price))

        if profile:
            strategies.extend(
                selector_strategies('store_selector', list(profile.price_selectors), read_price_element)
            )

        strategies.extend(
            selector_strategies('generic_selector', self.generic_selectors, read_price_element)
        )
        strategies.append(Strategy('text_scan', lambda document: scan_text_for_price(document.visible_text)))
        strategies.extend(
            selector_strategies('meta', self.meta_selectors,
                                lambda document, s: document.get_attribute(s, 'content'))
        )
        strategies.append(Strategy('json_ld', self._json_ld_price))

        return strategies

    def extract(
        self,
        document: RenderedDocument,
        profile: Optional[StoreProfile] = None,
    ) -> Tuple[Optional[float], Optional[str]]:
        """
        Resolve the page price.

        Args:
            document: Rendered product page
            profile: Store profile for the page, if known

        Returns:
            Tuple of (price, strategy_name); (None, None) if nothing parsed
        """
        return first_success(self.strategies(profile), document, validate=clean_price)

    def _json_ld_price(self, document: RenderedDocument) -> Optional[str]:
        return self.structured.extract_price(self.structured.parse(document))

    def _inline_offer_price(self, document: RenderedDocument) -> Optional[str]:
        return self.structured.find_inline_offer_price(document.html)
