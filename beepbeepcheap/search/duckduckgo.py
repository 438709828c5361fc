"""
DuckDuckGo Shopping Provider

Reads the shopping tab of DuckDuckGo. Result cards are plain <li>
elements; each card's text carries the title, a £ price and usually the
merchant name.
"""

import re
from typing import Iterable, List, Optional
from urllib.parse import quote_plus

from ..common.config_loader import load_extraction_rules
from ..common.text_utils import clean_price
from ..extraction.document import RenderedDocument
from ..extraction.renderers import Renderer
from ..models import SearchResult
from .base import SearchProvider

_CARD_PRICE_PATTERN = re.compile(r'£(\d+\.\d{2})')

# Filter and sort controls share the result list markup
_FILTER_MARKERS = ['Up to £', 'Price -', 'Low To High']

MIN_CARD_TEXT_LENGTH = 30
MIN_TITLE_LENGTH = 20
MAX_TITLE_LENGTH = 200
DEDUP_PREFIX_LENGTH = 30


class DuckDuckGoShoppingProvider(SearchProvider):
    """
    DuckDuckGo shopping search.

    Usage:
        provider = DuckDuckGoShoppingProvider()
        results = provider.search("Panadol Extra 120 Tablets")
    """

    name = "duckduckgo"

    SEARCH_URL = "https://duckduckgo.com/?q={query}&iar=shopping&iax=shopping&ia=shopping"

    def __init__(
        self,
        renderer: Optional[Renderer] = None,
        store_names: Optional[Iterable[str]] = None,
    ):
        """
        Initialize the provider.

        Args:
            renderer: Page renderer
            store_names: Merchant names recognised in card text, most
                specific first. If None, loads from config.
        """
        super().__init__(renderer=renderer)
        if store_names is None:
            store_names = load_extraction_rules().get('search_store_names', [])
        self.store_names: List[str] = list(store_names)

    def build_search_url(self, query: str) -> str:
        return self.SEARCH_URL.format(query=quote_plus(query))

    def parse_results(self, document: RenderedDocument) -> List[SearchResult]:
        results: List[SearchResult] = []
        seen = set()

        for card in document.select('li'):
            text = card.get_text("\n")
            price_match = _CARD_PRICE_PATTERN.search(text)
            if not price_match:
                continue

            if len(text.strip()) < MIN_CARD_TEXT_LENGTH:
                continue
            if any(marker in text for marker in _FILTER_MARKERS):
                continue

            link = card.find('a', href=True)
            if link is None:
                continue

            title = self._card_title(text)
            store_name = self._card_store(text)

            key = (title[:DEDUP_PREFIX_LENGTH], store_name)
            if key in seen:
                continue
            seen.add(key)

            image = card.find('img', src=True)
            results.append(SearchResult(
                title=title[:MAX_TITLE_LENGTH],
                price=clean_price(price_match.group(1)),
                store_name=store_name,
                product_url=link['href'],
                image_url=image['src'] if image else None,
                source=self.name,
            ))

        return sorted(results, key=lambda r: r.price or 0)

    @staticmethod
    def _card_title(text: str) -> str:
        lines = [line.strip() for line in text.split('\n') if line.strip()]
        for line in lines:
            if len(line) > MIN_TITLE_LENGTH and not line.startswith(('£', 'Free')):
                return line
        return lines[0] if lines else ""

    def _card_store(self, text: str) -> str:
        for store in self.store_names:
            if store in text:
                return store
        return ""
