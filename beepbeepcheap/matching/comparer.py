"""
Price Comparer

Runs the full comparison for one product page:
extract the product, derive its identity, search other stores, and keep
the cheapest matching listings.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from ..extraction.product_extractor import ProductExtractor
from ..extraction.renderers import Renderer
from ..extraction.store_registry import StoreRegistry, get_store_registry
from ..models import AlternativesResult, ExtractedProduct, ProductIdentity, ScrapeFailure
from ..search.base import SearchProvider, collect_candidates
from ..search.duckduckgo import DuckDuckGoShoppingProvider
from ..search.google_shopping import GoogleShoppingProvider
from ..search.query import build_search_query
from ..search.store_search import StoreSiteSearchProvider
from .identity import ProductIdentityExtractor, get_identity_extractor
from .matcher import CandidateMatcher

logger = logging.getLogger(__name__)


def default_providers(
    registry: Optional[StoreRegistry] = None,
    store_search: bool = True,
    renderer: Optional[Renderer] = None,
) -> List[SearchProvider]:
    """
    Build the standard provider list.

    General shopping indexes come first, followed by the site search of
    every store in the registry that has one configured (e.g. Costco).

    Args:
        registry: Store registry. If None, uses the config-backed registry.
        store_search: Include per-store site search providers
        renderer: Renderer shared by all providers. If None, each provider
            creates its own on first use.
    """
    providers: List[SearchProvider] = [
        DuckDuckGoShoppingProvider(renderer=renderer),
        GoogleShoppingProvider(renderer=renderer),
    ]
    if store_search:
        registry = registry or get_store_registry()
        providers.extend(
            StoreSiteSearchProvider(profile, renderer=renderer)
            for profile in registry.searchable_profiles()
        )
    return providers


@dataclass
class ComparisonReport:
    """Outcome of comparing one product against other stores."""
    product: Union[ExtractedProduct, ScrapeFailure]
    identity: ProductIdentity = field(default_factory=ProductIdentity)
    query: str = ""
    result: AlternativesResult = field(default_factory=AlternativesResult)
    provider_errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.product.success


class PriceComparer:
    """
    Compares a product's price against other stores.

    Usage:
        comparer = PriceComparer()
        report = comparer.compare("https://www.boots.com/panadol-extra-120-tablets-10263537")
        for alternative in report.result.alternatives:
            print(alternative.store_name, alternative.price)
    """

    def __init__(
        self,
        extractor: Optional[ProductExtractor] = None,
        providers: Optional[Sequence[SearchProvider]] = None,
        identity_extractor: Optional[ProductIdentityExtractor] = None,
        max_alternatives: int = 3,
        store_search: bool = True,
    ):
        """
        Initialize the comparer.

        Args:
            extractor: Product extractor. If None, a default one is created.
            providers: Search providers. If None, see default_providers().
            identity_extractor: Identity extractor shared with the matcher
            max_alternatives: Number of alternatives to keep
            store_search: With default providers, also query stores' own site search
        """
        self.extractor = extractor or ProductExtractor()
        if providers is None:
            providers = default_providers(self.extractor.registry, store_search=store_search)
        self.providers = list(providers)
        self.identity_extractor = identity_extractor or get_identity_extractor()
        self.matcher = CandidateMatcher(self.identity_extractor)
        self.max_alternatives = max_alternatives

    def compare(
        self,
        url: str,
        brand: Optional[str] = None,
        store_hint: Optional[str] = None,
    ) -> ComparisonReport:
        """
        Compare a product page against other stores.

        Args:
            url: Product page URL
            brand: Brand to add to the search query, if known
            store_hint: Store label overriding the one resolved from the URL

        Returns:
            ComparisonReport. When extraction failed or found no price, the
            result is empty and no search is made.
        """
        product = self.extractor.extract(url, store_hint=store_hint)
        if not product.success:
            logger.warning("Cannot compare %s: %s", url, product.error)
            return ComparisonReport(product=product)

        identity = self.identity_extractor.derive_identity(product.name)
        query = build_search_query(product.name, brand)

        if product.price is None:
            logger.warning("Cannot compare %s: no price found", url)
            return ComparisonReport(product=product, identity=identity, query=query)

        candidates, errors = collect_candidates(query, self.providers)
        logger.info("Collected %d candidate(s) for %r", len(candidates), query)

        result = self.matcher.find_alternatives(
            identity,
            product.price,
            product.store_name,
            candidates,
            limit=self.max_alternatives,
        )

        return ComparisonReport(
            product=product,
            identity=identity,
            query=query,
            result=result,
            provider_errors=errors,
        )
