"""
Product data models.

Pure data classes for representing extracted products, product identities
and cross-store search candidates.
No business logic - only data structure definitions.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class ScrapeTarget:
    """A page to extract, with an optional store label override."""
    url: str
    store_hint: Optional[str] = None


@dataclass(frozen=True)
class ExtractedProduct:
    """
    Normalized product record produced by one extraction call.

    price is None only when every price strategy failed.
    extraction_method maps each resolved field ('price', 'name', 'image')
    to the name of the strategy that produced it.
    """
    name: str
    price: Optional[float]
    image_url: Optional[str]
    store_name: str
    source_url: str
    extraction_method: Dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class ScrapeFailure:
    """Page-load level failure (network, timeout, navigation)."""
    error: str
    store_name: str
    source_url: str

    @property
    def success(self) -> bool:
        return False


@dataclass(frozen=True)
class ProductIdentity:
    """
    Identifying features derived from a product name.

    Fields:
    - identifying_words: up to 2 lower-cased non-generic tokens, in title order
    - model_number: lower-cased model token (e.g., "hd9640"), if any
    - variants: sorted, de-duplicated size/quantity/unit descriptors
    """
    identifying_words: Tuple[str, ...] = ()
    model_number: Optional[str] = None
    variants: Tuple[str, ...] = ()

    @property
    def variant_set(self) -> FrozenSet[str]:
        return frozenset(self.variants)

    @property
    def is_empty(self) -> bool:
        return not (self.identifying_words or self.model_number or self.variants)


@dataclass(frozen=True)
class SearchResult:
    """Listing returned by a search provider. Untrusted until matched."""
    title: str
    price: Optional[float]
    store_name: str
    product_url: str
    image_url: Optional[str] = None
    source: str = ""


@dataclass(frozen=True)
class MatchCandidate:
    """A search result that matched the reference product, priced against it."""
    title: str
    price: float
    store_name: str
    product_url: str
    image_url: Optional[str]
    source: str
    is_cheaper: bool
    savings_amount: Optional[float] = None
    savings_percent: Optional[float] = None
    extra_cost: Optional[float] = None
    extra_cost_percent: Optional[float] = None


@dataclass(frozen=True)
class AlternativesResult:
    """Top matches from other stores plus whether the current price is best."""
    alternatives: Tuple[MatchCandidate, ...] = ()
    has_best_price: bool = True
