"""
Cross-Store Candidate Matcher

Filters search results down to listings of the same product at other
stores, prices them against the reference, and returns the cheapest few.

A candidate survives when:
- it is sold by a different store
- it has a positive price
- its title contains every identifying word and the model number
- its own variants include every reference variant (a 60-tablet listing
  never matches a 120-tablet product)
"""

import logging
from typing import Iterable, List, Optional

from ..common.constants import MAX_ALTERNATIVES
from ..models import AlternativesResult, MatchCandidate, ProductIdentity, SearchResult
from .identity import ProductIdentityExtractor, get_identity_extractor

logger = logging.getLogger(__name__)


def is_same_store(store_a: Optional[str], store_b: Optional[str]) -> bool:
    """
    Case-insensitive containment check between two store labels.

    An empty label never matches, so listings without a store are kept.

    Example:
        >>> is_same_store("Amazon", "Amazon UK")
        True
        >>> is_same_store("", "Amazon")
        False
    """
    a = (store_a or "").strip().lower()
    b = (store_b or "").strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


def _has_valid_price(candidate: SearchResult) -> bool:
    price = candidate.price
    if price is None or isinstance(price, bool):
        return False
    try:
        return float(price) > 0
    except (TypeError, ValueError):
        return False


class CandidateMatcher:
    """
    Matches and ranks candidate listings against a reference product.

    Usage:
        matcher = CandidateMatcher()
        result = matcher.find_alternatives(identity, 50.0, "Boots", candidates)
        for alternative in result.alternatives:
            print(alternative.store_name, alternative.price)
    """

    def __init__(self, extractor: Optional[ProductIdentityExtractor] = None):
        """
        Initialize the matcher.

        Args:
            extractor: Identity extractor used to read candidate variants.
                If None, uses the config-backed default.
        """
        self.extractor = extractor or get_identity_extractor()

    def matches(
        self,
        identity: ProductIdentity,
        current_store_name: str,
        candidate: SearchResult,
    ) -> bool:
        """Check one candidate against the reference identity and store."""
        if is_same_store(candidate.store_name, current_store_name):
            return False

        if not _has_valid_price(candidate):
            return False

        title = (candidate.title or "").lower()

        if not all(word in title for word in identity.identifying_words):
            return False

        if identity.model_number and identity.model_number not in title:
            return False

        if identity.variants:
            candidate_variants = set(self.extractor.extract_variants(candidate.title))
            if not identity.variant_set.issubset(candidate_variants):
                return False

        return True

    def find_alternatives(
        self,
        identity: ProductIdentity,
        current_price: Optional[float],
        current_store_name: str,
        candidates: Iterable[SearchResult],
        limit: int = MAX_ALTERNATIVES,
    ) -> AlternativesResult:
        """
        Find the cheapest matching listings at other stores.

        Args:
            identity: Identity of the reference product
            current_price: Reference price (None or <= 0 means unknown)
            current_store_name: Store the reference product is sold at
            candidates: Search results from one or more providers
            limit: Maximum number of alternatives to return

        Returns:
            AlternativesResult; empty with has_best_price=True when nothing matched
        """
        current = float(current_price) if current_price else 0.0

        matched = [c for c in candidates if self.matches(identity, current_store_name, c)]
        # sorted() is stable: equal prices keep provider order
        matched = sorted(matched, key=lambda c: float(c.price))

        logger.debug("%d candidate(s) matched %s", len(matched), identity)

        if not matched:
            return AlternativesResult(alternatives=(), has_best_price=True)

        lowest = float(matched[0].price)
        has_best_price = current > 0 and current <= lowest

        alternatives = tuple(self._price_candidate(c, current) for c in matched[:limit])
        return AlternativesResult(alternatives=alternatives, has_best_price=has_best_price)

    @staticmethod
    def _price_candidate(candidate: SearchResult, current: float) -> MatchCandidate:
        price = float(candidate.price)
        is_cheaper = current > 0 and price < current

        savings_amount = savings_percent = extra_cost = extra_cost_percent = None
        if current > 0:
            difference = round(abs(current - price), 2)
            percent = round(abs(current - price) / current * 100, 1)
            if is_cheaper:
                savings_amount, savings_percent = difference, percent
            else:
                extra_cost, extra_cost_percent = difference, percent

        return MatchCandidate(
            title=candidate.title,
            price=price,
            store_name=candidate.store_name,
            product_url=candidate.product_url,
            image_url=candidate.image_url,
            source=candidate.source,
            is_cheaper=is_cheaper,
            savings_amount=savings_amount,
            savings_percent=savings_percent,
            extra_cost=extra_cost,
            extra_cost_percent=extra_cost_percent,
        )


def find_alternatives(
    identity: ProductIdentity,
    current_price: Optional[float],
    current_store_name: str,
    candidates: Iterable[SearchResult],
    limit: int = MAX_ALTERNATIVES,
) -> AlternativesResult:
    """Match and rank candidates using the default identity word lists."""
    return CandidateMatcher().find_alternatives(
        identity, current_price, current_store_name, candidates, limit=limit
    )
