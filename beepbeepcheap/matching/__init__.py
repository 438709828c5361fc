"""
Cross-store product matching.

Modules:
    identity - ProductIdentityExtractor: keywords, model number, variants
    matcher - CandidateMatcher: filter and rank listings from other stores
    comparer - PriceComparer: extract, search and match in one call
"""

from .comparer import ComparisonReport, PriceComparer, default_providers
from .identity import (
    ProductIdentityExtractor,
    derive_identity,
    extract_variants,
    get_identity_extractor,
)
from .matcher import CandidateMatcher, find_alternatives, is_same_store

__all__ = [
    'ProductIdentityExtractor',
    'derive_identity',
    'extract_variants',
    'get_identity_extractor',
    'CandidateMatcher',
    'find_alternatives',
    'is_same_store',
    'PriceComparer',
    'ComparisonReport',
    'default_providers',
]
