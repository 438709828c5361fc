"""
Data models for product extraction and price comparison.

This module contains pure data classes with no business logic.
"""

from .product import (
    AlternativesResult,
    ExtractedProduct,
    MatchCandidate,
    ProductIdentity,
    ScrapeFailure,
    ScrapeTarget,
    SearchResult,
)

__all__ = [
    'ScrapeTarget',
    'ExtractedProduct',
    'ScrapeFailure',
    'ProductIdentity',
    'SearchResult',
    'MatchCandidate',
    'AlternativesResult',
]
