"""
Search providers for cross-store price comparison.

Providers:
- DuckDuckGoShoppingProvider: DuckDuckGo shopping tab
- GoogleShoppingProvider: Google Shopping results
- StoreSiteSearchProvider: a retailer's own site search
"""

from .base import SearchProvider, SearchProviderError, collect_candidates, create_search_renderer
from .duckduckgo import DuckDuckGoShoppingProvider
from .google_shopping import GoogleShoppingProvider, unwrap_redirect
from .query import build_search_query, normalize_brand, url_matches_brand
from .store_search import StoreSiteSearchProvider

__all__ = [
    'SearchProvider',
    'SearchProviderError',
    'collect_candidates',
    'create_search_renderer',
    'DuckDuckGoShoppingProvider',
    'GoogleShoppingProvider',
    'StoreSiteSearchProvider',
    'unwrap_redirect',
    'build_search_query',
    'normalize_brand',
    'url_matches_brand',
]
