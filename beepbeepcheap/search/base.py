"""
Search Provider Base

A search provider turns a text query into candidate listings from one
shopping-search backend. Providers render a results page and parse it;
parsing is kept separate from rendering so it can be tested against saved
result pages.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from ..common.config_loader import load_settings
from ..extraction.document import RenderedDocument
from ..extraction.renderers import Renderer, RenderError, create_renderer
from ..models import ScrapeTarget, SearchResult

logger = logging.getLogger(__name__)


class SearchProviderError(Exception):
    """A search backend could not be queried."""


def create_search_renderer(kind: Optional[str] = None) -> Renderer:
    """Build a renderer using the 'search' timeouts on top of the render settings."""
    settings = load_settings()
    render_settings = dict(settings.get('render', {}))
    render_settings.update(settings.get('search', {}))
    return create_renderer(kind, settings=render_settings)


class SearchProvider:
    """
    Base class for search providers.

    Subclasses set `name` and implement build_search_url and parse_results.

    Usage:
        provider = DuckDuckGoShoppingProvider()
        results = provider.search("Tefal AeroSteam Garment Steamer")
    """

    name = "base"

    def __init__(self, renderer: Optional[Renderer] = None):
        """
        Initialize the provider.

        Args:
            renderer: Page renderer. If None, a browser renderer is created
                on first use.
        """
        self._renderer = renderer

    @property
    def renderer(self) -> Renderer:
        if self._renderer is None:
            self._renderer = create_search_renderer()
        return self._renderer

    def build_search_url(self, query: str) -> str:
        raise NotImplementedError

    def parse_results(self, document: RenderedDocument) -> List[SearchResult]:
        """Parse a rendered results page into listings."""
        raise NotImplementedError

    def fetch(self, url: str) -> RenderedDocument:
        """
        Render a results page.

        Raises:
            SearchProviderError: If the page could not be loaded
        """
        try:
            return self.renderer.render(ScrapeTarget(url=url))
        except RenderError as e:
            raise SearchProviderError(f"{self.name} search failed: {e}") from e

    def search(self, query: str) -> List[SearchResult]:
        """
        Search the backend for a query.

        Args:
            query: Free-text product query

        Returns:
            Candidate listings (possibly empty)

        Raises:
            SearchProviderError: If the backend could not be queried
        """
        url = self.build_search_url(query)
        logger.info("%s search: %s", self.name, url)

        results = self.parse_results(self.fetch(url))
        logger.info("%s returned %d result(s)", self.name, len(results))
        return results


def collect_candidates(
    query: str,
    providers: Iterable[SearchProvider],
) -> Tuple[List[SearchResult], List[str]]:
    """
    Run a query against several providers and concatenate their results.

    A failing provider is logged and reported; it does not stop the others.

    Args:
        query: Free-text product query
        providers: Providers to query, in order

    Returns:
        Tuple of (results in provider order, error messages)
    """
    results: List[SearchResult] = []
    errors: List[str] = []

    for provider in providers:
        try:
            results.extend(provider.search(query))
        except SearchProviderError as e:
            logger.warning("Provider %s failed: %s", provider.name, e)
            errors.append(str(e))

    return results, errors
