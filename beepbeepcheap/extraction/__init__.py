"""
Product extraction from retail pages.

Modules:
    store_registry - StoreRegistry: URL host to store label and profile
    document - RenderedDocument: queryable view of a rendered page
    renderers - HttpRenderer / BrowserRenderer page renderers
    cascade - Ordered fallback strategies with first-success selection
    product_extractor - ProductExtractor: URL to ExtractedProduct
    parsers - Price, name, image and JSON-LD parsers
"""

from typing import Optional

from .cascade import Strategy, first_success, selector_strategies
from .document import RenderedDocument
from .parsers import ImageCascade, NameCascade, PriceCascade, StructuredDataParser
from .product_extractor import ExtractionResult, ProductExtractor
from .renderers import BrowserRenderer, HttpRenderer, Renderer, RenderError, create_renderer
from .store_registry import StoreProfile, StoreRegistry, get_store_name, get_store_registry


def extract(url: str, store_hint: Optional[str] = None) -> ExtractionResult:
    """Extract a product with the default renderer and store registry."""
    return ProductExtractor().extract(url, store_hint=store_hint)


__all__ = [
    'extract',
    'ExtractionResult',
    'ProductExtractor',
    # Documents and renderers
    'RenderedDocument',
    'Renderer',
    'HttpRenderer',
    'BrowserRenderer',
    'RenderError',
    'create_renderer',
    # Store registry
    'StoreProfile',
    'StoreRegistry',
    'get_store_name',
    'get_store_registry',
    # Cascades
    'Strategy',
    'first_success',
    'selector_strategies',
    'StructuredDataParser',
    'PriceCascade',
    'NameCascade',
    'ImageCascade',
]
