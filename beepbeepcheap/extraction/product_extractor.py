"""
Product Extractor

Turns a product page URL into a normalized ExtractedProduct:
1. Resolve the store label and profile for the URL
2. Render the page (the renderer owns the browser/HTTP session)
3. Run the price, name and image cascades against the rendered document

Page-load failures come back as a ScrapeFailure rather than an exception;
missing fields are not failures.
"""

import logging
from typing import Optional, Union

from ..common.constants import UNKNOWN_PRODUCT
from ..models import ExtractedProduct, ScrapeFailure, ScrapeTarget
from .document import RenderedDocument
from .parsers import ImageCascade, NameCascade, PriceCascade, StructuredDataParser
from .renderers import Renderer, RenderError, create_renderer
from .store_registry import StoreRegistry, get_store_registry

logger = logging.getLogger(__name__)

ExtractionResult = Union[ExtractedProduct, ScrapeFailure]


class ProductExtractor:
    """
    Extracts product records from retail pages.

    Usage:
        extractor = ProductExtractor()
        result = extractor.extract("https://www.zara.com/uk/en/wool-coat-p02010744.html")
        if result.success:
            print(result.name, result.price)
    """

    def __init__(
        self,
        renderer: Optional[Renderer] = None,
        registry: Optional[StoreRegistry] = None,
        price_cascade: Optional[PriceCascade] = None,
        name_cascade: Optional[NameCascade] = None,
        image_cascade: Optional[ImageCascade] = None,
    ):
        """
        Initialize the extractor.

        Args:
            renderer: Page renderer. If None, uses the configured default.
            registry: Store registry. If None, uses the config-backed registry.
            price_cascade / name_cascade / image_cascade: Field cascades
                (built from config when not supplied)
        """
        self.registry = registry or get_store_registry()
        self._renderer = renderer

        structured = StructuredDataParser()
        self.price_cascade = price_cascade or PriceCascade(structured_parser=structured)
        self.name_cascade = name_cascade or NameCascade(structured_parser=structured)
        self.image_cascade = image_cascade or ImageCascade(structured_parser=structured)

    @property
    def renderer(self) -> Renderer:
        if self._renderer is None:
            self._renderer = create_renderer(registry=self.registry)
        return self._renderer

    def extract(self, url: str, store_hint: Optional[str] = None) -> ExtractionResult:
        """
        Extract a product from its page.

        Args:
            url: Product page URL
            store_hint: Store label overriding the one resolved from the URL

        Returns:
            ExtractedProduct, or ScrapeFailure if the page could not be loaded
        """
        target = ScrapeTarget(url=url, store_hint=store_hint)
        store_name = store_hint or self.registry.get_store_name(url)

        logger.info("Extracting %s (%s)", url, store_name)
        try:
            document = self.renderer.render(target)
        except RenderError as e:
            logger.warning("Render failed for %s: %s", url, e)
            return ScrapeFailure(error=str(e), store_name=store_name, source_url=url)

        return self.extract_from_document(document, url=url, store_name=store_name)

    def extract_from_document(
        self,
        document: RenderedDocument,
        url: Optional[str] = None,
        store_name: Optional[str] = None,
    ) -> ExtractedProduct:
        """
        Run the field cascades against an already rendered page.

        Args:
            document: Rendered product page
            url: Source URL (defaults to the document URL)
            store_name: Store label (defaults to the label resolved from the URL)

        Returns:
            ExtractedProduct with whatever fields could be resolved
        """
        url = url or document.url
        profile = self.registry.resolve(document.url or url)
        if store_name is None:
            store_name = self.registry.get_store_name(url)

        methods = {}

        price, method = self.price_cascade.extract(document, profile)
        if method:
            methods['price'] = method

        name, method = self.name_cascade.extract(document, profile)
        if method:
            methods['name'] = method

        image_url, method = self.image_cascade.extract(document, profile)
        if method:
            methods['image'] = method

        logger.debug("Extraction methods for %s: %s", url, methods)
        if price is None:
            logger.info("No price found on %s", url)

        return ExtractedProduct(
            name=name or UNKNOWN_PRODUCT,
            price=price,
            image_url=image_url,
            store_name=store_name,
            source_url=url,
            extraction_method=methods,
        )

    def scrape_price(self, url: str) -> Optional[float]:
        """
        Refresh only the price of a product page.

        Returns:
            Current price, or None if the page failed to load or had no price
        """
        target = ScrapeTarget(url=url)
        try:
            document = self.renderer.render(target)
        except RenderError as e:
            logger.warning("Price refresh failed for %s: %s", url, e)
            return None

        price, method = self.price_cascade.extract(document, self.registry.resolve(document.url or url))
        logger.debug("Price for %s: %s (%s)", url, price, method)
        return price
