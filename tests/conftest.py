"""Shared test fixtures."""

from pathlib import Path

import pytest

from beepbeepcheap.common.config_loader import load_extraction_rules
from beepbeepcheap.extraction.document import RenderedDocument
from beepbeepcheap.extraction.renderers import Renderer, RenderError
from beepbeepcheap.extraction.store_registry import StoreProfile, StoreRegistry
from beepbeepcheap.models import SearchResult

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeRenderer(Renderer):
    """
    Renderer serving canned HTML per URL.

    A page value that is an exception instance is raised from render().
    Session opens and closes are counted so tests can check release.
    """

    name = "fake"

    def __init__(self, pages, registry=None):
        super().__init__(registry=registry or StoreRegistry(), settings={})
        self.pages = dict(pages)
        self.opened = 0
        self.closed = 0
        self.rendered = []

    def _open_session(self):
        self.opened += 1
        return object()

    def _close_session(self, handle):
        self.closed += 1

    def _render(self, handle, target, profile):
        self.rendered.append(target.url)
        page = self.pages.get(target.url)
        if page is None:
            raise RenderError(f"Navigation failed: {target.url}")
        if isinstance(page, Exception):
            raise page
        return RenderedDocument(page, url=target.url)


@pytest.fixture
def fixtures_dir():
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def load_fixture():
    """Read an HTML fixture by filename."""
    def _load(name):
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")
    return _load


@pytest.fixture
def make_document():
    """Build a RenderedDocument from an HTML string."""
    def _make(html, url="https://www.example.com/product"):
        return RenderedDocument(html, url=url)
    return _make


@pytest.fixture
def make_renderer():
    """Build a FakeRenderer from a {url: html} mapping."""
    def _make(pages, registry=None):
        return FakeRenderer(pages, registry=registry)
    return _make


@pytest.fixture
def extraction_rules():
    """Shipped extraction rules (generic selectors, invalid names, ...)."""
    return load_extraction_rules()


@pytest.fixture
def sample_profiles():
    """Small store set for StoreRegistry tests (no config I/O)."""
    return [
        StoreProfile(label="Amazon", hosts=("amazon",)),
        StoreProfile(label="H&M", hosts=("hm.com",)),
        StoreProfile(label="& Other Stories", hosts=("stories.com",)),
        StoreProfile(label="LG", hosts=("lg",), structured_data_priority=True),
        StoreProfile(label="AO", hosts=("ao",)),
        StoreProfile(
            label="Costco",
            hosts=("costco",),
            search_url="https://www.costco.co.uk/search?text={query}",
            product_link_selector='a[href*="/p/"]',
        ),
    ]


@pytest.fixture
def sample_generic_words():
    """Small generic word set for identity tests."""
    return {
        "and", "the", "with", "for", "of", "new", "pack",
        "black", "white", "blue",
        "xs", "xl", "small", "large",
        "ml", "mg", "tablets", "tablet", "capsules",
        "garment", "steamer", "coat", "women", "dress",
    }


@pytest.fixture
def sample_unit_stoplist():
    """Suffixes that are not variant units."""
    return {"st", "nd", "rd", "th", "h", "hr", "hours", "v", "w", "watt", "x", "in", "and", "for", "to"}


@pytest.fixture
def make_result():
    """Build a SearchResult with sensible defaults."""
    def _make(title="Panadol Extra 120 Tablets", price=4.5, store_name="Superdrug",
              product_url="https://www.superdrug.com/p/123", source="test"):
        return SearchResult(
            title=title,
            price=price,
            store_name=store_name,
            product_url=product_url,
            image_url=None,
            source=source,
        )
    return _make
