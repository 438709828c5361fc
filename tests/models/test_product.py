"""Tests for beepbeepcheap/models/product.py"""

import dataclasses

import pytest

from beepbeepcheap.models import (
    AlternativesResult,
    ExtractedProduct,
    ProductIdentity,
    ScrapeFailure,
    ScrapeTarget,
    SearchResult,
)


@pytest.fixture
def product():
    return ExtractedProduct(
        name="Oversized Wool Blend Coat",
        price=119.0,
        image_url="https://static.zara.net/photos/coat.jpg",
        store_name="Zara",
        source_url="https://www.zara.com/uk/en/oversized-wool-blend-coat-p02010744.html",
        extraction_method={"price": "store_selector:.money-amount__main"},
    )


class TestScrapeTarget:
    def test_store_hint_defaults_to_none(self):
        target = ScrapeTarget("https://www.zara.com/uk/en/coat-p1.html")
        assert target.store_hint is None


class TestExtractedProduct:
    def test_success(self, product):
        assert product.success is True

    def test_frozen(self, product):
        with pytest.raises(dataclasses.FrozenInstanceError):
            product.price = 99.0

    def test_extraction_method_not_compared(self, product):
        other = dataclasses.replace(product, extraction_method={"price": "json_ld"})
        assert other == product

    def test_price_may_be_none(self):
        product = ExtractedProduct(
            name="Unknown Product", price=None, image_url=None,
            store_name="Somestore", source_url="https://www.somestore.com/item",
        )
        assert product.success is True
        assert product.extraction_method == {}


class TestScrapeFailure:
    def test_not_success(self):
        failure = ScrapeFailure(error="timeout", store_name="Zara", source_url="https://www.zara.com/x")
        assert failure.success is False
        assert failure.error == "timeout"


class TestProductIdentity:
    def test_default_is_empty(self):
        assert ProductIdentity().is_empty is True

    def test_with_words_not_empty(self):
        assert ProductIdentity(identifying_words=("tefal",)).is_empty is False

    def test_variant_set(self):
        identity = ProductIdentity(variants=("120tablets", "x2"))
        assert identity.variant_set == frozenset({"120tablets", "x2"})

    def test_equal_values_are_equal(self):
        a = ProductIdentity(("panadol", "extra"), None, ("120tablets",))
        b = ProductIdentity(("panadol", "extra"), None, ("120tablets",))
        assert a == b
        assert hash(a) == hash(b)


class TestSearchResult:
    def test_defaults(self):
        result = SearchResult(title="Coat", price=None, store_name="", product_url="")
        assert result.image_url is None
        assert result.source == ""


class TestAlternativesResult:
    def test_defaults(self):
        result = AlternativesResult()
        assert result.alternatives == ()
        assert result.has_best_price is True
