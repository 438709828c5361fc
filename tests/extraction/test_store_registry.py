"""Tests for beepbeepcheap/extraction/store_registry.py"""

import pytest

from beepbeepcheap.extraction.store_registry import (
    StoreProfile,
    StoreRegistry,
    get_store_name,
    get_store_registry,
)


@pytest.fixture
def registry(sample_profiles):
    return StoreRegistry(sample_profiles)


class TestResolve:
    def test_label_fragment_matches_any_tld(self, registry):
        assert registry.resolve("https://www.amazon.co.uk/dp/B0ABC").label == "Amazon"
        assert registry.resolve("https://www.amazon.com/dp/B0ABC").label == "Amazon"

    def test_dotted_fragment_matches_subdomain(self, registry):
        assert registry.resolve("https://www2.hm.com/en_gb/productpage.1.html").label == "H&M"

    def test_dotted_fragment_does_not_match_longer_host(self, registry):
        # "stories.com" must not claim "otherstories.com.example"
        assert registry.resolve("https://www.otherstories.com.example/item") is None

    def test_bare_fragment_requires_whole_label(self, registry):
        # "ao" is a substring of "chaos" but not a DNS label of it
        assert registry.resolve("https://www.chaos.com/item") is None
        assert registry.resolve("https://ao.com/product/123").label == "AO"

    def test_case_insensitive_host(self, registry):
        assert registry.resolve("https://WWW.AMAZON.CO.UK/dp/B0ABC").label == "Amazon"

    def test_unknown_host(self, registry):
        assert registry.resolve("https://www.somestore.co.uk/item") is None

    def test_malformed_url(self, registry):
        assert registry.resolve("not a url") is None
        assert registry.resolve("") is None

    def test_longest_fragment_wins(self):
        registry = StoreRegistry([
            StoreProfile(label="Generic", hosts=("shop",)),
            StoreProfile(label="Specific", hosts=("shop.example.com",)),
        ])
        assert registry.resolve("https://shop.example.com/item").label == "Specific"


class TestGetStoreName:
    def test_known_store(self, registry):
        assert registry.get_store_name("https://www.amazon.co.uk/dp/B0ABC") == "Amazon"

    def test_unknown_store_uses_domain(self, registry):
        assert registry.get_store_name("https://www.somestore.co.uk/item") == "Somestore"

    def test_unknown_store_without_www(self, registry):
        assert registry.get_store_name("https://shop.example.org/item") == "Shop"

    def test_malformed_url(self, registry):
        assert registry.get_store_name("not a url") == "Unknown Store"

    def test_empty_url(self, registry):
        assert registry.get_store_name("") == "Unknown Store"

    def test_deterministic(self, registry):
        url = "https://www2.hm.com/en_gb/productpage.1.html"
        assert registry.get_store_name(url) == registry.get_store_name(url)


class TestGetByLabel:
    def test_case_insensitive(self, registry):
        assert registry.get_by_label("costco").label == "Costco"

    def test_unknown_label(self, registry):
        assert registry.get_by_label("Nowhere") is None

    def test_empty_label(self, registry):
        assert registry.get_by_label("") is None


class TestSearchableProfiles:
    def test_only_profiles_with_site_search(self, registry):
        labels = [p.label for p in registry.searchable_profiles()]
        assert labels == ["Costco"]


class TestStoreProfile:
    def test_from_dict_lowercases_hosts(self):
        profile = StoreProfile.from_dict({"label": "Zara", "hosts": ["ZARA.com"], "slow_page": True})
        assert profile.hosts == ("zara.com",)
        assert profile.slow_page is True
        assert profile.structured_data_priority is False

    def test_from_dict_cookies(self):
        profile = StoreProfile.from_dict({
            "label": "COS",
            "hosts": ["cos.com"],
            "cookies": [{"name": "HMCORP_locale", "value": "en_US", "domain": ".cos.com"}],
        })
        assert profile.cookies[0]["name"] == "HMCORP_locale"

    def test_build_search_url_encodes_query(self):
        profile = StoreProfile(label="Costco", search_url="https://www.costco.co.uk/search?text={query}")
        assert profile.build_search_url("Philips Airfryer & more") == (
            "https://www.costco.co.uk/search?text=Philips+Airfryer+%26+more"
        )

    def test_searchable_needs_link_selector(self):
        profile = StoreProfile(label="X", search_url="https://x.com/s?q={query}")
        assert profile.searchable is False


class TestDefaultRegistry:
    def test_singleton(self):
        assert get_store_registry() is get_store_registry()

    def test_config_stores(self):
        assert get_store_name("https://www.zara.com/uk/en/coat-p02010744.html") == "Zara"
        assert get_store_name("https://www.lg.com/uk/tvs/lg-oled55c36lc") == "LG"
        assert get_store_name("https://www.boots.com/panadol-extra-10263537") == "Boots"
        assert get_store_name("https://www.costco.co.uk/p/123") == "Costco"

    def test_config_hm_not_confused_with_other_stores(self):
        assert get_store_name("https://www.stories.com/en_gbp/product.coat.123.html") == "& Other Stories"
        assert get_store_name("https://www2.hm.com/en_gb/productpage.1.html") == "H&M"
