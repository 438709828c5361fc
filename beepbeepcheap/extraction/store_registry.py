"""
Store Registry

Maps a URL's host to a known retailer and its extraction/search strategy
record. Unknown hosts get a label derived from the domain.

The registry is loaded from config/stores.yaml.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote_plus, urlparse

from ..common.config_loader import load_store_profiles
from ..common.constants import UNKNOWN_STORE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreProfile:
    """Per-retailer strategy record."""
    label: str
    hosts: Tuple[str, ...] = ()
    price_selectors: Tuple[str, ...] = ()
    name_selectors: Tuple[str, ...] = ()
    image_selectors: Tuple[str, ...] = ()
    structured_data_priority: bool = False
    slow_page: bool = False
    wait_for: str = ""
    cookies: Tuple[Dict[str, str], ...] = field(default=(), compare=False)
    search_url: str = ""
    product_link_selector: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreProfile":
        """Build a profile from a raw stores.yaml record."""
        return cls(
            label=data['label'],
            hosts=tuple(h.lower() for h in data.get('hosts', [])),
            price_selectors=tuple(data.get('price_selectors', [])),
            name_selectors=tuple(data.get('name_selectors', [])),
            image_selectors=tuple(data.get('image_selectors', [])),
            structured_data_priority=bool(data.get('structured_data_priority', False)),
            slow_page=bool(data.get('slow_page', False)),
            wait_for=data.get('wait_for', '') or '',
            cookies=tuple(dict(c) for c in data.get('cookies', [])),
            search_url=data.get('search_url', '') or '',
            product_link_selector=data.get('product_link_selector', '') or '',
        )

    @property
    def searchable(self) -> bool:
        return bool(self.search_url and self.product_link_selector)

    def build_search_url(self, query: str) -> str:
        """Fill the site-search URL template with an encoded query."""
        return self.search_url.format(query=quote_plus(query))


def _host_matches(hostname: str, labels: List[str], fragment: str) -> bool:
    if '.' in fragment:
        return hostname == fragment or hostname.endswith('.' + fragment)
    return fragment in labels


def _parse_hostname(url: str) -> Optional[str]:
    try:
        hostname = urlparse(url).hostname
    except (ValueError, AttributeError):
        return None
    return hostname.lower() if hostname else None


class StoreRegistry:
    """
    Resolves URLs to store profiles.

    Usage:
        registry = StoreRegistry()
        registry.get_store_name("https://www.amazon.co.uk/dp/B0ABC")  # "Amazon"
        profile = registry.resolve("https://www2.hm.com/en_gb/productpage.1.html")
    """

    def __init__(self, profiles: Optional[Iterable[StoreProfile]] = None):
        """
        Initialize the registry.

        Args:
            profiles: Optional store profiles. If None, loads from config.
        """
        if profiles is None:
            profiles = [StoreProfile.from_dict(p) for p in load_store_profiles()]
        self.profiles: List[StoreProfile] = list(profiles)

        self._by_label = {p.label.lower(): p for p in self.profiles}

        # Most specific first: "hm.com" must not lose to a shorter fragment
        entries = [(host, p) for p in self.profiles for host in p.hosts]
        self._host_table = sorted(entries, key=lambda e: len(e[0]), reverse=True)

    def resolve(self, url: str) -> Optional[StoreProfile]:
        """
        Find the store profile for a URL.

        Args:
            url: Any URL on the store's site

        Returns:
            Matching StoreProfile or None for unknown/malformed URLs
        """
        hostname = _parse_hostname(url)
        if not hostname:
            return None

        labels = hostname.split('.')
        for fragment, profile in self._host_table:
            if _host_matches(hostname, labels, fragment):
                return profile

        return None

    def get_store_name(self, url: str) -> str:
        """
        Get a human-readable store label for a URL.

        Known stores return their configured label; other hosts return
        their first domain label, capitalized.

        Example:
            >>> registry.get_store_name("https://www.somestore.co.uk/item")
            'Somestore'
            >>> registry.get_store_name("not a url")
            'Unknown Store'
        """
        profile = self.resolve(url)
        if profile:
            return profile.label

        hostname = _parse_hostname(url)
        if not hostname:
            return UNKNOWN_STORE

        if hostname.startswith('www.'):
            hostname = hostname[4:]
        first = hostname.split('.')[0]
        if not first:
            return UNKNOWN_STORE

        return first[:1].upper() + first[1:]

    def get_by_label(self, label: str) -> Optional[StoreProfile]:
        """Look up a profile by its label (case-insensitive)."""
        if not label:
            return None
        return self._by_label.get(label.strip().lower())

    def searchable_profiles(self) -> List[StoreProfile]:
        """Profiles with a configured site search."""
        return [p for p in self.profiles if p.searchable]


_default_registry: Optional[StoreRegistry] = None


def get_store_registry() -> StoreRegistry:
    """Return the process-wide registry loaded from config."""
    global _default_registry
    if _default_registry is None:
        _default_registry = StoreRegistry()
    return _default_registry


def get_store_name(url: str) -> str:
    """Map a URL to a store label using the default registry."""
    return get_store_registry().get_store_name(url)
