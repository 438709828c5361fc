"""
Search Query Helpers

Builds search queries from a product name and an optional brand, and
checks whether a URL belongs to a brand's own site.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from ..common.text_utils import clean_text

_APOSTROPHES = re.compile(r"['‘’]")


def normalize_brand(brand: Optional[str]) -> Optional[str]:
    """
    Normalize a brand name for searching.

    Example:
        >>> normalize_brand("  L’Oréal   Paris ")
        'LOréal Paris'
    """
    if not brand:
        return None
    normalized = clean_text(_APOSTROPHES.sub('', brand))
    return normalized or None


def build_search_query(name: Optional[str], brand: Optional[str] = None) -> str:
    """
    Combine a brand and a product description into one query.

    The brand is not repeated when the name already starts with it.

    Example:
        >>> build_search_query("AeroSteam Garment Steamer", "Tefal")
        'Tefal AeroSteam Garment Steamer'
    """
    product = clean_text(name)
    brand = normalize_brand(brand)
    if not brand:
        return product
    if product.lower().startswith(brand.lower()):
        return product
    return f"{brand} {product}".strip()


def url_matches_brand(url: Optional[str], brand: Optional[str]) -> bool:
    """
    Check whether a URL's host contains the brand name.

    Example:
        >>> url_matches_brand("https://www.tefal.co.uk/steamers", "Tefal")
        True
    """
    if not url or not brand:
        return False

    try:
        hostname = (urlparse(url).hostname or "").lower()
    except ValueError:
        return False

    compact = re.sub(r'[^a-z0-9]', '', brand.lower())
    if not hostname or not compact:
        return False
    return compact in hostname
