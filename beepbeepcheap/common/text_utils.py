"""
Text Utilities

Helper functions for text processing and price parsing.
"""

import re
from typing import Optional

from .constants import PRICE_CEILING

# "12,50" or "1.234,56": comma is the decimal separator
_DECIMAL_COMMA = re.compile(r'^(?:\d{1,3}(?:\.\d{3})+|\d+),\d{2}$')

# Thousands-grouped number first, then a plain number; at most two decimals
_PRICE_NUMBER = re.compile(r'\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?')


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace and strip."""
    if not text:
        return ""
    return ' '.join(text.split()).strip()


def clean_price(text) -> Optional[float]:
    """
    Parse a price out of a display string.

    Strips currency symbols and other noise, then reads the first plausible
    number. Values outside (0, PRICE_CEILING) are rejected.

    Args:
        text: Price text (e.g., "£1,234.56", "Now $19.99", "12,50 €") or a number

    Returns:
        Price as float, or None if no valid price was found

    Example:
        >>> clean_price("£1,234.56")
        1234.56
        >>> clean_price("$150,000.00") is None
        True
    """
    if text is None:
        return None

    cleaned = re.sub(r'[^0-9.,]', '', str(text))
    if not cleaned:
        return None

    if _DECIMAL_COMMA.match(cleaned):
        cleaned = cleaned.replace('.', '').replace(',', '.')

    match = _PRICE_NUMBER.search(cleaned)
    if not match:
        return None

    try:
        value = float(match.group(0).replace(',', ''))
    except ValueError:
        return None

    if 0 < value < PRICE_CEILING:
        return value
    return None


def is_valid_price(value) -> bool:
    """Check a numeric price against the sane currency band."""
    if value is None or isinstance(value, bool):
        return False
    try:
        value = float(value)
    except (TypeError, ValueError):
        return False
    return 0 < value < PRICE_CEILING


def slug_to_title(slug: str) -> str:
    """
    Convert a kebab-case URL slug to Title Case.

    Example:
        >>> slug_to_title("oversized-wool-blend-coat")
        'Oversized Wool Blend Coat'
    """
    words = [word for word in slug.split('-') if word]
    return ' '.join(word[:1].upper() + word[1:].lower() for word in words)
