"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Any parsed price at or above this is treated as a parsing error
PRICE_CEILING = 100000

# Band accepted by the visible-text currency scan (narrower than the ceiling,
# page text is full of shipping thresholds and finance offers)
TEXT_SCAN_MIN_PRICE = 1
TEXT_SCAN_MAX_PRICE = 10000

UNKNOWN_STORE = "Unknown Store"
UNKNOWN_PRODUCT = "Unknown Product"

MIN_NAME_LENGTH = 4
MAX_NAME_LENGTH = 500

MAX_IDENTIFYING_WORDS = 2
MAX_ALTERNATIVES = 3

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)
