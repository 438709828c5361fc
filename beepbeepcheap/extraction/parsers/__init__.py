"""
Field parsers for product page extraction.

Each parser resolves one field through an ordered fallback cascade:
- StructuredDataParser: JSON-LD structured data (schema.org)
- PriceCascade: current selling price
- NameCascade: product name
- ImageCascade: main product image
"""

from .image_parser import ImageCascade
from .name_parser import NameCascade, looks_like_model_number
from .price_parser import PriceCascade, scan_text_for_price
from .structured_data import StructuredDataParser

__all__ = [
    'StructuredDataParser',
    'PriceCascade',
    'NameCascade',
    'ImageCascade',
    'looks_like_model_number',
    'scan_text_for_price',
]
