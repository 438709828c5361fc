"""
Product Identity Extractor

Derives the features used to decide whether two differently-worded
listings describe the same product:
1. Identifying words - the first two non-generic tokens of the name
2. Model number - a token like "HD9640" or "WH1000XM5"
3. Variants - size, quantity and unit descriptors ("120tablets", "500ml", "xl")

Generic words and the variant unit stoplist are loaded from
config/identity.yaml.
"""

import re
from typing import Iterable, List, Optional, Set, Tuple

from ..common.config_loader import load_identity_words
from ..common.constants import MAX_IDENTIFYING_WORDS
from ..models import ProductIdentity

MODEL_NUMBER_PATTERN = re.compile(r'\b[A-Za-z]{1,3}\d{3,}[A-Za-z0-9]*\b')

# "120 Tablets", "500ml", "1.5 L"
_NUMBER_UNIT_PATTERN = re.compile(r'(?<![\w.])(\d+(?:\.\d+)?)\s*([A-Za-z]+)\b')

# "x2", "x 12"
_QUANTITY_PATTERN = re.compile(r'\bx\s?(\d+)\b', re.IGNORECASE)

_LETTER_SIZES = r'XXXL|XXL|XL|XXS|XS|S|M|L'

# Upper-case letter size standing alone ("Coat M"); apostrophes and
# ampersands count as part of the word so "L'Oreal" and "M&S" don't match
_STANDALONE_SIZE_PATTERN = re.compile(r"(?<![\w'&])(" + _LETTER_SIZES + r")(?![\w'&])")
_PREFIXED_SIZE_PATTERN = re.compile(r'\bsize\s+(' + _LETTER_SIZES + r')\b', re.IGNORECASE)

# "Size 10", "UK 8", "EU 42"
_NUMBERED_SIZE_PATTERN = re.compile(r'\b(size|uk|us|eu)\s*(\d+(?:\.\d+)?)\b', re.IGNORECASE)

YEAR_RANGE = (1900, 2099)


class ProductIdentityExtractor:
    """
    Derives ProductIdentity values from product names.

    Usage:
        extractor = ProductIdentityExtractor()
        identity = extractor.derive_identity("Panadol Extra 120 Tablets")
        # ProductIdentity(identifying_words=('panadol', 'extra'),
        #                 model_number=None, variants=('120tablets',))
    """

    def __init__(
        self,
        generic_words: Optional[Iterable[str]] = None,
        unit_stoplist: Optional[Iterable[str]] = None,
    ):
        """
        Initialize the extractor.

        Args:
            generic_words: Words that never identify a product. If None, loads from config.
            unit_stoplist: Suffixes that are not variant units. If None, loads from config.
        """
        if generic_words is None or unit_stoplist is None:
            words = load_identity_words()
            if generic_words is None:
                generic_words = words['generic_words']
            if unit_stoplist is None:
                unit_stoplist = words['variant_unit_stoplist']

        self.generic_words: Set[str] = {w.lower() for w in generic_words}
        self.unit_stoplist: Set[str] = {u.lower() for u in unit_stoplist}

    def derive_identity(self, name: Optional[str]) -> ProductIdentity:
        """
        Derive the identity of a product from its name.

        Args:
            name: Product name (empty or None gives the empty identity)

        Returns:
            ProductIdentity

        Example:
            >>> extractor.derive_identity("Tefal AeroSteam Garment Steamer").identifying_words
            ('tefal', 'aerosteam')
        """
        if not name or not name.strip():
            return ProductIdentity()

        return ProductIdentity(
            identifying_words=self.extract_identifying_words(name),
            model_number=self.extract_model_number(name),
            variants=self.extract_variants(name),
        )

    def extract_identifying_words(self, name: str) -> Tuple[str, ...]:
        """First non-generic tokens of the name, lower-cased and de-duplicated."""
        words: List[str] = []
        for token in name.split():
            word = re.sub(r'[^a-z0-9]', '', token.lower())
            if len(word) < 2 or word in self.generic_words or word in words:
                continue
            words.append(word)
            if len(words) == MAX_IDENTIFYING_WORDS:
                break
        return tuple(words)

    @staticmethod
    def extract_model_number(name: str) -> Optional[str]:
        """
        Find a model-number token.

        Example:
            >>> ProductIdentityExtractor.extract_model_number("Philips HD9640/90 Airfryer")
            'hd9640'
        """
        match = MODEL_NUMBER_PATTERN.search(name or "")
        return match.group(0).lower() if match else None

    def extract_variants(self, text: Optional[str]) -> Tuple[str, ...]:
        """
        Extract size, quantity and unit descriptors.

        Args:
            text: Product name or listing title

        Returns:
            Sorted, de-duplicated variant tokens

        Example:
            >>> extractor.extract_variants("Vitamin D 1000IU 120 Tablets x2")
            ('1000iu', '120tablets', 'x2')
        """
        if not text:
            return ()

        variants: Set[str] = set()

        for match in _NUMBER_UNIT_PATTERN.finditer(text):
            number, unit = match.group(1), match.group(2).lower()
            if unit in self.unit_stoplist or self._is_year(number):
                continue
            variants.add(f"{number}{unit}".lower())

        for match in _QUANTITY_PATTERN.finditer(text):
            variants.add(f"x{match.group(1)}")

        for pattern in (_STANDALONE_SIZE_PATTERN, _PREFIXED_SIZE_PATTERN):
            for match in pattern.finditer(text):
                variants.add(match.group(1).lower())

        for match in _NUMBERED_SIZE_PATTERN.finditer(text):
            variants.add(f"{match.group(1)}{match.group(2)}".lower())

        return tuple(sorted(variants))

    @staticmethod
    def _is_year(number: str) -> bool:
        if not number.isdigit() or len(number) != 4:
            return False
        return YEAR_RANGE[0] <= int(number) <= YEAR_RANGE[1]


_default_extractor: Optional[ProductIdentityExtractor] = None


def get_identity_extractor() -> ProductIdentityExtractor:
    """Return the process-wide extractor loaded from config."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = ProductIdentityExtractor()
    return _default_extractor


def derive_identity(name: Optional[str]) -> ProductIdentity:
    """Derive a ProductIdentity using the default word lists."""
    return get_identity_extractor().derive_identity(name)


def extract_variants(text: Optional[str]) -> Tuple[str, ...]:
    """Extract variant tokens using the default stoplist."""
    return get_identity_extractor().extract_variants(text)
