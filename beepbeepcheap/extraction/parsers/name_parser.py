"""
Name Cascade

Resolves a human-readable product name. Candidates come from store
selectors, generic selectors, og:title, JSON-LD, the URL slug and the
document title, in that order. Page boilerplate ("Sign in", "Access
Denied", ...) is rejected so a blocked or interstitial page never yields a
name, and a bare model code is replaced by a descriptive title when one is
available.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from ...common.config_loader import load_extraction_rules
from ...common.constants import MAX_NAME_LENGTH, MIN_NAME_LENGTH
from ...common.text_utils import clean_text, slug_to_title
from ..cascade import Strategy, first_success, selector_strategies
from ..document import RenderedDocument
from ..store_registry import StoreProfile
from .structured_data import StructuredDataParser

logger = logging.getLogger(__name__)

MODEL_LIKE_MAX_LENGTH = 10

_FALLBACK_STRATEGIES = ('document_title', 'url_slug')


def looks_like_model_number(name: str) -> bool:
    """
    Check whether a name is just a short product code.

    Example:
        >>> looks_like_model_number("S3BF")
        True
        >>> looks_like_model_number("Oversized Wool Coat")
        False
    """
    if not name:
        return True
    compact = re.sub(r'\s', '', name)
    return len(name) <= MODEL_LIKE_MAX_LENGTH and compact.isalnum() and compact.isascii()


class NameCascade:
    """
    Name extraction cascade.

    Usage:
        cascade = NameCascade()
        name, method = cascade.extract(document, profile)
    """

    def __init__(
        self,
        rules: Optional[Dict[str, Any]] = None,
        structured_parser: Optional[StructuredDataParser] = None,
    ):
        """
        Initialize the cascade.

        Args:
            rules: Extraction rules. If None, loads from config.
            structured_parser: JSON-LD parser (shared with the other cascades)
        """
        if rules is None:
            rules = load_extraction_rules()
        self.generic_selectors: List[str] = list(rules.get('generic_name_selectors', []))
        self.invalid_exact = {w.lower() for w in rules.get('invalid_name_exact', [])}
        self.slug_patterns = [
            re.compile(p, re.IGNORECASE) for p in rules.get('url_slug_patterns', [])
        ]
        self.structured = structured_parser or StructuredDataParser()

        self._invalid_phrase_pattern = self._build_alternation(
            rules.get('invalid_name_phrases', []), r'(?<!\w)(?:{})(?!\w)'
        )
        self._suffix_pattern = self._build_alternation(
            rules.get('title_suffixes', []), r'\s*[|–-]\s*(?:{}).*$'
        )
        self._region_pattern = self._build_alternation(
            rules.get('title_region_suffixes', []), r'\s*[|–-]\s*(?:{}).*$'
        )

    @staticmethod
    def _build_alternation(words: List[str], template: str) -> Optional[re.Pattern]:
        if not words:
            return None
        # Longest first so "LG UK" wins over "LG"
        ordered = sorted(words, key=len, reverse=True)
        alternation = '|'.join(re.escape(w) for w in ordered)
        return re.compile(template.format(alternation), re.IGNORECASE)

    def is_valid_name(self, name: Optional[str]) -> bool:
        """
        Check a candidate name against length bounds and the boilerplate lists.

        Example:
            >>> cascade.is_valid_name("Sign in")
            False
            >>> cascade.is_valid_name("Home Depot Cordless Drill")
            True
        """
        if not name:
            return False
        name = clean_text(name)
        if len(name) < MIN_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
            return False
        if name.lower().rstrip('!.,') in self.invalid_exact:
            return False
        if self._invalid_phrase_pattern and self._invalid_phrase_pattern.search(name):
            return False
        return True

    def _validate(self, name: str) -> Optional[str]:
        name = clean_text(name)
        return name if self.is_valid_name(name) else None

    def clean_title(self, title: str) -> str:
        """
        Strip retailer and region suffixes from a document title.

        Example:
            >>> cascade.clean_title("Oversized Coat - ZARA United Kingdom")
            'Oversized Coat'
        """
        title = clean_text(title)
        for pattern in (self._suffix_pattern, self._region_pattern):
            if pattern:
                title = pattern.sub('', title)
        return title.strip()

    def name_from_url(self, url: str) -> Optional[str]:
        """
        Derive a title-cased name from a kebab-case URL slug.

        Example:
            >>> cascade.name_from_url("https://www.zara.com/us/en/oversized-wool-blend-coat-p02010744.html")
            'Oversized Wool Blend Coat'
        """
        try:
            path = urlparse(url or "").path
        except ValueError:
            return None

        for pattern in self.slug_patterns:
            match = pattern.search(path)
            if match and len(match.group(1)) >= MIN_NAME_LENGTH:
                name = slug_to_title(match.group(1))
                if self.is_valid_name(name):
                    return name
        return None

    def strategies(self, profile: Optional[StoreProfile] = None) -> List[Strategy[str]]:
        """Build the ordered strategy list for a store (None for unknown stores)."""
        strategies: List[Strategy[str]] = []

        if profile:
            strategies.extend(
                selector_strategies('store_selector', list(profile.name_selectors),
                                    RenderedDocument.get_text)
            )

        strategies.extend(
            selector_strategies('generic_selector', self.generic_selectors, RenderedDocument.get_text)
        )
        strategies.append(Strategy(
            'og_title', lambda document: document.get_attribute('meta[property="og:title"]', 'content')
        ))
        strategies.append(Strategy(
            'json_ld', lambda document: self.structured.extract_name(self.structured.parse(document))
        ))
        strategies.append(self._slug_strategy())
        strategies.append(self._title_strategy())

        return strategies

    def _slug_strategy(self) -> Strategy[str]:
        return Strategy('url_slug', lambda document: self.name_from_url(document.url))

    def _title_strategy(self) -> Strategy[str]:
        return Strategy('document_title', lambda document: self.clean_title(document.title))

    def extract(
        self,
        document: RenderedDocument,
        profile: Optional[StoreProfile] = None,
    ) -> Tuple[Optional[str], Optional[str]]:
        """
        Resolve the product name.

        A winner that is only a model code is superseded by the document
        title or URL slug when either gives a descriptive name.

        Args:
            document: Rendered product page
            profile: Store profile for the page, if known

        Returns:
            Tuple of (name, strategy_name); (None, None) if nothing was valid
        """
        name, method = first_success(self.strategies(profile), document, validate=self._validate)

        if name and method not in _FALLBACK_STRATEGIES and looks_like_model_number(name):
            better, better_method = first_success(
                [self._title_strategy(), self._slug_strategy()], document,
                validate=lambda n: n if self._validate(n) and not looks_like_model_number(n) else None,
            )
            if better:
                logger.debug("Replacing model-like name %r with %r", name, better)
                return clean_text(better), better_method

        return name, method
