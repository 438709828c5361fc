"""
Fallback Cascade

Runs an ordered list of named extraction strategies and keeps the first
result that passes validation. Strategies are plain callables taking a
RenderedDocument and returning a value or None.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from .document import RenderedDocument

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class Strategy(Generic[T]):
    """One named step of a cascade."""
    name: str
    extract: Callable[[RenderedDocument], Optional[T]]


def first_success(
    strategies: Sequence[Strategy[T]],
    document: RenderedDocument,
    validate: Optional[Callable[[T], Optional[T]]] = None,
) -> Tuple[Optional[T], Optional[str]]:
    """
    Run strategies in order and return the first validated value.

    Later strategies are never called once one succeeds. A strategy that
    raises is logged and counted as a miss, so one broken selector or
    malformed JSON block cannot abort the whole field.

    Args:
        strategies: Ordered strategies
        document: Page to extract from
        validate: Optional check returning the (possibly normalized) value,
            or None to reject it and continue

    Returns:
        Tuple of (value, strategy_name), or (None, None) if every strategy missed
    """
    for strategy in strategies:
        try:
            value = strategy.extract(document)
        except (ValueError, TypeError, KeyError, AttributeError, IndexError) as e:
            logger.debug("Strategy %s failed: %s", strategy.name, e)
            continue

        if value is None:
            continue

        if validate is not None:
            value = validate(value)
            if value is None:
                logger.debug("Strategy %s result rejected", strategy.name)
                continue

        logger.debug("Strategy %s succeeded", strategy.name)
        return value, strategy.name

    return None, None


def selector_strategies(
    prefix: str,
    selectors: List[str],
    read: Callable[[RenderedDocument, str], Optional[T]],
) -> List[Strategy[T]]:
    """Build one strategy per CSS selector, named '<prefix>:<selector>'."""
    return [
        Strategy(f"{prefix}:{selector}", lambda document, s=selector: read(document, s))
        for selector in selectors
    ]
