"""
Batch Price Checker

Refreshes the price of a list of tracked items, one at a time with a pause
between requests so retailers don't see a burst of traffic.

Storage of items and scheduling of runs are up to the caller; the checker
only reports what changed.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..extraction.product_extractor import ProductExtractor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceCheckItem:
    """A tracked product whose price should be refreshed."""
    url: str
    current_price: Optional[float] = None
    name: str = ""
    item_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PriceCheckItem":
        """Build an item from a JSON record ({'url', 'current_price', 'name', 'id'})."""
        price = data.get('current_price')
        item_id = data.get('id', data.get('item_id'))
        return cls(
            url=data['url'],
            current_price=float(price) if price is not None else None,
            name=data.get('name', '') or '',
            item_id=str(item_id) if item_id is not None else None,
        )


@dataclass(frozen=True)
class PriceChange:
    """Price movement detected for one item."""
    item: PriceCheckItem
    old_price: Optional[float]
    new_price: float

    @property
    def change_percent(self) -> Optional[float]:
        if not self.old_price:
            return None
        return round((self.new_price - self.old_price) / self.old_price * 100, 1)

    @property
    def is_drop(self) -> bool:
        return self.old_price is not None and self.new_price < self.old_price


@dataclass
class PriceCheckSummary:
    """Counts and details of one batch run."""
    checked: int = 0
    changed: int = 0
    errors: int = 0
    changes: List[PriceChange] = field(default_factory=list)
    prices: Dict[str, float] = field(default_factory=dict)
    failed_urls: List[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def elapsed_seconds(self) -> float:
        if not self.started_at or not self.finished_at:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()


class PriceChecker:
    """
    Sequential, throttled price refresh.

    Usage:
        checker = PriceChecker(delay=2.0)
        summary = checker.check_all([PriceCheckItem(url, current_price=49.99)])
        print(summary.checked, summary.changed, summary.errors)
    """

    def __init__(self, extractor: Optional[ProductExtractor] = None, delay: float = 2.0):
        """
        Initialize the checker.

        Args:
            extractor: Product extractor used for price refreshes
            delay: Pause between items in seconds
        """
        self.extractor = extractor or ProductExtractor()
        self.delay = delay

    def check_all(self, items: Iterable[PriceCheckItem]) -> PriceCheckSummary:
        """
        Refresh the price of every item.

        Args:
            items: Items to check, in order

        Returns:
            PriceCheckSummary for this run
        """
        items = [item for item in items if item.url]
        summary = PriceCheckSummary(started_at=datetime.now())
        total = len(items)

        logger.info("Checking prices for %d item(s)", total)

        for i, item in enumerate(items, 1):
            label = item.name or item.url[:60]
            logger.info("[%d/%d] %s", i, total, label)

            try:
                new_price = self.extractor.scrape_price(item.url)
            except Exception as e:
                logger.warning("Price check crashed for %s: %s", label, e)
                new_price = None

            if new_price is None:
                summary.errors += 1
                summary.failed_urls.append(item.url)
                logger.warning("Could not fetch price for %s", label)
            else:
                summary.checked += 1
                summary.prices[item.url] = new_price

                if item.current_price != new_price:
                    change = PriceChange(item=item, old_price=item.current_price, new_price=new_price)
                    summary.changed += 1
                    summary.changes.append(change)
                    logger.info("Price changed: %s -> %s (%s%%)",
                                item.current_price, new_price, change.change_percent)
                else:
                    logger.info("Price unchanged: %s", new_price)

            if i < total and self.delay > 0:
                time.sleep(self.delay)

        summary.finished_at = datetime.now()
        logger.info("Price check complete: %d checked, %d changed, %d errors",
                    summary.checked, summary.changed, summary.errors)
        return summary
