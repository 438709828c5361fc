"""
Price monitoring for tracked items.

Modules:
    price_checker - PriceChecker: sequential, throttled price refresh
"""

from .price_checker import PriceChange, PriceCheckItem, PriceChecker, PriceCheckSummary

__all__ = ['PriceCheckItem', 'PriceChange', 'PriceCheckSummary', 'PriceChecker']
