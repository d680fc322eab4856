"""Adapters for external services.

Adapters:
- Degrade to a fallback answer instead of raising on upstream failure
- Record every upstream call through the metrics façade
- Are persistence-agnostic (no DB access)
"""

from .fx import CurrencyService, RateCache, RedisRateStore, get_currency_service
from .places import PlaceLookup, PlaceSuggestion, get_place_lookup

__all__ = [
    "CurrencyService",
    "RateCache",
    "RedisRateStore",
    "get_currency_service",
    "PlaceLookup",
    "PlaceSuggestion",
    "get_place_lookup",
]
