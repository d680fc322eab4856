"""Exchange-rate adapter backed by a public rates API.

Rates are cached in two layers: an in-process ``RateCache`` keyed by base
currency, and a ``RedisRateStore`` holding the last successful table. When the
upstream API is unreachable a fixed fallback table anchored to EUR is served
and nothing is cached.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
import redis

from backend.app.config import get_settings
from backend.app.metrics.core import record_upstream_call

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Rates = dict[str, float]

# Approximate rates relative to EUR, served when the API is unavailable
FALLBACK_RATES_EUR: Rates = {
    "EUR": 1.0,
    "USD": 1.08,
    "GBP": 0.86,
    "JPY": 162.5,
    "LKR": 340.0,
    "THB": 38.5,
    "LAK": 22500.0,
    "PHP": 61.5,
}

RATES_STORE_KEY = "travel_planner:exchange_rates"


def get_fallback_rates(base: str) -> Rates:
    """Fallback table re-anchored to ``base``.

    Unknown bases are treated as EUR-equivalent (divisor 1).
    """
    base = base.upper()
    if base == "EUR":
        return dict(FALLBACK_RATES_EUR)
    divisor = FALLBACK_RATES_EUR.get(base) or 1.0
    return {code: rate / divisor for code, rate in FALLBACK_RATES_EUR.items()}


@dataclass(frozen=True)
class RateCacheEntry:
    """A rate table fetched for one base currency."""

    base: str
    rates: Rates
    timestamp: float

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.timestamp < ttl_seconds

    def to_json(self) -> str:
        return json.dumps({"base": self.base, "rates": self.rates, "timestamp": self.timestamp})

    @classmethod
    def from_json(cls, raw: str) -> RateCacheEntry:
        data = json.loads(raw)
        return cls(
            base=str(data["base"]),
            rates={str(k): float(v) for k, v in data["rates"].items()},
            timestamp=float(data["timestamp"]),
        )


class RateCache:
    """In-memory rate tables with TTL, keyed by base currency."""

    def __init__(self, ttl_seconds: float = 3600, clock: Clock = time.time) -> None:
        """Initialize cache.

        Args:
            ttl_seconds: How long a table stays valid.
            clock: Returns the current time in seconds.
        """
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, RateCacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, base: str) -> Rates | None:
        """Get rates for ``base`` if present and not expired."""
        with self._lock:
            entry = self._entries.get(base)
            if entry is None:
                return None
            if not entry.is_fresh(self.clock(), self.ttl_seconds):
                del self._entries[base]
                return None
            return dict(entry.rates)

    def put(self, entry: RateCacheEntry) -> None:
        with self._lock:
            self._entries[entry.base] = entry

    def set(self, base: str, rates: Rates) -> RateCacheEntry:
        """Store ``rates`` for ``base`` stamped with the current time."""
        entry = RateCacheEntry(base=base, rates=dict(rates), timestamp=self.clock())
        self.put(entry)
        return entry


class RateStore(Protocol):
    """Persisted layer holding the last successful rate table."""

    def load(self) -> RateCacheEntry | None:
        ...

    def save(self, entry: RateCacheEntry) -> None:
        ...


class RedisRateStore:
    """Keeps the last successful rate table under a single redis key.

    Redis being unavailable is not an error for callers: loads return None and
    saves are dropped, both logged.
    """

    def __init__(self, client: redis.Redis, key: str = RATES_STORE_KEY) -> None:
        self.client = client
        self.key = key

    def load(self) -> RateCacheEntry | None:
        try:
            raw = self.client.get(self.key)
        except redis.RedisError as e:
            logger.warning("rate store unavailable", extra={"error": str(e)})
            return None
        if not raw:
            return None
        try:
            return RateCacheEntry.from_json(raw)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("ignoring malformed persisted rates", extra={"error": str(e)})
            return None

    def save(self, entry: RateCacheEntry) -> None:
        try:
            self.client.set(self.key, entry.to_json())
        except redis.RedisError as e:
            logger.warning("could not persist rates", extra={"error": str(e)})


class CurrencyService:
    """Exchange rates and currency arithmetic for budgets and conversions."""

    def __init__(
        self,
        cache: RateCache | None = None,
        store: RateStore | None = None,
        http_client: httpx.Client | None = None,
        base_url: str | None = None,
        timeout_s: float | None = None,
    ) -> None:
        settings = get_settings()
        self.cache = cache or RateCache(ttl_seconds=settings.fx_ttl_seconds)
        self.store = store
        self.http_client = http_client
        self.base_url = (base_url or settings.fx_api_base_url).rstrip("/")
        self.timeout_s = timeout_s if timeout_s is not None else settings.fx_timeout_s

    def get_rates(self, base: str = "EUR") -> Rates:
        """Rate table for ``base``: ``amount_in_X / rates[X]`` is the base amount.

        Lookup order: in-memory cache, persisted store, upstream API, fallback
        table. Only upstream successes are cached.
        """
        base = base.upper()
        start = time.perf_counter()

        cached = self.cache.get(base)
        if cached is not None:
            self._record(start, ok=True, from_cache=True)
            return cached

        if self.store is not None:
            persisted = self.store.load()
            if (
                persisted is not None
                and persisted.base == base
                and persisted.is_fresh(self.cache.clock(), self.cache.ttl_seconds)
            ):
                self.cache.put(persisted)
                self._record(start, ok=True, from_cache=True)
                return dict(persisted.rates)

        try:
            rates = self._fetch(base)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(
                "Failed to fetch exchange rates, using fallback table",
                extra={"base": base, "error": str(e)},
            )
            self._record(start, ok=False, from_cache=False, fallback=True, error_kind=type(e).__name__)
            return get_fallback_rates(base)

        entry = self.cache.set(base, rates)
        if self.store is not None:
            self.store.save(entry)
        self._record(start, ok=True, from_cache=False)
        return rates

    def _fetch(self, base: str) -> Rates:
        url = f"{self.base_url}/{base}"
        if self.http_client is not None:
            response = self.http_client.get(url, timeout=self.timeout_s)
        else:
            response = httpx.get(url, timeout=self.timeout_s)
        response.raise_for_status()
        payload = response.json()
        rates = payload["rates"]
        if not isinstance(rates, dict) or not rates:
            raise ValueError("rates payload is empty")
        return {str(code): float(rate) for code, rate in rates.items()}

    def _record(
        self,
        start: float,
        ok: bool,
        from_cache: bool,
        fallback: bool = False,
        error_kind: str | None = None,
    ) -> None:
        record_upstream_call(
            service="fx",
            latency_ms=int((time.perf_counter() - start) * 1000),
            ok=ok,
            from_cache=from_cache,
            fallback=fallback,
            error_kind=error_kind,
        )

    def convert_currency(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Convert ``amount`` from one currency to another.

        Unknown source currencies return ``amount`` unconverted.
        """
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()
        if from_currency == to_currency or not amount:
            return amount

        rates = self.get_rates(to_currency)
        from_rate = rates.get(from_currency)
        if not from_rate:
            logger.warning("Unknown currency", extra={"currency": from_currency})
            return amount
        return amount / from_rate

    def calculate_total_in_currency(
        self,
        activities: Iterable[Any],
        target_currency: str,
        default_currency: str = "EUR",
    ) -> float:
        """Sum positive activity costs converted into ``target_currency``.

        Costs in a currency missing from the rate table are added as-is.
        """
        rates = self.get_rates(target_currency)
        total = 0.0
        for activity in activities:
            cost = getattr(activity, "cost", None)
            if not cost or cost <= 0:
                continue
            currency = (getattr(activity, "currency", None) or default_currency).upper()
            rate = rates.get(currency)
            total += cost / rate if rate else cost
        return total


_currency_service: CurrencyService | None = None


def get_redis_client() -> redis.Redis:
    """Get Redis client for the persisted rate table."""
    settings = get_settings()
    return redis.from_url(settings.redis_url, decode_responses=True)


def get_currency_service() -> CurrencyService:
    """Get the process-wide currency service (FastAPI dependency)."""
    global _currency_service
    if _currency_service is None:
        _currency_service = CurrencyService(store=RedisRateStore(get_redis_client()))
    return _currency_service
