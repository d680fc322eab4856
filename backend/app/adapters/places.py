"""Place-suggestion adapter using the OpenStreetMap Nominatim search API."""

from __future__ import annotations

import logging
import time

import httpx
from pydantic import BaseModel, Field

from backend.app.config import Settings, get_settings
from backend.app.metrics.core import record_upstream_call

logger = logging.getLogger(__name__)


class PlaceSuggestion(BaseModel):
    """A geocoding candidate for a free-text location."""

    display_name: str = Field(description="Human-readable place name")
    latitude: float = Field(description="Latitude in degrees")
    longitude: float = Field(description="Longitude in degrees")
    place_id: int | None = Field(default=None, description="Provider place id")


class PlaceLookup:
    """Free-text place search. Failures degrade to an empty suggestion list."""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.http_client = http_client

    def search(self, query: str) -> list[PlaceSuggestion]:
        """Search places matching ``query``.

        Queries shorter than ``places_min_query_length`` return ``[]`` without
        touching the network.
        """
        query = (query or "").strip()
        if len(query) < self.settings.places_min_query_length:
            return []

        params = {
            "format": "json",
            "q": query,
            "limit": self.settings.places_limit,
            "addressdetails": 1,
        }
        headers = {
            "Accept-Language": "en",
            "User-Agent": self.settings.places_user_agent,
        }
        start = time.perf_counter()
        try:
            if self.http_client is not None:
                response = self.http_client.get(
                    self.settings.places_api_url,
                    params=params,
                    headers=headers,
                    timeout=self.settings.places_timeout_s,
                )
            else:
                response = httpx.get(
                    self.settings.places_api_url,
                    params=params,
                    headers=headers,
                    timeout=self.settings.places_timeout_s,
                )
            response.raise_for_status()
            suggestions = _parse_results(response.json())
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.error("Error fetching locations", extra={"query": query, "error": str(e)})
            record_upstream_call(
                service="places",
                latency_ms=int((time.perf_counter() - start) * 1000),
                ok=False,
                from_cache=False,
                fallback=True,
                error_kind=type(e).__name__,
            )
            return []

        record_upstream_call(
            service="places",
            latency_ms=int((time.perf_counter() - start) * 1000),
            ok=True,
            from_cache=False,
        )
        return suggestions


def _parse_results(data: object) -> list[PlaceSuggestion]:
    if not isinstance(data, list):
        raise ValueError("unexpected search payload")
    suggestions = []
    for item in data:
        try:
            suggestions.append(
                PlaceSuggestion(
                    display_name=item["display_name"],
                    latitude=float(item["lat"]),
                    longitude=float(item["lon"]),
                    place_id=item.get("place_id"),
                )
            )
        except (KeyError, TypeError, ValueError):
            logger.debug("skipping malformed place result", extra={"item": str(item)[:200]})
    return suggestions


def get_place_lookup() -> PlaceLookup:
    """FastAPI dependency returning a place lookup bound to current settings."""
    return PlaceLookup()
