"""Convenient imports for all model types."""

from .common import (
    DEFAULT_ACTIVITY_TYPE,
    ActivityType,
    format_amount,
    normalize_activity_type,
    normalize_currency,
)
from .itinerary import (
    ActivityCreate,
    ActivityUpdate,
    ActivityV1,
    DayV1,
    TripCreate,
    TripUpdate,
    TripV1,
)

__all__ = [
    # Common
    "ActivityType",
    "DEFAULT_ACTIVITY_TYPE",
    "format_amount",
    "normalize_activity_type",
    "normalize_currency",
    # Itinerary
    "ActivityCreate",
    "ActivityUpdate",
    "ActivityV1",
    "DayV1",
    "TripCreate",
    "TripUpdate",
    "TripV1",
]
