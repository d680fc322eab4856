"""ORM models for database tables."""

from .activity import Activity
from .day import Day
from .trip import Trip

__all__ = [
    "Trip",
    "Day",
    "Activity",
]
