"""Common data types and helpers used across the application."""

from __future__ import annotations

from enum import Enum


class ActivityType(str, Enum):
    """Built-in activity categories.

    The set is open-ended: any other non-empty label is stored verbatim as a
    custom type.
    """

    activity = "activity"
    food = "food"
    lodging = "lodging"
    travel = "travel"


DEFAULT_ACTIVITY_TYPE = ActivityType.activity.value


def normalize_activity_type(value: str | None) -> str:
    """Return a stored activity type label, defaulting blanks to ``activity``."""
    if value is None:
        return DEFAULT_ACTIVITY_TYPE
    label = str(value).strip()
    if not label:
        return DEFAULT_ACTIVITY_TYPE
    lowered = label.lower()
    if lowered in ActivityType.__members__:
        return lowered
    return label


def normalize_currency(code: str | None, default: str) -> str:
    """Upper-case a currency code, falling back to ``default`` when blank."""
    if code is None or not str(code).strip():
        return default
    return str(code).strip().upper()


def format_amount(amount: float) -> str:
    """Render an amount without a trailing ``.0`` (``25.0`` -> ``25``)."""
    if float(amount).is_integer():
        return str(int(amount))
    return f"{round(float(amount), 2):.2f}".rstrip("0").rstrip(".")
