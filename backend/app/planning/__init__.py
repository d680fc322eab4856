"""Planning module: trip day generation and activity placement."""

from .assignment import resolve_day_for_start_time
from .days import (
    ReconciliationPlan,
    apply_reconciliation,
    build_days,
    enumerate_dates,
    find_day_for_date,
    plan_reconciliation,
)

__all__ = [
    "ReconciliationPlan",
    "apply_reconciliation",
    "build_days",
    "enumerate_dates",
    "find_day_for_date",
    "plan_reconciliation",
    "resolve_day_for_start_time",
]
