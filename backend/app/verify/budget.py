"""Budget tracking for a trip.

Spent totals are computed in the trip's currency through the currency service;
a trip without a positive budget reports status ``not_set``.
"""

from typing import Literal

from pydantic import BaseModel, Field

from backend.app.adapters.fx import CurrencyService
from backend.app.models.itinerary import TripV1

# Share of the budget at which a warning is raised
WARNING_THRESHOLD_PCT = 80.0

BudgetState = Literal["not_set", "ok", "warning", "over_budget"]


class BudgetStatus(BaseModel):
    """Spent vs. budget for a trip, in the trip's currency."""

    status: BudgetState
    currency: str
    budget: float | None = None
    spent: float = 0.0
    remaining: float | None = None
    percentage_used: float | None = Field(default=None, description="Capped at 100")
    over_budget: bool = False
    warning: bool = False


def compute_budget_status(
    budget: float | None, spent: float, currency: str
) -> BudgetStatus:
    """Derive budget flags from a budget and a spent amount.

    Args:
        budget: Trip budget; ``None`` or non-positive means no budget.
        spent: Total spent, already in ``currency``.
        currency: Currency of both amounts.

    Returns:
        BudgetStatus. ``warning`` is set from 80% usage while not over budget.
    """
    if not budget or budget <= 0:
        return BudgetStatus(status="not_set", currency=currency, spent=spent)

    remaining = budget - spent
    percentage_used = min(spent / budget * 100, 100.0)
    over_budget = remaining < 0
    warning = not over_budget and percentage_used >= WARNING_THRESHOLD_PCT

    if over_budget:
        state: BudgetState = "over_budget"
    elif warning:
        state = "warning"
    else:
        state = "ok"

    return BudgetStatus(
        status=state,
        currency=currency,
        budget=budget,
        spent=spent,
        remaining=remaining,
        percentage_used=percentage_used,
        over_budget=over_budget,
        warning=warning,
    )


def verify_budget(trip: TripV1, currency_service: CurrencyService) -> BudgetStatus:
    """Budget status of a trip with every activity cost converted to its currency."""
    spent = currency_service.calculate_total_in_currency(
        trip.all_activities(), trip.currency, default_currency=trip.currency
    )
    return compute_budget_status(trip.budget, spent, trip.currency)
