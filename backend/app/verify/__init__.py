"""Verification module for trip budget checks."""

from .budget import BudgetStatus, compute_budget_status, verify_budget

__all__ = [
    "BudgetStatus",
    "compute_budget_status",
    "verify_budget",
]
