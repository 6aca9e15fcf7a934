"""Expense summary and list queries package."""

from expensewise.queries.summary import (
    calculate_expense_summary,
    calculate_monthly_cost,
    filter_expenses,
    sort_expenses,
)

__all__ = [
    "calculate_expense_summary",
    "calculate_monthly_cost",
    "filter_expenses",
    "sort_expenses",
]
