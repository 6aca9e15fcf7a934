"""
Expense Summary Engine

DESIGN DECISION: Summaries are DETERMINISTIC arithmetic over the
expenses the caller already holds. No model is involved.

Monthly costs are amortized per expense (rounded to cents) and then
summed, so the category breakdown always adds up to the total.
"""

from decimal import Decimal
from typing import Iterable, Optional

from expensewise.models.expense import Expense, ExpenseSummary, calculate_monthly_cost
from expensewise.models.taxonomy import EXPENSE_CATEGORIES

SORT_KEYS = {
    "monthly_cost": lambda e: e.monthly_cost,
    "total_cost": lambda e: e.total_cost,
    "name": lambda e: e.name.lower(),
    "purchase_date": lambda e: e.purchase_date,
}


def empty_category_breakdown() -> dict[str, Decimal]:
    """Every taxonomy category at zero."""
    return {category: Decimal("0.00") for category in EXPENSE_CATEGORIES}


def calculate_expense_summary(expenses: Iterable[Expense]) -> ExpenseSummary:
    """Totals, count and per-category monthly breakdown."""
    summary = ExpenseSummary(category_breakdown=empty_category_breakdown())

    for expense in expenses:
        monthly = expense.monthly_cost
        summary.total_monthly_expense += monthly
        summary.total_investment += expense.total_cost
        summary.expense_count += 1
        summary.category_breakdown[expense.category] = (
            summary.category_breakdown.get(expense.category, Decimal("0.00")) + monthly
        )

    return summary


def filter_expenses(
    expenses: Iterable[Expense],
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    search: Optional[str] = None,
) -> list[Expense]:
    """
    Filter expenses by category, subcategory and a case-insensitive
    name/notes search. None means "no filter".
    """
    needle = search.strip().lower() if search and search.strip() else None
    results = []
    for expense in expenses:
        if category and expense.category != category:
            continue
        if subcategory and expense.subcategory != subcategory:
            continue
        if needle:
            haystack = f"{expense.name} {expense.notes or ''}".lower()
            if needle not in haystack:
                continue
        results.append(expense)
    return results


def sort_expenses(
    expenses: Iterable[Expense],
    sort_by: str = "monthly_cost",
    descending: bool = True,
) -> list[Expense]:
    """
    Sort expenses by one of SORT_KEYS.

    Raises:
        ValueError: unknown sort key
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(
            f"Unknown sort key: {sort_by}. Available: {', '.join(SORT_KEYS)}"
        )
    return sorted(expenses, key=SORT_KEYS[sort_by], reverse=descending)


__all__ = [
    "SORT_KEYS",
    "calculate_expense_summary",
    "calculate_monthly_cost",
    "empty_category_breakdown",
    "filter_expenses",
    "sort_expenses",
]
