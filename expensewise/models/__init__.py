"""
Data Models Package

This package contains the taxonomy and all Pydantic models used in
Expensewise. Model output must be projected into these schemas before
it reaches any caller.
"""

from expensewise.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    PipelineStage,
)
from expensewise.models.expense import (
    CategorizationFailure,
    CategorizationRequest,
    CategorizationResult,
    Confidence,
    Expense,
    ExpenseSummary,
    calculate_monthly_cost,
)
from expensewise.models.taxonomy import (
    CATCH_ALL_CATEGORY,
    CATEGORY_SUBCATEGORIES,
    CONFIDENCE_LEVELS,
    DEFAULT_CONFIDENCE,
    EXPENSE_CATEGORIES,
)

__all__ = [
    # Taxonomy
    "CATCH_ALL_CATEGORY",
    "CATEGORY_SUBCATEGORIES",
    "CONFIDENCE_LEVELS",
    "DEFAULT_CONFIDENCE",
    "EXPENSE_CATEGORIES",
    # Expense models
    "CategorizationFailure",
    "CategorizationRequest",
    "CategorizationResult",
    "Confidence",
    "Expense",
    "ExpenseSummary",
    "calculate_monthly_cost",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    "PipelineStage",
]
