"""
Tests for Expensewise models

Test strategy:
1. Unit tests for individual components (models, field rules, adapters)
2. Integration tests for the flow (with mocked external services)
3. No real API calls in tests (use fakes)
"""

import asyncio
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from expensewise.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from expensewise.models.expense import (
    CategorizationFailure,
    CategorizationRequest,
    CategorizationResult,
    Confidence,
    Expense,
    calculate_monthly_cost,
)
from expensewise.models.taxonomy import (
    CATCH_ALL_CATEGORY,
    CATEGORY_SUBCATEGORIES,
    EXPENSE_CATEGORIES,
    get_subcategories,
    is_valid_category,
    is_valid_subcategory,
)


def make_result(**overrides) -> CategorizationResult:
    fields = dict(
        cleaned_name="Amazon",
        category="Shopping",
        subcategory="Online Shopping",
        logo_url="https://logo.clearbit.com/amazon.com",
        image_url="https://logo.clearbit.com/amazon.com",
        image_keyword="Amazon",
        confidence=Confidence.HIGH,
    )
    fields.update(overrides)
    return CategorizationResult(**fields)


class TestTaxonomy:
    """Tests for the static category taxonomy."""

    def test_every_category_has_subcategories(self):
        """Test that each category maps to a non-empty list."""
        for category in EXPENSE_CATEGORIES:
            assert len(get_subcategories(category)) > 0

    def test_categories_match_mapping(self):
        """Test that the ordered list and the mapping agree."""
        assert list(EXPENSE_CATEGORIES) == list(CATEGORY_SUBCATEGORIES.keys())

    def test_catch_all_has_single_subcategory(self):
        """Test the catch-all category."""
        assert CATCH_ALL_CATEGORY == "Miscellaneous"
        assert get_subcategories(CATCH_ALL_CATEGORY) == ("Other",)

    def test_taxonomy_is_read_only(self):
        """Test that the mapping cannot be mutated."""
        with pytest.raises(TypeError):
            CATEGORY_SUBCATEGORIES["New"] = ("Thing",)

    def test_membership_is_exact(self):
        """Test that membership is case-sensitive."""
        assert is_valid_category("Shopping")
        assert not is_valid_category("shopping")
        assert not is_valid_category(None)
        assert is_valid_subcategory("Shopping", "Online Shopping")
        assert not is_valid_subcategory("Housing", "Online Shopping")

    def test_unknown_category_has_no_subcategories(self):
        """Test lookup of an unknown category."""
        assert get_subcategories("NotARealCategory") == ()


class TestCategorizationModels:
    """Tests for categorization request/result models."""

    def test_request_rejects_blank_name(self):
        """Test that whitespace-only names are rejected."""
        with pytest.raises(ValueError):
            CategorizationRequest(name="   ")

    def test_request_strips_whitespace(self):
        """Test that the name is stripped."""
        assert CategorizationRequest(name="  AMZN*1  ").name == "AMZN*1"

    def test_result_wire_format_is_camel_case(self):
        """Test conversion to the JSON wire shape."""
        wire = make_result(brand_color="#ff9900").to_wire()
        assert wire["cleanedName"] == "Amazon"
        assert wire["logoUrl"].startswith("https://")
        assert wire["brandColor"] == "#FF9900"
        assert wire["confidence"] == "high"
        assert "brandAccentColor" not in wire

    def test_result_accepts_aliases(self):
        """Test population by camelCase aliases."""
        result = CategorizationResult(
            cleanedName="Amazon",
            category="Shopping",
            subcategory="Online Shopping",
            logoUrl="https://a.example/logo.png",
            imageUrl="https://a.example/img.png",
            imageKeyword="Amazon",
            confidence="low",
        )
        assert result.confidence == Confidence.LOW

    def test_result_rejects_unknown_category(self):
        """Test that an invalid result cannot be constructed."""
        with pytest.raises(ValueError):
            make_result(category="NotARealCategory")

    def test_result_rejects_foreign_subcategory(self):
        """Test that subcategory must belong to category."""
        with pytest.raises(ValueError, match="not allowed"):
            make_result(category="Housing", subcategory="Online Shopping")

    def test_result_requires_subcategory_when_available(self):
        """Test that subcategory is absent only for empty lists."""
        with pytest.raises(ValueError, match="Subcategory required"):
            make_result(subcategory=None)

    def test_result_rejects_bad_color(self):
        """Test color validation on the model itself."""
        with pytest.raises(ValueError):
            make_result(brand_color="orange")

    def test_failure_wire_format(self):
        """Test failure serialization."""
        failure = CategorizationFailure(error="No response from AI", error_type="EmptyResponseError")
        assert failure.to_wire() == {
            "error": "No response from AI",
            "errorType": "EmptyResponseError",
        }


class TestExpenseModels:
    """Tests for the expense ledger models."""

    def test_monthly_cost_is_amortized(self):
        """Test amortization of a one-time purchase."""
        expense = Expense(
            name="MacBook Pro",
            category="Technology & Electronics",
            subcategory="Computers & Laptops",
            total_cost=Decimal("2400"),
            usage_months=36,
        )
        assert expense.monthly_cost == Decimal("66.67")

    def test_monthly_cost_zero_months(self):
        """Test that a non-positive period yields zero."""
        assert calculate_monthly_cost(Decimal("100"), 0) == Decimal("0.00")
        assert calculate_monthly_cost(Decimal("100"), -3) == Decimal("0.00")

    def test_expense_rejects_negative_cost(self):
        """Test that negative costs are rejected."""
        with pytest.raises(ValueError):
            Expense(name="Test", total_cost=Decimal("-1"))

    def test_expense_rejects_zero_usage_months(self):
        """Test that usage period must be at least one month."""
        with pytest.raises(ValueError):
            Expense(name="Test", total_cost=Decimal("10"), usage_months=0)

    def test_expense_rejects_foreign_subcategory(self):
        """Test subcategory membership on expenses."""
        with pytest.raises(ValueError, match="not allowed"):
            Expense(
                name="Shelf",
                category="Housing",
                subcategory="Groceries",
                total_cost=Decimal("80"),
            )

    def test_expense_normalizes_colors(self):
        """Test that brand colors are uppercased and blanks dropped."""
        expense = Expense(
            name="Shelf",
            total_cost=Decimal("80"),
            brand_color="#0058a3",
            brand_accent_color="",
        )
        assert expense.brand_color == "#0058A3"
        assert expense.brand_accent_color is None

    def test_expense_from_categorization(self):
        """Test prefill of an expense from a categorization result."""
        result = make_result(brand_color="#FF9900")
        expense = Expense.from_categorization(
            result,
            total_cost=Decimal("120"),
            usage_months=12,
            purchase_date=date(2024, 12, 1),
        )
        assert expense.name == "Amazon"
        assert expense.category == "Shopping"
        assert expense.subcategory == "Online Shopping"
        assert expense.brand_logo_url == result.logo_url
        assert expense.monthly_cost == Decimal("10.00")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.CATEGORIZATION_REQUESTED,
            summary="Test request",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEventBuilder.categorization_completed(
            cleaned_name="Amazon",
            category="Shopping",
            subcategory="Online Shopping",
            confidence="high",
            correlation_id=correlation_id,
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "categorization_completed"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["details"]["category"] == "Shopping"

    def test_field_repaired_truncates_long_values(self):
        """Test that rejected values are truncated in the trail."""
        event = AuditEventBuilder.field_repaired("category", "x" * 500, "Miscellaneous")
        assert len(event.details["rejected_value"]) <= 120
        assert event.severity == AuditSeverity.DEBUG

    def test_categorization_failed_is_warning(self):
        """Test failure events carry the error type."""
        event = AuditEventBuilder.categorization_failed(
            error_type="MalformedResponseError",
            error_message="Invalid response format from AI",
            correlation_id=uuid4(),
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_code == "MalformedResponseError"


class TestAuditLogger:
    """Tests for AuditLogger writes."""

    def test_completed_summary_fits_for_long_names(self):
        """Test that the summary of a long cleaned name stays within bounds."""
        event = AuditEventBuilder.categorization_completed(
            cleaned_name="Standing Desk " * 40,
            category="Housing",
            subcategory="Furniture",
            confidence="high",
            correlation_id=uuid4(),
        )
        assert len(event.summary) <= 300
        assert event.details["cleaned_name"] == "Standing Desk " * 40

    def test_rejected_event_is_not_raised(self, audit_logger, recording_logger):
        """Test that an event failing validation is reported as not written."""

        def broken_builder():
            return AuditEvent(event_type="not_an_event", summary="x")

        assert asyncio.run(audit_logger._record(broken_builder)) is False
        assert recording_logger.records == []

    def test_event_logged_at_its_severity(self, audit_logger, recording_logger):
        asyncio.run(audit_logger.log_field_repaired("category", "Retail", "Miscellaneous"))

        level, event, kw = recording_logger.records[0]
        assert level == "debug"
        assert event == "field_repaired"
        assert kw["stage"] == "normalizer"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
