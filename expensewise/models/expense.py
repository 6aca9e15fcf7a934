"""
Core Data Models for Expensewise

These models define the schemas for everything flowing through the
categorization pipeline and the expense ledger.

DESIGN DECISION: The model's completion is parsed into a plain dict first
and only then projected into CategorizationResult, field by field.
CategorizationResult itself re-checks the taxonomy invariants, so an
invalid result can never be constructed, even by mistake.

Wire format uses camelCase aliases (cleanedName, logoUrl, ...) because
the form UI and the HTTP endpoint speak JSON.
"""

import re
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from expensewise.models.taxonomy import (
    CATCH_ALL_CATEGORY,
    get_subcategories,
    is_valid_category,
    is_valid_subcategory,
)

HEX_COLOR_PATTERN = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)

CENT = Decimal("0.01")


# =============================================================================
# ENUMS
# =============================================================================

class Confidence(str, Enum):
    """Model's self-reported certainty, an ordinal of three levels."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# =============================================================================
# CATEGORIZATION
# =============================================================================

class CategorizationRequest(BaseModel):
    """A raw, possibly dirty, expense descriptor (e.g. a card memo)."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Raw expense name as typed or imported"
    )


class CategorizationResult(BaseModel):
    """
    Normalized output of the categorization pipeline.

    Every field here has already been validated or repaired.
    logo_url and image_url are always populated: either a real
    http(s) URL or the placeholder avatar.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    cleaned_name: str = Field(..., min_length=1)
    category: str = Field(default=CATCH_ALL_CATEGORY)
    subcategory: Optional[str] = None
    brand_color: Optional[str] = None
    brand_accent_color: Optional[str] = None
    logo_url: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1)
    image_keyword: str = Field(..., min_length=1)
    confidence: Confidence = Confidence.MEDIUM

    @field_validator("category")
    @classmethod
    def category_in_taxonomy(cls, v: str) -> str:
        if not is_valid_category(v):
            raise ValueError(f"Unknown category: {v}")
        return v

    @field_validator("brand_color", "brand_accent_color")
    @classmethod
    def color_is_hex(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not HEX_COLOR_PATTERN.match(v):
            raise ValueError(f"Invalid hex color: {v}")
        return v.upper()

    @model_validator(mode="after")
    def subcategory_belongs_to_category(self) -> "CategorizationResult":
        if self.subcategory is None:
            if get_subcategories(self.category):
                raise ValueError(f"Subcategory required for {self.category}")
        elif not is_valid_subcategory(self.category, self.subcategory):
            raise ValueError(
                f"Subcategory {self.subcategory!r} is not allowed for {self.category}"
            )
        return self

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys, omitting absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CategorizationFailure(BaseModel):
    """
    A failed categorization.

    Mutually exclusive with CategorizationResult: the caller gets
    exactly one of the two, never a partial result.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    error: str = Field(..., min_length=1)
    error_type: str = Field(
        default="CategorizationError",
        description="Failure kind, for diagnostics"
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# EXPENSE LEDGER
# =============================================================================

def calculate_monthly_cost(total_cost: Decimal, usage_months: int) -> Decimal:
    """
    Amortize a one-time purchase over its usage period.

    Returns 0 for a non-positive usage period.
    """
    if usage_months <= 0:
        return Decimal("0.00")
    return (Decimal(total_cost) / Decimal(usage_months)).quantize(
        CENT, rounding=ROUND_HALF_UP
    )


class Expense(BaseModel):
    """
    A logged one-time purchase, amortized into a monthly cost.

    Persistence belongs to the caller; this is the in-memory shape.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(default=CATCH_ALL_CATEGORY)
    subcategory: Optional[str] = None

    total_cost: Decimal = Field(
        ...,
        ge=0,
        description="Purchase price"
    )
    usage_months: int = Field(
        default=1,
        ge=1,
        description="Months over which the purchase is amortized"
    )

    brand_color: Optional[str] = None
    brand_accent_color: Optional[str] = None
    brand_logo_url: Optional[str] = None
    image_url: Optional[str] = None

    purchase_date: date = Field(default_factory=date.today)
    notes: Optional[str] = Field(default=None, max_length=1000)
    group_id: Optional[UUID] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("category")
    @classmethod
    def category_in_taxonomy(cls, v: str) -> str:
        if not is_valid_category(v):
            raise ValueError(f"Unknown category: {v}")
        return v

    @field_validator("brand_color", "brand_accent_color")
    @classmethod
    def color_is_hex(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        if not HEX_COLOR_PATTERN.match(v):
            raise ValueError(f"Invalid hex color: {v}")
        return v.upper()

    @model_validator(mode="after")
    def subcategory_belongs_to_category(self) -> "Expense":
        if self.subcategory and not is_valid_subcategory(self.category, self.subcategory):
            raise ValueError(
                f"Subcategory {self.subcategory!r} is not allowed for {self.category}"
            )
        return self

    @computed_field
    @property
    def monthly_cost(self) -> Decimal:
        return calculate_monthly_cost(self.total_cost, self.usage_months)

    @classmethod
    def from_categorization(
        cls,
        result: CategorizationResult,
        total_cost: Decimal,
        usage_months: int = 1,
        purchase_date: Optional[date] = None,
        notes: Optional[str] = None,
        group_id: Optional[UUID] = None,
    ) -> "Expense":
        """Build an expense from a categorization result (the form prefill)."""
        return cls(
            name=result.cleaned_name,
            category=result.category,
            subcategory=result.subcategory,
            total_cost=total_cost,
            usage_months=usage_months,
            brand_color=result.brand_color,
            brand_accent_color=result.brand_accent_color,
            brand_logo_url=result.logo_url,
            image_url=result.image_url,
            purchase_date=purchase_date or date.today(),
            notes=notes,
            group_id=group_id,
        )


class ExpenseSummary(BaseModel):
    """Aggregated view over a list of expenses."""

    total_monthly_expense: Decimal = Decimal("0.00")
    total_investment: Decimal = Decimal("0.00")
    expense_count: int = 0
    category_breakdown: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Monthly cost per category; every category is present"
    )

    @property
    def top_categories(self) -> list[tuple[str, Decimal]]:
        """Categories with spend, highest monthly cost first."""
        spent = [(c, v) for c, v in self.category_breakdown.items() if v > 0]
        return sorted(spent, key=lambda item: item[1], reverse=True)
