"""
Audit Models for Expensewise

Every categorization leaves a trail of events:
1. What was asked (raw name)
2. What the model answered and which fields had to be repaired
3. Whether enrichment (image search) degraded
4. What was returned, or why it failed

DESIGN DECISION: Repairs of model output are silent to the caller
but never silent in the audit trail.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    CATEGORIZATION_REQUESTED = "categorization_requested"
    CATEGORIZATION_COMPLETED = "categorization_completed"
    CATEGORIZATION_FAILED = "categorization_failed"
    FIELD_REPAIRED = "field_repaired"
    IMAGE_SEARCH_FAILED = "image_search_failed"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Maps onto the stdlib level the event is logged at."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class PipelineStage(str, Enum):
    """Which part of the categorization pipeline emitted the event."""
    FLOW = "flow"
    NORMALIZER = "normalizer"
    IMAGE_SEARCH = "image_search"


class AuditEvent(BaseModel):
    """One entry of a categorization's audit trail."""

    event_id: UUID = Field(default_factory=uuid4)
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="UTC time the event was recorded"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO
    stage: PipelineStage = PipelineStage.FLOW

    # Shared by every event of one categorization
    correlation_id: Optional[UUID] = None

    summary: str = Field(..., max_length=300)
    details: dict[str, Any] = Field(default_factory=dict)

    # Set on failures only
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        JSON-safe keyword arguments for a structlog call.

        Empty optional fields are left out so log lines stay short.
        """
        return self.model_dump(mode="json", exclude_none=True)


def _truncate(value: Any, limit: int = 120) -> str:
    text = str(value)
    return text if len(text) <= limit else text[: limit - 3] + "..."


class AuditEventBuilder:
    """
    Constructors for each kind of audit event.

    Usage:
        event = AuditEventBuilder.categorization_requested(raw_name, correlation_id)
        event = AuditEventBuilder.field_repaired("category", "Foo", "Miscellaneous", correlation_id)
    """

    @staticmethod
    def categorization_requested(raw_name: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORIZATION_REQUESTED,
            correlation_id=correlation_id,
            summary=f"Categorization requested: {_truncate(raw_name, 80)}",
            details={"raw_name": _truncate(raw_name)},
        )

    @staticmethod
    def categorization_completed(
        cleaned_name: str,
        category: str,
        subcategory: Optional[str],
        confidence: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORIZATION_COMPLETED,
            correlation_id=correlation_id,
            summary=f"{_truncate(cleaned_name, 80)} categorized as {category}",
            details={
                "cleaned_name": cleaned_name,
                "category": category,
                "subcategory": subcategory,
                "confidence": confidence,
            },
        )

    @staticmethod
    def categorization_failed(
        error_type: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        """Reported failures are warnings: the caller got a usable error message."""
        return AuditEvent(
            event_type=AuditEventType.CATEGORIZATION_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            summary=f"Categorization failed: {error_type}",
            error_code=error_type,
            error_message=error_message,
        )

    @staticmethod
    def field_repaired(
        field: str,
        rejected_value: Any,
        replacement: Any,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FIELD_REPAIRED,
            severity=AuditSeverity.DEBUG,
            stage=PipelineStage.NORMALIZER,
            correlation_id=correlation_id,
            summary=f"Replaced model value for {field}",
            details={
                "field": field,
                "rejected_value": _truncate(rejected_value),
                "replacement": replacement,
            },
        )

    @staticmethod
    def image_search_failed(
        keyword: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMAGE_SEARCH_FAILED,
            severity=AuditSeverity.WARNING,
            stage=PipelineStage.IMAGE_SEARCH,
            correlation_id=correlation_id,
            summary=f"No image found for {_truncate(keyword, 60)!r}",
            details={"keyword": keyword, "reason": reason},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            summary=f"Unexpected {error_type}",
            details=details or {},
            error_code=error_type,
            error_message=error_message,
        )
