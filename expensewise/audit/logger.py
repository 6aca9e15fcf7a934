"""
Audit Logger

DESIGN DECISION: Every categorization is traceable.
Each event becomes one JSON log line carrying the correlation ID of
the categorization it belongs to, so a single grep reconstructs what
the model answered, which fields were repaired and why a request failed.

Writing an event never raises. Persisting the trail is left to
whatever collects the process logs.
"""

import logging
import sys
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

import structlog
from pydantic import ValidationError

from expensewise.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output to stderr at the given level.

    Call once from an entry point (API startup, Streamlit app).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """Writes audit events through a structlog logger."""

    def __init__(self, logger: Optional[Any] = None):
        self._logger = logger or structlog.get_logger("expensewise.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Emit one event at the level named by its severity.

        Returns False when the underlying logger failed.
        """
        emit = getattr(self._logger, event.severity.value, self._logger.info)
        try:
            emit(event.event_type.value, **event.to_log_dict())
        except Exception:
            return False
        return True

    async def _record(self, build: Callable[..., AuditEvent], *args: Any) -> bool:
        """Build an event from model output and log it; a rejected event is reported, not raised."""
        try:
            event = build(*args)
        except ValidationError as e:
            logger.warning("audit_event_rejected", builder=build.__name__, error=str(e))
            return False
        return await self.log(event)

    async def log_categorization_requested(self, raw_name: str, correlation_id: UUID) -> None:
        await self._record(AuditEventBuilder.categorization_requested, raw_name, correlation_id)

    async def log_categorization_completed(
        self,
        cleaned_name: str,
        category: str,
        subcategory: Optional[str],
        confidence: str,
        correlation_id: UUID,
    ) -> None:
        await self._record(
            AuditEventBuilder.categorization_completed,
            cleaned_name, category, subcategory, confidence, correlation_id,
        )

    async def log_categorization_failed(
        self,
        error_type: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        await self._record(
            AuditEventBuilder.categorization_failed,
            error_type, error_message, correlation_id,
        )

    async def log_field_repaired(
        self,
        field: str,
        rejected_value: Any,
        replacement: Any,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Record a model value the normalizer replaced."""
        await self._record(
            AuditEventBuilder.field_repaired,
            field, rejected_value, replacement, correlation_id,
        )

    async def log_image_search_failed(
        self,
        keyword: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self._record(
            AuditEventBuilder.image_search_failed,
            keyword, reason, correlation_id,
        )

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Record an exception the pipeline does not handle."""
        await self._record(
            AuditEventBuilder.system_error,
            error_type, error_message, details, correlation_id,
        )


def create_correlation_id() -> UUID:
    """New ID shared by every audit event of one categorization."""
    return uuid4()
