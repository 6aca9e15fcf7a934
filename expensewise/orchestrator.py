"""
Main Orchestrator for Expensewise

Ties the categorization pipeline together:

    raw name → validate → prompt → Gemini → normalize → enrich → result

DESIGN DECISION: There is ONE canonical pipeline. The Streamlit form
calls it in-process and the HTTP endpoint calls the very same flow,
so validation rules cannot drift between the two entry points.

The orchestrator enforces the boundaries:
- Empty names and missing credentials fail before any network call
- The caller gets a full result or a single error message, never a mix
- Every step is audited under one correlation ID
"""

from typing import Optional, Union
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from expensewise.agents import CategorizationAgent
from expensewise.audit import AuditLogger, create_correlation_id
from expensewise.categorization import (
    CategorizationError,
    ConfigurationError,
    ResponseNormalizer,
    ValidationError,
)
from expensewise.models.expense import (
    CategorizationFailure,
    CategorizationRequest,
    CategorizationResult,
)
from expensewise.services.image import AvatarService, PixabayImageService

CategorizationOutcome = Union[CategorizationResult, CategorizationFailure]


class CategorizationFlow:
    """
    Orchestrates one categorization.

    Flow:
    1. Validate → reject blank names
    2. Configuration → require the Gemini key
    3. Complete → one model call, no retries
    4. Normalize → parse, validate, repair, enrich
    5. Return → result or failure

    Stateless per call; one instance can serve concurrent requests.
    """

    def __init__(
        self,
        agent: Optional[CategorizationAgent] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._agent = agent or CategorizationAgent()
        self._audit_logger = audit_logger
        self._normalizer = normalizer or ResponseNormalizer(audit_logger=audit_logger)

    @property
    def is_configured(self) -> bool:
        return self._agent.is_configured

    async def _run(
        self,
        raw_name: str,
        correlation_id: UUID,
    ) -> CategorizationResult:
        try:
            CategorizationRequest(name=raw_name)
        except PydanticValidationError:
            raise ValidationError() from None

        if not self._agent.is_configured:
            raise ConfigurationError()

        # The prompt gets the name as typed, not the stripped copy
        completion = await self._agent.categorize(raw_name)
        return await self._normalizer.normalize(
            completion,
            raw_name=raw_name,
            correlation_id=correlation_id,
        )

    async def categorize(
        self,
        raw_name: str,
        correlation_id: Optional[UUID] = None,
    ) -> CategorizationOutcome:
        """
        Categorize a raw expense name.

        Returns:
            CategorizationResult on success,
            CategorizationFailure (with the error message) otherwise.

        Unexpected exceptions are audited and re-raised.
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            await self._audit_logger.log_categorization_requested(
                raw_name=raw_name if isinstance(raw_name, str) else repr(raw_name),
                correlation_id=correlation_id,
            )

        try:
            result = await self._run(raw_name, correlation_id)
        except CategorizationError as e:
            if self._audit_logger:
                await self._audit_logger.log_categorization_failed(
                    error_type=type(e).__name__,
                    error_message=e.message,
                    correlation_id=correlation_id,
                )
            return CategorizationFailure(error=e.message, error_type=type(e).__name__)
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_categorization_completed(
                cleaned_name=result.cleaned_name,
                category=result.category,
                subcategory=result.subcategory,
                confidence=result.confidence.value,
                correlation_id=correlation_id,
            )

        return result


def create_app_components() -> CategorizationFlow:
    """
    Factory function to create the categorization flow from settings.

    Image search is wired in regardless; it disables itself when
    no Pixabay key is configured.
    """
    audit_logger = AuditLogger()

    normalizer = ResponseNormalizer(
        image_service=PixabayImageService(),
        avatar_service=AvatarService(),
        audit_logger=audit_logger,
    )

    return CategorizationFlow(
        agent=CategorizationAgent(),
        normalizer=normalizer,
        audit_logger=audit_logger,
    )
