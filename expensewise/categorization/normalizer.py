"""
Response Normalizer

Turns an untrusted model completion into a CategorizationResult.

FLOW:
1. Unwrap code fences the model may have added
2. Parse into a plain dict (MalformedResponseError on failure)
3. Check required fields (IncompleteResponseError if missing)
4. Project every field through its validation/default rule
5. Resolve logo and image through the fallback chain

Only steps 2 and 3 fail the operation. A malformed completion means the
prompt contract is broken. An unknown category, a bad color or a dead URL
is ordinary drift and is repaired silently (but audited).

Every field rule below is a pure function, and applying it to its own
output returns the same value.
"""

import json
import re
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import urlsplit
from uuid import UUID

import structlog

from expensewise.audit import AuditLogger
from expensewise.categorization.exceptions import (
    IncompleteResponseError,
    MalformedResponseError,
)
from expensewise.models.expense import (
    HEX_COLOR_PATTERN,
    CategorizationResult,
    Confidence,
)
from expensewise.models.taxonomy import (
    CATCH_ALL_CATEGORY,
    DEFAULT_CONFIDENCE,
    get_subcategories,
    is_valid_category,
)
from expensewise.services.image import AvatarService, PixabayImageService

logger = structlog.get_logger(__name__)

# Candidate keys per logical field, in priority order.
# Generative output does not reliably reuse the exact field names
# from the prompt, so known synonyms are accepted.
FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "cleaned_name": ("cleanedName",),
    "category": ("suggestedCategory", "category"),
    "subcategory": ("suggestedSubcategory", "subcategory"),
    "brand_color": ("brandColor", "brandPrimaryColor"),
    "brand_accent_color": ("brandAccentColor", "brandSecondaryColor"),
    "logo_url": ("brandLogoUrl", "logoUrl", "logo"),
    "image_url": ("imageUrl", "productImageUrl", "photoUrl", "image"),
    "image_keyword": ("imageKeyword",),
    "confidence": ("confidence",),
}

REQUIRED_FIELDS = ("cleaned_name", "category", "confidence")

_FENCE_OPEN = re.compile(r"^\s*```[a-zA-Z0-9_-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```\s*$")


# =============================================================================
# PARSING
# =============================================================================

def unwrap_completion(text: str) -> str:
    """Strip surrounding ``` / ```json fences and whitespace."""
    unwrapped = _FENCE_OPEN.sub("", text.strip(), count=1)
    unwrapped = _FENCE_CLOSE.sub("", unwrapped, count=1)
    return unwrapped.strip()


def parse_completion(text: str) -> dict:
    """
    Parse a completion into a dict.

    Raises:
        MalformedResponseError: not JSON, or JSON that is not an object
    """
    unwrapped = unwrap_completion(text or "")
    try:
        parsed = json.loads(unwrapped)
    except json.JSONDecodeError as e:
        logger.warning("model_response_unparseable", error=str(e), text=text[:200] if text else "")
        raise MalformedResponseError(raw_text=text) from e

    if not isinstance(parsed, dict):
        logger.warning("model_response_not_object", type=type(parsed).__name__)
        raise MalformedResponseError(raw_text=text)
    return parsed


def pick_field(parsed: Mapping[str, Any], field: str) -> Any:
    """First non-null value among the candidate keys of a logical field."""
    for key in FIELD_KEYS[field]:
        value = parsed.get(key)
        if value is not None:
            return value
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_missing(field: str, value: Any) -> bool:
    # Only text is a usable cleaned name
    if field == "cleaned_name":
        return not isinstance(value, str) or not value.strip()
    return _is_blank(value)


def check_required_fields(parsed: Mapping[str, Any]) -> None:
    """
    Raises:
        IncompleteResponseError: cleaned name, category or confidence missing
    """
    missing = [f for f in REQUIRED_FIELDS if _is_missing(f, pick_field(parsed, f))]
    if missing:
        logger.warning("model_response_incomplete", missing_fields=missing)
        raise IncompleteResponseError(missing_fields=missing)


# =============================================================================
# FIELD RULES
# =============================================================================

def resolve_category(value: Any) -> str:
    """Exact taxonomy member, else the catch-all category."""
    return value if is_valid_category(value) else CATCH_ALL_CATEGORY


def resolve_subcategory(category: str, value: Any) -> Optional[str]:
    """Member of the category's list, else its first entry, else None."""
    allowed: Sequence[str] = get_subcategories(category)
    if isinstance(value, str) and value in allowed:
        return value
    return allowed[0] if allowed else None


def resolve_confidence(value: Any) -> Confidence:
    """One of high/medium/low (exact match), else medium."""
    if isinstance(value, Confidence):
        return value
    try:
        return Confidence(value)
    except ValueError:
        return Confidence(DEFAULT_CONFIDENCE)


def normalize_color(value: Any) -> Optional[str]:
    """#RGB or #RRGGBB (any case) uppercased, else None."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed.upper() if HEX_COLOR_PATTERN.match(trimmed) else None


def normalize_url(value: Any) -> Optional[str]:
    """Absolute http(s) URL with a host, else None."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    try:
        parts = urlsplit(trimmed)
    except ValueError:
        return None
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        return None
    return trimmed


def derive_keyword(*candidates: Any) -> str:
    """First non-blank string among the candidates, stripped."""
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return ""


# =============================================================================
# NORMALIZER
# =============================================================================

class ResponseNormalizer:
    """
    Projects a parsed completion into a guaranteed-valid result.

    Holds the image collaborators for the fallback chain:
    Pixabay (optional, may be unconfigured) and the avatar service
    (always available).
    """

    def __init__(
        self,
        image_service: Optional[PixabayImageService] = None,
        avatar_service: Optional[AvatarService] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._image_service = image_service or PixabayImageService()
        self._avatar_service = avatar_service or AvatarService()
        self._audit_logger = audit_logger

    async def _repaired(
        self,
        field: str,
        rejected: Any,
        replacement: Any,
        correlation_id: Optional[UUID],
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_field_repaired(
                field=field,
                rejected_value=rejected,
                replacement=replacement,
                correlation_id=correlation_id,
            )

    async def normalize(
        self,
        completion: str,
        raw_name: str,
        correlation_id: Optional[UUID] = None,
    ) -> CategorizationResult:
        """
        Normalize a raw completion.

        Raises:
            MalformedResponseError: completion is not a JSON object
            IncompleteResponseError: a required field is missing
        """
        parsed = parse_completion(completion)
        check_required_fields(parsed)
        return await self.project(parsed, raw_name, correlation_id)

    async def project(
        self,
        parsed: Mapping[str, Any],
        raw_name: str,
        correlation_id: Optional[UUID] = None,
    ) -> CategorizationResult:
        """Apply every field rule and the visual-identity fallback chain."""
        cleaned_name = str(pick_field(parsed, "cleaned_name")).strip()

        raw_category = pick_field(parsed, "category")
        category = resolve_category(raw_category)
        if category != raw_category:
            await self._repaired("category", raw_category, category, correlation_id)

        raw_subcategory = pick_field(parsed, "subcategory")
        subcategory = resolve_subcategory(category, raw_subcategory)
        if subcategory != raw_subcategory:
            await self._repaired("subcategory", raw_subcategory, subcategory, correlation_id)

        raw_confidence = pick_field(parsed, "confidence")
        confidence = resolve_confidence(raw_confidence)
        if confidence.value != raw_confidence:
            await self._repaired("confidence", raw_confidence, confidence.value, correlation_id)

        colors = {}
        for field in ("brand_color", "brand_accent_color"):
            raw_color = pick_field(parsed, field)
            colors[field] = normalize_color(raw_color)
            if raw_color is not None and colors[field] is None:
                await self._repaired(field, raw_color, None, correlation_id)

        raw_logo = pick_field(parsed, "logo_url")
        model_logo = normalize_url(raw_logo)
        if raw_logo is not None and model_logo is None:
            await self._repaired("logo_url", raw_logo, None, correlation_id)

        raw_image = pick_field(parsed, "image_url")
        model_image = normalize_url(raw_image)
        if raw_image is not None and model_image is None:
            await self._repaired("image_url", raw_image, None, correlation_id)

        keyword = derive_keyword(
            pick_field(parsed, "image_keyword"),
            cleaned_name,
            subcategory,
            category,
            raw_name,
        )

        logo_url, image_url = await self.resolve_visual_identity(
            model_logo=model_logo,
            model_image=model_image,
            keyword=keyword,
            cleaned_name=cleaned_name,
            category=category,
            correlation_id=correlation_id,
        )

        return CategorizationResult(
            cleaned_name=cleaned_name,
            category=category,
            subcategory=subcategory,
            brand_color=colors["brand_color"],
            brand_accent_color=colors["brand_accent_color"],
            logo_url=logo_url,
            image_url=image_url,
            image_keyword=keyword,
            confidence=confidence,
        )

    async def resolve_visual_identity(
        self,
        model_logo: Optional[str],
        model_image: Optional[str],
        keyword: str,
        cleaned_name: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[str, str]:
        """
        Resolve (logo_url, image_url); both are always non-empty.

        Logo:  model logo → image search → model image → placeholder
        Image: model image → image search → logo → placeholder

        Image search runs only when the model gave no usable logo.
        """
        logo = model_logo

        searched: Optional[str] = None
        if not logo and keyword and self._image_service.is_configured:
            searched = normalize_url(
                await self._image_service.search_image(keyword, category)
            )
            if searched is None and self._audit_logger:
                await self._audit_logger.log_image_search_failed(
                    keyword=keyword,
                    reason="no usable result",
                    correlation_id=correlation_id,
                )

        placeholder = self._avatar_service.avatar_url(cleaned_name, category)

        if not logo:
            logo = searched or model_image or placeholder

        image = model_image or searched or logo or placeholder
        return logo, image
