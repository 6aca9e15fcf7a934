"""Categorization pipeline package: error taxonomy and response normalization."""

from expensewise.categorization.exceptions import (
    CategorizationError,
    ConfigurationError,
    EmptyResponseError,
    IncompleteResponseError,
    MalformedResponseError,
    TransportError,
    ValidationError,
)
from expensewise.categorization.normalizer import (
    FIELD_KEYS,
    ResponseNormalizer,
    derive_keyword,
    normalize_color,
    normalize_url,
    parse_completion,
    resolve_category,
    resolve_confidence,
    resolve_subcategory,
    unwrap_completion,
)

__all__ = [
    # Errors
    "CategorizationError",
    "ConfigurationError",
    "EmptyResponseError",
    "IncompleteResponseError",
    "MalformedResponseError",
    "TransportError",
    "ValidationError",
    # Normalization
    "FIELD_KEYS",
    "ResponseNormalizer",
    "derive_keyword",
    "normalize_color",
    "normalize_url",
    "parse_completion",
    "resolve_category",
    "resolve_confidence",
    "resolve_subcategory",
    "unwrap_completion",
]
