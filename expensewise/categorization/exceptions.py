"""
Exceptions for the categorization pipeline.

All of these are terminal: nothing is retried internally.
Each carries a fixed, user-displayable default message.

Image-search failures are deliberately absent. They are absorbed
by the image service and never reach the caller.
"""


class CategorizationError(Exception):
    """Base exception for categorization errors."""

    default_message = "Failed to categorize expense"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(CategorizationError):
    """Raw expense name is empty or whitespace-only."""

    default_message = "Expense name cannot be empty"


class ConfigurationError(CategorizationError):
    """Required credential is missing."""

    default_message = "Google AI API key not configured"


class TransportError(CategorizationError):
    """Text-generation backend call failed. Backend message is preserved."""

    default_message = "Text generation request failed"


class EmptyResponseError(CategorizationError):
    """Backend returned no usable text."""

    default_message = "No response from AI"


class MalformedResponseError(CategorizationError):
    """Completion is not parseable as a JSON object."""

    default_message = "Invalid response format from AI"

    def __init__(self, message: str = None, raw_text: str = None):
        self.raw_text = raw_text
        super().__init__(message)


class IncompleteResponseError(CategorizationError):
    """Parsed completion is missing a required field."""

    default_message = "Incomplete response from AI"

    def __init__(self, message: str = None, missing_fields: list = None):
        self.missing_fields = missing_fields or []
        super().__init__(message)
