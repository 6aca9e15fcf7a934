"""
Test doubles shared across the test modules.

No real API calls in tests: Gemini is replaced by FakeModel,
Pixabay by FakeImageService or an httpx.MockTransport.
"""

import json
from typing import Optional


class FakeResponse:
    def __init__(self, text):
        self._text = text

    @property
    def text(self):
        if isinstance(self._text, Exception):
            raise self._text
        return self._text


class FakeModel:
    """Stands in for genai.GenerativeModel; records every prompt."""

    def __init__(self, text=None, error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text)


class FakeImageService:
    """Stands in for PixabayImageService."""

    def __init__(self, url: Optional[str] = None, configured: bool = True):
        self.url = url
        self.configured = configured
        self.calls: list[tuple] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def search_image(self, keyword, category=None):
        self.calls.append((keyword, category))
        return self.url


class RecordingLogger:
    """Collects structlog-style calls made by AuditLogger."""

    def __init__(self):
        self.records: list[tuple[str, str, dict]] = []

    def _record(self, level, event, **kw):
        self.records.append((level, event, kw))

    def debug(self, event, **kw):
        self._record("debug", event, **kw)

    def info(self, event, **kw):
        self._record("info", event, **kw)

    def warning(self, event, **kw):
        self._record("warning", event, **kw)

    def error(self, event, **kw):
        self._record("error", event, **kw)

    def event_types(self) -> list[str]:
        return [kw.get("event_type") for _, _, kw in self.records]


def completion(**fields) -> str:
    """Serialize a model completion."""
    return json.dumps(fields)
