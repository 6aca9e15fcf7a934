"""
AI Agents for Expensewise

DESIGN DECISION: The model is an ADVISOR, not an authority.

CATEGORIZATION AGENT:
   - CAN: Suggest a cleaned name, category, brand colors, logo and image
   - CANNOT: Put anything in front of the user unvalidated
     (every field goes through the ResponseNormalizer)
   - CANNOT: Retry on its own. One request, one completion.
     The form that triggered it can simply trigger it again.

The agent owns only the model call. Prompt construction lives in
prompts.py and output validation in the categorization package.
"""

from typing import Any, Optional

import google.generativeai as genai
import structlog

from expensewise.agents.prompts import build_categorization_prompt
from expensewise.categorization.exceptions import (
    ConfigurationError,
    EmptyResponseError,
    TransportError,
)
from expensewise.config import GoogleAISettings, get_settings

logger = structlog.get_logger(__name__)


class CategorizationAgent:
    """
    Obtains exactly one completion from Gemini.

    The Gemini client is created lazily, so constructing the agent
    without a key is fine; the missing key surfaces as
    ConfigurationError on first use, before any network call.
    """

    def __init__(
        self,
        settings: Optional[GoogleAISettings] = None,
        model: Optional[Any] = None,
    ):
        self._settings = settings or get_settings().google_ai
        self._model = model

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.api_key)

    def _get_model(self):
        """Get or create the Gemini model."""
        if not self.is_configured:
            raise ConfigurationError()
        if self._model is None:
            genai.configure(api_key=self._settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=self._settings.model_name,
                generation_config={
                    "temperature": self._settings.temperature,
                    "max_output_tokens": self._settings.max_output_tokens,
                }
            )
        return self._model

    async def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the completion text.

        Raises:
            ConfigurationError: No API key configured
            TransportError: The backend call failed
            EmptyResponseError: The backend returned no text
        """
        model = self._get_model()

        try:
            response = await model.generate_content_async(prompt)
        except Exception as e:
            logger.warning("model_request_failed", error=str(e))
            raise TransportError(str(e) or None) from e

        try:
            text = response.text
        except ValueError:
            # Blocked or empty candidates: the SDK refuses to build .text
            text = None

        text = text.strip() if isinstance(text, str) else ""
        if not text:
            raise EmptyResponseError()
        return text

    async def categorize(self, raw_name: str) -> str:
        """Build the categorization prompt for raw_name and return the raw completion."""
        return await self.complete(build_categorization_prompt(raw_name))
