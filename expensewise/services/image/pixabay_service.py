"""
Image Search Service using Pixabay

DESIGN DECISION: Pixabay is pure enrichment.
It gives an expense a representative photo when the model
could not name a logo. Its unavailability must NEVER fail a
categorization, so every failure mode returns None:
1. No API key configured (stage silently disabled)
2. Keyword empty after sanitization
3. Network error or non-2xx status
4. Unparseable body, empty hit list, no usable URL

Keywords are sanitized before querying: only letters, digits, spaces
and hyphens survive, and at most three words are sent. This bounds
query cost and keeps search syntax out of the query.
"""

import re
from typing import Any, Optional

import httpx
import structlog

from expensewise.config import PixabaySettings, get_settings

logger = structlog.get_logger(__name__)

# Coarse Pixabay category per expense category, to bias results
PIXABAY_CATEGORY_MAP: dict[str, str] = {
    "Food & Dining": "food",
    "Housing": "buildings",
    "Transportation": "transportation",
    "Shopping": "business",
    "Entertainment": "music",
    "Technology & Electronics": "computer",
    "Health & Fitness": "health",
    "Education": "education",
    "Personal Care": "people",
    "Pets": "animals",
    "Travel": "travel",
    "Financial": "business",
    "Insurance": "business",
    "Gifts & Donations": "people",
    "Kids & Family": "people",
    "Business Expenses": "business",
    "Subscriptions": "backgrounds",
    "Utilities & Bills": "industry",
    "Savings & Investments": "business",
    "Miscellaneous": "backgrounds",
}

MAX_KEYWORD_WORDS = 3

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\s-]")


def sanitize_keyword(keyword: Optional[str]) -> str:
    """
    Reduce a keyword to a safe, short search query.

    "Nike Air-Max 90 (white)!" -> "Nike Air-Max 90"
    """
    if not keyword:
        return ""
    cleaned = _UNSAFE_CHARS.sub(" ", keyword.strip())
    return " ".join(cleaned.split()[:MAX_KEYWORD_WORDS])


def _pick_hit_url(hits: list) -> Optional[str]:
    """
    Choose a URL from Pixabay hits.

    Prefers the CDN preview URL upgraded from 150px to 640px,
    then the web-format and large-image variants.
    """
    usable = next(
        (h for h in hits if isinstance(h, dict) and isinstance(h.get("previewURL"), str)),
        hits[0],
    )
    if not isinstance(usable, dict):
        return None

    candidate: Any = None
    preview = usable.get("previewURL")
    if isinstance(preview, str) and preview:
        candidate = preview.replace("_150.", "_640.")
    if not candidate:
        candidate = usable.get("webformatURL") or usable.get("largeImageURL")

    if not isinstance(candidate, str):
        return None
    return candidate if candidate.startswith("http") else None


class PixabayImageService:
    """
    Searches Pixabay for one representative photo.

    Exactly one HTTP request per search, no retries.
    """

    def __init__(
        self,
        settings: Optional[PixabaySettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings().pixabay
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.api_key)

    def _build_params(self, query: str, category: Optional[str]) -> dict[str, str]:
        params = {
            "key": self._settings.api_key,
            "q": query,
            "image_type": "photo",
            "orientation": "horizontal",
            "safesearch": "true",
            "per_page": str(self._settings.per_page),
        }
        mapped = PIXABAY_CATEGORY_MAP.get(category) if category else None
        if mapped:
            params["category"] = mapped
        return params

    async def _get(self, params: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self._settings.base_url, params=params)
        async with httpx.AsyncClient() as client:
            return await client.get(self._settings.base_url, params=params)

    async def search_image(
        self,
        keyword: str,
        category: Optional[str] = None,
    ) -> Optional[str]:
        """
        Find one image URL for a keyword.

        Args:
            keyword: Free-text search term (sanitized here)
            category: Expense category, mapped to a Pixabay category

        Returns:
            An http(s) image URL, or None. Never raises.
        """
        if not self.is_configured:
            logger.debug("image_search_disabled", reason="no_api_key")
            return None

        query = sanitize_keyword(keyword)
        if not query:
            return None

        try:
            response = await self._get(self._build_params(query, category))
        except httpx.HTTPError as e:
            logger.warning("image_search_request_failed", query=query, error=str(e))
            return None

        if not response.is_success:
            logger.warning(
                "image_search_bad_status",
                query=query,
                status_code=response.status_code,
            )
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("image_search_invalid_json", query=query, error=str(e))
            return None

        hits = data.get("hits") if isinstance(data, dict) else None
        if not isinstance(hits, list) or not hits:
            logger.debug("image_search_no_hits", query=query, category=category)
            return None

        url = _pick_hit_url(hits)
        if url is None:
            logger.debug("image_search_no_usable_url", query=query)
        return url
