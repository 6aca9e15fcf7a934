"""Image enrichment services package."""

from expensewise.services.image.avatar_service import AvatarService, LRUCache
from expensewise.services.image.pixabay_service import (
    PIXABAY_CATEGORY_MAP,
    PixabayImageService,
    sanitize_keyword,
)

__all__ = [
    "AvatarService",
    "LRUCache",
    "PIXABAY_CATEGORY_MAP",
    "PixabayImageService",
    "sanitize_keyword",
]
