"""Services package."""

from expensewise.services.image import (
    AvatarService,
    PixabayImageService,
    sanitize_keyword,
)

__all__ = [
    # Image services
    "AvatarService",
    "PixabayImageService",
    "sanitize_keyword",
]
