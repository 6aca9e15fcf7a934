"""
Placeholder Avatar Service

Last resort of the visual-identity fallback chain: a deterministic,
identicon-style DiceBear URL derived from (name, category).
It never fails and never touches the network.

DESIGN DECISION: Generated URLs are memoized in a bounded LRU cache
owned by the service instance, not in a module-level global.
Keys are (normalized name, category), so cardinality grows with the
number of distinct merchants a user logs; the bound keeps a long-running
server from growing without limit.
"""

import threading
from collections import OrderedDict
from typing import Optional
from urllib.parse import quote

from expensewise.config import AvatarSettings, get_settings


class LRUCache:
    """Small thread-safe LRU cache with a size limit."""

    def __init__(self, max_size: int = 512):
        self.cache: OrderedDict[str, str] = OrderedDict()
        self.max_size = max_size
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            if key in self.cache:
                # Move to end (most recently used)
                self.cache.move_to_end(key)
                return self.cache[key]
        return None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            if key in self.cache:
                self.cache.move_to_end(key)
            self.cache[key] = value

            # Evict oldest item if cache is full
            if len(self.cache) > self.max_size:
                self.cache.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self.cache)


class AvatarService:
    """Generates stable placeholder avatar URLs."""

    def __init__(self, settings: Optional[AvatarSettings] = None):
        self._settings = settings or get_settings().avatar
        self._cache = LRUCache(max_size=self._settings.cache_size)

    @staticmethod
    def cache_key(name: str, category: str) -> str:
        return f"{(name or '').lower().strip()}|{category}"

    def avatar_url(self, name: str, category: str) -> str:
        """
        Placeholder avatar URL for an expense.

        Same (name, category) always yields the same URL; name
        comparison is case- and surrounding-whitespace-insensitive.
        """
        key = self.cache_key(name, category)
        cached = self._cache.get(key)
        if cached:
            return cached

        url = (
            f"{self._settings.base_url}"
            f"?seed={quote(key, safe='')}"
            f"&size={self._settings.size}"
            f"&backgroundColor={self._settings.background_color}"
            f"&backgroundType={self._settings.background_type}"
        )
        self._cache.set(key, url)
        return url

    @property
    def cache_size(self) -> int:
        return len(self._cache)
