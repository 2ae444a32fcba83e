"""
In-memory response cache with TTL expiry and LRU eviction.
"""

import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional

from ..config.settings import Config
from ..utils.logging import get_logger


class ResponseCache:
   """Bounded, time-expiring cache for fetched responses keyed by URL.

   Entries older than ``ttl`` seconds are treated as missing. Once
   ``max_size`` entries are held, the least recently used one is evicted.
   The clock is injectable so expiry can be tested without sleeping.
   """

   def __init__(self, max_size: int = 100, ttl: float = 600.0,
                clock: Optional[Callable[[], float]] = None):
       """Initialize cache with capacity, time-to-live in seconds and clock."""
       if max_size < 1:
           raise ValueError(f"max_size must be positive, got {max_size}")
       self.max_size = max_size
       self.ttl = ttl
       self.clock = clock or time.monotonic
       self.logger = get_logger(__name__)
       self._entries: "OrderedDict[str, tuple]" = OrderedDict()
       self.hits = 0
       self.misses = 0

   @classmethod
   def from_config(cls, config: Config, ttl: Optional[float] = None) -> "ResponseCache":
       """Create a cache sized from configuration."""
       return cls(max_size=config.cache_max_size,
                  ttl=config.cache_ttl if ttl is None else ttl)

   def _is_expired(self, stored_at: float) -> bool:
       """Check whether an entry stored at the given time has expired."""
       return self.clock() - stored_at >= self.ttl

   def get(self, key: str, default: Any = None) -> Any:
       """Get a cached value, or default when missing or expired."""
       entry = self._entries.get(key)
       if entry is None:
           self.misses += 1
           return default

       value, stored_at = entry
       if self._is_expired(stored_at):
           del self._entries[key]
           self.misses += 1
           self.logger.debug(f"Cache entry expired: {key}")
           return default

       self._entries.move_to_end(key)
       self.hits += 1
       return value

   def set(self, key: str, value: Any) -> None:
       """Store a value, evicting the least recently used entry when full."""
       if key in self._entries:
           self._entries.move_to_end(key)
       self._entries[key] = (value, self.clock())

       while len(self._entries) > self.max_size:
           evicted_key, _ = self._entries.popitem(last=False)
           self.logger.debug(f"Evicted cache entry: {evicted_key}")

   def __contains__(self, key: str) -> bool:
       entry = self._entries.get(key)
       return entry is not None and not self._is_expired(entry[1])

   def __len__(self) -> int:
       return len(self._entries)

   async def get_or_fill(self, key: str, fill: Callable) -> Any:
       """Return the cached value for key, or await fill() and cache its result.

       A fill result of None is returned but not cached.
       """
       if key in self:
           return self.get(key)

       value = fill()
       if hasattr(value, "__await__"):
           value = await value
       if value is not None:
           self.set(key, value)
       return value

   def clear(self) -> int:
       """Clear all entries and return how many were removed."""
       cleared_count = len(self._entries)
       self._entries.clear()
       self.logger.debug(f"Cleared {cleared_count} cache entries")
       return cleared_count

   def cleanup_expired(self) -> int:
       """Remove expired entries and return how many were removed."""
       expired = [key for key, (_, stored_at) in self._entries.items()
                  if self._is_expired(stored_at)]
       for key in expired:
           del self._entries[key]
       return len(expired)

   def stats(self) -> Dict[str, Any]:
       """Get cache statistics."""
       return {
           "size": len(self._entries),
           "max_size": self.max_size,
           "ttl_seconds": self.ttl,
           "hits": self.hits,
           "misses": self.misses,
       }
