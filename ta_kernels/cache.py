"""
Calculation cache.

Keeps recently computed indicator results in memory so that repeated
requests for the same indicator over the same series are not recomputed.
Entries expire after a short time-to-live; when the cache is full the
least recently used entry makes room. Stored and returned results are
copies, so callers may modify what they get back.
"""

import copy
import hashlib
import logging
import time
from typing import Any, Callable, Optional

import numpy as np
from cachetools import TTLCache

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5.0
DEFAULT_MAX_ENTRIES = 100


def _copy_result(value: Any) -> Any:
    """Copy an array, a NamedTuple of arrays, or anything else."""
    if isinstance(value, np.ndarray):
        return value.copy()
    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return type(value)(*(_copy_result(item) for item in value))
    return copy.deepcopy(value)


class CalculationCache:
    """
    In-memory cache of indicator results.

    Not thread-safe; use one instance per thread.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize calculation cache.

        Args:
            ttl_seconds: Seconds an entry stays valid.
            max_entries: Number of entries kept before eviction.
            clock: Time source, injectable for tests.
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")

        self._entries = TTLCache(maxsize=max_entries, ttl=ttl_seconds, timer=clock)

    def __len__(self) -> int:
        self._entries.expire()
        return len(self._entries)

    @staticmethod
    def make_key(indicator: str, *series: Any, **params: Any) -> str:
        """
        Build a cache key from the indicator name, its inputs and parameters.

        Series are identified by a digest of their contents, not by
        identity, so equal data built separately shares an entry.
        """
        digest = hashlib.sha1()
        for values in series:
            data = np.ascontiguousarray(values, dtype=np.float64)
            digest.update(str(data.shape).encode())
            digest.update(data.tobytes())

        param_str = ",".join(f"{name}={params[name]!r}" for name in sorted(params))
        return f"{indicator}:{param_str}:{digest.hexdigest()}"

    def get(self, key: str) -> Optional[Any]:
        """
        Get a cached result if it is still valid.

        Args:
            key: Key from make_key.

        Returns:
            Copy of the cached result, or None if missing or expired.
        """
        value = self._entries.get(key)
        if value is None:
            return None
        return _copy_result(value)

    def set(self, key: str, value: Any) -> None:
        """Store a copy of a result, restarting its time-to-live."""
        self._entries[key] = _copy_result(value)

    def get_or_compute(self, key: str, compute: Callable[[], Any]) -> Any:
        """
        Return the cached result for key, computing and storing it on a miss.

        Exceptions raised by compute propagate and nothing is stored.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        logger.debug(f"Cache miss: {key}")
        value = compute()
        self.set(key, value)
        return value

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()
