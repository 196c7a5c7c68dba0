"""
Memoization for expensive operations and per-session entity lookups.
"""

import hashlib
import json
import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ENTRIES = 100


def cache_key(operation: str, params: Dict[str, Any]) -> str:
    """Stable key for (operation, params); params are serialized with sorted keys."""
    return f"{operation}_{json.dumps(params, sort_keys=True, default=str)}"


def fingerprint(value: Any) -> str:
    """Digest of a JSON-serializable value; equal content gives an equal digest."""
    payload = json.dumps(value, sort_keys=True, default=str)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


class OperationCache:
    """
    Insertion-ordered result cache keyed by operation name and parameters.

    Once more than max_entries results are held the oldest insertion is evicted.
    A disabled cache computes on every call and stores nothing.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES, enabled: bool = True):
        self.max_entries = max_entries
        self.enabled = enabled
        self._entries: "OrderedDict[str, Any]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get_or_compute(self, operation: str, params: Dict[str, Any], fn: Callable[[], T]) -> T:
        if not self.enabled:
            return fn()
        key = cache_key(operation, params)
        if key in self._entries:
            self.hits += 1
            return self._entries[key]
        self.misses += 1
        value = fn()
        self._entries[key] = value
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("evicted %s", evicted)
        return value

    def clear(self) -> None:
        self._entries.clear()


class SessionMemo:
    """Per-session entity memo keyed by entity id; the owner clears it on logout."""

    def __init__(self):
        self._values: Dict[Hashable, Any] = {}

    def __len__(self) -> int:
        return len(self._values)

    def get(self, entity_id: Hashable) -> Optional[Any]:
        return self._values.get(entity_id)

    def put(self, entity_id: Hashable, value: Any) -> None:
        self._values[entity_id] = value

    def get_or_load(self, entity_id: Hashable, loader: Callable[[Hashable], T]) -> T:
        if entity_id not in self._values:
            self._values[entity_id] = loader(entity_id)
        return self._values[entity_id]

    def invalidate(self, entity_id: Hashable) -> None:
        self._values.pop(entity_id, None)

    def clear(self) -> None:
        self._values.clear()
