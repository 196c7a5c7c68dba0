"""Session-scoped caching and optimistic user actions."""

from .cache import OperationCache, SessionMemo, cache_key, fingerprint
from .optimistic import InvalidTransition, OptimisticToggle, ToggleSet, ToggleState

__all__ = [
    "OperationCache",
    "SessionMemo",
    "cache_key",
    "fingerprint",
    "InvalidTransition",
    "OptimisticToggle",
    "ToggleSet",
    "ToggleState",
]
