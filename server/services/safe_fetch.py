"""Upstream fetches that degrade to empty results instead of failing the request."""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


def fetch_or_empty(
    fn: Callable[..., Any],
    *args: Any,
    label: str = "fetch",
    empty: Optional[Any] = None,
    **kwargs: Any,
) -> Any:
    """
    Call fn(*args, **kwargs); on any upstream error log a warning and return an empty
    list (or `empty` when given, e.g. {}). Used only at provider boundaries.
    """
    fallback = [] if empty is None else empty
    try:
        result = fn(*args, **kwargs)
    except Exception as e:
        logger.warning("%s failed: %s: %s", label, type(e).__name__, e)
        return fallback
    return fallback if result is None else result
