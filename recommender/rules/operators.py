"""
Condition operators for the business rules engine.

Each operator is a total predicate (actual, expected) -> bool; type mismatches
evaluate to False instead of raising.
"""

import re
from typing import Any, Callable, Dict, Optional

from ..models.rules import Operator


def _as_number(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _greater_than(actual: Any, expected: Any) -> bool:
    a, e = _as_number(actual), _as_number(expected)
    return a is not None and e is not None and a > e


def _less_than(actual: Any, expected: Any) -> bool:
    a, e = _as_number(actual), _as_number(expected)
    return a is not None and e is not None and a < e


def _contains(actual: Any, expected: Any) -> bool:
    if actual is None or expected is None:
        return False
    return str(expected).lower() in str(actual).lower()


def _regex(actual: Any, expected: Any) -> bool:
    if actual is None or not expected:
        return False
    try:
        return re.search(str(expected), str(actual)) is not None
    except re.error:
        return False


def _in(actual: Any, expected: Any) -> bool:
    return isinstance(expected, list) and actual in expected


def _not_in(actual: Any, expected: Any) -> bool:
    return isinstance(expected, list) and actual not in expected


OPERATORS: Dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.EQUALS: lambda a, e: a == e,
    Operator.NOT_EQUALS: lambda a, e: a != e,
    Operator.GREATER_THAN: _greater_than,
    Operator.LESS_THAN: _less_than,
    Operator.CONTAINS: _contains,
    Operator.REGEX: _regex,
    Operator.IN: _in,
    Operator.NOT_IN: _not_in,
}


def evaluate(operator: Operator, actual: Any, expected: Any) -> bool:
    return OPERATORS[operator](actual, expected)
