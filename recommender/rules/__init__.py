"""
Business rules: generic engine, typed field paths, operators, default rules, fixed policies.
"""

from .defaults import DEFAULT_RULES
from .engine import BusinessRulesEngine
from .field_path import MISSING, FieldPath, lookup
from .operators import OPERATORS, evaluate
from .policies import access_control, recommendation_filter

__all__ = [
    "DEFAULT_RULES",
    "BusinessRulesEngine",
    "MISSING",
    "FieldPath",
    "lookup",
    "OPERATORS",
    "evaluate",
    "access_control",
    "recommendation_filter",
]
