"""
Rule models: declarative business rules and the records produced when they fire.

Rules are data: conditions over entity field paths, and actions that mutate,
flag or enrich a copy of the entity. The engine in recommender.rules evaluates them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .entity import Entity


class Operator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    CONTAINS = "contains"
    REGEX = "regex"
    IN = "in"
    NOT_IN = "not_in"


class ActionType(str, Enum):
    MODIFY = "modify"
    FLAG = "flag"
    ENHANCE = "enhance"
    RESTRICT = "restrict"
    NOTIFY = "notify"
    LOG = "log"


class RuleCondition(BaseModel):
    """
    One predicate over a dotted field path.

    join: how the NEXT condition combines with the running result (AND/OR).
    """

    field: str
    operator: Operator
    value: Any = None
    join: Literal["AND", "OR"] = "AND"


class RuleAction(BaseModel):
    type: ActionType
    # Field path (modify), enrichment key (enhance); ignored by flag/log/notify/restrict.
    target: str = ""
    value: Any = None


class BusinessRule(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    entity_kind: Literal["content", "user", "interaction"]
    conditions: List[RuleCondition] = Field(default_factory=list)
    actions: List[RuleAction] = Field(default_factory=list)
    # Lower values run first.
    priority: int = 100
    active: bool = True


class RuleExecutionMetadata(BaseModel):
    execution_time_ms: float = 0.0
    timestamp: datetime
    context: Dict[str, Any] = Field(default_factory=dict)


class RuleExecutionResult(BaseModel):
    rule_id: str
    executed: bool = True
    # Copy of the entity after this rule's actions.
    result: Optional[Entity] = None
    actions_applied: List[str] = Field(default_factory=list)
    metadata: RuleExecutionMetadata


class ModerationResult(BaseModel):
    is_approved: bool
    flags: List[str] = Field(default_factory=list)
    confidence: float = 1.0
    reasons: List[str] = Field(default_factory=list)


class AccessDecision(BaseModel):
    allowed: bool
    reason: str = ""
    restrictions: List[str] = Field(default_factory=list)
