"""
Business rules engine: evaluates declarative rules against typed entities.

Rules are registered per entity kind ("content", "user", "interaction"). Every active
rule is evaluated, in priority order, against the same original entity snapshot; a rule
whose conditions hold applies its actions to its own deep copy and yields one
RuleExecutionResult. Rules never see each other's mutations within one call.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..models.content import ContentItem
from ..models.entity import ENTITY_MODELS, Entity
from ..models.interaction import InteractionRecord
from ..models.rules import (
    AccessDecision,
    ActionType,
    BusinessRule,
    RuleAction,
    RuleCondition,
    RuleExecutionMetadata,
    RuleExecutionResult,
)
from ..models.user import UserProfile
from .defaults import DEFAULT_RULES
from .field_path import FieldPath, lookup
from .operators import evaluate
from .policies import access_control, recommendation_filter

logger = logging.getLogger(__name__)

# Enhance actions with this value record the execution time instead.
NOW_PLACEHOLDER = "$now"


class _CompiledRule:
    """A BusinessRule with its field paths parsed and validated."""

    def __init__(self, rule: BusinessRule):
        model_cls = ENTITY_MODELS[rule.entity_kind]
        self.rule = rule
        self.conditions: List[Tuple[FieldPath, RuleCondition]] = [
            (FieldPath(c.field), c) for c in rule.conditions
        ]
        self.actions: List[Tuple[Optional[FieldPath], RuleAction]] = []
        for action in rule.actions:
            path = None
            if action.type == ActionType.MODIFY:
                path = FieldPath(action.target)
                if not path.writable_on(model_cls):
                    raise ValueError(
                        f"Rule {rule.id}: '{action.target}' is not a writable field of {model_cls.__name__}"
                    )
            elif action.type == ActionType.ENHANCE and not action.target:
                raise ValueError(f"Rule {rule.id}: enhance action needs a target key")
            elif action.type == ActionType.FLAG and not action.value:
                raise ValueError(f"Rule {rule.id}: flag action needs a value")
            self.actions.append((path, action))
        for path, condition in self.conditions:
            if not path.exists_on(model_cls):
                logger.debug("rule %s: %s resolves from context only", rule.id, condition.field)

    def matches(self, entity: Entity, context: Dict[str, Any]) -> bool:
        """Left-to-right join; each condition's join decides how the next one combines."""
        result = True
        join = "AND"
        for path, condition in self.conditions:
            outcome = evaluate(condition.operator, lookup(path, entity, context), condition.value)
            result = (result and outcome) if join == "AND" else (result or outcome)
            join = condition.join
        return result

    def apply(self, entity: Entity, now: datetime) -> Tuple[Entity, List[str]]:
        updated = entity.model_copy(deep=True)
        applied: List[str] = []
        for path, action in self.actions:
            if action.type == ActionType.MODIFY:
                path.set(updated, action.value)
            elif action.type == ActionType.FLAG:
                updated.flags.append(action.value)
            elif action.type == ActionType.ENHANCE:
                value = now.isoformat() if action.value == NOW_PLACEHOLDER else action.value
                updated.enrichments[action.target] = value
            elif action.type == ActionType.LOG:
                logger.info("rule %s fired for %s %s", self.rule.id, entity.kind, entity.id)
            applied.append(f"{action.type.value}:{action.target}" if action.target else action.type.value)
        return updated, applied


class BusinessRulesEngine:
    """Registry and evaluator for declarative business rules."""

    def __init__(self, load_defaults: bool = True):
        self._rules: Dict[str, List[_CompiledRule]] = {kind: [] for kind in ENTITY_MODELS}
        if load_defaults:
            for kind, rules in DEFAULT_RULES.items():
                self.register_rules(kind, rules)

    def register_rules(self, kind: str, rules: Iterable[Union[BusinessRule, Dict]]) -> None:
        """
        Append rules for an entity kind.

        Raises ValueError for an unknown kind, a kind mismatch, or an action that targets a
        field the entity model cannot hold.
        """
        if kind not in self._rules:
            raise ValueError(f"Unknown entity kind: {kind}")
        compiled = []
        for rule in rules:
            if isinstance(rule, dict):
                rule = BusinessRule.model_validate({"entity_kind": kind, **rule})
            if rule.entity_kind != kind:
                raise ValueError(f"Rule {rule.id} is for {rule.entity_kind}, not {kind}")
            compiled.append(_CompiledRule(rule))
        self._rules[kind].extend(compiled)

    def rules_for(self, kind: str) -> List[BusinessRule]:
        return [c.rule for c in self._rules.get(kind, [])]

    def execute_rules(
        self,
        entity: Entity,
        context: Optional[Dict[str, Any]] = None,
    ) -> List[RuleExecutionResult]:
        """Evaluate every active rule for entity.kind; one result per rule that fired."""
        context = context or {}
        active = sorted(
            (c for c in self._rules.get(entity.kind, []) if c.rule.active),
            key=lambda c: c.rule.priority,
        )
        results = []
        for compiled in active:
            started = time.perf_counter()
            if not compiled.matches(entity, context):
                continue
            now = datetime.now(timezone.utc)
            updated, applied = compiled.apply(entity, now)
            results.append(
                RuleExecutionResult(
                    rule_id=compiled.rule.id,
                    executed=True,
                    result=updated,
                    actions_applied=applied,
                    metadata=RuleExecutionMetadata(
                        execution_time_ms=(time.perf_counter() - started) * 1000,
                        timestamp=now,
                        context=context,
                    ),
                )
            )
        return results

    def execute_user_rules(
        self, user: UserProfile, context: Optional[Dict[str, Any]] = None
    ) -> List[RuleExecutionResult]:
        return self.execute_rules(user, context)

    def execute_post_rules(
        self, item: ContentItem, context: Optional[Dict[str, Any]] = None
    ) -> List[RuleExecutionResult]:
        return self.execute_rules(item, context)

    def execute_interaction_rules(
        self, interaction: InteractionRecord, context: Optional[Dict[str, Any]] = None
    ) -> List[RuleExecutionResult]:
        return self.execute_rules(interaction, context)

    def execute_access_control(
        self,
        user: UserProfile,
        action: str,
        resource: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> AccessDecision:
        return access_control(user, action, resource or {}, context or {})

    def execute_recommendation_rules(
        self,
        user: UserProfile,
        items: List[ContentItem],
        limit: int = 10,
    ) -> List[ContentItem]:
        return recommendation_filter(user, items, limit)
