"""
Default rule set loaded by BusinessRulesEngine(load_defaults=True).
"""

from typing import Dict, List

from ..models.rules import ActionType, BusinessRule, Operator, RuleAction, RuleCondition

USER_VERIFICATION = BusinessRule(
    id="user_verification",
    name="User Verification",
    description="Mark highly followed, highly active users as verified",
    entity_kind="user",
    conditions=[
        RuleCondition(field="stats.followers", operator=Operator.GREATER_THAN, value=10000),
        RuleCondition(field="activity_score", operator=Operator.GREATER_THAN, value=80),
    ],
    actions=[
        RuleAction(type=ActionType.MODIFY, target="status.is_verified", value=True),
        RuleAction(type=ActionType.MODIFY, target="status.verification_badge", value="✓"),
        RuleAction(type=ActionType.FLAG, value="verified_candidate"),
    ],
    priority=1,
)

TRENDING_DETECTION = BusinessRule(
    id="trending_detection",
    name="Trending Detection",
    description="Mark highly engaged posts as trending",
    entity_kind="content",
    conditions=[
        RuleCondition(field="engagement.engagement_rate", operator=Operator.GREATER_THAN, value=50),
        RuleCondition(field="engagement.interactions", operator=Operator.GREATER_THAN, value=100),
    ],
    actions=[
        RuleAction(type=ActionType.MODIFY, target="metadata.is_trending", value=True),
        RuleAction(type=ActionType.ENHANCE, target="trending_detected_at", value="$now"),
    ],
    priority=1,
)

INTERACTION_QUALITY = BusinessRule(
    id="interaction_quality",
    name="Exemplary Interaction",
    description="Flag AI turns whose relevance and helpfulness are both excellent",
    entity_kind="interaction",
    conditions=[
        RuleCondition(field="quality.relevance", operator=Operator.GREATER_THAN, value=0.9),
        RuleCondition(field="quality.helpfulness", operator=Operator.GREATER_THAN, value=0.9),
    ],
    actions=[RuleAction(type=ActionType.FLAG, value="exemplary")],
    priority=5,
)

DEFAULT_RULES: Dict[str, List[BusinessRule]] = {
    "user": [USER_VERIFICATION],
    "content": [TRENDING_DETECTION],
    "interaction": [INTERACTION_QUALITY],
}
