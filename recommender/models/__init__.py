"""Typed models for the recommendation pipeline."""

from .config import DEFAULT_CONFIG, RecommendationConfig, resolve_config
from .content import (
    AIStats,
    AuthorSummary,
    ContentEngagement,
    ContentItem,
    ContentMetadata,
    ContentQuality,
    Tag,
    ensure_items,
)
from .entity import ENTITY_MODELS, Entity, parse_entity
from .interaction import InteractionQuality, InteractionRecord, ensure_interactions
from .request import (
    RecommendationContext,
    RecommendationMetadata,
    RecommendationOptions,
    RecommendationRequest,
    RecommendationResult,
)
from .rules import (
    AccessDecision,
    ActionType,
    BusinessRule,
    ModerationResult,
    Operator,
    RuleAction,
    RuleCondition,
    RuleExecutionResult,
)
from .scoring import Algorithm, ScoredItem
from .user import (
    InfluenceLevel,
    UserProfile,
    UserStats,
    UserStatus,
    derive_influence_level,
    ensure_users,
    estimate_engagement_rate,
)

__all__ = [
    "DEFAULT_CONFIG",
    "RecommendationConfig",
    "resolve_config",
    "AIStats",
    "AuthorSummary",
    "ContentEngagement",
    "ContentItem",
    "ContentMetadata",
    "ContentQuality",
    "Tag",
    "ensure_items",
    "ENTITY_MODELS",
    "Entity",
    "parse_entity",
    "InteractionQuality",
    "InteractionRecord",
    "ensure_interactions",
    "RecommendationContext",
    "RecommendationMetadata",
    "RecommendationOptions",
    "RecommendationRequest",
    "RecommendationResult",
    "AccessDecision",
    "ActionType",
    "BusinessRule",
    "ModerationResult",
    "Operator",
    "RuleAction",
    "RuleCondition",
    "RuleExecutionResult",
    "Algorithm",
    "ScoredItem",
    "InfluenceLevel",
    "UserProfile",
    "UserStats",
    "UserStatus",
    "derive_influence_level",
    "ensure_users",
    "estimate_engagement_rate",
]
