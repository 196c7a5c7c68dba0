"""
GreatTalk Recommender: multi-algorithm content recommendation and moderation.

Single entry point for the recommender package:
- models/: entities (ContentItem, UserProfile, InteractionRecord), RecommendationConfig, requests
- stages/: candidate_pool, scoring, ensemble, moderation, orchestrator
- rules/: BusinessRulesEngine and fixed access/recommendation policies
- aggregation/: feed, trending, search, analytics
- wisdom/: AIAdvisor, StrategicOrchestrator
- session/: OperationCache, SessionMemo, optimistic toggles
"""

from .models.config import DEFAULT_CONFIG, RecommendationConfig, resolve_config
from .models.content import ContentItem, ensure_items
from .models.entity import parse_entity
from .models.interaction import InteractionRecord, ensure_interactions
from .models.request import (
    RecommendationContext,
    RecommendationOptions,
    RecommendationRequest,
    RecommendationResult,
)
from .models.scoring import Algorithm, ScoredItem
from .models.user import UserProfile, ensure_users
from .rules.engine import BusinessRulesEngine
from .service import RecommendationService, build_context
from .stages.moderation import execute_moderation_rules
from .stages.orchestrator import cold_start_recommendations, generate_recommendations, similar_content

__all__ = [
    "DEFAULT_CONFIG",
    "RecommendationConfig",
    "resolve_config",
    "ContentItem",
    "ensure_items",
    "parse_entity",
    "InteractionRecord",
    "ensure_interactions",
    "RecommendationContext",
    "RecommendationOptions",
    "RecommendationRequest",
    "RecommendationResult",
    "Algorithm",
    "ScoredItem",
    "UserProfile",
    "ensure_users",
    "BusinessRulesEngine",
    "RecommendationService",
    "build_context",
    "execute_moderation_rules",
    "cold_start_recommendations",
    "generate_recommendations",
    "similar_content",
]
