"""
Recommendation service: the facade the server (or any caller) uses.

Holds the pipeline config, an operation cache, a rules engine and an advisor, and
wraps the pipeline entry points with the service's default options and result insights.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field

from .aggregation.content_aggregator import (
    FeedEntry,
    TrendingContent,
    aggregate_trending_content,
    aggregate_user_feed,
)
from .models.config import RecommendationConfig, resolve_config
from .models.content import ContentItem, ensure_items
from .models.interaction import InteractionRecord, ensure_interactions
from .models.request import (
    RecommendationContext,
    RecommendationOptions,
    RecommendationRequest,
    RecommendationResult,
)
from .models.user import UserProfile
from .rules.engine import BusinessRulesEngine
from .session.cache import OperationCache, fingerprint
from .stages.moderation import execute_moderation_rules
from .stages.orchestrator import generate_recommendations
from .utils.clock import parse_timestamp, time_of_day, utc_now
from .utils.stats import mean
from .wisdom.advisor import AdvisoryRequest, AdvisoryResponse, AIAdvisor

logger = logging.getLogger(__name__)

CACHE_STRATEGIES = ("memory", "none")
FEED_INSIGHT_LIMIT = 10
CONTENT_CONSTRAINTS = ["moderation", "performance"]

SERVICE_OPTIONS = RecommendationOptions(
    max_items=15,
    diversity_weight=0.7,
    novelty_weight=0.5,
    personal_weight=0.9,
    include_trending=True,
    include_following=True,
)


class RecommendationInsights(BaseModel):
    total_candidates: int = 0
    moderation_filtered: int = 0
    moderation_approved: int = 0
    algorithms_used: int = 0
    user_feed: List[FeedEntry] = Field(default_factory=list)
    trending: Optional[TrendingContent] = None
    content_advice: Optional[AdvisoryResponse] = None


class ServiceRecommendations(BaseModel):
    result: RecommendationResult
    insights: RecommendationInsights


class ModerationAnalysis(BaseModel):
    total: int = 0
    approved: int = 0
    rejected: int = 0
    approval_rate: float = 0.0
    common_flags: Dict[str, int] = Field(default_factory=dict)


def build_context(
    now: Optional[datetime] = None,
    session_duration: float = 0.0,
    device: str = "desktop",
    network_condition: str = "fast",
    last_interactions: Iterable[str] = (),
) -> RecommendationContext:
    """Request context for `now`: time-of-day bucket and weekday name."""
    now = parse_timestamp(now) or utc_now()
    return RecommendationContext(
        time_of_day=time_of_day(now.hour),
        day_of_week=now.strftime("%A").lower(),
        session_duration=session_duration,
        last_interactions=list(last_interactions),
        device=device,
        network_condition=network_condition,
    )


def content_metrics(items: List[ContentItem]) -> Dict[str, float]:
    """Pool-level metrics named after the content_optimization benchmarks."""
    if not items:
        return {}
    categories = {c for item in items for c in item.metadata.categories}
    return {
        "content_quality_score": mean([item.content_score for item in items]),
        "diversity_index": min(len(categories) / len(items), 1.0),
        "trending_ratio": sum(1 for item in items if item.metadata.is_trending) / len(items),
    }


class RecommendationService:
    def __init__(
        self,
        config: Optional[RecommendationConfig] = None,
        cache_strategy: str = "memory",
        rules_engine: Optional[BusinessRulesEngine] = None,
        advisor: Optional[AIAdvisor] = None,
    ):
        if cache_strategy not in CACHE_STRATEGIES:
            raise ValueError(f"Unknown cache strategy: {cache_strategy}")
        self.config = resolve_config(config)
        self.cache = OperationCache(enabled=cache_strategy == "memory")
        self.rules = rules_engine or BusinessRulesEngine()
        self.advisor = advisor or AIAdvisor()

    def process_content_recommendations(
        self,
        user: UserProfile,
        items: List[Union[Dict, ContentItem]],
        interactions: List[Union[Dict, InteractionRecord]],
        followed: Iterable[Union[UserProfile, str]] = (),
        context: Optional[RecommendationContext] = None,
        options: Optional[RecommendationOptions] = None,
        now: Optional[datetime] = None,
    ) -> ServiceRecommendations:
        """
        Run the pipeline with the service defaults and summarize what happened.

        Results are cached on the full content of the user, posts, interactions, follows,
        context, options and reference time. Without an explicit `now` the wall clock is
        truncated to the minute.
        """
        now = parse_timestamp(now) or utc_now().replace(second=0, microsecond=0)
        context = context or build_context(now)
        options = options or SERVICE_OPTIONS
        typed_items = ensure_items(items)
        typed_interactions = ensure_interactions(interactions)
        followed_ids = sorted({u.id if isinstance(u, UserProfile) else str(u) for u in followed})
        request = RecommendationRequest(user_id=user.id, context=context, options=options)
        params = {
            "user": fingerprint(user.model_dump(mode="json")),
            "items": fingerprint([i.model_dump(mode="json") for i in typed_items]),
            "interactions": fingerprint([i.model_dump(mode="json") for i in typed_interactions]),
            "followed": followed_ids,
            "context": context.model_dump(mode="json"),
            "options": options.model_dump(mode="json"),
            "now": now.isoformat(),
        }

        def compute() -> ServiceRecommendations:
            result = generate_recommendations(
                request, user, typed_items, typed_interactions, followed_ids, config=self.config, now=now
            )
            insights = RecommendationInsights(
                total_candidates=result.metadata.total_candidates,
                moderation_filtered=result.metadata.moderated_out,
                moderation_approved=len(result.items),
                algorithms_used=len(result.metadata.algorithms),
                user_feed=aggregate_user_feed(user, typed_items, followed_ids, now=now, limit=FEED_INSIGHT_LIMIT),
                trending=aggregate_trending_content(typed_items, "day", now=now),
                content_advice=self.content_strategy_advice(typed_items),
            )
            return ServiceRecommendations(result=result, insights=insights)

        return self.cache.get_or_compute("recommendations", params, compute)

    def content_strategy_advice(self, items: List[Union[Dict, ContentItem]]) -> Optional[AdvisoryResponse]:
        """Advisor output for the content_optimization domain over a post pool; None for an empty pool."""
        typed = ensure_items(items)
        if not typed:
            return None
        return self.advisor.get_advice(
            AdvisoryRequest(
                domain="content_optimization",
                current_metrics=content_metrics(typed),
                constraints=CONTENT_CONSTRAINTS,
            )
        )

    def analyze_content_moderation(self, items: List[Union[Dict, ContentItem]]) -> ModerationAnalysis:
        """Moderate every item; counts, approval rate and how often each flag fired."""
        typed = ensure_items(items)
        flags: Counter = Counter()
        approved = 0
        for item in typed:
            outcome = execute_moderation_rules(item, self.config)
            if outcome.is_approved:
                approved += 1
            flags.update(outcome.flags)
        total = len(typed)
        return ModerationAnalysis(
            total=total,
            approved=approved,
            rejected=total - approved,
            approval_rate=approved / total if total else 0.0,
            common_flags=dict(flags.most_common()),
        )

    def clear_cache(self) -> None:
        self.cache.clear()
