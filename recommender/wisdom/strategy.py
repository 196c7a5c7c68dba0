"""
Strategic orchestrator: per-user experience strategy and system-level decisions.

determine_user_strategy picks a strategy name for a user; the strategy tunes the
recommendation options and the UI/AI/content presentation hints. make_strategic_decisions
turns system insights into a ranked list of decisions from a fixed decision table.
"""

import logging
from collections import defaultdict, deque
from datetime import datetime
from typing import Any, Callable, Deque, Dict, Iterable, List, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, Field

from ..models.config import RecommendationConfig
from ..models.content import ContentItem, ensure_items
from ..models.interaction import InteractionRecord, ensure_interactions
from ..models.request import (
    RecommendationContext,
    RecommendationOptions,
    RecommendationRequest,
    RecommendationResult,
)
from ..models.user import InfluenceLevel, UserProfile
from ..stages.orchestrator import generate_recommendations
from ..utils.stats import mean

logger = logging.getLogger(__name__)

DecisionType = Literal["content_strategy", "user_experience", "performance", "business", "ai_enhancement"]
DecisionPriority = Literal["low", "medium", "high", "critical"]

POWER_USER_INTERACTIONS = 50
ENGAGED_SESSION_SECONDS = 1800
MAX_DECISIONS = 10
DECISION_HISTORY_LIMIT = 100

PRIORITY_POINTS = {"critical": 100, "high": 75, "medium": 50, "low": 25}
TYPE_POINTS = {"business": 30, "performance": 25, "user_experience": 20}
ERROR_RATE_ALERT = 0.05
ERROR_RATE_BONUS = 50

STRATEGY_OPTIONS: Dict[str, Dict[str, Any]] = {
    "onboarding": {"diversity_weight": 0.8, "novelty_weight": 0.1},
    "premium": {"personal_weight": 0.9, "max_items": 30},
    "power_user": {"novelty_weight": 0.6, "diversity_weight": 0.7},
}


# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------


class PerformanceState(BaseModel):
    response_time: float = 0.0
    error_rate: float = 0.0
    user_satisfaction: float = 0.0
    engagement_rate: float = 0.0


class UserBaseState(BaseModel):
    active_users: int = 0
    retention_rate: float = 0.0
    growth_rate: float = 0.0


class SystemState(BaseModel):
    performance: PerformanceState = Field(default_factory=PerformanceState)
    users: UserBaseState = Field(default_factory=UserBaseState)


class SystemInsights(BaseModel):
    """Aggregates over the current corpus; None where there was nothing to measure."""

    content_quality: Optional[float] = None
    diversity_index: Optional[float] = None
    trending_ratio: Optional[float] = None
    personalization: Optional[float] = None
    ai_quality: Optional[float] = None
    average_engagement: Optional[float] = None


class StrategicAction(BaseModel):
    type: Literal["modify_recommendation", "adjust_weights", "trigger_optimization", "update_rules", "enhance_ai"]
    target: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    expected_impact: str = ""


class StrategicDecision(BaseModel):
    id: str
    type: DecisionType
    priority: DecisionPriority
    description: str
    actions: List[StrategicAction] = Field(default_factory=list)
    expected_outcome: str = ""
    metrics: List[str] = Field(default_factory=list)
    confidence: float
    priority_score: float = 0.0


class ContentTrendPrediction(BaseModel):
    topic: str
    prediction: str
    confidence: float
    timeline: str
    preparations: List[str] = Field(default_factory=list)


class UserExperience(BaseModel):
    strategy: str
    recommendations: RecommendationResult
    user_interface: Dict[str, str]
    ai_strategy: Dict[str, str]
    content_strategy: Dict[str, str]


class _DecisionTemplate(NamedTuple):
    decision: StrategicDecision
    applies: Callable[[SystemInsights, SystemState], bool]


def _below(value: Optional[float], threshold: float) -> bool:
    return value is not None and value < threshold


DECISION_TABLE: List[_DecisionTemplate] = [
    _DecisionTemplate(
        applies=lambda insights, state: _below(insights.content_quality, 0.7),
        decision=StrategicDecision(
            id="content_quality",
            type="content_strategy",
            priority="high",
            description="Improve content quality standards",
            actions=[
                StrategicAction(
                    type="update_rules",
                    target="content_moderation",
                    parameters={"minimum_quality_score": 0.6},
                    expected_impact="Increase average content quality by 15%",
                )
            ],
            expected_outcome="Higher user satisfaction and engagement",
            metrics=["content_quality_score", "user_engagement_rate"],
            confidence=0.85,
        ),
    ),
    _DecisionTemplate(
        applies=lambda insights, state: _below(insights.diversity_index, 0.6),
        decision=StrategicDecision(
            id="content_diversity",
            type="content_strategy",
            priority="medium",
            description="Increase content diversity",
            actions=[
                StrategicAction(
                    type="adjust_weights",
                    target="recommendation_algorithm",
                    parameters={"diversity_weight": 0.7},
                    expected_impact="Increase content diversity by 25%",
                )
            ],
            expected_outcome="Better content discovery and user retention",
            metrics=["content_diversity_index", "discovery_rate"],
            confidence=0.75,
        ),
    ),
    _DecisionTemplate(
        applies=lambda insights, state: _below(insights.personalization, 0.7),
        decision=StrategicDecision(
            id="personalization",
            type="user_experience",
            priority="high",
            description="Enhance personalization algorithms",
            actions=[
                StrategicAction(
                    type="enhance_ai",
                    target="recommendation_engine",
                    parameters={"personal_weight": 0.8, "context_awareness": True},
                    expected_impact="Increase click-through rate by 30%",
                )
            ],
            expected_outcome="More relevant user experience",
            metrics=["click_through_rate", "session_duration", "return_rate"],
            confidence=0.9,
        ),
    ),
    _DecisionTemplate(
        applies=lambda insights, state: state.performance.response_time > 2000,
        decision=StrategicDecision(
            id="performance_optimization",
            type="performance",
            priority="critical",
            description="Optimize system response time",
            actions=[
                StrategicAction(
                    type="trigger_optimization",
                    target="caching_layer",
                    parameters={"cache_hit_ratio": 0.9, "preload_strategy": "predictive"},
                    expected_impact="Reduce response time by 40%",
                )
            ],
            expected_outcome="Improved user experience and retention",
            metrics=["response_time", "cache_hit_ratio", "user_satisfaction"],
            confidence=0.95,
        ),
    ),
    _DecisionTemplate(
        applies=lambda insights, state: _below(insights.ai_quality, 0.8),
        decision=StrategicDecision(
            id="ai_quality",
            type="ai_enhancement",
            priority="high",
            description="Improve AI response quality",
            actions=[
                StrategicAction(
                    type="enhance_ai",
                    target="ai_models",
                    parameters={"context_window": "extended", "quality_threshold": 0.85},
                    expected_impact="Increase AI response quality by 20%",
                )
            ],
            expected_outcome="Higher user satisfaction with AI interactions",
            metrics=["ai_quality_score", "ai_user_satisfaction", "ai_usage_rate"],
            confidence=0.88,
        ),
    ),
    _DecisionTemplate(
        applies=lambda insights, state: state.users.growth_rate < 0.05,
        decision=StrategicDecision(
            id="growth_strategy",
            type="business",
            priority="high",
            description="Accelerate user growth",
            actions=[
                StrategicAction(
                    type="modify_recommendation",
                    target="viral_features",
                    parameters={"shareability_boost": 1.5, "invite_incentives": True},
                    expected_impact="Increase growth rate by 100%",
                )
            ],
            expected_outcome="Accelerated user acquisition and engagement",
            metrics=["user_growth_rate", "viral_coefficient", "retention_rate"],
            confidence=0.7,
        ),
    ),
]


# -----------------------------------------------------------------------------
# Orchestrator
# -----------------------------------------------------------------------------


class StrategicOrchestrator:
    def __init__(
        self,
        config: Optional[RecommendationConfig] = None,
        max_decisions: int = MAX_DECISIONS,
        history_limit: int = DECISION_HISTORY_LIMIT,
    ):
        self.config = config
        self.max_decisions = max_decisions
        # Most recent decisions only; older entries fall off the left.
        self.decision_history: Deque[StrategicDecision] = deque(maxlen=history_limit)

    def determine_user_strategy(
        self,
        user: UserProfile,
        context: RecommendationContext,
        interactions: Iterable[Any] = (),
    ) -> str:
        if user.influence_level == InfluenceLevel.NEWCOMER:
            return "onboarding"
        if user.influence_level == InfluenceLevel.CELEBRITY:
            return "premium"
        if len(list(interactions)) > POWER_USER_INTERACTIONS:
            return "power_user"
        if context.session_duration > ENGAGED_SESSION_SECONDS:
            return "engaged"
        return "standard"

    def optimal_recommendation_options(self, strategy: str) -> RecommendationOptions:
        """Base options with the strategy's overrides; unknown strategies get the base."""
        return RecommendationOptions(**STRATEGY_OPTIONS.get(strategy, {}))

    def _ui_strategy(self, strategy: str, context: RecommendationContext) -> Dict[str, str]:
        return {
            "layout": "enhanced" if strategy == "premium" else "standard",
            "features": "advanced" if strategy == "power_user" else "basic",
            "accessibility": "mobile_optimized" if context.device == "mobile" else "desktop",
        }

    def _ai_strategy(self, interactions: List[InteractionRecord], strategy: str) -> Dict[str, str]:
        avg_response_time = mean([i.response_time_ms for i in interactions])
        return {
            "model": "advanced" if strategy == "premium" else "standard",
            "response_time": "fast" if avg_response_time < 2000 else "balanced",
            "personalization": "high" if strategy == "power_user" else "medium",
            "context_awareness": "enhanced" if len(interactions) > 20 else "basic",
        }

    def _content_strategy(self, user: UserProfile, strategy: str, context: RecommendationContext) -> Dict[str, str]:
        return {
            "curation": "premium" if strategy == "premium" else "standard",
            "freshness": "high" if strategy == "power_user" else "medium",
            "depth": "detailed" if user.activity_score > 70 else "summary",
            "format": "mobile_optimized" if context.device == "mobile" else "desktop",
        }

    def orchestrate_user_experience(
        self,
        user: UserProfile,
        context: RecommendationContext,
        items: List[Union[Dict, ContentItem]],
        interactions: List[Union[Dict, InteractionRecord]],
        followed_users: Iterable[Union[UserProfile, str]] = (),
        now: Optional[datetime] = None,
    ) -> UserExperience:
        """Recommendations under the user's strategy, plus presentation hints."""
        interactions = ensure_interactions(interactions)
        strategy = self.determine_user_strategy(user, context, interactions)
        request = RecommendationRequest(
            user_id=user.id,
            context=context,
            options=self.optimal_recommendation_options(strategy),
        )
        result = generate_recommendations(
            request, user, items, interactions, followed_users, config=self.config, now=now
        )
        logger.debug("user %s: strategy=%s, %d recommendations", user.id, strategy, len(result.items))
        return UserExperience(
            strategy=strategy,
            recommendations=result,
            user_interface=self._ui_strategy(strategy, context),
            ai_strategy=self._ai_strategy(interactions, strategy),
            content_strategy=self._content_strategy(user, strategy, context),
        )

    # -------------------------------------------------------------------------
    # System-level decisions
    # -------------------------------------------------------------------------

    def analyze_system_insights(
        self,
        users: List[UserProfile],
        items: List[Union[Dict, ContentItem]],
        interactions: List[Union[Dict, InteractionRecord]],
    ) -> SystemInsights:
        items = ensure_items(items)
        interactions = ensure_interactions(interactions)
        insights = SystemInsights()
        if items:
            categories = {c for i in items for c in i.metadata.categories}
            insights.content_quality = mean([i.content_score for i in items])
            insights.diversity_index = len(categories) / len(items)
            insights.trending_ratio = sum(1 for i in items if i.metadata.is_trending) / len(items)
        if interactions:
            relevance = mean([i.quality.relevance for i in interactions])
            insights.personalization = relevance
            insights.ai_quality = relevance
        if users:
            insights.average_engagement = mean([u.stats.engagement_rate for u in users])
        return insights

    def priority_score(self, decision: StrategicDecision, state: SystemState) -> float:
        score = PRIORITY_POINTS[decision.priority]
        score += decision.confidence * 50
        score += TYPE_POINTS.get(decision.type, 0)
        if decision.type == "performance" and state.performance.error_rate > ERROR_RATE_ALERT:
            score += ERROR_RATE_BONUS
        return score

    def make_strategic_decisions(self, insights: SystemInsights, state: SystemState) -> List[StrategicDecision]:
        """Decisions whose conditions hold, ranked by priority_score (top max_decisions)."""
        decisions = []
        for template in DECISION_TABLE:
            if not template.applies(insights, state):
                continue
            decision = template.decision.model_copy(deep=True)
            decision.priority_score = self.priority_score(decision, state)
            decisions.append(decision)
        decisions.sort(key=lambda d: d.priority_score, reverse=True)
        decisions = decisions[: self.max_decisions]
        self.decision_history.extend(decisions)
        logger.info("strategic decisions: %s", [d.id for d in decisions])
        return decisions

    def predict_content_trends(
        self,
        items: List[Union[Dict, ContentItem]],
        time_horizon: str = "week",
        limit: int = 3,
    ) -> List[ContentTrendPrediction]:
        """Tags carrying the most trending score are predicted to keep trending."""
        totals: Dict[str, float] = defaultdict(float)
        for item in ensure_items(items):
            for tag in item.metadata.tags:
                totals[tag.name] += item.engagement.trending_score
        ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:limit]
        return [
            ContentTrendPrediction(
                topic=topic,
                prediction=f"{topic} will continue trending",
                confidence=min(score / 1000, 0.95),
                timeline=time_horizon,
                preparations=[f"Prepare more {topic} content", f"Optimize {topic} recommendations"],
            )
            for topic, score in ranked
        ]
