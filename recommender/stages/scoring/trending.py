"""
Trending scoring: the precomputed trending score, with an evening boost for engaged posts.
"""

from typing import List

from ...models.config import RecommendationConfig
from ...models.content import ContentItem
from ...models.scoring import Algorithm, ScoredItem
from ...models.user import UserProfile
from .signals import ScoringSignals


def _is_trending(item: ContentItem, config: RecommendationConfig) -> bool:
    return item.metadata.is_trending or item.engagement.trending_score > config.trending_score_threshold


def score_trending(
    user: UserProfile,
    candidates: List[ContentItem],
    signals: ScoringSignals,
    config: RecommendationConfig,
) -> List[ScoredItem]:
    evening = signals.context.time_of_day == "evening"
    scored = []
    for item in candidates:
        if not _is_trending(item, config):
            continue
        score = item.engagement.trending_score
        reasons = ["Trending now"]
        if evening and item.engagement_rate > config.evening_engagement_threshold:
            score += config.evening_bonus
            reasons.append("Popular this evening")
        scored.append(ScoredItem(item=item, score=score, reasons=reasons, algorithm=Algorithm.TRENDING))
    return scored
