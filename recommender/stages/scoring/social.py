"""
Social scoring: posts from followed authors only, boosted when recent or well engaged.
"""

from typing import List

from ...models.config import RecommendationConfig
from ...models.content import ContentItem
from ...models.scoring import Algorithm, ScoredItem
from ...models.user import UserProfile
from ...utils.clock import hours_since
from .signals import ScoringSignals


def score_social(
    user: UserProfile,
    candidates: List[ContentItem],
    signals: ScoringSignals,
    config: RecommendationConfig,
) -> List[ScoredItem]:
    scored = []
    for item in candidates:
        if item.author_id not in signals.followed_ids:
            continue
        score = config.social_base_score
        reasons = ["From someone you follow"]
        if hours_since(item.metadata.published_at, signals.now) < config.social_recent_hours:
            score += config.social_recent_bonus
            reasons.append("Recent post")
        if item.engagement_rate > config.social_engagement_threshold:
            score += config.social_engagement_bonus
            reasons.append("Getting good engagement")
        scored.append(ScoredItem(item=item, score=score, reasons=reasons, algorithm=Algorithm.SOCIAL))
    return scored
