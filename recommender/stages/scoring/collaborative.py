"""
Collaborative scoring: a peer-similarity heuristic without an interaction matrix.

+peer_engagement_bonus when the post out-engages the user's own rate,
+peer_tier_bonus when the author sits in the user's influence tier.
"""

from typing import List

from ...models.config import RecommendationConfig
from ...models.content import ContentItem
from ...models.scoring import Algorithm, ScoredItem
from ...models.user import UserProfile
from .signals import ScoringSignals


def score_collaborative(
    user: UserProfile,
    candidates: List[ContentItem],
    signals: ScoringSignals,
    config: RecommendationConfig,
) -> List[ScoredItem]:
    scored = []
    for item in candidates:
        score = 0.0
        reasons = []
        if item.engagement_rate > user.stats.engagement_rate:
            score += config.peer_engagement_bonus
            reasons.append("Users like you enjoyed this")
        if item.author.influence_level == user.influence_level_at(signals.now).value:
            score += config.peer_tier_bonus
            reasons.append("From similar user level")
        scored.append(
            ScoredItem(item=item, score=score, reasons=reasons, algorithm=Algorithm.COLLABORATIVE)
        )
    return scored
