"""
Content-based scoring: topic overlap with the user's prompt history, quality, engagement.

score = topic_weight * jaccard(user_topics, tag_names)
      + quality_weight * content_score
      + min(engagement_cap, engagement_cap * engagement_rate / 100)
      + long_prompt_bonus (long prompt and enough interaction history)
"""

from typing import List

from ...models.config import RecommendationConfig
from ...models.content import ContentItem
from ...models.scoring import Algorithm, ScoredItem
from ...models.user import UserProfile
from ...utils.similarity import jaccard_similarity
from .signals import ScoringSignals


def _engagement_points(item: ContentItem, config: RecommendationConfig) -> float:
    return min(item.engagement_rate / 100 * config.engagement_cap, config.engagement_cap)


def _score_item(
    item: ContentItem,
    topics: List[str],
    interaction_count: int,
    config: RecommendationConfig,
) -> ScoredItem:
    reasons: List[str] = []

    topic_score = jaccard_similarity(topics, item.tag_names)
    score = topic_score * config.topic_weight
    if topic_score > 0.5:
        reasons.append("Matches your interests")

    score += item.content_score * config.quality_weight
    if item.content_score > 0.8:
        reasons.append("High quality content")

    score += _engagement_points(item, config)
    if item.engagement_rate > 50:
        reasons.append("Popular with community")

    if (
        len(item.system_prompt) > config.long_prompt_length
        and interaction_count > config.long_prompt_min_interactions
    ):
        score += config.long_prompt_bonus
        reasons.append("Complex AI interactions available")

    return ScoredItem(item=item, score=score, reasons=reasons, algorithm=Algorithm.CONTENT_BASED)


def score_content_based(
    user: UserProfile,
    candidates: List[ContentItem],
    signals: ScoringSignals,
    config: RecommendationConfig,
) -> List[ScoredItem]:
    """Score every candidate; content-based never drops items."""
    topics = signals.user_topics(config.max_user_topics, config.min_topic_word_length)
    interaction_count = len(signals.interactions)
    return [_score_item(item, topics, interaction_count, config) for item in candidates]
