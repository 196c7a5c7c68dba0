"""
AI-enhanced scoring: conversation quality of the post's AI persona and semantic overlap
between the user's past prompts and the post text.
"""

from typing import List

from ...models.config import RecommendationConfig
from ...models.content import ContentItem
from ...models.scoring import Algorithm, ScoredItem
from ...models.user import UserProfile
from ...utils.similarity import word_overlap
from .signals import ScoringSignals


def _has_good_conversations(item: ContentItem, config: RecommendationConfig) -> bool:
    return (
        item.ai.response_count > config.ai_min_response_count
        and item.ai.average_response_time_ms < config.ai_max_response_time_ms
    )


def score_ai_enhanced(
    user: UserProfile,
    candidates: List[ContentItem],
    signals: ScoringSignals,
    config: RecommendationConfig,
) -> List[ScoredItem]:
    user_text = signals.prompt_text()
    scored = []
    for item in candidates:
        score = 0.0
        reasons = []
        if _has_good_conversations(item, config):
            score += config.ai_conversation_bonus
            reasons.append("Great AI conversations")
        if (
            len(item.system_prompt) > config.ai_advanced_prompt_length
            and user.activity_score_at(signals.now) > config.ai_advanced_min_activity
        ):
            score += config.ai_advanced_bonus
            reasons.append("Advanced AI capabilities")

        semantic = word_overlap(user_text, item.full_text())
        score += semantic * config.semantic_weight
        if semantic > 0.7:
            reasons.append("AI-detected relevance")

        scored.append(
            ScoredItem(item=item, score=score, reasons=reasons, algorithm=Algorithm.AI_ENHANCED)
        )
    return scored
