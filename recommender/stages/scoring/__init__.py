"""
Stage 2: Multi-Algorithm Scorer

Public API: select_algorithms, score_candidates, SCORERS.
- Submodules: content_based, collaborative, social, trending, ai_enhanced (one scorer each).
- Every scorer has the signature (user, candidates, signals, config) -> List[ScoredItem].
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from ...models.config import RecommendationConfig
from ...models.content import ContentItem
from ...models.request import RecommendationOptions
from ...models.scoring import Algorithm, ScoredItem
from ...models.user import InfluenceLevel, UserProfile
from .ai_enhanced import score_ai_enhanced
from .collaborative import score_collaborative
from .content_based import score_content_based
from .signals import ScoringSignals
from .social import score_social
from .trending import score_trending

logger = logging.getLogger(__name__)

Scorer = Callable[[UserProfile, List[ContentItem], ScoringSignals, RecommendationConfig], List[ScoredItem]]

# Run order also fixes the order in which items first appear in the ensemble.
SCORERS: Dict[Algorithm, Scorer] = {
    Algorithm.CONTENT_BASED: score_content_based,
    Algorithm.COLLABORATIVE: score_collaborative,
    Algorithm.SOCIAL: score_social,
    Algorithm.TRENDING: score_trending,
    Algorithm.AI_ENHANCED: score_ai_enhanced,
}


def select_algorithms(
    user: UserProfile,
    options: RecommendationOptions,
    config: RecommendationConfig,
    now: Optional[datetime] = None,
) -> List[Algorithm]:
    """
    Choose which scorers run for this user and request, with activity measured at `now`.

    content_based always; collaborative for users with some history or activity;
    social/trending when requested; ai_enhanced for everyone but newcomers.
    """
    activity = user.activity_score_at(now)
    selected = [Algorithm.CONTENT_BASED]
    if (
        user.stats.posts > config.collaborative_min_posts
        or activity > config.collaborative_min_activity
    ):
        selected.append(Algorithm.COLLABORATIVE)
    if options.include_following:
        selected.append(Algorithm.SOCIAL)
    if options.include_trending:
        selected.append(Algorithm.TRENDING)
    if user.influence_level_at(now) != InfluenceLevel.NEWCOMER:
        selected.append(Algorithm.AI_ENHANCED)
    return selected


def score_candidates(
    user: UserProfile,
    candidates: List[ContentItem],
    signals: ScoringSignals,
    algorithms: List[Algorithm],
    config: RecommendationConfig,
) -> Dict[Algorithm, List[ScoredItem]]:
    """Run each selected scorer independently over the same candidates."""
    results: Dict[Algorithm, List[ScoredItem]] = {}
    for algorithm in algorithms:
        results[algorithm] = SCORERS[algorithm](user, candidates, signals, config)
        logger.debug("%s scored %d items", algorithm.value, len(results[algorithm]))
    return results


__all__ = [
    "SCORERS",
    "ScoringSignals",
    "select_algorithms",
    "score_candidates",
    "score_content_based",
    "score_collaborative",
    "score_social",
    "score_trending",
    "score_ai_enhanced",
]
