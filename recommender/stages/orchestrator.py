"""
Pipeline orchestrator: runs the candidate filter, the selected scorers, the ensemble
combiner and the moderation filter to produce the final recommendation list.

The main entry point is generate_recommendations. cold_start_recommendations and
similar_content are alternate entry points for users without history and for
"more like this" panels.
"""

import logging
import time
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Union

from ..models.config import RecommendationConfig, resolve_config
from ..models.content import ContentItem, ensure_items
from ..models.interaction import InteractionRecord, ensure_interactions
from ..models.request import (
    RecommendationContext,
    RecommendationMetadata,
    RecommendationRequest,
    RecommendationResult,
)
from ..models.scoring import Algorithm, ScoredItem
from ..models.user import UserProfile
from ..utils.clock import parse_timestamp, utc_now
from ..utils.similarity import jaccard_similarity, overlap_ratio
from .candidate_pool import get_candidate_pool
from .ensemble import run_ensemble
from .moderation import filter_approved
from .scoring import ScoringSignals, score_candidates, select_algorithms

logger = logging.getLogger(__name__)

LONG_SESSION_SECONDS = 300


def _followed_ids(followed_users: Iterable[Union[UserProfile, str]]) -> Set[str]:
    """Accept followed users as profiles or bare ids."""
    return {u.id if isinstance(u, UserProfile) else str(u) for u in followed_users}


def _confidence(items: List[ScoredItem]) -> float:
    """Average score scaled to [0, 1]; 0 for an empty list."""
    if not items:
        return 0.0
    average = sum(s.score for s in items) / len(items)
    return min(average / 100, 1.0)


def _explanation(items: List[ScoredItem], algorithms: List[Algorithm]) -> List[str]:
    explanation = [f"Used {len(algorithms)} recommendation algorithms"]
    if items and items[0].reasons:
        explanation.append(f"Top recommendation because: {', '.join(items[0].reasons)}")
    names = ", ".join(a.value.replace("_", " ") for a in algorithms)
    explanation.append(f"Algorithms used: {names}")
    return explanation


def _factors_used(algorithms: List[Algorithm], context: RecommendationContext) -> List[str]:
    factors = [a.value for a in algorithms]
    factors.append(f"time_of_day:{context.time_of_day}")
    factors.append(f"device:{context.device}")
    if context.session_duration > LONG_SESSION_SECONDS:
        factors.append("long_session")
    return factors


def generate_recommendations(
    request: RecommendationRequest,
    user: UserProfile,
    all_items: List[Union[Dict, ContentItem]],
    interactions: List[Union[Dict, InteractionRecord]],
    followed_users: Iterable[Union[UserProfile, str]] = (),
    config: Optional[RecommendationConfig] = None,
    now: Optional[datetime] = None,
) -> RecommendationResult:
    """
    Produce a ranked, moderated recommendation list for one user.

    Stages: candidate filter → selected scorers → ensemble (combine, diversity, novelty,
    stable ranking) → moderation filter → truncate to options.max_items.
    Degrades to an empty result for empty pools or histories; never raises on valid models.
    """
    started = time.perf_counter()
    config = resolve_config(config)
    now = parse_timestamp(now) or utc_now()
    options = request.options

    # Normalize inputs to models (server passes dicts)
    items_typed = ensure_items(all_items)
    interactions_typed = ensure_interactions(interactions)

    # Stage 1: candidate filter
    candidates = get_candidate_pool(items_typed, options.exclude_ids, config)

    # Stage 2: independent scorers
    algorithms = select_algorithms(user, options, config, now)
    signals = ScoringSignals(
        interactions=interactions_typed,
        followed_ids=_followed_ids(followed_users),
        context=request.context,
        now=now,
    )
    scored = score_candidates(user, candidates, signals, algorithms, config)

    # Stage 3: ensemble
    ranked = run_ensemble(
        [scored[a] for a in algorithms],
        options.diversity_weight,
        options.novelty_weight,
        now=now,
        config=config,
    )

    # Stage 4: moderation
    approved, moderated_out = filter_approved(ranked, config)

    items = approved[: options.max_items]
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "recommendations for %s: %d candidates, %d returned (%s)",
        user.id,
        len(candidates),
        len(items),
        ",".join(a.value for a in algorithms),
    )
    return RecommendationResult(
        items=items,
        algorithm=Algorithm.ENSEMBLE.value,
        confidence=_confidence(approved),
        explanation=_explanation(items, algorithms),
        metadata=RecommendationMetadata(
            total_candidates=len(candidates),
            processing_time_ms=elapsed_ms,
            factors_used=_factors_used(algorithms, request.context),
            algorithms=[a.value for a in algorithms],
            moderated_out=moderated_out,
        ),
    )


def _cold_start_score(item: ContentItem) -> float:
    score = item.content_score * 30
    score += min(item.engagement_rate / 100 * 40, 40)
    if item.author.is_official:
        score += 20
    if item.metadata.is_trending:
        score += 10
    return score


def cold_start_recommendations(
    items: List[Union[Dict, ContentItem]],
    limit: int = 20,
) -> List[ScoredItem]:
    """High-quality, engaged, unflagged posts for users with no history."""
    eligible = [
        item
        for item in ensure_items(items)
        if item.content_score > 0.7 and item.engagement_rate > 20 and not item.is_flagged
    ]
    scored = []
    for item in eligible:
        reasons = ["High quality content", "Popular with community"]
        if item.author.is_official:
            reasons.append("Official content")
        if item.metadata.is_trending:
            reasons.append("Currently trending")
        scored.append(
            ScoredItem(item=item, score=_cold_start_score(item), reasons=reasons, algorithm=Algorithm.TRENDING)
        )
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:limit]


def _complexity_similarity(a: ContentItem, b: ContentItem) -> float:
    longest = max(len(a.system_prompt), len(b.system_prompt))
    if longest == 0:
        return 1.0
    return 1 - abs(len(a.system_prompt) - len(b.system_prompt)) / longest


def similar_content(
    target: ContentItem,
    items: List[Union[Dict, ContentItem]],
    limit: int = 10,
) -> List[ScoredItem]:
    """Posts most similar to target by tags, categories, prompt complexity and quality."""
    scored = []
    for item in ensure_items(items):
        if item.id == target.id:
            continue
        reasons = []
        tag_similarity = jaccard_similarity(target.tag_names, item.tag_names)
        score = tag_similarity * 40
        if tag_similarity > 0.3:
            reasons.append("Similar topics")

        category_similarity = overlap_ratio(target.metadata.categories, item.metadata.categories)
        score += category_similarity * 30
        if category_similarity > 0.5:
            reasons.append("Same category")

        complexity = _complexity_similarity(target, item)
        score += complexity * 20
        if complexity > 0.7:
            reasons.append("Similar AI complexity")

        quality = 1 - abs(target.content_score - item.content_score)
        score += quality * 10
        if quality > 0.8:
            reasons.append("Similar quality level")

        scored.append(ScoredItem(item=item, score=score, reasons=reasons, algorithm=Algorithm.CONTENT_BASED))
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:limit]
