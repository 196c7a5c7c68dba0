"""
Stage 1: Candidate Filter

Selects eligible posts from the full content pool.
Filters: visibility, explicit exclusions, moderation flags, minimum content score.
Input order is preserved; nothing is sorted or capped here.

The public entry point is get_candidate_pool.
"""

import logging
from typing import Iterable, List

from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..models.content import ContentItem

logger = logging.getLogger(__name__)


def _is_visible(item: ContentItem) -> bool:
    return item.metadata.is_public


def _not_excluded(item: ContentItem, excluded_ids: set) -> bool:
    return item.id not in excluded_ids


def _passes_quality_gate(item: ContentItem, config: RecommendationConfig) -> bool:
    """True if the post carries no moderation flags and clears the content score floor."""
    if item.quality.moderation_flags:
        return False
    return item.quality.content_score > config.min_content_score


def get_candidate_pool(
    items: List[ContentItem],
    exclude_ids: Iterable[str] = (),
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[ContentItem]:
    """
    Stage 1: Return public, non-excluded, unflagged posts above the content score floor.

    Never raises for well-formed input; an empty pool yields an empty list.
    """
    excluded = set(exclude_ids)
    candidates = [
        item
        for item in items
        if _is_visible(item) and _not_excluded(item, excluded) and _passes_quality_gate(item, config)
    ]
    logger.debug("candidate filter kept %d of %d items", len(candidates), len(items))
    return candidates
