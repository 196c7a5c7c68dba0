"""
Stage 3: Ensemble Combiner

Merges per-algorithm score lists by item id, then applies diversity and novelty
adjustments and the final stable ordering.

Diversity is applied in a sequential walk: which item gets a first-seen bonus depends
on traversal order.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..models.scoring import Algorithm, ScoredItem
from ..utils.clock import hours_since


def _by_score_desc(items: List[ScoredItem]) -> List[ScoredItem]:
    # sorted() is stable: equal scores keep their incoming order
    return sorted(items, key=lambda s: s.score, reverse=True)


def combine_scored_lists(score_lists: Iterable[List[ScoredItem]]) -> List[ScoredItem]:
    """
    Merge score lists by item id.

    Scores are summed, reasons unioned in first-seen order without duplicates, and the
    algorithm becomes HYBRID when more than one distinct algorithm scored the item.
    Output order is the order in which items first appear across the lists.
    """
    merged: Dict[str, ScoredItem] = {}
    algorithms: Dict[str, Set[Algorithm]] = {}
    for scored_list in score_lists:
        for scored in scored_list:
            existing = merged.get(scored.item_id)
            if existing is None:
                merged[scored.item_id] = scored.model_copy(update={"reasons": list(scored.reasons)})
                algorithms[scored.item_id] = {scored.algorithm}
                continue
            existing.score += scored.score
            for reason in scored.reasons:
                if reason not in existing.reasons:
                    existing.reasons.append(reason)
            algorithms[scored.item_id].add(scored.algorithm)
            if len(algorithms[scored.item_id]) > 1:
                existing.algorithm = Algorithm.HYBRID
    return list(merged.values())


def apply_diversity_bonus(
    items: List[ScoredItem],
    weight: float,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[ScoredItem]:
    """
    Walk items in score order, rewarding the first appearance of a category or author.

    +weight * diversity_category_bonus when any of the item's categories is unseen,
    +weight * diversity_author_bonus when the author is unseen.
    Returns new ScoredItems in walk order.
    """
    seen_categories: Set[str] = set()
    seen_authors: Set[str] = set()
    adjusted: List[ScoredItem] = []
    for scored in _by_score_desc(items):
        bonus = 0.0
        categories = scored.item.metadata.categories
        if any(c not in seen_categories for c in categories):
            bonus += weight * config.diversity_category_bonus
        seen_categories.update(categories)
        author = scored.item.author_id
        if author not in seen_authors:
            bonus += weight * config.diversity_author_bonus
            seen_authors.add(author)
        adjusted.append(scored.model_copy(update={"score": scored.score + bonus}))
    return adjusted


def novelty_bonus(
    published_at: Optional[datetime],
    weight: float,
    now: Optional[datetime] = None,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    """weight * max(0, window - age_h) / window * scale; 0 for unknown publish time."""
    age_hours = hours_since(published_at, now)
    window = config.novelty_window_hours
    return weight * max(0.0, window - age_hours) / window * config.novelty_scale


def apply_novelty_bonus(
    items: List[ScoredItem],
    weight: float,
    now: Optional[datetime] = None,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[ScoredItem]:
    """Add a freshness bonus to every item; order is unchanged."""
    return [
        s.model_copy(
            update={"score": s.score + novelty_bonus(s.item.metadata.published_at, weight, now, config)}
        )
        for s in items
    ]


def rank_final(items: List[ScoredItem]) -> List[ScoredItem]:
    """Descending by score; ties keep input order."""
    return _by_score_desc(items)


def run_ensemble(
    score_lists: Iterable[List[ScoredItem]],
    diversity_weight: float,
    novelty_weight: float,
    now: Optional[datetime] = None,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[ScoredItem]:
    """Combine, then diversity (weight > 0), then novelty (weight > 0), then final order."""
    combined = combine_scored_lists(score_lists)
    if diversity_weight > 0:
        combined = apply_diversity_bonus(combined, diversity_weight, config)
    if novelty_weight > 0:
        combined = apply_novelty_bonus(combined, novelty_weight, now, config)
    return rank_final(combined)
