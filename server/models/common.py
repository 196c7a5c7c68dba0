"""Common Pydantic models shared across routes."""

from typing import List, Optional

from pydantic import BaseModel

from recommender.models.scoring import ScoredItem


class ItemCard(BaseModel):
    """Compact view of a scored post for list responses."""

    id: str
    title: str
    author_id: str
    score: float
    algorithm: str
    reasons: List[str] = []
    primary_category: Optional[str] = None


def to_item_card(scored: ScoredItem) -> ItemCard:
    item = scored.item
    return ItemCard(
        id=item.id,
        title=item.title,
        author_id=item.author_id,
        score=scored.score,
        algorithm=scored.algorithm.value,
        reasons=scored.reasons,
        primary_category=item.get_primary_category(),
    )
