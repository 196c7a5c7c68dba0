"""
Scoring model: ScoredItem and the Algorithm tags attached to it.

ScoredItem is ephemeral: produced per recommendation call and discarded with the result.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from .content import ContentItem


class Algorithm(str, Enum):
    COLLABORATIVE = "collaborative_filtering"
    CONTENT_BASED = "content_based"
    HYBRID = "hybrid"
    TRENDING = "trending"
    SOCIAL = "social"
    AI_ENHANCED = "ai_enhanced"
    ENSEMBLE = "ensemble"


class ScoredItem(BaseModel):
    """A content item with its score, human-readable reasons and originating algorithm."""

    item: ContentItem
    score: float
    reasons: List[str] = Field(default_factory=list)
    algorithm: Algorithm

    @property
    def item_id(self) -> str:
        return self.item.id
