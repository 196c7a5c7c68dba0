"""
Per-request inputs shared by every scoring algorithm.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Set

from ...models.interaction import InteractionRecord
from ...models.request import RecommendationContext
from ...utils.clock import utc_now
from ...utils.similarity import top_words


@dataclass
class ScoringSignals:
    """
    Everything an algorithm needs besides the user and the candidates.

    followed_ids: author ids the user follows (social scoring).
    now: reference time for age-based bonuses; fixed once per request.
    """

    interactions: List[InteractionRecord] = field(default_factory=list)
    followed_ids: Set[str] = field(default_factory=set)
    context: RecommendationContext = field(default_factory=RecommendationContext)
    now: datetime = field(default_factory=utc_now)

    @property
    def prompts(self) -> List[str]:
        return [i.prompt for i in self.interactions]

    def user_topics(self, limit: int = 10, min_length: int = 3) -> List[str]:
        """Most frequent long words across the user's prompts."""
        return top_words(self.prompts, limit=limit, min_length=min_length)

    def prompt_text(self) -> str:
        return " ".join(self.prompts)
