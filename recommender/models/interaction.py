"""
Interaction model: one AI conversation turn between a user and a post's AI persona.

Used by content-based and AI-enhanced scoring to build the user's topic profile.
Built from provider dicts via InteractionRecord.model_validate(d) or ensure_interactions().
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .base import EntityBase


class InteractionQuality(BaseModel):
    """Per-turn quality sub-scores, each in [0, 1]."""

    relevance: float = 0.0
    helpfulness: float = 0.0
    accuracy: float = 0.0

    @property
    def average(self) -> float:
        return (self.relevance + self.helpfulness + self.accuracy) / 3


class InteractionRecord(EntityBase):
    kind: Literal["interaction"] = "interaction"

    id: str = ""
    user_id: str = ""
    item_id: str = ""
    prompt: str = ""
    response: str = ""
    response_time_ms: float = 0.0
    quality: InteractionQuality = Field(default_factory=InteractionQuality)
    created_at: Optional[datetime] = None


def ensure_interactions(
    items: List[Union[Dict, "InteractionRecord"]],
) -> List["InteractionRecord"]:
    """Convert list of dicts or InteractionRecords to list of InteractionRecord models for the pipeline."""
    return [
        InteractionRecord.model_validate(i) if isinstance(i, dict) else i
        for i in items
    ]
