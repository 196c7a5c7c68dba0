"""
Content item model: one user post with its AI system prompt.

Used by every pipeline stage instead of raw dicts.
Built from provider/API dicts via ContentItem.model_validate(d) or ensure_items().
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .base import EntityBase


class Tag(BaseModel):
    name: str
    category: str = ""


class AuthorSummary(BaseModel):
    """Denormalized author fields carried on each post."""

    model_config = ConfigDict(extra="allow")

    username: str = ""
    is_official: bool = False
    # Influence tier of the author at the time the post was loaded.
    influence_level: str = "regular"


class ContentQuality(BaseModel):
    content_score: float = 0.5
    moderation_flags: List[str] = Field(default_factory=list)
    safety_score: float = 1.0
    report_count: int = 0


class ContentEngagement(BaseModel):
    interactions: int = 0
    engagement_rate: float = 0.0
    trending_score: float = 0.0
    likes: int = 0
    comments: int = 0
    shares: int = 0


class AIStats(BaseModel):
    """Aggregate stats for conversations held with the post's AI persona."""

    response_count: int = 0
    average_response_time_ms: float = 0.0


class ContentMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    published_at: Optional[datetime] = None
    is_public: bool = True
    is_trending: bool = False
    categories: List[str] = Field(default_factory=list)
    tags: List[Tag] = Field(default_factory=list)


class ContentItem(EntityBase):
    """
    Post payload used across the pipeline stages.

    Only id is required; nested sections fall back to neutral defaults so that
    partial documents from providers still validate.
    """

    kind: Literal["content"] = "content"

    id: str
    author_id: str = ""
    author: AuthorSummary = Field(default_factory=AuthorSummary)
    title: str = ""
    description: str = ""
    system_prompt: str = ""
    quality: ContentQuality = Field(default_factory=ContentQuality)
    engagement: ContentEngagement = Field(default_factory=ContentEngagement)
    ai: AIStats = Field(default_factory=AIStats)
    metadata: ContentMetadata = Field(default_factory=ContentMetadata)

    @property
    def content_score(self) -> float:
        return self.quality.content_score

    @property
    def engagement_rate(self) -> float:
        return self.engagement.engagement_rate

    @property
    def tag_names(self) -> List[str]:
        return [t.name for t in self.metadata.tags]

    @property
    def is_flagged(self) -> bool:
        return bool(self.quality.moderation_flags)

    def get_primary_category(self) -> Optional[str]:
        """Primary (first) category for this post."""
        categories = self.metadata.categories
        return categories[0] if categories else None

    def full_text(self) -> str:
        """Title, description and prompt joined for bag-of-words matching."""
        return f"{self.title} {self.description} {self.system_prompt}"


def ensure_items(items: List[Union[Dict[str, Any], "ContentItem"]]) -> List["ContentItem"]:
    """Convert list of dicts or ContentItems to list of ContentItem models for the pipeline."""
    return [
        ContentItem.model_validate(i) if isinstance(i, dict) else i
        for i in items
    ]
