"""Moderation, rules and access-control request models."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from recommender.models.content import ContentItem


class ModerationBatchRequest(BaseModel):
    items: List[ContentItem]


class AccessRequest(BaseModel):
    user_id: str
    action: str
    resource: Dict[str, Any] = Field(default_factory=dict)
    context: Dict[str, Any] = Field(default_factory=dict)
