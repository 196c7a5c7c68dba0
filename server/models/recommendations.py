"""Recommendation request/response models."""

from typing import List, Optional

from pydantic import BaseModel, Field

from recommender.models.request import RecommendationContext, RecommendationOptions
from recommender.service import RecommendationInsights

from .common import ItemCard


class RecommendationsRequest(BaseModel):
    user_id: str
    # Service defaults apply when omitted.
    options: Optional[RecommendationOptions] = None
    context: Optional[RecommendationContext] = None
    session_duration: float = 0.0
    device: str = "desktop"


class RecommendationsResponse(BaseModel):
    user_id: str
    items: List[ItemCard]
    algorithm: str
    confidence: float
    explanation: List[str] = []
    insights: RecommendationInsights
    processing_time_ms: float = 0.0


class ColdStartRequest(BaseModel):
    limit: int = Field(default=20, ge=0)


class ItemListResponse(BaseModel):
    items: List[ItemCard]
    total: int
