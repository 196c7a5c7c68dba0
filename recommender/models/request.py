"""
Request and result models for generate_recommendations.
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from .scoring import ScoredItem

TimeOfDay = Literal["morning", "afternoon", "evening", "night"]


class RecommendationContext(BaseModel):
    """Where and when the request is made."""

    model_config = ConfigDict(extra="allow")

    time_of_day: TimeOfDay = "afternoon"
    day_of_week: str = ""
    # Seconds spent in the current session.
    session_duration: float = 0.0
    last_interactions: List[str] = Field(default_factory=list)
    device: str = "desktop"
    network_condition: str = "fast"


class RecommendationOptions(BaseModel):
    max_items: int = Field(default=20, ge=0)
    diversity_weight: float = 0.5
    novelty_weight: float = 0.3
    personal_weight: float = 0.7
    exclude_ids: List[str] = Field(default_factory=list)
    include_trending: bool = True
    include_following: bool = True


class RecommendationRequest(BaseModel):
    user_id: str
    context: RecommendationContext = Field(default_factory=RecommendationContext)
    options: RecommendationOptions = Field(default_factory=RecommendationOptions)


class RecommendationMetadata(BaseModel):
    total_candidates: int = 0
    processing_time_ms: float = 0.0
    factors_used: List[str] = Field(default_factory=list)
    algorithms: List[str] = Field(default_factory=list)
    # Items dropped by the moderation stage before truncation.
    moderated_out: int = 0


class RecommendationResult(BaseModel):
    items: List[ScoredItem] = Field(default_factory=list)
    algorithm: str = "ensemble"
    confidence: float = 0.0
    explanation: List[str] = Field(default_factory=list)
    metadata: RecommendationMetadata = Field(default_factory=RecommendationMetadata)
