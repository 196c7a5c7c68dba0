"""User action (like / mute / logout) and strategy response models."""

from typing import Literal

from pydantic import BaseModel

from recommender.models.request import RecommendationOptions


class ToggleResponse(BaseModel):
    user_id: str
    target_id: str
    action: Literal["like", "mute"]
    value: bool
    state: str


class LogoutResponse(BaseModel):
    user_id: str
    ended: bool


class StrategyResponse(BaseModel):
    user_id: str
    strategy: str
    options: RecommendationOptions
