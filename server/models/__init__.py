"""Pydantic request/response models for the API."""

from .actions import LogoutResponse, StrategyResponse, ToggleResponse
from .common import ItemCard, to_item_card
from .recommendations import (
    ColdStartRequest,
    ItemListResponse,
    RecommendationsRequest,
    RecommendationsResponse,
)
from .rules import AccessRequest, ModerationBatchRequest

__all__ = [
    "LogoutResponse",
    "StrategyResponse",
    "ToggleResponse",
    "ItemCard",
    "to_item_card",
    "ColdStartRequest",
    "ItemListResponse",
    "RecommendationsRequest",
    "RecommendationsResponse",
    "AccessRequest",
    "ModerationBatchRequest",
]
