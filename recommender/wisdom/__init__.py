"""Advisory and strategic layers over the recommendation pipeline."""

from .advisor import AdvisoryRequest, AdvisoryResponse, AIAdvisor
from .strategy import (
    StrategicDecision,
    StrategicOrchestrator,
    SystemInsights,
    SystemState,
    UserExperience,
)

__all__ = [
    "AdvisoryRequest",
    "AdvisoryResponse",
    "AIAdvisor",
    "StrategicDecision",
    "StrategicOrchestrator",
    "SystemInsights",
    "SystemState",
    "UserExperience",
]
