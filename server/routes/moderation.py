"""Moderation endpoints: single post and batch analysis."""

from fastapi import APIRouter

from recommender.models.content import ContentItem
from recommender.models.rules import ModerationResult
from recommender.service import ModerationAnalysis
from recommender.stages.moderation import execute_moderation_rules

from ..models import ModerationBatchRequest
from ..state import get_state

router = APIRouter()


@router.post("", response_model=ModerationResult)
def moderate(item: ContentItem):
    state = get_state()
    return execute_moderation_rules(item, state.service.config)


@router.post("/batch", response_model=ModerationAnalysis)
def moderate_batch(request: ModerationBatchRequest):
    state = get_state()
    return state.service.analyze_content_moderation(request.items)
