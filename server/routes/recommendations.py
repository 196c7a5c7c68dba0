"""Recommendation endpoints: personalized, cold start, and similar posts."""

from fastapi import APIRouter, Query

from recommender.stages.orchestrator import cold_start_recommendations, similar_content
from recommender.service import SERVICE_OPTIONS, build_context

from ..models import (
    ColdStartRequest,
    ItemListResponse,
    RecommendationsRequest,
    RecommendationsResponse,
    to_item_card,
)
from ..state import get_state
from ..utils import cached_user, load_following, load_interactions, load_item, load_items, load_session

router = APIRouter()


@router.post("", response_model=RecommendationsResponse)
def recommend(request: RecommendationsRequest):
    """
    Personalized recommendations for one user.

    Loads the user, posts, interactions and follows through the providers; posts by
    muted authors are excluded. Unknown users get 404.
    """
    state = get_state()
    user = cached_user(state, request.user_id)
    session = load_session(state, user.id)
    items = load_items(state)
    interactions = load_interactions(state, user.id)
    following = load_following(state, user.id)

    context = request.context or build_context(session_duration=request.session_duration, device=request.device)
    options = request.options
    muted = session.muted.members()
    if muted:
        options = options or SERVICE_OPTIONS
        excluded = [i.id for i in items if i.author_id in muted]
        options = options.model_copy(update={"exclude_ids": list(options.exclude_ids) + excluded})

    outcome = state.service.process_content_recommendations(
        user, items, interactions, following, context=context, options=options
    )
    result = outcome.result
    return RecommendationsResponse(
        user_id=user.id,
        items=[to_item_card(s) for s in result.items],
        algorithm=result.algorithm,
        confidence=result.confidence,
        explanation=result.explanation,
        insights=outcome.insights,
        processing_time_ms=result.metadata.processing_time_ms,
    )


@router.post("/cold-start", response_model=ItemListResponse)
def cold_start(request: ColdStartRequest):
    """High-quality popular posts for users without history."""
    state = get_state()
    scored = cold_start_recommendations(load_items(state), limit=request.limit)
    return ItemListResponse(items=[to_item_card(s) for s in scored], total=len(scored))


@router.get("/similar/{item_id}", response_model=ItemListResponse)
def similar(item_id: str, limit: int = Query(10, ge=0, le=50)):
    """Posts most similar to item_id; 404 when the post does not exist."""
    state = get_state()
    target = load_item(state, item_id)
    scored = similar_content(target, load_items(state), limit=limit)
    return ItemListResponse(items=[to_item_card(s) for s in scored], total=len(scored))
