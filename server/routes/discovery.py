"""Feed, trending, search and analytics endpoints."""

from typing import List

from fastapi import APIRouter, HTTPException, Query

from recommender.aggregation import (
    FeedEntry,
    SearchResults,
    TrendingContent,
    UserAnalytics,
    aggregate_search_results,
    aggregate_trending_content,
    aggregate_user_analytics,
    aggregate_user_feed,
)
from recommender.models.interaction import ensure_interactions

from ..state import get_state
from ..utils import cached_user, load_following, load_interactions, load_items, load_session, load_users

router = APIRouter()


@router.get("/feed/{user_id}", response_model=List[FeedEntry])
def feed(user_id: str, limit: int = Query(30, ge=0, le=100)):
    """Followed and public posts by relevance; posts by muted authors are hidden."""
    state = get_state()
    user = cached_user(state, user_id)
    muted = load_session(state, user.id).muted.members()
    items = [i for i in load_items(state) if i.author_id not in muted]
    return aggregate_user_feed(user, items, load_following(state, user.id), limit=limit)


@router.get("/trending", response_model=TrendingContent)
def trending(timeframe: str = Query("day")):
    state = get_state()
    try:
        return aggregate_trending_content(load_items(state), timeframe=timeframe)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/search", response_model=SearchResults)
def search(q: str = Query("")):
    state = get_state()
    return aggregate_search_results(q, load_items(state), load_users(state))


@router.get("/analytics/{user_id}", response_model=UserAnalytics)
def analytics(user_id: str):
    """Summaries over the user's own posts and AI interactions."""
    state = get_state()
    user = cached_user(state, user_id)
    interactions = ensure_interactions(load_interactions(state, user.id))
    return aggregate_user_analytics(user, load_items(state), interactions)
