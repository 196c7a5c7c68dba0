"""Route helpers: load typed users/posts/interactions through the providers."""

from typing import Dict, List

from fastapi import HTTPException

from recommender.models.content import ContentItem, ensure_items
from recommender.models.user import UserProfile

from .services import fetch_or_empty
from .state import AppState


def load_user(state: AppState, user_id: str) -> UserProfile:
    """UserProfile for user_id; 404 when the store has no such user (or is unreachable)."""
    raw = fetch_or_empty(state.user_store.get_user, user_id, label=f"get_user({user_id})", empty={})
    if not raw:
        raise HTTPException(status_code=404, detail=f"User not found: {user_id}")
    return UserProfile.model_validate(raw)


def load_users(state: AppState) -> List[UserProfile]:
    return [UserProfile.model_validate(u) for u in fetch_or_empty(state.user_store.list_users, label="list_users")]


def load_items(state: AppState) -> List[ContentItem]:
    return ensure_items(fetch_or_empty(state.content_provider.get_items, label="get_items"))


def load_item(state: AppState, item_id: str) -> ContentItem:
    raw = fetch_or_empty(state.content_provider.get_item, item_id, label=f"get_item({item_id})", empty={})
    if not raw:
        raise HTTPException(status_code=404, detail=f"Post not found: {item_id}")
    return ContentItem.model_validate(raw)


def load_interactions(state: AppState, user_id: str) -> List[Dict]:
    return fetch_or_empty(state.user_store.get_interactions, user_id, label=f"get_interactions({user_id})")


def load_following(state: AppState, user_id: str) -> List[str]:
    return fetch_or_empty(state.user_store.get_following_ids, user_id, label=f"get_following_ids({user_id})")


def load_session(state: AppState, user_id: str):
    """The user's session, seeded from the store's liked and muted ids on first use."""
    return state.sessions.get_or_create(
        user_id,
        lambda uid: fetch_or_empty(state.user_store.get_liked_ids, uid, label=f"get_liked_ids({uid})"),
        lambda uid: fetch_or_empty(state.user_store.get_muted_ids, uid, label=f"get_muted_ids({uid})"),
    )


def cached_user(state: AppState, user_id: str) -> UserProfile:
    """load_user, memoized in the user's session until logout."""
    session = state.sessions.get(user_id)
    if session is not None:
        cached = session.memo.get(user_id)
        if cached is not None:
            return cached
    user = load_user(state, user_id)
    load_session(state, user_id).memo.put(user_id, user)
    return user
