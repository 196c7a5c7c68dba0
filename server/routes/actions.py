"""
Optimistic user actions: like a post, mute a user, log out.

Like and mute apply locally, persist through the user store, and roll back when the
store fails; the failure response (502) carries the restored state.
"""

from fastapi import APIRouter, HTTPException

from recommender.session import InvalidTransition, ToggleSet

from ..models import LogoutResponse, ToggleResponse
from ..state import get_state
from ..utils import cached_user, load_session

router = APIRouter()


def _toggle(toggles: ToggleSet, user_id: str, target_id: str, action: str, persist) -> ToggleResponse:
    toggle = toggles.toggle(target_id)
    try:
        toggles.flip(target_id, persist)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=502,
            detail={
                "message": f"Failed to persist {action}: {e}",
                "user_id": user_id,
                "target_id": target_id,
                "value": toggle.value,
                "state": toggle.state.value,
            },
        )
    return ToggleResponse(
        user_id=user_id,
        target_id=target_id,
        action=action,
        value=toggle.value,
        state=toggle.state.value,
    )


@router.post("/{user_id}/like/{item_id}", response_model=ToggleResponse)
def like(user_id: str, item_id: str):
    """Toggle a like on item_id."""
    state = get_state()
    user = cached_user(state, user_id)
    session = load_session(state, user.id)
    return _toggle(
        session.liked,
        user.id,
        item_id,
        "like",
        lambda value: state.user_store.set_liked(user.id, item_id, value),
    )


@router.post("/{user_id}/mute/{target_id}", response_model=ToggleResponse)
def mute(user_id: str, target_id: str):
    """Toggle a mute on another user."""
    state = get_state()
    user = cached_user(state, user_id)
    if target_id == user.id:
        raise HTTPException(status_code=400, detail="Users cannot mute themselves")
    session = load_session(state, user.id)
    return _toggle(
        session.muted,
        user.id,
        target_id,
        "mute",
        lambda value: state.user_store.set_muted(user.id, target_id, value),
    )


@router.post("/{user_id}/logout", response_model=LogoutResponse)
def logout(user_id: str):
    """End the user's session: drops the memo and the in-memory like/mute state."""
    state = get_state()
    return LogoutResponse(user_id=user_id, ended=state.sessions.end(user_id))
