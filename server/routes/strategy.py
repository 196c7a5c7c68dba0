"""User experience strategy endpoint."""

from fastapi import APIRouter

from recommender.service import build_context

from ..models import StrategyResponse
from ..state import get_state
from ..utils import cached_user, load_interactions

router = APIRouter()


@router.get("/{user_id}", response_model=StrategyResponse)
def user_strategy(user_id: str, session_duration: float = 0.0, device: str = "desktop"):
    state = get_state()
    user = cached_user(state, user_id)
    context = build_context(session_duration=session_duration, device=device)
    strategy = state.strategist.determine_user_strategy(user, context, load_interactions(state, user.id))
    return StrategyResponse(
        user_id=user.id,
        strategy=strategy,
        options=state.strategist.optimal_recommendation_options(strategy),
    )
