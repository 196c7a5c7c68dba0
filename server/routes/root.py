"""Root and health endpoints."""

from fastapi import APIRouter

from ..state import get_state

router = APIRouter()

API_NAME = "GreatTalk Recommendation API"
API_VERSION = "1.0.0"


@router.get("/")
def root():
    state = get_state()
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "status": "ready",
        "data_source": state.config.data_source,
        "endpoints": {
            "recommendations": [
                "/api/recommendations",
                "/api/recommendations/cold-start",
                "/api/recommendations/similar/{item_id}",
            ],
            "moderation": ["/api/moderation", "/api/moderation/batch"],
            "rules": ["/api/rules/{kind}", "/api/rules/access"],
            "discovery": ["/api/feed/{user_id}", "/api/trending", "/api/search", "/api/analytics/{user_id}"],
            "strategy": ["/api/strategy/{user_id}"],
            "actions": [
                "/api/actions/{user_id}/like/{item_id}",
                "/api/actions/{user_id}/mute/{target_id}",
                "/api/actions/{user_id}/logout",
            ],
        },
    }


@router.get("/api/health")
def health():
    state = get_state()
    return {
        "status": "healthy",
        "content_provider": type(state.content_provider).__name__,
        "user_store": type(state.user_store).__name__,
        "cache": {
            "enabled": state.service.cache.enabled,
            "entries": len(state.service.cache),
        },
        "active_sessions": len(state.sessions),
    }
