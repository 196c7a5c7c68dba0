"""Register all route modules on the FastAPI app."""

from fastapi import FastAPI

from .actions import router as actions_router
from .discovery import router as discovery_router
from .moderation import router as moderation_router
from .recommendations import router as recommendations_router
from .root import router as root_router
from .rules import router as rules_router
from .strategy import router as strategy_router


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the app."""
    app.include_router(root_router)
    app.include_router(recommendations_router, prefix="/api/recommendations", tags=["recommendations"])
    app.include_router(moderation_router, prefix="/api/moderation", tags=["moderation"])
    app.include_router(rules_router, prefix="/api/rules", tags=["rules"])
    app.include_router(discovery_router, prefix="/api", tags=["discovery"])
    app.include_router(strategy_router, prefix="/api/strategy", tags=["strategy"])
    app.include_router(actions_router, prefix="/api/actions", tags=["actions"])
