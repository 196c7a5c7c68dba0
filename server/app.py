"""
GreatTalk Recommendation API: FastAPI app factory.

Use: uvicorn server.app:app
Or:  from server import app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recommender.models.entity import ENTITY_MODELS

from .config import get_config
from .routes import register_routes
from .state import get_state


def create_app() -> FastAPI:
    """Build FastAPI app with CORS, routes, and startup."""
    config = get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(
        title="GreatTalk Recommendation API",
        description="Content recommendations, moderation and business rules for GreatTalk posts",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_routes(app)

    @app.on_event("startup")
    def _startup():
        config = get_config()
        ok, errors = config.validate()
        for error in errors:
            print(f"[startup] WARNING: {error}", flush=True)
        state = get_state()
        print("GreatTalk Recommendation API starting...", flush=True)
        print(f"[startup] Data source: {config.data_source} (config valid={ok})", flush=True)
        print(f"[startup] Cache strategy: {config.cache_strategy}", flush=True)
        rule_count = sum(len(state.rules_engine.rules_for(kind)) for kind in ENTITY_MODELS)
        print(f"[startup] Business rules loaded: {rule_count}", flush=True)

    return app


app = create_app()
