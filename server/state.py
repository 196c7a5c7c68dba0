"""Application state: providers, stores, recommendation service, and user sessions."""

from typing import Any, Optional

from recommender.rules.engine import BusinessRulesEngine
from recommender.service import RecommendationService
from recommender.wisdom.strategy import StrategicOrchestrator

from .config import ServerConfig, get_config
from .services import (
    FirestoreContentProvider,
    FirestoreUserStore,
    HttpContentProvider,
    JsonContentProvider,
    JsonUserStore,
    SessionRegistry,
)


class AppState:
    """Global application state."""

    def __init__(self, config: ServerConfig):
        self.config = config

        recommendation_config = config.load_recommendation_config()
        self.rules_engine = BusinessRulesEngine()
        self.service = RecommendationService(
            config=recommendation_config,
            cache_strategy=config.cache_strategy,
            rules_engine=self.rules_engine,
        )
        self.strategist = StrategicOrchestrator(config=self.service.config)

        self.content_provider: Any = self._create_content_provider(config)
        print(f"[startup] Content provider: {type(self.content_provider).__name__}", flush=True)
        self.user_store: Any = self._create_user_store(config)
        print(f"[startup] User store: {type(self.user_store).__name__}", flush=True)

        self.sessions = SessionRegistry()

    def _create_content_provider(self, config: ServerConfig) -> Any:
        """Create content provider from DATA_SOURCE (JSON, HTTP or Firestore)."""
        if config.data_source == "firebase":
            return FirestoreContentProvider(
                project_id=config.firebase_project_id,
                credentials_path=config.firebase_credentials_path,
            )
        if config.data_source == "http":
            if not config.content_api_url:
                raise ValueError("CONTENT_API_URL is required when DATA_SOURCE=http")
            return HttpContentProvider(config.content_api_url)
        return JsonContentProvider(config.posts_json_path)

    def _create_user_store(self, config: ServerConfig) -> Any:
        """Firestore when DATA_SOURCE=firebase, else the JSON users file."""
        if config.data_source == "firebase":
            return FirestoreUserStore(
                project_id=config.firebase_project_id,
                credentials_path=config.firebase_credentials_path,
            )
        return JsonUserStore(config.users_json_path)


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        config = get_config()
        _state = AppState(config)
    return _state


def reset_state() -> None:
    """Drop the global state so the next get_state() rebuilds it from the current config."""
    global _state
    _state = None
