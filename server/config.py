"""
Server Configuration

Loads configuration from environment variables and provides defaults.
Supports loading from .env file using python-dotenv.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from recommender.models.config import RecommendationConfig

BASE_DIR = Path(__file__).resolve().parent.parent

# Single .env at the project root
_root_env = BASE_DIR / ".env"
if _root_env.exists():
    load_dotenv(_root_env)

DATA_SOURCES = ("json", "http", "firebase")
CACHE_STRATEGIES = ("memory", "none")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """Server configuration."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Data source: "json" | "http" | "firebase"
    data_source: str = "json"
    # When data_source=json: posts file and users file (users, following, interactions, likes, mutes)
    posts_json_path: Path = BASE_DIR / "data" / "posts.json"
    users_json_path: Path = BASE_DIR / "data" / "users.json"
    # When data_source=http: base URL of the content API
    content_api_url: Optional[str] = None
    # When data_source=firebase: path to service account JSON and optional project id
    firebase_credentials_path: Optional[Path] = None
    firebase_project_id: Optional[str] = None

    # Recommendation service
    cache_strategy: str = "memory"
    recommendation_config_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""

        def _path_env(key: str, default: Optional[Path] = None) -> Optional[Path]:
            v = os.getenv(key)
            if not v:
                return default
            p = Path(v)
            return p if p.is_absolute() else (BASE_DIR / p).resolve()

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
            data_source=os.getenv("DATA_SOURCE", "json").strip().lower(),
            posts_json_path=_path_env("POSTS_JSON_PATH", BASE_DIR / "data" / "posts.json"),
            users_json_path=_path_env("USERS_JSON_PATH", BASE_DIR / "data" / "users.json"),
            content_api_url=os.getenv("CONTENT_API_URL") or None,
            firebase_credentials_path=_path_env("FIREBASE_CREDENTIALS_PATH")
            or _path_env("GOOGLE_APPLICATION_CREDENTIALS"),
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
            cache_strategy=os.getenv("CACHE_STRATEGY", "memory").strip().lower(),
            recommendation_config_path=_path_env("RECOMMENDATION_CONFIG_PATH"),
        )

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate the configuration.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []
        if self.data_source not in DATA_SOURCES:
            errors.append(f"DATA_SOURCE must be one of {DATA_SOURCES}, got '{self.data_source}'")
        if self.cache_strategy not in CACHE_STRATEGIES:
            errors.append(f"CACHE_STRATEGY must be one of {CACHE_STRATEGIES}, got '{self.cache_strategy}'")
        if self.log_level not in LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {LOG_LEVELS}, got '{self.log_level}'")
        if self.data_source == "json" and not self.posts_json_path.exists():
            errors.append(f"Posts JSON not found: {self.posts_json_path}")
        if self.data_source == "http" and not self.content_api_url:
            errors.append("CONTENT_API_URL is required when DATA_SOURCE=http")
        if self.recommendation_config_path and not self.recommendation_config_path.exists():
            errors.append(f"Recommendation config not found: {self.recommendation_config_path}")
        return len(errors) == 0, errors

    def load_recommendation_config(self) -> Optional[RecommendationConfig]:
        """RecommendationConfig from RECOMMENDATION_CONFIG_PATH, or None for defaults."""
        if not self.recommendation_config_path:
            return None
        with open(self.recommendation_config_path) as f:
            return RecommendationConfig.from_dict(json.load(f))


# Global config instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def reload_config() -> ServerConfig:
    """Reload configuration from environment."""
    global _config
    _config = None
    return get_config()
