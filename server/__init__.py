"""
GreatTalk Recommendation API server

Usage: uvicorn server:app --reload --port 8000
"""

from .app import app
from .config import ServerConfig, get_config, reload_config

__all__ = [
    "app",
    "ServerConfig",
    "get_config",
    "reload_config",
]
