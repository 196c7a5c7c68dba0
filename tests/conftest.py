"""
Shared fixtures: pipeline config, temp copies of data/, and a TestClient over them.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from recommender.models.config import RecommendationConfig

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@pytest.fixture
def config():
    return RecommendationConfig()


@pytest.fixture
def data_files(tmp_path):
    """Copies of data/posts.json and data/users.json in a temp dir (the user store writes back)."""
    posts = tmp_path / "posts.json"
    users = tmp_path / "users.json"
    posts.write_text((DATA_DIR / "posts.json").read_text())
    users.write_text((DATA_DIR / "users.json").read_text())
    return posts, users


@pytest.fixture
def client(data_files, monkeypatch):
    """TestClient over a fresh app whose JSON provider and user store read the temp files."""
    from server.app import create_app
    from server.config import reload_config
    from server.state import reset_state

    posts, users = data_files
    monkeypatch.setenv("DATA_SOURCE", "json")
    monkeypatch.setenv("POSTS_JSON_PATH", str(posts))
    monkeypatch.setenv("USERS_JSON_PATH", str(users))
    monkeypatch.setenv("CACHE_STRATEGY", "memory")
    monkeypatch.delenv("RECOMMENDATION_CONFIG_PATH", raising=False)
    reload_config()
    reset_state()
    with TestClient(create_app()) as test_client:
        yield test_client
    reset_state()
