"""
Schema Adapter, Provider and Store Tests

Test Scenarios:
---------------
1. Post adapter: raw app posts → ContentItem dicts; ContentItem dicts pass through
2. User adapter: raw public users → UserProfile dicts (display name, bio cleanup, badge)
3. JSON / HTTP / Firestore content providers: newest first, id selection, 404 → None
4. JSON / Firestore user stores: follow graph, interactions, like/mute persistence
5. fetch_or_empty: upstream errors degrade to empty and are logged

Run:
----
    pytest tests/test_providers.py -v
"""

import json
import logging

import pytest
import requests

from recommender.models.content import ContentItem
from recommender.models.user import UserProfile
from server.schema import is_raw_post, is_raw_user, to_content_item, to_user_profile
from server.services import (
    FirestoreContentProvider,
    FirestoreUserStore,
    HttpContentProvider,
    JsonContentProvider,
    JsonUserStore,
    fetch_or_empty,
)

from .fakes import FakeFirestore, FakeResponse, FakeSession

RAW_POST = {
    "postId": "p1",
    "uid": "u1",
    "title": {"value": "Chef"},
    "description": {"value": "Dinner ideas"},
    "customCompleteText": {"systemPrompt": "You are a cook"},
    "hashTags": ["#cooking", {"name": "recipes"}],
    "genre": "food",
    "likeCount": 120,
    "msgCount": 340,
    "bookmarkCount": 40,
    "impressionCount": 2500,
    "reportCount": 2,
    "score": 0.82,
    "createdAt": {"seconds": 1760000000},
}

RAW_USER = {
    "uid": "abcdef123456",
    "userName": {"value": "mika"},
    "bio": {"value": "  hello\n\n\n\nworld  "},
    "postCount": 64,
    "followerCount": 900,
    "followingCount": 10,
    "isOfficial": True,
    "lastLoginAt": {"seconds": 1760000000},
}


class TestPostSchemaAdapter:
    def test_raw_post(self):
        assert is_raw_post(RAW_POST)
        item = ContentItem.model_validate(to_content_item(RAW_POST))
        assert item.id == "p1"
        assert item.author_id == "u1"
        assert item.title == "Chef"
        assert item.system_prompt == "You are a cook"
        assert item.tag_names == ["cooking", "recipes"]
        assert item.metadata.categories == ["food"]
        assert item.engagement.interactions == 500
        assert item.engagement.engagement_rate == pytest.approx(20.0)
        assert item.quality.content_score == pytest.approx(0.82)
        assert item.quality.report_count == 2
        assert item.metadata.published_at.year == 2025

    def test_out_of_range_score_and_no_impressions(self):
        raw = {**RAW_POST, "score": 7, "impressionCount": 0}
        d = to_content_item(raw)
        assert d["quality"]["content_score"] == 0.5
        assert d["engagement"]["engagement_rate"] == 0.0

    def test_content_item_passes_through(self):
        doc = {"id": "p2", "title": "Plain"}
        assert not is_raw_post(doc)
        assert to_content_item(doc) is doc


class TestUserSchemaAdapter:
    def test_raw_user(self):
        assert is_raw_user(RAW_USER)
        user = UserProfile.model_validate(to_user_profile(RAW_USER))
        assert user.id == "abcdef123456"
        assert user.username == "mika"
        assert user.display_name == "Mika"
        assert user.bio == "hello\n\nworld"
        assert user.stats.posts == 64
        assert user.stats.engagement_rate == pytest.approx(64 * 10 / 900 * 100)
        assert user.status.is_verified is True
        assert user.status.verification_badge == "✓"
        assert user.last_active_at is not None

    def test_missing_username(self):
        d = to_user_profile({"uid": "abcdef123456", "postCount": 0})
        assert d["display_name"] == "User123456"
        assert d["status"]["verification_badge"] == ""

    def test_bio_is_capped(self):
        d = to_user_profile({**RAW_USER, "bio": {"value": "x" * 600}})
        assert len(d["bio"]) == 500

    def test_profile_passes_through(self):
        doc = {"id": "u1", "username": "ava"}
        assert to_user_profile(doc) is doc


class TestJsonProviders:
    def test_content_provider(self, data_files):
        posts, _ = data_files
        provider = JsonContentProvider(posts)
        items = provider.get_items()
        assert {i["id"] for i in items} >= {"post_chef", "post_python_tutor", "post_travel"}
        published = [str(i["metadata"].get("published_at") or "") for i in items]
        assert published == sorted(published, reverse=True)
        assert [i["id"] for i in provider.get_items(item_ids=["post_travel"])] == ["post_travel"]
        assert len(provider.get_items(limit=2)) == 2
        assert provider.get_item("post_chef")["author_id"] == "user_mika"
        assert provider.get_item("missing") is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            JsonContentProvider(tmp_path / "nope.json")

    def test_user_store(self, data_files):
        _, users = data_files
        store = JsonUserStore(users)
        assert store.get_user("user_ava")["id"] == "user_ava"
        assert store.get_user("missing") is None
        assert store.get_following_ids("user_ava") == ["user_ren"]
        assert [i["id"] for i in store.get_interactions("user_ava")] == ["int_1", "int_2"]
        assert store.get_liked_ids("user_ava") == ["post_chef"]
        assert store.get_muted_ids("user_ava") == []

    def test_user_store_persists(self, data_files):
        _, users = data_files
        store = JsonUserStore(users)
        store.set_liked("user_ava", "post_travel", True)
        store.set_muted("user_ava", "user_mika", True)
        store.set_liked("user_ava", "post_chef", False)
        saved = json.loads(users.read_text())
        assert saved["likes"]["user_ava"] == ["post_travel"]
        assert saved["mutes"]["user_ava"] == ["user_mika"]
        reloaded = JsonUserStore(users)
        assert reloaded.get_muted_ids("user_ava") == ["user_mika"]


class TestHttpContentProvider:
    def test_get_items(self):
        payload = {"posts": [{"id": "old", "metadata": {"published_at": "2025-01-01T00:00:00Z"}}, RAW_POST]}
        session = FakeSession({"http://content/posts": FakeResponse(200, payload)})
        provider = HttpContentProvider("http://content/", session=session)
        items = provider.get_items(limit=5)
        assert [i["id"] for i in items] == ["p1", "old"]
        assert session.calls[0][1] == {"limit": 5}

    def test_get_item_404(self):
        provider = HttpContentProvider("http://content", session=FakeSession({}))
        assert provider.get_item("missing") is None

    def test_server_error_raises(self):
        session = FakeSession({"http://content/posts": FakeResponse(500)})
        with pytest.raises(requests.HTTPError):
            HttpContentProvider("http://content", session=session).get_items()


class TestFirestoreProviders:
    @pytest.fixture
    def db(self):
        db = FakeFirestore()
        db.put("public", "v1", "users", "u1", data={"uid": "u1", "userName": {"value": "mika"}, "postCount": 3})
        db.put("public", "v1", "users", "u2", data={"id": "u2", "username": "ren"})
        db.put("public", "v1", "users", "u1", "following", "u2", data={})
        db.put("public", "v1", "users", "u1", "posts", "p1", data=RAW_POST)
        db.put("interactions", "i2", data={"user_id": "u1", "item_id": "p1", "created_at": "2025-10-02"})
        db.put("interactions", "i1", data={"user_id": "u1", "item_id": "p1", "created_at": "2025-10-01"})
        db.put("interactions", "i3", data={"user_id": "u2", "item_id": "p1"})
        return db

    def test_content_provider(self, db):
        provider = FirestoreContentProvider(client=db)
        assert [i["id"] for i in provider.get_items()] == ["p1"]
        assert provider.get_item("p1")["title"] == "Chef"
        assert provider.get_item("missing") is None

    def test_users(self, db):
        store = FirestoreUserStore(client=db)
        assert store.get_user("u1")["username"] == "mika"
        assert store.get_user("u2")["username"] == "ren"
        assert store.get_user("missing") is None
        assert {u["id"] for u in store.list_users()} == {"u1", "u2"}
        assert store.get_following_ids("u1") == ["u2"]
        assert [i["id"] for i in store.get_interactions("u1")] == ["i1", "i2"]

    def test_like_and_mute_tokens(self, db):
        store = FirestoreUserStore(client=db)
        store.set_liked("u1", "p1", True)
        store.set_muted("u1", "u2", True)
        assert store.get_liked_ids("u1") == ["p1"]
        assert store.get_muted_ids("u1") == ["u2"]
        token = db.docs[("private", "v1", "privateUsers", "u1", "tokens", "like_p1")]
        assert token["tokenType"] == "postLike"
        store.set_liked("u1", "p1", False)
        assert store.get_liked_ids("u1") == []


class TestFetchOrEmpty:
    def test_passes_results_through(self):
        assert fetch_or_empty(lambda x: [x], 1) == [1]

    def test_none_becomes_empty(self):
        assert fetch_or_empty(lambda: None, empty={}) == {}

    def test_errors_degrade_and_log(self, caplog):
        def broken():
            raise requests.ConnectionError("down")

        with caplog.at_level(logging.WARNING):
            assert fetch_or_empty(broken, label="get_items") == []
        assert "get_items failed: ConnectionError" in caplog.text
