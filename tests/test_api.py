"""
API Tests

Exercise the FastAPI app end to end over copies of data/posts.json and data/users.json.

Test Scenarios:
---------------
1. Root and health
2. Recommendations: personalized (spam never returned), unknown user 404, mutes respected
3. Cold start and similar posts
4. Moderation (single and batch), rules per entity kind, access control
5. Feed, trending, search, analytics, strategy
6. Like/mute toggles, store failure rollback (502), logout

Run:
----
    pytest tests/test_api.py -v
"""

from server.state import get_state

SPAM_ITEM = {"id": "spam_1", "title": "FREE MONEY NOW"}


def recommended_ids(client, user_id="user_ava"):
    response = client.post("/api/recommendations", json={"user_id": user_id})
    assert response.status_code == 200
    return [card["id"] for card in response.json()["items"]]


class TestRoot:
    def test_root(self, client):
        body = client.get("/").json()
        assert body["name"] == "GreatTalk Recommendation API"
        assert body["data_source"] == "json"
        assert "/api/analytics/{user_id}" in body["endpoints"]["discovery"]

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "healthy"
        assert body["content_provider"] == "JsonContentProvider"
        assert body["cache"]["enabled"] is True


class TestRecommendations:
    def test_personalized(self, client):
        response = client.post("/api/recommendations", json={"user_id": "user_ava"})
        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == "user_ava"
        assert body["insights"]["algorithms_used"] == 5
        ids = [card["id"] for card in body["items"]]
        assert ids
        assert "post_spam" not in ids

    def test_unknown_user(self, client):
        response = client.post("/api/recommendations", json={"user_id": "nobody"})
        assert response.status_code == 404

    def test_muted_author_excluded(self, client):
        assert client.post("/api/actions/user_ava/mute/user_mika").json()["value"] is True
        ids = recommended_ids(client)
        assert "post_chef" not in ids
        assert "post_travel" not in ids

    def test_cold_start(self, client):
        body = client.post("/api/recommendations/cold-start", json={}).json()
        assert [card["id"] for card in body["items"]] == ["post_python_tutor"]
        assert body["total"] == 1

    def test_similar(self, client):
        body = client.get("/api/recommendations/similar/post_chef").json()
        ids = [card["id"] for card in body["items"]]
        assert "post_chef" not in ids
        assert body["total"] == len(ids) == 3

    def test_similar_missing(self, client):
        assert client.get("/api/recommendations/similar/missing").status_code == 404


class TestModerationAndRules:
    def test_moderate(self, client):
        body = client.post("/api/moderation", json=SPAM_ITEM).json()
        assert body["is_approved"] is False
        assert body["flags"] == ["spam"]

    def test_batch(self, client):
        body = client.post("/api/moderation/batch", json={"items": [SPAM_ITEM, {"id": "ok", "title": "Python"}]}).json()
        assert body["total"] == 2
        assert body["approved"] == 1
        assert body["common_flags"] == {"spam": 1}

    def test_content_rules(self, client):
        entity = {"id": "p", "engagement": {"engagement_rate": 60, "interactions": 150}}
        response = client.post("/api/rules/content", json=entity)
        assert response.status_code == 200
        [result] = response.json()
        assert result["rule_id"] == "trending_detection"
        assert result["result"]["metadata"]["is_trending"] is True

    def test_unknown_kind(self, client):
        assert client.post("/api/rules/post", json={"id": "p"}).status_code == 400

    def test_invalid_entity(self, client):
        assert client.post("/api/rules/content", json={"title": "no id"}).status_code == 422

    def test_access(self, client):
        response = client.post("/api/rules/access", json={"user_id": "user_spam", "action": "read"})
        assert response.status_code == 200
        assert response.json()["allowed"] is False
        allowed = client.post("/api/rules/access", json={"user_id": "user_ava", "action": "read"})
        assert allowed.json()["allowed"] is True

    def test_access_unknown_user(self, client):
        assert client.post("/api/rules/access", json={"user_id": "nobody", "action": "read"}).status_code == 404


class TestDiscovery:
    def test_feed(self, client):
        response = client.get("/api/feed/user_ava")
        assert response.status_code == 200
        ids = [entry["item"]["id"] for entry in response.json()]
        assert "post_spam" not in ids
        assert "post_python_tutor" in ids

    def test_trending_bad_timeframe(self, client):
        assert client.get("/api/trending", params={"timeframe": "decade"}).status_code == 400
        assert client.get("/api/trending", params={"timeframe": "year"}).status_code == 200

    def test_search(self, client):
        body = client.get("/api/search", params={"q": "python"}).json()
        assert "post_python_tutor" in [hit["item"]["id"] for hit in body["posts"]]
        assert "user_ava" in [hit["user"]["id"] for hit in body["users"]]

    def test_analytics(self, client):
        body = client.get("/api/analytics/user_mika").json()
        assert body["total_posts"] == 2

    def test_strategy(self, client):
        body = client.get("/api/strategy/user_ava").json()
        assert body["strategy"] == "standard"
        assert body["options"]["max_items"] == 20


class TestActions:
    def test_like_toggles(self, client):
        first = client.post("/api/actions/user_ava/like/post_chef").json()
        assert first["value"] is False
        assert first["state"] == "committed"
        assert client.post("/api/actions/user_ava/like/post_chef").json()["value"] is True

    def test_cannot_mute_self(self, client):
        assert client.post("/api/actions/user_ava/mute/user_ava").status_code == 400

    def test_store_failure_rolls_back(self, client, monkeypatch):
        def broken(*args):
            raise OSError("disk full")

        monkeypatch.setattr(get_state().user_store, "set_liked", broken)
        response = client.post("/api/actions/user_ava/like/post_travel")
        assert response.status_code == 502
        detail = response.json()["detail"]
        assert detail["value"] is False
        assert detail["state"] == "rolled_back"

    def test_logout(self, client):
        client.post("/api/actions/user_ava/like/post_chef")
        assert client.post("/api/actions/user_ava/logout").json()["ended"] is True
        assert client.post("/api/actions/user_ava/logout").json()["ended"] is False
