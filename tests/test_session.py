"""
Session Cache and Optimistic Toggle Tests

Test Scenarios:
---------------
1. OperationCache: hits, misses, oldest-first eviction, disabled mode, stable keys
2. SessionMemo: get_or_load calls the loader once per id; invalidate and clear
3. OptimisticToggle: IDLE -> PENDING -> COMMITTED | ROLLED_BACK, invalid transitions
4. ToggleSet: membership flips persist through the callback and restore on failure
5. SessionRegistry: seeded from the store, ended on logout

Run:
----
    pytest tests/test_session.py -v
"""

import pytest

from recommender.session import (
    InvalidTransition,
    OperationCache,
    OptimisticToggle,
    SessionMemo,
    ToggleSet,
    ToggleState,
    cache_key,
)
from server.services import SessionRegistry


class Boom(Exception):
    pass


def failing_persist(value):
    raise Boom("store unavailable")


class TestOperationCache:
    def test_hit_and_miss(self):
        cache = OperationCache()
        calls = []

        def compute():
            calls.append(1)
            return "result"

        assert cache.get_or_compute("op", {"a": 1}, compute) == "result"
        assert cache.get_or_compute("op", {"a": 1}, compute) == "result"
        assert len(calls) == 1
        assert (cache.hits, cache.misses) == (1, 1)

    def test_key_ignores_param_order(self):
        assert cache_key("op", {"a": 1, "b": 2}) == cache_key("op", {"b": 2, "a": 1})
        assert cache_key("op", {"a": 1}) != cache_key("other", {"a": 1})

    def test_evicts_oldest(self):
        cache = OperationCache(max_entries=2)
        for i in range(3):
            cache.get_or_compute("op", {"i": i}, lambda: i)
        assert len(cache) == 2
        assert cache_key("op", {"i": 0}) not in cache
        assert cache_key("op", {"i": 2}) in cache

    def test_disabled(self):
        cache = OperationCache(enabled=False)
        calls = []
        for _ in range(2):
            cache.get_or_compute("op", {}, lambda: calls.append(1))
        assert len(calls) == 2
        assert len(cache) == 0

    def test_clear(self):
        cache = OperationCache()
        cache.get_or_compute("op", {}, lambda: 1)
        cache.clear()
        assert len(cache) == 0


class TestSessionMemo:
    def test_get_or_load(self):
        memo = SessionMemo()
        loads = []

        def loader(entity_id):
            loads.append(entity_id)
            return {"id": entity_id}

        assert memo.get_or_load("u1", loader) == {"id": "u1"}
        assert memo.get_or_load("u1", loader) == {"id": "u1"}
        assert loads == ["u1"]

    def test_invalidate_and_clear(self):
        memo = SessionMemo()
        memo.put("a", 1)
        memo.put("b", 2)
        memo.invalidate("a")
        assert memo.get("a") is None
        assert memo.get("b") == 2
        memo.clear()
        assert len(memo) == 0


class TestOptimisticToggle:
    def test_commit(self):
        toggle = OptimisticToggle()
        persisted = []
        assert toggle.run(True, persisted.append) is True
        assert persisted == [True]
        assert toggle.state == ToggleState.COMMITTED

    def test_rollback_restores_prior_value(self):
        toggle = OptimisticToggle(True)
        with pytest.raises(Boom):
            toggle.run(False, failing_persist)
        assert toggle.value is True
        assert toggle.state == ToggleState.ROLLED_BACK

    def test_value_is_visible_while_pending(self):
        toggle = OptimisticToggle()
        seen = []
        toggle.run(True, lambda value: seen.append((toggle.value, toggle.state)))
        assert seen == [(True, ToggleState.PENDING)]

    def test_invalid_transitions(self):
        toggle = OptimisticToggle()
        with pytest.raises(InvalidTransition):
            toggle.commit()
        with pytest.raises(InvalidTransition):
            toggle.rollback()
        toggle.begin(True)
        with pytest.raises(InvalidTransition):
            toggle.begin(False)

    def test_settled_toggle_can_run_again(self):
        toggle = OptimisticToggle()
        with pytest.raises(Boom):
            toggle.run(True, failing_persist)
        assert toggle.run(True, lambda value: None) is True


class TestToggleSet:
    def test_flip(self):
        likes = ToggleSet(["a"])
        assert "a" in likes
        assert likes.flip("a", lambda value: None) is False
        assert likes.flip("b", lambda value: None) is True
        assert likes.members() == {"b"}

    def test_failed_flip_restores(self, caplog):
        likes = ToggleSet(["a"])
        with pytest.raises(Boom):
            likes.flip("a", failing_persist)
        assert "a" in likes
        assert likes.toggle("a").state == ToggleState.ROLLED_BACK
        assert "failed; restored" in caplog.text

    def test_pending_member_rejects_second_change(self):
        likes = ToggleSet()
        likes.toggle("a").begin(True)
        with pytest.raises(InvalidTransition):
            likes.flip("a", lambda value: None)


class TestSessionRegistry:
    def test_seeded_once(self):
        registry = SessionRegistry()
        loads = []

        def load_liked(user_id):
            loads.append(user_id)
            return ["post_1"]

        session = registry.get_or_create("u1", load_liked, lambda user_id: ["u2"])
        again = registry.get_or_create("u1", load_liked, lambda user_id: [])
        assert session is again
        assert loads == ["u1"]
        assert "post_1" in session.liked
        assert "u2" in session.muted

    def test_end(self):
        registry = SessionRegistry()
        session = registry.get_or_create("u1", lambda user_id: [], lambda user_id: [])
        session.memo.put("u1", "cached")
        assert registry.end("u1") is True
        assert len(session.memo) == 0
        assert registry.get("u1") is None
        assert registry.end("u1") is False
