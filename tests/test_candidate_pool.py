"""
Candidate Filter Tests

Stage 1 keeps public, non-excluded, unflagged posts whose content score is strictly
above the floor, and preserves input order.

Test Scenarios:
---------------
1. Every kept item satisfies all four predicates
2. The content score floor is exclusive (0.3 is dropped)
3. Input order is preserved; an empty pool yields an empty list

Run:
----
    pytest tests/test_candidate_pool.py -v
"""

from recommender.models.config import RecommendationConfig
from recommender.stages.candidate_pool import get_candidate_pool

from .factories import make_item


class TestCandidatePool:
    def test_drops_private_excluded_flagged_and_low_quality(self, config):
        items = [
            make_item("keep"),
            make_item("private", metadata={"is_public": False}),
            make_item("excluded"),
            make_item("flagged", quality={"moderation_flags": ["spam"]}),
            make_item("low", quality={"content_score": 0.2}),
        ]
        pool = get_candidate_pool(items, exclude_ids=["excluded"], config=config)
        assert [i.id for i in pool] == ["keep"]

    def test_every_kept_item_satisfies_the_filter(self, config):
        items = [make_item(f"p{n}", quality={"content_score": n / 10}) for n in range(11)]
        pool = get_candidate_pool(items, config=config)
        for item in pool:
            assert item.metadata.is_public
            assert not item.quality.moderation_flags
            assert item.content_score > config.min_content_score

    def test_floor_is_exclusive(self, config):
        at_floor = make_item("at", quality={"content_score": 0.3})
        above = make_item("above", quality={"content_score": 0.31})
        assert [i.id for i in get_candidate_pool([at_floor, above], config=config)] == ["above"]

    def test_preserves_input_order(self, config):
        ids = ["c", "a", "b"]
        pool = get_candidate_pool([make_item(i) for i in ids], config=config)
        assert [i.id for i in pool] == ids

    def test_empty_pool(self, config):
        assert get_candidate_pool([], config=config) == []

    def test_custom_floor(self):
        strict = RecommendationConfig(min_content_score=0.85)
        pool = get_candidate_pool([make_item("a"), make_item("b", quality={"content_score": 0.9})], config=strict)
        assert [i.id for i in pool] == ["b"]
