"""
Ensemble Combiner Tests

Test Scenarios:
---------------
1. Additivity: merged score equals the sum of per-algorithm scores; HYBRID when mixed
2. Reasons are unioned in first-seen order without duplicates
3. Diversity walk rewards first-seen categories/authors in score order
4. Novelty bonus decays linearly over the window; unknown publish time gets nothing
5. Final ranking is descending and stable for ties

Run:
----
    pytest tests/test_ensemble.py -v
"""

from datetime import timedelta

import pytest

from recommender.models.scoring import Algorithm, ScoredItem
from recommender.stages.ensemble import (
    apply_diversity_bonus,
    apply_novelty_bonus,
    combine_scored_lists,
    novelty_bonus,
    rank_final,
    run_ensemble,
)

from .factories import NOW, make_item


def scored(item, score, algorithm=Algorithm.CONTENT_BASED, reasons=()):
    return ScoredItem(item=item, score=score, reasons=list(reasons), algorithm=algorithm)


class TestCombine:
    def test_scores_are_summed_and_marked_hybrid(self):
        a, b = make_item("a"), make_item("b")
        content = [scored(a, 10, reasons=["x"]), scored(b, 5)]
        social = [scored(a, 50, Algorithm.SOCIAL, reasons=["y", "x"])]
        merged = combine_scored_lists([content, social])
        assert [s.item_id for s in merged] == ["a", "b"]
        assert merged[0].score == pytest.approx(60)
        assert merged[0].algorithm == Algorithm.HYBRID
        assert merged[0].reasons == ["x", "y"]
        assert merged[1].algorithm == Algorithm.CONTENT_BASED

    def test_inputs_are_not_mutated(self):
        a = make_item("a")
        first = scored(a, 10, reasons=["x"])
        combine_scored_lists([[first], [scored(a, 5, Algorithm.TRENDING, reasons=["z"])]])
        assert first.score == 10
        assert first.reasons == ["x"]

    def test_single_algorithm_keeps_its_tag(self):
        a = make_item("a")
        merged = combine_scored_lists([[scored(a, 1, Algorithm.TRENDING)]])
        assert merged[0].algorithm == Algorithm.TRENDING


class TestDiversity:
    def test_first_seen_category_and_author_bonus(self, config):
        first = make_item("first", author_id="a", metadata={"categories": ["x"]})
        same = make_item("same", author_id="a", metadata={"categories": ["x"]})
        other = make_item("other", author_id="b", metadata={"categories": ["y"]})
        adjusted = apply_diversity_bonus([scored(same, 8), scored(other, 5), scored(first, 10)], 1.0, config)
        assert [(s.item_id, s.score) for s in adjusted] == [("first", 25.0), ("same", 8.0), ("other", 20.0)]

    def test_weight_scales_bonus(self, config):
        item = make_item("a")
        [adjusted] = apply_diversity_bonus([scored(item, 0)], 0.5, config)
        assert adjusted.score == pytest.approx(0.5 * (10 + 5))


class TestNovelty:
    def test_linear_decay(self, config):
        fresh = novelty_bonus(NOW, 1.0, NOW, config)
        half = novelty_bonus(NOW - timedelta(hours=12), 1.0, NOW, config)
        old = novelty_bonus(NOW - timedelta(hours=30), 1.0, NOW, config)
        assert fresh == pytest.approx(10.0)
        assert half == pytest.approx(5.0)
        assert old == 0.0

    def test_unknown_publish_time(self, config):
        assert novelty_bonus(None, 1.0, NOW, config) == 0.0

    def test_order_unchanged(self, config):
        items = [scored(make_item("a"), 1), scored(make_item("b", metadata={"published_at": NOW.isoformat()}), 0)]
        adjusted = apply_novelty_bonus(items, 0.5, NOW, config)
        assert [s.item_id for s in adjusted] == ["a", "b"]
        assert adjusted[1].score == pytest.approx(5.0)


class TestRanking:
    def test_descending_and_stable(self):
        items = [scored(make_item(i), s) for i, s in [("a", 1), ("b", 3), ("c", 1), ("d", 3)]]
        assert [s.item_id for s in rank_final(items)] == ["b", "d", "a", "c"]

    def test_zero_weights_only_combine_and_rank(self, config):
        a, b = make_item("a"), make_item("b")
        ranked = run_ensemble([[scored(a, 1), scored(b, 2)], [scored(a, 5, Algorithm.SOCIAL)]], 0, 0, NOW, config)
        assert [(s.item_id, s.score) for s in ranked] == [("a", 6.0), ("b", 2.0)]
