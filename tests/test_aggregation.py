"""
Content Aggregation Tests

Test Scenarios:
---------------
1. Feed: followed authors always included, public clean posts otherwise, ranked by relevance
2. Trending: timeframe window, trending-score order, topic counts, unknown timeframe rejected
3. Search: posts and users scored by keyword match; empty query matches nothing
4. Analytics: own posts only, top posts, topics, best posting hours, engagement trend

Run:
----
    pytest tests/test_aggregation.py -v
"""

from datetime import timedelta

import pytest

from recommender.aggregation import (
    aggregate_search_results,
    aggregate_trending_content,
    aggregate_user_analytics,
    aggregate_user_feed,
    engagement_trend,
)

from .factories import NOW, make_interaction, make_item, make_user


def recent(hours: float) -> str:
    return (NOW - timedelta(hours=hours)).isoformat()


class TestFeed:
    def test_inclusion_and_order(self):
        items = [
            make_item("public"),
            make_item("friend_private", author_id="friend", metadata={"is_public": False}),
            make_item("flagged", quality={"moderation_flags": ["spam"]}),
            make_item("private", metadata={"is_public": False}),
            make_item("unsafe", quality={"safety_score": 0.5}),
        ]
        feed = aggregate_user_feed(make_user(), items, ["friend"], now=NOW)
        assert [e.item.id for e in feed] == ["friend_private", "public"]
        assert feed[0].from_following is True
        # 10 * 30 engagement + 20 following + 0.8 * 10 quality
        assert feed[0].relevance_score == pytest.approx(328.0)

    def test_fresh_and_trending_boosts(self):
        fresh = make_item("fresh", metadata={"published_at": recent(4), "is_trending": True})
        feed = aggregate_user_feed(make_user(), [make_item("old"), fresh], [], now=NOW)
        assert feed[0].item.id == "fresh"
        assert feed[0].relevance_score == pytest.approx(300 + 40 + 8 + 15)

    def test_limit(self):
        items = [make_item(f"p{i}") for i in range(5)]
        assert len(aggregate_user_feed(make_user(), items, [], now=NOW, limit=2)) == 2


class TestTrending:
    def test_window_and_order(self):
        items = [
            make_item("slow", engagement={"trending_score": 10.0}, metadata={"published_at": recent(2)}),
            make_item("fast", engagement={"trending_score": 90.0}, metadata={"published_at": recent(3)}),
            make_item("stale", engagement={"trending_score": 99.0}),
        ]
        trending = aggregate_trending_content(items, "day", now=NOW)
        assert [i.id for i in trending.items] == ["fast", "slow"]
        assert trending.total_items == 2
        assert trending.total_engagement == 100
        assert trending.topics[0].topic == "python"
        assert trending.topics[0].mentions == 2

    def test_week_includes_older(self):
        items = [make_item("stale")]
        assert aggregate_trending_content(items, "week", now=NOW).total_items == 1

    def test_unknown_timeframe(self):
        with pytest.raises(ValueError):
            aggregate_trending_content([], "decade")


class TestSearch:
    def test_posts(self):
        items = [
            make_item("tutor"),
            make_item("cooking", title="Cooking", description="food", metadata={"tags": []}),
            make_item("hidden", metadata={"is_public": False}),
        ]
        results = aggregate_search_results("Python", items, [])
        assert [h.item.id for h in results.posts] == ["tutor"]
        # title 50 + description 30 + tag 20 + engagement 10 + quality 8
        assert results.posts[0].score == pytest.approx(118.0)

    def test_users(self):
        users = [make_user("pythonista"), make_user("python"), make_user("chef")]
        results = aggregate_search_results("python", [], users)
        assert [h.user.id for h in results.users] == ["python", "pythonista"]
        assert results.users[0].score == pytest.approx(130.0)

    def test_official_bonus(self):
        users = [make_user("python_fan"), make_user("python_org", status={"is_official": True})]
        results = aggregate_search_results("python", [], users)
        assert results.users[0].user.id == "python_org"

    def test_empty_query(self):
        results = aggregate_search_results("   ", [make_item()], [make_user()])
        assert results.posts == []
        assert results.users == []


class TestAnalytics:
    def test_engagement_trend(self):
        assert engagement_trend([1.0] * 9) == "stable"
        assert engagement_trend([1.0] * 5 + [10.0] * 5) == "up"
        assert engagement_trend([10.0] * 5 + [1.0] * 5) == "down"
        assert engagement_trend([10.0] * 5 + [12.0] * 5) == "stable"

    def test_user_analytics(self):
        items = [
            make_item("noon"),
            make_item(
                "evening",
                engagement={"engagement_rate": 30.0},
                metadata={"published_at": "2025-10-08T20:00:00+00:00", "tags": [{"name": "Python"}, {"name": "ai"}]},
            ),
            make_item("other", author_id="someone_else"),
        ]
        interactions = [make_interaction("a"), make_interaction("b"), make_interaction("c")]
        analytics = aggregate_user_analytics(make_user("author_1"), items, interactions)
        assert analytics.total_posts == 2
        assert analytics.total_interactions == 3
        assert analytics.average_engagement == pytest.approx(20.0)
        assert analytics.top_posts == ["evening", "noon"]
        assert analytics.popular_topics == ["python", "ai"]
        assert analytics.best_posting_hours == [20]
        assert analytics.engagement_trend == "stable"

    def test_no_posts(self):
        analytics = aggregate_user_analytics(make_user("nobody"), [make_item()], [])
        assert analytics.total_posts == 0
        assert analytics.average_engagement == 0.0
        assert analytics.best_posting_hours == []
