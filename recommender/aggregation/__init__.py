"""Feed, trending, search and analytics aggregation over fetched posts and users."""

from .content_aggregator import (
    FeedEntry,
    SearchHit,
    SearchResults,
    TrendingContent,
    UserAnalytics,
    aggregate_search_results,
    aggregate_trending_content,
    aggregate_user_analytics,
    aggregate_user_feed,
    engagement_trend,
)

__all__ = [
    "FeedEntry",
    "SearchHit",
    "SearchResults",
    "TrendingContent",
    "UserAnalytics",
    "aggregate_search_results",
    "aggregate_trending_content",
    "aggregate_user_analytics",
    "aggregate_user_feed",
    "engagement_trend",
]
