"""
Content aggregation: feed assembly, trending windows, search, and per-user analytics.

These helpers turn already-fetched posts/users into ranked views; they do no I/O.
"""

import logging
from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from ..models.content import ContentItem
from ..models.interaction import InteractionRecord
from ..models.user import UserProfile
from ..utils.clock import hours_since, parse_timestamp, utc_now
from ..utils.stats import mean

logger = logging.getLogger(__name__)

FEED_LIMIT = 30
TRENDING_LIMIT = 10
SEARCH_POST_LIMIT = 20
SEARCH_USER_LIMIT = 10
TREND_THRESHOLD = 5.0

TIMEFRAMES: Dict[str, timedelta] = {
    "hour": timedelta(hours=1),
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}


class FeedEntry(BaseModel):
    item: ContentItem
    relevance_score: float
    from_following: bool = False


class TopicCount(BaseModel):
    topic: str
    mentions: int


class TrendingContent(BaseModel):
    timeframe: str
    items: List[ContentItem] = Field(default_factory=list)
    topics: List[TopicCount] = Field(default_factory=list)
    total_items: int = 0
    total_engagement: float = 0.0


class SearchHit(BaseModel):
    score: float
    item: Optional[ContentItem] = None
    user: Optional[UserProfile] = None


class SearchResults(BaseModel):
    query: str
    posts: List[SearchHit] = Field(default_factory=list)
    users: List[SearchHit] = Field(default_factory=list)


class UserAnalytics(BaseModel):
    user_id: str
    total_posts: int = 0
    total_interactions: int = 0
    average_engagement: float = 0.0
    engagement_trend: str = "stable"
    top_posts: List[str] = Field(default_factory=list)
    popular_topics: List[str] = Field(default_factory=list)
    best_posting_hours: List[int] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Feed
# -----------------------------------------------------------------------------


def _is_filtered(item: ContentItem) -> bool:
    q = item.quality
    return bool(q.moderation_flags) or q.safety_score < 0.7 or q.report_count > 5


def _feed_relevance(item: ContentItem, followed: bool, now: datetime) -> float:
    score = item.engagement_rate * 30
    score += max(0.0, 24 - hours_since(item.metadata.published_at, now)) * 2
    if followed:
        score += 20
    score += item.content_score * 10
    if item.author.is_official:
        score += 10
    if item.metadata.is_trending:
        score += 15
    return score


def aggregate_user_feed(
    user: UserProfile,
    items: List[ContentItem],
    following_ids: Iterable[str],
    now: Optional[datetime] = None,
    limit: int = FEED_LIMIT,
) -> List[FeedEntry]:
    """Followed authors' posts plus unfiltered public posts, by relevance (desc)."""
    now = parse_timestamp(now) or utc_now()
    following = set(following_ids)
    entries = []
    for item in items:
        followed = item.author_id in following
        if not followed and (not item.metadata.is_public or _is_filtered(item)):
            continue
        entries.append(
            FeedEntry(item=item, relevance_score=_feed_relevance(item, followed, now), from_following=followed)
        )
    entries.sort(key=lambda e: e.relevance_score, reverse=True)
    logger.debug("feed for %s: %d of %d items", user.id, min(limit, len(entries)), len(items))
    return entries[:limit]


# -----------------------------------------------------------------------------
# Trending
# -----------------------------------------------------------------------------


def _topic_counts(items: List[ContentItem], limit: int) -> List[TopicCount]:
    counts: Counter = Counter()
    for item in items:
        counts.update(t.name.lower() for t in item.metadata.tags)
    return [TopicCount(topic=t, mentions=n) for t, n in counts.most_common(limit)]


def aggregate_trending_content(
    items: List[ContentItem],
    timeframe: str = "day",
    now: Optional[datetime] = None,
) -> TrendingContent:
    """Top posts by trending score within the timeframe, plus the most mentioned tags."""
    if timeframe not in TIMEFRAMES:
        raise ValueError(f"Unknown timeframe: {timeframe}")
    now = parse_timestamp(now) or utc_now()
    cutoff_hours = TIMEFRAMES[timeframe].total_seconds() / 3600
    recent = [i for i in items if hours_since(i.metadata.published_at, now) <= cutoff_hours]
    ranked = sorted(recent, key=lambda i: i.engagement.trending_score, reverse=True)
    return TrendingContent(
        timeframe=timeframe,
        items=ranked[:TRENDING_LIMIT],
        topics=_topic_counts(recent, TRENDING_LIMIT),
        total_items=len(recent),
        total_engagement=sum(i.engagement.interactions for i in recent),
    )


# -----------------------------------------------------------------------------
# Search
# -----------------------------------------------------------------------------


def _post_search_score(item: ContentItem, term: str) -> float:
    score = 0.0
    if term in item.title.lower():
        score += 50
    if term in item.description.lower():
        score += 30
    score += 20 * sum(1 for t in item.metadata.tags if term in t.name.lower())
    if score == 0:
        return 0.0
    return score + item.engagement_rate + item.content_score * 10


def _user_search_score(user: UserProfile, term: str) -> float:
    score = 0.0
    username = user.username.lower()
    if username == term:
        score += 100
    elif term in username:
        score += 50
    if term in user.display_name.lower():
        score += 30
    if term in user.bio.lower():
        score += 10
    if score == 0:
        return 0.0
    score += user.activity_score
    if user.status.is_official:
        score += 20
    return score


def aggregate_search_results(
    query: str,
    items: List[ContentItem],
    users: List[UserProfile],
) -> SearchResults:
    """Keyword search over posts and users; an empty query matches nothing."""
    term = query.strip().lower()
    results = SearchResults(query=query)
    if not term:
        return results
    post_hits = []
    for item in items:
        score = _post_search_score(item, term) if item.metadata.is_public else 0.0
        if score > 0:
            post_hits.append(SearchHit(score=score, item=item))
    user_hits = []
    for user in users:
        score = _user_search_score(user, term)
        if score > 0:
            user_hits.append(SearchHit(score=score, user=user))
    post_hits.sort(key=lambda h: h.score, reverse=True)
    user_hits.sort(key=lambda h: h.score, reverse=True)
    results.posts = post_hits[:SEARCH_POST_LIMIT]
    results.users = user_hits[:SEARCH_USER_LIMIT]
    return results


# -----------------------------------------------------------------------------
# Analytics
# -----------------------------------------------------------------------------


def engagement_trend(rates: List[float], window: int = 5, threshold: float = TREND_THRESHOLD) -> str:
    """Compare the latest window of rates (oldest first) with the window before it."""
    if len(rates) < 2 * window:
        return "stable"
    recent = mean(rates[-window:])
    previous = mean(rates[-2 * window:-window])
    if recent > previous + threshold:
        return "up"
    if recent < previous - threshold:
        return "down"
    return "stable"


def _best_posting_hours(items: List[ContentItem], limit: int = 3) -> List[int]:
    by_hour: Dict[int, List[float]] = defaultdict(list)
    for item in items:
        published = parse_timestamp(item.metadata.published_at)
        if published is not None:
            by_hour[published.hour].append(item.engagement_rate)
    if not by_hour:
        return []
    overall = mean([r for rates in by_hour.values() for r in rates])
    above = [(mean(rates), hour) for hour, rates in by_hour.items() if mean(rates) > overall]
    above.sort(reverse=True)
    return [hour for _, hour in above[:limit]]


def aggregate_user_analytics(
    user: UserProfile,
    items: List[ContentItem],
    interactions: List[InteractionRecord],
) -> UserAnalytics:
    """Summaries over the user's own posts (items authored by user.id)."""
    own = [i for i in items if i.author_id == user.id]
    chronological = sorted(own, key=lambda i: hours_since(i.metadata.published_at), reverse=True)
    top = sorted(own, key=lambda i: i.engagement_rate, reverse=True)[:5]
    topic_counts: Counter = Counter(t.name.lower() for i in own for t in i.metadata.tags)
    return UserAnalytics(
        user_id=user.id,
        total_posts=len(own),
        total_interactions=len(interactions),
        average_engagement=mean([i.engagement_rate for i in own]),
        engagement_trend=engagement_trend([i.engagement_rate for i in chronological]),
        top_posts=[i.id for i in top],
        popular_topics=[t for t, _ in topic_counts.most_common(5)],
        best_posting_hours=_best_posting_hours(own),
    )
