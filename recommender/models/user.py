"""
User profile model: one account as seen by the scoring pipeline.

activity_score and influence_level are computed fields: they are derived from
stats and last activity on every access and cannot be set.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, computed_field, model_validator

from ..utils.clock import days_since
from .base import EntityBase


class InfluenceLevel(str, Enum):
    NEWCOMER = "newcomer"
    REGULAR = "regular"
    POPULAR = "popular"
    CELEBRITY = "celebrity"

    @property
    def rank(self) -> int:
        return _INFLUENCE_ORDER.index(self)


_INFLUENCE_ORDER = [
    InfluenceLevel.NEWCOMER,
    InfluenceLevel.REGULAR,
    InfluenceLevel.POPULAR,
    InfluenceLevel.CELEBRITY,
]

# (min activity score, level), checked top-down
_ACTIVITY_TIERS = [
    (85, InfluenceLevel.CELEBRITY),
    (60, InfluenceLevel.POPULAR),
    (25, InfluenceLevel.REGULAR),
]
REGULAR_MIN_POSTS = 10

# (max days since last activity, recency factor)
_RECENCY_BUCKETS = [(1, 1.0), (7, 0.8), (30, 0.5), (90, 0.2)]


class UserStats(BaseModel):
    posts: int = 0
    followers: int = 0
    following: int = 0
    engagement_rate: float = 0.0


class UserStatus(BaseModel):
    is_official: bool = False
    is_suspended: bool = False
    is_verified: bool = False
    verification_badge: str = ""
    is_private: bool = False


def recency_factor(last_active_at: Optional[datetime], now: Optional[datetime] = None) -> float:
    """1.0 for activity within a day, decaying to 0 after 90 days or when unknown."""
    if last_active_at is None:
        return 0.0
    days = days_since(last_active_at, now)
    for max_days, factor in _RECENCY_BUCKETS:
        if days <= max_days:
            return factor
    return 0.0


def compute_activity_score(stats: UserStats, recency: float) -> int:
    """Weighted 0-100 activity score: posts 30, followers 25, following 15, recency 30."""
    score = (
        min(stats.posts / 100, 1) * 30
        + min(stats.followers / 1000, 1) * 25
        + min(stats.following / 500, 1) * 15
        + recency * 30
    )
    return round(score)


def derive_influence_level(activity_score: float, posts: int) -> InfluenceLevel:
    """Map activity score and post count to a tier; monotone in both inputs."""
    for threshold, level in _ACTIVITY_TIERS:
        if activity_score >= threshold:
            return level
    if posts >= REGULAR_MIN_POSTS:
        return InfluenceLevel.REGULAR
    return InfluenceLevel.NEWCOMER


def estimate_engagement_rate(posts: int, followers: int) -> float:
    """Rough engagement rate (0-100) for accounts without a tracked rate."""
    if followers <= 0:
        return 0.0
    return min(posts * 10 / followers * 100, 100.0)


class UserProfile(EntityBase):
    """A user account for scoring, rules and access control."""

    kind: Literal["user"] = "user"

    id: str
    username: str = ""
    display_name: str = ""
    bio: str = ""
    stats: UserStats = Field(default_factory=UserStats)
    status: UserStatus = Field(default_factory=UserStatus)
    last_active_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_derived_fields(cls, data: Any) -> Any:
        # Derived tiers in incoming documents are ignored; they are recomputed from stats.
        if isinstance(data, dict) and ("activity_score" in data or "influence_level" in data):
            data = {k: v for k, v in data.items() if k not in ("activity_score", "influence_level")}
        return data

    def activity_score_at(self, now: Optional[datetime] = None) -> int:
        """Activity score with recency measured at `now` (the wall clock when None)."""
        return compute_activity_score(self.stats, recency_factor(self.last_active_at, now))

    def influence_level_at(self, now: Optional[datetime] = None) -> InfluenceLevel:
        return derive_influence_level(self.activity_score_at(now), self.stats.posts)

    @computed_field
    @property
    def activity_score(self) -> int:
        return self.activity_score_at()

    @computed_field
    @property
    def influence_level(self) -> InfluenceLevel:
        return self.influence_level_at()


def ensure_users(users: List[Union[Dict[str, Any], "UserProfile"]]) -> List["UserProfile"]:
    """Convert list of dicts or UserProfiles to list of UserProfile models."""
    return [
        UserProfile.model_validate(u) if isinstance(u, dict) else u
        for u in users
    ]
