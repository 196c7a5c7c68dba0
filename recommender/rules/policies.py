"""
Fixed policies that sit next to the declarative rules: access control and the
interest-based recommendation filter.
"""

from collections import OrderedDict
from typing import Any, Dict, List

from ..models.content import ContentItem
from ..models.rules import AccessDecision
from ..models.user import InfluenceLevel, UserProfile

BASE_INTERESTS = ["technology", "ai", "discussion"]
REACH_INTERESTS = ["trending", "popular"]

# Activity above which a user is considered to be posting too fast.
NEWCOMER_RATE_LIMIT = 10
DEFAULT_RATE_LIMIT = 50

WRITE_ACTIONS = {"write", "post", "comment", "like"}


def _is_rate_limited(user: UserProfile) -> bool:
    limit = NEWCOMER_RATE_LIMIT if user.influence_level == InfluenceLevel.NEWCOMER else DEFAULT_RATE_LIMIT
    return user.activity_score > limit


def access_control(
    user: UserProfile,
    action: str,
    resource: Dict[str, Any],
    context: Dict[str, Any],
) -> AccessDecision:
    """
    Decide whether user may perform action on resource.

    resource keys used: type ("profile", "post", ...), owner_id, is_private.
    """
    if user.status.is_suspended:
        return AccessDecision(
            allowed=False,
            reason="Account suspended",
            restrictions=["no_posting", "no_interaction"],
        )
    if action == "read" and resource.get("type") == "profile" and resource.get("is_private"):
        if resource.get("owner_id") != user.id:
            return AccessDecision(allowed=False, reason="Private profile")
    if action == "moderate" and not user.status.is_official:
        return AccessDecision(allowed=False, reason="Insufficient permissions")
    if action in WRITE_ACTIONS and _is_rate_limited(user):
        return AccessDecision(allowed=False, reason="Rate limit exceeded", restrictions=["wait_period"])
    return AccessDecision(allowed=True)


def user_interests(user: UserProfile) -> List[str]:
    interests = list(BASE_INTERESTS)
    if user.influence_level.rank >= InfluenceLevel.POPULAR.rank:
        interests.extend(REACH_INTERESTS)
    return interests


def _matches_interests(item: ContentItem, interests: List[str]) -> bool:
    labels = {t.name.lower() for t in item.metadata.tags}
    labels.update(t.category.lower() for t in item.metadata.tags)
    labels.update(c.lower() for c in item.metadata.categories)
    return any(i in labels for i in interests)


def _round_robin_by_category(items: List[ContentItem]) -> List[ContentItem]:
    """Interleave items by primary category, keeping order within each category."""
    buckets: "OrderedDict[str, List[ContentItem]]" = OrderedDict()
    for item in items:
        buckets.setdefault(item.get_primary_category() or "", []).append(item)
    interleaved: List[ContentItem] = []
    while buckets:
        for key in list(buckets):
            interleaved.append(buckets[key].pop(0))
            if not buckets[key]:
                del buckets[key]
    return interleaved


def recommendation_filter(user: UserProfile, items: List[ContentItem], limit: int = 10) -> List[ContentItem]:
    """Interest match, then quality/flag/engagement gates, then category round-robin."""
    interests = user_interests(user)
    kept = [
        item
        for item in items
        if _matches_interests(item, interests)
        and item.content_score > 0.6
        and not item.is_flagged
        and item.engagement_rate > 10
    ]
    return _round_robin_by_category(kept)[:limit]
