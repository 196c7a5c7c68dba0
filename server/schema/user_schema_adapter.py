"""
User schema adapter: convert raw Firestore public user documents → UserProfile format.

Supports:
- Raw app format (public/v1/users/{uid}): uid, userName.value, bio.value, followerCount,
  followingCount, postCount, isOfficial, isSuspended, lastLoginAt / updatedAt.
- UserProfile format: pass-through (username, stats, status, ...).

Output dict is valid for recommender.models.user.UserProfile.model_validate().
"""

import re
from typing import Any, Dict

from recommender.models.user import estimate_engagement_rate

from .post_schema_adapter import _timestamp, _unwrap

MAX_BIO_LENGTH = 500


def is_raw_user(doc: Dict[str, Any]) -> bool:
    """Detect if a user doc uses the raw app schema."""
    return "followerCount" in doc or "postCount" in doc or isinstance(doc.get("userName"), dict)


def _display_name(username: str, uid: str) -> str:
    if username:
        return username[0].upper() + username[1:]
    return f"User{uid[-6:]}"


def _bio(value: Any) -> str:
    bio = _unwrap(value).strip()
    return re.sub(r"\n{3,}", "\n\n", bio)[:MAX_BIO_LENGTH]


def _raw_to_user_profile(doc: Dict[str, Any]) -> Dict[str, Any]:
    uid = str(doc.get("uid") or doc.get("id") or "")
    username = _unwrap(doc.get("userName") or doc.get("username"))
    posts = int(doc.get("postCount") or 0)
    followers = int(doc.get("followerCount") or 0)
    official = bool(doc.get("isOfficial"))
    return {
        "id": uid,
        "username": username,
        "display_name": _display_name(username, uid),
        "bio": _bio(doc.get("bio")),
        "stats": {
            "posts": posts,
            "followers": followers,
            "following": int(doc.get("followingCount") or 0),
            "engagement_rate": estimate_engagement_rate(posts, followers),
        },
        "status": {
            "is_official": official,
            "is_suspended": bool(doc.get("isSuspended")),
            # Official accounts are the verified ones in the app.
            "is_verified": official,
            "verification_badge": "✓" if official else "",
        },
        "last_active_at": _timestamp(doc.get("lastLoginAt") or doc.get("updatedAt")),
    }


def to_user_profile(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert any user doc to UserProfile format.

    Raw app docs are converted; docs already in UserProfile shape are returned as-is.
    """
    if is_raw_user(doc):
        return _raw_to_user_profile(doc)
    return doc
