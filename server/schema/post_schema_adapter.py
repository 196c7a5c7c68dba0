"""
Post schema adapter: convert raw Firestore post documents → ContentItem format.

Supports:
- Raw app format (public/v1/users/{uid}/posts): postId, uid, title.value, description.value,
  customCompleteText.systemPrompt, hashTags, genre, likeCount, msgCount, bookmarkCount,
  impressionCount, reportCount, score, createdAt.
- ContentItem format: pass-through (title, system_prompt, quality, engagement, metadata, ...).

Output dict is valid for recommender.models.content.ContentItem.model_validate().
"""

from datetime import datetime, timezone
from typing import Any, Dict, List


def is_raw_post(doc: Dict[str, Any]) -> bool:
    """Detect if a post doc uses the raw app schema."""
    return "postId" in doc or "customCompleteText" in doc or isinstance(doc.get("title"), dict)


def _unwrap(value: Any) -> str:
    """Raw text fields are stored as {"value": "..."}."""
    if isinstance(value, dict):
        return str(value.get("value") or "")
    return str(value or "")


def _timestamp(value: Any) -> Any:
    # Firestore Timestamps come back as datetimes; REST exports as {"seconds": ...}.
    if isinstance(value, dict) and "seconds" in value:
        return datetime.fromtimestamp(value["seconds"], tz=timezone.utc).isoformat()
    return value


def _tags(doc: Dict[str, Any], genre: str) -> List[Dict[str, str]]:
    tags = []
    for tag in doc.get("hashTags") or []:
        name = tag.get("name") if isinstance(tag, dict) else str(tag)
        if name:
            tags.append({"name": name.lstrip("#"), "category": genre})
    return tags


def _engagement(doc: Dict[str, Any]) -> Dict[str, Any]:
    likes = int(doc.get("likeCount") or 0)
    comments = int(doc.get("msgCount") or 0)
    shares = int(doc.get("bookmarkCount") or 0)
    impressions = int(doc.get("impressionCount") or 0)
    interactions = likes + comments + shares
    rate = min(interactions / impressions * 100, 100.0) if impressions else 0.0
    return {
        "interactions": interactions,
        "engagement_rate": rate,
        "likes": likes,
        "comments": comments,
        "shares": shares,
    }


def _raw_to_content_item(doc: Dict[str, Any]) -> Dict[str, Any]:
    genre = str(doc.get("genre") or "")
    score = doc.get("score")
    content_score = float(score) if isinstance(score, (int, float)) and 0 <= score <= 1 else 0.5
    return {
        "id": doc.get("postId") or doc.get("id", ""),
        "author_id": doc.get("uid", ""),
        "title": _unwrap(doc.get("title")),
        "description": _unwrap(doc.get("description")),
        "system_prompt": (doc.get("customCompleteText") or {}).get("systemPrompt", ""),
        "quality": {"content_score": content_score, "report_count": int(doc.get("reportCount") or 0)},
        "engagement": _engagement(doc),
        "ai": {"response_count": int(doc.get("msgCount") or 0)},
        "metadata": {
            "published_at": _timestamp(doc.get("createdAt")),
            "categories": [genre] if genre else [],
            "tags": _tags(doc, genre),
        },
    }


def to_content_item(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert any post doc to ContentItem format.

    Raw app docs are converted; docs already in ContentItem shape are returned as-is.
    """
    if is_raw_post(doc):
        return _raw_to_content_item(doc)
    return doc
