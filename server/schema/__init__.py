"""Adapters from raw app documents to the recommender's model dicts."""

from .post_schema_adapter import is_raw_post, to_content_item
from .user_schema_adapter import is_raw_user, to_user_profile

__all__ = [
    "is_raw_post",
    "to_content_item",
    "is_raw_user",
    "to_user_profile",
]
