"""Backing logic: providers, stores, sessions."""

from .content_provider import (
    ContentProvider,
    FirestoreContentProvider,
    HttpContentProvider,
    JsonContentProvider,
)
from .firebase import firestore_client
from .safe_fetch import fetch_or_empty
from .sessions import SessionRegistry, UserSession
from .user_store import FirestoreUserStore, JsonUserStore, UserStore

__all__ = [
    "ContentProvider",
    "FirestoreContentProvider",
    "HttpContentProvider",
    "JsonContentProvider",
    "firestore_client",
    "fetch_or_empty",
    "SessionRegistry",
    "UserSession",
    "FirestoreUserStore",
    "JsonUserStore",
    "UserStore",
]
