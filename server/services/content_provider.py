"""
Content Provider abstraction.

Supplies the post catalog to the recommendation service.
Implementations: JSON file, HTTP content API, Firestore (cloud).
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import requests

from ..schema import to_content_item
from .firebase import firestore_client

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = 10.0
FIRESTORE_FETCH_LIMIT = 2000


class ContentProvider(Protocol):
    """Protocol for post catalog access. Implement for JSON file, HTTP API or Firestore."""

    def get_items(self, limit: Optional[int] = None, item_ids: Optional[List[str]] = None) -> List[Dict]:
        """
        Return posts, newest first, optionally restricted to item_ids.
        limit=None means return all (subject to implementation limits).
        """
        ...

    def get_item(self, item_id: str) -> Optional[Dict]:
        """Get one post by id."""
        ...


def _published_key(item: Dict) -> str:
    published = (item.get("metadata") or {}).get("published_at") or ""
    return str(published)


def _select(items: List[Dict], limit: Optional[int], item_ids: Optional[List[str]]) -> List[Dict]:
    if item_ids is not None:
        id_set = set(item_ids)
        items = [i for i in items if i.get("id") in id_set]
    items = sorted(items, key=_published_key, reverse=True)
    if limit is not None:
        items = items[:limit]
    return items


class JsonContentProvider:
    """
    Content provider backed by a JSON file (list of posts, or {"posts": [...]}).
    Used when DATA_SOURCE=json; path comes from POSTS_JSON_PATH.
    """

    def __init__(self, posts_path: Union[Path, str]):
        self._path = Path(posts_path)
        if not self._path.exists():
            raise FileNotFoundError(f"Posts JSON not found: {self._path}")
        with open(self._path) as f:
            data = json.load(f)
        posts = data.get("posts", []) if isinstance(data, dict) else data
        self._items = [to_content_item(p) for p in posts]
        self._by_id = {i.get("id"): i for i in self._items if i.get("id")}

    def get_items(self, limit: Optional[int] = None, item_ids: Optional[List[str]] = None) -> List[Dict]:
        return _select(self._items, limit, item_ids)

    def get_item(self, item_id: str) -> Optional[Dict]:
        return self._by_id.get(item_id)


class HttpContentProvider:
    """
    Content provider backed by an HTTP content API.

    GET {base_url}/posts?limit=&ids= returns a list (or {"posts": [...]});
    GET {base_url}/posts/{id} returns one post or 404.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def get_items(self, limit: Optional[int] = None, item_ids: Optional[List[str]] = None) -> List[Dict]:
        params: Dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if item_ids is not None:
            params["ids"] = ",".join(item_ids)
        response = self._session.get(f"{self._base_url}/posts", params=params, timeout=self._timeout)
        response.raise_for_status()
        data = response.json()
        posts = data.get("posts", []) if isinstance(data, dict) else data
        return _select([to_content_item(p) for p in posts], limit, item_ids)

    def get_item(self, item_id: str) -> Optional[Dict]:
        response = self._session.get(f"{self._base_url}/posts/{item_id}", timeout=self._timeout)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return to_content_item(response.json())


class FirestoreContentProvider:
    """
    Content provider backed by Cloud Firestore.

    Posts live under public/v1/users/{uid}/posts and are read through a collection
    group query on "posts". Applies the schema adapter to convert raw docs.
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        credentials_path: Optional[Union[Path, str]] = None,
        *,
        client: Any = None,
        posts_collection: str = "posts",
    ):
        self._db = client if client is not None else firestore_client(project_id, credentials_path)
        self._posts_collection = posts_collection

    def _doc_to_dict(self, doc: Any) -> Dict:
        d = doc.to_dict() or {}
        d.setdefault("id", doc.id)
        return to_content_item(d)

    def get_items(self, limit: Optional[int] = None, item_ids: Optional[List[str]] = None) -> List[Dict]:
        fetch_limit = min(limit or FIRESTORE_FETCH_LIMIT, FIRESTORE_FETCH_LIMIT)
        query = self._db.collection_group(self._posts_collection).limit(fetch_limit)
        items = [self._doc_to_dict(d) for d in query.stream()]
        logger.debug("firestore: streamed %d posts", len(items))
        return _select(items, limit, item_ids)

    def get_item(self, item_id: str) -> Optional[Dict]:
        query = self._db.collection_group(self._posts_collection).where("postId", "==", item_id).limit(1)
        for doc in query.stream():
            return self._doc_to_dict(doc)
        return None
