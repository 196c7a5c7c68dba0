"""
User store: users, follow graph, AI interactions, likes and mutes.
Persistence to JSON file or Firestore depending on DATA_SOURCE.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from ..schema import to_user_profile
from .firebase import firestore_client

logger = logging.getLogger(__name__)

LIKE_TOKEN = "postLike"
MUTE_TOKEN = "muteUser"


class UserStore(Protocol):
    """Protocol for user persistence. Implement for JSON file or Firestore."""

    def get_user(self, user_id: str) -> Optional[Dict]:
        """Return user dict if exists, else None."""
        ...

    def list_users(self) -> List[Dict]:
        ...

    def get_following_ids(self, user_id: str) -> List[str]:
        ...

    def get_interactions(self, user_id: str) -> List[Dict]:
        """AI interactions made by the user, oldest first."""
        ...

    def get_liked_ids(self, user_id: str) -> List[str]:
        ...

    def get_muted_ids(self, user_id: str) -> List[str]:
        ...

    def set_liked(self, user_id: str, item_id: str, liked: bool) -> None:
        """Persist a like or unlike. Raises on storage failure."""
        ...

    def set_muted(self, user_id: str, target_id: str, muted: bool) -> None:
        """Persist a mute or unmute. Raises on storage failure."""
        ...


class JsonUserStore:
    """
    User store backed by a JSON file (e.g. data/users.json):

        {"users": [...], "following": {uid: [ids]}, "interactions": [...],
         "likes": {uid: [item ids]}, "mutes": {uid: [user ids]}}
    """

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path)
        self._users: Dict[str, Dict] = {}
        self._following: Dict[str, List[str]] = {}
        self._interactions: List[Dict] = []
        self._likes: Dict[str, List[str]] = {}
        self._mutes: Dict[str, List[str]] = {}
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            return
        with open(self._path) as f:
            data = json.load(f)
        users = data.get("users", []) if isinstance(data, dict) else data
        for u in users:
            u = to_user_profile(u)
            uid = u.get("id") or u.get("user_id")
            if uid:
                self._users[uid] = {**u, "id": uid}
        if isinstance(data, dict):
            self._following = data.get("following") or {}
            self._interactions = data.get("interactions") or []
            self._likes = data.get("likes") or {}
            self._mutes = data.get("mutes") or {}

    def _save(self) -> None:
        out = {
            "users": list(self._users.values()),
            "following": self._following,
            "interactions": self._interactions,
            "likes": self._likes,
            "mutes": self._mutes,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as f:
            json.dump(out, f, indent=2)

    def get_user(self, user_id: str) -> Optional[Dict]:
        return self._users.get(user_id)

    def list_users(self) -> List[Dict]:
        return list(self._users.values())

    def get_following_ids(self, user_id: str) -> List[str]:
        return list(self._following.get(user_id, []))

    def get_interactions(self, user_id: str) -> List[Dict]:
        return [i for i in self._interactions if i.get("user_id") == user_id]

    def get_liked_ids(self, user_id: str) -> List[str]:
        return list(self._likes.get(user_id, []))

    def get_muted_ids(self, user_id: str) -> List[str]:
        return list(self._mutes.get(user_id, []))

    def _set_member(self, table: Dict[str, List[str]], user_id: str, member: str, present: bool) -> None:
        members = table.setdefault(user_id, [])
        if present and member not in members:
            members.append(member)
        elif not present and member in members:
            members.remove(member)
        self._save()

    def set_liked(self, user_id: str, item_id: str, liked: bool) -> None:
        self._set_member(self._likes, user_id, item_id, liked)

    def set_muted(self, user_id: str, target_id: str, muted: bool) -> None:
        self._set_member(self._mutes, user_id, target_id, muted)


class FirestoreUserStore:
    """
    User store backed by Firestore.

    Layout: public/v1/users/{uid} (profile), public/v1/users/{uid}/following/{id},
    interactions (user_id field), private/v1/privateUsers/{uid}/tokens/{like_|mute_}{id}.
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        credentials_path: Optional[Union[Path, str]] = None,
        *,
        client: Any = None,
    ):
        self._db = client if client is not None else firestore_client(project_id, credentials_path)
        self._users = self._db.collection("public").document("v1").collection("users")
        self._private = self._db.collection("private").document("v1").collection("privateUsers")
        self._interactions = self._db.collection("interactions")

    def _doc_to_user(self, doc: Any) -> Dict:
        d = to_user_profile(doc.to_dict() or {})
        d["id"] = doc.id
        return d

    def get_user(self, user_id: str) -> Optional[Dict]:
        doc = self._users.document(user_id).get()
        if doc.exists:
            return self._doc_to_user(doc)
        return None

    def list_users(self) -> List[Dict]:
        return [self._doc_to_user(d) for d in self._users.stream()]

    def get_following_ids(self, user_id: str) -> List[str]:
        return [d.id for d in self._users.document(user_id).collection("following").stream()]

    def get_interactions(self, user_id: str) -> List[Dict]:
        out = []
        for doc in self._interactions.where("user_id", "==", user_id).stream():
            d = doc.to_dict() or {}
            d.setdefault("id", doc.id)
            out.append(d)
        out.sort(key=lambda i: str(i.get("created_at") or ""))
        return out

    def _token_ids(self, user_id: str, token_type: str, prefix: str) -> List[str]:
        tokens = self._private.document(user_id).collection("tokens")
        ids = []
        for doc in tokens.where("tokenType", "==", token_type).stream():
            if doc.id.startswith(prefix):
                ids.append(doc.id[len(prefix):])
        return ids

    def _set_token(self, user_id: str, token_type: str, prefix: str, target: str, present: bool) -> None:
        ref = self._private.document(user_id).collection("tokens").document(f"{prefix}{target}")
        if present:
            ref.set(
                {
                    "activeUid": user_id,
                    "tokenId": f"{prefix}{target}",
                    "tokenType": token_type,
                    "createdAt": datetime.now(timezone.utc),
                }
            )
        else:
            ref.delete()

    def get_liked_ids(self, user_id: str) -> List[str]:
        return self._token_ids(user_id, LIKE_TOKEN, "like_")

    def get_muted_ids(self, user_id: str) -> List[str]:
        return self._token_ids(user_id, MUTE_TOKEN, "mute_")

    def set_liked(self, user_id: str, item_id: str, liked: bool) -> None:
        self._set_token(user_id, LIKE_TOKEN, "like_", item_id, liked)

    def set_muted(self, user_id: str, target_id: str, muted: bool) -> None:
        self._set_token(user_id, MUTE_TOKEN, "mute_", target_id, muted)
