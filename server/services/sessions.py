"""Per-user session state: memoized loads plus optimistic like/mute sets."""

import logging
from typing import Callable, Dict, Iterable, Optional

from recommender.session import SessionMemo, ToggleSet

logger = logging.getLogger(__name__)


class UserSession:
    """One signed-in user's memo and toggle sets; discarded on logout."""

    def __init__(self, user_id: str, liked_ids: Iterable[str] = (), muted_ids: Iterable[str] = ()):
        self.user_id = user_id
        self.memo = SessionMemo()
        self.liked = ToggleSet(liked_ids)
        self.muted = ToggleSet(muted_ids)


class SessionRegistry:
    def __init__(self):
        self._sessions: Dict[str, UserSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, user_id: str) -> Optional[UserSession]:
        return self._sessions.get(user_id)

    def get_or_create(
        self,
        user_id: str,
        load_liked: Callable[[str], Iterable[str]],
        load_muted: Callable[[str], Iterable[str]],
    ) -> UserSession:
        """Existing session, or a new one seeded from the store's liked/muted ids."""
        session = self._sessions.get(user_id)
        if session is None:
            session = UserSession(user_id, load_liked(user_id), load_muted(user_id))
            self._sessions[user_id] = session
        return session

    def end(self, user_id: str) -> bool:
        """Drop the user's session; False when there was none."""
        session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        session.memo.clear()
        logger.info("session ended for %s", user_id)
        return True
