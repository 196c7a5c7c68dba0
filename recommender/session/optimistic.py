"""
Optimistic toggles: apply a boolean change locally, persist it, and roll back on failure.

State machine: IDLE -> PENDING -> COMMITTED | ROLLED_BACK. A settled toggle
(COMMITTED or ROLLED_BACK) may begin again; a PENDING one may not.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Hashable, Iterable, Optional, Set

logger = logging.getLogger(__name__)


class ToggleState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class InvalidTransition(RuntimeError):
    """Raised when a toggle is asked to move to a state it cannot reach."""


class OptimisticToggle:
    def __init__(self, value: bool = False):
        self.value = value
        self.state = ToggleState.IDLE
        self._prior: Optional[bool] = None

    def begin(self, new_value: bool) -> None:
        if self.state == ToggleState.PENDING:
            raise InvalidTransition("toggle already has a pending change")
        self._prior = self.value
        self.value = new_value
        self.state = ToggleState.PENDING

    def commit(self) -> None:
        if self.state != ToggleState.PENDING:
            raise InvalidTransition(f"cannot commit from {self.state.value}")
        self._prior = None
        self.state = ToggleState.COMMITTED

    def rollback(self) -> None:
        if self.state != ToggleState.PENDING:
            raise InvalidTransition(f"cannot roll back from {self.state.value}")
        self.value = self._prior
        self._prior = None
        self.state = ToggleState.ROLLED_BACK

    def run(self, new_value: bool, persist: Callable[[bool], None]) -> bool:
        """Apply new_value, persist it, and commit; any persist error rolls back and re-raises."""
        self.begin(new_value)
        try:
            persist(new_value)
        except Exception:
            self.rollback()
            raise
        self.commit()
        return self.value


class ToggleSet:
    """A set of ids (liked posts, muted users) where each membership change is an optimistic toggle."""

    def __init__(self, members: Iterable[Hashable] = ()):
        self._toggles: Dict[Hashable, OptimisticToggle] = {m: OptimisticToggle(True) for m in members}

    def __contains__(self, member: Hashable) -> bool:
        toggle = self._toggles.get(member)
        return toggle is not None and toggle.value

    def members(self) -> Set[Hashable]:
        return {m for m, t in self._toggles.items() if t.value}

    def toggle(self, member: Hashable) -> OptimisticToggle:
        return self._toggles.setdefault(member, OptimisticToggle(False))

    def set(self, member: Hashable, value: bool, persist: Callable[[bool], None]) -> bool:
        toggle = self.toggle(member)
        try:
            return toggle.run(value, persist)
        except Exception:
            if toggle.state == ToggleState.ROLLED_BACK:
                logger.warning("toggle %s -> %s failed; restored", member, value)
            raise

    def flip(self, member: Hashable, persist: Callable[[bool], None]) -> bool:
        return self.set(member, member not in self, persist)
