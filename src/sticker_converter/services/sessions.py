"""Pending-request state machine and per-user session access."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from typing import Protocol

from sticker_converter.domain.stickers import (
    ImageSubmission,
    PendingStatus,
    Placement,
    SessionState,
)


class InvalidTransition(ValueError):
    """Raised when a transition is not allowed from the current state."""


class SessionStore(Protocol):
    """Persistence interface for per-user session state."""

    def get(self, user_id: int) -> SessionState:
        """Return the state for a user, or the initial state if unknown."""

    def put(self, user_id: int, state: SessionState) -> None:
        """Persist the state for a user."""


class PendingRequestMachine:
    """Transitions for an image parked until a placement is known.

    NONE -> AWAITING_PLACEMENT when a small image arrives without a stored
    placement. AWAITING_PLACEMENT -> RESOLVED once the resumed conversion
    succeeds. A failed resumption keeps AWAITING_PLACEMENT so the user can
    retry with another placement command.
    """

    @staticmethod
    def park(state: SessionState, submission: ImageSubmission) -> SessionState:
        """Store the submission and wait for a placement.

        A submission already waiting is replaced.
        """
        return replace(
            state,
            pending_request=submission,
            status=PendingStatus.AWAITING_PLACEMENT,
        )

    @staticmethod
    def resolve(state: SessionState) -> SessionState:
        """Clear the pending submission after a successful conversion."""
        if state.status is not PendingStatus.AWAITING_PLACEMENT:
            raise InvalidTransition(f"Cannot resolve from {state.status.value}")
        return replace(state, pending_request=None, status=PendingStatus.RESOLVED)

    @staticmethod
    def retain(state: SessionState) -> SessionState:
        """Keep the pending submission after a failed resumption."""
        if state.status is not PendingStatus.AWAITING_PLACEMENT:
            raise InvalidTransition(f"Cannot retain from {state.status.value}")
        return state


@dataclass
class SessionService:
    """Serialized access to session state, one lock per user."""

    store: SessionStore
    machine: PendingRequestMachine = field(default_factory=PendingRequestMachine)
    _locks: dict[int, asyncio.Lock] = field(default_factory=dict, repr=False)
    _lock_users: dict[int, int] = field(default_factory=dict, repr=False)

    @asynccontextmanager
    async def locked(self, user_id: int) -> AsyncIterator[None]:
        """Hold the user's lock for a whole read-modify-write cycle.

        The lock is dropped once no update holds or waits for it.
        """
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if not self._lock_users[user_id]:
                del self._lock_users[user_id]
                del self._locks[user_id]

    def load(self, user_id: int) -> SessionState:
        """Return the current state for a user."""
        return self.store.get(user_id)

    def save(self, user_id: int, state: SessionState) -> None:
        """Persist a new state for a user."""
        self.store.put(user_id, state)

    def park(self, user_id: int, submission: ImageSubmission) -> SessionState:
        """Park a submission for the user and persist the new state."""
        state = self.machine.park(self.load(user_id), submission)
        self.save(user_id, state)
        return state

    def set_placement(self, user_id: int, placement: Placement) -> SessionState:
        """Overwrite the user's stored placement."""
        state = replace(self.load(user_id), stored_placement=placement)
        self.save(user_id, state)
        return state
