"""
Two-phase values for optimistic UI state.

A PendingValue separates what the store has confirmed from what the user
just asked for. Views read `current`; the cache only ever sees committed
values.
"""

import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()


class PendingValue(Generic[T]):
    """A committed value with an optional provisional override."""

    def __init__(self, committed: T):
        self.committed: T = committed
        self._pending = _UNSET
        self._token: Optional[object] = None

    @property
    def pending(self) -> Optional[T]:
        return None if self._pending is _UNSET else self._pending

    @property
    def is_pending(self) -> bool:
        return self._pending is not _UNSET

    @property
    def current(self) -> T:
        return self.committed if self._pending is _UNSET else self._pending

    def stage(self, value: T) -> object:
        """
        Show `value` until it is committed or rolled back.

        Returns a token identifying this stage. commit() and rollback() given
        an older token leave a newer pending value alone.
        """
        self._pending = value
        self._token = object()
        return self._token

    def _owns(self, token: Optional[object]) -> bool:
        return token is None or token is self._token

    def commit(self, value: T, token: Optional[object] = None) -> None:
        self.committed = value
        if self._owns(token):
            self._pending = _UNSET
            self._token = None

    def rollback(self, token: Optional[object] = None) -> None:
        if not self._owns(token):
            return
        if self.is_pending:
            logger.debug(f"Discarding pending value {self._pending!r}, keeping {self.committed!r}")
        self._pending = _UNSET
        self._token = None

    async def optimistic(self, value: T, remote_call: Callable[[], Awaitable[T]]) -> T:
        """
        Show `value` while `remote_call` runs.

        The confirmed result is committed on success. On failure the pending
        value is dropped and the error re-raised. A value staged by a later
        overlapping call stays visible either way.
        """
        token = self.stage(value)
        try:
            confirmed = await remote_call()
        except Exception:
            self.rollback(token)
            raise
        self.commit(confirmed, token)
        return confirmed

    def __repr__(self) -> str:
        return f"PendingValue(committed={self.committed!r}, pending={self.pending!r})"
