"""
Process-wide application objects shared by the HTTP routes.
"""

import logging
from typing import Optional

from ..cache import CacheLoader, ClientCache
from ..database.store import EntityStore, get_entity_store
from ..services import ProjectTrackerService

logger = logging.getLogger(__name__)


class AppState:
    """The store, cache, loader and command service for one process."""

    def __init__(self, store: Optional[EntityStore] = None, cache: Optional[ClientCache] = None, summarizer=None):
        self.store = store or get_entity_store()
        self.cache = cache or ClientCache()
        self.last_error: Optional[str] = None
        self.loader = CacheLoader(self.store, self.cache, on_error=self._record_error)
        self.service = ProjectTrackerService(self.store, self.cache, summarizer=summarizer)

    def _record_error(self, message: str, error: Exception) -> None:
        logger.warning(f"{message} ({error})")
        self.last_error = message


_state: Optional[AppState] = None


def get_app_state() -> AppState:
    """Get the application state, creating it on first use."""
    global _state
    if _state is None:
        _state = AppState()
    return _state


def set_app_state(state: Optional[AppState]) -> None:
    global _state
    _state = state
