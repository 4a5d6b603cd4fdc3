"""
In-memory mirror of the five entity collections.

The cache is the single source of truth read by every view during a
session. It is only ever patched after the entity store confirms a write,
and the cascade rules keep denormalized fields and dependents consistent
without re-fetching.

Operations are synchronous and cannot fail: they are structural edits on
data that was already fetched.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..models import EntityKind, User, Client, Project, Task, Activity, sort_newest_first
from .cascade import cascade_update, cascade_delete
from .stats import CacheStats

logger = logging.getLogger(__name__)


class CollectionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADED = "loaded"


ENTITY_KINDS = {
    User: EntityKind.USER,
    Client: EntityKind.CLIENT,
    Project: EntityKind.PROJECT,
    Task: EntityKind.TASK,
    Activity: EntityKind.ACTIVITY,
}


def kind_of(entity: Any) -> EntityKind:
    """Entity kind for a model instance."""
    for model, kind in ENTITY_KINDS.items():
        if isinstance(entity, model):
            return kind
    raise TypeError(f"Not a cacheable entity: {type(entity).__name__}")


class ClientCache:
    """
    Cascade-aware cache of users, clients, projects, tasks and activities.

    Reads return tuples so callers cannot edit a collection directly; the
    add/update/remove methods are the only write surface. Collections keep
    insertion order, except activities which stay sorted by date, newest
    first.
    """

    def __init__(self, stats: Optional[CacheStats] = None):
        self.stats = stats or CacheStats()
        self._items: Dict[EntityKind, List[Any]] = {kind: [] for kind in EntityKind}
        self._index: Dict[EntityKind, Dict[str, int]] = {kind: {} for kind in EntityKind}
        self._state: Dict[EntityKind, CollectionState] = {
            kind: CollectionState.UNINITIALIZED for kind in EntityKind
        }

    # ============================================
    # READS
    # ============================================

    @property
    def users(self) -> Tuple[User, ...]:
        return tuple(self._items[EntityKind.USER])

    @property
    def clients(self) -> Tuple[Client, ...]:
        return tuple(self._items[EntityKind.CLIENT])

    @property
    def projects(self) -> Tuple[Project, ...]:
        return tuple(self._items[EntityKind.PROJECT])

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._items[EntityKind.TASK])

    @property
    def activities(self) -> Tuple[Activity, ...]:
        return tuple(self._items[EntityKind.ACTIVITY])

    def all(self, kind: EntityKind) -> Tuple[Any, ...]:
        return tuple(self._items[kind])

    def get(self, kind: EntityKind, entity_id: str) -> Optional[Any]:
        position = self._index[kind].get(entity_id)
        return self._items[kind][position] if position is not None else None

    def state(self, kind: EntityKind) -> CollectionState:
        return self._state[kind]

    def is_loaded(self, kind: EntityKind) -> bool:
        return self._state[kind] == CollectionState.LOADED

    def tasks_for_project(self, project_id: str) -> List[Task]:
        return [t for t in self._items[EntityKind.TASK] if t.project_id == project_id]

    def activities_for_project(self, project_id: str) -> List[Activity]:
        return [a for a in self._items[EntityKind.ACTIVITY] if a.project_id == project_id]

    # ============================================
    # BULK REPLACEMENT (initial load and refetch)
    # ============================================

    def replace_collections(self, collections: Dict[EntityKind, List[Any]]) -> None:
        """
        Swap in freshly fetched collections.

        All given kinds change together, with no suspension point in between,
        so readers see either the old or the new set.
        """
        for kind, items in collections.items():
            self._set(kind, list(items))
            self._state[kind] = CollectionState.LOADED
            logger.debug(f"Loaded {len(items)} {kind.value} records into cache")

    # ============================================
    # MUTATIONS
    # ============================================

    def add_to_cache(self, entity: Any) -> None:
        """Insert a confirmed new entity."""
        self.add(kind_of(entity), entity)

    def add(self, kind: EntityKind, entity: Any) -> None:
        if entity.id in self._index[kind]:
            logger.warning(f"{kind.value} {entity.id} is already cached; adding a second copy")

        self._set(kind, self._items[kind] + [entity])
        self.stats.record_add()
        logger.debug(f"Cached new {kind.value} {entity.id}")

    def update_in_cache(self, entity: Any) -> None:
        """Replace a cached entity by id, then cascade. Unknown ids are a no-op."""
        self.update(kind_of(entity), entity)

    def update(self, kind: EntityKind, entity: Any) -> None:
        position = self._index[kind].get(entity.id)
        if position is None:
            self.stats.record_update(found=False)
            logger.debug(f"{kind.value} {entity.id} not cached; update ignored")
            return

        items = list(self._items[kind])
        items[position] = entity
        self._set(kind, items)

        changed, patched = cascade_update(kind, entity, self._items)
        for dependent_kind, dependent_items in changed.items():
            self._set(dependent_kind, dependent_items)

        self.stats.record_update(found=True, cascaded=patched)
        logger.debug(f"Updated cached {kind.value} {entity.id} ({patched} dependents patched)")

    def remove_from_cache(self, kind: EntityKind, entity_id: str) -> None:
        """Evict an entity and every dependent the cascade rules name."""
        self.remove(kind, entity_id)

    def remove(self, kind: EntityKind, entity_id: str) -> None:
        self._set(kind, [item for item in self._items[kind] if item.id != entity_id])

        changed, evicted = cascade_delete(kind, entity_id, self._items)
        for dependent_kind, dependent_items in changed.items():
            self._set(dependent_kind, dependent_items)

        self.stats.record_remove(cascaded=evicted)
        logger.debug(f"Removed {kind.value} {entity_id} from cache ({evicted} dependents evicted)")

    # ============================================
    # INTERNALS
    # ============================================

    def _set(self, kind: EntityKind, items: List[Any]) -> None:
        if kind == EntityKind.ACTIVITY:
            items = sort_newest_first(items)
        self._items[kind] = items
        self._index[kind] = {item.id: position for position, item in enumerate(items)}
