"""
Cascade rules between cached collections.

Denormalized fields are copies of another entity's attribute. When the
source entity changes or goes away, the rules below say which dependents
must be patched or evicted. The client cache runs them as a fixed step
after every update and removal.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..models import EntityKind


@dataclass(frozen=True)
class UpdateRule:
    """Copy source.<source_field> into dependent.<dependent_field> where dependent.<foreign_key> == source.id."""
    source: EntityKind
    source_field: str
    dependent: EntityKind
    foreign_key: str
    dependent_field: str


@dataclass(frozen=True)
class EmbedRule:
    """Replace the embedded copy of the source inside dependent.<list_field>, matched by id."""
    source: EntityKind
    dependent: EntityKind
    list_field: str


@dataclass(frozen=True)
class DeleteRule:
    """Evict dependents whose <foreign_key> equals the removed source id."""
    source: EntityKind
    dependent: EntityKind
    foreign_key: str


UPDATE_RULES: Tuple[UpdateRule, ...] = (
    UpdateRule(EntityKind.USER, "name", EntityKind.PROJECT, "team_leader_id", "team_leader"),
    UpdateRule(EntityKind.USER, "name", EntityKind.TASK, "user_id", "user_name"),
    UpdateRule(EntityKind.USER, "avatar", EntityKind.TASK, "user_id", "user_avatar"),
    UpdateRule(EntityKind.USER, "name", EntityKind.ACTIVITY, "user_id", "user_name"),
    UpdateRule(EntityKind.USER, "avatar", EntityKind.ACTIVITY, "user_id", "user_avatar"),
    UpdateRule(EntityKind.CLIENT, "name", EntityKind.PROJECT, "client_id", "client_name"),
    UpdateRule(EntityKind.TASK, "name", EntityKind.ACTIVITY, "task_id", "task_name"),
)

EMBED_RULES: Tuple[EmbedRule, ...] = (
    EmbedRule(EntityKind.USER, EntityKind.PROJECT, "team_members"),
)

DELETE_RULES: Tuple[DeleteRule, ...] = (
    DeleteRule(EntityKind.PROJECT, EntityKind.TASK, "project_id"),
    DeleteRule(EntityKind.PROJECT, EntityKind.ACTIVITY, "project_id"),
    DeleteRule(EntityKind.TASK, EntityKind.ACTIVITY, "task_id"),
)


def _patch_for(source_kind: EntityKind, source: Any, dependent_kind: EntityKind, item: Any) -> Dict[str, Any]:
    patch: Dict[str, Any] = {}

    for rule in UPDATE_RULES:
        if rule.source == source_kind and rule.dependent == dependent_kind:
            if getattr(item, rule.foreign_key) == source.id:
                patch[rule.dependent_field] = getattr(source, rule.source_field)

    for rule in EMBED_RULES:
        if rule.source == source_kind and rule.dependent == dependent_kind:
            embedded = getattr(item, rule.list_field)
            if any(member.id == source.id for member in embedded):
                patch[rule.list_field] = [
                    source if member.id == source.id else member for member in embedded
                ]

    return patch


def dependents_of_update(source_kind: EntityKind) -> List[EntityKind]:
    """Entity kinds that hold denormalized copies of source_kind."""
    kinds = [r.dependent for r in UPDATE_RULES if r.source == source_kind]
    kinds += [r.dependent for r in EMBED_RULES if r.source == source_kind]
    return list(dict.fromkeys(kinds))


def cascade_update(
    source_kind: EntityKind,
    source: Any,
    collections: Dict[EntityKind, List[Any]],
) -> Tuple[Dict[EntityKind, List[Any]], int]:
    """
    Propagate an updated entity into every dependent collection.

    Patched dependents are replaced by copies, never mutated in place.

    Returns:
        ({kind: new list} for each dependent kind, number of patched items)
    """
    changed: Dict[EntityKind, List[Any]] = {}
    patched = 0

    for kind in dependents_of_update(source_kind):
        new_items = []
        for item in collections[kind]:
            patch = _patch_for(source_kind, source, kind, item)
            if patch:
                item = item.model_copy(update=patch)
                patched += 1
            new_items.append(item)
        changed[kind] = new_items

    return changed, patched


def cascade_delete(
    source_kind: EntityKind,
    source_id: str,
    collections: Dict[EntityKind, List[Any]],
) -> Tuple[Dict[EntityKind, List[Any]], int]:
    """
    Evict dependents of a removed entity.

    Returns:
        ({kind: surviving items} for each dependent kind, number evicted)
    """
    changed: Dict[EntityKind, List[Any]] = {}
    evicted = 0

    for rule in DELETE_RULES:
        if rule.source != source_kind:
            continue
        current = changed.get(rule.dependent, collections[rule.dependent])
        kept = [item for item in current if getattr(item, rule.foreign_key) != source_id]
        evicted += len(current) - len(kept)
        changed[rule.dependent] = kept

    return changed, evicted
