"""Write resolved references straight into a persisted root.

Used in declarative-reference mode, where the generated class declares
serialized fields and no lookup code: each field's value is resolved here and
stored on the root's attached instance of the generated type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from viewbind.attach.host import RootStore, TypeRegistry
from viewbind.binding.discover import BindingDescriptor
from viewbind.scene.nodes import ObjectNode
from viewbind.settings import GenerationSettings

logger = logging.getLogger(__name__)


@dataclass
class AssignmentStats:
    """Outcome counts for one assignment pass over a root."""

    total: int = 0
    success: int = 0
    missing_path: int = 0
    missing_capability: int = 0

    def summary(self) -> str:
        return (
            f"assigned {self.success}/{self.total}, "
            f"missing path {self.missing_path}, "
            f"missing capability {self.missing_capability}"
        )


class StatsTable:
    """Latest ``AssignmentStats`` per root identity, kept for inspection only."""

    def __init__(self) -> None:
        self._stats: dict[str, AssignmentStats] = {}

    def __contains__(self, identity: str) -> bool:
        return identity in self._stats

    def record(self, identity: str, stats: AssignmentStats) -> None:
        self._stats[identity] = stats

    def try_get_stats(self, identity: str) -> tuple[bool, AssignmentStats | None]:
        stats = self._stats.get(identity)
        return stats is not None, stats

    def remove(self, identity: str) -> None:
        self._stats.pop(identity, None)

    def clear(self) -> None:
        self._stats.clear()


def assign_references(
    root: ObjectNode,
    type_name: str,
    descriptors: list[BindingDescriptor],
    registry: TypeRegistry,
    roots: RootStore,
    settings: GenerationSettings,
    stats_table: StatsTable | None = None,
) -> AssignmentStats:
    """Resolve every descriptor against the persisted root and store the values.

    Returns zero stats without saving when the root is not persisted or does
    not carry an instance of ``type_name`` yet (attach must run first).
    Descriptors whose slot is unknown to the compiled type are counted in
    ``total`` and otherwise skipped.
    """
    stats = AssignmentStats()
    identity = root.root_identity
    persisted = roots.load(identity)
    if persisted is None:
        logger.info(f"Root {identity} is not persisted; skipping reference assignment")
        return stats

    instances = persisted.capabilities_of(type_name)
    if not instances:
        logger.info(f"{type_name} is not attached to {identity} yet; skipping reference assignment")
        return stats
    instance = instances[0]

    for d in descriptors:
        stats.total += 1
        slot = registry.resolve_slot(instance, d.field_name)
        if slot is None:
            continue

        node = persisted.find(d.path)
        if node is None:
            stats.missing_path += 1
            continue

        value = resolve_value(node, d, settings)
        if value is None:
            stats.missing_capability += 1
            continue

        slot.set(value)
        stats.success += 1

    roots.save(persisted)
    if stats_table is not None:
        stats_table.record(identity, stats)
    logger.info(f"Reference assignment for {identity}: {stats.summary()}")
    return stats


def resolve_value(node: ObjectNode, d: BindingDescriptor, settings: GenerationSettings) -> Any:
    """The object a descriptor points at on ``node``, or None."""
    if d.is_capability_reference:
        matches = node.exact_capabilities(d.type_name)
        if 0 <= d.capability_index < len(matches):
            return matches[d.capability_index]
        return None
    if d.type_name == settings.node_type:
        return node
    if d.type_name == settings.container_type:
        containers = node.capabilities_of(settings.container_type)
        return containers[0] if containers else None
    return None
