"""Discover bindings in an object tree.

Two passes contribute descriptors:

1. Auto-include: every capability of a configured type anywhere below the root.
2. Markers: every node carrying a ``BindingMarker``, resolved by its target kind.

Results are concatenated, deduplicated on ``(path, type_name, capability_index)``
(first occurrence wins) and sorted by ``(type_name, field_name)``, so the list
depends only on the tree and the settings, never on traversal quirks.
"""

from __future__ import annotations

from dataclasses import dataclass

from viewbind.binding.naming import make_safe_field_name
from viewbind.scene.nodes import BindingMarker, ObjectNode, TargetKind, short_type_name
from viewbind.settings import GenerationSettings


@dataclass
class BindingDescriptor:
    """One generated field: its type, name, and where its value lives."""

    type_name: str
    field_name: str
    path: tuple[str, ...] = ()
    is_capability_reference: bool = True
    capability_index: int = 0

    @property
    def is_root(self) -> bool:
        return not self.path

    @property
    def path_string(self) -> str:
        return "/".join(self.path)

    def key(self) -> tuple[tuple[str, ...], str, int]:
        return (self.path, self.type_name, self.capability_index)


def discover_bindings(root: ObjectNode, settings: GenerationSettings) -> list[BindingDescriptor]:
    """Walk ``root`` and return deduplicated, sorted binding descriptors.

    Names are provisional; run ``rename_fields`` for final identifiers.
    """
    found = _auto_include_pass(root, settings) + _marker_pass(root, settings)

    seen: set[tuple[tuple[str, ...], str, int]] = set()
    unique: list[BindingDescriptor] = []
    for d in found:
        if d.key() in seen:
            continue
        seen.add(d.key())
        unique.append(d)

    unique.sort(key=lambda d: (d.type_name, d.field_name))
    return unique


def _auto_include_pass(root: ObjectNode, settings: GenerationSettings) -> list[BindingDescriptor]:
    found: list[BindingDescriptor] = []
    for type_name in settings.auto_include_types():
        short = short_type_name(type_name)
        for node in root.walk():
            if node.is_under_ignored_marker(root):
                continue
            matches = node.exact_capabilities(type_name)
            for index, _ in enumerate(matches):
                found.append(BindingDescriptor(
                    type_name=type_name,
                    field_name=make_safe_field_name(node.name, short),
                    path=node.path_from(root),
                    is_capability_reference=True,
                    capability_index=index,
                ))
    return found


def _marker_pass(root: ObjectNode, settings: GenerationSettings) -> list[BindingDescriptor]:
    found: list[BindingDescriptor] = []
    for node in root.walk():
        marker = node.marker
        if marker is None or node.is_under_ignored_marker(root):
            continue
        base = marker.field_name_override.strip() or node.name
        descriptor = resolve_marker(
            node, marker, make_safe_field_name(base), node.path_from(root), settings,
        )
        found.append(descriptor)
    return found


def resolve_marker(
    node: ObjectNode,
    marker: BindingMarker,
    field_name: str,
    path: tuple[str, ...],
    settings: GenerationSettings,
) -> BindingDescriptor:
    """Turn one marked node into a descriptor according to its target kind."""
    kind = marker.target_kind

    if kind == TargetKind.CAPABILITY:
        wanted = marker.capability_type_name.strip()
        if not wanted:
            return _auto_by_priority(node, field_name, path, settings)
        candidates = node.capabilities_of(wanted)
        if not candidates:
            return _container_or_node(node, field_name, path, settings)
        chosen = candidates[min(max(marker.capability_index, 0), len(candidates) - 1)]
        # Generated lookups count the index within one exact type
        same_type = node.exact_capabilities(chosen.type_name)
        index = next(i for i, c in enumerate(same_type) if c is chosen)
        return BindingDescriptor(chosen.type_name, field_name, path, True, index)

    if kind == TargetKind.CONTAINER:
        return BindingDescriptor(settings.container_type, field_name, path, False, 0)

    if kind == TargetKind.NODE:
        return BindingDescriptor(settings.node_type, field_name, path, False, 0)

    return _auto_by_priority(node, field_name, path, settings)


def _auto_by_priority(
    node: ObjectNode,
    field_name: str,
    path: tuple[str, ...],
    settings: GenerationSettings,
) -> BindingDescriptor:
    for tier in (settings.interactive_types, settings.display_types):
        for type_name in tier:
            if any(c.type_name == type_name for c in node.capabilities):
                return BindingDescriptor(type_name, field_name, path, True, 0)
    return _container_or_node(node, field_name, path, settings)


def _container_or_node(
    node: ObjectNode,
    field_name: str,
    path: tuple[str, ...],
    settings: GenerationSettings,
) -> BindingDescriptor:
    if node.has_capability(settings.container_type):
        return BindingDescriptor(settings.container_type, field_name, path, False, 0)
    return BindingDescriptor(settings.node_type, field_name, path, False, 0)
