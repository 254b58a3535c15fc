"""Binding module: discovery and naming of generated view fields."""

from __future__ import annotations

from viewbind.binding.discover import BindingDescriptor, discover_bindings
from viewbind.binding.naming import InvalidNameError, property_name, rename_fields, validate_class_name
from viewbind.scene.nodes import ObjectNode
from viewbind.settings import GenerationSettings


def collect_fields(root: ObjectNode, settings: GenerationSettings) -> list[BindingDescriptor]:
    """Discover and name every field a view of ``root`` would declare."""
    return rename_fields(discover_bindings(root, settings), settings)


__all__ = [
    "BindingDescriptor",
    "InvalidNameError",
    "collect_fields",
    "discover_bindings",
    "property_name",
    "rename_fields",
    "validate_class_name",
]
