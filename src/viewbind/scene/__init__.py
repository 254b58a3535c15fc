"""Scene module: object tree model and YAML tree reader."""

from viewbind.scene.nodes import BindingMarker, Capability, ObjectNode, TargetKind
from viewbind.scene.reader import read_tree, tree_from_dict

__all__ = [
    "BindingMarker",
    "Capability",
    "ObjectNode",
    "TargetKind",
    "read_tree",
    "tree_from_dict",
]
