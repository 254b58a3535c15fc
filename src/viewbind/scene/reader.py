"""Parse object trees from YAML documents.

A tree document is a nested mapping::

    id: 6b1f0c2e            # optional stable identity of the root
    name: LoginPanel
    capabilities: [UnityEngine.RectTransform]
    children:
      - name: OkButton
        capabilities: [UnityEngine.RectTransform, UnityEngine.UI.Button]
        marker:
          field_name: confirm
          target: capability
          capability_type: UnityEngine.UI.Button
"""

from __future__ import annotations

from pathlib import Path

import yaml

from viewbind.scene.nodes import BindingMarker, Capability, ObjectNode, TargetKind


def read_tree(path: Path | str) -> ObjectNode:
    """Read a YAML tree file into an ``ObjectNode`` root.

    The root identity is the document's ``id``, or the file path when absent.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
        ValueError: If the document is not a valid tree mapping.
    """
    tree_path = Path(path)
    with open(tree_path) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Tree file {tree_path} is not a YAML mapping")

    root = tree_from_dict(data)
    if not root.identity:
        root.identity = str(tree_path)
    return root


def tree_from_dict(data: dict) -> ObjectNode:
    """Build a node (and its subtree) from a parsed mapping."""
    name = data.get("name")
    if not name or not isinstance(name, str):
        raise ValueError(f"Tree node is missing a 'name': {data!r}")

    capabilities = [_parse_capability(c) for c in data.get("capabilities", []) or []]
    marker = _parse_marker(data.get("marker"))
    children = [tree_from_dict(c) for c in data.get("children", []) or []]
    return ObjectNode(
        name,
        capabilities=capabilities,
        marker=marker,
        children=children,
        identity=str(data.get("id") or ""),
    )


def _parse_capability(entry) -> Capability:
    if isinstance(entry, str):
        return Capability(entry)
    if isinstance(entry, dict) and entry.get("type"):
        return Capability(str(entry["type"]), dict(entry.get("fields") or {}))
    raise ValueError(f"Invalid capability entry: {entry!r}")


def _parse_marker(entry) -> BindingMarker | None:
    if entry is None or entry is False:
        return None
    if entry is True:
        return BindingMarker()
    if not isinstance(entry, dict):
        raise ValueError(f"Invalid marker entry: {entry!r}")

    target = entry.get("target", TargetKind.AUTO.value)
    try:
        kind = TargetKind(target)
    except ValueError:
        valid = ", ".join(k.value for k in TargetKind)
        raise ValueError(f"Invalid marker target '{target}' (valid: {valid})") from None

    return BindingMarker(
        field_name_override=str(entry.get("field_name") or ""),
        ignore_subtree=bool(entry.get("ignore_subtree", False)),
        target_kind=kind,
        capability_type_name=str(entry.get("capability_type") or ""),
        capability_index=int(entry.get("capability_index", 0) or 0),
    )
