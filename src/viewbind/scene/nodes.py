"""Object tree model: nodes, their capabilities and binding markers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator


class TargetKind(str, Enum):
    """What a binding marker exports."""

    AUTO = "auto"
    CAPABILITY = "capability"
    CONTAINER = "container"
    NODE = "node"


@dataclass
class BindingMarker:
    """Optional per-node annotation steering discovery."""

    field_name_override: str = ""
    ignore_subtree: bool = False
    target_kind: TargetKind = TargetKind.AUTO
    capability_type_name: str = ""
    capability_index: int = 0


@dataclass
class Capability:
    """A typed attachment on a node.

    ``fields`` holds slot values when the capability is an instance of a
    generated behavior; plain capabilities leave it empty.
    """

    type_name: str
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def short_name(self) -> str:
        return short_type_name(self.type_name)

    def matches(self, type_name: str) -> bool:
        """True for the qualified name, or the short name when unqualified."""
        if self.type_name == type_name:
            return True
        return "." not in type_name and self.short_name == type_name


class ObjectNode:
    """A node in a rooted tree of named objects."""

    def __init__(
        self,
        name: str,
        capabilities: list[Capability] | None = None,
        marker: BindingMarker | None = None,
        children: list[ObjectNode] | None = None,
        identity: str = "",
    ) -> None:
        self.name = name
        self.capabilities: list[Capability] = list(capabilities or [])
        self.marker = marker
        self.identity = identity
        self.parent: ObjectNode | None = None
        self.children: list[ObjectNode] = []
        for child in children or []:
            self.add_child(child)

    def __repr__(self) -> str:
        return f"ObjectNode({self.name!r}, children={len(self.children)})"

    @property
    def root_identity(self) -> str:
        """Stable content key; falls back to the node name."""
        return self.identity or self.name

    def add_child(self, child: ObjectNode) -> ObjectNode:
        child.parent = self
        self.children.append(child)
        return child

    def add_capability(self, type_name: str) -> Capability:
        cap = Capability(type_name)
        self.capabilities.append(cap)
        return cap

    def walk(self) -> Iterator[ObjectNode]:
        """Pre-order traversal including this node."""
        yield self
        for child in self.children:
            yield from child.walk()

    def capabilities_of(self, type_name: str) -> list[Capability]:
        return [c for c in self.capabilities if c.matches(type_name)]

    def exact_capabilities(self, type_name: str) -> list[Capability]:
        """Capabilities whose full type name equals ``type_name``, in order."""
        return [c for c in self.capabilities if c.type_name == type_name]

    def has_capability(self, type_name: str) -> bool:
        return any(c.matches(type_name) for c in self.capabilities)

    def find(self, path: tuple[str, ...] | list[str]) -> ObjectNode | None:
        """Resolve a name path below this node; an empty path is the node itself."""
        current = self
        for name in path:
            current = next((c for c in current.children if c.name == name), None)
            if current is None:
                return None
        return current

    def path_from(self, root: ObjectNode) -> tuple[str, ...]:
        """Names from ``root`` (exclusive) down to this node (inclusive)."""
        names: list[str] = []
        current: ObjectNode | None = self
        while current is not None and current is not root:
            names.append(current.name)
            current = current.parent
        return tuple(reversed(names))

    def is_under_ignored_marker(self, root: ObjectNode | None = None) -> bool:
        """True when any strict ancestor (up to ``root``) ignores its subtree."""
        current = self.parent
        while current is not None:
            if current.marker is not None and current.marker.ignore_subtree:
                return True
            if current is root:
                break
            current = current.parent
        return False


def short_type_name(type_name: str) -> str:
    return type_name.rsplit(".", 1)[-1]
