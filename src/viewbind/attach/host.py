"""Host bridge: the small surface the attach protocol needs from its host.

The host compiles generated files on its own schedule. Until it has, a newly
generated type cannot be resolved by name. Everything host-specific sits
behind four collaborators, each with an in-memory implementation that is
enough for tests and for exercising the protocol without a host:

- ``TypeRegistry``: ``resolve_type(name)`` / ``resolve_slot(instance, field)``
- ``RootStore``: load and save the persisted form of a root
- ``SessionStore``: string storage that survives the reload boundary
- ``ReloadSignal``: fires when freshly compiled code becomes loadable

Subclass them to wire a real host.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from viewbind.codegen.merge import (
    BASE_CLAUSE_RE,
    declared_fields,
    declared_namespace,
    find_class_declaration,
)
from viewbind.scene.nodes import Capability, ObjectNode, short_type_name

logger = logging.getLogger(__name__)

BEHAVIOR_BASES = ("UnityEngine.MonoBehaviour", "MonoBehaviour")


@dataclass(frozen=True)
class HostType:
    """A type the host has compiled and can instantiate."""

    name: str
    artifact_path: str = ""
    is_behavior: bool = True
    slots: tuple[str, ...] = ()

    @property
    def short_name(self) -> str:
        return short_type_name(self.name)

    def matches(self, type_name: str) -> bool:
        return type_name in (self.name, self.short_name)


@dataclass
class Slot:
    """A named storage slot on an attached behavior instance."""

    instance: Capability
    name: str

    def get(self) -> Any:
        return self.instance.fields.get(self.name)

    def set(self, value: Any) -> None:
        self.instance.fields[self.name] = value


class TypeRegistry:
    """Types currently loaded by the host, in load order."""

    def __init__(self, behavior_bases: tuple[str, ...] = BEHAVIOR_BASES) -> None:
        self.behavior_bases = behavior_bases
        self._types: list[HostType] = []

    def __len__(self) -> int:
        return len(self._types)

    def register(self, host_type: HostType) -> HostType:
        """Load a type, replacing an earlier one from the same unit or with the same name."""
        self._types = [
            t for t in self._types
            if t.name != host_type.name
            and not (host_type.artifact_path and t.artifact_path == host_type.artifact_path)
        ]
        self._types.append(host_type)
        return host_type

    def load_artifact(self, artifact_path: Path | str, text: str) -> HostType | None:
        """Compile a generated file: register its class and the fields it declares."""
        decl = find_class_declaration(text)
        if decl is None:
            logger.warning(f"No class declaration in {artifact_path}; nothing loaded")
            return None

        name = decl.group(1)
        namespace = declared_namespace(text)
        if namespace:
            name = f"{namespace}.{name}"

        base = BASE_CLAUSE_RE.match(text, decl.end())
        base_name = base.group(1) if base else ""
        is_behavior = bool(base_name) and (
            base_name in self.behavior_bases
            or short_type_name(base_name) in {short_type_name(b) for b in self.behavior_bases}
        )

        slots = tuple(field_name for _, field_name in declared_fields(text))
        return self.register(HostType(name, str(artifact_path), is_behavior, slots))

    def resolve_type(self, type_name: str, artifact_path: Path | str | None = None) -> HostType | None:
        """Resolve by compiled unit first, then by bare name across all units."""
        if artifact_path:
            for t in self._types:
                if t.artifact_path == str(artifact_path):
                    return t
        for t in self._types:
            if t.matches(type_name):
                return t
        return None

    def resolve_slot(self, instance: Capability, field_name: str) -> Slot | None:
        """Slot for ``field_name`` if the instance's compiled type declares it."""
        host_type = self.resolve_type(instance.type_name)
        if host_type is None or field_name not in host_type.slots:
            return None
        return Slot(instance, field_name)


class RootStore:
    """Persisted roots keyed by identity.

    ``load`` hands out an independent working copy and ``save`` persists one,
    mirroring an open-edit-save cycle on the host's stored template.
    """

    def __init__(self) -> None:
        self._roots: dict[str, ObjectNode] = {}
        self.save_count = 0

    def __contains__(self, identity: str) -> bool:
        return identity in self._roots

    def load(self, identity: str) -> ObjectNode | None:
        root = self._roots.get(identity)
        return copy.deepcopy(root) if root is not None else None

    def save(self, root: ObjectNode) -> None:
        self._roots[root.root_identity] = copy.deepcopy(root)
        self.save_count += 1


class SessionStore:
    """String values that outlive a reload but not the process."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get_string(self, key: str, default: str = "") -> str:
        return self._values.get(key, default)

    def set_string(self, key: str, value: str) -> None:
        self._values[key] = value


class ReloadSignal:
    """Event source fired by the host after newly generated code is loadable."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], Any]] = []

    def subscribe(self, callback: Callable[[], Any]) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unsubscribe(self, callback: Callable[[], Any]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def fire(self) -> None:
        for callback in list(self._callbacks):
            callback()
