"""Deferred attach of generated types across the host's reload boundary.

A freshly generated file is not loadable until the host recompiles it, so
``request_attach`` either binds the type onto the root right away or queues
the request in session storage. The host fires its reload signal once new
code is loadable; ``on_reload`` then drains the queue and retries every
entry, assigning references afterwards in declarative-reference mode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from viewbind.attach.assigner import AssignmentStats, StatsTable, assign_references
from viewbind.attach.host import ReloadSignal, RootStore, SessionStore, TypeRegistry
from viewbind.attach.queue import AttachRequest, PendingAttachQueue
from viewbind.binding import collect_fields
from viewbind.binding.discover import BindingDescriptor
from viewbind.scene.nodes import ObjectNode
from viewbind.settings import GenerationSettings

logger = logging.getLogger(__name__)


class AttachState(str, Enum):
    APPLIED = "applied"
    QUEUED = "queued"


@dataclass
class ReloadReport:
    """What one reload pass did with the drained queue."""

    applied: list[str] = field(default_factory=list)
    requeued: list[str] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)
    stats: dict[str, AssignmentStats] = field(default_factory=dict)

    def summary(self) -> str:
        return (
            f"{len(self.applied)} applied, {len(self.requeued)} requeued, "
            f"{len(self.dropped)} dropped, {len(self.errors)} errors"
        )


class ScriptAttacher:
    """Attach generated types to their roots, now or after the next reload."""

    def __init__(
        self,
        registry: TypeRegistry,
        roots: RootStore,
        session: SessionStore | None = None,
        settings: GenerationSettings | None = None,
        stats: StatsTable | None = None,
        signal: ReloadSignal | None = None,
    ) -> None:
        self.registry = registry
        self.roots = roots
        self.queue = PendingAttachQueue(session or SessionStore())
        self.settings = settings or GenerationSettings()
        self.stats = stats or StatsTable()
        self.signal = signal
        if signal is not None:
            signal.subscribe(self.on_reload)

    def close(self) -> None:
        """Stop listening for reloads."""
        if self.signal is not None:
            self.signal.unsubscribe(self.on_reload)
            self.signal = None

    def request_attach(
        self,
        root: ObjectNode,
        type_name: str,
        artifact_path: Path | str = "",
    ) -> AttachState:
        """Bind ``type_name`` onto ``root`` if the host can resolve it, else queue.

        A resolved type that is not a behavior cannot be attached and is
        treated as done. Attaching is idempotent: a root that already carries
        the type is left untouched.
        """
        host_type = self.registry.resolve_type(type_name, artifact_path or None)
        if host_type is None:
            request = AttachRequest(root.root_identity, type_name, str(artifact_path))
            if self.queue.add(request):
                logger.info(f"{type_name} not loadable yet; queued attach to {root.root_identity}")
            return AttachState.QUEUED

        if not host_type.is_behavior:
            logger.warning(f"{host_type.name} is not a behavior type; nothing attached to {root.root_identity}")
            return AttachState.APPLIED

        target = self.roots.load(root.root_identity) or root
        if target.has_capability(host_type.name):
            return AttachState.APPLIED
        target.add_capability(host_type.name)
        self.roots.save(target)
        logger.info(f"Attached {host_type.name} to {root.root_identity}")
        return AttachState.APPLIED

    def on_reload(self) -> ReloadReport:
        """Drain the pending queue and retry every request.

        The queue is cleared before any entry is processed, so a failure
        never leaves stale entries behind. Entries whose root no longer
        exists are dropped. Entries whose type still does not resolve are
        requeued when ``requeue_unresolved`` is set and dropped otherwise.
        """
        report = ReloadReport()
        for request in self.queue.drain():
            label = f"{request.root_identity}:{request.type_name}"
            try:
                root = self.roots.load(request.root_identity)
                if root is None:
                    logger.warning(f"Root {request.root_identity} no longer exists; dropping {request.type_name}")
                    report.dropped.append(label)
                    continue

                if self.registry.resolve_type(request.type_name, request.artifact_path or None) is None:
                    if self.settings.requeue_unresolved:
                        self.queue.add(request)
                        report.requeued.append(label)
                    else:
                        logger.warning(f"{request.type_name} still not loadable after reload; dropping")
                        report.dropped.append(label)
                    continue

                self.request_attach(root, request.type_name, request.artifact_path)
                report.applied.append(label)

                if self.settings.declarative:
                    attached = self.roots.load(request.root_identity) or root
                    descriptors = collect_fields(attached, self.settings)
                    report.stats[request.root_identity] = self.assign(attached, request.type_name, descriptors)
            except Exception as e:
                logger.error(f"Attach of {label} failed: {e}")
                report.errors.append({"request": label, "error": str(e)})

        if report.applied or report.dropped or report.errors:
            logger.info(f"Reload attach pass: {report.summary()}")
        return report

    def assign(
        self,
        root: ObjectNode,
        type_name: str,
        descriptors: list[BindingDescriptor],
    ) -> AssignmentStats:
        """Assign references for ``root`` and remember the resulting stats."""
        host_type = self.registry.resolve_type(type_name)
        name = host_type.name if host_type is not None else type_name
        return assign_references(
            root, name, descriptors, self.registry, self.roots, self.settings, self.stats,
        )
