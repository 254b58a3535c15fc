"""Attach module: bind generated types to their roots across host reloads."""

from viewbind.attach.assigner import AssignmentStats, StatsTable, assign_references
from viewbind.attach.attacher import AttachState, ReloadReport, ScriptAttacher
from viewbind.attach.host import HostType, ReloadSignal, RootStore, SessionStore, Slot, TypeRegistry
from viewbind.attach.queue import QUEUE_KEY, AttachRequest, PendingAttachQueue

__all__ = [
    "QUEUE_KEY",
    "AssignmentStats",
    "AttachRequest",
    "AttachState",
    "HostType",
    "PendingAttachQueue",
    "ReloadReport",
    "ReloadSignal",
    "RootStore",
    "ScriptAttacher",
    "SessionStore",
    "Slot",
    "StatsTable",
    "TypeRegistry",
    "assign_references",
]
