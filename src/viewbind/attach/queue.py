"""Pending attach requests, persisted across the reload boundary.

Stored as one session string: newline-separated ``rootIdentity|typeName|artifactPath``
records, deduplicated and sorted ordinally so retries never depend on the
order requests arrived in.
"""

from __future__ import annotations

from dataclasses import dataclass

from viewbind.attach.host import SessionStore

QUEUE_KEY = "viewbind.attach_queue"


@dataclass(frozen=True, order=True)
class AttachRequest:
    """Bind the type generated for a root back onto that root."""

    root_identity: str
    type_name: str
    artifact_path: str = ""

    def encode(self) -> str:
        for value in (self.root_identity, self.type_name):
            if "|" in value or "\n" in value:
                raise ValueError(f"Attach request field may not contain '|' or newlines: {value!r}")
        if "\n" in self.artifact_path:
            raise ValueError(f"Artifact path may not contain newlines: {self.artifact_path!r}")
        return f"{self.root_identity}|{self.type_name}|{self.artifact_path}"

    @classmethod
    def decode(cls, line: str) -> AttachRequest | None:
        """Parse one record; None for lines with fewer than two fields."""
        parts = line.split("|", 2)
        if len(parts) < 2 or not parts[0] or not parts[1]:
            return None
        path = parts[2] if len(parts) == 3 else ""
        return cls(parts[0], parts[1], path)


class PendingAttachQueue:
    """Deduplicated, ordinally sorted request set kept in a ``SessionStore``."""

    def __init__(self, session: SessionStore, key: str = QUEUE_KEY) -> None:
        self.session = session
        self.key = key

    def __len__(self) -> int:
        return len(self._lines())

    def entries(self) -> list[AttachRequest]:
        requests = (AttachRequest.decode(line) for line in self._lines())
        return [r for r in requests if r is not None]

    def add(self, request: AttachRequest) -> bool:
        """Queue ``request``; False when an identical record is already queued."""
        item = request.encode()
        lines = set(self._lines())
        if item in lines:
            return False
        lines.add(item)
        self.session.set_string(self.key, "\n".join(sorted(lines)))
        return True

    def drain(self) -> list[AttachRequest]:
        """Return every queued request and clear the queue before any is processed."""
        requests = self.entries()
        self.clear()
        return requests

    def clear(self) -> None:
        self.session.set_string(self.key, "")

    def _lines(self) -> list[str]:
        payload = self.session.get_string(self.key, "")
        return [line for line in payload.split("\n") if line]
