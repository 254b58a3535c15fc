"""Generate view files for object trees.

For each root:
1. Validate the class name (the root's name)
2. Collect and name its fields
3. Merge them into the existing file, or render a new one
4. Write only when the text changed
5. Optionally hand the generated type to a ``ScriptAttacher``

Preserves all hand-written code outside the auto markers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from viewbind.binding import collect_fields
from viewbind.binding.discover import BindingDescriptor
from viewbind.binding.naming import validate_class_name
from viewbind.codegen.merge import merge_artifact
from viewbind.scene.nodes import ObjectNode
from viewbind.settings import GenerationSettings

if TYPE_CHECKING:
    from viewbind.attach.assigner import AssignmentStats
    from viewbind.attach.attacher import AttachState, ScriptAttacher

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of generating one view file."""

    root: str
    class_name: str
    artifact_path: Path
    action: str
    descriptors: list[BindingDescriptor] = field(default_factory=list)
    recovered_regions: list[str] = field(default_factory=list)
    attach_state: AttachState | None = None
    stats: AssignmentStats | None = None

    @property
    def artifact_changed(self) -> bool:
        return self.action != "unchanged"

    def summary(self) -> str:
        lines = [f"{self.action}: {self.artifact_path} ({len(self.descriptors)} fields)"]
        if self.recovered_regions:
            lines.append(f"  recovered regions: {', '.join(self.recovered_regions)}")
        if self.attach_state is not None:
            lines.append(f"  attach: {self.attach_state.value}")
        if self.stats is not None:
            lines.append(f"  references: {self.stats.summary()}")
        return "\n".join(lines)


def artifact_path_for(class_name: str, settings: GenerationSettings, output_dir: Path | str | None = None) -> Path:
    """Where the view file for ``class_name`` lives."""
    if output_dir is None:
        from viewbind.paths import output_dir as default_output_dir
        output_dir = default_output_dir()
    return Path(output_dir) / f"{class_name}{settings.file_extension}"


def generate_view(
    root: ObjectNode,
    settings: GenerationSettings,
    output_dir: Path | str | None = None,
    dry_run: bool = False,
    attacher: ScriptAttacher | None = None,
) -> GenerationResult:
    """Generate or update the view file for one root.

    Args:
        root: Root of the object tree; its name is the class name.
        settings: Generation settings.
        output_dir: Folder for view files. Defaults to ``paths.output_dir()``.
        dry_run: Compute the result without writing or attaching.
        attacher: When given, the generated type is attached to the root
            (immediately or after the next reload). In declarative-reference
            mode references are assigned once the attach has been applied.

    Raises:
        InvalidNameError: If the root name is not a valid class name. Nothing
            is written.
    """
    from viewbind.attach.attacher import AttachState

    class_name = root.name
    validate_class_name(class_name, settings.require_uppercase_class_name)

    descriptors = collect_fields(root, settings)
    file_path = artifact_path_for(class_name, settings, output_dir)

    existing = file_path.read_text(encoding="utf-8") if file_path.exists() else None
    recovered: list[str] = []
    text = merge_artifact(existing, class_name, descriptors, settings, recovered)

    if existing is None:
        action = "created"
    elif text == existing:
        action = "unchanged"
    else:
        action = "updated"

    if action != "unchanged" and not dry_run:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(text, encoding="utf-8")
        logger.debug(f"Wrote {file_path}")

    result = GenerationResult(
        root=root.root_identity,
        class_name=class_name,
        artifact_path=file_path,
        action=action,
        descriptors=descriptors,
        recovered_regions=recovered,
    )

    if attacher is not None and not dry_run:
        type_name = f"{settings.namespace}.{class_name}" if settings.namespace else class_name
        result.attach_state = attacher.request_attach(root, type_name, file_path)
        if settings.declarative and result.attach_state == AttachState.APPLIED:
            result.stats = attacher.assign(root, type_name, descriptors)

    return result


def generate_all(
    roots: list[ObjectNode],
    settings: GenerationSettings,
    output_dir: Path | str | None = None,
    dry_run: bool = False,
    attacher: ScriptAttacher | None = None,
) -> dict[str, Any]:
    """Generate view files for many roots; one failing root never stops the rest."""
    created = []
    updated = []
    unchanged = []
    errors = []
    results = []

    for root in roots:
        try:
            res = generate_view(root, settings, output_dir, dry_run, attacher)
        except Exception as e:
            logger.error(f"Generation failed for {root.root_identity}: {e}")
            errors.append({"root": root.root_identity, "error": str(e)})
            continue

        results.append(res)
        if res.action == "created":
            created.append(str(res.artifact_path))
        elif res.action == "updated":
            updated.append(str(res.artifact_path))
        else:
            unchanged.append(str(res.artifact_path))

    return {
        "created": created,
        "updated": updated,
        "unchanged": unchanged,
        "errors": errors,
        "results": results,
        "dry_run": dry_run,
    }
