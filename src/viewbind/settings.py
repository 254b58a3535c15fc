"""Generation settings: single source of truth for every per-run option.

Settings are an immutable value. They are read from a YAML document (see
``load_settings``) or built directly; every key in the YAML maps onto a
``GenerationSettings`` field of the same name.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from viewbind.paths import settings_path


class BindingMode(str, Enum):
    """How generated fields receive their values."""

    EXPLICIT_INIT = "explicit_init"
    DECLARATIVE_REFERENCE = "declarative_reference"


# Auto-included without a marker: interactive controls plus text and raw images
COMMON_TYPES: tuple[str, ...] = (
    "UnityEngine.UI.Button",
    "UnityEngine.UI.Toggle",
    "UnityEngine.UI.Slider",
    "UnityEngine.UI.InputField",
    "TMPro.TMP_InputField",
    "TMPro.TMP_Text",
    "UnityEngine.UI.Text",
    "UnityEngine.UI.RawImage",
)

EXTENDED_TYPES: tuple[str, ...] = (
    "UnityEngine.UI.ScrollRect",
    "UnityEngine.UI.Scrollbar",
    "UnityEngine.UI.Dropdown",
    "TMPro.TMP_Dropdown",
)

# Marker auto-priority: first tier wins over the second
INTERACTIVE_TYPES: tuple[str, ...] = (
    "UnityEngine.UI.Button",
    "UnityEngine.UI.Toggle",
    "UnityEngine.UI.Slider",
    "UnityEngine.UI.InputField",
    "TMPro.TMP_InputField",
)

DISPLAY_TYPES: tuple[str, ...] = (
    "TMPro.TMP_Text",
    "UnityEngine.UI.Text",
    "UnityEngine.UI.Image",
    "UnityEngine.UI.RawImage",
)

DEFAULT_PREFIXES: tuple[tuple[str, str], ...] = (
    ("UnityEngine.UI.Button", "btn"),
    ("UnityEngine.UI.Toggle", "tog"),
    ("UnityEngine.UI.Slider", "sld"),
    ("UnityEngine.UI.InputField", "input"),
    ("UnityEngine.UI.Text", "txt"),
    ("UnityEngine.UI.Image", "img"),
    ("UnityEngine.UI.RawImage", "img"),
    ("TMPro.TMP_InputField", "input"),
    ("TMPro.TMP_Text", "txt"),
    ("UnityEngine.UI.ScrollRect", "scroll"),
    ("UnityEngine.UI.Scrollbar", "sb"),
    ("UnityEngine.UI.Dropdown", "dd"),
    ("TMPro.TMP_Dropdown", "dd"),
    ("UnityEngine.RectTransform", "rt"),
    ("UnityEngine.GameObject", "go"),
)

# Used for property-name stripping when the prefix table is empty
FALLBACK_PREFIXES: tuple[str, ...] = ("btn", "tog", "sld", "input", "txt", "img", "rt", "go")

# Lifecycle messages that may call the init method
INIT_INVOKERS: tuple[str, ...] = ("Awake", "Start", "")

_TUPLE_FIELDS = {"common_types", "extended_types", "interactive_types", "display_types", "usings"}


@dataclass(frozen=True)
class GenerationSettings:
    """Immutable configuration for one generation run."""

    # Root-node inclusion
    auto_include_common: bool = True
    auto_include_extended: bool = False
    common_types: tuple[str, ...] = COMMON_TYPES
    extended_types: tuple[str, ...] = EXTENDED_TYPES
    interactive_types: tuple[str, ...] = INTERACTIVE_TYPES
    display_types: tuple[str, ...] = DISPLAY_TYPES
    container_type: str = "UnityEngine.RectTransform"
    node_type: str = "UnityEngine.GameObject"

    # Naming
    prefixes: tuple[tuple[str, str], ...] = DEFAULT_PREFIXES
    use_type_prefix: bool = True
    underscore_camel_case: bool = True
    generate_properties: bool = False
    strip_prefix_in_properties: bool = True

    # Class rules
    require_uppercase_class_name: bool = True

    binding_mode: BindingMode = BindingMode.EXPLICIT_INIT
    namespace: str = ""
    base_type: str = "UnityEngine.MonoBehaviour"
    usings: tuple[str, ...] = ("UnityEngine", "UnityEngine.UI")
    init_method_name: str = "InitRefs"
    # Unity message that calls the init method; "" leaves the call to hand-written code
    init_invoker: str = "Awake"
    file_extension: str = ".cs"

    log_marker_recovery: bool = True
    requeue_unresolved: bool = False

    def auto_include_types(self) -> tuple[str, ...]:
        """Types scanned by the auto-include pass, in scan order."""
        types = list(self.common_types) if self.auto_include_common else []
        if self.auto_include_extended:
            types.extend(t for t in self.extended_types if t not in types)
        return tuple(types)

    def prefix_for(self, type_name: str) -> str:
        """First configured prefix for an exact type name, or ''."""
        for configured_type, prefix in self.prefixes:
            if configured_type and configured_type == type_name:
                return prefix or ""
        return ""

    def known_prefixes(self) -> list[str]:
        """Lower-cased non-blank prefixes, falling back to the built-in list."""
        configured = [p.strip().lower() for _, p in self.prefixes if p and p.strip()]
        return configured or list(FALLBACK_PREFIXES)

    @property
    def declarative(self) -> bool:
        return self.binding_mode == BindingMode.DECLARATIVE_REFERENCE

    def with_options(self, **changes: Any) -> GenerationSettings:
        return replace(self, **changes)


def settings_from_dict(data: dict) -> GenerationSettings:
    """Build settings from a parsed YAML mapping.

    Raises:
        ValueError: On unknown keys, a malformed prefix table, an unknown
            binding mode or an unsupported init invoker.
    """
    known = {f.name for f in fields(GenerationSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if key in _TUPLE_FIELDS:
            kwargs[key] = tuple(str(v) for v in value)
        elif key == "prefixes":
            kwargs[key] = _parse_prefixes(value)
        elif key == "binding_mode":
            try:
                kwargs[key] = BindingMode(value)
            except ValueError:
                valid = ", ".join(m.value for m in BindingMode)
                raise ValueError(f"Invalid binding_mode '{value}' (valid: {valid})") from None
        elif key == "init_invoker":
            if value not in INIT_INVOKERS:
                valid = ", ".join(repr(v) for v in INIT_INVOKERS)
                raise ValueError(f"Invalid init_invoker '{value}' (valid: {valid})")
            kwargs[key] = value
        else:
            kwargs[key] = value
    return GenerationSettings(**kwargs)


def settings_to_dict(settings: GenerationSettings) -> dict:
    """Plain YAML-friendly mapping of all settings."""
    data = asdict(settings)
    data["binding_mode"] = settings.binding_mode.value
    data["prefixes"] = [{"type": t, "prefix": p} for t, p in settings.prefixes]
    for key in _TUPLE_FIELDS:
        data[key] = list(data[key])
    return data


def load_settings(path: Path | str | None = None) -> GenerationSettings:
    """Load settings from YAML, or return defaults when the file is absent.

    Args:
        path: Settings file. Defaults to ``paths.settings_path()``.

    Raises:
        ValueError: If the document is not a mapping or holds invalid values.
        yaml.YAMLError: If the YAML is malformed.
    """
    file_path = Path(path) if path else settings_path()
    if not file_path.is_file():
        return GenerationSettings()

    with open(file_path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return GenerationSettings()
    if not isinstance(data, dict):
        raise ValueError(f"Settings at {file_path} is not a YAML mapping")
    return settings_from_dict(data)


def save_settings(settings: GenerationSettings, path: Path | str | None = None) -> Path:
    """Write settings as YAML, creating parent folders as needed."""
    file_path = Path(path) if path else settings_path()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w") as f:
        yaml.safe_dump(settings_to_dict(settings), f, sort_keys=False, allow_unicode=True)
    return file_path


def _parse_prefixes(value: Any) -> tuple[tuple[str, str], ...]:
    if not isinstance(value, list):
        raise ValueError("prefixes must be a list of {type, prefix} mappings")
    pairs = []
    for entry in value:
        if not isinstance(entry, dict) or "type" not in entry:
            raise ValueError(f"Invalid prefix entry: {entry!r}")
        pairs.append((str(entry["type"]), str(entry.get("prefix") or "")))
    return tuple(pairs)
