"""Field naming pipeline.

Stages run in a fixed order, each optional except the last:

1. prefixing: ``OkButton`` on a Button becomes ``btn_OkButton``
2. casing: ``btn_OkButton`` becomes ``_btnOkButton``
3. uniqueness: repeated names get ``_1``, ``_2``, ... appended

Property names are derived separately and are allowed to collide.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from viewbind.settings import GenerationSettings

if TYPE_CHECKING:
    from viewbind.binding.discover import BindingDescriptor

_CLASS_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_WORD_SPLIT_RE = re.compile(r"[_ ]+")


class InvalidNameError(ValueError):
    """A derived class name breaks the identifier or casing rules."""


def validate_class_name(name: str, require_uppercase: bool = True) -> None:
    """Raise ``InvalidNameError`` unless ``name`` can be a class name."""
    if not name or not name.strip() or not _CLASS_NAME_RE.match(name):
        raise InvalidNameError(
            f"Invalid class name '{name}': must start with a letter or underscore "
            "and contain only letters, digits and underscores"
        )
    if require_uppercase and not name[0].isupper():
        raise InvalidNameError(f"Invalid class name '{name}': first letter must be uppercase")


def make_safe_field_name(raw: str, type_hint: str | None = None) -> str:
    """Sanitize a node name into an identifier.

    Non-alphanumerics become underscores and a leading digit gets an
    underscore in front. A name equal to ``type_hint`` gets a trailing
    underscore so the field never shadows its own type.
    """
    if not raw or not raw.strip():
        raw = "field"
    name = "".join(ch if ch.isalnum() else "_" for ch in raw)
    if name[0].isdigit():
        name = "_" + name
    if type_hint and name == type_hint:
        name += "_"
    return name


def to_pascal_case(name: str) -> str:
    parts = [p for p in _WORD_SPLIT_RE.split(name) if p]
    if not parts:
        return name
    return "".join(p[0].upper() + p[1:] for p in parts)


def to_camel_case(name: str) -> str:
    pascal = to_pascal_case(name)
    if not pascal:
        return name
    return pascal[0].lower() + pascal[1:]


def apply_prefix(name: str, prefix: str) -> str:
    if not prefix:
        return name
    if name.lower().startswith(prefix.lower()):
        return name
    return f"{prefix}_{name}"


def apply_casing(name: str) -> str:
    camel = to_camel_case(name)
    return camel if camel.startswith("_") else "_" + camel


def ensure_unique_names(descriptors: list[BindingDescriptor]) -> None:
    """Suffix ``_1``, ``_2``, ... onto names already taken earlier in the list."""
    used: set[str] = set()
    for d in descriptors:
        base = d.field_name
        name = base
        idx = 1
        while name in used:
            name = f"{base}_{idx}"
            idx += 1
        used.add(name)
        d.field_name = name


def rename_fields(
    descriptors: list[BindingDescriptor],
    settings: GenerationSettings,
) -> list[BindingDescriptor]:
    """Run the naming pipeline in place and return the same list."""
    if settings.use_type_prefix:
        for d in descriptors:
            d.field_name = apply_prefix(d.field_name, settings.prefix_for(d.type_name))

    if settings.underscore_camel_case:
        for d in descriptors:
            d.field_name = apply_casing(d.field_name)

    ensure_unique_names(descriptors)
    return descriptors


def strip_known_prefix(name: str, prefixes: list[str]) -> str:
    """Drop the longest matching prefix (with or without its underscore)."""
    lower = name.lower()
    for prefix in sorted(prefixes, key=len, reverse=True):
        for candidate in (prefix + "_", prefix):
            if lower.startswith(candidate):
                stripped = name[len(candidate):]
                # keep the prefix rather than produce an empty or digit-led name
                if stripped and not stripped[0].isdigit():
                    return stripped
                return name
    return name


def property_name(field_name: str, settings: GenerationSettings) -> str:
    """Read-only property name for a generated field."""
    base = field_name.lstrip("_") or field_name
    if settings.strip_prefix_in_properties:
        base = strip_known_prefix(base, settings.known_prefixes())
    return to_pascal_case(base)
