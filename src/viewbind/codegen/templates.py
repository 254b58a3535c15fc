"""Source templates for generated view classes.

Every ``render_*`` helper returns whole lines (each ending in a newline) at
the given member indentation, so a rendered region can replace the lines
between two markers verbatim.
"""

from __future__ import annotations

from viewbind.binding.discover import BindingDescriptor
from viewbind.binding.naming import property_name
from viewbind.codegen import (
    ASSIGN_END,
    ASSIGN_START,
    FIELDS_END,
    FIELDS_START,
    PROPS_END,
    PROPS_START,
    USER_END,
    USER_START,
)
from viewbind.settings import GenerationSettings

INDENT = "    "

HEADER = "// Auto-generated view bindings. Code between auto markers is rewritten on every generation."

USER_CODE_NOTE = "// Hand-written code goes here; the generator never touches this region."

LOG_TAG = "[ViewBind]"


# ── Regions ───────────────────────────────────────────────────────

def render_fields(
    descriptors: list[BindingDescriptor],
    settings: GenerationSettings,
    indent: str = INDENT,
) -> str:
    """Field declarations; serialized for external assignment in declarative mode."""
    attribute = "[SerializeField] " if settings.declarative else ""
    lines = [indent + FIELDS_START]
    for d in descriptors:
        lines.append(f"{indent}{attribute}private {d.type_name} {d.field_name};")
    lines.append(indent + FIELDS_END)
    return _join(lines)


def render_properties(
    descriptors: list[BindingDescriptor],
    settings: GenerationSettings,
    indent: str = INDENT,
) -> str:
    """Read-only accessors, or '' when property generation is off."""
    if not settings.generate_properties:
        return ""
    lines = [indent + PROPS_START]
    for d in descriptors:
        lines.append(
            f"{indent}public {d.type_name} {property_name(d.field_name, settings)} => {d.field_name};"
        )
    lines.append(indent + PROPS_END)
    return _join(lines)


def render_init(
    descriptors: list[BindingDescriptor],
    settings: GenerationSettings,
    indent: str = INDENT,
) -> str:
    """Initializer method, or empty markers when references are assigned externally.

    Unless ``init_invoker`` is blank, a private lifecycle method that calls
    the initializer follows it inside the same region.
    """
    if settings.declarative:
        return _join([indent + ASSIGN_START, indent + ASSIGN_END])

    body = indent + INDENT
    lines = [
        indent + ASSIGN_START,
        f"{indent}public void {settings.init_method_name}()",
        f"{indent}{{",
    ]
    for i, d in enumerate(descriptors):
        if i > 0:
            lines.append("")
        lines.extend(body + line if line else "" for line in _lookup_lines(i, d, settings))
    lines.append(f"{indent}}}")
    invoker = settings.init_invoker
    if invoker and invoker != settings.init_method_name:
        lines.extend([
            "",
            f"{indent}private void {invoker}()",
            f"{indent}{{",
            f"{body}{settings.init_method_name}();",
            f"{indent}}}",
        ])
    lines.append(indent + ASSIGN_END)
    return _join(lines)


def render_user_code(indent: str = INDENT) -> str:
    return _join([indent + USER_START, indent + USER_CODE_NOTE, indent + USER_END])


# ── Whole file ────────────────────────────────────────────────────

def render_class_declaration(class_name: str, settings: GenerationSettings) -> str:
    if settings.base_type:
        return f"public class {class_name} : {settings.base_type}"
    return f"public class {class_name}"


def render_artifact(
    class_name: str,
    descriptors: list[BindingDescriptor],
    settings: GenerationSettings,
) -> str:
    """Brand-new file: preamble, class skeleton, all regions and the user region."""
    lines = [HEADER]
    lines.extend(f"using {u};" for u in settings.usings)
    lines.append("")

    outer = ""
    if settings.namespace:
        lines.append(f"namespace {settings.namespace}")
        lines.append("{")
        outer = INDENT
    member = outer + INDENT

    lines.append(outer + render_class_declaration(class_name, settings))
    lines.append(outer + "{")
    text = _join(lines)
    text += render_fields(descriptors, settings, member)
    text += render_properties(descriptors, settings, member)
    text += render_init(descriptors, settings, member)
    text += "\n"
    text += render_user_code(member)
    text += outer + "}\n"
    if settings.namespace:
        text += "}\n"
    return text


# ── Helpers ───────────────────────────────────────────────────────

def escape_literal(value: str) -> str:
    """Escape text for a double-quoted string literal."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _lookup_lines(i: int, d: BindingDescriptor, settings: GenerationSettings) -> list[str]:
    """Statements (without base indentation) that resolve one field at runtime."""
    path = escape_literal(d.path_string)
    tr = f"__tr{i}"
    not_found = f'Debug.LogError("{LOG_TAG} Path not found: {path}");'

    if d.is_capability_reference:
        if d.is_root:
            source, where = "GetComponents", "on root"
        else:
            source, where = f"{tr}.GetComponents", f"under path {path}"
        assign = [
            f"var __comps = {source}<{d.type_name}>();",
            f"{d.field_name} = (__comps != null && __comps.Length > {d.capability_index})"
            f" ? __comps[{d.capability_index}] : null;",
            f'if ({d.field_name} == null) Debug.LogError("{LOG_TAG} No {d.type_name} '
            f'at index {d.capability_index} {where}");',
        ]
        if d.is_root:
            return ["{", *(INDENT + a for a in assign), "}"]
        return [
            f'var {tr} = transform.Find("{path}");',
            f"if ({tr} == null) {not_found}",
            "else",
            "{",
            *(INDENT + a for a in assign),
            "}",
        ]

    if d.type_name == settings.node_type:
        if d.is_root:
            return [f"{d.field_name} = gameObject;"]
        return [
            f'var {tr} = transform.Find("{path}");',
            f"if ({tr} == null) {not_found}",
            f"else {d.field_name} = {tr}.gameObject;",
        ]

    if d.type_name == settings.container_type:
        if d.is_root:
            return [f"{d.field_name} = GetComponent<{d.type_name}>();"]
        return [
            f'var {tr} = transform.Find("{path}");',
            f"if ({tr} == null) {not_found}",
            f"else {d.field_name} = {tr}.GetComponent<{d.type_name}>();",
        ]

    return [f"// Unsupported binding type: {d.type_name}"]


def _join(lines: list[str]) -> str:
    return "".join(line + "\n" for line in lines)
