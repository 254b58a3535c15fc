"""Marker-delimited merge of generated regions into an existing view file.

The merge never parses the language. It locates the first class declaration
with a regex, finds its body by counting braces from the opening brace to the
matching closing brace, and searches for region markers only inside that body.
Braces inside string/char literals and comments are not counted.

Limitation: one top-level class per file. Nested types that repeat the marker
text, or a second class declared before the view class, confuse the body
search.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator

from viewbind.binding.discover import BindingDescriptor
from viewbind.codegen import (
    ASSIGN_END,
    ASSIGN_START,
    FIELDS_END,
    FIELDS_START,
    PROPS_END,
    PROPS_START,
)
from viewbind.codegen.templates import (
    INDENT,
    render_artifact,
    render_fields,
    render_init,
    render_properties,
)
from viewbind.settings import GenerationSettings

logger = logging.getLogger(__name__)

CLASS_DECL_RE = re.compile(r"\bclass\s+([A-Za-z_][A-Za-z0-9_]*)")
BASE_CLAUSE_RE = re.compile(r"\s*:\s*([A-Za-z_][\w.]*(?:<[^<>{};]*>)?)")
NAMESPACE_RE = re.compile(r"\bnamespace\s+([A-Za-z_][\w.]*)")
FIELD_DECL_RE = re.compile(
    r"^\s*(?:\[[^\]]*\]\s*)*(?:(?:private|public|protected|internal|readonly)\s+)+"
    r"([A-Za-z_][\w.<>,\[\] ]*?)\s+([A-Za-z_]\w*)\s*(?:=[^;]*)?;"
)


@dataclass(frozen=True)
class Region:
    name: str
    start: str
    end: str


FIELDS = Region("fields", FIELDS_START, FIELDS_END)
PROPS = Region("props", PROPS_START, PROPS_END)
ASSIGN = Region("assign", ASSIGN_START, ASSIGN_END)


def merge_artifact(
    existing: str | None,
    class_name: str,
    descriptors: list[BindingDescriptor],
    settings: GenerationSettings,
    recovered: list[str] | None = None,
) -> str:
    """Produce the new text of a view file.

    Without existing text a complete skeleton is rendered. Otherwise the class
    is renamed and the Fields, Properties and Init regions are replaced or
    reinserted; every other byte is kept.

    Args:
        existing: Current file text, or None when the file does not exist.
        class_name: Class name the view must declare.
        descriptors: Final (renamed) field descriptors.
        settings: Generation settings.
        recovered: When given, names of regions whose markers were missing
            and had to be reinserted are appended to it.
    """
    if existing is None or not existing.strip():
        return render_artifact(class_name, descriptors, settings)

    text = rename_class(existing, class_name, settings.base_type)
    indent = member_indent(text)

    sections = [
        (FIELDS, render_fields(descriptors, settings, indent)),
        (PROPS, render_properties(descriptors, settings, indent)),
        (ASSIGN, render_init(descriptors, settings, indent)),
    ]
    for region, section in sections:
        text, found = upsert_region(text, region, section)
        if not found and section:
            if recovered is not None:
                recovered.append(region.name)
            if settings.log_marker_recovery:
                logger.warning(f"Markers for region '{region.name}' missing in {class_name}; reinserted")
    return text


# ── Class declaration ─────────────────────────────────────────────

def find_class_declaration(source: str) -> re.Match | None:
    """First ``class Name`` outside comments and string literals."""
    code = {i for i, _ in _code_positions(source)}
    for m in CLASS_DECL_RE.finditer(source):
        if m.start() in code:
            return m
    return None


def rename_class(source: str, class_name: str, base_type: str = "") -> str:
    """Rename the first class and point its first base type at ``base_type``."""
    m = find_class_declaration(source)
    if m is None:
        return source
    head = source[:m.start(1)] + class_name
    rest = source[m.end(1):]
    if base_type:
        base = BASE_CLAUSE_RE.match(rest)
        if base:
            rest = rest[:base.start(1)] + base_type + rest[base.end(1):]
        else:
            rest = f" : {base_type}" + rest
    return head + rest


def find_class_body(source: str) -> tuple[int, int] | None:
    """Indices of the class's opening and matching closing brace."""
    m = find_class_declaration(source)
    if m is None:
        return None
    depth = 0
    open_idx = -1
    for idx, ch in _code_positions(source, m.end()):
        if ch == "{":
            if open_idx < 0:
                open_idx = idx
            depth += 1
        elif ch == "}" and open_idx >= 0:
            depth -= 1
            if depth == 0:
                return open_idx, idx
        elif ch == ";" and open_idx < 0:
            return None
    return None


def member_indent(source: str) -> str:
    """Indentation for class members: declaration indent plus one level."""
    m = find_class_declaration(source)
    if m is None:
        return INDENT
    line_start = source.rfind("\n", 0, m.start()) + 1
    prefix = source[line_start:m.start()]
    leading = prefix[:len(prefix) - len(prefix.lstrip(" \t"))]
    return leading + INDENT


# ── Regions ───────────────────────────────────────────────────────

def upsert_region(source: str, region: Region, section: str) -> tuple[str, bool]:
    """Replace ``region`` with ``section`` or insert it at its fallback spot.

    Returns the new text and whether both markers were found. An empty
    ``section`` removes a found region and inserts nothing otherwise.

    A start marker whose end marker was deleted by hand is unpaired. Its
    line is dropped before anything else happens, so it can never pair with
    the end marker of a region inserted later. The lines it used to open are
    kept as ordinary text, and the region counts as missing.
    """
    source, dropped = _drop_unpaired_starts(source, region)
    body = find_class_body(source)
    if body is None:
        if not section:
            return source, False
        sep = "" if source.endswith("\n") else "\n"
        return source + sep + section, False

    open_idx, close_idx = body
    span = find_region(source, region, open_idx + 1, close_idx)
    if span is not None:
        start, end = span
        return source[:start] + section + source[end:], not dropped

    if not section:
        return source, False

    if region == FIELDS:
        return _insert_after_line(source, open_idx, section), False

    if region == PROPS:
        fields_span = find_region(source, FIELDS, open_idx + 1, close_idx)
        if fields_span is not None:
            return _insert_at(source, fields_span[1], section), False
        assign_span = find_region(source, ASSIGN, open_idx + 1, close_idx)
        if assign_span is not None:
            return _insert_at(source, assign_span[0], section), False

    return _insert_before_line(source, close_idx, section), False


def find_region(source: str, region: Region, pos: int = 0, endpos: int | None = None) -> tuple[int, int] | None:
    """Span of whole lines from the start marker line through the end marker line.

    None when the region is absent or its first start marker is unpaired.
    """
    endpos = len(source) if endpos is None else endpos
    start = _marker_re(region.start).search(source, pos, endpos)
    if start is None:
        return None
    if _is_unpaired(source, region, start, endpos):
        return None
    end = _marker_re(region.end).search(source, start.end(), endpos)
    stop = end.end()
    if source.startswith("\n", stop):
        stop += 1
    return start.start(), stop


def read_region(source: str, region: Region) -> list[str] | None:
    """Lines strictly between a region's markers, or None if absent."""
    body = find_class_body(source)
    pos, endpos = (body[0] + 1, body[1]) if body else (0, len(source))
    span = find_region(source, region, pos, endpos)
    if span is None:
        return None
    lines = source[span[0]:span[1]].splitlines()
    return lines[1:-1]


def declared_fields(source: str) -> list[tuple[str, str]]:
    """``(type, name)`` pairs declared in the Fields region."""
    lines = read_region(source, FIELDS) or []
    found = []
    for line in lines:
        m = FIELD_DECL_RE.match(line)
        if m:
            found.append((m.group(1).strip(), m.group(2)))
    return found


def declared_namespace(source: str) -> str:
    code = {i for i, _ in _code_positions(source)}
    for m in NAMESPACE_RE.finditer(source):
        if m.start() in code:
            return m.group(1)
    return ""


# ── Internals ─────────────────────────────────────────────────────

def _marker_re(marker: str) -> re.Pattern:
    return re.compile(r"^[ \t]*" + re.escape(marker) + r"[ \t]*\r?$", re.MULTILINE)


def _is_unpaired(source: str, region: Region, start: re.Match, endpos: int) -> bool:
    """True when no end marker follows ``start`` before another start does."""
    end = _marker_re(region.end).search(source, start.end(), endpos)
    if end is None:
        return True
    return _marker_re(region.start).search(source, start.end(), end.start()) is not None


def _drop_unpaired_starts(source: str, region: Region) -> tuple[str, bool]:
    """Remove unpaired start marker lines of ``region`` from the class body."""
    dropped = False
    while True:
        body = find_class_body(source)
        if body is None:
            return source, dropped
        start = _marker_re(region.start).search(source, body[0] + 1, body[1])
        if start is None or not _is_unpaired(source, region, start, body[1]):
            return source, dropped
        stop = start.end()
        if source.startswith("\n", stop):
            stop += 1
        source = source[:start.start()] + source[stop:]
        logger.debug(f"Dropped unpaired start marker of region '{region.name}'")
        dropped = True


def _insert_at(source: str, pos: int, section: str) -> str:
    sep = "" if pos == 0 or source[pos - 1] == "\n" else "\n"
    return source[:pos] + sep + section + source[pos:]


def _insert_after_line(source: str, idx: int, section: str) -> str:
    """Insert on the line after ``idx``; split the line if code follows ``idx``."""
    nl = source.find("\n", idx)
    line_end = len(source) if nl < 0 else nl
    if source[idx + 1:line_end].strip():
        return source[:idx + 1] + "\n" + section + source[idx + 1:]
    if nl < 0:
        return source + "\n" + section
    return source[:nl + 1] + section + source[nl + 1:]


def _insert_before_line(source: str, idx: int, section: str) -> str:
    """Insert before the line holding ``idx``; split it if code precedes ``idx``."""
    line_start = source.rfind("\n", 0, idx) + 1
    if source[line_start:idx].strip():
        return source[:idx] + "\n" + section + source[idx:]
    return source[:line_start] + section + source[line_start:]


def _code_positions(source: str, start: int = 0) -> Iterator[tuple[int, str]]:
    """Yield ``(index, char)`` for characters outside comments and literals."""
    i = start
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "/" and source.startswith("//", i):
            nl = source.find("\n", i)
            i = n if nl < 0 else nl
            continue
        if ch == "/" and source.startswith("/*", i):
            close = source.find("*/", i + 2)
            i = n if close < 0 else close + 2
            continue
        if ch in "\"'":
            i = _skip_literal(source, i)
            continue
        yield i, ch
        i += 1


def _skip_literal(source: str, i: int) -> int:
    quote = source[i]
    verbatim = quote == '"' and i > 0 and source[i - 1] == "@"
    j = i + 1
    n = len(source)
    while j < n:
        c = source[j]
        if verbatim:
            if c == '"':
                if source.startswith('""', j):
                    j += 2
                    continue
                return j + 1
        else:
            if c == "\\":
                j += 2
                continue
            if c == quote:
                return j + 1
            if c == "\n":
                return j
        j += 1
    return n
