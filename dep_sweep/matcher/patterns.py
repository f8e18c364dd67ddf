"""Name-based matching heuristics: generated patterns, import source comparison, tool families."""

from __future__ import annotations

import fnmatch
import functools
import re
from typing import Any

from dep_sweep.constants import NAME_PATTERNS, PATTERN_FAMILIES, TYPES_PREFIX, PatternFamily

_SEPARATORS = "[-./]"


@functools.lru_cache(maxsize=1024)
def generate_patterns(dependency: str) -> tuple[re.Pattern[str], ...]:
    """Regexes matching string values that reference *dependency*.

    Deliberately permissive: a false "used" only keeps a dependency around.
    """
    dep = re.escape(dependency)
    patterns: list[re.Pattern[str]] = []

    for kind, match, variations in NAME_PATTERNS:
        if kind == "exact":
            patterns.append(re.compile(rf"^{dep}$"))
        elif kind == "prefix":
            patterns.append(re.compile(rf"^{re.escape(match)}{dep}(/.*)?$"))
        elif kind == "suffix":
            for suffix in (match, *variations):
                patterns.append(re.compile(rf"^{dep}{_SEPARATORS}{suffix}$"))
                patterns.append(re.compile(rf"^{dep}{_SEPARATORS}{suffix}s$"))
        elif kind == "combined":
            for part in (match, *variations):
                if not part:
                    continue
                patterns.append(re.compile(rf"^{dep}{_SEPARATORS}{part}$"))
                patterns.append(re.compile(rf"^{part}{_SEPARATORS}{dep}$"))
        elif kind == "regex":
            patterns.append(re.compile(rf"^{dep}{match}", re.IGNORECASE))

    return tuple(patterns)


def scan_for_dependency(value: Any, dependency: str) -> bool:
    """Recursively search a JSON-like value's strings for *dependency*.

    Mapping keys are not inspected, only values.
    """
    stack = [value]
    patterns = generate_patterns(dependency)
    while stack:
        current = stack.pop()
        if isinstance(current, str):
            if any(p.search(current) for p in patterns):
                return True
        elif isinstance(current, dict):
            stack.extend(current.values())
        elif isinstance(current, (list, tuple)):
            stack.extend(current)
    return False


def types_runtime_name(dependency: str) -> str:
    """Runtime package described by an @types package (babel__core -> @babel/core)."""
    base = dependency.removeprefix(TYPES_PREFIX)
    if "__" in base:
        return "@" + base.replace("__", "/", 1)
    return base


def _unscoped(name: str) -> str:
    if name.startswith("@"):
        parts = name.split("/", 1)
        return parts[1] if len(parts) > 1 else name
    return name


def _same_or_subpath(source: str, name: str) -> bool:
    return source == name or source.startswith(name + "/")


def matches_dependency(import_source: str, dependency: str) -> bool:
    """Whether an import specifier refers to *dependency*."""
    if _same_or_subpath(import_source, dependency):
        return True
    if _same_or_subpath(_unscoped(import_source), _unscoped(dependency)):
        return True
    if dependency.startswith(TYPES_PREFIX):
        return _same_or_subpath(import_source, dependency.removeprefix(TYPES_PREFIX))
    return False


def _flexible(dependency: str) -> str:
    # "/", "@" and "-" are interchangeable in textual references
    return "".join("[/@-]" if ch in "/@-" else re.escape(ch) for ch in dependency)


@functools.lru_cache(maxsize=1024)
def dynamic_import_pattern(dependency: str) -> re.Pattern[str]:
    return re.compile(
        rf"""import\s*\(\s*['"`]{_flexible(dependency)}(?:/[^'"`]*)?['"`]\s*\)""",
        re.IGNORECASE,
    )


@functools.lru_cache(maxsize=1024)
def whole_word_pattern(dependency: str) -> re.Pattern[str]:
    # \b cannot anchor next to a leading "@", so fall back to "no word character before"
    start = r"\b" if re.match(r"\w", dependency) else r"(?<!\w)"
    return re.compile(rf"{start}{_flexible(dependency)}\b", re.IGNORECASE)


def find_pattern_family(dependency: str) -> PatternFamily | None:
    """The tool family *dependency* belongs to, if any."""
    bare = dependency.lstrip("@")
    for family in PATTERN_FAMILIES:
        if not any(bare.startswith(base) for base in family.bases):
            continue
        if any(fnmatch.fnmatchcase(dependency, glob) for glob in family.members):
            return family
    return None
