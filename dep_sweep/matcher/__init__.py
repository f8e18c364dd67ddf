"""Usage matching: per-file evidence that a dependency is used."""

from __future__ import annotations

from dep_sweep.matcher.imports import ImportScanner, ImportVisitor
from dep_sweep.matcher.patterns import (
    generate_patterns,
    matches_dependency,
    scan_for_dependency,
    types_runtime_name,
)
from dep_sweep.matcher.usage import UsageMatcher, is_dependency_used_in_file, looks_binary

__all__ = [
    "ImportScanner",
    "ImportVisitor",
    "UsageMatcher",
    "generate_patterns",
    "is_dependency_used_in_file",
    "looks_binary",
    "matches_dependency",
    "scan_for_dependency",
    "types_runtime_name",
]
