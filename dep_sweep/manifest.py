"""Project manifest reading and declared-dependency listing."""

from __future__ import annotations

import json
from pathlib import Path

from dep_sweep.constants import DEPENDENCY_SECTIONS, MANIFEST_NAME


class ManifestError(Exception):
    """The project manifest is missing or cannot be parsed."""


def read_manifest(path: Path) -> dict:
    """Read and parse a package manifest.

    A directory is accepted and resolved to its ``package.json``.
    """
    if path.is_dir():
        path = path / MANIFEST_NAME
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e

    try:
        data = json.loads(raw or "{}")
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"{path} does not contain a JSON object")
    return data


def dependency_sort_key(name: str) -> tuple[str, str]:
    """Case-insensitive ordering that ignores a leading scope marker."""
    return (name.removeprefix("@").casefold(), name)


def declared_dependencies(manifest: dict) -> list[str]:
    """All declared dependency names across every section, sorted and de-duplicated."""
    names: list[str] = []
    seen: set[str] = set()
    for section in DEPENDENCY_SECTIONS:
        entries = manifest.get(section)
        if not isinstance(entries, dict):
            continue
        for name in entries:
            if name not in seen:
                seen.add(name)
                names.append(name)
    names.sort(key=dependency_sort_key)
    return names


def manifest_scripts(manifest: dict) -> dict[str, str]:
    scripts = manifest.get("scripts")
    if not isinstance(scripts, dict):
        return {}
    return {name: cmd for name, cmd in scripts.items() if isinstance(cmd, str)}
