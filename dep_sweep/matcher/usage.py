"""Usage matcher: decides whether one file is evidence that a dependency is used."""

from __future__ import annotations

import asyncio
from pathlib import Path

from dep_sweep.constants import MANIFEST_NAME
from dep_sweep.context import config_key
from dep_sweep.matcher.imports import ImportScanner
from dep_sweep.matcher.patterns import (
    dynamic_import_pattern,
    find_pattern_family,
    matches_dependency,
    scan_for_dependency,
    whole_word_pattern,
)
from dep_sweep.models import DependencyContext

_SNIFF_BYTES = 8000
_TEXT_CONTROL = {7, 8, 9, 10, 12, 13, 27}


def looks_binary(data: bytes) -> bool:
    """Heuristic binary sniff on the head of a file."""
    chunk = data[:_SNIFF_BYTES]
    if not chunk:
        return False
    if b"\x00" in chunk:
        return True
    control = sum(1 for b in chunk if b < 32 and b not in _TEXT_CONTROL)
    if control / len(chunk) > 0.1:
        return True
    try:
        chunk.decode("utf-8")
        return False
    except UnicodeDecodeError as e:
        # A multi-byte character cut off by the sniff window is still text
        if e.start >= len(chunk) - 3 and e.reason == "unexpected end of data":
            return False
    high = sum(1 for b in chunk if b >= 0x80)
    return high / len(chunk) > 0.3


def _script_mentions(scripts: dict[str, str], dependency: str) -> bool:
    for command in scripts.values():
        if dependency in command.split():
            return True
    return False


class UsageMatcher:
    """Checks the usage signals for one (dependency, file) pair in a fixed order.

    Holds only a parser cache; every answer depends on the arguments alone.
    """

    def __init__(self, import_scanner: ImportScanner | None = None):
        self.import_scanner = import_scanner or ImportScanner()

    async def is_used(
        self, dependency: str, file_path: Path, context: DependencyContext,
    ) -> bool:
        if file_path == context.project_root / MANIFEST_NAME:
            # The manifest declares every dependency by name; only its values count
            return (
                self._manifest_mentions(dependency, context)
                or _script_mentions(context.scripts, dependency)
            )
        if self._config_mentions(dependency, file_path, context):
            return True
        if _script_mentions(context.scripts, dependency):
            return True

        # Read errors propagate; the scheduler counts them
        data = await asyncio.to_thread(file_path.read_bytes)
        if looks_binary(data):
            return False
        content = data.decode("utf-8", errors="replace")

        if dynamic_import_pattern(dependency).search(content):
            return True

        if self.import_scanner.supports(file_path):
            for source in self.import_scanner.iter_sources(file_path, data):
                if matches_dependency(source, dependency):
                    return True

        family = find_pattern_family(dependency)
        if family is not None and whole_word_pattern(dependency).search(content):
            return True

        return False

    @staticmethod
    def _manifest_mentions(dependency: str, context: DependencyContext) -> bool:
        manifest = context.manifest
        if manifest is None:
            return False
        return scan_for_dependency(manifest, dependency)

    @staticmethod
    def _config_mentions(
        dependency: str, file_path: Path, context: DependencyContext,
    ) -> bool:
        config = context.configs.get(config_key(file_path, context.project_root))
        if config is None:
            return False
        if isinstance(config, str):
            return dependency in config
        return scan_for_dependency(config, dependency)


async def is_dependency_used_in_file(
    dependency: str,
    file_path: Path,
    context: DependencyContext,
    matcher: UsageMatcher | None = None,
) -> bool:
    return await (matcher or UsageMatcher()).is_used(dependency, file_path, context)
