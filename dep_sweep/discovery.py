"""Candidate file corpus discovery."""

from __future__ import annotations

import fnmatch
from pathlib import Path

import pathspec

from dep_sweep.constants import DEFAULT_IGNORE_PATTERNS, DEFAULT_SKIP_DIRS, GITIGNORE_NAME


def collect_files(
    directory: Path,
    skip_dirs: list[str] | None = None,
    ignore_patterns: list[str] | None = None,
) -> list[Path]:
    """Recursively list candidate files under a project root.

    Honours the root ``.gitignore`` in addition to skip dirs and ignore globs.
    """
    directory = directory.resolve()
    skip = list(skip_dirs) if skip_dirs is not None else list(DEFAULT_SKIP_DIRS)
    ignore = [*DEFAULT_IGNORE_PATTERNS, *(ignore_patterns or [])]
    gitignore = load_gitignore(directory)

    files: list[Path] = []
    for path in sorted(directory.rglob("*")):
        if not path.is_file():
            continue
        rel = path.relative_to(directory)
        if _should_skip(rel, skip):
            continue
        if _is_ignored(rel, ignore):
            continue
        if gitignore is not None and gitignore.match_file(rel.as_posix()):
            continue
        files.append(path)
    return files


def load_gitignore(directory: Path) -> pathspec.GitIgnoreSpec | None:
    path = directory / GITIGNORE_NAME
    if not path.is_file():
        return None
    lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    return pathspec.GitIgnoreSpec.from_lines(lines)


def _should_skip(rel: Path, skip_dirs: list[str]) -> bool:
    for part in rel.parts[:-1]:
        for pattern in skip_dirs:
            if fnmatch.fnmatch(part, pattern):
                return True
    return False


def _is_ignored(rel: Path, patterns: list[str]) -> bool:
    posix = rel.as_posix()
    for pattern in patterns:
        if fnmatch.fnmatch(rel.name, pattern) or fnmatch.fnmatch(posix, pattern):
            return True
        # "dir" or "dir/**" style patterns
        prefix = pattern.rstrip("/*")
        if prefix and (posix == prefix or posix.startswith(prefix + "/")):
            return True
    return False
