"""Data models for the dependency analysis engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, NamedTuple

from dep_sweep.constants import DEFAULT_SKIP_DIRS

# Key under which the root manifest is always stored in DependencyContext.configs
MANIFEST_KEY = "package.json"


@dataclass
class DependencyContext:
    """Per-analysis bundle shared by every usage check."""
    project_root: Path
    scripts: dict[str, str] = field(default_factory=dict)
    configs: dict[str, Any] = field(default_factory=dict)  # rel path -> parsed value or raw text
    dependency_graph: dict[str, set[str]] = field(default_factory=dict)  # package -> its own deps

    @property
    def manifest(self) -> Any:
        return self.configs.get(MANIFEST_KEY)


@dataclass
class DependencyInfo:
    """Usage evidence gathered for one declared dependency."""
    used_in_files: list[Path] = field(default_factory=list)
    required_by_packages: set[str] = field(default_factory=set)
    has_sub_dependency_usage: bool = False
    supported_by: str | None = None  # only set for @types/* packages
    pinned_by: str | None = None  # compiler or peer declarer keeping an @types/* package

    @property
    def is_directly_used(self) -> bool:
        return bool(self.used_in_files) or self.pinned_by is not None

    def add_usage(self, file_path: Path) -> None:
        if file_path not in self.used_in_files:
            self.used_in_files.append(file_path)


class CacheKey(NamedTuple):
    project_root: str
    dependency: str


@dataclass
class ScanOutcome:
    """Result of scanning the file corpus for one dependency."""
    files: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)

    @property
    def errors(self) -> int:
        return len(self.failed)


@dataclass
class AnalysisConfig:
    """Configuration for a dependency analysis run."""
    project_root: Path = field(default_factory=lambda: Path("."))
    files: list[Path] | None = None  # explicit corpus; discovered when None
    ignore_patterns: list[str] = field(default_factory=list)
    skip_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_SKIP_DIRS))
    safe_packages: list[str] = field(default_factory=list)
    aggressive: bool = False
    check_sub_dependencies: bool = False


@dataclass
class AnalysisResult:
    """Everything the engine reports back to its caller."""
    project_root: Path
    dependencies: list[str] = field(default_factory=list)
    unused: list[str] = field(default_factory=list)
    removable: list[str] = field(default_factory=list)
    usage: dict[str, list[Path]] = field(default_factory=dict)
    supported_by: dict[str, str] = field(default_factory=dict)
    sub_dependency_usage: dict[str, bool] = field(default_factory=dict)
    errors: int = 0
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        root = self.project_root
        return {
            "project_root": str(root),
            "dependencies": list(self.dependencies),
            "unused": list(self.unused),
            "removable": list(self.removable),
            "usage": {
                dep: [relative_path(p, root) for p in files]
                for dep, files in self.usage.items()
            },
            "supported_by": dict(self.supported_by),
            "errors": self.errors,
            "warnings": list(self.warnings),
        }


def relative_path(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)
