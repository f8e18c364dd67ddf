"""Per-dependency evidence gathering with a run-scoped cache."""

from __future__ import annotations

import logging
from pathlib import Path

from dep_sweep.analysis.graph_models import PackageGraph
from dep_sweep.analysis.type_packages import (
    TypePackageCorrelator,
    TypesUsageMatcher,
    is_types_package,
    typescript_files,
)
from dep_sweep.matcher.patterns import types_runtime_name
from dep_sweep.matcher.usage import UsageMatcher
from dep_sweep.models import CacheKey, DependencyContext, DependencyInfo
from dep_sweep.scheduler import ScanProgress, process_files_in_parallel

logger = logging.getLogger(__name__)


class DependencyInfoCache:
    """DependencyInfo records keyed by (project root, dependency)."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, DependencyInfo] = {}

    def get(self, key: CacheKey) -> DependencyInfo | None:
        return self._entries.get(key)

    def put(self, key: CacheKey, info: DependencyInfo) -> DependencyInfo:
        # First writer wins so a key always maps to one object
        return self._entries.setdefault(key, info)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()


class DependencyAnalyzer:
    """Computes DependencyInfo for declared dependencies of one project."""

    def __init__(
        self,
        context: DependencyContext,
        files: list[Path],
        top_level: set[str],
        graph: PackageGraph,
        cache: DependencyInfoCache | None = None,
        matcher: UsageMatcher | None = None,
        check_sub_dependencies: bool = False,
        batch_size: int | None = None,
    ):
        self.context = context
        self.files = files
        self.top_level = top_level
        self.graph = graph
        self.cache = cache if cache is not None else DependencyInfoCache()
        self.matcher = matcher or UsageMatcher()
        self.correlator = TypePackageCorrelator()
        self.check_sub_dependencies = check_sub_dependencies
        self.batch_size = batch_size
        self.failed_files: set[Path] = set()

    @property
    def errors(self) -> int:
        """Distinct files that could not be processed during this run."""
        return len(self.failed_files)

    def cache_key(self, dependency: str) -> CacheKey:
        return CacheKey(str(self.context.project_root), dependency)

    async def get_dependency_info(
        self, dependency: str, on_progress: ScanProgress | None = None,
    ) -> DependencyInfo:
        key = self.cache_key(dependency)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if is_types_package(dependency):
            info = await self._analyze_types_package(dependency, on_progress)
        else:
            info = await self._analyze_package(dependency, on_progress)
        return self.cache.put(key, info)

    async def _scan(self, files, dependency, matcher, on_progress=None) -> list[Path]:
        outcome = await process_files_in_parallel(
            files, dependency, self.context, matcher,
            on_progress=on_progress, batch_size=self.batch_size,
        )
        self.failed_files.update(outcome.failed)
        return outcome.files

    async def _analyze_package(
        self, dependency: str, on_progress: ScanProgress | None,
    ) -> DependencyInfo:
        info = DependencyInfo()
        for file_path in await self._scan(self.files, dependency, self.matcher, on_progress):
            info.add_usage(file_path)

        info.required_by_packages = self.graph.find_top_level_dependents(
            dependency, self.top_level,
        )

        if self.check_sub_dependencies:
            info.has_sub_dependency_usage = await self._sub_dependency_used(dependency)

        logger.debug(
            "%s: %d file(s), required by %s",
            dependency, len(info.used_in_files), sorted(info.required_by_packages) or "-",
        )
        return info

    async def _analyze_types_package(
        self, dependency: str, on_progress: ScanProgress | None,
    ) -> DependencyInfo:
        info = DependencyInfo()
        info.required_by_packages = self.graph.find_top_level_dependents(
            dependency, self.top_level,
        )
        ts_files = typescript_files(self.files)
        done = self.correlator.apply_static_rules(
            dependency, info,
            context=self.context,
            files=self.files,
            top_level=self.top_level,
            graph=self.graph,
        )
        if done:
            if on_progress:
                on_progress(len(ts_files), len(ts_files))
            return info

        matcher = TypesUsageMatcher(self.matcher, types_runtime_name(dependency))
        for file_path in await self._scan(ts_files, dependency, matcher, on_progress):
            info.add_usage(file_path)
        return info

    async def _sub_dependency_used(self, dependency: str) -> bool:
        for sub in sorted(self.context.dependency_graph.get(dependency, ())):
            if await self._scan(self.files, sub, self.matcher):
                return True
        return False
