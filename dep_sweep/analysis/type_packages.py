"""Type-package correlation: how @types/* packages earn their keep."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from dep_sweep.analysis.graph_models import PackageGraph
from dep_sweep.constants import TSCONFIG_NAME, TYPES_PREFIX, TYPESCRIPT_EXTENSIONS
from dep_sweep.matcher.patterns import types_runtime_name
from dep_sweep.matcher.usage import UsageMatcher
from dep_sweep.models import DependencyContext, DependencyInfo

COMPILER = "typescript"


def is_types_package(dependency: str) -> bool:
    return dependency.startswith(TYPES_PREFIX)


def typescript_files(files: list[Path]) -> list[Path]:
    return [f for f in files if f.suffix in TYPESCRIPT_EXTENSIONS]


def tsconfig_lists(context: DependencyContext, runtime: str) -> bool:
    """Whether tsconfig.json names *runtime* under ``types`` or ``typeRoots``."""
    tsconfig = context.configs.get(TSCONFIG_NAME)
    if not isinstance(tsconfig, dict):
        return False
    options = tsconfig.get("compilerOptions")
    if not isinstance(options, dict):
        return False
    types = options.get("types") or []
    type_roots = options.get("typeRoots") or []
    if isinstance(types, list) and runtime in types:
        return True
    return isinstance(type_roots, list) and any(
        isinstance(root, str) and runtime in root for root in type_roots
    )


class TypesUsageMatcher:
    """Matches a types package through its own name or the runtime package it describes."""

    def __init__(self, matcher: UsageMatcher, runtime: str):
        self.matcher = matcher
        self.runtime = runtime

    async def is_used(self, dependency: str, file_path: Path, context: DependencyContext) -> bool:
        if await self.matcher.is_used(dependency, file_path, context):
            return True
        return await self.matcher.is_used(self.runtime, file_path, context)


class TypePackageCorrelator:
    """Applies the non-import rules that keep a types package."""

    def apply_static_rules(
        self,
        dependency: str,
        info: DependencyInfo,
        *,
        context: DependencyContext,
        files: list[Path],
        top_level: set[str],
        graph: PackageGraph,
    ) -> bool:
        """Fill in requirers for *dependency*; True when no file scan is needed."""
        runtime = types_runtime_name(dependency)
        has_ts = bool(typescript_files(files))

        if runtime == "node" and has_ts:
            info.pinned_by = COMPILER
            info.supported_by = COMPILER
            return True

        if runtime in top_level and runtime != dependency:
            info.required_by_packages.add(runtime)

        if has_ts and tsconfig_lists(context, runtime):
            info.pinned_by = COMPILER
            info.supported_by = COMPILER

        declarers = graph.peer_declarers(dependency)
        if declarers:
            info.pinned_by = info.pinned_by or declarers[0]
            info.supported_by = info.supported_by or declarers[0]

        return False

    def resolve_support(
        self, dependency: str, infos: Mapping[str, DependencyInfo],
    ) -> str | None:
        """Package that keeps *dependency* alive, once every dependency has been analyzed."""
        info = infos.get(dependency)
        if info is None:
            return None
        runtime = types_runtime_name(dependency)
        runtime_info = infos.get(runtime)
        if runtime_info is not None and runtime_info.is_directly_used:
            info.supported_by = runtime
        return info.supported_by
