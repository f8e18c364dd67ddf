"""Analysis orchestrator: context -> graph -> per-dependency evidence -> unused set."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from dep_sweep.analysis.dependency_info import DependencyAnalyzer, DependencyInfoCache
from dep_sweep.analysis.package_graph import PackageGraphBuilder
from dep_sweep.analysis.resolver import filter_removable, resolve_unused
from dep_sweep.analysis.type_packages import is_types_package
from dep_sweep.constants import MANIFEST_NAME
from dep_sweep.context import build_context
from dep_sweep.discovery import collect_files
from dep_sweep.manifest import declared_dependencies, dependency_sort_key, read_manifest
from dep_sweep.models import AnalysisConfig, AnalysisResult, DependencyInfo

logger = logging.getLogger(__name__)

# (stage, dependency, current, total)
ProgressCallback = Callable[[str, str, int, int], None]


async def run_analysis_async(
    config: AnalysisConfig,
    progress: ProgressCallback | None = None,
    cache: DependencyInfoCache | None = None,
) -> AnalysisResult:
    """Classify every declared dependency of the project at ``config.project_root``.

    Raises ManifestError when the project manifest cannot be read.
    """
    root = config.project_root.resolve()
    manifest = read_manifest(root / MANIFEST_NAME)
    dependencies = declared_dependencies(manifest)

    if config.files is None:
        files = await asyncio.to_thread(
            collect_files, root, config.skip_dirs, config.ignore_patterns,
        )
    else:
        files = [f if f.is_absolute() else root / f for f in config.files]
    logger.info("Analyzing %d dependencies across %d file(s)", len(dependencies), len(files))

    context = await build_context(root, files, manifest)
    graph = await PackageGraphBuilder().build(root)
    context.dependency_graph.update(graph.forward)

    analyzer = DependencyAnalyzer(
        context,
        files,
        top_level=set(dependencies),
        graph=graph,
        cache=cache,
        check_sub_dependencies=config.check_sub_dependencies,
    )

    infos: dict[str, DependencyInfo] = {}
    for index, dep in enumerate(dependencies):
        if progress:
            progress("Analyzing", dep, index, len(dependencies))

        def on_files(processed: int, total: int, dep=dep) -> None:
            logger.debug("%s: %d/%d files", dep, processed, total)

        infos[dep] = await analyzer.get_dependency_info(dep, on_files)

    if progress:
        progress("Analyzing", "", len(dependencies), len(dependencies))

    unused = resolve_unused(infos)

    supported_by: dict[str, str] = {}
    for dep in dependencies:
        if is_types_package(dep):
            supporter = analyzer.correlator.resolve_support(dep, infos)
            if supporter:
                supported_by[dep] = supporter

    result = AnalysisResult(
        project_root=root,
        dependencies=dependencies,
        unused=sorted(unused, key=dependency_sort_key),
        removable=filter_removable(unused, config.safe_packages, config.aggressive),
        usage={dep: list(info.used_in_files) for dep, info in infos.items()},
        supported_by=supported_by,
        errors=analyzer.errors,
    )
    if config.check_sub_dependencies:
        result.sub_dependency_usage = {
            dep: info.has_sub_dependency_usage for dep, info in infos.items()
        }
    if analyzer.errors:
        result.warnings.append(f"{analyzer.errors} file(s) had processing errors")
    if graph.skipped:
        result.warnings.append(
            f"{len(graph.skipped)} installed package manifest(s) could not be read"
        )
    return result


def run_analysis(
    config: AnalysisConfig,
    progress: ProgressCallback | None = None,
    cache: DependencyInfoCache | None = None,
) -> AnalysisResult:
    """Synchronous entry point around run_analysis_async."""
    return asyncio.run(run_analysis_async(config, progress, cache))
