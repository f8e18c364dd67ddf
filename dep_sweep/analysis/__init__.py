"""Dependency graph, type-package correlation and unused-set resolution."""

from __future__ import annotations

from dep_sweep.analysis.dependency_info import DependencyAnalyzer, DependencyInfoCache
from dep_sweep.analysis.graph_models import PackageGraph
from dep_sweep.analysis.package_graph import PackageGraphBuilder
from dep_sweep.analysis.resolver import filter_removable, resolve_unused
from dep_sweep.analysis.type_packages import TypePackageCorrelator

__all__ = [
    "DependencyAnalyzer",
    "DependencyInfoCache",
    "PackageGraph",
    "PackageGraphBuilder",
    "TypePackageCorrelator",
    "filter_removable",
    "resolve_unused",
]
