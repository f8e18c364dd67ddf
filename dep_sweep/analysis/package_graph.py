"""Installed-package graph builder: reads every manifest under node_modules."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dep_sweep.analysis.graph_models import PackageGraph
from dep_sweep.constants import INSTALLED_REQUIRE_SECTIONS, MANIFEST_NAME, NODE_MODULES

logger = logging.getLogger(__name__)


def list_installed_packages(node_modules: Path) -> list[str]:
    """Package names installed directly under node_modules, including one scope level."""
    if not node_modules.is_dir():
        return []

    packages: list[str] = []
    for entry in sorted(node_modules.iterdir()):
        if not entry.is_dir() or entry.name.startswith("."):
            continue
        if entry.name.startswith("@"):
            for sub in sorted(entry.iterdir()):
                if sub.is_dir():
                    packages.append(f"{entry.name}/{sub.name}")
        else:
            packages.append(entry.name)
    return packages


def _read_package_manifest(path: Path) -> dict:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("manifest is not a JSON object")
    return data


def _section_names(manifest: dict, section: str) -> set[str]:
    entries = manifest.get(section)
    return set(entries) if isinstance(entries, dict) else set()


class PackageGraphBuilder:
    """Build the requires-graph of everything installed in a project."""

    async def build(self, project_root: Path) -> PackageGraph:
        node_modules = project_root / NODE_MODULES
        packages = await asyncio.to_thread(list_installed_packages, node_modules)

        results = await asyncio.gather(
            *(
                asyncio.to_thread(_read_package_manifest, node_modules / pkg / MANIFEST_NAME)
                for pkg in packages
            ),
            return_exceptions=True,
        )

        graph = PackageGraph()
        for pkg, manifest in zip(packages, results):
            if isinstance(manifest, BaseException):
                logger.debug("Skipping installed package %s: %s", pkg, manifest)
                graph.skipped.append(pkg)
                continue
            requires: set[str] = set()
            for section in INSTALLED_REQUIRE_SECTIONS:
                requires |= _section_names(manifest, section)
            graph.add_package(pkg, requires, _section_names(manifest, "peerDependencies"))

        logger.info(
            "Package graph: %d installed package(s), %d skipped",
            len(graph.forward), len(graph.skipped),
        )
        return graph
