"""Context builder: manifest scripts plus every parsed configuration file."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from dep_sweep.constants import CONFIG_NAME_RE, MANIFEST_NAME
from dep_sweep.manifest import manifest_scripts, read_manifest
from dep_sweep.models import MANIFEST_KEY, DependencyContext

logger = logging.getLogger(__name__)

_SCRIPT_EXTENSIONS = {".js", ".cjs", ".mjs"}
_YAML_EXTENSIONS = {".yaml", ".yml"}


def is_config_file(file_path: Path) -> bool:
    name = file_path.name.lower()
    return (
        "config" in name
        or name.startswith(".")
        or name == MANIFEST_NAME
        or CONFIG_NAME_RE.search(name) is not None
    )


def parse_config_text(file_path: Path, content: str) -> Any:
    """Parse configuration text by extension, degrading to the raw text.

    Script-like configs are kept as text and never evaluated.
    """
    ext = file_path.suffix.lower()
    if ext in _SCRIPT_EXTENSIONS:
        return content
    try:
        if ext in _YAML_EXTENSIONS:
            return yaml.safe_load(content)
        return json.loads(content)
    except (ValueError, yaml.YAMLError):
        return content


def parse_config_file(file_path: Path) -> Any:
    content = file_path.read_text(encoding="utf-8", errors="replace")
    return parse_config_text(file_path, content)


def config_key(file_path: Path, project_root: Path) -> str:
    """Root-relative POSIX key used for DependencyContext.configs."""
    try:
        return file_path.relative_to(project_root).as_posix()
    except ValueError:
        return file_path.as_posix()


async def build_context(
    project_root: Path,
    files: list[Path],
    manifest: dict | None = None,
) -> DependencyContext:
    """Build the DependencyContext for one analysis run."""
    project_root = project_root.resolve()
    if manifest is None:
        manifest = read_manifest(project_root / MANIFEST_NAME)

    config_files = [f for f in files if is_config_file(f)]
    results = await asyncio.gather(
        *(asyncio.to_thread(parse_config_file, f) for f in config_files),
        return_exceptions=True,
    )

    configs: dict[str, Any] = {}
    for file_path, parsed in zip(config_files, results):
        if isinstance(parsed, BaseException):
            logger.debug("Skipping unreadable config %s: %s", file_path, parsed)
            continue
        configs[config_key(file_path, project_root)] = parsed

    # The manifest always wins over whatever was read from disk for the same key
    configs[MANIFEST_KEY] = manifest
    logger.debug("Context built with %d config file(s)", len(configs))

    return DependencyContext(
        project_root=project_root,
        scripts=manifest_scripts(manifest),
        configs=configs,
    )
