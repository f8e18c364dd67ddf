import json
from pathlib import Path

import pytest


def write_project(root: Path, manifest: dict, files: dict[str, str | bytes] | None = None,
                  installed: dict[str, dict] | None = None) -> Path:
    """Lay out a project: package.json, source files and node_modules manifests."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "package.json").write_text(json.dumps(manifest, indent=2))
    for rel, content in (files or {}).items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
    for name, pkg_manifest in (installed or {}).items():
        pkg_dir = root / "node_modules" / name
        pkg_dir.mkdir(parents=True, exist_ok=True)
        (pkg_dir / "package.json").write_text(json.dumps({"name": name, **pkg_manifest}))
    return root.resolve()


@pytest.fixture
def make_project(tmp_path):
    def _make(manifest, files=None, installed=None):
        return write_project(tmp_path / "project", manifest, files, installed)
    return _make
