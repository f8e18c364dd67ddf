"""Tests for the click CLI."""

import json

from click.testing import CliRunner

from dep_sweep import __version__
from dep_sweep.cli import cli


def _project(make_project):
    return make_project(
        {"dependencies": {"lodash": "4", "react": "18", "tslib": "2"}},
        {"src/index.js": "import React from 'react';\n"},
    )


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_scan_lists_removable(make_project):
    root = _project(make_project)
    result = CliRunner().invoke(cli, ["scan", str(root), "--no-progress"])
    assert result.exit_code == 0, result.output
    assert "Unused dependencies found" in result.stdout
    assert "- lodash" in result.stdout
    assert "- react" not in result.stdout
    assert "- tslib" not in result.stdout


def test_scan_aggressive_and_safe(make_project):
    root = _project(make_project)
    result = CliRunner().invoke(cli, ["scan", str(root), "--no-progress", "-a", "--safe", "lodash"])
    assert result.exit_code == 0, result.output
    assert "- tslib" in result.stdout
    assert "- lodash" not in result.stdout


def test_scan_nothing_unused(make_project):
    root = make_project(
        {"dependencies": {"react": "18"}},
        {"src/index.js": "import React from 'react';\n"},
    )
    result = CliRunner().invoke(cli, ["scan", str(root), "--no-progress"])
    assert result.exit_code == 0
    assert "No unused dependencies found" in result.stdout


def test_scan_json(make_project):
    root = _project(make_project)
    result = CliRunner().invoke(cli, ["scan", str(root), "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["unused"] == ["lodash", "tslib"]
    assert data["removable"] == ["lodash"]
    assert data["usage"]["react"] == ["src/index.js"]


def test_scan_ignore_pattern(make_project):
    root = _project(make_project)
    result = CliRunner().invoke(cli, ["scan", str(root), "--json", "--ignore", "src/*"])
    data = json.loads(result.stdout)
    assert "react" in data["unused"]


def test_scan_verbose_usage_table(make_project):
    root = _project(make_project)
    result = CliRunner().invoke(cli, ["scan", str(root), "--no-progress", "-v"])
    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert any(line.startswith("react") and "src/index.js" in line for line in lines)
    assert any(line.startswith("lodash") and "Not used" in line for line in lines)


def test_scan_without_manifest(tmp_path):
    result = CliRunner().invoke(cli, ["scan", str(tmp_path), "--no-progress"])
    assert result.exit_code == 1
    assert "Error" in result.output
