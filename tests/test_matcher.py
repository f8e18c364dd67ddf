"""Tests for the usage matcher signals."""

import asyncio
from pathlib import Path

import pytest

from dep_sweep.context import build_context
from dep_sweep.matcher import ImportScanner, UsageMatcher, is_dependency_used_in_file, looks_binary


def _used(project: Path, dependency: str, rel: str) -> bool:
    files = sorted(p for p in project.rglob("*") if p.is_file())
    context = asyncio.run(build_context(project, files))
    return asyncio.run(UsageMatcher().is_used(dependency, project / rel, context))


@pytest.fixture
def matcher():
    return UsageMatcher()


# ── Syntax-tree imports ──────────────────────────────────────

class TestImports:
    def test_static_import(self, make_project):
        root = make_project({}, {"src/a.js": "import x from 'lodash';\n"})
        assert _used(root, "lodash", "src/a.js")

    def test_static_import_subpath(self, make_project):
        root = make_project({}, {"src/a.js": "import get from 'lodash/get';\n"})
        assert _used(root, "lodash", "src/a.js")

    def test_require(self, make_project):
        root = make_project({}, {"src/a.cjs": "const x = require(\"express\");\n"})
        assert _used(root, "express", "src/a.cjs")

    def test_dynamic_import(self, make_project):
        root = make_project({}, {"src/a.mjs": "const m = await import('chalk');\n"})
        assert _used(root, "chalk", "src/a.mjs")

    def test_import_type(self, make_project):
        root = make_project({}, {"src/a.ts": "import type { Request } from 'express';\nexport {}\n"})
        assert _used(root, "express", "src/a.ts")

    def test_reexport(self, make_project):
        root = make_project({}, {"src/index.ts": "export * from 'zod';\n"})
        assert _used(root, "zod", "src/index.ts")

    def test_external_module_reference(self, make_project):
        root = make_project({}, {"src/a.ts": "import fs = require('fs-extra');\n"})
        assert _used(root, "fs-extra", "src/a.ts")

    def test_jsx_file(self, make_project):
        source = (
            "import React from 'react';\n"
            "import { Button } from '@mui/material/Button';\n"
            "export const App = () => <Button>hi</Button>;\n"
        )
        root = make_project({}, {"src/App.tsx": source})
        assert _used(root, "react", "src/App.tsx")
        assert _used(root, "@mui/material", "src/App.tsx")

    def test_scoped_subpath(self, make_project):
        root = make_project({}, {"src/a.js": "import x from '@scope/name/subpath';\n"})
        assert _used(root, "@scope/name", "src/a.js")

    def test_no_match_for_substring_package(self, make_project):
        root = make_project({}, {"src/a.js": "import x from 'lodash-es';\n"})
        assert not _used(root, "lodash", "src/a.js")

    def test_string_mention_is_not_an_import(self, make_project):
        root = make_project({}, {"src/a.js": "const name = 'lodash';\n"})
        assert not _used(root, "lodash", "src/a.js")

    def test_broken_syntax_is_not_fatal(self, make_project):
        root = make_project({}, {"src/a.js": "import {{{ from 'lodash'\nfunction ((\n"})
        # Tolerated either way; must simply not raise
        assert _used(root, "react", "src/a.js") is False


def test_import_scanner_sources():
    scanner = ImportScanner()
    source = (
        b"import a from 'a';\n"
        b"const b = require('b');\n"
        b"const c = import('c');\n"
        b"export { d } from 'd';\n"
        b"const e = require(variable);\n"
    )
    sources = list(scanner.iter_sources(Path("x.js"), source))
    assert sorted(sources) == ["a", "b", "c", "d"]


def test_import_scanner_skips_unknown_extensions():
    scanner = ImportScanner()
    assert not scanner.supports(Path("README.md"))
    assert list(scanner.iter_sources(Path("README.md"), b"import a from 'a'")) == []


# ── Manifest, config and script signals ──────────────────────

class TestConfigSignals:
    def test_manifest_field(self, make_project):
        manifest = {
            "devDependencies": {"prettier-plugin-tailwindcss": "^0.5.0"},
            "prettier": {"plugins": ["prettier-plugin-tailwindcss"]},
        }
        root = make_project(manifest, {})
        assert _used(root, "prettier-plugin-tailwindcss", "package.json")

    def test_manifest_dependency_section_alone_is_not_usage(self, make_project):
        root = make_project({"dependencies": {"lodash": "^4"}}, {})
        assert not _used(root, "lodash", "package.json")

    def test_manifest_text_does_not_trigger_family_fallback(self, make_project):
        root = make_project({"devDependencies": {"jest": "^29", "@babel/core": "^7"}}, {})
        assert not _used(root, "jest", "package.json")
        assert not _used(root, "@babel/core", "package.json")

    def test_json_config(self, make_project):
        root = make_project({}, {".eslintrc.json": '{"extends": ["airbnb"]}'})
        assert _used(root, "airbnb", ".eslintrc.json")

    def test_yaml_config(self, make_project):
        root = make_project({}, {".github/config.yml": "steps:\n  - uses: husky\n"})
        assert _used(root, "husky", ".github/config.yml")

    def test_raw_text_config(self, make_project):
        root = make_project({}, {"postcss.config.js": "module.exports = { plugins: { autoprefixer: {} } }"})
        assert _used(root, "autoprefixer", "postcss.config.js")

    def test_script_token(self, make_project):
        root = make_project({"scripts": {"build": "rimraf dist && tsc"}}, {"src/a.js": "1;\n"})
        assert _used(root, "rimraf", "src/a.js")

    def test_script_substring_is_not_a_token(self, make_project):
        root = make_project({"scripts": {"build": "rimraf-extra dist"}}, {"src/a.js": "1;\n"})
        assert not _used(root, "rimraf", "src/a.js")


class TestFallbacks:
    def test_pattern_family_whole_word(self, make_project):
        root = make_project({}, {"test/setup.js": "// configure jest globals\n"})
        assert _used(root, "jest", "test/setup.js")

    def test_pattern_family_ignores_other_dependencies(self, make_project):
        root = make_project({}, {"test/setup.js": "// uses lodash here\n"})
        assert not _used(root, "lodash", "test/setup.js")

    def test_binary_file(self, make_project):
        root = make_project({}, {"assets/logo.png": b"\x89PNG\x00\x00import('lodash')"})
        assert not _used(root, "lodash", "assets/logo.png")

    def test_missing_file_raises(self, make_project, matcher):
        root = make_project({}, {})
        context = asyncio.run(build_context(root, []))
        with pytest.raises(OSError):
            asyncio.run(matcher.is_used("lodash", root / "missing.js", context))


def test_looks_binary():
    assert looks_binary(b"abc\x00def")
    assert not looks_binary(b"")
    assert not looks_binary("héllo wörld".encode("utf-8"))
    assert looks_binary(bytes(range(1, 32)) * 10)


def test_is_dependency_used_in_file(make_project):
    root = make_project({}, {"src/a.ts": "import type { Schema } from 'zod';\n"})
    context = asyncio.run(build_context(root, [root / "src" / "a.ts"]))
    assert asyncio.run(is_dependency_used_in_file("zod", root / "src" / "a.ts", context))
    assert not asyncio.run(is_dependency_used_in_file("yup", root / "src" / "a.ts", context))


def test_typeof_import(make_project):
    root = make_project({}, {"src/types.ts": "export type Client = typeof import('axios');\n"})
    assert _used(root, "axios", "src/types.ts")


def test_grammar_load_failure_raises(make_project, monkeypatch):
    def unavailable(name):
        raise RuntimeError(f"grammar {name} unavailable")

    monkeypatch.setattr("dep_sweep.matcher.imports.get_parser", unavailable)
    root = make_project({}, {"src/a.ts": "import express from 'express';\n"})
    with pytest.raises(RuntimeError):
        list(ImportScanner().iter_sources(root / "src" / "a.ts", b"import express from 'express';\n"))
    with pytest.raises(RuntimeError):
        _used(root, "express", "src/a.ts")


def test_family_token_inside_hyphenated_name(make_project):
    root = make_project({}, {"webpack.prod.js": "const { merge } = require('webpack-merge');\n"})
    assert _used(root, "webpack", "webpack.prod.js")
