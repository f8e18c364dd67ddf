"""Tests for @types/* correlation."""

from pathlib import Path

from dep_sweep.analysis.graph_models import PackageGraph
from dep_sweep.analysis.type_packages import (
    TypePackageCorrelator,
    is_types_package,
    tsconfig_lists,
    typescript_files,
)
from dep_sweep.models import DependencyContext, DependencyInfo

TS_FILES = [Path("/p/src/index.ts"), Path("/p/src/app.js")]
JS_FILES = [Path("/p/src/app.js")]


def _apply(dependency, files, top_level=(), graph=None, configs=None):
    info = DependencyInfo()
    context = DependencyContext(project_root=Path("/p"), configs=configs or {})
    done = TypePackageCorrelator().apply_static_rules(
        dependency, info,
        context=context,
        files=files,
        top_level=set(top_level),
        graph=graph or PackageGraph(),
    )
    return info, done


def test_helpers():
    assert is_types_package("@types/react")
    assert not is_types_package("react")
    assert typescript_files(TS_FILES) == [Path("/p/src/index.ts")]


def test_node_types_with_typescript_files():
    info, done = _apply("@types/node", TS_FILES)
    assert done
    assert info.pinned_by == "typescript"
    assert info.is_directly_used


def test_node_types_without_typescript_files():
    info, done = _apply("@types/node", JS_FILES)
    assert not done
    assert not info.is_directly_used


def test_declared_runtime_becomes_requirer():
    info, _ = _apply("@types/babel__core", TS_FILES, top_level={"@babel/core", "@types/babel__core"})
    assert info.required_by_packages == {"@babel/core"}
    assert info.pinned_by is None


def test_undeclared_runtime():
    info, _ = _apply("@types/lodash", TS_FILES, top_level={"@types/lodash"})
    assert info.required_by_packages == set()


def test_peer_declaration_pins():
    graph = PackageGraph()
    graph.add_package("some-lib", {"@types/react"}, peers={"@types/react"})
    info, _ = _apply("@types/react", JS_FILES, graph=graph)
    assert info.pinned_by == "some-lib"
    assert info.supported_by == "some-lib"


def test_tsconfig_types_option():
    configs = {"tsconfig.json": {"compilerOptions": {"types": ["jest"]}}}
    info, _ = _apply("@types/jest", TS_FILES, configs=configs)
    assert info.pinned_by == "typescript"

    info, _ = _apply("@types/jest", JS_FILES, configs=configs)
    assert info.pinned_by is None


def test_tsconfig_lists():
    ctx = DependencyContext(project_root=Path("/p"), configs={
        "tsconfig.json": {"compilerOptions": {"typeRoots": ["./node_modules/@types", "./types/mocha"]}},
    })
    assert tsconfig_lists(ctx, "mocha")
    assert not tsconfig_lists(ctx, "chai")
    raw = DependencyContext(project_root=Path("/p"), configs={"tsconfig.json": "{ // jsonc }"})
    assert not tsconfig_lists(raw, "mocha")


def test_resolve_support():
    correlator = TypePackageCorrelator()
    infos = {
        "@types/express": DependencyInfo(required_by_packages={"express"}),
        "express": DependencyInfo(used_in_files=[Path("/p/server.ts")]),
        "@types/koa": DependencyInfo(required_by_packages={"koa"}),
        "koa": DependencyInfo(),
    }
    assert correlator.resolve_support("@types/express", infos) == "express"
    assert correlator.resolve_support("@types/koa", infos) is None
    assert correlator.resolve_support("@types/missing", infos) is None
