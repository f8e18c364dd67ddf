"""Static tables used by the context builder, matcher and resolver."""

from __future__ import annotations

import re
from dataclasses import dataclass

MANIFEST_NAME = "package.json"
NODE_MODULES = "node_modules"
TSCONFIG_NAME = "tsconfig.json"
GITIGNORE_NAME = ".gitignore"

TYPES_PREFIX = "@types/"
TYPESCRIPT_EXTENSIONS = (".ts", ".tsx")

# Manifest sections merged into the declared dependency list, in order
DEPENDENCY_SECTIONS = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)

# Sections of an installed package's manifest that make it require another package
INSTALLED_REQUIRE_SECTIONS = (
    "dependencies",
    "peerDependencies",
    "optionalDependencies",
)

CONFIG_NAME_RE = re.compile(r"\.(config|rc)(\.|\b)")

DEFAULT_SKIP_DIRS = (
    NODE_MODULES, ".git", "dist", "build", "coverage",
    ".next", ".nuxt", ".cache", ".turbo", ".yarn",
)

DEFAULT_IGNORE_PATTERNS = ("*.log", "*.lock")

# Never proposed for removal unless the run is aggressive
PROTECTED_PACKAGES = frozenset({
    "dep-sweep",
    "typescript",
    "@types/node",
    "tslib",
    "prettier",
    "eslint",
})

# Assumed memory cost of one in-flight batch
BATCH_MEMORY_COST = 50 * 1024 * 1024
MIN_BATCH_SIZE = 10
MAX_BATCH_SIZE = 100


@dataclass(frozen=True)
class PatternFamily:
    """Tool family whose members are often used by convention, not import."""
    name: str
    bases: tuple[str, ...]
    members: tuple[str, ...]  # fnmatch globs


PATTERN_FAMILIES: tuple[PatternFamily, ...] = (
    PatternFamily("webpack", ("webpack",), ("webpack", "webpack.*", "webpack-*")),
    PatternFamily("babel", ("babel",), ("babel.*", "babel-*", "@babel/*")),
    PatternFamily("eslint", ("eslint",), ("eslint", "eslint.*", "eslint-*", "@eslint/*")),
    PatternFamily("jest", ("jest",), ("jest", "jest.*", "jest-*", "@jest/*")),
    PatternFamily(
        "typescript",
        ("ts", "typescript"),
        ("typescript", "ts-*", "@typescript-*"),
    ),
    PatternFamily(
        "bundler",
        ("rollup", "esbuild", "vite"),
        (
            "rollup", "rollup.*", "rollup-*",
            "esbuild", "esbuild.*", "@esbuild/*",
            "vite", "vite.*", "@vitejs/*",
        ),
    ),
)


# Name-variant table for generated usage patterns.
# kind: exact | prefix | suffix | combined | regex
NAME_PATTERNS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("exact", "", ()),
    ("prefix", "@", ()),
    ("prefix", "@types/", ()),
    ("prefix", "@storybook/", ()),
    ("prefix", "@testing-library/", ()),
    ("suffix", "config", ("rc", "settings", "configuration", "setup", "options")),
    ("suffix", "plugin", ("plugins", "extension", "extensions", "addon", "addons")),
    ("suffix", "preset", ("presets", "recommended", "standard", "defaults")),
    ("combined", "", ("cli", "core", "utils", "tools", "helper", "helpers")),
    ("regex", r"[/-](react|vue|svelte|angular|node)$", ()),
    ("regex", r"[/-](loader|parser|transformer|formatter|linter|compiler)s?$", ()),
)
