"""Data models for the installed-package graph."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field


@dataclass
class PackageGraph:
    forward: dict[str, set[str]] = field(default_factory=dict)  # package -> {packages it requires}
    reverse: dict[str, set[str]] = field(default_factory=dict)  # package -> {packages requiring it}
    peers: dict[str, set[str]] = field(default_factory=dict)  # package -> {its peerDependencies}
    skipped: list[str] = field(default_factory=list)  # packages with unreadable manifests

    def add_package(self, name: str, requires: set[str], peers: set[str] | None = None) -> None:
        self.forward[name] = set(requires)
        self.peers[name] = set(peers or ())
        for target in requires:
            self.reverse.setdefault(target, set()).add(name)

    def find_top_level_dependents(self, dependency: str, top_level: set[str]) -> set[str]:
        """Top-level dependencies that require *dependency*, directly or through other packages.

        A top-level requirer ends its branch; any other requirer is searched in turn.
        Each package is expanded at most once, so cycles terminate.
        """
        dependents: set[str] = set()
        visited = {dependency}
        queue = deque([dependency])

        while queue:
            current = queue.popleft()
            for package in self.reverse.get(current, ()):
                if package in top_level:
                    dependents.add(package)
                elif package not in visited:
                    visited.add(package)
                    queue.append(package)

        dependents.discard(dependency)
        return dependents

    def peer_declarers(self, dependency: str) -> list[str]:
        return sorted(pkg for pkg, peers in self.peers.items() if dependency in peers)
