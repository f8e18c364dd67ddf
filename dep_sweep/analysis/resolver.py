"""Unused-set resolver: least fixed point of "nothing that is kept needs it"."""

from __future__ import annotations

from typing import Iterable, Mapping

from dep_sweep.constants import PROTECTED_PACKAGES
from dep_sweep.manifest import dependency_sort_key
from dep_sweep.models import DependencyInfo


def resolve_unused(infos: Mapping[str, DependencyInfo]) -> set[str]:
    """Dependencies with no direct usage whose requirers are all unused too.

    Seeds with dependencies nobody uses or requires, then keeps adding
    dependencies whose every requirer is already in the set until a full
    pass adds nothing. Requirers outside *infos* are never unused.
    """
    unused = {
        dep for dep, info in infos.items()
        if not info.is_directly_used and not info.required_by_packages
    }

    while True:
        promoted = {
            dep for dep, info in infos.items()
            if dep not in unused
            and not info.is_directly_used
            and info.required_by_packages <= unused
        }
        if not promoted:
            return unused
        unused |= promoted


def filter_removable(
    unused: Iterable[str],
    safe_packages: Iterable[str] = (),
    aggressive: bool = False,
) -> list[str]:
    """Unused dependencies that may be proposed for removal, in display order."""
    exempt = set(safe_packages)
    if not aggressive:
        exempt |= PROTECTED_PACKAGES
    return sorted((dep for dep in unused if dep not in exempt), key=dependency_sort_key)
