"""Memory-bounded batch scheduler driving the usage matcher over a file corpus."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable

import psutil

from dep_sweep.constants import BATCH_MEMORY_COST, MAX_BATCH_SIZE, MIN_BATCH_SIZE
from dep_sweep.matcher.usage import UsageMatcher
from dep_sweep.models import DependencyContext, ScanOutcome

logger = logging.getLogger(__name__)

ScanProgress = Callable[[int, int], None]


def compute_batch_size(available_bytes: int | None = None) -> int:
    """Files matched concurrently per batch, derived from free memory."""
    if available_bytes is None:
        available_bytes = psutil.virtual_memory().available
    return min(MAX_BATCH_SIZE, max(MIN_BATCH_SIZE, available_bytes // BATCH_MEMORY_COST))


async def process_files_in_parallel(
    files: list[Path],
    dependency: str,
    context: DependencyContext,
    matcher: UsageMatcher,
    on_progress: ScanProgress | None = None,
    batch_size: int | None = None,
) -> ScanOutcome:
    """Return the files that show usage of *dependency*.

    Batches run one after another; files inside a batch are matched
    concurrently and a failing file only bumps the error count.
    """
    size = batch_size or compute_batch_size()
    total = len(files)
    outcome = ScanOutcome()

    if total == 0 and on_progress:
        on_progress(0, 0)

    for start in range(0, total, size):
        batch = files[start:start + size]
        results = await asyncio.gather(
            *(matcher.is_used(dependency, f, context) for f in batch),
            return_exceptions=True,
        )
        for file_path, result in zip(batch, results):
            if isinstance(result, BaseException):
                logger.debug("Error processing %s for %s: %s", file_path, dependency, result)
                outcome.failed.append(file_path)
            elif result:
                outcome.files.append(file_path)

        if on_progress:
            on_progress(min(start + len(batch), total), total)

    if outcome.errors:
        logger.warning("%d file(s) had processing errors while checking %s", outcome.errors, dependency)

    return outcome
