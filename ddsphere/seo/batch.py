"""Grouped batch analysis.

URLs are analysed a few at a time with a pause between groups so that a
batch never hammers the sites being analysed.  This is a caller-side
convention; the pipeline itself has no notion of batches.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from ddsphere.config import settings
from ddsphere.seo.analyzer import analyze_page
from ddsphere.seo.models import AnalysisResult

logger = logging.getLogger(__name__)


@dataclass
class BatchError:
    url: str
    error: str


@dataclass
class BatchOutcome:
    results: list[AnalysisResult] = field(default_factory=list)
    errors: list[BatchError] = field(default_factory=list)


def _chunks(items: Sequence[str], size: int) -> list[Sequence[str]]:
    return [items[i:i + size] for i in range(0, len(items), size)]


def analyze_batch(
    urls: Sequence[str],
    analyze: Callable[[str], AnalysisResult] = analyze_page,
    group_size: Optional[int] = None,
    delay: Optional[float] = None,
) -> BatchOutcome:
    """Analyse *urls* in groups of *group_size*, sleeping *delay* between groups.

    A failing URL is recorded in ``errors`` and never stops the batch.
    Results and errors keep the order of *urls*.
    """
    size = max(1, group_size or settings.batch_size)
    pause = settings.batch_delay if delay is None else delay
    outcome = BatchOutcome()

    groups = _chunks(list(urls), size)
    for index, group in enumerate(groups):
        with ThreadPoolExecutor(max_workers=len(group)) as pool:
            futures = [(url, pool.submit(analyze, url)) for url in group]
            for url, future in futures:
                try:
                    outcome.results.append(future.result())
                except Exception as exc:
                    logger.warning("batch: analysis of %s failed: %s", url, exc)
                    outcome.errors.append(BatchError(url=url, error=str(exc)))

        if index < len(groups) - 1 and pause > 0:
            time.sleep(pause)

    logger.info(
        "batch finished: %d ok, %d failed", len(outcome.results), len(outcome.errors)
    )
    return outcome
