"""
Parallel processing module for localization scoring.

Scoring calls are independent: each task builds its own spectrum tiers and
candidate sites, so tasks are run on a thread pool without coordination.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .constants import DEFAULT_NUM_THREADS
from .model.modification import Modification
from .model.peptide import Peptide
from .spectrum.spectrum import Spectrum

logger = logging.getLogger(__name__)


@dataclass
class LocalizationTask:
    """A peptide, modification and spectrum to score."""

    peptide: Peptide
    modification: Modification
    expected_count: int
    spectrum: Spectrum
    precursor_charge: Optional[int] = None


def get_optimal_thread_count(num_items: int, min_threads: int = 1, max_threads: Optional[int] = None) -> int:
    """
    Calculate optimal thread count based on data size

    Args:
        num_items: Number of data items
        min_threads: Minimum number of threads
        max_threads: Maximum number of threads

    Returns:
        Optimal thread count
    """
    if max_threads is None:
        max_threads = os.cpu_count() or DEFAULT_NUM_THREADS

    if num_items < 10:
        threads = 2
    elif num_items < 100:
        threads = 4
    else:
        threads = max_threads
    return max(min_threads, min(threads, max_threads))


def score_tasks_parallel(
    tasks: Sequence[LocalizationTask],
    scorer,
    num_threads: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
    variant: str = "ascore",
) -> List[Optional[Dict[Tuple[int, ...], float]]]:
    """
    Score localization tasks in parallel.

    Args:
        tasks: Tasks to score
        scorer: AScore instance
        num_threads: Number of threads, chosen from the number of tasks if None
        cancel_event: Event checked before each task, remaining tasks are skipped once set
        variant: "ascore" or "aplus"

    Returns:
        Results in task order, None for skipped tasks
    """
    if variant not in ("ascore", "aplus"):
        raise ValueError(f"Unknown scoring variant: {variant}")
    if num_threads is None:
        num_threads = get_optimal_thread_count(len(tasks))
    score = scorer.score_plus if variant == "aplus" else scorer.score

    def run(task: LocalizationTask):
        if cancel_event is not None and cancel_event.is_set():
            return None
        return score(
            task.peptide,
            task.modification,
            task.expected_count,
            task.spectrum,
            precursor_charge=task.precursor_charge,
        )

    with ThreadPoolExecutor(max_workers=num_threads) as executor:
        futures = [executor.submit(run, task) for task in tasks]
        results = []
        for task, future in zip(tasks, futures):
            try:
                results.append(future.result())
            except Exception as e:
                logger.error(f"Scoring error for {task.peptide.key}: {str(e)}")
                raise

    skipped = sum(result is None for result in results)
    if skipped:
        logger.info(f"Skipped {skipped} of {len(tasks)} tasks after cancellation")
    return results
