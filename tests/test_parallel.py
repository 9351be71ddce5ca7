"""
Test parallel scoring of localization tasks.
"""

import threading
from unittest.mock import MagicMock

import pytest

from ptmsites.ascore import AScore
from ptmsites.model.peptide import Peptide
from ptmsites.parallel import LocalizationTask, get_optimal_thread_count, score_tasks_parallel
from ptmsites.spectrum.spectrum import Spectrum


@pytest.fixture
def tasks(factory):
    phospho = factory.get_modification("Phosphorylation of S")
    spectrum = Spectrum([100.0], [1.0])
    return [
        LocalizationTask(Peptide("PEPSIDE"), phospho, 1, spectrum),
        LocalizationTask(Peptide("PEPTIDE"), phospho, 1, spectrum),
        LocalizationTask(Peptide("SAS"), phospho, 2, spectrum),
    ]


def test_optimal_thread_count():
    """Test thread count selection from the number of items."""
    assert get_optimal_thread_count(5, max_threads=8) == 2
    assert get_optimal_thread_count(50, max_threads=8) == 4
    assert get_optimal_thread_count(500, max_threads=8) == 8
    assert get_optimal_thread_count(5, min_threads=3, max_threads=8) == 3
    assert get_optimal_thread_count(50, max_threads=2) == 2


def test_results_keep_task_order(tasks):
    """Test that results are returned in task order."""
    results = score_tasks_parallel(tasks, AScore(), num_threads=3)
    assert results == [{(4,): 100.0}, {}, {(1, 3): 100.0}]


def test_plus_variant(tasks):
    """Test scoring with the A-plus variant."""
    scorer = MagicMock()
    scorer.score_plus.return_value = {(1,): 12.0}
    results = score_tasks_parallel(tasks, scorer, num_threads=2, variant="aplus")
    assert results == [{(1,): 12.0}] * 3
    assert scorer.score_plus.call_count == 3
    scorer.score.assert_not_called()


def test_cancellation(tasks):
    """Test that tasks are skipped once the cancel event is set."""
    cancel_event = threading.Event()
    cancel_event.set()
    assert score_tasks_parallel(tasks, AScore(), cancel_event=cancel_event) == [None, None, None]


def test_errors_propagate(tasks):
    """Test that scoring errors are raised to the caller."""
    scorer = MagicMock()
    scorer.score.side_effect = RuntimeError("scoring failed")
    with pytest.raises(RuntimeError, match="scoring failed"):
        score_tasks_parallel(tasks, scorer, num_threads=2)


def test_unknown_variant(tasks):
    """Test that an unknown variant is rejected."""
    with pytest.raises(ValueError):
        score_tasks_parallel(tasks, AScore(), variant="bayes")
