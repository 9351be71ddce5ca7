"""
Intensity tiers of a spectrum.

Peaks are binned in consecutive m/z windows of 20 times the fragment
tolerance, starting at m/z 0. The tier of depth d keeps the d most intense
peaks of every window, so that tiers grow monotonically with depth.
"""

import logging
from typing import Dict, Union

import numpy as np

from ..constants import AUTO_DEPTH, DEFAULT_DEPTH, WINDOW_TOLERANCE_FACTOR
from .spectrum import Spectrum

logger = logging.getLogger(__name__)


def window_ranks(spectrum: Spectrum, mz_tolerance: float):
    """
    Window index and intensity rank of every peak.

    Args:
        spectrum: Source spectrum
        mz_tolerance: Fragment m/z tolerance

    Returns:
        Tuple of (window index array, rank array), rank 0 being the most
        intense peak of its window
    """
    if mz_tolerance <= 0:
        raise ValueError(f"m/z tolerance must be positive, got {mz_tolerance}")
    window_size = WINDOW_TOLERANCE_FACTOR * mz_tolerance
    windows = np.floor(spectrum.mz / window_size).astype(int)

    # Sort by window, then by decreasing intensity, stable on m/z
    order = np.lexsort((-spectrum.intensity, windows))
    sorted_windows = windows[order]
    positions = np.arange(len(order))
    first = np.ones(len(order), dtype=bool)
    first[1:] = sorted_windows[1:] != sorted_windows[:-1]
    window_starts = np.maximum.accumulate(np.where(first, positions, 0)) if len(order) else positions

    ranks = np.empty(len(order), dtype=int)
    ranks[order] = positions - window_starts
    return windows, ranks


def reduce_spectrum(
    spectrum: Spectrum,
    mz_tolerance: float,
    max_depth: Union[int, str] = DEFAULT_DEPTH,
) -> Dict[int, Spectrum]:
    """
    Build the intensity tiers of a spectrum.

    Args:
        spectrum: Source spectrum
        mz_tolerance: Fragment m/z tolerance
        max_depth: Number of tiers, or "auto" for the largest number of peaks
            found in a window

    Returns:
        Mapping of depth (1..max_depth) to the spectrum keeping the depth
        most intense peaks of each window
    """
    windows, ranks = window_ranks(spectrum, mz_tolerance)

    if max_depth == AUTO_DEPTH:
        max_depth = int(ranks.max()) + 1 if len(ranks) else 0
    elif not isinstance(max_depth, (int, np.integer)) or max_depth < 0:
        raise ValueError(f"max_depth must be a positive integer or {AUTO_DEPTH!r}, got {max_depth!r}")

    tiers = {}
    for depth in range(1, max_depth + 1):
        tiers[depth] = spectrum.subset(np.flatnonzero(ranks < depth))

    logger.debug(
        f"Reduced spectrum {spectrum.title!r} with {len(spectrum)} peaks "
        f"in {len(np.unique(windows))} windows to {max_depth} tiers"
    )
    return tiers
