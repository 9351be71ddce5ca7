"""
Alignment of integer site series.

Used to reconcile modification sites from different sources, e.g. predicted
sites against sites implied by sequence tags.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)


def align(series_a: Iterable[int], series_b: Iterable[int]) -> Dict[int, Optional[int]]:
    """
    Align two series of integers, minimizing the distance between them.

    Elements of series_a are walked in ascending order. Each takes the closest
    remaining element of series_b, unless that element is closer to the next
    element of series_a, in which case it is left for it.

    Args:
        series_a: Sites to align
        series_b: Target sites

    Returns:
        Mapping of every element of series_a to an element of series_b or None

    Example:
        >>> align([0, 1, 13, 25, 15, 6, 99], [100, 2, 12, 14, 18, 30, 115, 1000])
        {0: None, 1: 2, 6: None, 13: 12, 15: 14, 25: 30, 99: 100}
    """
    sorted_a = sorted(set(series_a))
    sorted_b = sorted(set(series_b))
    result: Dict[int, Optional[int]] = {}
    if not sorted_b:
        return {element: None for element in sorted_a}

    last_j = 0
    for i, element in enumerate(sorted_a):
        next_element = sorted_a[i + 1] if i < len(sorted_a) - 1 else None
        best_j = None
        best_distance = None
        for j in range(last_j, len(sorted_b)):
            target = sorted_b[j]
            if next_element is not None and (
                target >= next_element or abs(target - next_element) < abs(target - element)
            ):
                break
            distance = abs(target - element)
            if best_distance is None or distance < best_distance:
                best_distance = distance
                best_j = j
        if best_j is not None:
            result[element] = sorted_b[best_j]
            last_j = best_j + 1
        else:
            result[element] = None
    return result


def align_all(series_a: Iterable[int], series_b: Iterable[int]) -> Dict[int, Optional[int]]:
    """
    Align two series of integers, re-aligning unmatched elements against the
    remaining targets until no target is left.

    Every element of series_a gets a distinct target when series_b has at
    least as many elements.

    Args:
        series_a: Sites to align
        series_b: Target sites

    Returns:
        Mapping of every element of series_a to an element of series_b or None
    """
    result = align(series_a, series_b)
    used = {target for target in result.values() if target is not None}
    remaining_b = [target for target in set(series_b) if target not in used]
    unmatched = [element for element, target in result.items() if target is None]

    while unmatched and remaining_b:
        pass_result = align(unmatched, remaining_b)
        matched = {element: target for element, target in pass_result.items() if target is not None}
        if not matched:
            break
        result.update(matched)
        remaining_b = [target for target in remaining_b if target not in matched.values()]
        unmatched = [element for element in unmatched if element not in matched]

    logger.debug(f"Aligned {len(result) - len(unmatched)} of {len(result)} sites")
    return result


def align_all_constrained(candidates: Mapping[int, Iterable[int]]) -> Dict[int, Optional[int]]:
    """
    Align sites each restricted to its own set of acceptable targets.

    Groups of sites sharing the smallest identical target set are aligned
    first with align_all(), their targets are then removed from the
    remaining sets, until every site is matched or left without target.

    Args:
        candidates: Mapping of site to its acceptable targets

    Returns:
        Mapping of every site to a target or None
    """
    remaining = {site: set(targets) for site, targets in candidates.items()}
    result: Dict[int, Optional[int]] = {}

    while remaining:
        for site in [site for site, targets in remaining.items() if not targets]:
            result[site] = None
            del remaining[site]
        if not remaining:
            break

        groups: Dict[tuple, List[int]] = {}
        for site, targets in remaining.items():
            groups.setdefault(tuple(sorted(targets)), []).append(site)
        targets = min(groups, key=lambda key: (len(key), key))
        sites = groups[targets]

        group_result = align_all(sites, targets)
        result.update(group_result)
        consumed = {target for target in group_result.values() if target is not None}
        for site in sites:
            del remaining[site]
        for site_targets in remaining.values():
            site_targets -= consumed

    return result
