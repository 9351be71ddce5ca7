"""
Modification site mapping.
"""

from .alignment import align, align_all, align_all_constrained
from .sites import expected_modifications, get_site, possible_sites, possible_sites_on_sequence

__all__ = [
    "align",
    "align_all",
    "align_all_constrained",
    "expected_modifications",
    "get_site",
    "possible_sites",
    "possible_sites_on_sequence",
]
