"""
A-score localization scoring.
"""

from .ascore import AScore, binomial_tail_probability, peptide_score
from .table import PtmTableContent

__all__ = ["AScore", "binomial_tail_probability", "peptide_score", "PtmTableContent"]
