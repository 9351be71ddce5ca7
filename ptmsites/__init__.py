"""
ptmsites: Post-translational modification site mapping and localization.

This package locates the possible sites of modifications on peptides,
aligns site series and scores modification localization with the A-score
algorithm.
"""

__version__ = "0.1.0"

from .ascore import AScore, PtmTableContent
from .config import MatchingType, ScoringConfig, SequenceMatchingParameters
from .exceptions import (
    MissingPatternDefinition,
    PtmSitesError,
    UnknownAminoAcid,
    UnknownModification,
    UnsupportedModificationType,
)
from .mapping import align, align_all, align_all_constrained, possible_sites
from .model import (
    AminoAcidPattern,
    InMemorySequenceProvider,
    Modification,
    ModificationFactory,
    ModificationMatch,
    ModificationType,
    Peptide,
)
from .spectrum import FragmentAnnotator, Spectrum, reduce_spectrum

__all__ = [
    "AScore",
    "PtmTableContent",
    "MatchingType",
    "ScoringConfig",
    "SequenceMatchingParameters",
    "MissingPatternDefinition",
    "PtmSitesError",
    "UnknownAminoAcid",
    "UnknownModification",
    "UnsupportedModificationType",
    "align",
    "align_all",
    "align_all_constrained",
    "possible_sites",
    "AminoAcidPattern",
    "InMemorySequenceProvider",
    "Modification",
    "ModificationFactory",
    "ModificationMatch",
    "ModificationType",
    "Peptide",
    "FragmentAnnotator",
    "Spectrum",
    "reduce_spectrum",
]
