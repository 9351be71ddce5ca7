"""
Sequence and modification model.
"""

from .amino_acids import AMINO_ACIDS, AminoAcid, get_amino_acid
from .modification import (
    Modification,
    ModificationFactory,
    ModificationMatch,
    ModificationParameters,
    ModificationType,
    modification_from_openms,
)
from .pattern import AminoAcidPattern
from .peptide import Peptide, PeptideVariantMatches
from .protein import InMemorySequenceProvider, SequenceProvider

__all__ = [
    "AMINO_ACIDS",
    "AminoAcid",
    "get_amino_acid",
    "AminoAcidPattern",
    "Modification",
    "ModificationFactory",
    "ModificationMatch",
    "ModificationParameters",
    "ModificationType",
    "modification_from_openms",
    "Peptide",
    "PeptideVariantMatches",
    "InMemorySequenceProvider",
    "SequenceProvider",
]
