"""
Configuration module for ptmsites.

This module contains the sequence matching parameters used when mapping
modification patterns onto sequences, and the ScoringConfig class, which
manages the settings of the localization scorer.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

from .constants import DEFAULT_CONFIG

logger = logging.getLogger(__name__)


class MatchingType(Enum):
    """How residues of a sequence are compared to a target."""

    string = "string"
    amino_acid = "amino_acid"
    indistinguishable = "indistinguishable"


@dataclass(frozen=True)
class SequenceMatchingParameters:
    """
    Parameters for matching amino acid patterns against sequences.

    Attributes:
        matching_type: Residue comparison mode
        max_mutations_per_peptide: Maximal number of substitutions, None for unbounded
        mutation_matrix: Optional table of residue -> allowed substitutes
    """

    matching_type: MatchingType = MatchingType.indistinguishable
    max_mutations_per_peptide: Optional[int] = None
    mutation_matrix: Optional[Mapping[str, FrozenSet[str]]] = None

    def __post_init__(self):
        if not isinstance(self.matching_type, MatchingType):
            object.__setattr__(self, "matching_type", MatchingType(self.matching_type))
        if self.max_mutations_per_peptide is not None and self.max_mutations_per_peptide < 0:
            raise ValueError("max_mutations_per_peptide must be positive or None")

    @classmethod
    def default_string_matching(cls) -> "SequenceMatchingParameters":
        """Exact residue matching."""
        return cls(matching_type=MatchingType.string)

    @classmethod
    def indistinguishable_amino_acids(cls) -> "SequenceMatchingParameters":
        """Matching treating I, L and J as identical."""
        return cls(matching_type=MatchingType.indistinguishable)


class ScoringConfig:
    """
    Configuration class for the localization scorer.

    This class manages the settings of the A-score computation, including
    fragment tolerance, ion types, charges and tier depth.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize a new ScoringConfig instance.

        Args:
            config_dict: Optional dictionary containing configuration settings
        """
        self.config = {
            key: list(value) if isinstance(value, list) else value
            for key, value in DEFAULT_CONFIG.items()
        }

        if config_dict:
            self.update(config_dict)

    def update(self, config_dict: Dict[str, Any]) -> None:
        """
        Update configuration with new settings.

        Args:
            config_dict: Dictionary containing new configuration settings
        """
        for key, value in config_dict.items():
            if key in self.config:
                self.config[key] = value
            else:
                logger.warning(f"Unknown configuration key: {key}")

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.config[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return self.config.copy()

    def sequence_matching_parameters(self) -> SequenceMatchingParameters:
        """Sequence matching parameters for the configured matching type."""
        return SequenceMatchingParameters(matching_type=MatchingType(self.config["matching_type"]))

    def __getitem__(self, key: str) -> Any:
        return self.config[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.config[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self.config
