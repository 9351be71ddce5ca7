"""
Amino acid patterns targeted by modifications.

A pattern maps offsets relative to the modified residue (offset 0) to the
residues allowed there. An empty residue set accepts any residue.
"""

import re
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from ..config import MatchingType, SequenceMatchingParameters
from ..constants import INDISTINGUISHABLE_RESIDUES
from .amino_acids import AMINO_ACIDS

_TOKEN = re.compile(r"\[([A-Z]+)\]|([A-Z])")


def _indistinguishable_group(residue: str) -> FrozenSet[str]:
    group = INDISTINGUISHABLE_RESIDUES.get(residue)
    if group is None:
        return frozenset({residue})
    return frozenset(code for code, other in INDISTINGUISHABLE_RESIDUES.items() if other == group)


class AminoAcidPattern:
    """
    Positional amino acid pattern.

    Args:
        targets: Mapping of offset relative to the modified residue to allowed residues
    """

    def __init__(self, targets: Optional[Mapping[int, Iterable[str]]] = None):
        self._targets: Dict[int, FrozenSet[str]] = {
            int(offset): frozenset(residues) for offset, residues in (targets or {}).items()
        }
        self.targets = MappingProxyType(self._targets)

    @classmethod
    def from_residues(cls, residues: Iterable[str]) -> "AminoAcidPattern":
        """Single residue pattern targeting any of the given residues."""
        residues = frozenset(residues)
        if not residues:
            return cls()
        return cls({0: residues})

    @classmethod
    def from_string(cls, pattern: str, target: int = 0) -> "AminoAcidPattern":
        """
        Parse a pattern such as "N[ST]" or "[ST]XP".

        Args:
            pattern: Residues or bracketed residue groups, X for any residue
            target: Index of the modified residue within the pattern

        Returns:
            The parsed pattern
        """
        tokens = []
        position = 0
        for match in _TOKEN.finditer(pattern.upper()):
            if match.start() != position:
                raise ValueError(f"Invalid amino acid pattern: {pattern}")
            group, residue = match.groups()
            tokens.append(frozenset(group) if group else frozenset() if residue == "X" else frozenset(residue))
            position = match.end()
        if position != len(pattern):
            raise ValueError(f"Invalid amino acid pattern: {pattern}")
        if tokens and not 0 <= target < len(tokens):
            raise ValueError(f"Target index {target} outside pattern {pattern}")
        return cls({index - target: residues for index, residues in enumerate(tokens)})

    @property
    def min_index(self) -> int:
        return min(min(self._targets, default=0), 0)

    @property
    def max_index(self) -> int:
        return max(max(self._targets, default=0), 0)

    @property
    def length(self) -> int:
        if not self._targets:
            return 0
        return self.max_index - self.min_index + 1

    def __len__(self):
        return self.length

    def __eq__(self, other):
        if not isinstance(other, AminoAcidPattern):
            return NotImplemented
        return self._targets == other._targets

    def __hash__(self):
        return hash(frozenset(self._targets.items()))

    def __repr__(self):
        return f"AminoAcidPattern({self})"

    def __str__(self):
        if not self._targets:
            return ""
        tokens = []
        for offset in range(self.min_index, self.max_index + 1):
            residues = self._targets.get(offset, frozenset())
            if not residues:
                tokens.append("X")
            elif len(residues) == 1:
                tokens.append(next(iter(residues)))
            else:
                tokens.append("[" + "".join(sorted(residues)) + "]")
        return "".join(tokens)

    def residues_at_target(self) -> FrozenSet[str]:
        return self._targets.get(0, frozenset())

    def is_targeted(
        self,
        residue: str,
        offset: int,
        matching_parameters: SequenceMatchingParameters,
    ) -> bool:
        """
        Check whether a residue is accepted at an offset of the pattern.

        Args:
            residue: Single letter code found in the sequence
            offset: Offset relative to the modified residue
            matching_parameters: Residue comparison settings

        Returns:
            True if the residue is accepted
        """
        allowed = self._targets.get(offset)
        if not allowed:
            return True
        if residue in allowed:
            return True
        matching_type = matching_parameters.matching_type
        if matching_type == MatchingType.string:
            return False
        candidates = {residue}
        if matching_type == MatchingType.indistinguishable:
            candidates |= _indistinguishable_group(residue)
        for candidate in list(candidates):
            amino_acid = AMINO_ACIDS.get(candidate)
            if amino_acid is not None:
                candidates |= amino_acid.matching_residues()
        return not allowed.isdisjoint(candidates)

    def matches_at(
        self,
        sequence: str,
        index: int,
        matching_parameters: SequenceMatchingParameters,
    ) -> bool:
        """
        Check whether the pattern matches with its target at a 0-based index.

        Every offset of the pattern must fall inside the sequence.
        """
        if not self._targets:
            return False
        if index + self.min_index < 0 or index + self.max_index >= len(sequence):
            return False
        return all(
            self.is_targeted(sequence[index + offset], offset, matching_parameters)
            for offset in self._targets
        )

    def indexes(self, sequence: str, matching_parameters: SequenceMatchingParameters) -> List[int]:
        """1-based positions of the sequence where the pattern target matches."""
        return [
            index + 1
            for index in range(len(sequence))
            if self.matches_at(sequence, index, matching_parameters)
        ]
