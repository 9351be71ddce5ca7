"""
Peptide model.

Peptides are immutable: methods returning a changed peptide build a new
instance, and derived values such as the key and the mass are computed once
per instance.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from functools import cached_property
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from ..config import MatchingType, SequenceMatchingParameters
from ..constants import INDISTINGUISHABLE_RESIDUES, WATER_MASS
from ..exceptions import UnknownAminoAcid
from .amino_acids import AMINO_ACIDS, residue_mass
from .modification import ModificationFactory, ModificationMatch, ModificationParameters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeptideVariantMatches:
    """Sequence variants of a peptide at one protein location."""

    length_diff: int = 0
    variants: Tuple[str, ...] = ()


def is_protein_nterm(protein_sequence: str, start: int) -> bool:
    """A peptide at start is N-terminal, initial methionine being cleavable."""
    return start == 0 or (start == 1 and protein_sequence[:1] == "M")


def is_protein_cterm(protein_sequence: str, peptide_end: int) -> bool:
    """A peptide ending at the 0-based index peptide_end is C-terminal."""
    return peptide_end == len(protein_sequence) - 1


class Peptide:
    """
    Peptide with variable modifications and protein mapping.

    Args:
        sequence: Amino acid sequence
        variable_modifications: Modifications attached to the peptide
        protein_mapping: Mapping of protein accession to 0-based start offsets
        variant_matches: Mapping of protein accession to start offset to variants
        modification_factory: Modification lookup, shared default if None
    """

    def __init__(
        self,
        sequence: str,
        variable_modifications: Iterable[ModificationMatch] = (),
        protein_mapping: Optional[Mapping[str, Iterable[int]]] = None,
        variant_matches: Optional[Mapping[str, Mapping[int, PeptideVariantMatches]]] = None,
        modification_factory: Optional[ModificationFactory] = None,
    ):
        sequence = sequence.upper()
        if not sequence:
            raise ValueError("Peptide sequence must not be empty")
        for residue in sequence:
            if residue not in AMINO_ACIDS:
                raise UnknownAminoAcid(residue)
        self._sequence = sequence

        modifications = tuple(sorted(variable_modifications, key=lambda match: (match.site, match.modification)))
        for match in modifications:
            if not 0 <= match.site <= len(sequence) + 1:
                raise ValueError(f"Site {match.site} outside peptide {sequence}")
        self._modifications = modifications

        self._protein_mapping = {
            accession: tuple(sorted(set(starts))) for accession, starts in sorted((protein_mapping or {}).items())
        }
        self._variant_matches = {
            accession: dict(matches) for accession, matches in (variant_matches or {}).items()
        }
        self._modification_factory = modification_factory

    # Accessors

    @property
    def sequence(self) -> str:
        return self._sequence

    @property
    def length(self) -> int:
        return len(self._sequence)

    def __len__(self):
        return len(self._sequence)

    @property
    def variable_modifications(self) -> Tuple[ModificationMatch, ...]:
        return self._modifications

    @property
    def protein_mapping(self) -> Mapping[str, Tuple[int, ...]]:
        return MappingProxyType(self._protein_mapping)

    @property
    def variant_matches(self) -> Mapping[str, Mapping[int, PeptideVariantMatches]]:
        return MappingProxyType(self._variant_matches)

    @property
    def modification_factory(self) -> ModificationFactory:
        return self._modification_factory or ModificationFactory.get_instance()

    # Derived values

    @cached_property
    def key(self) -> str:
        return self._key_for(self._sequence)

    def _key_for(self, sequence: str) -> str:
        if not self._modifications:
            return sequence
        signatures = sorted(match.signature() for match in self._modifications)
        return "_".join([sequence] + signatures)

    def matching_sequence(self, matching_parameters: SequenceMatchingParameters) -> str:
        """Sequence with indistinguishable residues collapsed when requested."""
        if matching_parameters.matching_type != MatchingType.indistinguishable:
            return self._sequence
        return "".join(INDISTINGUISHABLE_RESIDUES.get(residue, residue) for residue in self._sequence)

    def matching_key(self, matching_parameters: SequenceMatchingParameters) -> str:
        return self._key_for(self.matching_sequence(matching_parameters))

    @cached_property
    def mass(self) -> float:
        """Monoisotopic mass including variable modifications."""
        factory = self.modification_factory
        mass = WATER_MASS + sum(residue_mass(residue) for residue in self._sequence)
        for match in self._modifications:
            mass += factory.get_modification(match.modification).mass
        return mass

    def theoretic_mass(
        self,
        modification_parameters: ModificationParameters,
        sequence_provider,
        matching_parameters: SequenceMatchingParameters,
    ) -> float:
        """Monoisotopic mass including variable and fixed modifications."""
        factory = self.modification_factory
        mass = self.mass
        for name in self.fixed_modifications(modification_parameters, sequence_provider, matching_parameters):
            if name is not None:
                mass += factory.get_modification(name).mass
        return mass

    # Building new peptides

    def _copy(self, **changes) -> "Peptide":
        arguments = {
            "sequence": self._sequence,
            "variable_modifications": self._modifications,
            "protein_mapping": self._protein_mapping,
            "variant_matches": self._variant_matches,
            "modification_factory": self._modification_factory,
        }
        arguments.update(changes)
        return Peptide(**arguments)

    def with_modification(self, match: ModificationMatch) -> "Peptide":
        return self._copy(variable_modifications=self._modifications + (match,))

    def with_modifications(self, matches: Iterable[ModificationMatch]) -> "Peptide":
        return self._copy(variable_modifications=tuple(matches))

    def without_modifications(self, names: Optional[Iterable[str]] = None) -> "Peptide":
        """
        Peptide without the given variable modifications.

        Args:
            names: Modification names to remove, all if None

        Returns:
            The peptide without these modifications
        """
        if names is None:
            return self._copy(variable_modifications=())
        names = set(names)
        return self._copy(
            variable_modifications=tuple(match for match in self._modifications if match.modification not in names)
        )

    def with_protein_mapping(self, protein_mapping: Mapping[str, Iterable[int]]) -> "Peptide":
        return self._copy(protein_mapping=protein_mapping)

    def with_variant_matches(self, variant_matches: Mapping[str, Mapping[int, PeptideVariantMatches]]) -> "Peptide":
        return self._copy(variant_matches=variant_matches)

    # Modification sites

    def indexed_variable_modifications(self) -> List[Optional[str]]:
        """
        Variable modification names indexed by site, N-terminus at 0 and
        C-terminus at length + 1.
        """
        indexed: List[Optional[str]] = [None] * (self.length + 2)
        for match in self._modifications:
            if indexed[match.site] is not None:
                raise ValueError(
                    f"Two modifications ({indexed[match.site]}, {match.modification}) "
                    f"found at site {match.site} of peptide {self.key}."
                )
            indexed[match.site] = match.modification
        return indexed

    def fixed_modifications(
        self,
        modification_parameters: ModificationParameters,
        sequence_provider,
        matching_parameters: SequenceMatchingParameters,
    ) -> List[Optional[str]]:
        """Fixed modification names indexed like indexed_variable_modifications()."""
        from ..mapping.sites import possible_sites

        factory = self.modification_factory
        indexed: List[Optional[str]] = [None] * (self.length + 2)
        for name in modification_parameters.fixed_modifications:
            modification = factory.get_modification(name)
            for site in possible_sites(self, modification, sequence_provider, matching_parameters):
                if indexed[site] is not None:
                    raise ValueError(f"Two fixed modifications ({indexed[site]}, {name}) found at site {site}.")
                indexed[site] = name
        return indexed

    def potential_modification_sites(self, modification, sequence_provider, matching_parameters) -> List[int]:
        from ..mapping.sites import possible_sites

        return possible_sites(self, modification, sequence_provider, matching_parameters)

    def n_variable_modifications(self, mass: Optional[float] = None, tolerance: float = 1e-6) -> int:
        if mass is None:
            return len(self._modifications)
        factory = self.modification_factory
        return sum(
            1
            for match in self._modifications
            if abs(factory.get_modification(match.modification).mass - mass) <= tolerance
        )

    # Protein context

    def peptide_end(self, accession: str, start: int) -> int:
        """0-based index of the last residue on the protein, variants included."""
        variant = self._variant_matches.get(accession, {}).get(start)
        length_diff = variant.length_diff if variant is not None else 0
        return start + self.length - 1 + length_diff

    def is_nterm(self, sequence_provider) -> bool:
        return any(
            is_protein_nterm(sequence_provider.get_sequence(accession), start)
            for accession, starts in self._protein_mapping.items()
            for start in starts
        )

    def is_cterm(self, sequence_provider) -> bool:
        for accession, starts in self._protein_mapping.items():
            protein_sequence = sequence_provider.get_sequence(accession)
            if any(is_protein_cterm(protein_sequence, self.peptide_end(accession, start)) for start in starts):
                return True
        return False

    # Comparisons

    def is_same_sequence(self, other: "Peptide", matching_parameters: SequenceMatchingParameters) -> bool:
        return self.matching_sequence(matching_parameters) == other.matching_sequence(matching_parameters)

    def is_same_modification_status(self, other: "Peptide") -> bool:
        """Same modifications, regardless of their sites."""
        return Counter(match.modification for match in self._modifications) == Counter(
            match.modification for match in other._modifications
        )

    def same_modifications_as(self, other: "Peptide", names: Optional[Iterable[str]] = None) -> bool:
        """Same modifications at the same sites, optionally restricted to some names."""
        names = set(names) if names is not None else None

        def located(peptide):
            return Counter(
                (match.modification, match.site)
                for match in peptide._modifications
                if names is None or match.modification in names
            )

        return located(self) == located(other)

    def __eq__(self, other):
        if not isinstance(other, Peptide):
            return NotImplemented
        return self.key == other.key and self._modifications == other._modifications

    def __hash__(self):
        return hash((self.key, self._modifications))

    def __repr__(self):
        return f"Peptide({self.key})"

    def __str__(self):
        return self.key
