"""
Amino acid registry.

The registry is a read-only mapping from single letter code to an AminoAcid
record, built once at import time from the residue table.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Optional

from ..constants import COMBINATION_RESIDUES, RESIDUES, STANDARD_RESIDUES
from ..exceptions import UnknownAminoAcid


@dataclass(frozen=True)
class AminoAcid:
    """
    Amino acid record.

    Attributes:
        code: Single letter code
        three_letter_code: Three letter code
        name: Full name
        mono_mass: Monoisotopic residue mass, None when ambiguous
        composition: Residue composition, None for combination codes
        sub_amino_acids: Residues covered by a combination code
        combinations: Combination codes covering this residue
    """

    code: str
    three_letter_code: str
    name: str
    mono_mass: Optional[float]
    composition: Optional[str]
    sub_amino_acids: FrozenSet[str] = frozenset()
    combinations: FrozenSet[str] = frozenset()

    @property
    def is_combination(self) -> bool:
        return bool(self.sub_amino_acids)

    def matching_residues(self) -> FrozenSet[str]:
        """All codes this residue can stand for, itself included."""
        return frozenset({self.code}) | self.sub_amino_acids | self.combinations


def _build_registry() -> Mapping[str, AminoAcid]:
    combinations = {code: set() for code in RESIDUES}
    for combination, (_, _, members) in COMBINATION_RESIDUES.items():
        for member in members:
            combinations[member].add(combination)

    registry = {}
    for code, (three_letter_code, name, mass, composition) in RESIDUES.items():
        registry[code] = AminoAcid(
            code=code,
            three_letter_code=three_letter_code,
            name=name,
            mono_mass=mass,
            composition=composition,
            combinations=frozenset(combinations[code]),
        )
    for code, (three_letter_code, name, members) in COMBINATION_RESIDUES.items():
        masses = {RESIDUES[member][2] for member in members}
        registry[code] = AminoAcid(
            code=code,
            three_letter_code=three_letter_code,
            name=name,
            mono_mass=masses.pop() if len(masses) == 1 else None,
            composition=None,
            sub_amino_acids=frozenset(members),
        )
    return MappingProxyType(registry)


AMINO_ACIDS = _build_registry()


def get_amino_acid(code: str) -> AminoAcid:
    try:
        return AMINO_ACIDS[code]
    except KeyError:
        raise UnknownAminoAcid(code) from None


def standard_amino_acids() -> List[str]:
    return list(STANDARD_RESIDUES)


def residue_mass(code: str) -> float:
    """Monoisotopic residue mass, raising for ambiguous codes."""
    amino_acid = get_amino_acid(code)
    if amino_acid.mono_mass is None:
        raise ValueError(f"Amino acid {code!r} has no unambiguous mass.")
    return amino_acid.mono_mass
