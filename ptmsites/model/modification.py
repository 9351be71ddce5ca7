"""
Modification definitions, modification matches on peptides and the
process-wide modification lookup.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from ..exceptions import UnknownModification
from .pattern import AminoAcidPattern

logger = logging.getLogger(__name__)


class ModificationType(Enum):
    """Placement rules of a modification."""

    modaa = "modaa"  # at residues anywhere on the sequence
    modn_peptide = "modn_peptide"
    modnaa_peptide = "modnaa_peptide"
    modc_peptide = "modc_peptide"
    modcaa_peptide = "modcaa_peptide"
    modn_protein = "modn_protein"
    modnaa_protein = "modnaa_protein"
    modc_protein = "modc_protein"
    modcaa_protein = "modcaa_protein"

    @property
    def targets_residue(self) -> bool:
        return self in _RESIDUE_TYPES


_RESIDUE_TYPES = frozenset(
    {
        ModificationType.modaa,
        ModificationType.modnaa_peptide,
        ModificationType.modcaa_peptide,
        ModificationType.modnaa_protein,
        ModificationType.modcaa_protein,
    }
)


@dataclass(frozen=True)
class Modification:
    """
    Modification definition.

    Attributes:
        name: Unique name
        modification_type: Placement rule; unknown values are kept as given
        pattern: Targeted amino acid pattern
        mass: Monoisotopic mass shift
        short_name: Abbreviation
        neutral_losses: Names of the neutral losses of the modified residue
    """

    name: str
    modification_type: Union[ModificationType, str]
    pattern: AminoAcidPattern = field(default_factory=AminoAcidPattern)
    mass: float = 0.0
    short_name: str = ""
    neutral_losses: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.modification_type, ModificationType):
            try:
                object.__setattr__(self, "modification_type", ModificationType(self.modification_type))
            except ValueError:
                logger.debug(f"Keeping unknown modification type {self.modification_type!r} for {self.name}")
        object.__setattr__(self, "neutral_losses", tuple(self.neutral_losses))

    @property
    def is_terminal(self) -> bool:
        return self.modification_type != ModificationType.modaa


@dataclass(frozen=True)
class ModificationMatch:
    """
    A modification attached to a peptide.

    Attributes:
        modification: Name of the modification
        site: 0 for the N-terminus, 1..length for residues, length + 1 for the C-terminus
        variable: False for fixed modifications
        confident: The site is confidently localized
        inferred: The site was inferred from another peptide
    """

    modification: str
    site: int
    variable: bool = True
    confident: bool = False
    inferred: bool = False

    def signature(self) -> str:
        """Key component of the match, located when confident or inferred."""
        if self.confident or self.inferred:
            return f"{self.modification}-ATAA-{self.site}"
        return self.modification


_OPENMS_TERM_TYPES = {
    "N-term": (ModificationType.modn_peptide, ModificationType.modnaa_peptide),
    "C-term": (ModificationType.modc_peptide, ModificationType.modcaa_peptide),
    "Protein N-term": (ModificationType.modn_protein, ModificationType.modnaa_protein),
    "Protein C-term": (ModificationType.modc_protein, ModificationType.modcaa_protein),
}


def modification_from_openms(name: str, mod_db=None) -> Modification:
    """
    Build a modification from the OpenMS modification database.

    Args:
        name: Full OpenMS id, e.g. "Phospho (S)"
        mod_db: Optional pyopenms ModificationsDB instance

    Returns:
        The corresponding Modification
    """
    if mod_db is None:
        from pyopenms import ModificationsDB

        mod_db = ModificationsDB()
    residue_modification = mod_db.getModification(name)

    origin = residue_modification.getOrigin()
    if isinstance(origin, bytes):
        origin = origin.decode()
    term = residue_modification.getTermSpecificityName(residue_modification.getTermSpecificity())
    if isinstance(term, bytes):
        term = term.decode()

    specific_residue = origin not in ("", "X", ".")
    pattern = AminoAcidPattern.from_residues(origin) if specific_residue else AminoAcidPattern()
    if term in _OPENMS_TERM_TYPES:
        terminal_type, residue_type = _OPENMS_TERM_TYPES[term]
        modification_type = residue_type if specific_residue else terminal_type
    else:
        modification_type = ModificationType.modaa

    return Modification(
        name=name,
        modification_type=modification_type,
        pattern=pattern,
        mass=residue_modification.getDiffMonoMass(),
        short_name=residue_modification.getId(),
    )


def _default_modifications() -> List[Modification]:
    return [
        Modification("Phosphorylation of S", ModificationType.modaa, AminoAcidPattern.from_residues("S"), 79.966331, "p", ("H3PO4",)),
        Modification("Phosphorylation of T", ModificationType.modaa, AminoAcidPattern.from_residues("T"), 79.966331, "p", ("H3PO4",)),
        Modification("Phosphorylation of Y", ModificationType.modaa, AminoAcidPattern.from_residues("Y"), 79.966331, "p"),
        Modification("Oxidation of M", ModificationType.modaa, AminoAcidPattern.from_residues("M"), 15.994915, "ox", ("CH4OS",)),
        Modification("Carbamidomethylation of C", ModificationType.modaa, AminoAcidPattern.from_residues("C"), 57.021464, "cmm"),
        Modification("Acetylation of K", ModificationType.modaa, AminoAcidPattern.from_residues("K"), 42.010565, "ac"),
        Modification("Acetylation of protein N-term", ModificationType.modn_protein, AminoAcidPattern(), 42.010565, "ac"),
        Modification("Pyrolidone from Q", ModificationType.modnaa_peptide, AminoAcidPattern.from_residues("Q"), -17.026549, "pyro"),
        Modification("Amidation of the peptide C-term", ModificationType.modc_peptide, AminoAcidPattern(), -0.984016, "am"),
        Modification("Deamidation of N", ModificationType.modaa, AminoAcidPattern.from_residues("N"), 0.984016, "deam"),
        Modification("Deamidation of Q", ModificationType.modaa, AminoAcidPattern.from_residues("Q"), 0.984016, "deam"),
        Modification("HexNAc of N in NX[ST]", ModificationType.modaa, AminoAcidPattern.from_string("NX[ST]"), 203.079373, "glyco"),
    ]


class ModificationFactory:
    """
    Lookup of modification definitions by name.

    The shared instance returned by get_instance() is populated once with
    common modifications and is read-only for scoring code.
    """

    _instance: Optional["ModificationFactory"] = None
    _lock = threading.Lock()

    def __init__(self, modifications: Optional[List[Modification]] = None):
        self._modifications: Dict[str, Modification] = {}
        for modification in modifications or []:
            self.add_modification(modification)

    @classmethod
    def get_instance(cls) -> "ModificationFactory":
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls(_default_modifications())
                logger.debug(f"Loaded {len(cls._instance)} default modifications")
            return cls._instance

    def add_modification(self, modification: Modification) -> None:
        self._modifications[modification.name] = modification

    def get_modification(self, name: str) -> Modification:
        try:
            return self._modifications[name]
        except KeyError:
            raise UnknownModification(name) from None

    def contains(self, name: str) -> bool:
        return name in self._modifications

    def names(self) -> List[str]:
        return sorted(self._modifications)

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def __len__(self):
        return len(self._modifications)


@dataclass
class ModificationParameters:
    """Fixed and variable modifications searched for."""

    fixed_modifications: List[str] = field(default_factory=list)
    variable_modifications: List[str] = field(default_factory=list)

    def get_all_not_fixed_modifications(self) -> List[str]:
        return [name for name in self.variable_modifications if name not in self.fixed_modifications]

    def get_all_modifications(self) -> List[str]:
        return list(dict.fromkeys(self.fixed_modifications + self.variable_modifications))
