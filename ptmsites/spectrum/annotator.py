"""
Fragment ion annotation.

SpectrumAnnotator is the contract the localization scorer relies on.
FragmentAnnotator implements it with NumPy fragment ladders for a, b, c, x, y
and z ions.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from ..constants import ION_TYPES, N_TERMINAL_IONS, NEUTRAL_LOSSES, PROTON_MASS
from ..model.amino_acids import residue_mass
from ..model.modification import ModificationFactory
from ..model.peptide import Peptide
from .spectrum import Spectrum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FragmentIon:
    """
    Theoretical fragment ion.

    Attributes:
        ion_type: Ion sub-type, one of a, b, c, x, y, z
        number: Number of residues in the fragment
        charge: Fragment charge
        neutral_loss: Name of the neutral loss, None if intact
        mz: Theoretical m/z
    """

    ion_type: str
    number: int
    charge: int
    neutral_loss: Optional[str]
    mz: float

    @property
    def is_n_terminal(self) -> bool:
        return self.ion_type in N_TERMINAL_IONS

    def residue_index(self, length: int) -> int:
        """
        Number of residues on the N-terminal side of the cleavage.

        Fragment numbers of x, y and z ions count from the C-terminus.
        """
        return self.number if self.is_n_terminal else length - self.number

    @property
    def label(self) -> str:
        label = f"{self.ion_type}{self.number}" + "+" * self.charge
        if self.neutral_loss:
            label += f"-{self.neutral_loss}"
        return label


@dataclass(frozen=True)
class IonMatch:
    """A theoretical fragment ion matched to a spectrum peak."""

    ion: FragmentIon
    peak_mz: float
    peak_intensity: float

    @property
    def ion_type(self) -> str:
        return self.ion.ion_type

    @property
    def number(self) -> int:
        return self.ion.number

    @property
    def error(self) -> float:
        return self.peak_mz - self.ion.mz


class SpectrumAnnotator:
    """Matches the fragment ions of a peptide to a spectrum."""

    def expected_ions(
        self,
        ion_types: Iterable[str],
        neutral_losses: Iterable[str],
        charges: Iterable[int],
        precursor_charge: Optional[int],
        peptide: Peptide,
    ) -> List[FragmentIon]:
        raise NotImplementedError

    def expected_ion_count(
        self,
        ion_types: Iterable[str],
        neutral_losses: Iterable[str],
        charges: Iterable[int],
        precursor_charge: Optional[int],
        peptide: Peptide,
    ) -> int:
        return len(self.expected_ions(ion_types, neutral_losses, charges, precursor_charge, peptide))

    def matched_ions(
        self,
        ion_types: Iterable[str],
        neutral_losses: Iterable[str],
        charges: Iterable[int],
        precursor_charge: Optional[int],
        spectrum: Spectrum,
        peptide: Peptide,
        intensity_threshold: float,
        mz_tolerance: float,
    ) -> List[IonMatch]:
        raise NotImplementedError


def fragment_charges(charges: Iterable[int], precursor_charge: Optional[int]) -> List[int]:
    """Fragment charges below the precursor charge, singly charged fragments always kept."""
    return sorted(
        {charge for charge in charges if charge == 1 or precursor_charge is None or charge < precursor_charge}
    )


class FragmentAnnotator(SpectrumAnnotator):
    """
    Annotator computing fragment ion ladders.

    Modifications are taken from the variable modification matches of the
    peptide, fixed modifications must be attached as matches to be accounted.

    Args:
        modification_factory: Modification lookup, the peptide's if None
        mass_shift: Mass added to every fragment
    """

    def __init__(self, modification_factory: Optional[ModificationFactory] = None, mass_shift: float = 0.0):
        self.modification_factory = modification_factory
        self.mass_shift = mass_shift

    def with_mass_shift(self, mass_shift: float) -> "FragmentAnnotator":
        return FragmentAnnotator(self.modification_factory, mass_shift)

    def _site_masses(self, peptide: Peptide):
        """Residue masses with modifications, N-terminal and C-terminal mass."""
        factory = self.modification_factory or peptide.modification_factory
        masses = np.array([residue_mass(residue) for residue in peptide.sequence])
        n_term = 0.0
        c_term = 0.0
        modified = {}
        for match in peptide.variable_modifications:
            modification = factory.get_modification(match.modification)
            if match.site == 0:
                n_term += modification.mass
            elif match.site == peptide.length + 1:
                c_term += modification.mass
            else:
                masses[match.site - 1] += modification.mass
                modified.setdefault(match.site - 1, set()).update(modification.neutral_losses)
        return masses, n_term, c_term, modified

    @staticmethod
    def _loss_carriers(peptide: Peptide, loss: str, modified) -> np.ndarray:
        """Boolean array of the residues able to lose a neutral loss."""
        _, residues, from_modified = NEUTRAL_LOSSES[loss]
        carriers = np.zeros(peptide.length, dtype=bool)
        for index, residue in enumerate(peptide.sequence):
            if residue not in residues:
                continue
            if from_modified and loss not in modified.get(index, ()):
                continue
            carriers[index] = True
        return carriers

    def expected_ions(
        self,
        ion_types: Iterable[str],
        neutral_losses: Iterable[str],
        charges: Iterable[int],
        precursor_charge: Optional[int],
        peptide: Peptide,
    ) -> List[FragmentIon]:
        """
        Theoretical fragment ions of a peptide.

        Args:
            ion_types: Ion sub-types among a, b, c, x, y, z
            neutral_losses: Names of the neutral losses to consider
            charges: Fragment charges
            precursor_charge: Precursor charge, fragments must be of lower charge
            peptide: The peptide

        Returns:
            List of fragment ions
        """
        length = peptide.length
        if length < 2:
            return []
        masses, n_term, c_term, modified = self._site_masses(peptide)

        # Fragment k holds the first (or last) k residues, k in 1..length-1
        numbers = np.arange(1, length)
        prefix = np.cumsum(masses)[:-1] + n_term + self.mass_shift
        suffix = np.cumsum(masses[::-1])[:-1] + c_term + self.mass_shift

        loss_carriers = {}
        for loss in neutral_losses:
            if loss not in NEUTRAL_LOSSES:
                raise ValueError(f"Unknown neutral loss: {loss}")
            carriers = self._loss_carriers(peptide, loss, modified)
            loss_carriers[loss] = (
                np.cumsum(carriers)[:-1] > 0,
                np.cumsum(carriers[::-1])[:-1] > 0,
            )

        ions = []
        for ion_type in ion_types:
            if ion_type not in ION_TYPES:
                raise ValueError(f"Unknown ion type: {ion_type}")
            n_terminal = ion_type in N_TERMINAL_IONS
            neutral_masses = (prefix if n_terminal else suffix) + ION_TYPES[ion_type]
            for charge in fragment_charges(charges, precursor_charge):
                mz_values = (neutral_masses + charge * PROTON_MASS) / charge
                ions.extend(
                    FragmentIon(ion_type, int(number), charge, None, float(mz))
                    for number, mz in zip(numbers, mz_values)
                )
                for loss, (prefix_carriers, suffix_carriers) in loss_carriers.items():
                    carriers = prefix_carriers if n_terminal else suffix_carriers
                    loss_mz = mz_values - NEUTRAL_LOSSES[loss][0] / charge
                    ions.extend(
                        FragmentIon(ion_type, int(number), charge, loss, float(mz))
                        for number, mz, carried in zip(numbers, loss_mz, carriers)
                        if carried
                    )
        return ions

    def matched_ions(
        self,
        ion_types: Iterable[str],
        neutral_losses: Iterable[str],
        charges: Iterable[int],
        precursor_charge: Optional[int],
        spectrum: Spectrum,
        peptide: Peptide,
        intensity_threshold: float,
        mz_tolerance: float,
    ) -> List[IonMatch]:
        """
        Fragment ions of a peptide found in a spectrum.

        Each theoretical ion is matched to the most intense peak within
        tolerance whose intensity reaches the threshold.

        Returns:
            List of ion matches
        """
        ions = self.expected_ions(ion_types, neutral_losses, charges, precursor_charge, peptide)
        if not ions or spectrum.is_empty():
            return []
        return match_ions(ions, spectrum, intensity_threshold, mz_tolerance)


def match_ions(
    ions: Sequence[FragmentIon],
    spectrum: Spectrum,
    intensity_threshold: float,
    mz_tolerance: float,
) -> List[IonMatch]:
    """Match theoretical ions to the most intense peak within tolerance."""
    theoretical = np.array([ion.mz for ion in ions])
    starts = np.searchsorted(spectrum.mz, theoretical - mz_tolerance, side="left")
    ends = np.searchsorted(spectrum.mz, theoretical + mz_tolerance, side="right")

    matches = []
    for ion, start, end in zip(ions, starts, ends):
        if start == end:
            continue
        intensities = spectrum.intensity[start:end]
        best = int(np.argmax(intensities))
        if intensities[best] < intensity_threshold:
            continue
        matches.append(IonMatch(ion, float(spectrum.mz[start + best]), float(intensities[best])))
    return matches
