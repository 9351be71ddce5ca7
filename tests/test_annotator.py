"""
Test fragment ion annotation.
"""

import pytest

from ptmsites.constants import PROTON_MASS, WATER_MASS
from ptmsites.model.modification import ModificationMatch
from ptmsites.model.peptide import Peptide
from ptmsites.spectrum.annotator import FragmentAnnotator, FragmentIon, SpectrumAnnotator, fragment_charges
from ptmsites.spectrum.spectrum import Spectrum

B2_PEPTIDE = 97.05276 + 129.04259 + PROTON_MASS
Y1_PEPTIDE = 129.04259 + WATER_MASS + PROTON_MASS


def ions_by_label(ions):
    return {ion.label: ion for ion in ions}


def test_fragment_masses():
    """Test theoretical b and y ion m/z of PEPTIDE."""
    ions = ions_by_label(FragmentAnnotator().expected_ions(["b", "y"], [], [1], None, Peptide("PEPTIDE")))
    assert len(ions) == 12
    assert ions["b2+"].mz == pytest.approx(B2_PEPTIDE, abs=1e-5)
    assert ions["b2+"].mz == pytest.approx(227.10263, abs=1e-4)
    assert ions["y1+"].mz == pytest.approx(Y1_PEPTIDE, abs=1e-5)
    assert "b7+" not in ions


def test_other_ion_types():
    """Test a, c, x and z offsets relative to b and y ions."""
    ions = ions_by_label(FragmentAnnotator().expected_ions(["a", "b", "c", "x", "y", "z"], [], [1], None, Peptide("PEPTIDE")))
    assert ions["b2+"].mz - ions["a2+"].mz == pytest.approx(27.994915)
    assert ions["c2+"].mz - ions["b2+"].mz == pytest.approx(17.026549)
    assert ions["x1+"].mz - ions["y1+"].mz == pytest.approx(43.989829 - WATER_MASS)


def test_fragment_charges():
    """Test that fragments carry a lower charge than the precursor."""
    assert fragment_charges([1, 2, 3], 2) == [1]
    assert fragment_charges([1, 2, 3], 3) == [1, 2]
    assert fragment_charges([2, 1], None) == [1, 2]

    peptide = Peptide("PEPTIDE")
    annotator = FragmentAnnotator()
    assert annotator.expected_ion_count(["b", "y"], [], [1, 2], 2, peptide) == 12
    assert annotator.expected_ion_count(["b", "y"], [], [1, 2], 3, peptide) == 24
    doubly = ions_by_label(annotator.expected_ions(["b"], [], [2], None, peptide))
    assert doubly["b2++"].mz == pytest.approx((B2_PEPTIDE + PROTON_MASS) / 2)


def test_modified_fragments():
    """Test that modifications shift the fragments containing them."""
    peptide = Peptide("SAK", [ModificationMatch("Phosphorylation of S", 1)])
    ions = ions_by_label(FragmentAnnotator().expected_ions(["b", "y"], [], [1], None, peptide))
    assert ions["b1+"].mz == pytest.approx(87.03203 + 79.966331 + PROTON_MASS)
    assert ions["y1+"].mz == pytest.approx(128.09496 + WATER_MASS + PROTON_MASS)


def test_terminal_modification():
    """Test a modification on the N-terminus."""
    peptide = Peptide("PEPTIDE", [ModificationMatch("Acetylation of protein N-term", 0)])
    ions = ions_by_label(FragmentAnnotator().expected_ions(["b", "y"], [], [1], None, peptide))
    assert ions["b1+"].mz == pytest.approx(97.05276 + 42.010565 + PROTON_MASS)
    assert ions["y1+"].mz == pytest.approx(Y1_PEPTIDE)


def test_neutral_losses_from_modified_residues():
    """Test that phosphate losses require a phosphorylated residue."""
    annotator = FragmentAnnotator()
    modified = Peptide("SAK", [ModificationMatch("Phosphorylation of S", 1)])
    ions = annotator.expected_ions(["b", "y"], ["H3PO4"], [1], None, modified)
    losses = [ion for ion in ions if ion.neutral_loss]
    assert sorted(ion.label for ion in losses) == ["b1+-H3PO4", "b2+-H3PO4"]
    assert annotator.expected_ion_count(["b", "y"], ["H3PO4"], [1], None, Peptide("SAK")) == 4


def test_neutral_losses_from_any_residue():
    """Test water loss from S, T, E and D."""
    ions = FragmentAnnotator().expected_ions(["b", "y"], ["H2O"], [1], None, Peptide("SAK"))
    assert sorted(ion.label for ion in ions if ion.neutral_loss) == ["b1+-H2O", "b2+-H2O"]


def test_invalid_annotation_settings():
    """Test unknown ion types and neutral losses."""
    annotator = FragmentAnnotator()
    with pytest.raises(ValueError):
        annotator.expected_ions(["q"], [], [1], None, Peptide("PEPTIDE"))
    with pytest.raises(ValueError):
        annotator.expected_ions(["b"], ["CO2"], [1], None, Peptide("PEPTIDE"))


def test_single_residue_peptide():
    """Test that a single residue has no fragment."""
    assert FragmentAnnotator().expected_ions(["b", "y"], [], [1], None, Peptide("K")) == []


def test_fragment_ion_residue_index():
    """Test the cleavage position of N- and C-terminal ions."""
    assert FragmentIon("b", 2, 1, None, 0.0).residue_index(7) == 2
    assert FragmentIon("y", 1, 1, None, 0.0).residue_index(7) == 6
    assert FragmentIon("y", 1, 1, None, 0.0).label == "y1+"


def test_matched_ions():
    """Test matching of theoretical ions to the most intense peak in tolerance."""
    spectrum = Spectrum(
        [B2_PEPTIDE - 0.01, B2_PEPTIDE + 0.01, Y1_PEPTIDE, 300.0],
        [100.0, 500.0, 50.0, 1000.0],
    )
    matches = FragmentAnnotator().matched_ions(["b", "y"], [], [1], None, spectrum, Peptide("PEPTIDE"), 0.0, 0.02)
    by_label = {match.ion.label: match for match in matches}
    assert sorted(by_label) == ["b2+", "y1+"]
    assert by_label["b2+"].peak_intensity == 500.0
    assert by_label["b2+"].error == pytest.approx(0.01, abs=1e-6)
    assert by_label["y1+"].number == 1


def test_matched_ions_intensity_threshold():
    """Test that peaks below the intensity threshold are ignored."""
    spectrum = Spectrum([B2_PEPTIDE, Y1_PEPTIDE], [100.0, 50.0])
    matches = FragmentAnnotator().matched_ions(["b", "y"], [], [1], None, spectrum, Peptide("PEPTIDE"), 60.0, 0.02)
    assert [match.ion.label for match in matches] == ["b2+"]
    assert FragmentAnnotator().matched_ions(["b", "y"], [], [1], None, Spectrum(), Peptide("PEPTIDE"), 0.0, 0.02) == []


def test_mass_shift():
    """Test an annotator shifting all fragments."""
    shifted = FragmentAnnotator().with_mass_shift(10.0)
    ions = ions_by_label(shifted.expected_ions(["b"], [], [1], None, Peptide("PEPTIDE")))
    assert ions["b2+"].mz == pytest.approx(B2_PEPTIDE + 10.0)


def test_annotator_contract():
    """Test that the base annotator must be implemented."""
    with pytest.raises(NotImplementedError):
        SpectrumAnnotator().expected_ions(["b"], [], [1], None, Peptide("PEPTIDE"))
