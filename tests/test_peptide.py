"""
Test the peptide model and sequence providers.
"""

import pytest

from ptmsites.constants import WATER_MASS
from ptmsites.exceptions import UnknownAminoAcid
from ptmsites.model.modification import ModificationMatch, ModificationParameters
from ptmsites.model.peptide import Peptide, PeptideVariantMatches
from ptmsites.model.protein import InMemorySequenceProvider, SequenceProvider


def test_peptide_creation():
    """Test basic peptide attributes."""
    peptide = Peptide("peptide")
    assert peptide.sequence == "PEPTIDE"
    assert peptide.length == 7
    assert len(peptide) == 7
    assert peptide.key == "PEPTIDE"
    assert peptide.variable_modifications == ()


def test_peptide_validation():
    """Test rejected sequences and sites."""
    with pytest.raises(ValueError):
        Peptide("")
    with pytest.raises(UnknownAminoAcid):
        Peptide("PEP*TIDE")
    with pytest.raises(ValueError):
        Peptide("PEPTIDE", [ModificationMatch("Oxidation of M", 9)])


def test_peptide_is_immutable():
    """Test that builders return new peptides."""
    peptide = Peptide("PEPTMIDE")
    modified = peptide.with_modification(ModificationMatch("Oxidation of M", 5))
    assert peptide.variable_modifications == ()
    assert modified.n_variable_modifications() == 1
    assert modified.without_modifications().key == "PEPTMIDE"
    assert modified.without_modifications(["Phosphorylation of S"]) == modified


def test_peptide_key():
    """Test that the key ignores unlocalized sites."""
    first = Peptide("PEPTMIDEM", [ModificationMatch("Oxidation of M", 5)])
    second = Peptide("PEPTMIDEM", [ModificationMatch("Oxidation of M", 9)])
    assert first.key == second.key == "PEPTMIDEM_Oxidation of M"
    assert first != second

    confident = Peptide("PEPTMIDEM", [ModificationMatch("Oxidation of M", 5, confident=True)])
    assert confident.key == "PEPTMIDEM_Oxidation of M-ATAA-5"


def test_peptide_mass():
    """Test the monoisotopic mass with modifications."""
    peptide = Peptide("GG")
    assert peptide.mass == pytest.approx(2 * 57.02146 + WATER_MASS)
    oxidized = Peptide("MG", [ModificationMatch("Oxidation of M", 1)])
    assert oxidized.mass == pytest.approx(131.04049 + 57.02146 + WATER_MASS + 15.994915)


def test_theoretic_mass_with_fixed_modifications(string_matching):
    """Test that fixed modifications are added to the theoretic mass."""
    peptide = Peptide("CAC")
    parameters = ModificationParameters(fixed_modifications=["Carbamidomethylation of C"])
    assert peptide.theoretic_mass(parameters, None, string_matching) == pytest.approx(
        peptide.mass + 2 * 57.021464
    )
    fixed = peptide.fixed_modifications(parameters, None, string_matching)
    assert fixed == [None, "Carbamidomethylation of C", None, "Carbamidomethylation of C", None]


def test_indexed_variable_modifications():
    """Test modifications indexed by site."""
    peptide = Peptide("SAS", [ModificationMatch("Phosphorylation of S", 3)])
    assert peptide.indexed_variable_modifications() == [None, None, None, "Phosphorylation of S", None]

    clash = Peptide("SAS", [ModificationMatch("Phosphorylation of S", 1), ModificationMatch("Oxidation of M", 1)])
    with pytest.raises(ValueError):
        clash.indexed_variable_modifications()


def test_matching_sequence(indistinguishable_matching, string_matching):
    """Test the sequence collapsing I and L."""
    peptide = Peptide("LEIJ")
    assert peptide.matching_sequence(indistinguishable_matching) == "IEII"
    assert peptide.matching_sequence(string_matching) == "LEIJ"
    assert peptide.is_same_sequence(Peptide("IEIL"), indistinguishable_matching)
    assert not peptide.is_same_sequence(Peptide("IEIL"), string_matching)


def test_modification_status():
    """Test comparison of modification status and sites."""
    first = Peptide("SAS", [ModificationMatch("Phosphorylation of S", 1)])
    second = Peptide("SAS", [ModificationMatch("Phosphorylation of S", 3)])
    assert first.is_same_modification_status(second)
    assert not first.same_modifications_as(second)
    assert first.same_modifications_as(second, names=["Oxidation of M"])


def test_protein_termini(sequence_provider):
    """Test protein terminal checks, methionine cleavage included."""
    assert Peptide("KPEP", protein_mapping={"P1": [1]}).is_nterm(sequence_provider)
    assert Peptide("QPEP", protein_mapping={"P3": [0]}).is_nterm(sequence_provider)
    assert not Peptide("PEPTIDE", protein_mapping={"P1": [2]}).is_nterm(sequence_provider)
    assert not Peptide("KNAT", protein_mapping={"P2": [1]}).is_nterm(sequence_provider)
    assert Peptide("IDER", protein_mapping={"P1": [6]}).is_cterm(sequence_provider)
    assert not Peptide("TIDE", protein_mapping={"P1": [5]}).is_cterm(sequence_provider)


def test_peptide_end_with_variants():
    """Test that variant length differences move the peptide end."""
    peptide = Peptide(
        "PEPTIDE",
        protein_mapping={"P1": [2]},
        variant_matches={"P1": {2: PeptideVariantMatches(length_diff=1, variants=("insertion",))}},
    )
    assert peptide.peptide_end("P1", 2) == 9
    assert peptide.peptide_end("P2", 0) == 6


def test_sequence_provider(sequence_provider):
    """Test subsequences and decoys."""
    assert sequence_provider.get_subsequence("P1", 2, 5) == "PEP"
    assert sequence_provider.get_subsequence("P1", -3, 2) == "MK"
    assert sequence_provider.get_subsequence("P1", 8, 50) == "ER"
    assert sequence_provider.get_subsequence("P1", 5, 5) == ""
    assert sequence_provider.get_decoy_accessions() == {"DECOY_P1"}
    assert "P2" in sequence_provider
    with pytest.raises(KeyError):
        sequence_provider.get_sequence("P9")


def test_abstract_sequence_provider():
    """Test that the base provider has no sequences."""
    with pytest.raises(NotImplementedError):
        SequenceProvider().get_sequence("P1")


def test_sequence_provider_from_fasta(tmp_path):
    """Test loading sequences from a FASTA file."""
    pytest.importorskip("pyopenms")

    fasta = tmp_path / "proteins.fasta"
    fasta.write_text(">P1 first protein\nMKPEPTIDER\n>P2 second\nKKNATPEPNK\n")
    provider = InMemorySequenceProvider.from_fasta(str(fasta))
    assert len(provider) == 2
    assert provider.get_sequence("P1") == "MKPEPTIDER"
