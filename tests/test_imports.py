"""
Test imports for ptmsites package.
"""

import ptmsites
from ptmsites import AScore, Peptide, possible_sites


def test_ptmsites_import():
    """Test that the main ptmsites package can be imported."""

    assert hasattr(ptmsites, "__version__")
    assert ptmsites.__version__ == "0.1.0"


def test_public_api_import():
    """Test that the main classes and functions can be imported."""
    assert AScore is not None
    assert Peptide is not None
    assert possible_sites is not None


def test_all_exports_exist():
    """Test that every name in __all__ is defined."""
    for name in ptmsites.__all__:
        assert hasattr(ptmsites, name), name


def test_cli_import():
    """Test that CLI can be imported."""
    from ptmsites import cli

    assert cli is not None
    assert hasattr(cli, "main")
