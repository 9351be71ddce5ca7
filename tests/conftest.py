"""
Test configuration and fixtures for ptmsites tests.
"""

import pytest

from ptmsites.config import SequenceMatchingParameters
from ptmsites.model.modification import ModificationFactory
from ptmsites.model.protein import InMemorySequenceProvider


@pytest.fixture(scope="session")
def factory():
    """Get the shared modification factory."""
    return ModificationFactory.get_instance()


@pytest.fixture
def string_matching():
    """Exact residue matching parameters."""
    return SequenceMatchingParameters.default_string_matching()


@pytest.fixture
def indistinguishable_matching():
    """Matching parameters treating I, L and J as identical."""
    return SequenceMatchingParameters.indistinguishable_amino_acids()


@pytest.fixture
def sequence_provider():
    """Small protein database."""
    return InMemorySequenceProvider(
        {
            "P1": "MKPEPTIDER",
            "P2": "KKNATPEPNK",
            "P3": "QPEPTIDE",
            "DECOY_P1": "REDITPEPKM",
        }
    )


# Markers for different test categories
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "cli: marks tests that test CLI functionality")
    config.addinivalue_line("markers", "algorithm: marks tests that test algorithm functionality")
