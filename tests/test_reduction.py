"""
Test spectra and intensity tiers.
"""

import numpy as np
import pytest

from ptmsites.spectrum.reduction import reduce_spectrum, window_ranks
from ptmsites.spectrum.spectrum import Peak, Spectrum


@pytest.fixture
def spectrum():
    """Five peaks over two 10 Da windows, given out of m/z order."""
    return Spectrum(
        [116.0, 101.0, 102.0, 103.0, 115.0],
        [50.0, 10.0, 30.0, 20.0, 5.0],
        precursor_mz=500.0,
        precursor_charge=2,
        title="scan=1",
    )


def test_spectrum_is_sorted(spectrum):
    """Test that peaks are kept sorted by m/z."""
    assert spectrum.mz.tolist() == [101.0, 102.0, 103.0, 115.0, 116.0]
    assert spectrum.intensity.tolist() == [10.0, 30.0, 20.0, 5.0, 50.0]
    assert list(spectrum.peaks())[0] == Peak(101.0, 10.0)
    assert len(spectrum) == 5
    assert spectrum.max_intensity == 50.0


def test_spectrum_validation():
    """Test mismatched arrays and empty spectra."""
    with pytest.raises(ValueError):
        Spectrum([1.0, 2.0], [1.0])
    empty = Spectrum()
    assert empty.is_empty()
    assert empty.max_intensity == 0.0
    assert empty.intensity_threshold(0.5) == 0.0


def test_find_peaks(spectrum):
    """Test peak lookup within tolerance."""
    assert spectrum.find_peaks(102.2, 0.5).tolist() == [1]
    assert spectrum.find_peaks(102.5, 0.5).tolist() == [1, 2]
    assert spectrum.find_peaks(110.0, 0.5).tolist() == []


def test_subset(spectrum):
    """Test restriction of a spectrum to some peaks."""
    subset = spectrum.subset([4, 0])
    assert subset.mz.tolist() == [101.0, 116.0]
    assert subset.precursor_charge == 2
    assert subset.title == "scan=1"


def test_window_ranks(spectrum):
    """Test window assignment and intensity ranks."""
    windows, ranks = window_ranks(spectrum, 0.5)
    assert windows.tolist() == [10, 10, 10, 11, 11]
    assert ranks.tolist() == [2, 0, 1, 1, 0]


def test_window_ranks_invalid_tolerance(spectrum):
    """Test that the tolerance must be positive."""
    with pytest.raises(ValueError):
        window_ranks(spectrum, 0.0)


def test_reduce_spectrum(spectrum):
    """Test tiers keeping the most intense peaks of each window."""
    tiers = reduce_spectrum(spectrum, 0.5, max_depth=3)
    assert sorted(tiers) == [1, 2, 3]
    assert tiers[1].mz.tolist() == [102.0, 116.0]
    assert tiers[2].mz.tolist() == [102.0, 103.0, 115.0, 116.0]
    assert tiers[3].mz.tolist() == spectrum.mz.tolist()


def test_tiers_grow_with_depth(spectrum):
    """Test that every tier contains the previous one."""
    tiers = reduce_spectrum(spectrum, 0.5)
    assert len(tiers) == 10
    for depth in range(2, 11):
        assert set(tiers[depth - 1].mz.tolist()) <= set(tiers[depth].mz.tolist())
    assert len(tiers[10]) == len(spectrum)


def test_auto_depth(spectrum):
    """Test that auto depth is the largest number of peaks in a window."""
    tiers = reduce_spectrum(spectrum, 0.5, max_depth="auto")
    assert sorted(tiers) == [1, 2, 3]
    assert reduce_spectrum(Spectrum(), 0.5, max_depth="auto") == {}


def test_invalid_depth(spectrum):
    """Test rejected depths."""
    with pytest.raises(ValueError):
        reduce_spectrum(spectrum, 0.5, max_depth=-1)
    with pytest.raises(ValueError):
        reduce_spectrum(spectrum, 0.5, max_depth="deep")


def test_tier_of_equal_intensities():
    """Test that ties in intensity keep the lowest m/z first."""
    spectrum = Spectrum(np.array([1.0, 2.0, 3.0]), np.array([7.0, 7.0, 7.0]))
    tiers = reduce_spectrum(spectrum, 1.0, max_depth=1)
    assert tiers[1].mz.tolist() == [1.0]


def test_from_openms_round_trip(spectrum):
    """Test conversion to and from pyopenms spectra."""
    pytest.importorskip("pyopenms")

    converted = Spectrum.from_openms(spectrum.to_openms())
    assert converted.mz.tolist() == spectrum.mz.tolist()
    assert converted.precursor_charge == 2
    assert converted.precursor_mz == pytest.approx(500.0)
    assert converted.title == "scan=1"
