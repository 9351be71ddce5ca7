"""
Spectrum module.

This module contains the Spectrum class holding the peak list of a fragment
ion spectrum as m/z sorted NumPy arrays.
"""

import logging
from typing import Iterator, NamedTuple, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


class Peak(NamedTuple):
    """A spectrum peak."""

    mz: float
    intensity: float


class Spectrum:
    """
    Class representing a fragment ion spectrum.

    Args:
        mz_array: Array of m/z values
        intensity_array: Array of intensity values
        precursor_mz: Precursor m/z
        precursor_charge: Precursor charge
        title: Spectrum title or native id
    """

    def __init__(
        self,
        mz_array=None,
        intensity_array=None,
        precursor_mz: Optional[float] = None,
        precursor_charge: Optional[int] = None,
        title: str = "",
    ):
        mz_array = np.asarray(mz_array if mz_array is not None else [], dtype=float)
        intensity_array = np.asarray(intensity_array if intensity_array is not None else [], dtype=float)
        if mz_array.shape != intensity_array.shape:
            raise ValueError("m/z and intensity arrays must have the same length")

        # Keep peaks sorted by m/z
        order = np.argsort(mz_array, kind="stable")
        self.mz = mz_array[order]
        self.intensity = intensity_array[order]
        self.precursor_mz = precursor_mz
        self.precursor_charge = precursor_charge
        self.title = title

    @classmethod
    def from_openms(cls, ms_spectrum, title: Optional[str] = None) -> "Spectrum":
        """
        Create a spectrum from a pyopenms MSSpectrum.

        Args:
            ms_spectrum: pyopenms.MSSpectrum
            title: Title, the native id if None

        Returns:
            The spectrum
        """
        mz_array, intensity_array = ms_spectrum.get_peaks()
        precursor_mz = None
        precursor_charge = None
        precursors = ms_spectrum.getPrecursors()
        if precursors:
            precursor_mz = precursors[0].getMZ()
            precursor_charge = precursors[0].getCharge() or None
        if title is None:
            title = ms_spectrum.getNativeID()
            if isinstance(title, bytes):
                title = title.decode()
        return cls(mz_array, intensity_array, precursor_mz, precursor_charge, title)

    def to_openms(self):
        """Convert to a pyopenms MSSpectrum."""
        import pyopenms

        ms_spectrum = pyopenms.MSSpectrum()
        ms_spectrum.set_peaks((self.mz, self.intensity))
        ms_spectrum.setMSLevel(2)
        if self.title:
            ms_spectrum.setNativeID(self.title)
        if self.precursor_mz is not None:
            precursor = pyopenms.Precursor()
            precursor.setMZ(self.precursor_mz)
            if self.precursor_charge:
                precursor.setCharge(self.precursor_charge)
            ms_spectrum.setPrecursors([precursor])
        return ms_spectrum

    def __len__(self):
        return len(self.mz)

    def is_empty(self) -> bool:
        return len(self.mz) == 0

    def peaks(self) -> Iterator[Peak]:
        for mz, intensity in zip(self.mz, self.intensity):
            yield Peak(float(mz), float(intensity))

    def get_peaks(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.mz, self.intensity

    @property
    def max_intensity(self) -> float:
        if self.is_empty():
            return 0.0
        return float(self.intensity.max())

    def intensity_threshold(self, fraction: float) -> float:
        """Intensity below which the given fraction of the peaks lies."""
        if self.is_empty() or fraction <= 0:
            return 0.0
        return float(np.quantile(self.intensity, min(fraction, 1.0)))

    def find_peaks(self, mz: float, tolerance: float) -> np.ndarray:
        """
        Find the indices of the peaks within tolerance of an m/z.

        Args:
            mz: Searched m/z
            tolerance: Absolute m/z tolerance

        Returns:
            Array of peak indices
        """
        start = np.searchsorted(self.mz, mz - tolerance, side="left")
        end = np.searchsorted(self.mz, mz + tolerance, side="right")
        return np.arange(start, end)

    def subset(self, indexes, title: Optional[str] = None) -> "Spectrum":
        """Spectrum restricted to the peaks at the given indices."""
        indexes = np.sort(np.asarray(indexes, dtype=int))
        return Spectrum(
            self.mz[indexes],
            self.intensity[indexes],
            self.precursor_mz,
            self.precursor_charge,
            self.title if title is None else title,
        )

    def __repr__(self):
        return f"Spectrum(title={self.title!r}, peaks={len(self)})"
