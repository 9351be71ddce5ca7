"""
Spectra, intensity tiers and fragment ion annotation.
"""

from .annotator import FragmentAnnotator, FragmentIon, IonMatch, SpectrumAnnotator
from .reduction import reduce_spectrum
from .spectrum import Peak, Spectrum

__all__ = [
    "FragmentAnnotator",
    "FragmentIon",
    "IonMatch",
    "SpectrumAnnotator",
    "reduce_spectrum",
    "Peak",
    "Spectrum",
]
