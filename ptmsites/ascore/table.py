"""
Intensities of the fragment ions covering each residue, by number of
modifications carried.
"""

from collections import defaultdict
from typing import Dict, List, Optional

import numpy as np


class PtmTableContent:
    """Fragment ion intensities keyed by (number of modifications, ion sub-type, residue index)."""

    def __init__(self):
        self.intensities_: Dict[int, Dict[str, Dict[int, List[float]]]] = defaultdict(
            lambda: defaultdict(lambda: defaultdict(list))
        )

    def add_intensity(self, n_modifications: int, ion_type: str, aa: int, intensity: float) -> None:
        self.intensities_[n_modifications][ion_type][aa].append(float(intensity))

    def get_intensities(self, n_modifications: int, ion_type: str, aa: int) -> List[float]:
        by_aa = self.intensities_.get(n_modifications, {}).get(ion_type, {})
        return list(by_aa.get(aa, []))

    def get_quantile(self, n_modifications: int, ion_type: str, aa: int, quantile: float) -> Optional[float]:
        intensities = self.get_intensities(n_modifications, ion_type, aa)
        if not intensities:
            return None
        return float(np.quantile(intensities, quantile))

    def get_histogram(self, n_modifications: int, ion_type: str, aa: int, bins: int) -> List[int]:
        """Histogram of the intensities over [0, max intensity of the table]."""
        intensities = self.get_intensities(n_modifications, ion_type, aa)
        upper = self.max_intensity() or 1.0
        counts, _ = np.histogram(intensities, bins=bins, range=(0.0, upper))
        return counts.tolist()

    def add_all(self, other: "PtmTableContent") -> None:
        for n_modifications, by_type in other.intensities_.items():
            for ion_type, by_aa in by_type.items():
                for aa, intensities in by_aa.items():
                    self.intensities_[n_modifications][ion_type][aa].extend(intensities)

    def max_intensity(self) -> float:
        return max(
            (
                max(intensities)
                for by_type in self.intensities_.values()
                for by_aa in by_type.values()
                for intensities in by_aa.values()
                if intensities
            ),
            default=0.0,
        )

    def normalize(self) -> None:
        """Scale all intensities by the maximal intensity."""
        maximum = self.max_intensity()
        if maximum <= 0:
            return
        for by_type in self.intensities_.values():
            for by_aa in by_type.values():
                for aa in by_aa:
                    by_aa[aa] = [intensity / maximum for intensity in by_aa[aa]]
