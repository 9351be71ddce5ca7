"""
Constants and default configurations for ptmsites
"""

import sys

# Physical constants
WATER_MASS = 18.010564684
PROTON_MASS = 1.00727646688
AMMONIA_MASS = 17.026549
CARBON_MONOXIDE_MASS = 27.994915
PPM = 1.0 / 1000000.0

# Site convention
NTERM_SITE = 0  # peptide N-terminus, C-terminus is length + 1

# Residue table: code -> (three letter code, name, monoisotopic residue mass, composition)
RESIDUES = {
    "A": ("Ala", "Alanine", 71.03711, "C3H5NO"),
    "C": ("Cys", "Cysteine", 103.00919, "C3H5NOS"),
    "D": ("Asp", "Aspartic Acid", 115.02694, "C4H5NO3"),
    "E": ("Glu", "Glutamic Acid", 129.04259, "C5H7NO3"),
    "F": ("Phe", "Phenylalanine", 147.06841, "C9H9NO"),
    "G": ("Gly", "Glycine", 57.02146, "C2H3NO"),
    "H": ("His", "Histidine", 137.05891, "C6H7N3O"),
    "I": ("Ile", "Isoleucine", 113.08406, "C6H11NO"),
    "K": ("Lys", "Lysine", 128.09496, "C6H12N2O"),
    "L": ("Leu", "Leucine", 113.08406, "C6H11NO"),
    "M": ("Met", "Methionine", 131.04049, "C5H9NOS"),
    "N": ("Asn", "Asparagine", 114.04293, "C4H6N2O2"),
    "P": ("Pro", "Proline", 97.05276, "C5H7NO"),
    "Q": ("Gln", "Glutamine", 128.05858, "C5H8N2O2"),
    "R": ("Arg", "Arginine", 156.10111, "C6H12N4O"),
    "S": ("Ser", "Serine", 87.03203, "C3H5NO2"),
    "T": ("Thr", "Threonine", 101.04768, "C4H7NO2"),
    "V": ("Val", "Valine", 99.06841, "C5H9NO"),
    "W": ("Trp", "Tryptophan", 186.07931, "C11H10N2O"),
    "Y": ("Tyr", "Tyrosine", 163.06333, "C9H9NO2"),
    "U": ("Sec", "Selenocysteine", 150.95364, "C3H5NOSe"),
    "O": ("Pyl", "Pyrrolysine", 237.14773, "C12H19N3O2"),
}

STANDARD_RESIDUES = "ACDEFGHIKLMNPQRSTVWY"

# Combination codes: code -> (three letter code, name, members)
COMBINATION_RESIDUES = {
    "B": ("Asx", "Asparagine or Aspartic Acid", "DN"),
    "J": ("Xle", "Isoleucine or Leucine", "IL"),
    "Z": ("Glx", "Glutamine or Glutamic Acid", "EQ"),
    "X": ("Xaa", "Unknown Amino Acid", STANDARD_RESIDUES),
}

# Residues that cannot be told apart by mass
INDISTINGUISHABLE_RESIDUES = {"I": "I", "L": "I", "J": "I"}

# Fragment ion offsets added to the neutral residue sum of the fragment
ION_TYPES = {
    "a": -CARBON_MONOXIDE_MASS,  # -CO
    "b": 0.0,
    "c": AMMONIA_MASS,  # +NH3
    "x": 43.989829,  # +CO2
    "y": WATER_MASS,  # +H2O
    "z": 1.991841,  # +H2O -NH2
}
N_TERMINAL_IONS = ("a", "b", "c")

# Neutral losses: name -> (mass, residues, only from modified residues)
NEUTRAL_LOSSES = {
    "H2O": (18.010565, "STED", False),
    "NH3": (17.026549, "RKNQ", False),
    "H3PO4": (97.976896, "STY", True),
    "HPO3": (79.966331, "STY", True),
    "CH4OS": (63.998285, "M", True),
}

# A-score
TIER_WEIGHTS = {
    1: 0.5,
    2: 0.75,
    3: 1.0,
    4: 1.0,
    5: 1.0,
    6: 1.0,
    7: 0.75,
    8: 0.5,
    9: 0.25,
    10: 0.25,
}
DEFAULT_DEPTH = 10
AUTO_DEPTH = "auto"
WINDOW_TOLERANCE_FACTOR = 20
UNAMBIGUOUS_SCORE = 100.0
TIE_SCORE = 0.0
A_PLUS_TIE_SCORE = 50.0
MIN_PROBABILITY = sys.float_info.min

# Default configuration
DEFAULT_CONFIG = {
    # Fragment settings
    "fragment_mass_tolerance": 0.5,
    "ion_types": ["b", "y"],
    "charges": [1],
    "neutral_losses": [],
    "accounting_for_neutral_losses": False,
    "intensity_threshold": 0.0,
    # Scoring settings
    "max_depth": DEFAULT_DEPTH,
    "tie_score": TIE_SCORE,
    "a_plus_tie_score": A_PLUS_TIE_SCORE,
    # Sequence matching
    "matching_type": "indistinguishable",
    # Performance settings
    "num_threads": 4,
}

DEFAULT_NUM_THREADS = 4
