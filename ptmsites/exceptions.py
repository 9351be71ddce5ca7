"""
Errors raised by ptmsites.
"""


class PtmSitesError(Exception):
    """Base class for ptmsites errors."""


class UnsupportedModificationType(PtmSitesError):
    """Raised when no site logic exists for a modification type."""

    def __init__(self, modification_type):
        self.modification_type = modification_type
        super().__init__(f"Modification type {modification_type!r} not supported.")


class MissingPatternDefinition(PtmSitesError):
    """Raised when a residue-targeted modification declares no target residues."""

    def __init__(self, modification_name: str):
        self.modification_name = modification_name
        super().__init__(f"Modification {modification_name!r} has no target amino acid pattern.")


class UnknownModification(PtmSitesError, KeyError):
    """Raised when a modification name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Modification {name!r} not found.")

    def __str__(self):
        return self.args[0]


class UnknownAminoAcid(PtmSitesError, ValueError):
    """Raised for an amino acid code missing from the registry."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unknown amino acid code {code!r}.")
