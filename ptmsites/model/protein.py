"""
Protein sequence providers.
"""

import logging
from typing import Dict, Iterable, Optional, Set

logger = logging.getLogger(__name__)

DEFAULT_DECOY_TAGS = ("DECOY_", "REV_", "_REVERSED")


class SequenceProvider:
    """Read-only access to protein sequences by accession."""

    def get_sequence(self, accession: str) -> str:
        raise NotImplementedError

    def get_subsequence(self, accession: str, start: int, end: int) -> str:
        """
        Protein subsequence between 0-based start (inclusive) and end (exclusive).

        Bounds are clamped to the protein.
        """
        sequence = self.get_sequence(accession)
        start = max(start, 0)
        end = min(end, len(sequence))
        if end <= start:
            return ""
        return sequence[start:end]

    def get_decoy_accessions(self) -> Set[str]:
        return set()


class InMemorySequenceProvider(SequenceProvider):
    """
    Sequence provider backed by a dictionary.

    Args:
        sequences: Mapping of accession to protein sequence
        decoy_tags: Accession prefixes or suffixes marking decoy proteins
    """

    def __init__(self, sequences: Optional[Dict[str, str]] = None, decoy_tags: Iterable[str] = DEFAULT_DECOY_TAGS):
        self.sequences = {accession: sequence.upper() for accession, sequence in (sequences or {}).items()}
        self.decoy_tags = tuple(decoy_tags)

    @classmethod
    def from_fasta(cls, fasta_file: str, decoy_tags: Iterable[str] = DEFAULT_DECOY_TAGS) -> "InMemorySequenceProvider":
        """Load all entries of a FASTA file."""
        from pyopenms import FASTAFile

        entries = []
        FASTAFile().load(str(fasta_file), entries)
        sequences = {entry.identifier: entry.sequence for entry in entries}
        logger.info(f"Loaded {len(sequences)} protein sequences from {fasta_file}")
        return cls(sequences, decoy_tags)

    def get_sequence(self, accession: str) -> str:
        try:
            return self.sequences[accession]
        except KeyError:
            raise KeyError(f"Protein {accession} not found.") from None

    def get_decoy_accessions(self) -> Set[str]:
        return {
            accession
            for accession in self.sequences
            if any(accession.startswith(tag) or accession.endswith(tag) for tag in self.decoy_tags)
        }

    def __contains__(self, accession: str) -> bool:
        return accession in self.sequences

    def __len__(self):
        return len(self.sequences)
