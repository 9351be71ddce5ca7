"""
Possible modification sites on peptides.

Sites follow the peptide convention: 0 is the N-terminus, 1..length are the
residues and length + 1 is the C-terminus. Each modification type has its own
handler; residue patterns extending beyond the peptide are resolved on the
flanking protein sequence.
"""

import logging
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional

from ..config import SequenceMatchingParameters
from ..exceptions import MissingPatternDefinition, UnsupportedModificationType
from ..model.modification import Modification, ModificationFactory, ModificationParameters, ModificationType
from ..model.peptide import Peptide, is_protein_cterm, is_protein_nterm

logger = logging.getLogger(__name__)


class SequenceContext(NamedTuple):
    """Peptide sequence extended with flanking protein residues."""

    accession: Optional[str]
    start: Optional[int]
    protein_sequence: Optional[str]
    extended: str
    offset: int  # index of the first peptide residue in extended


def _contexts(peptide: Peptide, modification: Modification, sequence_provider) -> Iterator[SequenceContext]:
    """
    Yield the sequence contexts needed to match the modification pattern.

    Without protein mapping, or for single residue patterns, the bare peptide
    sequence is the only context.
    """
    pattern = modification.pattern
    if pattern.length <= 1 or not peptide.protein_mapping or sequence_provider is None:
        yield SequenceContext(None, None, None, peptide.sequence, 0)
        return
    for accession, starts in peptide.protein_mapping.items():
        protein_sequence = sequence_provider.get_sequence(accession)
        for start in starts:
            end = peptide.peptide_end(accession, start) + 1
            prefix = sequence_provider.get_subsequence(accession, start + pattern.min_index, start)
            suffix = sequence_provider.get_subsequence(accession, end, end + pattern.max_index)
            yield SequenceContext(
                accession, start, protein_sequence, prefix + peptide.sequence + suffix, len(prefix)
            )


def _locations(peptide: Peptide, sequence_provider):
    """Yield (accession, protein sequence, start) for every mapped location."""
    if sequence_provider is None:
        return
    for accession, starts in peptide.protein_mapping.items():
        protein_sequence = sequence_provider.get_sequence(accession)
        for start in starts:
            yield accession, protein_sequence, start


def _require_pattern(modification: Modification) -> None:
    if modification.pattern.length == 0:
        raise MissingPatternDefinition(modification.name)


# Handlers, one per modification type


def _sites_anywhere(peptide, modification, sequence_provider, matching_parameters) -> Iterable[int]:
    _require_pattern(modification)
    length = peptide.length
    sites = set()
    for context in _contexts(peptide, modification, sequence_provider):
        for index in modification.pattern.indexes(context.extended, matching_parameters):
            site = index - context.offset
            if 1 <= site <= length:
                sites.add(site)
    return sites


def _sites_peptide_nterm(peptide, modification, sequence_provider, matching_parameters) -> Iterable[int]:
    return [0]


def _sites_peptide_cterm(peptide, modification, sequence_provider, matching_parameters) -> Iterable[int]:
    return [peptide.length + 1]


def _sites_peptide_nterm_residue(peptide, modification, sequence_provider, matching_parameters) -> Iterable[int]:
    _require_pattern(modification)
    pattern = modification.pattern
    for context in _contexts(peptide, modification, sequence_provider):
        if pattern.matches_at(context.extended, context.offset, matching_parameters):
            return [0]
    return []


def _sites_peptide_cterm_residue(peptide, modification, sequence_provider, matching_parameters) -> Iterable[int]:
    _require_pattern(modification)
    pattern = modification.pattern
    last = peptide.length - 1
    for context in _contexts(peptide, modification, sequence_provider):
        if pattern.matches_at(context.extended, context.offset + last, matching_parameters):
            return [peptide.length + 1]
    return []


def _sites_protein_nterm(peptide, modification, sequence_provider, matching_parameters) -> Iterable[int]:
    for _, protein_sequence, start in _locations(peptide, sequence_provider):
        if is_protein_nterm(protein_sequence, start):
            return [0]
    return []


def _sites_protein_cterm(peptide, modification, sequence_provider, matching_parameters) -> Iterable[int]:
    for accession, protein_sequence, start in _locations(peptide, sequence_provider):
        if is_protein_cterm(protein_sequence, peptide.peptide_end(accession, start)):
            return [peptide.length + 1]
    return []


def _sites_protein_nterm_residue(peptide, modification, sequence_provider, matching_parameters) -> Iterable[int]:
    _require_pattern(modification)
    pattern = modification.pattern
    for accession, protein_sequence, start in _locations(peptide, sequence_provider):
        if not is_protein_nterm(protein_sequence, start):
            continue
        # Residues before the peptide, a cleavable methionine included, stay in context.
        if pattern.matches_at(protein_sequence, start, matching_parameters):
            return [0]
    return []


def _sites_protein_cterm_residue(peptide, modification, sequence_provider, matching_parameters) -> Iterable[int]:
    _require_pattern(modification)
    pattern = modification.pattern
    for accession, protein_sequence, start in _locations(peptide, sequence_provider):
        end = peptide.peptide_end(accession, start)
        if not is_protein_cterm(protein_sequence, end):
            continue
        if pattern.matches_at(protein_sequence, end, matching_parameters):
            return [peptide.length + 1]
    return []


_SITE_HANDLERS = {
    ModificationType.modaa: _sites_anywhere,
    ModificationType.modn_peptide: _sites_peptide_nterm,
    ModificationType.modc_peptide: _sites_peptide_cterm,
    ModificationType.modnaa_peptide: _sites_peptide_nterm_residue,
    ModificationType.modcaa_peptide: _sites_peptide_cterm_residue,
    ModificationType.modn_protein: _sites_protein_nterm,
    ModificationType.modc_protein: _sites_protein_cterm,
    ModificationType.modnaa_protein: _sites_protein_nterm_residue,
    ModificationType.modcaa_protein: _sites_protein_cterm_residue,
}


def possible_sites(
    peptide: Peptide,
    modification: Modification,
    sequence_provider,
    matching_parameters: SequenceMatchingParameters,
) -> List[int]:
    """
    Sites of a peptide where a modification can be located.

    Args:
        peptide: The peptide, with protein mapping when protein context is needed
        modification: The modification definition
        sequence_provider: Provider of the mapped protein sequences
        matching_parameters: Residue comparison settings

    Returns:
        Possible sites in ascending order

    Raises:
        UnsupportedModificationType: No site logic for the modification type
        MissingPatternDefinition: A residue modification without target residues
    """
    handler = _SITE_HANDLERS.get(modification.modification_type)
    if handler is None:
        raise UnsupportedModificationType(modification.modification_type)
    sites = sorted(set(handler(peptide, modification, sequence_provider, matching_parameters)))
    logger.debug(f"Possible sites of {modification.name} on {peptide.sequence}: {sites}")
    return sites


def possible_sites_on_sequence(
    sequence: str,
    n_term: bool,
    c_term: bool,
    modification: Modification,
    matching_parameters: SequenceMatchingParameters,
) -> List[int]:
    """
    Possible sites on a bare sequence.

    Args:
        sequence: Amino acid sequence
        n_term: The sequence starts at a peptide N-terminus
        c_term: The sequence ends at a peptide C-terminus
        modification: The modification definition
        matching_parameters: Residue comparison settings

    Returns:
        Possible sites in ascending order, protein terminal modifications
        never match without protein context
    """
    modification_type = modification.modification_type
    pattern = modification.pattern
    if modification_type not in _SITE_HANDLERS:
        raise UnsupportedModificationType(modification_type)
    if modification_type.targets_residue:
        _require_pattern(modification)

    if modification_type == ModificationType.modaa:
        return pattern.indexes(sequence, matching_parameters)
    if modification_type == ModificationType.modn_peptide:
        return [0] if n_term else []
    if modification_type == ModificationType.modc_peptide:
        return [len(sequence) + 1] if c_term else []
    if modification_type == ModificationType.modnaa_peptide:
        return [0] if n_term and pattern.matches_at(sequence, 0, matching_parameters) else []
    if modification_type == ModificationType.modcaa_peptide:
        if c_term and pattern.matches_at(sequence, len(sequence) - 1, matching_parameters):
            return [len(sequence) + 1]
        return []
    return []


def get_site(index: int, length: int) -> int:
    """
    Site of a 0-based residue index.

    Args:
        index: 0-based residue index, -1 for the N-terminus, length for the C-terminus
        length: Sequence length

    Returns:
        The site following the peptide convention
    """
    if not -1 <= index <= length:
        raise ValueError(f"Index {index} outside sequence of length {length}")
    return index + 1


def expected_modifications(
    mass: float,
    modification_parameters: ModificationParameters,
    peptide: Peptide,
    mass_tolerance: float,
    sequence_provider,
    matching_parameters: SequenceMatchingParameters,
    modification_factory: Optional[ModificationFactory] = None,
) -> Dict[int, List[str]]:
    """
    Non-fixed modifications of a given mass that can be located on a peptide.

    Args:
        mass: Modification mass searched
        modification_parameters: Searched modifications
        peptide: The peptide
        mass_tolerance: Mass tolerance in Da
        sequence_provider: Provider of the mapped protein sequences
        matching_parameters: Residue comparison settings
        modification_factory: Modification lookup, the peptide's if None

    Returns:
        Mapping of site to the names of the modifications possible there
    """
    factory = modification_factory or peptide.modification_factory
    result: Dict[int, List[str]] = {}
    for name in modification_parameters.get_all_not_fixed_modifications():
        modification = factory.get_modification(name)
        if abs(modification.mass - mass) > mass_tolerance:
            continue
        for site in possible_sites(peptide, modification, sequence_provider, matching_parameters):
            result.setdefault(site, []).append(name)
    return result
