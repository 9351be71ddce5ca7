#!/usr/bin/env python3
"""
ptmsites CLI - command line access to modification site mapping and scoring.
"""

import logging
import sys

import click

from . import __version__
from .ascore import AScore
from .config import MatchingType, ScoringConfig, SequenceMatchingParameters
from .mapping.alignment import align as align_sites
from .mapping.alignment import align_all
from .mapping.sites import possible_sites
from .model.modification import ModificationFactory
from .model.peptide import Peptide
from .model.protein import InMemorySequenceProvider
from .spectrum.spectrum import Spectrum


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _parse_series(value: str):
    try:
        return [int(item) for item in value.split(",") if item.strip()]
    except ValueError:
        raise click.BadParameter(f"Expected comma separated integers, got {value!r}")


def _parse_mapping(values):
    mapping = {}
    for value in values:
        accession, _, start = value.rpartition(":")
        if not accession or not start.isdigit():
            raise click.BadParameter(f"Expected ACCESSION:START, got {value!r}")
        mapping.setdefault(accession, []).append(int(start))
    return mapping


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    ptmsites: Post-translational modification site mapping and localization tool

    Available commands:
      sites           Possible sites of modifications on a peptide
      align           Alignment of two site series
      ascore          A-score localization of a modification in an mzML spectrum
      modifications   Known modification names

    Examples:
      ptmsites sites -s PEPTIDE -m "Deamidation of Q"
      ptmsites align -a 0,1,13,25 -b 2,12,14,30 --all
      ptmsites ascore -in spectra.mzML --spectrum-index 3 -s SAAAASK -m "Phosphorylation of S"
    """
    pass


@cli.command()
@click.option("-s", "--sequence", required=True, help="Peptide sequence")
@click.option("-m", "--modification", "modifications", multiple=True, required=True, help="Modification name")
@click.option("--fasta", type=click.Path(exists=True), help="Protein FASTA file for protein context")
@click.option("--mapping", "mappings", multiple=True, help="Peptide location as ACCESSION:START (0-based)")
@click.option(
    "--matching",
    type=click.Choice([matching_type.value for matching_type in MatchingType]),
    default=MatchingType.indistinguishable.value,
    help="Residue matching type (default: indistinguishable)",
)
@click.option("--debug", is_flag=True, help="Enable debug output")
def sites(sequence, modifications, fasta, mappings, matching, debug):
    """Possible sites of modifications on a peptide."""
    _setup_logging(debug)
    factory = ModificationFactory.get_instance()
    provider = InMemorySequenceProvider.from_fasta(fasta) if fasta else None
    peptide = Peptide(sequence, protein_mapping=_parse_mapping(mappings))
    matching_parameters = SequenceMatchingParameters(matching_type=MatchingType(matching))

    for name in modifications:
        modification = factory.get_modification(name)
        found = possible_sites(peptide, modification, provider, matching_parameters)
        click.echo(f"{name}\t{','.join(str(site) for site in found)}")


@cli.command()
@click.option("-a", "--series-a", required=True, help="Comma separated sites to align")
@click.option("-b", "--series-b", required=True, help="Comma separated target sites")
@click.option("--all", "exhaustive", is_flag=True, help="Re-align unmatched sites on remaining targets")
def align(series_a, series_b, exhaustive):
    """Alignment of two site series."""
    aligner = align_all if exhaustive else align_sites
    result = aligner(_parse_series(series_a), _parse_series(series_b))
    for site, target in result.items():
        click.echo(f"{site}\t{'' if target is None else target}")


@cli.command()
def modifications():
    """Known modification names."""
    for name in ModificationFactory.get_instance().names():
        click.echo(name)


@cli.command()
@click.option(
    "-in",
    "--in-file",
    "in_file",
    required=True,
    help="Input mzML file path",
    type=click.Path(exists=True),
)
@click.option("--spectrum-index", type=int, required=True, help="0-based index of the spectrum in the file")
@click.option("-s", "--sequence", required=True, help="Peptide sequence")
@click.option("-m", "--modification", required=True, help="Modification to localize")
@click.option("--expected-count", type=int, default=1, help="Number of modifications (default: 1)")
@click.option(
    "--fragment-mass-tolerance",
    type=float,
    default=0.5,
    help="Fragment mass tolerance in Da (default: 0.5)",
)
@click.option("--precursor-charge", type=int, help="Precursor charge, read from the spectrum if omitted")
@click.option("--aplus", is_flag=True, help="Use the A-plus variant")
@click.option("--debug", is_flag=True, help="Enable debug output")
def ascore(in_file, spectrum_index, sequence, modification, expected_count, fragment_mass_tolerance, precursor_charge, aplus, debug):
    """A-score localization of a modification in an mzML spectrum."""
    import pyopenms

    _setup_logging(debug)
    experiment = pyopenms.MSExperiment()
    pyopenms.MzMLFile().load(in_file, experiment)
    if not 0 <= spectrum_index < experiment.getNrSpectra():
        raise click.BadParameter(f"Spectrum index {spectrum_index} out of range", param_hint="--spectrum-index")
    spectrum = Spectrum.from_openms(experiment.getSpectrum(spectrum_index))

    scorer = AScore(config=ScoringConfig({"fragment_mass_tolerance": fragment_mass_tolerance}))
    target = ModificationFactory.get_instance().get_modification(modification)
    score = scorer.score_plus if aplus else scorer.score
    result = score(Peptide(sequence), target, expected_count, spectrum, precursor_charge=precursor_charge)
    if not result:
        click.echo(f"No possible site for {modification} on {sequence}")
    for site_combination, value in result.items():
        click.echo(f"{','.join(str(site) for site in site_combination)}\t{value:.4f}")


def main():
    """Main entry point for ptmsites CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {str(e)}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
