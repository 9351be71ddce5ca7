import logging
import math
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from scipy.stats import binom

from ..config import ScoringConfig, SequenceMatchingParameters
from ..constants import MIN_PROBABILITY, N_TERMINAL_IONS, NEUTRAL_LOSSES, TIER_WEIGHTS, UNAMBIGUOUS_SCORE
from ..mapping.sites import possible_sites
from ..model.modification import Modification, ModificationMatch
from ..model.peptide import Peptide
from ..spectrum.annotator import FragmentAnnotator, SpectrumAnnotator
from ..spectrum.reduction import reduce_spectrum
from ..spectrum.spectrum import Spectrum
from .table import PtmTableContent

logger = logging.getLogger(__name__)


def binomial_tail_probability(n: int, N: int, p: float) -> float:
    """
    Probability of matching at least n of N ions by chance, P(X >= n).

    Args:
        n: Number of matched ions
        N: Number of expected ions
        p: Probability of a random match

    Returns:
        The upper tail of the binomial distribution, 1.0 when n is 0
    """
    if n <= 0:
        return 1.0
    if n > N:
        return 0.0
    return float(binom.sf(n - 1, N, p))


def peptide_score(tier_scores: Mapping[int, float]) -> float:
    """Weighted sum of the scores obtained at each tier."""
    return sum(TIER_WEIGHTS.get(tier, 0.0) * score for tier, score in tier_scores.items())


class AScore:
    """
    A-score algorithm for modification site localization.

    Compares the fragment ions matched when placing a modification at each
    of its possible sites, over intensity tiers of the spectrum, and scores
    the most likely site against the runner-up.

    Args:
        annotator: Spectrum annotator, a FragmentAnnotator if None
        sequence_provider: Protein sequences for patterns needing protein context
        matching_parameters: Residue comparison settings
        config: Scoring configuration
    """

    def __init__(
        self,
        annotator: Optional[SpectrumAnnotator] = None,
        sequence_provider=None,
        matching_parameters: Optional[SequenceMatchingParameters] = None,
        config: Optional[ScoringConfig] = None,
    ):
        self.config_ = config or ScoringConfig()
        self.annotator_ = annotator or FragmentAnnotator()
        self.sequence_provider_ = sequence_provider
        self.matching_parameters_ = matching_parameters or self.config_.sequence_matching_parameters()

        self.fragment_mass_tolerance_ = self.config_["fragment_mass_tolerance"]
        self.max_depth_ = self.config_["max_depth"]
        self.intensity_threshold_ = self.config_["intensity_threshold"]
        self.tie_score_ = self.config_["tie_score"]
        self.a_plus_tie_score_ = self.config_["a_plus_tie_score"]
        self.unambiguous_score_ = UNAMBIGUOUS_SCORE

    def score(
        self,
        peptide: Peptide,
        modification: Modification,
        expected_count: int,
        spectrum: Spectrum,
        ion_types: Optional[Iterable[str]] = None,
        neutral_losses: Optional[Iterable[str]] = None,
        charges: Optional[Iterable[int]] = None,
        precursor_charge: Optional[int] = None,
        mz_tolerance: Optional[float] = None,
    ) -> Dict[Tuple[int, ...], float]:
        """
        Compute the A-score of a modification on a peptide.

        Args:
            peptide: The identified peptide
            modification: The modification to localize
            expected_count: Number of occurrences of the modification
            spectrum: The fragment ion spectrum
            ion_types: Ion sub-types to annotate, configured ones if None
            neutral_losses: Neutral losses to annotate, configured ones if None
            charges: Fragment charges, configured ones if None
            precursor_charge: Precursor charge, the spectrum's if None
            mz_tolerance: Fragment m/z tolerance, configured one if None

        Returns:
            Mapping of the site combination retained to its score: all sites
            at 100 without ambiguity, one site when resolved, two sites at the
            tie score otherwise. Empty if the modification has no possible site.
        """
        return self.compute_(
            False, peptide, modification, expected_count, spectrum,
            ion_types, neutral_losses, charges, precursor_charge, mz_tolerance,
        )

    def score_plus(
        self,
        peptide: Peptide,
        modification: Modification,
        expected_count: int,
        spectrum: Spectrum,
        ion_types: Optional[Iterable[str]] = None,
        neutral_losses: Optional[Iterable[str]] = None,
        charges: Optional[Iterable[int]] = None,
        precursor_charge: Optional[int] = None,
        mz_tolerance: Optional[float] = None,
    ) -> Dict[Tuple[int, ...], float]:
        """
        Compute the A-plus score, selecting the sites compared on the tier
        where the two best sites are best separated, ties scoring 50.

        Takes the same arguments as score().
        """
        return self.compute_(
            True, peptide, modification, expected_count, spectrum,
            ion_types, neutral_losses, charges, precursor_charge, mz_tolerance,
        )

    def compute_(
        self, plus, peptide, modification, expected_count, spectrum,
        ion_types, neutral_losses, charges, precursor_charge, mz_tolerance,
    ):
        ion_types = list(ion_types if ion_types is not None else self.config_["ion_types"])
        charges = list(charges if charges is not None else self.config_["charges"])
        if mz_tolerance is None:
            mz_tolerance = self.fragment_mass_tolerance_
        if precursor_charge is None:
            precursor_charge = spectrum.precursor_charge
        if neutral_losses is None:
            neutral_losses = self.config_["neutral_losses"] if self.config_["accounting_for_neutral_losses"] else []
        neutral_losses = self.scoringNeutralLosses_(neutral_losses, modification, mz_tolerance)

        candidates = possible_sites(peptide, modification, self.sequence_provider_, self.matching_parameters_)
        if not candidates:
            logger.debug(f"No possible site for {modification.name} on {peptide.sequence}")
            return {}
        if len(candidates) <= max(expected_count, 1):
            return {tuple(candidates): self.unambiguous_score_}

        annotation = (ion_types, neutral_losses, charges, precursor_charge)
        no_mod_peptide = peptide.without_modifications([modification.name])
        N = self.annotator_.expected_ion_count(*annotation, peptide)

        tiers = reduce_spectrum(spectrum, mz_tolerance, self.max_depth_)
        p_scale = max(len(tiers), 100) if plus else 100

        matches = {}
        tier_scores = {site: {} for site in candidates}
        for tier, reduced_spectrum in tiers.items():
            p = tier / p_scale
            for site in candidates:
                hypothesis = no_mod_peptide.with_modification(ModificationMatch(modification.name, site))
                site_matches = self.annotator_.matched_ions(
                    *annotation, reduced_spectrum, hypothesis, self.intensity_threshold_, mz_tolerance
                )
                matches[site, tier] = site_matches
                tier_scores[site][tier] = self.tierScore_(N, len(site_matches), p)

        if plus:
            best_site, second_site, best_tier = self.mostDiscriminatingTier_(candidates, tier_scores, tiers)
        else:
            peptide_scores = {site: peptide_score(tier_scores[site]) for site in candidates}
            best_site, second_site = self.bestSites_(candidates, peptide_scores)
            best_tier = self.bestTier_(tier_scores[best_site], tier_scores[second_site], tiers)

        pos_min, pos_max = min(best_site, second_site), max(best_site, second_site)
        expected_ions = self.annotator_.expected_ions(*annotation, peptide)
        restricted_N = self.countSiteDeterminingIons_(expected_ions, peptide.length, pos_min, pos_max)
        p = best_tier / p_scale
        n1 = self.countSiteDeterminingIons_(matches.get((pos_min, best_tier), []), peptide.length, pos_min, pos_max)
        n2 = self.countSiteDeterminingIons_(matches.get((pos_max, best_tier), []), peptide.length, pos_min, pos_max)
        p1 = binomial_tail_probability(n1, restricted_N, p)
        p2 = binomial_tail_probability(n2, restricted_N, p)

        logger.debug(
            f"{peptide.sequence} {modification.name}: sites {pos_min}/{pos_max} at tier {best_tier}, "
            f"N={restricted_N} n={n1}/{n2} p={p1}/{p2}"
        )

        if p1 == p2:
            tie_score = self.a_plus_tie_score_ if plus else self.tie_score_
            return {(pos_min, pos_max): tie_score}
        if p1 < p2:
            return {(pos_min,): self.differenceScore_(p2 - p1)}
        return {(pos_max,): self.differenceScore_(p1 - p2)}

    def scoringNeutralLosses_(self, neutral_losses, modification, mz_tolerance) -> List[str]:
        """Neutral losses independent of the modification site."""
        retained = []
        for loss in neutral_losses:
            if loss not in NEUTRAL_LOSSES:
                raise ValueError(f"Unknown neutral loss: {loss}")
            mass, _, from_modified = NEUTRAL_LOSSES[loss]
            if from_modified or abs(mass - modification.mass) <= mz_tolerance:
                continue
            retained.append(loss)
        return retained

    def tierScore_(self, N, n, p):
        """-10 log10 of the cumulative binomial probability, floored."""
        probability = max(binomial_tail_probability(n, N, p), MIN_PROBABILITY)
        return -10.0 * math.log10(probability)

    def differenceScore_(self, difference):
        return -10.0 * math.log10(max(difference, MIN_PROBABILITY))

    def bestSites_(self, candidates, peptide_scores):
        """
        Best and second best sites, in ascending site order a later site
        with an equal or higher score becomes best.
        """
        best_site = second_site = None
        best_score = second_score = None
        for site in candidates:
            score = peptide_scores[site]
            if best_score is None:
                best_site, best_score = site, score
            elif score >= best_score:
                second_site, second_score = best_site, best_score
                best_site, best_score = site, score
            elif second_score is None or score >= second_score:
                second_site, second_score = site, score
        return best_site, second_site

    def bestTier_(self, best_scores, second_scores, tiers):
        """Tier where the best site leads the second best the most."""
        best_tier = min(tiers, default=1)
        max_diff = 0.0
        for tier in sorted(tiers):
            diff = best_scores[tier] - second_scores[tier]
            if diff >= max_diff:
                best_tier = tier
                max_diff = diff
        return best_tier

    def mostDiscriminatingTier_(self, candidates, tier_scores, tiers):
        """
        Sites and tier with the largest gap between the two best sites.

        A tier where several sites share the top score has a gap of 0.
        """
        best_site, second_site = candidates[0], candidates[1]
        best_tier = min(tiers, default=1)
        max_diff = -1.0
        for tier in sorted(tiers):
            ranking: Dict[float, List[int]] = {}
            for site in candidates:
                ranking.setdefault(tier_scores[site][tier], []).append(site)
            scores = sorted(ranking, reverse=True)
            top = ranking[scores[0]]
            if len(top) == 1:
                diff = scores[0] - scores[1]
                if diff > max_diff:
                    best_site, second_site = top[0], ranking[scores[1]][0]
                    best_tier, max_diff = tier, diff
            elif 0 > max_diff:
                best_site, second_site = top[0], top[1]
                best_tier, max_diff = tier, 0.0
        return best_site, second_site, best_tier

    def countSiteDeterminingIons_(self, ions, length, pos_min, pos_max):
        """
        Count the ions whose cleavage lies between the two sites.

        The residue index of an ion is the number of residues on the
        N-terminal side of its cleavage.
        """
        count = 0
        for ion in ions:
            if ion.ion_type in N_TERMINAL_IONS:
                aa = ion.number
            else:
                aa = length - ion.number
            if pos_min <= aa < pos_max:
                count += 1
        return count

    def ptm_table_content(
        self,
        peptide: Peptide,
        modification: Modification,
        n_modifications: int,
        spectrum: Spectrum,
        ion_types: Optional[Iterable[str]] = None,
        neutral_losses: Optional[Iterable[str]] = None,
        charges: Optional[Iterable[int]] = None,
        precursor_charge: Optional[int] = None,
        mz_tolerance: Optional[float] = None,
        intensity_limit: float = 0.0,
    ) -> PtmTableContent:
        """
        Intensities of the fragment ions of the unmodified peptide shifted by
        0 to n_modifications times the modification mass.

        The annotator must provide with_mass_shift(), as FragmentAnnotator does.

        Returns:
            Table keyed by number of modifications, ion sub-type and residue
            index, x, y and z ions indexed from the C-terminus
        """
        ion_types = list(ion_types if ion_types is not None else self.config_["ion_types"])
        charges = list(charges if charges is not None else self.config_["charges"])
        neutral_losses = list(neutral_losses if neutral_losses is not None else [])
        if mz_tolerance is None:
            mz_tolerance = self.fragment_mass_tolerance_
        if precursor_charge is None:
            precursor_charge = spectrum.precursor_charge

        no_mod_peptide = peptide.without_modifications([modification.name])
        table = PtmTableContent()
        for i in range(n_modifications + 1):
            annotator = self.annotator_.with_mass_shift(i * modification.mass)
            for match in annotator.matched_ions(
                ion_types, neutral_losses, charges, precursor_charge,
                spectrum, no_mod_peptide, intensity_limit, mz_tolerance,
            ):
                if match.ion_type in N_TERMINAL_IONS:
                    aa = match.number
                else:
                    aa = peptide.length - match.number + 1
                table.add_intensity(i, match.ion_type, aa, match.peak_intensity)
        return table
