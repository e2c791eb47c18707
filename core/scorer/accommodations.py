"""
Accommodations category.

Only evaluated when the seeker shares disability information and declares a
disability requiring accommodations; otherwise the category is neutral (full
marks) so that withholding the information never costs points.
"""

from typing import Sequence

from core.aggregates import SeekerAggregate
from core.config_loader import MatchWeights
from core.scorer.models import AccommodationsMatchDetail, points

# Floor for a job that offers accommodations, even when none are the ones needed
UNMATCHED_OFFER_CREDIT = 0.3


def calculate_accommodations_score(
    seeker: SeekerAggregate,
    job_accommodations: Sequence[str],
    weights: MatchWeights
) -> AccommodationsMatchDetail:
    max_score = weights.accommodations
    offered = frozenset(job_accommodations)
    disability = seeker.disability

    if (
        not seeker.preferences.show_disability_info
        or disability is None
        or not disability.requires_accommodations
    ):
        return AccommodationsMatchDetail(
            score=points(max_score),
            max_score=max_score,
            evaluated=False,
            seeker_needs_accommodations=(
                disability.requires_accommodations
                if disability is not None and seeker.preferences.show_disability_info
                else None
            ),
            job_provides_accommodations=bool(offered),
        )

    needs = disability.needs
    matching = sorted(needs & offered)

    if not offered:
        score = max_score
    else:
        covered = len(matching) / len(needs)
        score = max_score * max(covered, UNMATCHED_OFFER_CREDIT)

    return AccommodationsMatchDetail(
        score=points(score),
        max_score=max_score,
        evaluated=True,
        seeker_needs_accommodations=True,
        job_provides_accommodations=bool(offered),
        matching_categories=matching,
    )
