#!/usr/bin/env python3
"""
Match Scorer - Additive compatibility score between a seeker and a job.

Computes one category per concern and adds them up:
- Skills: required coverage plus a preferred-skills bonus
- Languages: required coverage
- Location: same region or remote-compatible
- Experience: minimum years met
- Education: threshold on the education ladder
- Accommodations: declared needs covered by the job

The scorer holds only its immutable weight table, so a single instance can be
shared across worker threads.
"""

import math
import logging
from decimal import Decimal

from core.aggregates import JobAggregate, SeekerAggregate
from core.config_loader import MatchWeights
from core.exceptions import InvalidRangeError
from core.scorer.models import ScoreBreakdown
from core.scorer import coverage, criteria
from core.scorer.accommodations import calculate_accommodations_score

logger = logging.getLogger(__name__)

TOTAL_POINTS = 100.0


def validate_weights(weights: MatchWeights) -> MatchWeights:
    """Reject a weight table whose category maxima do not sum to 100."""
    maxima = weights.category_maxima()
    for name, value in maxima.items():
        if value < 0:
            raise InvalidRangeError(f"weight {name}={value} is negative")
        if round(value, 2) != value:
            raise InvalidRangeError(f"weight {name}={value} is finer than hundredths")

    total = math.fsum(maxima.values())
    if not math.isclose(total, TOTAL_POINTS, abs_tol=1e-9):
        raise InvalidRangeError(f"category maxima sum to {total}, expected {TOTAL_POINTS}")

    if not 0 <= weights.preferred_skills_bonus <= weights.skills:
        raise InvalidRangeError(
            f"preferred_skills_bonus={weights.preferred_skills_bonus} "
            f"outside [0, skills={weights.skills}]"
        )
    return weights


class MatchScorer:
    """
    Pure scorer for (seeker, job) pairs.

    Identical inputs always produce identical breakdowns.
    """

    def __init__(self, weights: MatchWeights):
        self.weights = validate_weights(weights)

    def score(self, seeker: SeekerAggregate, job: JobAggregate) -> ScoreBreakdown:
        w = self.weights

        skills = coverage.calculate_skills_score(
            seeker.skills, job.required_skills, job.preferred_skills, w
        )
        languages = coverage.calculate_languages_score(
            seeker.languages, job.required_languages, w
        )
        location = criteria.calculate_location_score(seeker, job, w)
        experience = criteria.calculate_experience_score(
            seeker.years_of_experience, job.years_experience_min, job.years_experience_max, w
        )
        education = criteria.calculate_education_score(
            seeker.highest_completed_level(), job.education_level, w
        )
        accommodations = calculate_accommodations_score(seeker, job.accommodations, w)

        # Exact decimal sum: the categories add up to the total to the hundredth
        total = sum((
            skills.score,
            languages.score,
            location.score,
            experience.score,
            education.score,
            accommodations.score,
        ), Decimal(0))

        logger.debug(
            f"Job {job.id} / seeker {seeker.user_id}: total={total:.2f} "
            f"(skills={skills.score}, languages={languages.score}, location={location.score}, "
            f"experience={experience.score}, education={education.score}, "
            f"accommodations={accommodations.score})"
        )

        return ScoreBreakdown(
            total=total,
            weights_version=w.version,
            skills=skills,
            languages=languages,
            location=location,
            experience=experience,
            education=education,
            accommodations=accommodations,
        )
