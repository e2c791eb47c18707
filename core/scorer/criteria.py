#!/usr/bin/env python3
"""
Profile Criteria - Location, experience and education categories.

Each function is all-or-nothing except education, which gives half credit to
a seeker exactly one tier below the job's threshold.
"""

from typing import Optional
import logging

from core.aggregates import JobAggregate, SeekerAggregate
from core.config_loader import MatchWeights
from core.enums import EducationLevel, WorkModality
from core.scorer.models import (
    EducationMatchDetail,
    ExperienceMatchDetail,
    LocationMatchDetail,
    points,
)

logger = logging.getLogger(__name__)

ADJACENT_EDUCATION_CREDIT = 0.5


def _same(a, b) -> bool:
    return a is not None and b is not None and a == b


def calculate_location_score(
    seeker: SeekerAggregate,
    job: JobAggregate,
    weights: MatchWeights
) -> LocationMatchDetail:
    is_same_region = _same(seeker.region_id, job.region_id)
    is_same_municipality = _same(seeker.municipality_id, job.municipality_id)
    is_remote_compatible = job.work_modality == WorkModality.REMOTE or job.is_remote_allowed

    score = weights.location if (is_same_region or is_remote_compatible) else 0

    return LocationMatchDetail(
        score=points(score),
        max_score=weights.location,
        is_same_region=is_same_region,
        is_same_municipality=is_same_municipality,
        is_remote_compatible=is_remote_compatible,
        willing_to_relocate=seeker.preferences.willing_to_relocate,
    )


def calculate_experience_score(
    seeker_years: int,
    required_min: Optional[int],
    required_max: Optional[int],
    weights: MatchWeights
) -> ExperienceMatchDetail:
    """
    Full marks once the minimum is met; being above the maximum is not penalised.
    """
    years = max(0, int(seeker_years or 0))
    meets_min = required_min is None or years >= required_min
    below_max = required_max is None or years <= required_max

    return ExperienceMatchDetail(
        score=points(weights.experience if meets_min else 0),
        max_score=weights.experience,
        seeker_years=years,
        required_min=required_min,
        required_max=required_max,
        is_within_range=meets_min and below_max,
    )


def calculate_education_score(
    seeker_level: Optional[EducationLevel],
    required_level: Optional[EducationLevel],
    weights: MatchWeights
) -> EducationMatchDetail:
    max_score = weights.education

    if required_level is None:
        meets, score = True, max_score
    elif seeker_level is None:
        meets, score = False, 0
    elif seeker_level.rank >= required_level.rank:
        meets, score = True, max_score
    elif required_level.rank - seeker_level.rank == 1:
        meets, score = False, max_score * ADJACENT_EDUCATION_CREDIT
    else:
        meets, score = False, 0

    return EducationMatchDetail(
        score=points(score),
        max_score=max_score,
        seeker_level=seeker_level.value if seeker_level else None,
        required_level=required_level.value if required_level else None,
        meets_requirement=meets,
    )
