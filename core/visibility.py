"""
Visibility Filter - Which seekers a company may see, and how much of them.
"""

import logging
from typing import Any

from core.aggregates import SeekerPreferences
from core.enums import ProfileVisibility
from core.scorer.models import ScoreBreakdown

logger = logging.getLogger(__name__)


def is_visible(
    preferences: SeekerPreferences,
    seeker_id: Any,
    job_id: Any,
    has_applied: bool
) -> bool:
    """
    Decide whether a seeker's profile may be shown for a job.

    Args:
        preferences: The seeker's privacy preferences
        seeker_id: Seeker being considered (logged only)
        job_id: Job the company is recruiting for (logged only)
        has_applied: Whether the seeker applied to this job

    Returns:
        True if the profile may appear in the company's candidate list

    Raises:
        ValueError: If the visibility value is not a known ProfileVisibility
    """
    visibility = ProfileVisibility(preferences.profile_visibility)

    if visibility == ProfileVisibility.PUBLIC:
        return True
    if visibility == ProfileVisibility.HIDDEN:
        return False
    if visibility == ProfileVisibility.APPLIED_ONLY:
        return has_applied

    raise ValueError(f"Unhandled profile visibility {visibility!r} for seeker {seeker_id} / job {job_id}")


def redact_for_company(breakdown: ScoreBreakdown, preferences: SeekerPreferences) -> ScoreBreakdown:
    """Strip disability details from a breakdown unless the seeker shares them."""
    if preferences.show_disability_info:
        return breakdown

    accommodations = breakdown.accommodations.model_copy(update={
        "seeker_needs_accommodations": None,
        "matching_categories": [],
    })
    return breakdown.model_copy(update={"accommodations": accommodations})
