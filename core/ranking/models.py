#!/usr/bin/env python3
"""
Result models returned by the recommendation service.
"""

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from core.aggregates import JobAggregate, SeekerAggregate
from core.scorer.models import Points, ScoreBreakdown


class JobSummary(BaseModel):
    id: Any
    company_id: Any = None
    title: Optional[str] = None
    region_id: Any = None
    municipality_id: Any = None
    work_modality: str
    is_remote_allowed: bool = False
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    application_deadline: Optional[date] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_aggregate(cls, job: JobAggregate) -> "JobSummary":
        return cls(
            id=job.id,
            company_id=job.company_id,
            title=job.title,
            region_id=job.region_id,
            municipality_id=job.municipality_id,
            work_modality=job.work_modality.value,
            is_remote_allowed=job.is_remote_allowed,
            salary_min=job.salary_min,
            salary_max=job.salary_max,
            application_deadline=job.application_deadline,
            created_at=job.created_at,
        )


class CandidateProfile(BaseModel):
    """Company-facing view of a seeker; contact details only after applying."""
    user_id: Any
    full_name: Optional[str] = None
    email: Optional[str] = None
    professional_headline: Optional[str] = None
    region_id: Any = None
    municipality_id: Any = None
    years_of_experience: int = 0
    education_level: Optional[str] = None
    completeness_percentage: int = 0

    @classmethod
    def from_aggregate(cls, seeker: SeekerAggregate, has_applied: bool) -> "CandidateProfile":
        level = seeker.highest_completed_level()
        return cls(
            user_id=seeker.user_id,
            full_name=seeker.full_name,
            email=seeker.email if has_applied else None,
            professional_headline=seeker.professional_headline,
            region_id=seeker.region_id,
            municipality_id=seeker.municipality_id,
            years_of_experience=seeker.years_of_experience,
            education_level=level.value if level else None,
            completeness_percentage=seeker.completeness_percentage,
        )


class MatchScoreResult(BaseModel):
    job_id: Any
    score: Points
    breakdown: ScoreBreakdown
    already_applied: bool = False


class RecommendedJob(BaseModel):
    job: JobSummary
    breakdown: ScoreBreakdown
    already_applied: bool = False


class RecommendedJobsPage(BaseModel):
    jobs: List[RecommendedJob] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False


class RecommendedCandidate(BaseModel):
    profile: CandidateProfile
    breakdown: ScoreBreakdown
    has_applied: bool = False


class RecommendedCandidatesPage(BaseModel):
    candidates: List[RecommendedCandidate] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False
