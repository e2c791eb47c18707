"""Hydrated aggregates consumed by the scorer and the ranker.

The data layer builds these from ORM rows while the session is still open,
so the core never touches a session or issues a query.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Tuple

from core.enums import (
    EducationLevel,
    EducationStatus,
    JobStatus,
    LanguageProficiency,
    ProfileVisibility,
    WorkModality,
)
from core.exceptions import InvalidRangeError

MIN_PROFICIENCY = 1
MAX_PROFICIENCY = 5


def check_proficiency(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidRangeError(f"{name} must be an integer, got {value!r}")
    if not MIN_PROFICIENCY <= value <= MAX_PROFICIENCY:
        raise InvalidRangeError(
            f"{name}={value} outside [{MIN_PROFICIENCY}, {MAX_PROFICIENCY}]"
        )
    return value


@dataclass(frozen=True)
class UserSkill:
    skill_id: Any
    proficiency: int
    years_of_experience: Optional[int] = None

    def __post_init__(self):
        check_proficiency("proficiency", self.proficiency)
        if self.years_of_experience is not None and self.years_of_experience < 0:
            raise InvalidRangeError(f"years_of_experience={self.years_of_experience} is negative")


@dataclass(frozen=True)
class UserLanguage:
    language_id: Any
    proficiency: LanguageProficiency

    def __post_init__(self):
        object.__setattr__(self, "proficiency", LanguageProficiency(self.proficiency))


@dataclass(frozen=True)
class EducationRecord:
    level: EducationLevel
    status: EducationStatus = EducationStatus.COMPLETED

    def __post_init__(self):
        object.__setattr__(self, "level", EducationLevel(self.level))
        object.__setattr__(self, "status", EducationStatus(self.status))


@dataclass(frozen=True)
class DisabilityProfile:
    category: str
    requires_accommodations: bool = False
    accommodation_tags: Tuple[str, ...] = ()

    @property
    def needs(self) -> frozenset:
        """Declared accommodation needs; the category stands in when no tags are given."""
        if self.accommodation_tags:
            return frozenset(self.accommodation_tags)
        return frozenset([self.category])


@dataclass(frozen=True)
class SeekerPreferences:
    profile_visibility: ProfileVisibility = ProfileVisibility.PUBLIC
    show_disability_info: bool = True
    willing_to_relocate: bool = False

    def __post_init__(self):
        object.__setattr__(self, "profile_visibility", ProfileVisibility(self.profile_visibility))


@dataclass(frozen=True)
class SeekerAggregate:
    """A job seeker's profile together with every relation scoring reads."""
    user_id: Any
    region_id: Any = None
    municipality_id: Any = None
    years_of_experience: int = 0
    education: Tuple[EducationRecord, ...] = ()
    skills: Tuple[UserSkill, ...] = ()
    languages: Tuple[UserLanguage, ...] = ()
    disability: Optional[DisabilityProfile] = None
    preferences: SeekerPreferences = field(default_factory=SeekerPreferences)

    # Contact details, only disclosed to companies the seeker applied to
    full_name: Optional[str] = None
    email: Optional[str] = None

    # Fields read by completeness only
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    bio: Optional[str] = None
    professional_headline: Optional[str] = None
    profile_image_url: Optional[str] = None
    cv_url: Optional[str] = None
    work_experience_count: int = 0
    portfolio_item_count: int = 0

    completeness_percentage: int = 0
    is_active_account: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def highest_completed_level(self) -> Optional[EducationLevel]:
        completed = [e.level for e in self.education if e.status == EducationStatus.COMPLETED]
        if not completed:
            return None
        return max(completed, key=lambda level: level.rank)


@dataclass(frozen=True)
class SkillRequirement:
    skill_id: Any
    minimum_proficiency: int = MIN_PROFICIENCY

    def __post_init__(self):
        check_proficiency("minimum_proficiency", self.minimum_proficiency)


@dataclass(frozen=True)
class LanguageRequirement:
    language_id: Any
    minimum_proficiency: int = MIN_PROFICIENCY

    def __post_init__(self):
        check_proficiency("minimum_proficiency", self.minimum_proficiency)


@dataclass(frozen=True)
class JobAggregate:
    """A job posting together with its requirement junctions."""
    id: Any
    company_id: Any = None
    title: Optional[str] = None
    status: JobStatus = JobStatus.DRAFT
    region_id: Any = None
    municipality_id: Any = None
    work_modality: WorkModality = WorkModality.ON_SITE
    is_remote_allowed: bool = False
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    years_experience_min: Optional[int] = None
    years_experience_max: Optional[int] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    education_level: Optional[EducationLevel] = None
    application_deadline: Optional[date] = None
    required_skills: Tuple[SkillRequirement, ...] = ()
    preferred_skills: Tuple[SkillRequirement, ...] = ()
    required_languages: Tuple[LanguageRequirement, ...] = ()
    accommodations: Tuple[str, ...] = ()

    # Fields read by completeness only
    description: Optional[str] = None
    responsibilities: Optional[str] = None
    benefits: Optional[str] = None
    industry_id: Any = None
    work_area_id: Any = None
    position_level_id: Any = None

    completeness_percentage: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "status", JobStatus(self.status))
        object.__setattr__(self, "work_modality", WorkModality(self.work_modality))
        if self.education_level is not None:
            object.__setattr__(self, "education_level", EducationLevel(self.education_level))
        if (
            self.years_experience_min is not None
            and self.years_experience_max is not None
            and self.years_experience_min > self.years_experience_max
        ):
            raise InvalidRangeError(
                f"years_experience_min={self.years_experience_min} exceeds "
                f"years_experience_max={self.years_experience_max}"
            )

    def is_matchable(self, today: date) -> bool:
        """Active and still accepting applications on ``today``."""
        if self.status != JobStatus.ACTIVE:
            return False
        return self.application_deadline is not None and self.application_deadline >= today


@dataclass(frozen=True)
class CompanySnapshot:
    """Company fields read by completeness."""
    id: Any = None
    company_name: Optional[str] = None
    legal_name: Optional[str] = None
    tax_id: Optional[str] = None
    phone: Optional[str] = None
    region_id: Any = None
    municipality_id: Any = None
    address: Optional[str] = None
    industry_id: Any = None
    company_size: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    mission: Optional[str] = None
    vision: Optional[str] = None
    benefits: Optional[str] = None
