#!/usr/bin/env python3
"""
Scoring Models - Data structures for match score breakdowns.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, Field, PlainSerializer

HUNDREDTH = Decimal("0.01")

# Scores are exact hundredths so that categories add up to the total; JSON
# output keeps them as numbers.
Points = Annotated[
    Decimal,
    Field(ge=0, le=100, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


def points(value) -> Decimal:
    """Quantize a raw score to hundredths, rounding half up."""
    return Decimal(value).quantize(HUNDREDTH, rounding=ROUND_HALF_UP)


class CategoryScore(BaseModel):
    score: Points
    max_score: float = Field(ge=0, le=100)


class MatchedSkill(BaseModel):
    skill_id: Any
    required_proficiency: int
    seeker_proficiency: int


class MissingSkill(BaseModel):
    skill_id: Any
    required_proficiency: int
    seeker_proficiency: Optional[int] = None


class SkillsMatchDetail(CategoryScore):
    matched_required: List[MatchedSkill] = Field(default_factory=list)
    missing_required: List[MissingSkill] = Field(default_factory=list)
    matched_preferred: List[Any] = Field(default_factory=list)


class MatchedLanguage(BaseModel):
    language_id: Any
    required_proficiency: int
    seeker_proficiency: int


class MissingLanguage(BaseModel):
    language_id: Any
    required_proficiency: int
    seeker_proficiency: Optional[int] = None


class LanguagesMatchDetail(CategoryScore):
    matched: List[MatchedLanguage] = Field(default_factory=list)
    missing: List[MissingLanguage] = Field(default_factory=list)


class LocationMatchDetail(CategoryScore):
    is_same_region: bool = False
    is_same_municipality: bool = False
    is_remote_compatible: bool = False
    willing_to_relocate: bool = False


class ExperienceMatchDetail(CategoryScore):
    seeker_years: int = 0
    required_min: Optional[int] = None
    required_max: Optional[int] = None
    is_within_range: bool = False


class EducationMatchDetail(CategoryScore):
    seeker_level: Optional[str] = None
    required_level: Optional[str] = None
    meets_requirement: bool = False


class AccommodationsMatchDetail(CategoryScore):
    evaluated: bool = False
    seeker_needs_accommodations: Optional[bool] = None
    job_provides_accommodations: bool = False
    matching_categories: List[str] = Field(default_factory=list)


class ScoreBreakdown(BaseModel):
    """Complete match result; the category scores add up to ``total``."""
    total: Points
    weights_version: str
    skills: SkillsMatchDetail
    languages: LanguagesMatchDetail
    location: LocationMatchDetail
    experience: ExperienceMatchDetail
    education: EducationMatchDetail
    accommodations: AccommodationsMatchDetail

    def categories(self) -> List[CategoryScore]:
        return [
            self.skills,
            self.languages,
            self.location,
            self.experience,
            self.education,
            self.accommodations,
        ]
