from .base import Base
from .reference import Skill, Language
from .seeker import (
    User, JobSeekerProfile, UserSkill, UserLanguage, EducationRecord,
    WorkExperience, PortfolioItem, JobSeekerDisability, UserPreferences
)
from .company import Company
from .job import Job, JobRequiredSkill, JobPreferredSkill, JobLanguage, JobDisabilityAccommodation
from .application import JobApplication

__all__ = [
    'Base',
    'Skill',
    'Language',
    'User',
    'JobSeekerProfile',
    'UserSkill',
    'UserLanguage',
    'EducationRecord',
    'WorkExperience',
    'PortfolioItem',
    'JobSeekerDisability',
    'UserPreferences',
    'Company',
    'Job',
    'JobRequiredSkill',
    'JobPreferredSkill',
    'JobLanguage',
    'JobDisabilityAccommodation',
    'JobApplication',
]
