"""
Closed value sets shared by the scorer, the ranker and the data layer.
"""

from enum import Enum


class ProfileVisibility(str, Enum):
    PUBLIC = "public"
    HIDDEN = "hidden"
    APPLIED_ONLY = "applied_only"

    @classmethod
    def _missing_(cls, value):
        # Rows written before the rename store "visible".
        if isinstance(value, str) and value.lower() == "visible":
            return cls.PUBLIC
        return None


class JobStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    ACTIVE = "active"
    PAUSED = "paused"
    REJECTED = "rejected"
    CLOSED = "closed"


class WorkModality(str, Enum):
    ON_SITE = "on_site"
    REMOTE = "remote"
    HYBRID = "hybrid"


class EducationStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"


class EducationLevel(str, Enum):
    """Education tiers, declared from lowest to highest."""
    NONE = "none"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TECHNICAL = "technical"
    UNDERGRADUATE = "undergraduate"
    GRADUATE = "graduate"
    POSTGRADUATE = "postgraduate"

    @property
    def rank(self) -> int:
        return _EDUCATION_LADDER.index(self)


_EDUCATION_LADDER = tuple(EducationLevel)


class LanguageProficiency(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    FLUENT = "fluent"
    NATIVE = "native"

    @property
    def level(self) -> int:
        """Position on the 1-5 scale used by job language requirements."""
        return _LANGUAGE_TIERS.index(self) + 1


_LANGUAGE_TIERS = tuple(LanguageProficiency)


class ApplicationStatus(str, Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    SHORTLISTED = "shortlisted"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    OFFER_EXTENDED = "offer_extended"
    HIRED = "hired"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
