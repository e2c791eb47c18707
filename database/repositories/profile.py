import logging
from datetime import date
from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from core.aggregates import (
    DisabilityProfile,
    EducationRecord,
    SeekerAggregate,
    SeekerPreferences,
    UserLanguage,
    UserSkill,
    check_proficiency,
)
from core.completeness import seeker_completeness
from core.enums import EducationLevel, EducationStatus, LanguageProficiency, ProfileVisibility
from core.exceptions import InvalidRangeError, NotFoundError
from database.models import (
    EducationRecord as EducationRow,
    JobSeekerDisability,
    JobSeekerProfile,
    Language,
    PortfolioItem,
    Skill,
    User,
    UserLanguage as UserLanguageRow,
    UserPreferences,
    UserSkill as UserSkillRow,
    WorkExperience,
)
from database.repositories.base import BaseRepository, db_read_retry, translate_errors

logger = logging.getLogger(__name__)

PROFILE_FIELDS = frozenset([
    'phone', 'date_of_birth', 'region_id', 'municipality_id', 'address',
    'bio', 'professional_headline', 'profile_image_url', 'cv_url',
])

# One SELECT ... IN per relation, regardless of pool size
_PROFILE_LOAD_OPTIONS = (
    selectinload(JobSeekerProfile.user),
    selectinload(JobSeekerProfile.skills),
    selectinload(JobSeekerProfile.languages),
    selectinload(JobSeekerProfile.education),
    selectinload(JobSeekerProfile.work_experiences),
    selectinload(JobSeekerProfile.portfolio_items),
    selectinload(JobSeekerProfile.disability),
    selectinload(JobSeekerProfile.preferences),
)


def _full_years(start: date, end: date) -> int:
    years = end.year - start.year - ((end.month, end.day) < (start.month, start.day))
    return max(0, years)


def total_experience_years(experiences: List[WorkExperience], today: date) -> int:
    """Sum of whole years per work experience; an open-ended one runs until today."""
    return sum(_full_years(w.start_date, w.end_date or today) for w in experiences if w.start_date)


def _full_name(user: Optional[User]) -> Optional[str]:
    if user is None:
        return None
    parts = [p for p in (user.first_name, user.last_name) if p]
    return " ".join(parts) or None


def to_seeker_aggregate(profile: JobSeekerProfile, today: date) -> SeekerAggregate:
    """Build a SeekerAggregate from a profile row with its relations loaded."""
    user = profile.user

    disability = None
    if profile.disability is not None:
        disability = DisabilityProfile(
            category=profile.disability.category,
            requires_accommodations=bool(profile.disability.requires_accommodations),
            accommodation_tags=tuple(profile.disability.accommodation_tags or ()),
        )

    preferences = SeekerPreferences()
    if profile.preferences is not None:
        preferences = SeekerPreferences(
            profile_visibility=profile.preferences.profile_visibility,
            show_disability_info=bool(profile.preferences.show_disability_info),
            willing_to_relocate=bool(profile.preferences.willing_to_relocate),
        )

    return SeekerAggregate(
        user_id=profile.user_id,
        region_id=profile.region_id,
        municipality_id=profile.municipality_id,
        years_of_experience=total_experience_years(profile.work_experiences, today),
        education=tuple(EducationRecord(level=e.level, status=e.status) for e in profile.education),
        skills=tuple(
            UserSkill(
                skill_id=s.skill_id,
                proficiency=s.proficiency_level,
                years_of_experience=s.years_of_experience,
            )
            for s in profile.skills
        ),
        languages=tuple(
            UserLanguage(language_id=lang.language_id, proficiency=lang.proficiency)
            for lang in profile.languages
        ),
        disability=disability,
        preferences=preferences,
        full_name=_full_name(user),
        email=user.email if user is not None else None,
        phone=profile.phone,
        date_of_birth=profile.date_of_birth,
        bio=profile.bio,
        professional_headline=profile.professional_headline,
        profile_image_url=profile.profile_image_url,
        cv_url=profile.cv_url,
        work_experience_count=len(profile.work_experiences),
        portfolio_item_count=len(profile.portfolio_items),
        completeness_percentage=profile.completeness_percentage or 0,
        is_active_account=user is None or user.account_status == 'active',
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


class ProfileRepository(BaseRepository):
    """
    Job seeker profiles.

    Every write recomputes completeness in the same session and returns the
    refreshed percentage, so a read after the write observes it.
    """

    @translate_errors("load seeker profile")
    @db_read_retry
    def get(self, seeker_id: Any) -> Optional[SeekerAggregate]:
        stmt = select(JobSeekerProfile).options(*_PROFILE_LOAD_OPTIONS).where(
            JobSeekerProfile.user_id == seeker_id
        )
        profile = self.db.execute(stmt).scalar_one_or_none()
        if profile is None:
            return None
        return to_seeker_aggregate(profile, self.today())

    @translate_errors("load candidate pool")
    @db_read_retry
    def list_candidates(self, min_completeness: int, limit: Optional[int] = None) -> List[SeekerAggregate]:
        """Active seekers at or above ``min_completeness``, most recently updated first."""
        stmt = (
            select(JobSeekerProfile)
            .join(User, User.id == JobSeekerProfile.user_id)
            .options(*_PROFILE_LOAD_OPTIONS)
            .where(
                JobSeekerProfile.completeness_percentage >= min_completeness,
                User.account_status == 'active',
            )
            .order_by(JobSeekerProfile.updated_at.desc(), JobSeekerProfile.user_id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        today = self.today()
        profiles = self.db.execute(stmt).scalars().all()
        logger.debug(f"Loaded {len(profiles)} candidate profiles (min completeness {min_completeness})")
        return [to_seeker_aggregate(p, today) for p in profiles]

    def _require_profile(self, seeker_id: Any) -> JobSeekerProfile:
        stmt = select(JobSeekerProfile).options(*_PROFILE_LOAD_OPTIONS).where(
            JobSeekerProfile.user_id == seeker_id
        )
        profile = self.db.execute(stmt).scalar_one_or_none()
        if profile is None:
            raise NotFoundError("seeker", seeker_id)
        return profile

    def _refresh_completeness(self, profile: JobSeekerProfile) -> int:
        self.db.flush()
        percentage = seeker_completeness(to_seeker_aggregate(profile, self.today()))
        if percentage != profile.completeness_percentage:
            logger.debug(
                f"Seeker {profile.user_id} completeness {profile.completeness_percentage} -> {percentage}"
            )
        profile.completeness_percentage = percentage
        self.db.flush()
        return percentage

    @translate_errors("recompute seeker completeness")
    def recompute_completeness(self, seeker_id: Any) -> int:
        return self._refresh_completeness(self._require_profile(seeker_id))

    @translate_errors("create seeker profile")
    def create_profile(
        self,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        **fields
    ) -> Any:
        """Create a seeker account with an empty profile; returns the user id."""
        unknown = set(fields) - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")

        user = User(email=email, first_name=first_name, last_name=last_name, account_type='job_seeker')
        self.db.add(user)
        self.db.flush()

        profile = JobSeekerProfile(user_id=user.id, **fields)
        self.db.add(profile)
        self.db.flush()
        self._refresh_completeness(self._require_profile(user.id))
        return user.id

    @translate_errors("update seeker profile")
    def update_profile(self, seeker_id: Any, **fields) -> int:
        unknown = set(fields) - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")

        profile = self._require_profile(seeker_id)
        for name, value in fields.items():
            setattr(profile, name, value)
        return self._refresh_completeness(profile)

    @translate_errors("update seeker preferences")
    def update_preferences(
        self,
        seeker_id: Any,
        profile_visibility: Optional[str] = None,
        show_disability_info: Optional[bool] = None,
        willing_to_relocate: Optional[bool] = None
    ) -> None:
        profile = self._require_profile(seeker_id)
        if profile.preferences is None:
            profile.preferences = UserPreferences()

        prefs = profile.preferences
        if profile_visibility is not None:
            prefs.profile_visibility = ProfileVisibility(profile_visibility).value
        if show_disability_info is not None:
            prefs.show_disability_info = show_disability_info
        if willing_to_relocate is not None:
            prefs.willing_to_relocate = willing_to_relocate
        self.db.flush()

    @translate_errors("set seeker disability")
    def set_disability(
        self,
        seeker_id: Any,
        category: Optional[str],
        requires_accommodations: bool = False,
        accommodation_tags: Optional[List[str]] = None
    ) -> None:
        """Declare or clear (category=None) the seeker's disability information."""
        profile = self._require_profile(seeker_id)
        if category is None:
            profile.disability = None
        elif profile.disability is None:
            profile.disability = JobSeekerDisability(
                category=category,
                requires_accommodations=requires_accommodations,
                accommodation_tags=list(accommodation_tags or []),
            )
        else:
            profile.disability.category = category
            profile.disability.requires_accommodations = requires_accommodations
            profile.disability.accommodation_tags = list(accommodation_tags or [])
        self.db.flush()

    @translate_errors("upsert seeker skill")
    def upsert_skill(
        self,
        seeker_id: Any,
        skill_id: Any,
        proficiency: int,
        years_of_experience: Optional[int] = None
    ) -> int:
        check_proficiency("proficiency", proficiency)
        if years_of_experience is not None and years_of_experience < 0:
            raise InvalidRangeError(f"years_of_experience={years_of_experience} is negative")

        profile = self._require_profile(seeker_id)
        if self.db.get(Skill, skill_id) is None:
            raise NotFoundError("skill", skill_id)

        existing = next((s for s in profile.skills if s.skill_id == skill_id), None)
        if existing is not None:
            existing.proficiency_level = proficiency
            existing.years_of_experience = years_of_experience
        else:
            profile.skills.append(UserSkillRow(
                skill_id=skill_id,
                proficiency_level=proficiency,
                years_of_experience=years_of_experience,
            ))
        return self._refresh_completeness(profile)

    @translate_errors("remove seeker skill")
    def remove_skill(self, seeker_id: Any, skill_id: Any) -> int:
        profile = self._require_profile(seeker_id)
        existing = next((s for s in profile.skills if s.skill_id == skill_id), None)
        if existing is None:
            raise NotFoundError("skill", skill_id)
        profile.skills.remove(existing)
        return self._refresh_completeness(profile)

    @translate_errors("upsert seeker language")
    def upsert_language(self, seeker_id: Any, language_id: Any, proficiency: str) -> int:
        try:
            tier = LanguageProficiency(proficiency)
        except ValueError as e:
            raise InvalidRangeError(f"Unknown language proficiency {proficiency!r}") from e

        profile = self._require_profile(seeker_id)
        if self.db.get(Language, language_id) is None:
            raise NotFoundError("language", language_id)

        existing = next((lang for lang in profile.languages if lang.language_id == language_id), None)
        if existing is not None:
            existing.proficiency = tier.value
        else:
            profile.languages.append(UserLanguageRow(language_id=language_id, proficiency=tier.value))
        return self._refresh_completeness(profile)

    @translate_errors("add seeker education")
    def add_education(
        self,
        seeker_id: Any,
        level: str,
        status: str = EducationStatus.COMPLETED.value,
        institution_name: Optional[str] = None,
        field_of_study: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> int:
        level = EducationLevel(level)
        status = EducationStatus(status)
        if start_date and end_date and end_date < start_date:
            raise InvalidRangeError(f"end_date {end_date} precedes start_date {start_date}")

        profile = self._require_profile(seeker_id)
        profile.education.append(EducationRow(
            level=level.value,
            status=status.value,
            institution_name=institution_name,
            field_of_study=field_of_study,
            start_date=start_date,
            end_date=end_date,
        ))
        return self._refresh_completeness(profile)

    @translate_errors("add seeker work experience")
    def add_work_experience(
        self,
        seeker_id: Any,
        company_name: str,
        position_title: str,
        start_date: date,
        end_date: Optional[date] = None,
        description: Optional[str] = None
    ) -> int:
        if end_date is not None and end_date < start_date:
            raise InvalidRangeError(f"end_date {end_date} precedes start_date {start_date}")

        profile = self._require_profile(seeker_id)
        profile.work_experiences.append(WorkExperience(
            company_name=company_name,
            position_title=position_title,
            start_date=start_date,
            end_date=end_date,
            description=description,
        ))
        return self._refresh_completeness(profile)

    @translate_errors("add seeker portfolio item")
    def add_portfolio_item(
        self,
        seeker_id: Any,
        title: str,
        url: Optional[str] = None,
        description: Optional[str] = None
    ) -> int:
        profile = self._require_profile(seeker_id)
        profile.portfolio_items.append(PortfolioItem(title=title, url=url, description=description))
        return self._refresh_completeness(profile)

