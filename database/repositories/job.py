import logging
from datetime import date
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from core.aggregates import JobAggregate, LanguageRequirement, SkillRequirement, check_proficiency
from core.completeness import job_completeness
from core.enums import JobStatus
from core.exceptions import NotFoundError
from database.models import (
    Job,
    JobDisabilityAccommodation,
    JobLanguage,
    JobPreferredSkill,
    JobRequiredSkill,
    Language,
    Skill,
)
from database.repositories.base import BaseRepository, db_read_retry, translate_errors

logger = logging.getLogger(__name__)

JOB_FIELDS = frozenset([
    'title', 'description', 'responsibilities', 'benefits', 'status',
    'industry_id', 'work_area_id', 'position_level_id',
    'region_id', 'municipality_id', 'work_modality', 'is_remote_allowed',
    'salary_min', 'salary_max', 'years_experience_min', 'years_experience_max',
    'age_min', 'age_max', 'education_level', 'application_deadline',
])

_JOB_LOAD_OPTIONS = (
    selectinload(Job.required_skills),
    selectinload(Job.preferred_skills),
    selectinload(Job.languages),
    selectinload(Job.accommodations),
)


def _as_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def to_job_aggregate(job: Job) -> JobAggregate:
    """Build a JobAggregate from a job row with its junctions loaded."""
    return JobAggregate(
        id=job.id,
        company_id=job.company_id,
        title=job.title,
        status=job.status,
        region_id=job.region_id,
        municipality_id=job.municipality_id,
        work_modality=job.work_modality,
        is_remote_allowed=bool(job.is_remote_allowed),
        salary_min=_as_float(job.salary_min),
        salary_max=_as_float(job.salary_max),
        years_experience_min=job.years_experience_min,
        years_experience_max=job.years_experience_max,
        age_min=job.age_min,
        age_max=job.age_max,
        education_level=job.education_level,
        application_deadline=job.application_deadline,
        required_skills=tuple(
            SkillRequirement(skill_id=r.skill_id, minimum_proficiency=r.minimum_proficiency)
            for r in job.required_skills
        ),
        preferred_skills=tuple(
            SkillRequirement(skill_id=r.skill_id, minimum_proficiency=r.minimum_proficiency)
            for r in job.preferred_skills
        ),
        required_languages=tuple(
            LanguageRequirement(language_id=r.language_id, minimum_proficiency=r.minimum_proficiency)
            for r in job.languages
        ),
        accommodations=tuple(a.category for a in job.accommodations),
        description=job.description,
        responsibilities=job.responsibilities,
        benefits=job.benefits,
        industry_id=job.industry_id,
        work_area_id=job.work_area_id,
        position_level_id=job.position_level_id,
        completeness_percentage=job.completeness_percentage or 0,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


class JobRepository(BaseRepository):
    """
    Job postings and their requirement junctions.

    Writes validate through JobAggregate, so an invalid status, modality,
    education level or experience range raises before anything is committed.
    """

    @translate_errors("load job")
    @db_read_retry
    def get(self, job_id: Any) -> Optional[JobAggregate]:
        stmt = select(Job).options(*_JOB_LOAD_OPTIONS).where(Job.id == job_id)
        job = self.db.execute(stmt).scalar_one_or_none()
        return to_job_aggregate(job) if job is not None else None

    @translate_errors("load active jobs")
    @db_read_retry
    def list_active(self, today: date, limit: Optional[int] = None) -> List[JobAggregate]:
        """Active jobs whose deadline is today or later, newest first."""
        stmt = (
            select(Job)
            .options(*_JOB_LOAD_OPTIONS)
            .where(
                Job.status == JobStatus.ACTIVE.value,
                Job.application_deadline >= today,
            )
            .order_by(Job.created_at.desc(), Job.id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        jobs = self.db.execute(stmt).scalars().all()
        logger.debug(f"Loaded {len(jobs)} active jobs (deadline >= {today})")
        return [to_job_aggregate(j) for j in jobs]

    def _require_job(self, job_id: Any) -> Job:
        stmt = select(Job).options(*_JOB_LOAD_OPTIONS).where(Job.id == job_id)
        job = self.db.execute(stmt).scalar_one_or_none()
        if job is None:
            raise NotFoundError("job", job_id)
        return job

    def _refresh_completeness(self, job: Job) -> int:
        self.db.flush()
        percentage = job_completeness(to_job_aggregate(job))
        job.completeness_percentage = percentage
        self.db.flush()
        return percentage

    def _check_ids_exist(self, model, kind: str, ids: Iterable[Any]) -> None:
        wanted = list(ids)
        if not wanted:
            return
        found = set(self.db.execute(select(model.id).where(model.id.in_(wanted))).scalars().all())
        for entity_id in wanted:
            if entity_id not in found:
                raise NotFoundError(kind, entity_id)

    @staticmethod
    def _normalize_fields(fields: dict) -> dict:
        unknown = set(fields) - JOB_FIELDS
        if unknown:
            raise ValueError(f"Unknown job fields: {sorted(unknown)}")
        # Stored as plain strings
        return {k: (v.value if hasattr(v, 'value') else v) for k, v in fields.items()}

    @translate_errors("recompute job completeness")
    def recompute_completeness(self, job_id: Any) -> int:
        return self._refresh_completeness(self._require_job(job_id))

    @translate_errors("create job")
    def create_job(self, company_id: Any, title: str, **fields) -> Any:
        """Create a job posting; returns its id."""
        fields = self._normalize_fields(fields)
        job = Job(company_id=company_id, title=title, **fields)
        self.db.add(job)
        self.db.flush()

        job = self._require_job(job.id)
        to_job_aggregate(job)
        self._refresh_completeness(job)
        logger.info(f"Created job {job.id} for company {company_id}")
        return job.id

    @translate_errors("update job")
    def update_job(self, job_id: Any, **fields) -> int:
        fields = self._normalize_fields(fields)
        job = self._require_job(job_id)
        for name, value in fields.items():
            setattr(job, name, value)
        to_job_aggregate(job)
        return self._refresh_completeness(job)

    def _replace(self, collection: list, rows: list) -> None:
        # Flush the removals first so re-added keys do not hit the unique constraints
        collection.clear()
        self.db.flush()
        collection.extend(rows)

    @translate_errors("set required skills")
    def set_required_skills(self, job_id: Any, requirements: Sequence[Tuple[Any, int]]) -> int:
        """Replace the required skills with (skill_id, minimum_proficiency) pairs."""
        for _, minimum in requirements:
            check_proficiency("minimum_proficiency", minimum)
        job = self._require_job(job_id)
        self._check_ids_exist(Skill, "skill", (skill_id for skill_id, _ in requirements))
        self._replace(job.required_skills, [
            JobRequiredSkill(skill_id=skill_id, minimum_proficiency=minimum)
            for skill_id, minimum in requirements
        ])
        return self._refresh_completeness(job)

    @translate_errors("set preferred skills")
    def set_preferred_skills(self, job_id: Any, requirements: Sequence[Tuple[Any, int]]) -> int:
        for _, minimum in requirements:
            check_proficiency("minimum_proficiency", minimum)
        job = self._require_job(job_id)
        self._check_ids_exist(Skill, "skill", (skill_id for skill_id, _ in requirements))
        self._replace(job.preferred_skills, [
            JobPreferredSkill(skill_id=skill_id, minimum_proficiency=minimum)
            for skill_id, minimum in requirements
        ])
        return self._refresh_completeness(job)

    @translate_errors("set required languages")
    def set_required_languages(self, job_id: Any, requirements: Sequence[Tuple[Any, int]]) -> int:
        for _, minimum in requirements:
            check_proficiency("minimum_proficiency", minimum)
        job = self._require_job(job_id)
        self._check_ids_exist(Language, "language", (language_id for language_id, _ in requirements))
        self._replace(job.languages, [
            JobLanguage(language_id=language_id, minimum_proficiency=minimum)
            for language_id, minimum in requirements
        ])
        return self._refresh_completeness(job)

    @translate_errors("set accommodations")
    def set_accommodations(self, job_id: Any, categories: Sequence[str]) -> int:
        job = self._require_job(job_id)
        unique = list(dict.fromkeys(categories))
        self._replace(job.accommodations, [JobDisabilityAccommodation(category=c) for c in unique])
        return self._refresh_completeness(job)
