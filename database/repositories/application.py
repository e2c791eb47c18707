import logging
from typing import Any, Optional, Set

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from core.exceptions import NotFoundError, PreconditionFailed
from database.models import Job, JobApplication, User
from database.repositories.base import BaseRepository, db_read_retry, translate_errors

logger = logging.getLogger(__name__)


class ApplicationRepository(BaseRepository):
    @translate_errors("check application")
    @db_read_retry
    def exists(self, job_id: Any, seeker_id: Any) -> bool:
        stmt = select(JobApplication.id).where(
            JobApplication.job_id == job_id,
            JobApplication.applicant_id == seeker_id,
        )
        return self.db.execute(stmt).first() is not None

    @translate_errors("load applied jobs")
    @db_read_retry
    def applied_job_ids(self, seeker_id: Any) -> Set[Any]:
        stmt = select(JobApplication.job_id).where(JobApplication.applicant_id == seeker_id)
        return set(self.db.execute(stmt).scalars().all())

    @translate_errors("load applicants")
    @db_read_retry
    def applicant_ids(self, job_id: Any) -> Set[Any]:
        stmt = select(JobApplication.applicant_id).where(JobApplication.job_id == job_id)
        return set(self.db.execute(stmt).scalars().all())

    @translate_errors("create application")
    def create(self, job_id: Any, seeker_id: Any, cover_letter: Optional[str] = None) -> Any:
        """Record an application; a second one for the same pair is refused."""
        if self.db.get(Job, job_id) is None:
            raise NotFoundError("job", job_id)
        if self.db.get(User, seeker_id) is None:
            raise NotFoundError("seeker", seeker_id)
        if self.exists(job_id, seeker_id):
            raise PreconditionFailed(f"Seeker {seeker_id} already applied to job {job_id}")

        application = JobApplication(job_id=job_id, applicant_id=seeker_id, cover_letter=cover_letter)
        self.db.add(application)
        try:
            self.db.flush()
        except IntegrityError as e:
            raise PreconditionFailed(f"Seeker {seeker_id} already applied to job {job_id}") from e

        logger.info(f"Seeker {seeker_id} applied to job {job_id}")
        return application.id
