import contextlib
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from sqlalchemy.orm import Session, sessionmaker

from database.database import SessionLocal
from database.repositories import (
    ApplicationRepository,
    CompanyRepository,
    JobRepository,
    ProfileRepository,
    ReferenceRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class MatchingRepositories:
    """Repositories sharing one Session (and so one transaction)."""
    session: Session
    profiles: ProfileRepository
    jobs: JobRepository
    companies: CompanyRepository
    applications: ApplicationRepository
    reference: ReferenceRepository

    @classmethod
    def bind(cls, session: Session, today: Callable[[], date] = date.today) -> "MatchingRepositories":
        return cls(
            session=session,
            profiles=ProfileRepository(session, today),
            jobs=JobRepository(session, today),
            companies=CompanyRepository(session, today),
            applications=ApplicationRepository(session, today),
            reference=ReferenceRepository(session, today),
        )


@contextlib.contextmanager
def matching_uow(
    session_factory: Optional[sessionmaker] = None,
    today: Callable[[], date] = date.today
):
    """Per-unit-of-work transaction scope.

    Yields MatchingRepositories bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with matching_uow() as repos:
            repos.profiles.upsert_skill(seeker_id, skill_id, 4)
        # commit happens automatically on successful exit
    """
    session = (session_factory or SessionLocal)()
    try:
        repos = MatchingRepositories.bind(session, today)
        yield repos
        session.commit()
    except Exception:
        logger.debug("Rolling back unit of work", exc_info=True)
        session.rollback()
        raise
    finally:
        session.close()
