"""
Store interfaces consumed by the recommendation service.

The database repositories satisfy these structurally; tests pass in-memory
fakes. Stores return fully hydrated aggregates so the core never issues a
query while scoring.
"""

from datetime import date
from typing import Any, List, Optional, Protocol, Set

from core.aggregates import JobAggregate, SeekerAggregate


class ProfileStore(Protocol):
    def get(self, seeker_id: Any) -> Optional[SeekerAggregate]:
        ...

    def list_candidates(self, min_completeness: int, limit: Optional[int] = None) -> List[SeekerAggregate]:
        ...


class JobStore(Protocol):
    def get(self, job_id: Any) -> Optional[JobAggregate]:
        ...

    def list_active(self, today: date, limit: Optional[int] = None) -> List[JobAggregate]:
        ...


class ApplicationStore(Protocol):
    def exists(self, job_id: Any, seeker_id: Any) -> bool:
        ...

    def applied_job_ids(self, seeker_id: Any) -> Set[Any]:
        ...

    def applicant_ids(self, job_id: Any) -> Set[Any]:
        ...
