#!/usr/bin/env python3
"""
Recommendation Service - MatchScore, recommended jobs and recommended candidates.

Loads aggregates through the injected stores, then hands the pool to the
RecommendationRanker. All I/O happens before scoring starts.
"""

import logging
import threading
import time
from datetime import date
from typing import Any, Callable, Optional

from core.aggregates import JobAggregate, SeekerAggregate
from core.config_loader import RankingConfig
from core.exceptions import NotFoundError
from core.ranking.models import (
    CandidateProfile,
    JobSummary,
    MatchScoreResult,
    RecommendedCandidate,
    RecommendedCandidatesPage,
    RecommendedJob,
    RecommendedJobsPage,
)
from core.ranking.ranker import Pagination, RecommendationRanker
from core.scorer import MatchScorer
from core.stores import ApplicationStore, JobStore, ProfileStore
from core.visibility import is_visible, redact_for_company

logger = logging.getLogger(__name__)


class RecommendationService:
    def __init__(
        self,
        profiles: ProfileStore,
        jobs: JobStore,
        applications: ApplicationStore,
        scorer: MatchScorer,
        ranker: RecommendationRanker,
        config: Optional[RankingConfig] = None,
        today: Callable[[], date] = date.today,
    ):
        self.profiles = profiles
        self.jobs = jobs
        self.applications = applications
        self.scorer = scorer
        self.ranker = ranker
        self.config = config or RankingConfig()
        self.today = today

    def _deadline(self) -> Optional[float]:
        if self.config.timeout_seconds is None:
            return None
        return time.monotonic() + self.config.timeout_seconds

    def _warn_if_truncated(self, pool: list, limit: int, kind: str) -> None:
        if len(pool) >= limit:
            logger.warning(
                f"{kind.capitalize()} pool reached its limit of {limit}; "
                f"total_count covers only the first {limit} {kind}"
            )

    def _require_seeker(self, seeker_id: Any) -> SeekerAggregate:
        seeker = self.profiles.get(seeker_id)
        if seeker is None:
            raise NotFoundError("seeker", seeker_id)
        return seeker

    def match_score(self, seeker_id: Any, job_id: Any) -> MatchScoreResult:
        """Score one seeker against one open job."""
        seeker = self._require_seeker(seeker_id)

        job = self.jobs.get(job_id)
        if job is None or not job.is_matchable(self.today()):
            raise NotFoundError("job", job_id)

        breakdown = self.scorer.score(seeker, job)
        return MatchScoreResult(
            job_id=job.id,
            score=breakdown.total,
            breakdown=breakdown,
            already_applied=self.applications.exists(job.id, seeker.user_id),
        )

    def recommended_jobs_for_seeker(
        self,
        seeker_id: Any,
        exclude_applied: bool = True,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        min_score: float = 0.0,
        stop_event: Optional[threading.Event] = None,
    ) -> RecommendedJobsPage:
        deadline = self._deadline()
        pagination = Pagination.resolve(limit, offset, self.config)
        seeker = self._require_seeker(seeker_id)
        today = self.today()

        pool = list(self.jobs.list_active(today, limit=self.config.job_pool_limit))
        self._warn_if_truncated(pool, self.config.job_pool_limit, "jobs")
        applied = self.applications.applied_job_ids(seeker.user_id)

        def score_job(job: JobAggregate):
            return self.scorer.score(seeker, job)

        page = self.ranker.rank(
            pool,
            score_job,
            recency_key=lambda job: job.created_at,
            id_key=lambda job: job.id,
            pagination=pagination,
            eligible=lambda job: job.is_matchable(today),
            excluded=(lambda job: job.id in applied) if exclude_applied else None,
            min_score=min_score,
            stop_event=stop_event,
            deadline=deadline,
        )

        logger.info(
            f"Recommended {len(page.items)}/{page.total_count} jobs for seeker {seeker_id}"
        )

        return RecommendedJobsPage(
            jobs=[
                RecommendedJob(
                    job=JobSummary.from_aggregate(ranked.item),
                    breakdown=ranked.breakdown,
                    already_applied=ranked.item.id in applied,
                )
                for ranked in page.items
            ],
            total_count=page.total_count,
            has_more=page.has_more,
        )

    def recommended_candidates_for_job(
        self,
        job_id: Any,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        min_score: float = 0.0,
        include_applied_only: bool = False,
        stop_event: Optional[threading.Event] = None,
    ) -> RecommendedCandidatesPage:
        deadline = self._deadline()
        pagination = Pagination.resolve(limit, offset, self.config)

        job = self.jobs.get(job_id)
        if job is None:
            raise NotFoundError("job", job_id)

        min_completeness = self.config.min_candidate_completeness
        pool = list(self.profiles.list_candidates(min_completeness, limit=self.config.candidate_pool_limit))
        self._warn_if_truncated(pool, self.config.candidate_pool_limit, "candidates")
        applicants = self.applications.applicant_ids(job.id)

        def eligible(seeker: SeekerAggregate) -> bool:
            return seeker.is_active_account and seeker.completeness_percentage >= min_completeness

        def visible(seeker: SeekerAggregate) -> bool:
            return is_visible(seeker.preferences, seeker.user_id, job.id, seeker.user_id in applicants)

        def score_seeker(seeker: SeekerAggregate):
            return self.scorer.score(seeker, job)

        page = self.ranker.rank(
            pool,
            score_seeker,
            recency_key=lambda seeker: seeker.updated_at or seeker.created_at,
            id_key=lambda seeker: seeker.user_id,
            pagination=pagination,
            eligible=eligible,
            visible=visible,
            excluded=(lambda seeker: seeker.user_id not in applicants) if include_applied_only else None,
            min_score=min_score,
            stop_event=stop_event,
            deadline=deadline,
        )

        logger.info(
            f"Recommended {len(page.items)}/{page.total_count} candidates for job {job_id}"
        )

        candidates = []
        for ranked in page.items:
            seeker = ranked.item
            has_applied = seeker.user_id in applicants
            candidates.append(RecommendedCandidate(
                profile=CandidateProfile.from_aggregate(seeker, has_applied),
                breakdown=redact_for_company(ranked.breakdown, seeker.preferences),
                has_applied=has_applied,
            ))

        return RecommendedCandidatesPage(
            candidates=candidates,
            total_count=page.total_count,
            has_more=page.has_more,
        )
