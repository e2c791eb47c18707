#!/usr/bin/env python3
"""
Tests for RecommendationService over in-memory stores.
"""

import time
import unittest
from datetime import date, datetime, timezone

from core.aggregates import SeekerPreferences, SkillRequirement
from core.config_loader import MatchWeights, RankingConfig
from core.exceptions import DataAccessError, InvalidRangeError, NotFoundError, RankingCancelledError
from core.ranking import RecommendationRanker, RecommendationService
from core.scorer import MatchScorer
from tests.fixtures.matching_fixtures import (
    DOCKER,
    TODAY,
    VALPARAISO,
    make_disabled_seeker,
    make_job,
    make_seeker,
)
from tests.mocks.store_mocks import (
    InMemoryApplicationStore,
    InMemoryJobStore,
    InMemoryProfileStore,
)


def build_service(seekers=(), jobs=(), applications=(), config=None):
    profiles = InMemoryProfileStore(seekers)
    job_store = InMemoryJobStore(jobs)
    application_store = InMemoryApplicationStore(applications)
    service = RecommendationService(
        profiles=profiles,
        jobs=job_store,
        applications=application_store,
        scorer=MatchScorer(MatchWeights()),
        ranker=RecommendationRanker(max_workers=2),
        config=config or RankingConfig(),
        today=lambda: TODAY,
    )
    return service, profiles, job_store


class TestMatchScore(unittest.TestCase):

    def test_scores_open_job(self):
        service, _, _ = build_service(seekers=[make_seeker()], jobs=[make_job()])

        result = service.match_score("seeker-1", "job-1")

        self.assertEqual(result.job_id, "job-1")
        self.assertEqual(result.score, 100.0)
        self.assertEqual(result.score, result.breakdown.total)
        self.assertFalse(result.already_applied)

    def test_reports_existing_application(self):
        service, _, _ = build_service(
            seekers=[make_seeker()], jobs=[make_job()], applications=[("job-1", "seeker-1")]
        )
        self.assertTrue(service.match_score("seeker-1", "job-1").already_applied)

    def test_missing_seeker(self):
        service, _, _ = build_service(jobs=[make_job()])
        with self.assertRaises(NotFoundError) as ctx:
            service.match_score("ghost", "job-1")
        self.assertEqual(ctx.exception.kind, "seeker")

    def test_missing_or_closed_job(self):
        service, _, _ = build_service(
            seekers=[make_seeker()],
            jobs=[
                make_job("paused", status="paused"),
                make_job("expired", application_deadline=date(2025, 3, 9)),
            ],
        )
        for job_id in ("ghost", "paused", "expired"):
            with self.assertRaises(NotFoundError):
                service.match_score("seeker-1", job_id)

    def test_deadline_day_is_open(self):
        service, _, _ = build_service(
            seekers=[make_seeker()], jobs=[make_job(application_deadline=TODAY)]
        )
        self.assertEqual(service.match_score("seeker-1", "job-1").score, 100.0)


class TestRecommendedJobs(unittest.TestCase):

    def setUp(self):
        self.jobs = [
            make_job("job-a"),
            make_job("job-b", region_id=VALPARAISO),
            make_job("job-c", required_skills=(SkillRequirement(skill_id=DOCKER),)),
            make_job("job-expired", application_deadline=date(2025, 3, 1)),
            make_job("job-draft", status="draft"),
        ]

    def test_ranked_by_score(self):
        service, _, _ = build_service(seekers=[make_seeker()], jobs=self.jobs)

        page = service.recommended_jobs_for_seeker("seeker-1")

        self.assertEqual([j.job.id for j in page.jobs], ["job-a", "job-b", "job-c"])
        self.assertEqual(page.total_count, 3)
        self.assertFalse(page.has_more)

    def test_expired_job_never_recommended(self):
        """Store returns an expired job anyway; it must still be filtered out."""
        service, _, job_store = build_service(seekers=[make_seeker()], jobs=self.jobs)
        job_store.list_active = lambda today, limit=None: list(job_store.jobs.values())

        page = service.recommended_jobs_for_seeker("seeker-1", limit=100)

        ids = [j.job.id for j in page.jobs]
        self.assertNotIn("job-expired", ids)
        self.assertNotIn("job-draft", ids)

    def test_exclude_applied_by_default(self):
        service, _, _ = build_service(
            seekers=[make_seeker()], jobs=self.jobs, applications=[("job-a", "seeker-1")]
        )

        excluded = service.recommended_jobs_for_seeker("seeker-1")
        included = service.recommended_jobs_for_seeker("seeker-1", exclude_applied=False)

        self.assertNotIn("job-a", [j.job.id for j in excluded.jobs])
        self.assertEqual(included.jobs[0].job.id, "job-a")
        self.assertTrue(included.jobs[0].already_applied)

    def test_min_score(self):
        service, _, _ = build_service(seekers=[make_seeker()], jobs=self.jobs)

        page = service.recommended_jobs_for_seeker("seeker-1", min_score=90)

        self.assertEqual([j.job.id for j in page.jobs], ["job-a"])

    def test_pagination(self):
        service, _, _ = build_service(seekers=[make_seeker()], jobs=self.jobs)

        first = service.recommended_jobs_for_seeker("seeker-1", limit=2)
        second = service.recommended_jobs_for_seeker("seeker-1", limit=2, offset=2)

        self.assertTrue(first.has_more)
        self.assertFalse(second.has_more)
        self.assertEqual(
            [j.job.id for j in first.jobs + second.jobs], ["job-a", "job-b", "job-c"]
        )

    def test_negative_limit(self):
        service, _, _ = build_service(seekers=[make_seeker()], jobs=self.jobs)
        with self.assertRaises(InvalidRangeError):
            service.recommended_jobs_for_seeker("seeker-1", limit=-1)

    def test_store_failure_aborts(self):
        service, _, job_store = build_service(seekers=[make_seeker()], jobs=self.jobs)
        job_store.fail = True
        with self.assertRaises(DataAccessError):
            service.recommended_jobs_for_seeker("seeker-1")

    def test_recency_breaks_ties(self):
        older = make_job("job-old", created_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
        newer = make_job("job-new", created_at=datetime(2025, 2, 1, tzinfo=timezone.utc))
        service, _, _ = build_service(seekers=[make_seeker()], jobs=[older, newer])

        page = service.recommended_jobs_for_seeker("seeker-1")

        self.assertEqual([j.job.id for j in page.jobs], ["job-new", "job-old"])

    def test_deadline_covers_store_retrieval(self):
        service, _, job_store = build_service(
            seekers=[make_seeker()], jobs=self.jobs, config=RankingConfig(timeout_seconds=0.05)
        )
        list_active = job_store.list_active

        def slow_list_active(today, limit=None):
            time.sleep(0.1)
            return list_active(today, limit=limit)

        job_store.list_active = slow_list_active

        with self.assertRaises(RankingCancelledError):
            service.recommended_jobs_for_seeker("seeker-1")

    def test_truncated_pool_is_logged(self):
        service, _, _ = build_service(
            seekers=[make_seeker()], jobs=self.jobs, config=RankingConfig(job_pool_limit=2)
        )

        with self.assertLogs("core.ranking.service", level="WARNING") as logs:
            page = service.recommended_jobs_for_seeker("seeker-1")

        self.assertEqual(page.total_count, 2)
        self.assertIn("limit of 2", logs.output[0])

    def test_pool_under_limit_not_logged(self):
        service, _, _ = build_service(seekers=[make_seeker()], jobs=self.jobs)

        with self.assertNoLogs("core.ranking.service", level="WARNING"):
            service.recommended_jobs_for_seeker("seeker-1")


class TestRecommendedCandidates(unittest.TestCase):

    def setUp(self):
        self.job = make_job("job-1", accommodations=("ramp",))

    def test_visibility_rules(self):
        seekers = [
            make_seeker("public"),
            make_seeker("hidden", preferences=SeekerPreferences(profile_visibility="hidden")),
            make_seeker("applied-only", preferences=SeekerPreferences(profile_visibility="applied_only")),
            make_seeker("applied-only-applied", preferences=SeekerPreferences(profile_visibility="applied_only")),
        ]
        service, _, _ = build_service(
            seekers=seekers, jobs=[self.job], applications=[("job-1", "applied-only-applied")]
        )

        page = service.recommended_candidates_for_job("job-1")

        ids = sorted(c.profile.user_id for c in page.candidates)
        self.assertEqual(ids, ["applied-only-applied", "public"])

    def test_hidden_even_after_applying(self):
        seeker = make_seeker("hidden", preferences=SeekerPreferences(profile_visibility="hidden"))
        service, _, _ = build_service(seekers=[seeker], jobs=[self.job], applications=[("job-1", "hidden")])

        page = service.recommended_candidates_for_job("job-1")

        self.assertEqual(page.candidates, [])
        self.assertEqual(page.total_count, 0)

    def test_eligibility(self):
        seekers = [
            make_seeker("complete", completeness_percentage=50),
            make_seeker("incomplete", completeness_percentage=49),
            make_seeker("suspended", is_active_account=False),
        ]
        service, _, _ = build_service(seekers=seekers, jobs=[self.job])

        page = service.recommended_candidates_for_job("job-1")

        self.assertEqual([c.profile.user_id for c in page.candidates], ["complete"])

    def test_include_applied_only(self):
        seekers = [make_seeker("a"), make_seeker("b")]
        service, _, _ = build_service(seekers=seekers, jobs=[self.job], applications=[("job-1", "b")])

        page = service.recommended_candidates_for_job("job-1", include_applied_only=True)

        self.assertEqual([c.profile.user_id for c in page.candidates], ["b"])
        self.assertTrue(page.candidates[0].has_applied)

    def test_email_only_disclosed_to_applied(self):
        seekers = [make_seeker("a", email="a@example.org"), make_seeker("b", email="b@example.org")]
        service, _, _ = build_service(seekers=seekers, jobs=[self.job], applications=[("job-1", "b")])

        page = service.recommended_candidates_for_job("job-1")
        emails = {c.profile.user_id: c.profile.email for c in page.candidates}

        self.assertIsNone(emails["a"])
        self.assertEqual(emails["b"], "b@example.org")

    def test_disability_details_redacted(self):
        seekers = [
            make_disabled_seeker("shares", show_disability_info=True),
            make_disabled_seeker("private", show_disability_info=False),
        ]
        service, _, _ = build_service(seekers=seekers, jobs=[self.job])

        page = service.recommended_candidates_for_job("job-1")
        by_id = {c.profile.user_id: c.breakdown.accommodations for c in page.candidates}

        self.assertEqual(by_id["shares"].matching_categories, ["ramp"])
        self.assertEqual(by_id["private"].matching_categories, [])
        self.assertIsNone(by_id["private"].seeker_needs_accommodations)
        self.assertEqual(by_id["private"].score, by_id["private"].max_score)

    def test_missing_job(self):
        service, _, _ = build_service(seekers=[make_seeker()])
        with self.assertRaises(NotFoundError):
            service.recommended_candidates_for_job("ghost")

    def test_configured_completeness_threshold(self):
        seekers = [make_seeker("a", completeness_percentage=60)]
        config = RankingConfig(min_candidate_completeness=70)
        service, _, _ = build_service(seekers=seekers, jobs=[self.job], config=config)

        page = service.recommended_candidates_for_job("job-1")

        self.assertEqual(page.total_count, 0)

    def test_deadline_covers_candidate_retrieval(self):
        service, profiles, _ = build_service(
            seekers=[make_seeker()], jobs=[self.job], config=RankingConfig(timeout_seconds=0.05)
        )
        list_candidates = profiles.list_candidates

        def slow_list_candidates(min_completeness, limit=None):
            time.sleep(0.1)
            return list_candidates(min_completeness, limit=limit)

        profiles.list_candidates = slow_list_candidates

        with self.assertRaises(RankingCancelledError):
            service.recommended_candidates_for_job("job-1")

    def test_truncated_candidate_pool_is_logged(self):
        seekers = [make_seeker(f"seeker-{i}") for i in range(3)]
        service, _, _ = build_service(
            seekers=seekers, jobs=[self.job], config=RankingConfig(candidate_pool_limit=3)
        )

        with self.assertLogs("core.ranking.service", level="WARNING") as logs:
            page = service.recommended_candidates_for_job("job-1")

        self.assertEqual(page.total_count, 3)
        self.assertIn("Candidates pool reached its limit of 3", logs.output[0])


if __name__ == "__main__":
    unittest.main()
