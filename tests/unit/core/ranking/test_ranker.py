#!/usr/bin/env python3
"""
Tests for RecommendationRanker: ordering, pagination, filtering and cancellation.
"""

import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from core.config_loader import MatchWeights, RankingConfig
from core.exceptions import InvalidRangeError, RankingCancelledError
from core.ranking.ranker import Pagination, RecommendationRanker
from core.scorer import MatchScorer
from tests.fixtures.matching_fixtures import make_job, make_seeker

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Item:
    id: int
    total: float
    created_at: Optional[datetime] = None


@pytest.fixture(scope="module")
def perfect_breakdown():
    return MatchScorer(MatchWeights()).score(make_seeker(), make_job())


@pytest.fixture
def score_fn(perfect_breakdown):
    def score(item: Item):
        return perfect_breakdown.model_copy(update={"total": item.total})
    return score


@pytest.fixture
def ranker():
    return RecommendationRanker(max_workers=4)


def rank_all(ranker, pool, score_fn, limit=100, offset=0, **kwargs):
    return ranker.rank(
        pool,
        score_fn,
        recency_key=lambda i: i.created_at,
        id_key=lambda i: i.id,
        pagination=Pagination(limit=limit, offset=offset),
        **kwargs
    )


class TestOrdering:

    def test_score_then_recency_then_id(self, ranker, score_fn):
        pool = [
            Item(id=5, total=70, created_at=BASE_TIME),
            Item(id=3, total=90, created_at=BASE_TIME),
            Item(id=4, total=70, created_at=BASE_TIME + timedelta(days=1)),
            Item(id=2, total=70, created_at=BASE_TIME),
            Item(id=1, total=70, created_at=None),
        ]

        page = rank_all(ranker, pool, score_fn)

        assert [r.item.id for r in page.items] == [3, 4, 2, 5, 1]
        assert [r.score for r in page.items] == [90, 70, 70, 70, 70]

    def test_order_is_stable_across_calls(self, ranker, score_fn):
        pool = [Item(id=i, total=50, created_at=BASE_TIME) for i in range(30, 0, -1)]

        first = [r.item.id for r in rank_all(ranker, pool, score_fn).items]
        second = [r.item.id for r in rank_all(ranker, list(reversed(pool)), score_fn).items]

        assert first == second == list(range(1, 31))


class TestPagination:

    def test_pages_are_disjoint_and_cover_everything(self, ranker, score_fn):
        pool = [Item(id=i, total=i % 7 * 10, created_at=BASE_TIME) for i in range(1, 26)]
        full = [r.item.id for r in rank_all(ranker, pool, score_fn).items]

        seen = []
        offset = 0
        while True:
            page = rank_all(ranker, pool, score_fn, limit=10, offset=offset)
            assert page.total_count == 25
            seen.extend(r.item.id for r in page.items)
            if not page.has_more:
                break
            offset += 10

        assert seen == full
        assert len(set(seen)) == 25

    def test_has_more(self, ranker, score_fn):
        pool = [Item(id=i, total=50) for i in range(5)]

        assert rank_all(ranker, pool, score_fn, limit=2, offset=0).has_more is True
        assert rank_all(ranker, pool, score_fn, limit=2, offset=3).has_more is False
        assert rank_all(ranker, pool, score_fn, limit=5, offset=0).has_more is False

    def test_offset_past_end(self, ranker, score_fn):
        page = rank_all(ranker, [Item(id=1, total=10)], score_fn, limit=10, offset=50)
        assert page.items == []
        assert page.total_count == 1
        assert page.has_more is False

    def test_resolve_defaults_and_clamp(self):
        config = RankingConfig()
        assert Pagination.resolve(None, None, config) == Pagination(limit=20, offset=0)
        assert Pagination.resolve(500, 10, config) == Pagination(limit=100, offset=10)

    @pytest.mark.parametrize("limit,offset", [(-1, 0), (10, -5)])
    def test_resolve_rejects_negative(self, limit, offset):
        with pytest.raises(InvalidRangeError):
            Pagination.resolve(limit, offset, RankingConfig())


class TestFiltering:

    def test_filters_apply_before_counting(self, ranker, score_fn):
        pool = [Item(id=i, total=10 * i) for i in range(1, 7)]

        page = rank_all(
            ranker,
            pool,
            score_fn,
            eligible=lambda i: i.id != 1,
            visible=lambda i: i.id != 2,
            excluded=lambda i: i.id == 3,
        )

        assert [r.item.id for r in page.items] == [6, 5, 4]
        assert page.total_count == 3

    def test_min_score(self, ranker, score_fn):
        pool = [Item(id=i, total=t) for i, t in enumerate([10, 49.99, 50, 80])]

        page = rank_all(ranker, pool, score_fn, min_score=50)

        assert [r.score for r in page.items] == [80, 50]
        assert page.total_count == 2

    def test_min_score_out_of_range(self, ranker, score_fn):
        with pytest.raises(InvalidRangeError):
            rank_all(ranker, [], score_fn, min_score=101)

    def test_empty_pool(self, ranker, score_fn):
        page = rank_all(ranker, [], score_fn)
        assert page.items == []
        assert page.total_count == 0
        assert page.has_more is False


class TestFailureHandling:

    def test_scoring_error_aborts_the_page(self, ranker, score_fn):
        def flaky(item):
            if item.id == 3:
                raise RuntimeError("scoring failed")
            return score_fn(item)

        with pytest.raises(RuntimeError, match="scoring failed"):
            rank_all(ranker, [Item(id=i, total=50) for i in range(6)], flaky)

    def test_stop_event_set_before_call(self, ranker, score_fn):
        stop = threading.Event()
        stop.set()

        with pytest.raises(RankingCancelledError):
            rank_all(ranker, [Item(id=1, total=50)], score_fn, stop_event=stop)

    def test_stop_event_set_during_scoring(self, score_fn):
        stop = threading.Event()

        def slow(item):
            stop.set()
            time.sleep(0.2)
            return score_fn(item)

        ranker = RecommendationRanker(max_workers=2)
        with pytest.raises(RankingCancelledError):
            rank_all(ranker, [Item(id=i, total=50) for i in range(4)], slow, stop_event=stop)

    def test_expired_deadline(self, ranker, score_fn):
        with pytest.raises(RankingCancelledError):
            rank_all(ranker, [Item(id=1, total=50)], score_fn, deadline=time.monotonic() - 1)

    def test_invalid_worker_count(self):
        with pytest.raises(InvalidRangeError):
            RecommendationRanker(max_workers=0)
