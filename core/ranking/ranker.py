#!/usr/bin/env python3
"""
Recommendation Ranker - Filter, score, sort and page a candidate pool.

Used for both directions (jobs for a seeker, candidates for a job). The caller
supplies the pool and the predicates; the ranker owns the worker pool, the
ordering and the page arithmetic.
"""

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from core.config_loader import RankingConfig
from core.exceptions import InvalidRangeError, RankingCancelledError
from core.scorer.models import ScoreBreakdown

logger = logging.getLogger(__name__)

T = TypeVar("T")

POLL_INTERVAL_SECONDS = 0.05


@dataclass(frozen=True)
class Pagination:
    limit: int
    offset: int

    @classmethod
    def resolve(
        cls,
        limit: Optional[int],
        offset: Optional[int],
        config: RankingConfig
    ) -> "Pagination":
        """Apply defaults and clamp the page size; negative values are rejected."""
        if limit is None:
            limit = config.default_page_size
        if offset is None:
            offset = 0
        if limit < 0:
            raise InvalidRangeError(f"limit={limit} is negative")
        if offset < 0:
            raise InvalidRangeError(f"offset={offset} is negative")
        return cls(limit=min(limit, config.max_page_size), offset=offset)


@dataclass(frozen=True)
class RankedItem(Generic[T]):
    item: T
    breakdown: ScoreBreakdown

    @property
    def score(self) -> Decimal:
        return self.breakdown.total


@dataclass
class RankedPage(Generic[T]):
    items: List[RankedItem]
    total_count: int
    has_more: bool


def _sort_ranked(
    ranked: List[RankedItem],
    recency_key: Callable[[Any], Any],
    id_key: Callable[[Any], Any]
) -> List[RankedItem]:
    """Order by score desc, then recency desc, then id asc.

    Python's sort is stable, so sorting by the least significant key first
    composes the three orders. Items without a recency sort last within a score.
    """
    ordered = sorted(ranked, key=lambda r: id_key(r.item))

    def recency(r: RankedItem):
        value = recency_key(r.item)
        return (value is not None, value)

    ordered.sort(key=recency, reverse=True)
    ordered.sort(key=lambda r: r.score, reverse=True)
    return ordered


class RecommendationRanker:
    """
    Ranks a pool of aggregates against a scoring function.

    Scoring runs on a bounded thread pool. Any scoring error aborts the whole
    call; a set stop event or an expired deadline raises
    RankingCancelledError and discards the partial results.
    """

    def __init__(self, max_workers: int = 4):
        if max_workers < 1:
            raise InvalidRangeError(f"max_workers={max_workers} must be at least 1")
        self.max_workers = max_workers

    def _check_interrupted(
        self,
        stop_event: Optional[threading.Event],
        deadline: Optional[float]
    ) -> None:
        if stop_event is not None and stop_event.is_set():
            logger.info("Ranking stopped by caller")
            raise RankingCancelledError("Ranking stopped by caller")
        if deadline is not None and time.monotonic() >= deadline:
            logger.warning("Ranking deadline exceeded")
            raise RankingCancelledError("Ranking deadline exceeded")

    def _score_all(
        self,
        pool: Sequence[T],
        score_fn: Callable[[T], ScoreBreakdown],
        stop_event: Optional[threading.Event],
        deadline: Optional[float]
    ) -> List[RankedItem]:
        if not pool:
            return []

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(pool)),
            thread_name_prefix="ranker",
        )
        try:
            futures = {executor.submit(score_fn, item): index for index, item in enumerate(pool)}
            results: List[Optional[RankedItem]] = [None] * len(pool)
            pending = set(futures)

            while pending:
                self._check_interrupted(stop_event, deadline)
                done, pending = wait(pending, timeout=POLL_INTERVAL_SECONDS, return_when=FIRST_COMPLETED)
                for future in done:
                    index = futures[future]
                    # Re-raises the scoring error, aborting the page
                    results[index] = RankedItem(item=pool[index], breakdown=future.result())

            self._check_interrupted(stop_event, deadline)
            return [r for r in results if r is not None]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def rank(
        self,
        pool: Sequence[T],
        score_fn: Callable[[T], ScoreBreakdown],
        *,
        recency_key: Callable[[T], Any],
        id_key: Callable[[T], Any],
        pagination: Pagination,
        eligible: Optional[Callable[[T], bool]] = None,
        visible: Optional[Callable[[T], bool]] = None,
        excluded: Optional[Callable[[T], bool]] = None,
        min_score: float = 0.0,
        stop_event: Optional[threading.Event] = None,
        deadline: Optional[float] = None,
    ) -> RankedPage:
        """
        Rank a pool and return one page.

        Args:
            pool: Hydrated aggregates to consider
            score_fn: Pure function producing a ScoreBreakdown per item
            recency_key: Secondary sort key (newer first)
            id_key: Final tie-breaker (ascending)
            pagination: Resolved limit and offset
            eligible: Keep only items passing this predicate
            visible: Keep only items passing this predicate
            excluded: Drop items matching this predicate
            min_score: Drop scored items whose total is below this value
            stop_event: Set by the caller to cancel the call
            deadline: time.monotonic() value after which the call is cancelled

        Returns:
            RankedPage with total_count counted before slicing
        """
        if not 0 <= min_score <= 100:
            raise InvalidRangeError(f"min_score={min_score} outside [0, 100]")

        self._check_interrupted(stop_event, deadline)

        candidates = list(pool)
        pool_size = len(candidates)
        if eligible is not None:
            candidates = [c for c in candidates if eligible(c)]
        if visible is not None:
            candidates = [c for c in candidates if visible(c)]
        if excluded is not None:
            candidates = [c for c in candidates if not excluded(c)]

        scored = self._score_all(candidates, score_fn, stop_event, deadline)
        if min_score > 0:
            scored = [r for r in scored if r.score >= min_score]

        ordered = _sort_ranked(scored, recency_key, id_key)
        total_count = len(ordered)
        start = pagination.offset
        end = pagination.offset + pagination.limit

        logger.info(
            f"Ranked {total_count} of {pool_size} pooled items "
            f"(filtered to {len(candidates)}), returning [{start}, {min(end, total_count)})"
        )

        return RankedPage(
            items=ordered[start:end],
            total_count=total_count,
            has_more=end < total_count,
        )
