from dataclasses import dataclass
from datetime import date
from typing import Callable

from core.config_loader import AppConfig
from core.ranking import RecommendationRanker, RecommendationService
from core.scorer import MatchScorer
from core.stores import ApplicationStore, JobStore, ProfileStore


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    The scorer and ranker are stateless and shared; stores are bound per
    unit of work, so DB access should be obtained via matching_uow() and
    passed to recommendation_service().
    """
    config: AppConfig
    scorer: MatchScorer
    ranker: RecommendationRanker
    today: Callable[[], date] = date.today

    @classmethod
    def build(cls, config: AppConfig, today: Callable[[], date] = date.today) -> "AppContext":
        """Build an AppContext from config.

        Raises:
            InvalidRangeError: If the configured weights do not sum to 100
        """
        matching = config.matching
        return cls(
            config=config,
            scorer=MatchScorer(matching.weights),
            ranker=RecommendationRanker(max_workers=matching.ranking.max_workers),
            today=today,
        )

    def recommendation_service(
        self,
        profiles: ProfileStore,
        jobs: JobStore,
        applications: ApplicationStore
    ) -> RecommendationService:
        return RecommendationService(
            profiles=profiles,
            jobs=jobs,
            applications=applications,
            scorer=self.scorer,
            ranker=self.ranker,
            config=self.config.matching.ranking,
            today=self.today,
        )
