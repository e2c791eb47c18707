#!/usr/bin/env python3
"""
Ranking Module - Recommendations in both directions.

Public API:
- RecommendationRanker: Filter, score, sort and page a pool
- RecommendationService: MatchScore and the two recommendation lists
"""

from core.ranking.ranker import Pagination, RankedItem, RankedPage, RecommendationRanker
from core.ranking.service import RecommendationService

__all__ = [
    'Pagination',
    'RankedItem',
    'RankedPage',
    'RecommendationRanker',
    'RecommendationService',
]
