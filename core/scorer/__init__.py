#!/usr/bin/env python3
"""
Scoring Module - Deterministic match scoring.

Public API:
- MatchScorer: Scores one (seeker, job) pair
- ScoreBreakdown: Per-category result with an additive total

Modules:
- models.py: Breakdown data structures
- coverage.py: Skills and languages coverage
- criteria.py: Location, experience and education
- accommodations.py: Accommodation needs coverage
- service.py: MatchScorer orchestrator
"""

from core.scorer.models import ScoreBreakdown
from core.scorer.service import MatchScorer, validate_weights

__all__ = ['MatchScorer', 'ScoreBreakdown', 'validate_weights']
