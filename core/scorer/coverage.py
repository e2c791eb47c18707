#!/usr/bin/env python3
"""
Coverage Calculations - Skills and languages categories.

A requirement is covered when the seeker holds the skill or language at or
above the job's minimum proficiency. An empty requirement set is vacuously
covered.
"""

from typing import Dict, Sequence, Tuple
import logging

from core.aggregates import (
    LanguageRequirement,
    SkillRequirement,
    UserLanguage,
    UserSkill,
)
from core.config_loader import MatchWeights
from core.scorer.models import (
    LanguagesMatchDetail,
    MatchedLanguage,
    MatchedSkill,
    MissingLanguage,
    MissingSkill,
    SkillsMatchDetail,
    points,
)

logger = logging.getLogger(__name__)


def _split_skills(
    held: Dict,
    requirements: Sequence[SkillRequirement]
) -> Tuple[list, list]:
    matched, missing = [], []
    for req in requirements:
        proficiency = held.get(req.skill_id)
        if proficiency is not None and proficiency >= req.minimum_proficiency:
            matched.append(MatchedSkill(
                skill_id=req.skill_id,
                required_proficiency=req.minimum_proficiency,
                seeker_proficiency=proficiency,
            ))
        else:
            missing.append(MissingSkill(
                skill_id=req.skill_id,
                required_proficiency=req.minimum_proficiency,
                seeker_proficiency=proficiency,
            ))
    return matched, missing


def calculate_skills_score(
    seeker_skills: Sequence[UserSkill],
    required: Sequence[SkillRequirement],
    preferred: Sequence[SkillRequirement],
    weights: MatchWeights
) -> SkillsMatchDetail:
    """
    Score the skills category.

    Formula (required non-empty):
        no preferred:  max * matched/required
        preferred:     (max - bonus) * matched/required + bonus * matched_pref/preferred

    Returns:
        SkillsMatchDetail with score in [0, weights.skills]
    """
    held = {s.skill_id: s.proficiency for s in seeker_skills}

    matched_required, missing_required = _split_skills(held, required)
    matched_pref, _ = _split_skills(held, preferred)

    max_score = weights.skills
    if not required:
        score = max_score
    else:
        required_ratio = len(matched_required) / len(required)
        if preferred:
            bonus = weights.preferred_skills_bonus
            preferred_ratio = len(matched_pref) / len(preferred)
            score = (max_score - bonus) * required_ratio + bonus * preferred_ratio
        else:
            score = max_score * required_ratio

    return SkillsMatchDetail(
        score=points(score),
        max_score=max_score,
        matched_required=matched_required,
        missing_required=missing_required,
        matched_preferred=[m.skill_id for m in matched_pref],
    )


def calculate_languages_score(
    seeker_languages: Sequence[UserLanguage],
    required: Sequence[LanguageRequirement],
    weights: MatchWeights
) -> LanguagesMatchDetail:
    """Score the languages category; tiers map onto the 1-5 scale."""
    held = {lang.language_id: lang.proficiency.level for lang in seeker_languages}

    matched, missing = [], []
    for req in required:
        level = held.get(req.language_id)
        if level is not None and level >= req.minimum_proficiency:
            matched.append(MatchedLanguage(
                language_id=req.language_id,
                required_proficiency=req.minimum_proficiency,
                seeker_proficiency=level,
            ))
        else:
            missing.append(MissingLanguage(
                language_id=req.language_id,
                required_proficiency=req.minimum_proficiency,
                seeker_proficiency=level,
            ))

    max_score = weights.languages
    if not required:
        score = max_score
    else:
        score = max_score * len(matched) / len(required)

    return LanguagesMatchDetail(
        score=points(score),
        max_score=max_score,
        matched=matched,
        missing=missing,
    )
