#!/usr/bin/env python3
"""
Completeness Scoring - Weighted presence score for profiles, companies and jobs.

Each entity kind has an ordered, immutable table of (name, predicate, weight)
rules. The score is the sum of the weights whose predicate holds, clamped to
[0, 100]. Predicates only read attributes; a thin snapshot that is missing a
field simply fails that rule.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletenessRule:
    name: str
    predicate: Callable[[Any], bool]
    weight: int


def _filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def _has(*names: str) -> Callable[[Any], bool]:
    return lambda s: all(_filled(getattr(s, n, None)) for n in names)


def _any_of(*names: str) -> Callable[[Any], bool]:
    return lambda s: any(_filled(getattr(s, n, None)) for n in names)


def _min_length(name: str, length: int) -> Callable[[Any], bool]:
    return lambda s: _filled(getattr(s, name, None)) and len(getattr(s, name)) >= length


def _at_least(name: str, count: int) -> Callable[[Any], bool]:
    def check(s: Any) -> bool:
        value = getattr(s, name, None)
        if value is None:
            return False
        size = value if isinstance(value, int) else len(value)
        return size >= count
    return check


SEEKER_PROFILE_RULES: Tuple[CompletenessRule, ...] = (
    CompletenessRule("basic_info", _has("phone", "date_of_birth", "region_id", "municipality_id"), 20),
    CompletenessRule("headline_or_bio", _any_of("professional_headline", "bio"), 10),
    CompletenessRule("profile_image", _has("profile_image_url"), 10),
    CompletenessRule("cv", _has("cv_url"), 15),
    CompletenessRule("education", _at_least("education", 1), 10),
    CompletenessRule("work_experience", _at_least("work_experience_count", 1), 15),
    CompletenessRule("skills", _at_least("skills", 1), 10),
    CompletenessRule("languages", _at_least("languages", 1), 5),
    CompletenessRule("portfolio", _at_least("portfolio_item_count", 1), 5),
)

COMPANY_PROFILE_RULES: Tuple[CompletenessRule, ...] = (
    CompletenessRule("basic_info", _has("company_name", "legal_name", "tax_id", "phone"), 30),
    CompletenessRule("location", _has("region_id", "municipality_id", "address"), 15),
    CompletenessRule("classification", _has("industry_id", "company_size"), 10),
    CompletenessRule("description", _min_length("description", 100), 20),
    CompletenessRule("logo", _has("logo_url"), 10),
    CompletenessRule("online_presence", _any_of("website_url", "linkedin_url"), 10),
    CompletenessRule("mission_vision_benefits", _any_of("mission", "vision", "benefits"), 5),
)

JOB_POSTING_RULES: Tuple[CompletenessRule, ...] = (
    CompletenessRule("title", _has("title"), 10),
    CompletenessRule("description", _min_length("description", 100), 10),
    CompletenessRule("responsibilities", _min_length("responsibilities", 50), 10),
    CompletenessRule("industry", _has("industry_id"), 5),
    CompletenessRule("work_area", _has("work_area_id"), 5),
    CompletenessRule("position_level", _has("position_level_id"), 5),
    CompletenessRule("region", _has("region_id"), 5),
    CompletenessRule("municipality", _has("municipality_id"), 5),
    CompletenessRule("salary", _has("salary_min"), 10),
    CompletenessRule("required_skills", _at_least("required_skills", 3), 15),
    CompletenessRule("required_languages", _at_least("required_languages", 1), 5),
    CompletenessRule("benefits", _min_length("benefits", 50), 5),
    CompletenessRule("accommodations", _at_least("accommodations", 1), 10),
)


def _satisfied(rule: CompletenessRule, snapshot: Any) -> bool:
    try:
        return bool(rule.predicate(snapshot))
    except (AttributeError, TypeError) as e:
        logger.warning(f"Completeness rule {rule.name!r} could not be evaluated: {e}")
        return False


def breakdown(snapshot: Any, rules: Tuple[CompletenessRule, ...]) -> Dict[str, bool]:
    """Which rules the snapshot satisfies, in table order."""
    return {rule.name: _satisfied(rule, snapshot) for rule in rules}


def compute(snapshot: Any, rules: Tuple[CompletenessRule, ...]) -> int:
    """
    Calculate the completeness percentage of a snapshot.

    Args:
        snapshot: Any object exposing the attributes the rules read
        rules: One of the entity rule tables

    Returns:
        Percentage in [0, 100]
    """
    total = sum(rule.weight for rule in rules if _satisfied(rule, snapshot))
    return max(0, min(100, total))


def seeker_completeness(snapshot: Any) -> int:
    return compute(snapshot, SEEKER_PROFILE_RULES)


def company_completeness(snapshot: Any) -> int:
    return compute(snapshot, COMPANY_PROFILE_RULES)


def job_completeness(snapshot: Any) -> int:
    return compute(snapshot, JOB_POSTING_RULES)
