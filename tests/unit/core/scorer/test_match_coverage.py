#!/usr/bin/env python3
"""
Test suite for skills and languages coverage.
"""

import unittest
from decimal import Decimal

from core.aggregates import LanguageRequirement, SkillRequirement, UserLanguage, UserSkill
from core.config_loader import MatchWeights
from core.scorer.coverage import calculate_languages_score, calculate_skills_score
from tests.fixtures.matching_fixtures import DOCKER, ENGLISH, EXCEL, PYTHON, SPANISH, SQL


class TestSkillsScore(unittest.TestCase):
    """Test the skills category."""

    def setUp(self):
        self.weights = MatchWeights()
        self.required = (
            SkillRequirement(skill_id=PYTHON, minimum_proficiency=3),
            SkillRequirement(skill_id=SQL, minimum_proficiency=3),
            SkillRequirement(skill_id=DOCKER, minimum_proficiency=2),
        )

    def test_no_required_skills_scores_max(self):
        result = calculate_skills_score([], [], [], self.weights)
        self.assertEqual(result.score, 35.0)
        self.assertEqual(result.max_score, 35.0)
        self.assertEqual(result.missing_required, [])

    def test_two_of_three_required(self):
        """Seeker holds two of three required skills at the minimum; no preferred skills."""
        print("\n📊 UNIT Test: Skills 2/3 coverage")

        seeker_skills = [
            UserSkill(skill_id=PYTHON, proficiency=3),
            UserSkill(skill_id=SQL, proficiency=5),
        ]
        result = calculate_skills_score(seeker_skills, self.required, [], self.weights)

        self.assertEqual(result.score, Decimal("23.33"))
        self.assertEqual([m.skill_id for m in result.matched_required], [PYTHON, SQL])
        self.assertEqual(len(result.missing_required), 1)
        missing = result.missing_required[0]
        self.assertEqual(missing.skill_id, DOCKER)
        self.assertEqual(missing.required_proficiency, 2)
        self.assertIsNone(missing.seeker_proficiency)

        print(f"  ✓ Skills score: {result.score}")

    def test_below_minimum_is_missing(self):
        seeker_skills = [UserSkill(skill_id=PYTHON, proficiency=2)]
        required = (SkillRequirement(skill_id=PYTHON, minimum_proficiency=3),)

        result = calculate_skills_score(seeker_skills, required, [], self.weights)

        self.assertEqual(result.score, 0.0)
        self.assertEqual(result.missing_required[0].seeker_proficiency, 2)

    def test_preferred_bonus(self):
        """All required matched, half of preferred matched."""
        seeker_skills = [
            UserSkill(skill_id=PYTHON, proficiency=4),
            UserSkill(skill_id=SQL, proficiency=4),
            UserSkill(skill_id=DOCKER, proficiency=4),
            UserSkill(skill_id=EXCEL, proficiency=1),
        ]
        preferred = (
            SkillRequirement(skill_id=EXCEL, minimum_proficiency=1),
            SkillRequirement(skill_id="skill-go", minimum_proficiency=1),
        )

        result = calculate_skills_score(seeker_skills, self.required, preferred, self.weights)

        self.assertEqual(result.score, Decimal("32.50"))
        self.assertEqual(result.matched_preferred, [EXCEL])

    def test_preferred_respects_minimum_proficiency(self):
        seeker_skills = [UserSkill(skill_id=EXCEL, proficiency=1)]
        preferred = (SkillRequirement(skill_id=EXCEL, minimum_proficiency=4),)
        required = (SkillRequirement(skill_id=PYTHON),)

        result = calculate_skills_score(seeker_skills, required, preferred, self.weights)

        self.assertEqual(result.matched_preferred, [])
        self.assertEqual(result.score, 0.0)

    def test_raising_proficiency_never_lowers_score(self):
        previous = -1.0
        for proficiency in range(1, 6):
            seeker_skills = [UserSkill(skill_id=PYTHON, proficiency=proficiency)]
            score = calculate_skills_score(seeker_skills, self.required, [], self.weights).score
            self.assertGreaterEqual(score, previous)
            previous = score

    def test_adding_matching_skill_never_lowers_score(self):
        base = [UserSkill(skill_id=PYTHON, proficiency=5)]
        before = calculate_skills_score(base, self.required, [], self.weights).score
        after = calculate_skills_score(
            base + [UserSkill(skill_id=DOCKER, proficiency=5)], self.required, [], self.weights
        ).score
        self.assertGreater(after, before)


class TestLanguagesScore(unittest.TestCase):
    """Test the languages category."""

    def setUp(self):
        self.weights = MatchWeights()

    def test_no_requirements_scores_max(self):
        result = calculate_languages_score([], [], self.weights)
        self.assertEqual(result.score, 15.0)

    def test_tier_mapped_to_scale(self):
        seeker_languages = [
            UserLanguage(language_id=SPANISH, proficiency="native"),
            UserLanguage(language_id=ENGLISH, proficiency="intermediate"),
        ]
        required = (
            LanguageRequirement(language_id=SPANISH, minimum_proficiency=5),
            LanguageRequirement(language_id=ENGLISH, minimum_proficiency=3),
        )

        result = calculate_languages_score(seeker_languages, required, self.weights)

        self.assertEqual(result.score, Decimal("7.50"))
        self.assertEqual(result.matched[0].seeker_proficiency, 5)
        self.assertEqual(result.missing[0].language_id, ENGLISH)
        self.assertEqual(result.missing[0].seeker_proficiency, 2)

    def test_missing_language_scores_zero(self):
        required = (LanguageRequirement(language_id=ENGLISH, minimum_proficiency=1),)
        result = calculate_languages_score([], required, self.weights)
        self.assertEqual(result.score, 0.0)
        self.assertIsNone(result.missing[0].seeker_proficiency)

    def test_adding_matching_language_never_lowers_score(self):
        required = (
            LanguageRequirement(language_id=SPANISH, minimum_proficiency=3),
            LanguageRequirement(language_id=ENGLISH, minimum_proficiency=3),
        )
        base = [UserLanguage(language_id=SPANISH, proficiency="native")]

        before = calculate_languages_score(base, required, self.weights).score
        after = calculate_languages_score(
            base + [UserLanguage(language_id=ENGLISH, proficiency="advanced")], required, self.weights
        ).score

        self.assertGreater(after, before)
        self.assertEqual(after, Decimal("15.00"))

    def test_adding_unrequired_language_keeps_score(self):
        required = (LanguageRequirement(language_id=SPANISH, minimum_proficiency=3),)
        base = [UserLanguage(language_id=SPANISH, proficiency="basic")]

        before = calculate_languages_score(base, required, self.weights).score
        after = calculate_languages_score(
            base + [UserLanguage(language_id=ENGLISH, proficiency="native")], required, self.weights
        ).score

        self.assertEqual(after, before)

    def test_raising_language_tier_never_lowers_score(self):
        required = (
            LanguageRequirement(language_id=ENGLISH, minimum_proficiency=3),
            LanguageRequirement(language_id=SPANISH, minimum_proficiency=5),
        )
        previous = -1
        for tier in ("basic", "intermediate", "advanced", "fluent", "native"):
            seeker_languages = [UserLanguage(language_id=ENGLISH, proficiency=tier)]
            score = calculate_languages_score(seeker_languages, required, self.weights).score
            self.assertGreaterEqual(score, previous)
            previous = score
        self.assertEqual(previous, Decimal("7.50"))


if __name__ == "__main__":
    unittest.main()
