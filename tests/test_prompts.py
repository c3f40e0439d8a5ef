import json
import unittest

from workout_planner.models import Questionnaire, default_questionnaire_data
from workout_planner.prompts import (
    BANNED_PHRASES,
    build_feedback_prompt,
    build_prompt,
    build_refinement_prompt,
    build_refinement_requirements,
    build_repair_prompt,
    build_system_prompt,
    build_training_prescription,
    format_injuries,
)


def make_questionnaire(**sections):
    data = default_questionnaire_data()
    for name, values in sections.items():
        data[name].update(values)
    return Questionnaire.model_validate(data)


class SystemPromptTests(unittest.TestCase):
    def test_day_count_and_banned_phrases(self):
        system = build_system_prompt(4)
        self.assertIn("exactly 4 training days (dayNumber 1 to 4)", system)
        for phrase in BANNED_PHRASES:
            self.assertIn(f'"{phrase}"', system)
        self.assertIn('"planName": "string', system)


class BuildPromptTests(unittest.TestCase):
    def test_sections_appear_in_order(self):
        _, user = build_prompt(make_questionnaire())
        headings = [
            "## Coaching Brief",
            "## Training Knowledge Base (CFOS excerpt)",
            "## Nutrition Integration",
            "## Training Prescription",
            "Program design blueprint:",
            "## User Profile",
        ]
        positions = [user.index(heading) for heading in headings]
        self.assertEqual(positions, sorted(positions))
        self.assertTrue(
            user.endswith("Please generate a personalised workout plan with exactly 3 training days based on this profile.")
        )

    def test_sport_section_only_for_sport_goal(self):
        _, user = build_prompt(make_questionnaire())
        self.assertNotIn("Sport-Specific Considerations", user)

        q = make_questionnaire(
            goals={
                "primaryGoal": "sport_specific",
                "sportDetails": {"sportName": "Basketball", "currentPhase": "off-season"},
            }
        )
        _, user = build_prompt(q)
        self.assertIn("Sport-Specific Considerations: Basketball", user)
        self.assertIn("**Exercise priorities:** box jumps", user)
        self.assertLess(user.index("Sport-Specific"), user.index("## Training Prescription"))

    def test_update_mode_prefix(self):
        _, user = build_prompt(make_questionnaire(), existing_plan="  Day 1: Squat 3x5  ")
        self.assertTrue(user.startswith("The user has an existing plan they want to update."))
        self.assertIn("---\nDay 1: Squat 3x5\n---", user)

    def test_blank_existing_plan_is_ignored(self):
        _, user = build_prompt(make_questionnaire(), existing_plan="   ")
        self.assertTrue(user.startswith("## Coaching Brief"))

    def test_knowledge_section_respects_budget(self):
        _, small = build_prompt(make_questionnaire(), knowledge_budget=300)
        _, large = build_prompt(make_questionnaire(), knowledge_budget=6000)
        self.assertLess(len(small), len(large))

    def test_exact_exercise_count_when_capped(self):
        q = make_questionnaire(constraints={"maxExercisesPerSession": 5})
        self.assertIn("- Exercises: exactly 5 exercises per day", build_training_prescription(q))


class InjuryFormattingTests(unittest.TestCase):
    def test_no_injuries(self):
        q = make_questionnaire()
        self.assertEqual(format_injuries(q.injuries), "No current injuries or restrictions reported.")

    def test_high_severity_lists_movements_to_avoid(self):
        q = make_questionnaire(
            injuries={
                "currentInjuries": [{"area": "knee", "severity": "high", "status": "acute", "notes": "post-op"}],
                "movementRestrictions": ["overhead work"],
            }
        )
        text = format_injuries(q.injuries)
        self.assertIn("- knee (high severity, acute) - post-op", text)
        self.assertIn("MOVEMENTS TO COMPLETELY AVOID (high-severity injuries):\nsquat, lunge, leg extension, jump, running", text)
        self.assertIn("Additional movement restrictions: overhead work", text)


class FollowUpPromptTests(unittest.TestCase):
    def setUp(self):
        self.questionnaire = make_questionnaire(
            preferences={"favouriteExercises": ["Deadlift"]},
            availability={"daysPerWeek": 4},
        )

    def test_feedback_prompt_lists_issues(self):
        issues = [
            {"code": "banned_phrase", "message": "notes uses a phrase.", "day": "Upper A", "exercise": "Bench Press"},
            {"code": "nutrition_missing_sample_day", "message": "missing sample day.", "day": "", "exercise": ""},
        ]
        prompt = build_feedback_prompt('{"planName": "x"}', issues, self.questionnaire)
        self.assertIn("- banned_phrase | Upper A | Bench Press | notes uses a phrase.", prompt)
        self.assertIn("- nutrition_missing_sample_day | Plan | - | missing sample day.", prompt)
        self.assertIn("- Exactly 4 training days.", prompt)
        self.assertTrue(prompt.rstrip().endswith('PLAN:\n{"planName": "x"}'))

    def test_refinement_requirements_use_camel_case(self):
        requirements = build_refinement_requirements(self.questionnaire)
        self.assertEqual(requirements["preferences"]["favouriteExercises"], ["Deadlift"])
        self.assertEqual(requirements["availability"]["daysPerWeek"], 4)
        self.assertEqual(requirements["recommendedSplit"], "Upper/Lower (4 days)")
        self.assertEqual(requirements["programDesign"]["split"], "Upper/Lower (4 days)")
        json.dumps(requirements)

    def test_refinement_prompt_embeds_requirements_and_plan(self):
        prompt = build_refinement_prompt('{"days": []}', self.questionnaire)
        self.assertIn('"recommendedSplit": "Upper/Lower (4 days)"', prompt)
        self.assertTrue(prompt.rstrip().endswith('DRAFT PLAN:\n{"days": []}'))

    def test_repair_prompt(self):
        prompt = build_repair_prompt('{"planName": ')
        self.assertTrue(prompt.startswith("Fix the JSON below"))
        self.assertTrue(prompt.endswith('{"planName": '))


if __name__ == "__main__":
    unittest.main()
