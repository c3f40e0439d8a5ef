import unittest

from workout_planner.context_enrichment import (
    analyze_constraints,
    calculate_max_sets_per_week,
    create_training_narrative,
    format_number,
    map_weak_points_to_exercises,
    synthesize_recovery_profile,
)
from workout_planner.models import Questionnaire, default_questionnaire_data


def make_questionnaire(**sections):
    data = default_questionnaire_data()
    for name, values in sections.items():
        data[name].update(values)
    return Questionnaire.model_validate(data)


class RecoveryProfileTests(unittest.TestCase):
    def test_default_answers_give_moderate_capacity(self):
        q = make_questionnaire()
        profile = synthesize_recovery_profile(q.recovery, q.availability)
        self.assertEqual(profile.capacity, "moderate")
        self.assertEqual(profile.volume_modifier, 1.0)
        self.assertEqual(
            profile.notes,
            "Moderate recovery capacity. Volume should be adjusted accordingly to prevent overtraining.",
        )

    def test_long_good_sleep_and_low_stress_is_high_capacity(self):
        q = make_questionnaire(
            recovery={
                "sleepHours": 8,
                "sleepQuality": "excellent",
                "stressLevel": "low",
                "recoveryCapacity": "high",
            }
        )
        profile = synthesize_recovery_profile(q.recovery, q.availability)
        self.assertEqual(profile.capacity, "high")
        self.assertEqual(profile.volume_modifier, 1.2)
        self.assertIn("good sleep duration (8h)", profile.notes)

    def test_poor_recovery_lists_every_factor(self):
        q = make_questionnaire(
            recovery={
                "sleepHours": 5,
                "sleepQuality": "poor",
                "stressLevel": "very_high",
                "recoveryCapacity": "low",
            },
            availability={"daysPerWeek": 5},
        )
        profile = synthesize_recovery_profile(q.recovery, q.availability)
        self.assertEqual(profile.capacity, "low")
        self.assertEqual(profile.volume_modifier, 0.75)
        self.assertIn("limited sleep (5h)", profile.notes)
        self.assertIn("poor sleep quality", profile.notes)
        self.assertIn("very high stress levels", profile.notes)
        self.assertIn("high training frequency (5 days/week)", profile.notes)

    def test_max_sets_scale_with_volume_modifier(self):
        q = make_questionnaire()
        profile = synthesize_recovery_profile(q.recovery, q.availability)
        self.assertEqual(calculate_max_sets_per_week(profile, "intermediate"), 14)


class ConstraintAnalysisTests(unittest.TestCase):
    def test_no_constraints_for_default_answers(self):
        self.assertEqual(analyze_constraints(make_questionnaire()).primary, "none")

    def test_high_severity_injury_wins(self):
        q = make_questionnaire(
            injuries={"currentInjuries": [{"area": "knee", "severity": "high"}]},
            availability={"sessionDuration": 30},
        )
        constraint = analyze_constraints(q)
        self.assertEqual(constraint.primary, "injury")
        self.assertIn("(knee)", constraint.impact)

    def test_short_sessions_are_a_time_constraint(self):
        q = make_questionnaire(availability={"sessionDuration": 30})
        self.assertEqual(analyze_constraints(q).primary, "time")

    def test_no_gym_access_is_an_equipment_constraint(self):
        q = make_questionnaire(equipment={"gymAccess": False, "gymType": "home"})
        constraint = analyze_constraints(q)
        self.assertEqual(constraint.primary, "equipment")
        self.assertTrue(constraint.impact.startswith("No gym access"))

    def test_medium_injury_is_checked_last(self):
        q = make_questionnaire(injuries={"currentInjuries": [{"area": "wrist", "severity": "medium"}]})
        constraint = analyze_constraints(q)
        self.assertEqual(constraint.primary, "injury")
        self.assertIn("Medium-severity injury to wrist", constraint.impact)


class WeakPointMappingTests(unittest.TestCase):
    def test_chest_with_dumbbells_only(self):
        mapping = map_weak_points_to_exercises(["Chest"], ["Dumbbells"])
        self.assertEqual(mapping["Chest"]["priority"], "high")
        self.assertEqual(mapping["Chest"]["exercises"], ["dumbbell press", "dumbbell flyes"])

    def test_no_equipment_uses_fallback_list(self):
        mapping = map_weak_points_to_exercises(["Upper back"], [])
        self.assertEqual(mapping["Upper back"]["exercises"], ["inverted rows", "bodyweight pull variations"])

    def test_exercises_are_capped_at_three(self):
        mapping = map_weak_points_to_exercises(["legs"], ["Barbell", "Dumbbells"])
        self.assertEqual(len(mapping["legs"]["exercises"]), 3)

    def test_core_and_unknown_areas(self):
        mapping = map_weak_points_to_exercises(["core", "calves"], [])
        self.assertEqual(mapping["core"]["exercises"][0], "planks")
        self.assertEqual(mapping["calves"]["exercises"], ["Compound movements targeting this area"])


class NarrativeTests(unittest.TestCase):
    def test_beginner_narrative_sentence_order(self):
        narrative = create_training_narrative(make_questionnaire())
        self.assertTrue(narrative.startswith("As a beginner to structured training"))
        self.assertIn("Your general fitness goal over 3 months", narrative)
        self.assertTrue(narrative.endswith("requires efficient, full-body or upper/lower approaches."))

    def test_secondary_goal_sentence(self):
        q = make_questionnaire(
            goals={"primaryGoal": "strength", "secondaryGoal": "fat_loss"},
            experience={"trainingYears": 3, "currentLevel": "intermediate"},
        )
        narrative = create_training_narrative(q)
        self.assertIn("With 3 years of training experience at the intermediate level", narrative)
        self.assertIn("primary goal of strength combined with fat loss", narrative)

    def test_format_number(self):
        self.assertEqual(format_number(7.0), "7")
        self.assertEqual(format_number(7.5), "7.5")
        self.assertEqual(format_number(None), "")


if __name__ == "__main__":
    unittest.main()
