import unittest

from workout_planner.exercise_catalog import (
    EquipmentProfile,
    focus_category,
    high_severity_movements,
    is_compound,
    is_conditioning,
    is_power,
    is_time_based,
    movement_base,
    restricted_keywords,
    same_exercise,
    weak_point_movement_keywords,
)
from workout_planner.models import Questionnaire, default_questionnaire_data


def make_questionnaire(**sections):
    data = default_questionnaire_data()
    for name, values in sections.items():
        data[name].update(values)
    return Questionnaire.model_validate(data)


def home_profile():
    return EquipmentProfile.from_questionnaire(
        make_questionnaire(equipment={"gymAccess": False, "gymType": "home", "availableEquipment": ["dumbbells"]})
    )


class InjuryTests(unittest.TestCase):
    def test_restricted_keywords(self):
        q = make_questionnaire(
            injuries={
                "currentInjuries": [{"area": "Right shoulder", "severity": "high"}],
                "pastInjuries": [{"area": "knee", "severity": "low"}],
                "movementRestrictions": ["deadlift"],
                "painAreas": ["wrist"],
            }
        )
        restricted = restricted_keywords(q)
        self.assertTrue(restricted.matches("Overhead Press"))
        self.assertTrue(restricted.matches("Romanian Deadlift"))
        self.assertTrue(restricted.matches("Wrist Curl"))
        self.assertFalse(restricted.matches("Back Squat"))
        self.assertFalse(restricted.matches("Goblet Squat"))

    def test_high_severity_past_injury_counts(self):
        q = make_questionnaire(injuries={"pastInjuries": [{"area": "hip", "severity": "high"}]})
        self.assertTrue(restricted_keywords(q).matches("Hip Thrust"))

    def test_movements_are_deduplicated(self):
        q = make_questionnaire(
            injuries={
                "currentInjuries": [
                    {"area": "knee", "severity": "high"},
                    {"area": "ankle", "severity": "high"},
                ]
            }
        )
        movements = high_severity_movements(q.injuries.current_injuries)
        self.assertEqual(movements.count("squat"), 1)
        self.assertIn("calf raise", movements)


class ClassifierTests(unittest.TestCase):
    def test_power_and_conditioning(self):
        self.assertTrue(is_power("Box Jump"))
        self.assertTrue(is_power("Power Clean"))
        self.assertFalse(is_power("Bench Press"))
        self.assertTrue(is_conditioning("Rower Intervals"))
        self.assertTrue(is_conditioning("Easy Run"))
        self.assertFalse(is_conditioning("Cable Crunch"))

    def test_compound(self):
        self.assertTrue(is_compound("Barbell Row"))
        self.assertTrue(is_compound("Pull-Ups"))
        self.assertFalse(is_compound("Rower Intervals"))
        self.assertFalse(is_compound("Lateral Raise"))

    def test_time_based(self):
        self.assertTrue(is_time_based("30s"))
        self.assertTrue(is_time_based("2 min"))
        self.assertTrue(is_time_based("AMRAP"))
        self.assertFalse(is_time_based("8-12"))

    def test_movement_base(self):
        self.assertEqual(movement_base("Front Squat"), "squat")
        self.assertEqual(movement_base("Incline Bench Press"), "bench")
        self.assertEqual(movement_base("Pull-Up"), "pull up")
        self.assertIsNone(movement_base("Rower Intervals"))

    def test_weak_point_keywords(self):
        keywords = weak_point_movement_keywords(["Chest", "core"])
        self.assertIn("bench", keywords)
        self.assertIn("plank", keywords)
        self.assertEqual(weak_point_movement_keywords([]), [])

    def test_same_exercise(self):
        self.assertTrue(same_exercise("Pull-Ups", "pull up"))
        self.assertFalse(same_exercise("Pull-Up", "Chin-Up"))

    def test_focus_category(self):
        self.assertEqual(focus_category("Upper body strength"), "upper")
        self.assertEqual(focus_category("Legs and glutes"), "lower")
        self.assertEqual(focus_category("Push"), "push")
        self.assertEqual(focus_category("Back and biceps"), "pull")
        self.assertEqual(focus_category("Conditioning"), "full")


class EquipmentProfileTests(unittest.TestCase):
    def test_commercial_gym_has_everything(self):
        profile = EquipmentProfile.from_questionnaire(make_questionnaire())
        self.assertTrue(profile.full_gym)
        self.assertEqual(profile.adapt("Leg Press"), "Leg Press")

    def test_home_swaps(self):
        profile = home_profile()
        self.assertFalse(profile.full_gym)
        self.assertEqual(profile.adapt("Leg Press"), "Goblet Squat")
        self.assertEqual(profile.adapt("Barbell Curl"), "Dumbbell Curl")
        self.assertEqual(profile.adapt("Goblet Squat"), "Goblet Squat")

    def test_swap_respects_allowed(self):
        profile = home_profile()
        adapted = profile.adapt("Leg Press", allowed=lambda name: name != "Goblet Squat")
        self.assertEqual(adapted, "Dumbbell Step-Up")

    def test_no_safe_swap(self):
        self.assertIsNone(home_profile().adapt("Hanging Leg Raise"))

    def test_limited_equipment_is_removed(self):
        profile = EquipmentProfile.from_questionnaire(make_questionnaire(equipment={"limitedEquipment": ["cable machine"]}))
        self.assertFalse(profile.full_gym)
        self.assertEqual(profile.missing_requirement("Lat Pulldown"), "cable")
        self.assertEqual(profile.adapt("Lat Pulldown"), "Resistance Band Pulldown")
        self.assertTrue(profile.is_available("Back Squat"))

    def test_listed_equipment_is_detected(self):
        profile = EquipmentProfile.from_questionnaire(
            make_questionnaire(
                equipment={"gymAccess": False, "gymType": "home", "availableEquipment": ["Power rack", "Rowing machine"]}
            )
        )
        self.assertTrue(profile.is_available("Back Squat"))
        self.assertTrue(profile.is_available("Pull-Up"))
        self.assertTrue(profile.is_available("Rower Intervals"))
        self.assertFalse(profile.is_available("Cable Curl"))


if __name__ == "__main__":
    unittest.main()
