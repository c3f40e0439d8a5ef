import unittest

from workout_planner.models import Questionnaire, default_questionnaire_data
from workout_planner.nutrition_integration import (
    create_meal_timing_guidance,
    estimate_training_intensity,
    generate_nutrition_strategy,
    protein_target,
    recommend_supplements,
)


def make_questionnaire(**sections):
    data = default_questionnaire_data()
    for name, values in sections.items():
        data[name].update(values)
    return Questionnaire.model_validate(data)


class NutritionStrategyTests(unittest.TestCase):
    def test_protein_target_with_body_weight(self):
        self.assertEqual(protein_target("moderate", 80), "128-160g/day (1.6-2g/kg at 80kg)")

    def test_protein_target_without_body_weight(self):
        self.assertEqual(protein_target("high"), "2-2.4g/kg bodyweight")

    def test_lean_bulk_calories(self):
        strategy = generate_nutrition_strategy("muscle_building", "surplus", "moderate", 4)
        self.assertEqual(strategy.training_day_calories, "Maintenance + 300-400 calories")
        self.assertIn("4 training days and 3 rest days", strategy.notes)

    def test_fat_loss_boosts_low_protein(self):
        strategy = generate_nutrition_strategy("fat_loss", "deficit", "low", 4)
        self.assertEqual(strategy.protein_target, "2.0-2.4g/kg")
        self.assertIn("Larger deficit on 3 rest days", strategy.notes)

    def test_general_fitness_defaults_to_maintenance(self):
        strategy = generate_nutrition_strategy("general_fitness", "maintenance", "moderate", 3)
        self.assertEqual(strategy.training_day_calories, "Maintenance")
        self.assertEqual(strategy.rest_day_calories, "Maintenance")


class SupplementTests(unittest.TestCase):
    def test_existing_stack_is_acknowledged_and_not_repeated(self):
        q = make_questionnaire(goals={"primaryGoal": "strength"})
        text = recommend_supplements(q.goals, ["Creatine"], ["vegan"], "high")
        self.assertTrue(text.startswith("You're already using: Creatine."))
        self.assertNotIn("Creatine monohydrate", text)
        self.assertIn("Plant-based protein powder", text)
        self.assertIn("Algae-based omega-3", text)
        self.assertIn("Magnesium glycinate", text)

    def test_fat_loss_note(self):
        q = make_questionnaire(goals={"primaryGoal": "fat_loss"})
        text = recommend_supplements(q.goals, [], [], "low")
        self.assertIn("No fat-burning supplements are necessary", text)
        self.assertNotIn("Whey protein", text)


class MealTimingTests(unittest.TestCase):
    def test_evening_strength_session(self):
        text = create_meal_timing_guidance("evening", 90, "strength")
        self.assertIn("**Evening training:**", text)
        self.assertIn("within 30-60 minutes", text)
        self.assertIn("**Before bed:**", text)

    def test_morning_short_fat_loss_session(self):
        text = create_meal_timing_guidance("morning", 45, "fat_loss")
        self.assertIn("fasted or fed", text)
        self.assertNotIn("**Before bed:**", text)

    def test_training_intensity(self):
        self.assertEqual(estimate_training_intensity(make_questionnaire()), "moderate")
        light = make_questionnaire(availability={"daysPerWeek": 1, "sessionDuration": 45})
        self.assertEqual(estimate_training_intensity(light), "low")
        heavy = make_questionnaire(experience={"currentLevel": "advanced"})
        self.assertEqual(estimate_training_intensity(heavy), "high")


if __name__ == "__main__":
    unittest.main()
