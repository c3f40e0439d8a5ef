import unittest

from workout_planner.errors import ValidationError
from workout_planner.input_handler import parse_questionnaire, sanitize_request
from workout_planner.models import default_questionnaire_data


class SanitizeRequestTests(unittest.TestCase):
    def setUp(self):
        self.data = default_questionnaire_data()

    def test_wrapped_body_with_existing_plan(self):
        questionnaire, existing = sanitize_request(
            {"questionnaire": self.data, "existingPlan": "Day 1: Squat 3x5"}
        )
        self.assertEqual(questionnaire.availability.days_per_week, 3)
        self.assertEqual(existing, "Day 1: Squat 3x5")

    def test_blank_existing_plan_is_dropped(self):
        _, existing = sanitize_request({"questionnaire": self.data, "existingPlan": "   "})
        self.assertIsNone(existing)

    def test_bare_questionnaire_body(self):
        questionnaire, existing = sanitize_request(self.data)
        self.assertEqual(questionnaire.goals.primary_goal, "general_fitness")
        self.assertIsNone(existing)

    def test_existing_plan_must_be_text(self):
        with self.assertRaises(ValidationError) as ctx:
            sanitize_request({"questionnaire": self.data, "existingPlan": 5})
        self.assertEqual(ctx.exception.field, "existingPlan")

    def test_body_must_be_an_object(self):
        with self.assertRaises(ValidationError):
            sanitize_request(["not", "an", "object"])


class ParseQuestionnaireTests(unittest.TestCase):
    def setUp(self):
        self.data = default_questionnaire_data()

    def test_delimited_string_becomes_deduplicated_list(self):
        self.data["preferences"]["favouriteExercises"] = "Bench Press, Pull-Ups; bench press"
        questionnaire = parse_questionnaire(self.data)
        self.assertEqual(questionnaire.preferences.favourite_exercises, ["Bench Press", "Pull-Ups"])

    def test_snake_case_keys_are_accepted(self):
        del self.data["preferences"]["dislikedExercises"]
        self.data["preferences"]["disliked_exercises"] = "burpees"
        questionnaire = parse_questionnaire(self.data)
        self.assertEqual(questionnaire.preferences.disliked_exercises, ["burpees"])

    def test_empty_strings_clear_nullable_enums(self):
        self.data["goals"]["secondaryGoal"] = ""
        self.data["equipment"]["gymType"] = " "
        self.data["preferences"]["preferredSplit"] = ""
        questionnaire = parse_questionnaire(self.data)
        self.assertIsNone(questionnaire.goals.secondary_goal)
        self.assertIsNone(questionnaire.equipment.gym_type)
        self.assertIsNone(questionnaire.preferences.preferred_split)

    def test_injury_rows_without_area_are_dropped(self):
        self.data["injuries"]["currentInjuries"] = [
            {"area": "  ", "severity": "high"},
            {"area": " Left knee ", "severity": "", "status": ""},
        ]
        questionnaire = parse_questionnaire(self.data)
        injuries = questionnaire.injuries.current_injuries
        self.assertEqual(len(injuries), 1)
        self.assertEqual(injuries[0].area, "Left knee")
        self.assertEqual(injuries[0].severity, "medium")
        self.assertEqual(injuries[0].status, "chronic")

    def test_blank_sport_phase_uses_default(self):
        self.data["goals"]["sportDetails"] = {"sportName": "Soccer", "currentPhase": ""}
        questionnaire = parse_questionnaire(self.data)
        self.assertEqual(questionnaire.goals.sport_details.current_phase, "not-applicable")

    def test_out_of_range_days_reports_field(self):
        self.data["availability"]["daysPerWeek"] = 9
        with self.assertRaises(ValidationError) as ctx:
            parse_questionnaire(self.data)
        self.assertEqual(ctx.exception.field, "availability.daysPerWeek")
        payload = ctx.exception.to_payload()
        self.assertEqual(payload["code"], "VALIDATION_ERROR")
        self.assertEqual(payload["suggestedAction"], "start_over")
        self.assertFalse(payload["retryable"])

    def test_numeric_strings_are_not_coerced(self):
        self.data["availability"]["daysPerWeek"] = "3"
        with self.assertRaises(ValidationError):
            parse_questionnaire(self.data)

    def test_decimal_strings_are_not_coerced(self):
        for section, key, value in (
            ("recovery", "sleepHours", "7.5"),
            ("experience", "currentBodyWeight", "80"),
        ):
            data = default_questionnaire_data()
            data[section][key] = value
            with self.assertRaises(ValidationError) as ctx:
                parse_questionnaire(data)
            self.assertEqual(ctx.exception.field, f"{section}.{key}")

        self.data["experience"]["currentLifts"] = {"squat": "100"}
        with self.assertRaises(ValidationError) as ctx:
            parse_questionnaire(self.data)
        self.assertEqual(ctx.exception.field, "experience.currentLifts.squat")

    def test_whole_numbers_are_accepted_for_decimal_fields(self):
        self.data["recovery"]["sleepHours"] = 8
        self.data["experience"]["currentBodyWeight"] = 80
        self.data["experience"]["currentLifts"] = {"squat": 100, "bench": 72.5}
        questionnaire = parse_questionnaire(self.data)
        self.assertEqual(questionnaire.recovery.sleep_hours, 8.0)
        self.assertEqual(questionnaire.experience.current_body_weight, 80.0)
        self.assertEqual(questionnaire.experience.current_lifts.bench, 72.5)

    def test_non_string_list_items_are_rejected(self):
        self.data["preferences"]["favouriteExercises"] = ["Squat", 5]
        with self.assertRaises(ValidationError) as ctx:
            parse_questionnaire(self.data)
        self.assertEqual(ctx.exception.field, "preferences.favouriteExercises")

    def test_section_must_be_an_object(self):
        self.data["recovery"] = "tired"
        with self.assertRaises(ValidationError) as ctx:
            parse_questionnaire(self.data)
        self.assertEqual(ctx.exception.field, "recovery")

    def test_unknown_enum_value_is_rejected(self):
        self.data["goals"]["primaryGoal"] = "get_huge"
        with self.assertRaises(ValidationError) as ctx:
            parse_questionnaire(self.data)
        self.assertEqual(ctx.exception.field, "goals.primaryGoal")


if __name__ == "__main__":
    unittest.main()
