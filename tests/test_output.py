import json
import os
import tempfile
import unittest

from workout_planner.fallback_plan import generate_fallback_plan
from workout_planner.models import Questionnaire, default_questionnaire_data, plan_to_dict
from workout_planner.output import plan_to_markdown, save_plan


def make_plan():
    return generate_fallback_plan(Questionnaire.model_validate(default_questionnaire_data()))


class MarkdownTests(unittest.TestCase):
    def test_headings(self):
        text = plan_to_markdown(make_plan())
        self.assertTrue(text.startswith("# Personalised Training Plan\n"))
        self.assertIn("## Day 1: Full Body A", text)
        self.assertIn("### 1. Goblet Squat", text)
        self.assertIn("- 2 x 8-12, rest 90 seconds", text)
        self.assertIn("## Nutrition", text)
        self.assertIn("**Swaps:** Leg Press, Box Squat", text)

    def test_accepts_dict(self):
        plan = make_plan()
        self.assertEqual(plan_to_markdown(plan_to_dict(plan)), plan_to_markdown(plan))


class SavePlanTests(unittest.TestCase):
    def test_save_json(self):
        plan = make_plan()
        with tempfile.TemporaryDirectory() as tmp:
            path = save_plan(plan, output_folder=tmp)
            self.assertTrue(path.endswith(".json"))
            with open(path) as f:
                self.assertEqual(json.load(f), plan_to_dict(plan))

    def test_save_markdown_creates_folder(self):
        with tempfile.TemporaryDirectory() as tmp:
            folder = os.path.join(tmp, "plans", "2024")
            path = save_plan(make_plan(), output_folder=folder, format="markdown")
            self.assertTrue(path.endswith(".md"))
            self.assertEqual(os.path.dirname(path), folder)
            with open(path) as f:
                self.assertIn("## Day 3: Full Body C", f.read())


if __name__ == "__main__":
    unittest.main()
