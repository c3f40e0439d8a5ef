import os
import tempfile
import unittest

from workout_planner.config import default_config, load_config, load_data_file
from workout_planner.errors import (
    ParseError,
    ProviderError,
    QualityError,
    RefinementError,
    ValidationError,
    classify_exception,
)


class ConfigTests(unittest.TestCase):
    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/config.yaml")

    def test_file_values_override_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.yaml")
            with open(path, "w") as f:
                f.write("claude:\n  model: claude-test\n  temperature:\n    draft: 0.5\noutput:\n  format: markdown\n")
            config = load_config(path)

        self.assertEqual(config["claude"]["model"], "claude-test")
        self.assertEqual(config["claude"]["temperature"]["draft"], 0.5)
        self.assertEqual(config["claude"]["temperature"]["refine"], 0.2)
        self.assertEqual(config["claude"]["max_tokens"], 8000)
        self.assertEqual(config["output"], {"folder": "output", "format": "markdown"})

    def test_empty_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.yaml")
            open(path, "w").close()
            self.assertEqual(load_config(path), default_config())

    def test_bundled_config_loads(self):
        path = os.path.join(os.path.dirname(os.path.dirname(__file__)), "config.yaml")
        config = load_config(path)
        self.assertEqual(config["claude"]["api_key_env"], "ANTHROPIC_API_KEY")
        self.assertTrue(config["generation"]["quality_retry"])

    def test_default_config_is_a_copy(self):
        config = default_config()
        config["claude"]["temperature"]["draft"] = 1.0
        self.assertEqual(default_config()["claude"]["temperature"]["draft"], 0.3)

    def test_data_file_is_a_copy(self):
        templates = load_data_file("fallback_templates.yaml")
        templates["gym"]["full_body"].clear()
        self.assertTrue(load_data_file("fallback_templates.yaml")["gym"]["full_body"])


class ErrorTests(unittest.TestCase):
    def test_validation_error_payload(self):
        payload = ValidationError("Bad days.", field="availability.daysPerWeek").to_payload()
        self.assertEqual(
            payload,
            {
                "code": "VALIDATION_ERROR",
                "message": "Bad days.",
                "suggestedAction": "start_over",
                "retryable": False,
                "field": "availability.daysPerWeek",
            },
        )

    def test_provider_error_actions(self):
        self.assertEqual(ProviderError().suggested_action, "wait")
        self.assertEqual(ProviderError(code="TIMEOUT_ERROR").suggested_action, "retry")
        self.assertEqual(ProviderError(code="RATE_LIMITED").code, "RATE_LIMITED")

    def test_default_messages(self):
        self.assertEqual(ParseError().code, "PARSE_ERROR")
        self.assertEqual(RefinementError().message, "Plan refinement failed; the unrefined plan was returned.")
        error = QualityError([{"code": "banned_phrase"}, {"code": "short_progression_note"}])
        self.assertEqual(error.message, "2 quality issue(s) remained after retry.")
        self.assertEqual(len(error.issues), 2)

    def test_classify_exception(self):
        self.assertEqual(classify_exception(ParseError())["code"], "PARSE_ERROR")
        payload = classify_exception(KeyError("secret"))
        self.assertEqual(payload["code"], "UNKNOWN_ERROR")
        self.assertNotIn("secret", payload["message"])
        self.assertTrue(payload["retryable"])


if __name__ == "__main__":
    unittest.main()
