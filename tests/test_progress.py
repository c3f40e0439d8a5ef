import json
import queue
import threading
import time
import unittest

from workout_planner.errors import ProviderError
from workout_planner.fallback_plan import generate_fallback_plan
from workout_planner.models import Questionnaire, default_questionnaire_data
from workout_planner.plan_generator import GenerationResult
from workout_planner.progress import ProgressTicker, stream_generation, to_sse


def make_questionnaire():
    return Questionnaire.model_validate(default_questionnaire_data())


class FakeGenerator:
    def __init__(self, delay=0, error=None):
        self.delay = delay
        self.error = error
        self.calls = []

    def generate(self, questionnaire, existing_plan=None):
        self.calls.append((questionnaire, existing_plan))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return GenerationResult(
            plan=generate_fallback_plan(questionnaire),
            quality_report={
                "firstAttempt": {"valid": True, "issues": []},
                "retryAttempts": [],
                "finalStatus": "passed",
                "totalAttempts": 1,
            },
            warnings=["The first response was malformed and was repaired."],
            refinement_applied=True,
        )


def ticker_alive():
    return any(t.name == "progress-ticker" for t in threading.enumerate())


class StreamGenerationTests(unittest.TestCase):
    def test_event_sequence(self):
        events = list(stream_generation(make_questionnaire(), FakeGenerator(), interval=60))

        progress = [(e["progress"], e["stage"]) for e in events if e["type"] == "progress"]
        self.assertEqual(
            progress,
            [(5, "validate"), (15, "prepare"), (25, "generate"), (95, "finalize"), (100, "complete")],
        )
        result = events[-1]
        self.assertEqual(result["type"], "result")
        self.assertEqual(result["plan"]["planName"], "Personalised Training Plan")
        self.assertEqual(result["qualityReport"]["finalStatus"], "passed")
        self.assertTrue(result["refinementApplied"])
        self.assertEqual(len(result["warnings"]), 1)
        self.assertFalse(ticker_alive())

    def test_ticker_reports_while_generating(self):
        events = list(stream_generation(make_questionnaire(), FakeGenerator(delay=0.25), interval=0.05))

        ticks = [e for e in events if e["type"] == "progress" and e["message"].startswith("AI is generating")]
        self.assertTrue(ticks)
        values = [e["progress"] for e in ticks]
        self.assertEqual(values, sorted(values))
        self.assertTrue(all(25 < value <= 90 for value in values))
        self.assertEqual(events[-1]["type"], "result")
        self.assertFalse(ticker_alive())

    def test_provider_error_becomes_error_event(self):
        generator = FakeGenerator(error=ProviderError("Busy", code="RATE_LIMITED"))
        events = list(stream_generation(make_questionnaire(), generator, interval=60))

        last = events[-1]
        self.assertEqual(last["type"], "error")
        self.assertEqual(last["error"]["code"], "RATE_LIMITED")
        self.assertEqual(last["error"]["suggestedAction"], "wait")
        self.assertNotIn("result", [e["type"] for e in events])
        self.assertFalse(ticker_alive())

    def test_unexpected_error_is_logged_and_classified(self):
        generator = FakeGenerator(error=RuntimeError("boom"))
        with self.assertLogs("workout_planner.progress", "ERROR"):
            events = list(stream_generation(make_questionnaire(), generator, interval=60))

        self.assertEqual(events[-1]["error"]["code"], "UNKNOWN_ERROR")
        self.assertNotIn("boom", events[-1]["error"]["message"])
        self.assertFalse(ticker_alive())

    def test_invalid_request_stops_before_generation(self):
        generator = FakeGenerator()
        with self.assertLogs("workout_planner.progress", "ERROR"):
            events = list(stream_generation({"questionnaire": {}, "existingPlan": 5}, generator))

        self.assertEqual([e["type"] for e in events], ["progress", "error"])
        self.assertEqual(events[-1]["error"]["code"], "VALIDATION_ERROR")
        self.assertEqual(events[-1]["error"]["field"], "existingPlan")
        self.assertEqual(generator.calls, [])

    def test_raw_body_passes_existing_plan(self):
        generator = FakeGenerator()
        body = {"questionnaire": default_questionnaire_data(), "existingPlan": "Day 1: Squats"}
        events = list(stream_generation(body, generator, interval=60))

        self.assertEqual(events[-1]["type"], "result")
        self.assertEqual(generator.calls[0][1], "Day 1: Squats")

    def test_to_sse(self):
        event = {"type": "progress", "progress": 5, "stage": "validate", "message": "Validating inputs"}
        frame = to_sse(event)
        self.assertTrue(frame.startswith("event: progress\ndata: "))
        self.assertTrue(frame.endswith("\n\n"))
        self.assertEqual(json.loads(frame.split("data: ", 1)[1]), event)


class ProgressTickerTests(unittest.TestCase):
    def test_progress_is_capped(self):
        events = queue.Queue()
        ticker = ProgressTicker(events, interval=0.01, start=86, step=2, cap=90)
        with ticker:
            time.sleep(0.3)

        values = []
        while not events.empty():
            values.append(events.get()["progress"])
        self.assertTrue(values)
        self.assertEqual(max(values), 90)
        self.assertEqual(ticker.progress, 90)
        self.assertFalse(ticker_alive())


if __name__ == "__main__":
    unittest.main()
