"""
Streaming progress for plan generation.

Generation runs on a worker thread while a ticker posts periodic status
events to the same queue. The stream always ends with exactly one result or
error event, and the ticker is stopped on every exit path.
"""

import json
import logging
import queue
import threading
import time

from workout_planner.errors import PlanGenerationError, ValidationError, classify_exception
from workout_planner.input_handler import sanitize_request
from workout_planner.models import Questionnaire, plan_to_dict

logger = logging.getLogger(__name__)

STAGES = ("validate", "prepare", "generate", "finalize", "complete")

TICK_START = 25
TICK_STEP = 2
TICK_CAP = 90

_RESULT = "result"
_ERROR = "error"


def progress_event(progress, stage, message):
    return {"type": "progress", "progress": progress, "stage": stage, "message": message}


class ProgressTicker:
    """
    Posts "generate" progress events on a fixed interval until stopped.

    Usage:
        with ProgressTicker(events, interval=4.0):
            ...  # long-running work
    """

    def __init__(self, events, interval=4.0, start=TICK_START, step=TICK_STEP, cap=TICK_CAP):
        self.events = events
        self.interval = interval
        self.progress = start
        self.step = step
        self.cap = cap
        self._stop = threading.Event()
        self._thread = None
        self._started_at = None

    def start(self):
        self._started_at = time.monotonic()
        self._thread = threading.Thread(target=self._run, name="progress-ticker", daemon=True)
        self._thread.start()

    def cancel(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cancel()
        return False

    def _run(self):
        while not self._stop.wait(self.interval):
            self.progress = min(self.cap, self.progress + self.step)
            elapsed = int(time.monotonic() - self._started_at)
            self.events.put(
                progress_event(self.progress, "generate", f"AI is generating your plan ({elapsed}s)")
            )


def _worker(generator, questionnaire, existing_plan, events):
    try:
        events.put((_RESULT, generator.generate(questionnaire, existing_plan)))
    except Exception as exc:
        events.put((_ERROR, exc))


def error_event(exc):
    return {"type": "error", "error": classify_exception(exc)}


def result_event(result):
    return {
        "type": "result",
        "plan": plan_to_dict(result.plan),
        "qualityReport": result.quality_report,
        "warnings": list(result.warnings),
        "refinementApplied": result.refinement_applied,
    }


def stream_generation(request, generator, existing_plan=None, interval=4.0):
    """
    Yield progress events for one generation, then one result or error event.

    Args:
        request: Validated Questionnaire, or a raw request body to sanitize
        generator: PlanGenerator (anything with generate(questionnaire, existing_plan))
        existing_plan: Existing plan text when request is a Questionnaire
        interval: Seconds between ticker events
    """
    yield progress_event(5, "validate", "Validating inputs")
    try:
        if isinstance(request, Questionnaire):
            questionnaire = request
        else:
            questionnaire, existing_plan = sanitize_request(request)
    except ValidationError as exc:
        logger.error("Request rejected: %s", exc)
        yield error_event(exc)
        return

    yield progress_event(15, "prepare", "Preparing AI request")
    yield progress_event(25, "generate", "Contacting AI model")

    events = queue.Queue()
    worker = threading.Thread(
        target=_worker,
        args=(generator, questionnaire, existing_plan, events),
        name="plan-generation",
        daemon=True,
    )

    with ProgressTicker(events, interval=interval):
        worker.start()
        while True:
            item = events.get()
            if isinstance(item, tuple):
                kind, payload = item
                break
            yield item

    if kind == _ERROR:
        if not isinstance(payload, PlanGenerationError):
            logger.error("Unexpected generation failure", exc_info=payload)
        yield error_event(payload)
        return

    yield progress_event(95, "finalize", "Finalizing plan")
    yield progress_event(100, "complete", "Plan ready")
    yield result_event(payload)


def to_sse(event):
    """Render an event as a server-sent-event frame."""
    return f"event: {event['type']}\ndata: {json.dumps(event)}\n\n"
