"""
AI-powered workout plan generation.

Generation runs as an explicit state machine:

    DRAFT -> PARSE_CHECK -> QUALITY_CHECK -> REFINE -> NORMALIZE -> DONE
                 |  ^              |  ^
                 v  |              v  |
                REPAIR       RETRY_WITH_FEEDBACK

REPAIR and RETRY_WITH_FEEDBACK can each be entered at most once per run.
Provider failures and unrepairable output are fatal; quality issues and a
failed refinement are recorded and the best available plan is returned.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List

import pydantic

from workout_planner.config import default_config
from workout_planner.errors import (
    Fatal,
    ParseError,
    PlanGenerationError,
    QualityError,
    Recoverable,
    RefinementError,
    Success,
)
from workout_planner.models import GeneratedPlan, plan_to_dict
from workout_planner.plan_normalizer import normalize_plan
from workout_planner.plan_validator import validate_plan_quality
from workout_planner.prompts import (
    REFINE_SYSTEM,
    REPAIR_SYSTEM,
    build_feedback_prompt,
    build_prompt,
    build_refinement_prompt,
    build_repair_prompt,
    build_system_prompt,
)

logger = logging.getLogger(__name__)

DRAFT = "draft"
PARSE_CHECK = "parse_check"
REPAIR = "repair"
QUALITY_CHECK = "quality_check"
RETRY_WITH_FEEDBACK = "retry_with_feedback"
REFINE = "refine"
NORMALIZE = "normalize"
DONE = "done"

PASSED = "passed"
PASSED_WITH_ISSUES = "passed_with_issues"
FAILED_BUT_RETURNED = "failed_but_returned"


@dataclass
class GenerationResult:
    plan: GeneratedPlan
    quality_report: dict
    warnings: List[str] = field(default_factory=list)
    refinement_applied: bool = False


def _extract_json(text):
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ParseError(details={"reason": "no JSON object found"})
    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError as exc:
        raise ParseError(details={"reason": str(exc)}) from exc


def parse_plan_response(text):
    """
    Parse raw model output into a GeneratedPlan.

    Direct JSON parse first, then the substring between the first "{" and
    the last "}". The result must match the plan schema.

    Raises:
        ParseError: if no schema-valid plan can be read
    """
    data = _extract_json((text or "").strip())
    if not isinstance(data, dict):
        raise ParseError(details={"reason": "top-level JSON value is not an object"})
    try:
        return GeneratedPlan.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ParseError(details={"reason": f"{exc.error_count()} schema error(s)"}) from exc


class PlanGenerator:
    """Generates a normalized workout plan through an LLM client."""

    def __init__(self, client, config=None):
        """
        Args:
            client: Object with complete(system, user, temperature, max_tokens=None)
            config: Full configuration dictionary (defaults to built-in config)
        """
        self.client = client
        self.config = config or default_config()
        self.temperatures = self.config["claude"]["temperature"]
        generation = self.config["generation"]
        self.knowledge_budget = generation.get("knowledge_char_budget", 6000)
        self.quality_retry = generation.get("quality_retry", True)
        self.refine = generation.get("refine", True)

    def generate(self, questionnaire, existing_plan=None):
        """
        Generate a plan for a validated questionnaire.

        Returns:
            GenerationResult

        Raises:
            ProviderError: if an LLM call fails
            ParseError: if the output cannot be parsed even after repair
        """
        return _GenerationRun(self, questionnaire, existing_plan).run()


class _GenerationRun:
    """One pass through the state machine. Not reusable."""

    def __init__(self, generator, questionnaire, existing_plan):
        self.generator = generator
        self.client = generator.client
        self.questionnaire = questionnaire
        self.existing_plan = existing_plan

        self.system = None
        self.raw = None
        self.plan = None
        self.candidate = None
        self.result_plan = None
        self.taken = set()
        self.warnings = []
        self.refinement_applied = False

        self.first_attempt = None
        self.retry_attempts = []
        self.final_status = PASSED
        self.issues = []

        self.handlers = {
            DRAFT: self._draft,
            PARSE_CHECK: self._parse_check,
            REPAIR: self._repair,
            QUALITY_CHECK: self._quality_check,
            RETRY_WITH_FEEDBACK: self._retry_with_feedback,
            REFINE: self._refine,
            NORMALIZE: self._normalize,
        }

    def run(self):
        state = DRAFT
        while state != DONE:
            logger.debug("Generation state: %s", state)
            state = self.handlers[state]()

        return GenerationResult(
            plan=self.result_plan,
            quality_report=self._quality_report(),
            warnings=list(self.warnings),
            refinement_applied=self.refinement_applied,
        )

    def _once(self, edge):
        if edge in self.taken:
            raise RuntimeError(f"Transition {edge} already taken in this run")
        self.taken.add(edge)

    def _temperature(self, name):
        return self.generator.temperatures[name]

    def _complete(self, system, user, temperature):
        try:
            return Success(self.client.complete(system, user, temperature))
        except PlanGenerationError as exc:
            return Fatal(exc)

    def _plan_json(self, plan):
        if isinstance(plan, GeneratedPlan):
            plan = plan_to_dict(plan)
        return json.dumps(plan, indent=2)

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------
    def _draft(self):
        self.system, user = build_prompt(
            self.questionnaire,
            existing_plan=self.existing_plan,
            knowledge_budget=self.generator.knowledge_budget,
        )
        step = self._complete(self.system, user, self._temperature("draft"))
        if isinstance(step, Fatal):
            logger.error("Draft request failed: %s", step.error.message)
            raise step.error
        self.raw = step.value
        return PARSE_CHECK

    def _parse_check(self):
        try:
            self.plan = parse_plan_response(self.raw)
        except ParseError as exc:
            if REPAIR not in self.taken:
                logger.warning("Draft output unreadable (%s); attempting repair", exc.details.get("reason"))
                return REPAIR
            logger.error("Plan output unreadable after repair")
            raise
        return QUALITY_CHECK

    def _repair(self):
        self._once(REPAIR)
        step = self._complete(REPAIR_SYSTEM, build_repair_prompt(self.raw), self._temperature("repair"))
        if isinstance(step, Fatal):
            logger.error("Repair request failed: %s", step.error.message)
            raise step.error
        self.raw = step.value
        self.warnings.append("The first response was malformed and was repaired.")
        return PARSE_CHECK

    def _quality_check(self):
        report = validate_plan_quality(self.plan, self.questionnaire)
        attempt = {"valid": report["valid"], "issues": report["issues"]}
        if self.first_attempt is None:
            self.first_attempt = attempt
        else:
            self.retry_attempts.append(attempt)
        self.issues = report["issues"]
        logger.debug(report["summary"])

        if report["valid"]:
            self.final_status = PASSED if not self.retry_attempts else PASSED_WITH_ISSUES
            return REFINE

        if self.generator.quality_retry and RETRY_WITH_FEEDBACK not in self.taken:
            logger.warning("Quality check failed with %d issue(s); retrying with feedback", len(self.issues))
            return RETRY_WITH_FEEDBACK

        return self._accept_with_issues()

    def _accept_with_issues(self):
        error = QualityError(self.issues)
        logger.warning(error.message)
        self.final_status = FAILED_BUT_RETURNED
        self.warnings.append(error.message)
        return REFINE

    def _retry_step(self):
        prompt = build_feedback_prompt(self._plan_json(self.plan), self.issues, self.questionnaire)
        system = build_system_prompt(self.questionnaire.availability.days_per_week)
        step = self._complete(system, prompt, self._temperature("feedback"))
        if isinstance(step, Fatal):
            return Recoverable(self.plan, step.error)
        try:
            return Success(parse_plan_response(step.value))
        except ParseError as exc:
            return Recoverable(self.plan, exc)

    def _retry_with_feedback(self):
        self._once(RETRY_WITH_FEEDBACK)
        step = self._retry_step()
        if isinstance(step, Recoverable):
            logger.warning("Corrective retry failed (%s); keeping the first draft", step.error.code)
            self.retry_attempts.append(
                {"valid": False, "issues": self.issues, "error": step.error.code}
            )
            self.plan = step.fallback
            return self._accept_with_issues()

        self.plan = step.value
        return QUALITY_CHECK

    def _refine_step(self, normalized):
        prompt = build_refinement_prompt(self._plan_json(normalized), self.questionnaire)
        step = self._complete(REFINE_SYSTEM, prompt, self._temperature("refine"))
        if isinstance(step, Fatal):
            return Recoverable(normalized, RefinementError(details={"cause": step.error.code}))
        try:
            return Success(parse_plan_response(step.value))
        except ParseError:
            return Recoverable(normalized, RefinementError(details={"cause": ParseError.code}))

    def _refine(self):
        normalized = normalize_plan(self.plan, self.questionnaire)
        if not self.generator.refine:
            self.candidate = normalized
            return NORMALIZE

        step = self._refine_step(normalized)
        if isinstance(step, Recoverable):
            logger.warning("Refinement failed (%s); using the unrefined plan", step.error.details.get("cause"))
            self.warnings.append(step.error.message)
            self.candidate = step.fallback
        else:
            self.candidate = step.value
            self.refinement_applied = True
        return NORMALIZE

    def _normalize(self):
        self.result_plan = GeneratedPlan.model_validate(normalize_plan(self.candidate, self.questionnaire))
        return DONE

    def _quality_report(self):
        return {
            "firstAttempt": self.first_attempt,
            "retryAttempts": list(self.retry_attempts),
            "finalStatus": self.final_status,
            "totalAttempts": 1 + len(self.retry_attempts),
        }
