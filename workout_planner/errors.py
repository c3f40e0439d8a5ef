"""
Error taxonomy and step results for plan generation.

Every error carries a stable code, a display message and the action the
caller should suggest to the user.
"""

from dataclasses import dataclass
from typing import Any, Optional


RETRY = "retry"
WAIT = "wait"
START_OVER = "start_over"


class PlanGenerationError(Exception):
    """Base class for all categorised generation failures."""

    code = "UNKNOWN_ERROR"
    suggested_action = RETRY
    retryable = True
    default_message = "Something went wrong while generating your plan."

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        if code:
            self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_payload(self):
        return {
            "code": self.code,
            "message": self.message,
            "suggestedAction": self.suggested_action,
            "retryable": self.retryable,
        }


class ValidationError(PlanGenerationError):
    code = "VALIDATION_ERROR"
    suggested_action = START_OVER
    retryable = False
    default_message = "Your questionnaire answers could not be validated."

    def __init__(self, message=None, field=None, details=None):
        self.field = field
        super().__init__(message, details=details)

    def to_payload(self):
        payload = super().to_payload()
        if self.field:
            payload["field"] = self.field
        return payload


class ProviderError(PlanGenerationError):
    code = "AI_ERROR"
    suggested_action = WAIT
    default_message = "The AI service is temporarily unavailable. Please try again shortly."

    def __init__(self, message=None, code=None, details=None):
        super().__init__(message, code=code, details=details)
        if self.code == "TIMEOUT_ERROR":
            self.suggested_action = RETRY


class ParseError(PlanGenerationError):
    code = "PARSE_ERROR"
    default_message = "The AI returned a plan we could not read. Please try again."


class QualityError(PlanGenerationError):
    """Non-fatal: the plan breaks soft content rules."""

    code = "QUALITY_ERROR"
    default_message = "The plan was delivered with unresolved quality issues."

    def __init__(self, issues, message=None):
        self.issues = list(issues or [])
        super().__init__(message or f"{len(self.issues)} quality issue(s) remained after retry.")


class RefinementError(PlanGenerationError):
    """Non-fatal: the refinement pass failed and the prior plan was kept."""

    code = "REFINEMENT_ERROR"
    default_message = "Plan refinement failed; the unrefined plan was returned."


def classify_exception(exc):
    """Map any exception raised at an entrypoint to a display payload."""
    if isinstance(exc, PlanGenerationError):
        return exc.to_payload()
    return PlanGenerationError(
        "An unexpected error occurred while generating your plan."
    ).to_payload()


# ---------------------------------------------------------------------------
# Step results
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Success:
    value: Any


@dataclass(frozen=True)
class Recoverable:
    """The step failed but left a usable value behind."""

    fallback: Any
    error: Optional[PlanGenerationError] = None


@dataclass(frozen=True)
class Fatal:
    error: PlanGenerationError
