"""
Sanitizes a raw generation request into a typed Questionnaire.

The client posts loosely shaped JSON: lists may arrive as delimited strings,
nullable enums as empty strings, and injury rows half filled in. Those shapes
are reshaped here; anything else that does not fit is rejected with a
ValidationError instead of being coerced.
"""

import copy
import logging

import pydantic
from pydantic.alias_generators import to_snake

from workout_planner.errors import ValidationError
from workout_planner.keyword_matcher import normalize_list
from workout_planner.models import Questionnaire

logger = logging.getLogger(__name__)

# section -> camelCase string-list fields
LIST_FIELDS = {
    "goals": ("specificTargets",),
    "experience": ("strongPoints", "weakPoints"),
    "availability": ("preferredDays",),
    "equipment": ("availableEquipment", "limitedEquipment"),
    "injuries": ("movementRestrictions", "painAreas"),
    "nutrition": ("dietaryRestrictions", "supplementUse", "foodPreferences"),
    "preferences": ("favouriteExercises", "dislikedExercises"),
}

# section -> fields where "" means "not answered"
NULLABLE_FIELDS = {
    "goals": ("secondaryGoal",),
    "experience": ("currentBodyWeight",),
    "equipment": ("gymType",),
    "preferences": ("preferredSplit",),
}

INJURY_FIELDS = ("currentInjuries", "pastInjuries")
INJURY_DEFAULTS = {"severity": "medium", "status": "chronic"}


def _find_key(section, camel):
    """Return whichever spelling (camelCase or snake_case) the client used."""
    snake = to_snake(camel)
    if camel in section:
        return camel
    if snake in section:
        return snake
    return None


def _require_dict(value, field):
    if not isinstance(value, dict):
        raise ValidationError(f"'{field}' must be an object.", field=field)
    return value


def _sanitize_string_list(value, field):
    if value is None:
        return []
    if isinstance(value, str):
        return normalize_list([value])
    if not isinstance(value, list):
        raise ValidationError(f"'{field}' must be a list of strings.", field=field)
    for item in value:
        if not isinstance(item, str):
            raise ValidationError(f"'{field}' may only contain strings.", field=field)
    return normalize_list(value)


def _sanitize_injuries(value, field):
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"'{field}' must be a list.", field=field)

    rows = []
    for index, row in enumerate(value):
        _require_dict(row, f"{field}[{index}]")
        area = row.get("area")
        if area is not None and not isinstance(area, str):
            raise ValidationError(f"'{field}[{index}].area' must be text.", field=f"{field}[{index}].area")
        if not (area or "").strip():
            continue
        cleaned = dict(row)
        cleaned["area"] = area.strip()
        for key, default in INJURY_DEFAULTS.items():
            if not cleaned.get(key):
                cleaned[key] = default
        rows.append(cleaned)
    return rows


def _sanitize_questionnaire(raw):
    data = copy.deepcopy(_require_dict(raw, "questionnaire"))

    for section_name in list(data):
        if section_name in ("goals", "experience", "availability", "equipment", "injuries",
                            "recovery", "nutrition", "preferences", "constraints"):
            _require_dict(data[section_name], section_name)

    for section_name, fields in LIST_FIELDS.items():
        section = data.get(section_name)
        if section is None:
            continue
        for camel in fields:
            key = _find_key(section, camel)
            if key is not None:
                section[key] = _sanitize_string_list(section[key], f"{section_name}.{camel}")

    for section_name, fields in NULLABLE_FIELDS.items():
        section = data.get(section_name)
        if section is None:
            continue
        for camel in fields:
            key = _find_key(section, camel)
            if key is not None and isinstance(section[key], str) and not section[key].strip():
                section[key] = None

    injuries = data.get("injuries")
    if injuries is not None:
        for camel in INJURY_FIELDS:
            key = _find_key(injuries, camel)
            if key is not None:
                injuries[key] = _sanitize_injuries(injuries[key], f"injuries.{camel}")

    goals = data.get("goals")
    if goals is not None:
        key = _find_key(goals, "sportDetails")
        if key is not None and goals[key] is not None:
            details = _require_dict(goals[key], "goals.sportDetails")
            phase_key = _find_key(details, "currentPhase")
            if phase_key is not None and details[phase_key] in ("", None):
                details.pop(phase_key)

    return data


def _first_error_field(exc):
    errors = exc.errors()
    if not errors:
        return None, str(exc)
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return field, first.get("msg", "Invalid value")


def parse_questionnaire(raw):
    """Sanitize and validate a questionnaire object."""
    data = _sanitize_questionnaire(raw)
    try:
        return Questionnaire.model_validate(data)
    except pydantic.ValidationError as exc:
        field, message = _first_error_field(exc)
        logger.debug("Questionnaire rejected: %s", exc)
        raise ValidationError(f"Invalid value for '{field}': {message}", field=field) from exc


def sanitize_request(body):
    """
    Turn a raw request body into (Questionnaire, existing_plan).

    Args:
        body: {"questionnaire": {...}, "existingPlan": "..."} or a bare
            questionnaire object

    Returns:
        Tuple of (Questionnaire, existing plan text or None)

    Raises:
        ValidationError: if any field is structurally invalid
    """
    body = _require_dict(body, "body")

    if "questionnaire" in body:
        raw = body["questionnaire"]
        existing_plan = body.get("existingPlan", body.get("existing_plan"))
    else:
        raw = body
        existing_plan = None

    if existing_plan is not None and not isinstance(existing_plan, str):
        raise ValidationError("'existingPlan' must be text.", field="existingPlan")
    if existing_plan is not None and not existing_plan.strip():
        existing_plan = None

    return parse_questionnaire(raw), existing_plan
