"""
Quality validation for generated workout plans.

Checks the model's own text for boilerplate and missing detail before the
plan is accepted or sent back with corrective feedback.
"""

from workout_planner.keyword_matcher import fold, matching_keywords, normalize_list
from workout_planner.models import GeneratedPlan, plan_to_dict
from workout_planner.prompts import BANNED_PHRASES


MIN_PROGRESSION_NOTE_CHARS = 20
TEXT_FIELDS = ("intent", "rationale", "notes")
NUTRITION_WORDS = ("breakfast", "lunch", "sample")


def _add_issue(issues, code, message, day=None, exercise=None):
    issues.append(
        {
            "code": code,
            "message": message,
            "day": day or "",
            "exercise": exercise or "",
        }
    )


def _as_dict(plan):
    if isinstance(plan, GeneratedPlan):
        return plan_to_dict(plan)
    return plan


def _distinct_favourites(name, favourites):
    """Favourites found in name, ignoring ones contained in a longer match."""
    found = {fold(f): f for f in matching_keywords(name, favourites)}
    return [
        original
        for key, original in found.items()
        if not any(key != other and key in other for other in found)
    ]


def validate_plan_quality(plan, questionnaire):
    """
    Validate generated plan text against the content rules.

    Args:
        plan: GeneratedPlan or its camelCase dict form
        questionnaire: Questionnaire the plan was generated for

    Returns:
        dict with keys: valid, issues, summary
    """
    data = _as_dict(plan)
    favourites = normalize_list(questionnaire.preferences.favourite_exercises)
    issues = []
    checked = 0

    for day in data.get("days", []):
        day_name = day.get("name", "")
        for exercise in day.get("exercises", []):
            checked += 1
            name = exercise.get("name", "")

            for field in TEXT_FIELDS:
                text = fold(exercise.get(field, ""))
                for phrase in BANNED_PHRASES:
                    if phrase in text:
                        _add_issue(
                            issues,
                            "banned_phrase",
                            f"{field} uses the generic phrase '{phrase}'.",
                            day=day_name,
                            exercise=name,
                        )

            intent = exercise.get("intent", "")
            if exercise.get("rationale", "") == intent:
                _add_issue(
                    issues,
                    "rationale_matches_intent",
                    "rationale repeats intent instead of explaining why it suits this user.",
                    day=day_name,
                    exercise=name,
                )

            note = (exercise.get("progressionNote") or "").strip()
            if not note:
                _add_issue(
                    issues,
                    "missing_progression_note",
                    "progressionNote is missing.",
                    day=day_name,
                    exercise=name,
                )
            elif len(note) < MIN_PROGRESSION_NOTE_CHARS:
                _add_issue(
                    issues,
                    "short_progression_note",
                    f"progressionNote is shorter than {MIN_PROGRESSION_NOTE_CHARS} characters.",
                    day=day_name,
                    exercise=name,
                )

            merged = _distinct_favourites(name, favourites)
            if len(merged) > 1:
                _add_issue(
                    issues,
                    "merged_favourites",
                    f"Favourite exercises merged into one entry: {', '.join(merged)}.",
                    day=day_name,
                    exercise=name,
                )

    nutrition = fold(data.get("nutritionNotes", ""))
    missing = [word for word in NUTRITION_WORDS if word not in nutrition]
    if missing:
        _add_issue(
            issues,
            "nutrition_missing_sample_day",
            f"nutritionNotes must include a sample day; missing: {', '.join(missing)}.",
        )

    summary = (
        f"Quality: {checked} exercises checked, {len(issues)} issue(s)."
        if checked
        else "Quality: no exercises found in plan."
    )

    return {
        "valid": not issues,
        "issues": issues,
        "summary": summary,
    }
