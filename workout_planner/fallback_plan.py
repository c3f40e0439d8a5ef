"""
Template-based plan construction for when the AI path is unavailable.

Uses the same injury, dislike and equipment filtering as the normalizer, so
an offline plan is held to the same safety rules as a generated one.
"""

import copy
import functools
import logging

from workout_planner.config import load_data_file
from workout_planner.context_enrichment import humanize
from workout_planner.exercise_catalog import EquipmentProfile, restricted_keywords
from workout_planner.keyword_matcher import KeywordMatcher
from workout_planner.models import GeneratedPlan

logger = logging.getLogger(__name__)

DISCLAIMER = "Consult a healthcare professional before starting any exercise program."

FALLBACK_WARMUP = {
    "description": "5-8 minutes of light cardio and dynamic mobility.",
    "exercises": ["Brisk walk or bike", "Leg swings", "Arm circles", "Hip openers"],
}

FALLBACK_COOLDOWN = {
    "description": "5 minutes of easy movement and stretching.",
    "exercises": ["Slow walk", "Hamstring stretch", "Chest stretch", "Child's pose"],
}

FALLBACK_PROGRESSION_NOTE = (
    "Add 1-2 reps per set each session up to the top of the range, then add 2.5kg; "
    "deload 10% if reps stall twice."
)

# days per week -> (weekly structure, day types)
SCHEDULES = {
    1: ("Full Body (1 day)", ("full_body",)),
    2: ("Full Body (2 days)", ("full_body", "full_body")),
    3: ("Full Body (3 days)", ("full_body", "full_body", "full_body")),
    4: ("Upper/Lower split (4 days)", ("upper", "lower", "upper", "lower")),
    5: ("Push/Pull/Legs + Upper/Lower (5 days)", ("push", "pull", "legs", "upper", "lower")),
    6: ("Push/Pull/Legs (6 days)", ("push", "pull", "legs", "push", "pull", "legs")),
    7: (
        "Push/Pull/Legs + Full Body (7 days)",
        ("push", "pull", "legs", "push", "pull", "legs", "full_body"),
    ),
}

DAY_NAMES = {
    "upper": "Upper Body",
    "lower": "Lower Body",
    "push": "Push Day",
    "pull": "Pull Day",
    "legs": "Leg Day",
    "full_body": "Full Body",
}

DAY_FOCUS = {
    "upper": "Chest, back, shoulders, arms",
    "lower": "Quads, glutes, hamstrings, calves",
    "push": "Chest, shoulders, triceps",
    "pull": "Back, biceps, rear delts",
    "legs": "Lower body emphasis",
    "full_body": "Full body",
}


@functools.lru_cache(maxsize=1)
def load_templates():
    return load_data_file("fallback_templates.yaml")


def rep_range(goal, is_main):
    if goal == "strength":
        return "4-6" if is_main else "6-8"
    if goal == "endurance":
        return "12-15"
    if goal == "fat_loss":
        return "10-15"
    if goal == "muscle_building":
        return "6-10" if is_main else "8-12"
    if goal == "sport_specific":
        return "6-12"
    return "8-12"


def rest_period(goal):
    if goal == "strength":
        return "2-3 minutes"
    if goal == "endurance":
        return "60-90 seconds"
    return "90 seconds"


def set_count(level, is_main):
    if level == "beginner":
        return 2
    if level == "advanced":
        return 4 if is_main else 3
    return 3


def build_schedule(days_per_week):
    return SCHEDULES[max(1, min(7, days_per_week))]


def _build_exercise(template, questionnaire, is_main):
    goal = questionnaire.goals.primary_goal
    return {
        "name": template["name"],
        "sets": set_count(questionnaire.experience.current_level, is_main),
        "reps": rep_range(goal, is_main),
        "rest": rest_period(goal),
        "intent": template["intent"],
        "rationale": f"A dependable {humanize(template['movement'])} pattern for your {humanize(goal)} goal.",
        "notes": template["notes"],
        "substitutions": list(template["substitutions"]),
        "progressionNote": FALLBACK_PROGRESSION_NOTE,
    }


def generate_fallback_plan(questionnaire, reason=None):
    """
    Build a complete plan from templates without calling the AI.

    Args:
        questionnaire: Validated Questionnaire
        reason: Why the fallback is being used (changes the overview text)

    Returns:
        GeneratedPlan
    """
    restricted = restricted_keywords(questionnaire)
    disliked = KeywordMatcher(questionnaire.preferences.disliked_exercises)
    equipment = EquipmentProfile.from_questionnaire(questionnaire)
    library = load_templates()["gym" if questionnaire.equipment.gym_access else "home"]

    def usable(template):
        name = template["name"]
        return not restricted.matches(name) and not disliked.matches(name) and equipment.is_available(name)

    max_exercises = questionnaire.constraints.max_exercises_per_session or 5
    count = max(3, min(5, max_exercises))
    structure, pattern = build_schedule(questionnaire.availability.days_per_week)
    duration = questionnaire.availability.session_duration

    days = []
    for index, day_type in enumerate(pattern):
        templates = [t for t in library[day_type] if usable(t)]
        if not templates:
            templates = [t for t in library["full_body"] if usable(t)]
        selected = templates[:count]

        name = DAY_NAMES[day_type]
        if day_type == "full_body":
            name += f" {chr(65 + index)}"

        days.append(
            {
                "dayNumber": index + 1,
                "name": name,
                "focus": DAY_FOCUS[day_type],
                "duration": f"{duration} min",
                "warmup": copy.deepcopy(FALLBACK_WARMUP),
                "exercises": [_build_exercise(t, questionnaire, i < 2) for i, t in enumerate(selected)],
                "cooldown": copy.deepcopy(FALLBACK_COOLDOWN),
            }
        )

    if reason:
        logger.warning("Using fallback plan: %s", reason)
        overview = (
            "Plan generated with a fast fallback template because the AI service was unavailable. "
            "You can still follow this plan safely while AI generation is restored."
        )
    else:
        overview = "A concise, balanced training plan tailored to your goals, schedule, and equipment."

    return GeneratedPlan.model_validate(
        {
            "planName": "Personalised Training Plan",
            "overview": overview,
            "weeklyStructure": structure,
            "days": days,
            "progressionGuidance": (
                "When all sets feel comfortable, add 1-2 reps per set or a small amount of weight next session."
            ),
            "nutritionNotes": (
                "Aim for consistent protein intake and balanced meals that support your goal. "
                "Sample day: breakfast of oats with yogurt and fruit, lunch of a rice bowl with a "
                "lean protein and vegetables, and a protein-rich dinner."
            ),
            "recoveryNotes": "Prioritise sleep, hydration, and at least one full rest day per week.",
            "disclaimer": DISCLAIMER,
        }
    )
