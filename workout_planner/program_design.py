"""
Program design parameters: split, rep/rest prescription, weekly volume,
progression model and deload cadence.
"""

from dataclasses import dataclass

from workout_planner.context_enrichment import humanize


@dataclass(frozen=True)
class ProgramDesign:
    split: str
    days_per_week: int
    session_duration: int
    goal: str
    primary_focus: str
    main_rep_range: str
    accessory_rep_range: str
    rest_main: str
    rest_accessory: str
    weekly_set_target: str
    progression_model: str
    deload_guidance: str
    cardio_guidance: str
    recovery_modifier: str


PREFERRED_SPLIT_LABELS = {
    "full_body": "Full Body split",
    "upper_lower": "Upper/Lower split",
    "push_pull_legs": "Push/Pull/Legs split",
    "bro_split": "Bro split",
    "custom": "Custom split",
}

# goal -> (main reps, accessory reps, main rest, accessory rest)
REP_REST_TABLE = {
    "strength": ("3-6", "6-10", "2-3 min", "90-120 sec"),
    "muscle_building": ("6-10", "8-15", "90-120 sec", "60-90 sec"),
    "fat_loss": ("8-12", "10-15", "90 sec", "45-75 sec"),
    "endurance": ("12-20", "15-20", "60-90 sec", "45-60 sec"),
    "sport_specific": ("3-6", "6-10", "2-3 min", "90-120 sec"),
}
DEFAULT_REP_REST = ("6-12", "8-15", "90 sec", "60-90 sec")

WEEKLY_SETS = {
    "beginner": "8-12 hard sets per muscle group/week",
    "intermediate": "12-16 hard sets per muscle group/week",
    "advanced": "14-20 hard sets per muscle group/week",
}

PROGRESSION_MODELS = {
    "beginner": (
        "Linear progression: add 1-2 reps per set weekly, then increase load once the top "
        "of the range is achieved."
    ),
    "intermediate": "Wave progression: 3 weeks building volume/intensity, then a lighter week; repeat.",
    "advanced": "Block progression: 4-6 week blocks (accumulation -> intensification -> deload).",
}

# level -> (weeks between deloads, volume reduction, deload-week strategy)
DELOAD_BASE = {
    "beginner": (8, "20-30%", "reduce sets by half, keep weight the same"),
    "intermediate": (4, "30-40%", "reduce sets by 40% and weight by 10-20%"),
    "advanced": (4, "40-50%", "reduce both volume and intensity significantly"),
}

WARNING_SIGNS = (
    "Signs you need an early deload: persistent fatigue, strength regression, poor sleep, "
    "elevated resting heart rate, or decreased motivation."
)

CARDIO_GUIDANCE = {
    "none": "No dedicated cardio required beyond warm-ups.",
    "minimal": "1 short low-intensity session or warm-up cardio 2-3x/week.",
    "moderate": "1-2 cardio sessions/week (20-30 min), preferably low-impact.",
    "extensive": "3+ cardio sessions/week, mix of low-intensity and intervals.",
}

# (main, accessory) sets per exercise by level
SETS_BY_LEVEL = {
    "beginner": (3, 2),
    "intermediate": (4, 3),
    "advanced": (5, 3),
}


def preferred_split_label(split):
    return PREFERRED_SPLIT_LABELS.get(split) if split else None


def recommend_split(questionnaire):
    """
    Pick a weekly split from training days and recovery.

    An explicit preferred split always wins.
    """
    preferred = preferred_split_label(questionnaire.preferences.preferred_split)
    if preferred:
        return preferred

    days = questionnaire.availability.days_per_week
    high_recovery = questionnaire.recovery.recovery_capacity == "high"
    beginner = questionnaire.experience.current_level == "beginner"

    if days <= 2:
        return f"Full Body ({days} days)"
    if days == 3:
        return "Full Body (3 days)"
    if days == 4:
        return "Upper/Lower (4 days)"
    if days == 5:
        if high_recovery and not beginner:
            return "Push/Pull/Legs + Upper/Lower (5 days)"
        return "Upper/Lower + Conditioning (5 days)"
    if high_recovery:
        return f"Push/Pull/Legs ({days} days)"
    return f"Upper/Lower ({days} days)"


def rep_rest_for_goal(goal):
    return REP_REST_TABLE.get(goal, DEFAULT_REP_REST)


def sets_for_level(level):
    return SETS_BY_LEVEL.get(level, SETS_BY_LEVEL["intermediate"])


def deload_frequency(level, recovery, training_years):
    weeks = DELOAD_BASE.get(level, DELOAD_BASE["advanced"])[0]
    reducers = [
        recovery.stress_level in ("high", "very_high"),
        recovery.recovery_capacity == "low",
        recovery.sleep_quality == "poor" or recovery.sleep_hours < 6,
        training_years > 5,
    ]
    for applies in reducers:
        if applies:
            weeks = max(3, weeks - 1)
    return weeks


def deload_guidance(level, recovery, training_years):
    _, reduction, strategy = DELOAD_BASE.get(level, DELOAD_BASE["advanced"])
    weeks = deload_frequency(level, recovery, training_years)

    if level == "beginner":
        frequency = f"Deload every {weeks}-{weeks + 2} weeks if fatigue accumulates"
    else:
        frequency = f"Deload every {weeks} weeks (week {weeks} of each cycle)"

    details = (
        f"During deload: {strategy}. Reduce volume by ~{reduction}. Maintain movement patterns "
        "but prioritize recovery. Good time for mobility work, light cardio, and extra sleep."
    )
    return f"{frequency}. {details} {WARNING_SIGNS}"


def recovery_modifier(recovery):
    if recovery.stress_level in ("high", "very_high") or recovery.recovery_capacity == "low":
        return "Reduce volume by ~10-20% and prioritize sleep/recovery."
    if recovery.sleep_hours < 6 or recovery.sleep_quality == "poor":
        return "Keep intensity moderate and prioritize technique and recovery."
    return "Normal progression is appropriate given recovery capacity."


def build_program_design(questionnaire):
    goal = questionnaire.goals.primary_goal
    level = questionnaire.experience.current_level
    main, accessory, rest_main, rest_accessory = rep_rest_for_goal(goal)

    return ProgramDesign(
        split=recommend_split(questionnaire),
        days_per_week=questionnaire.availability.days_per_week,
        session_duration=questionnaire.availability.session_duration,
        goal=humanize(goal),
        primary_focus=humanize(goal),
        main_rep_range=main,
        accessory_rep_range=accessory,
        rest_main=rest_main,
        rest_accessory=rest_accessory,
        weekly_set_target=WEEKLY_SETS.get(level, WEEKLY_SETS["advanced"]),
        progression_model=PROGRESSION_MODELS.get(level, PROGRESSION_MODELS["advanced"]),
        deload_guidance=deload_guidance(
            level, questionnaire.recovery, questionnaire.experience.training_years
        ),
        cardio_guidance=CARDIO_GUIDANCE.get(
            questionnaire.preferences.cardio_preference, "Light cardio as desired."
        ),
        recovery_modifier=recovery_modifier(questionnaire.recovery),
    )


def program_design_to_prompt(design):
    return f"""Program design blueprint:
- Split: {design.split}
- Days/Week: {design.days_per_week}
- Session Duration: {design.session_duration} minutes
- Goal Focus: {design.primary_focus}
- Main lift reps: {design.main_rep_range} | Accessory reps: {design.accessory_rep_range}
- Rest: main {design.rest_main} | accessory {design.rest_accessory}
- Weekly volume target: {design.weekly_set_target}
- Progression model: {design.progression_model}
- Deload guidance: {design.deload_guidance}
- Cardio guidance: {design.cardio_guidance}
- Recovery modifier: {design.recovery_modifier}"""


def program_design_to_dict(design):
    """camelCase view used in the refinement requirements object."""
    return {
        "split": design.split,
        "daysPerWeek": design.days_per_week,
        "sessionDuration": design.session_duration,
        "goal": design.goal,
        "mainRepRange": design.main_rep_range,
        "accessoryRepRange": design.accessory_rep_range,
        "restMain": design.rest_main,
        "restAccessory": design.rest_accessory,
        "weeklySetTarget": design.weekly_set_target,
        "progressionModel": design.progression_model,
        "deloadGuidance": design.deload_guidance,
        "cardioGuidance": design.cardio_guidance,
        "recoveryModifier": design.recovery_modifier,
    }
