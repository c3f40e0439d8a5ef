"""
Sport detection and sport-specific programming guidance.
"""

import functools
from types import MappingProxyType
from typing import NamedTuple, Tuple

from workout_planner.config import load_data_file
from workout_planner.keyword_matcher import contains_keyword, fold


GENERAL_ATHLETIC = "general_athletic"

SPORT_KEYWORDS = (
    "basketball",
    "football",
    "soccer",
    "running",
    "powerlifting",
    "weightlifting",
    "crossfit",
    "mma",
    "martial arts",
    "boxing",
    "muay thai",
    "jiu jitsu",
    "cycling",
    "swimming",
    "tennis",
    "volleyball",
    "hockey",
    "baseball",
    "track",
    "sprinting",
    "wrestling",
)

MMA_SYNONYMS = ("mma", "martial", "boxing", "muay", "jiu")
RUNNING_SYNONYMS = ("track", "sprint")

# Free-text signals that mark a plan as athletic even without the sport goal.
SPORT_SIGNALS = SPORT_KEYWORDS + ("athlete", "athletic", "sport", "competition", "in-season", "off-season")

PHASE_NOTES = MappingProxyType({
    "off-season": "Off-season: build the strength and power base; this is the window for the most training volume.",
    "pre-season": "Pre-season: convert strength to power and sport-specific conditioning while trimming volume.",
    "in-season": "In-season: maintain strength with 1-2 short sessions per week and keep fatigue low around competition.",
    "post-season": "Post-season: restore joints and tissue quality, address imbalances, keep intensity moderate.",
})

GENERIC_PRIORITIES = ("squat", "deadlift", "press", "pull", "jump", "sprint")


class SportDemands(NamedTuple):
    primary_movements: Tuple[str, ...]
    key_muscles: Tuple[str, ...]
    recommended_exercises: Tuple[str, ...]
    energy_systems: Tuple[str, ...]
    injury_risks: Tuple[str, ...]
    periodization_notes: str


@functools.lru_cache(maxsize=1)
def sport_demands():
    """Read-only table of sport name -> SportDemands."""
    table = {}
    for sport, record in load_data_file("sport_demands.yaml").items():
        table[sport] = SportDemands(
            primary_movements=tuple(record["primary_movements"]),
            key_muscles=tuple(record["key_muscles"]),
            recommended_exercises=tuple(record["recommended_exercises"]),
            energy_systems=tuple(record["energy_systems"]),
            injury_risks=tuple(record["injury_risks"]),
            periodization_notes=" ".join(record["periodization_notes"].split()),
        )
    return MappingProxyType(table)


def sport_signal_text(questionnaire):
    goals = questionnaire.goals
    experience = questionnaire.experience
    parts = []
    if goals.sport_details and goals.sport_details.sport_name:
        parts.append(goals.sport_details.sport_name)
    parts.extend(goals.specific_targets)
    parts.append(experience.recent_training)
    parts.extend(experience.strong_points)
    parts.extend(experience.weak_points)
    parts.append(questionnaire.constraints.other_notes)
    return " ".join(p for p in parts if p).lower()


def has_sport_goal(questionnaire):
    goals = questionnaire.goals
    return "sport_specific" in (goals.primary_goal, goals.secondary_goal)


def detect_sport(questionnaire):
    """
    Return the canonical sport key, "general_athletic", or None.

    Only active when the primary or secondary goal is sport_specific.
    """
    if not has_sport_goal(questionnaire):
        return None

    signal = sport_signal_text(questionnaire)
    table = sport_demands()
    for keyword in SPORT_KEYWORDS:
        if keyword not in signal:
            continue
        if any(token in keyword for token in MMA_SYNONYMS):
            return "mma"
        if any(token in keyword for token in RUNNING_SYNONYMS):
            return "running"
        if keyword in table:
            return keyword

    return GENERAL_ATHLETIC


def is_sport_focused(questionnaire):
    """Sport goal or any sport signal in the free-text answers."""
    return has_sport_goal(questionnaire) or contains_keyword(
        sport_signal_text(questionnaire), SPORT_SIGNALS
    )


def sport_label(sport):
    if not sport or sport == GENERAL_ATHLETIC:
        return "Athletic Performance"
    return fold(sport).title()


def _bullets(items, suffix=""):
    return "\n".join(f"- {item}{suffix}" for item in items)


def get_sport_guidance(sport, phase=None):
    """Render sport demands as a prompt section."""
    demands = sport_demands().get(sport)
    phase_block = ""
    if phase in PHASE_NOTES:
        phase_block = f"\n**Current Season Phase:** {PHASE_NOTES[phase]}\n"

    if demands is None:
        return f"""
### Sport-Specific Considerations: Athletic Performance

**General Athletic Development:**
Since a specific sport wasn't identified, focus on:
- Building a well-rounded strength base (squat, hinge, push, pull)
- Developing power through olympic lift variations or plyometrics
- Maintaining mobility and movement quality
- Including conditioning appropriate to sport demands
- Periodizing: Strength phase -> Power phase -> Sport-specific preparation
{phase_block}
**Key Principles:**
- Strength work should complement sport training, not replace it
- Manage volume carefully to avoid overtraining
- Prioritize recovery and injury prevention
- Include movement patterns and energy systems relevant to the sport
"""

    return f"""
### Sport-Specific Considerations: {sport.capitalize()}

**Primary Movement Demands:**
{_bullets(demands.primary_movements)}

**Key Muscle Groups:**
{_bullets(demands.key_muscles)}

**Recommended Exercises (prioritize these):**
{_bullets(demands.recommended_exercises)}

**Energy Systems:**
{_bullets(demands.energy_systems)}

**Common Injury Risk Areas (include prehab work):**
{_bullets(demands.injury_risks, " - include preventative exercises")}

**Periodization & Programming Notes:**
{demands.periodization_notes}
{phase_block}
**IMPORTANT:** Your programming should directly support {sport} performance. Include power/explosive work, address the key muscle groups listed above, and structure training around their competitive season if applicable.
"""


def get_sport_exercise_priorities(sport):
    demands = sport_demands().get(sport)
    if demands is None:
        return list(GENERIC_PRIORITIES)
    return list(demands.recommended_exercises)
