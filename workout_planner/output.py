"""
Rendering and saving generated plans.
"""

import json
import logging
import os
from datetime import datetime

from workout_planner.models import GeneratedPlan, plan_to_dict

logger = logging.getLogger(__name__)


def _as_dict(plan):
    return plan_to_dict(plan) if isinstance(plan, GeneratedPlan) else plan


def plan_to_markdown(plan):
    """Render a plan as a markdown document."""
    data = _as_dict(plan)
    lines = [
        f"# {data['planName']}",
        "",
        data["overview"],
        "",
        f"**Weekly structure:** {data['weeklyStructure']}",
        "",
    ]

    for day in data["days"]:
        lines.append(f"## Day {day['dayNumber']}: {day['name']}")
        lines.append(f"*{day['focus']}* ({day['duration']})")
        lines.append("")
        lines.append(f"**Warm-up:** {day['warmup']['description']}")
        for item in day["warmup"]["exercises"]:
            lines.append(f"- {item}")
        lines.append("")

        for index, exercise in enumerate(day["exercises"], start=1):
            lines.append(f"### {index}. {exercise['name']}")
            lines.append(f"- {exercise['sets']} x {exercise['reps']}, rest {exercise['rest']}")
            lines.append(f"- **Intent:** {exercise['intent']}")
            if exercise.get("rationale"):
                lines.append(f"- **Why:** {exercise['rationale']}")
            if exercise.get("notes"):
                lines.append(f"- **Notes:** {exercise['notes']}")
            if exercise.get("progressionNote"):
                lines.append(f"- **Progression:** {exercise['progressionNote']}")
            if exercise.get("substitutions"):
                lines.append(f"- **Swaps:** {', '.join(exercise['substitutions'])}")
            lines.append("")

        lines.append(f"**Cool-down:** {day['cooldown']['description']}")
        for item in day["cooldown"]["exercises"]:
            lines.append(f"- {item}")
        lines.append("")

    for title, key in (
        ("Progression", "progressionGuidance"),
        ("Nutrition", "nutritionNotes"),
        ("Recovery", "recoveryNotes"),
    ):
        lines.extend([f"## {title}", "", data[key], ""])

    lines.append(f"_{data['disclaimer']}_")
    return "\n".join(lines) + "\n"


def save_plan(plan, output_folder="output", format="json"):
    """
    Save the plan to a timestamped file.

    Args:
        plan: GeneratedPlan or its dict form
        output_folder: Folder to save the plan
        format: "json" or "markdown"

    Returns:
        Path of the written file
    """
    os.makedirs(output_folder, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    extension = "md" if format == "markdown" else "json"
    filepath = os.path.join(output_folder, f"workout_plan_{timestamp}.{extension}")

    if extension == "md":
        content = plan_to_markdown(plan)
    else:
        content = json.dumps(_as_dict(plan), indent=2) + "\n"

    with open(filepath, "w") as f:
        f.write(content)
    logger.info("Plan saved to %s", filepath)
    return filepath
