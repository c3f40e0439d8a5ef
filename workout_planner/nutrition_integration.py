"""
Training-integrated nutrition guidance.

Calorie/macro targets by goal, supplement recommendations and meal timing
around the training schedule.
"""

from dataclasses import dataclass

from workout_planner.context_enrichment import format_number, round_half_up


@dataclass(frozen=True)
class NutritionStrategy:
    training_day_calories: str
    rest_day_calories: str
    protein_target: str
    carb_target: str
    fat_target: str
    notes: str


PROTEIN_RANGES = {
    "low": (1.2, 1.6),
    "moderate": (1.6, 2.0),
    "high": (2.0, 2.4),
    "very_high": (2.4, 3.0),
}
DEFAULT_PROTEIN_RANGE = (1.8, 2.2)


def protein_target(protein_tier, body_weight=None):
    low, high = PROTEIN_RANGES.get(protein_tier, DEFAULT_PROTEIN_RANGE)
    if body_weight:
        return (
            f"{round_half_up(body_weight * low)}-{round_half_up(body_weight * high)}g/day "
            f"({format_number(low)}-{format_number(high)}g/kg at {format_number(body_weight)}kg)"
        )
    return f"{format_number(low)}-{format_number(high)}g/kg bodyweight"


def generate_nutrition_strategy(goal, approach, protein_tier, training_days, body_weight=None):
    """
    Build calorie and macro targets for training and rest days.

    Args:
        goal: Primary goal enum value
        approach: Nutrition approach (maintenance/surplus/deficit/intuitive)
        protein_tier: Self-reported protein intake tier
        training_days: Training days per week
        body_weight: Optional body weight in kg

    Returns:
        NutritionStrategy
    """
    rest_days = 7 - training_days
    protein = protein_target(protein_tier, body_weight)

    if goal == "muscle_building" and approach == "surplus":
        return NutritionStrategy(
            "Maintenance + 300-400 calories",
            "Maintenance + 100-200 calories",
            protein,
            "Training: 3-5g/kg | Rest: 2-3g/kg",
            "0.8-1.2g/kg bodyweight",
            "Lean bulk approach: Concentrate surplus on training days when protein synthesis is "
            f"elevated. {training_days} training days and {rest_days} rest days per week. Time "
            "majority of carbs around workouts (40-60g pre-workout, 60-80g post-workout).",
        )
    if goal == "muscle_building" and approach == "maintenance":
        return NutritionStrategy(
            "Maintenance + 100-200 calories",
            "Maintenance - 100 calories",
            protein,
            "Training: 3-4g/kg | Rest: 2g/kg",
            "0.8-1.0g/kg bodyweight",
            "Recomposition approach: Slight surplus on training days, deficit on rest. Progress "
            f"will be slower but body composition improves. {training_days} training days for "
            f"muscle building, {rest_days} rest days for fat utilization.",
        )

    if goal == "strength":
        surplus = approach == "surplus"
        return NutritionStrategy(
            "Maintenance + 200-300 calories" if surplus else "Maintenance",
            "Maintenance + 100 calories" if surplus else "Maintenance",
            protein,
            "Training: 3-5g/kg | Rest: 2-3g/kg",
            "1.0-1.5g/kg bodyweight",
            "Strength gains require adequate fuel. Prioritize carbs 2-3 hours pre-workout for "
            f"glycogen stores. {training_days} heavy training days need full energy support. "
            "Don't cut calories aggressively if strength is the goal.",
        )

    if goal == "fat_loss":
        boosted = protein_tier == "low"
        return NutritionStrategy(
            "Maintenance - 300 calories",
            "Maintenance - 500 calories",
            "2.0-2.4g/kg" if boosted else protein,
            "Training: 2-3g/kg | Rest: 1-2g/kg",
            "0.6-1.0g/kg bodyweight",
            f"Fat loss protocol: Larger deficit on {rest_days} rest days, smaller deficit on "
            f"{training_days} training days to preserve performance. High protein "
            f"({'2.0-2.4g/kg minimum' if boosted else protein}) protects muscle. Time 40-50g "
            "carbs pre-workout for training quality.",
        )

    if goal == "endurance":
        return NutritionStrategy(
            "Maintenance + 200-400 calories (depending on session length)",
            "Maintenance",
            "1.4-1.8g/kg bodyweight",
            "Training: 4-7g/kg | Rest: 3-4g/kg",
            "0.8-1.2g/kg bodyweight",
            "Endurance requires higher carb intake for glycogen replenishment. "
            f"{training_days} training days need substantial carbs (4-7g/kg). Focus on carbs "
            "before/during/after longer sessions. Protein needs are moderate but consistent.",
        )

    if goal == "sport_specific":
        return NutritionStrategy(
            "Maintenance + 200-400 calories" if approach == "surplus" else "Maintenance",
            "Maintenance",
            protein,
            "Training: 3-5g/kg | Rest: 2-3g/kg",
            "1.0-1.5g/kg bodyweight",
            "Athletic performance nutrition: Fuel training days adequately "
            f"({training_days} days/week). Carbs support power output and recovery. Adjust based "
            "on sport demands - explosive sports need more carbs, skill-based may need less. "
            "Don't chronically under-eat.",
        )

    return NutritionStrategy(
        "Maintenance",
        "Maintenance",
        protein,
        "2-4g/kg bodyweight",
        "0.8-1.2g/kg bodyweight",
        f"Balanced approach for general fitness. {training_days} training days and {rest_days} "
        "rest days. Maintain consistent intake, prioritize whole foods, and ensure adequate "
        f"protein ({protein}) for recovery.",
    )


def _uses(current, *tokens):
    return any(token in supplement for supplement in current for token in tokens)


def is_plant_based(dietary_restrictions):
    return any("vegan" in r.lower() or "plant" in r.lower() for r in dietary_restrictions or [])


def recommend_supplements(goals, supplement_use, dietary_restrictions, intensity):
    """Acknowledge the current stack and list evidence-based additions."""
    current = [s.lower() for s in supplement_use or []]
    plant_based = is_plant_based(dietary_restrictions)
    primary = goals.primary_goal
    recommendations = []

    if not _uses(current, "creatine") and primary in ("muscle_building", "strength"):
        recommendations.append(
            "**Creatine monohydrate** (5g/day): Most researched supplement for strength and "
            "muscle gains, very cost-effective"
        )

    if not _uses(current, "protein", "whey") and intensity != "low":
        if plant_based:
            recommendations.append(
                "**Plant-based protein powder** (1-2 servings/day): Helps meet higher protein "
                "needs on a vegan diet, especially post-workout"
            )
        else:
            recommendations.append(
                "**Whey protein** (1-2 servings/day): Convenient way to hit protein targets, "
                "especially post-workout"
            )

    if not _uses(current, "caffeine", "pre-workout") and intensity == "high":
        recommendations.append(
            "**Caffeine** (200-400mg pre-workout): Improves focus and performance, but cycle off "
            "every 4-6 weeks to prevent tolerance"
        )

    if not _uses(current, "vitamin d"):
        recommendations.append(
            "**Vitamin D3** (2000-4000 IU/day): Most people are deficient, supports bone health, "
            "immune function, and recovery"
        )

    if not _uses(current, "magnesium") and intensity == "high":
        recommendations.append(
            "**Magnesium glycinate** (300-400mg before bed): Supports recovery, sleep quality, "
            "and reduces muscle cramps"
        )

    if not _uses(current, "omega", "fish oil"):
        if plant_based:
            recommendations.append(
                "**Algae-based omega-3** (1-2g EPA+DHA/day): Supports joint health and reduces "
                "inflammation from training"
            )
        else:
            recommendations.append(
                "**Fish oil** (2-3g EPA+DHA/day): Reduces inflammation, supports joint health and "
                "cardiovascular function"
            )

    if primary == "fat_loss":
        recommendations.append(
            "**Note:** No fat-burning supplements are necessary. Calorie deficit is what matters. "
            "Caffeine can help with energy during a cut."
        )

    output = ""
    if supplement_use:
        output += f"You're already using: {', '.join(supplement_use)}.\n\n"
    if recommendations:
        output += "**Additional evidence-based recommendations:**\n"
        output += "\n".join(f"- {r}" for r in recommendations)
    else:
        output += "Your current supplement stack covers the essentials well."
    return output.strip()


def create_meal_timing_guidance(time_of_day, session_duration, goal):
    guidance = []

    if time_of_day == "morning":
        if goal == "fat_loss" and session_duration < 60:
            guidance.append(
                "**Morning training (fasted or fed):** Can train fasted if session <60 min, but "
                "performance may suffer. If fueling, have 20-40g carbs + 15-20g protein 30-60 min "
                "before (e.g., banana + protein shake)."
            )
        else:
            guidance.append(
                "**Morning training:** Have 30-50g carbs + 15-25g protein 45-90 min before "
                "training (e.g., oatmeal + protein shake, toast + eggs). Critical for performance "
                "when training early."
            )
    elif time_of_day in ("afternoon", "evening"):
        guidance.append(
            f"**{time_of_day.capitalize()} training:** Ensure you've had 2-3 meals before "
            "training. Last meal 2-3 hours pre-workout with carbs + protein (e.g., rice + "
            "chicken, pasta + lean meat). Small carb snack (20-30g) 30-60 min before if needed."
        )
    else:
        guidance.append(
            "**Flexible training time:** Whenever you train, aim for 30-50g carbs + 15-25g "
            "protein 1-2 hours before. Adjust based on digestion - some prefer longer gaps, "
            "others train 30 min after eating."
        )

    window = "30-60 minutes" if session_duration >= 75 else "60-90 minutes"
    if goal in ("muscle_building", "strength"):
        guidance.append(
            f"**Post-workout (within {window}):** 40-60g carbs + 25-40g protein. This is your "
            "most anabolic window. Examples: protein shake + banana + rice cakes, chicken + rice "
            "+ fruit."
        )
    elif goal == "fat_loss":
        guidance.append(
            f"**Post-workout (within {window}):** 20-30g carbs + 30-40g protein. Prioritize "
            "protein to preserve muscle. Carbs aid recovery but keep moderate in a deficit."
        )
    else:
        guidance.append(
            f"**Post-workout (within {window}):** 30-50g carbs + 25-35g protein for recovery. "
            "Not as critical as once thought, but aids glycogen replenishment and protein "
            "synthesis."
        )

    if time_of_day in ("evening", "flexible"):
        guidance.append(
            "**Before bed:** 20-40g slow-digesting protein (casein shake, Greek yogurt, cottage "
            "cheese) supports overnight muscle protein synthesis. Include if daily protein target "
            "not yet met."
        )

    guidance.append(
        "**Meal frequency:** Aim for 3-5 meals spread throughout the day. More frequent meals "
        "(4-5) may help with adherence and energy levels. Minimum 3 meals with protein at each "
        "(25-40g per meal)."
    )
    return "\n\n".join(guidance)


def estimate_training_intensity(questionnaire):
    days = questionnaire.availability.days_per_week
    weekly_minutes = days * questionnaire.availability.session_duration
    level = questionnaire.experience.current_level

    if level == "advanced" or weekly_minutes >= 300 or days >= 5:
        return "high"
    if level == "intermediate" or weekly_minutes >= 180 or days >= 3:
        return "moderate"
    return "low"
