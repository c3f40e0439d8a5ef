"""
Derives coaching context from raw questionnaire answers.

Recovery capacity, the primary limiting constraint, weak-point exercise
priorities and a short coaching narrative all feed the prompt builder.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RecoveryProfile:
    capacity: str
    volume_modifier: float
    notes: str


@dataclass(frozen=True)
class ConstraintAnalysis:
    primary: str
    impact: str


SLEEP_QUALITY_DELTAS = {"excellent": 2, "good": 1, "fair": 0, "poor": -2}
STRESS_DELTAS = {"very_high": -3, "high": -2, "moderate": -1, "low": 1}
CAPACITY_DELTAS = {"high": 2, "moderate": 0, "low": -2}
BASE_WEEKLY_SETS = {"beginner": 10, "intermediate": 14, "advanced": 20}


def format_number(value):
    """Render 7.0 as "7" and 7.5 as "7.5"."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def humanize(value):
    """Enum value to display text ("very_high" -> "very high")."""
    return (value or "").replace("_", " ")


def round_half_up(value):
    return int(value + 0.5)


def synthesize_recovery_profile(recovery, availability):
    """
    Score recovery capacity from sleep, stress and training frequency.

    Args:
        recovery: RecoverySection
        availability: AvailabilitySection

    Returns:
        RecoveryProfile with tier, volume modifier and rationale text
    """
    score = 5

    if recovery.sleep_hours >= 8:
        score += 2
    elif recovery.sleep_hours >= 7:
        score += 1
    elif recovery.sleep_hours < 6:
        score -= 2

    score += SLEEP_QUALITY_DELTAS.get(recovery.sleep_quality, 0)
    score += STRESS_DELTAS.get(recovery.stress_level, 0)
    score += CAPACITY_DELTAS.get(recovery.recovery_capacity, 0)

    if availability.days_per_week >= 5:
        score -= 1

    if score <= 4:
        capacity, modifier = "low", 0.75
    elif score >= 7:
        capacity, modifier = "high", 1.2
    else:
        capacity, modifier = "moderate", 1.0

    notes = _build_recovery_notes(capacity, recovery, availability.days_per_week)
    return RecoveryProfile(capacity=capacity, volume_modifier=modifier, notes=notes)


def _build_recovery_notes(capacity, recovery, days_per_week):
    factors = []
    if recovery.sleep_hours < 6:
        factors.append(f"limited sleep ({format_number(recovery.sleep_hours)}h)")
    elif recovery.sleep_hours >= 8:
        factors.append(f"good sleep duration ({format_number(recovery.sleep_hours)}h)")

    if recovery.sleep_quality in ("poor", "fair"):
        factors.append(f"{recovery.sleep_quality} sleep quality")

    if recovery.stress_level in ("high", "very_high"):
        factors.append(f"{humanize(recovery.stress_level)} stress levels")

    if days_per_week >= 5:
        factors.append(f"high training frequency ({days_per_week} days/week)")

    description = f"{capacity.capitalize()} recovery capacity"
    if factors:
        description += f" due to {', '.join(factors)}"
    return description + ". Volume should be adjusted accordingly to prevent overtraining."


def analyze_constraints(questionnaire):
    """Identify the primary limiting factor, checked in fixed priority order."""
    availability = questionnaire.availability
    equipment = questionnaire.equipment
    current = questionnaire.injuries.current_injuries

    if any(injury.severity == "high" for injury in current) or len(current) >= 2:
        areas = ", ".join(injury.area for injury in current)
        return ConstraintAnalysis(
            "injury",
            f"Current injuries ({areas}) require careful exercise selection and progression. "
            "Many traditional movements will need modifications or substitutions.",
        )

    profile = synthesize_recovery_profile(questionnaire.recovery, availability)
    if profile.capacity == "low":
        return ConstraintAnalysis(
            "recovery",
            f"{profile.notes} Training volume must be conservative "
            f"({round_half_up(profile.volume_modifier * 100)}% of typical recommendations) "
            "to ensure adequate recovery between sessions.",
        )

    time_notes = questionnaire.constraints.time_constraints.strip()
    if availability.session_duration < 45 or availability.days_per_week <= 2 or time_notes:
        return ConstraintAnalysis(
            "time",
            f"Limited training time ({availability.days_per_week} days/week, "
            f"{availability.session_duration} min/session) requires efficient exercise selection. "
            "Focus on compound movements and minimize rest periods where safe.",
        )

    limited = bool(equipment.limited_equipment) or not equipment.gym_access
    small_home_gym = equipment.gym_type == "home" and len(equipment.available_equipment) < 5
    if limited or small_home_gym:
        if equipment.gym_access:
            impact = (
                f"Home gym setup with limited equipment ({', '.join(equipment.available_equipment)}) "
                "requires creative exercise selection and use of available implements."
            )
        else:
            impact = (
                "No gym access means bodyweight-focused or minimal-equipment training. "
                "Progress will come from rep progression, tempo manipulation, and movement complexity."
            )
        return ConstraintAnalysis("equipment", impact)

    medium = next((injury for injury in current if injury.severity == "medium"), None)
    if medium is not None:
        return ConstraintAnalysis(
            "injury",
            f"Medium-severity injury to {medium.area} requires some exercise modifications, "
            "but most training can proceed with proper load management.",
        )

    return ConstraintAnalysis(
        "none",
        "No major constraints identified. Standard programming approaches can be used "
        "with full exercise variety.",
    )


def _equipment_flags(available_equipment):
    names = [item.lower() for item in available_equipment or []]
    return {
        "barbell": any("barbell" in n for n in names),
        "dumbbell": any("dumbbell" in n for n in names),
        "cable": any("cable" in n for n in names),
        "pull_up_bar": any("pull" in n or "bar" in n for n in names),
    }


# (area keywords, priority, [(equipment flag or None, exercises)], fallback exercises)
WEAK_POINT_TAXONOMY = (
    (
        ("back", "pull"),
        "high",
        (
            ("pull_up_bar", ("pull-ups", "chin-ups")),
            ("barbell", ("barbell rows", "deadlifts")),
            ("dumbbell", ("dumbbell rows", "seal rows")),
            ("cable", ("seated cable rows", "lat pulldowns")),
        ),
        ("inverted rows", "bodyweight pull variations"),
    ),
    (
        ("chest", "pec"),
        "high",
        (
            ("barbell", ("bench press", "incline bench press")),
            ("dumbbell", ("dumbbell press", "dumbbell flyes")),
            ("cable", ("cable flyes", "cable press")),
        ),
        ("push-ups", "decline push-ups"),
    ),
    (
        ("leg", "quad", "glute", "posterior"),
        "high",
        (
            ("barbell", ("squats", "Romanian deadlifts", "lunges")),
            ("dumbbell", ("goblet squats", "Bulgarian split squats", "dumbbell RDLs")),
        ),
        ("split squats", "single-leg deadlifts", "step-ups"),
    ),
    (
        ("shoulder", "delt"),
        "medium",
        (
            ("barbell", ("overhead press", "push press")),
            ("dumbbell", ("dumbbell shoulder press", "lateral raises", "front raises")),
            ("cable", ("cable lateral raises", "face pulls")),
        ),
        ("pike push-ups", "handstand push-up progressions"),
    ),
    (
        ("arm", "bicep", "tricep"),
        "low",
        (
            ("dumbbell", ("dumbbell curls", "hammer curls", "overhead extensions")),
            ("cable", ("cable curls", "tricep pushdowns")),
            ("barbell", ("barbell curls", "close-grip bench press")),
        ),
        ("chin-ups (biceps)", "diamond push-ups (triceps)"),
    ),
)

CORE_WEAK_POINT = ("medium", ["planks", "dead bugs", "pallof press", "ab wheel rollouts"])
GENERIC_WEAK_POINT = ("medium", ["Compound movements targeting this area"])


def map_weak_points_to_exercises(weak_points, available_equipment):
    """
    Map each weak point to up to three equipment-appropriate exercises.

    Returns:
        Dict of weak point -> {"priority": str, "exercises": [str]}
    """
    flags = _equipment_flags(available_equipment)
    mapping = {}

    for weak_point in weak_points or []:
        point = weak_point.lower()
        for keywords, priority, tiers, fallback in WEAK_POINT_TAXONOMY:
            if any(keyword in point for keyword in keywords):
                exercises = []
                for flag, names in tiers:
                    if flags[flag]:
                        exercises.extend(names)
                if not exercises:
                    exercises = list(fallback)
                mapping[weak_point] = {"priority": priority, "exercises": exercises[:3]}
                break
        else:
            if "core" in point or "ab" in point:
                priority, exercises = CORE_WEAK_POINT
            else:
                priority, exercises = GENERIC_WEAK_POINT
            mapping[weak_point] = {"priority": priority, "exercises": list(exercises)}

    return mapping


def _experience_sentence(experience):
    years = experience.training_years
    if years == 0:
        return (
            "As a beginner to structured training, you're in an excellent position to make "
            "rapid progress with the right foundation."
        )
    if years < 2:
        unit = "year" if years == 1 else "years"
        return (
            f"After {years} {unit} of training, you've built initial momentum and are ready "
            "for more structured programming."
        )
    if years < 5:
        return (
            f"With {years} years of training experience at the {experience.current_level} level, "
            "you've developed a solid foundation and are ready for intelligent progression."
        )
    return (
        f"Your {years} years of training at the {experience.current_level} level means you "
        "require sophisticated programming to continue progressing."
    )


def create_training_narrative(questionnaire):
    """Build the coaching narrative paragraph in its fixed sentence order."""
    goals = questionnaire.goals
    availability = questionnaire.availability
    recovery = questionnaire.recovery

    sentences = [_experience_sentence(questionnaire.experience)]

    goal_text = humanize(goals.primary_goal)
    timeframe = goals.timeframe.lower()
    if goals.secondary_goal:
        sentences.append(
            f"Your primary goal of {goal_text} combined with {humanize(goals.secondary_goal)} "
            f"over {timeframe} requires balanced programming."
        )
    else:
        sentences.append(
            f"Your {goal_text} goal over {timeframe} provides clear direction for your training approach."
        )

    constraint = analyze_constraints(questionnaire)
    if constraint.primary != "none":
        sentences.append(constraint.impact)

    profile = synthesize_recovery_profile(recovery, availability)
    if profile.capacity in ("low", "high"):
        adjective = "limited" if profile.capacity == "low" else "excellent"
        sentences.append(
            f"Your {adjective} recovery capacity ({format_number(recovery.sleep_hours)}h sleep, "
            f"{humanize(recovery.stress_level)} stress) will inform volume and frequency decisions."
        )

    if availability.days_per_week <= 3:
        sentences.append(
            f"Training {availability.days_per_week} days per week in {availability.session_duration}-minute "
            "sessions requires efficient, full-body or upper/lower approaches."
        )
    elif availability.days_per_week >= 5:
        sentences.append(
            f"Your {availability.days_per_week}-day training schedule allows for higher frequency "
            "splits that can distribute volume effectively."
        )

    return " ".join(sentences)


def calculate_max_sets_per_week(profile, level):
    base = BASE_WEEKLY_SETS.get(level, BASE_WEEKLY_SETS["advanced"])
    return round_half_up(base * profile.volume_modifier)
