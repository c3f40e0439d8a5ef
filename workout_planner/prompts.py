"""
Prompt construction for plan generation, corrective feedback, refinement and
JSON repair.

Pure string assembly: every section is derived from the questionnaire by the
context, nutrition, sport and program-design modules.
"""

import json

from workout_planner.context_enrichment import (
    analyze_constraints,
    calculate_max_sets_per_week,
    create_training_narrative,
    format_number,
    humanize,
    map_weak_points_to_exercises,
    synthesize_recovery_profile,
)
from workout_planner.exercise_catalog import high_severity_movements
from workout_planner.nutrition_integration import (
    create_meal_timing_guidance,
    estimate_training_intensity,
    generate_nutrition_strategy,
    recommend_supplements,
)
from workout_planner.program_design import (
    build_program_design,
    program_design_to_dict,
    program_design_to_prompt,
    recommend_split,
    sets_for_level,
)
from workout_planner.sport_specific import (
    detect_sport,
    get_sport_exercise_priorities,
    get_sport_guidance,
)
from workout_planner.training_knowledge import select_knowledge


BANNED_PHRASES = (
    "listen to your body",
    "as needed",
    "great exercise",
    "targets multiple muscle groups",
    "builds overall strength",
    "for overall fitness",
    "this exercise helps",
    "works the whole body",
    "helps build muscle",
    "improves overall health",
)

SYSTEM_TEMPLATE = """You are an expert strength and conditioning coach with 20+ years of experience.
You create personalised training programmes that are:

1. SAFE - Never prescribe exercises that conflict with stated injuries
2. EFFECTIVE - Based on proven training principles
3. ADHERENT - Designed around the user's actual schedule and equipment
4. PROGRESSIVE - Include clear, numeric progression guidance

Your tone is calm, professional and encouraging. Explain the "why" behind each
recommendation in terms of THIS user's goals, weak points and constraints.

CRITICAL RULES:
- The plan MUST contain exactly {days_per_week} training days (dayNumber 1 to {days_per_week}). No more, no fewer.
- If an injury is marked HIGH severity, completely avoid that movement pattern
- If equipment is limited, substitute with available alternatives
- Never include exercises the user said they dislike
- Keep each favourite exercise as its own entry; never merge two favourites into one exercise name
- Always include warm-up and cool-down guidance
- Default to conservative volume for beginners
- Include rest day recommendations

EXERCISE FIELDS:
- intent: what the exercise does in this session
- rationale: why it was chosen for THIS user; it must say something different from intent
- notes: concrete form cues
- progressionNote: a numeric progression rule AND a deload rule, at least 20 characters
  (e.g. "Add 2.5kg when all sets hit 8 reps; deload 10% after 2 stalled sessions")

nutritionNotes must include a sample day of eating that names breakfast and lunch.

BANNED PHRASES (never use these generic fillers anywhere):
{banned_phrases}

OUTPUT FORMAT:
Respond with a single JSON object matching this exact structure:
{{
  "planName": "string - descriptive name for this plan",
  "overview": "string - 2-3 sentence summary",
  "weeklyStructure": "string - e.g. 'Upper/Lower (4 days)'",
  "days": [
    {{
      "dayNumber": number,
      "name": "string - e.g. 'Upper A'",
      "focus": "string - muscle groups targeted",
      "duration": "string - estimated time",
      "warmup": {{"description": "string", "exercises": ["string"]}},
      "exercises": [
        {{
          "name": "string",
          "sets": number,
          "reps": "string - e.g. '8-12' or '30s'",
          "rest": "string - e.g. '90 seconds'",
          "intent": "string",
          "rationale": "string",
          "notes": "string",
          "substitutions": ["string"],
          "progressionNote": "string"
        }}
      ],
      "cooldown": {{"description": "string", "exercises": ["string"]}}
    }}
  ],
  "progressionGuidance": "string",
  "nutritionNotes": "string",
  "recoveryNotes": "string",
  "disclaimer": "Consult a healthcare professional before starting any exercise program."
}}"""

UPDATE_MODE_TEMPLATE = """The user has an existing plan they want to update. Here is their current plan:

---
{existing_plan}
---

Based on their updated questionnaire responses, modify this plan to:
1. Address any new injuries or restrictions
2. Adjust volume/intensity based on their current recovery capacity
3. Incorporate their preferred exercises where appropriate
4. Maintain exercises they're progressing well on
5. Remove or substitute exercises that conflict with new constraints

Preserve the general structure if it was working well, but make significant
changes if their situation has changed substantially.

"""

REPAIR_SYSTEM = "You are a JSON repair tool. Return ONLY a valid JSON object that matches the schema."

REFINE_SYSTEM = (
    "You are a meticulous strength coach reviewing a draft training plan. "
    "Return the corrected plan as a single JSON object in the same schema."
)


def _join(items, empty="None"):
    values = [str(item) for item in items or [] if str(item).strip()]
    return ", ".join(values) if values else empty


def build_system_prompt(days_per_week):
    banned = "\n".join(f'- "{phrase}"' for phrase in BANNED_PHRASES)
    return SYSTEM_TEMPLATE.format(days_per_week=days_per_week, banned_phrases=banned)


# ---------------------------------------------------------------------------
# User block sections
# ---------------------------------------------------------------------------
def format_injuries(injuries):
    if not injuries.current_injuries and not injuries.movement_restrictions:
        return "No current injuries or restrictions reported."

    output = ""
    if injuries.current_injuries:
        output += "Current injuries:\n"
        for injury in injuries.current_injuries:
            output += f"- {injury.area} ({injury.severity} severity, {injury.status})"
            if injury.notes:
                output += f" - {injury.notes}"
            output += "\n"

    avoid = high_severity_movements(injuries.current_injuries)
    if avoid:
        output += f"\nMOVEMENTS TO COMPLETELY AVOID (high-severity injuries):\n{', '.join(avoid)}\n"
        output += "\nThese exercises or similar movement patterns must NOT appear in the plan.\n"

    if injuries.movement_restrictions:
        output += f"\nAdditional movement restrictions: {', '.join(injuries.movement_restrictions)}\n"
    return output.strip()


def _performance_context(questionnaire):
    experience = questionnaire.experience
    lifts = experience.current_lifts
    lines = [f"- Training consistency: {humanize(experience.training_consistency)}"]
    if experience.current_body_weight:
        lines.append(f"- Body weight: {format_number(experience.current_body_weight)}kg")
    known = [
        (label, value)
        for label, value in (
            ("Squat", lifts.squat),
            ("Bench", lifts.bench),
            ("Deadlift", lifts.deadlift),
            ("Overhead press", lifts.overhead_press),
        )
        if value
    ]
    if known:
        lines.append("- Current lifts: " + ", ".join(f"{label} {format_number(v)}kg" for label, v in known))
    if experience.strong_points:
        lines.append(f"- Strong points: {_join(experience.strong_points)}")
    return "\n".join(lines)


def build_coaching_brief(questionnaire):
    profile = synthesize_recovery_profile(questionnaire.recovery, questionnaire.availability)
    constraint = analyze_constraints(questionnaire)
    max_sets = calculate_max_sets_per_week(profile, questionnaire.experience.current_level)
    weak_points = map_weak_points_to_exercises(
        questionnaire.experience.weak_points, questionnaire.equipment.available_equipment
    )
    preferences = questionnaire.preferences

    if weak_points:
        weak_lines = "\n".join(
            f"- {point} ({info['priority']} priority): {', '.join(info['exercises'])}"
            for point, info in weak_points.items()
        )
    else:
        weak_lines = "- No weak points reported"

    return f"""## Coaching Brief

{create_training_narrative(questionnaire)}

**Recovery profile:** {profile.notes} Volume modifier {format_number(profile.volume_modifier)}; cap around {max_sets} hard sets per muscle group per week.

**Primary constraint ({constraint.primary}):** {constraint.impact}

**Weak-point priorities:**
{weak_lines}

**Preferences to honour:**
- Favourite exercises (include each as its own exercise): {_join(preferences.favourite_exercises)}
- Never include: {_join(preferences.disliked_exercises)}
- Cardio preference: {preferences.cardio_preference}

**Performance context:**
{_performance_context(questionnaire)}"""


def build_nutrition_summary(questionnaire):
    goals = questionnaire.goals
    nutrition = questionnaire.nutrition
    availability = questionnaire.availability
    strategy = generate_nutrition_strategy(
        goals.primary_goal,
        nutrition.nutrition_approach,
        nutrition.protein_intake,
        availability.days_per_week,
        questionnaire.experience.current_body_weight,
    )
    intensity = estimate_training_intensity(questionnaire)
    supplements = recommend_supplements(
        goals, nutrition.supplement_use, nutrition.dietary_restrictions, intensity
    )
    timing = create_meal_timing_guidance(
        availability.time_of_day, availability.session_duration, goals.primary_goal
    )

    return f"""## Nutrition Integration
- Training day calories: {strategy.training_day_calories}
- Rest day calories: {strategy.rest_day_calories}
- Protein: {strategy.protein_target}
- Carbohydrate: {strategy.carb_target}
- Fat: {strategy.fat_target}
- Dietary restrictions: {_join(nutrition.dietary_restrictions)}
- Food preferences: {_join(nutrition.food_preferences)}

{strategy.notes}

### Supplements
{supplements}

### Meal Timing
{timing}"""


def build_sport_section(questionnaire):
    sport = detect_sport(questionnaire)
    if sport is None:
        return ""
    details = questionnaire.goals.sport_details
    phase = details.current_phase if details else None
    priorities = ", ".join(get_sport_exercise_priorities(sport))
    return f"""{get_sport_guidance(sport, phase).strip()}

**Exercise priorities:** {priorities}"""


def build_training_prescription(questionnaire):
    experience = questionnaire.experience
    availability = questionnaire.availability
    profile = synthesize_recovery_profile(questionnaire.recovery, availability)
    main_sets, accessory_sets = sets_for_level(experience.current_level)
    max_exercises = questionnaire.constraints.max_exercises_per_session
    if max_exercises:
        exercise_rule = f"exactly {max_exercises} exercises per day"
    else:
        exercise_rule = "4-7 exercises per day, sized to the session length"

    return f"""## Training Prescription
- Level: {experience.current_level} ({experience.training_years} training years)
- Schedule: {availability.days_per_week} days x {availability.session_duration} minutes ({availability.time_of_day})
- Sets per exercise: main lifts {main_sets}, accessories {accessory_sets}
- Weekly hard-set cap per muscle group: {calculate_max_sets_per_week(profile, experience.current_level)}
- Exercises: {exercise_rule}
- Recommended split: {recommend_split(questionnaire)}"""


def format_questionnaire(questionnaire):
    """Full raw questionnaire dump, one section per questionnaire group."""
    q = questionnaire
    goals = q.goals
    sport_line = ""
    if goals.sport_details and goals.sport_details.sport_name:
        sport_line = (
            f"\n- Sport: {goals.sport_details.sport_name} "
            f"({goals.sport_details.current_phase})"
        )

    return f"""## User Profile

### Goals
- Primary: {humanize(goals.primary_goal)}
- Secondary: {humanize(goals.secondary_goal) or 'None'}
- Timeframe: {goals.timeframe}
- Specific targets: {_join(goals.specific_targets, 'None specified')}{sport_line}

### Experience
- Training years: {q.experience.training_years}
- Level: {q.experience.current_level}
- Recent training: {q.experience.recent_training or 'Not specified'}
- Strong points: {_join(q.experience.strong_points, 'Not specified')}
- Weak points: {_join(q.experience.weak_points, 'Not specified')}

### Availability
- Days per week: {q.availability.days_per_week}
- Session duration: {q.availability.session_duration} minutes
- Preferred days: {_join(q.availability.preferred_days, 'Flexible')}
- Time of day: {q.availability.time_of_day}

### Equipment
- Gym access: {'Yes' if q.equipment.gym_access else 'No'}
- Gym type: {q.equipment.gym_type or 'N/A'}
- Available equipment: {_join(q.equipment.available_equipment, 'Not specified')}
- Limited equipment: {_join(q.equipment.limited_equipment)}

### Injuries (CRITICAL - MUST RESPECT)
{format_injuries(q.injuries)}
- Past injuries: {_join([f"{i.area} ({i.severity})" for i in q.injuries.past_injuries])}
- Pain areas: {_join(q.injuries.pain_areas)}

### Recovery
- Sleep: {format_number(q.recovery.sleep_hours)} hours ({q.recovery.sleep_quality} quality)
- Stress level: {humanize(q.recovery.stress_level)}
- Recovery capacity: {q.recovery.recovery_capacity}

### Nutrition
- Approach: {q.nutrition.nutrition_approach}
- Protein intake: {q.nutrition.protein_intake}
- Dietary restrictions: {_join(q.nutrition.dietary_restrictions)}
- Supplements: {_join(q.nutrition.supplement_use)}

### Preferences
- Favourite exercises: {_join(q.preferences.favourite_exercises, 'None specified')}
- Exercises to avoid: {_join(q.preferences.disliked_exercises)}
- Preferred split: {humanize(q.preferences.preferred_split) or 'No preference'}
- Cardio preference: {q.preferences.cardio_preference}

### Additional Constraints
- Max exercises per session: {q.constraints.max_exercises_per_session or 'No limit'}
- Time constraints: {q.constraints.time_constraints or 'None'}
- Other notes: {q.constraints.other_notes or 'None'}"""


def build_prompt(questionnaire, existing_plan=None, knowledge_budget=6000):
    """
    Build the system and user prompts for the initial draft.

    Args:
        questionnaire: Validated Questionnaire
        existing_plan: Optional text of a plan to update
        knowledge_budget: Character budget for the knowledge excerpt

    Returns:
        (system, user) tuple of strings
    """
    days = questionnaire.availability.days_per_week
    sections = [build_coaching_brief(questionnaire)]

    knowledge = select_knowledge(questionnaire, char_budget=knowledge_budget)
    if knowledge:
        sections.append(f"## Training Knowledge Base (CFOS excerpt)\n\n{knowledge}")

    sections.append(build_nutrition_summary(questionnaire))

    sport = build_sport_section(questionnaire)
    if sport:
        sections.append(sport)

    sections.append(build_training_prescription(questionnaire))
    sections.append(program_design_to_prompt(build_program_design(questionnaire)))
    sections.append(format_questionnaire(questionnaire))
    sections.append(
        f"Please generate a personalised workout plan with exactly {days} training days "
        "based on this profile."
    )

    user = "\n\n".join(sections)
    if existing_plan and existing_plan.strip():
        user = UPDATE_MODE_TEMPLATE.format(existing_plan=existing_plan.strip()) + user

    return build_system_prompt(days), user


# ---------------------------------------------------------------------------
# Follow-up prompts
# ---------------------------------------------------------------------------
def build_feedback_prompt(plan_json, issues, questionnaire):
    """Corrective retry prompt from quality-validator issues."""
    lines = []
    for issue in issues[:30]:
        day = issue.get("day") or "Plan"
        exercise = issue.get("exercise") or "-"
        lines.append(f"- {issue['code']} | {day} | {exercise} | {issue['message']}")

    q = questionnaire
    banned = ", ".join(f'"{phrase}"' for phrase in BANNED_PHRASES)
    return f"""Correct this workout plan so it passes every quality check below.

Issues found:
{chr(10).join(lines)}

User-specific context to reflect in every rationale:
- Weak points: {_join(q.experience.weak_points)}
- Available equipment: {_join(q.equipment.available_equipment, 'Not specified')} (gym access: {'yes' if q.equipment.gym_access else 'no'})
- Injuries: {_join([f"{i.area} ({i.severity})" for i in q.injuries.current_injuries])}
- Favourite exercises (each as its own exercise): {_join(q.preferences.favourite_exercises)}

Hard requirements:
- Exactly {q.availability.days_per_week} training days.
- rationale must differ from intent and reference this user's situation.
- Every progressionNote needs a numeric progression rule and a deload rule (20+ characters).
- nutritionNotes must include a sample day naming breakfast and lunch.
- Never use these phrases: {banned}

Return the full corrected plan as a single JSON object in the same schema.

PLAN:
{plan_json}
"""


def build_refinement_requirements(questionnaire):
    """The must-match requirements object used by the refinement pass."""
    q = questionnaire
    return {
        "goals": q.goals.model_dump(by_alias=True),
        "availability": q.availability.model_dump(by_alias=True),
        "preferences": q.preferences.model_dump(by_alias=True),
        "recovery": q.recovery.model_dump(by_alias=True),
        "nutrition": q.nutrition.model_dump(by_alias=True),
        "constraints": q.constraints.model_dump(by_alias=True),
        "injuries": q.injuries.model_dump(by_alias=True),
        "equipment": q.equipment.model_dump(by_alias=True),
        "recommendedSplit": recommend_split(q),
        "programDesign": program_design_to_dict(build_program_design(q)),
    }


def build_refinement_prompt(plan_json, questionnaire):
    requirements = json.dumps(build_refinement_requirements(questionnaire), indent=2)
    return f"""Review the draft plan against the must-match requirements and return a corrected plan.

Check and fix:
- The number of days equals availability.daysPerWeek.
- Each day has exactly constraints.maxExercisesPerSession exercises when it is set.
- No disliked exercise or injury-restricted movement appears.
- Every favourite exercise appears as its own exercise.
- Sets, reps and rest follow programDesign.
- weeklyStructure matches recommendedSplit unless preferences.preferredSplit is set.
- Rationales are specific to this user and differ from intent.

Keep everything that already satisfies the requirements unchanged.

MUST-MATCH REQUIREMENTS:
{requirements}

DRAFT PLAN:
{plan_json}
"""


def build_repair_prompt(raw_text):
    return (
        "Fix the JSON below to be valid and match the required schema exactly. "
        f"Output only valid JSON.\n\n{raw_text}"
    )
