"""
Typed records for the questionnaire input and the generated plan output.

Both sides serialise with camelCase keys so they round-trip with the JSON the
client posts and stores.
"""

import copy
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel


Goal = Literal[
    "muscle_building",
    "fat_loss",
    "strength",
    "endurance",
    "general_fitness",
    "sport_specific",
]
Level = Literal["beginner", "intermediate", "advanced"]
Consistency = Literal["very_consistent", "mostly_consistent", "inconsistent", "returning"]
TimeOfDay = Literal["morning", "afternoon", "evening", "flexible"]
GymType = Literal["commercial", "home", "hotel", "outdoor"]
Severity = Literal["low", "medium", "high"]
InjuryStatus = Literal["acute", "chronic", "healing", "history"]
SleepQuality = Literal["poor", "fair", "good", "excellent"]
StressLevel = Literal["low", "moderate", "high", "very_high"]
RecoveryCapacity = Literal["low", "moderate", "high"]
NutritionApproach = Literal["maintenance", "surplus", "deficit", "intuitive"]
ProteinTier = Literal["low", "moderate", "high", "very_high"]
PreferredSplit = Literal["full_body", "upper_lower", "push_pull_legs", "bro_split", "custom"]
CardioPreference = Literal["none", "minimal", "moderate", "extensive"]
SeasonPhase = Literal["off-season", "pre-season", "in-season", "post-season", "not-applicable"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Questionnaire
# ---------------------------------------------------------------------------
class SportDetails(CamelModel):
    sport_name: str = ""
    current_phase: SeasonPhase = "not-applicable"


class GoalsSection(CamelModel):
    primary_goal: Goal = "general_fitness"
    secondary_goal: Optional[Goal] = None
    timeframe: str = "3 months"
    specific_targets: List[str] = Field(default_factory=list)
    sport_details: Optional[SportDetails] = None


class CurrentLifts(CamelModel):
    squat: Optional[StrictFloat] = Field(None, ge=0)
    bench: Optional[StrictFloat] = Field(None, ge=0)
    deadlift: Optional[StrictFloat] = Field(None, ge=0)
    overhead_press: Optional[StrictFloat] = Field(None, ge=0)


class ExperienceSection(CamelModel):
    training_years: StrictInt = Field(0, ge=0, le=30)
    current_level: Level = "beginner"
    recent_training: str = ""
    strong_points: List[str] = Field(default_factory=list)
    weak_points: List[str] = Field(default_factory=list)
    training_consistency: Consistency = "mostly_consistent"
    current_body_weight: Optional[StrictFloat] = Field(None, ge=30, le=300)
    current_lifts: CurrentLifts = Field(default_factory=CurrentLifts)


class AvailabilitySection(CamelModel):
    days_per_week: StrictInt = Field(3, ge=1, le=7)
    session_duration: StrictInt = Field(60, ge=30, le=180)
    preferred_days: List[str] = Field(default_factory=list)
    time_of_day: TimeOfDay = "flexible"


class EquipmentSection(CamelModel):
    gym_access: StrictBool = True
    gym_type: Optional[GymType] = "commercial"
    available_equipment: List[str] = Field(default_factory=list)
    limited_equipment: List[str] = Field(default_factory=list)


class InjuryRecord(CamelModel):
    area: str = Field(min_length=1)
    severity: Severity = "medium"
    status: InjuryStatus = "chronic"
    notes: str = ""


class InjuriesSection(CamelModel):
    current_injuries: List[InjuryRecord] = Field(default_factory=list)
    past_injuries: List[InjuryRecord] = Field(default_factory=list)
    movement_restrictions: List[str] = Field(default_factory=list)
    pain_areas: List[str] = Field(default_factory=list)


class RecoverySection(CamelModel):
    sleep_hours: StrictFloat = Field(7, ge=3, le=12)
    sleep_quality: SleepQuality = "good"
    stress_level: StressLevel = "moderate"
    recovery_capacity: RecoveryCapacity = "moderate"


class NutritionSection(CamelModel):
    nutrition_approach: NutritionApproach = "maintenance"
    protein_intake: ProteinTier = "moderate"
    dietary_restrictions: List[str] = Field(default_factory=list)
    supplement_use: List[str] = Field(default_factory=list)
    food_preferences: List[str] = Field(default_factory=list)


class PreferencesSection(CamelModel):
    favourite_exercises: List[str] = Field(default_factory=list)
    disliked_exercises: List[str] = Field(default_factory=list)
    preferred_split: Optional[PreferredSplit] = None
    cardio_preference: CardioPreference = "minimal"


class ConstraintsSection(CamelModel):
    max_exercises_per_session: Optional[StrictInt] = Field(None, ge=1, le=15)
    time_constraints: str = ""
    other_notes: str = ""


class Questionnaire(CamelModel):
    goals: GoalsSection = Field(default_factory=GoalsSection)
    experience: ExperienceSection = Field(default_factory=ExperienceSection)
    availability: AvailabilitySection = Field(default_factory=AvailabilitySection)
    equipment: EquipmentSection = Field(default_factory=EquipmentSection)
    injuries: InjuriesSection = Field(default_factory=InjuriesSection)
    recovery: RecoverySection = Field(default_factory=RecoverySection)
    nutrition: NutritionSection = Field(default_factory=NutritionSection)
    preferences: PreferencesSection = Field(default_factory=PreferencesSection)
    constraints: ConstraintsSection = Field(default_factory=ConstraintsSection)


DEFAULT_QUESTIONNAIRE = {
    "goals": {
        "primaryGoal": "general_fitness",
        "secondaryGoal": None,
        "timeframe": "3 months",
        "specificTargets": [],
    },
    "experience": {
        "trainingYears": 0,
        "currentLevel": "beginner",
        "recentTraining": "",
        "strongPoints": [],
        "weakPoints": [],
        "trainingConsistency": "mostly_consistent",
        "currentBodyWeight": None,
        "currentLifts": {},
    },
    "availability": {
        "daysPerWeek": 3,
        "sessionDuration": 60,
        "preferredDays": [],
        "timeOfDay": "flexible",
    },
    "equipment": {
        "gymAccess": True,
        "gymType": "commercial",
        "availableEquipment": [],
        "limitedEquipment": [],
    },
    "injuries": {
        "currentInjuries": [],
        "pastInjuries": [],
        "movementRestrictions": [],
        "painAreas": [],
    },
    "recovery": {
        "sleepHours": 7,
        "sleepQuality": "good",
        "stressLevel": "moderate",
        "recoveryCapacity": "moderate",
    },
    "nutrition": {
        "nutritionApproach": "maintenance",
        "proteinIntake": "moderate",
        "dietaryRestrictions": [],
        "supplementUse": [],
        "foodPreferences": [],
    },
    "preferences": {
        "favouriteExercises": [],
        "dislikedExercises": [],
        "preferredSplit": None,
        "cardioPreference": "minimal",
    },
    "constraints": {
        "maxExercisesPerSession": None,
        "timeConstraints": "",
        "otherNotes": "",
    },
}


def default_questionnaire_data():
    """Return a fresh copy of the default questionnaire payload."""
    return copy.deepcopy(DEFAULT_QUESTIONNAIRE)


# ---------------------------------------------------------------------------
# Generated plan
# ---------------------------------------------------------------------------
class PlanModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class Block(PlanModel):
    description: str
    exercises: List[str]


class Exercise(PlanModel):
    name: str
    sets: StrictInt
    reps: str
    rest: str
    intent: str
    rationale: str = ""
    notes: str = ""
    substitutions: List[str] = Field(default_factory=list)
    progression_note: str = ""


class WorkoutDay(PlanModel):
    day_number: int
    name: str
    focus: str
    duration: str
    warmup: Block
    exercises: List[Exercise]
    cooldown: Block


class GeneratedPlan(PlanModel):
    plan_name: str
    overview: str
    weekly_structure: str
    days: List[WorkoutDay]
    progression_guidance: str
    nutrition_notes: str
    recovery_notes: str
    disclaimer: str


def _block_schema():
    return {
        "type": "object",
        "additionalProperties": False,
        "required": ["description", "exercises"],
        "properties": {
            "description": {"type": "string"},
            "exercises": {"type": "array", "items": {"type": "string"}},
        },
    }


EXERCISE_FIELDS = [
    "name",
    "sets",
    "reps",
    "rest",
    "intent",
    "rationale",
    "notes",
    "substitutions",
    "progressionNote",
]

PLAN_JSON_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": [
        "planName",
        "overview",
        "weeklyStructure",
        "days",
        "progressionGuidance",
        "nutritionNotes",
        "recoveryNotes",
        "disclaimer",
    ],
    "properties": {
        "planName": {"type": "string"},
        "overview": {"type": "string"},
        "weeklyStructure": {"type": "string"},
        "days": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "required": [
                    "dayNumber",
                    "name",
                    "focus",
                    "duration",
                    "warmup",
                    "exercises",
                    "cooldown",
                ],
                "properties": {
                    "dayNumber": {"type": "integer"},
                    "name": {"type": "string"},
                    "focus": {"type": "string"},
                    "duration": {"type": "string"},
                    "warmup": _block_schema(),
                    "exercises": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "additionalProperties": False,
                            "required": list(EXERCISE_FIELDS),
                            "properties": {
                                "name": {"type": "string"},
                                "sets": {"type": "integer"},
                                "reps": {"type": "string"},
                                "rest": {"type": "string"},
                                "intent": {"type": "string"},
                                "rationale": {"type": "string"},
                                "notes": {"type": "string"},
                                "substitutions": {"type": "array", "items": {"type": "string"}},
                                "progressionNote": {"type": "string"},
                            },
                        },
                    },
                    "cooldown": _block_schema(),
                },
            },
        },
        "progressionGuidance": {"type": "string"},
        "nutritionNotes": {"type": "string"},
        "recoveryNotes": {"type": "string"},
        "disclaimer": {"type": "string"},
    },
}


def plan_to_dict(plan):
    """Serialise a GeneratedPlan to its camelCase JSON shape."""
    return plan.model_dump(by_alias=True)
