"""
Static exercise tables shared by the normalizer, the fallback plan and the
prompt builder.

Injury movement map, equipment requirements and swaps, movement variations,
accessory pools and the keyword sets that classify exercises. All tables are
read-only.
"""

import re
from types import MappingProxyType

from workout_planner.keyword_matcher import (
    KeywordMatcher,
    canonical_key,
    contains_keyword,
    contains_word,
    first_match,
    fold,
)


# ---------------------------------------------------------------------------
# Injury safety
# ---------------------------------------------------------------------------
INJURY_MOVEMENT_MAP = MappingProxyType({
    "lower back": ("deadlift", "bent over row", "good morning", "back squat", "romanian deadlift"),
    "upper back": ("deadlift", "bent over row", "lat pulldown"),
    "shoulder": ("overhead press", "lateral raise", "upright row", "dips", "bench press"),
    "neck": ("shrug", "upright row", "overhead press"),
    "elbow": ("tricep extension", "skull crusher", "close grip bench", "bicep curl"),
    "wrist": ("barbell curl", "push up", "front squat", "clean"),
    "hip": ("squat", "deadlift", "lunge", "leg press", "hip thrust"),
    "knee": ("squat", "lunge", "leg extension", "jump", "running"),
    "ankle": ("squat", "calf raise", "jump", "running", "lunge"),
})


def movements_for_area(area):
    """Movements mapped to an injured body area (substring match on the area text)."""
    area_text = (area or "").lower()
    movements = []
    for mapped_area, mapped in INJURY_MOVEMENT_MAP.items():
        if mapped_area in area_text:
            movements.extend(mapped)
    return movements


def high_severity_movements(injuries):
    movements = []
    for injury in injuries:
        if injury.severity == "high":
            movements.extend(movements_for_area(injury.area))
    return list(dict.fromkeys(movements))


def restricted_keywords(questionnaire):
    """
    Keywords no exercise name may contain for this user.

    High-severity current and past injuries contribute their mapped
    movements; stated movement restrictions and pain areas are used as-is.
    """
    injuries = questionnaire.injuries
    keywords = high_severity_movements(
        list(injuries.current_injuries) + list(injuries.past_injuries)
    )
    keywords.extend(injuries.movement_restrictions)
    keywords.extend(injuries.pain_areas)
    return KeywordMatcher(keywords)


# ---------------------------------------------------------------------------
# Exercise classification
# ---------------------------------------------------------------------------
POWER_KEYWORDS = ("jump", "bound", "throw", "clean", "snatch", "jerk", "power", "plyo", "explosive")

CONDITIONING_KEYWORDS = (
    "conditioning",
    "interval",
    "sprint",
    "cardio",
    "hiit",
    "zone 2",
    "bike",
    "cycling",
    "rower",
    "burpee",
    "skipping",
    "shuttle",
    "sled",
    "mountain climber",
    "battle rope",
    "circuit",
    "finisher",
    "jog",
    "swim",
    "assault",
)
# Short tokens that would over-match as substrings ("crunch" contains "run").
CONDITIONING_WORDS = ("run", "running", "erg", "ski")

COMPOUND_KEYWORDS = (
    "squat",
    "deadlift",
    "bench",
    "row",
    "pull up",
    "chin up",
    "pulldown",
    "press",
    "lunge",
    "dip",
    "clean",
    "snatch",
    "jerk",
    "thrust",
    "thruster",
    "step up",
    "carry",
    "push up",
    "jump",
    "power",
    "swing",
    "good morning",
)

# movement base -> whole-word name keywords
MOVEMENT_BASES = (
    ("squat", ("squat",)),
    ("deadlift", ("deadlift",)),
    ("bench", ("bench press", "bench")),
    ("row", ("row",)),
    ("overhead", ("overhead press", "shoulder press", "military press")),
    ("lunge", ("lunge",)),
    ("carry", ("carry",)),
    ("pull up", ("pull up",)),
)

TIME_BASED_RE = re.compile(
    r"\d+\s*(?:s|sec|secs|seconds?|min|mins|minutes?)\b|\d+:\d{2}|\b(?:hold|amrap|emom|max)\b",
    re.IGNORECASE,
)


def is_power(name):
    return contains_keyword(name, POWER_KEYWORDS)


def is_conditioning(name):
    return contains_keyword(name, CONDITIONING_KEYWORDS) or contains_word(name, CONDITIONING_WORDS)


def is_compound(name):
    return contains_word(name, COMPOUND_KEYWORDS)


def is_time_based(reps):
    return bool(TIME_BASED_RE.search(str(reps or "")))


def movement_base(name):
    for base, words in MOVEMENT_BASES:
        if contains_word(name, words):
            return base
    return None


# weak-point area keywords -> exercise-name keywords that train it
WEAK_POINT_MOVEMENTS = (
    (("chest", "pec"), ("bench", "chest", "fly", "push up", "dip")),
    (("back", "lat"), ("row", "pull up", "chin up", "pulldown", "deadlift")),
    (("leg", "quad", "glute", "hamstring", "posterior"), ("squat", "lunge", "deadlift", "step up", "thrust", "leg press")),
    (("shoulder", "delt"), ("overhead", "shoulder press", "lateral raise", "push press")),
    (("arm", "bicep", "tricep"), ("curl", "tricep", "dip", "close grip")),
    (("core", "abs"), ("plank", "dead bug", "pallof", "rollout", "carry")),
)


def weak_point_movement_keywords(weak_points):
    keywords = []
    for weak_point in weak_points or []:
        for areas, movements in WEAK_POINT_MOVEMENTS:
            if contains_keyword(weak_point, areas):
                keywords.extend(movements)
    return list(dict.fromkeys(keywords))


# ---------------------------------------------------------------------------
# Equipment
# ---------------------------------------------------------------------------
EQUIPMENT_TAGS = ("barbell", "cable", "machine", "pull_up_bar", "kettlebell", "medicine_ball", "cardio")
HOME_GYM_TYPES = ("home", "hotel", "outdoor")

# tag -> words in an equipment answer that make the tag available
TAG_DETECTION = MappingProxyType({
    "barbell": ("barbell", "olympic bar", "squat rack", "power rack", "trap bar", "ez bar"),
    "cable": ("cable", "pulley", "functional trainer"),
    "machine": ("machine", "leg press", "smith", "sled"),
    "pull_up_bar": ("pull up bar", "chin up bar", "pull up", "rings", "power rack"),
    "kettlebell": ("kettlebell",),
    "medicine_ball": ("medicine ball", "med ball", "slam ball", "wall ball"),
    "cardio": ("bike", "rower", "treadmill", "erg", "elliptical", "rowing machine"),
})

# tag -> words in an exercise name that need the tag
EQUIPMENT_REQUIREMENTS = MappingProxyType({
    "machine": ("leg press", "leg curl", "leg extension", "machine", "smith", "hack squat", "pec deck", "chest press", "sled"),
    "cable": ("cable", "pulldown", "pushdown", "face pull", "seated row"),
    "barbell": (
        "barbell",
        "bench press",
        "squat",
        "deadlift",
        "overhead press",
        "bent over row",
        "good morning",
        "landmine",
        "clean",
        "snatch",
        "jerk",
    ),
    "pull_up_bar": ("pull up", "chin up", "muscle up", "hanging"),
    "kettlebell": ("kettlebell",),
    "medicine_ball": ("medicine ball", "med ball", "wall ball", "ball slam"),
    "cardio": ("bike", "rower", "treadmill", "assault", "ski erg"),
})

# Names carrying any of these are already adapted for minimal equipment.
ADAPTED_MARKERS = (
    "dumbbell",
    "db",
    "goblet",
    "split squat",
    "bodyweight",
    "band",
    "single leg",
    "push up",
    "nordic",
    "sissy",
    "jump",
    "pistol",
)

# (name keyword, replacements in preference order); first matching keyword wins
EQUIPMENT_SWAPS = (
    ("leg press", ("Goblet Squat", "Dumbbell Step-Up", "Glute Bridge")),
    ("leg curl", ("Nordic Curl", "Glute Bridge")),
    ("leg extension", ("Sissy Squat", "Dumbbell Step-Up")),
    ("pulldown", ("Resistance Band Pulldown", "Dumbbell Row")),
    ("cable row", ("Dumbbell Row",)),
    ("seated row", ("Dumbbell Row",)),
    ("cable fly", ("Dumbbell Fly",)),
    ("pec deck", ("Dumbbell Fly",)),
    ("pushdown", ("Overhead Dumbbell Tricep Extension",)),
    ("face pull", ("Band Face Pull", "Dumbbell Rear Delt Fly")),
    ("cable lateral raise", ("Dumbbell Lateral Raise",)),
    ("cable curl", ("Dumbbell Curl",)),
    ("chest press", ("Dumbbell Floor Press", "Push-Up")),
    ("bench press", ("Dumbbell Bench Press", "Push-Up")),
    ("barbell row", ("Dumbbell Row",)),
    ("bent over row", ("Dumbbell Row",)),
    ("hack squat", ("Goblet Squat", "Dumbbell Split Squat")),
    ("squat", ("Goblet Squat", "Dumbbell Split Squat", "Bodyweight Squat")),
    ("romanian deadlift", ("Dumbbell Romanian Deadlift", "Single-Leg Romanian Deadlift")),
    ("deadlift", ("Dumbbell Romanian Deadlift", "Glute Bridge")),
    ("good morning", ("Dumbbell Romanian Deadlift", "Glute Bridge")),
    ("overhead press", ("Dumbbell Shoulder Press", "Pike Push-Up")),
    ("shoulder press", ("Dumbbell Shoulder Press", "Pike Push-Up")),
    ("landmine", ("Dumbbell Shoulder Press",)),
    ("pull up", ("Inverted Row", "Resistance Band Pulldown")),
    ("chin up", ("Inverted Row", "Resistance Band Pulldown")),
    ("muscle up", ("Inverted Row",)),
    ("clean", ("Dumbbell Hang Clean",)),
    ("snatch", ("Dumbbell Snatch",)),
    ("jerk", ("Dumbbell Push Press",)),
    ("ball slam", ("Burpee", "Jump Squat")),
    ("wall ball", ("Dumbbell Thruster",)),
    ("med ball", ("Explosive Push-Up", "Jump Squat")),
    ("medicine ball", ("Explosive Push-Up", "Jump Squat")),
    ("bike", ("Shuttle Run Intervals", "Burpee Intervals")),
    ("rower", ("Burpee Intervals", "Shuttle Run Intervals")),
    ("treadmill", ("Shuttle Run Intervals",)),
    ("assault", ("Burpee Intervals",)),
    ("ski erg", ("Mountain Climber Intervals",)),
)

# Implement words that can be swapped for a dumbbell in place.
IMPLEMENT_WORDS_RE = re.compile(r"\b(?:smith machine|kettlebell|barbell|machine|cable)\b", re.IGNORECASE)


class EquipmentProfile:
    """Equipment tags available to one user."""

    def __init__(self, tags):
        self.tags = frozenset(tags)

    @classmethod
    def from_questionnaire(cls, questionnaire):
        equipment = questionnaire.equipment
        listed = [fold(item) for item in equipment.available_equipment]
        home_like = equipment.gym_type in HOME_GYM_TYPES and bool(listed)

        if equipment.gym_access and not home_like:
            tags = set(EQUIPMENT_TAGS)
        else:
            tags = {
                tag
                for tag, words in TAG_DETECTION.items()
                if any(fold(word) in item for item in listed for word in words)
            }

        limited = [fold(item) for item in equipment.limited_equipment]
        for tag, words in TAG_DETECTION.items():
            if any(fold(word) in item for item in limited for word in words):
                tags.discard(tag)
        return cls(tags)

    @property
    def full_gym(self):
        return self.tags >= set(EQUIPMENT_TAGS)

    def missing_requirement(self, name):
        """First unavailable equipment tag the exercise needs, or None."""
        if contains_keyword(name, ADAPTED_MARKERS):
            return None
        for tag, words in EQUIPMENT_REQUIREMENTS.items():
            if tag not in self.tags and contains_keyword(name, words):
                return tag
        return None

    def is_available(self, name):
        return self.missing_requirement(name) is None

    def adapt(self, name, allowed=None):
        """
        Return an equipment-appropriate version of an exercise name.

        The name is returned unchanged when everything it needs is available.
        Otherwise the first allowed and available swap is returned, or None
        when no safe swap exists.
        """
        if self.is_available(name):
            return name

        candidates = []
        keyword = first_match(name, [rule for rule, _ in EQUIPMENT_SWAPS])
        if keyword is not None:
            candidates.extend(dict(EQUIPMENT_SWAPS)[keyword])
        if IMPLEMENT_WORDS_RE.search(name):
            candidates.append(" ".join(IMPLEMENT_WORDS_RE.sub("Dumbbell", name).split()))

        for candidate in candidates:
            if allowed is not None and not allowed(candidate):
                continue
            if self.is_available(candidate):
                return candidate
        return None


# ---------------------------------------------------------------------------
# Injection tables
# ---------------------------------------------------------------------------
MANDATORY_GOALS = ("strength", "muscle_building")

# (exercise, presence keywords, day region)
CORE_LIFTS = (
    ("Back Squat", ("squat",), "lower"),
    ("Bench Press", ("bench press", "chest press", "floor press"), "push"),
    ("Deadlift", ("deadlift",), "lower"),
    ("Overhead Press", ("overhead press", "shoulder press"), "push"),
    ("Barbell Row", ("row",), "pull"),
    ("Pull-Up", ("pull up", "chin up"), "pull"),
)

# (target text keywords, exercise, day region)
TARGET_EXERCISES = (
    (("pull up", "chin up", "muscle up"), "Pull-Up", "pull"),
    (("bench",), "Bench Press", "push"),
    (("squat",), "Back Squat", "lower"),
    (("deadlift",), "Deadlift", "lower"),
    (("overhead", "ohp", "military press"), "Overhead Press", "push"),
    (("push up",), "Push-Up", "push"),
    (("dip",), "Dip", "push"),
    (("vertical jump", "jump", "dunk"), "Box Jump", "lower"),
    (("sprint", "speed"), "Sprint Intervals", "lower"),
    (("5k", "10k", "marathon", "run"), "Tempo Run Intervals", "lower"),
    (("glute",), "Hip Thrust", "lower"),
    (("arm", "bicep"), "Dumbbell Curl", "pull"),
    (("core", "abs", "six pack"), "Plank", "full"),
)

# (weak-point keywords, candidate exercises, day region)
WEAK_POINT_INJECTIONS = (
    (("chest", "pec"), ("Incline Dumbbell Press", "Push-Up"), "push"),
    (("back", "lat"), ("Chest-Supported Row", "Dumbbell Row"), "pull"),
    (("leg", "quad"), ("Bulgarian Split Squat", "Goblet Squat"), "lower"),
    (("glute", "posterior", "hamstring"), ("Hip Thrust", "Glute Bridge"), "lower"),
    (("shoulder", "delt"), ("Lateral Raise", "Dumbbell Lateral Raise"), "push"),
    (("tricep",), ("Overhead Dumbbell Tricep Extension", "Diamond Push-Up"), "push"),
    (("arm", "bicep"), ("Hammer Curl", "Dumbbell Curl"), "pull"),
    (("core", "abs"), ("Pallof Press", "Plank"), "full"),
)

REGION_KEYWORDS = MappingProxyType({
    "lower": ("lower", "leg", "quad", "glute", "hamstring", "posterior"),
    "push": ("push", "chest", "shoulder", "tricep", "upper"),
    "pull": ("pull", "back", "lat", "bicep", "upper"),
    "full": ("full", "total", "whole"),
})

# ---------------------------------------------------------------------------
# Sport and conditioning pools
# ---------------------------------------------------------------------------
# (label, minimum power exercises, minimum conditioning exercises)
SPORT_DAY_TEMPLATES = (
    ("Power + Strength", 1, 0),
    ("Conditioning / Engine", 0, 2),
    ("Mixed", 1, 1),
    ("Speed + Power", 2, 0),
    ("Aerobic Base", 0, 1),
)

POWER_POOL = (
    "Box Jump",
    "Broad Jump",
    "Medicine Ball Chest Throw",
    "Power Clean",
    "Jump Squat",
    "Lateral Bound",
)

CONDITIONING_POOL = (
    "Bike Sprint Intervals",
    "Rower Intervals",
    "Sled Push",
    "Shuttle Run Intervals",
    "Burpee Intervals",
    "Skipping Rope Intervals",
    "Mountain Climber Intervals",
)

MIXED_POOL = (
    "Kettlebell Swing Intervals",
    "Dumbbell Complex Circuit",
    "Battle Rope Intervals",
)

CARDIO_FINISHER_COUNTS = MappingProxyType({"none": 0, "minimal": 1, "moderate": 2})

# ---------------------------------------------------------------------------
# Diversification and fill
# ---------------------------------------------------------------------------
MOVEMENT_VARIATIONS = MappingProxyType({
    "squat": ("Front Squat", "Goblet Squat", "Bulgarian Split Squat", "Box Squat", "Bodyweight Squat"),
    "deadlift": (
        "Romanian Deadlift",
        "Trap Bar Deadlift",
        "Dumbbell Romanian Deadlift",
        "Single-Leg Romanian Deadlift",
    ),
    "bench": ("Incline Bench Press", "Dumbbell Bench Press", "Close-Grip Bench Press", "Push-Up"),
    "row": ("Chest-Supported Row", "Dumbbell Row", "Seated Cable Row", "Inverted Row"),
    "overhead": ("Dumbbell Shoulder Press", "Landmine Press", "Arnold Press", "Pike Push-Up"),
    "lunge": ("Reverse Lunge", "Walking Lunge", "Lateral Lunge", "Dumbbell Step-Up"),
    "carry": ("Farmer Carry", "Suitcase Carry", "Front Rack Carry"),
    "pull up": ("Chin-Up", "Lat Pulldown", "Inverted Row"),
})

GYM_ACCESSORY_POOLS = MappingProxyType({
    "upper": ("Incline Dumbbell Press", "Seated Cable Row", "Face Pull", "Lateral Raise", "Tricep Pushdown", "Hammer Curl", "Rear Delt Fly"),
    "lower": ("Hip Thrust", "Leg Curl", "Leg Extension", "Bulgarian Split Squat", "Calf Raise", "Glute Bridge", "Back Extension"),
    "push": ("Incline Dumbbell Press", "Dumbbell Shoulder Press", "Lateral Raise", "Cable Fly", "Tricep Pushdown", "Push-Up"),
    "pull": ("Seated Cable Row", "Lat Pulldown", "Rear Delt Fly", "Face Pull", "Hammer Curl", "Back Extension"),
    "full": ("Goblet Squat", "Dumbbell Bench Press", "Lat Pulldown", "Romanian Deadlift", "Plank", "Farmer Carry"),
    "core": ("Plank", "Dead Bug", "Pallof Press", "Side Plank", "Bird Dog", "Hollow Hold"),
})

HOME_ACCESSORY_POOLS = MappingProxyType({
    "upper": ("Push-Up", "Dumbbell Row", "Pike Push-Up", "Resistance Band Pulldown", "Dumbbell Curl", "Band Face Pull", "Overhead Dumbbell Tricep Extension"),
    "lower": ("Dumbbell Split Squat", "Glute Bridge", "Dumbbell Step-Up", "Single-Leg Romanian Deadlift", "Calf Raise", "Nordic Curl"),
    "push": ("Push-Up", "Pike Push-Up", "Dumbbell Floor Press", "Dumbbell Lateral Raise", "Diamond Push-Up", "Overhead Dumbbell Tricep Extension"),
    "pull": ("Dumbbell Row", "Resistance Band Pulldown", "Band Face Pull", "Dumbbell Curl", "Dumbbell Rear Delt Fly", "Superman Hold"),
    "full": ("Goblet Squat", "Push-Up", "Dumbbell Row", "Dumbbell Romanian Deadlift", "Plank", "Farmer Carry"),
    "core": ("Plank", "Dead Bug", "Pallof Press", "Side Plank", "Bird Dog", "Hollow Hold"),
})


def focus_category(focus):
    """Map a free-text day focus onto an accessory pool key."""
    text = fold(focus)
    if "upper" in text:
        return "upper"
    if "lower" in text or "leg" in text:
        return "lower"
    if "push" in text:
        return "push"
    if "pull" in text or "back" in text:
        return "pull"
    return "full"


def accessory_pools(full_gym):
    return GYM_ACCESSORY_POOLS if full_gym else HOME_ACCESSORY_POOLS


def same_exercise(a, b):
    return canonical_key(a) == canonical_key(b)
