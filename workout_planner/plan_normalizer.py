"""
Deterministic normalization of generated workout plans.

The model's JSON is rewritten in a fixed sequence of passes so that hard
rules hold regardless of what the model produced: day count, exercise caps,
dislikes and injury restrictions, equipment, mandatory lifts, favourites,
targets, weak points, sport and cardio work, movement diversity, ordering
and the set/rep/rest prescription.

Running the normalizer on its own output changes nothing further.
"""

import copy
import logging
import re

from workout_planner.context_enrichment import format_number, humanize, synthesize_recovery_profile
from workout_planner.exercise_catalog import (
    CARDIO_FINISHER_COUNTS,
    CONDITIONING_POOL,
    CORE_LIFTS,
    MANDATORY_GOALS,
    MIXED_POOL,
    MOVEMENT_VARIATIONS,
    POWER_POOL,
    REGION_KEYWORDS,
    SPORT_DAY_TEMPLATES,
    TARGET_EXERCISES,
    WEAK_POINT_INJECTIONS,
    EquipmentProfile,
    accessory_pools,
    focus_category,
    is_compound,
    is_conditioning,
    is_power,
    is_time_based,
    movement_base,
    restricted_keywords,
    same_exercise,
    weak_point_movement_keywords,
)
from workout_planner.keyword_matcher import (
    KeywordMatcher,
    canonical_key,
    contains_keyword,
    contains_word,
    fold,
    matching_keywords,
    normalize_list,
)
from workout_planner.models import GeneratedPlan, plan_to_dict
from workout_planner.nutrition_integration import generate_nutrition_strategy, is_plant_based
from workout_planner.program_design import (
    build_program_design,
    preferred_split_label,
    rep_rest_for_goal,
    sets_for_level,
)
from workout_planner.sport_specific import detect_sport, is_sport_focused, sport_label

logger = logging.getLogger(__name__)

MIN_PROGRESSION_NOTE_CHARS = 20
DIGIT_RE = re.compile(r"\d")

DEFAULT_NOTES = "Controlled 2-second lowering phase; stop 1-2 reps short of failure."
STRENGTH_PROGRESSION = (
    "Add 1-2 reps per set each week; at the top of the range add 2.5-5% load. "
    "Deload 10% after 2 stalled sessions."
)
POWER_PROGRESSION = (
    "Add 1 set per week up to 5 sets of 3-5 fast reps; drop to 2 sets every 4th week."
)
CONDITIONING_PROGRESSION = (
    "Add 5 seconds per interval each week up to 45s, then add 1 round; "
    "cut rounds by 30% in deload weeks."
)

FILLER_INTENT = "Accessory volume that rounds out the session."
FILLER_RATIONALE = "Balances the main lifts with direct work so weekly volume stays even across muscle groups."

# (region, name keywords) checked in order
NAME_REGIONS = (
    ("lower", ("squat", "deadlift", "lunge", "leg", "hip", "glute", "calf", "step up", "hamstring")),
    ("pull", ("row", "pull", "chin", "curl", "lat", "shrug")),
    ("push", ("press", "bench", "push", "dip", "fly", "raise", "tricep")),
)

FOOD_PLANS = {
    "plant": {
        "breakfast": "tofu scramble with oats and berries",
        "lunch": "tofu and lentil rice bowl with vegetables",
        "dinner": "tempeh stir-fry with rice and greens",
        "snack": "soy yogurt with nuts",
    },
    "vegetarian": {
        "breakfast": "eggs on wholegrain toast with fruit",
        "lunch": "egg and bean rice bowl with vegetables",
        "dinner": "bean chilli with potatoes and salad",
        "snack": "Greek yogurt with honey",
    },
    "default": {
        "breakfast": "Greek yogurt with oats and berries",
        "lunch": "chicken rice bowl with vegetables",
        "dinner": "salmon or lean beef with potatoes and greens",
        "snack": "protein shake and a banana",
    },
}


def region_for_name(name):
    for region, keywords in NAME_REGIONS:
        if contains_keyword(name, keywords):
            return region
    return "full"


def display_name(value):
    """Title-case free text that arrived all lower case."""
    return value if value != value.lower() else value.title()


def append_if_missing(text, sentence, keywords=()):
    """Append sentence unless it, or every keyword, is already in text."""
    folded = fold(text)
    if fold(sentence) in folded:
        return text
    if keywords and all(fold(k) in folded for k in keywords):
        return text
    return f"{text.rstrip()} {sentence}".strip()


class PlanNormalizer:
    """Applies every normalization pass for one questionnaire."""

    def __init__(self, questionnaire):
        q = questionnaire
        self.questionnaire = q
        self.days_per_week = q.availability.days_per_week
        self.max_exercises = q.constraints.max_exercises_per_session
        self.goal = q.goals.primary_goal
        self.level = q.experience.current_level

        self.disliked = KeywordMatcher(q.preferences.disliked_exercises)
        self.restricted = restricted_keywords(q)
        self.equipment = EquipmentProfile.from_questionnaire(q)
        self.favourites = normalize_list(q.preferences.favourite_exercises)
        self.mandatory = self.goal in MANDATORY_GOALS
        self.sport_focused = is_sport_focused(q)
        self.design = build_program_design(q)
        self.weak_keywords = weak_point_movement_keywords(q.experience.weak_points)

        targets_text = " | ".join(q.goals.specific_targets)
        self.targets = [
            (exercise, region)
            for keywords, exercise, region in TARGET_EXERCISES
            if contains_keyword(targets_text, keywords)
        ]

        self.weak_point_injections = []
        for weak_point in q.experience.weak_points:
            for keywords, candidates, region in WEAK_POINT_INJECTIONS:
                if contains_keyword(weak_point, keywords):
                    self.weak_point_injections.append((weak_point, candidates, region))
                    break

        self.core_keywords = [k for _, keywords, _ in CORE_LIFTS for k in keywords] if self.mandatory else []
        self.protected_names = [name for name, _ in self.targets]
        for _, candidates, _ in self.weak_point_injections:
            self.protected_names.extend(candidates)
        self.protected_names.extend(
            adapted for adapted in (self.equipment.adapt(n) for n in list(self.protected_names)) if adapted
        )

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def allowed(self, name):
        return not self.disliked.matches(name) and not self.restricted.matches(name)

    def resolve(self, name):
        """Allowed, equipment-appropriate version of name, or None."""
        if not self.allowed(name):
            return None
        return self.equipment.adapt(name, self.allowed)

    def is_favourite(self, name):
        return contains_keyword(name, self.favourites)

    def is_protected(self, name):
        if self.is_favourite(name) or is_power(name) or is_conditioning(name):
            return True
        if self.core_keywords and contains_word(name, self.core_keywords):
            return True
        return any(same_exercise(name, protected) for protected in self.protected_names)

    def keep_rank(self, name):
        """0 for favourites, targets, weak points and mandatory lifts; 1 for power and conditioning; 2 otherwise."""
        if self.is_favourite(name):
            return 0
        if self.core_keywords and contains_word(name, self.core_keywords):
            return 0
        if any(same_exercise(name, protected) for protected in self.protected_names):
            return 0
        if is_power(name) or is_conditioning(name):
            return 1
        return 2

    @staticmethod
    def _names(plan):
        return [exercise["name"] for day in plan["days"] for exercise in day["exercises"]]

    def _used_keys(self, plan):
        return {canonical_key(name) for name in self._names(plan)}

    # ------------------------------------------------------------------
    # Exercise construction and insertion
    # ------------------------------------------------------------------
    def _exercise(self, name, intent, rationale, kind="strength"):
        if kind == "power":
            sets, reps, rest = 3, "3-5", "2 minutes"
            notes = "Maximal intent on every rep; end the set when speed drops."
            progression = POWER_PROGRESSION
        elif kind == "conditioning":
            sets, reps, rest = 4, "30s", "60 seconds"
            notes = "Hard but repeatable pace; keep every interval the same quality."
            progression = CONDITIONING_PROGRESSION
        else:
            sets, reps, rest = 3, "8-12", "90 seconds"
            notes = DEFAULT_NOTES
            progression = STRENGTH_PROGRESSION
        return {
            "name": name,
            "sets": sets,
            "reps": reps,
            "rest": rest,
            "intent": intent,
            "rationale": rationale,
            "notes": notes,
            "substitutions": [],
            "progressionNote": progression,
        }

    def _candidate_days(self, days, region):
        def label(day):
            return f"{day['name']} {day['focus']}"

        ordered = [d for d in days if contains_keyword(label(d), REGION_KEYWORDS.get(region, ()))]
        ordered += [d for d in days if contains_keyword(label(d), REGION_KEYWORDS["full"])]
        indexed = sorted(enumerate(days), key=lambda item: (len(item[1]["exercises"]), item[0]))
        ordered += [d for _, d in indexed]

        unique = []
        for day in ordered:
            if not any(day is seen for seen in unique):
                unique.append(day)
        return unique

    def _place(self, day, exercise):
        """Append to day, or replace its last unprotected exercise when full."""
        exercises = day["exercises"]
        if any(same_exercise(existing["name"], exercise["name"]) for existing in exercises):
            return False
        if self.max_exercises is None or len(exercises) < self.max_exercises:
            exercises.append(exercise)
            return True
        for index in range(len(exercises) - 1, -1, -1):
            if not self.is_protected(exercises[index]["name"]):
                logger.debug("Replacing %s with %s", exercises[index]["name"], exercise["name"])
                exercises[index] = exercise
                return True
        return False

    def _inject(self, plan, exercise, region):
        for day in self._candidate_days(plan["days"], region):
            if self._place(day, exercise):
                return True
        logger.debug("No room for %s", exercise["name"])
        return False

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------
    def truncate_days(self, plan):
        plan["days"] = plan["days"][: self.days_per_week]
        for index, day in enumerate(plan["days"], start=1):
            day["dayNumber"] = index

    def remove_excluded(self, plan):
        for day in plan["days"]:
            kept = []
            for exercise in day["exercises"]:
                name = self.resolve(exercise["name"])
                if name is None:
                    logger.debug("Removed %s", exercise["name"])
                    continue
                exercise["name"] = name
                exercise["substitutions"] = [
                    sub
                    for sub in exercise.get("substitutions", [])
                    if self.allowed(sub) and self.equipment.is_available(sub)
                ]
                kept.append(exercise)
            day["exercises"] = kept

    def _variation(self, plan, name):
        base = movement_base(name)
        if base is None:
            return None
        used = self._used_keys(plan)
        protected = self.is_protected(name)
        for variation in MOVEMENT_VARIATIONS.get(base, ()):
            if canonical_key(variation) in used:
                continue
            if not self.allowed(variation) or not self.equipment.is_available(variation):
                continue
            # A protected slot must stay protected or later injections could claim it.
            if protected and not self.is_protected(variation):
                continue
            return variation
        return None

    def _rename(self, exercise, variation):
        logger.debug("Diversified repeated %s to %s", exercise["name"], variation)
        exercise["name"] = variation
        exercise["substitutions"] = [s for s in exercise.get("substitutions", []) if not same_exercise(s, variation)]

    def dedupe_days(self, plan):
        """Vary or drop an exercise that repeats earlier in the same day."""
        for day in plan["days"]:
            kept = []
            for exercise in day["exercises"]:
                name = exercise["name"]
                if not any(canonical_key(e["name"]) == canonical_key(name) for e in kept):
                    kept.append(exercise)
                    continue
                if self.is_favourite(name):
                    kept.append(exercise)
                    continue
                variation = self._variation(plan, name)
                if variation is None:
                    logger.debug("Dropped repeated %s from %s", name, day["name"])
                    continue
                self._rename(exercise, variation)
                kept.append(exercise)
            day["exercises"] = kept

    def inject_core_lifts(self, plan):
        if not self.mandatory:
            return
        goal = humanize(self.goal)
        for lift, keywords, region in CORE_LIFTS:
            name = self.resolve(lift)
            if name is None:
                continue
            names = self._names(plan)
            if any(contains_word(n, keywords) or same_exercise(n, name) for n in names):
                continue
            self._inject(
                plan,
                self._exercise(
                    name,
                    f"Primary {region} strength lift of the week.",
                    f"A {goal} goal is built on a progressively loaded {lift.lower()} pattern.",
                ),
                region,
            )

    def inject_targets(self, plan):
        targets = ", ".join(self.questionnaire.goals.specific_targets)
        for exercise, region in self.targets:
            name = self.resolve(exercise)
            if name is None:
                continue
            names = self._names(plan)
            if any(contains_keyword(n, [exercise]) or same_exercise(n, name) for n in names):
                continue
            kind = "power" if is_power(name) else "conditioning" if is_conditioning(name) else "strength"
            self._inject(
                plan,
                self._exercise(
                    name,
                    f"Direct practice of the {name.lower()} pattern.",
                    f"Trains your stated target ({targets}) specifically.",
                    kind,
                ),
                region,
            )

    def _favourite_present(self, names, favourite):
        for name in names:
            if canonical_key(name) == canonical_key(favourite):
                return True
            if matching_keywords(name, self.favourites) == [favourite]:
                return True
        return False

    def inject_favourites(self, plan):
        for favourite in self.favourites:
            name = display_name(favourite)
            if not self.allowed(name) or not self.equipment.is_available(name):
                continue
            if self._favourite_present(self._names(plan), favourite):
                continue
            self._inject(
                plan,
                self._exercise(
                    name,
                    f"Favourite movement kept as its own {name.lower()} slot.",
                    "You enjoy this exercise, and enjoyable training is the training that gets done.",
                    "power" if is_power(name) else "strength",
                ),
                region_for_name(name),
            )

    def _pool_candidates(self, pool, used_keys):
        resolved = [name for name in (self.resolve(n) for n in pool) if name]
        resolved = list(dict.fromkeys(resolved))
        fresh = [n for n in resolved if canonical_key(n) not in used_keys]
        # Names with a movement base are never reused across days; diversify would rename them.
        return fresh + [n for n in resolved if n not in fresh and movement_base(n) is None]

    def apply_sport_structure(self, plan):
        if not self.sport_focused:
            return
        relabel = not self.questionnaire.preferences.preferred_split

        for index, day in enumerate(plan["days"]):
            label, min_power, min_conditioning = SPORT_DAY_TEMPLATES[index % len(SPORT_DAY_TEMPLATES)]
            if relabel and not day["focus"].startswith(label):
                day["focus"] = f"{label}: {day['focus']}"

            for needed, predicate, pool, kind, intent in (
                (min_power, is_power, POWER_POOL, "power", "Explosive power for sport performance."),
                (
                    min_conditioning,
                    is_conditioning,
                    CONDITIONING_POOL + MIXED_POOL,
                    "conditioning",
                    "Sport conditioning to build repeat-effort capacity.",
                ),
            ):
                have = sum(1 for exercise in day["exercises"] if predicate(exercise["name"]))
                for name in self._pool_candidates(pool, self._used_keys(plan)):
                    if have >= needed:
                        break
                    if not predicate(name):
                        continue
                    exercise = self._exercise(
                        name,
                        intent,
                        f"A {label.lower()} day needs at least {needed} {kind} exercise(s).",
                        kind,
                    )
                    if self._place(day, exercise):
                        have += 1

    def inject_weak_points(self, plan):
        for weak_point, candidates, region in self.weak_point_injections:
            names = self._names(plan)
            resolved = [self.resolve(c) for c in candidates]
            if any(same_exercise(n, c) for n in names for c in list(candidates) + [r for r in resolved if r]):
                continue
            name = next((r for r in resolved if r), None)
            if name is None:
                continue
            self._inject(
                plan,
                self._exercise(
                    name,
                    f"Targeted {weak_point.lower()} volume.",
                    f"{weak_point} is a weak point you want to bring up.",
                ),
                region,
            )

    def inject_cardio_finishers(self, plan):
        preference = self.questionnaire.preferences.cardio_preference
        if preference == "extensive":
            desired = min(len(plan["days"]), 3)
        else:
            desired = CARDIO_FINISHER_COUNTS.get(preference, 0)

        covered = [
            any(is_conditioning(e["name"]) for e in day["exercises"]) for day in plan["days"]
        ]
        needed = desired - sum(covered)
        for day, has_conditioning in zip(plan["days"], covered):
            if needed <= 0:
                break
            if has_conditioning:
                continue
            for name in self._pool_candidates(CONDITIONING_POOL + MIXED_POOL, self._used_keys(plan)):
                exercise = self._exercise(
                    name,
                    "Conditioning finisher to build work capacity.",
                    f"Covers your {preference} cardio preference without a separate session.",
                    "conditioning",
                )
                if self._place(day, exercise):
                    needed -= 1
                    break

    def diversify(self, plan):
        seen = set()
        for day in plan["days"]:
            for exercise in day["exercises"]:
                name = exercise["name"]
                if movement_base(name) is None:
                    continue
                key = canonical_key(name)
                if key not in seen:
                    seen.add(key)
                    continue
                if self.is_favourite(name) or is_power(name) or is_conditioning(name):
                    continue

                variation = self._variation(plan, name)
                if variation is None:
                    continue
                self._rename(exercise, variation)
                seen.add(canonical_key(variation))

    def fill_days(self, plan):
        if self.max_exercises is None:
            return
        pools = accessory_pools(self.equipment.full_gym)

        for day in plan["days"]:
            if len(day["exercises"]) >= self.max_exercises:
                continue
            used = self._used_keys(plan)
            chain = list(pools[focus_category(day["focus"])]) + list(pools["core"]) + list(pools["full"])
            candidates = []
            for name in dict.fromkeys(chain):
                if not self.allowed(name) or not self.equipment.is_available(name):
                    continue
                if any(same_exercise(name, e["name"]) for e in day["exercises"]):
                    continue
                candidates.append(name)

            fresh = [n for n in candidates if canonical_key(n) not in used]
            reusable = [n for n in candidates if n not in fresh and movement_base(n) is None]
            for name in fresh + reusable:
                if len(day["exercises"]) >= self.max_exercises:
                    break
                filler = self._exercise(name, FILLER_INTENT, FILLER_RATIONALE)
                day["exercises"].append(filler)

    def truncate_exercises(self, plan):
        if self.max_exercises is None:
            return
        for day in plan["days"]:
            exercises = day["exercises"]
            if len(exercises) <= self.max_exercises:
                continue
            ranked = sorted(range(len(exercises)), key=lambda i: (self.keep_rank(exercises[i]["name"]), i))
            keep = sorted(ranked[: self.max_exercises])
            day["exercises"] = [exercises[i] for i in keep]

    # ------------------------------------------------------------------
    # Text rewrites
    # ------------------------------------------------------------------
    def nutrition_notes(self):
        q = self.questionnaire
        nutrition = q.nutrition
        strategy = generate_nutrition_strategy(
            self.goal,
            nutrition.nutrition_approach,
            nutrition.protein_intake,
            self.days_per_week,
            q.experience.current_body_weight,
        )
        restrictions = nutrition.dietary_restrictions
        if is_plant_based(restrictions):
            foods = FOOD_PLANS["plant"]
        elif any("vegetarian" in r.lower() for r in restrictions):
            foods = FOOD_PLANS["vegetarian"]
        else:
            foods = FOOD_PLANS["default"]

        text = (
            f"Nutrition approach: {humanize(nutrition.nutrition_approach)} "
            f"({humanize(nutrition.protein_intake)} protein intake). "
            f"Training days: {strategy.training_day_calories}. Rest days: {strategy.rest_day_calories}. "
            f"Protein {strategy.protein_target}; carbs {strategy.carb_target}; fat {strategy.fat_target}. "
            f"Sample day: breakfast - {foods['breakfast']}; lunch - {foods['lunch']}; "
            f"dinner - {foods['dinner']}; snack - {foods['snack']}."
        )
        if restrictions:
            text += f" Meals respect your dietary restrictions ({', '.join(restrictions)})."
        if nutrition.supplement_use:
            text += f" Keep your current supplements ({', '.join(nutrition.supplement_use)}) consistent."
        return text

    def recovery_notes(self):
        recovery = self.questionnaire.recovery
        profile = synthesize_recovery_profile(recovery, self.questionnaire.availability)
        text = (
            f"Recovery: {format_number(recovery.sleep_hours)}h sleep ({recovery.sleep_quality}), "
            f"stress {humanize(recovery.stress_level)}, recovery capacity {recovery.recovery_capacity}. "
            f"{profile.notes}"
        )
        if recovery.sleep_hours < 7:
            text += " Build toward 7-9 hours of sleep with a fixed bedtime."
        text += " Leave at least 48 hours before training the same muscle group hard again."
        return text

    def personalization_clauses(self):
        q = self.questionnaire
        clauses = [f"your {self.days_per_week}-day, {q.availability.session_duration}-minute schedule"]
        if self.favourites:
            clauses.append(f"your favourite {display_name(self.favourites[0]).lower()}")
        if q.experience.weak_points:
            clauses.append(f"extra {q.experience.weak_points[0].lower()} work")
        clauses.append(f"{q.preferences.cardio_preference} cardio")
        if self.equipment.full_gym:
            clauses.append("full gym access")
        elif q.equipment.gym_access:
            clauses.append("your available equipment")
        else:
            clauses.append("bodyweight and minimal equipment")
        return clauses[:3]

    def rewrite_overview(self, plan):
        goals = self.questionnaire.goals
        goal_sentence = f"Goal: {humanize(goals.primary_goal)} over {goals.timeframe}"
        if goals.specific_targets:
            goal_sentence += f", targeting {', '.join(goals.specific_targets)}"
        goal_sentence += "."
        overview = append_if_missing(
            plan["overview"], goal_sentence, (humanize(goals.primary_goal), goals.timeframe)
        )

        first, second, third = self.personalization_clauses()
        snippet = f"Personalised for {first}, {second} and {third}."
        plan["overview"] = append_if_missing(overview, snippet)

    def weekly_structure(self):
        preferred = preferred_split_label(self.questionnaire.preferences.preferred_split)
        if preferred:
            return preferred
        if self.sport_focused:
            label = sport_label(detect_sport(self.questionnaire))
            return f"{label} Hybrid ({self.days_per_week} days)"
        return self.design.split

    def progression_guidance(self):
        d = self.design
        return (
            f"{d.progression_model} Main lifts: {d.main_rep_range} reps, {d.rest_main} rest. "
            f"Accessories: {d.accessory_rep_range} reps, {d.rest_accessory} rest. "
            f"Weekly volume: {d.weekly_set_target}. {d.deload_guidance}"
        )

    def apply_day_labels(self, plan):
        labels = self.questionnaire.availability.preferred_days
        for day, label in zip(plan["days"], labels):
            label = label.strip().title()
            if label and not day["name"].startswith(label):
                day["name"] = f"{label} - {day['name']}"

    # ------------------------------------------------------------------
    # Ordering and prescription
    # ------------------------------------------------------------------
    def _tier(self, name):
        if is_compound(name) and contains_keyword(name, self.weak_keywords):
            return 0
        if is_compound(name) or is_power(name):
            return 1
        if is_conditioning(name):
            return 3
        return 2

    def reorder(self, plan):
        for day in plan["days"]:
            day["exercises"] = sorted(day["exercises"], key=lambda e: self._tier(e["name"]))

    def prescribe(self, plan):
        main_sets, accessory_sets = sets_for_level(self.level)
        main_reps, accessory_reps, rest_main, rest_accessory = rep_rest_for_goal(self.goal)

        for day in plan["days"]:
            for index, exercise in enumerate(day["exercises"]):
                adapted = self.resolve(exercise["name"])
                if adapted:
                    exercise["name"] = adapted
                name = exercise["name"]

                if not (is_power(name) or is_conditioning(name) or is_time_based(exercise["reps"])):
                    main = index < 2
                    exercise["sets"] = main_sets if main else accessory_sets
                    exercise["reps"] = main_reps if main else accessory_reps
                    exercise["rest"] = rest_main if main else rest_accessory

                self._polish(exercise)

    @staticmethod
    def _polish(exercise):
        note = (exercise.get("progressionNote") or "").strip()
        if len(note) < MIN_PROGRESSION_NOTE_CHARS or not DIGIT_RE.search(note):
            if is_conditioning(exercise["name"]) or is_time_based(exercise["reps"]):
                exercise["progressionNote"] = CONDITIONING_PROGRESSION
            elif is_power(exercise["name"]):
                exercise["progressionNote"] = POWER_PROGRESSION
            else:
                exercise["progressionNote"] = STRENGTH_PROGRESSION

        intent = (exercise.get("intent") or "").strip()
        rationale = (exercise.get("rationale") or "").strip()
        if not intent:
            exercise["intent"] = f"{exercise['name']} for this session's focus."
        if not rationale or rationale == exercise["intent"]:
            exercise["rationale"] = f"{exercise['name']} fits this day's focus and your current level."

    # ------------------------------------------------------------------
    def normalize(self, plan):
        """
        Run every pass over a copy of plan.

        Args:
            plan: GeneratedPlan or its camelCase dict form

        Returns:
            Normalized plan as a camelCase dict
        """
        if isinstance(plan, GeneratedPlan):
            data = plan_to_dict(plan)
        else:
            data = plan_to_dict(GeneratedPlan.model_validate(copy.deepcopy(plan)))

        self.truncate_days(data)
        self.remove_excluded(data)
        self.dedupe_days(data)
        # Injections replace within the cap, so nothing they add is trimmed later.
        self.truncate_exercises(data)
        self.inject_core_lifts(data)
        self.inject_targets(data)
        self.inject_favourites(data)
        self.apply_sport_structure(data)
        self.inject_weak_points(data)
        self.inject_cardio_finishers(data)
        self.diversify(data)
        self.fill_days(data)
        self.truncate_exercises(data)
        data["nutritionNotes"] = self.nutrition_notes()
        data["recoveryNotes"] = self.recovery_notes()
        self.rewrite_overview(data)
        data["weeklyStructure"] = self.weekly_structure()
        data["progressionGuidance"] = self.progression_guidance()
        self.apply_day_labels(data)
        self.reorder(data)
        self.prescribe(data)

        logger.debug(
            "Normalized plan: %d days, %d exercises",
            len(data["days"]),
            sum(len(day["exercises"]) for day in data["days"]),
        )
        return data


def normalize_plan(plan, questionnaire):
    """Normalize a generated plan for a questionnaire. Returns a new dict."""
    return PlanNormalizer(questionnaire).normalize(plan)
