"""
CFOS knowledge-base loading and relevance selection.

The knowledge base is a list of keyword-tagged text blocks. For a given
questionnaire the blocks are ranked by keyword overlap with the user's
answers and packed under a character budget so the prompt stays bounded.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Tuple

from workout_planner.config import load_data_file
from workout_planner.context_enrichment import humanize
from workout_planner.keyword_matcher import fold

logger = logging.getLogger(__name__)

PLACEHOLDER_MARKERS = ("TODO: Paste", "Leave this section empty")
MIN_TRUNCATED_CHARS = 200
BLOCK_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class KnowledgeBlock:
    id: str
    title: str
    text: str
    keywords: Tuple[str, ...] = ()
    core: bool = False

    def render(self):
        return f"### {self.title}\n{self.text}"


def is_placeholder(text):
    """True for empty or stub sections that carry no real content."""
    stripped = (text or "").strip()
    if not stripped:
        return True
    return any(marker in stripped for marker in PLACEHOLDER_MARKERS)


@functools.lru_cache(maxsize=1)
def load_knowledge_blocks():
    """Read the bundled knowledge blocks once. Returns a tuple."""
    raw = load_data_file("knowledge_blocks.yaml").get("blocks", []) or []
    blocks = []
    for record in raw:
        blocks.append(
            KnowledgeBlock(
                id=record["id"],
                title=record.get("title", record["id"]),
                text=" ".join((record.get("text") or "").split()),
                keywords=tuple(record.get("keywords") or ()),
                core=bool(record.get("core", False)),
            )
        )
    logger.debug("Loaded %d knowledge blocks", len(blocks))
    return tuple(blocks)


def get_training_knowledge(blocks=None):
    """Full combined knowledge text, or "" if every block is a placeholder."""
    blocks = load_knowledge_blocks() if blocks is None else blocks
    usable = [block for block in blocks if not is_placeholder(block.text)]
    return BLOCK_SEPARATOR.join(block.render() for block in usable)


def questionnaire_context_terms(questionnaire):
    """Collect the free-text and enum answers that knowledge keywords are scored against."""
    goals = questionnaire.goals
    experience = questionnaire.experience
    equipment = questionnaire.equipment
    injuries = questionnaire.injuries
    recovery = questionnaire.recovery
    nutrition = questionnaire.nutrition
    preferences = questionnaire.preferences

    terms = [
        humanize(goals.primary_goal),
        humanize(goals.secondary_goal),
        humanize(experience.current_level),
        humanize(experience.training_consistency),
        f"{recovery.recovery_capacity} recovery",
        f"{humanize(recovery.stress_level)} stress",
        f"{recovery.sleep_quality} sleep",
        f"{preferences.cardio_preference} cardio",
        humanize(nutrition.nutrition_approach),
        humanize(preferences.preferred_split),
        equipment.gym_type or "",
        experience.recent_training,
        questionnaire.constraints.other_notes,
        questionnaire.constraints.time_constraints,
    ]
    if goals.sport_details and goals.sport_details.sport_name:
        terms.append(goals.sport_details.sport_name)
    if not equipment.gym_access:
        terms.append("no gym")
    if equipment.limited_equipment:
        terms.append("limited equipment")
    if injuries.current_injuries or injuries.pain_areas:
        terms.append("injury")

    terms.extend(goals.specific_targets)
    terms.extend(experience.weak_points)
    terms.extend(equipment.available_equipment)
    terms.extend(injury.area for injury in injuries.current_injuries)
    terms.extend(injuries.pain_areas)
    terms.extend(injuries.movement_restrictions)
    terms.extend(nutrition.dietary_restrictions)
    terms.extend(nutrition.supplement_use)
    return " | ".join(fold(term) for term in terms if term)


def _score(block, context):
    return sum(1 for keyword in block.keywords if fold(keyword) and fold(keyword) in context)


def select_knowledge(questionnaire=None, char_budget=6000, blocks=None):
    """
    Select the most relevant knowledge under a character budget.

    Core blocks are always taken first; the rest are ranked by keyword
    overlap with the questionnaire (ties keep file order). Blocks with no
    overlap are skipped. When the next block does not fit, it is cut to the
    remaining space if at least MIN_TRUNCATED_CHARS remain, then selection
    stops.

    Args:
        questionnaire: Questionnaire, or None for the full combined text
        char_budget: Maximum characters of knowledge text
        blocks: Optional block sequence (defaults to the bundled file)

    Returns:
        Knowledge text ("" when no usable block exists)
    """
    blocks = load_knowledge_blocks() if blocks is None else blocks
    usable = [block for block in blocks if not is_placeholder(block.text)]
    if not usable:
        return ""
    if questionnaire is None:
        return get_training_knowledge(usable)

    context = questionnaire_context_terms(questionnaire)
    ranked = []
    for position, block in enumerate(usable):
        if block.core:
            continue
        score = _score(block, context)
        if score > 0:
            ranked.append((score, position, block))
    ranked.sort(key=lambda item: (-item[0], item[1]))
    ordered = [block for block in usable if block.core] + [block for _, _, block in ranked]

    parts = []
    used = 0
    for block in ordered:
        rendered = block.render()
        cost = len(rendered) + (len(BLOCK_SEPARATOR) if parts else 0)
        if used + cost <= char_budget:
            parts.append(rendered)
            used += cost
            continue

        remaining = char_budget - used - (len(BLOCK_SEPARATOR) if parts else 0)
        if remaining >= MIN_TRUNCATED_CHARS:
            parts.append(rendered[: remaining - 3].rstrip() + "...")
        break

    logger.debug("Selected %d knowledge blocks (%d chars)", len(parts), used)
    return BLOCK_SEPARATOR.join(parts)
