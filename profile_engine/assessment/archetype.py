# profile_engine/assessment/archetype.py
# Matches a dimension score map against the archetype catalog.

import logging
from typing import Dict, Any, List, Optional

from ..constants import CORE_DIMENSIONS, LogCategory
from .models import ArchetypeDefinition

logger = logging.getLogger(__name__)

EXACT_MATCH_CONFIDENCE = 85
PARTIAL_MATCH_BASE_CONFIDENCE = 60
PARTIAL_MATCH_STEP = 10
DEFAULT_MATCH_CONFIDENCE = 40


class ArchetypeCatalogEmptyError(ValueError):
    """Raised when the resolver is given no archetypes to choose from."""
    pass


def rank_dimensions(scores: Dict[str, Any]) -> List[str]:
    """
    Core dimensions ordered by their usual score, highest first.
    Equal scores keep core-dimension catalog order (sorted() is stable).
    """
    usual = {dim: scores.get(f"{dim}_usual") or 0 for dim in CORE_DIMENSIONS}
    return sorted(CORE_DIMENSIONS, key=lambda dim: usual[dim], reverse=True)


def determine_archetype(
    scores: Dict[str, Any],
    archetypes: List[ArchetypeDefinition],
    log: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Resolves the archetype for a score map.

    1. An archetype whose primary dimensions equal the top-2 set: confidence 85.
    2. Otherwise the archetype sharing most primary dimensions with the top 3:
       confidence 60 + 10 per shared dimension, flagged `isPartialMatch`.
       The earliest catalog entry wins equal overlaps.
    3. Otherwise the first catalog entry: confidence 40, flagged `isDefault`.

    Returns the catalog entry as a dict plus `dimensions` (the usual scores,
    missing read as 0) and `confidence`.
    """
    log = log or logger
    if not archetypes:
        raise ArchetypeCatalogEmptyError("Cannot determine an archetype from an empty catalog")

    dimensions = {dim: scores.get(f"{dim}_usual") or 0 for dim in CORE_DIMENSIONS}
    ranked = rank_dimensions(scores)
    top_two = set(ranked[:2])
    top_three = ranked[:3]

    for archetype in archetypes:
        if set(archetype.primaryDimensions) == top_two:
            log.debug(
                f"Exact archetype match: {archetype.id}",
                extra={"category": LogCategory.SCORING.value},
            )
            return {**archetype.model_dump(), "dimensions": dimensions, "confidence": EXACT_MATCH_CONFIDENCE}

    best_match = None
    highest_overlap = 0
    for archetype in archetypes:
        overlap = len([dim for dim in archetype.primaryDimensions if dim in top_three])
        if overlap > highest_overlap:
            highest_overlap = overlap
            best_match = archetype

    if best_match is not None:
        return {
            **best_match.model_dump(),
            "dimensions": dimensions,
            "confidence": PARTIAL_MATCH_BASE_CONFIDENCE + highest_overlap * PARTIAL_MATCH_STEP,
            "isPartialMatch": True,
        }

    log.info(
        f"No archetype overlaps top dimensions {top_three}; using default",
        extra={"category": LogCategory.SCORING.value},
    )
    return {
        **archetypes[0].model_dump(),
        "dimensions": dimensions,
        "confidence": DEFAULT_MATCH_CONFIDENCE,
        "isDefault": True,
    }
