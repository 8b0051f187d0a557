# profile_engine/assessment/careers.py
# Ranks career families against a profile's colour model and components.

import logging
from typing import Dict, Any, List, Optional

from ..constants import NEUTRAL_SCORE
from .aggregator import round_half_up
from .definitions import (
    CAREER_COLOR_WEIGHT,
    CAREER_COMPONENT_WEIGHT,
    CAREER_SECONDARY_COLOR_CREDIT,
)
from .models import CareerFamily

logger = logging.getLogger(__name__)


def component_fit_match(target: str, value: float) -> float:
    """Share of a component's points earned for a fit target ('high', 'medium', ...)."""
    if target == "high":
        return 1 if value >= 70 else 0.5 if value >= 50 else 0
    if target == "medium":
        return 1 if 33 <= value <= 66 else 0.5
    if target == "low":
        return 1 if value <= 30 else 0.5 if value <= 50 else 0
    if target == "medium-high":
        return 1 if value >= 60 else 0.6 if value >= 40 else 0
    if target == "low-medium":
        return 1 if value <= 40 else 0.6 if value <= 60 else 0
    return 0


def _color_points(family: CareerFamily, birkman_color: Dict[str, Any]) -> float:
    if birkman_color.get("primary") in family.birkman_alignment:
        return CAREER_COLOR_WEIGHT
    if birkman_color.get("secondary") in family.birkman_alignment:
        return CAREER_COLOR_WEIGHT * CAREER_SECONDARY_COLOR_CREDIT
    spectrum = birkman_color.get("spectrum") or {}
    overlap = sum(spectrum.get(color) or 0 for color in family.birkman_alignment)
    return overlap / 100 * CAREER_COLOR_WEIGHT


def score_career_family(family: CareerFamily, birkman_color: Dict[str, Any], components: Dict[str, Any]) -> int:
    score = _color_points(family, birkman_color)
    max_score = float(CAREER_COLOR_WEIGHT)

    if family.component_fit:
        per_component = CAREER_COMPONENT_WEIGHT / len(family.component_fit)
        for component, target in family.component_fit.items():
            value = components.get(component)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                value = NEUTRAL_SCORE
            max_score += per_component
            score += component_fit_match(target, value) * per_component

    return round_half_up(score / max_score * 100)


def rank_career_families(
    birkman_color: Any,
    components: Any,
    families: List[CareerFamily],
    log: Optional[logging.Logger] = None,
) -> List[Dict[str, Any]]:
    """
    Every family with an `alignmentScore` in 0-100, best first.
    Returns an empty list when the colour model or components are unusable.
    """
    log = log or logger
    if not isinstance(birkman_color, dict) or not birkman_color.get("primary"):
        return []
    if not isinstance(birkman_color.get("spectrum"), dict) or not isinstance(components, dict):
        return []

    ranked = [
        {**family.model_dump(), "alignmentScore": score_career_family(family, birkman_color, components)}
        for family in families
    ]
    ranked.sort(key=lambda entry: entry["alignmentScore"], reverse=True)
    if ranked:
        log.debug(
            f"Top career family: {ranked[0]['id']} ({ranked[0]['alignmentScore']})",
            extra={"category": "birkman"},
        )
    return ranked
