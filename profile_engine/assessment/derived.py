# profile_engine/assessment/derived.py
# Derived models computed from dimension scores and upgrade answers:
# colour spectrum, nine behavioural components, internal states and the MBTI overlay.

import copy
import logging
from typing import Dict, Any, List, Optional

from ..constants import (
    COLOR_NAMES,
    COMPONENT_NAMES,
    INTERNAL_STATE_NAMES,
    INTERNAL_STATE_COLOR_WEIGHTS,
    NEUTRAL_SCORE,
    Context,
    SpecialDimension,
    LogCategory,
)
from .aggregator import round_half_up, clamp
from .definitions import (
    COLOR_WEIGHTS,
    NEUTRAL_BIRKMAN_COLOR,
    COMPONENT_SEEDS,
    COMPONENT_SEED_WEIGHT,
    MBTI_TYPES,
    MBTI_MIDPOINT,
    MBTI_MAX_CONFIDENCE,
    MBTI_DEFAULT_TYPE,
    MBTI_ALTERNATIVE_WINDOW,
)
from .models import Question, ColorDescription, ComponentDescription, MbtiProfile

logger = logging.getLogger(__name__)


def neutral_spectrum() -> Dict[str, int]:
    return {color: 25 for color in COLOR_NAMES}


def neutral_components() -> Dict[str, int]:
    return {name: NEUTRAL_SCORE for name in COMPONENT_NAMES}


def neutral_states() -> Dict[str, Dict[str, int]]:
    return {state: neutral_spectrum() for state in INTERNAL_STATE_NAMES}


def _usual_or_neutral(scores: Dict[str, Any], dimension: str) -> float:
    # Missing and zero scores both read as neutral.
    return scores.get(f"{dimension}_usual") or NEUTRAL_SCORE


def _answer_to_score(answer: float) -> float:
    return ((answer - 1) / 4) * 100


def _largest_color(spectrum: Dict[str, float]) -> str:
    # max() keeps the first maximal entry, so ties resolve in catalog order.
    return max(COLOR_NAMES, key=lambda color: spectrum[color])


def apply_remainder(spectrum: Dict[str, int]) -> Dict[str, int]:
    """Adds whatever is missing from (or over) 100 to the currently-largest colour."""
    diff = 100 - sum(spectrum[color] for color in COLOR_NAMES)
    if diff != 0:
        spectrum[_largest_color(spectrum)] += diff
    return spectrum


def normalize_spectrum(raw: Dict[str, float]) -> Dict[str, int]:
    """Rescales raw colour weights to integer percentages summing to exactly 100."""
    total = sum(raw[color] for color in COLOR_NAMES)
    return apply_remainder({color: round_half_up(raw[color] / total * 100) for color in COLOR_NAMES})


def calculate_color_spectrum(scores: Dict[str, Any]) -> Dict[str, int]:
    raw = {}
    for color in COLOR_NAMES:
        value = 0.0
        for dimension, weight, inverted in COLOR_WEIGHTS[color]:
            score = _usual_or_neutral(scores, dimension)
            value += weight * ((100 - score) if inverted else score)
        raw[color] = value
    return normalize_spectrum(raw)


def calculate_birkman_color(scores: Dict[str, Any], log: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """
    Primary and secondary colours plus the full spectrum.
    Falls back to the neutral Yellow/Blue model on malformed input.
    """
    log = log or logger
    try:
        spectrum = calculate_color_spectrum(scores)
        ranked = sorted(COLOR_NAMES, key=lambda color: spectrum[color], reverse=True)
        return {"primary": ranked[0], "secondary": ranked[1], "spectrum": spectrum}
    except Exception as e:
        log.error(
            f"Error calculating Birkman color: {e}",
            extra={"category": LogCategory.BIRKMAN.value, "field": "birkman_color"},
        )
        return copy.deepcopy(NEUTRAL_BIRKMAN_COLOR)


def _is_upgrade_question(question: Question, dimension: SpecialDimension) -> bool:
    return (
        question.dimension == dimension.value
        and question.context == Context.UPGRADE.value
        and bool(question.targets)
    )


def _seed_components(scores: Dict[str, Any]) -> Dict[str, float]:
    components = {}
    for name in COMPONENT_NAMES:
        dimension, offset, factor = COMPONENT_SEEDS[name]
        if dimension is None:
            components[name] = offset
        else:
            components[name] = offset + factor * _usual_or_neutral(scores, dimension)
    return components


def calculate_components(
    answers: Dict[int, int],
    questions: List[Question],
    scores: Dict[str, Any],
    log: Optional[logging.Logger] = None,
) -> Dict[str, int]:
    """
    Seeds the nine components from the usual dimension scores and refines each
    one with any answered component-focus question that targets it.
    """
    log = log or logger
    try:
        components = _seed_components(scores)
        for question in questions:
            if not _is_upgrade_question(question, SpecialDimension.COMPONENT_FOCUS):
                continue
            answer = answers.get(question.id)
            component = question.targets[0]
            if answer is None or component not in components:
                continue
            components[component] = round_half_up(
                components[component] * COMPONENT_SEED_WEIGHT
                + _answer_to_score(answer) * (1 - COMPONENT_SEED_WEIGHT)
            )
        return {name: int(clamp(round_half_up(value))) for name, value in components.items()}
    except Exception as e:
        log.error(
            f"Error calculating components: {e}",
            extra={"category": LogCategory.BIRKMAN.value, "field": "components"},
        )
        return neutral_components()


def calculate_components_from_upgrade_answers(
    upgrade_answers: Dict[int, int],
    upgrade_questions: List[Question],
    log: Optional[logging.Logger] = None,
) -> Dict[str, int]:
    """Components scored from upgrade answers alone; untargeted ones stay at 50."""
    log = log or logger
    try:
        components = neutral_components()
        for question in upgrade_questions:
            if not _is_upgrade_question(question, SpecialDimension.COMPONENT_FOCUS):
                continue
            answer = upgrade_answers.get(question.id)
            component = question.targets[0]
            if answer is None or component not in components:
                continue
            components[component] = round_half_up(_answer_to_score(answer))
        return components
    except Exception as e:
        log.error(
            f"Error calculating components from upgrade answers: {e}",
            extra={"category": LogCategory.BIRKMAN.value, "field": "components"},
        )
        return neutral_components()


def calculate_internal_states(
    answers: Dict[int, int],
    questions: List[Question],
    log: Optional[logging.Logger] = None,
) -> Dict[str, Dict[str, int]]:
    """
    Four colour spectra, one per internal state. Each state starts balanced and
    accumulates the colour weights of the internal-state questions aimed at it.
    """
    log = log or logger
    try:
        states: Dict[str, Dict[str, float]] = {name: neutral_spectrum() for name in INTERNAL_STATE_NAMES}
        for question in questions:
            if not _is_upgrade_question(question, SpecialDimension.INTERNAL_STATES):
                continue
            answer = answers.get(question.id)
            state = states.get(question.targets[0])
            if answer is None or state is None:
                continue
            for color, weight in INTERNAL_STATE_COLOR_WEIGHTS.get(question.id, {}).items():
                state[color] += answer * weight

        normalized = {}
        for name, raw in states.items():
            if sum(raw.values()) > 0:
                normalized[name] = normalize_spectrum(raw)
            else:
                normalized[name] = neutral_spectrum()
        return normalized
    except Exception as e:
        log.error(
            f"Error calculating internal states: {e}",
            extra={"category": LogCategory.BIRKMAN.value, "field": "birkman_states"},
        )
        return neutral_states()


# --- MBTI overlay ---

def _axis_confidence(score: float) -> int:
    distance = abs(score - MBTI_MIDPOINT)
    return min(MBTI_MAX_CONFIDENCE, round_half_up(distance / 50 * 100))


def _mbti_axes(scores: Dict[str, Any]) -> Dict[str, float]:
    def usual(dimension: str) -> float:
        return float(scores.get(f"{dimension}_usual") or 0)

    return {
        "E_I": (usual("assertiveness") + usual("sociability")) / 2,
        "N_S": (usual("creativity") + usual("flexibility")) / 2,
        "F_T": usual("emotional_intelligence"),
        "J_P": usual("conscientiousness"),
    }


def _mbti_profile(mbti_type: str) -> Dict[str, Any]:
    return MbtiProfile.model_validate(MBTI_TYPES.get(mbti_type, MBTI_TYPES[MBTI_DEFAULT_TYPE])).model_dump()


def _default_mbti() -> Dict[str, Any]:
    return {
        "type": MBTI_DEFAULT_TYPE,
        "confidence": 0,
        "confidenceScores": {"E_I": 0, "N_S": 0, "F_T": 0, "J_P": 0},
        "preferences": {"E_I": "I", "N_S": "N", "F_T": "T", "J_P": "J"},
        "profile": _mbti_profile(MBTI_DEFAULT_TYPE),
    }


def calculate_mbti(scores: Dict[str, Any], log: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """
    Four-letter type from the usual dimension scores; each axis takes its
    first letter at or above the midpoint. Missing scores read as 0.
    """
    log = log or logger
    try:
        axes = _mbti_axes(scores)
    except (TypeError, ValueError) as e:
        log.error(
            f"Error calculating MBTI type: {e}",
            extra={"category": LogCategory.SCORING.value, "field": "mbti"},
        )
        return _default_mbti()

    letters = {"E_I": ("E", "I"), "N_S": ("N", "S"), "F_T": ("F", "T"), "J_P": ("J", "P")}
    preferences = {
        axis: first if axes[axis] >= MBTI_MIDPOINT else second
        for axis, (first, second) in letters.items()
    }
    mbti_type = "".join(preferences[axis] for axis in ("E_I", "N_S", "F_T", "J_P"))
    confidence_scores = {axis: _axis_confidence(value) for axis, value in axes.items()}

    return {
        "type": mbti_type,
        "confidence": round_half_up(sum(confidence_scores.values()) / 4),
        "confidenceScores": confidence_scores,
        "preferences": preferences,
        "profile": _mbti_profile(mbti_type),
    }


def get_alternative_interpretations(scores: Dict[str, Any], mbti: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Flipped types for the E/I and N/S axes when their score sits close to the
    midpoint. Confidence shrinks linearly from 50 at the midpoint to 30 at the edge.
    """
    axes = _mbti_axes(scores)
    preferences = mbti["preferences"]
    alternatives = []

    def confidence(distance: float) -> int:
        return round_half_up(30 + 20 * (1 - distance / MBTI_ALTERNATIVE_WINDOW))

    extraversion_distance = abs(axes["E_I"] - MBTI_MIDPOINT)
    if extraversion_distance < MBTI_ALTERNATIVE_WINDOW:
        flipped = "I" if preferences["E_I"] == "E" else "E"
        alternatives.append({
            "type": flipped + preferences["N_S"] + preferences["F_T"] + preferences["J_P"],
            "confidence": confidence(extraversion_distance),
            "reason": "Your extraversion score is near the midpoint, suggesting you may exhibit qualities of both preferences.",
        })

    openness_distance = abs(axes["N_S"] - MBTI_MIDPOINT)
    if openness_distance < MBTI_ALTERNATIVE_WINDOW:
        flipped = "S" if preferences["N_S"] == "N" else "N"
        alternatives.append({
            "type": preferences["E_I"] + flipped + preferences["F_T"] + preferences["J_P"],
            "confidence": confidence(openness_distance),
            "reason": "Your openness score is near the midpoint, indicating you balance abstract and concrete thinking.",
        })

    return alternatives[:2]


# --- Lookups ---

def get_color_description(color_name: str, colors: List[ColorDescription]) -> Optional[ColorDescription]:
    """Catalog entry for a colour, or the first entry when the name is unknown."""
    if not colors:
        return None
    return next((c for c in colors if c.name == color_name), colors[0])


def get_component_description(component_id: str, components: List[ComponentDescription]) -> Optional[ComponentDescription]:
    if not components:
        return None
    return next((c for c in components if c.id == component_id), components[0])


def get_highest_component(components: Any) -> Dict[str, Any]:
    """Highest numeric component as `{name, score}`, underscores shown as spaces."""
    if not isinstance(components, dict):
        return {"name": "Unknown", "score": 0}

    numeric = [
        (name, value) for name, value in components.items()
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value == value
    ]
    if not numeric:
        return {"name": "Unknown", "score": 0}

    name, score = max(numeric, key=lambda item: item[1])
    return {"name": name.replace("_", " "), "score": score or 0}
