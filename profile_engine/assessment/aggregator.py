# profile_engine/assessment/aggregator.py
# Turns raw Likert answers into dimension percentiles, values and work-style profiles.

import logging
import math
from typing import Dict, Any, List, Iterable, Optional

from ..constants import (
    CORE_DIMENSIONS,
    AGGREGATED_DIMENSIONS,
    VALUES_DIMENSIONS,
    WORK_STYLE_DIMENSIONS,
    LogCategory,
)
from .models import Question

logger = logging.getLogger(__name__)

SCORED_CONTEXTS = ("usual", "stress")
PRIMITIVE_TYPES = (int, float, str, bool)


def round_half_up(value: float) -> int:
    """Rounds .5 towards positive infinity, so -2.5 -> -2 and 2.5 -> 3."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def normalize_answers(answers: Optional[Dict[Any, Any]], log: Optional[logging.Logger] = None) -> Dict[int, int]:
    """
    Returns a copy of the answer set keyed by integer question id.
    Keys that went through a JSON round trip arrive as strings; entries whose
    key or value cannot be read as an integer are skipped with a warning.
    """
    log = log or logger
    normalized: Dict[int, int] = {}
    if not answers:
        return normalized

    for raw_key, raw_value in answers.items():
        if raw_value is None:
            continue
        try:
            question_id = int(raw_key)
            normalized[question_id] = int(raw_value)
        except (TypeError, ValueError):
            log.warning(
                f"Skipping unreadable answer {raw_key!r}: {raw_value!r}",
                extra={"category": LogCategory.SCORING.value},
            )
    return normalized


def _average_response(answers: Dict[int, int], questions: Iterable[Question]) -> float:
    total = 0
    answered = 0
    for question in questions:
        answer = answers.get(question.id)
        if answer is None:
            continue
        total += (6 - answer) if question.reverse else answer
        answered += 1
    # Nothing answered averages to 0, which clamps to percentile 0.
    return total / answered if answered > 0 else 0


def to_percentile(average: float) -> int:
    """Maps a 1-5 average onto 0-100."""
    return round_half_up(clamp(((average - 1) / 4) * 100))


def calculate_dimension_scores(answers: Dict[int, int], questions: List[Question]) -> Dict[str, int]:
    """
    Scores the 8 core dimensions in both contexts, keyed `{dimension}_{context}`.
    The aggregated dimensions then store the rounded mean of usual and stress
    under their `_usual` key.
    """
    scores: Dict[str, int] = {}
    for dimension in CORE_DIMENSIONS:
        for context in SCORED_CONTEXTS:
            matching = [q for q in questions if q.dimension == dimension and q.context == context]
            scores[f"{dimension}_{context}"] = to_percentile(_average_response(answers, matching))

    for dimension in AGGREGATED_DIMENSIONS:
        scores[f"{dimension}_usual"] = round_half_up(
            (scores[f"{dimension}_usual"] + scores[f"{dimension}_stress"]) / 2
        )
    return scores


def _prefixed_profile(answers: Dict[int, int], questions: List[Question], dimensions: List[str], prefix: str) -> Dict[str, int]:
    profile: Dict[str, int] = {}
    for dimension in dimensions:
        matching = [q for q in questions if q.dimension == dimension]
        profile[dimension[len(prefix):]] = to_percentile(_average_response(answers, matching))
    return profile


def calculate_values_profile(answers: Dict[int, int], questions: List[Question]) -> Dict[str, int]:
    return _prefixed_profile(answers, questions, VALUES_DIMENSIONS, "values_")


def calculate_work_style_profile(answers: Dict[int, int], questions: List[Question]) -> Dict[str, int]:
    return _prefixed_profile(answers, questions, WORK_STYLE_DIMENSIONS, "work_")


def is_primitive(value: Any) -> bool:
    return value is not None and isinstance(value, PRIMITIVE_TYPES)


def filter_primitive_scores(scores: Dict[str, Any], log: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """Drops nested values from a score mapping, warning once per dropped key."""
    log = log or logger
    clean: Dict[str, Any] = {}
    for key, value in scores.items():
        if is_primitive(value):
            clean[key] = value
        else:
            log.warning(
                f"Filtered out non-primitive score: {key}",
                extra={"category": LogCategory.SCORING.value, "value_type": type(value).__name__},
            )
    return clean


def calculate_stress_deltas(scores: Dict[str, Any]) -> Dict[str, int]:
    """stress - usual per core dimension; missing entries read as 0."""
    deltas = {}
    for dimension in CORE_DIMENSIONS:
        usual = scores.get(f"{dimension}_usual") or 0
        stress = scores.get(f"{dimension}_stress") or 0
        deltas[dimension] = stress - usual
    return deltas


def calculate_adaptability_score(deltas: Dict[str, int]) -> int:
    total_change = sum(abs(delta) for delta in deltas.values())
    return max(0, round_half_up(100 - total_change / len(CORE_DIMENSIONS)))


def get_score_level(score: float) -> str:
    if score <= 33:
        return "low"
    if score <= 66:
        return "medium"
    return "high"


def calculate_dimension_levels(scores: Dict[str, Any]) -> Dict[str, str]:
    """Score level of each core dimension's usual score; missing entries read as 0."""
    return {
        dimension: get_score_level(scores.get(f"{dimension}_usual") or 0)
        for dimension in CORE_DIMENSIONS
    }
