# profile_engine/versioning/upgrade.py
# One-way upgrade of a 2.x profile to the current schema using a short
# supplemental questionnaire.

import logging
from typing import Dict, Any, List, Optional

from ..constants import LogCategory
from ..assessment.aggregator import normalize_answers, round_half_up, clamp
from ..assessment.definitions import UPGRADE_BLEND_WEIGHTS
from ..assessment.derived import (
    calculate_birkman_color,
    calculate_components_from_upgrade_answers,
    calculate_internal_states,
)
from ..assessment.models import Question
from .migration import NESTED_PROFILE_KEYS, extract_nested_objects
from .versions import APP_VERSION, now_iso, is_v2

logger = logging.getLogger(__name__)

LEGACY_DIMENSION_FIELDS = ("dimensionScores", "scores")
LEGACY_RESULT_DIMENSION_FIELDS = ("dimensions", "scores")
CARRIED_FIELDS = ("archetype", "mbti", "mbtiType", "values_profile", "work_style_profile")


class UpgradeNotAllowedError(ValueError):
    """Raised when a record is not a 2.x record or has already been upgraded."""
    pass


def can_upgrade(record: Any) -> bool:
    if not isinstance(record, dict) or not record.get("version"):
        return False
    return is_v2(record["version"]) and not record.get("upgradedFrom")


def legacy_dimensions(record: Dict[str, Any]) -> Dict[str, Any]:
    """First non-empty dimension mapping on the record, then on its results."""
    results = record.get("results") if isinstance(record.get("results"), dict) else {}
    candidates = [record.get(f) for f in LEGACY_DIMENSION_FIELDS]
    candidates += [results.get(f) for f in LEGACY_RESULT_DIMENSION_FIELDS]
    for candidate in candidates:
        if isinstance(candidate, dict) and candidate:
            return candidate
    return {}


def _carried_field(record: Dict[str, Any], field: str) -> Any:
    if record.get(field) is not None:
        return record[field]
    results = record.get("results")
    if isinstance(results, dict):
        return results.get(field)
    return None


def blend_component_scores(
    dimensions: Dict[str, Any],
    upgrade_components: Dict[str, int],
    log: Optional[logging.Logger] = None,
) -> Dict[str, int]:
    """
    Mixes upgrade-answer components with the legacy dimension they track.
    Components whose dimension is absent keep the upgrade value.
    Falls back to the unblended components on malformed dimensions.
    """
    log = log or logger
    try:
        blended = dict(upgrade_components)
        for component, (dimension, weight, inverted) in UPGRADE_BLEND_WEIGHTS.items():
            value = dimensions.get(f"{dimension}_usual")
            if value is None:
                continue
            legacy = (100 - value) if inverted else value
            blended[component] = round_half_up(blended[component] * weight + legacy * (1 - weight))
        return {name: int(clamp(value)) for name, value in blended.items()}
    except (TypeError, ValueError, KeyError) as e:
        log.error(
            f"Error blending component scores: {e}",
            extra={"category": LogCategory.UPGRADE.value, "field": "components"},
        )
        return dict(upgrade_components)


def upgrade_v2_to_v3(
    record: Dict[str, Any],
    upgrade_answers: Dict[Any, Any],
    upgrade_questions: List[Question],
    log: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Builds the current-schema results for a 2.x record.

    The legacy dimensions, archetype, MBTI and profiles are carried over
    unchanged; profiles nested in the legacy score map are split out of it.
    Components blend the supplemental answers with the legacy
    dimensions, the colour model comes from the legacy dimensions and the
    internal states from the supplemental answers.

    Raises:
        UpgradeNotAllowedError: the record is not 2.x or was already upgraded.
    """
    log = log or logger
    if not can_upgrade(record):
        raise UpgradeNotAllowedError(
            f"Record {record.get('id') if isinstance(record, dict) else record!r} cannot be upgraded"
        )

    log.info(
        f"Upgrading record {record.get('id')} from {record['version']}",
        extra={"category": LogCategory.UPGRADE.value},
    )
    answers = normalize_answers(upgrade_answers, log)
    dimensions, nested = extract_nested_objects(legacy_dimensions(record), log)

    upgraded: Dict[str, Any] = {"dimensions": dimensions}
    for field in CARRIED_FIELDS:
        value = _carried_field(record, field)
        if value is None and field in NESTED_PROFILE_KEYS:
            value = nested.get(field)
        upgraded[field] = value

    upgraded["components"] = blend_component_scores(
        dimensions,
        calculate_components_from_upgrade_answers(answers, upgrade_questions, log),
        log,
    )
    upgraded["birkman_color"] = calculate_birkman_color(dimensions, log)
    upgraded["birkman_states"] = calculate_internal_states(answers, upgrade_questions, log)
    upgraded.update({
        "version": APP_VERSION,
        "upgradedFrom": record["version"],
        "originalCompletedAt": record.get("completedAt"),
        "upgradedAt": now_iso(),
    })

    log.info("Upgrade completed", extra={"category": LogCategory.UPGRADE.value})
    return upgraded
