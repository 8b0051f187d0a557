# profile_engine/recovery/recovery.py
# Repairs stored records whose score data is missing, partial or malformed.
# Order of attempts: recalculate from raw answers, patch from existing
# score fields, give up (record left as is and reported).

import asyncio
import copy
import logging
import time
from typing import Dict, Any, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..constants import LogCategory
from ..assessment.aggregator import normalize_answers, filter_primitive_scores
from ..assessment.engine import compute_profile
from ..assessment.models import Question, ArchetypeDefinition
from ..validation.predicates import (
    diagnose_scores,
    is_valid_components,
    is_valid_birkman_color,
    is_valid_birkman_states,
)
from ..versioning.versions import APP_VERSION, now_iso, is_v2, is_v3

logger = logging.getLogger(__name__)

# (container, field); container None means the record itself.
RAW_ANSWER_FIELDS = [
    (None, "rawAnswers"),
    (None, "raw_answers"),
    (None, "answers"),
    (None, "responses"),
    ("results", "rawAnswers"),
    ("results", "answers"),
]
SCORE_CANDIDATE_FIELDS = [
    ("results", "dimensions"),
    ("results", "scores"),
    (None, "dimensionScores"),
    (None, "scores"),
]
HYDRATED_FIELDS = [
    "components",
    "birkman_color",
    "birkman_states",
    "values_profile",
    "work_style_profile",
    "archetype",
    "mbti",
]
DERIVED_MODEL_CHECKS = {
    "components": is_valid_components,
    "birkman_color": is_valid_birkman_color,
    "birkman_states": is_valid_birkman_states,
}

HEALTHY = "healthy"
RECALCULATED = "recalculated"
PATCHED = "patched"
FAILED = "failed"


class RecoveryStats(BaseModel):
    total: int = 0
    healthy: int = 0
    recalculated: int = 0
    patched: int = 0
    failed: int = 0
    unrecoverable_ids: List[Any] = Field(default_factory=list)
    duration_ms: float = 0.0


class ScoreCandidate(BaseModel):
    path: str
    scores: Dict[str, Any]
    rank: int
    valid_core_dimensions: int


def _lookup(record: Dict[str, Any], container: Optional[str], field: str) -> Any:
    source = record if container is None else record.get(container)
    if not isinstance(source, dict):
        return None
    return source.get(field)


def _results(record: Dict[str, Any]) -> Dict[str, Any]:
    results = record.get("results")
    return results if isinstance(results, dict) else {}


def expects_stress_scores(record: Dict[str, Any]) -> bool:
    """Records produced by the current schema score both contexts; anything of 2.x origin does not."""
    if not is_v3(record.get("version")):
        return False
    return not (is_v2(record.get("migratedFrom")) or is_v2(record.get("upgradedFrom")))


def expects_derived_models(record: Dict[str, Any]) -> bool:
    """Current-schema records carry components, colour and states. Migrated-only 2.x records do not."""
    if not is_v3(record.get("version")):
        return False
    return not is_v2(record.get("migratedFrom")) or bool(record.get("upgradedFrom"))


def primary_scores(record: Dict[str, Any]) -> Any:
    results = _results(record)
    if results.get("dimensions") is not None:
        return results["dimensions"]
    return results.get("scores")


def extract_raw_answers(record: Dict[str, Any]) -> Optional[Dict[int, int]]:
    """The first non-empty raw answer set stored on the record, keyed by int id."""
    for container, field in RAW_ANSWER_FIELDS:
        candidate = _lookup(record, container, field)
        if isinstance(candidate, dict) and candidate:
            answers = normalize_answers(candidate)
            if answers:
                return answers
    return None


def needs_recovery(record: Any) -> bool:
    if not isinstance(record, dict):
        return False
    if not diagnose_scores(primary_scores(record), is_v3=expects_stress_scores(record)).is_valid:
        return True
    if expects_derived_models(record):
        results = _results(record)
        return not all(check(results.get(field)) for field, check in DERIVED_MODEL_CHECKS.items())
    return False


def rank_score_candidates(record: Dict[str, Any]) -> List[ScoreCandidate]:
    """
    Every score-bearing mapping on the record, best first. Rank is
    100000 * valid + 1000 * valid core dimensions + 50 * stress dimensions + key count.
    """
    stress_required = expects_stress_scores(record)
    candidates = []
    for container, field in SCORE_CANDIDATE_FIELDS:
        scores = _lookup(record, container, field)
        if not isinstance(scores, dict) or not scores:
            continue
        diagnosis = diagnose_scores(scores, is_v3=stress_required)
        meta = diagnosis.metadata
        rank = (
            100000 * int(diagnosis.is_valid)
            + 1000 * meta.valid_core_dimensions
            + 50 * meta.stress_dimensions_found
            + meta.key_count
        )
        candidates.append(ScoreCandidate(
            path=f"{container}.{field}" if container else field,
            scores=scores,
            rank=rank,
            valid_core_dimensions=meta.valid_core_dimensions,
        ))
    # sorted() is stable: equal ranks keep field order.
    return sorted(candidates, key=lambda c: c.rank, reverse=True)


def _stamp(record: Dict[str, Any], method: str) -> None:
    record["scoresRecoveredAt"] = now_iso()
    record["scoresRecoveredByVersion"] = APP_VERSION
    record["scoresRecoveryMethod"] = method


def recalculate(
    record: Dict[str, Any],
    questions: Optional[List[Question]],
    archetypes: Optional[List[ArchetypeDefinition]],
    log: Optional[logging.Logger] = None,
) -> Optional[Dict[str, Any]]:
    """Re-scores the record from its raw answers. None when that is not possible."""
    log = log or logger
    answers = extract_raw_answers(record)
    if not answers or not questions or not archetypes:
        return None

    fresh = compute_profile(answers, questions, archetypes, log)
    if not diagnose_scores(fresh["dimensions"], is_v3=True).is_valid:
        log.warning(
            f"Recalculated scores for record {record.get('id')} failed diagnosis",
            extra={"category": LogCategory.RECOVERY.value},
        )
        return None

    repaired = copy.deepcopy(record)
    results = _results(repaired)
    results.update(fresh)
    if "scores" in results and not diagnose_scores(results["scores"]).is_valid:
        del results["scores"]
    repaired["results"] = results
    return repaired


def _hydration_source(record: Dict[str, Any], field: str) -> Any:
    if record.get(field) is not None:
        return record[field]
    for container, candidate_field in SCORE_CANDIDATE_FIELDS:
        mapping = _lookup(record, container, candidate_field)
        if isinstance(mapping, dict) and isinstance(mapping.get(field), dict):
            return mapping[field]
    return None


def patch(record: Dict[str, Any], log: Optional[logging.Logger] = None) -> Optional[Dict[str, Any]]:
    """
    Rebuilds results.dimensions from the best existing score mapping and
    fills in derived models found elsewhere on the record. None when no
    candidate has a usable core dimension or nothing would change.
    """
    log = log or logger
    usable = [c for c in rank_score_candidates(record) if c.valid_core_dimensions >= 1]
    if not usable:
        return None
    best = usable[0]

    repaired = copy.deepcopy(record)
    results = _results(repaired)
    results["dimensions"] = filter_primitive_scores(best.scores, log)
    for field in HYDRATED_FIELDS:
        if results.get(field) is None:
            source = _hydration_source(record, field)
            if source is not None:
                results[field] = copy.deepcopy(source)
    repaired["results"] = results

    if repaired == record:
        return None
    log.info(
        f"Patched record {record.get('id')} from {best.path}",
        extra={"category": LogCategory.RECOVERY.value},
    )
    return repaired


def recover_record(
    record: Any,
    questions: Optional[List[Question]] = None,
    archetypes: Optional[List[ArchetypeDefinition]] = None,
    log: Optional[logging.Logger] = None,
) -> Tuple[Any, str]:
    """Returns (record, outcome) with outcome one of healthy / recalculated / patched / failed."""
    log = log or logger
    if not isinstance(record, dict):
        log.error(
            f"Unreadable history entry of type {type(record).__name__}",
            extra={"category": LogCategory.RECOVERY.value},
        )
        return record, FAILED
    if not needs_recovery(record):
        return record, HEALTHY

    repaired = recalculate(record, questions, archetypes, log)
    if repaired is not None:
        _stamp(repaired, RECALCULATED)
        log.info(
            f"Recalculated scores for record {record.get('id')}",
            extra={"category": LogCategory.RECOVERY.value},
        )
        return repaired, RECALCULATED

    repaired = patch(record, log)
    if repaired is not None:
        _stamp(repaired, PATCHED)
        return repaired, PATCHED

    diagnosis = diagnose_scores(primary_scores(record), is_v3=expects_stress_scores(record))
    log.error(
        f"Could not recover scores for record {record.get('id')}: {'; '.join(diagnosis.issues) or 'missing derived models'}",
        extra={"category": LogCategory.RECOVERY.value},
    )
    return record, FAILED


def _tally(stats: RecoveryStats, record: Any, outcome: str) -> None:
    if outcome == HEALTHY:
        stats.healthy += 1
    elif outcome == RECALCULATED:
        stats.recalculated += 1
    elif outcome == PATCHED:
        stats.patched += 1
    else:
        stats.failed += 1
        stats.unrecoverable_ids.append(record.get("id") if isinstance(record, dict) else None)


def recover_history(
    records: List[Any],
    questions: Optional[List[Question]] = None,
    archetypes: Optional[List[ArchetypeDefinition]] = None,
    log: Optional[logging.Logger] = None,
) -> Tuple[List[Any], RecoveryStats]:
    """
    Runs recovery over every stored record.

    Returns the (possibly) repaired list in the same order and the statistics.
    A caller can tell whether anything changed from `recalculated + patched`.
    """
    log = log or logger
    started = time.perf_counter()
    stats = RecoveryStats(total=len(records))
    output = []
    for record in records:
        recovered, outcome = recover_record(record, questions, archetypes, log)
        _tally(stats, record, outcome)
        output.append(recovered)
    stats.duration_ms = (time.perf_counter() - started) * 1000
    _log_summary(stats, log)
    return output, stats


async def arecover_history(
    records: List[Any],
    questions: Optional[List[Question]] = None,
    archetypes: Optional[List[ArchetypeDefinition]] = None,
    log: Optional[logging.Logger] = None,
) -> Tuple[List[Any], RecoveryStats]:
    """Same as recover_history, yielding to the event loop between records."""
    log = log or logger
    started = time.perf_counter()
    stats = RecoveryStats(total=len(records))
    output = []
    for record in records:
        recovered, outcome = recover_record(record, questions, archetypes, log)
        _tally(stats, record, outcome)
        output.append(recovered)
        await asyncio.sleep(0)
    stats.duration_ms = (time.perf_counter() - started) * 1000
    _log_summary(stats, log)
    return output, stats


def _log_summary(stats: RecoveryStats, log: logging.Logger) -> None:
    log.info(
        f"Recovery finished: {stats.healthy} healthy, {stats.recalculated} recalculated, "
        f"{stats.patched} patched, {stats.failed} failed in {stats.duration_ms:.1f}ms",
        extra={"category": LogCategory.RECOVERY.value},
    )
