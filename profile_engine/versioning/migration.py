# profile_engine/versioning/migration.py
# Moves 2.x / 3.0.0 records, which kept the values and work-style profiles
# nested inside results.scores, onto the current flat layout.

import copy
import logging
from typing import Dict, Any, List, Optional, Tuple

from pydantic import BaseModel

from ..constants import LogCategory
from ..assessment.aggregator import is_primitive
from ..validation.predicates import (
    diagnose_scores,
    is_valid_scores,
    is_valid_components,
    is_valid_birkman_color,
    is_valid_birkman_states,
    is_valid_numeric_mapping,
)
from .versions import APP_VERSION, NESTED_SCORES_VERSION, now_iso, record_version, is_v2, is_v3

logger = logging.getLogger(__name__)

NESTED_PROFILE_KEYS = ("values_profile", "work_style_profile")

STRUCTURE_CHECKS = {
    "components": is_valid_components,
    "birkman_color": is_valid_birkman_color,
    "birkman_states": is_valid_birkman_states,
    "values_profile": is_valid_numeric_mapping,
    "work_style_profile": is_valid_numeric_mapping,
}


class MigrationStats(BaseModel):
    total: int = 0
    legacy_detected: int = 0
    migrated: int = 0
    failed: int = 0
    skipped: int = 0


def has_legacy_data(record: Any) -> bool:
    """
    A record needs migration when its version is 2.x or 3.0.0 (a missing
    version counts as 2.x) and results.scores holds a nested values or
    work-style profile.
    """
    if not isinstance(record, dict) or not isinstance(record.get("results"), dict):
        return False

    version = record_version(record)
    if not (is_v2(version) or version.startswith(NESTED_SCORES_VERSION)):
        return False

    scores = record["results"].get("scores")
    if not isinstance(scores, dict):
        return False
    return any(isinstance(scores.get(key), dict) for key in NESTED_PROFILE_KEYS)


def extract_nested_objects(scores: Dict[str, Any], log: Optional[logging.Logger] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Splits a score mapping into (primitive scores, nested mappings).
    Anything else (lists, None) is dropped with a warning.
    """
    log = log or logger
    clean: Dict[str, Any] = {}
    extracted: Dict[str, Any] = {}
    for key, value in scores.items():
        if isinstance(value, dict):
            extracted[key] = value
        elif is_primitive(value):
            clean[key] = value
        else:
            log.warning(
                f"Skipping invalid score value: {key}",
                extra={"category": LogCategory.UPGRADE.value, "value_type": type(value).__name__},
            )
    return clean, extracted


def migrate_record(record: Dict[str, Any], log: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """Returns a migrated copy; the input record is left untouched."""
    migrated = copy.deepcopy(record)
    migrated["migratedFrom"] = record_version(record)
    migrated["version"] = APP_VERSION
    migrated["migratedAt"] = now_iso()

    results = migrated["results"]
    if isinstance(results.get("scores"), dict):
        clean, extracted = extract_nested_objects(results["scores"], log)
        results["scores"] = clean
        results.update(extracted)

    migrated["dimensionScores"] = results.get("scores")
    for key in NESTED_PROFILE_KEYS:
        if results.get(key):
            migrated[key] = results[key]
    return migrated


def validate_migrated_record(record: Dict[str, Any], source_version: str, log: Optional[logging.Logger] = None) -> bool:
    """
    The migrated scores must be primitive-only and carry all 8 core usual
    scores (and the stress scores when the source was already v3). Any derived
    structure present on the record or its results must be well-formed.
    """
    log = log or logger
    results = record.get("results") or {}
    scores = results.get("scores")

    if not is_valid_scores(scores):
        log.error("Migrated record has invalid scores", extra={"category": LogCategory.UPGRADE.value})
        return False

    diagnosis = diagnose_scores(scores, is_v3=is_v3(source_version))
    if not diagnosis.is_valid:
        log.error(
            f"Migrated record failed score diagnosis: {'; '.join(diagnosis.issues)}",
            extra={"category": LogCategory.UPGRADE.value},
        )
        return False

    for container in (record, results):
        for field, check in STRUCTURE_CHECKS.items():
            if container.get(field) is not None and not check(container[field]):
                log.error(
                    f"Migrated record has invalid {field}",
                    extra={"category": LogCategory.UPGRADE.value, "field": field},
                )
                return False
    return True


def migrate_history(records: List[Any], log: Optional[logging.Logger] = None) -> Tuple[List[Any], MigrationStats]:
    """
    Migrates every legacy record in a stored history.

    Returns the new list (same order) and the migration statistics. Records
    that do not need migration are returned as-is; records that fail
    validation are kept in their original form and counted as failed.
    """
    log = log or logger
    stats = MigrationStats(total=len(records))
    output: List[Any] = []

    for record in records:
        if not has_legacy_data(record):
            stats.skipped += 1
            output.append(record)
            continue

        stats.legacy_detected += 1
        source_version = record_version(record)
        try:
            migrated = migrate_record(record, log)
        except (TypeError, ValueError, AttributeError) as e:
            stats.failed += 1
            log.error(
                f"Migration failed for record {record.get('id')}: {e}",
                extra={"category": LogCategory.UPGRADE.value},
            )
            output.append(record)
            continue

        if not validate_migrated_record(migrated, source_version, log):
            stats.failed += 1
            log.error(
                f"Migration validation failed for record {record.get('id')}",
                extra={"category": LogCategory.UPGRADE.value, "user": record.get("userName")},
            )
            output.append(record)
            continue

        stats.migrated += 1
        log.info(
            f"Record {migrated.get('id')} migrated from {source_version} to {APP_VERSION}",
            extra={"category": LogCategory.UPGRADE.value},
        )
        output.append(migrated)

    return output, stats
