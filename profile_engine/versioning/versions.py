# profile_engine/versioning/versions.py
# Schema version helpers.

from datetime import datetime, timezone
from typing import Dict, Any, Optional

from ..core.config import APP_VERSION

LEGACY_MAJOR = "2."
CURRENT_MAJOR = "3."
# 3.0.0 still stored values/work-style profiles nested inside results.scores.
NESTED_SCORES_VERSION = "3.0.0"
DEFAULT_LEGACY_VERSION = "2.x"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def record_version(record: Optional[Dict[str, Any]]) -> str:
    """A record's version string; records saved without one are legacy."""
    if not isinstance(record, dict):
        return ""
    return str(record.get("version") or DEFAULT_LEGACY_VERSION)


def is_v2(version: Optional[str]) -> bool:
    return bool(version) and str(version).startswith(LEGACY_MAJOR)


def is_v3(version: Optional[str]) -> bool:
    return bool(version) and str(version).startswith(CURRENT_MAJOR)


def get_upgrade_status(record: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not isinstance(record, dict):
        return {
            "is_v2": False,
            "is_v3": False,
            "is_upgraded": False,
            "original_date": None,
            "upgraded_date": None,
            "version": None,
            "upgraded_from": None,
        }

    version = record.get("version")
    return {
        "is_v2": is_v2(version),
        "is_v3": is_v3(version),
        "is_upgraded": bool(record.get("upgradedFrom")),
        "original_date": record.get("originalCompletedAt") or record.get("completedAt"),
        "upgraded_date": record.get("upgradedAt"),
        "version": version,
        "upgraded_from": record.get("upgradedFrom"),
    }


__all__ = [
    "APP_VERSION",
    "now_iso",
    "record_version",
    "is_v2",
    "is_v3",
    "get_upgrade_status",
]
