# profile_engine/storage/history.py
# Bounded assessment history and the in-progress session snapshot, kept as
# JSON under two keys of a key-value store. Store failures stop here: they are
# logged and surfaced as None / False / [].

import json
import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, List, Optional

from pydantic import ValidationError

from ..constants import LogCategory
from ..core.config import EngineSettings, get_settings
from ..assessment.models import SessionSnapshot
from ..versioning.versions import APP_VERSION, now_iso
from .kv import KeyValueStore, StorageError, StorageQuotaExceededError

logger = logging.getLogger(__name__)

# Field names used by older session snapshots.
LEGACY_SESSION_FIELDS = {"responses": "answers", "currentQuestion": "currentQuestionIndex"}


def generate_record_id() -> str:
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class AssessmentHistory:
    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[EngineSettings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.logger = logger or logging.getLogger(__name__)

    def _log_failure(self, operation: str, error: Exception) -> None:
        self.logger.error(
            f"Storage operation '{operation}' failed: {error}",
            extra={
                "category": LogCategory.STORAGE.value,
                "operation": operation,
                "quota_exceeded": isinstance(error, StorageQuotaExceededError),
            },
        )

    def _read_json(self, key: str, operation: str) -> Any:
        try:
            raw = self.store.get(key)
        except StorageError as e:
            self._log_failure(operation, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            self._log_failure(operation, e)
            return None

    def _write_json(self, key: str, value: Any, operation: str) -> bool:
        try:
            self.store.set(key, json.dumps(value))
            return True
        except StorageError as e:
            self._log_failure(operation, e)
            return False

    # --- History ---

    def load(self) -> List[Dict[str, Any]]:
        """Stored records, most recent first. [] when nothing usable is stored."""
        data = self._read_json(self.settings.history_key, "load_history")
        if not isinstance(data, list):
            return []
        return data

    def save_all(self, records: List[Dict[str, Any]]) -> bool:
        """Replaces the stored history, keeping only the first `history_limit` records."""
        trimmed = list(records)[: self.settings.history_limit]
        return self._write_json(self.settings.history_key, trimmed, "save_history")

    def save_completed(
        self,
        user_name: str,
        results: Dict[str, Any],
        raw_answers: Optional[Dict[Any, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Prepends a completed assessment to the history and clears the session.
        Returns the stored record, or None when it could not be written.
        """
        record: Dict[str, Any] = {
            "id": generate_record_id(),
            "userName": user_name,
            "results": results,
            "completedAt": now_iso(),
            "version": APP_VERSION,
        }
        if raw_answers:
            record["rawAnswers"] = {str(k): v for k, v in raw_answers.items()}

        records = self.load()
        records.insert(0, record)
        if not self.save_all(records):
            return None
        self.clear_session()
        self.logger.info(
            f"Saved completed assessment {record['id']}",
            extra={"category": LogCategory.STORAGE.value},
        )
        return record

    def replace_record(self, record: Dict[str, Any]) -> bool:
        """Swaps in a record with the same id, or prepends it when the id is new."""
        records = self.load()
        for index, existing in enumerate(records):
            if isinstance(existing, dict) and existing.get("id") == record.get("id"):
                records[index] = record
                break
        else:
            records.insert(0, record)
        return self.save_all(records)

    # --- Session ---

    def save_session(
        self,
        user_name: str,
        current_question_index: int,
        answers: Dict[Any, Any],
    ) -> Optional[SessionSnapshot]:
        existing = self.get_session()
        timestamp = now_iso()
        snapshot = SessionSnapshot(
            userName=user_name,
            currentQuestionIndex=current_question_index,
            answers={int(k): v for k, v in answers.items()},
            startedAt=existing.startedAt if existing else timestamp,
            lastUpdated=timestamp,
        )
        if not self._write_json(self.settings.session_key, snapshot.model_dump(), "save_session"):
            return None
        return snapshot

    def get_session(self) -> Optional[SessionSnapshot]:
        data = self._read_json(self.settings.session_key, "get_session")
        if not isinstance(data, dict):
            return None
        for legacy, current in LEGACY_SESSION_FIELDS.items():
            if legacy in data and current not in data:
                data[current] = data.pop(legacy)
        try:
            return SessionSnapshot.model_validate(data)
        except ValidationError as e:
            self._log_failure("get_session", e)
            return None

    def clear_session(self) -> bool:
        try:
            self.store.remove(self.settings.session_key)
            return True
        except StorageError as e:
            self._log_failure("clear_session", e)
            return False

    def resume_session(self, now: Optional[datetime] = None) -> Optional[SessionSnapshot]:
        """The stored session if it is recent enough to resume; stale ones are cleared."""
        session = self.get_session()
        if session is None:
            return None

        started = _parse_timestamp(session.startedAt)
        now = now or datetime.now(timezone.utc)
        if started is None or now - started > timedelta(days=self.settings.session_max_age_days):
            self.logger.info("Discarding stale assessment session", extra={"category": LogCategory.STORAGE.value})
            self.clear_session()
            return None
        return session
