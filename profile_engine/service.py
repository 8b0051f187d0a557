# profile_engine/service.py
# Entry point for callers: scoring, persisted history (with migration and
# recovery on load), upgrades and the in-progress session.
# Once built, no method lets an exception escape; failures come back as
# None / False / []. A bad catalog still fails construction.

import copy
import logging
from typing import Dict, Any, List, Optional

from .constants import LogCategory
from .core.config import EngineSettings, RedisSettings, get_settings
from .core.logging_config import setup_logging, get_engine_logger
from .assessment.engine import ProfileEngine
from .assessment.loader import DEFAULT_DATA_DIR, load_catalog_from_dir, load_default_catalog
from .assessment.models import SessionSnapshot
from .recovery.recovery import RecoveryStats, recover_history, arecover_history
from .storage.history import AssessmentHistory
from .storage.kv import KeyValueStore, InMemoryStore, RedisStore
from .versioning.migration import MigrationStats, migrate_history
from .versioning.upgrade import UpgradeNotAllowedError, can_upgrade, upgrade_v2_to_v3

UPGRADE_METADATA_FIELDS = ("version", "upgradedFrom", "originalCompletedAt", "upgradedAt")


class AssessmentService:
    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        engine: Optional[ProfileEngine] = None,
        settings: Optional[EngineSettings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.settings = settings or get_settings()
        self.engine = engine or ProfileEngine(logger=self.logger)
        self.history = AssessmentHistory(store if store is not None else InMemoryStore(), self.settings, self.logger)
        self.last_migration_stats: Optional[MigrationStats] = None
        self.last_recovery_stats: Optional[RecoveryStats] = None

    @classmethod
    def from_settings(
        cls,
        settings: Optional[EngineSettings] = None,
        redis_settings: Optional[RedisSettings] = None,
    ) -> "AssessmentService":
        """
        Builds a service from configuration: JSON logging at the configured
        level (the engine logs through the `profile_engine.assessment` child),
        the catalog in `data_dir`, and a Redis store when Redis settings are
        given (in-memory otherwise).
        """
        settings = settings or get_settings()
        engine_logger = setup_logging(settings.log_level)

        if settings.data_dir == DEFAULT_DATA_DIR:
            catalog = load_default_catalog()
        else:
            catalog = load_catalog_from_dir(settings.data_dir)

        store = RedisStore.from_settings(redis_settings) if redis_settings else InMemoryStore()
        return cls(
            store=store,
            engine=ProfileEngine(catalog=catalog, logger=get_engine_logger("assessment")),
            settings=settings,
            logger=engine_logger,
        )

    def _log_exception(self, operation: str, error: Exception, category: LogCategory = LogCategory.APP) -> None:
        self.logger.error(
            f"{operation} failed: {error}",
            exc_info=True,
            extra={"category": category.value, "operation": operation},
        )

    # --- Scoring ---

    def compute_profile(self, answers: Dict[Any, Any]) -> Optional[Dict[str, Any]]:
        try:
            return self.engine.compute_profile(answers)
        except Exception as e:
            self._log_exception("compute_profile", e, LogCategory.SCORING)
            return None

    def complete_assessment(self, user_name: str, answers: Dict[Any, Any]) -> Optional[Dict[str, Any]]:
        """
        Scores a finished questionnaire and stores it at the front of the history.
        The raw answers are kept on the record so it can be recalculated later.
        """
        results = self.compute_profile(answers)
        if results is None:
            return None
        try:
            return self.history.save_completed(user_name, results, raw_answers=answers)
        except Exception as e:
            self._log_exception("complete_assessment", e, LogCategory.STORAGE)
            return None

    # --- History ---

    def _process_loaded(self, recovered: List[Any], recovery_stats: RecoveryStats) -> List[Any]:
        self.last_recovery_stats = recovery_stats
        migrated_any = bool(self.last_migration_stats and self.last_migration_stats.migrated)
        repaired_any = bool(recovery_stats.recalculated or recovery_stats.patched)
        if migrated_any or repaired_any:
            self.history.save_all(recovered)
        return recovered[: self.settings.history_limit]

    def load_history(self) -> List[Dict[str, Any]]:
        """
        Stored records after migration and recovery. Changed records are
        written back once.
        """
        try:
            records = self.history.load()
            migrated, self.last_migration_stats = migrate_history(records, self.logger)
            recovered, stats = recover_history(migrated, self.engine.questions, self.engine.archetypes, self.logger)
            return self._process_loaded(recovered, stats)
        except Exception as e:
            self._log_exception("load_history", e, LogCategory.RECOVERY)
            return []

    async def aload_history(self) -> List[Dict[str, Any]]:
        try:
            records = self.history.load()
            migrated, self.last_migration_stats = migrate_history(records, self.logger)
            recovered, stats = await arecover_history(
                migrated, self.engine.questions, self.engine.archetypes, self.logger
            )
            return self._process_loaded(recovered, stats)
        except Exception as e:
            self._log_exception("aload_history", e, LogCategory.RECOVERY)
            return []

    def find_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        return next(
            (r for r in self.history.load() if isinstance(r, dict) and r.get("id") == record_id),
            None,
        )

    # --- Upgrade ---

    def can_upgrade(self, record: Any) -> bool:
        return can_upgrade(record)

    def upgrade_record(self, record: Dict[str, Any], upgrade_answers: Dict[Any, Any]) -> Optional[Dict[str, Any]]:
        """
        Upgrades a 2.x record with supplemental answers and replaces it in the
        history under the same id. Returns the upgraded record, or None.
        """
        try:
            upgraded = upgrade_v2_to_v3(record, upgrade_answers, self.engine.upgrade_questions, self.logger)
        except UpgradeNotAllowedError as e:
            self.logger.warning(str(e), extra={"category": LogCategory.UPGRADE.value})
            return None
        except Exception as e:
            self._log_exception("upgrade_record", e, LogCategory.UPGRADE)
            return None

        new_record = copy.deepcopy(record)
        results = new_record.get("results") if isinstance(new_record.get("results"), dict) else {}
        results.update({k: v for k, v in upgraded.items() if k not in UPGRADE_METADATA_FIELDS})
        new_record["results"] = results
        new_record.update({k: upgraded[k] for k in UPGRADE_METADATA_FIELDS})
        new_record["rawUpgradeAnswers"] = {str(k): v for k, v in (upgrade_answers or {}).items()}

        try:
            if not self.history.replace_record(new_record):
                return None
        except Exception as e:
            self._log_exception("upgrade_record", e, LogCategory.STORAGE)
            return None
        return new_record

    # --- Session ---

    def save_session(self, user_name: str, current_question_index: int, answers: Dict[Any, Any]) -> Optional[SessionSnapshot]:
        try:
            return self.history.save_session(user_name, current_question_index, answers)
        except Exception as e:
            self._log_exception("save_session", e, LogCategory.STORAGE)
            return None

    def get_session(self) -> Optional[SessionSnapshot]:
        try:
            return self.history.get_session()
        except Exception as e:
            self._log_exception("get_session", e, LogCategory.STORAGE)
            return None

    def clear_session(self) -> bool:
        try:
            return self.history.clear_session()
        except Exception as e:
            self._log_exception("clear_session", e, LogCategory.STORAGE)
            return False

    def resume_session(self) -> Optional[SessionSnapshot]:
        try:
            return self.history.resume_session()
        except Exception as e:
            self._log_exception("resume_session", e, LogCategory.STORAGE)
            return None

    # --- Lookups ---

    def rank_careers(self, record: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            return self.engine.rank_careers(record.get("results") or {})
        except Exception as e:
            self._log_exception("rank_careers", e)
            return []
