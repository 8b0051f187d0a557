from .versions import APP_VERSION, is_v2, is_v3, get_upgrade_status
from .migration import MigrationStats, has_legacy_data, migrate_record, migrate_history
from .upgrade import UpgradeNotAllowedError, can_upgrade, blend_component_scores, upgrade_v2_to_v3
