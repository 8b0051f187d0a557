# Personality profile engine: scoring, derived models, versioning and recovery.
from .core.config import APP_VERSION
from .assessment.engine import ProfileEngine, compute_profile
from .versioning.migration import migrate_history
from .versioning.upgrade import upgrade_v2_to_v3
from .recovery.recovery import recover_history
from .service import AssessmentService

__version__ = APP_VERSION
