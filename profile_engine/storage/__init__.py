from .kv import (
    KeyValueStore,
    InMemoryStore,
    RedisStore,
    StorageError,
    StorageQuotaExceededError,
    StorageUnavailableError,
)
from .history import AssessmentHistory
