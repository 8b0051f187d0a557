from .recovery import (
    RecoveryStats,
    extract_raw_answers,
    needs_recovery,
    rank_score_candidates,
    recalculate,
    patch,
    recover_record,
    recover_history,
    arecover_history,
)
