from .predicates import (
    is_valid_scores,
    is_valid_numeric_mapping,
    is_valid_components,
    is_valid_birkman_color,
    is_valid_birkman_states,
    diagnose_scores,
    validate_record,
    ScoreDiagnosis,
    RecordValidation,
)
