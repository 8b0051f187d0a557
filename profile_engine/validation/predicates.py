# profile_engine/validation/predicates.py
# Structural checks for persisted score mappings and derived models.
# Every check returns a value; nothing here raises on bad data.

import math
from typing import Dict, Any, List, Optional, Literal

from pydantic import BaseModel, Field

from ..constants import CORE_DIMENSIONS, COLOR_NAMES, COMPONENT_NAMES, INTERNAL_STATE_NAMES
from ..assessment.aggregator import is_primitive


def is_number(value: Any) -> bool:
    """True for real, finite numbers. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def is_valid_scores(scores: Any) -> bool:
    """Non-empty mapping whose values are all primitives."""
    if not isinstance(scores, dict) or not scores:
        return False
    return all(is_primitive(value) for value in scores.values())


def is_valid_numeric_mapping(obj: Any) -> bool:
    """Non-empty mapping of numbers; None values are tolerated."""
    if not isinstance(obj, dict) or not obj:
        return False
    return all(value is None or is_number(value) for value in obj.values())


def is_valid_spectrum(spectrum: Any) -> bool:
    return isinstance(spectrum, dict) and all(is_number(spectrum.get(color)) for color in COLOR_NAMES)


def is_valid_components(components: Any) -> bool:
    """Exactly the nine component keys, each numeric."""
    if not isinstance(components, dict) or len(components) != len(COMPONENT_NAMES):
        return False
    return all(is_number(components.get(name)) for name in COMPONENT_NAMES)


def is_valid_birkman_color(color: Any) -> bool:
    if not isinstance(color, dict):
        return False
    if color.get("primary") not in COLOR_NAMES or color.get("secondary") not in COLOR_NAMES:
        return False
    return is_valid_spectrum(color.get("spectrum"))


def is_valid_birkman_states(states: Any) -> bool:
    """All four internal states present, each a numeric colour spectrum."""
    if not isinstance(states, dict):
        return False
    return all(is_valid_spectrum(states.get(name)) for name in INTERNAL_STATE_NAMES)


class DiagnosisMetadata(BaseModel):
    key_count: int = 0
    valid_core_dimensions: int = 0
    missing_core_dimensions: List[str] = Field(default_factory=list)
    stress_dimensions_found: int = 0
    missing_stress_dimensions: List[str] = Field(default_factory=list)
    non_primitive_keys: List[str] = Field(default_factory=list)
    nan_value_keys: List[str] = Field(default_factory=list)
    has_values_dimensions: bool = False
    has_work_style_dimensions: bool = False
    is_likely_v2: bool = False


class ScoreDiagnosis(BaseModel):
    is_valid: bool
    issues: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    suggestion: str = ""
    next_steps: List[str] = Field(default_factory=list)
    metadata: DiagnosisMetadata = Field(default_factory=DiagnosisMetadata)


def _suggestion(metadata: DiagnosisMetadata, issues: List[str], warnings: List[str]) -> str:
    missing = len(metadata.missing_core_dimensions)
    if 0 < missing < 4:
        return "Some core dimension scores are missing. This often happens when saved data is partially corrupted."
    if missing >= 4:
        if metadata.is_likely_v2:
            return "This looks like an older (v2) assessment. Use the upgrade flow to convert it."
        return "Many required scores are missing, so results cannot be reliably displayed."
    if metadata.non_primitive_keys or metadata.nan_value_keys:
        return "The score data contains invalid values. This can happen with incompatible saved assessments or interrupted saves."
    if warnings and not issues:
        return "The score data has minor inconsistencies. Results may still be viewable, but some features could be incomplete."
    if issues:
        return "Please restart the assessment to generate complete, valid results."
    return ""


def _next_steps(metadata: DiagnosisMetadata) -> List[str]:
    steps = ["Reload the saved history to re-run recovery."]
    if metadata.is_likely_v2:
        steps.append("Use the upgrade option for older saved assessments.")
    if metadata.non_primitive_keys:
        steps.append("If this assessment was saved on an older version, retake it or clear saved results.")
    steps.append("If this keeps happening, start a new assessment to generate fresh results.")
    return steps


def diagnose_scores(scores: Any, is_v3: bool = False) -> ScoreDiagnosis:
    """
    Structural diagnosis of a dimension score mapping.

    Valid when every value is a primitive and all 8 `_usual` entries are numbers
    in [0, 100]. For schema-version-3 records all 8 `_stress` entries must be
    present as well.
    """
    if not isinstance(scores, dict):
        return ScoreDiagnosis(
            is_valid=False,
            issues=["Scores is not a valid mapping"],
            suggestion="Invalid scores structure detected",
            next_steps=_next_steps(DiagnosisMetadata()),
        )

    issues: List[str] = []
    warnings: List[str] = []
    metadata = DiagnosisMetadata(key_count=len(scores))

    for key, value in scores.items():
        if value is not None and not is_primitive(value):
            metadata.non_primitive_keys.append(key)
        elif isinstance(value, float) and math.isnan(value):
            metadata.nan_value_keys.append(key)

    if metadata.non_primitive_keys:
        issues.append(f"Non-primitive values found in keys: {', '.join(metadata.non_primitive_keys)}")
    if metadata.nan_value_keys:
        issues.append(f"NaN values found in keys: {', '.join(metadata.nan_value_keys)}")
    if scores and all(value is None for value in scores.values()):
        issues.append("All values are null")

    out_of_range = []
    for dim in CORE_DIMENSIONS:
        key = f"{dim}_usual"
        value = scores.get(key)
        if value is None:
            metadata.missing_core_dimensions.append(dim)
        elif is_number(value) and 0 <= value <= 100:
            metadata.valid_core_dimensions += 1
        else:
            out_of_range.append(key)

    if len(metadata.missing_core_dimensions) == len(CORE_DIMENSIONS):
        issues.append("No valid core dimension scores found")
    elif metadata.missing_core_dimensions:
        issues.append(f"Missing core dimensions: {', '.join(metadata.missing_core_dimensions)}")
    if out_of_range:
        issues.append(f"Core dimensions outside 0-100 or not numeric: {', '.join(out_of_range)}")

    for dim in CORE_DIMENSIONS:
        if scores.get(f"{dim}_stress") is None:
            metadata.missing_stress_dimensions.append(dim)
        else:
            metadata.stress_dimensions_found += 1

    metadata.has_values_dimensions = any(k.startswith("values_") for k in scores)
    metadata.has_work_style_dimensions = any(k.startswith("work_") for k in scores)

    unscoped = [dim for dim in CORE_DIMENSIONS if dim in scores]
    if unscoped:
        warnings.append(
            f"Found unscoped core dimension keys ({', '.join(unscoped)}). "
            f"Expected keys like \"assertiveness_usual\" / \"assertiveness_stress\"."
        )

    if is_v3 and metadata.missing_stress_dimensions:
        if metadata.stress_dimensions_found == 0:
            issues.append("No stress dimension scores found")
        else:
            issues.append(f"Missing stress dimensions: {', '.join(metadata.missing_stress_dimensions)}")
    elif 0 < metadata.stress_dimensions_found < len(CORE_DIMENSIONS):
        warnings.append(f"Partial stress dimension data: {metadata.stress_dimensions_found}/{len(CORE_DIMENSIONS)} found")

    metadata.is_likely_v2 = (
        is_v3
        and (metadata.has_values_dimensions or metadata.has_work_style_dimensions)
        and metadata.stress_dimensions_found == 0
    )
    if metadata.is_likely_v2:
        warnings.append("v2-like score structure detected in a record marked as v3")

    return ScoreDiagnosis(
        is_valid=not issues,
        issues=issues,
        warnings=warnings,
        suggestion=_suggestion(metadata, issues, warnings),
        next_steps=_next_steps(metadata),
        metadata=metadata,
    )


class RecordValidation(BaseModel):
    is_valid: bool
    issues: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    severity: Literal["ok", "warning", "critical"] = "ok"


def validate_results(results: Any) -> RecordValidation:
    if not isinstance(results, dict):
        return RecordValidation(is_valid=False, issues=["Invalid results structure"], severity="critical")

    issues: List[str] = []
    warnings: List[str] = []
    if not results.get("dimensions") and not results.get("scores"):
        warnings.append("No dimension scores found")
    if not results.get("archetype"):
        warnings.append("No archetype found")

    if results.get("components") is not None and not is_valid_components(results["components"]):
        issues.append("Invalid components structure")
    if results.get("birkman_color") is not None and not is_valid_birkman_color(results["birkman_color"]):
        issues.append("Invalid Birkman color structure")
    if results.get("birkman_states") is not None and not is_valid_birkman_states(results["birkman_states"]):
        issues.append("Invalid Birkman states structure")
    for field in ("values_profile", "work_style_profile"):
        if results.get(field) is not None and not is_valid_numeric_mapping(results[field]):
            issues.append(f"Invalid {field} structure")

    return RecordValidation(
        is_valid=not issues,
        issues=issues,
        warnings=warnings,
        severity="critical" if issues else "warning" if warnings else "ok",
    )


def validate_record(record: Any) -> RecordValidation:
    """Summary check of a stored assessment record and its embedded models."""
    if not isinstance(record, dict):
        return RecordValidation(is_valid=False, issues=["Invalid assessment structure"], severity="critical")

    issues: List[str] = []
    warnings: List[str] = []
    if not record.get("id"):
        issues.append("Missing assessment id")
    if not record.get("userName"):
        warnings.append("Missing userName")
    if not record.get("version"):
        warnings.append("Missing version")

    results: Optional[Dict[str, Any]] = record.get("results")
    if not results:
        issues.append("Missing results")
    else:
        nested = validate_results(results)
        issues.extend(nested.issues)
        warnings.extend(nested.warnings)

    return RecordValidation(
        is_valid=not issues,
        issues=issues,
        warnings=warnings,
        severity="critical" if issues else "warning" if warnings else "ok",
    )
