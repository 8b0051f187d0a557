# profile_engine/constants.py
from enum import Enum
from typing import Dict, List


class Context(str, Enum):
    USUAL = "usual"
    STRESS = "stress"
    UPGRADE = "upgrade"


class SpecialDimension(str, Enum):
    INTERNAL_STATES = "internal_states"
    COMPONENT_FOCUS = "component_focus"


class ColorName(str, Enum):
    RED = "Red"
    GREEN = "Green"
    YELLOW = "Yellow"
    BLUE = "Blue"


class LogCategory(str, Enum):
    SCORING = "scoring"
    BIRKMAN = "birkman"
    UPGRADE = "upgrade"
    RECOVERY = "recovery"
    STORAGE = "storage"
    APP = "app"


# Catalog order. Every tie-break in the engine falls back to these orders.
CORE_DIMENSIONS: List[str] = [
    "assertiveness",
    "sociability",
    "conscientiousness",
    "flexibility",
    "emotional_intelligence",
    "creativity",
    "risk_appetite",
    "theoretical_orientation",
]

# Dimensions whose `_usual` entry is replaced by the usual/stress mean.
AGGREGATED_DIMENSIONS: List[str] = [
    "assertiveness",
    "sociability",
    "conscientiousness",
    "flexibility",
    "emotional_intelligence",
]

VALUES_DIMENSIONS: List[str] = [
    "values_autonomy",
    "values_mastery",
    "values_purpose",
    "values_security",
    "values_recognition",
    "values_expression",
]

WORK_STYLE_DIMENSIONS: List[str] = [
    "work_pace",
    "work_structure",
    "work_autonomy",
    "work_social",
    "work_sensory",
]

COLOR_NAMES: List[str] = [c.value for c in ColorName]

COMPONENT_NAMES: List[str] = [
    "social_energy",
    "physical_energy",
    "emotional_energy",
    "self_consciousness",
    "assertiveness",
    "insistence",
    "incentives",
    "restlessness",
    "thought",
]

INTERNAL_STATE_NAMES: List[str] = [
    "interests",
    "usual_behavior",
    "needs",
    "stress_behavior",
]

NEUTRAL_SCORE = 50

# Per-question colour weights for the internal-state questions.
INTERNAL_STATE_COLOR_WEIGHTS: Dict[int, Dict[str, int]] = {
    135: {"Yellow": 3, "Blue": 2},
    136: {"Red": 4},
    137: {"Red": 2, "Green": 2},
    138: {"Blue": 4},
    139: {"Green": 4},
    140: {"Red": 4},
}
