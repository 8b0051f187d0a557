# tests/assessment/test_derived.py
import logging

import pytest

from profile_engine.assessment.derived import (
    apply_remainder,
    normalize_spectrum,
    calculate_color_spectrum,
    calculate_birkman_color,
    calculate_components,
    calculate_components_from_upgrade_answers,
    calculate_internal_states,
    calculate_mbti,
    get_alternative_interpretations,
    get_color_description,
    get_component_description,
    get_highest_component,
)
from profile_engine.assessment.definitions import MBTI_TYPES
from profile_engine.assessment.models import MbtiProfile
from profile_engine.constants import COLOR_NAMES, COMPONENT_NAMES, INTERNAL_STATE_NAMES

from conftest import full_scores


# --- Colour spectrum ---

def test_remainder_goes_to_largest_color():
    """A weighted total of 97 gets the missing 3 points on the largest colour."""
    spectrum = apply_remainder({"Red": 30, "Green": 20, "Yellow": 40, "Blue": 7})
    assert spectrum == {"Red": 30, "Green": 20, "Yellow": 43, "Blue": 7}
    assert sum(spectrum.values()) == 100


def test_remainder_removes_overshoot():
    spectrum = apply_remainder({"Red": 51, "Green": 17, "Yellow": 17, "Blue": 17})
    assert spectrum["Red"] == 49
    assert sum(spectrum.values()) == 100


def test_normalize_spectrum_rounding_remainder_tie():
    # three thirds round down to 33; the tie on the largest goes to Red
    spectrum = normalize_spectrum({"Red": 1.0, "Green": 1.0, "Yellow": 1.0, "Blue": 0.0})
    assert spectrum == {"Red": 34, "Green": 33, "Yellow": 33, "Blue": 0}


def test_balanced_scores_give_balanced_spectrum():
    assert calculate_color_spectrum(full_scores(usual=50)) == {c: 25 for c in COLOR_NAMES}


def test_zero_and_missing_scores_read_as_neutral():
    assert calculate_color_spectrum({}) == calculate_color_spectrum(full_scores(usual=0))
    assert calculate_color_spectrum({}) == {c: 25 for c in COLOR_NAMES}


def test_high_sociability_spectrum():
    scores = full_scores(usual=50)
    scores["sociability_usual"] = 100
    color = calculate_birkman_color(scores)
    assert color["spectrum"] == {"Red": 32, "Green": 17, "Yellow": 34, "Blue": 17}
    assert color["primary"] == "Yellow"
    assert color["secondary"] == "Red"


def test_birkman_color_ties_follow_catalog_order():
    color = calculate_birkman_color(full_scores(usual=50))
    assert (color["primary"], color["secondary"]) == ("Red", "Green")


def test_birkman_color_fallback(caplog):
    with caplog.at_level(logging.ERROR):
        color = calculate_birkman_color({"assertiveness_usual": "high"})
    assert color == {
        "primary": "Yellow",
        "secondary": "Blue",
        "spectrum": {"Red": 25, "Green": 25, "Yellow": 25, "Blue": 25},
    }
    assert "Error calculating Birkman color" in caplog.text


def test_birkman_color_fallback_is_a_copy():
    first = calculate_birkman_color({"assertiveness_usual": "high"})
    first["spectrum"]["Red"] = 99
    second = calculate_birkman_color({"assertiveness_usual": "high"})
    assert second["spectrum"]["Red"] == 25


# --- Components ---

def test_components_seeded_from_dimensions(catalog):
    components = calculate_components({}, catalog.questions, full_scores(usual=50))
    assert list(components) == COMPONENT_NAMES
    assert components["social_energy"] == 50
    assert components["physical_energy"] == 50
    assert components["self_consciousness"] == 25
    assert components["insistence"] == 65
    assert components["incentives"] == 50


def test_components_refined_by_focus_answer(catalog):
    components = calculate_components({121: 5}, catalog.questions, full_scores(usual=50))
    # 0.6 * 50 + 0.4 * 100
    assert components["social_energy"] == 70


def test_components_in_range(catalog):
    answers = {q.id: 5 for q in catalog.upgrade_questions()}
    components = calculate_components(answers, catalog.questions, full_scores(usual=100))
    assert all(0 <= value <= 100 for value in components.values())


def test_components_fallback(catalog, caplog):
    with caplog.at_level(logging.ERROR):
        components = calculate_components({}, catalog.questions, {"sociability_usual": "x"})
    assert components == {name: 50 for name in COMPONENT_NAMES}
    assert "Error calculating components" in caplog.text


def test_components_from_upgrade_answers(catalog):
    components = calculate_components_from_upgrade_answers({125: 5, 124: 1}, catalog.upgrade_questions())
    assert components["assertiveness"] == 100
    assert components["self_consciousness"] == 0
    assert components["thought"] == 50


# --- Internal states ---

def test_internal_states_accumulate_weights(catalog):
    states = calculate_internal_states({135: 5}, catalog.questions)
    # Yellow 25 + 15, Blue 25 + 10 over a total of 125
    assert states["interests"] == {"Red": 20, "Green": 20, "Yellow": 32, "Blue": 28}
    assert states["needs"] == {c: 25 for c in COLOR_NAMES}


def test_internal_states_remainder(catalog):
    states = calculate_internal_states({136: 3}, catalog.questions)
    assert states["usual_behavior"] == {"Red": 34, "Green": 22, "Yellow": 22, "Blue": 22}


def test_internal_states_each_sum_to_100(catalog):
    answers = {q: 4 for q in range(135, 141)}
    states = calculate_internal_states(answers, catalog.questions)
    assert list(states) == INTERNAL_STATE_NAMES
    for spectrum in states.values():
        assert sum(spectrum.values()) == 100


# --- MBTI ---

def test_mbti_above_midpoint():
    mbti = calculate_mbti(full_scores(usual=60))
    assert mbti["type"] == "ENFJ"
    assert mbti["confidenceScores"] == {"E_I": 20, "N_S": 20, "F_T": 20, "J_P": 20}
    assert mbti["confidence"] == 20
    assert mbti["profile"]["name"] == "ENFJ - The Protagonist"


def test_mbti_below_midpoint():
    mbti = calculate_mbti(full_scores(usual=30))
    assert mbti["type"] == "ISTP"
    assert mbti["confidence"] == 40


def test_mbti_midpoint_takes_first_letter():
    assert calculate_mbti(full_scores(usual=50))["type"] == "ENFJ"


def test_mbti_missing_scores_read_as_zero():
    mbti = calculate_mbti({})
    assert mbti["type"] == "ISTP"
    assert mbti["confidence"] == 95


def test_mbti_non_numeric_falls_back():
    mbti = calculate_mbti({"assertiveness_usual": "abc"})
    assert mbti["type"] == "INTJ"
    assert mbti["confidence"] == 0


def test_mbti_profiles_are_well_formed():
    for profile in MBTI_TYPES.values():
        MbtiProfile.model_validate(profile)
    assert len(MBTI_TYPES) == 16


def test_mbti_profile_is_a_validated_copy():
    mbti = calculate_mbti(full_scores(usual=80))
    assert mbti["profile"] == MbtiProfile.model_validate(MBTI_TYPES[mbti["type"]]).model_dump()
    mbti["profile"]["traits"].append("Edited")
    assert "Edited" not in MBTI_TYPES[mbti["type"]]["traits"]


def test_alternative_near_extraversion_midpoint():
    scores = full_scores(usual=60)
    scores["assertiveness_usual"] = 52
    scores["sociability_usual"] = 54
    scores["creativity_usual"] = 80
    scores["flexibility_usual"] = 80
    mbti = calculate_mbti(scores)
    assert mbti["type"] == "ENFJ"

    alternatives = get_alternative_interpretations(scores, mbti)
    assert len(alternatives) == 1
    assert alternatives[0]["type"] == "INFJ"
    assert alternatives[0]["confidence"] == 44  # 30 + 20 * (1 - 3 / 10)


def test_alternative_window_is_strict():
    scores = full_scores(usual=60)
    assert get_alternative_interpretations(scores, calculate_mbti(scores)) == []


def test_two_alternatives_at_midpoint():
    scores = full_scores(usual=50)
    alternatives = get_alternative_interpretations(scores, calculate_mbti(scores))
    assert [a["type"] for a in alternatives] == ["INFJ", "ESFJ"]
    assert all(a["confidence"] == 50 for a in alternatives)


# --- Lookups ---

def test_color_description(catalog):
    assert get_color_description("Green", catalog.colors).name == "Green"
    assert get_color_description("Purple", catalog.colors).name == "Red"
    assert get_color_description("Red", []) is None


def test_component_description(catalog):
    assert get_component_description("thought", catalog.components).id == "thought"
    assert get_component_description("unknown", catalog.components).id == "social_energy"


@pytest.mark.parametrize("components, expected", [
    ({"social_energy": 80, "thought": 80, "insistence": 30}, {"name": "social energy", "score": 80}),
    ({"thought": 10, "bad": "x"}, {"name": "thought", "score": 10}),
    ({"bad": "x"}, {"name": "Unknown", "score": 0}),
    (None, {"name": "Unknown", "score": 0}),
])
def test_get_highest_component(components, expected):
    assert get_highest_component(components) == expected
