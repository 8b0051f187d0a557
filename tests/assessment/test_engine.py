import json
import logging

import pytest

from profile_engine.assessment.engine import ProfileEngine, compute_profile
from profile_engine.constants import CORE_DIMENSIONS, COMPONENT_NAMES, INTERNAL_STATE_NAMES

from conftest import answer_all

RESULT_KEYS = {
    "dimensions",
    "archetype",
    "mbti",
    "values_profile",
    "work_style_profile",
    "components",
    "birkman_color",
    "birkman_states",
    "stressDeltas",
    "adaptabilityScore",
    "dimensionLevels",
}


@pytest.fixture(scope="module")
def engine():
    """Provides a ProfileEngine loaded with the shipped catalog."""
    try:
        return ProfileEngine()
    except Exception as e:
        pytest.fail(f"Failed to initialize ProfileEngine: {e}")


@pytest.fixture
def neutral_answers(catalog):
    return answer_all(catalog.questions, 3)


def test_engine_catalog_views(engine, catalog):
    assert engine.questions is catalog.questions
    assert engine.archetypes is catalog.archetypes
    assert engine.upgrade_questions
    assert all(q.context == "upgrade" for q in engine.upgrade_questions)


def test_compute_profile_neutral_answers(engine, neutral_answers):
    results = engine.compute_profile(neutral_answers)

    assert set(results) == RESULT_KEYS
    assert len(results["dimensions"]) == 16
    assert all(score == 50 for score in results["dimensions"].values())
    assert results["archetype"]["id"] == "catalyst"
    assert results["mbti"]["type"] == "ENFJ"
    assert results["birkman_color"]["spectrum"] == {"Red": 25, "Green": 25, "Yellow": 25, "Blue": 25}
    assert list(results["components"]) == COMPONENT_NAMES
    assert list(results["birkman_states"]) == INTERNAL_STATE_NAMES
    assert results["stressDeltas"] == {dim: 0 for dim in CORE_DIMENSIONS}
    assert results["adaptabilityScore"] == 100
    assert results["dimensionLevels"] == {dim: "medium" for dim in CORE_DIMENSIONS}
    assert results["values_profile"]["autonomy"] == 50
    assert results["work_style_profile"]["pace"] == 50


def test_compute_profile_accepts_json_round_tripped_answers(engine, neutral_answers):
    round_tripped = json.loads(json.dumps(neutral_answers))
    assert engine.compute_profile(round_tripped) == engine.compute_profile(neutral_answers)


def test_compute_profile_is_repeatable(catalog, neutral_answers):
    first = compute_profile(neutral_answers, catalog.questions, catalog.archetypes)
    second = compute_profile(neutral_answers, catalog.questions, catalog.archetypes)
    assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)


def test_compute_profile_logs_summary(catalog, neutral_answers, caplog):
    with caplog.at_level(logging.INFO):
        compute_profile(neutral_answers, catalog.questions, catalog.archetypes)
    assert "Profile computed: archetype=catalyst mbti=ENFJ" in caplog.text


def test_compute_profile_empty_answers(engine):
    results = engine.compute_profile({})
    assert all(score == 0 for score in results["dimensions"].values())
    assert results["birkman_color"]["spectrum"] == {"Red": 25, "Green": 25, "Yellow": 25, "Blue": 25}


def test_alternative_types(engine, neutral_answers):
    results = engine.compute_profile(neutral_answers)
    assert [alt["type"] for alt in engine.alternative_types(results)] == ["INFJ", "ESFJ"]


def test_rank_careers(engine, neutral_answers):
    ranked = engine.rank_careers(engine.compute_profile(neutral_answers))
    assert len(ranked) == 8
    assert "alignmentScore" in ranked[0]


def test_describe(engine):
    assert engine.describe_color("Blue").name == "Blue"
    assert engine.describe_component("insistence").scale_labels.high
