# tests/assessment/test_careers.py
import pytest

from profile_engine.assessment.careers import (
    component_fit_match,
    score_career_family,
    rank_career_families,
)
from profile_engine.assessment.models import CareerFamily
from profile_engine.constants import COMPONENT_NAMES


@pytest.fixture
def family():
    return CareerFamily(
        id="research",
        name="Research",
        birkman_alignment=["Red"],
        component_fit={"thought": "high"},
    )


def color(primary, secondary, **spectrum):
    base = {"Red": 25, "Green": 25, "Yellow": 25, "Blue": 25}
    base.update(spectrum)
    return {"primary": primary, "secondary": secondary, "spectrum": base}


@pytest.mark.parametrize("target, value, expected", [
    ("high", 70, 1),
    ("high", 50, 0.5),
    ("high", 49, 0),
    ("medium", 33, 1),
    ("medium", 67, 0.5),
    ("low", 30, 1),
    ("low", 50, 0.5),
    ("low", 51, 0),
    ("medium-high", 60, 1),
    ("medium-high", 40, 0.6),
    ("low-medium", 40, 1),
    ("low-medium", 61, 0),
    ("unknown", 50, 0),
])
def test_component_fit_match(target, value, expected):
    assert component_fit_match(target, value) == expected


def test_primary_color_alignment(family):
    assert score_career_family(family, color("Red", "Blue"), {"thought": 80}) == 100


def test_secondary_color_alignment(family):
    # 40 * 0.7 + 60
    assert score_career_family(family, color("Blue", "Red"), {"thought": 80}) == 88


def test_spectrum_overlap_alignment(family):
    # 30% of 40 + half of 60
    assert score_career_family(family, color("Blue", "Green", Red=30), {"thought": 55}) == 42


def test_missing_component_reads_as_neutral(family):
    assert score_career_family(family, color("Red", "Blue"), {}) == 70


def test_rank_career_families_sorted(catalog):
    components = {name: 50 for name in COMPONENT_NAMES}
    ranked = rank_career_families(color("Yellow", "Blue"), components, catalog.career_families)
    assert len(ranked) == len(catalog.career_families)
    scores = [entry["alignmentScore"] for entry in ranked]
    assert scores == sorted(scores, reverse=True)
    assert all(0 <= score <= 100 for score in scores)


@pytest.mark.parametrize("birkman_color, components", [
    (None, {}),
    ({"primary": None, "spectrum": {}}, {}),
    ({"primary": "Red", "spectrum": None}, {}),
    (color("Red", "Blue"), None),
])
def test_rank_career_families_unusable_input(catalog, birkman_color, components):
    assert rank_career_families(birkman_color, components, catalog.career_families) == []
