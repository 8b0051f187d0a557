import logging

import pytest

from profile_engine.constants import (
    CORE_DIMENSIONS,
    VALUES_DIMENSIONS,
    WORK_STYLE_DIMENSIONS,
    COMPONENT_NAMES,
    INTERNAL_STATE_NAMES,
)
from profile_engine.assessment.loader import load_default_catalog
from profile_engine.assessment.models import Question, ArchetypeDefinition
from profile_engine.core.config import EngineSettings
from profile_engine.storage.kv import InMemoryStore

# --- Helpers ---

def build_plain_questions():
    """
    A reverse-free question bank: 5 usual + 3 stress per core dimension,
    2 per values / work-style dimension. Ids are sequential from 1.
    """
    questions = []
    next_id = 1
    for dimension in CORE_DIMENSIONS:
        for context, count in (("usual", 5), ("stress", 3)):
            for _ in range(count):
                questions.append(Question(id=next_id, dimension=dimension, context=context))
                next_id += 1
    for dimension in VALUES_DIMENSIONS + WORK_STYLE_DIMENSIONS:
        for _ in range(2):
            questions.append(Question(id=next_id, dimension=dimension, context="usual"))
            next_id += 1
    return questions


def answer_all(questions, value):
    return {q.id: value for q in questions if q.context != "upgrade"}


def full_scores(usual=60, stress=40):
    scores = {}
    for dimension in CORE_DIMENSIONS:
        scores[f"{dimension}_usual"] = usual
        scores[f"{dimension}_stress"] = stress
    return scores


def valid_results(scores=None):
    """A well-formed current-schema results mapping."""
    return {
        "dimensions": scores if scores is not None else full_scores(),
        "archetype": {"id": "strategist", "name": "The Strategist"},
        "mbti": {"type": "INTJ"},
        "values_profile": {"autonomy": 50},
        "work_style_profile": {"pace": 50},
        "components": {name: 50 for name in COMPONENT_NAMES},
        "birkman_color": {
            "primary": "Red",
            "secondary": "Blue",
            "spectrum": {"Red": 40, "Green": 20, "Yellow": 10, "Blue": 30},
        },
        "birkman_states": {
            name: {"Red": 25, "Green": 25, "Yellow": 25, "Blue": 25} for name in INTERNAL_STATE_NAMES
        },
    }


# --- Fixtures ---

@pytest.fixture(scope="session")
def catalog():
    """The catalog shipped with the package."""
    return load_default_catalog()


@pytest.fixture
def plain_questions():
    return build_plain_questions()


@pytest.fixture
def archetypes(catalog):
    return list(catalog.archetypes)


@pytest.fixture
def test_logger():
    return logging.getLogger("profile_engine.tests")


@pytest.fixture
def settings():
    return EngineSettings(history_limit=5, session_max_age_days=7)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def current_record():
    return {
        "id": "session_1700000000000_abc123def",
        "userName": "Avery",
        "completedAt": "2024-03-01T10:00:00+00:00",
        "version": "3.0.1",
        "results": valid_results(),
    }


@pytest.fixture
def legacy_record():
    """A 2.x record with the profiles nested inside results.scores."""
    scores = {f"{dim}_usual": 55 for dim in CORE_DIMENSIONS}
    scores["values_profile"] = {"autonomy": 70, "mastery": 60}
    scores["work_style_profile"] = {"pace": 40}
    return {
        "id": "legacy-1",
        "userName": "Jordan",
        "completedAt": "2023-05-10T09:00:00+00:00",
        "version": "2.3.0",
        "results": {
            "scores": scores,
            "archetype": {"id": "connector", "name": "The Connector"},
            "mbti": {"type": "ENFP"},
        },
    }


@pytest.fixture
def restore_engine_logger():
    """Undoes setup_logging() changes to the package logger."""
    engine_logger = logging.getLogger("profile_engine")
    level, handlers = engine_logger.level, list(engine_logger.handlers)
    yield
    engine_logger.setLevel(level)
    engine_logger.handlers = handlers
