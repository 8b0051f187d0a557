# profile_engine/assessment/engine.py
# Full scoring pipeline: answers in, complete profile results out.

import logging
from typing import Dict, Any, List, Optional

from ..constants import LogCategory
from .aggregator import (
    normalize_answers,
    calculate_dimension_scores,
    calculate_values_profile,
    calculate_work_style_profile,
    filter_primitive_scores,
    calculate_stress_deltas,
    calculate_adaptability_score,
    calculate_dimension_levels,
)
from .archetype import determine_archetype
from .careers import rank_career_families
from .derived import (
    calculate_birkman_color,
    calculate_components,
    calculate_internal_states,
    calculate_mbti,
    get_alternative_interpretations,
    get_color_description,
    get_component_description,
)
from .loader import load_default_catalog
from .models import ReferenceCatalog, Question, ArchetypeDefinition

logger = logging.getLogger(__name__)


def compute_profile(
    answers: Dict[Any, Any],
    questions: List[Question],
    archetypes: List[ArchetypeDefinition],
    log: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Runs the full scoring pipeline over one answer set.

    Args:
        answers: question id -> Likert response (1-5). String ids are accepted.
        questions: the question catalog the answers refer to.
        archetypes: the archetype catalog, in catalog order.
        log: logger to report through; defaults to this module's logger.

    Returns:
        The current-schema `results` mapping: dimensions, archetype, mbti,
        values_profile, work_style_profile, components, birkman_color,
        birkman_states, stressDeltas, adaptabilityScore and dimensionLevels.
    """
    log = log or logger
    normalized = normalize_answers(answers, log)

    scores = filter_primitive_scores(calculate_dimension_scores(normalized, questions), log)
    stress_deltas = calculate_stress_deltas(scores)

    results = {
        "dimensions": scores,
        "archetype": determine_archetype(scores, archetypes, log),
        "mbti": calculate_mbti(scores, log),
        "values_profile": calculate_values_profile(normalized, questions),
        "work_style_profile": calculate_work_style_profile(normalized, questions),
        "components": calculate_components(normalized, questions, scores, log),
        "birkman_color": calculate_birkman_color(scores, log),
        "birkman_states": calculate_internal_states(normalized, questions, log),
        "stressDeltas": stress_deltas,
        "adaptabilityScore": calculate_adaptability_score(stress_deltas),
        "dimensionLevels": calculate_dimension_levels(scores),
    }

    log.info(
        f"Profile computed: archetype={results['archetype']['id']} mbti={results['mbti']['type']}",
        extra={"category": LogCategory.SCORING.value, "answers": len(normalized)},
    )
    return results


class ProfileEngine:
    """
    Scores answer sets against a reference catalog and answers lookups on it.
    """
    def __init__(self, catalog: Optional[ReferenceCatalog] = None, logger: Optional[logging.Logger] = None):
        """
        Args:
            catalog: reference catalog to score against. The catalog shipped
                     with the package is used when omitted.
            logger: logger handed to every scoring step.
        """
        self.catalog = catalog or load_default_catalog()
        self.logger = logger or logging.getLogger(__name__)
        self.upgrade_questions = self.catalog.upgrade_questions()

    @property
    def questions(self) -> List[Question]:
        return self.catalog.questions

    @property
    def archetypes(self) -> List[ArchetypeDefinition]:
        return self.catalog.archetypes

    def compute_profile(self, answers: Dict[Any, Any]) -> Dict[str, Any]:
        return compute_profile(answers, self.catalog.questions, self.catalog.archetypes, self.logger)

    def alternative_types(self, results: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Near-midpoint MBTI alternatives for a computed profile."""
        return get_alternative_interpretations(results.get("dimensions") or {}, results["mbti"])

    def rank_careers(self, results: Dict[str, Any]) -> List[Dict[str, Any]]:
        return rank_career_families(
            results.get("birkman_color"),
            results.get("components"),
            self.catalog.career_families,
            self.logger,
        )

    def describe_color(self, color_name: str):
        return get_color_description(color_name, self.catalog.colors)

    def describe_component(self, component_id: str):
        return get_component_description(component_id, self.catalog.components)
