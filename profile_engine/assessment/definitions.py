# profile_engine/assessment/definitions.py
# Static definitions for the derived models: colour weights, component seeds,
# upgrade blend weights and the MBTI profile table.

from typing import Dict, List, Tuple

# --- Colour spectrum weights ---
# Each colour is a sum of (dimension, weight, inverted) terms over `_usual` scores.
# An inverted term contributes weight * (100 - score).
COLOR_WEIGHTS: Dict[str, List[Tuple[str, float, bool]]] = {
    "Red": [
        ("assertiveness", 0.4, False),
        ("theoretical_orientation", 0.3, True),
        ("sociability", 0.3, False),
    ],
    "Green": [
        ("theoretical_orientation", 0.4, False),
        ("sociability", 0.3, True),
        ("creativity", 0.3, True),
    ],
    "Yellow": [
        ("sociability", 0.4, False),
        ("emotional_intelligence", 0.3, False),
        ("creativity", 0.3, False),
    ],
    "Blue": [
        ("assertiveness", 0.3, True),
        ("sociability", 0.3, True),
        ("emotional_intelligence", 0.4, False),
    ],
}

NEUTRAL_BIRKMAN_COLOR = {
    "primary": "Yellow",
    "secondary": "Blue",
    "spectrum": {"Red": 25, "Green": 25, "Yellow": 25, "Blue": 25},
}

# --- Component seeds ---
# component -> (source dimension or None, offset, factor)
# seed = offset + factor * dimension_usual; a None source seeds at `offset`.
COMPONENT_SEEDS: Dict[str, Tuple[str, float, float]] = {
    "social_energy": ("sociability", 0.0, 1.0),
    "physical_energy": (None, 50.0, 0.0),
    "emotional_energy": ("emotional_intelligence", 0.0, 1.0),
    "self_consciousness": ("assertiveness", 50.0, -0.5),
    "assertiveness": ("assertiveness", 0.0, 1.0),
    "insistence": ("conscientiousness", 50.0, 0.3),
    "incentives": (None, 50.0, 0.0),
    "restlessness": ("flexibility", 0.0, 1.0),
    "thought": ("theoretical_orientation", 0.0, 1.0),
}

# Weight kept on the seed when an upgrade answer refines a component.
COMPONENT_SEED_WEIGHT = 0.6

# --- Upgrade blend weights ---
# component -> (legacy dimension, weight on upgrade component, invert dimension)
# blended = w * upgrade + (1 - w) * dimension (or 100 - dimension when inverted)
UPGRADE_BLEND_WEIGHTS: Dict[str, Tuple[str, float, bool]] = {
    "social_energy": ("sociability", 0.5, False),
    "emotional_energy": ("emotional_intelligence", 0.5, False),
    "assertiveness": ("assertiveness", 0.4, False),
    "self_consciousness": ("assertiveness", 0.6, True),
    "insistence": ("conscientiousness", 0.6, False),
    "restlessness": ("flexibility", 0.5, False),
    "thought": ("theoretical_orientation", 0.4, False),
}

# --- MBTI overlay ---
MBTI_MIDPOINT = 50
MBTI_MAX_CONFIDENCE = 95
MBTI_DEFAULT_TYPE = "INTJ"
MBTI_ALTERNATIVE_WINDOW = 10

MBTI_TYPES = {
    'INTJ': {
        'name': 'INTJ - The Architect',
        'description': 'Strategic, conceptual, and independent thinkers who excel at developing long-range plans and innovating systems.',
        'cognitiveStack': ['Ni', 'Te', 'Fi', 'Se'],
        'traits': ['Strategic', 'Independent', 'Visionary', 'Systematic'],
    },
    'INTP': {
        'name': 'INTP - The Thinker',
        'description': 'Analytical and objective theorists who love exploring concepts and finding logical solutions to complex problems.',
        'cognitiveStack': ['Ti', 'Ne', 'Si', 'Fe'],
        'traits': ['Analytical', 'Objective', 'Innovative', 'Curious'],
    },
    'ENTJ': {
        'name': 'ENTJ - The Commander',
        'description': 'Bold, strategic leaders who excel at organizing people and resources to achieve ambitious goals efficiently.',
        'cognitiveStack': ['Te', 'Ni', 'Se', 'Fi'],
        'traits': ['Strategic', 'Decisive', 'Efficient', 'Leadership-focused'],
    },
    'ENTP': {
        'name': 'ENTP - The Debater',
        'description': 'Quick-witted and innovative brainstormers who enjoy exploring possibilities and challenging conventional thinking.',
        'cognitiveStack': ['Ne', 'Ti', 'Fe', 'Si'],
        'traits': ['Innovative', 'Adaptable', 'Strategic', 'Energetic'],
    },
    'INFJ': {
        'name': 'INFJ - The Advocate',
        'description': 'Insightful and principled idealists who are driven to help others and make a meaningful difference in the world.',
        'cognitiveStack': ['Ni', 'Fe', 'Ti', 'Se'],
        'traits': ['Insightful', 'Principled', 'Compassionate', 'Visionary'],
    },
    'INFP': {
        'name': 'INFP - The Mediator',
        'description': 'Idealistic and empathetic individuals who seek harmony and are driven by their core values and beliefs.',
        'cognitiveStack': ['Fi', 'Ne', 'Si', 'Te'],
        'traits': ['Idealistic', 'Empathetic', 'Authentic', 'Flexible'],
    },
    'ENFJ': {
        'name': 'ENFJ - The Protagonist',
        'description': 'Charismatic and inspiring leaders who are driven to help others grow and create positive change.',
        'cognitiveStack': ['Fe', 'Ni', 'Se', 'Ti'],
        'traits': ['Charismatic', 'Inspiring', 'Altruistic', 'Organized'],
    },
    'ENFP': {
        'name': 'ENFP - The Campaigner',
        'description': 'Enthusiastic and creative free spirits who love exploring possibilities and connecting with others.',
        'cognitiveStack': ['Ne', 'Fi', 'Te', 'Si'],
        'traits': ['Enthusiastic', 'Creative', 'Sociable', 'Curious'],
    },
    'ISTJ': {
        'name': 'ISTJ - The Logistician',
        'description': 'Practical and detail-oriented individuals who value tradition, stability, and systematic approaches to work.',
        'cognitiveStack': ['Si', 'Te', 'Fi', 'Ne'],
        'traits': ['Practical', 'Reliable', 'Detail-oriented', 'Systematic'],
    },
    'ISFJ': {
        'name': 'ISFJ - The Defender',
        'description': 'Caring and loyal helpers who are committed to their responsibilities and supporting others.',
        'cognitiveStack': ['Si', 'Fe', 'Ti', 'Ne'],
        'traits': ['Caring', 'Loyal', 'Practical', 'Supportive'],
    },
    'ESTJ': {
        'name': 'ESTJ - The Executive',
        'description': 'Organized and results-driven leaders who excel at managing people and projects efficiently.',
        'cognitiveStack': ['Te', 'Si', 'Ne', 'Fi'],
        'traits': ['Organized', 'Efficient', 'Direct', 'Results-driven'],
    },
    'ESFJ': {
        'name': 'ESFJ - The Consul',
        'description': "Sociable and caring individuals who create harmony and are skilled at understanding others' needs.",
        'cognitiveStack': ['Fe', 'Si', 'Ne', 'Ti'],
        'traits': ['Sociable', 'Caring', 'Harmonious', 'Supportive'],
    },
    'ISTP': {
        'name': 'ISTP - The Virtuoso',
        'description': 'Practical and observant problem-solvers who excel at understanding how things work and fixing problems.',
        'cognitiveStack': ['Ti', 'Se', 'Ni', 'Fe'],
        'traits': ['Practical', 'Observant', 'Adaptable', 'Problem-solver'],
    },
    'ISFP': {
        'name': 'ISFP - The Adventurer',
        'description': 'Gentle and artistic souls who live in the moment and enjoy exploring their environment.',
        'cognitiveStack': ['Fi', 'Se', 'Ni', 'Te'],
        'traits': ['Gentle', 'Artistic', 'Flexible', 'Observant'],
    },
    'ESTP': {
        'name': 'ESTP - The Entrepreneur',
        'description': 'Energetic and action-oriented individuals who excel at solving problems in the moment.',
        'cognitiveStack': ['Se', 'Ti', 'Fe', 'Ni'],
        'traits': ['Energetic', 'Practical', 'Direct', 'Adaptable'],
    },
    'ESFP': {
        'name': 'ESFP - The Entertainer',
        'description': 'Spontaneous and enthusiastic performers who love bringing joy to others and living in the moment.',
        'cognitiveStack': ['Se', 'Fi', 'Te', 'Ni'],
        'traits': ['Spontaneous', 'Enthusiastic', 'Sociable', 'Practical'],
    },
}

# --- Career alignment ---
CAREER_COLOR_WEIGHT = 40
CAREER_COMPONENT_WEIGHT = 60
CAREER_SECONDARY_COLOR_CREDIT = 0.7
