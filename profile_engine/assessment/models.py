# profile_engine/assessment/models.py
# Pydantic models for the reference catalog and the saved session.

from pydantic import BaseModel, Field
from typing import List, Dict, Optional, Literal


class Question(BaseModel):
    id: int
    text: str = ""
    dimension: str
    context: Literal["usual", "stress", "upgrade"]
    reverse: bool = False
    targets: List[str] = Field(default_factory=list)
    upgrade_only: bool = False


class ArchetypeDefinition(BaseModel):
    id: str
    name: str
    icon: str = ""
    shortDescription: str = ""
    narrative: str = ""
    primaryDimensions: List[str]
    strengths: List[str] = Field(default_factory=list)
    blindSpots: List[str] = Field(default_factory=list)
    careerPaths: List[str] = Field(default_factory=list)
    teamRole: str = ""
    leadershipStyle: str = ""
    stressTriggers: List[str] = Field(default_factory=list)
    copingStrategies: List[str] = Field(default_factory=list)


class ColorDescription(BaseModel):
    name: Literal["Red", "Green", "Yellow", "Blue"]
    title: str
    description: str
    characteristics: List[str] = Field(default_factory=list)
    workplace_dynamics: str = ""


class ScaleLabels(BaseModel):
    low: str
    high: str


class ComponentDescription(BaseModel):
    id: str
    name: str
    description: str = ""
    scale_labels: ScaleLabels


class CareerFamily(BaseModel):
    id: str
    name: str
    description: str = ""
    birkman_alignment: List[Literal["Red", "Green", "Yellow", "Blue"]]
    # component name -> 'high' | 'medium' | 'low' | 'medium-high' | 'low-medium'
    component_fit: Dict[str, str] = Field(default_factory=dict)
    typical_roles: List[str] = Field(default_factory=list)
    work_environment: str = ""


class MbtiProfile(BaseModel):
    name: str
    description: str
    cognitiveStack: List[str]
    traits: List[str]


class ReferenceCatalog(BaseModel):
    version: str
    questions: List[Question]
    archetypes: List[ArchetypeDefinition]
    colors: List[ColorDescription] = Field(default_factory=list)
    components: List[ComponentDescription] = Field(default_factory=list)
    career_families: List[CareerFamily] = Field(default_factory=list)

    def upgrade_questions(self) -> List[Question]:
        return [q for q in self.questions if q.context == "upgrade"]

    def question_by_id(self, question_id: int) -> Optional[Question]:
        return next((q for q in self.questions if q.id == question_id), None)


class SessionSnapshot(BaseModel):
    """In-progress assessment state as kept under the session key."""
    userName: str
    currentQuestionIndex: int = 0
    answers: Dict[int, int] = Field(default_factory=dict)
    startedAt: str
    lastUpdated: str
