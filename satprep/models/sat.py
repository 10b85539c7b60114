"""Pydantic models for four-module SAT sessions."""
from pydantic import BaseModel, Field

from satprep.models.attempts import ScoreResult
from satprep.models.questions import QuestionView
from satprep.sat_flow import Difficulty, FlowPhase, Section


class SatSessionStart(BaseModel):
    """Request to begin a full SAT sitting."""

    difficulty: Difficulty = Difficulty.NORMAL


class FlowStateModel(BaseModel):
    phase: FlowPhase
    current_section: Section
    current_module: int


class DirectionsModel(BaseModel):
    title: str
    time: str
    questions: int
    text: str


class ModuleSummary(BaseModel):
    """Progress of one module within the sitting."""

    section: Section
    module_number: int
    question_count: int
    answered_count: int
    score: int | None = None
    time_spent_seconds: int | None = None


class SatSessionResponse(BaseModel):
    """Snapshot of a SAT session for the client to render."""

    attempt_id: str
    flow: FlowStateModel
    time_limit_seconds: int | None = None
    directions: DirectionsModel | None = None
    questions: list[QuestionView] = Field(default_factory=list)
    answers: dict[str, str] = Field(default_factory=dict)
    flagged: list[str] = Field(default_factory=list)
    modules: list[ModuleSummary] = Field(default_factory=list)
    result: ScoreResult | None = None


class AnswerRequest(BaseModel):
    answer: str = Field(..., max_length=200)
