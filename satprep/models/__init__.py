"""Pydantic models."""
from satprep.models.attempts import (
    AttemptResponse,
    AttemptSubmitRequest,
    AttemptSubmitResponse,
    DashboardStats,
    ScoreResult,
    Tally,
)
from satprep.models.questions import (
    Question,
    QuestionSetCreate,
    QuestionSetDetail,
    QuestionSetSummary,
    QuestionType,
    QuestionView,
    TestLength,
)
from satprep.models.sat import (
    AnswerRequest,
    DirectionsModel,
    FlowStateModel,
    ModuleSummary,
    SatSessionResponse,
    SatSessionStart,
)
from satprep.models.tests import GeneratedTest, TestConfig, TestType

__all__ = [
    "AnswerRequest",
    "AttemptResponse",
    "AttemptSubmitRequest",
    "AttemptSubmitResponse",
    "DashboardStats",
    "DirectionsModel",
    "FlowStateModel",
    "GeneratedTest",
    "ModuleSummary",
    "Question",
    "QuestionSetCreate",
    "QuestionSetDetail",
    "QuestionSetSummary",
    "QuestionType",
    "QuestionView",
    "SatSessionResponse",
    "SatSessionStart",
    "ScoreResult",
    "Tally",
    "TestConfig",
    "TestLength",
    "TestType",
]
