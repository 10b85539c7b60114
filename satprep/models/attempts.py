"""Attempt-related Pydantic models."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from satprep.utils.time_utils import ensure_utc


class Tally(BaseModel):
    correct: int = 0
    total: int = 0


class ScoreResult(BaseModel):
    """Result of scoring a set of answers."""

    score: int
    correct: int
    total: int
    by_topic: dict[str, Tally] = Field(default_factory=dict)
    by_section: dict[str, Tally] = Field(default_factory=dict)


class AttemptSubmitRequest(BaseModel):
    """Model for submitting the answers of an attempt."""

    answers: dict[str, str] = Field(default_factory=dict)
    time_spent_seconds: int = Field(0, ge=0)


class AttemptResponse(BaseModel):
    """Attempt as returned by the API."""

    id: str
    test_id: str
    total_questions: int | None
    correct_answers: int | None
    score: int | None
    time_spent_seconds: int | None
    started_at: datetime
    completed_at: datetime | None
    feedback: dict[str, Any] | None

    class Config:
        from_attributes = True

    @field_validator("started_at", "completed_at")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class AttemptSubmitResponse(BaseModel):
    """Model for attempt submission response."""

    attempt: AttemptResponse
    result: ScoreResult


class DashboardStats(BaseModel):
    """Progress summary over a user's completed attempts."""

    best_score: int
    avg_accuracy: int
    tests_taken: int
    score_change: int
    has_progress: bool
