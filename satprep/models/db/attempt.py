"""
Attempt database model: one user taking one generated test.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from satprep.database import Base
from satprep.models.db.question_set import QuestionSet
from satprep.utils.json_utils import json_dump, load_json_column


class Attempt(Base):
    """
    Test attempt record.
    Created when a test is generated, completed once when it is scored.
    """

    __tablename__ = "test_attempts"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    test_id: Mapped[str] = mapped_column(
        ForeignKey("sat_tests.id", ondelete="RESTRICT"), index=True, nullable=False
    )

    # Answers keyed by question id, and the selection the user was given
    answers_json: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    questions_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    feedback_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Results
    total_questions: Mapped[int | None] = mapped_column(nullable=True)
    correct_answers: Mapped[int | None] = mapped_column(nullable=True)
    score: Mapped[int | None] = mapped_column(nullable=True)
    time_spent_seconds: Mapped[int | None] = mapped_column(nullable=True)

    # Timing
    started_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    question_set: Mapped["QuestionSet"] = relationship(QuestionSet)

    @property
    def answers(self) -> dict[str, str] | list:
        """Answers by question id; an empty list until the attempt is scored."""
        return load_json_column(self.answers_json, [])

    @answers.setter
    def answers(self, value: dict[str, str] | list) -> None:
        self.answers_json = json_dump(value)

    @property
    def questions(self) -> list[dict[str, Any]]:
        value = load_json_column(self.questions_json, [])
        return value if isinstance(value, list) else []

    @questions.setter
    def questions(self, value: list[dict[str, Any]] | None) -> None:
        self.questions_json = json_dump(value) if value else None

    @property
    def feedback(self) -> dict[str, Any] | None:
        value = load_json_column(self.feedback_json, None)
        return value if isinstance(value, dict) else None

    @feedback.setter
    def feedback(self, value: dict[str, Any] | None) -> None:
        self.feedback_json = json_dump(value) if value else None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def accuracy(self) -> float:
        """Fraction of questions answered correctly."""
        return (self.correct_answers or 0) / (self.total_questions or 1)
