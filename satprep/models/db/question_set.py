"""
Question set model: the question store the test assembler draws from.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from satprep.database import Base
from satprep.utils.json_utils import json_dump, load_json_column


class QuestionSet(Base):
    """
    An authored set of SAT questions.
    Questions are embedded as a JSON array and are immutable once authored.
    """

    __tablename__ = "sat_tests"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Lookup keys used by the assembler
    test_type: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    difficulty: Mapped[str] = mapped_column(
        String(16), index=True, default="normal", nullable=False
    )
    is_official: Mapped[bool] = mapped_column(default=False, index=True, nullable=False)

    length: Mapped[str] = mapped_column(String(16), default="medium", nullable=False)
    section: Mapped[str | None] = mapped_column(String(32), nullable=True)
    module_number: Mapped[int | None] = mapped_column(nullable=True)
    time_limit_minutes: Mapped[int | None] = mapped_column(nullable=True)

    questions_json: Mapped[str] = mapped_column(Text, default="[]", nullable=False)

    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    @property
    def questions(self) -> list[dict[str, Any]]:
        """Parse embedded questions from JSON."""
        value = load_json_column(self.questions_json, [])
        return value if isinstance(value, list) else []

    @questions.setter
    def questions(self, value: list[dict[str, Any]]) -> None:
        self.questions_json = json_dump(value or [])

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def __repr__(self) -> str:
        return (
            f"<QuestionSet(id={self.id}, test_type='{self.test_type}', "
            f"difficulty='{self.difficulty}')>"
        )
