import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import satprep.models.db  # noqa: F401
from satprep import config
from satprep.app import create_app
from satprep.database import Base, get_db
from satprep.models.db import Attempt, QuestionSet


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def make_question(
    question_id: str,
    section: str = "math",
    difficulty: str = "normal",
    topic: str = "algebra",
    correct_answer: str = "A",
) -> dict[str, object]:
    return {
        "id": question_id,
        "type": "multiple_choice",
        "section": section,
        "difficulty": difficulty,
        "topic": topic,
        "text": f"Question {question_id}",
        "options": ["A", "B", "C", "D"],
        "correct_answer": correct_answer,
        "explanation": "",
    }


@pytest.fixture
def add_question_set(db):
    def _add(
        section: str,
        difficulty: str = "normal",
        count: int = 10,
        official: bool = True,
        prefix: str | None = None,
    ) -> QuestionSet:
        prefix = prefix or f"{section}-{difficulty}"
        question_set = QuestionSet(
            title=f"{section} {difficulty}",
            test_type=section,
            difficulty=difficulty,
            is_official=official,
        )
        question_set.questions = [
            make_question(f"{prefix}-{i}", section=section, difficulty=difficulty)
            for i in range(count)
        ]
        db.add(question_set)
        db.commit()
        db.refresh(question_set)
        return question_set

    return _add


@pytest.fixture
def add_completed_attempt(db):
    """Insert a scored attempt; later calls are newer."""
    base_time = datetime(2026, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _add(
        user_id: str,
        test_id: str,
        correct: int,
        total: int,
        seconds: int,
        score: int | None = None,
    ) -> Attempt:
        counter["n"] += 1
        created = base_time + timedelta(minutes=counter["n"])
        attempt = Attempt(
            user_id=user_id,
            test_id=test_id,
            total_questions=total,
            correct_answers=correct,
            time_spent_seconds=seconds,
            score=score if score is not None else round(correct / total * 100),
            started_at=created,
            created_at=created,
            completed_at=created + timedelta(seconds=seconds),
        )
        db.add(attempt)
        db.commit()
        return attempt

    return _add


def make_token(user_id: str, expires_in: timedelta = timedelta(hours=1)) -> str:
    claims = {
        "sub": user_id,
        "aud": config.JWT_AUDIENCE,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token('user-1')}"}


@pytest.fixture
def app(session_factory):
    application = create_app(run_maintenance=False)

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    application.dependency_overrides[get_db] = _get_db
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
