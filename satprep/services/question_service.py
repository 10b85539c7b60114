"""Service layer for the question store."""
from collections.abc import Iterable

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session as DBSession

from satprep.models.db.attempt import Attempt
from satprep.models.db.question_set import QuestionSet
from satprep.models.questions import QuestionSetCreate


def fetch_question_sets(
    db: DBSession,
    difficulty: str,
    test_types: Iterable[str],
    is_official: bool = True,
) -> list[QuestionSet]:
    """Fetch every question set matching difficulty, test types and provenance."""
    query = (
        select(QuestionSet)
        .where(
            QuestionSet.difficulty == difficulty,
            QuestionSet.test_type.in_(list(test_types)),
            QuestionSet.is_official == is_official,
        )
        .order_by(QuestionSet.created_at)
    )
    return list(db.execute(query).scalars().all())


def create_question_set(
    db: DBSession, payload: QuestionSetCreate, created_by: str | None = None
) -> QuestionSet:
    """Store a new question set."""
    question_set = QuestionSet(
        title=payload.title.strip(),
        description=payload.description,
        test_type=payload.test_type.value,
        difficulty=payload.difficulty.value,
        length=payload.length.value,
        is_official=payload.is_official,
        section=payload.section,
        module_number=payload.module_number,
        time_limit_minutes=payload.time_limit_minutes,
        created_by=created_by,
    )
    question_set.questions = [
        question.model_dump(mode="json") for question in payload.questions
    ]

    db.add(question_set)
    db.commit()
    db.refresh(question_set)
    return question_set


def get_question_set(db: DBSession, question_set_id: str) -> QuestionSet:
    """Get question set by ID or fail with 404."""
    question_set = db.get(QuestionSet, question_set_id)
    if question_set is None:
        raise HTTPException(status_code=404, detail="Question set not found")
    return question_set


def list_question_sets(
    db: DBSession,
    test_type: str | None = None,
    difficulty: str | None = None,
    is_official: bool | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[QuestionSet]:
    """List question sets, optionally filtered."""
    query = select(QuestionSet)

    if test_type:
        query = query.where(QuestionSet.test_type == test_type)
    if difficulty:
        query = query.where(QuestionSet.difficulty == difficulty)
    if is_official is not None:
        query = query.where(QuestionSet.is_official == is_official)

    query = query.order_by(QuestionSet.created_at.desc()).limit(limit).offset(offset)

    return list(db.execute(query).scalars().all())


def delete_question_set(db: DBSession, question_set: QuestionSet) -> None:
    """Delete a question set no attempt was generated from; 409 otherwise."""
    attempts = db.execute(
        select(func.count(Attempt.id)).where(Attempt.test_id == question_set.id)
    ).scalar()
    if attempts:
        raise HTTPException(
            status_code=409, detail="Question set is referenced by test attempts"
        )
    db.delete(question_set)
    db.commit()
