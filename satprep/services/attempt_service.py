"""Service layer for test attempts."""
import logging
from datetime import datetime
from typing import Any

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session as DBSession

from satprep.models.attempts import ScoreResult
from satprep.models.db.attempt import Attempt
from satprep.services.scoring_service import calculate_score
from satprep.utils import utc_now

logger = logging.getLogger(__name__)


def create_attempt(
    db: DBSession,
    user_id: str,
    test_id: str,
    questions: list[dict[str, Any]],
) -> Attempt:
    """
    Create the attempt record for a freshly generated test.

    Answers start empty; the selected questions are snapshotted so the
    attempt can be scored later without the client resending them.
    """
    attempt = Attempt(
        user_id=user_id,
        test_id=test_id,
        total_questions=len(questions),
        started_at=utc_now(),
    )
    attempt.answers = []
    attempt.questions = questions

    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    return attempt


def get_attempt(db: DBSession, attempt_id: str) -> Attempt | None:
    """Get attempt by ID."""
    return db.get(Attempt, attempt_id)


def get_attempt_for_user(db: DBSession, attempt_id: str, user_id: str) -> Attempt:
    """Get an attempt owned by ``user_id`` or fail with 404."""
    attempt = db.get(Attempt, attempt_id)
    if attempt is None or attempt.user_id != user_id:
        raise HTTPException(status_code=404, detail="Attempt not found")
    return attempt


def get_recent_completed_attempts(
    db: DBSession, user_id: str, limit: int
) -> list[Attempt]:
    """Most recent completed attempts for a user, newest first."""
    query = (
        select(Attempt)
        .where(Attempt.user_id == user_id, Attempt.completed_at.is_not(None))
        .order_by(Attempt.created_at.desc())
        .limit(limit)
    )
    return list(db.execute(query).scalars().all())


def get_attempts_by_user(
    db: DBSession,
    user_id: str,
    completed_only: bool = False,
    since: datetime | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Attempt]:
    """
    Get attempts for a user, newest first, optionally only completed ones
    or only those started at or after ``since``.
    """
    query = select(Attempt).where(Attempt.user_id == user_id)

    if completed_only:
        query = query.where(Attempt.completed_at.is_not(None))
    if since is not None:
        query = query.where(Attempt.started_at >= since)

    query = query.order_by(Attempt.created_at.desc()).limit(limit).offset(offset)

    return list(db.execute(query).scalars().all())


def count_attempts(db: DBSession, user_id: str, completed_only: bool = False) -> int:
    """Count attempts for a user."""
    query = select(func.count(Attempt.id)).where(Attempt.user_id == user_id)
    if completed_only:
        query = query.where(Attempt.completed_at.is_not(None))
    return db.execute(query).scalar() or 0


def complete_attempt(
    db: DBSession,
    attempt: Attempt,
    answers: dict[str, str],
    time_spent_seconds: int,
    questions: list[dict[str, Any]] | None = None,
) -> ScoreResult:
    """
    Score an attempt and store the results.

    ``questions`` defaults to the snapshot taken when the test was generated.
    """
    if attempt.is_completed:
        raise HTTPException(status_code=409, detail="Attempt already completed")

    scored_questions = questions if questions is not None else attempt.questions
    result = calculate_score(scored_questions, answers)

    attempt.answers = answers
    attempt.score = result.score
    attempt.correct_answers = result.correct
    attempt.total_questions = result.total
    attempt.time_spent_seconds = time_spent_seconds
    attempt.completed_at = utc_now()
    attempt.feedback = {
        "byTopic": {k: v.model_dump() for k, v in result.by_topic.items()},
        "bySection": {k: v.model_dump() for k, v in result.by_section.items()},
    }

    db.commit()
    db.refresh(attempt)
    logger.info(
        "Completed attempt %s: %d/%d (%d%%)",
        attempt.id,
        result.correct,
        result.total,
        result.score,
    )
    return result
