"""Service for progress statistics."""
from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession

from satprep.models.attempts import DashboardStats
from satprep.models.db.attempt import Attempt


def summarize_attempts(attempts: list[Attempt]) -> DashboardStats:
    """Build dashboard numbers from completed attempts ordered oldest first."""
    if not attempts:
        return DashboardStats(
            best_score=0,
            avg_accuracy=0,
            tests_taken=0,
            score_change=0,
            has_progress=False,
        )

    scores = [attempt.score or 0 for attempt in attempts]
    avg_accuracy = sum(attempt.accuracy * 100 for attempt in attempts) / len(attempts)
    score_change = scores[-1] - scores[0] if len(scores) >= 2 else 0

    return DashboardStats(
        best_score=max(scores),
        avg_accuracy=int(avg_accuracy + 0.5),
        tests_taken=len(attempts),
        score_change=score_change,
        has_progress=True,
    )


def get_dashboard_stats(db: DBSession, user_id: str) -> DashboardStats:
    """Dashboard statistics over every completed attempt of a user."""
    attempts = db.execute(
        select(Attempt)
        .where(Attempt.user_id == user_id, Attempt.completed_at.is_not(None))
        .order_by(Attempt.created_at.asc())
    ).scalars().all()
    return summarize_attempts(list(attempts))
