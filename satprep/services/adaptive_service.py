"""Adaptive difficulty calibration from a user's recent results."""
import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session as DBSession

from satprep.config import ADAPTIVE_HISTORY_LIMIT
from satprep.sat_flow import Difficulty
from satprep.services.attempt_service import get_recent_completed_attempts

logger = logging.getLogger(__name__)

MIN_ATTEMPTS_FOR_ADAPTATION = 3
MASTERY_ACCURACY = 0.8
MASTERY_SECONDS_PER_QUESTION = 90
STRUGGLING_ACCURACY = 0.5

_LEVELS = (Difficulty.EASY, Difficulty.NORMAL, Difficulty.HARD)


def step_difficulty(level: Difficulty, step: int) -> Difficulty:
    """Move ``step`` levels along easy < normal < hard, clamped at both ends."""
    index = _LEVELS.index(Difficulty(level)) + step
    return _LEVELS[max(0, min(index, len(_LEVELS) - 1))]


def _accuracy(attempt: Any) -> float:
    return (attempt.correct_answers or 0) / (attempt.total_questions or 1)


def _seconds_per_question(attempt: Any) -> float:
    return (attempt.time_spent_seconds or 0) / (attempt.total_questions or 1)


def adapt_difficulty(base: Difficulty, history: Sequence[Any]) -> Difficulty:
    """
    Pick the difficulty to serve given recent completed attempts.

    Each history item needs ``correct_answers``, ``total_questions`` and
    ``time_spent_seconds``. One step up for fast, accurate work, one step
    down for low accuracy, unchanged otherwise or with too little history.
    """
    base = Difficulty(base)
    if len(history) < MIN_ATTEMPTS_FOR_ADAPTATION:
        return base

    accuracy = sum(_accuracy(a) for a in history) / len(history)
    pace = sum(_seconds_per_question(a) for a in history) / len(history)

    if accuracy > MASTERY_ACCURACY and pace < MASTERY_SECONDS_PER_QUESTION:
        return step_difficulty(base, 1)
    if accuracy < STRUGGLING_ACCURACY:
        return step_difficulty(base, -1)
    return base


def get_adaptive_difficulty(
    db: DBSession, user_id: str, base: Difficulty
) -> Difficulty:
    """Adapt ``base`` using the user's last completed attempts."""
    history = get_recent_completed_attempts(db, user_id, ADAPTIVE_HISTORY_LIMIT)
    adapted = adapt_difficulty(base, history)
    if adapted != base:
        logger.info(
            "Adapted difficulty for user %s: %s -> %s (%d attempts)",
            user_id,
            Difficulty(base).value,
            adapted.value,
            len(history),
        )
    return adapted
