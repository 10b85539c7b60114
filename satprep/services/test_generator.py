"""
Adaptive practice test assembly.

Picks questions from the official question sets for the requested sections,
at a difficulty adapted to the user's recent results, and opens the attempt
the test will be scored against.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from satprep.models.db.question_set import QuestionSet
from satprep.models.questions import Question, TestLength
from satprep.models.tests import GeneratedTest, TestConfig, TestType
from satprep.sat_flow import Difficulty, Section
from satprep.services.adaptive_service import get_adaptive_difficulty
from satprep.services.attempt_service import create_attempt
from satprep.services.question_service import fetch_question_sets

logger = logging.getLogger(__name__)

LENGTH_TO_QUESTIONS: dict[TestLength, int] = {
    TestLength.QUICK: 10,
    TestLength.SHORT: 25,
    TestLength.MEDIUM: 50,
    TestLength.LONG: 75,
    TestLength.FULL: 154,
}

LENGTH_TO_MINUTES: dict[TestLength, int] = {
    TestLength.QUICK: 10,
    TestLength.SHORT: 25,
    TestLength.MEDIUM: 50,
    TestLength.LONG: 75,
    TestLength.FULL: 180,
}


def sections_for(test_type: TestType) -> list[str]:
    if test_type == TestType.COMBINED:
        return [Section.MATH.value, Section.READING_WRITING.value]
    return [test_type.value]


def collect_questions(question_sets: Sequence[QuestionSet]) -> list[Question]:
    """Flatten the embedded questions of ``question_sets``, skipping malformed ones."""
    questions: list[Question] = []
    for question_set in question_sets:
        for raw in question_set.questions:
            try:
                questions.append(Question.model_validate(raw))
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed question in set %s: %s",
                    question_set.id,
                    exc.errors()[0].get("msg", "invalid"),
                )
    return questions


def _shuffled(items: Sequence[Question], rng: random.Random) -> list[Question]:
    result = list(items)
    rng.shuffle(result)
    return result


def balance_sections(
    questions: Sequence[Question], target: int, rng: random.Random
) -> list[Question]:
    """
    Half math, half reading and writing, shuffled together.
    Reading and writing takes the extra question when ``target`` is odd.
    May come up short when a section has too few questions.
    """
    math_questions = [q for q in questions if q.section == Section.MATH]
    rw_questions = [q for q in questions if q.section == Section.READING_WRITING]

    math_target = target // 2
    rw_target = target - math_target
    balanced = (
        _shuffled(math_questions, rng)[:math_target]
        + _shuffled(rw_questions, rng)[:rw_target]
    )
    rng.shuffle(balanced)
    return balanced


def select_questions(
    questions: Sequence[Question],
    target: int,
    test_type: TestType,
    rng: random.Random,
) -> list[Question]:
    """Shuffle and truncate to ``target``; rebalance sections for combined tests."""
    selected = _shuffled(questions, rng)[:target]

    if test_type == TestType.COMBINED and len(selected) > 1:
        balanced = balance_sections(questions, target, rng)
        if len(balanced) >= len(selected):
            selected = balanced[:target]

    return selected


def _load_question_sets(
    db: DBSession, config: TestConfig, adapted: Difficulty
) -> tuple[list[QuestionSet], Difficulty]:
    """Question sets at the adapted difficulty, else at the requested one."""
    test_types = sections_for(config.test_type)
    question_sets = fetch_question_sets(db, adapted.value, test_types)
    if not question_sets and adapted != config.difficulty:
        logger.info(
            "No %s questions for %s, falling back to %s",
            adapted.value,
            "+".join(test_types),
            config.difficulty.value,
        )
        fallback = fetch_question_sets(db, config.difficulty.value, test_types)
        return fallback, config.difficulty
    return question_sets, adapted


def generate_test(
    db: DBSession,
    config: TestConfig,
    user_id: str,
    rng: random.Random | None = None,
) -> GeneratedTest | None:
    """
    Assemble a practice test and open its attempt.

    Returns None when no questions are available or the database fails;
    callers treat that as "cannot start test".
    """
    rng = rng or random.Random()
    target = LENGTH_TO_QUESTIONS[config.length]

    try:
        adapted = get_adaptive_difficulty(db, user_id, config.difficulty)
        question_sets, served = _load_question_sets(db, config, adapted)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to fetch questions for user %s", user_id)
        return None

    if not question_sets:
        logger.warning(
            "No question sets for %s at %s difficulty",
            config.test_type.value,
            config.difficulty.value,
        )
        return None

    selected = select_questions(
        collect_questions(question_sets), target, config.test_type, rng
    )
    if not selected:
        logger.warning("Question sets matched but held no usable questions")
        return None

    try:
        attempt = create_attempt(
            db,
            user_id,
            question_sets[0].id,
            [question.model_dump(mode="json") for question in selected],
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create attempt for user %s", user_id)
        return None

    logger.debug(
        "Generated test %s: %d/%d questions at %s",
        attempt.id,
        len(selected),
        target,
        served.value,
    )
    return GeneratedTest(
        id=attempt.id,
        questions=selected,
        time_limit=LENGTH_TO_MINUTES[config.length] if config.timer_enabled else None,
        config=config,
        adapted_difficulty=served,
    )
