import random

import pytest
from conftest import make_question
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from satprep.models.db import Attempt
from satprep.models.questions import Question, TestLength
from satprep.models.tests import TestConfig, TestType
from satprep.sat_flow import Difficulty, Section
from satprep.services import test_generator
from satprep.services.test_generator import (
    LENGTH_TO_MINUTES,
    LENGTH_TO_QUESTIONS,
    balance_sections,
    generate_test,
    select_questions,
)


def _config(test_type="math", length="quick", difficulty="normal", timer=True) -> TestConfig:
    return TestConfig(
        test_type=test_type, length=length, difficulty=difficulty, timer_enabled=timer
    )


def _sections(questions) -> dict[Section, int]:
    counts: dict[Section, int] = {}
    for question in questions:
        counts[question.section] = counts.get(question.section, 0) + 1
    return counts


def _questions(section: str, count: int) -> list[Question]:
    return [
        Question.model_validate(make_question(f"{section}-{i}", section=section))
        for i in range(count)
    ]


def test_length_tables() -> None:
    assert [LENGTH_TO_QUESTIONS[length] for length in TestLength] == [10, 25, 50, 75, 154]
    assert LENGTH_TO_MINUTES[TestLength.FULL] == 180
    assert LENGTH_TO_MINUTES[TestLength.MEDIUM] == 50


def test_single_section_truncates_to_target(db, add_question_set) -> None:
    question_set = add_question_set("math", count=30)

    generated = generate_test(db, _config(), "user-1", rng=random.Random(1))

    assert generated is not None
    assert len(generated.questions) == 10
    assert len({q.id for q in generated.questions}) == 10
    assert all(q.section == Section.MATH for q in generated.questions)
    assert generated.time_limit == 10
    assert generated.adapted_difficulty == Difficulty.NORMAL

    attempt = db.get(Attempt, generated.id)
    assert attempt.user_id == "user-1"
    assert attempt.test_id == question_set.id
    assert attempt.total_questions == 10
    assert attempt.answers == []
    assert attempt.completed_at is None
    assert [q["id"] for q in attempt.questions] == [q.id for q in generated.questions]


def test_returns_everything_when_bank_is_small(db, add_question_set) -> None:
    add_question_set("reading_writing", count=4)

    generated = generate_test(
        db, _config("reading_writing", "long"), "user-1", rng=random.Random(2)
    )

    assert generated is not None
    assert len(generated.questions) == 4


def test_untimed_test_has_no_time_limit(db, add_question_set) -> None:
    add_question_set("math", count=12)
    generated = generate_test(db, _config(timer=False), "user-1")
    assert generated is not None
    assert generated.time_limit is None


@pytest.mark.parametrize(
    "length, math_count, rw_count",
    [("quick", 5, 5), ("short", 12, 13), ("medium", 25, 25)],
)
def test_combined_test_is_balanced(
    db, add_question_set, length, math_count, rw_count
) -> None:
    add_question_set("math", count=40)
    add_question_set("reading_writing", count=40)

    generated = generate_test(
        db, _config("combined", length), "user-1", rng=random.Random(3)
    )

    assert generated is not None
    assert _sections(generated.questions) == {
        Section.MATH: math_count,
        Section.READING_WRITING: rw_count,
    }


def test_combined_keeps_full_length_when_a_section_runs_short(db, add_question_set) -> None:
    add_question_set("math", count=2)
    add_question_set("reading_writing", count=20)

    generated = generate_test(
        db, _config("combined", "quick"), "user-1", rng=random.Random(4)
    )

    assert generated is not None
    assert len(generated.questions) == 10


def test_balance_sections_gives_odd_question_to_reading_writing() -> None:
    pool = _questions("math", 10) + _questions("reading_writing", 10)
    balanced = balance_sections(pool, 7, random.Random(5))
    assert _sections(balanced) == {Section.MATH: 3, Section.READING_WRITING: 4}


def test_select_questions_is_deterministic_for_a_seed() -> None:
    pool = _questions("math", 30) + _questions("reading_writing", 30)
    first = select_questions(pool, 10, TestType.COMBINED, random.Random(42))
    second = select_questions(pool, 10, TestType.COMBINED, random.Random(42))
    assert [q.id for q in first] == [q.id for q in second]


def test_select_single_question_skips_balancing() -> None:
    pool = _questions("math", 1)
    assert [q.id for q in select_questions(pool, 10, TestType.COMBINED, random.Random(0))] == [
        "math-0"
    ]


def test_no_question_sets_returns_none(db) -> None:
    assert generate_test(db, _config(), "user-1") is None
    assert db.query(Attempt).count() == 0


def test_unofficial_sets_are_ignored(db, add_question_set) -> None:
    add_question_set("math", count=20, official=False)
    assert generate_test(db, _config(), "user-1") is None


def test_other_difficulty_is_not_used(db, add_question_set) -> None:
    add_question_set("math", difficulty="hard", count=20)
    assert generate_test(db, _config(difficulty="easy"), "user-1") is None


def test_sets_without_usable_questions_return_none(db, add_question_set) -> None:
    question_set = add_question_set("math", count=0)
    question_set.questions = [{"id": "broken", "section": "math"}]
    db.commit()

    assert generate_test(db, _config(), "user-1") is None


def test_malformed_questions_are_skipped(db, add_question_set) -> None:
    question_set = add_question_set("math", count=3)
    question_set.questions = question_set.questions + [{"id": "../bad"}]
    db.commit()

    generated = generate_test(db, _config(), "user-1")

    assert generated is not None
    assert sorted(q.id for q in generated.questions) == [
        "math-normal-0",
        "math-normal-1",
        "math-normal-2",
    ]


def test_strong_history_serves_harder_questions(
    db, add_question_set, add_completed_attempt
) -> None:
    normal = add_question_set("math", count=20)
    add_question_set("math", difficulty="hard", count=20)
    for _ in range(3):
        add_completed_attempt("user-1", normal.id, correct=9, total=10, seconds=300)

    generated = generate_test(db, _config(), "user-1", rng=random.Random(6))

    assert generated is not None
    assert generated.adapted_difficulty == Difficulty.HARD
    assert all(q.difficulty == Difficulty.HARD for q in generated.questions)


def test_falls_back_to_requested_difficulty(
    db, add_question_set, add_completed_attempt
) -> None:
    normal = add_question_set("math", count=20)
    for _ in range(3):
        add_completed_attempt("user-1", normal.id, correct=9, total=10, seconds=300)

    generated = generate_test(db, _config(), "user-1")

    assert generated is not None
    assert generated.adapted_difficulty == Difficulty.NORMAL
    assert all(q.difficulty == Difficulty.NORMAL for q in generated.questions)


def test_history_of_other_users_is_ignored(
    db, add_question_set, add_completed_attempt
) -> None:
    normal = add_question_set("math", count=20)
    add_question_set("math", difficulty="easy", count=20)
    for _ in range(5):
        add_completed_attempt("user-2", normal.id, correct=1, total=10, seconds=300)

    generated = generate_test(db, _config(), "user-1")

    assert generated is not None
    assert generated.adapted_difficulty == Difficulty.NORMAL


def test_fetch_failure_returns_none(db, add_question_set, monkeypatch) -> None:
    add_question_set("math", count=20)

    def _fail(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(test_generator, "fetch_question_sets", _fail)

    assert generate_test(db, _config(), "user-1") is None


def test_attempt_creation_failure_returns_none(db, add_question_set, monkeypatch) -> None:
    add_question_set("math", count=20)

    def _fail(*args, **kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(test_generator, "create_attempt", _fail)

    assert generate_test(db, _config(), "user-1") is None
    assert db.query(Attempt).count() == 0
