"""Scoring of answered questions."""
import math
from collections.abc import Iterable, Mapping
from typing import Any

from satprep.models.attempts import ScoreResult, Tally


def _field(question: Any, name: str) -> Any:
    if isinstance(question, Mapping):
        return question.get(name)
    return getattr(question, name, None)


def _enum_value(value: Any) -> str:
    return str(getattr(value, "value", value) or "")


def is_correct_answer(given: str | None, expected: str | None) -> bool:
    """Compare answers ignoring case and surrounding whitespace."""
    if given is None or expected is None:
        return False
    return given.strip().lower() == expected.strip().lower()


def calculate_score(
    questions: Iterable[Any], answers: Mapping[str, str]
) -> ScoreResult:
    """
    Score ``answers`` (keyed by question id) against ``questions``.

    Questions may be ``Question`` models or plain dicts. Unanswered questions
    count as incorrect. The percentage rounds half up.
    """
    correct = 0
    total = 0
    by_topic: dict[str, Tally] = {}
    by_section: dict[str, Tally] = {}

    for question in questions:
        total += 1
        question_id = str(_field(question, "id"))
        hit = is_correct_answer(
            answers.get(question_id), _field(question, "correct_answer")
        )
        if hit:
            correct += 1

        topic = _field(question, "topic") or ""
        topic_tally = by_topic.setdefault(topic, Tally())
        topic_tally.total += 1
        if hit:
            topic_tally.correct += 1

        section = _enum_value(_field(question, "section"))
        section_tally = by_section.setdefault(section, Tally())
        section_tally.total += 1
        if hit:
            section_tally.correct += 1

    score = math.floor(correct / total * 100 + 0.5) if total else 0
    return ScoreResult(
        score=score,
        correct=correct,
        total=total,
        by_topic=by_topic,
        by_section=by_section,
    )
