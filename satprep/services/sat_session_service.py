"""
Server-side control of a four-module SAT sitting.

Each session keeps its ``TestFlowState`` as a plain value and replaces it
with ``get_next_flow_state`` on every "continue" event. Sessions live in a
``SatSessionRegistry`` owned by the application, keyed by attempt id.
"""

from __future__ import annotations

import logging
import math
import random
import threading
import time
from dataclasses import dataclass, field

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from satprep.models.attempts import ScoreResult
from satprep.models.questions import Question, QuestionView, TestLength
from satprep.models.sat import (
    DirectionsModel,
    FlowStateModel,
    ModuleSummary,
    SatSessionResponse,
)
from satprep.models.tests import TestConfig, TestType
from satprep.sat_flow import (
    BREAK_DURATION_SECONDS,
    INITIAL_TEST_FLOW,
    MODULE_DIRECTIONS,
    Difficulty,
    FlowPhase,
    Section,
    TestFlowState,
    get_next_flow_state,
    module_time_limit_seconds,
    return_to_module as flow_return_to_module,
)
from satprep.services.attempt_service import complete_attempt, get_attempt_for_user
from satprep.services.scoring_service import calculate_score
from satprep.services.test_generator import generate_test

logger = logging.getLogger(__name__)

MODULE_ORDER: tuple[tuple[Section, int], ...] = (
    (Section.READING_WRITING, 1),
    (Section.READING_WRITING, 2),
    (Section.MATH, 1),
    (Section.MATH, 2),
)


@dataclass
class ModuleData:
    questions: list[Question]
    answers: dict[str, str] = field(default_factory=dict)
    flagged: set[str] = field(default_factory=set)
    score: int | None = None
    time_spent_seconds: int | None = None

    def has_question(self, question_id: str) -> bool:
        return any(question.id == question_id for question in self.questions)


@dataclass
class SatSession:
    attempt_id: str
    user_id: str
    modules: dict[tuple[Section, int], ModuleData]
    flow: TestFlowState = INITIAL_TEST_FLOW
    module_started_at: float = field(default_factory=time.monotonic)
    last_activity: float = field(default_factory=time.monotonic)
    result: ScoreResult | None = None
    lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    @property
    def current_module(self) -> ModuleData:
        return self.modules[self.flow.module_key]

    def touch(self, now: float | None = None) -> None:
        self.last_activity = time.monotonic() if now is None else now


class SatSessionRegistry:
    """Thread-safe, process-local store of active SAT sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, SatSession] = {}
        self._lock = threading.Lock()

    def add(self, session: SatSession) -> None:
        with self._lock:
            self._sessions[session.attempt_id] = session

    def get(self, attempt_id: str) -> SatSession | None:
        with self._lock:
            return self._sessions.get(attempt_id)

    def remove(self, attempt_id: str) -> SatSession | None:
        with self._lock:
            return self._sessions.pop(attempt_id, None)

    def purge_idle(self, max_idle_seconds: float, now: float | None = None) -> int:
        """Drop sessions with no activity for ``max_idle_seconds``."""
        now = time.monotonic() if now is None else now
        with self._lock:
            stale = [
                attempt_id
                for attempt_id, session in self._sessions.items()
                if now - session.last_activity > max_idle_seconds
            ]
            for attempt_id in stale:
                del self._sessions[attempt_id]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def split_into_modules(
    questions: list[Question],
) -> dict[tuple[Section, int], ModuleData]:
    """Split each section in two; the first module gets the odd question."""
    modules: dict[tuple[Section, int], ModuleData] = {}
    for section in (Section.READING_WRITING, Section.MATH):
        section_questions = [q for q in questions if q.section == section]
        half = math.ceil(len(section_questions) / 2)
        modules[(section, 1)] = ModuleData(questions=section_questions[:half])
        modules[(section, 2)] = ModuleData(questions=section_questions[half:])
    return modules


def start_sat_session(
    db: DBSession,
    registry: SatSessionRegistry,
    user_id: str,
    difficulty: Difficulty = Difficulty.NORMAL,
    rng: random.Random | None = None,
) -> SatSession:
    """Generate a full combined test and open a session for it."""
    config = TestConfig(
        test_type=TestType.COMBINED,
        length=TestLength.FULL,
        difficulty=difficulty,
        timer_enabled=True,
    )
    generated = generate_test(db, config, user_id, rng=rng)
    if generated is None:
        raise HTTPException(status_code=503, detail="Unable to start test")

    session = SatSession(
        attempt_id=generated.id,
        user_id=user_id,
        modules=split_into_modules(generated.questions),
    )
    registry.add(session)
    logger.info(
        "Started SAT session %s for user %s (%d questions)",
        session.attempt_id,
        user_id,
        len(generated.questions),
    )
    return session


def get_session(registry: SatSessionRegistry, attempt_id: str, user_id: str) -> SatSession:
    """Get a session owned by ``user_id`` or fail with 404."""
    session = registry.get(attempt_id)
    if session is None or session.user_id != user_id:
        raise HTTPException(status_code=404, detail="SAT session not found")
    return session


def _finish_module(session: SatSession, now: float) -> None:
    module = session.current_module
    module.score = calculate_score(module.questions, module.answers).score
    module.time_spent_seconds = int(round(now - session.module_started_at))


def _finish_session(db: DBSession, session: SatSession) -> None:
    questions: list[Question] = []
    answers: dict[str, str] = {}
    total_time = 0
    for key in MODULE_ORDER:
        module = session.modules[key]
        questions.extend(module.questions)
        answers.update(module.answers)
        total_time += module.time_spent_seconds or 0

    attempt = get_attempt_for_user(db, session.attempt_id, session.user_id)
    session.result = complete_attempt(
        db,
        attempt,
        answers,
        total_time,
        questions=[question.model_dump(mode="json") for question in questions],
    )


def advance_session(
    db: DBSession, session: SatSession, now: float | None = None
) -> SatSession:
    """
    Move the session to its next phase.

    Leaving ``review`` scores the module just finished. Reaching
    ``complete`` scores the whole sitting and completes the attempt.
    """
    now = time.monotonic() if now is None else now
    with session.lock:
        if session.flow.is_complete:
            raise HTTPException(status_code=409, detail="Test already complete")

        if session.flow.phase == FlowPhase.REVIEW:
            _finish_module(session, now)

        next_flow = get_next_flow_state(session.flow)
        if next_flow.is_complete:
            try:
                _finish_session(db, session)
            except SQLAlchemyError:
                db.rollback()
                logger.exception("Failed to complete SAT session %s", session.attempt_id)
                raise

        if next_flow.phase == FlowPhase.TEST and session.flow.phase == FlowPhase.DIRECTIONS:
            session.module_started_at = now
        session.flow = next_flow
        session.touch(now)
    return session


def return_to_module(session: SatSession, now: float | None = None) -> SatSession:
    """Leave the review screen and go back to the questions of the same module."""
    with session.lock:
        if session.flow.phase != FlowPhase.REVIEW:
            raise HTTPException(status_code=409, detail="Not reviewing a module")
        session.flow = flow_return_to_module(session.flow)
        session.touch(now)
    return session


def _module_in_progress(session: SatSession, question_id: str) -> ModuleData:
    if session.flow.phase != FlowPhase.TEST:
        raise HTTPException(status_code=409, detail="No module in progress")
    module = session.current_module
    if not module.has_question(question_id):
        raise HTTPException(status_code=404, detail="Question not in current module")
    return module


def record_answer(
    session: SatSession, question_id: str, answer: str, now: float | None = None
) -> SatSession:
    with session.lock:
        module = _module_in_progress(session, question_id)
        module.answers[question_id] = answer
        session.touch(now)
    return session


def toggle_flag(
    session: SatSession, question_id: str, now: float | None = None
) -> SatSession:
    with session.lock:
        module = _module_in_progress(session, question_id)
        if question_id in module.flagged:
            module.flagged.discard(question_id)
        else:
            module.flagged.add(question_id)
        session.touch(now)
    return session


def _time_limit(flow: TestFlowState) -> int | None:
    if flow.phase == FlowPhase.BREAK:
        return BREAK_DURATION_SECONDS
    if flow.phase in (FlowPhase.DIRECTIONS, FlowPhase.TEST, FlowPhase.REVIEW):
        return module_time_limit_seconds(flow.current_section, flow.current_module)
    return None


def _module_summary(section: Section, number: int, module: ModuleData) -> ModuleSummary:
    return ModuleSummary(
        section=section,
        module_number=number,
        question_count=len(module.questions),
        answered_count=len(module.answers),
        score=module.score,
        time_spent_seconds=module.time_spent_seconds,
    )


def session_view(session: SatSession) -> SatSessionResponse:
    """Render a session for the client. The answer key is never included."""
    flow = session.flow
    view = SatSessionResponse(
        attempt_id=session.attempt_id,
        flow=FlowStateModel(
            phase=flow.phase,
            current_section=flow.current_section,
            current_module=flow.current_module,
        ),
        time_limit_seconds=_time_limit(flow),
        modules=[
            _module_summary(section, number, session.modules[(section, number)])
            for section, number in MODULE_ORDER
        ],
        result=session.result,
    )

    if flow.phase == FlowPhase.DIRECTIONS:
        directions = MODULE_DIRECTIONS[flow.current_section][flow.current_module]
        view.directions = DirectionsModel(
            title=directions.title,
            time=directions.time,
            questions=directions.questions,
            text=directions.text,
        )

    if flow.phase in (FlowPhase.TEST, FlowPhase.REVIEW):
        module = session.current_module
        view.questions = [
            QuestionView.model_validate(question.model_dump()) for question in module.questions
        ]
        view.answers = dict(module.answers)
        view.flagged = sorted(module.flagged)

    return view
