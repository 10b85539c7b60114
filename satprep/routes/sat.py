"""Full SAT sitting endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DbSession

from satprep.database import get_db
from satprep.dependencies.auth import get_current_user_id
from satprep.dependencies.sessions import get_session_registry
from satprep.models import AnswerRequest, SatSessionResponse, SatSessionStart
from satprep.sat_flow import BREAK_DURATION_SECONDS, MODULE_DIRECTIONS, SAT_TEST_STRUCTURE
from satprep.services import sat_session_service
from satprep.services.sat_session_service import SatSessionRegistry
from satprep.utils import validate_id

router = APIRouter(prefix="/api/sat", tags=["sat"])

Registry = Annotated[SatSessionRegistry, Depends(get_session_registry)]
UserId = Annotated[str, Depends(get_current_user_id)]


@router.get("/structure")
def get_structure() -> dict[str, object]:
    """Official digital SAT module layout and directions."""
    return {
        "sections": [
            {
                "name": section.name.value,
                "displayName": section.display_name,
                "totalQuestions": section.total_questions,
                "totalTimeMinutes": section.total_time_minutes,
                "modules": [
                    {
                        "moduleNumber": module.module_number,
                        "questions": module.questions,
                        "timeMinutes": module.time_minutes,
                        "timeSeconds": module.time_seconds,
                        "directions": MODULE_DIRECTIONS[section.name][module.module_number].title,
                    }
                    for module in section.modules
                ],
            }
            for section in SAT_TEST_STRUCTURE.values()
        ],
        "breakDurationSeconds": BREAK_DURATION_SECONDS,
    }


@router.post("/sessions", response_model=SatSessionResponse, status_code=201)
def start_session(
    payload: SatSessionStart,
    user_id: UserId,
    registry: Registry,
    db: Annotated[DbSession, Depends(get_db)],
) -> SatSessionResponse:
    """Generate a full-length test and start a sitting."""
    session = sat_session_service.start_sat_session(
        db, registry, user_id, difficulty=payload.difficulty
    )
    return sat_session_service.session_view(session)


@router.get("/sessions/{attempt_id}", response_model=SatSessionResponse)
def get_session(attempt_id: str, user_id: UserId, registry: Registry) -> SatSessionResponse:
    """Current state of a sitting."""
    attempt_id = validate_id("attemptId", attempt_id)
    session = sat_session_service.get_session(registry, attempt_id, user_id)
    return sat_session_service.session_view(session)


@router.post("/sessions/{attempt_id}/advance", response_model=SatSessionResponse)
def advance(
    attempt_id: str,
    user_id: UserId,
    registry: Registry,
    db: Annotated[DbSession, Depends(get_db)],
) -> SatSessionResponse:
    """Continue to the next phase (start, begin module, submit module, end break)."""
    attempt_id = validate_id("attemptId", attempt_id)
    session = sat_session_service.get_session(registry, attempt_id, user_id)
    sat_session_service.advance_session(db, session)
    return sat_session_service.session_view(session)


@router.post("/sessions/{attempt_id}/return", response_model=SatSessionResponse)
def return_to_module(attempt_id: str, user_id: UserId, registry: Registry) -> SatSessionResponse:
    """Go back from the review screen to the current module."""
    attempt_id = validate_id("attemptId", attempt_id)
    session = sat_session_service.get_session(registry, attempt_id, user_id)
    sat_session_service.return_to_module(session)
    return sat_session_service.session_view(session)


@router.put("/sessions/{attempt_id}/answers/{question_id}", response_model=SatSessionResponse)
def answer_question(
    attempt_id: str,
    question_id: str,
    payload: AnswerRequest,
    user_id: UserId,
    registry: Registry,
) -> SatSessionResponse:
    """Record the answer to a question of the current module."""
    attempt_id = validate_id("attemptId", attempt_id)
    question_id = validate_id("questionId", question_id)
    session = sat_session_service.get_session(registry, attempt_id, user_id)
    sat_session_service.record_answer(session, question_id, payload.answer)
    return sat_session_service.session_view(session)


@router.post("/sessions/{attempt_id}/flags/{question_id}", response_model=SatSessionResponse)
def flag_question(
    attempt_id: str,
    question_id: str,
    user_id: UserId,
    registry: Registry,
) -> SatSessionResponse:
    """Toggle the review flag on a question of the current module."""
    attempt_id = validate_id("attemptId", attempt_id)
    question_id = validate_id("questionId", question_id)
    session = sat_session_service.get_session(registry, attempt_id, user_id)
    sat_session_service.toggle_flag(session, question_id)
    return sat_session_service.session_view(session)
