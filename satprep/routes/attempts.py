"""Attempt endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session as DbSession

from satprep.database import get_db
from satprep.dependencies.auth import get_current_user_id
from satprep.dependencies.sessions import get_session_registry
from satprep.models import AttemptResponse, AttemptSubmitRequest, AttemptSubmitResponse
from satprep.services import attempt_service
from satprep.services.sat_session_service import SatSessionRegistry
from satprep.utils import parse_iso_timestamp, validate_id

router = APIRouter(prefix="/api/attempts", tags=["attempts"])


@router.get("")
def list_attempts(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[DbSession, Depends(get_db)],
    completed: bool = Query(False),
    since: str | None = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> dict[str, object]:
    """List the caller's attempts, newest first.

    Args:
        completed: Only return scored attempts
        since: Optional ISO timestamp; only attempts started at or after it
        limit: Page size
        offset: Number of results to skip (for pagination)

    Returns:
        Dictionary with attempts list and pagination info
    """
    since_dt = None
    if since is not None:
        since_dt = parse_iso_timestamp(since)
        if since_dt is None:
            raise HTTPException(status_code=400, detail="Invalid since timestamp")

    attempts = attempt_service.get_attempts_by_user(
        db, user_id, completed_only=completed, since=since_dt, limit=limit, offset=offset
    )
    return {
        "attempts": [AttemptResponse.model_validate(a) for a in attempts],
        "total": attempt_service.count_attempts(db, user_id, completed_only=completed),
        "limit": limit,
        "offset": offset,
    }


@router.get("/{attempt_id}", response_model=AttemptResponse)
def get_attempt(
    attempt_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[DbSession, Depends(get_db)],
) -> object:
    """Get one of the caller's attempts."""
    attempt_id = validate_id("attemptId", attempt_id)
    return attempt_service.get_attempt_for_user(db, attempt_id, user_id)


@router.post("/{attempt_id}/submit", response_model=AttemptSubmitResponse)
def submit_attempt(
    attempt_id: str,
    payload: AttemptSubmitRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    registry: Annotated[SatSessionRegistry, Depends(get_session_registry)],
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Score submitted answers and complete the attempt.

    Attempts of a SAT sitting in progress are completed by the sitting itself.
    """
    attempt_id = validate_id("attemptId", attempt_id)
    attempt = attempt_service.get_attempt_for_user(db, attempt_id, user_id)
    if registry.get(attempt_id) is not None:
        raise HTTPException(status_code=409, detail="Attempt belongs to a SAT session")
    result = attempt_service.complete_attempt(
        db, attempt, payload.answers, payload.time_spent_seconds
    )
    return {"attempt": AttemptResponse.model_validate(attempt), "result": result}
