"""Question store endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session as DbSession

from satprep.database import get_db
from satprep.dependencies.auth import get_current_user_id
from satprep.models import QuestionSetCreate, QuestionSetDetail, QuestionSetSummary
from satprep.sat_flow import Difficulty, Section
from satprep.services import question_service
from satprep.utils import validate_id

router = APIRouter(prefix="/api/question-sets", tags=["question-sets"])


@router.get("", response_model=list[QuestionSetSummary])
def list_question_sets(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[DbSession, Depends(get_db)],
    test_type: Section | None = Query(None),
    difficulty: Difficulty | None = Query(None),
    is_official: bool | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[object]:
    """List question sets."""
    return question_service.list_question_sets(
        db,
        test_type=test_type.value if test_type else None,
        difficulty=difficulty.value if difficulty else None,
        is_official=is_official,
        limit=limit,
        offset=offset,
    )


@router.post("", response_model=QuestionSetDetail, status_code=201)
def create_question_set(
    payload: QuestionSetCreate,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[DbSession, Depends(get_db)],
) -> object:
    """Author a new question set."""
    return question_service.create_question_set(db, payload, created_by=user_id)


@router.get("/{question_set_id}", response_model=QuestionSetDetail)
def get_question_set(
    question_set_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[DbSession, Depends(get_db)],
) -> object:
    """Get a question set with its questions."""
    question_set_id = validate_id("questionSetId", question_set_id)
    return question_service.get_question_set(db, question_set_id)


@router.delete("/{question_set_id}")
def delete_question_set(
    question_set_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, str]:
    """Delete a question set. Only its author may delete it."""
    question_set_id = validate_id("questionSetId", question_set_id)
    question_set = question_service.get_question_set(db, question_set_id)
    if question_set.created_by != user_id:
        raise HTTPException(status_code=403, detail="Only the author can delete a question set")
    question_service.delete_question_set(db, question_set)
    return {"status": "deleted"}
