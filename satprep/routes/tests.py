"""Practice test generation endpoints."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session as DbSession

from satprep.database import get_db
from satprep.dependencies.auth import get_current_user_id
from satprep.models import GeneratedTest, TestConfig
from satprep.services.test_generator import generate_test

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tests", tags=["tests"])


@router.post("/generate", response_model=GeneratedTest)
def generate(
    config: TestConfig,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[DbSession, Depends(get_db)],
) -> GeneratedTest:
    """Assemble a practice test and open an attempt for it."""
    generated = generate_test(db, config, user_id)
    if generated is None:
        logger.warning("Unable to start %s test for user %s", config.test_type.value, user_id)
        raise HTTPException(status_code=503, detail="Unable to start test")
    return generated
