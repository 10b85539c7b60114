"""Statistics endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DbSession

from satprep.database import get_db
from satprep.dependencies.auth import get_current_user_id
from satprep.models import DashboardStats
from satprep.services.stats_service import get_dashboard_stats

router = APIRouter(prefix="/api/stats", tags=["statistics"])


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[DbSession, Depends(get_db)],
) -> DashboardStats:
    """Progress summary for the caller."""
    return get_dashboard_stats(db, user_id)
