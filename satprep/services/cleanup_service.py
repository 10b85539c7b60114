"""Service for periodic maintenance of sessions and attempts."""
import logging
import threading
import time
from datetime import timedelta

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from satprep.config import (
    CLEANUP_INTERVAL_SECONDS,
    INCOMPLETE_ATTEMPT_RETENTION_DAYS,
    SAT_SESSION_TTL_MINUTES,
)
from satprep.database import SessionLocal
from satprep.models.db.attempt import Attempt
from satprep.services.sat_session_service import SatSessionRegistry
from satprep.utils import utc_now

logger = logging.getLogger(__name__)


def cleanup_incomplete_attempts(
    session_factory=SessionLocal,
    retention_days: int = INCOMPLETE_ATTEMPT_RETENTION_DAYS,
) -> int:
    """Remove attempts that were started but never completed."""
    if retention_days <= 0:
        return 0

    cutoff = utc_now() - timedelta(days=retention_days)

    try:
        db = session_factory()
        try:
            result = db.execute(
                delete(Attempt).where(
                    Attempt.completed_at.is_(None),
                    Attempt.started_at < cutoff,
                )
            )
            db.commit()
            deleted = result.rowcount
            if deleted > 0:
                logger.info("Cleaned up %d incomplete attempts", deleted)
            return deleted
        finally:
            db.close()
    except SQLAlchemyError:
        logger.exception("Failed to cleanup incomplete attempts")
        return 0


def purge_idle_sessions(
    registry: SatSessionRegistry, ttl_minutes: int = SAT_SESSION_TTL_MINUTES
) -> int:
    """Forget SAT sessions nobody has touched for ``ttl_minutes``."""
    purged = registry.purge_idle(ttl_minutes * 60)
    if purged:
        logger.info("Purged %d idle SAT sessions", purged)
    return purged


def run_maintenance(registry: SatSessionRegistry) -> None:
    purge_idle_sessions(registry)
    cleanup_incomplete_attempts()


def schedule_maintenance(
    registry: SatSessionRegistry, interval_seconds: int = CLEANUP_INTERVAL_SECONDS
) -> threading.Thread:
    """Run maintenance periodically on a daemon thread."""

    def _worker() -> None:
        # Initial delay before first pass
        time.sleep(60)
        while True:
            try:
                run_maintenance(registry)
            except Exception:
                logger.exception("Maintenance pass failed")
            time.sleep(interval_seconds)

    thread = threading.Thread(
        target=_worker,
        name="satprep_maintenance",
        daemon=True,
    )
    thread.start()
    return thread
