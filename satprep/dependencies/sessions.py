"""Access to application-owned state."""
from fastapi import Request

from satprep.services.sat_session_service import SatSessionRegistry


def get_session_registry(request: Request) -> SatSessionRegistry:
    """SAT session registry created with the application."""
    return request.app.state.sat_sessions
