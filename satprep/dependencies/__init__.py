"""FastAPI dependencies."""
from satprep.dependencies.auth import get_current_user_id, verify_token
from satprep.dependencies.sessions import get_session_registry

__all__ = ["get_current_user_id", "get_session_registry", "verify_token"]
