"""Caller identity for FastAPI routes.

Users sign in with the external identity provider, which issues signed JWT
access tokens. This service only verifies those tokens and reads the user id
from the ``sub`` claim.
"""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from satprep.config import JWT_ALGORITHM, JWT_AUDIENCE, JWT_SECRET

# HTTP Bearer scheme for JWT
security = HTTPBearer(auto_error=False)


def verify_token(token: str) -> dict | None:
    """Verify and decode an access token.

    Returns:
        Decoded token payload or None if invalid or expired.
    """
    try:
        return jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
        )
    except JWTError:
        return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Get the id of the authenticated caller.

    Raises:
        HTTPException: 401 if not authenticated or token is invalid.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = verify_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id.strip():
        raise _unauthorized("Invalid token payload")

    return user_id
