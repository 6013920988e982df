# app/security.py
"""Authentication dependency resolving the bearer session to a party."""
from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.user import User
from app.services.sessions import resolve_session
from app.utils.errors import error_response


def _extract_token(authorization: str | None = Header(default=None)) -> str | None:
    """Read the token from ``Authorization: Bearer ...``."""
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return None


def require_party(
    db: Session = Depends(get_db),
    token: str | None = Depends(_extract_token),
) -> User:
    """Return the authenticated party or fail with 401."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_response("NO_SESSION", "Authentication required."),
        )

    user = resolve_session(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_response("UNAUTHORIZED", "Session expired or invalid."),
        )
    return user


__all__ = ["require_party"]
