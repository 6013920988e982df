"""Bearer session lookup.

Sessions are issued by the identity service (magic link / OAuth), which is
not part of this backend. ``issue_session`` only exists for operator
scripts and tests.
"""
from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.auth_session import AuthSession
from app.models.user import User
from app.utils.time import ensure_aware, utcnow
from app.utils.tokens import gen_session_token, hash_token

logger = logging.getLogger(__name__)


def issue_session(db: Session, user: User, *, ttl: timedelta | None = None) -> str:
    """Create a session for ``user`` and return the raw bearer token."""

    if ttl is None:
        ttl = timedelta(days=get_settings().SESSION_TTL_DAYS)
    raw, token_hash = gen_session_token()
    db.add(AuthSession(user_id=user.id, token_hash=token_hash, expires_at=utcnow() + ttl))
    db.commit()
    logger.info("Session issued", extra={"user_id": user.id})
    return raw


def resolve_session(db: Session, raw_token: str) -> User | None:
    """Return the user behind an unexpired bearer token."""

    stmt = select(AuthSession).where(AuthSession.token_hash == hash_token(raw_token))
    session_row = db.scalars(stmt).first()
    if session_row is None:
        return None
    if ensure_aware(session_row.expires_at) <= utcnow():
        return None
    return db.get(User, session_row.user_id)
