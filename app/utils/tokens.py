"""Token generation and hashing helpers."""
from __future__ import annotations

import hashlib
import hmac
import secrets

from app.config import INVITATION_TOKEN_BYTES, SESSION_TOKEN_BYTES, get_settings


def hash_token(raw: str) -> str:
    """Return an HMAC-SHA256 hash for a bearer token."""

    key = get_settings().SECRET_KEY.encode()
    return hmac.new(key, raw.encode(), hashlib.sha256).hexdigest()


def gen_invitation_token() -> str:
    """Single-use, unguessable invitation token shared through the invite link."""

    return secrets.token_urlsafe(INVITATION_TOKEN_BYTES)


def gen_session_token() -> tuple[str, str]:
    """Generate a bearer token and the hash stored server-side."""

    raw = secrets.token_urlsafe(SESSION_TOKEN_BYTES)
    return raw, hash_token(raw)


__all__ = ["hash_token", "gen_invitation_token", "gen_session_token"]
