"""Utility helpers for standardized error responses."""
from typing import Any, NoReturn

from fastapi import HTTPException, status


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return a standardized error payload."""

    payload: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details:
        payload["error"]["details"] = details
    return payload


def not_found(code: str, message: str) -> NoReturn:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_response(code, message))


def forbidden(code: str, message: str) -> NoReturn:
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error_response(code, message))


def conflict(code: str, message: str) -> NoReturn:
    """Raise for a transition the current state does not allow."""

    raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error_response(code, message))


def unprocessable(code: str, message: str, details: dict[str, Any] | None = None) -> NoReturn:
    raise HTTPException(
        status_code=422,
        detail=error_response(code, message, details),
    )
