"""Signed session cookie carrying the logged-in email."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

from fastapi import Cookie, HTTPException, Response, status
from jose import JWTError, jwt

from ..config import Settings

SESSION_COOKIE = "sessionId"


def create_session_token(email: str, settings: Settings) -> str:
    """JWT with the email as subject, expiring after ``session_max_age``."""
    expire = datetime.now(timezone.utc) + timedelta(seconds=settings.session_max_age)
    claims = {"sub": email, "exp": expire}
    return jwt.encode(claims, settings.session_secret, algorithm=settings.session_algorithm)


def read_session_token(token: str, settings: Settings) -> str | None:
    """Email from a session token, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])
    except JWTError:
        return None
    email = payload.get("sub")
    return email if isinstance(email, str) and email else None


def set_session_cookie(response: Response, email: str, settings: Settings) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=create_session_token(email, settings),
        max_age=settings.session_max_age,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="strict",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="strict",
    )


def session_dependency(settings: Settings) -> Callable[..., Awaitable[str]]:
    """FastAPI dependency resolving the logged-in email, or raising 401."""

    async def current_email(session_id: str | None = Cookie(default=None, alias=SESSION_COOKIE)) -> str:
        email = read_session_token(session_id, settings) if session_id else None
        if email is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        return email

    return current_email
