"""Login, logout and current-user routes."""
import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, EmailStr, field_validator
from slowapi import Limiter

from ..config import Settings
from ..store.interface import IdentityStore
from ..store.models import MAX_EMAIL_LENGTH, normalize_email
from .session import clear_session_cookie, session_dependency, set_session_cookie

logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def check_length(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if len(v) > MAX_EMAIL_LENGTH:
                raise ValueError("Email is too long")
        return v


def create_auth_router(store: IdentityStore, settings: Settings, limiter: Limiter) -> APIRouter:
    """Create the authentication router.

    Login is an email lookup-or-create: there is no password. It is rate
    limited per client address and padded with a fixed delay so responses
    for new and existing users take the same time.
    """
    router = APIRouter(prefix="/api", tags=["authentication"])
    current_email = session_dependency(settings)

    @router.post("/login")
    @limiter.limit(settings.login_rate_limit)
    async def login(request: Request, response: Response, login_request: LoginRequest):
        email = normalize_email(login_request.email)
        await asyncio.sleep(settings.login_delay)

        user = await store.find_or_create(email)
        set_session_cookie(response, user.email, settings)
        logger.info("User logged in: %s", user.email)
        return {"success": True, "email": user.email, "subscriptions": user.subscriptions}

    @router.post("/logout")
    async def logout(response: Response):
        clear_session_cookie(response, settings)
        return {"success": True}

    @router.get("/user")
    async def get_user(email: str = Depends(current_email)):
        user = await store.get(email)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return {
            "email": user.email,
            "subscriptions": user.subscriptions,
            "portfolio": user.portfolio.to_dict(),
            "alerts": user.alerts_dict(),
        }

    return router
