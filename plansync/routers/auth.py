"""Auth router - sign in to and out of the remote store."""
import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from typing import Optional

from plansync.container import Container
from plansync.dependencies import get_container
from plansync.models.user import User


router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    """Login request model."""

    email: str
    password: str


class RegisterRequest(LoginRequest):
    """Registration request model."""

    name: str


class SessionResponse(BaseModel):
    """Current session state."""

    authenticated: bool
    user: Optional[User] = None


def _remote_error(e: httpx.HTTPError, fallback: int) -> HTTPException:
    if isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500:
        return HTTPException(status_code=fallback, detail="Remote rejected the request")
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Remote store unavailable: {e}",
    )


@router.post("/signin", response_model=User)
async def sign_in(login_req: LoginRequest, container: Container = Depends(get_container)):
    """
    Sign in with the remote store and start a session.

    Raises:
        HTTPException: If credentials are rejected (401) or the remote is down (502)
    """
    try:
        return await container.auth_service.sign_in(login_req.email, login_req.password)
    except httpx.HTTPError as e:
        raise _remote_error(e, status.HTTP_401_UNAUTHORIZED)


@router.post("/signup", response_model=User, status_code=status.HTTP_201_CREATED)
async def sign_up(register_req: RegisterRequest, container: Container = Depends(get_container)):
    """
    Register with the remote store and start a session.

    Raises:
        HTTPException: If registration is rejected (400) or the remote is down (502)
    """
    try:
        return await container.auth_service.sign_up(
            register_req.email,
            register_req.password,
            register_req.name,
        )
    except httpx.HTTPError as e:
        raise _remote_error(e, status.HTTP_400_BAD_REQUEST)


@router.post("/signout", response_model=SessionResponse)
async def sign_out(container: Container = Depends(get_container)):
    """End the session. Always succeeds locally."""
    await container.auth_service.sign_out()
    return SessionResponse(authenticated=False)


@router.get("/session", response_model=SessionResponse)
async def get_session(container: Container = Depends(get_container)):
    """Report whether a usable session exists."""
    session = container.session
    return SessionResponse(authenticated=session.is_authenticated, user=session.user)
