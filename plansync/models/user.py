"""User and authentication model definitions."""
from typing import Optional

from pydantic import BaseModel, EmailStr

from plansync.models.base import CamelModel


class User(CamelModel):
    """Authenticated user as returned by the remote store."""

    id: str
    email: EmailStr
    name: Optional[str] = None


class AuthResponse(BaseModel):
    """Remote sign-in / sign-up response."""

    token: str
    user: User
