"""Authentication service - session handling for the remote store."""
import logging
from typing import Callable, Optional

import httpx

from plansync.clients.remote_client import RemoteClient
from plansync.models.user import User
from plansync.utils.dates import utc_now
from plansync.utils.tokens import is_token_expired, token_subject

logger = logging.getLogger(__name__)


class AuthSession:
    """
    The current bearer token and user, if any.

    Storing the token securely is left to the embedding application; the
    session only keeps it in memory.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        user: Optional[User] = None,
        clock: Callable = utc_now,
    ):
        self.token = token
        self.user = user
        self._clock = clock

    @property
    def is_authenticated(self) -> bool:
        """True when a token is held and it has not expired."""
        if not self.token:
            return False
        return not is_token_expired(self.token, self._clock())

    @property
    def user_id(self) -> Optional[str]:
        if self.user is not None:
            return self.user.id
        if self.token:
            return token_subject(self.token)
        return None

    def start(self, token: str, user: Optional[User] = None) -> None:
        self.token = token
        self.user = user

    def clear(self) -> None:
        self.token = None
        self.user = None


class AuthService:
    """Service for signing in and out of the remote store."""

    def __init__(self, remote: RemoteClient, session: AuthSession):
        """Initialize service with the remote client and the session it manages."""
        self.remote = remote
        self.session = session

    async def sign_in(self, email: str, password: str) -> User:
        """
        Sign in and start a session.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Signed-in user

        Raises:
            httpx.HTTPStatusError: If the remote rejects the credentials
        """
        response = await self.remote.sign_in(email, password)
        self._start(response.token, response.user)
        return response.user

    async def sign_up(self, email: str, password: str, name: str) -> User:
        """
        Register a new account and start a session.

        Raises:
            httpx.HTTPStatusError: If the remote rejects the registration
        """
        response = await self.remote.sign_up(email, password, name)
        self._start(response.token, response.user)
        return response.user

    async def sign_out(self) -> None:
        """End the session. Remote failures are logged; the local session is always cleared."""
        try:
            await self.remote.sign_out()
        except httpx.HTTPError as e:
            logger.warning("Remote sign-out failed, clearing session anyway: %s", e)

        self.session.clear()
        self.remote.set_token(None)

    def _start(self, token: str, user: User) -> None:
        self.session.start(token, user)
        self.remote.set_token(token)
        logger.info("Signed in as %s", user.email)
