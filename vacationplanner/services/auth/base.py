"""Abstract base class for authentication providers and their outcomes."""
import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from vacationplanner.models.user import User, UserRole


class FailureReason(enum.Enum):
    """Expected ways an authentication attempt can fail."""

    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_INACTIVE = "account_inactive"
    MISSING_TOKEN = "missing_token"
    INVALID_SESSION = "invalid_session"


@dataclass(frozen=True)
class AuthFailure:
    reason: FailureReason


@dataclass(frozen=True)
class LoginSuccess:
    user: User
    token: str
    expires_at: datetime


LoginOutcome = Union[LoginSuccess, AuthFailure]
CurrentUserOutcome = Union[User, AuthFailure]


class AuthProvider(ABC):
    """
    Abstract authentication provider interface.

    Expected failures come back as AuthFailure values; exceptions mean
    something unexpected went wrong (usually the database).
    """

    @abstractmethod
    async def authenticate(self, db: DBSession, email: str, password: str) -> LoginOutcome:
        """
        Check credentials and open a session.

        Returns LoginSuccess with the new token, or AuthFailure saying why.
        """
        pass

    @abstractmethod
    async def create_user(
        self,
        db: DBSession,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        role: UserRole = UserRole.AGENT,
    ) -> User:
        """Create a new user with the given credentials."""
        pass

    @abstractmethod
    def extract_token(self, request: Request) -> Optional[str]:
        """Return the session token a request carries, if any."""
        pass

    @abstractmethod
    async def get_user_from_request(self, db: DBSession, request: Request) -> Optional[User]:
        """
        Extract and validate the session token carried by a request.

        Returns the session's user (active or not), None otherwise.
        """
        pass

    @abstractmethod
    async def current_user(self, db: DBSession, request: Request) -> CurrentUserOutcome:
        """Resolve the request to an active user or say why it could not."""
        pass

    @abstractmethod
    async def revoke_session(self, db: DBSession, token: str) -> bool:
        """
        Revoke/invalidate a session by its token.

        Returns True if session was revoked, False if not found.
        """
        pass

    @abstractmethod
    async def revoke_all_sessions(
        self, db: DBSession, user_id: int, except_token: Optional[str] = None
    ) -> int:
        """
        Revoke all sessions for a user, optionally excluding one.

        Returns count of sessions revoked.
        """
        pass

    @abstractmethod
    async def purge_expired_sessions(self, db: DBSession) -> int:
        """Delete every expired session. Returns how many were removed."""
        pass
