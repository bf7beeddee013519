"""Session token issuance, validation and extraction."""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional

from fastapi import Request
from starlette.requests import cookie_parser

from vacationplanner.models.user import User
from vacationplanner.services.auth.session_store import SessionStore

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "session_token"
BEARER_PREFIX = "Bearer "


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_token() -> str:
    # uuid4 draws from os.urandom
    return str(uuid.uuid4())


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps coming back from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def extract_session_token(
    headers: Mapping[str, str], cookie_name: str = SESSION_COOKIE_NAME
) -> Optional[str]:
    """
    Pull the session token out of request headers.

    The ``Authorization: Bearer`` header takes priority over the cookie.
    Returns None when neither carries a token.
    """
    auth_header = headers.get("authorization")
    if auth_header and auth_header.startswith(BEARER_PREFIX):
        return auth_header[len(BEARER_PREFIX):]

    cookie_header = headers.get("cookie")
    if cookie_header:
        return cookie_parser(cookie_header).get(cookie_name) or None

    return None


class SessionTokenService:
    """
    Issues and validates opaque session tokens.

    The clock and the token source are injectable so expiry behaviour can
    be tested without waiting.
    """

    def __init__(
        self,
        lifetime: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = utcnow,
        token_factory: Callable[[], str] = _new_token,
        cookie_name: str = SESSION_COOKIE_NAME,
    ):
        self.lifetime = lifetime
        self.clock = clock
        self.token_factory = token_factory
        self.cookie_name = cookie_name

    def issue(self) -> str:
        return self.token_factory()

    def expiry_from_now(self) -> datetime:
        return self.clock() + self.lifetime

    def validate(self, store: SessionStore, token: Optional[str]) -> Optional[User]:
        """
        Resolve a token to its user.

        An expired session is deleted on sight so it can never validate
        again. The returned user still carries its password hash.
        """
        if not token:
            return None

        session = store.find_session_by_token(token)
        if not session:
            return None

        if as_utc(session.expires_at) <= self.clock():
            logger.debug("Deleting expired session %s", session.id)
            store.delete_session_by_id(session.id)
            return None

        return session.user

    def extract(self, request: Request) -> Optional[str]:
        return extract_session_token(request.headers, self.cookie_name)
