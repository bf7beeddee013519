"""Local password-based authentication provider."""
import logging
from datetime import timedelta
from typing import Optional

from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session as DBSession

from vacationplanner.config import settings
from vacationplanner.models.user import User, UserRole
from vacationplanner.services.auth.base import (
    AuthFailure,
    AuthProvider,
    CurrentUserOutcome,
    FailureReason,
    LoginOutcome,
    LoginSuccess,
)
from vacationplanner.services.auth.passwords import PasswordHasher
from vacationplanner.services.auth.session_store import SessionStore
from vacationplanner.services.auth.tokens import SessionTokenService

logger = logging.getLogger(__name__)


class LocalAuthProvider(AuthProvider):
    """
    Local authentication provider using password hashing and database sessions.

    Passwords are hashed with bcrypt. Sessions are stored in the database
    under random tokens and expire lazily: an expired session is removed the
    first time someone presents it.
    """

    def __init__(self, hasher: PasswordHasher, tokens: SessionTokenService):
        self.hasher = hasher
        self.tokens = tokens

    async def authenticate(self, db: DBSession, email: str, password: str) -> LoginOutcome:
        """Authenticate user with email and password, then open a session."""
        store = SessionStore(db)
        user = store.find_user_by_email(email.lower())
        if not user:
            return AuthFailure(FailureReason.INVALID_CREDENTIALS)

        if not user.active:
            return AuthFailure(FailureReason.ACCOUNT_INACTIVE)

        # bcrypt is CPU bound; keep it off the event loop
        if not await run_in_threadpool(self.hasher.verify, password, user.password_hash):
            return AuthFailure(FailureReason.INVALID_CREDENTIALS)

        token = self.tokens.issue()
        expires_at = self.tokens.expiry_from_now()
        store.create_session(user.id, token, expires_at)
        # Separate write; a failure here only leaves last_login stale
        store.update_user_last_login(user.id, self.tokens.clock())

        logger.info("User %s logged in", user.id)
        return LoginSuccess(user=user, token=token, expires_at=expires_at)

    async def create_user(
        self,
        db: DBSession,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        role: UserRole = UserRole.AGENT,
    ) -> User:
        """Create a new user with hashed password."""
        user = User(
            email=email.lower(),
            first_name=first_name,
            last_name=last_name,
            password_hash=self.hasher.hash(password),
            role=role,
            active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def extract_token(self, request: Request) -> Optional[str]:
        return self.tokens.extract(request)

    async def get_user_from_request(self, db: DBSession, request: Request) -> Optional[User]:
        """Extract user from the Authorization header or session cookie."""
        token = self.tokens.extract(request)
        if not token:
            return None
        return self.tokens.validate(SessionStore(db), token)

    async def current_user(self, db: DBSession, request: Request) -> CurrentUserOutcome:
        token = self.tokens.extract(request)
        if not token:
            return AuthFailure(FailureReason.MISSING_TOKEN)

        user = self.tokens.validate(SessionStore(db), token)
        if not user:
            return AuthFailure(FailureReason.INVALID_SESSION)

        if not user.active:
            return AuthFailure(FailureReason.ACCOUNT_INACTIVE)

        return user

    async def revoke_session(self, db: DBSession, token: str) -> bool:
        """Revoke a session by its token."""
        store = SessionStore(db)
        session = store.find_session_by_token(token)
        if not session:
            return False
        store.delete_session_by_id(session.id)
        return True

    async def revoke_all_sessions(
        self, db: DBSession, user_id: int, except_token: Optional[str] = None
    ) -> int:
        """Revoke all sessions for a user."""
        return SessionStore(db).delete_sessions_for_user(user_id, except_token)

    async def purge_expired_sessions(self, db: DBSession) -> int:
        count = SessionStore(db).delete_expired_sessions(self.tokens.clock())
        logger.info("Purged %d expired sessions", count)
        return count


def build_local_auth_provider() -> LocalAuthProvider:
    """Wire a provider from application settings."""
    return LocalAuthProvider(
        hasher=PasswordHasher(rounds=settings.password_hash_rounds),
        tokens=SessionTokenService(
            lifetime=timedelta(days=settings.session_lifetime_days),
            cookie_name=settings.session_cookie_name,
        ),
    )


# Singleton instance
local_auth_provider = build_local_auth_provider()
