"""Authentication routes: login, logout, current user and session check."""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, EmailStr, Field, ValidationError
from sqlalchemy.orm import Session

from vacationplanner.config import settings
from vacationplanner.database import get_db
from vacationplanner.services.auth import get_auth_provider
from vacationplanner.services.auth.base import AuthFailure, FailureReason
from vacationplanner.services.auth.cookies import build_clear_cookie, build_session_cookie
from vacationplanner.services.auth.errors import ErrorKind, kind_response, success_response
from vacationplanner.services.auth.sanitize import public_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


LOGIN_MESSAGES = {
    FailureReason.INVALID_CREDENTIALS: "Invalid email or password",
    FailureReason.ACCOUNT_INACTIVE: "Account is inactive. Please contact support.",
}

ME_MESSAGES = {
    FailureReason.MISSING_TOKEN: "Authentication required",
    FailureReason.INVALID_SESSION: "Invalid or expired session",
    FailureReason.ACCOUNT_INACTIVE: "Account is inactive",
}

SESSION_MESSAGES = {
    FailureReason.MISSING_TOKEN: "No session token provided",
    FailureReason.INVALID_SESSION: "Invalid or expired session token",
    FailureReason.ACCOUNT_INACTIVE: "Account is inactive",
}


# =============================================================================
# Login / Logout
# =============================================================================


@router.post("/login")
async def login(request: Request, db: Session = Depends(get_db)):
    """Check credentials, open a session and set the session cookie."""
    try:
        body = await request.json()
        try:
            credentials = LoginRequest.model_validate(body)
        except ValidationError as exc:
            return kind_response(
                ErrorKind.VALIDATION,
                "Validation failed",
                details=exc.errors(
                    include_url=False, include_context=False, include_input=False
                ),
            )

        auth_provider = get_auth_provider()
        outcome = await auth_provider.authenticate(
            db, credentials.email, credentials.password
        )

        if isinstance(outcome, AuthFailure):
            return kind_response(ErrorKind.AUTHENTICATION, LOGIN_MESSAGES[outcome.reason])

        cookie = build_session_cookie(
            outcome.token, outcome.expires_at, name=settings.session_cookie_name
        )
        return success_response(
            {
                "user": public_user(outcome.user),
                "session": {
                    "token": outcome.token,
                    "expiresAt": outcome.expires_at,
                },
            },
            headers={"Set-Cookie": cookie},
        )
    except Exception:
        logger.exception("Login error")
        return kind_response(ErrorKind.UNEXPECTED, "An error occurred during login")


@router.post("/logout")
async def logout(request: Request, db: Session = Depends(get_db)):
    """Revoke the presented session. Always clears the cookie."""
    try:
        auth_provider = get_auth_provider()
        token = auth_provider.extract_token(request)
        if not token:
            return kind_response(ErrorKind.AUTHENTICATION, "No session token provided")

        revoked = await auth_provider.revoke_session(db, token)
        message = "Logged out successfully" if revoked else "Session not found, but logged out"

        return success_response(
            {"message": message},
            headers={"Set-Cookie": build_clear_cookie(settings.session_cookie_name)},
        )
    except Exception:
        logger.exception("Logout error")
        return kind_response(ErrorKind.UNEXPECTED, "An error occurred during logout")


# =============================================================================
# Current User
# =============================================================================


@router.get("/me")
async def me(request: Request, db: Session = Depends(get_db)):
    """Current user with role flags."""
    try:
        auth_provider = get_auth_provider()
        outcome = await auth_provider.current_user(db, request)

        if isinstance(outcome, AuthFailure):
            return kind_response(ErrorKind.AUTHENTICATION, ME_MESSAGES[outcome.reason])

        return success_response({"user": public_user(outcome, include_permissions=True)})
    except Exception:
        logger.exception("Get current user error")
        return kind_response(
            ErrorKind.UNEXPECTED, "An error occurred while fetching user information"
        )


@router.get("/session")
async def session(request: Request, db: Session = Depends(get_db)):
    """Validate the presented session and return its user."""
    try:
        auth_provider = get_auth_provider()
        outcome = await auth_provider.current_user(db, request)

        if isinstance(outcome, AuthFailure):
            return kind_response(ErrorKind.AUTHENTICATION, SESSION_MESSAGES[outcome.reason])

        return success_response({"user": public_user(outcome)})
    except Exception:
        logger.exception("Session validation error")
        return kind_response(
            ErrorKind.UNEXPECTED, "An error occurred during session validation"
        )
