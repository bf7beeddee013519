"""Set-Cookie header values for browser-held sessions."""
import math
from datetime import datetime
from typing import Optional

from vacationplanner.services.auth.tokens import SESSION_COOKIE_NAME, as_utc, utcnow

COOKIE_FLAGS = "HttpOnly; Secure; SameSite=Strict; Path=/"


def build_session_cookie(
    token: str,
    expires_at: datetime,
    now: Optional[datetime] = None,
    name: str = SESSION_COOKIE_NAME,
) -> str:
    """
    Cookie carrying the session token.

    Max-Age is measured from the moment the response is built, not from
    session creation.
    """
    now = now or utcnow()
    max_age = max(math.floor((as_utc(expires_at) - now).total_seconds()), 0)
    return f"{name}={token}; {COOKIE_FLAGS}; Max-Age={max_age}"


def build_clear_cookie(name: str = SESSION_COOKIE_NAME) -> str:
    """Cookie that tells the browser to drop the session immediately."""
    return f"{name}=; {COOKIE_FLAGS}; Max-Age=0"
