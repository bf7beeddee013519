"""Request pre-filter for the admin area."""
import logging
from typing import Mapping
from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import cookie_parser

from vacationplanner.config import settings
from vacationplanner.services.auth.errors import ErrorKind, kind_response
from vacationplanner.services.auth.tokens import BEARER_PREFIX, SESSION_COOKIE_NAME

logger = logging.getLogger(__name__)


def has_session_credential(
    headers: Mapping[str, str], cookie_name: str = SESSION_COOKIE_NAME
) -> bool:
    """
    Presence-only credential check.

    True when the request carries a Bearer header or a non-empty session
    cookie. The token itself is not looked at.
    """
    auth_header = headers.get("authorization")
    if auth_header and auth_header.startswith(BEARER_PREFIX):
        return True

    cookie_header = headers.get("cookie")
    if cookie_header:
        return bool(cookie_parser(cookie_header).get(cookie_name))

    return False


class AdminPrefilterMiddleware(BaseHTTPMiddleware):
    """
    Turn away admin requests that carry no credential at all.

    - Applies to /admin and /api/admin paths only
    - Login endpoints are exempt
    - API paths get a 401 JSON body, pages are redirected to the login page
    - Requests with a credential pass through; the route guards validate it
    """

    ADMIN_PREFIXES = ("/admin", "/api/admin")
    EXEMPT_PATHS = {"/api/admin/login", "/api/auth/login"}

    def __init__(self, app, cookie_name: str = settings.session_cookie_name,
                 login_path: str = settings.login_page_path):
        super().__init__(app)
        self.cookie_name = cookie_name
        self.login_path = login_path

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if path in self.EXEMPT_PATHS or not path.startswith(self.ADMIN_PREFIXES):
            return await call_next(request)

        if has_session_credential(request.headers, self.cookie_name):
            return await call_next(request)

        logger.info("Admin pre-filter rejected unauthenticated request: path=%s", path)

        if path.startswith("/api/"):
            return kind_response(ErrorKind.AUTHENTICATION, "Authentication required")

        query = urlencode({"redirect": path})
        return RedirectResponse(
            url=f"{self.login_path}?{query}",
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )
