"""
Authentication service package.

Provides session-based authentication with:
- bcrypt password verification
- database-backed session tokens (Bearer header or cookie)
- role guards usable as FastAPI dependencies

Usage:
    from vacationplanner.services.auth import get_auth_provider
    from vacationplanner.services.auth.dependencies import require_auth, require_admin

    # In routes:
    @router.get("/protected")
    async def protected_route(user: User = Depends(require_auth)):
        ...
"""
from vacationplanner.services.auth.base import AuthProvider
from vacationplanner.services.auth.local_provider import local_auth_provider


def get_auth_provider() -> AuthProvider:
    """Return the configured auth provider."""
    return local_auth_provider


__all__ = [
    "AuthProvider",
    "get_auth_provider",
    "local_auth_provider",
]
