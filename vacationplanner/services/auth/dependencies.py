"""FastAPI dependencies for authentication and role checks."""
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from vacationplanner.database import get_db
from vacationplanner.models.user import User, UserRole
from vacationplanner.services.auth import get_auth_provider
from vacationplanner.services.auth.access import Guard, authenticated, has_role, run_guards
from vacationplanner.services.auth.errors import AccessDenied


async def resolve_user(request: Request, db: Session) -> Optional[User]:
    """Resolve the request's session to a user, or None."""
    auth_provider = get_auth_provider()
    return await auth_provider.get_user_from_request(db, request)


async def get_optional_user(
    request: Request,
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Get the current user if authenticated, None otherwise.

    Inactive accounts count as anonymous.
    """
    user = await resolve_user(request, db)
    if user is None or not user.active:
        return None
    return user


class Guarded:
    """
    Dependency class running a fixed sequence of guards.

    Raises AccessDenied on the first guard that refuses, so the route
    handler never runs. Otherwise returns the authenticated user.
    """

    def __init__(self, *guards: Guard):
        self.guards = guards

    async def __call__(
        self,
        request: Request,
        db: Session = Depends(get_db)
    ) -> User:
        user = await resolve_user(request, db)
        denial = run_guards(user, self.guards)
        if denial is not None:
            raise AccessDenied(denial)
        return user


def require_role(*roles: UserRole) -> Guarded:
    """Require an authenticated, active user holding one of ``roles``."""
    return Guarded(authenticated, has_role(*roles))


# Pre-configured instances
require_auth = Guarded(authenticated)
require_admin = require_role(UserRole.ADMIN)
require_manager = require_role(UserRole.ADMIN, UserRole.MANAGER)
