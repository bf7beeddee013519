"""
Role-based access guards.

A guard looks at the resolved user (or None) and either returns a Denial
or None to let the request continue. Guards run in declared order and the
first denial wins.
"""
from typing import Callable, Iterable, Optional

from vacationplanner.models.user import User, UserRole
from vacationplanner.services.auth.errors import Denial, ErrorKind

Guard = Callable[[Optional[User]], Optional[Denial]]


def authenticated(user: Optional[User]) -> Optional[Denial]:
    """Deny anonymous requests and inactive accounts."""
    if user is None or not user.active:
        return Denial(ErrorKind.AUTHENTICATION, "Authentication required")
    return None


def has_role(*roles: UserRole) -> Guard:
    """Build a guard that only admits users holding one of ``roles``."""
    allowed = tuple(roles)

    def guard(user: Optional[User]) -> Optional[Denial]:
        if user is None or user.role not in allowed:
            names = ", ".join(role.value for role in allowed)
            return Denial(
                ErrorKind.AUTHORIZATION,
                "Insufficient permissions",
                f"This resource requires one of the following roles: {names}",
            )
        return None

    return guard


def run_guards(user: Optional[User], guards: Iterable[Guard]) -> Optional[Denial]:
    for guard in guards:
        denial = guard(user)
        if denial is not None:
            return denial
    return None
