"""Public projections of user records."""
from typing import Any, Dict

from pydantic.alias_generators import to_camel
from sqlalchemy import inspect

from vacationplanner.models.user import User, UserRole

# Columns that must never leave the service. Anything not listed here is
# exposed, including columns added to User later.
SENSITIVE_FIELDS = frozenset({"password_hash"})


def sanitize_user(user: User) -> Dict[str, Any]:
    """Return every mapped column of ``user`` except the sensitive ones."""
    mapper = inspect(user).mapper
    return {
        attr.key: getattr(user, attr.key)
        for attr in mapper.column_attrs
        if attr.key not in SENSITIVE_FIELDS
    }


def user_permissions(user: User) -> Dict[str, bool]:
    return {
        "isAdmin": user.role == UserRole.ADMIN,
        "isManager": user.role == UserRole.MANAGER,
        "isAgent": user.role == UserRole.AGENT,
    }


def public_user(user: User, include_permissions: bool = False) -> Dict[str, Any]:
    """Sanitized user with camelCase keys, as sent to API clients."""
    data = {to_camel(key): value for key, value in sanitize_user(user).items()}
    if include_permissions:
        data["permissions"] = user_permissions(user)
    return data
