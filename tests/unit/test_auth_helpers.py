"""
Unit tests for the response-side auth helpers.

- User sanitization and permission flags
- Set-Cookie values
- Error/success bodies
- Role guards
"""
import json
import re
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from vacationplanner.models import User, UserRole
from vacationplanner.services.auth.access import authenticated, has_role, run_guards
from vacationplanner.services.auth.cookies import build_clear_cookie, build_session_cookie
from vacationplanner.services.auth.errors import (
    Denial,
    ErrorKind,
    error_response,
    kind_response,
    success_response,
)
from vacationplanner.services.auth.sanitize import (
    SENSITIVE_FIELDS,
    public_user,
    sanitize_user,
    user_permissions,
)
from tests.factories import create_user


def make_user(**overrides) -> User:
    """Transient user, never added to a session."""
    defaults = {
        "id": 42,
        "email": "test@example.com",
        "first_name": "Test",
        "last_name": "User",
        "password_hash": "$2b$10$abcdefghijklmnopqrstuv",
        "role": UserRole.AGENT,
        "active": True,
        "last_login": None,
    }
    defaults.update(overrides)
    return User(**defaults)


def body_of(response) -> dict:
    return json.loads(response.body)


class TestSanitizeUser:
    """Tests for stripping sensitive fields."""

    def test_removes_password_hash(self):
        sanitized = sanitize_user(make_user())

        assert "password_hash" not in sanitized
        assert sanitized["id"] == 42
        assert sanitized["email"] == "test@example.com"
        assert sanitized["role"] == UserRole.AGENT

    def test_preserves_all_other_columns(self, db: Session):
        user = create_user(db, role=UserRole.ADMIN)

        sanitized = sanitize_user(user)

        expected = {c.key for c in User.__table__.columns} - SENSITIVE_FIELDS
        assert set(sanitized) == expected
        assert sanitized["active"] is True
        assert sanitized["created_at"] is not None

    def test_values_unmodified(self):
        last_login = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        sanitized = sanitize_user(make_user(last_login=last_login, active=False))

        assert sanitized["last_login"] is last_login
        assert sanitized["active"] is False


class TestPermissions:
    """Tests for the role flag projection."""

    @pytest.mark.parametrize(
        "role, expected",
        [
            (UserRole.ADMIN, {"isAdmin": True, "isManager": False, "isAgent": False}),
            (UserRole.MANAGER, {"isAdmin": False, "isManager": True, "isAgent": False}),
            (UserRole.AGENT, {"isAdmin": False, "isManager": False, "isAgent": True}),
        ],
    )
    def test_flags_follow_role(self, role, expected):
        assert user_permissions(make_user(role=role)) == expected


class TestPublicUser:
    def test_camel_case_keys(self):
        data = public_user(make_user())

        assert data["firstName"] == "Test"
        assert data["lastName"] == "User"
        assert "lastLogin" in data
        assert "passwordHash" not in data
        assert "permissions" not in data

    def test_includes_permissions_on_request(self):
        data = public_user(make_user(role=UserRole.MANAGER), include_permissions=True)

        assert data["permissions"]["isManager"] is True


class TestSessionCookie:
    """Tests for the Set-Cookie values."""

    def test_session_cookie_flags(self):
        now = datetime.now(timezone.utc)

        cookie = build_session_cookie("my-session-token", now + timedelta(days=7), now=now)

        assert cookie == (
            "session_token=my-session-token; HttpOnly; Secure; SameSite=Strict; "
            "Path=/; Max-Age=604800"
        )

    def test_max_age_measured_from_build_time(self):
        cookie = build_session_cookie(
            "test-token", datetime.now(timezone.utc) + timedelta(hours=1)
        )

        max_age = int(re.search(r"Max-Age=(\d+)", cookie).group(1))
        assert 3500 < max_age <= 3600

    def test_max_age_floors_partial_seconds(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)

        cookie = build_session_cookie("t", now + timedelta(seconds=10, milliseconds=999), now=now)

        assert cookie.endswith("Max-Age=10")

    def test_max_age_never_negative(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)

        cookie = build_session_cookie("t", now - timedelta(minutes=5), now=now)

        assert cookie.endswith("Max-Age=0")

    def test_clear_cookie(self):
        assert build_clear_cookie() == (
            "session_token=; HttpOnly; Secure; SameSite=Strict; Path=/; Max-Age=0"
        )


class TestResponses:
    """Tests for the JSON body helpers."""

    def test_error_response_default_code(self):
        response = error_response("Not here", 404)

        assert response.status_code == 404
        assert body_of(response) == {"error": "Not here", "code": "ERROR_404"}

    def test_error_response_details(self):
        response = error_response("Bad", 400, "VALIDATION_ERROR", details=[{"loc": ["email"]}])

        assert body_of(response)["details"] == [{"loc": ["email"]}]

    @pytest.mark.parametrize(
        "kind, status_code, code",
        [
            (ErrorKind.VALIDATION, 400, "VALIDATION_ERROR"),
            (ErrorKind.AUTHENTICATION, 401, "UNAUTHORIZED"),
            (ErrorKind.AUTHORIZATION, 403, "FORBIDDEN"),
            (ErrorKind.UNEXPECTED, 500, "INTERNAL_ERROR"),
        ],
    )
    def test_kind_response(self, kind, status_code, code):
        response = kind_response(kind, "message")

        assert response.status_code == status_code
        assert body_of(response)["code"] == code

    def test_success_response_encodes_datetimes(self):
        when = datetime(2026, 1, 1, tzinfo=timezone.utc)

        response = success_response({"at": when}, headers={"Set-Cookie": "a=b"})

        assert body_of(response) == {"success": True, "at": "2026-01-01T00:00:00+00:00"}
        assert response.headers["set-cookie"] == "a=b"


class TestGuards:
    """Tests for guard functions and their composition."""

    def test_authenticated_rejects_anonymous(self):
        denial = authenticated(None)

        assert denial.kind == ErrorKind.AUTHENTICATION
        assert denial.message == "Authentication required"

    def test_authenticated_rejects_inactive(self):
        assert authenticated(make_user(active=False)).kind == ErrorKind.AUTHENTICATION

    def test_authenticated_accepts_active(self):
        assert authenticated(make_user()) is None

    def test_has_role_denies_other_roles(self):
        guard = has_role(UserRole.ADMIN, UserRole.AGENT)

        denial = guard(make_user(role=UserRole.MANAGER))

        assert denial.kind == ErrorKind.AUTHORIZATION
        assert denial.message == "Insufficient permissions"
        assert denial.details == (
            "This resource requires one of the following roles: ADMIN, AGENT"
        )

    def test_has_role_accepts_listed_role(self):
        assert has_role(UserRole.ADMIN, UserRole.AGENT)(make_user(role=UserRole.AGENT)) is None

    def test_run_guards_stops_at_first_denial(self):
        calls = []

        def deny(user):
            calls.append("deny")
            return Denial(ErrorKind.AUTHENTICATION, "first")

        def never(user):
            calls.append("never")
            return None

        denial = run_guards(None, [deny, never])

        assert denial.message == "first"
        assert calls == ["deny"]

    def test_run_guards_auth_before_role(self):
        """An anonymous request is 401, not 403, even behind a role guard."""
        denial = run_guards(None, [authenticated, has_role(UserRole.ADMIN)])

        assert denial.kind == ErrorKind.AUTHENTICATION

    def test_run_guards_all_pass(self):
        user = make_user(role=UserRole.ADMIN)

        assert run_guards(user, [authenticated, has_role(UserRole.ADMIN)]) is None

    def test_denial_to_response(self):
        response = Denial(ErrorKind.AUTHORIZATION, "Insufficient permissions", "why").to_response()

        assert response.status_code == 403
        assert body_of(response) == {
            "error": "Insufficient permissions",
            "code": "FORBIDDEN",
            "details": "why",
        }
