"""CLI commands for Vacation Planner."""

import argparse
import asyncio
import getpass
import logging
import sys

from sqlalchemy.orm import Session

from vacationplanner.config import settings
from vacationplanner.database import SessionLocal
from vacationplanner.models.user import User, UserRole
from vacationplanner.services.auth import get_auth_provider
from vacationplanner.services.auth.passwords import MAX_PASSWORD_BYTES, password_too_long


def create_user(
    email: str,
    first_name: str,
    last_name: str,
    role: UserRole = UserRole.AGENT,
    password: str | None = None,
) -> None:
    """Create a back-office user."""
    db: Session = SessionLocal()

    try:
        # Check if email already exists
        existing = db.query(User).filter(User.email == email.lower()).first()
        if existing:
            print(f"Error: User with email '{email}' already exists.")
            sys.exit(1)

        # Get password if not provided
        if not password:
            password = getpass.getpass("Password: ")
            password_confirm = getpass.getpass("Confirm password: ")
            if password != password_confirm:
                print("Error: Passwords do not match.")
                sys.exit(1)

        if len(password) < 8:
            print("Error: Password must be at least 8 characters.")
            sys.exit(1)

        if password_too_long(password):
            print(f"Error: Password must be at most {MAX_PASSWORD_BYTES} bytes.")
            sys.exit(1)

        auth_provider = get_auth_provider()
        asyncio.run(
            auth_provider.create_user(
                db, email, password, first_name=first_name, last_name=last_name, role=role
            )
        )

        print(f"{role.value} user created successfully: {email.lower()}")

    finally:
        db.close()


def purge_sessions() -> int:
    """Delete expired sessions."""
    db: Session = SessionLocal()

    try:
        count = asyncio.run(get_auth_provider().purge_expired_sessions(db))
        print(f"Removed {count} expired session(s).")
        return count
    finally:
        db.close()


def main():
    logging.basicConfig(level=settings.log_level)

    parser = argparse.ArgumentParser(description="Vacation Planner CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # create-user command
    create_user_parser = subparsers.add_parser(
        "create-user", help="Create a back-office user"
    )
    create_user_parser.add_argument("--email", required=True, help="Email address")
    create_user_parser.add_argument("--first-name", default="", help="First name")
    create_user_parser.add_argument("--last-name", default="", help="Last name")
    create_user_parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.AGENT.value,
        help="User role (default: AGENT)",
    )
    create_user_parser.add_argument(
        "--password", help="Password (will prompt if not provided)"
    )

    # purge-sessions command
    subparsers.add_parser("purge-sessions", help="Delete expired sessions")

    args = parser.parse_args()

    if args.command == "create-user":
        create_user(
            args.email,
            args.first_name,
            args.last_name,
            UserRole(args.role),
            args.password,
        )
    elif args.command == "purge-sessions":
        purge_sessions()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
