"""Seed the default back-office accounts."""

from vacationplanner.config import settings
from vacationplanner.database import SessionLocal
from vacationplanner.models.user import User, UserRole
from vacationplanner.services.auth.passwords import PasswordHasher


DEFAULT_USERS = [
    {
        "email": "admin@vacationplanner.com",
        "first_name": "Admin",
        "last_name": "User",
        "role": UserRole.ADMIN,
        "password": "admin123",
    },
    {
        "email": "agent@vacationplanner.com",
        "first_name": "Jane",
        "last_name": "Smith",
        "role": UserRole.AGENT,
        "password": "agent123",
    },
    {
        "email": "manager@vacationplanner.com",
        "first_name": "John",
        "last_name": "Doe",
        "role": UserRole.MANAGER,
        "password": "manager123",
    },
]


def seed_users() -> int:
    """Create any default user that does not exist yet. Returns how many were added."""
    db = SessionLocal()
    hasher = PasswordHasher(rounds=settings.password_hash_rounds)
    created = 0

    try:
        for entry in DEFAULT_USERS:
            existing = db.query(User).filter(User.email == entry["email"]).first()
            if existing:
                print(f"User {entry['email']} already exists. Skipping.")
                continue

            db.add(
                User(
                    email=entry["email"],
                    first_name=entry["first_name"],
                    last_name=entry["last_name"],
                    role=entry["role"],
                    password_hash=hasher.hash(entry["password"]),
                    active=True,
                )
            )
            created += 1

        db.commit()
        print(f"Successfully created {created} user(s)")
        return created

    except Exception as e:
        print(f"Error seeding users: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_users()
