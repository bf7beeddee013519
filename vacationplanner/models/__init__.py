"""
Database models for Vacation Planner.

Import all models here so Alembic can detect them for migrations.
"""

from vacationplanner.database import Base
from vacationplanner.models.user import User, UserRole
from vacationplanner.models.session import Session

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Session",
]
