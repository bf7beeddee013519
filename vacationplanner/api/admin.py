"""Back-office user management: listing accounts, changing role and status."""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from vacationplanner.database import get_db
from vacationplanner.models.user import User, UserRole
from vacationplanner.services.auth import get_auth_provider
from vacationplanner.services.auth.dependencies import require_admin, require_manager
from vacationplanner.services.auth.errors import error_response, success_response
from vacationplanner.services.auth.sanitize import public_user
from vacationplanner.services.auth.session_store import SessionStore

router = APIRouter(prefix="/api/admin", tags=["admin"])


class UserUpdateRequest(BaseModel):
    role: Optional[UserRole] = None
    active: Optional[bool] = None


@router.get("/users")
async def list_users(
    user: User = Depends(require_manager), db: Session = Depends(get_db)
):
    """List all back-office users (admins and managers)."""
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return success_response({"users": [public_user(u) for u in users]})


@router.patch("/users/{user_id}")
async def update_user(
    user_id: int,
    update: UserUpdateRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Change a user's role or active flag (admin only)."""
    target_user = SessionStore(db).find_user_by_id(user_id)
    if not target_user:
        return error_response("User not found", 404)

    if target_user.id == admin.id and (
        update.active is False
        or (update.role is not None and update.role != UserRole.ADMIN)
    ):
        return error_response("Cannot deactivate or demote your own account", 400)

    if update.role is not None:
        target_user.role = update.role
    if update.active is not None:
        target_user.active = update.active
    db.commit()

    # A deactivated account keeps no live sessions
    if update.active is False:
        await get_auth_provider().revoke_all_sessions(db, target_user.id)

    db.refresh(target_user)
    return success_response({"user": public_user(target_user)})


@router.delete("/users/{user_id}/sessions")
async def revoke_user_sessions(
    user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)
):
    """Sign a user out everywhere (admin only)."""
    target_user = SessionStore(db).find_user_by_id(user_id)
    if not target_user:
        return error_response("User not found", 404)

    revoked = await get_auth_provider().revoke_all_sessions(db, target_user.id)
    return success_response({"revoked": revoked})
