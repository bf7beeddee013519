"""Persistence operations the auth core needs for users and sessions."""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session as DBSession, joinedload

from vacationplanner.models.session import Session
from vacationplanner.models.user import User


class SessionStore:
    """
    Thin adapter over a SQLAlchemy session.

    Every write commits on its own, so each call is atomic. Failures are
    left to propagate to the caller.
    """

    def __init__(self, db: DBSession):
        self.db = db

    def find_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def find_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def create_session(self, user_id: int, token: str, expires_at: datetime) -> Session:
        session = Session(user_id=user_id, token=token, expires_at=expires_at)
        self.db.add(session)
        self.db.commit()
        return session

    def find_session_by_token(self, token: str) -> Optional[Session]:
        """Look up a session with its owning user loaded in the same query."""
        return (
            self.db.query(Session)
            .options(joinedload(Session.user))
            .filter(Session.token == token)
            .first()
        )

    def delete_session_by_id(self, session_id: int) -> None:
        self.db.query(Session).filter(Session.id == session_id).delete(
            synchronize_session=False
        )
        self.db.commit()

    def delete_sessions_for_user(
        self, user_id: int, except_token: Optional[str] = None
    ) -> int:
        """Delete all of a user's sessions, optionally keeping one."""
        query = self.db.query(Session).filter(Session.user_id == user_id)
        if except_token:
            query = query.filter(Session.token != except_token)
        count = query.delete(synchronize_session=False)
        self.db.commit()
        return count

    def update_user_last_login(self, user_id: int, when: datetime) -> None:
        self.db.query(User).filter(User.id == user_id).update(
            {User.last_login: when}, synchronize_session=False
        )
        self.db.commit()

    def delete_expired_sessions(self, now: datetime) -> int:
        """Remove every session that expired at or before ``now``."""
        count = (
            self.db.query(Session)
            .filter(Session.expires_at <= now)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count
