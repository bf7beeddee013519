"""Password hashing and verification."""
import logging

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt only ever reads this many bytes of a password
MAX_PASSWORD_BYTES = 72


def password_bytes(password: str) -> bytes:
    """UTF-8 encode a password, truncated to what bcrypt reads."""
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


class PasswordHasher:
    """
    One-way bcrypt hashing with a configurable work factor.

    Passwords longer than 72 bytes are truncated before hashing and before
    verification, so both sides always agree. Verification never raises: a
    mismatch and an unreadable stored hash both come back as False.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password_bytes(password), salt).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(password_bytes(password), hashed_password.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash could not be parsed")
            return False
