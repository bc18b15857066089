import logging
import bcrypt
from datetime import datetime, timedelta
from typing import Optional
from jose import jwt
from prospectflow.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def _truncate_to_bcrypt_limit(password: str) -> bytes:
    """Encode a password, cutting it at 72 bytes without splitting a UTF-8 character."""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) <= BCRYPT_MAX_BYTES:
        return password_bytes
    logger.warning("Password exceeds 72 bytes, truncating before hashing (validation should have caught this)")
    return password_bytes[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore").encode("utf-8")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt directly.

    Args:
        password: Plain text password (max 72 bytes in UTF-8)

    Returns:
        Hashed password string

    Raises:
        ValueError: If password cannot be hashed
    """
    try:
        return bcrypt.hashpw(_truncate_to_bcrypt_limit(password), bcrypt.gensalt()).decode("utf-8")
    except ValueError as e:
        logger.error(f"Password hashing failed (ValueError): {e}")
        raise ValueError("Invalid password") from e


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """
    Verify a password against its hash.

    Malformed hashes are logged and treated as a mismatch.
    """
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_truncate_to_bcrypt_limit(password), hashed.encode("utf-8"))
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification failed: {e}")
        return False


def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
