"""
Password hashing utilities for the auth module.

Digests are bcrypt hashes produced through passlib's CryptContext, so
stored values are self-describing and can be re-hashed later if the
scheme or cost changes.
"""

from passlib.context import CryptContext

from .config import BCRYPT_ROUNDS

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    """Return a bcrypt digest of the given password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """
    Check a plaintext password against a stored digest.

    Malformed or non-bcrypt digests never match.
    """
    try:
        return pwd_context.verify(plain_password, password_hash)
    except (ValueError, TypeError):
        return False
