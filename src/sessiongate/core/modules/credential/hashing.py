"""Password hashing.

Passwords are reduced with SHA-256 and base64-encoded before bcrypt so that
every character counts, not just the first 72 bytes bcrypt accepts.
"""

import base64
import hashlib

import bcrypt

DEFAULT_ROUNDS = 10


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash password with a fresh salt."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password_hash: str, password: str) -> bool:
    """Check password against stored hash. A malformed hash never matches."""
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        return False
