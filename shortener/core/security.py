"""
Password hashing for protected links.

bcrypt provides the salt, the work factor and the constant-time comparison.
Plaintext passwords are never stored or logged.
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(plaintext: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt digest of *plaintext*."""
    if not plaintext:
        raise ValueError("Cannot hash an empty password")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(plaintext), salt).decode("utf-8")


def verify_password(plaintext: str, digest: str) -> bool:
    """Check *plaintext* against a stored bcrypt *digest*. Returns True on match."""
    if not plaintext or not digest:
        return False
    try:
        return bcrypt.checkpw(_encode(plaintext), digest.encode("utf-8"))
    except ValueError:
        # Stored digest is not a bcrypt hash
        logger.error("Stored password hash is malformed")
        return False
