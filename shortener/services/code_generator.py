"""
Short Code Generator

Produces random fixed-length codes over the base62 alphabet [0-9a-zA-Z].
Codes carry no state between calls; resolving collisions is up to the caller
(see LinkService.create_link).

With the default length of 6 there are 62**6 (about 5.7e10) possible codes.
"""

import secrets

CODE_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
DEFAULT_CODE_LENGTH = 6

# First path segments served by other routes; a link with one of these codes
# could never be reached
RESERVED_CODES = frozenset({"health", "shorten", "docs", "redoc"})


def generate_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """
    Return a uniformly random code of *length* characters.

    Uses the secrets module so codes cannot be predicted from earlier ones.
    """
    if length < 1:
        raise ValueError("Code length must be positive")
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))
