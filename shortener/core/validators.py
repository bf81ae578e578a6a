"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.

Security Considerations:
- Short codes are restricted to the generator alphabet before any query
- Script-carrying schemes are refused as redirect targets
"""

import re
from typing import Optional
from urllib.parse import urlparse

from shortener.core.setting import MAX_CODE_LENGTH

_SHORT_CODE_RE = re.compile(r"^[0-9a-zA-Z]+$")

# Schemes that would execute in the visitor's browser instead of navigating
BLOCKED_SCHEMES = frozenset({"javascript", "data", "vbscript", "file"})


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Validate short code format.

    Short codes only contain base62 characters: [0-9a-zA-Z], and never
    exceed the column width. Anything else, surrounding whitespace
    included, is rejected rather than cleaned up, so a link has exactly
    one public form.

    Args:
        short_code: The short code to sanitize

    Returns:
        The short code if valid, None otherwise
    """
    if not short_code or not isinstance(short_code, str):
        return None

    if len(short_code) > MAX_CODE_LENGTH:
        return None

    if not _SHORT_CODE_RE.match(short_code):
        return None

    return short_code


def is_valid_url(url: str) -> bool:
    """
    Check that a URL has a parseable scheme and host.

    Any scheme with an authority component is accepted (http, https, ftp,
    custom app schemes), except the ones in BLOCKED_SCHEMES.

    Args:
        url: The URL string to validate

    Returns:
        True if valid, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    if url != url.strip() or any(ch.isspace() for ch in url):
        return False

    try:
        result = urlparse(url)
        # Accessing port validates it (raises on "host:notaport")
        result.port
    except ValueError:
        return False

    if not result.scheme or not result.netloc or not result.hostname:
        return False

    if result.scheme.lower() in BLOCKED_SCHEMES:
        return False

    return True
