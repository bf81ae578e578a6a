"""
HTTP error boundary

Maps every ErrorKind to a status code and a user-facing message. Server-side
failures get a generic message; their details only go to the log.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import Response

from shortener.api import presenters
from shortener.core.exceptions import ErrorKind, ShortenerException

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"

# Browsers get the password form again instead of an error page
PROMPT_KINDS = frozenset({ErrorKind.AUTH_REQUIRED, ErrorKind.AUTH_FAILED})

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.AUTH_REQUIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.AUTH_FAILED: status.HTTP_403_FORBIDDEN,
    ErrorKind.CONFLICT: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def public_message(exc: ShortenerException) -> str:
    """Message safe to show to the caller."""
    if STATUS_BY_KIND[exc.kind] >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return GENERIC_SERVER_ERROR
    return exc.message


async def shortener_exception_handler(request: Request, exc: ShortenerException) -> Response:
    """
    Turn a ShortenerException into a response.

    5xx failures are logged with their underlying cause. Browsers hitting a
    protected link get the password form instead of an error page.

    Args:
        request: Request that raised
        exc: The raised exception

    Returns:
        Response with the status STATUS_BY_KIND assigns to exc.kind
    """
    status_code = STATUS_BY_KIND[exc.kind]
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc}",
            exc_info=getattr(exc, "original_error", None) or exc,
        )

    if exc.kind in PROMPT_KINDS and presenters.wants_html(request):
        error = exc.message if exc.kind is ErrorKind.AUTH_FAILED else None
        return presenters.render_password_prompt(request, exc.code, status_code, error=error)

    return presenters.render_error(request, public_message(exc), status_code)


def add_exception_handlers(app: FastAPI) -> None:
    """Register the ShortenerException handler on *app*."""
    app.add_exception_handler(ShortenerException, shortener_exception_handler)
