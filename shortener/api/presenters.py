"""
Response Presenters

Turns service results into HTTP responses. Browsers (Accept prefers
text/html) get rendered Jinja2 pages; everyone else gets JSON.
"""

import string
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from fastapi.templating import Jinja2Templates

from shortener.api.schemas import ErrorResponse, ShortenResponse
from shortener.services.link_service import CreatedLink, ResolvedLink

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# Printable ASCII punctuation passes through untouched; only non-ASCII and
# control bytes are percent-encoded
LOCATION_SAFE_CHARS = string.punctuation


def wants_html(request: Request) -> bool:
    """
    True if the client prefers HTML over JSON.

    Only the order of the two media types in Accept is compared; q-values
    are not weighed. A missing Accept header or */* means JSON.
    """
    accept = request.headers.get("accept", "").lower()
    html_at = accept.find("text/html")
    if html_at < 0:
        return False
    json_at = accept.find("application/json")
    return json_at < 0 or html_at < json_at


def render_index(request: Request) -> Response:
    """Render the link creation form."""
    return templates.TemplateResponse(request, "index.html", {})


def render_created(request: Request, created: CreatedLink) -> Response:
    """
    Render a newly created link.

    Args:
        request: Incoming request, used for content negotiation
        created: Result of LinkService.create_link

    Returns:
        HTML confirmation page, or JSON {short, code}
    """
    if wants_html(request):
        return templates.TemplateResponse(
            request,
            "created.html",
            {"short": created.short_url, "code": created.code, "url": created.url,
             "protected": created.protected},
        )
    body = ShortenResponse(short=created.short_url, code=created.code)
    return JSONResponse(body.model_dump())


def render_redirect(resolved: ResolvedLink) -> Response:
    """
    Redirect to a resolved link's target.

    Starlette's RedirectResponse quotes characters such as | { } ^ that
    are legal in a Location header, so the 302 is built directly.

    Args:
        resolved: Result of LinkService.resolve_link

    Returns:
        302 response whose Location is the stored URL
    """
    location = quote(resolved.url, safe=LOCATION_SAFE_CHARS)
    return Response(status_code=status.HTTP_302_FOUND, headers={"location": location})


def render_password_prompt(
    request: Request, code: str, status_code: int, error: Optional[str] = None
) -> Response:
    """
    Render the password form for a protected link.

    Args:
        request: Incoming request
        code: Short code the form submits back to
        status_code: 401 when no password was given, 403 after a wrong one
        error: Message shown above the form, if any
    """
    return templates.TemplateResponse(
        request, "password.html", {"code": code, "error": error}, status_code=status_code
    )


def render_error(request: Request, message: str, status_code: int) -> Response:
    """
    Render an error as an HTML page or as JSON {error}.

    Args:
        request: Incoming request, used for content negotiation
        message: Message safe to show to the caller
        status_code: HTTP status of the response
    """
    if wants_html(request):
        return templates.TemplateResponse(
            request,
            "error.html",
            {"message": message, "status_code": status_code},
            status_code=status_code,
        )
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)
