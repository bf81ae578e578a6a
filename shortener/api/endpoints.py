"""
FastAPI Endpoints for URL Shortener Service

This module defines the link endpoints with minimal logic.
Endpoints only handle:
- Reading the request (JSON or form body, query parameters)
- Delegating to the link service
- Handing the result to a presenter

Errors raised by the service are turned into responses by the handler in
shortener.api.errors, so no endpoint catches them.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import Response
from pydantic import ValidationError

from shortener.api import presenters
from shortener.api.schemas import ErrorResponse, ShortenRequest, ShortenResponse
from shortener.core.exceptions import InvalidInputError
from shortener.services.link_service import LinkService
from shortener.services.link_store import LinkStore

router = APIRouter()


def get_link_service(request: Request) -> LinkService:
    """Build a LinkService over the store created at startup."""
    store: LinkStore = request.app.state.link_store
    return LinkService(store, request.app.state.settings)


async def read_shorten_request(request: Request) -> ShortenRequest:
    """
    Parse the creation body from JSON or from an HTML form post.

    Raises:
        InvalidInputError: If the body cannot be read as a ShortenRequest
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            raise InvalidInputError("request body is not valid JSON")
        if not isinstance(payload, dict):
            raise InvalidInputError("request body must be a JSON object")
    else:
        form = await request.form()
        payload = {key: value for key, value in form.items()}

    try:
        return ShortenRequest.model_validate(payload)
    except ValidationError:
        raise InvalidInputError("url is invalid")


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_200_OK,
    summary="Create a short URL",
    description="Takes a long URL and an optional password and returns a short link",
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_short_url(
    request: Request,
    body: ShortenRequest = Depends(read_shorten_request),
    link_service: LinkService = Depends(get_link_service),
) -> Response:
    """
    Create a new short URL from a long URL.

    Returns:
        JSON {short, code}, or an HTML confirmation page for browsers
    """
    created = await link_service.create_link(body.url, body.password)
    return presenters.render_created(request, created)


@router.get(
    "/{code}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    description="Redirects to the target URL, asking for the password if the link has one",
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def redirect_to_url(
    code: str,
    password: Optional[str] = Query(default=None, description="Password for protected links"),
    link_service: LinkService = Depends(get_link_service),
) -> Response:
    """
    Redirect to the original URL for a given short code.

    Raises:
        LinkNotFoundError: 404
        AuthRequiredError: 401 (password form for browsers)
        AuthFailedError: 403
    """
    resolved = await link_service.resolve_link(code, password)
    return presenters.render_redirect(resolved)
