"""
Link Service

This service handles the core business logic of the shortener:
- Validating target URLs
- Hashing and checking link passwords
- Picking a free short code and inserting the link
- Resolving a code to its redirect target

The service returns plain result objects and raises ShortenerException
subclasses. It knows nothing about HTTP or about how results are rendered.

Code selection:
1. Up to CODE_PROBE_ATTEMPTS random candidates are checked against the
   store; the first free one is used.
2. The insert itself is the authority on uniqueness. When it reports a
   conflict (two requests raced for the same code, or every checked
   candidate collided) the service waits with exponential backoff, draws
   a fresh code and tries again, up to INSERT_MAX_RETRIES times.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool

from shortener.core.exceptions import (
    AuthFailedError,
    AuthRequiredError,
    CodeConflictError,
    InvalidInputError,
    LinkNotFoundError,
)
from shortener.core.security import hash_password, verify_password
from shortener.core.setting import Settings
from shortener.core.validators import is_valid_url, sanitize_short_code
from shortener.services.code_generator import RESERVED_CODES, generate_code
from shortener.services.link_store import LinkStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreatedLink:
    code: str
    short_url: str
    url: str
    protected: bool


@dataclass(frozen=True)
class ResolvedLink:
    code: str
    url: str


class LinkService:
    """
    Create and resolve short links.

    Args:
        store: Link persistence
        settings: Code length, retry budget, bcrypt rounds and base URL
        code_factory: Callable producing a candidate code of a given length
    """

    def __init__(
        self,
        store: LinkStore,
        settings: Settings,
        code_factory: Callable[[int], str] = generate_code,
    ):
        self.store = store
        self.settings = settings
        self.code_factory = code_factory

    def build_short_url(self, code: str) -> str:
        return f"{self.settings.BASE_URL}/{code}"

    async def create_link(self, url: Optional[str], password: Optional[str] = None) -> CreatedLink:
        """
        Create a new short link.

        Raises:
            InvalidInputError: If url is missing or malformed
            CodeConflictError: If no free code could be inserted within the retry budget
            StorageError: If the database operation fails
        """
        if url is None or not str(url).strip():
            raise InvalidInputError("url is required")
        if not is_valid_url(url):
            raise InvalidInputError("url is invalid")

        password_hash = None
        if password:
            password_hash = await run_in_threadpool(
                hash_password, password, self.settings.BCRYPT_ROUNDS
            )

        max_retries = self.settings.INSERT_MAX_RETRIES
        attempt = 0
        while True:
            code = await self._pick_candidate()
            try:
                link = await self.store.insert(code, url, password_hash)
                break
            except CodeConflictError:
                if attempt >= max_retries:
                    logger.error(f"Giving up after {attempt + 1} insert conflicts")
                    raise
                delay = self.settings.INSERT_BACKOFF_SECONDS * (2 ** attempt)
                attempt += 1
                logger.info(f"Retrying insert in {delay:.3f}s (retry {attempt})")
                await asyncio.sleep(delay)

        return CreatedLink(
            code=link.code,
            short_url=self.build_short_url(link.code),
            url=link.url,
            protected=link.is_protected,
        )

    def _draw_code(self) -> str:
        """Draw a code that does not shadow another route (see RESERVED_CODES)."""
        while True:
            code = self.code_factory(self.settings.CODE_LENGTH)
            if code not in RESERVED_CODES:
                return code
            logger.debug(f"Skipping reserved code {code}")

    async def _pick_candidate(self) -> str:
        """
        Return the first candidate the store does not know about.

        If every check collides the last candidate is returned; the insert
        will then report the conflict and the caller draws again.
        """
        code = ""
        for attempt in range(1, self.settings.CODE_PROBE_ATTEMPTS + 1):
            code = self._draw_code()
            if not await self.store.code_exists(code):
                return code
            logger.debug(f"Candidate code taken (check {attempt})")
        return code

    async def resolve_link(self, code: str, password: Optional[str] = None) -> ResolvedLink:
        """
        Resolve *code* to its target URL, checking the password if the link has one.

        Raises:
            LinkNotFoundError: If the code is malformed or unknown
            AuthRequiredError: If the link is protected and no password was given
            AuthFailedError: If the password does not match
            StorageError: If the database operation fails
        """
        sanitized = sanitize_short_code(code)
        if sanitized is None:
            raise LinkNotFoundError(code)

        link = await self.store.find_by_code(sanitized)
        if link is None:
            raise LinkNotFoundError(sanitized)

        if link.is_protected:
            if not password:
                raise AuthRequiredError(link.code)
            matches = await run_in_threadpool(verify_password, password, link.password_hash)
            if not matches:
                logger.info(f"Wrong password for code={link.code}")
                raise AuthFailedError(link.code)

        return ResolvedLink(code=link.code, url=link.url)
