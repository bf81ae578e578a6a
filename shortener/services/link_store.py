"""
Link Store

Persistence for Link rows. Every operation checks out its own session from
the Database and releases it before returning, so a LinkStore can be shared
by all concurrent requests.

Database failures are translated here: a unique index violation becomes
CodeConflictError, anything else SQLAlchemy or the driver raises becomes
StorageError. Nothing above this layer sees SQLAlchemy exceptions.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select

from shortener.core.exceptions import CodeConflictError, StorageError
from shortener.db.models import Link
from shortener.db.session import Database

logger = logging.getLogger(__name__)


class LinkStore:
    """Point lookups and inserts on the links table."""

    def __init__(self, database: Database):
        self.database = database

    async def code_exists(self, code: str) -> bool:
        """Return True if a link with *code* exists."""
        try:
            async with self.database.session() as session:
                statement = select(Link.id).where(Link.code == code).limit(1)
                result = await session.exec(statement)
                return result.first() is not None
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to check code existence: {e}", exc_info=True)
            raise StorageError("Failed to check short code", original_error=e)

    async def insert(self, code: str, url: str, password_hash: Optional[str] = None) -> Link:
        """
        Persist a new link.

        Raises:
            CodeConflictError: If *code* is already taken
            StorageError: If the database operation fails for any other reason
        """
        link = Link(code=code, url=url, password_hash=password_hash)
        try:
            async with self.database.session() as session:
                session.add(link)
                await session.flush()
                await session.refresh(link)
        except IntegrityError as e:
            logger.warning(f"Short code collision on insert: {code}")
            raise CodeConflictError(code, original_error=e)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to insert link: {e}", exc_info=True)
            raise StorageError("Failed to create short URL", original_error=e)

        logger.info(f"Link created: code={code} protected={password_hash is not None}")
        return link

    async def find_by_code(self, code: str) -> Optional[Link]:
        """Return the link for *code*, or None."""
        try:
            async with self.database.session() as session:
                statement = select(Link).where(Link.code == code)
                result = await session.exec(statement)
                return result.one_or_none()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to look up link: {e}", exc_info=True)
            raise StorageError("Failed to look up short code", original_error=e)

    async def ping(self) -> bool:
        """Return True if the database answers, False otherwise."""
        try:
            return await self.database.ping()
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database ping failed: {e}")
            return False
