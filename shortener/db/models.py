"""
Database Models for URL Shortener Service

This module defines the SQLModel database schema for:
- Link: Stores the mapping between short codes and target URLs,
  with an optional bcrypt password hash

Design Decisions:
- Unique index on code: the storage layer is the final arbiter of
  uniqueness, whatever the code generator produced
- Rows are written once and never updated
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlmodel import Column, Field, SQLModel

from shortener.core.setting import MAX_CODE_LENGTH


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Link(SQLModel, table=True):
    """
    Short code to target URL mapping.

    Fields:
    - id: Auto-incrementing primary key
    - code: Unique short code (public lookup key)
    - url: The long URL to redirect to
    - password_hash: bcrypt digest, NULL for unprotected links
    - created_at: Timestamp when the link was created
    """
    __tablename__ = "links"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(
        sa_column=Column(String(MAX_CODE_LENGTH), nullable=False, unique=True, index=True),
        max_length=MAX_CODE_LENGTH
    )
    url: str = Field(sa_column=Column(Text, nullable=False))
    password_hash: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True)
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    @property
    def is_protected(self) -> bool:
        return self.password_hash is not None
