"""
Notekeeper Backend: Note SQLAlchemy Model
==========================================

What:  ORM model representing the `notes` table.
How:   Inherits from SQLAlchemy's DeclarativeBase. The column types are the
       portable SQLAlchemy ones so the same mapping runs on PostgreSQL
       (asyncpg) in production and SQLite (aiosqlite) in tests.
Who:   Used by NoteService to build its statements.

Table Design:
    - id: UUID primary key, generated on insert, never updated
    - title: UNIQUE, the storage layer is the only enforcer of uniqueness
    - category: nullable, but every write path stores "" when absent
    - published: nullable tri-state (true / false / not set)
    - created_at / updated_at: one shared timestamp on insert (the service
      passes utcnow(); rows written elsewhere get the server default);
      updated_at refreshed by edit
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A titled piece of content with an optional category and published flag.

    Query Patterns:
        - List page:  SELECT ... ORDER BY id LIMIT :limit OFFSET :offset
        - Get one:    SELECT ... WHERE id = :id
        - Create:     INSERT ... RETURNING *
        - Edit:       UPDATE ... WHERE id = :id RETURNING *
        - Delete:     DELETE ... WHERE id = :id
    """

    __tablename__ = "notes"

    # ── Primary Key ───────────────────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Content ───────────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    published: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        server_default=func.now(),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
