"""
Notekeeper Backend: Note Service (Repository Operations)
=========================================================

What:  The five note operations: list, get, create, edit, delete.
How:   Each operation issues exactly one parameterized statement through the
       request's AsyncSession and converts the outcome into either a response
       schema or a domain exception.
Who:   Called by the route handlers in routes/notes.py.

Error Mapping:
    list    any failure                 → DatabaseError("Failed to fetch notes.")
    get     any failure, incl. no row   → DatabaseError("Failed to fetch note.")
    create  unique violation on title   → DuplicateTitleError
            any other failure           → DatabaseError(<raw driver text>)
    edit    any failure, incl. no row   → DatabaseError("Failed to update note.")
    delete  zero rows or failure        → NotFoundError

Design Decision:
    NoteService is stateless. It receives the session for each call, so the
    only state shared between requests is the engine's connection pool.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.database import driver_message, is_unique_violation
from notekeeper.exceptions import DatabaseError, DuplicateTitleError, NotFoundError
from notekeeper.models.note import Note, utcnow
from notekeeper.schemas.note import (
    CreateNoteSchema,
    EditNoteSchema,
    FilterOptions,
    NoteResponse,
)

logger = logging.getLogger(__name__)


class NoteService:
    """
    Repository operations over the `notes` table.

    Writes commit their statement before returning. When a statement fails,
    the session is rolled back first so the request's connection goes back to
    the pool clean.
    """

    async def list_notes(self, db: AsyncSession, options: FilterOptions) -> List[NoteResponse]:
        """
        Return one page of notes ordered by id.

        Query plan:
            SELECT * FROM notes ORDER BY id LIMIT :limit OFFSET :offset

        Args:
            db: Async database session
            options: page/limit; offset is (page - 1) * limit

        Raises:
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Note)
                .order_by(Note.id)
                .limit(options.limit)
                .offset(options.offset)
            )
            notes = result.scalars().all()
            return [NoteResponse.model_validate(note) for note in notes]

        except Exception as e:
            logger.error(
                "Database error listing notes (page=%s, limit=%s): %s",
                options.page,
                options.limit,
                str(e),
            )
            raise DatabaseError(
                message="Failed to fetch notes.",
                context={"error_type": type(e).__name__},
            )

    async def get_note(self, db: AsyncSession, note_id: UUID) -> NoteResponse:
        """
        Fetch exactly one note by id.

        A missing row surfaces from `scalar_one()` as NoResultFound and is
        reported the same way as any other query failure.

        Raises:
            DatabaseError: Note missing or query failed (→ 500)
        """
        try:
            result = await db.execute(select(Note).where(Note.id == note_id))
            note = result.scalar_one()
            return NoteResponse.model_validate(note)

        except Exception as e:
            logger.warning("Could not fetch note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Failed to fetch note.",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

    async def create_note(self, db: AsyncSession, body: CreateNoteSchema) -> NoteResponse:
        """
        Insert a note and return the stored row.

        Statement:
            INSERT INTO notes (title, content, category, created_at, updated_at)
            VALUES (...) RETURNING *

        The id comes from the column default. created_at and updated_at share
        one timestamp, so a fresh note reads as never edited.

        Raises:
            DuplicateTitleError: The title is already taken (→ 400)
            DatabaseError: Any other failure, carrying the driver's message (→ 500)
        """
        now = utcnow()
        try:
            result = await db.execute(
                insert(Note)
                .values(
                    title=body.title,
                    content=body.content,
                    category=body.category or "",
                    created_at=now,
                    updated_at=now,
                )
                .returning(Note)
            )
            note = NoteResponse.model_validate(result.scalar_one())
            await db.commit()

        except Exception as e:
            await db.rollback()
            if is_unique_violation(e):
                logger.info("Rejected duplicate note title %r", body.title)
                raise DuplicateTitleError(title=body.title)
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message=driver_message(e),
                context={"error_type": type(e).__name__},
            )

        logger.info("Note created: %s", note.id)
        return note

    async def edit_note(
        self, db: AsyncSession, note_id: UUID, body: EditNoteSchema
    ) -> NoteResponse:
        """
        Overwrite a note and return it as read back from the UPDATE.

        Statement:
            UPDATE notes SET title, content, category, published, updated_at
            WHERE id = :id RETURNING *

        Every editable column is written: an absent category becomes "" and an
        absent published flag becomes NULL.

        Raises:
            DatabaseError: No matching row or the update failed (→ 500)
        """
        try:
            result = await db.execute(
                update(Note)
                .where(Note.id == note_id)
                .values(
                    title=body.title,
                    content=body.content,
                    category=body.category or "",
                    published=body.published,
                    updated_at=utcnow(),
                )
                .returning(Note)
                .execution_options(synchronize_session=False)
            )
            note = NoteResponse.model_validate(result.scalar_one())
            await db.commit()

        except Exception as e:
            await db.rollback()
            logger.warning("Could not update note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Failed to update note.",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

        logger.info("Note updated: %s", note_id)
        return note

    async def delete_note(self, db: AsyncSession, note_id: UUID) -> None:
        """
        Physically delete a note.

        A failed statement counts as zero affected rows, so both "no such
        note" and "the delete failed" end up as NotFoundError.

        Raises:
            NotFoundError: Nothing was deleted (→ 404)
        """
        try:
            result = await db.execute(
                delete(Note)
                .where(Note.id == note_id)
                .execution_options(synchronize_session=False)
            )
            rows_deleted = result.rowcount
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.warning("Delete of note %s failed: %s", note_id, str(e))
            rows_deleted = 0

        if not rows_deleted:
            raise NotFoundError(resource="Note", resource_id=str(note_id))

        logger.info("Note deleted: %s", note_id)


note_service = NoteService()
