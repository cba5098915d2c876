"""
Notekeeper Backend: Notes Route Handlers
=========================================

What:  The five CRUD handlers for notes.
How:   Extracts path/query/body input, delegates to NoteService, wraps the
       result in the success envelope. Failures are raised by the service as
       domain exceptions and rendered by the global handlers in main.py.
Who:   Mounted under the configured API prefix (default /api).

Route Table:
    GET    /notes          list (page, limit)     → 200
    POST   /notes          create                 → 200
    GET    /notes/{id}     get                    → 200
    PATCH  /notes/{id}     edit (full overwrite)  → 200
    DELETE /notes/{id}     delete                 → 204
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.database import get_db_session
from notekeeper.schemas.note import (
    CreateNoteSchema,
    EditNoteSchema,
    ErrorEnvelope,
    FailEnvelope,
    FilterOptions,
    NoteData,
    NoteEnvelope,
    NoteListEnvelope,
)
from notekeeper.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get(
    "",
    response_model=NoteListEnvelope,
    responses={
        400: {"description": "Malformed query parameters", "model": FailEnvelope},
        500: {"description": "Server error", "model": ErrorEnvelope},
    },
    summary="List notes with offset pagination",
)
async def note_list_handler(
    page: int = Query(default=1, description="1-based page number"),
    limit: int = Query(default=10, description="Notes per page"),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListEnvelope:
    """
    Return one page of notes ordered by id.

    Example:
        GET /api/notes?page=2&limit=5  → notes 6-10
    """
    notes = await note_service.list_notes(db, FilterOptions(page=page, limit=limit))
    return NoteListEnvelope(results=len(notes), data=notes)


@router.post(
    "",
    response_model=NoteEnvelope,
    responses={
        400: {"description": "Duplicate title or malformed body", "model": FailEnvelope},
        500: {"description": "Server error", "model": ErrorEnvelope},
    },
    summary="Create a note",
)
async def create_note_handler(
    body: CreateNoteSchema,
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    note = await note_service.create_note(db, body)
    return NoteEnvelope(data=NoteData(note=note))


@router.get(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses={
        400: {"description": "Malformed note id", "model": FailEnvelope},
        500: {"description": "Note missing or server error", "model": ErrorEnvelope},
    },
    summary="Get a single note by ID",
)
async def get_note_handler(
    note_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    """
    Fetch one note.

    A note that does not exist is answered with 500, the same as any other
    storage failure on this route.
    """
    note = await note_service.get_note(db, note_id)
    return NoteEnvelope(data=NoteData(note=note))


@router.patch(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses={
        400: {"description": "Malformed note id or body", "model": FailEnvelope},
        500: {"description": "Note missing or server error", "model": ErrorEnvelope},
    },
    summary="Overwrite a note",
)
async def edit_note_handler(
    note_id: UUID,
    body: EditNoteSchema,
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    """
    Replace title, content, category and published, and bump updated_at.

    Fields left out of the body are cleared, not preserved.
    """
    note = await note_service.edit_note(db, note_id, body)
    return NoteEnvelope(data=NoteData(note=note))


@router.delete(
    "/{note_id}",
    status_code=204,
    response_class=Response,
    responses={
        404: {"description": "Nothing deleted", "model": FailEnvelope},
    },
    summary="Delete a note",
)
async def delete_note_handler(
    note_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db, note_id)
    return Response(status_code=204)
