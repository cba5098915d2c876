"""
Notekeeper Backend: Note Service Unit Tests
============================================

What:  Tests for NoteService error mapping and statement results.
How:   Uses mock DB sessions (no real DB).

What we test:
    ✅ Each operation returns the row the statement produced
    ✅ Title conflicts become DuplicateTitleError
    ✅ Other create failures carry the driver's message
    ✅ Get/edit collapse every failure (including no row) into DatabaseError
    ✅ Delete reports NotFoundError for zero rows and for failed statements
    ✅ Failed writes roll the session back
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError

from notekeeper.exceptions import DatabaseError, DuplicateTitleError, NotFoundError
from notekeeper.schemas.note import CreateNoteSchema, EditNoteSchema, FilterOptions
from notekeeper.services.note_service import NoteService


class FakePgError(Exception):
    """Stands in for the asyncpg error SQLAlchemy wraps."""

    def __init__(self, message, sqlstate):
        super().__init__(message)
        self.sqlstate = sqlstate


def result_returning(row):
    result = MagicMock()
    result.scalar_one.return_value = row
    return result


class TestNoteServiceList:
    """Tests for list_notes pagination."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_list_notes_returns_rows_in_order(self, mock_db_session, make_note_row):
        rows = [make_note_row(title=f"note {i}") for i in range(3)]
        result = MagicMock()
        result.scalars.return_value.all.return_value = rows
        mock_db_session.execute.return_value = result

        notes = await self.service.list_notes(mock_db_session, FilterOptions())

        assert [n.title for n in notes] == ["note 0", "note 1", "note 2"]
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, mock_db_session):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = result

        assert await self.service.list_notes(mock_db_session, FilterOptions()) == []

    @pytest.mark.asyncio
    async def test_list_notes_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_notes(mock_db_session, FilterOptions(page=1, limit=10))

        assert exc_info.value.message == "Failed to fetch notes."

    def test_offset_computation(self):
        assert FilterOptions().offset == 0
        assert FilterOptions(page=2, limit=5).offset == 5
        assert FilterOptions(page=3, limit=10).offset == 20


class TestNoteServiceGet:
    """Tests for get_note retrieval."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_get_note_found(self, mock_db_session, make_note_row):
        row = make_note_row(category="work", published=True)
        mock_db_session.execute.return_value = result_returning(row)

        note = await self.service.get_note(mock_db_session, row.id)

        assert note.id == row.id
        assert note.category == "work"
        assert note.published is True

    @pytest.mark.asyncio
    async def test_get_note_missing_is_a_database_error(self, mock_db_session):
        result = MagicMock()
        result.scalar_one.side_effect = NoResultFound("No row was found")
        mock_db_session.execute.return_value = result

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.get_note(mock_db_session, uuid4())

        assert exc_info.value.message == "Failed to fetch note."


class TestNoteServiceCreate:
    """Tests for create_note."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_note_success_commits(self, mock_db_session, make_note_row):
        row = make_note_row(title="A", content="x")
        mock_db_session.execute.return_value = result_returning(row)

        note = await self.service.create_note(
            mock_db_session, CreateNoteSchema(title="A", content="x")
        )

        assert note.title == "A"
        assert note.category == ""
        mock_db_session.commit.assert_awaited_once()
        mock_db_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_note_defaults_category_in_statement(self, mock_db_session, make_note_row):
        mock_db_session.execute.return_value = result_returning(make_note_row())

        await self.service.create_note(
            mock_db_session, CreateNoteSchema(title="A", content="x")
        )

        stmt = mock_db_session.execute.await_args.args[0]
        params = stmt.compile(dialect=postgresql.dialect()).params
        assert params["category"] == ""
        assert params["title"] == "A"

    @pytest.mark.asyncio
    async def test_create_note_uses_one_timestamp(self, mock_db_session, make_note_row):
        mock_db_session.execute.return_value = result_returning(make_note_row())

        await self.service.create_note(
            mock_db_session, CreateNoteSchema(title="A", content="x")
        )

        stmt = mock_db_session.execute.await_args.args[0]
        params = stmt.compile(dialect=postgresql.dialect()).params
        assert params["created_at"] is not None
        assert params["created_at"] == params["updated_at"]

    @pytest.mark.asyncio
    async def test_create_note_duplicate_title(self, mock_db_session):
        mock_db_session.execute.side_effect = IntegrityError(
            "INSERT INTO notes ...",
            {},
            FakePgError('duplicate key value violates unique constraint "notes_title_key"', "23505"),
        )

        with pytest.raises(DuplicateTitleError) as exc_info:
            await self.service.create_note(
                mock_db_session, CreateNoteSchema(title="A", content="x")
            )

        assert exc_info.value.message == "Note with that title already exists"
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_note_other_integrity_error_exposes_driver_text(self, mock_db_session):
        mock_db_session.execute.side_effect = IntegrityError(
            "INSERT INTO notes ...",
            {},
            FakePgError('null value in column "content" violates not-null constraint', "23502"),
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_note(
                mock_db_session, CreateNoteSchema(title="A", content="x")
            )

        assert exc_info.value.message == 'null value in column "content" violates not-null constraint'

    @pytest.mark.asyncio
    async def test_create_note_connection_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "INSERT", {}, Exception("connection refused")
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_note(
                mock_db_session, CreateNoteSchema(title="A", content="x")
            )

        assert exc_info.value.message == "connection refused"
        mock_db_session.rollback.assert_awaited_once()


class TestNoteServiceEdit:
    """Tests for edit_note full-overwrite semantics."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_edit_note_success(self, mock_db_session, make_note_row):
        row = make_note_row(title="B", content="y", category="", published=False)
        mock_db_session.execute.return_value = result_returning(row)

        note = await self.service.edit_note(
            mock_db_session, row.id, EditNoteSchema(title="B", content="y", published=False)
        )

        assert note.title == "B"
        assert note.published is False
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_edit_note_writes_every_column(self, mock_db_session, make_note_row):
        mock_db_session.execute.return_value = result_returning(make_note_row())

        await self.service.edit_note(
            mock_db_session, uuid4(), EditNoteSchema(title="B", content="y")
        )

        stmt = mock_db_session.execute.await_args.args[0]
        params = stmt.compile(dialect=postgresql.dialect()).params
        assert params["category"] == ""
        assert params["published"] is None
        assert params["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_edit_note_missing_row_is_a_database_error(self, mock_db_session):
        result = MagicMock()
        result.scalar_one.side_effect = NoResultFound("No row was found")
        mock_db_session.execute.return_value = result

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.edit_note(
                mock_db_session, uuid4(), EditNoteSchema(title="B", content="y")
            )

        assert exc_info.value.message == "Failed to update note."
        mock_db_session.rollback.assert_awaited_once()


class TestNoteServiceDelete:
    """Tests for delete_note row-count handling."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_delete_note_success(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=1)

        assert await self.service.delete_note(mock_db_session, uuid4()) is None
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_note_zero_rows(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=0)
        note_id = uuid4()

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.delete_note(mock_db_session, note_id)

        assert exc_info.value.message == f"Note with ID: {note_id} not found"

    @pytest.mark.asyncio
    async def test_delete_note_failure_counts_as_zero_rows(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("DELETE", {}, Exception("down"))
        )

        with pytest.raises(NotFoundError):
            await self.service.delete_note(mock_db_session, uuid4())

        mock_db_session.rollback.assert_awaited_once()
