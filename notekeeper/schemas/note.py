"""
Notekeeper Backend: Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the API contract.
How:   FastAPI validates request bodies and query parameters against these
       models and serializes responses through them.

Every response is one of three envelopes:
    success: {"status": "success", "data": ...}  (+ "results" for lists)
    fail:    {"status": "fail", "message": ...}
    error:   {"status": "error", "message": ...}
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Note Representation
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """A stored note, exactly as read back from the `notes` table."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str = Field(description="Note title, unique across all notes")
    content: str = Field(description="Note body")
    category: Optional[str] = Field(default=None, description="Free-form category")
    published: Optional[bool] = Field(default=None, description="Published flag (null if not set)")
    created_at: Optional[datetime] = Field(default=None, description="Creation time")
    updated_at: Optional[datetime] = Field(default=None, description="Last edit time")

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateNoteSchema(BaseModel):
    """Body of POST /notes. A missing category is stored as an empty string."""
    title: str
    content: str
    category: Optional[str] = None


class EditNoteSchema(BaseModel):
    """
    Body of PATCH /notes/{id}.

    The edit is a full overwrite: an omitted category becomes "" and an
    omitted published flag becomes null. Nothing is merged with the stored row.
    """
    title: str
    content: str
    category: Optional[str] = None
    published: Optional[bool] = None


class FilterOptions(BaseModel):
    """
    Pagination query parameters for GET /notes.

    page:  1-based page number (default 1)
    limit: page size (default 10)

    Neither value is range-checked; they are handed to the database as-is.
    """
    page: int = Field(default=1, description="1-based page number")
    limit: int = Field(default=10, description="Notes per page")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


# ══════════════════════════════════════════════════════════════════════════
# Envelopes
# ══════════════════════════════════════════════════════════════════════════


class NoteData(BaseModel):
    note: NoteResponse


class NoteEnvelope(BaseModel):
    """Success envelope for get, create and edit."""
    status: Literal["success"] = "success"
    data: NoteData


class NoteListEnvelope(BaseModel):
    """Success envelope for list; `results` always equals len(data)."""
    status: Literal["success"] = "success"
    results: int
    data: List[NoteResponse]


class FailEnvelope(BaseModel):
    """Client-side failure: conflict, not-found on delete, malformed input."""
    status: Literal["fail"] = "fail"
    message: str


class ErrorEnvelope(BaseModel):
    """Server-side failure."""
    status: Literal["error"] = "error"
    message: str


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for monitoring and load balancer probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
