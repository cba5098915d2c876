"""
Notekeeper Backend: Application Package Initializer
====================================================

What: Marks the `notekeeper` directory as a Python package.
Who:  Imported by uvicorn (`notekeeper.main:app`), pytest, and the
      `python -m notekeeper` entry point.

Architecture Note:
    The backend is a thin layered CRUD service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, envelopes
    ├─────────────────────────────────────┤
    │      Services (Note Operations)     │  ← one SQL statement each
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Shared async engine + pool
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
