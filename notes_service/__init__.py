"""
Notes Service - Application Package
====================================

What: REST CRUD service for notes, plus the HTTP client and view state that drive it.
Who:  Imported by uvicorn (``notes_service.main:create_app`` with ``--factory``), the ``notes`` CLI, Alembic and pytest.

Architecture Note:

    ┌─────────────────────────────────────┐
    │     Client (api + view state)       │  ← HTTP binding, list/create/edit modes
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← status codes, JSON envelopes
    ├─────────────────────────────────────┤
    │   Services (validation + store)     │  ← field rules, persistence
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async SQLAlchemy over SQLite
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
