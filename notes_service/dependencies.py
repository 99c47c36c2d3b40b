"""
Notes Service - FastAPI Dependencies
=====================================

What:  Resolve the per-application NoteStore and Database for route handlers.
How:   create_app() builds both and puts them on `app.state`; these functions
       read them back from the request, so routes never import a global store.
"""

from fastapi import Request

from notes_service.database import Database
from notes_service.services.note_store import NoteStore


def get_note_store(request: Request) -> NoteStore:
    return request.app.state.store


def get_database(request: Request) -> Database:
    return request.app.state.database
