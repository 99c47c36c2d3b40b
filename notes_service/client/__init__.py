"""
Notes Service - Client Package
===============================

    - api.py:   NotesClient (httpx) and the NotesApiError family
    - view.py:  NotesView, the list/create/edit state machine
"""

from notes_service.client.api import (
    NOTE_CATEGORIES,
    NOTE_PRIORITIES,
    InvalidResponseError,
    NetworkError,
    NotesApiError,
    NotesClient,
)
from notes_service.client.view import NotesView, ViewMode

__all__ = [
    "NOTE_CATEGORIES",
    "NOTE_PRIORITIES",
    "InvalidResponseError",
    "NetworkError",
    "NotesApiError",
    "NotesClient",
    "NotesView",
    "ViewMode",
]
