"""
Notes Service - Notes View State
=================================

What:  The list/create/edit state of a notes screen, independent of any toolkit.
How:   Fetch-then-render: every mutation goes to the API first and the list is
       re-fetched afterwards; nothing is updated optimistically.
Who:   The `notes` CLI renders from it; a GUI or web frontend could do the same.

Modes (no history stack):

    LIST ──open_create()──▶ CREATE ──submit() ok / cancel()──▶ LIST
      │                                                          ▲
      └───open_edit(id)───▶ EDIT ───submit() ok / cancel()───────┘

A submit that fails validation (client-side or server-side) stays in the
form with `form_errors` set.
"""

import enum
import logging
from typing import Any, Dict, List, Mapping, Optional

from notes_service.client.api import NoteId, NotesApiError, NotesClient
from notes_service.schemas.note import NoteResponse
from notes_service.services.validation import validate_note

logger = logging.getLogger(__name__)


class ViewMode(str, enum.Enum):
    LIST = "list"
    CREATE = "create"
    EDIT = "edit"


class NotesView:
    """
    Attributes:
        mode:         current ViewMode
        notes:        last successfully fetched list (newest first)
        editing:      note being edited in EDIT mode, else None
        error:        message of the last failed API call, cleared on success
        failure:      the NotesApiError behind `error` (its status tells network
                      failures, 4xx and 5xx apart)
        form_errors:  field errors of the last rejected submit
    """

    def __init__(self, client: NotesClient):
        self.client = client
        self.mode = ViewMode.LIST
        self.notes: List[NoteResponse] = []
        self.editing: Optional[NoteResponse] = None
        self.error: Optional[str] = None
        self.failure: Optional[NotesApiError] = None
        self.form_errors: List[str] = []

    # ── List ──────────────────────────────────────────────────────────────

    async def refresh(self) -> None:
        """Re-fetch the list; on failure keep the old list and record the error."""
        try:
            self.notes = await self.client.list_notes()
            self.error = self.failure = None
        except NotesApiError as e:
            logger.warning("Could not load notes: %s", e.message)
            self._fail(e)

    async def delete(self, note_id: NoteId) -> bool:
        try:
            await self.client.delete_note(note_id)
        except NotesApiError as e:
            self._fail(e)
            return False
        await self.refresh()
        return True

    # ── Form ──────────────────────────────────────────────────────────────

    def open_create(self) -> None:
        self.mode = ViewMode.CREATE
        self.editing = None
        self.form_errors = []

    async def open_edit(self, note_id: NoteId) -> bool:
        """Load the note and switch to EDIT; stays in the current mode on failure."""
        try:
            note = await self.client.get_note(note_id)
        except NotesApiError as e:
            self._fail(e)
            return False
        self.mode = ViewMode.EDIT
        self.editing = note
        self.form_errors = []
        self.error = self.failure = None
        return True

    def form_values(self) -> Dict[str, str]:
        """Initial form contents: the edited note's fields, or blanks."""
        if self.editing is None:
            return {"title": "", "category": "", "priority": "", "description": ""}
        return {
            "title": self.editing.title,
            "category": self.editing.category,
            "priority": self.editing.priority,
            "description": self.editing.description,
        }

    async def submit(self, fields: Mapping[str, Any]) -> bool:
        """
        Save the form: create in CREATE mode, update in EDIT mode.

        Returns True when saved (back in LIST, list refreshed), False when
        the form stays open with `form_errors` or `error` set. A rejected
        submit (client- or server-side) never leaves the form; only cancel()
        returns to LIST without saving.
        """
        if self.mode is ViewMode.LIST:
            raise RuntimeError("submit() called while no form is open")

        self.form_errors = validate_note(fields)
        if self.form_errors:
            return False

        try:
            if self.mode is ViewMode.EDIT and self.editing is not None:
                await self.client.update_note(self.editing.id, fields)
            else:
                await self.client.create_note(fields)
        except NotesApiError as e:
            self._fail(e)
            self.form_errors = e.errors
            return False

        await self._back_to_list()
        return True

    async def cancel(self) -> None:
        await self._back_to_list()

    async def _back_to_list(self) -> None:
        self.mode = ViewMode.LIST
        self.editing = None
        self.form_errors = []
        await self.refresh()

    def _fail(self, e: NotesApiError) -> None:
        self.error = e.message
        self.failure = e
