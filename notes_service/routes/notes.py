"""
Notes Service - Notes Route Handlers
=====================================

What:  CRUD endpoints for notes under {api_prefix}/notes.
How:   Parse the id and body, run the validation rules, call the NoteStore,
       wrap the result in the success envelope. Failures are raised as
       application exceptions and rendered by the handlers in main.py.
Who:   Called by NotesClient, the CLI and the browser frontend.

Route Inventory:
    GET    /notes        list every note (newest first) with count
    GET    /notes/{id}   one note
    POST   /notes        create            → 201
    PUT    /notes/{id}   full replacement
    DELETE /notes/{id}   delete, returning the pre-delete snapshot

Check order for /{id} routes: id format (400) → body rules (400) → store (404/500).
"""

import re
from typing import Any

from fastapi import APIRouter, Depends, Request

from notes_service.dependencies import get_note_store
from notes_service.exceptions import BadRequestError, NotFoundError, ValidationError
from notes_service.schemas.note import ErrorResponse, NoteEnvelope, NoteListEnvelope
from notes_service.services.note_store import NoteStore
from notes_service.services.validation import clean_note, validate_note

router = APIRouter(prefix="/notes", tags=["Notes"])

# Optionally negative decimal integer; "12abc", "1.5", "+3" and "" are rejected
_NOTE_ID_PATTERN = re.compile(r"-?[0-9]+")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1

_ERROR_RESPONSES = {
    400: {"description": "Invalid note ID or validation failure", "model": ErrorResponse},
    404: {"description": "Note not found", "model": ErrorResponse},
    500: {"description": "Store error", "model": ErrorResponse},
}


def parse_note_id(raw: str) -> int:
    """
    Convert a path segment to a note id.

    Raises:
        BadRequestError: not a base-10 integer, or outside SQLite's 64-bit range
    """
    if not _NOTE_ID_PATTERN.fullmatch(raw):
        raise BadRequestError(message="Invalid note ID", context={"note_id": raw})
    note_id = int(raw)
    if not _INT64_MIN <= note_id <= _INT64_MAX:
        raise BadRequestError(message="Invalid note ID", context={"note_id": raw})
    return note_id


async def read_note_payload(request: Request) -> Any:
    """
    Return the decoded JSON body, or {} when there is none to decode.

    Bodies sent with a non-JSON content type are ignored, which the
    validation rules then report as four missing fields.

    Raises:
        BadRequestError: declared as JSON but not parseable
    """
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type != "application/json" and not media_type.endswith("+json"):
        return {}

    body = await request.body()
    if not body.strip():
        return {}
    try:
        return await request.json()
    except ValueError:
        raise BadRequestError(message="Malformed JSON in request body")


def require_valid(payload: Any) -> None:
    errors = validate_note(payload)
    if errors:
        raise ValidationError(errors=errors)


@router.get(
    "",
    response_model=NoteListEnvelope,
    responses={500: _ERROR_RESPONSES[500]},
    summary="List all notes",
    description="Returns every note, most recently created first, with `count`.",
)
@router.get("/", response_model=NoteListEnvelope, include_in_schema=False)
async def list_notes(store: NoteStore = Depends(get_note_store)) -> NoteListEnvelope:
    notes = await store.list()
    return NoteListEnvelope(data=notes, count=len(notes))


@router.get(
    "/{note_id}",
    response_model=NoteEnvelope,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
    summary="Get a single note by ID",
)
async def get_note(note_id: str, store: NoteStore = Depends(get_note_store)) -> NoteEnvelope:
    nid = parse_note_id(note_id)
    note = await store.get_by_id(nid)
    if note is None:
        raise NotFoundError(resource="Note", resource_id=nid)
    return NoteEnvelope(data=note)


@router.post(
    "",
    status_code=201,
    response_model=NoteEnvelope,
    responses={400: _ERROR_RESPONSES[400], 500: _ERROR_RESPONSES[500]},
    summary="Create a note",
    description=(
        "Body: `{title, category, priority, description}`. All four are required; "
        "category is one of work/personal/ideas, priority one of high/medium/low. "
        "Title and description are stored trimmed."
    ),
)
@router.post("/", status_code=201, response_model=NoteEnvelope, include_in_schema=False)
async def create_note(request: Request, store: NoteStore = Depends(get_note_store)) -> NoteEnvelope:
    payload = await read_note_payload(request)
    require_valid(payload)

    note = await store.create(clean_note(payload))
    return NoteEnvelope(message="Note created successfully", data=note)


@router.put(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses=_ERROR_RESPONSES,
    summary="Replace a note's fields",
    description="Full replacement: all four fields are required, as for create.",
)
async def update_note(
    note_id: str,
    request: Request,
    store: NoteStore = Depends(get_note_store),
) -> NoteEnvelope:
    nid = parse_note_id(note_id)
    payload = await read_note_payload(request)
    require_valid(payload)

    note = await store.update(nid, clean_note(payload))
    if note is None:
        raise NotFoundError(resource="Note", resource_id=nid)
    return NoteEnvelope(message="Note updated successfully", data=note)


@router.delete(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses=_ERROR_RESPONSES,
    summary="Delete a note",
    description="Returns the note as it was just before deletion.",
)
async def delete_note(note_id: str, store: NoteStore = Depends(get_note_store)) -> NoteEnvelope:
    nid = parse_note_id(note_id)
    note = await store.delete(nid)
    if note is None:
        raise NotFoundError(resource="Note", resource_id=nid)
    return NoteEnvelope(message="Note deleted successfully", data=note)
