"""
Notes Service - Note Validation Rules
======================================

What:  Pure functions checking a candidate note payload against the field rules.
How:   validate_note() runs every rule in a fixed order and collects one message
       per violated rule; clean_note() turns an accepted payload into trimmed
       NoteFields for the store.
Who:   The notes routes (server side) and NotesView (client side, before submit).

Rules, in check order:
    1. title        present, a string, not blank     → "Title is required"
    2. category     exactly work | personal | ideas  → "Category must be one of: work, personal, ideas"
    3. priority     exactly high | medium | low      → "Priority must be one of: high, medium, low"
    4. description  present, a string, not blank     → "Description is required"

Membership is exact: "WORK", " work", 1 and {} are all rejected.
"""

from typing import Any, List, Mapping

from notes_service.models.note import CATEGORIES, PRIORITIES
from notes_service.schemas.note import NoteFields

TITLE_REQUIRED = "Title is required"
CATEGORY_INVALID = f"Category must be one of: {', '.join(CATEGORIES)}"
PRIORITY_INVALID = f"Priority must be one of: {', '.join(PRIORITIES)}"
DESCRIPTION_REQUIRED = "Description is required"


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


def _in_closed_set(value: Any, allowed: tuple) -> bool:
    return isinstance(value, str) and value in allowed


def validate_note(payload: Any) -> List[str]:
    """
    Return the list of violated-rule messages for `payload`; empty means valid.

    Anything that is not a mapping (a JSON list, a string, None) is checked
    as an empty payload, so it fails all four rules.
    """
    if not isinstance(payload, Mapping):
        payload = {}

    errors: List[str] = []

    if _is_blank(payload.get("title")):
        errors.append(TITLE_REQUIRED)

    if not _in_closed_set(payload.get("category"), CATEGORIES):
        errors.append(CATEGORY_INVALID)

    if not _in_closed_set(payload.get("priority"), PRIORITIES):
        errors.append(PRIORITY_INVALID)

    if _is_blank(payload.get("description")):
        errors.append(DESCRIPTION_REQUIRED)

    return errors


def clean_note(payload: Mapping[str, Any]) -> NoteFields:
    """
    Build the store input from a payload that passed validate_note().

    Title and description are stored trimmed; category and priority are
    stored as given (membership is exact, so there is nothing to normalize).
    """
    return NoteFields(
        title=payload["title"].strip(),
        category=payload["category"],
        priority=payload["priority"],
        description=payload["description"].strip(),
    )
