"""
Notes Service - Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract between clients and backend.
How:   Routes return the envelope models below; the client parses `data`
       back into NoteResponse. OpenAPI docs are generated from them.

Envelope format (every response):
    success:  {"success": true,  "data": ..., "count"?: int, "message"?: str}
    failure:  {"success": false, "message": str, "errors"?: [str], "error"?: str}

Request bodies are NOT declared as Pydantic models: the validation rules must
see the raw JSON (numbers, nulls, missing keys) and report all violations in
one fixed order, which services/validation.py does by hand.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Domain values
# ══════════════════════════════════════════════════════════════════════════


class NoteFields(BaseModel):
    """
    The four mutable fields of a note, already validated and trimmed.

    Produced by services.validation.clean_note(); consumed by
    NoteStore.create() and NoteStore.update(). The store accepts any values
    here and lets the database constraints decide (see NoteStore).
    """
    title: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    description: Optional[str] = None


class NoteResponse(BaseModel):
    """
    What:  A stored note, as returned by the store and serialized by the API.
    How:   Frozen: callers receive immutable values, only NoteStore writes.
    """
    id: int = Field(description="Store-assigned identifier")
    title: str
    category: str = Field(description="work, personal or ideas")
    priority: str = Field(description="high, medium or low")
    description: str
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last update time (UTC ISO 8601)")

    model_config = {"from_attributes": True, "frozen": True}


# ══════════════════════════════════════════════════════════════════════════
# Response envelopes
# ══════════════════════════════════════════════════════════════════════════


class NoteEnvelope(BaseModel):
    """Single-note response (GET by id, POST, PUT, DELETE)."""
    success: bool = True
    message: Optional[str] = Field(default=None, description="Set on mutating endpoints")
    data: NoteResponse


class NoteListEnvelope(BaseModel):
    """List response: every note, newest first, with `count` = len(data)."""
    success: bool = True
    data: List[NoteResponse]
    count: int


class ErrorResponse(BaseModel):
    """
    Standard failure envelope.

    Fields:
        message: Human-readable description ("Note not found", "Validation failed", ...)
        errors:  Violated field rules, only for validation failures
        error:   Original error text on 500s, only when settings.debug is on
    """
    success: bool = False
    message: str
    errors: Optional[List[str]] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """Liveness payload for GET /health."""
    status: str = Field(description="OK, or ERROR when the database is unreachable")
    message: str


class ApiIndexResponse(BaseModel):
    """Informational route listing for GET /."""
    message: str
    version: str
    endpoints: Dict[str, Any]
