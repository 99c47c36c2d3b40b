"""
Notes Service - HTTP Client
============================

What:  Async client for the notes API: one method per route plus a health probe.
How:   httpx.AsyncClient; every call unwraps the `{success, data}` envelope and
       returns `data`. Failures raise NotesApiError or one of its subclasses.
Who:   NotesView and the `notes` CLI.

Failure taxonomy:
    NotesApiError         non-2xx answer; `status` and parsed `response` body
    ├── InvalidResponseError  the server answered, but not with JSON of the expected shape
    └── NetworkError          no answer at all (refused, DNS, timeout); status 0
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from notes_service.config import settings
from notes_service.schemas.note import NoteResponse

logger = logging.getLogger(__name__)

# (value, label) pairs for form dropdowns
NOTE_CATEGORIES: List[Tuple[str, str]] = [
    ("work", "Work"),
    ("personal", "Personal"),
    ("ideas", "Ideas"),
]
NOTE_PRIORITIES: List[Tuple[str, str]] = [
    ("high", "High"),
    ("medium", "Medium"),
    ("low", "Low"),
]

NoteId = Union[int, str]
T = TypeVar("T")

UNEXPECTED_RESPONSE = "Unexpected response format from server"


class NotesApiError(Exception):
    """
    A request to the notes API failed.

    Attributes:
        message:   human-readable reason (the server's `message` when it sent one)
        status:    HTTP status code, 0 when no response was received
        response:  parsed JSON body of the failed response, if any
    """

    def __init__(self, message: str, status: int, response: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.response = response

    @property
    def errors(self) -> List[str]:
        """Field errors from a 400 validation failure; empty otherwise."""
        if isinstance(self.response, dict):
            return list(self.response.get("errors") or [])
        return []


class InvalidResponseError(NotesApiError):
    """The server answered, but the body is not JSON or not the expected envelope."""


class NetworkError(NotesApiError):
    """The request never got an HTTP response."""


class NotesClient:
    """
    Async binding for the notes API.

    Usage:
        async with NotesClient("http://localhost:3001") as client:
            note = await client.create_note({"title": "...", ...})

    Args:
        base_url:   service root; defaults to settings.api_base_url
        api_prefix: mount point of the notes router; defaults to settings.api_prefix
        timeout:    per-request timeout in seconds
        transport:  optional httpx transport (tests use httpx.ASGITransport)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_prefix: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        prefix = settings.api_prefix if api_prefix is None else api_prefix
        self.notes_path = f"{prefix}/notes"
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.client_timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "NotesClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Transport ─────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, json: Any = None) -> Tuple[int, Dict[str, Any]]:
        """
        Send one request and return (status, decoded JSON object).

        Raises:
            NetworkError:          transport failure, no HTTP response
            InvalidResponseError:  body is not JSON, or a 2xx body is not an object
            NotesApiError:         non-2xx status
        """
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(
                f"Network error: Unable to connect to the notes service at {self.base_url}.",
                0,
            ) from e

        try:
            data = response.json()
        except ValueError:
            raise InvalidResponseError("Invalid JSON response from server", response.status_code)

        if not response.is_success:
            message = None
            if isinstance(data, dict):
                message = data.get("message")
            raise NotesApiError(
                message or f"HTTP {response.status_code} Error",
                response.status_code,
                data if isinstance(data, dict) else None,
            )
        if not isinstance(data, dict):
            raise InvalidResponseError(UNEXPECTED_RESPONSE, response.status_code)
        return response.status_code, data

    @staticmethod
    def _unwrap(status: int, body: Dict[str, Any], parse: Callable[[Any], T]) -> T:
        """Apply `parse` to the envelope's `data`; a wrong shape is InvalidResponseError."""
        try:
            return parse(body["data"])
        except (KeyError, TypeError, PydanticValidationError) as e:
            logger.warning("Unexpected response body (HTTP %d): %s", status, e)
            raise InvalidResponseError(UNEXPECTED_RESPONSE, status, body) from e

    def _note_path(self, note_id: NoteId) -> str:
        # Escaped as one segment: "1/../x" must not reach another route
        return f"{self.notes_path}/{quote(str(note_id), safe='')}"

    async def _note(self, method: str, path: str, json: Any = None) -> NoteResponse:
        status, body = await self._request(method, path, json=json)
        return self._unwrap(status, body, NoteResponse.model_validate)

    # ── Notes ─────────────────────────────────────────────────────────────

    async def list_notes(self) -> List[NoteResponse]:
        status, body = await self._request("GET", self.notes_path)
        return self._unwrap(status, body, _parse_note_list)

    async def get_note(self, note_id: NoteId) -> NoteResponse:
        return await self._note("GET", self._note_path(note_id))

    async def create_note(self, fields: Mapping[str, Any]) -> NoteResponse:
        return await self._note("POST", self.notes_path, json=dict(fields))

    async def update_note(self, note_id: NoteId, fields: Mapping[str, Any]) -> NoteResponse:
        return await self._note("PUT", self._note_path(note_id), json=dict(fields))

    async def delete_note(self, note_id: NoteId) -> NoteResponse:
        """Returns the note as it was before deletion."""
        return await self._note("DELETE", self._note_path(note_id))

    async def check_health(self) -> bool:
        """True when /health answers status OK; never raises."""
        try:
            _, body = await self._request("GET", "/health")
        except NotesApiError:
            return False
        return body.get("status") == "OK"


def _parse_note_list(data: Any) -> List[NoteResponse]:
    if not isinstance(data, list):
        raise TypeError(f"expected a list of notes, got {type(data).__name__}")
    return [NoteResponse.model_validate(n) for n in data]
