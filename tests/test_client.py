"""
Notes Service - HTTP Client Tests
==================================

What:  Tests for NotesClient and its error taxonomy.
How:   Against the real app over ASGITransport for the happy paths, and
       httpx.MockTransport for failures the app never produces.

What we test:
    ✅ each method unwraps `data` into NoteResponse
    ✅ non-2xx → NotesApiError carrying the server message, status and errors
    ✅ missing server message → "HTTP <status> Error"
    ✅ non-JSON body or a 2xx body without the envelope → InvalidResponseError
    ✅ note ids are escaped as a single path segment
    ✅ connection failure → NetworkError with status 0
    ✅ check_health never raises
"""

import httpx
import pytest

from notes_service.client.api import (
    NOTE_CATEGORIES,
    NOTE_PRIORITIES,
    InvalidResponseError,
    NetworkError,
    NotesApiError,
    NotesClient,
)
from notes_service.models.note import CATEGORIES, PRIORITIES
from notes_service.schemas.note import NoteResponse
from notes_service.services.validation import CATEGORY_INVALID


def mock_client(handler) -> NotesClient:
    return NotesClient(base_url="http://test", api_prefix="/api", transport=httpx.MockTransport(handler))


class TestDropdownValues:

    def test_values_match_closed_sets(self):
        assert tuple(value for value, _ in NOTE_CATEGORIES) == CATEGORIES
        assert tuple(value for value, _ in NOTE_PRIORITIES) == PRIORITIES

    def test_labels(self):
        assert dict(NOTE_CATEGORIES)["ideas"] == "Ideas"
        assert dict(NOTE_PRIORITIES)["medium"] == "Medium"


class TestClientAgainstApp:

    @pytest.mark.asyncio
    async def test_note_lifecycle(self, notes_client, sample_note_data):
        created = await notes_client.create_note(sample_note_data)
        assert isinstance(created, NoteResponse)
        assert created.title == sample_note_data["title"]

        assert await notes_client.get_note(created.id) == created
        assert await notes_client.list_notes() == [created]

        updated = await notes_client.update_note(created.id, {**sample_note_data, "priority": "low"})
        assert updated.priority == "low"
        assert updated.created_at == created.created_at

        deleted = await notes_client.delete_note(created.id)
        assert deleted == updated
        assert await notes_client.list_notes() == []

    @pytest.mark.asyncio
    async def test_not_found_raises_api_error(self, notes_client):
        with pytest.raises(NotesApiError) as exc_info:
            await notes_client.get_note(404)

        err = exc_info.value
        assert err.status == 404
        assert err.message == "Note not found"
        assert err.response == {"success": False, "message": "Note not found"}
        assert err.errors == []

    @pytest.mark.asyncio
    async def test_validation_errors_are_exposed(self, notes_client, sample_note_data):
        with pytest.raises(NotesApiError) as exc_info:
            await notes_client.create_note({**sample_note_data, "category": "misc"})

        assert exc_info.value.status == 400
        assert exc_info.value.message == "Validation failed"
        assert exc_info.value.errors == [CATEGORY_INVALID]

    @pytest.mark.asyncio
    async def test_string_ids_are_passed_through(self, notes_client):
        with pytest.raises(NotesApiError) as exc_info:
            await notes_client.delete_note("abc")
        assert exc_info.value.status == 400
        assert exc_info.value.message == "Invalid note ID"

    @pytest.mark.asyncio
    async def test_check_health(self, notes_client):
        assert await notes_client.check_health() is True


class TestClientFailures:

    @pytest.mark.asyncio
    async def test_connection_refused_is_network_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        async with mock_client(handler) as client:
            with pytest.raises(NetworkError) as exc_info:
                await client.list_notes()

        assert exc_info.value.status == 0
        assert exc_info.value.message.startswith("Network error")
        assert isinstance(exc_info.value, NotesApiError)

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with mock_client(handler) as client:
            with pytest.raises(NetworkError):
                await client.get_note(1)

    @pytest.mark.asyncio
    async def test_html_body_is_invalid_response(self):
        async with mock_client(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>")) as client:
            with pytest.raises(InvalidResponseError) as exc_info:
                await client.list_notes()

        assert exc_info.value.status == 502
        assert exc_info.value.message == "Invalid JSON response from server"

    @pytest.mark.asyncio
    async def test_error_without_message_uses_status(self):
        async with mock_client(lambda request: httpx.Response(500, json={})) as client:
            with pytest.raises(NotesApiError) as exc_info:
                await client.create_note({})

        assert exc_info.value.message == "HTTP 500 Error"
        assert exc_info.value.status == 500

    @pytest.mark.asyncio
    async def test_requests_hit_the_notes_path(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(200, json={"success": True, "data": [], "count": 0})

        async with mock_client(handler) as client:
            await client.list_notes()

        assert seen == [("GET", "/api/notes")]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(503, json={"status": "ERROR", "message": "Database unavailable"}),
            httpx.Response(200, text="not json"),
        ],
    )
    async def test_check_health_false(self, response):
        async with mock_client(lambda request: response) as client:
            assert await client.check_health() is False

    @pytest.mark.asyncio
    async def test_check_health_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        async with mock_client(handler) as client:
            assert await client.check_health() is False


class TestUnexpectedEnvelopes:
    """2xx answers that are JSON but not the `{success, data}` envelope."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"success": True}, [1], {"data": {"id": "x"}}, {"data": None}, {"data": [1]}, "ok"],
    )
    async def test_get_note_wrong_shape(self, body):
        async with mock_client(lambda request: httpx.Response(200, json=body)) as client:
            with pytest.raises(InvalidResponseError) as exc_info:
                await client.get_note(1)

        assert exc_info.value.status == 200
        assert exc_info.value.message == "Unexpected response format from server"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"success": True}, [1], {"data": {"id": 1}}, {"data": [{"id": "x"}]}, {"data": "notes"}],
    )
    async def test_list_notes_wrong_shape(self, body):
        async with mock_client(lambda request: httpx.Response(200, json=body)) as client:
            with pytest.raises(InvalidResponseError):
                await client.list_notes()

    @pytest.mark.asyncio
    async def test_wrong_shape_keeps_body(self):
        async with mock_client(lambda request: httpx.Response(201, json={"success": True})) as client:
            with pytest.raises(InvalidResponseError) as exc_info:
                await client.create_note({})

        assert exc_info.value.status == 201
        assert exc_info.value.response == {"success": True}


class TestNoteIdEscaping:

    @pytest.mark.asyncio
    async def test_id_is_one_path_segment(self):
        seen = []

        def handler(request):
            seen.append(request.url.raw_path)
            return httpx.Response(400, json={"success": False, "message": "Invalid note ID"})

        async with mock_client(handler) as client:
            with pytest.raises(NotesApiError):
                await client.get_note("1/../../health")

        assert seen == [b"/api/notes/1%2F..%2F..%2Fhealth"]

    @pytest.mark.asyncio
    async def test_integer_ids_are_unchanged(self):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(404, json={"success": False, "message": "Note not found"})

        async with mock_client(handler) as client:
            with pytest.raises(NotesApiError):
                await client.delete_note(42)

        assert seen == ["/api/notes/42"]
