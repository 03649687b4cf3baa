"""Tests for the calendar REST gateway."""

import json
from datetime import date

import httpx
import pytest

from schedule_gcal.auth import CredentialBroker
from schedule_gcal.exceptions import AuthError, GatewayError
from schedule_gcal.gateway import CalendarGateway

from conftest import API_BASE_URL, DAY, SA_EMAIL, TOKEN_URL

BODY = {
    "summary": "Standup",
    "description": "Synced from daily note\nKey: 2025-01-06::09:00 Standup",
    "start": {"dateTime": "2025-01-06T09:00:00", "timeZone": "UTC"},
    "end": {"dateTime": "2025-01-06T10:00:00", "timeZone": "UTC"},
}


@pytest.mark.asyncio
async def test_create_sends_bearer_token(gateway, fake_api):
    """Test create posts the body with a bearer token."""
    event = await gateway.create("primary", BODY)

    assert event.id == "evt1"
    assert event.event_key == "2025-01-06::09:00 Standup"
    request = fake_api.calls("POST")[0]
    assert request.headers["Authorization"] == "Bearer token-1"
    assert request.url.path == "/calendar/v3/calendars/primary/events"
    assert json.loads(request.content) == BODY


@pytest.mark.asyncio
async def test_calendar_and_event_ids_are_escaped(gateway, fake_api):
    """Test ids are percent-encoded as single path segments."""
    await gateway.create("team@group.calendar.google.com", BODY)
    raw_path = fake_api.calls("POST")[0].url.raw_path
    assert b"/calendars/team%40group.calendar.google.com/events" in raw_path


@pytest.mark.asyncio
async def test_patch_updates_event(gateway, fake_api):
    """Test patch sends the body to the event resource."""
    fake_api.add_event("abc", "old")
    event = await gateway.patch("primary", "abc", {"summary": "Renamed"})
    assert event.summary == "Renamed"
    assert fake_api.calls("PATCH")[0].url.path.endswith("/events/abc")


@pytest.mark.asyncio
async def test_token_is_reused_across_requests(gateway, fake_api):
    """Test one token serves several requests."""
    await gateway.create("primary", BODY)
    await gateway.create("primary", BODY)
    assert len(fake_api.token_requests) == 1


@pytest.mark.asyncio
async def test_auth_failure_refreshes_and_retries_once(gateway, fake_api):
    """Test a 401 forces a token refresh and a single retry."""
    fake_api.queue(401, "POST")

    event = await gateway.create("primary", BODY)

    assert event.id == "evt1"
    assert len(fake_api.calls("POST")) == 2
    assert len(fake_api.token_requests) == 2
    assert fake_api.calls("POST")[1].headers["Authorization"] == "Bearer token-2"


@pytest.mark.asyncio
async def test_repeated_auth_failure_raises(gateway, fake_api):
    """Test a second 401/403 raises AuthError without further retries."""
    fake_api.queue(401, "POST")
    fake_api.queue(403, "POST")

    with pytest.raises(AuthError) as exc_info:
        await gateway.create("primary", BODY)

    assert exc_info.value.status_code == 403
    assert len(fake_api.calls("POST")) == 2
    assert fake_api.events == {}


@pytest.mark.asyncio
async def test_server_error_is_not_retried(gateway, fake_api):
    """Test non-auth errors raise GatewayError immediately."""
    fake_api.queue(500, "POST")

    with pytest.raises(GatewayError) as exc_info:
        await gateway.create("primary", BODY)

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "queued 500"
    assert len(fake_api.calls("POST")) == 1


@pytest.mark.asyncio
async def test_patch_missing_event_raises_gateway_error(gateway, fake_api):
    """Test patching a deleted event surfaces the 404."""
    with pytest.raises(GatewayError) as exc_info:
        await gateway.patch("primary", "missing", BODY)
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_delete(gateway, fake_api):
    """Test delete removes the event."""
    fake_api.add_event("abc", "x")
    await gateway.delete("primary", "abc")
    assert "abc" not in fake_api.events


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [404, 410])
async def test_delete_already_gone_is_success(gateway, fake_api, status):
    """Test deleting an event that no longer exists is not an error."""
    fake_api.queue(status, "DELETE")
    await gateway.delete("primary", "gone")


@pytest.mark.asyncio
async def test_delete_server_error(gateway, fake_api):
    """Test other delete failures raise GatewayError."""
    fake_api.queue(503, "DELETE")
    with pytest.raises(GatewayError):
        await gateway.delete("primary", "abc")


@pytest.mark.asyncio
async def test_list_for_date_query(gateway, fake_api):
    """Test the listing window and flags."""
    await gateway.list_for_date("primary", DAY)

    params = fake_api.calls("GET")[0].url.params
    assert params["timeMin"] == "2025-01-06T00:00:00Z"
    assert params["timeMax"] == "2025-01-07T00:00:00Z"
    assert params["singleEvents"] == "true"
    assert params["showDeleted"] == "false"
    assert params["maxResults"] == "2500"
    assert "pageToken" not in params


@pytest.mark.asyncio
async def test_list_for_date_follows_pages_and_drops_cancelled(gateway, fake_api):
    """Test pagination is followed and cancelled instances are dropped."""
    fake_api.page_size = 2
    fake_api.add_event("a", "Key: 2025-01-06::A")
    fake_api.add_event("b", "Key: 2025-01-06::B", status="cancelled")
    fake_api.add_event("c", "Key: 2025-01-06::C")
    fake_api.add_event("d", "no key")
    fake_api.add_event("e", "Key: 2025-01-06::E")

    events = await gateway.list_for_date("primary", date(2025, 1, 6))

    assert [e.id for e in events] == ["a", "c", "d", "e"]
    gets = fake_api.calls("GET")
    assert len(gets) == 3
    assert gets[1].url.params["pageToken"] == "2"
    assert gets[2].url.params["pageToken"] == "4"


@pytest.mark.asyncio
async def test_transport_error_becomes_gateway_error(private_key_pem):
    """Test network failures surface as GatewayError."""

    def handler(request):
        if str(request.url).startswith(TOKEN_URL):
            return httpx.Response(200, json={"access_token": "t", "expires_in": 3600})
        raise httpx.ReadTimeout("timed out", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        gateway = CalendarGateway(
            CredentialBroker(client, token_url=TOKEN_URL),
            SA_EMAIL,
            private_key_pem,
            http_client=client,
            api_base_url=API_BASE_URL,
        )
        with pytest.raises(GatewayError, match="Calendar request failed"):
            await gateway.list_for_date("primary", DAY)


@pytest.mark.asyncio
async def test_authenticate_propagates_auth_error(gateway, fake_api):
    """Test authenticate surfaces token endpoint failures."""
    fake_api.token_status = 401
    fake_api.token_body = {"error": "unauthorized_client"}
    with pytest.raises(AuthError):
        await gateway.authenticate()


@pytest.mark.asyncio
async def test_list_for_date_skips_malformed_items(gateway, fake_api):
    """Test listed items that don't validate are skipped, not raised."""
    fake_api.add_event("good", "Key: 2025-01-06::A")
    fake_api.add_event("bad-start", "Key: 2025-01-06::B", start="tomorrow")
    fake_api.add_event("bad-summary", "Key: 2025-01-06::C", summary={"text": "x"})

    events = await gateway.list_for_date("primary", DAY)

    assert [e.id for e in events] == ["good"]
