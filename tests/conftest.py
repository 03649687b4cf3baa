"""Shared fixtures: an RSA service-account key and an in-memory calendar API."""

import json
from datetime import date
from pathlib import Path
from urllib.parse import parse_qs

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from schedule_gcal.auth.credential_broker import CredentialBroker
from schedule_gcal.config import SyncConfig
from schedule_gcal.gateway.calendar_gateway import CalendarGateway
from schedule_gcal.models.settings import SyncSettings
from schedule_gcal.storage.settings_store import SettingsStore
from schedule_gcal.storage.vault import FileSystemVault

TOKEN_URL = "https://oauth2.test/token"
API_BASE_URL = "https://calendar.test/calendar/v3"
SA_EMAIL = "sync@project.iam.gserviceaccount.com"
DAY = date(2025, 1, 6)

SAMPLE_NOTE = """# Monday

Some intro text.

## Schedule
- [ ] 09:00 - 10:00 Standup
- 14:30 Dentist
- all-day: Offsite
## Notes
- 18:00 Not a schedule item
"""


def _generate_pem() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


class FakeCalendarAPI:
    """In-memory token endpoint plus calendar events API for MockTransport.

    ``queue(status, method)`` makes the next matching API request fail with
    ``status`` before any normal handling.
    """

    def __init__(self):
        self.events: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.token_requests: list[dict] = []
        self.token_status = 200
        self.token_body: dict = {}
        self.page_size: int | None = None
        self._queued: list[tuple[str | None, int]] = []
        self._next_id = 1

    # --- Test helpers ---------------------------------------------------------

    def queue(self, status: int, method: str | None = None) -> None:
        self._queued.append((method, status))

    def add_event(self, event_id: str, description: str, **fields) -> dict:
        event = {"id": event_id, "status": "confirmed", "description": description, **fields}
        self.events[event_id] = event
        return event

    def calls(self, method: str | None = None) -> list[httpx.Request]:
        return [r for r in self.requests if method is None or r.method == method]

    # --- Transport --------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        if str(request.url).startswith(TOKEN_URL):
            return self._token(request)

        self.requests.append(request)
        for idx, (method, status) in enumerate(self._queued):
            if method is None or method == request.method:
                del self._queued[idx]
                return httpx.Response(status, json={"error": {"message": f"queued {status}"}})

        _, _, rest = request.url.path.partition("/events")
        event_id = rest.strip("/") or None

        if request.method == "GET":
            return self._list(request)
        if request.method == "POST":
            body = json.loads(request.content)
            new_id = f"evt{self._next_id}"
            self._next_id += 1
            self.events[new_id] = {**body, "id": new_id, "status": "confirmed"}
            return httpx.Response(200, json=self.events[new_id])
        if request.method == "PATCH":
            if event_id not in self.events:
                return httpx.Response(404, json={"error": {"message": "Not Found"}})
            self.events[event_id].update(json.loads(request.content))
            return httpx.Response(200, json=self.events[event_id])
        if request.method == "DELETE":
            if self.events.pop(event_id, None) is None:
                return httpx.Response(410, json={"error": {"message": "Resource has been deleted"}})
            return httpx.Response(204)
        return httpx.Response(405)

    def _token(self, request: httpx.Request) -> httpx.Response:
        form = {k: v[0] for k, v in parse_qs(request.content.decode("ascii")).items()}
        self.token_requests.append(form)
        if self.token_status != 200:
            return httpx.Response(self.token_status, json=self.token_body)
        return httpx.Response(
            200,
            json={
                "access_token": f"token-{len(self.token_requests)}",
                "expires_in": 3600,
                "token_type": "Bearer",
            },
        )

    def _list(self, request: httpx.Request) -> httpx.Response:
        items = list(self.events.values())
        if self.page_size is None:
            return httpx.Response(200, json={"items": items})
        offset = int(request.url.params.get("pageToken", "0"))
        payload = {"items": items[offset : offset + self.page_size]}
        if offset + self.page_size < len(items):
            payload["nextPageToken"] = str(offset + self.page_size)
        return httpx.Response(200, json=payload)


# --- Fixtures -----------------------------------------------------------------


@pytest.fixture(scope="session")
def private_key_pem() -> str:
    """RSA service-account key shared by the whole test session."""
    return _generate_pem()


@pytest.fixture(scope="session")
def other_private_key_pem() -> str:
    """A second, unrelated RSA key (simulates key rotation)."""
    return _generate_pem()


@pytest.fixture
def fake_api() -> FakeCalendarAPI:
    return FakeCalendarAPI()


@pytest.fixture
def http_client(fake_api) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))


@pytest.fixture
def broker(http_client) -> CredentialBroker:
    return CredentialBroker(http_client, token_url=TOKEN_URL)


@pytest.fixture
def gateway(broker, http_client, private_key_pem) -> CalendarGateway:
    return CalendarGateway(
        broker, SA_EMAIL, private_key_pem, http_client=http_client, api_base_url=API_BASE_URL
    )


@pytest.fixture
def settings(private_key_pem) -> SyncSettings:
    return SyncSettings(
        sa_client_email=SA_EMAIL,
        sa_private_key=private_key_pem,
        time_zone="Europe/London",
    )


@pytest.fixture
def store(tmp_path) -> SettingsStore:
    return SettingsStore(tmp_path / ".schedule-gcal" / "data.json")


@pytest.fixture
def vault(tmp_path) -> FileSystemVault:
    return FileSystemVault(tmp_path)


@pytest.fixture
def sync_config(tmp_path) -> SyncConfig:
    return SyncConfig(vault_dir=tmp_path, token_url=TOKEN_URL, api_base_url=API_BASE_URL)


def write_note(root: Path, path: str, text: str) -> Path:
    """Write a vault document, creating parent folders."""
    target = root / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    return target
