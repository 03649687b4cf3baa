"""Typed access to the calendar REST API.

Every request carries a bearer token from the credential broker. A 401 or
403 forces one token refresh and one retry of the same request; anything
else that isn't 2xx becomes a ``GatewayError`` and is never retried here.
"""

import logging
from datetime import date, timedelta
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from schedule_gcal.auth.credential_broker import CredentialBroker
from schedule_gcal.constants import GOOGLE_CALENDAR_API_BASE_URL
from schedule_gcal.exceptions import AuthError, GatewayError
from schedule_gcal.models.remote import RemoteEvent
from schedule_gcal.utils import safe_error_body

logger = logging.getLogger(__name__)

AUTH_FAILURE_STATUS_CODES = {401, 403}
GONE_STATUS_CODES = {404, 410}
LIST_PAGE_SIZE = 2500


class CalendarGateway:
    """Create, patch, delete and list events for one service account."""

    def __init__(
        self,
        broker: CredentialBroker,
        email: str,
        private_key_pem: str,
        *,
        http_client: httpx.AsyncClient,
        api_base_url: str = GOOGLE_CALENDAR_API_BASE_URL,
    ):
        self._broker = broker
        self._email = email
        self._private_key_pem = private_key_pem
        self._http_client = http_client
        self.api_base_url = api_base_url.rstrip("/")

    async def authenticate(self) -> str:
        """Make sure a usable access token is available (raises ``AuthError``)."""
        return await self._broker.get_access_token(self._email, self._private_key_pem)

    # ─────────────────────────────────────────────────────────────────────────
    # Operations
    # ─────────────────────────────────────────────────────────────────────────

    async def create(self, calendar_id: str, event_body: dict) -> RemoteEvent:
        payload = await self._request_json(
            "POST", self._events_path(calendar_id), json_body=event_body
        )
        return self._to_event(payload)

    async def patch(
        self, calendar_id: str, event_id: str, event_body: dict
    ) -> RemoteEvent:
        payload = await self._request_json(
            "PATCH",
            self._events_path(calendar_id, event_id),
            json_body=event_body,
        )
        return self._to_event(payload)

    async def delete(self, calendar_id: str, event_id: str) -> None:
        """Delete an event; an event that is already gone counts as deleted."""
        response = await self._request(
            "DELETE", self._events_path(calendar_id, event_id)
        )
        if response.status_code in GONE_STATUS_CODES:
            logger.debug(f"Event {event_id} already deleted ({response.status_code})")
            return
        self._raise_for_status(response)

    async def list_for_date(self, calendar_id: str, day: date) -> list[RemoteEvent]:
        """
        Events overlapping the UTC window [day 00:00Z, day + 1 00:00Z).

        Recurring events are expanded into single instances; cancelled
        instances are dropped. Follows pagination to the end.
        """
        params: dict[str, Any] = {
            "timeMin": f"{day.isoformat()}T00:00:00Z",
            "timeMax": f"{(day + timedelta(days=1)).isoformat()}T00:00:00Z",
            "singleEvents": "true",
            "showDeleted": "false",
            "maxResults": LIST_PAGE_SIZE,
        }
        events: list[RemoteEvent] = []
        while True:
            payload = await self._request_json(
                "GET", self._events_path(calendar_id), params=params
            )
            for item in payload.get("items") or []:
                if not isinstance(item, dict) or not item.get("id"):
                    continue
                try:
                    event = RemoteEvent.model_validate(item)
                except ValidationError as e:
                    logger.debug(f"Skipping unusable event {item.get('id')!r}: {e}")
                    continue
                if not event.is_cancelled:
                    events.append(event)
            page_token = payload.get("nextPageToken")
            if not page_token:
                break
            params = {**params, "pageToken": page_token}
        logger.debug(f"Listed {len(events)} events for {day}")
        return events

    # ─────────────────────────────────────────────────────────────────────────
    # Request helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _events_path(self, calendar_id: str, event_id: str | None = None) -> str:
        path = f"/calendars/{quote(calendar_id, safe='')}/events"
        if event_id is not None:
            path += f"/{quote(event_id, safe='')}"
        return path

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict | None = None,
    ) -> dict:
        response = await self._request(
            method, path, params=params, json_body=json_body
        )
        self._raise_for_status(response)
        if response.status_code == 204:
            return {}
        try:
            payload = response.json()
        except ValueError as e:
            raise GatewayError(
                "Calendar API returned invalid JSON",
                status_code=response.status_code,
                body=response.text[:200],
            ) from e
        if not isinstance(payload, dict):
            raise GatewayError(
                "Calendar API returned an unexpected payload",
                status_code=response.status_code,
            )
        return payload

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict | None = None,
    ) -> httpx.Response:
        url = f"{self.api_base_url}{path}"
        response = await self._request_once(
            method, url, params=params, json_body=json_body, force_refresh=False
        )
        if response.status_code not in AUTH_FAILURE_STATUS_CODES:
            return response

        logger.info(
            f"{method} {path} rejected ({response.status_code}); refreshing token and retrying once"
        )
        response = await self._request_once(
            method, url, params=params, json_body=json_body, force_refresh=True
        )
        if response.status_code in AUTH_FAILURE_STATUS_CODES:
            body = safe_error_body(response)
            raise AuthError(
                f"Calendar API rejected credentials ({response.status_code}): {body}",
                status_code=response.status_code,
                body=body,
            )
        return response

    async def _request_once(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None,
        json_body: dict | None,
        force_refresh: bool,
    ) -> httpx.Response:
        access_token = await self._broker.get_access_token(
            self._email, self._private_key_pem, force_refresh=force_refresh
        )
        try:
            return await self._http_client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            raise GatewayError(f"Calendar request failed: {e}") from e

    @staticmethod
    def _to_event(payload: dict) -> RemoteEvent:
        try:
            return RemoteEvent.model_validate(payload)
        except ValidationError as e:
            raise GatewayError(f"Calendar API returned an unusable event: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if 200 <= response.status_code < 300:
            return
        body = safe_error_body(response)
        raise GatewayError(
            f"Calendar API request failed ({response.status_code}): {body}",
            status_code=response.status_code,
            body=body,
        )
