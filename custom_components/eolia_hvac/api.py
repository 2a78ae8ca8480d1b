"""API client for Panasonic Eolia air conditioners.

This module defines the client contract the integration relies on
(listing devices and applying a device state) and an httpx adapter that
binds it to the Eolia cloud endpoints.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

import httpx
from homeassistant.helpers.httpx_client import create_async_httpx_client
from httpx_retries import Retry, RetryTransport

from .const import BASE_URL, USER_AGENT
from .models import DeviceSnapshot, OperationMode

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

_LOGGER = logging.getLogger(__name__)

# HTTP status codes
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403

# Status fields the adapter maps onto DeviceSnapshot
FIELD_APPLIANCE_ID = "appliance_id"
FIELD_NICKNAME = "nickname"
FIELD_PRODUCT_CODE = "product_code"
FIELD_OPERATION_STATUS = "operation_status"
FIELD_OPERATION_MODE = "operation_mode"
FIELD_INSIDE_TEMP = "inside_temp"
FIELD_TEMPERATURE = "temperature"
FIELD_OPERATION_TOKEN = "operation_token"


class EoliaApiClientError(Exception):
    """Base exception for Eolia API client errors.

    Attributes:
        payload: Structured response body of the failed request, if any.

    """

    def __init__(self, message: str, payload: Any = None) -> None:  # noqa: ANN401
        super().__init__(message)
        self.payload = payload


class EoliaApiAuthError(EoliaApiClientError):
    """Exception raised for authentication errors."""


class EoliaClient(Protocol):
    """What the integration needs from a vendor client."""

    async def async_list_devices(self) -> list[DeviceSnapshot]:
        """Return the current state of every air conditioner on the account."""

    async def async_apply(self, snapshot: DeviceSnapshot) -> None:
        """Submit ``snapshot`` as the desired device state."""


def create_headers() -> dict[str, str]:
    """Create HTTP headers for Eolia API requests.

    Returns:
        Dictionary containing HTTP headers for API requests.

    """
    return {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
        "X-Eolia-Date": datetime.now().strftime("%Y-%m-%dT%H:%M:%S"),  # noqa: DTZ005
    }


def is_http_error(status: int) -> bool:
    return status >= HTTP_BAD_REQUEST


def is_auth_error(status: int) -> bool:
    return status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN)


def _response_payload(response: httpx.Response) -> Any:  # noqa: ANN401
    try:
        return response.json()
    except ValueError:
        return response.text


def validate_response(response: httpx.Response) -> dict[str, Any]:
    """Validate HTTP response and return parsed JSON data.

    Args:
        response: HTTP response object to validate.

    Returns:
        Parsed JSON data from response, or an empty dict for an empty body.

    Raises:
        EoliaApiAuthError: If authentication error is detected.
        EoliaApiClientError: If the request failed.

    """
    if is_http_error(response.status_code):
        payload = _response_payload(response)
        if is_auth_error(response.status_code):
            auth_error = "Authentication error"
            raise EoliaApiAuthError(auth_error, payload)

        client_error = f"Request failed: {response.status_code}"
        raise EoliaApiClientError(client_error, payload)

    if not response.content:
        return {}

    try:
        return response.json()
    except ValueError as err:
        error_msg = f"Invalid JSON response: {err}"
        raise EoliaApiClientError(error_msg, response.text) from err


def extract_devices(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Extract the air conditioner list from a /devices response."""
    return data.get("ac_list", [])


def _parse_operation_mode(value: Any) -> OperationMode | str:  # noqa: ANN401
    try:
        return OperationMode(value)
    except ValueError:
        return str(value)


def _parse_temperature(value: Any) -> float | None:  # noqa: ANN401
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        _LOGGER.warning("Ignoring invalid temperature value: %s", value)
        return None


def parse_device_snapshot(
    device: dict[str, Any],
    status: dict[str, Any],
) -> DeviceSnapshot:
    """Combine a device list entry and its status into a DeviceSnapshot.

    Args:
        device: Entry from the /devices ``ac_list``.
        status: Body of /devices/{appliance_id}/status.

    Returns:
        DeviceSnapshot keeping the full status body in ``raw_state``.

    """
    return DeviceSnapshot(
        appliance_id=str(device[FIELD_APPLIANCE_ID]),
        nickname=str(device.get(FIELD_NICKNAME) or device[FIELD_APPLIANCE_ID]),
        product_code=str(device.get(FIELD_PRODUCT_CODE, "")),
        operation_status=bool(status.get(FIELD_OPERATION_STATUS, False)),
        operation_mode=_parse_operation_mode(status.get(FIELD_OPERATION_MODE)),
        inside_temperature=_parse_temperature(status.get(FIELD_INSIDE_TEMP)),
        target_temperature=_parse_temperature(status.get(FIELD_TEMPERATURE)),
        raw_state=dict(status),
    )


def build_status_payload(
    snapshot: DeviceSnapshot,
    operation_token: str | None,
) -> dict[str, Any]:
    """Build the PUT /devices/{appliance_id}/status body for a snapshot.

    Fields the snapshot does not model are echoed from ``raw_state``.
    """
    payload = {
        **snapshot.raw_state,
        FIELD_APPLIANCE_ID: snapshot.appliance_id,
        FIELD_OPERATION_STATUS: snapshot.operation_status,
        FIELD_OPERATION_MODE: str(snapshot.operation_mode),
    }
    if snapshot.target_temperature is not None:
        payload[FIELD_TEMPERATURE] = snapshot.target_temperature
    if operation_token is not None:
        payload[FIELD_OPERATION_TOKEN] = operation_token
    return payload


def create_session_client(hass: HomeAssistant) -> httpx.AsyncClient:
    """Create HTTP client with retry logic for Eolia API.

    Args:
        hass: Home Assistant instance.

    Returns:
        Configured httpx AsyncClient with retry transport.

    """
    base_client = create_async_httpx_client(hass, timeout=10.0)
    retry = Retry(total=3, backoff_factor=0.5)
    base_client._transport = RetryTransport(  # noqa: SLF001
        transport=base_client._transport,  # noqa: SLF001
        retry=retry,
    )
    return base_client


class EoliaApiClient:
    """httpx implementation of :class:`EoliaClient`.

    The session cookie set by the login endpoint authenticates later
    requests; an auth error triggers one fresh login before giving up.
    """

    def __init__(
        self,
        session: httpx.AsyncClient,
        user_id: str,
        password: str,
    ) -> None:
        self._session = session
        self._user_id = user_id
        self._password = password
        self._logged_in = False
        self._operation_tokens: dict[str, str] = {}

    async def async_login(self) -> None:
        """Authenticate with the Eolia API using the account credentials.

        Raises:
            EoliaApiAuthError: If authentication fails.
            EoliaApiClientError: If API request fails.

        """
        url = f"{BASE_URL}/auth/login"
        payload = {
            "idpw": {
                "id": self._user_id,
                "next_easy": True,
                "pass": self._password,
                "terminal_type": 3,
            }
        }

        _LOGGER.debug("Authenticating with Eolia API")
        response = await self._session.post(url, headers=create_headers(), json=payload)
        validate_response(response)
        self._logged_in = True
        _LOGGER.debug("Successfully authenticated with Eolia API")

    async def _async_request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not self._logged_in:
            await self.async_login()

        url = f"{BASE_URL}{path}"
        response = await self._session.request(
            method, url, headers=create_headers(), json=json
        )
        try:
            return validate_response(response)
        except EoliaApiAuthError:
            _LOGGER.debug("Session rejected for %s %s, logging in again", method, path)
            self._logged_in = False

        await self.async_login()
        response = await self._session.request(
            method, url, headers=create_headers(), json=json
        )
        return validate_response(response)

    async def async_list_devices(self) -> list[DeviceSnapshot]:
        """Fetch every air conditioner on the account with its status.

        Raises:
            EoliaApiAuthError: If authentication fails.
            EoliaApiClientError: If API request fails.

        """
        _LOGGER.debug("Fetching devices from Eolia API")
        data = await self._async_request("GET", "/devices")

        snapshots = []
        for device in extract_devices(data):
            appliance_id = device[FIELD_APPLIANCE_ID]
            status = await self._async_request("GET", f"/devices/{appliance_id}/status")
            token = status.get(FIELD_OPERATION_TOKEN)
            if token:
                self._operation_tokens[appliance_id] = token
            snapshots.append(parse_device_snapshot(device, status))

        _LOGGER.debug("Retrieved %d devices from Eolia API", len(snapshots))
        return snapshots

    async def async_apply(self, snapshot: DeviceSnapshot) -> None:
        """Submit the snapshot's operation fields to the device.

        Raises:
            EoliaApiAuthError: If authentication fails.
            EoliaApiClientError: If API request fails.

        """
        appliance_id = snapshot.appliance_id
        payload = build_status_payload(
            snapshot, self._operation_tokens.get(appliance_id)
        )

        _LOGGER.debug("Sending status to device %s: %s", appliance_id, payload)
        data = await self._async_request(
            "PUT", f"/devices/{appliance_id}/status", json=payload
        )
        token = data.get(FIELD_OPERATION_TOKEN)
        if token:
            self._operation_tokens[appliance_id] = token
