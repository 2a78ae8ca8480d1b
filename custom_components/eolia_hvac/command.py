"""Submit desired-state changes to Eolia devices."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import httpx

from .api import EoliaApiClientError
from .models import ApplyOutcome, CommandDelta, DeviceSnapshot, OperationMode

if TYPE_CHECKING:
    from .api import EoliaClient

_LOGGER = logging.getLogger(__name__)


class CommandApplier:
    """Apply operation status/mode changes through the vendor client.

    The delta is applied to a copy of the snapshot before the request is
    sent. That optimistic snapshot is returned in the outcome even when the
    request fails; the next discovery refresh makes the device authoritative
    again.
    """

    def __init__(self, client: EoliaClient) -> None:
        self._client = client

    async def async_request_state_change(
        self,
        snapshot: DeviceSnapshot,
        desired_active: bool,  # noqa: FBT001
        desired_mode: OperationMode,
    ) -> ApplyOutcome:
        """Request a new operation status and mode for a device.

        Args:
            snapshot: Current state of the device.
            desired_active: Whether the device should be running.
            desired_mode: Operation mode to run in.

        Returns:
            ApplyOutcome carrying the optimistic snapshot and, on failure,
            the vendor error.

        """
        delta = CommandDelta(
            operation_status=desired_active,
            operation_mode=desired_mode,
        )
        optimistic = delta.apply_to(snapshot)

        try:
            await self._client.async_apply(optimistic)
        except EoliaApiClientError as err:
            _LOGGER.error(  # noqa: TRY400
                "Error while applying AC state %s: %s",
                json.dumps(err.payload, default=str),
                err,
            )
            return ApplyOutcome(snapshot=optimistic, error=err)
        except httpx.RequestError as err:
            _LOGGER.error(  # noqa: TRY400
                "Connection error while applying AC state to %s: %s",
                snapshot.appliance_id,
                err,
            )
            return ApplyOutcome(snapshot=optimistic, error=err)

        _LOGGER.debug(
            "Applied state to %s: active=%s mode=%s",
            snapshot.appliance_id,
            desired_active,
            desired_mode,
        )
        return ApplyOutcome(snapshot=optimistic)
