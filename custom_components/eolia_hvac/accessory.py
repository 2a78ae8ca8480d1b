"""Per-accessory controller for Eolia air conditioners.

A controller owns the current snapshot of one registered accessory and
exposes it as heater/cooler characteristics through plain getters and
async setters. Host-specific presentation (the climate entity) sits on top.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import state_mapper
from .models import (
    ApplyOutcome,
    ClimateState,
    CommandDelta,
    CurrentState,
    DeviceSnapshot,
    OperationMode,
    RegisteredAccessory,
    TargetState,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from .command import CommandApplier

_LOGGER = logging.getLogger(__name__)


class EoliaAccessory:
    """Heater/cooler controller bound to one registered accessory."""

    def __init__(
        self,
        accessory: RegisteredAccessory,
        applier: CommandApplier,
    ) -> None:
        """Initialize the controller.

        Args:
            accessory: Registered accessory; must be bound to a device.
            applier: Command applier used by the setters.

        Raises:
            ValueError: If the accessory has no bound device.

        """
        if accessory.bound_device is None:
            error_msg = f"Accessory {accessory.uuid} is not bound to a device"
            raise ValueError(error_msg)

        self._accessory = accessory
        self._applier = applier
        self._snapshot = accessory.bound_device
        self._listeners: list[Callable[[], None]] = []
        self._target_state = state_mapper.map_target_state(self._snapshot)

        _LOGGER.debug(
            "Seeded %s with %s", accessory.display_name, self.climate_state
        )

    @property
    def accessory(self) -> RegisteredAccessory:
        return self._accessory

    @property
    def uuid(self) -> str:
        return self._accessory.uuid

    @property
    def name(self) -> str:
        return self._accessory.nickname or self._accessory.display_name

    @property
    def snapshot(self) -> DeviceSnapshot:
        """Return the snapshot the controller currently reports."""
        return self._snapshot

    @property
    def climate_state(self) -> ClimateState:
        return state_mapper.map_climate_state(self._snapshot)

    def get_active(self) -> bool:
        return state_mapper.map_active(self._snapshot)

    def get_current_state(self) -> CurrentState:
        return state_mapper.map_current_state(self._snapshot)

    def get_target_state(self) -> TargetState:
        return state_mapper.map_target_state(self._snapshot)

    def get_current_temperature(self) -> float | None:
        return state_mapper.map_current_temperature(self._snapshot)

    def get_target_temperature(self) -> float | None:
        return self._snapshot.target_temperature

    def bind(self, snapshot: DeviceSnapshot) -> None:
        """Adopt a freshly discovered snapshot and notify listeners."""
        if snapshot.appliance_id != self._snapshot.appliance_id:
            error_msg = (
                f"Cannot bind {snapshot.appliance_id} to controller for "
                f"{self._snapshot.appliance_id}"
            )
            raise ValueError(error_msg)

        self._snapshot = snapshot
        self._accessory.bound_device = snapshot
        self._target_state = state_mapper.map_target_state(snapshot)
        self._notify()

    def add_listener(self, update_callback: Callable[[], None]) -> Callable[[], None]:
        """Listen for state changes. Returns a function that unsubscribes."""
        self._listeners.append(update_callback)

        def remove_listener() -> None:
            if update_callback in self._listeners:
                self._listeners.remove(update_callback)

        return remove_listener

    async def async_set_active(self, value: bool) -> ApplyOutcome:  # noqa: FBT001
        """Turn the device on or off.

        The mode requested alongside is derived from the last target state
        the controller held.
        """
        _LOGGER.debug("Set Characteristic Active -> %s", value)
        return await self._async_apply(
            bool(value), state_mapper.map_requested_mode(self._target_state)
        )

    async def async_set_target_state(
        self,
        value: TargetState,
        activate: bool = False,  # noqa: FBT001, FBT002
    ) -> ApplyOutcome:
        """Request a new target heater/cooler state.

        Args:
            value: Target state to request.
            activate: Also turn the device on in the same command.

        """
        mode = state_mapper.map_requested_mode(value)
        _LOGGER.debug("Set Characteristic TargetHeaterCoolerState -> %s", mode)

        self._target_state = value
        active = True if activate else self._snapshot.operation_status
        return await self._async_apply(active, mode)

    async def _async_apply(
        self,
        active: bool,  # noqa: FBT001
        mode: OperationMode,
    ) -> ApplyOutcome:
        sent_from = self._snapshot
        outcome = await self._applier.async_request_state_change(
            sent_from, active, mode
        )

        if self._snapshot is not sent_from:
            # A discovery pass rebound the device while the command was in flight
            if outcome.ok:
                self._snapshot = CommandDelta(
                    operation_status=active, operation_mode=mode
                ).apply_to(self._snapshot)
                self._accessory.bound_device = self._snapshot
            else:
                _LOGGER.debug(
                    "Keeping rediscovered state of %s after failed command",
                    self._snapshot.appliance_id,
                )
        else:
            # The optimistic state stands even if the command failed
            self._snapshot = outcome.snapshot
            self._accessory.bound_device = outcome.snapshot

        self._notify()
        return outcome

    def _notify(self) -> None:
        for update_callback in list(self._listeners):
            update_callback()
