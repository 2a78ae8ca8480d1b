"""Climate entities for Panasonic Eolia air conditioners.

This module presents each accessory controller as a Home Assistant climate
entity with heater/cooler style controls.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from homeassistant.components.climate import (
    ClimateEntity,
    ClimateEntityFeature,
    HVACAction,
    HVACMode,
)
from homeassistant.const import UnitOfTemperature
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.device_registry import DeviceInfo

from .const import (
    CURRENT_STATE_TO_HVAC_ACTION,
    DOMAIN,
    HVAC_MODE_TO_TARGET_STATE,
    MANUFACTURER,
    TARGET_STATE_TO_HVAC_MODE,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .accessory import EoliaAccessory
    from .models import ApplyOutcome

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up climate entities for Eolia air conditioners."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    entry_data["registry"].bind_platform(async_add_entities)


class EoliaClimateEntity(ClimateEntity):
    """Climate entity for one Eolia air conditioner."""

    _attr_temperature_unit = UnitOfTemperature.CELSIUS
    _attr_has_entity_name = True
    _attr_name = None
    _attr_should_poll = False
    _attr_hvac_modes = [
        HVACMode.OFF,
        HVACMode.HEAT,
        HVACMode.COOL,
        HVACMode.HEAT_COOL,
    ]
    _attr_supported_features = (
        ClimateEntityFeature.TURN_OFF | ClimateEntityFeature.TURN_ON
    )

    def __init__(self, controller: EoliaAccessory) -> None:
        """Initialize the climate entity.

        Args:
            controller: Accessory controller the entity presents.

        """
        self._controller = controller
        self._listener_unsub: Callable[[], None] | None = None
        self._attr_unique_id = controller.uuid
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, controller.uuid)},
            manufacturer=MANUFACTURER,
            model=controller.snapshot.product_code,
            name=controller.name,
            serial_number=controller.snapshot.appliance_id,
        )

    @property
    def available(self) -> bool:
        return self._controller.accessory.bound_device is not None

    @property
    def hvac_mode(self) -> HVACMode:
        if not self._controller.get_active():
            return HVACMode.OFF
        return TARGET_STATE_TO_HVAC_MODE[self._controller.get_target_state()]

    @property
    def hvac_action(self) -> HVACAction:
        return CURRENT_STATE_TO_HVAC_ACTION[self._controller.get_current_state()]

    @property
    def current_temperature(self) -> float | None:
        return self._controller.get_current_temperature()

    @property
    def target_temperature(self) -> float | None:
        return self._controller.get_target_temperature()

    async def async_added_to_hass(self) -> None:
        """Subscribe to controller updates."""
        await super().async_added_to_hass()
        self._listener_unsub = self._controller.add_listener(
            self._handle_controller_update
        )

    async def async_will_remove_from_hass(self) -> None:
        """Unsubscribe from controller updates."""
        await super().async_will_remove_from_hass()

        if self._listener_unsub is not None:
            self._listener_unsub()
            self._listener_unsub = None

    def _handle_controller_update(self) -> None:
        self.async_write_ha_state()

    def _raise_on_failure(self, outcome: ApplyOutcome) -> None:
        if outcome.ok:
            return

        _LOGGER.error(
            "Failed to apply state to %s: %s", self._controller.name, outcome.error
        )
        error_msg = f"Failed to apply state to {self._controller.name}"
        raise HomeAssistantError(error_msg) from outcome.error

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        """Set the HVAC mode.

        Args:
            hvac_mode: The HVAC mode to set.

        """
        if hvac_mode == HVACMode.OFF:
            outcome = await self._controller.async_set_active(False)  # noqa: FBT003
            self._raise_on_failure(outcome)
            return

        target_state = HVAC_MODE_TO_TARGET_STATE.get(hvac_mode)
        if target_state is None:
            error_msg = f"Unsupported HVAC mode: {hvac_mode}"
            raise HomeAssistantError(error_msg)

        outcome = await self._controller.async_set_target_state(
            target_state,
            activate=True,
        )
        self._raise_on_failure(outcome)

    async def async_turn_on(self) -> None:
        outcome = await self._controller.async_set_active(True)  # noqa: FBT003
        self._raise_on_failure(outcome)

    async def async_turn_off(self) -> None:
        outcome = await self._controller.async_set_active(False)  # noqa: FBT003
        self._raise_on_failure(outcome)
