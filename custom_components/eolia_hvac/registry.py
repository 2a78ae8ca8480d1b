"""Home Assistant side of accessory registration.

Registered accessories are persisted as device registry entries of the
config entry, identified by ``(DOMAIN, accessory uuid)``. Controllers are
presented as climate entities once the climate platform has been set up.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from homeassistant.core import callback
from homeassistant.helpers import device_registry as dr

from .climate import EoliaClimateEntity
from .const import DOMAIN, EOLIA_NAMESPACE, MANUFACTURER
from .models import RegisteredAccessory

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .accessory import EoliaAccessory

_LOGGER = logging.getLogger(__name__)


def generate_accessory_uuid(seed: str) -> str:
    """Return the accessory UUID for an appliance id. Stable across runs."""
    return str(uuid.uuid5(EOLIA_NAMESPACE, seed))


class HomeAssistantAccessoryRegistry:
    """Accessory registry backed by the Home Assistant device registry."""

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        self._hass = hass
        self._entry = entry
        self._async_add_entities: AddEntitiesCallback | None = None
        self._pending: dict[str, EoliaClimateEntity] = {}

    @property
    def _device_registry(self) -> dr.DeviceRegistry:
        return dr.async_get(self._hass)

    def generate_uuid(self, seed: str) -> str:
        return generate_accessory_uuid(seed)

    @callback
    def load_accessories(self) -> list[RegisteredAccessory]:
        """Return accessories registered by earlier runs, unbound."""
        accessories = []
        for device in dr.async_entries_for_config_entry(
            self._device_registry, self._entry.entry_id
        ):
            accessory_uuid = next(
                (value for domain, value in device.identifiers if domain == DOMAIN),
                None,
            )
            if accessory_uuid is None:
                continue

            name = device.name or accessory_uuid
            _LOGGER.info("Loading accessory from cache: %s", name)
            accessories.append(
                RegisteredAccessory(
                    uuid=accessory_uuid,
                    display_name=name,
                    bound_device=None,
                    nickname=name,
                )
            )
        return accessories

    @callback
    def register_accessories(self, accessories: list[RegisteredAccessory]) -> None:
        for accessory in accessories:
            device = accessory.bound_device
            self._device_registry.async_get_or_create(
                config_entry_id=self._entry.entry_id,
                identifiers={(DOMAIN, accessory.uuid)},
                manufacturer=MANUFACTURER,
                name=accessory.display_name,
                model=device.product_code if device else None,
                serial_number=device.appliance_id if device else None,
            )
            _LOGGER.debug("Registered accessory %s", accessory.uuid)

    @callback
    def update_accessory_metadata(self, accessory: RegisteredAccessory) -> None:
        device_entry = self._device_registry.async_get_device(
            identifiers={(DOMAIN, accessory.uuid)}
        )
        if device_entry is None:
            self.register_accessories([accessory])
            return

        device = accessory.bound_device
        if device is None:
            return

        self._device_registry.async_update_device(
            device_entry.id,
            model=device.product_code,
            serial_number=device.appliance_id,
        )

    @callback
    def unregister_accessories(self, accessories: list[RegisteredAccessory]) -> None:
        for accessory in accessories:
            self._pending.pop(accessory.uuid, None)
            device_entry = self._device_registry.async_get_device(
                identifiers={(DOMAIN, accessory.uuid)}
            )
            if device_entry is None:
                continue

            self._device_registry.async_remove_device(device_entry.id)
            _LOGGER.debug("Unregistered accessory %s", accessory.uuid)

    @callback
    def attach_controller(self, controller: EoliaAccessory) -> None:
        """Create the climate entity for a new controller."""
        entity = EoliaClimateEntity(controller)
        if self._async_add_entities is None:
            self._pending[controller.uuid] = entity
            return

        self._async_add_entities([entity])

    @callback
    def bind_platform(self, async_add_entities: AddEntitiesCallback) -> None:
        """Start adding entities through the climate platform."""
        self._async_add_entities = async_add_entities
        pending = list(self._pending.values())
        self._pending.clear()
        if pending:
            async_add_entities(pending)
