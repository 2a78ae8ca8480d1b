from __future__ import annotations

import logging

import voluptuous as vol
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, Platform
from homeassistant.core import HomeAssistant, callback

from . import api
from .accessory import EoliaAccessory
from .api import create_session_client
from .command import CommandApplier
from .const import CONF_RENAME_TABLE, CONF_USER_ID, DOMAIN
from .coordinator import EoliaDiscoveryCoordinator
from .models import RegisteredAccessory
from .nickname import build_nickname_map
from .reconciliation import ReconciliationEngine
from .registry import HomeAssistantAccessoryRegistry

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.CLIMATE]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Setting up Panasonic Eolia integration for entry %s", entry.entry_id)

    if CONF_USER_ID not in entry.data or CONF_PASSWORD not in entry.data:
        _LOGGER.error("Missing credentials in configuration for entry %s", entry.entry_id)
        return False

    try:
        nickname_map = build_nickname_map(entry.options.get(CONF_RENAME_TABLE))
    except vol.Invalid as err:
        _LOGGER.error("Invalid rename table for entry %s: %s", entry.entry_id, err)
        return False

    session = create_session_client(hass)
    client = api.EoliaApiClient(
        session, entry.data[CONF_USER_ID], entry.data[CONF_PASSWORD]
    )
    applier = CommandApplier(client)
    registry = HomeAssistantAccessoryRegistry(hass, entry)

    def create_controller(accessory: RegisteredAccessory) -> EoliaAccessory:
        controller = EoliaAccessory(accessory, applier)
        registry.attach_controller(controller)
        return controller

    engine = ReconciliationEngine(
        registry,
        nickname_map,
        create_controller,
        registry.load_accessories(),
    )
    coordinator = EoliaDiscoveryCoordinator(hass, entry, client, engine)

    # Raises ConfigEntryNotReady if the first discovery fails
    await coordinator.async_config_entry_first_refresh()
    _LOGGER.info(
        "Discovered %d Eolia devices for entry %s",
        len(coordinator.data),
        entry.entry_id,
    )

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "session": session,
        "client": client,
        "registry": registry,
        "engine": engine,
        "coordinator": coordinator,
    }

    @callback
    def _handle_discovery() -> None:
        _LOGGER.debug(
            "Discovery pass finished with %d accessories", len(engine.accessories)
        )

    # Keeps the coordinator polling even while no entity is listening
    entry.async_on_unload(coordinator.async_add_listener(_handle_discovery))
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _LOGGER.info(
        "Successfully setup Panasonic Eolia integration for entry %s", entry.entry_id
    )
    return True


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry so a new rename table takes effect."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Unloading Panasonic Eolia integration for entry %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        if DOMAIN in hass.data and entry.entry_id in hass.data[DOMAIN]:
            entry_data = hass.data[DOMAIN].pop(entry.entry_id)
            if (session := entry_data.get("session")) is not None:
                await session.aclose()
            _LOGGER.debug("Cleaned up data for entry %s", entry.entry_id)
    else:
        _LOGGER.warning("Failed to unload some platforms for entry %s", entry.entry_id)

    return unload_ok
