"""Coordinator for Panasonic Eolia HVAC integration."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import TYPE_CHECKING

import httpx
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import api
from .const import DEFAULT_POLL_INTERVAL, DOMAIN
from .models import DeviceSnapshot

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .reconciliation import ReconciliationEngine

_LOGGER = logging.getLogger(__name__)


class EoliaDiscoveryCoordinator(DataUpdateCoordinator[list[DeviceSnapshot]]):
    """Coordinator that discovers Eolia devices and reconciles accessories.

    Each refresh fetches the device inventory and runs one reconciliation
    pass. Passes never overlap: a refresh triggered while another is in
    flight waits for it to finish.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        client: api.EoliaClient,
        engine: ReconciliationEngine,
    ) -> None:
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=f"{DOMAIN}_devices",
            update_interval=timedelta(seconds=DEFAULT_POLL_INTERVAL),
        )
        self.client = client
        self.engine = engine
        self._discovery_lock = asyncio.Lock()
        self.data = []

    async def _async_update_data(self) -> list[DeviceSnapshot]:
        async with self._discovery_lock:
            devices = await self._async_fetch_devices()
            _LOGGER.debug("Found %d Eolia Devices", len(devices))
            self.engine.reconcile(devices)
            return devices

    async def _async_fetch_devices(self) -> list[DeviceSnapshot]:
        """Fetch the device inventory.

        Raises:
            UpdateFailed: If the inventory could not be fetched. The
                registered accessories are left untouched.

        """
        try:
            return await self.client.async_list_devices()
        except api.EoliaApiAuthError as err:
            _LOGGER.warning("Authentication failed while discovering devices: %s", err)
            error_msg = f"Authentication error while discovering devices: {err}"
            raise UpdateFailed(error_msg) from err
        except api.EoliaApiClientError as err:
            error_msg = f"API error while discovering devices: {err}"
            raise UpdateFailed(error_msg) from err
        except httpx.RequestError as err:
            error_msg = f"Connection error while discovering devices: {err}"
            raise UpdateFailed(error_msg) from err
