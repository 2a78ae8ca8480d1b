"""
Configuration flow for Panasonic Eolia HVAC integration.

This module handles account setup through Home Assistant's config flow
system and editing of the air conditioner rename table through the
options flow.
"""

import logging
from typing import Any

import httpx
import voluptuous as vol
from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlow,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.const import CONF_PASSWORD
from homeassistant.core import callback
from homeassistant.helpers.httpx_client import create_async_httpx_client

from . import api
from .const import (
    CONF_RENAME_TABLE,
    CONF_USER_ID,
    DOMAIN,
    ERROR_API_ERROR,
    ERROR_CANNOT_CONNECT,
    ERROR_INVALID_AUTH,
    ERROR_INVALID_RENAME,
    ERROR_TIMEOUT,
    ERROR_UNKNOWN,
)
from .nickname import format_rename_table, parse_rename_table

_LOGGER = logging.getLogger(__name__)


class EoliaHvacConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle configuration flow for Panasonic Eolia integration."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Handle the initial step of the config flow.

        Args:
            user_input: User input data containing user id and password.

        Returns:
            ConfigFlowResult indicating the next step or errors.

        """
        errors: dict[str, str] = {}

        if user_input is not None:
            user_id = user_input[CONF_USER_ID]
            password = user_input[CONF_PASSWORD]

            # Dedicated client so the login cookie stays out of the shared one
            session = create_async_httpx_client(self.hass)
            try:
                client = api.EoliaApiClient(session, user_id, password)
                devices = await client.async_list_devices()
                _LOGGER.info(
                    "Successfully authenticated with Eolia API, %d devices found",
                    len(devices),
                )

            except api.EoliaApiAuthError as err:
                _LOGGER.warning(
                    "Authentication failed (%s): %s", ERROR_INVALID_AUTH, err
                )
                errors["base"] = ERROR_INVALID_AUTH
            except httpx.ConnectError:
                _LOGGER.exception("Connection error (%s)", ERROR_CANNOT_CONNECT)
                errors["base"] = ERROR_CANNOT_CONNECT
            except httpx.TimeoutException:
                _LOGGER.exception("Timeout error (%s)", ERROR_TIMEOUT)
                errors["base"] = ERROR_TIMEOUT
            except api.EoliaApiClientError:
                _LOGGER.exception("API client error (%s)", ERROR_API_ERROR)
                errors["base"] = ERROR_API_ERROR
            except Exception:
                _LOGGER.exception(
                    "Unexpected error during authentication (%s)",
                    ERROR_UNKNOWN,
                )
                errors["base"] = ERROR_UNKNOWN
            else:
                await self.async_set_unique_id(user_id.lower())
                self._abort_if_unique_id_configured()

                return self.async_create_entry(
                    title=f"Panasonic Eolia ({user_id})",
                    data={
                        CONF_USER_ID: user_id,
                        CONF_PASSWORD: password,
                    },
                )
            finally:
                await session.aclose()

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_USER_ID): str,
                    vol.Required(CONF_PASSWORD): str,
                }
            ),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> OptionsFlow:
        return EoliaHvacOptionsFlow()


class EoliaHvacOptionsFlow(OptionsFlow):
    """Edit the air conditioner rename table.

    The table is entered as text, one ``nickname = alias`` per line, and
    stored as an ordered list of ``{nickname, alias}`` entries.
    """

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        errors: dict[str, str] = {}
        current = format_rename_table(self.config_entry.options.get(CONF_RENAME_TABLE))

        if user_input is not None:
            text = user_input.get(CONF_RENAME_TABLE, "")
            try:
                entries = parse_rename_table(text)
            except vol.Invalid as err:
                _LOGGER.warning("Invalid rename table: %s", err)
                errors["base"] = ERROR_INVALID_RENAME
                current = text
            else:
                _LOGGER.debug("Saving rename table: %s", entries)
                return self.async_create_entry(
                    title="", data={CONF_RENAME_TABLE: entries}
                )

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Optional(
                        CONF_RENAME_TABLE,
                        description={"suggested_value": current},
                    ): str,
                }
            ),
            errors=errors,
        )
