"""Constants for Panasonic Eolia HVAC integration.

This module contains all the constants used throughout the integration,
including API endpoints, configuration keys, and mapping dictionaries.
"""

import uuid

from homeassistant.components.climate import HVACAction, HVACMode

from .models import CurrentState, TargetState

DOMAIN = "eolia_hvac"
MANUFACTURER = "Panasonic"

BASE_URL = "https://app.rac.apws.panasonic.com/eolia/v2"
USER_AGENT = "eolia/3.0.0 CFNetwork/1240.0.4 Darwin/20.5.0"

DEFAULT_POLL_INTERVAL = 60

# Accessory UUIDs are uuid5 hashes of the appliance id in this namespace
EOLIA_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_DNS, "eolia_hvac.home-assistant.io")

CONF_USER_ID = "user_id"
CONF_RENAME_TABLE = "rename_table"
CONF_NICKNAME = "nickname"
CONF_ALIAS = "alias"

ERROR_INVALID_AUTH = "invalid_auth"
ERROR_CANNOT_CONNECT = "cannot_connect"
ERROR_TIMEOUT = "timeout_error"
ERROR_API_ERROR = "api_error"
ERROR_INVALID_RENAME = "invalid_rename_table"
ERROR_UNKNOWN = "unknown_error"

TARGET_STATE_TO_HVAC_MODE = {
    TargetState.AUTO: HVACMode.HEAT_COOL,
    TargetState.HEAT: HVACMode.HEAT,
    TargetState.COOL: HVACMode.COOL,
}
HVAC_MODE_TO_TARGET_STATE = {
    value: key for key, value in TARGET_STATE_TO_HVAC_MODE.items()
}
CURRENT_STATE_TO_HVAC_ACTION = {
    CurrentState.INACTIVE: HVACAction.OFF,
    CurrentState.IDLE: HVACAction.IDLE,
    CurrentState.HEATING: HVACAction.HEATING,
    CurrentState.COOLING: HVACAction.COOLING,
}
