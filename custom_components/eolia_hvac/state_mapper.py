"""Translate Eolia device readings into heater/cooler climate state.

All functions are total: a mode outside :class:`OperationMode` falls back to
INACTIVE for the current state and AUTO for the target state.
"""

from __future__ import annotations

import logging

from .models import (
    ClimateState,
    CurrentState,
    DeviceSnapshot,
    OperationMode,
    TargetState,
)

_LOGGER = logging.getLogger(__name__)

_KNOWN_MODES = frozenset(OperationMode)
_COOLING_MODES = (
    OperationMode.COOLING,
    OperationMode.BLAST,
    OperationMode.COOL_DEHUMIDIFYING,
)

# AUTO mode is centred this many degrees below the target temperature
AUTO_MODE_OFFSET = 1


def map_active(snapshot: DeviceSnapshot) -> bool:
    """Return True if the device is running."""
    return bool(snapshot.operation_status)


def map_current_state(snapshot: DeviceSnapshot) -> CurrentState:
    """Derive what the device is currently doing.

    In AUTO mode the comparison point sits one degree below the target:
    anything above ``target - 1`` reads as cooling, anything below as
    heating, and only ``inside == target - 1`` is idle.
    """
    if not snapshot.operation_status:
        return CurrentState.INACTIVE

    inside = snapshot.inside_temperature
    target = snapshot.target_temperature
    mode = snapshot.operation_mode

    if mode not in _KNOWN_MODES:
        _LOGGER.debug(
            "Unknown operation mode %s for %s", mode, snapshot.appliance_id
        )
        return CurrentState.INACTIVE

    if inside is None or target is None:
        return CurrentState.IDLE

    if mode == OperationMode.HEATING:
        return CurrentState.HEATING if inside < target else CurrentState.IDLE

    if mode in _COOLING_MODES:
        return CurrentState.COOLING if inside > target else CurrentState.IDLE

    if inside > target - AUTO_MODE_OFFSET:
        return CurrentState.COOLING
    if inside < target - AUTO_MODE_OFFSET:
        return CurrentState.HEATING
    return CurrentState.IDLE


def map_target_state(snapshot: DeviceSnapshot) -> TargetState:
    """Derive the target heater/cooler state."""
    if not snapshot.operation_status:
        return TargetState.AUTO

    if snapshot.operation_mode == OperationMode.HEATING:
        return TargetState.HEAT
    if snapshot.operation_mode in _COOLING_MODES:
        return TargetState.COOL
    return TargetState.AUTO


def map_requested_mode(target_state: TargetState | str | None) -> OperationMode:
    """Return the operation mode to request for a target state.

    BLAST and COOL_DEHUMIDIFYING are never requested, so
    ``map_requested_mode(map_target_state(s))`` collapses both to COOLING.
    """
    if target_state == TargetState.HEAT:
        return OperationMode.HEATING
    if target_state == TargetState.COOL:
        return OperationMode.COOLING
    return OperationMode.AUTO


def map_current_temperature(snapshot: DeviceSnapshot) -> float | None:
    return snapshot.inside_temperature


def map_climate_state(snapshot: DeviceSnapshot) -> ClimateState:
    """Derive the full climate state for a snapshot."""
    return ClimateState(
        active=map_active(snapshot),
        current_state=map_current_state(snapshot),
        target_state=map_target_state(snapshot),
    )
