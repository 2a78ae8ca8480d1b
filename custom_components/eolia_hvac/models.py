"""Data models for Panasonic Eolia HVAC integration."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any


class OperationMode(StrEnum):
    """Operation modes reported by the Eolia API."""

    HEATING = "Heating"
    COOLING = "Cooling"
    BLAST = "Blast"
    COOL_DEHUMIDIFYING = "CoolDehumidifying"
    AUTO = "Auto"


class CurrentState(StrEnum):
    """What the heater/cooler is doing right now."""

    INACTIVE = "inactive"
    IDLE = "idle"
    HEATING = "heating"
    COOLING = "cooling"


class TargetState(StrEnum):
    """What the heater/cooler has been asked to do."""

    AUTO = "auto"
    HEAT = "heat"
    COOL = "cool"


@dataclass(frozen=True, slots=True)
class DeviceSnapshot:
    """Point-in-time read of one air conditioner.

    ``operation_mode`` holds a raw string when the API reports a mode
    outside :class:`OperationMode`.
    """

    appliance_id: str
    nickname: str
    product_code: str
    operation_status: bool
    operation_mode: OperationMode | str
    inside_temperature: float | None
    target_temperature: float | None
    raw_state: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True, slots=True)
class CommandDelta:
    """Desired-state change to submit for a device."""

    operation_status: bool
    operation_mode: OperationMode

    def apply_to(self, snapshot: DeviceSnapshot) -> DeviceSnapshot:
        """Return a copy of ``snapshot`` with this delta applied."""
        return replace(
            snapshot,
            operation_status=self.operation_status,
            operation_mode=self.operation_mode,
        )


@dataclass(frozen=True, slots=True)
class ClimateState:
    """Heater/cooler state derived from a snapshot. Never persisted."""

    active: bool
    current_state: CurrentState
    target_state: TargetState


@dataclass
class RegisteredAccessory:
    """An accessory registered with the host for one appliance id."""

    uuid: str
    display_name: str
    bound_device: DeviceSnapshot | None = None
    nickname: str | None = None


@dataclass(frozen=True, slots=True)
class ApplyOutcome:
    """Result of submitting a command.

    ``snapshot`` is the optimistic state whether or not the command
    succeeded.
    """

    snapshot: DeviceSnapshot
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Return True if the command was accepted."""
        return self.error is None


@dataclass
class ReconciliationPlan:
    """What one reconciliation pass did to the registered set."""

    unbound: list[RegisteredAccessory] = field(default_factory=list)
    updated: list[RegisteredAccessory] = field(default_factory=list)
    added: list[RegisteredAccessory] = field(default_factory=list)
    removed: list[RegisteredAccessory] = field(default_factory=list)
