"""Pytest configuration and fixtures for Panasonic Eolia HVAC tests."""

from collections.abc import Callable
from typing import Any
from unittest.mock import Mock

import pytest

from custom_components.eolia_hvac.models import DeviceSnapshot, OperationMode
from custom_components.eolia_hvac.registry import generate_accessory_uuid


def make_snapshot(
    appliance_id: str = "A1",
    nickname: str = "Living Room",
    *,
    product_code: str = "CS-X280D",
    operation_status: bool = True,
    operation_mode: OperationMode | str = OperationMode.COOLING,
    inside_temperature: float | None = 27.0,
    target_temperature: float | None = 25.0,
    raw_state: dict[str, Any] | None = None,
) -> DeviceSnapshot:
    """Create a DeviceSnapshot with sensible defaults for tests."""
    return DeviceSnapshot(
        appliance_id=appliance_id,
        nickname=nickname,
        product_code=product_code,
        operation_status=operation_status,
        operation_mode=operation_mode,
        inside_temperature=inside_temperature,
        target_temperature=target_temperature,
        raw_state=raw_state or {},
    )


@pytest.fixture
def snapshot_factory() -> Callable[..., DeviceSnapshot]:
    """Fixture providing the snapshot factory."""
    return make_snapshot


@pytest.fixture
def sample_snapshot() -> DeviceSnapshot:
    """Fixture providing an active cooling device."""
    return make_snapshot()


@pytest.fixture
def mock_registry() -> Mock:
    """Create a mock accessory registry with real UUID derivation."""
    registry = Mock()
    registry.generate_uuid = Mock(side_effect=generate_accessory_uuid)
    return registry


@pytest.fixture
def sample_devices_response() -> dict:
    """Fixture providing a sample /devices API response.

    Returns:
        A dictionary representing a devices API response with two devices.

    """
    return {
        "ac_list": [
            {
                "appliance_id": "A1",
                "nickname": "Living Room",
                "product_code": "CS-X280D",
            },
            {
                "appliance_id": "A2",
                "nickname": "Bedroom",
                "product_code": "CS-X220D",
            },
        ],
    }


@pytest.fixture
def sample_status_response() -> dict:
    """Fixture providing a sample /devices/{id}/status API response."""
    return {
        "appliance_id": "A1",
        "operation_status": True,
        "operation_mode": "Cooling",
        "temperature": 25.0,
        "inside_temp": 27.0,
        "wind_volume": 0,
        "operation_token": "token-1",
    }
