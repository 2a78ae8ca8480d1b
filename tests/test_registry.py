"""Tests for the Home Assistant accessory registry."""

from unittest.mock import Mock, patch

import pytest

from custom_components.eolia_hvac.climate import EoliaClimateEntity
from custom_components.eolia_hvac.models import RegisteredAccessory
from custom_components.eolia_hvac.registry import (
    HomeAssistantAccessoryRegistry,
    generate_accessory_uuid,
)

from .conftest import make_snapshot


@pytest.fixture
def mock_device_registry() -> Mock:
    """Create a mock device registry."""
    device_registry = Mock()
    device_registry.async_get_device = Mock(return_value=None)
    return device_registry


@pytest.fixture
def registry(mock_device_registry: Mock) -> HomeAssistantAccessoryRegistry:
    """Create a HomeAssistantAccessoryRegistry with a patched device registry."""
    entry = Mock()
    entry.entry_id = "test_entry"
    with patch(
        "custom_components.eolia_hvac.registry.dr.async_get",
        return_value=mock_device_registry,
    ):
        yield HomeAssistantAccessoryRegistry(Mock(), entry)


@pytest.fixture
def accessory() -> RegisteredAccessory:
    """Create a bound accessory."""
    return RegisteredAccessory(
        uuid=generate_accessory_uuid("A1"),
        display_name="Lounge",
        bound_device=make_snapshot("A1"),
        nickname="Lounge",
    )


def create_controller(accessory: RegisteredAccessory) -> Mock:
    """Create a controller double for entity creation."""
    controller = Mock()
    controller.uuid = accessory.uuid
    controller.name = accessory.display_name
    controller.snapshot = accessory.bound_device
    controller.accessory = accessory
    return controller


class TestGenerateUuid:
    """Tests for generate_uuid."""

    def test_generate_uuid_matches_module_function(
        self, registry: HomeAssistantAccessoryRegistry
    ) -> None:
        """Test that the registry uses the deterministic derivation."""
        assert registry.generate_uuid("A1") == generate_accessory_uuid("A1")


class TestLoadAccessories:
    """Tests for load_accessories."""

    def test_load_accessories_restores_unbound_accessories(
        self, registry: HomeAssistantAccessoryRegistry
    ) -> None:
        """Test that devices of the entry become unbound accessories."""
        device = Mock()
        device.name = "Lounge"
        device.identifiers = {("eolia_hvac", "uuid-1")}
        other = Mock()
        other.name = "Other"
        other.identifiers = {("other_domain", "x")}
        with patch(
            "custom_components.eolia_hvac.registry.dr.async_entries_for_config_entry",
            return_value=[device, other],
        ):
            accessories = registry.load_accessories()

        assert accessories == [
            RegisteredAccessory(
                uuid="uuid-1",
                display_name="Lounge",
                bound_device=None,
                nickname="Lounge",
            )
        ]


class TestRegisterAccessories:
    """Tests for register, update and unregister."""

    def test_register_accessories_creates_devices(
        self,
        registry: HomeAssistantAccessoryRegistry,
        mock_device_registry: Mock,
        accessory: RegisteredAccessory,
    ) -> None:
        """Test that registering creates a device registry entry."""
        registry.register_accessories([accessory])

        mock_device_registry.async_get_or_create.assert_called_once()
        kwargs = mock_device_registry.async_get_or_create.call_args[1]
        assert kwargs["config_entry_id"] == "test_entry"
        assert kwargs["identifiers"] == {("eolia_hvac", accessory.uuid)}
        assert kwargs["name"] == "Lounge"
        assert kwargs["model"] == "CS-X280D"
        assert kwargs["serial_number"] == "A1"

    def test_update_metadata_updates_existing_device(
        self,
        registry: HomeAssistantAccessoryRegistry,
        mock_device_registry: Mock,
        accessory: RegisteredAccessory,
    ) -> None:
        """Test that metadata of an existing device is updated."""
        mock_device_registry.async_get_device.return_value = Mock(id="device-1")

        registry.update_accessory_metadata(accessory)

        mock_device_registry.async_update_device.assert_called_once_with(
            "device-1", model="CS-X280D", serial_number="A1"
        )
        mock_device_registry.async_get_or_create.assert_not_called()

    def test_update_metadata_registers_missing_device(
        self,
        registry: HomeAssistantAccessoryRegistry,
        mock_device_registry: Mock,
        accessory: RegisteredAccessory,
    ) -> None:
        """Test that a missing device is created on update."""
        registry.update_accessory_metadata(accessory)
        mock_device_registry.async_get_or_create.assert_called_once()

    def test_unregister_accessories_removes_devices(
        self,
        registry: HomeAssistantAccessoryRegistry,
        mock_device_registry: Mock,
        accessory: RegisteredAccessory,
    ) -> None:
        """Test that unregistering removes the device registry entry."""
        mock_device_registry.async_get_device.return_value = Mock(id="device-1")

        registry.unregister_accessories([accessory])

        mock_device_registry.async_remove_device.assert_called_once_with("device-1")

    def test_unregister_unknown_accessory_is_ignored(
        self,
        registry: HomeAssistantAccessoryRegistry,
        mock_device_registry: Mock,
        accessory: RegisteredAccessory,
    ) -> None:
        """Test that an accessory without a device entry is skipped."""
        registry.unregister_accessories([accessory])
        mock_device_registry.async_remove_device.assert_not_called()


class TestAttachController:
    """Tests for attach_controller and bind_platform."""

    def test_entities_are_buffered_until_platform_is_bound(
        self,
        registry: HomeAssistantAccessoryRegistry,
        accessory: RegisteredAccessory,
    ) -> None:
        """Test that entities created before platform setup are added later."""
        registry.attach_controller(create_controller(accessory))
        async_add_entities = Mock()

        registry.bind_platform(async_add_entities)

        async_add_entities.assert_called_once()
        entities = async_add_entities.call_args[0][0]
        assert len(entities) == 1
        assert isinstance(entities[0], EoliaClimateEntity)

    def test_entities_are_added_directly_once_bound(
        self,
        registry: HomeAssistantAccessoryRegistry,
        accessory: RegisteredAccessory,
    ) -> None:
        """Test that entities are added immediately after platform setup."""
        async_add_entities = Mock()
        registry.bind_platform(async_add_entities)
        async_add_entities.assert_not_called()

        registry.attach_controller(create_controller(accessory))

        async_add_entities.assert_called_once()

    def test_unregister_drops_buffered_entity(
        self,
        registry: HomeAssistantAccessoryRegistry,
        accessory: RegisteredAccessory,
    ) -> None:
        """Test that a removed accessory's pending entity is never added."""
        registry.attach_controller(create_controller(accessory))
        registry.unregister_accessories([accessory])
        async_add_entities = Mock()

        registry.bind_platform(async_add_entities)

        async_add_entities.assert_not_called()
