"""Tests for the Panasonic Eolia integration setup."""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from homeassistant.const import CONF_PASSWORD

from custom_components.eolia_hvac import async_setup_entry, async_unload_entry
from custom_components.eolia_hvac.accessory import EoliaAccessory
from custom_components.eolia_hvac.const import CONF_RENAME_TABLE, CONF_USER_ID, DOMAIN

from .conftest import make_snapshot


@pytest.fixture
def mock_hass() -> Mock:
    """Create a mock Home Assistant instance."""
    hass = Mock()
    hass.data = {}
    hass.config_entries.async_forward_entry_setups = AsyncMock()
    hass.config_entries.async_unload_platforms = AsyncMock(return_value=True)
    return hass


@pytest.fixture
def mock_entry() -> Mock:
    """Create a mock config entry."""
    entry = Mock()
    entry.entry_id = "test_entry"
    entry.data = {CONF_USER_ID: "user@example.com", CONF_PASSWORD: "password123"}
    entry.options = {
        CONF_RENAME_TABLE: [{"nickname": "Living Room", "alias": "Lounge"}]
    }
    return entry


class TestAsyncSetupEntry:
    """Tests for async_setup_entry."""

    @pytest.mark.asyncio
    async def test_setup_fails_without_credentials(
        self, mock_hass: Mock, mock_entry: Mock
    ) -> None:
        """Test that setup fails when credentials are missing."""
        mock_entry.data = {}
        assert await async_setup_entry(mock_hass, mock_entry) is False

    @pytest.mark.asyncio
    async def test_setup_fails_with_invalid_rename_table(
        self, mock_hass: Mock, mock_entry: Mock
    ) -> None:
        """Test that setup fails when the rename table is malformed."""
        mock_entry.options = {CONF_RENAME_TABLE: [{"nickname": "Living Room"}]}
        assert await async_setup_entry(mock_hass, mock_entry) is False

    @pytest.mark.asyncio
    async def test_setup_wires_components_and_forwards_platforms(
        self, mock_hass: Mock, mock_entry: Mock
    ) -> None:
        """Test that setup discovers devices and forwards the climate platform."""
        registry = Mock()
        registry.generate_uuid = Mock(side_effect=lambda seed: f"uuid-{seed}")
        registry.load_accessories = Mock(return_value=[])
        coordinator = Mock()
        coordinator.data = []
        coordinator.async_config_entry_first_refresh = AsyncMock()

        with (
            patch("custom_components.eolia_hvac.create_session_client"),
            patch("custom_components.eolia_hvac.api.EoliaApiClient"),
            patch(
                "custom_components.eolia_hvac.HomeAssistantAccessoryRegistry",
                return_value=registry,
            ),
            patch(
                "custom_components.eolia_hvac.EoliaDiscoveryCoordinator",
                return_value=coordinator,
            ) as coordinator_cls,
        ):
            assert await async_setup_entry(mock_hass, mock_entry) is True

        coordinator.async_config_entry_first_refresh.assert_awaited_once()
        mock_hass.config_entries.async_forward_entry_setups.assert_awaited_once()
        entry_data = mock_hass.data[DOMAIN]["test_entry"]
        assert entry_data["registry"] is registry
        assert entry_data["coordinator"] is coordinator

        engine = coordinator_cls.call_args[0][3]
        engine.reconcile([make_snapshot("A1", "Living Room")])
        assert engine.accessories[0].display_name == "Lounge"
        controller = engine.controllers["uuid-A1"]
        assert isinstance(controller, EoliaAccessory)
        registry.attach_controller.assert_called_once_with(controller)


class TestAsyncUnloadEntry:
    """Tests for async_unload_entry."""

    @pytest.mark.asyncio
    async def test_unload_cleans_up_entry_data(
        self, mock_hass: Mock, mock_entry: Mock
    ) -> None:
        """Test that unloading removes the stored entry data."""
        mock_hass.data = {DOMAIN: {"test_entry": {}}}
        assert await async_unload_entry(mock_hass, mock_entry) is True
        assert "test_entry" not in mock_hass.data[DOMAIN]

    @pytest.mark.asyncio
    async def test_unload_closes_vendor_session(
        self, mock_hass: Mock, mock_entry: Mock
    ) -> None:
        """Test that unloading closes the entry's HTTP session."""
        session = Mock()
        session.aclose = AsyncMock()
        mock_hass.data = {DOMAIN: {"test_entry": {"session": session}}}

        assert await async_unload_entry(mock_hass, mock_entry) is True

        session.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unload_keeps_data_when_platforms_fail(
        self, mock_hass: Mock, mock_entry: Mock
    ) -> None:
        """Test that entry data stays when platforms fail to unload."""
        session = Mock()
        session.aclose = AsyncMock()
        mock_hass.data = {DOMAIN: {"test_entry": {"session": session}}}
        mock_hass.config_entries.async_unload_platforms.return_value = False
        assert await async_unload_entry(mock_hass, mock_entry) is False
        assert "test_entry" in mock_hass.data[DOMAIN]
        session.aclose.assert_not_awaited()
