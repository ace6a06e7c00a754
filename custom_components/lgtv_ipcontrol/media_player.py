"""Media player platform for the LG IP Control integration.

One entity per TV. Volume and mute map to VOLUME_CONTROL / VOLUME_MUTE,
volume steps to remote control key presses, and power off to POWER off.
Turning on needs wake-on-LAN since the control port is closed in standby.
"""
from __future__ import annotations

from typing import Any

from homeassistant.components.media_player import (
    MediaPlayerDeviceClass,
    MediaPlayerEntity,
    MediaPlayerEntityFeature,
    MediaPlayerState,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from lgtv_ipcontrol import LGTVError

from .const import DEFAULT_NAME, DOMAIN
from .coordinator import LGTVCoordinator

BASE_FEATURES = (
    MediaPlayerEntityFeature.VOLUME_SET
    | MediaPlayerEntityFeature.VOLUME_MUTE
    | MediaPlayerEntityFeature.VOLUME_STEP
    | MediaPlayerEntityFeature.TURN_OFF
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the LG TV media player from a config entry."""
    coordinator: LGTVCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([LGTVMediaPlayer(coordinator, entry)])


class LGTVMediaPlayer(CoordinatorEntity[LGTVCoordinator], MediaPlayerEntity):
    """Representation of an LG TV."""

    _attr_device_class = MediaPlayerDeviceClass.TV

    def __init__(self, coordinator: LGTVCoordinator, entry: ConfigEntry) -> None:
        """Initialize the media player."""
        super().__init__(coordinator)
        self._attr_unique_id = f"lgtv_{entry.unique_id or entry.entry_id}"
        self._attr_name = entry.title or DEFAULT_NAME

        self._attr_supported_features = BASE_FEATURES
        if coordinator.can_wake:
            self._attr_supported_features |= MediaPlayerEntityFeature.TURN_ON

    @property
    def device_info(self) -> dict[str, Any]:
        """Return device information for grouping in HA UI."""
        return {
            "identifiers": {(DOMAIN, self._attr_unique_id)},
            "name": self._attr_name,
            "manufacturer": "LG Electronics",
            "model": "IP Control TV",
        }

    @property
    def _data(self) -> dict[str, Any]:
        return self.coordinator.data or {}

    @property
    def state(self) -> MediaPlayerState:
        """Return the power state."""
        return MediaPlayerState.ON if self._data.get("power") else MediaPlayerState.OFF

    @property
    def volume_level(self) -> float | None:
        """Volume level (0..1)."""
        volume = self._data.get("volume")
        return None if volume is None else volume / 100

    @property
    def is_volume_muted(self) -> bool | None:
        """Return True if the volume is muted."""
        return self._data.get("muted")

    @property
    def app_id(self) -> str | None:
        """Return the running app (e.g. "com.webos.app.hdmi1")."""
        return self._data.get("app")

    async def _async_send(self, *commands: str) -> None:
        try:
            await self.coordinator.async_execute_command(*commands)
        except LGTVError as err:
            raise HomeAssistantError(f"Failed to send {commands} to {self.name}: {err}") from err

    async def async_set_volume_level(self, volume: float) -> None:
        """Set volume level, range 0..1."""
        await self._async_send(f"VOLUME_CONTROL {round(volume * 100)}")

    async def async_mute_volume(self, mute: bool) -> None:
        """Mute or unmute."""
        await self._async_send(f"VOLUME_MUTE {'on' if mute else 'off'}")

    async def async_volume_up(self) -> None:
        """Turn volume up one step."""
        await self._async_send("KEY_ACTION volumeup")

    async def async_volume_down(self) -> None:
        """Turn volume down one step."""
        await self._async_send("KEY_ACTION volumedown")

    async def async_turn_off(self) -> None:
        """Turn the TV off."""
        await self._async_send("POWER off")

    async def async_turn_on(self) -> None:
        """Turn the TV on with wake-on-LAN."""
        try:
            await self.coordinator.async_wake()
        except LGTVError as err:
            raise HomeAssistantError(f"Failed to wake {self.name}: {err}") from err
