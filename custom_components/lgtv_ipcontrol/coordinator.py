"""DataUpdateCoordinator for the LG IP Control integration.

Every refresh sends the status queries (volume, mute, current app) to the TV,
one connection per query, in the executor. A TV that does not answer is
reported as powered off rather than unavailable: in standby the control port
is simply closed.
"""
from __future__ import annotations

from datetime import timedelta
import logging
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from lgtv_ipcontrol import LGTVClient, LGTVError, Reply, TransportError, send_wol_packet

from .const import DEFAULT_BROADCAST, DEFAULT_SCAN_INTERVAL, DOMAIN, QUERY_COMMANDS

_LOGGER = logging.getLogger(__name__)


def parse_status(replies: list[tuple[str, str]]) -> dict[str, Any]:
    """Turn (command, reply) pairs of the status queries into coordinator data."""
    data: dict[str, Any] = {"power": True, "volume": None, "muted": None, "app": None}

    for command, text in replies:
        reply = Reply.from_text(text)
        if command == "CURRENT_VOL":
            data["volume"] = reply.as_int()
        elif command == "MUTE_STATE":
            data["muted"] = reply.as_bool()
        elif command == "CURRENT_APP":
            data["app"] = reply.value or None

    return data


class LGTVCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator polling one TV.

    Data structure:
        {
            "power": bool,
            "volume": int | None,   # 0-100
            "muted": bool | None,
            "app": str | None,      # e.g. "com.webos.app.hdmi1"
        }
    """

    def __init__(
        self,
        hass: HomeAssistant,
        client: LGTVClient,
        mac_address: str | None = None,
        broadcast: str | None = None,
        scan_interval: int = DEFAULT_SCAN_INTERVAL,
    ) -> None:
        """Initialize coordinator.

        Args:
            hass: Home Assistant instance
            client: Configured LGTVClient
            mac_address: TV MAC address for wake-on-LAN (optional)
            broadcast: Broadcast address for wake-on-LAN
            scan_interval: Polling interval in seconds
        """
        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            update_interval=timedelta(seconds=scan_interval),
        )

        self.client = client
        self.mac_address = mac_address
        self.broadcast = broadcast or DEFAULT_BROADCAST

    @property
    def can_wake(self) -> bool:
        """Return True if the TV can be turned on over the network."""
        return bool(self.mac_address)

    async def _async_update_data(self) -> dict[str, Any]:
        """Query the TV state."""
        try:
            replies = await self.hass.async_add_executor_job(
                self.client.send_commands, list(QUERY_COMMANDS)
            )
        except TransportError as err:
            _LOGGER.debug("TV %s not answering, assuming off: %s", self.client.host, err)
            return {"power": False, "volume": None, "muted": None, "app": None}
        except LGTVError as err:
            raise UpdateFailed(f"Error communicating with TV: {err}") from err

        return parse_status(replies)

    async def async_execute_command(self, *commands: str) -> list[tuple[str, str]]:
        """Send commands to the TV and refresh the state.

        Args:
            commands: Plain commands, e.g. "VOLUME_CONTROL 12"

        Returns:
            (command, reply) pairs

        Raises:
            LGTVError: If a command fails (the remaining ones are not sent)
        """
        _LOGGER.debug("Executing commands: %s", ", ".join(commands))

        try:
            replies = await self.hass.async_add_executor_job(
                self.client.send_commands, list(commands)
            )
        finally:
            await self.async_request_refresh()

        for command, reply in replies:
            if not Reply.from_text(reply).is_ok:
                _LOGGER.warning("Command %s answered %r", command, reply)

        return replies

    async def async_wake(self) -> None:
        """Send a wake-on-LAN packet to the TV."""
        if not self.mac_address:
            _LOGGER.error("Cannot turn on %s: no MAC address configured", self.client.host)
            return

        await self.hass.async_add_executor_job(
            send_wol_packet, self.broadcast, self.mac_address
        )
        await self.async_request_refresh()
