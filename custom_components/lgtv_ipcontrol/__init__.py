"""The LG IP Control integration.

Controls LG TVs through their encrypted IP Control port (9761).

Architecture:
    LGTVCoordinator → LGTVClient (one connection per command) → TCP Socket → TV

Installation:
    The lgtv_ipcontrol library is not on PyPI. Install it into the Home
    Assistant environment from a checkout of this repository
    (`pip install /path/to/lgtv-ipcontrol`); the manifest only pulls in
    its crypto dependency.

Configuration:
    Configured via UI (Settings → Devices & Services → Add Integration)
"""
from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_PORT, CONF_SCAN_INTERVAL
from homeassistant.core import HomeAssistant

from lgtv_ipcontrol import LGTVClient

from .const import (
    CONF_BROADCAST,
    CONF_KEYCODE,
    CONF_MAC_ADDRESS,
    DEFAULT_PORT,
    DEFAULT_SCAN_INTERVAL,
    DOMAIN,
    PLATFORMS,
)
from .coordinator import LGTVCoordinator

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up an LG TV from a config entry.

    Args:
        hass: Home Assistant instance
        entry: ConfigEntry created by the config flow

    Returns:
        True if setup succeeded
    """
    host = entry.data[CONF_HOST]
    port = entry.data.get(CONF_PORT, DEFAULT_PORT)
    scan_interval = entry.data.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)

    _LOGGER.info(
        "Setting up LG IP Control: %s:%d (scan_interval=%ds)",
        host,
        port,
        scan_interval,
    )

    client = LGTVClient(host=host, keycode=entry.data[CONF_KEYCODE], port=port)

    coordinator = LGTVCoordinator(
        hass=hass,
        client=client,
        mac_address=entry.data.get(CONF_MAC_ADDRESS),
        broadcast=entry.data.get(CONF_BROADCAST),
        scan_interval=scan_interval,
    )

    # A TV in standby still sets up (as "off"); only protocol errors fail here
    await coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = coordinator

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id)

    return unload_ok
