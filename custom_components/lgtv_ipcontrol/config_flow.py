"""Config flow for the LG IP Control integration.

Flow Steps:
    1. User provides host, port, keycode and optionally MAC/broadcast address
    2. Validation: MAC address parses, and the TV answers CURRENT_VOL
    3. Create config entry with validated data
"""
from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.const import CONF_HOST, CONF_PORT
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResult
import homeassistant.helpers.config_validation as cv

from lgtv_ipcontrol import (
    CryptoError,
    LGTVClient,
    ProtocolError,
    TransportError,
    ValidationError,
)
from lgtv_ipcontrol.models import parse_mac_address

from .const import (
    CONF_BROADCAST,
    CONF_KEYCODE,
    CONF_MAC_ADDRESS,
    DEFAULT_BROADCAST,
    DEFAULT_NAME,
    DEFAULT_PORT,
    DOMAIN,
)

_LOGGER = logging.getLogger(__name__)

STEP_USER = "user"


async def validate_connection(
    hass: HomeAssistant, host: str, port: int, keycode: str
) -> str:
    """Check that the TV answers with the given keycode.

    The TV drops requests it cannot decrypt, so a wrong keycode shows up as
    either a garbage reply or no reply at all.

    Returns:
        The TV's reply to CURRENT_VOL

    Raises:
        TransportError: TV unreachable or not answering
        ProtocolError/CryptoError: Reply could not be decoded (wrong keycode)
    """
    client = LGTVClient(host=host, keycode=keycode, port=port)
    reply = await hass.async_add_executor_job(client.send_command, "CURRENT_VOL")
    _LOGGER.debug("Validation reply from %s:%d: %r", host, port, reply)

    if "\ufffd" in reply:
        raise ProtocolError(f"Undecodable reply {reply!r}, keycode probably wrong")

    return reply


class LGTVConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for LG IP Control."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Handle the initial step (user input)."""
        errors: dict[str, str] = {}

        if user_input is not None:
            host = user_input[CONF_HOST]
            port = user_input[CONF_PORT]

            await self.async_set_unique_id(f"{host}:{port}")
            self._abort_if_unique_id_configured()

            mac_address = user_input.get(CONF_MAC_ADDRESS)
            if mac_address:
                try:
                    parse_mac_address(mac_address)
                except ValidationError as err:
                    _LOGGER.error("Invalid MAC address: %s", err)
                    errors[CONF_MAC_ADDRESS] = "invalid_mac"

            if not errors:
                try:
                    await validate_connection(
                        self.hass, host, port, user_input[CONF_KEYCODE]
                    )
                except TransportError as err:
                    _LOGGER.error("Cannot connect to %s:%d: %s", host, port, err)
                    errors["base"] = "cannot_connect"
                except (ValidationError, ProtocolError, CryptoError) as err:
                    _LOGGER.error("Invalid reply from %s:%d: %s", host, port, err)
                    errors["base"] = "invalid_auth"
                else:
                    return self.async_create_entry(
                        title=f"{DEFAULT_NAME} ({host})",
                        data=user_input,
                    )

        data_schema = vol.Schema(
            {
                vol.Required(CONF_HOST): cv.string,
                vol.Required(CONF_PORT, default=DEFAULT_PORT): cv.port,
                vol.Required(CONF_KEYCODE): cv.string,
                vol.Optional(CONF_MAC_ADDRESS): cv.string,
                vol.Optional(CONF_BROADCAST, default=DEFAULT_BROADCAST): cv.string,
            }
        )

        return self.async_show_form(
            step_id=STEP_USER,
            data_schema=data_schema,
            errors=errors,
        )
