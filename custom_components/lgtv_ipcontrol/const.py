"""Constants for the LG IP Control integration."""

DOMAIN = "lgtv_ipcontrol"

# Configuration keys
CONF_KEYCODE = "keycode"
CONF_MAC_ADDRESS = "mac_address"
CONF_BROADCAST = "broadcast"

# Defaults
DEFAULT_NAME = "LG TV"
DEFAULT_PORT = 9761
DEFAULT_BROADCAST = "255.255.255.255"
DEFAULT_SCAN_INTERVAL = 30  # seconds

# Commands polled on every refresh
QUERY_COMMANDS = ("CURRENT_VOL", "MUTE_STATE", "CURRENT_APP")

# Entity platforms
PLATFORMS = ["media_player"]
