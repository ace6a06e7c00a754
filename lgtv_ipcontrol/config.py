"""
Named TV configuration (tvs.yaml).

Example:
    living_room:
      host: 192.168.0.2
      keycode: ABCDEFGH
      mac_address: "DE:AD:BE:EF:00:01"
      broadcast: 192.168.0.255
    bedroom:
      host: 192.168.0.3
      port: 9761
      keycode: HGFEDCBA
      salt: 63-61-b8-0e-9b-dc-a6-63-8d-07-20-f2-cc-56-8f-b9
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import yaml

from .client import DEFAULT_PORT, DEFAULT_SALT, LGTVClient
from .errors import ValidationError
from .models import TransportTimeouts, parse_mac_address, parse_salt

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "tvs.yaml"


@dataclass
class TVConfig:
    """Connection settings for one TV."""

    name: str
    host: str
    keycode: str
    port: int = DEFAULT_PORT
    salt: bytes = DEFAULT_SALT
    mac_address: Optional[str] = None
    broadcast: Optional[str] = None

    def create_client(self, timeouts: Optional[TransportTimeouts] = None, debug: bool = False) -> LGTVClient:
        return LGTVClient(
            host=self.host,
            keycode=self.keycode,
            port=self.port,
            salt=self.salt,
            timeouts=timeouts,
            debug=debug,
        )


class TVRegistry:
    """Loads and looks up TVs from a YAML file."""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE):
        self.config_file = config_file
        self.tvs: Dict[str, TVConfig] = {}
        self._load_config()

    def _load_config(self):
        """Load TV definitions from the YAML file (missing file = no TVs)."""
        config_path = Path(self.config_file)

        if not config_path.exists():
            logger.debug(f"{self.config_file} not found, no named TVs available")
            return

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ValidationError(f"Cannot read {self.config_file}: {e}") from e

        if not config:
            return
        if not isinstance(config, dict):
            raise ValidationError(f"{self.config_file}: expected a mapping of TV names")

        for name, settings in config.items():
            if not isinstance(settings, dict):
                logger.warning(f"TV '{name}' is not a mapping, skipped")
                continue
            tv = self._parse_tv(str(name), settings)
            if tv:
                self.tvs[tv.name.lower()] = tv

    def _parse_tv(self, name: str, settings: dict) -> Optional[TVConfig]:
        host = settings.get('host')
        keycode = settings.get('keycode')

        if not host or not keycode:
            logger.warning(f"TV '{name}' missing host or keycode, skipped")
            return None

        try:
            salt = parse_salt(str(settings['salt'])) if 'salt' in settings else DEFAULT_SALT
            mac_address = settings.get('mac_address')
            if mac_address is not None:
                mac_address = str(mac_address)
                parse_mac_address(mac_address)
            port = int(settings.get('port', DEFAULT_PORT))
        except (ValidationError, ValueError) as e:
            raise ValidationError(f"TV '{name}': {e}") from e

        return TVConfig(
            name=name,
            host=str(host),
            keycode=str(keycode),
            port=port,
            salt=salt,
            mac_address=mac_address,
            broadcast=settings.get('broadcast'),
        )

    def get(self, name: str) -> TVConfig:
        """Get a TV by name (case-insensitive)."""
        try:
            return self.tvs[name.lower()]
        except KeyError:
            raise ValidationError(
                f"Unknown TV '{name}' (defined in {self.config_file}: {', '.join(self.tvs) or 'none'})"
            ) from None

    def names(self):
        return list(self.tvs)
