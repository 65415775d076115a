"""Bridge settings with environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional, Tuple
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

ENV_PREFIX = "TEMPBRIDGE_"

DEFAULT_MQTT_PORT = 1883
BROKER_SCHEMES = ("tcp", "mqtt")


def parse_broker_url(url: str) -> Tuple[str, int]:
    """Split a broker URL like ``tcp://localhost:1883`` into host and port.

    Raises:
        ValueError: If the scheme is not supported or the host is missing.
    """
    parts = urlsplit(url if "://" in url else f"tcp://{url}")
    if parts.scheme not in BROKER_SCHEMES:
        raise ValueError(f"Unsupported broker scheme '{parts.scheme}' in {url!r}")
    if not parts.hostname:
        raise ValueError(f"Missing broker host in {url!r}")
    return parts.hostname, parts.port or DEFAULT_MQTT_PORT


@dataclass
class BridgeSettings:
    """Bridge settings."""
    # Serial
    serial_port: str = "/dev/ttyACM0"  # maybe /dev/ttyUSB0 on FTDI/CH340 boards
    baud_rate: int = 9600
    read_backoff: float = 1.0  # Seconds to wait after a serial read error

    # Broker
    broker_url: str = "tcp://localhost:1883"
    client_id: str = "tempbridge_publisher"
    topic: str = "topic/temperature"
    qos: int = 0
    retain: bool = False
    connect_timeout: float = 5.0
    publish_timeout: float = 10.0
    disconnect_grace: float = 0.25  # Seconds granted to the broker on shutdown

    @property
    def broker_address(self) -> Tuple[str, int]:
        return parse_broker_url(self.broker_url)

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> 'BridgeSettings':
        """Load settings, overriding defaults from ``TEMPBRIDGE_*`` variables.

        Values are converted according to the type of the default; a value
        that cannot be converted keeps the default.
        """
        if environ is None:
            environ = os.environ
        instance = cls()

        for f in fields(instance):
            key = ENV_PREFIX + f.name.upper()
            if key not in environ:
                continue
            stored = environ[key]
            default_val = getattr(instance, f.name)

            try:
                if isinstance(default_val, bool):
                    value = stored.strip().lower() in ('true', '1', 'yes', 'on')
                elif isinstance(default_val, int):
                    value = int(stored)
                elif isinstance(default_val, float):
                    value = float(stored)
                else:
                    value = str(stored)
            except ValueError:
                logger.warning(f"Ignoring invalid {key}={stored!r}, keeping {default_val!r}")
                continue
            setattr(instance, f.name, value)

        return instance
