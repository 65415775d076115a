"""Serial port configuration for tempbridge."""

from __future__ import annotations


class SerialConfig:
    """Configuration for serial port connection."""
    DEFAULT_PORT = "/dev/ttyACM0"
    DEFAULT_BAUD = 9600
    # None blocks readline() until a newline arrives
    READ_TIMEOUT = None
    READ_BACKOFF = 1.0  # Seconds to wait before retrying after a read error
    ENCODING = "utf-8"
    TERMINATOR = b"\n"
