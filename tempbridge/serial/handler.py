"""Low-level serial port handler."""

from __future__ import annotations

import logging
import time
from typing import Optional

import serial

from ..core import SerialOpenError, SerialReadError
from .config import SerialConfig

logger = logging.getLogger(__name__)


class SerialPortHandler:
    """Handles low-level serial port operations.

    The port is a scoped resource: use it as a context manager, or call
    :meth:`open` and :meth:`close` explicitly.
    """

    def __init__(self, port: str = SerialConfig.DEFAULT_PORT,
                 baud: int = SerialConfig.DEFAULT_BAUD):
        self.port = port
        self.baud = baud
        self._ser: Optional[serial.Serial] = None

    @property
    def is_open(self) -> bool:
        """Check if port is open."""
        return self._ser is not None and self._ser.is_open

    def open(self) -> None:
        """Open the serial port.

        Raises:
            SerialOpenError: If the device cannot be opened.
        """
        try:
            self._ser = serial.Serial(
                self.port,
                self.baud,
                timeout=SerialConfig.READ_TIMEOUT
            )
        except (serial.SerialException, OSError, ValueError) as e:
            self._ser = None
            raise SerialOpenError(f"Serial port fail {self.port}", e) from e

        time.sleep(0.1)  # Let port stabilize
        self._ser.reset_input_buffer()  # Flush any old data
        logger.info(f"Opened {self.port} at {self.baud} baud")

    def readline(self) -> str:
        """Read one newline-terminated line, blocking until it arrives.

        Returns:
            The decoded line, terminator included. Undecodable bytes are
            replaced so they fail sample parsing instead of the read.

        Raises:
            SerialReadError: If the port is closed, the device reports an
                error, or the stream ends before a terminator.
        """
        if self._ser is None:
            raise SerialReadError(f"Serial port {self.port} is not open")

        try:
            raw = self._ser.readline()
        except (serial.SerialException, OSError) as e:
            raise SerialReadError("Serial port read error", e) from e

        if not raw.endswith(SerialConfig.TERMINATOR):
            raise SerialReadError(
                f"Serial port read error: stream ended after {len(raw)} bytes without newline"
            )
        return raw.decode(SerialConfig.ENCODING, errors='replace')

    def close(self) -> None:
        """Close the serial connection."""
        if self._ser:
            try:
                if self._ser.is_open:
                    self._ser.close()
                    logger.info(f"Closed {self.port}")
            except (serial.SerialException, OSError) as e:
                logger.warning(f"Error closing {self.port}: {e}")
            self._ser = None

    def __enter__(self) -> 'SerialPortHandler':
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
