"""Serial communication package for tempbridge."""

from .config import SerialConfig
from .discovery import PortCandidate, PortDiscovery
from .handler import SerialPortHandler
from .parser import SampleDecoder, decode

__all__ = [
    "SerialConfig",
    "SampleDecoder",
    "SerialPortHandler",
    "PortDiscovery",
    "PortCandidate",
    "decode",
]
