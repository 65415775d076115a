"""Lookup of the serial device the sensor board is attached to."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from serial.tools import list_ports

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortCandidate:
    """A serial device that may be the sensor board."""
    device: str
    description: str
    # "acm" for boards with native USB (ttyACM*), "usb" for USB-serial adapters (ttyUSB*)
    kind: str
    is_default: bool = False

    @property
    def label(self) -> str:
        marker = "*" if self.is_default else " "
        return f"{marker} {self.device} [{self.kind}] {self.description}"


class PortDiscovery:
    """Finds ttyACM/ttyUSB devices so the right positional port can be chosen.

    Boards with a native USB controller enumerate as ``/dev/ttyACM*``; those
    behind an FTDI/CH340/CP210x bridge show up as ``/dev/ttyUSB*``.
    """

    KIND_PREFIXES = (("ttyACM", "acm"), ("ttyUSB", "usb"))
    KIND_ORDER = {"acm": 0, "usb": 1}

    @classmethod
    def classify(cls, device: str) -> str:
        name = device.rsplit("/", 1)[-1]
        for prefix, kind in cls.KIND_PREFIXES:
            if name.startswith(prefix):
                return kind
        return ""

    @classmethod
    def get_ports(cls, default_port: str) -> List[PortCandidate]:
        """List ACM and USB-serial devices, ACM first.

        Args:
            default_port: Port the bridge opens when none is given; the
                matching candidate is flagged ``is_default``.
        """
        try:
            ports = list_ports.comports()
        except OSError as e:
            logger.warning(f"Error listing serial ports: {e}")
            return []

        candidates = []
        for port in ports:
            kind = cls.classify(port.device)
            if not kind:
                continue
            candidates.append(PortCandidate(
                device=port.device,
                description=port.description or port.hwid or "unknown",
                kind=kind,
                is_default=port.device == default_port,
            ))
        candidates.sort(key=lambda c: (cls.KIND_ORDER[c.kind], c.device))
        return candidates
