"""Reading data structures."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NewType

# Full-scale value of the 16-bit ADC on the sensor board
ADC_MAX = 65535

Sample = NewType("Sample", int)


@dataclass(frozen=True)
class Temperature:
    """Temperature in both units. Both fields are NaN when undefined."""
    celsius: float
    fahrenheit: float

    @classmethod
    def from_celsius(cls, celsius: float) -> 'Temperature':
        return cls(celsius, celsius * 9 / 5 + 32)

    @classmethod
    def undefined(cls) -> 'Temperature':
        return cls(math.nan, math.nan)

    @property
    def is_defined(self) -> bool:
        return not math.isnan(self.celsius)


def format_value(value: float) -> str:
    """Format a temperature with two decimals.

    Non-finite values keep the spelling subscribers already receive:
    ``NaN``, ``+Inf`` and ``-Inf``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:.2f}"


@dataclass(frozen=True)
class TelemetryMessage:
    """One published reading."""
    sample: Sample
    temperature: Temperature

    @property
    def text(self) -> str:
        return (
            f"ADC: {self.sample}, "
            f"Temp: {format_value(self.temperature.celsius)}°C / "
            f"{format_value(self.temperature.fahrenheit)}°F"
        )

    @property
    def payload(self) -> bytes:
        """Wire payload (UTF-8)."""
        return self.text.encode("utf-8")

    def __str__(self) -> str:
        return self.text
