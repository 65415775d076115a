"""NTC thermistor model.

The sensor is a thermistor in a voltage divider with a fixed series resistor,
sampled by a 16-bit ADC. Resistance is converted to temperature with the
simplified (beta) Steinhart-Hart equation::

    1/T = ln(R/R0)/B + 1/T0
"""

from __future__ import annotations

import math

from .measurement import ADC_MAX, Sample, Temperature


def _divide(numerator: float, denominator: float) -> float:
    """Float division that yields infinity or NaN instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


class TemperatureConverter:
    """Converts raw ADC samples to temperatures.

    Pure: the result depends only on the sample and the fixed circuit
    constants below.
    """

    VCC = 5.0                # Supply voltage (V)
    R_SERIES = 1000.0        # Fixed resistor (Ohm)
    RT0 = 1000.0             # Thermistor resistance at T0 (Ohm)
    T0 = 25.0 + 273.15       # Reference temperature (K)
    BETA = 3977.0            # Beta coefficient (K)
    ADC_MAX = float(ADC_MAX)

    KELVIN_OFFSET = 273.15

    @classmethod
    def thermistor_voltage(cls, sample: Sample) -> float:
        """Voltage across the thermistor for a raw sample."""
        return cls.VCC * sample / cls.ADC_MAX

    @classmethod
    def thermistor_resistance(cls, voltage: float) -> float:
        """Thermistor resistance from the divider voltage.

        At ``voltage == VCC`` the resistance is infinite.
        """
        return _divide(voltage * cls.R_SERIES, cls.VCC - voltage)

    @classmethod
    def kelvin(cls, resistance: float) -> float:
        """Beta-model temperature in Kelvin."""
        ratio = resistance / cls.RT0
        if math.isnan(ratio) or ratio < 0:
            return math.nan
        if ratio == 0:
            ln = -math.inf
        else:
            ln = math.log(ratio)
        return _divide(1.0, ln / cls.BETA + 1.0 / cls.T0)

    @classmethod
    def convert(cls, sample: Sample) -> Temperature:
        """Convert a sample to Celsius and Fahrenheit.

        A zero sample leaves the model undefined and returns NaN for both
        fields; this is a valid reading, not an error.
        """
        voltage = cls.thermistor_voltage(sample)
        if voltage == 0:
            return Temperature.undefined()

        resistance = cls.thermistor_resistance(voltage)
        celsius = cls.kelvin(resistance) - cls.KELVIN_OFFSET
        return Temperature.from_celsius(celsius)


def convert(sample: Sample) -> Temperature:
    """Module-level shortcut for :meth:`TemperatureConverter.convert`."""
    return TemperatureConverter.convert(sample)
