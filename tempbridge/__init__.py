"""tempbridge: serial thermistor samples to MQTT."""

from .version import __version__, __version_info__, APP_NAME
from .core import Temperature, TelemetryMessage, TemperatureConverter, BridgeSettings
from .serial import SampleDecoder, SerialPortHandler, SerialConfig
from .broker import BrokerPublisher
from .bridge import BridgeLoop

__all__ = [
    "__version__",
    "__version_info__",
    "APP_NAME",
    "Temperature",
    "TelemetryMessage",
    "TemperatureConverter",
    "BridgeSettings",
    "SampleDecoder",
    "SerialPortHandler",
    "SerialConfig",
    "BrokerPublisher",
    "BridgeLoop",
]
