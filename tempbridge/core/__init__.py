"""Core data structures and models for tempbridge."""

from .errors import (
    BridgeError,
    BrokerConnectError,
    EmptyLineError,
    ErrorKind,
    ParseError,
    PublishError,
    SerialOpenError,
    SerialReadError,
    Stage,
)
from .measurement import ADC_MAX, Sample, Temperature, TelemetryMessage
from .settings import BridgeSettings, parse_broker_url
from .statistics import BridgeStats, IterationOutcome
from .thermistor import TemperatureConverter, convert

__all__ = [
    'ADC_MAX',
    'Sample',
    'Temperature',
    'TelemetryMessage',
    'TemperatureConverter',
    'convert',
    'BridgeSettings',
    'parse_broker_url',
    'BridgeStats',
    'IterationOutcome',
    'BridgeError',
    'BrokerConnectError',
    'EmptyLineError',
    'ErrorKind',
    'ParseError',
    'PublishError',
    'SerialOpenError',
    'SerialReadError',
    'Stage',
]
