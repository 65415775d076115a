"""tempbridge version information."""

__version__ = "1.0.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

APP_NAME = "tempbridge"
DESCRIPTION = "Serial thermistor to MQTT telemetry bridge"
