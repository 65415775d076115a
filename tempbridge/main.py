"""Command line entry point for tempbridge."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .bridge import BridgeLoop
from .broker import BrokerPublisher
from .core import BridgeError, BridgeSettings
from .serial import PortDiscovery, SerialPortHandler
from .version import __version__, APP_NAME, DESCRIPTION

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser(settings: BridgeSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description=DESCRIPTION)
    parser.add_argument(
        "port", nargs="?", default=settings.serial_port,
        help=f"serial device of the sensor board (default: {settings.serial_port})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--list-ports", action="store_true", help="list USB serial devices and exit")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {__version__}")
    return parser


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )
    # paho logs every packet at DEBUG
    logging.getLogger("paho").setLevel(logging.INFO)


def list_ports(default_port: str) -> int:
    ports = PortDiscovery.get_ports(default_port)
    if not ports:
        print("No ttyACM/ttyUSB serial devices found")
        return 0
    for candidate in ports:
        print(candidate.label)
    if not any(c.is_default for c in ports):
        print(f"{default_port} not present, pass one of the devices above as PORT")
    return 0


def run_bridge(settings: BridgeSettings) -> int:
    """Connect the broker and serial port, then run the loop until stopped.

    Returns:
        Process exit status: 0 on normal stop, 1 on a fatal startup error.
    """
    try:
        host, port = settings.broker_address
    except ValueError as e:
        logger.error(f"Invalid broker URL: {e}")
        return 1

    publisher = BrokerPublisher(
        broker_host=host,
        broker_port=port,
        client_id=settings.client_id,
        topic=settings.topic,
        qos=settings.qos,
        retain=settings.retain,
        connect_timeout=settings.connect_timeout,
        publish_timeout=settings.publish_timeout,
        disconnect_grace=settings.disconnect_grace,
    )
    serial_port = SerialPortHandler(settings.serial_port, settings.baud_rate)

    try:
        with publisher, serial_port:
            loop = BridgeLoop(serial_port, publisher, backoff=settings.read_backoff)
            loop.run()
    except BridgeError as e:
        logger.error(f"[{e.stage.value}] {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    settings = BridgeSettings.load()
    args = build_parser(settings).parse_args(argv)
    setup_logging(args.verbose)

    if args.list_ports:
        return list_ports(args.port)

    settings.serial_port = args.port
    logger.info(f"{APP_NAME} {__version__}: {settings.serial_port} -> {settings.broker_url} [{settings.topic}]")
    return run_bridge(settings)


if __name__ == '__main__':
    sys.exit(main())
