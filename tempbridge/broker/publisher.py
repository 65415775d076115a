"""MQTT publisher for temperature readings."""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

import paho.mqtt.client as mqtt

from ..core import BrokerConnectError, PublishError, TelemetryMessage

logger = logging.getLogger(__name__)


class BrokerPublisher:
    """Publishes telemetry messages to a single MQTT topic.

    Responsibilities:
    - Connect once to the broker as a named client
    - Publish each message and wait until it has been sent
    - Disconnect with a bounded grace period

    Use as a context manager so the connection is released on every exit path.
    """

    def __init__(
        self,
        broker_host: str = "localhost",
        broker_port: int = 1883,
        client_id: str = "tempbridge_publisher",
        topic: str = "topic/temperature",
        qos: int = 0,
        retain: bool = False,
        connect_timeout: float = 5.0,
        publish_timeout: Optional[float] = 10.0,
        disconnect_grace: float = 0.25,
    ):
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.client_id = client_id
        self.topic = topic
        self.qos = qos
        self.retain = retain
        self.connect_timeout = connect_timeout
        self.publish_timeout = publish_timeout
        self.disconnect_grace = disconnect_grace

        self._client: Optional[mqtt.Client] = None
        self._connack = threading.Event()
        self._connected = threading.Event()
        self._connect_rc = None

    @property
    def is_connected(self) -> bool:
        return self._connected.is_set()

    def connect(self) -> None:
        """Connect to the broker and wait for the CONNACK.

        Raises:
            BrokerConnectError: If the broker is unreachable, refuses the
                connection, or does not answer within ``connect_timeout``.
        """
        address = f"{self.broker_host}:{self.broker_port}"
        self._client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=self.client_id,
            protocol=mqtt.MQTTv311,
        )
        self._client.on_connect = self._on_connect
        self._client.on_disconnect = self._on_disconnect

        logger.info(f"Connecting to MQTT broker {address} as {self.client_id}")
        try:
            self._client.connect(self.broker_host, self.broker_port, keepalive=60)
        except (OSError, ValueError) as e:
            self._client = None
            raise BrokerConnectError(f"Error connecting to MQTT broker {address}", e) from e

        self._client.loop_start()

        if not self._connack.wait(self.connect_timeout):
            reason = "connection timeout"
        elif not self._connected.is_set():
            reason = f"connection refused ({self._connect_rc})"
        else:
            return

        try:
            self._client.disconnect()
        except (OSError, ValueError) as e:
            logger.warning(f"MQTT disconnect error: {e}")
        self._shutdown_client()
        raise BrokerConnectError(f"Error connecting to MQTT broker {address}: {reason}")

    def publish(self, message: TelemetryMessage) -> None:
        """Publish one message and wait until the client has sent it.

        Raises:
            PublishError: If the client rejects the message, the send fails,
                or it does not complete within ``publish_timeout``.
        """
        if self._client is None:
            raise PublishError("MQTT client not connected")

        try:
            info = self._client.publish(self.topic, message.payload, qos=self.qos, retain=self.retain)
            info.wait_for_publish(self.publish_timeout)
        except (RuntimeError, ValueError) as e:
            raise PublishError(f"MQTT publish to {self.topic} failed", e) from e

        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise PublishError(f"MQTT publish to {self.topic} failed: {mqtt.error_string(info.rc)}")
        if not info.is_published():
            raise PublishError(f"MQTT publish to {self.topic} not acknowledged within {self.publish_timeout}s")

    def close(self) -> None:
        """Disconnect, granting the broker ``disconnect_grace`` seconds."""
        if self._client is None:
            return
        try:
            self._client.disconnect()
        except (OSError, ValueError) as e:
            logger.warning(f"MQTT disconnect error: {e}")

        deadline = time.monotonic() + self.disconnect_grace
        while self._connected.is_set() and time.monotonic() < deadline:
            time.sleep(0.01)

        self._shutdown_client()
        logger.info("MQTT disconnected")

    def _shutdown_client(self) -> None:
        if self._client is not None:
            self._client.loop_stop()
            self._client = None
        self._connack.clear()
        self._connected.clear()

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code == 0:
            self._connect_rc = None
            self._connected.set()
            logger.info("MQTT connected to broker")
        else:
            self._connect_rc = reason_code
            logger.error(f"MQTT connection refused: {reason_code}")
        self._connack.set()

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        self._connected.clear()
        if reason_code != 0:
            logger.warning(f"MQTT disconnected unexpectedly ({reason_code})")

    def __enter__(self) -> 'BrokerPublisher':
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
