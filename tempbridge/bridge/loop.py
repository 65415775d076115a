"""Serial-to-broker bridge loop.

One line in, at most one message out, strictly in order::

    serial line -> sample -> temperature -> message -> publish

Every stage failure is a :class:`BridgeError` tagged with an
:class:`ErrorKind`; the loop looks the kind up in ``ERROR_POLICY`` to decide
whether to back off, skip, drop, or abort. Only fatal errors leave
:meth:`BridgeLoop.run_once`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

from ..core import (
    BridgeError,
    BridgeStats,
    ErrorKind,
    IterationOutcome,
    Sample,
    TelemetryMessage,
    Temperature,
    TemperatureConverter,
)
from ..serial import SampleDecoder, SerialConfig

logger = logging.getLogger(__name__)


class LineSource(Protocol):
    def readline(self) -> str: ...


class MessageSink(Protocol):
    def publish(self, message: TelemetryMessage) -> None: ...


@dataclass(frozen=True)
class ErrorPolicy:
    """Reaction of the loop to one error kind."""
    outcome: IterationOutcome
    log_level: int
    backoff: bool = False


ERROR_POLICY: Dict[ErrorKind, ErrorPolicy] = {
    ErrorKind.TRANSIENT: ErrorPolicy(IterationOutcome.READ_FAILED, logging.ERROR, backoff=True),
    ErrorKind.INVALID_INPUT: ErrorPolicy(IterationOutcome.SKIPPED, logging.WARNING),
    ErrorKind.DROPPED: ErrorPolicy(IterationOutcome.DROPPED, logging.ERROR),
}


class BridgeLoop:
    """Reads samples from a line source and publishes converted readings.

    Args:
        source: Object with a blocking ``readline()``, usually a
            :class:`~tempbridge.serial.SerialPortHandler`.
        publisher: Object with ``publish(message)``, usually a
            :class:`~tempbridge.broker.BrokerPublisher`.
        backoff: Seconds to sleep after a read error before reading again.
        sleep: Sleep function, replaceable in tests.
        converter: Sample to temperature function.
    """

    def __init__(
        self,
        source: LineSource,
        publisher: MessageSink,
        backoff: float = SerialConfig.READ_BACKOFF,
        sleep: Callable[[float], None] = time.sleep,
        converter: Callable[[Sample], Temperature] = TemperatureConverter.convert,
        stats: Optional[BridgeStats] = None,
    ):
        self._source = source
        self._publisher = publisher
        self._decoder = SampleDecoder()
        self._converter = converter
        self._sleep = sleep
        self.backoff = backoff
        self.stats = stats if stats is not None else BridgeStats()
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def run_once(self) -> IterationOutcome:
        """Process a single line.

        Raises:
            BridgeError: Only for errors of kind ``FATAL``.
        """
        try:
            line = self._source.readline()
            sample = self._decoder.decode(line)
        except BridgeError as e:
            return self._record(self._handle_error(e))

        temperature = self._converter(sample)
        if not temperature.is_defined:
            logger.debug(f"Sample {sample} is outside the thermistor model, publishing NaN")
        message = TelemetryMessage(sample, temperature)

        try:
            self._publisher.publish(message)
        except BridgeError as e:
            return self._record(self._handle_error(e))

        logger.info(f"Published to MQTT: {message}")
        return self._record(IterationOutcome.PUBLISHED)

    def run(self, max_iterations: Optional[int] = None) -> BridgeStats:
        """Main loop: read, convert and publish until stopped.

        Args:
            max_iterations: Stop after this many lines (None = run forever).

        Returns:
            Counters of the iterations performed.
        """
        self._running = True
        logger.info("Bridge loop started")
        iterations = 0
        try:
            while self._running:
                if max_iterations is not None and iterations >= max_iterations:
                    break
                self.run_once()
                iterations += 1
        finally:
            self._running = False
            logger.info(f"Bridge loop stopped ({self.stats.summary()})")
        return self.stats

    def stop(self) -> None:
        """Stop the loop after the current iteration."""
        self._running = False

    def _handle_error(self, error: BridgeError) -> IterationOutcome:
        if error.is_fatal:
            raise error
        policy = ERROR_POLICY[error.kind]

        logger.log(policy.log_level, f"[{error.stage.value}] {error}")
        if policy.backoff:
            self._sleep(self.backoff)
        return policy.outcome

    def _record(self, outcome: IterationOutcome) -> IterationOutcome:
        self.stats.record(outcome)
        return outcome
