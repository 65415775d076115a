"""Error classification for the bridge pipeline.

Every failure raised by a pipeline stage carries a ``kind`` tag that decides
how the bridge loop reacts to it, and a ``stage`` tag naming where it happened.
Callers dispatch on the tags, not on the exception subclass.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """How the bridge reacts to a failure."""
    FATAL = "fatal"                  # abort the process
    TRANSIENT = "transient"          # back off, then retry the read
    INVALID_INPUT = "invalid_input"  # skip the line
    DROPPED = "dropped"              # log, drop the reading


class Stage(Enum):
    """Pipeline stage a failure belongs to."""
    CONNECT = "connect"
    OPEN = "open"
    READ = "read"
    DECODE = "decode"
    PUBLISH = "publish"


class BridgeError(Exception):
    """Base error tagged with a kind and a stage."""

    kind: ErrorKind = ErrorKind.FATAL
    stage: Stage = Stage.CONNECT

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def is_fatal(self) -> bool:
        return self.kind is ErrorKind.FATAL

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class BrokerConnectError(BridgeError):
    kind = ErrorKind.FATAL
    stage = Stage.CONNECT


class SerialOpenError(BridgeError):
    kind = ErrorKind.FATAL
    stage = Stage.OPEN


class SerialReadError(BridgeError):
    kind = ErrorKind.TRANSIENT
    stage = Stage.READ


class EmptyLineError(BridgeError):
    kind = ErrorKind.INVALID_INPUT
    stage = Stage.DECODE

    def __init__(self, message: str = "Empty line received from serial port"):
        super().__init__(message)


class ParseError(BridgeError):
    """Line could not be parsed as a sample; ``text`` is the offending input."""

    kind = ErrorKind.INVALID_INPUT
    stage = Stage.DECODE

    def __init__(self, text: str, reason: str):
        super().__init__(f"Error parsing ADC value '{text}': {reason}")
        self.text = text
        self.reason = reason


class PublishError(BridgeError):
    kind = ErrorKind.DROPPED
    stage = Stage.PUBLISH
