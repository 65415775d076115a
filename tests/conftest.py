"""Shared fixtures: scripted serial source and recording publisher."""

from typing import List, Union

import pytest

from tempbridge.core import PublishError, SerialReadError, TelemetryMessage


class ScriptedSource:
    """Line source that replays a script of lines and read errors."""

    def __init__(self, script: List[Union[str, Exception]], events: list = None):
        self._script = list(script)
        self.events = events if events is not None else []
        self.reads = 0

    def readline(self) -> str:
        self.reads += 1
        self.events.append("read")
        if not self._script:
            raise SerialReadError("script exhausted")
        item = self._script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class RecordingPublisher:
    """Publisher that records messages and can fail on demand."""

    def __init__(self, events: list = None, fail_on: set = None):
        self.messages: List[TelemetryMessage] = []
        self.events = events if events is not None else []
        self.fail_on = fail_on or set()
        self.calls = 0

    def publish(self, message: TelemetryMessage) -> None:
        self.calls += 1
        self.events.append(("publish", message.text))
        if self.calls in self.fail_on:
            raise PublishError("broker went away")
        self.messages.append(message)


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def publisher(events) -> RecordingPublisher:
    return RecordingPublisher(events)


@pytest.fixture
def recorded_sleep(events):
    def sleep(seconds: float) -> None:
        events.append(("sleep", seconds))
    return sleep
