"""Tests for the command line entry point."""

from unittest.mock import MagicMock, patch

import pytest

from tempbridge import main as cli
from tempbridge.core import BrokerConnectError, SerialOpenError
from tempbridge.serial import PortCandidate


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("TEMPBRIDGE_SERIAL_PORT", "TEMPBRIDGE_BROKER_URL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def mocks():
    with patch.object(cli, "BrokerPublisher") as publisher_cls, \
            patch.object(cli, "SerialPortHandler") as handler_cls, \
            patch.object(cli, "BridgeLoop") as loop_cls:
        yield publisher_cls, handler_cls, loop_cls


class TestRunBridge:

    def test_positional_port_overrides_default(self, mocks):
        publisher_cls, handler_cls, loop_cls = mocks
        loop_cls.return_value.run.side_effect = KeyboardInterrupt

        assert cli.main(["/dev/ttyUSB0"]) == 0

        handler_cls.assert_called_once_with("/dev/ttyUSB0", 9600)
        kwargs = publisher_cls.call_args.kwargs
        assert (kwargs["broker_host"], kwargs["broker_port"]) == ("localhost", 1883)
        assert kwargs["topic"] == "topic/temperature"

    def test_default_port(self, mocks):
        _, handler_cls, _ = mocks
        assert cli.main([]) == 0
        handler_cls.assert_called_once_with("/dev/ttyACM0", 9600)

    def test_broker_connect_failure_exits_nonzero(self, mocks, caplog):
        publisher_cls, handler_cls, loop_cls = mocks
        publisher_cls.return_value.__enter__.side_effect = BrokerConnectError("Error connecting to MQTT broker localhost:1883")

        assert cli.main([]) == 1

        handler_cls.return_value.__enter__.assert_not_called()
        loop_cls.assert_not_called()
        assert "[connect]" in caplog.text

    def test_serial_open_failure_releases_broker(self, mocks):
        publisher_cls, handler_cls, loop_cls = mocks
        handler_cls.return_value.__enter__.side_effect = SerialOpenError("Serial port fail /dev/ttyACM0")

        assert cli.main([]) == 1

        publisher_cls.return_value.__exit__.assert_called_once()
        loop_cls.assert_not_called()

    def test_invalid_broker_url(self, mocks, monkeypatch):
        monkeypatch.setenv("TEMPBRIDGE_BROKER_URL", "ws://localhost:9001")
        publisher_cls, _, _ = mocks

        assert cli.main([]) == 1
        publisher_cls.assert_not_called()


class TestListPorts:

    def test_marks_default_port(self, capsys):
        ports = [PortCandidate("/dev/ttyACM0", "Arduino Uno", "acm", is_default=True)]
        with patch.object(cli.PortDiscovery, "get_ports", return_value=ports) as get_ports:
            assert cli.main(["--list-ports"]) == 0
        get_ports.assert_called_once_with("/dev/ttyACM0")
        out = capsys.readouterr().out
        assert "* /dev/ttyACM0 [acm] Arduino Uno" in out
        assert "not present" not in out

    def test_missing_default_hint(self, capsys):
        ports = [PortCandidate("/dev/ttyUSB0", "CP2102 USB to UART", "usb")]
        with patch.object(cli.PortDiscovery, "get_ports", return_value=ports):
            assert cli.main(["--list-ports"]) == 0
        assert "/dev/ttyACM0 not present" in capsys.readouterr().out

    def test_no_ports(self, capsys):
        with patch.object(cli.PortDiscovery, "get_ports", return_value=[]):
            assert cli.main(["--list-ports"]) == 0
        assert "No ttyACM/ttyUSB serial devices" in capsys.readouterr().out


def test_usage_error_exits_2():
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["a", "b"])
    assert exc_info.value.code == 2
