"""Tests for the serial port handler against a mocked pyserial."""

from unittest.mock import MagicMock, patch

import pytest
import serial

from tempbridge.core import ErrorKind, ParseError, SerialOpenError, SerialReadError
from tempbridge.serial import SampleDecoder, SerialPortHandler


@pytest.fixture
def mock_serial():
    with patch("tempbridge.serial.handler.serial.Serial") as serial_cls, \
            patch("tempbridge.serial.handler.time.sleep"):
        port = MagicMock()
        port.is_open = True
        serial_cls.return_value = port
        yield serial_cls


class TestOpenClose:

    def test_open_uses_baud_and_blocking_read(self, mock_serial):
        handler = SerialPortHandler("/dev/ttyUSB0", 9600)
        handler.open()

        mock_serial.assert_called_once_with("/dev/ttyUSB0", 9600, timeout=None)
        mock_serial.return_value.reset_input_buffer.assert_called_once()
        assert handler.is_open

    def test_defaults(self):
        handler = SerialPortHandler()
        assert handler.port == "/dev/ttyACM0"
        assert handler.baud == 9600
        assert not handler.is_open

    def test_open_failure_is_fatal(self, mock_serial):
        mock_serial.side_effect = serial.SerialException("No such file or directory")

        with pytest.raises(SerialOpenError) as exc_info:
            SerialPortHandler("/dev/missing").open()

        assert exc_info.value.is_fatal
        assert exc_info.value.kind is ErrorKind.FATAL
        assert "/dev/missing" in str(exc_info.value)

    def test_context_manager_closes(self, mock_serial):
        with SerialPortHandler() as handler:
            assert handler.is_open
        mock_serial.return_value.close.assert_called_once()
        assert not handler.is_open

    def test_closed_on_error_inside_block(self, mock_serial):
        with pytest.raises(RuntimeError):
            with SerialPortHandler():
                raise RuntimeError("boom")
        mock_serial.return_value.close.assert_called_once()

    def test_close_twice_is_harmless(self, mock_serial):
        handler = SerialPortHandler()
        handler.open()
        handler.close()
        handler.close()
        mock_serial.return_value.close.assert_called_once()


class TestReadline:

    def test_returns_decoded_line(self, mock_serial):
        mock_serial.return_value.readline.return_value = b"1234\r\n"
        with SerialPortHandler() as handler:
            line = handler.readline()
        assert line == "1234\r\n"
        assert SampleDecoder.decode(line) == 1234

    def test_device_error_is_transient(self, mock_serial):
        mock_serial.return_value.readline.side_effect = serial.SerialException("device reports readiness to read but returned no data")
        with SerialPortHandler() as handler:
            with pytest.raises(SerialReadError) as exc_info:
                handler.readline()
        assert exc_info.value.kind is ErrorKind.TRANSIENT

    def test_missing_terminator_is_read_error(self, mock_serial):
        mock_serial.return_value.readline.return_value = b"12"
        with SerialPortHandler() as handler:
            with pytest.raises(SerialReadError):
                handler.readline()

    def test_read_before_open(self):
        with pytest.raises(SerialReadError):
            SerialPortHandler().readline()

    def test_garbage_bytes_fail_parsing_not_reading(self, mock_serial):
        mock_serial.return_value.readline.return_value = b"\xff\xfe12\n"
        with SerialPortHandler() as handler:
            line = handler.readline()
        with pytest.raises(ParseError):
            SampleDecoder.decode(line)
