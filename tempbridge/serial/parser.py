"""Sample parser for serial communication."""

from __future__ import annotations

import re

from ..core import ADC_MAX, EmptyLineError, ParseError, Sample

_DIGITS = re.compile(r"[0-9]+")


class SampleDecoder:
    """Parser for raw ADC samples sent by the firmware, one per line."""

    @staticmethod
    def decode(line: str) -> Sample:
        """Parse one serial line into a sample.

        The whole line, minus surrounding whitespace, must be a base-10
        unsigned integer no larger than ``ADC_MAX``.

        Args:
            line: Raw line as read from the port, terminator included.

        Returns:
            The parsed sample.

        Raises:
            EmptyLineError: If the line is blank.
            ParseError: If the line is not a single unsigned integer in range.
        """
        text = line.strip()

        if not text:
            raise EmptyLineError()

        if not _DIGITS.fullmatch(text):
            raise ParseError(text, "expected an unsigned integer")

        value = int(text)
        if value > ADC_MAX:
            raise ParseError(text, f"value out of range (max {ADC_MAX})")

        return Sample(value)


def decode(line: str) -> Sample:
    """Module-level shortcut for :meth:`SampleDecoder.decode`."""
    return SampleDecoder.decode(line)
