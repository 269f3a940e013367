"""The playout-delay RTP header extension payload."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import PlayoutDelayInvalidValueError, TooSmallError

_SIZE = 3
_MAX_VALUE = (1 << 12) - 1


@dataclass
class PlayoutDelayExtension:
    """Minimum and maximum playout delay, each a 12-bit value in 10 ms units."""

    min_delay: int = 0
    max_delay: int = 0

    def marshal(self) -> bytes:
        """Serialize both delays into three bytes."""
        if not (0 <= self.min_delay <= _MAX_VALUE and 0 <= self.max_delay <= _MAX_VALUE):
            raise PlayoutDelayInvalidValueError()
        return bytes([
            (self.min_delay >> 4) & 0xFF,
            ((self.min_delay << 4) & 0xFF) | (self.max_delay >> 8),
            self.max_delay & 0xFF,
        ])

    def unmarshal(self, raw_data: bytes) -> None:
        """Parse the delays from the first three bytes of ``raw_data``."""
        if len(raw_data) < _SIZE:
            raise TooSmallError()
        self.min_delay = int.from_bytes(raw_data[0:2], "big") >> 4
        self.max_delay = int.from_bytes(raw_data[1:3], "big") & 0x0FFF