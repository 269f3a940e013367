"""The transport-wide congestion control sequence number extension."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import TooSmallError

_SIZE = 2


@dataclass
class TransportCCExtension:
    """A transport-wide 16-bit sequence number."""

    transport_sequence: int = 0

    def marshal(self) -> bytes:
        """Serialize the sequence number as two big-endian bytes."""
        return self.transport_sequence.to_bytes(_SIZE, "big")

    def unmarshal(self, raw_data: bytes) -> None:
        """Parse the sequence number from the first two bytes of ``raw_data``."""
        if len(raw_data) < _SIZE:
            raise TooSmallError()
        self.transport_sequence = int.from_bytes(raw_data[0:_SIZE], "big")