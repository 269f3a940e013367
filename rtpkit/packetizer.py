"""Splitting media frames into RTP packets."""

from __future__ import annotations

import random
from typing import Protocol, runtime_checkable

from .packet import Header, Packet
from .sequencer import Sequencer

_FIXED_HEADER_SIZE = 12
_PADDING_PAYLOAD_SIZE = 255
_random = random.SystemRandom()


@runtime_checkable
class Payloader(Protocol):
    """Cuts a media frame into chunks that fit in RTP packet payloads."""

    def payload(self, mtu: int, payload: bytes) -> list[bytes]:
        """Return the chunks of ``payload``, each at most ``mtu`` bytes."""


@runtime_checkable
class PartitionHeadChecker(Protocol):
    """Tells whether an RTP payload starts a new partition (e.g. a keyframe)."""

    def is_partition_head(self, payload: bytes) -> bool:
        """Return True if ``payload`` begins a partition."""


class Packetizer:
    """Builds RTP packets for one stream from media frames."""

    def __init__(
        self,
        mtu: int,
        payload_type: int,
        ssrc: int,
        payloader: Payloader,
        sequencer: Sequencer,
        clock_rate: int,
    ) -> None:
        self.mtu = mtu & 0xFFFF
        self.payload_type = payload_type
        self.ssrc = ssrc
        self.payloader = payloader
        self.sequencer = sequencer
        self.timestamp = _random.getrandbits(32)
        self.clock_rate = clock_rate

    def _header(self, marker: bool, padding: bool) -> Header:
        return Header(
            version=2,
            padding=padding,
            extension=False,
            marker=marker,
            payload_type=self.payload_type,
            sequence_number=self.sequencer.next_sequence_number(),
            timestamp=self.timestamp,
            ssrc=self.ssrc,
            csrc=[],
        )

    def packetize(self, payload: bytes, samples: int) -> list[Packet]:
        """Split ``payload`` into packets, then advance the timestamp by ``samples``."""
        if not payload:
            return []
        chunks = list(self.payloader.payload((self.mtu - _FIXED_HEADER_SIZE) & 0xFFFF, payload))
        last = len(chunks) - 1
        packets = [
            Packet(header=self._header(marker=index == last, padding=False), payload=chunk)
            for index, chunk in enumerate(chunks)
        ]
        self.timestamp = (self.timestamp + samples) & 0xFFFFFFFF
        return packets

    def generate_padding(self, samples: int) -> list[Packet]:
        """Return ``samples`` padding-only packets carrying the current timestamp."""
        packets = []
        for _ in range(samples):
            body = bytes(_PADDING_PAYLOAD_SIZE - 1) + bytes([_PADDING_PAYLOAD_SIZE])
            packets.append(Packet(header=self._header(marker=False, padding=True), payload=body))
        return packets

    def skip_samples(self, skipped_samples: int) -> None:
        """Leave a gap of ``skipped_samples`` in the timestamps of later packets."""
        self.timestamp = (self.timestamp + skipped_samples) & 0xFFFFFFFF