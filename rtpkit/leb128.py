"""Unsigned LEB128 variable-length integer encoding."""

from __future__ import annotations

from .errors import RTPError


class LEB128Error(RTPError, ValueError):
    """The buffer ended before a LEB128 value could be read."""

    message = "payload ended before LEB128 was finished"


def write_leb128(value: int) -> bytes:
    """Return the LEB128 bytes of a non-negative integer."""
    if value < 0:
        raise ValueError(f"LEB128 value must not be negative: {value}")
    out = bytearray()
    while True:
        low = value & 0x7F
        value >>= 7
        if value:
            out.append(low | 0x80)
        else:
            out.append(low)
            return bytes(out)


def encode_leb128(value: int) -> int:
    """Return the LEB128 encoding packed into an integer, first byte most significant."""
    return int.from_bytes(write_leb128(value), "big")


def read_leb128(data: bytes) -> tuple[int, int]:
    """Decode a LEB128 value from the start of ``data``.

    Returns the value and the number of bytes it used.
    """
    value = 0
    for index, byte in enumerate(data):
        value |= (byte & 0x7F) << (7 * index)
        if not byte & 0x80:
            return value, index + 1
    raise LEB128Error()