"""Standalone RTP header extension blocks (RFC 8285 one/two byte, RFC 3550 raw)."""

from __future__ import annotations

from collections.abc import Iterator

from .errors import (
    ExtensionIDRangeError,
    ExtensionSizeError,
    HeaderExtensionNotFoundError,
    HeaderSizeInsufficientForExtensionError,
    ShortBufferError,
    TooSmallError,
)

PROFILE_ONE_BYTE = 0xBEDE
PROFILE_TWO_BYTE = 0x1000
_RESERVED_ID = 0xF

_Entry = tuple[int, int, int, int]


def _read_profile(buf: bytes, minimum: int) -> int:
    if len(buf) < minimum:
        raise TooSmallError(f"extension block of {len(buf)} bytes")
    return int.from_bytes(buf[0:2], "big")


def _write_into(payload: bytearray, buf: bytearray | memoryview) -> int:
    size = len(payload)
    if size > len(buf):
        raise ShortBufferError()
    buf[:size] = payload
    return size


def _one_byte_entries(data: bytearray, stop_at_reserved: bool = False) -> Iterator[_Entry]:
    """Yield (header offset, id, data offset, data length) for each element."""
    n = 4
    while n < len(data):
        if data[n] == 0x00:
            n += 1
            continue
        ext_id = data[n] >> 4
        length = (data[n] & 0x0F) + 1
        if stop_at_reserved and ext_id == _RESERVED_ID:
            return
        yield n, ext_id, n + 1, length
        n += 1 + length


def _two_byte_entries(data: bytearray) -> Iterator[_Entry]:
    """Yield (header offset, id, data offset, data length) for each element."""
    n = 4
    while n < len(data):
        if data[n] == 0x00:
            n += 1
            continue
        if n + 1 >= len(data):
            raise HeaderSizeInsufficientForExtensionError(f"size {len(data)} < {n + 2}")
        length = data[n + 1]
        yield n, data[n], n + 2, length
        n += 2 + length


def _find(data: bytearray, entries: Iterator[_Entry], ext_id: int) -> bytes | None:
    for _, found, start, length in entries:
        if found == ext_id:
            return bytes(data[start:start + length])
    return None


def _remove(data: bytearray, entries: Iterator[_Entry], ext_id: int) -> None:
    for pos, found, start, length in entries:
        if found == ext_id:
            del data[pos:start + length]
            return
    raise HeaderExtensionNotFoundError()


def _load(buf: bytes, profile: int) -> bytearray:
    actual = _read_profile(buf, 4)
    if actual != profile:
        raise HeaderExtensionNotFoundError(f"actual({bytes(buf[0:2]).hex()})")
    return bytearray(buf)


def _with_header(payload: bytearray, profile: int) -> bytearray:
    if len(payload) < 4:
        return bytearray(profile.to_bytes(2, "big") + b"\x00\x00")
    return payload


def _bump_count(payload: bytearray) -> None:
    count = (int.from_bytes(payload[2:4], "big") + 1) & 0xFFFF
    payload[2:4] = count.to_bytes(2, "big")


class OneByteHeaderExtension:
    """An RFC 8285 one-byte header extension block."""

    profile = PROFILE_ONE_BYTE

    def __init__(self) -> None:
        self._payload = bytearray()

    def set(self, ext_id: int, payload: bytes) -> None:
        """Add element ``ext_id`` or replace its payload."""
        if not 1 <= ext_id <= 14:
            raise ExtensionIDRangeError(
                f"for RFC 8285 one byte extensions (1-14) actual({ext_id})"
            )
        if not 1 <= len(payload) <= 16:
            raise ExtensionSizeError(
                f"for RFC 8285 one byte extensions (1-16 bytes) actual({len(payload)})"
            )
        data = bytes(payload)
        header = (ext_id << 4) | (len(data) - 1)
        self._payload = _with_header(self._payload, self.profile)
        for pos, found, start, length in _one_byte_entries(self._payload):
            if found == ext_id:
                self._payload[pos] = header
                self._payload[start:start + length] = data
                return
        self._payload.append(header)
        self._payload.extend(data)
        _bump_count(self._payload)

    def get_ids(self) -> list[int]:
        """Return the IDs of the elements in order, up to a reserved ID."""
        return [ext_id for _, ext_id, _, _ in _one_byte_entries(self._payload, True)]

    def get(self, ext_id: int) -> bytes | None:
        """Return the payload of element ``ext_id``, or None if absent."""
        return _find(self._payload, _one_byte_entries(self._payload), ext_id)

    def delete(self, ext_id: int) -> None:
        """Remove element ``ext_id``; raise if it is absent."""
        _remove(self._payload, _one_byte_entries(self._payload), ext_id)

    def unmarshal(self, buf: bytes) -> int:
        """Load the block from ``buf``; return the number of bytes consumed."""
        self._payload = _load(buf, self.profile)
        return len(buf)

    def marshal(self) -> bytes:
        """Return the extension block as bytes."""
        return bytes(self._payload)

    def marshal_to(self, buf: bytearray | memoryview) -> int:
        """Write the block into ``buf`` and return the number of bytes written."""
        return _write_into(self._payload, buf)

    def marshal_size(self) -> int:
        """Return the size of the block in bytes."""
        return len(self._payload)


class TwoByteHeaderExtension:
    """An RFC 8285 two-byte header extension block."""

    profile = PROFILE_TWO_BYTE

    def __init__(self) -> None:
        self._payload = bytearray()

    def set(self, ext_id: int, payload: bytes) -> None:
        """Add element ``ext_id`` or replace its payload."""
        if not 1 <= ext_id <= 255:
            raise ExtensionIDRangeError(
                f"for RFC 8285 two byte extensions (1-255) actual({ext_id})"
            )
        if len(payload) > 255:
            raise ExtensionSizeError(
                f"for RFC 8285 two byte extensions (0-255 bytes) actual({len(payload)})"
            )
        data = bytes(payload)
        self._payload = _with_header(self._payload, self.profile)
        for pos, found, start, length in _two_byte_entries(self._payload):
            if found == ext_id:
                self._payload[pos + 1] = len(data)
                self._payload[start:start + length] = data
                return
        self._payload.extend((ext_id, len(data)))
        self._payload.extend(data)
        _bump_count(self._payload)

    def get_ids(self) -> list[int]:
        """Return the IDs of the elements in order."""
        return [ext_id for _, ext_id, _, _ in _two_byte_entries(self._payload)]

    def get(self, ext_id: int) -> bytes | None:
        """Return the payload of element ``ext_id``, or None if absent."""
        return _find(self._payload, _two_byte_entries(self._payload), ext_id)

    def delete(self, ext_id: int) -> None:
        """Remove element ``ext_id``; raise if it is absent."""
        _remove(self._payload, _two_byte_entries(self._payload), ext_id)

    def unmarshal(self, buf: bytes) -> int:
        """Load the block from ``buf``; return the number of bytes consumed."""
        self._payload = _load(buf, self.profile)
        return len(buf)

    def marshal(self) -> bytes:
        """Return the extension block as bytes."""
        return bytes(self._payload)

    def marshal_to(self, buf: bytearray | memoryview) -> int:
        """Write the block into ``buf`` and return the number of bytes written."""
        return _write_into(self._payload, buf)

    def marshal_size(self) -> int:
        """Return the size of the block in bytes."""
        return len(self._payload)


class RawExtension:
    """An RFC 3550 header extension holding a single opaque payload with ID 0."""

    def __init__(self) -> None:
        self._payload = bytearray()
        self._present = False

    def set(self, ext_id: int, payload: bytes) -> None:
        """Replace the payload; only ID 0 is allowed."""
        if ext_id != 0:
            raise ExtensionIDRangeError(f"for RFC 3550 extensions (0) actual({ext_id})")
        self._payload = bytearray(payload)
        self._present = True

    def get_ids(self) -> list[int]:
        """Return the only ID a raw extension has."""
        return [0]

    def get(self, ext_id: int) -> bytes | None:
        """Return the payload for ID 0, otherwise None."""
        if ext_id == 0 and self._present:
            return bytes(self._payload)
        return None

    def delete(self, ext_id: int) -> None:
        """Clear the payload; only ID 0 is allowed."""
        if ext_id != 0:
            raise ExtensionIDRangeError(f"for RFC 3550 extensions (0) actual({ext_id})")
        self._payload = bytearray()
        self._present = False

    def unmarshal(self, buf: bytes) -> int:
        """Load the payload from ``buf``; RFC 8285 profiles are rejected."""
        profile = _read_profile(buf, 2)
        if profile in (PROFILE_ONE_BYTE, PROFILE_TWO_BYTE):
            raise HeaderExtensionNotFoundError(f"actual({bytes(buf[0:2]).hex()})")
        self._payload = bytearray(buf)
        self._present = True
        return len(buf)

    def marshal(self) -> bytes:
        """Return the raw extension payload."""
        return bytes(self._payload)

    def marshal_to(self, buf: bytearray | memoryview) -> int:
        """Write the payload into ``buf`` and return the number of bytes written."""
        return _write_into(self._payload, buf)

    def marshal_size(self) -> int:
        """Return the size of the payload in bytes."""
        return len(self._payload)