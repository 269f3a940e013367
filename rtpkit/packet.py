"""RTP packet and header parsing and serialization (RFC 3550, RFC 8285)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .errors import (
    ExtensionIDRangeError,
    ExtensionSizeError,
    HeaderExtensionNotFoundError,
    HeaderExtensionsNotEnabledError,
    HeaderSizeInsufficientError,
    HeaderSizeInsufficientForExtensionError,
    ShortBufferError,
    TooSmallError,
)

PROFILE_ONE_BYTE = 0xBEDE
PROFILE_TWO_BYTE = 0x1000
_RESERVED_ID = 0xF

_HEADER_LENGTH = 4
_FIXED_HEADER_SIZE = 12
_CSRC_LENGTH = 4


def _copy_bytes(data: bytes | bytearray) -> bytes | bytearray:
    if isinstance(data, bytearray):
        return bytearray(data)
    return bytes(data)


def _round4(size: int) -> int:
    return ((size + 3) // 4) * 4


@dataclass
class Extension:
    """A single header extension element: its ID and payload."""

    id: int
    payload: bytes = b""


@dataclass
class Header:
    """The fixed RTP header, CSRC list and header extensions."""

    version: int = 0
    padding: bool = False
    extension: bool = False
    marker: bool = False
    payload_type: int = 0
    sequence_number: int = 0
    timestamp: int = 0
    ssrc: int = 0
    csrc: list[int] = field(default_factory=list)
    extension_profile: int = 0
    extensions: list[Extension] = field(default_factory=list)

    def unmarshal(self, buf: bytes) -> int:
        """Parse the header from ``buf``; return the number of bytes read."""
        buf = bytes(buf)
        if len(buf) < _HEADER_LENGTH:
            raise HeaderSizeInsufficientError(f": {len(buf)} < {_HEADER_LENGTH}")

        first = buf[0]
        self.version = (first >> 6) & 0x3
        self.padding = bool((first >> 5) & 0x1)
        self.extension = bool((first >> 4) & 0x1)
        csrc_count = first & 0x0F

        n = _FIXED_HEADER_SIZE + csrc_count * _CSRC_LENGTH
        if len(buf) < n:
            raise HeaderSizeInsufficientError(f": size {len(buf)} < {n}")

        self.marker = bool((buf[1] >> 7) & 0x1)
        self.payload_type = buf[1] & 0x7F
        self.sequence_number = int.from_bytes(buf[2:4], "big")
        self.timestamp = int.from_bytes(buf[4:8], "big")
        self.ssrc = int.from_bytes(buf[8:12], "big")
        self.csrc = [
            int.from_bytes(buf[offset:offset + _CSRC_LENGTH], "big")
            for offset in range(_FIXED_HEADER_SIZE, n, _CSRC_LENGTH)
        ]
        self.extensions = []

        if not self.extension:
            return n

        if len(buf) < n + 4:
            raise HeaderSizeInsufficientForExtensionError(f": size {len(buf)} < {n + 4}")
        self.extension_profile = int.from_bytes(buf[n:n + 2], "big")
        extension_length = int.from_bytes(buf[n + 2:n + 4], "big") * 4
        n += 4
        extension_end = n + extension_length
        if len(buf) < extension_end:
            raise HeaderSizeInsufficientForExtensionError(
                f": size {len(buf)} < {extension_end}"
            )

        if self.extension_profile not in (PROFILE_ONE_BYTE, PROFILE_TWO_BYTE):
            self.extensions.append(Extension(0, buf[n:extension_end]))
            return extension_end

        while n < extension_end:
            if buf[n] == 0x00:
                n += 1
                continue
            if self.extension_profile == PROFILE_ONE_BYTE:
                ext_id = buf[n] >> 4
                length = (buf[n] & 0x0F) + 1
                n += 1
                if ext_id == _RESERVED_ID:
                    break
            else:
                ext_id = buf[n]
                n += 1
                if len(buf) <= n:
                    raise HeaderSizeInsufficientForExtensionError(f": size {len(buf)} < {n}")
                length = buf[n]
                n += 1
            if len(buf) <= n + length:
                raise HeaderSizeInsufficientForExtensionError(
                    f": size {len(buf)} < {n + length}"
                )
            self.extensions.append(Extension(ext_id, buf[n:n + length]))
            n += length
        return n

    def _raw_extension_payload(self) -> bytes:
        return bytes(self.extensions[0].payload) if self.extensions else b""

    def marshal_size(self) -> int:
        """Return the size of the header once serialized."""
        size = _FIXED_HEADER_SIZE + len(self.csrc) * _CSRC_LENGTH
        if self.extension:
            ext_size = 4
            if self.extension_profile == PROFILE_ONE_BYTE:
                ext_size += sum(1 + len(e.payload) for e in self.extensions)
            elif self.extension_profile == PROFILE_TWO_BYTE:
                ext_size += sum(2 + len(e.payload) for e in self.extensions)
            else:
                ext_size += len(self._raw_extension_payload())
            size += _round4(ext_size)
        return size

    def _encode(self) -> bytearray:
        out = bytearray()
        first = ((self.version << 6) | len(self.csrc)) & 0xFF
        if self.padding:
            first |= 1 << 5
        if self.extension:
            first |= 1 << 4
        second = self.payload_type & 0xFF
        if self.marker:
            second |= 1 << 7
        out += bytes((first, second))
        out += (self.sequence_number & 0xFFFF).to_bytes(2, "big")
        out += (self.timestamp & 0xFFFFFFFF).to_bytes(4, "big")
        out += (self.ssrc & 0xFFFFFFFF).to_bytes(4, "big")
        for csrc in self.csrc:
            out += (csrc & 0xFFFFFFFF).to_bytes(4, "big")

        if self.extension:
            body = bytearray()
            if self.extension_profile == PROFILE_ONE_BYTE:
                for ext in self.extensions:
                    body.append(((ext.id << 4) | ((len(ext.payload) - 1) & 0xFF)) & 0xFF)
                    body += ext.payload
            elif self.extension_profile == PROFILE_TWO_BYTE:
                for ext in self.extensions:
                    body.append(ext.id & 0xFF)
                    body.append(len(ext.payload) & 0xFF)
                    body += ext.payload
            else:
                raw = self._raw_extension_payload()
                if len(raw) % 4:
                    raise ShortBufferError("RFC 3550 extension must be in 32-bit words")
                body += raw
            rounded = _round4(len(body))
            out += (self.extension_profile & 0xFFFF).to_bytes(2, "big")
            out += ((rounded // 4) & 0xFFFF).to_bytes(2, "big")
            out += body
            out += bytes(rounded - len(body))
        return out

    def marshal_to(self, buf: bytearray | memoryview) -> int:
        """Write the header into ``buf`` and return the number of bytes written."""
        if self.marshal_size() > len(buf):
            raise ShortBufferError()
        encoded = self._encode()
        buf[:len(encoded)] = encoded
        return len(encoded)

    def marshal(self) -> bytes:
        """Serialize the header into bytes."""
        buf = bytearray(self.marshal_size())
        n = self.marshal_to(buf)
        return bytes(buf[:n])

    def set_extension(self, ext_id: int, payload: bytes) -> None:
        """Add an extension element or replace the payload of an existing one."""
        if self.extension:
            if self.extension_profile == PROFILE_ONE_BYTE:
                if not 1 <= ext_id <= 14:
                    raise ExtensionIDRangeError(
                        f"for RFC 8285 one byte extensions (1-14) actual({ext_id})"
                    )
                if len(payload) > 16:
                    raise ExtensionSizeError(
                        f"for RFC 8285 one byte extensions actual({len(payload)})"
                    )
            elif self.extension_profile == PROFILE_TWO_BYTE:
                if not 1 <= ext_id <= 255:
                    raise ExtensionIDRangeError(
                        f"for RFC 8285 two byte extensions (1-255) actual({ext_id})"
                    )
                if len(payload) > 255:
                    raise ExtensionSizeError(
                        f"for RFC 8285 two byte extensions actual({len(payload)})"
                    )
            elif ext_id != 0:
                raise ExtensionIDRangeError(f"for RFC 3550 extensions (0) actual({ext_id})")

            for ext in self.extensions:
                if ext.id == ext_id:
                    ext.payload = payload
                    return
            self.extensions.append(Extension(ext_id, payload))
            return

        self.extension = True
        if len(payload) <= 16:
            self.extension_profile = PROFILE_ONE_BYTE
        elif len(payload) < 256:
            self.extension_profile = PROFILE_TWO_BYTE
        self.extensions.append(Extension(ext_id, payload))

    def get_extension_ids(self) -> list[int]:
        """Return the IDs of the extensions, empty when extensions are off."""
        if not self.extension:
            return []
        return [ext.id for ext in self.extensions]

    def get_extension(self, ext_id: int) -> bytes | None:
        """Return the payload of extension ``ext_id``, or None."""
        if not self.extension:
            return None
        for ext in self.extensions:
            if ext.id == ext_id:
                return ext.payload
        return None

    def del_extension(self, ext_id: int) -> None:
        """Remove extension ``ext_id``."""
        if not self.extension:
            raise HeaderExtensionsNotEnabledError()
        for index, ext in enumerate(self.extensions):
            if ext.id == ext_id:
                del self.extensions[index]
                return
        raise HeaderExtensionNotFoundError()

    def clone(self) -> Header:
        """Return a deep copy of the header."""
        return replace(
            self,
            csrc=list(self.csrc),
            extensions=[Extension(e.id, _copy_bytes(e.payload)) for e in self.extensions],
        )


@dataclass
class Packet:
    """An RTP packet: header, payload and trailing padding size."""

    header: Header = field(default_factory=Header)
    payload: bytes = b""
    padding_size: int = 0

    def __str__(self) -> str:
        h = self.header
        return (
            "RTP PACKET:\n"
            f"\tVersion: {h.version}\n"
            f"\tMarker: {'true' if h.marker else 'false'}\n"
            f"\tPayload Type: {h.payload_type}\n"
            f"\tSequence Number: {h.sequence_number}\n"
            f"\tTimestamp: {h.timestamp}\n"
            f"\tSSRC: {h.ssrc} ({h.ssrc:x})\n"
            f"\tPayload Length: {len(self.payload)}\n"
        )

    def unmarshal(self, buf: bytes) -> None:
        """Parse a whole packet from ``buf``."""
        buf = bytes(buf)
        n = self.header.unmarshal(buf)
        end = len(buf)
        if self.header.padding:
            self.padding_size = buf[end - 1]
            end -= self.padding_size
        else:
            self.padding_size = 0
        if end < n:
            raise TooSmallError()
        self.payload = buf[n:end]

    def marshal_size(self) -> int:
        """Return the size of the packet once serialized."""
        return self.header.marshal_size() + len(self.payload) + self.padding_size

    def marshal_to(self, buf: bytearray | memoryview) -> int:
        """Write the packet into ``buf`` and return the number of bytes written."""
        n = self.header.marshal_to(buf)
        total = n + len(self.payload) + self.padding_size
        if total > len(buf):
            raise ShortBufferError()
        buf[n:n + len(self.payload)] = self.payload
        if self.padding_size:
            start = n + len(self.payload)
            buf[start:total] = bytes(self.padding_size)
            if self.header.padding:
                buf[total - 1] = self.padding_size
        return total

    def marshal(self) -> bytes:
        """Serialize the packet into bytes."""
        buf = bytearray(self.marshal_size())
        n = self.marshal_to(buf)
        return bytes(buf[:n])

    def clone(self) -> Packet:
        """Return a deep copy of the packet."""
        return Packet(
            header=self.header.clone(),
            payload=_copy_bytes(self.payload),
            padding_size=self.padding_size,
        )