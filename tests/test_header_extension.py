import pytest

from rtpkit.errors import (
    ExtensionIDRangeError,
    ExtensionSizeError,
    HeaderExtensionNotFoundError,
    ShortBufferError,
    TooSmallError,
)
from rtpkit.header_extension import (
    OneByteHeaderExtension,
    RawExtension,
    TwoByteHeaderExtension,
)

ONE_BYTE_PADDED = bytes([
    0xBE, 0xDE, 0x00, 0x03, 0x10, 0xAA, 0x21, 0xBB,
    0xBB, 0x00, 0x00, 0x33, 0xCC, 0xCC, 0xCC, 0xCC,
])


def test_one_byte_extension_round_trip():
    raw = bytes([0xBE, 0xDE, 0x00, 0x01, 0x50, 0xAA, 0x00, 0x00, 0x98, 0x36, 0xBE, 0x88, 0x9E])
    ext = OneByteHeaderExtension()
    assert ext.unmarshal(raw) == len(raw)
    assert ext.marshal() == raw


def test_one_byte_two_extensions_of_two_bytes():
    raw = bytes([0xBE, 0xDE, 0x00, 0x01, 0x10, 0xAA, 0x20, 0xBB])
    ext = OneByteHeaderExtension()
    ext.unmarshal(raw)
    assert ext.get(1) == b"\xAA"
    assert ext.get(2) == b"\xBB"
    assert ext.marshal() == raw


def test_one_byte_multiple_extensions_with_padding():
    ext = OneByteHeaderExtension()
    ext.unmarshal(ONE_BYTE_PADDED)
    assert ext.get(1) == b"\xAA"
    assert ext.get(2) == b"\xBB\xBB"
    assert ext.get(3) == b"\xCC\xCC\xCC\xCC"
    assert ext.get_ids() == [1, 2, 3]


@pytest.mark.parametrize("fill", [0x00, 0xFF], ids=["CleanBuffer", "DirtyBuffer"])
def test_one_byte_marshal_to(fill):
    ext = OneByteHeaderExtension()
    ext.unmarshal(ONE_BYTE_PADDED)
    buf = bytearray([fill] * 1000)
    n = ext.marshal_to(buf)
    assert bytes(buf[:n]) == ONE_BYTE_PADDED


def test_marshal_to_short_buffer_raises():
    ext = OneByteHeaderExtension()
    ext.unmarshal(ONE_BYTE_PADDED)
    with pytest.raises(ShortBufferError):
        ext.marshal_to(bytearray(len(ONE_BYTE_PADDED) - 1))


def test_one_byte_get_ids_stops_at_reserved_id():
    ext = OneByteHeaderExtension()
    ext.unmarshal(bytes([0xBE, 0xDE, 0x00, 0x01, 0x10, 0xAA, 0xF0, 0xBB]))
    assert ext.get_ids() == [1]


def test_two_byte_extension_round_trip():
    raw = bytes([0x10, 0x00, 0x00, 0x07, 0x05, 0x18]) + b"\xAA" * 24 + b"\x00\x00"
    ext = TwoByteHeaderExtension()
    ext.unmarshal(raw)
    assert ext.marshal() == raw
    assert ext.get(5) == b"\xAA" * 24


def test_two_byte_multiple_extensions_with_padding():
    raw = bytes([
        0x10, 0x00, 0x00, 0x03, 0x01, 0x00, 0x02, 0x01,
        0xBB, 0x00, 0x03, 0x04, 0xCC, 0xCC, 0xCC, 0xCC,
    ])
    ext = TwoByteHeaderExtension()
    ext.unmarshal(raw)
    assert ext.get(1) == b""
    assert ext.get(2) == b"\xBB"
    assert ext.get(3) == b"\xCC\xCC\xCC\xCC"
    assert ext.get_ids() == [1, 2, 3]


def test_two_byte_multiple_extensions_with_large_extension():
    raw = bytes([0x10, 0x00, 0x00, 0x06, 0x01, 0x00, 0x02, 0x01, 0xBB, 0x03, 0x11]) + b"\xCC" * 17
    ext = TwoByteHeaderExtension()
    ext.unmarshal(raw)
    assert ext.get(1) == b""
    assert ext.get(2) == b"\xBB"
    assert ext.get(3) == b"\xCC" * 17
    assert ext.marshal() == raw


@pytest.mark.parametrize(
    "cls, empty",
    [
        (OneByteHeaderExtension, bytes([0xBE, 0xDE, 0x00, 0x00])),
        (TwoByteHeaderExtension, bytes([0x10, 0x00, 0x00, 0x00])),
    ],
)
def test_delete_extension(cls, empty):
    ext = cls()
    ext.unmarshal(empty)
    ext.set(1, b"\xBB")
    assert ext.get(1) == b"\xBB"
    ext.delete(1)
    assert ext.get(1) is None
    with pytest.raises(HeaderExtensionNotFoundError):
        ext.delete(1)


def test_one_byte_set_appends_and_counts():
    ext = OneByteHeaderExtension()
    ext.unmarshal(bytes([0xBE, 0xDE, 0x00, 0x00]))
    ext.set(1, b"\xBB")
    assert ext.marshal() == bytes([0xBE, 0xDE, 0x00, 0x01, 0x10, 0xBB])


def test_one_byte_set_updates_existing():
    ext = OneByteHeaderExtension()
    ext.unmarshal(ONE_BYTE_PADDED)
    ext.set(2, b"\x11\x22\x33")
    assert ext.get(2) == b"\x11\x22\x33"
    assert ext.get(1) == b"\xAA"
    assert ext.get(3) == b"\xCC\xCC\xCC\xCC"
    assert ext.marshal_size() == len(ONE_BYTE_PADDED) + 1


def test_two_byte_set_updates_existing():
    ext = TwoByteHeaderExtension()
    ext.unmarshal(bytes([0x10, 0x00, 0x00, 0x00]))
    ext.set(7, b"\x01")
    ext.set(9, b"\x02\x02")
    ext.set(7, b"\x05" * 20)
    assert ext.get(7) == b"\x05" * 20
    assert ext.get(9) == b"\x02\x02"
    assert ext.get_ids() == [7, 9]


@pytest.mark.parametrize("ext_id", [0, 15])
def test_one_byte_invalid_id_raises(ext_id):
    ext = OneByteHeaderExtension()
    with pytest.raises(ExtensionIDRangeError):
        ext.set(ext_id, b"\xBB")


def test_one_byte_payload_too_large_raises():
    ext = OneByteHeaderExtension()
    with pytest.raises(ExtensionSizeError):
        ext.set(1, b"\xBB" * 17)


def test_two_byte_invalid_values_raise():
    ext = TwoByteHeaderExtension()
    with pytest.raises(ExtensionIDRangeError):
        ext.set(0, b"\xBB")
    with pytest.raises(ExtensionSizeError):
        ext.set(1, b"\xBB" * 256)


def test_wrong_profile_raises():
    with pytest.raises(HeaderExtensionNotFoundError):
        OneByteHeaderExtension().unmarshal(bytes([0x10, 0x00, 0x00, 0x00]))
    with pytest.raises(HeaderExtensionNotFoundError):
        TwoByteHeaderExtension().unmarshal(bytes([0xBE, 0xDE, 0x00, 0x00]))
    with pytest.raises(HeaderExtensionNotFoundError):
        RawExtension().unmarshal(bytes([0xBE, 0xDE, 0x00, 0x00]))


def test_too_short_block_raises():
    with pytest.raises(TooSmallError):
        OneByteHeaderExtension().unmarshal(b"\xBE")


def test_raw_extension():
    ext = RawExtension()
    raw = bytes([0x00, 0x01, 0x00, 0x01, 0xFF, 0xFF, 0xFF, 0xFF])
    assert ext.unmarshal(raw) == len(raw)
    assert ext.get_ids() == [0]
    assert ext.get(0) == raw
    assert ext.get(1) is None
    assert ext.marshal() == raw
    ext.set(0, b"\x01\x02\x03\x04")
    assert ext.get(0) == b"\x01\x02\x03\x04"
    ext.delete(0)
    assert ext.get(0) is None
    assert ext.marshal_size() == 0


def test_raw_extension_non_zero_id_raises():
    ext = RawExtension()
    with pytest.raises(ExtensionIDRangeError):
        ext.set(1, b"\xBB")
    with pytest.raises(ExtensionIDRangeError):
        ext.delete(1)