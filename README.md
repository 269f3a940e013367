# rtpkit

A small library with no third-party dependencies for working with RTP
(Real-time Transport Protocol) packets:

- parse and build RTP headers and packets (`rtpkit.packet.Header`,
  `rtpkit.packet.Packet`), including CSRC lists, padding and header
  extensions (`rtpkit.packet.Extension`);
- RFC 8285 one-byte and two-byte header extension blocks and RFC 3550 raw
  extensions as standalone buffers
  (`rtpkit.header_extension.OneByteHeaderExtension`,
  `TwoByteHeaderExtension`, `RawExtension`);
- common extension payloads: transport-wide congestion control sequence
  numbers (`rtpkit.transport_cc.TransportCCExtension`), playout delay
  (`rtpkit.playout_delay.PlayoutDelayExtension`) and video layers
  allocation (`rtpkit.vla.VLA` with `rtpkit.vla.SpatialLayer`);
- packetization of media frames into RTP packets with sequence numbering
  and timestamps (`rtpkit.packetizer.Packetizer`,
  `rtpkit.sequencer.Sequencer`, `random_sequencer()`, `fixed_sequencer()`);
- LEB128 helpers (`rtpkit.leb128.write_leb128`, `read_leb128`,
  `encode_leb128`) and the static payload type table
  (`rtpkit.payload_types.PayloadType`, `is_dynamic_payload_type()`).

## Installation

```
pip install rtpkit
```

Python 3.10 or later is required.

## Parsing and building packets

A `Packet` holds a `Header` in its `header` field, the `payload` bytes and
the `padding_size`:

```python
from rtpkit.packet import Packet

raw = bytes.fromhex("80e0698fd9c293da1c642782" "9836be889e")
packet = Packet()
packet.unmarshal(raw)
print(packet.header.sequence_number, packet.header.timestamp, packet.payload)

assert packet.marshal() == raw
```

Header extensions are set, read and removed by id on the header. Setting
the first extension switches extensions on and picks the one-byte profile
for payloads of up to 16 bytes, the two-byte profile for longer ones:

```python
header = packet.header
header.set_extension(1, b"\xaa\xbb")
assert header.get_extension(1) == b"\xaa\xbb"
assert header.get_extension_ids() == [1]
header.del_extension(1)
```

`marshal_to(buf)` writes into a caller-supplied `bytearray` and returns the
number of bytes written; `marshal_size()` tells how large it must be.
`clone()` returns a deep copy.

Errors are raised as exceptions derived from `rtpkit.errors.RTPError`, for
example `HeaderSizeInsufficientError` for truncated input,
`TooSmallError` for excessive padding and `ShortBufferError` for a
destination buffer that is too small.

## Extension payloads

```python
from rtpkit.transport_cc import TransportCCExtension
from rtpkit.playout_delay import PlayoutDelayExtension

assert TransportCCExtension(transport_sequence=2).marshal() == b"\x00\x02"

delay = PlayoutDelayExtension()
delay.unmarshal(b"\x01\x01\x00")
assert (delay.min_delay, delay.max_delay) == (16, 256)
```

`VLA.marshal()` and `VLA.unmarshal()` encode and decode a video layers
allocation; invalid values raise subclasses of `rtpkit.vla.VLAError`.

## Packetizing

A packetizer splits a frame with a payloader (any object with a
`payload(mtu, payload)` method returning a list of chunks) and stamps each
piece with sequence number, timestamp and SSRC. The last packet of a frame
carries the marker bit; the timestamp starts at a random value and
advances by the number of samples given:

```python
from rtpkit.packetizer import Packetizer
from rtpkit.sequencer import fixed_sequencer


class ChunkPayloader:
    def payload(self, mtu, payload):
        return [payload[i:i + mtu] for i in range(0, len(payload), mtu)]


packetizer = Packetizer(1200, 96, 0x1234ABCD, ChunkPayloader(), fixed_sequencer(1), 90000)
packets = packetizer.packetize(b"\x00" * 3000, 3000)
assert [p.header.sequence_number for p in packets] == [1, 2, 3]
```

`generate_padding(n)` returns `n` padding-only packets and
`skip_samples(n)` leaves a gap in later timestamps.

## What is not included

The package contains no codec payloaders: you supply the object that cuts
frames into chunks. It does not send or receive packets over the network,
and the packetizer does not add absolute send time extensions.

## Running the tests

```
pip install "rtpkit[test]"
pytest
```