"""The Video Layers Allocation (VLA) RTP header extension."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import RTPError
from .leb128 import read_leb128, write_leb128

_MAX_STREAMS = 4
_MAX_SPATIAL = 4
_MAX_TEMPORAL = 4
_RESOLUTION_SIZE = 5


class VLAError(RTPError, ValueError):
    """Base class for VLA encoding and decoding errors."""

    message = "VLA error"


class VLATooShortError(VLAError):
    """The VLA payload ended early."""

    message = "VLA payload too short"


class VLAInvalidStreamCountError(VLAError):
    """The RTP stream count is outside 1..4."""

    message = "invalid RTP stream count in VLA"


class VLAInvalidStreamIDError(VLAError):
    """An RTP stream ID is outside the stream count."""

    message = "invalid RTP stream ID in VLA"


class VLAInvalidSpatialIDError(VLAError):
    """A spatial ID is outside 0..3."""

    message = "invalid spatial ID in VLA"


class VLADuplicateSpatialIDError(VLAError):
    """Two layers share the same stream and spatial ID."""

    message = "duplicate spatial ID in VLA"


class VLAInvalidTemporalLayerError(VLAError):
    """A layer has no temporal layers or more than four."""

    message = "invalid temporal layer in VLA"


@dataclass
class SpatialLayer:
    """One active spatial layer; width, height and framerate are optional."""

    rtp_stream_id: int = 0
    spatial_id: int = 0
    target_bitrates: list[int] = field(default_factory=list)
    width: int = 0
    height: int = 0
    framerate: int = 0


def _common_bitmask(bitmasks: list[int]) -> int:
    common = 0
    for mask in bitmasks:
        if mask == 0:
            continue
        if common == 0:
            common = mask
        elif mask != common:
            return 0
    return common


class _Reader:
    def __init__(self, payload: bytes) -> None:
        self.payload = bytes(payload)
        self.offset = 0

    def require(self, length: int) -> None:
        if len(self.payload) - self.offset < length:
            raise VLATooShortError(f"(offset={self.offset})")


@dataclass
class VLA:
    """A video layers allocation: the sending stream and every active layer."""

    rtp_stream_id: int = 0
    rtp_stream_count: int = 0
    active_spatial_layer: list[SpatialLayer] = field(default_factory=list)
    has_resolution_and_framerate: bool = False

    def _layer_table(self) -> tuple[list[int], dict[tuple[int, int], SpatialLayer]]:
        if not 0 < self.rtp_stream_count <= _MAX_STREAMS:
            raise VLAInvalidStreamCountError()
        if not 0 <= self.rtp_stream_id < self.rtp_stream_count:
            raise VLAInvalidStreamIDError()
        bitmasks = [0] * _MAX_STREAMS
        layers: dict[tuple[int, int], SpatialLayer] = {}
        for layer in self.active_spatial_layer:
            if not 0 <= layer.rtp_stream_id < self.rtp_stream_count:
                raise VLAInvalidStreamIDError(f"{layer.rtp_stream_id}")
            if not 0 <= layer.spatial_id < _MAX_SPATIAL:
                raise VLAInvalidSpatialIDError(f"{layer.spatial_id}")
            if not 0 < len(layer.target_bitrates) <= _MAX_TEMPORAL:
                raise VLAInvalidTemporalLayerError(f"count {len(layer.target_bitrates)}")
            key = (layer.rtp_stream_id, layer.spatial_id)
            if key in layers:
                raise VLADuplicateSpatialIDError()
            bitmasks[layer.rtp_stream_id] |= 1 << layer.spatial_id
            layers[key] = layer
        return bitmasks, layers

    def marshal(self) -> bytes:
        """Encode the allocation into the extension payload."""
        bitmasks, layers = self._layer_table()
        common = _common_bitmask(bitmasks)
        ordered = [layers[key] for key in sorted(layers)]

        out = bytearray()
        out.append(
            ((self.rtp_stream_id << 6) | ((self.rtp_stream_count - 1) << 4) | common) & 0xFF
        )
        if common == 0:
            masks = bytearray((self.rtp_stream_count - 1) // 2 + 1)
            for stream_id in range(self.rtp_stream_count):
                shift = 4 if stream_id % 2 == 0 else 0
                masks[stream_id // 2] |= bitmasks[stream_id] << shift
            out += masks

        tl_bytes = bytearray((len(ordered) - 1) // 4 + 1 if ordered else 1)
        for index, layer in enumerate(ordered):
            tl_bytes[index // 4] |= (len(layer.target_bitrates) - 1) << (2 * (3 - index % 4))
        out += tl_bytes

        for layer in ordered:
            for kbps in layer.target_bitrates:
                out += write_leb128(kbps)

        if self.has_resolution_and_framerate:
            for layer in self.active_spatial_layer:
                out += ((layer.width - 1) & 0xFFFF).to_bytes(2, "big")
                out += ((layer.height - 1) & 0xFFFF).to_bytes(2, "big")
                out.append(layer.framerate & 0xFF)
        return bytes(out)

    def _read_spatial_layers(self, reader: _Reader) -> list[int]:
        reader.require(1)
        first = reader.payload[reader.offset]
        self.rtp_stream_id = (first >> 6) & 0b11
        self.rtp_stream_count = ((first >> 4) & 0b11) + 1
        shared = first & 0b1111
        reader.offset += 1
        if shared:
            return [shared] * self.rtp_stream_count
        size = (self.rtp_stream_count - 1) // 2 + 1
        reader.require(size)
        bitmasks = []
        for stream_id in range(self.rtp_stream_count):
            byte = reader.payload[reader.offset + stream_id // 2]
            bitmasks.append((byte >> 4) & 0b1111 if stream_id % 2 == 0 else byte & 0b1111)
        reader.offset += size
        return bitmasks

    def _read_temporal_layers(self, reader: _Reader, bitmasks: list[int]) -> None:
        reader.require(1)
        index = 0
        for stream_id, mask in enumerate(bitmasks):
            for spatial_id in range(_MAX_SPATIAL):
                if not mask & (1 << spatial_id):
                    continue
                if index >= 4:
                    index = 0
                    reader.offset += 1
                    reader.require(1)
                count = ((reader.payload[reader.offset] >> (2 * (3 - index))) & 0b11) + 1
                index += 1
                self.active_spatial_layer.append(
                    SpatialLayer(
                        rtp_stream_id=stream_id,
                        spatial_id=spatial_id,
                        target_bitrates=[0] * count,
                    )
                )
        reader.offset += 1

        for layer in self.active_spatial_layer:
            for slot in range(len(layer.target_bitrates)):
                kbps, used = read_leb128(reader.payload[reader.offset:])
                reader.require(used)
                layer.target_bitrates[slot] = kbps
                reader.offset += used

    def _read_resolution_and_framerate(self, reader: _Reader) -> None:
        reader.require(len(self.active_spatial_layer) * _RESOLUTION_SIZE)
        self.has_resolution_and_framerate = True
        data = reader.payload
        for layer in self.active_spatial_layer:
            start = reader.offset
            layer.width = int.from_bytes(data[start:start + 2], "big") + 1
            layer.height = int.from_bytes(data[start + 2:start + 4], "big") + 1
            layer.framerate = data[start + 4]
            reader.offset += _RESOLUTION_SIZE

    def unmarshal(self, payload: bytes) -> int:
        """Decode the allocation from ``payload``; return the bytes consumed."""
        self.active_spatial_layer = []
        self.has_resolution_and_framerate = False
        reader = _Reader(payload)
        bitmasks = self._read_spatial_layers(reader)
        self._read_temporal_layers(reader, bitmasks)
        if reader.offset == len(reader.payload):
            return reader.offset
        self._read_resolution_and_framerate(reader)
        return reader.offset

    def __str__(self) -> str:
        parts = []
        for layer in self.active_spatial_layer:
            bitrates = " ".join(str(kbps) for kbps in layer.target_bitrates)
            text = f"RTPStreamID:{layer.rtp_stream_id},TargetBitrates:[{bitrates}]"
            if self.has_resolution_and_framerate:
                text += f",Resolution:({layer.width},{layer.height})"
                text += f",Framerate:{layer.framerate}"
            parts.append(text)
        return (
            f"RID:{self.rtp_stream_id},RTPStreamCount:{self.rtp_stream_count}"
            f",ActiveSpatialLayers:{{{','.join(parts)}}}"
        )