"""RTP packets, header extensions, extension payloads and packetization."""

__version__ = "0.1.0"