"""Exception hierarchy shared by the RTP packet, header and extension code."""

from __future__ import annotations


class RTPError(Exception):
    """Base class for every error raised by this package."""

    message = "rtp error"

    def __init__(self, detail: str | None = None) -> None:
        text = self.message if detail is None else f"{self.message} {detail}"
        super().__init__(text)


class HeaderSizeInsufficientError(RTPError, ValueError):
    """The buffer is too short to hold the fixed RTP header or its CSRC list."""

    message = "RTP header size insufficient"


class HeaderSizeInsufficientForExtensionError(RTPError, ValueError):
    """The buffer is too short to hold the announced header extension."""

    message = "RTP header size insufficient for extension"


class TooSmallError(RTPError, ValueError):
    """The buffer is too small to hold the structure being parsed."""

    message = "buffer too small"


class HeaderExtensionNotFoundError(RTPError, LookupError):
    """The requested header extension does not exist or has the wrong profile."""

    message = "extension not found"


class HeaderExtensionsNotEnabledError(RTPError):
    """Header extensions are switched off on this header."""

    message = "h.Extension not enabled"


class ExtensionIDRangeError(RTPError, ValueError):
    """An extension ID lies outside the range allowed by its profile."""

    message = "header extension id out of range"


class ExtensionSizeError(RTPError, ValueError):
    """An extension payload is larger than its profile allows."""

    message = "header extension payload size out of range"


class ShortBufferError(RTPError, ValueError):
    """The destination buffer is too small for the serialized data."""

    message = "short buffer"


class PlayoutDelayInvalidValueError(RTPError, ValueError):
    """A playout delay value does not fit in 12 bits."""

    message = "invalid playout delay value"