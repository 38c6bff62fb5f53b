"""Exception types for the framing subsystem."""

from __future__ import annotations

from ..exceptions import LinkFrameError


class FramingError(LinkFrameError):
    """Base class for framing related errors."""

    kind = "framing-error"


class MissingStartTagError(FramingError):
    """Raised when a frame does not begin with the start tag."""

    kind = "missing-start-tag"


class MissingStopTagError(FramingError):
    """Raised when a frame ends before an unescaped stop tag."""

    kind = "missing-stop-tag"


class ChecksumMismatchError(FramingError):
    """Raised when the CRC remainder of a received frame is not zero."""

    kind = "checksum-mismatch"
