"""Framed byte links with Hamming or CRC error control."""

from .exceptions import ConfigurationError, LinkFrameError
from .framing import (
    ChecksumMismatchError,
    FramingError,
    LinkCfg,
    MissingStartTagError,
    MissingStopTagError,
)
from .link import DataLink, FrameResult

__all__ = [
    "ChecksumMismatchError",
    "ConfigurationError",
    "DataLink",
    "FrameResult",
    "FramingError",
    "LinkCfg",
    "LinkFrameError",
    "MissingStartTagError",
    "MissingStopTagError",
]
