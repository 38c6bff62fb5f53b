"""Framing and error-control codecs for the data link layer."""

from .errors import (
    ChecksumMismatchError,
    FramingError,
    MissingStartTagError,
    MissingStopTagError,
)
from .config import (
    DEFAULT_CFG,
    ESCAPE_TAG,
    MAX_PAYLOAD,
    START_TAG,
    STOP_TAG,
    LinkCfg,
    load_config,
)
from .stuffing import is_frame_complete, unwrap, wrap
from .hamming import hamming_decode, hamming_encode
from .crc import GENERATOR, append_crc, verify_crc
from .codec import CODECS, CRC, HAMMING, Codec, DecodeResult, get_codec

__all__ = [
    "CODECS",
    "CRC",
    "ChecksumMismatchError",
    "Codec",
    "DEFAULT_CFG",
    "DecodeResult",
    "ESCAPE_TAG",
    "FramingError",
    "GENERATOR",
    "HAMMING",
    "LinkCfg",
    "MAX_PAYLOAD",
    "MissingStartTagError",
    "MissingStopTagError",
    "START_TAG",
    "STOP_TAG",
    "append_crc",
    "get_codec",
    "hamming_decode",
    "hamming_encode",
    "is_frame_complete",
    "load_config",
    "unwrap",
    "verify_crc",
    "wrap",
]
