"""Error-control strategies selectable by name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from ..exceptions import ConfigurationError
from .crc import append_crc, verify_crc
from .errors import ChecksumMismatchError
from .hamming import hamming_decode, hamming_encode


@dataclass(frozen=True)
class DecodeResult:
    """Payload recovered from one frame body."""

    payload: bytes
    mismatches: Tuple[int, ...] = ()

    @property
    def corrected(self) -> bool:
        return bool(self.mismatches)


@dataclass(frozen=True)
class Codec:
    """An error-control scheme: ``encode`` adds protection, ``decode`` removes it."""

    name: str
    encode: Callable[[bytes], bytes]
    decode: Callable[[bytes], DecodeResult]


def _decode_hamming(blob: bytes) -> DecodeResult:
    payload, mismatches = hamming_decode(blob)
    return DecodeResult(payload=payload, mismatches=tuple(mismatches))


def _decode_crc(blob: bytes) -> DecodeResult:
    ok, payload = verify_crc(blob)
    if not ok:
        raise ChecksumMismatchError("CRC remainder is not zero")
    return DecodeResult(payload=payload)


HAMMING = Codec(name="hamming", encode=hamming_encode, decode=_decode_hamming)
CRC = Codec(name="crc", encode=append_crc, decode=_decode_crc)

CODECS: Dict[str, Codec] = {codec.name: codec for codec in (HAMMING, CRC)}


def get_codec(name: str) -> Codec:
    try:
        return CODECS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown scheme '{name}'. Valid: {sorted(CODECS)}"
        ) from None


__all__ = ["CODECS", "CRC", "Codec", "DecodeResult", "HAMMING", "get_codec"]
