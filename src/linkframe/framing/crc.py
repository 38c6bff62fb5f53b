"""CRC helper functions.

The checksum is the remainder of a modulo-2 long division of the payload
bits, extended by ``GENERATOR_BITS - 1`` zero bits, by the fixed generator
polynomial.  The 15-bit remainder is packed left-aligned into two bytes and
leading all-zero bytes are trimmed, keeping at least one byte.
"""

from __future__ import annotations

import logging
from typing import Tuple

from bitarray import bitarray

from .bits import bits_from_bytes, bits_to_bytes, format_bits, new_bits

logger = logging.getLogger(__name__)

GENERATOR = 0xA6BC
GENERATOR_BITS = 16
CHECKSUM_BYTES = (GENERATOR_BITS - 1 + 7) // 8


def generator_bits() -> bitarray:
    return bits_from_bytes(GENERATOR.to_bytes(GENERATOR_BITS // 8, "big"))


def divide(dividend: bitarray) -> bitarray:
    """Return the remainder of *dividend* divided by the generator.

    The division runs on a private copy; *dividend* is left untouched.  The
    remainder is the final ``GENERATOR_BITS - 1`` bits of the working copy.
    """

    generator = generator_bits()
    width = len(generator)
    work = dividend.copy()
    for index in range(len(work) - width + 1):
        if work[index]:
            work[index : index + width] ^= generator
    return work[max(0, len(work) - (width - 1)) :]


def crc_remainder(payload: bytes) -> bytes:
    """Compute the trimmed checksum bytes for *payload*."""

    dividend = bits_from_bytes(payload)
    dividend.extend(new_bits(GENERATOR_BITS - 1))
    remainder = divide(dividend)
    logger.debug("CRC remainder: %s", format_bits(remainder))
    return bits_to_bytes(remainder).lstrip(b"\x00") or b"\x00"


def append_crc(payload: bytes) -> bytes:
    """Return ``payload`` concatenated with its trimmed checksum."""

    payload = bytes(payload)
    return payload + crc_remainder(payload)


def remainder_is_zero(blob: bytes) -> bool:
    """Divide *blob* exactly as received and test for a zero remainder."""

    return not divide(bits_from_bytes(blob)).any()


def checksum_width(blob: bytes) -> int:
    """Return how many trailing bytes of *blob* form a valid checksum.

    A checksum only loses leading zero bytes, so a checksum of full width
    never starts with a zero byte.  Each width is tried from the widest
    down, restoring the trimmed zero bytes before the remainder check.
    Returns ``0`` when no width yields a zero remainder.

    The trimmed format is ambiguous when a payload ``P`` with a zero
    remainder and a non-zero last byte is sent: ``P || 00`` is also the
    frame for ``P[:-1]`` with checksum ``P[-1] 00``.  Both readings pass,
    the widest one is returned and a warning is logged.
    """

    blob = bytes(blob)
    widths = []
    for width in range(CHECKSUM_BYTES, 0, -1):
        if len(blob) < width:
            continue
        split = len(blob) - width
        checksum = blob[split:]
        if width > 1 and checksum[0] == 0:
            continue
        restored = blob[:split] + bytes(CHECKSUM_BYTES - width) + checksum
        if remainder_is_zero(restored):
            widths.append(width)
    if not widths:
        return 0
    if len(widths) > 1:
        logger.warning(
            "Ambiguous CRC frame %s: checksum widths %s all verify; using %d",
            blob.hex(" "),
            widths,
            widths[0],
        )
    return widths[0]


def verify_crc(blob: bytes) -> Tuple[bool, bytes]:
    """Verify the checksum appended to *blob*.

    Returns a tuple ``(ok, payload_without_crc)``.  When the remainder is
    not zero the frame is unusable and the payload is ``b""``.
    """

    width = checksum_width(blob)
    if not width:
        return False, b""
    return True, bytes(blob[: len(blob) - width])


__all__ = [
    "CHECKSUM_BYTES",
    "GENERATOR",
    "GENERATOR_BITS",
    "append_crc",
    "checksum_width",
    "crc_remainder",
    "divide",
    "generator_bits",
    "remainder_is_zero",
    "verify_crc",
]
