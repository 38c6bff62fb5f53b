"""Single-error-correcting Hamming code over arbitrary-length bit strings.

Codeword positions are 1-indexed.  Every power-of-two position holds a
parity bit and the data bits fill the remaining positions in order.  The
parity bit at position ``p`` makes the XOR over all positions ``i`` with
``i & p`` even, so on receipt the failing parity positions add up to the
position of a single flipped bit.

Two or more flipped bits in one codeword are not detected: the syndrome
may point at an unaffected bit, which then gets flipped.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from bitarray import bitarray

from .bits import bits_from_bytes, bits_to_bytes, format_bits, new_bits, set_bit

logger = logging.getLogger(__name__)


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def parity(codeword: bitarray, position: int) -> bool:
    """Return the parity for the check bit at 1-indexed *position*.

    The XOR runs over every position above *position* that the check
    covers; the check bit itself is left out so the result can be compared
    against the stored bit.
    """

    value = False
    for i in range(position + 1, len(codeword) + 1):
        if i & position and codeword[i - 1]:
            value = not value
    return value


def encode_bits(data: bitarray) -> bitarray:
    """Interleave parity bits into *data* and fill them in."""

    codeword = new_bits()
    data_index = 0
    position = 1
    while data_index < len(data):
        if is_power_of_two(position):
            codeword.append(0)
        else:
            codeword.append(data[data_index])
            data_index += 1
        position += 1

    position = 1
    while position <= len(codeword):
        codeword[position - 1] = parity(codeword, position)
        position <<= 1
    return codeword


def check_bits(codeword: bitarray) -> List[int]:
    """Return the 1-indexed parity positions that disagree with the data."""

    mismatches: List[int] = []
    position = 1
    while position <= len(codeword):
        if parity(codeword, position) != bool(codeword[position - 1]):
            mismatches.append(position)
        position <<= 1
    return mismatches


def correct_bits(codeword: bitarray, mismatches: Iterable[int]) -> int:
    """Flip the bit the syndrome points at, in place.

    Returns the 1-indexed position that was flipped, or ``0`` when the
    mismatch set is empty.
    """

    syndrome = sum(mismatches)
    if syndrome:
        index = syndrome - 1
        current = index < len(codeword) and bool(codeword[index])
        set_bit(codeword, index, not current)
    return syndrome


def strip_parity(codeword: bitarray) -> bitarray:
    data = new_bits()
    for position in range(1, len(codeword) + 1):
        if not is_power_of_two(position):
            data.append(codeword[position - 1])
    return data


def _whole_bytes(bits: bitarray) -> bytes:
    # Zero padding of the received codeword adds at most seven data bits.
    return bits_to_bytes(bits[: len(bits) - len(bits) % 8])


def hamming_encode(payload: bytes) -> bytes:
    """Encode *payload* into a zero-padded Hamming codeword."""

    codeword = encode_bits(bits_from_bytes(payload))
    logger.debug("Hamming codeword: %s", format_bits(codeword))
    return bits_to_bytes(codeword)


def hamming_decode(blob: bytes) -> Tuple[bytes, List[int]]:
    """Decode a Hamming codeword, correcting up to one flipped bit.

    Returns ``(payload, mismatches)`` where ``mismatches`` lists the parity
    positions that failed.  A non-empty list means a correction was
    applied; the corrected payload is returned either way.
    """

    codeword = bits_from_bytes(blob)
    mismatches = check_bits(codeword)
    if mismatches:
        received = _whole_bytes(strip_parity(codeword))
        flipped = correct_bits(codeword, mismatches)
        logger.warning(
            "Parity mismatch at positions %s; corrected bit %d of %r",
            mismatches,
            flipped,
            received,
        )
    return _whole_bytes(strip_parity(codeword)), mismatches


__all__ = [
    "check_bits",
    "correct_bits",
    "encode_bits",
    "hamming_decode",
    "hamming_encode",
    "is_power_of_two",
    "parity",
    "strip_parity",
]
