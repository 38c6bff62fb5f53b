"""Bit buffer helpers built on :mod:`bitarray`.

Every buffer uses big-endian bit order: index ``0`` is the most significant
bit of the first byte.  Converting back to bytes yields the smallest byte
string that holds every bit, with the final partial byte padded by zero
bits.  Encoders and decoders must agree on this convention, so buffers are
only ever created through :func:`new_bits` and :func:`bits_from_bytes`.
"""

from __future__ import annotations

from bitarray import bitarray

BIT_ORDER = "big"


def new_bits(length: int = 0) -> bitarray:
    """Return a zero-filled buffer of *length* bits."""

    bits = bitarray(length, endian=BIT_ORDER)
    bits.setall(0)
    return bits


def bits_from_bytes(data: bytes) -> bitarray:
    """Return the bits of *data* in big-endian order."""

    bits = bitarray(endian=BIT_ORDER)
    bits.frombytes(bytes(data))
    return bits


def bits_to_bytes(bits: bitarray) -> bytes:
    """Pack *bits* into bytes, zero padding the final byte."""

    return bits.tobytes()


def get_bit(bits: bitarray, index: int) -> bool:
    """Read bit *index*; indices past the end read as ``False``."""

    if index < 0:
        raise IndexError(f"bit index must be non-negative, got {index}")
    return index < len(bits) and bool(bits[index])


def set_bit(bits: bitarray, index: int, value: bool) -> None:
    """Write bit *index*, growing *bits* with zeros when needed."""

    if index < 0:
        raise IndexError(f"bit index must be non-negative, got {index}")
    if index >= len(bits):
        bits.extend(new_bits(index + 1 - len(bits)))
    bits[index] = bool(value)


def format_bits(bits: bitarray) -> str:
    """Render *bits* as ``0``/``1`` characters in groups of four."""

    text = bits.to01()
    return " ".join(text[i : i + 4] for i in range(0, len(text), 4))


__all__ = [
    "BIT_ORDER",
    "bits_from_bytes",
    "bits_to_bytes",
    "format_bits",
    "get_bit",
    "new_bits",
    "set_bit",
]
