"""Fault injection for exercising the error-control schemes."""

from __future__ import annotations

import random
from typing import Callable, Iterable, List, Optional

from .bits import bits_from_bytes, bits_to_bytes
from .config import DEFAULT_CFG, LinkCfg
from .stuffing import unwrap, wrap


def flip_bits(data: bytes, positions: Iterable[int]) -> bytes:
    """Return *data* with the 0-indexed bits at *positions* inverted."""

    bits = bits_from_bytes(data)
    for position in positions:
        if not 0 <= position < len(bits):
            raise ValueError(f"bit position {position} outside {len(bits)} bits")
        bits.invert(position)
    return bits_to_bytes(bits)


def random_flips(length_bits: int, count: int, *, rng: random.Random) -> List[int]:
    """Pick *count* distinct bit positions below *length_bits*."""

    if count < 0:
        raise ValueError("count must be non-negative")
    count = min(count, length_bits)
    return sorted(rng.sample(range(length_bits), count))


class NoisyChannel:
    """A ``transmit`` callable that corrupts frame bodies before delivery.

    Each frame is unwrapped, ``flips_per_frame`` random body bits are
    inverted and the body is wrapped again, so the delimiters survive and
    only the error-control scheme is put to the test.
    """

    def __init__(
        self,
        sink: Callable[[bytes], object],
        *,
        flips_per_frame: int = 0,
        seed: Optional[int] = None,
        cfg: LinkCfg = DEFAULT_CFG,
    ) -> None:
        if flips_per_frame < 0:
            raise ValueError("flips_per_frame must be non-negative")
        self._sink = sink
        self._flips = flips_per_frame
        self._rng = random.Random(seed)
        self._cfg = cfg
        self.flipped: List[List[int]] = []

    def __call__(self, frame: bytes) -> None:
        body = unwrap(frame, cfg=self._cfg)
        positions = random_flips(len(body) * 8, self._flips, rng=self._rng)
        self.flipped.append(positions)
        self._sink(wrap(flip_bits(body, positions), cfg=self._cfg))


__all__ = ["NoisyChannel", "flip_bits", "random_flips"]
