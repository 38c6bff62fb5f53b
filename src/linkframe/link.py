"""Data link layer: chunking, framing and frame reception.

The sending side splits a payload into chunks of at most
``cfg.max_payload`` bytes, protects each chunk with the configured codec,
wraps it into a frame and hands the frame to ``transmit``.  The receiving
side accumulates bytes until a frame is complete and turns the frame back
into a payload.  Failures never raise out of :meth:`DataLink.process_frame`
or :meth:`DataLink.receive`; they come back as :class:`FrameResult` values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .framing.codec import Codec, get_codec
from .framing.config import DEFAULT_CFG, LinkCfg
from .framing.errors import FramingError
from .framing.stuffing import is_frame_complete, unwrap, wrap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameResult:
    """Outcome of processing one received frame."""

    ok: bool
    payload: bytes = b""
    error: Optional[str] = None
    mismatches: Tuple[int, ...] = ()

    def __repr__(self) -> str:
        if not self.ok:
            return f"FrameResult(dropped: {self.error})"
        fixed = f", corrected={list(self.mismatches)}" if self.mismatches else ""
        return f"FrameResult(payload={self.payload.hex(' ') or '(empty)'}{fixed})"


def chunk_payload(payload: bytes, chunk_size: int) -> List[bytes]:
    """Split *payload* into chunks of at most *chunk_size* bytes.

    An empty payload still yields one empty chunk so that it is framed and
    delivered.
    """

    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    payload = bytes(payload)
    if not payload:
        return [b""]
    return [payload[i : i + chunk_size] for i in range(0, len(payload), chunk_size)]


class DataLink:
    """One end of a framed, error-controlled byte link.

    Usage::

        link = DataLink(physical.send, cfg=LinkCfg(scheme="crc"))
        link.send(b"hello")
        for result in link.receive(incoming_bytes):
            ...
    """

    def __init__(
        self,
        transmit: Callable[[bytes], object],
        *,
        cfg: LinkCfg = DEFAULT_CFG,
        deliver: Optional[Callable[[bytes], object]] = None,
    ) -> None:
        self._transmit = transmit
        self._deliver = deliver
        self._cfg = cfg
        self._codec: Codec = get_codec(cfg.scheme)
        self._buffer = bytearray()

    @property
    def cfg(self) -> LinkCfg:
        return self._cfg

    @property
    def codec(self) -> Codec:
        return self._codec

    @property
    def pending(self) -> bytes:
        """Bytes received so far that do not yet form a complete frame."""
        return bytes(self._buffer)

    def construct_frame(self, chunk: bytes) -> bytes:
        return wrap(self._codec.encode(chunk), cfg=self._cfg)

    def send(self, payload: bytes) -> int:
        """Frame *payload* and transmit it; returns the number of frames."""
        chunks = chunk_payload(payload, self._cfg.max_payload)
        for chunk in chunks:
            frame = self.construct_frame(chunk)
            logger.debug("Sending %s frame %s", self._codec.name, frame.hex(" "))
            self._transmit(frame)
        return len(chunks)

    def is_frame_complete(self, buffer: bytes) -> bool:
        return is_frame_complete(buffer, cfg=self._cfg)

    def process_frame(self, buffer: bytes) -> FrameResult:
        """Remove the framing and error control from one complete frame."""
        try:
            body = unwrap(buffer, cfg=self._cfg)
            decoded = self._codec.decode(body)
        except FramingError as exc:
            logger.error(
                "%s frame dropped (%s): %r", self._codec.name, exc.kind, bytes(buffer)
            )
            return FrameResult(ok=False, error=exc.kind)

        return FrameResult(ok=True, payload=decoded.payload, mismatches=decoded.mismatches)

    def receive(self, data: bytes) -> List[FrameResult]:
        """Feed received bytes; returns a result for each frame completed."""
        results: List[FrameResult] = []
        for byte in bytes(data):
            self._buffer.append(byte)
            if not self.is_frame_complete(self._buffer):
                continue
            result = self.process_frame(bytes(self._buffer))
            self._buffer.clear()
            results.append(result)
            if result.ok and self._deliver is not None:
                self._deliver(result.payload)
        return results

    def reset(self) -> None:
        """Discard any partially received frame."""
        self._buffer.clear()


__all__ = ["DataLink", "FrameResult", "chunk_payload"]
