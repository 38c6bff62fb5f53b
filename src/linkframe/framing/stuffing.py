"""Byte-stuffed frame delimiting.

Frame layout::

    +-----------+------------------------------------+----------+
    | start tag | body, tag-valued bytes escaped     | stop tag |
    |  1 byte   | variable length                    |  1 byte  |
    +-----------+------------------------------------+----------+

Any body byte equal to the start, stop or escape tag is preceded by the
escape tag on the wire.
"""

from __future__ import annotations

import logging

from .config import DEFAULT_CFG, LinkCfg
from .errors import MissingStartTagError, MissingStopTagError

logger = logging.getLogger(__name__)


def wrap(data: bytes, *, cfg: LinkCfg = DEFAULT_CFG) -> bytes:
    """Delimit *data* with start/stop tags, escaping tag-valued bytes."""

    tags = cfg.tags
    frame = bytearray([cfg.start_tag])
    for byte in bytes(data):
        if byte in tags:
            frame.append(cfg.escape_tag)
        frame.append(byte)
    frame.append(cfg.stop_tag)
    return bytes(frame)


def is_frame_complete(buffer: bytes, *, cfg: LinkCfg = DEFAULT_CFG) -> bool:
    """Return ``True`` when *buffer* ends with an unescaped stop tag.

    Even the empty frame holds a start and a stop tag, so anything shorter
    than two bytes is incomplete.  The stop tag is escaped only when an odd
    number of escape tags runs up to it.
    """

    if len(buffer) < 2 or buffer[-1] != cfg.stop_tag:
        return False
    run = 0
    index = len(buffer) - 2
    while index >= 0 and buffer[index] == cfg.escape_tag:
        run += 1
        index -= 1
    return run % 2 == 0


def unwrap(frame: bytes, *, cfg: LinkCfg = DEFAULT_CFG) -> bytes:
    """Strip the delimiters from *frame* and undo the escaping.

    Raises:
        MissingStartTagError: If the first byte is not the start tag.
        MissingStopTagError: If no unescaped stop tag terminates the body.
    """

    if not frame or frame[0] != cfg.start_tag:
        raise MissingStartTagError("Missing start tag")

    body = bytearray()
    index = 1
    while index < len(frame):
        byte = frame[index]
        if byte == cfg.escape_tag:
            index += 1
            if index >= len(frame):
                break
            body.append(frame[index])
        elif byte == cfg.stop_tag:
            trailing = len(frame) - index - 1
            if trailing:
                logger.debug("Ignoring %d byte(s) after the stop tag", trailing)
            return bytes(body)
        else:
            body.append(byte)
        index += 1

    raise MissingStopTagError("Frame ended before an unescaped stop tag")


__all__ = ["is_frame_complete", "unwrap", "wrap"]
