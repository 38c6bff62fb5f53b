"""Tests for the data link send and receive paths."""

from __future__ import annotations

import pytest

from linkframe import DataLink, FrameResult, LinkCfg
from linkframe.framing import wrap
from linkframe.framing.channel import NoisyChannel, flip_bits
from linkframe.link import chunk_payload

SCHEMES = ["hamming", "crc"]


def _loopback(scheme: str, **kwargs):
    cfg = LinkCfg(scheme=scheme, **kwargs)
    frames: list[bytes] = []
    sender = DataLink(frames.append, cfg=cfg)
    receiver = DataLink(lambda frame: None, cfg=cfg)
    return sender, receiver, frames


def test_chunk_payload():
    assert chunk_payload(b"", 8) == [b""]
    assert chunk_payload(bytes(17), 8) == [bytes(8), bytes(8), bytes(1)]
    with pytest.raises(ValueError):
        chunk_payload(b"abc", 0)


def test_send_chunks_by_max_payload():
    sender, _, frames = _loopback("crc")
    assert sender.send(bytes(range(17))) == 3
    assert len(frames) == 3


def test_empty_payload_still_sends_a_frame():
    sender, _, frames = _loopback("hamming")
    assert sender.send(b"") == 1
    assert frames == [b"{}"]

    sender, _, frames = _loopback("crc")
    sender.send(b"")
    assert frames == [b"{\x00}"]


@pytest.mark.parametrize("scheme", SCHEMES)
def test_empty_payload_full_path(scheme):
    sender, receiver, frames = _loopback(scheme)
    sender.send(b"")
    results = receiver.receive(b"".join(frames))
    assert results == [FrameResult(ok=True, payload=b"")]


@pytest.mark.parametrize("scheme", SCHEMES)
@pytest.mark.parametrize(
    "payload",
    [b"A", bytes([0x7B, 0x7D, 0x5C]) * 5, bytes(range(256)), b"hello, data link layer"],
)
def test_full_path_roundtrip(scheme, payload):
    sender, receiver, frames = _loopback(scheme)
    sender.send(payload)
    results = receiver.receive(b"".join(frames))
    assert all(result.ok for result in results)
    assert b"".join(result.payload for result in results) == payload
    assert receiver.pending == b""


@pytest.mark.parametrize("scheme", SCHEMES)
def test_receive_across_split_deliveries(scheme):
    sender, receiver, frames = _loopback(scheme)
    sender.send(b"split me across many reads")
    stream = b"".join(frames)

    results = []
    for i in range(0, len(stream), 3):
        results.extend(receiver.receive(stream[i : i + 3]))
    assert b"".join(r.payload for r in results) == b"split me across many reads"


def test_deliver_callback():
    delivered: list[bytes] = []
    cfg = LinkCfg(scheme="crc")
    frames: list[bytes] = []
    DataLink(frames.append, cfg=cfg).send(b"0123456789")
    receiver = DataLink(lambda frame: None, cfg=cfg, deliver=delivered.append)
    receiver.receive(b"".join(frames))
    assert delivered == [b"01234567", b"89"]


def test_process_frame_missing_start_tag():
    receiver = DataLink(lambda frame: None)
    result = receiver.process_frame(b"AB}")
    assert result == FrameResult(ok=False, error="missing-start-tag")
    assert receiver.process_frame(b"").error == "missing-start-tag"


def test_receive_garbage_before_frame_drops_it():
    receiver = DataLink(lambda frame: None)
    results = receiver.receive(b"xx}")
    assert [r.error for r in results] == ["missing-start-tag"]
    assert receiver.pending == b""


def test_crc_corruption_drops_frame(caplog):
    sender, receiver, frames = _loopback("crc")
    sender.send(b"A")
    body = b"A\x6b\xe8"
    assert frames == [wrap(body)]

    with caplog.at_level("ERROR", logger="linkframe.link"):
        results = receiver.receive(wrap(flip_bits(body, [3])))
    assert results == [FrameResult(ok=False, error="checksum-mismatch")]
    assert "checksum-mismatch" in caplog.text


def test_hamming_corrects_one_flip_per_frame():
    cfg = LinkCfg(scheme="hamming")
    results: list[FrameResult] = []
    receiver = DataLink(lambda frame: None, cfg=cfg)
    channel = NoisyChannel(
        lambda frame: results.extend(receiver.receive(frame)),
        flips_per_frame=1,
        seed=42,
    )
    payload = b"noisy channel, clean payload"
    DataLink(channel, cfg=cfg).send(payload)

    assert b"".join(r.payload for r in results) == payload
    for result, flipped in zip(results, channel.flipped):
        assert result.ok
        assert sum(result.mismatches) == flipped[0] + 1


def test_is_frame_complete_uses_configured_tags():
    cfg = LinkCfg(start_tag=0x02, stop_tag=0x03, escape_tag=0x10)
    link = DataLink(lambda frame: None, cfg=cfg)
    assert link.is_frame_complete(b"\x02A\x03")
    assert not link.is_frame_complete(b"\x02A\x10\x03")
    assert not link.is_frame_complete(b"{A}")


def test_custom_tags_roundtrip():
    cfg = LinkCfg(scheme="crc", start_tag=0x02, stop_tag=0x03, escape_tag=0x10)
    frames: list[bytes] = []
    DataLink(frames.append, cfg=cfg).send(b"\x02\x03\x10{}\\")
    receiver = DataLink(lambda frame: None, cfg=cfg)
    results = receiver.receive(b"".join(frames))
    assert b"".join(r.payload for r in results) == b"\x02\x03\x10{}\\"


def test_frame_result_repr():
    assert "dropped" in repr(FrameResult(ok=False, error="checksum-mismatch"))
    assert "corrected=[1, 2]" in repr(FrameResult(ok=True, payload=b"A", mismatches=(1, 2)))
    assert "(empty)" in repr(FrameResult(ok=True))
