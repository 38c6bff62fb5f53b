import pytest

from linkframe.framing.bits import bits_from_bytes, new_bits
from linkframe.framing.channel import flip_bits
from linkframe.framing.hamming import (
    check_bits,
    correct_bits,
    encode_bits,
    hamming_decode,
    hamming_encode,
    is_power_of_two,
    strip_parity,
)

PAYLOADS = [
    b"",
    b"A",
    bytes([0x7B, 0x7D, 0x5C]),
    b"\x00\x00",
    b"\xff" * 3,
    bytes(range(8)),
]


def test_is_power_of_two_matches_reference():
    for n in range(1, 1025):
        assert is_power_of_two(n) is (bin(n).count("1") == 1), n
    assert not is_power_of_two(0)
    assert not is_power_of_two(-4)


def test_known_codeword_for_single_byte():
    # positions 1..12: p1=1 p2=0 d=0 p4=0 d=1 d=0 d=0 p8=1 d=0 d=0 d=0 d=1
    assert hamming_encode(b"A") == b"\x89\x10"


def test_codeword_layout():
    codeword = encode_bits(bits_from_bytes(b"A"))
    assert len(codeword) == 12
    assert strip_parity(codeword) == bits_from_bytes(b"A")


def test_clean_decode_single_byte():
    assert hamming_decode(b"\x89\x10") == (b"A", [])


@pytest.mark.parametrize("payload", PAYLOADS)
def test_roundtrip_without_corruption(payload):
    decoded, mismatches = hamming_decode(hamming_encode(payload))
    assert decoded == payload
    assert mismatches == []


@pytest.mark.parametrize("payload", [p for p in PAYLOADS if p])
def test_single_flip_is_corrected(payload):
    encoded = hamming_encode(payload)
    for index in range(len(encoded) * 8):
        decoded, mismatches = hamming_decode(flip_bits(encoded, [index]))
        assert decoded == payload, index
        assert mismatches
        assert sum(mismatches) == index + 1


def test_check_bits_reports_syndrome_positions():
    codeword = encode_bits(bits_from_bytes(b"A"))
    codeword.invert(10)  # position 11 = 8 + 2 + 1
    assert check_bits(codeword) == [1, 2, 8]


def test_correct_bits_without_mismatch_is_noop():
    codeword = encode_bits(bits_from_bytes(b"A"))
    before = codeword.copy()
    assert correct_bits(codeword, []) == 0
    assert codeword == before


def test_correct_bits_grows_past_end():
    codeword = new_bits(4)
    assert correct_bits(codeword, [2, 4]) == 6
    assert codeword.to01() == "000001"


def test_parity_mismatch_is_logged(caplog):
    corrupted = flip_bits(hamming_encode(b"hi"), [5])
    with caplog.at_level("WARNING", logger="linkframe.framing.hamming"):
        decoded, mismatches = hamming_decode(corrupted)
    assert decoded == b"hi"
    assert sum(mismatches) == 6
    assert "Parity mismatch" in caplog.text
