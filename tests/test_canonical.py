import pytest

from bitflip import canonical


def test_canonicalize_wraps_to_width():
    assert canonical.canonicalize(2**256 + 5) == 5
    assert canonical.canonicalize(0x1ff, width=8) == 0xff
    assert canonical.canonicalize(0x7f, width=8) == 0x7f


def test_canonicalize_negative_is_twos_complement():
    assert canonical.canonicalize(-1) == 2**256 - 1
    assert canonical.canonicalize(-2, width=8) == 0xfe


def test_to_bytes_is_minimal():
    assert canonical.to_bytes(0x1234) == b"\x12\x34"
    assert canonical.to_bytes(0x01ff) == b"\x01\xff"
    assert canonical.to_bytes(2**256 - 1) == b"\xff" * 32


def test_zero_serializes_as_one_byte():
    assert canonical.to_bytes(0) == b"\x00"


def test_to_bytes_uses_magnitude():
    assert canonical.to_bytes(-0x12) == b"\x12"


@pytest.mark.parametrize("value", [0, 1, 0xff, 0x100, 0xdeadbeef, 2**255 + 3, 2**300 - 1])
def test_bytes_round_trip(value):
    assert canonical.from_bytes(canonical.to_bytes(value)) == value


def test_from_bytes_ignores_leading_zero_bytes():
    assert canonical.from_bytes(b"\x00\x00\xff") == 0xff
