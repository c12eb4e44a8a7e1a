# Fixed-width integer canonicalization module
DEFAULT_WIDTH: int = 256


def canonicalize(value: int, width: int = DEFAULT_WIDTH) -> int:
    """Wrap value into the unsigned range [0, 2**width).
    Negative values wrap as two's complement.
    """
    return value & ((1 << width) - 1)


def to_bytes(value: int) -> bytes:
    """Minimal big-endian serialization of abs(value).
    Zero serializes as a single zero byte.
    """
    value = abs(value)
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def from_bytes(data: bytes) -> int:
    return int.from_bytes(data, "big")
