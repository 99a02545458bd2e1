"""Bit manipulation helpers for 64-bit unsigned integers."""

U64_MASK = (1 << 64) - 1

__all__ = [
    "U64_MASK",
    "popcount",
    "is_power_of_two",
    "forward_align",
    "next_power_of_two",
    "trailing_zeros",
    "max_bit_set",
]


def _check_unsigned(value: int) -> int:
    if value < 0:
        raise ValueError(f"expected an unsigned integer, got {value}")
    return value & U64_MASK


def popcount(value: int) -> int:
    """Number of set bits in a 64-bit unsigned value."""
    return _check_unsigned(value).bit_count()


def is_power_of_two(value: int) -> bool:
    """True when ``value`` is a positive power of two."""
    return value > 0 and (value & (value - 1)) == 0


def forward_align(value: int, align: int) -> int:
    """Round ``value`` up to the next multiple of ``align`` (a power of two)."""
    if not is_power_of_two(align):
        raise ValueError("forward alignment must be a power of 2")
    value = _check_unsigned(value)
    return (value + (align - 1)) & ~(align - 1) & U64_MASK


def next_power_of_two(value: int) -> int:
    """Smallest power of two not below ``value``; zero maps to one.

    Values above 2**63 wrap to zero, as in 64-bit arithmetic.
    """
    value = _check_unsigned(value)
    if value == 0:
        return 1
    return (1 << (value - 1).bit_length()) & U64_MASK


def trailing_zeros(value: int) -> int:
    """Number of trailing zero bits; undefined for zero, so it raises."""
    value = _check_unsigned(value)
    if value == 0:
        raise ValueError("trailing zeros of zero is undefined")
    return (value & -value).bit_length() - 1


def max_bit_set(value: int) -> int:
    """Value of the highest set bit; undefined for zero, so it raises."""
    value = _check_unsigned(value)
    if value == 0:
        raise ValueError("highest set bit of zero is undefined")
    return 1 << (value.bit_length() - 1)