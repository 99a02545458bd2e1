"""SplitMix64 seeding and RomuQuad pseudo random number generation."""

from __future__ import annotations

import struct
from typing import Sequence

U64_MASK = (1 << 64) - 1
_GOLDEN_GAMMA = 0x9E3779B97F4A7C15
_MIX_A = 0xBF58476D1CE4E5B9
_MIX_B = 0x94D049BB133111EB
_ROMU_MULTIPLIER = 15241094284759029579

STATE_WORDS = 32
LANES = 8
CACHE_LINE_SIZE = 64

__all__ = [
    "SplitMix64",
    "splitmix64_hash",
    "seed_state",
    "romu_quad64",
    "compose_snorm_f32",
    "Prng",
]


def _mix(x: int) -> int:
    x ^= x >> 30
    x = (x * _MIX_A) & U64_MASK
    x ^= x >> 27
    x = (x * _MIX_B) & U64_MASK
    x ^= x >> 31
    return x


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (64 - shift))) & U64_MASK


class SplitMix64:
    """Stateful SplitMix64 generator."""

    def __init__(self, seed: int) -> None:
        self.state = seed & U64_MASK

    def next(self) -> int:
        """Advance the state and return the next 64-bit output."""
        self.state = (self.state + _GOLDEN_GAMMA) & U64_MASK
        return _mix(self.state)

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.next()


def splitmix64_hash(value: int) -> int:
    """Stateless SplitMix64: the first output of a generator seeded with ``value``."""
    return _mix((value + _GOLDEN_GAMMA) & U64_MASK)


def seed_state(seed: int, count: int) -> list[int]:
    """Fill ``count`` state words from a SplitMix64 stream seeded with ``seed``."""
    generator = SplitMix64(seed)
    return [generator.next() for _ in range(count)]


def romu_quad64(state: Sequence[int]) -> tuple[int, tuple[int, int, int, int]]:
    """One RomuQuad step: return the output and the new four-word state."""
    w, x, y, z = (word & U64_MASK for word in state)
    s0 = (_ROMU_MULTIPLIER * z) & U64_MASK
    s1 = (z + _rotl(w, 52)) & U64_MASK
    s2 = (y - x) & U64_MASK
    s3 = _rotl((y + w) & U64_MASK, 19)
    return x, (s0, s1, s2, s3)


def compose_snorm_f32(bits: int) -> float:
    """Map the low 23 bits of ``bits`` onto a float32 in [-1, 1)."""
    raw = (127 << 23) | (bits & 0x7FFFFF)
    (value,) = struct.unpack("<f", struct.pack("<I", raw))
    (result,) = struct.unpack("<f", struct.pack("<f", (value - 1.5) * 2.0))
    return result


class Prng:
    """RomuQuad generator with 32 words of state, eight interleaved lanes."""

    def __init__(self, seed: int) -> None:
        self._state = seed_state(seed, STATE_WORDS)

    @property
    def state(self) -> tuple[int, ...]:
        return tuple(self._state)

    def next_u64(self) -> int:
        value, new_state = romu_quad64(self._state[:4])
        self._state[:4] = new_state
        return value

    def next_u32(self) -> int:
        return self.next_u64() & 0xFFFFFFFF

    def next_f32(self) -> float:
        return compose_snorm_f32(self.next_u64() & 0xFFFFFFFF)

    def cache_line(self) -> bytes:
        """Step all eight lanes and return their outputs as 64 little-endian bytes."""
        outputs = []
        for lane in range(LANES):
            value, new_state = romu_quad64(self._state[lane::LANES])
            self._state[lane::LANES] = list(new_state)
            outputs.append(value)
        return struct.pack("<8Q", *outputs)

    def random_bytes(self, size: int) -> bytes:
        """Return ``size`` random bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        if size < 8:
            return self.next_u64().to_bytes(8, "little")[:size]
        if size < CACHE_LINE_SIZE:
            return self.cache_line()[:size]
        line_count, remainder = divmod(size, CACHE_LINE_SIZE)
        chunks = [self.cache_line() for _ in range(line_count)]
        if remainder:
            chunks.append(self.cache_line()[:remainder])
        return b"".join(chunks)