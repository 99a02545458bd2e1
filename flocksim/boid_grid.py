"""Uniform cell grid that buckets boids by position for neighbourhood searches."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from flocksim.bits import is_power_of_two
from flocksim.geometry import Vec2

__all__ = [
    "U32_MAX",
    "S32_MAX",
    "CELL_DISTANCE_MASK64",
    "position_to_unit",
    "velocity_to_unit",
    "unit_to_position",
    "unit_to_velocity",
    "generate_cell_mask64",
    "Cell",
    "CellGrid",
]

U32_MAX = 0xFFFFFFFF
S32_MAX = 0x7FFFFFFF
_U32_RANGE = 1 << 32

CELL_DISTANCE_MASK64 = (
    1, 2, 3, 4, 5, 6, 7, 8,
    2, 2, 3, 4, 5, 6, 7, 8,
    3, 3, 3, 4, 5, 6, 7, 8,
    4, 4, 4, 5, 6, 6, 7, 8,
    5, 5, 5, 6, 6, 7, 8, 9,
    6, 6, 6, 6, 7, 8, 8, 9,
    7, 7, 7, 7, 8, 8, 9, 10,
    8, 8, 8, 8, 9, 9, 10, 10,
)


def position_to_unit(position: Sequence[int]) -> Vec2:
    """Map a fixed-point position (two unsigned 32-bit ints) onto [0, 1]."""
    x, y = position
    return Vec2(x / U32_MAX, y / U32_MAX)


def velocity_to_unit(velocity: Sequence[int]) -> Vec2:
    """Map a fixed-point velocity (two signed 32-bit ints) onto [-1, 1]."""
    x, y = velocity
    return Vec2(x / S32_MAX, y / S32_MAX)


def _to_u32(value: float) -> int:
    return int(value * _U32_RANGE) & U32_MAX


def _to_s32(value: float) -> int:
    raw = int(value * S32_MAX) & U32_MAX
    return raw - _U32_RANGE if raw > S32_MAX else raw


def unit_to_position(point: Vec2) -> tuple[int, int]:
    """Map a unit-space point back to a fixed-point position, wrapping at 2**32."""
    return (_to_u32(point.x), _to_u32(point.y))


def unit_to_velocity(point: Vec2) -> tuple[int, int]:
    """Map a unit-space velocity back to signed 32-bit fixed point."""
    return (_to_s32(point.x), _to_s32(point.y))


def generate_cell_mask64() -> list[int]:
    """Distance table over an 8x8 block of cells: floor(sqrt(x*x + y*y)) + 1."""
    return [int(math.sqrt((i & 7) ** 2 + (i >> 3) ** 2)) + 1 for i in range(64)]


@dataclass
class Cell:
    """Boids that fall into one grid cell, in unit space."""

    global_boid_offset: int = 0
    boid_count: int = 0
    positions: list = field(default_factory=list)
    velocities: list = field(default_factory=list)
    avg_pos: Vec2 = field(default_factory=Vec2)
    avg_vel: Vec2 = field(default_factory=Vec2)


def _wrapped_range(start: int, stop: int, size: int) -> Iterator[int]:
    index = start
    while index != stop:
        yield index
        index = (index + 1) % size


class CellGrid:
    """A width x height grid over the 32-bit fixed-point square."""

    def __init__(self, width: int = 256, height: int = 256, width_rsh: int = 24, height_rsh: int = 24) -> None:
        for name, size, rsh in (("width", width, width_rsh), ("height", height, height_rsh)):
            if not 0 <= rsh <= 32:
                raise ValueError(f"{name} shift must be between 0 and 32")
            if not is_power_of_two(size) or size != 1 << (32 - rsh):
                raise ValueError(f"{name} must equal 2**(32 - shift)")
        self.width = width
        self.height = height
        self.width_rsh = width_rsh
        self.height_rsh = height_rsh
        self.cells_count = width * height
        self.counters = [0] * self.cells_count
        self.cell_indices: list[tuple[int, int]] = []
        self.cells = [Cell() for _ in range(self.cells_count)]

    def cell_of(self, position: Sequence[int]) -> int:
        """Index of the cell holding a fixed-point position."""
        x, y = position
        return ((x & U32_MAX) >> self.width_rsh) + ((y & U32_MAX) >> self.height_rsh) * self.width

    def count(self, positions: Sequence[Sequence[int]]) -> list[int]:
        """Count boids per cell and record each boid's (cell, slot)."""
        self.counters = [0] * self.cells_count
        self.cell_indices = []
        for position in positions:
            cell = self.cell_of(position)
            self.cell_indices.append((cell, self.counters[cell]))
            self.counters[cell] += 1
        return list(self.counters)

    def allocate(self) -> None:
        """Size every cell from the counters and assign offsets in cell order."""
        offset = 0
        for cell, boid_count in zip(self.cells, self.counters):
            cell.boid_count = boid_count
            cell.global_boid_offset = offset
            offset += boid_count
            cell.positions = [Vec2()] * boid_count
            cell.velocities = [Vec2()] * boid_count

    def fill(self, positions: Sequence[Sequence[int]], velocities: Sequence[Sequence[int]]) -> None:
        """Copy boids into their cells, converted to unit space."""
        if len(positions) != len(self.cell_indices) or len(velocities) != len(self.cell_indices):
            raise ValueError("fill needs as many positions and velocities as were counted")
        for (cell_index, slot), position, velocity in zip(self.cell_indices, positions, velocities):
            cell = self.cells[cell_index]
            cell.positions[slot] = position_to_unit(position)
            cell.velocities[slot] = velocity_to_unit(velocity)

    def construct(self) -> None:
        """Average position and velocity per cell; empty cells average to NaN."""
        for cell in self.cells:
            if cell.boid_count == 0:
                cell.avg_pos = Vec2(math.nan, math.nan)
                cell.avg_vel = Vec2(math.nan, math.nan)
                continue
            n = float(cell.boid_count)
            cell.avg_pos = Vec2(sum(p.x for p in cell.positions) / n, sum(p.y for p in cell.positions) / n)
            cell.avg_vel = Vec2(sum(v.x for v in cell.velocities) / n, sum(v.y for v in cell.velocities) / n)

    def search_average(self, upos: Sequence[int], orig_pos: Vec2, radius: int) -> tuple[int, Vec2, Vec2]:
        """Average position and velocity of boids closer than ``radius`` to ``orig_pos``.

        Only cells with at least one corner inside the radius are searched.
        Returns ``(count, avg_pos, avg_vel)``; the averages are zero when no boid is found.
        """
        ux, uy = (v & U32_MAX for v in upos)
        x0 = ((ux - radius) & U32_MAX) >> self.width_rsh
        x1 = ((((ux + radius) & U32_MAX) >> self.width_rsh) + 1) % self.width
        y0 = ((uy - radius) & U32_MAX) >> self.height_rsh
        y1 = ((((uy + radius) & U32_MAX) >> self.height_rsh) + 1) % self.height
        r = radius / U32_MAX
        cell_w = 1.0 / self.width
        cell_h = 1.0 / self.height

        count = 0
        sum_pos = Vec2()
        sum_vel = Vec2()
        for cy in _wrapped_range(y0, y1, self.height):
            for cx in _wrapped_range(x0, x1, self.width):
                cell = self.cells[cx + cy * self.width]
                corner = position_to_unit((cx << self.width_rsh, cy << self.height_rsh))
                corners = (
                    corner,
                    Vec2(corner.x, corner.y + cell_h),
                    Vec2(corner.x + cell_w, corner.y),
                    Vec2(corner.x + cell_w, corner.y + cell_h),
                )
                if not any(orig_pos.distance(c) < r for c in corners):
                    continue
                for position, velocity in zip(cell.positions, cell.velocities):
                    if orig_pos.distance(position) < r:
                        sum_pos = sum_pos + position
                        sum_vel = sum_vel + velocity
                        count += 1
        if count:
            return count, sum_pos / float(count), sum_vel / float(count)
        return 0, Vec2(0.0, 0.0), Vec2(0.0, 0.0)