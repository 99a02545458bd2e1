"""2D vectors, affine matrices, hit tests, texture coordinates and rectangle packing."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

__all__ = [
    "Vec2",
    "Vec4",
    "Mat3",
    "lerp",
    "TextureIndex",
    "TextureCoordinate",
    "TextureRectangle",
    "Rectangle",
    "point_vs_rectangle",
    "point_vs_ellipse",
    "point_vs_rounded_rectangle",
    "texcoord_disable",
    "texcoord_not_ready",
    "RectanglePacker",
]

Number = Union[int, float]


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between ``a`` and ``b``."""
    return a + (b - a) * t


@dataclass(frozen=True)
class Vec2:
    """Immutable 2D vector. Arithmetic with a number applies it to both parts."""

    x: float = 0.0
    y: float = 0.0

    def _parts(self, other):
        if isinstance(other, Vec2):
            return other.x, other.y
        if isinstance(other, (int, float)):
            return other, other
        return None

    def __add__(self, other):
        parts = self._parts(other)
        if parts is None:
            return NotImplemented
        return Vec2(self.x + parts[0], self.y + parts[1])

    def __sub__(self, other):
        parts = self._parts(other)
        if parts is None:
            return NotImplemented
        return Vec2(self.x - parts[0], self.y - parts[1])

    def __mul__(self, other):
        parts = self._parts(other)
        if parts is None:
            return NotImplemented
        return Vec2(self.x * parts[0], self.y * parts[1])

    def __truediv__(self, other):
        parts = self._parts(other)
        if parts is None:
            return NotImplemented
        return Vec2(self.x / parts[0], self.y / parts[1])

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: "Vec2") -> float:
        return (other - self).length()

    def unit(self) -> "Vec2":
        """Vector of length one in the same direction; raises for the zero vector."""
        return self / self.length()

    def angle(self) -> float:
        """Angle of the vector in radians, measured from the x axis."""
        return math.atan2(self.y, self.x)

    def lerp(self, other: "Vec2", t: float) -> "Vec2":
        return Vec2(lerp(self.x, other.x, t), lerp(self.y, other.y, t))

    def transform(self, matrix: "Mat3") -> "Vec2":
        """Apply an affine matrix to this point."""
        m = matrix.m
        return Vec2(
            m[0] * self.x + m[1] * self.y + m[2],
            m[3] * self.x + m[4] * self.y + m[5],
        )

    def direction_to(self, other: "Vec2") -> "Vec2":
        """Unit vector pointing from this point towards ``other``."""
        return (other - self).unit()

    def normal_to(self, other: "Vec2") -> "Vec2":
        """Unit normal of the segment from this point to ``other``."""
        u = self.direction_to(other)
        return Vec2(-u.y, u.x)


@dataclass(frozen=True)
class Vec4:
    """RGBA color or any four-component value."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0


@dataclass(frozen=True)
class Mat3:
    """Row-major 3x3 matrix applied to column vectors ``(x, y, 1)``."""

    m: tuple = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0)

    def __post_init__(self) -> None:
        if len(self.m) != 9:
            raise ValueError("a 3x3 matrix needs nine elements")
        object.__setattr__(self, "m", tuple(float(v) for v in self.m))

    @staticmethod
    def identity() -> "Mat3":
        return Mat3()

    @staticmethod
    def scale(x: float, y: float) -> "Mat3":
        return Mat3((x, 0.0, 0.0, 0.0, y, 0.0, 0.0, 0.0, 1.0))

    @staticmethod
    def translate(x: float, y: float) -> "Mat3":
        return Mat3((1.0, 0.0, x, 0.0, 1.0, y, 0.0, 0.0, 1.0))

    def __matmul__(self, other):
        if not isinstance(other, Mat3):
            return NotImplemented
        a, b = self.m, other.m
        return Mat3(
            tuple(
                sum(a[row * 3 + k] * b[k * 3 + col] for k in range(3))
                for row in range(3)
                for col in range(3)
            )
        )

    def affine_inverse(self) -> "Mat3":
        """Inverse of an affine matrix; raises ValueError when it is singular."""
        a, b, c, d, e, f = self.m[:6]
        det = a * e - b * d
        if det == 0.0:
            raise ValueError("affine matrix is singular")
        ia, ib = e / det, -b / det
        id_, ie = -d / det, a / det
        return Mat3(
            (
                ia, ib, -(ia * c + ib * f),
                id_, ie, -(id_ * c + ie * f),
                0.0, 0.0, 1.0,
            )
        )

    def lerp(self, other: "Mat3", t: float) -> "Mat3":
        return Mat3(tuple(lerp(x, y, t) for x, y in zip(self.m, other.m)))


class TextureIndex(IntEnum):
    COLOR = 0
    MONO = 1
    NOT_READY = 2
    DISABLE = 3


@dataclass(frozen=True)
class TextureCoordinate:
    """Texel position packed as 15-bit x, 15-bit y and a 2-bit texture index."""

    x: int = 0
    y: int = 0
    i: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", int(self.x) & 0x7FFF)
        object.__setattr__(self, "y", int(self.y) & 0x7FFF)
        object.__setattr__(self, "i", int(self.i) & 0x3)

    @property
    def packed(self) -> int:
        return self.x | (self.y << 15) | (self.i << 30)


@dataclass(frozen=True)
class TextureRectangle:
    x0: int = 0
    y0: int = 0
    x1: int = 0
    y1: int = 0
    i: int = 0


@dataclass(frozen=True)
class Rectangle:
    """Integer rectangle given by its north, south, east and west edges."""

    n: int = 0
    s: int = 0
    e: int = 0
    w: int = 0

    def position(self) -> tuple[int, int]:
        return (self.w, self.n)

    def size(self) -> tuple[int, int]:
        return (self.e - self.w, self.s - self.n)


def point_vs_rectangle(pos: Vec2, a: Vec2, b: Vec2) -> bool:
    """True when ``pos`` lies strictly inside the box from ``a`` to ``b``."""
    return a.x < pos.x < b.x and a.y < pos.y < b.y


def point_vs_ellipse(p: Vec2, c: Vec2, r: Vec2) -> bool:
    """True when ``p`` lies strictly inside the ellipse at ``c`` with radii ``r``."""
    x = ((p.x - c.x) / r.x) ** 2
    y = ((p.y - c.y) / r.y) ** 2
    return x + y < 1.0


def point_vs_rounded_rectangle(pos: Vec2, a: Vec2, b: Vec2, radius: Vec2) -> bool:
    """True when ``pos`` lies inside the box from ``a`` to ``b`` with rounded corners."""
    if not point_vs_rectangle(pos, a, b):
        return False
    if (b.x - a.x) < radius.x * 2 or (b.y - a.y) < radius.y * 2:
        return True
    c = (a + b) * 0.5
    left = pos.x < c.x
    top = pos.y < c.y
    corner_x = a.x + radius.x if left else b.x - radius.x
    corner_y = a.y + radius.y if top else b.y - radius.y
    in_x = pos.x < corner_x if left else pos.x > corner_x
    in_y = pos.y < corner_y if top else pos.y > corner_y
    if in_x and in_y:
        return point_vs_ellipse(pos, Vec2(corner_x, corner_y), radius)
    return True


def texcoord_disable() -> TextureCoordinate:
    return TextureCoordinate(0, 0, TextureIndex.DISABLE)


def texcoord_not_ready() -> TextureCoordinate:
    return TextureCoordinate(0, 0, TextureIndex.NOT_READY)


class RectanglePacker:
    """Packs rectangles left to right in rows, starting a new row when one is full."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.horizontal_position = 0
        self.vertical_position = 0
        self.row_max_height = 0
        self.x = 0
        self.y = 0

    def pack(self, width: int, height: int) -> Rectangle:
        """Place a rectangle; an empty Rectangle means there was no room."""
        if self.horizontal_position + width > self.width:
            if self.vertical_position + height > self.height:
                return Rectangle()
            self.vertical_position += self.row_max_height
            self.horizontal_position = 0
            self.row_max_height = 0
        rect = Rectangle(
            n=self.vertical_position + self.y,
            s=self.vertical_position + height + self.y,
            w=self.horizontal_position + self.x,
            e=self.horizontal_position + width + self.x,
        )
        self.horizontal_position += width
        self.row_max_height = max(self.row_max_height, height)
        return rect