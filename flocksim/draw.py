"""Immediate-mode 2D drawing: shapes are turned into indexed triangle lists."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from itertools import islice
from typing import Iterable, Iterator, Optional, Sequence

from flocksim.geometry import TextureCoordinate, Vec2, Vec4, texcoord_disable

__all__ = [
    "Vertex2",
    "VertexBuffer",
    "triangle_list",
    "triangle_strip",
    "triangle_fan",
    "line",
    "rounded_line",
    "rounded_line_center",
    "line_strip",
    "quad",
    "texture_quad",
    "rectangle",
    "texture_rectangle",
    "whole_texture",
    "circle_points",
    "ellipse_points",
    "rounded_rectangle_points",
    "circle",
    "circle_outline",
    "ellipse",
    "ellipse_outline",
    "rounded_rectangle",
    "rounded_rectangle_outline",
]

_TURN = 2 * 3.141592
_ARC_TURN = 2 * 3.1415926
_QUAD_INDICES = (0, 1, 2, 0, 3, 2)
_MITER_LIMIT = 16


@dataclass(frozen=True)
class Vertex2:
    """A colored, optionally textured 2D vertex."""

    color: Vec4 = field(default_factory=Vec4)
    position: Vec2 = field(default_factory=Vec2)
    texture: TextureCoordinate = field(default_factory=texcoord_disable)


class VertexBuffer:
    """Collects vertices and triangle-list indices for one frame."""

    def __init__(self, max_vertices: Optional[int] = None) -> None:
        self.max_vertices = max_vertices
        self.vertices: list[Vertex2] = []
        self.indices: list[int] = []

    def _reserve(self, count: int) -> int:
        base = len(self.vertices)
        if self.max_vertices is not None and base + count > self.max_vertices:
            raise OverflowError("vertex buffer is full")
        return base

    def draw(self, vertices: Iterable[Vertex2]) -> None:
        """Append vertices drawn in order as a triangle list."""
        vertices = list(vertices)
        base = self._reserve(len(vertices))
        self.vertices.extend(vertices)
        self.indices.extend(range(base, base + len(vertices)))

    def draw_indexed(self, indices: Iterable[int], vertices: Iterable[Vertex2]) -> None:
        """Append vertices and triangle-list indices relative to them."""
        indices = list(indices)
        vertices = list(vertices)
        for index in indices:
            if not 0 <= index < len(vertices):
                raise ValueError(f"index {index} is outside the {len(vertices)} vertices given")
        base = self._reserve(len(vertices))
        self.vertices.extend(vertices)
        self.indices.extend(base + index for index in indices)

    def clear(self) -> None:
        self.vertices.clear()
        self.indices.clear()

    def triangles(self) -> list[tuple[Vec2, Vec2, Vec2]]:
        """Positions of every triangle drawn so far."""
        positions = [self.vertices[i].position for i in self.indices]
        return [tuple(positions[i:i + 3]) for i in range(0, len(positions) - 2, 3)]


def _plain(points: Iterable[Vec2], color: Vec4) -> list[Vertex2]:
    disabled = texcoord_disable()
    return [Vertex2(color, p, disabled) for p in points]


def triangle_list(vb: VertexBuffer, points: Sequence[Vec2], color: Vec4) -> None:
    vb.draw(_plain(points, color))


def triangle_strip(vb: VertexBuffer, points: Sequence[Vec2], color: Vec4) -> None:
    """Draw a strip; fewer than three points draw nothing."""
    if len(points) < 3:
        return
    indices = [i for v in range(len(points) - 2) for i in (v, v + 1, v + 2)]
    vb.draw_indexed(indices, _plain(points, color))


def triangle_fan(vb: VertexBuffer, points: Sequence[Vec2], color: Vec4) -> None:
    """Draw a fan around the first point; fewer than three points draw nothing."""
    if len(points) < 3:
        return
    indices = [i for t in range(len(points) - 2) for i in (0, t + 1, t + 2)]
    vb.draw_indexed(indices, _plain(points, color))


def texture_quad(
    vb: VertexBuffer,
    a: Vec2, b: Vec2, c: Vec2, d: Vec2,
    ta: TextureCoordinate, tb: TextureCoordinate,
    tc: TextureCoordinate, td: TextureCoordinate,
    color: Vec4,
) -> None:
    vertices = [Vertex2(color, a, ta), Vertex2(color, b, tb), Vertex2(color, c, tc), Vertex2(color, d, td)]
    vb.draw_indexed(_QUAD_INDICES, vertices)


def quad(vb: VertexBuffer, a: Vec2, b: Vec2, c: Vec2, d: Vec2, color: Vec4) -> None:
    disabled = texcoord_disable()
    texture_quad(vb, a, b, c, d, disabled, disabled, disabled, disabled, color)


def texture_rectangle(
    vb: VertexBuffer, a: Vec2, b: Vec2, ta: TextureCoordinate, tb: TextureCoordinate, color: Vec4
) -> None:
    """Axis-aligned rectangle from corner ``a`` to ``b`` mapped onto ``ta``..``tb``."""
    vertices = [
        Vertex2(color, a, ta),
        Vertex2(color, Vec2(b.x, a.y), dataclasses.replace(ta, x=tb.x)),
        Vertex2(color, b, tb),
        Vertex2(color, Vec2(a.x, b.y), dataclasses.replace(tb, x=ta.x)),
    ]
    vb.draw_indexed(_QUAD_INDICES, vertices)


def rectangle(vb: VertexBuffer, a: Vec2, b: Vec2, color: Vec4) -> None:
    texture_rectangle(vb, a, b, texcoord_disable(), texcoord_disable(), color)


def whole_texture(vb: VertexBuffer, tc: TextureCoordinate, a: Vec2, b: Vec2, color: Vec4) -> None:
    """Rectangle showing a texture from its origin up to ``tc``."""
    texture_rectangle(vb, a, b, dataclasses.replace(tc, x=0, y=0), tc, color)


def line(vb: VertexBuffer, thickness: float, a: Vec2, b: Vec2, color: Vec4) -> None:
    """Straight segment widened by ``thickness`` on each side."""
    n = a.normal_to(b) * thickness
    quad(vb, a - n, a + n, b + n, b - n, color)


def _check_quality(quality: int) -> None:
    if quality < 1:
        raise ValueError("quality must be at least 1")


def _circle_stream(quality: int, radius: float, center: Vec2, phase: float = 0.0) -> Iterator[Vec2]:
    _check_quality(quality)
    delta = _TURN / quality
    angle = phase * delta
    while True:
        yield center + Vec2(radius * math.cos(angle), radius * math.sin(angle))
        angle += delta


def _ellipse_stream(quality: int, radius: Vec2, center: Vec2, phase: float = 0.0) -> Iterator[Vec2]:
    _check_quality(quality)
    delta = _TURN / quality
    angle = phase * delta
    while True:
        yield center + Vec2(radius.x * math.cos(angle), radius.y * math.sin(angle))
        angle += delta


def _rounded_rectangle_stream(quality: int, radius: float, a: Vec2, b: Vec2) -> Iterator[Vec2]:
    _check_quality(quality)
    a = a + radius
    b = b - radius
    steps = quality * 4
    delta = _ARC_TURN / steps
    corners = (Vec2(b.x, b.y), Vec2(a.x, b.y), Vec2(a.x, a.y), Vec2(b.x, a.y))
    angle = 0.0
    index = 0
    increment = steps // 4
    major_index = increment
    center = b
    while True:
        point = center + Vec2(math.cos(angle) * radius, math.sin(angle) * radius)
        if index == major_index:
            center = corners[(major_index // increment) & 3]
            major_index += increment
            angle -= delta
            index -= 1
        index += 1
        angle += delta
        yield point


def circle_points(quality: int, radius: float, center: Vec2) -> list[Vec2]:
    """``quality`` points evenly spaced on a circle, starting at angle zero."""
    return list(islice(_circle_stream(quality, radius, center), quality))


def ellipse_points(quality: int, radius: Vec2, center: Vec2) -> list[Vec2]:
    """``quality`` points evenly spaced in angle on an axis-aligned ellipse."""
    return list(islice(_ellipse_stream(quality, radius, center), quality))


def rounded_rectangle_points(quality: int, radius: float, a: Vec2, b: Vec2) -> list[Vec2]:
    """Outline of a rounded rectangle with ``quality`` arc steps per corner."""
    return list(islice(_rounded_rectangle_stream(quality, radius, a, b), quality * 4 + 4))


def circle(vb: VertexBuffer, quality: int, radius: float, center: Vec2, color: Vec4) -> None:
    triangle_fan(vb, circle_points(quality, radius, center), color)


def _interleave(even: Iterator[Vec2], odd: Iterator[Vec2], count: int) -> list[Vec2]:
    return [next(odd) if i & 1 else next(even) for i in range(count)]


def circle_outline(
    vb: VertexBuffer, quality: int, inner_radius: float, outer_radius: float, center: Vec2, color: Vec4
) -> None:
    outer = _circle_stream(quality, outer_radius, center)
    inner = _circle_stream(quality, inner_radius, center, phase=0.5)
    triangle_strip(vb, _interleave(outer, inner, quality * 2 + 2), color)


def ellipse(vb: VertexBuffer, quality: int, radius: Vec2, center: Vec2, color: Vec4) -> None:
    triangle_fan(vb, ellipse_points(quality, radius, center), color)


def ellipse_outline(
    vb: VertexBuffer, quality: int, inner_radius: Vec2, outer_radius: Vec2, center: Vec2, color: Vec4
) -> None:
    outer = _ellipse_stream(quality, outer_radius, center)
    inner = _ellipse_stream(quality, inner_radius, center, phase=0.5)
    triangle_strip(vb, _interleave(outer, inner, quality * 2 + 2), color)


def rounded_rectangle(vb: VertexBuffer, quality: int, radius: float, a: Vec2, b: Vec2, color: Vec4) -> None:
    triangle_fan(vb, rounded_rectangle_points(quality, radius, a, b), color)


def rounded_rectangle_outline(
    vb: VertexBuffer, quality: int, radius: float, thickness: float, a: Vec2, b: Vec2, color: Vec4
) -> None:
    lo = Vec2(min(a.x, b.x), min(a.y, b.y))
    hi = Vec2(max(a.x, b.x), max(a.y, b.y))
    inner = _rounded_rectangle_stream(quality, radius, lo, hi)
    outer = _rounded_rectangle_stream(quality, radius + thickness / 2, lo - thickness, hi + thickness)
    count = (quality * 4 + 4) * 2 + 2
    triangle_strip(vb, _interleave(inner, outer, count), color)


def rounded_line(vb: VertexBuffer, quality: int, radius: float, a: Vec2, b: Vec2, color: Vec4) -> None:
    """Capsule whose rounded ends touch ``a`` and ``b``; short lines become a circle."""
    half = quality >> 1
    if a.distance(b) < radius * 2:
        circle(vb, half << 1, radius, (a + b) * 0.5, color)
        return
    if half < 2:
        raise ValueError("quality must be at least 4")
    steps = half - 1
    n = a.normal_to(b)
    u = a.direction_to(b)
    dr = _ARC_TURN / (steps * 2)
    centers = (a + u * radius, b - u * radius)
    points = []
    r = n.angle()
    for center in centers:
        for _ in range(steps + 1):
            points.append(center + Vec2(math.cos(r), math.sin(r)) * radius)
            r += dr
        r -= dr
    triangle_fan(vb, points, color)


def rounded_line_center(vb: VertexBuffer, quality: int, radius: float, a: Vec2, b: Vec2, color: Vec4) -> None:
    """Capsule whose rounded ends are centred on ``a`` and ``b``."""
    u = a.direction_to(b) * radius
    rounded_line(vb, quality, radius, a - u, b + u, color)


def line_strip(vb: VertexBuffer, thickness: float, points: Sequence[Vec2], color: Vec4) -> None:
    """Connected segments with mitred joints, bevelled where the miter is too long."""
    count = len(points)
    if count < 2:
        return
    if count == 2:
        line(vb, thickness, points[0], points[1], color)
        return
    half = thickness * 0.5
    vertices = []
    normal = points[0].normal_to(points[1])
    vertices += [points[0] + normal * half, points[0] - normal * half]
    for prev, here, nxt in zip(points, points[1:], points[2:]):
        n1 = prev.normal_to(here)
        n2 = here.normal_to(nxt)
        total = n1 + n2
        miter_thickness = math.inf
        if total.length() > 0.0:
            miter = total.unit()
            cos = abs(miter.dot(n1))
            if cos > 0.0:
                miter_thickness = half / cos
        if miter_thickness < half * _MITER_LIMIT:
            vertices += [here + miter * miter_thickness, here - miter * miter_thickness]
        else:
            vertices += [here + n1 * half, here - n1 * half, here + n2 * half, here - n2 * half]
    normal = points[-2].normal_to(points[-1])
    vertices += [points[-1] + normal * half, points[-1] - normal * half]
    triangle_strip(vb, vertices, color)