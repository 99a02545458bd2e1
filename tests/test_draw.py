import math

import pytest

from flocksim import draw
from flocksim.geometry import TextureCoordinate, TextureIndex, Vec2, Vec4

RED = Vec4(1.0, 0.0, 0.0, 1.0)


@pytest.fixture
def vb():
    return draw.VertexBuffer()


def positions(vb):
    return [v.position for v in vb.vertices]


def test_rectangle_vertices_and_indices(vb):
    a, b = Vec2(1.0, 2.0), Vec2(3.0, 5.0)
    draw.rectangle(vb, a, b, RED)
    assert positions(vb) == [a, Vec2(b.x, a.y), b, Vec2(a.x, b.y)]
    assert vb.indices == [0, 1, 2, 0, 3, 2]
    assert all(v.texture.i == TextureIndex.DISABLE for v in vb.vertices)
    assert all(v.color == RED for v in vb.vertices)


def test_texture_rectangle_maps_corners(vb):
    ta = TextureCoordinate(10, 20, TextureIndex.MONO)
    tb = TextureCoordinate(30, 40, TextureIndex.MONO)
    draw.texture_rectangle(vb, Vec2(0, 0), Vec2(1, 1), ta, tb, RED)
    tex = [(v.texture.x, v.texture.y) for v in vb.vertices]
    assert tex == [(10, 20), (30, 20), (30, 40), (10, 40)]


def test_whole_texture_starts_at_origin(vb):
    tc = TextureCoordinate(64, 32, TextureIndex.COLOR)
    draw.whole_texture(vb, tc, Vec2(0, 0), Vec2(1, 1), RED)
    assert (vb.vertices[0].texture.x, vb.vertices[0].texture.y) == (0, 0)
    assert (vb.vertices[2].texture.x, vb.vertices[2].texture.y) == (64, 32)


def test_second_draw_offsets_indices(vb):
    draw.rectangle(vb, Vec2(0, 0), Vec2(1, 1), RED)
    draw.rectangle(vb, Vec2(2, 2), Vec2(3, 3), RED)
    assert len(vb.vertices) == 8
    assert vb.indices[6:] == [4, 5, 6, 4, 7, 6]


def test_draw_indexed_rejects_bad_index(vb):
    with pytest.raises(ValueError):
        vb.draw_indexed([0, 1, 5], [draw.Vertex2(), draw.Vertex2(), draw.Vertex2()])
    assert vb.vertices == []


def test_vertex_limit_overflows():
    vb = draw.VertexBuffer(max_vertices=6)
    draw.rectangle(vb, Vec2(0, 0), Vec2(1, 1), RED)
    with pytest.raises(OverflowError):
        draw.rectangle(vb, Vec2(0, 0), Vec2(1, 1), RED)
    assert len(vb.vertices) == 4


def test_triangle_list_indices_are_sequential(vb):
    pts = [Vec2(0, 0), Vec2(1, 0), Vec2(0, 1)]
    draw.triangle_list(vb, pts, RED)
    assert vb.indices == [0, 1, 2]
    assert vb.triangles() == [tuple(pts)]


def test_triangle_strip_indices(vb):
    pts = [Vec2(i, i % 2) for i in range(5)]
    draw.triangle_strip(vb, pts, RED)
    assert len(vb.indices) == (len(pts) - 2) * 3
    assert vb.indices[:3] == [0, 1, 2]
    assert vb.indices[-3:] == [2, 3, 4]


def test_triangle_fan_shares_first_vertex(vb):
    pts = [Vec2(math.cos(i), math.sin(i)) for i in range(6)]
    draw.triangle_fan(vb, pts, RED)
    assert len(vb.indices) == (len(pts) - 2) * 3
    assert all(vb.indices[i] == 0 for i in range(0, len(vb.indices), 3))


def test_too_few_points_draw_nothing(vb):
    draw.triangle_fan(vb, [Vec2(0, 0), Vec2(1, 1)], RED)
    draw.triangle_strip(vb, [Vec2(0, 0)], RED)
    draw.line_strip(vb, 1.0, [Vec2(0, 0)], RED)
    assert vb.vertices == [] and vb.indices == []


def test_line_vertices_sit_at_thickness(vb):
    a, b = Vec2(0.0, 0.0), Vec2(3.0, 4.0)
    draw.line(vb, 0.5, a, b, RED)
    pts = positions(vb)
    assert len(pts) == 4
    for p in pts[:2]:
        assert a.distance(p) == pytest.approx(0.5)
    for p in pts[2:]:
        assert b.distance(p) == pytest.approx(0.5)


def test_circle_points_on_circle():
    center = Vec2(2.0, -1.0)
    pts = draw.circle_points(12, 3.0, center)
    assert len(pts) == 12
    assert pts[0] == Vec2(5.0, -1.0)
    for p in pts:
        assert center.distance(p) == pytest.approx(3.0)


def test_ellipse_points_on_ellipse():
    center, radius = Vec2(1.0, 1.0), Vec2(2.0, 0.5)
    pts = draw.ellipse_points(10, radius, center)
    assert len(pts) == 10
    for p in pts:
        value = ((p.x - center.x) / radius.x) ** 2 + ((p.y - center.y) / radius.y) ** 2
        assert value == pytest.approx(1.0)


def test_circle_draws_fan(vb):
    draw.circle(vb, 16, 1.0, Vec2(), RED)
    assert len(vb.vertices) == 16
    assert len(vb.indices) == 14 * 3


def test_circle_outline_alternates_radii(vb):
    center = Vec2(0.0, 0.0)
    draw.circle_outline(vb, 8, 1.0, 2.0, center, RED)
    pts = positions(vb)
    assert len(pts) == 8 * 2 + 2
    for i, p in enumerate(pts):
        assert center.distance(p) == pytest.approx(1.0 if i & 1 else 2.0)


def test_ellipse_outline_vertex_count(vb):
    draw.ellipse_outline(vb, 6, Vec2(1, 1), Vec2(2, 3), Vec2(), RED)
    assert len(vb.vertices) == 6 * 2 + 2
    assert len(vb.indices) == (len(vb.vertices) - 2) * 3


def test_rounded_rectangle_points_lie_on_corner_arcs():
    a, b, r = Vec2(0.0, 0.0), Vec2(10.0, 6.0), 1.0
    pts = draw.rounded_rectangle_points(4, r, a, b)
    assert len(pts) == 4 * 4 + 4
    corners = [Vec2(a.x + r, a.y + r), Vec2(b.x - r, a.y + r), Vec2(a.x + r, b.y - r), Vec2(b.x - r, b.y - r)]
    for p in pts:
        assert min(abs(c.distance(p) - r) for c in corners) == pytest.approx(0.0, abs=1e-5)
        assert a.x - 1e-5 <= p.x <= b.x + 1e-5
        assert a.y - 1e-5 <= p.y <= b.y + 1e-5


def test_rounded_rectangle_draws_fan(vb):
    draw.rounded_rectangle(vb, 3, 0.5, Vec2(0, 0), Vec2(4, 4), RED)
    assert len(vb.vertices) == 3 * 4 + 4
    assert all(vb.indices[i] == 0 for i in range(0, len(vb.indices), 3))


def test_rounded_rectangle_outline_accepts_swapped_corners(vb):
    other = draw.VertexBuffer()
    draw.rounded_rectangle_outline(vb, 2, 0.5, 0.2, Vec2(0, 0), Vec2(4, 4), RED)
    draw.rounded_rectangle_outline(other, 2, 0.5, 0.2, Vec2(4, 4), Vec2(0, 0), RED)
    assert len(vb.vertices) == (2 * 4 + 4) * 2 + 2
    assert positions(vb) == positions(other)


def test_rounded_line_short_becomes_circle(vb):
    draw.rounded_line(vb, 16, 1.0, Vec2(0, 0), Vec2(0.5, 0), RED)
    mid = Vec2(0.25, 0.0)
    assert len(vb.vertices) == 16
    for p in positions(vb):
        assert mid.distance(p) == pytest.approx(1.0)


def test_rounded_line_points_around_end_centers(vb):
    a, b, r = Vec2(0.0, 0.0), Vec2(10.0, 0.0), 1.0
    draw.rounded_line(vb, 16, r, a, b, RED)
    pts = positions(vb)
    assert len(pts) == 16
    c0, c1 = Vec2(a.x + r, 0.0), Vec2(b.x - r, 0.0)
    for p in pts[:8]:
        assert c0.distance(p) == pytest.approx(r)
    for p in pts[8:]:
        assert c1.distance(p) == pytest.approx(r)


def test_rounded_line_center_caps_centred_on_ends(vb):
    a, b, r = Vec2(0.0, 0.0), Vec2(0.0, 10.0), 0.5
    draw.rounded_line_center(vb, 12, r, a, b, RED)
    for p in positions(vb):
        assert min(a.distance(p), b.distance(p)) == pytest.approx(r)


def test_rounded_line_low_quality_raises(vb):
    with pytest.raises(ValueError):
        draw.rounded_line(vb, 2, 1.0, Vec2(0, 0), Vec2(10, 0), RED)


def test_line_strip_two_points_is_a_line(vb):
    other = draw.VertexBuffer()
    a, b = Vec2(0, 0), Vec2(2, 1)
    draw.line_strip(vb, 0.3, [a, b], RED)
    draw.line(other, 0.3, a, b, RED)
    assert positions(vb) == positions(other)


def test_line_strip_straight_joint(vb):
    pts = [Vec2(0.0, 0.0), Vec2(1.0, 0.0), Vec2(2.0, 0.0)]
    draw.line_strip(vb, 1.0, pts, RED)
    verts = positions(vb)
    assert len(verts) == 6
    for v, p in zip(verts, [pts[0], pts[0], pts[1], pts[1], pts[2], pts[2]]):
        assert p.distance(v) == pytest.approx(0.5)


def test_line_strip_reversal_is_bevelled(vb):
    pts = [Vec2(0.0, 0.0), Vec2(1.0, 0.0), Vec2(0.0, 0.0)]
    draw.line_strip(vb, 1.0, pts, RED)
    assert len(vb.vertices) == 8
    assert len(vb.indices) == 6 * 3