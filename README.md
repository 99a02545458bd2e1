# flocksim

Building blocks for a boid flocking simulation, written in plain Python
with no dependencies. Boids live on a wrapping fixed-point plane. Positions
are pairs of unsigned 32-bit integers and velocities are pairs of signed
32-bit integers. A uniform cell grid buckets them so that neighbour
searches only look at nearby cells.

## Modules

- `flocksim.bits`: 64-bit helpers `popcount`, `is_power_of_two`,
  `forward_align`, `next_power_of_two`, `trailing_zeros` and `max_bit_set`.
  Negative inputs raise `ValueError`. `trailing_zeros(0)` and
  `max_bit_set(0)` also raise `ValueError`.
- `flocksim.rng`: the `SplitMix64` generator (it can be iterated),
  `splitmix64_hash`, `seed_state`, one `romu_quad64` step,
  `compose_snorm_f32`, and `Prng`, a RomuQuad generator with 32 words of
  state in eight lanes.
- `flocksim.geometry`: the immutable `Vec2`, `Vec4` and `Mat3` types, the
  `lerp` function, point hit tests (`point_vs_rectangle`,
  `point_vs_ellipse`, `point_vs_rounded_rectangle`), texture coordinate
  types, `Rectangle`, and `RectanglePacker`, a row-by-row atlas packer.
- `flocksim.draw`: immediate-mode builders that turn shapes into indexed
  triangles inside a `VertexBuffer`. They cover triangle lists, strips and
  fans, lines, rounded lines, mitred line strips, quads, rectangles,
  circles, ellipses and rounded rectangles, each with outline variants.
- `flocksim.boid_grid`: conversions between fixed point and unit space,
  and `CellGrid`, which counts, allocates, fills and averages cells and
  answers radius searches.

## Installation

```
pip install .
```

## Random numbers

```python
from flocksim.rng import Prng, SplitMix64, splitmix64_hash

rng = Prng(1234)
rng.next_u64()          # 64-bit integer
rng.next_u32()          # low 32 bits of the next output
rng.next_f32()          # float32 value in [-1.0, 1.0)
rng.cache_line()        # 64 bytes, one output from each of the eight lanes
rng.random_bytes(100)   # 100 random bytes

gen = SplitMix64(42)
first = gen.next()
assert first == splitmix64_hash(42)
```

The same seed always gives the same sequence.

## Geometry

```python
from flocksim.geometry import Mat3, Vec2, RectanglePacker, point_vs_rounded_rectangle

m = Mat3.scale(2.0, 2.0) @ Mat3.translate(1.0, 0.0)
p = Vec2(1.0, 1.0).transform(m)              # Vec2(4.0, 2.0)
back = p.transform(m.affine_inverse())       # Vec2(1.0, 1.0)

point_vs_rounded_rectangle(Vec2(0.5, 0.5), Vec2(0, 0), Vec2(1, 1), Vec2(0.1, 0.1))

packer = RectanglePacker(256, 256)
rect = packer.pack(32, 16)                   # Rectangle(n=0, s=16, e=32, w=0)
```

`Mat3.affine_inverse` raises `ValueError` for a singular matrix.
`RectanglePacker.pack` returns an empty `Rectangle()` when there is no room
left.

## Drawing

```python
from flocksim.geometry import Vec2, Vec4
from flocksim.draw import VertexBuffer, circle, line_strip, rounded_rectangle

vb = VertexBuffer()
white = Vec4(1.0, 1.0, 1.0, 1.0)
circle(vb, 32, 0.5, Vec2(0.0, 0.0), white)
line_strip(vb, 0.01, [Vec2(0, 0), Vec2(1, 0), Vec2(1, 1)], white)
rounded_rectangle(vb, 8, 0.1, Vec2(0, 0), Vec2(1, 1), white)
print(len(vb.vertices), len(vb.indices), len(vb.triangles()))
```

`VertexBuffer(max_vertices=n)` raises `OverflowError` once a shape would
take it past `n` vertices. `circle_points`, `ellipse_points` and
`rounded_rectangle_points` return the outline points and do not draw
anything.

## Cell grid

```python
from flocksim.boid_grid import CellGrid, unit_to_position

grid = CellGrid(width=256, height=256, width_rsh=24, height_rsh=24)
positions = [unit_to_position(p) for p in ...]   # (u32, u32) pairs
velocities = [(0, 0)] * len(positions)           # (s32, s32) pairs

grid.count(positions)        # boids per cell
grid.allocate()              # size cells and assign offsets
grid.fill(positions, velocities)
grid.construct()             # per-cell averages (NaN for empty cells)

count, avg_pos, avg_vel = grid.search_average(positions[0], grid.cells[0].avg_pos, 1 << 23)
```

The grid's width must equal `2 ** (32 - width_rsh)`, and the same rule
applies to the height. Searches wrap around the edges of the plane.

## What this package does not do

The package does not step a simulation forward. Nothing here applies
separation, cohesion and alignment to move boids from one frame to the
next. The package also has no timing utilities, no pan-and-zoom camera and
no text layout. It opens no window and renders nothing: a `VertexBuffer`
only collects vertices and indices, and a renderer of your own has to draw
them.

## Tests

```
pip install .[test]
pytest
```