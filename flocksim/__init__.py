"""Boid flocking building blocks: bit helpers, PRNG, 2D geometry, triangle builders and a cell grid."""

__version__ = "0.1.0"

__all__ = ["bits", "rng", "geometry", "draw", "boid_grid"]