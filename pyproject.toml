[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flocksim"
version = "0.1.0"
description = "Building blocks for boid flocking: a fixed-point cell grid, RomuQuad/SplitMix64 random numbers, 2D geometry and immediate-mode triangle builders"
requires-python = ">=3.10"
dependencies = []
keywords = ["boids", "flocking", "spatial-grid", "prng", "geometry", "triangulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Life",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["flocksim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
