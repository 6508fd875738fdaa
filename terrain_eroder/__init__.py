# terrain_eroder/__init__.py

# This file makes the 'terrain_eroder' directory a Python package.
# It also defines the public API of the package.

from .heightfield import HeightField
from .generator import TerrainGenerator, generate
from .upscale import scale
from .erosion import ErosionSimulator, DropResult, simulate

__all__ = [
    "HeightField",
    "TerrainGenerator",
    "ErosionSimulator",
    "DropResult",
    "generate",
    "scale",
    "simulate",
]
