# terrain_eroder/heightfield.py

"""
================================================================================
HEIGHT FIELD STORAGE AND BILINEAR PRIMITIVES
================================================================================
This module owns the HeightField container and the bilinear read/write
primitives shared by noise generation, upscaling and erosion.

Data Contract:
---------------
- Storage: a flat, row-major float64 NumPy array of length width * height.
  The cell (x, y) lives at index y * width + x.
- Reads outside the grid return 0.0. Writes outside the grid are no-ops.
  Neither is ever an error, so edge-of-grid sampling needs no special cases.
- Invariants: The dimensions never change after construction. Resizing
  always produces a new field (see upscale.py).
- Side Effects: None, apart from in-place mutation of the field's own buffer.

The primitives are Numba kernels operating on (heights, width, height) so that
the other kernels in this package can call them directly from compiled loops.
The HeightField methods are thin wrappers around them.
================================================================================
"""

import numpy as np
from numba import njit


@njit
def _height_at(heights, width, height, x, y):
    """Returns the stored height, or 0.0 outside the grid."""
    if x >= 0 and y >= 0 and x < width and y < height:
        return heights[y * width + x]
    return 0.0


@njit
def _adjust_height_at(heights, width, height, x, y, delta, lo, hi):
    """Adds delta to a cell and clamps the result to [lo, hi]."""
    if x >= 0 and y >= 0 and x < width and y < height:
        i = y * width + x
        heights[i] = min(max(heights[i] + delta, lo), hi)


@njit
def _sample_bilinear(heights, width, height, x, y):
    "Weighted average of the four cells surrounding (x, y)."
    x0 = int(np.floor(x))
    y0 = int(np.floor(y))
    x1 = x0 + 1
    y1 = y0 + 1
    xt = x - x0
    yt = y - y0

    # Blend along the top and bottom edges, then between them.
    top = _height_at(heights, width, height, x0, y0) * (1.0 - xt) + _height_at(heights, width, height, x1, y0) * xt
    bottom = _height_at(heights, width, height, x0, y1) * (1.0 - xt) + _height_at(heights, width, height, x1, y1) * xt
    return top * (1.0 - yt) + bottom * yt


@njit
def _gradient_proxy(heights, width, height, x, y):
    """
    Height difference across the cell containing (x, y) along each axis.
    This is the downhill force used by the erosion droplets, not a true
    derivative of the bilinear surface.
    """
    x0 = int(np.floor(x))
    y0 = int(np.floor(y))
    x1 = x0 + 1
    y1 = y0 + 1
    xt = x - x0
    yt = y - y0

    h00 = _height_at(heights, width, height, x0, y0)
    h10 = _height_at(heights, width, height, x1, y0)
    h01 = _height_at(heights, width, height, x0, y1)
    h11 = _height_at(heights, width, height, x1, y1)

    # Left and right edges of the cell.
    xa = h00 * (1.0 - yt) + h01 * yt
    xb = h10 * (1.0 - yt) + h11 * yt

    # Top and bottom edges of the cell.
    ya = h00 * (1.0 - xt) + h10 * xt
    yb = h01 * (1.0 - xt) + h11 * xt

    return xb - xa, yb - ya


@njit
def _deposit_weighted(heights, width, height, x, y, delta):
    """
    Spreads delta over the four corners of the cell containing (x, y),
    weighted by proximity. No corner may leave the [min, max] range the
    corners had before the call.
    """
    x0 = int(np.floor(x))
    y0 = int(np.floor(y))
    x1 = x0 + 1
    y1 = y0 + 1
    xt = x - x0
    yt = y - y0

    h00 = _height_at(heights, width, height, x0, y0)
    h10 = _height_at(heights, width, height, x1, y0)
    h01 = _height_at(heights, width, height, x0, y1)
    h11 = _height_at(heights, width, height, x1, y1)
    h_min = min(min(h00, h10), min(h01, h11))
    h_max = max(max(h00, h10), max(h01, h11))

    _adjust_height_at(heights, width, height, x0, y0, delta * (1.0 - xt) * (1.0 - yt), h_min, h_max)
    _adjust_height_at(heights, width, height, x1, y0, delta * xt * (1.0 - yt), h_min, h_max)
    _adjust_height_at(heights, width, height, x0, y1, delta * (1.0 - xt) * yt, h_min, h_max)
    _adjust_height_at(heights, width, height, x1, y1, delta * xt * yt, h_min, h_max)


class HeightField:
    """A fixed-size, row-major grid of float64 elevations."""

    def __init__(self, width: int, height: int, heights: np.ndarray = None):
        """
        Creates a zero-filled field, or wraps an existing flat buffer.

        Args:
            width (int): Number of columns. Must be at least 1.
            height (int): Number of rows. Must be at least 1.
            heights (np.ndarray, optional): width * height finite values.
                They are copied into a new float64 buffer owned by the field.
        """
        if width < 1 or height < 1:
            raise ValueError(f"HeightField dimensions must be positive, got {width}x{height}")

        self.width = int(width)
        self.height = int(height)

        if heights is None:
            self.heights = np.zeros(self.width * self.height, dtype=np.float64)
        else:
            # Always copy, so the field never aliases the caller's array.
            heights = np.array(heights, dtype=np.float64).ravel()
            if heights.size != self.width * self.height:
                raise ValueError(
                    f"Expected {self.width * self.height} heights for a "
                    f"{self.width}x{self.height} field, got {heights.size}"
                )
            if not np.all(np.isfinite(heights)):
                raise ValueError("HeightField values must be finite")
            self.heights = heights

    def __repr__(self):
        return f"HeightField({self.width}x{self.height})"

    @property
    def shape(self) -> tuple:
        """(height, width), matching the NumPy view returned by as_array()."""
        return (self.height, self.width)

    def as_array(self) -> np.ndarray:
        """A (height, width) view sharing storage with the field."""
        return self.heights.reshape(self.height, self.width)

    def height_at(self, x: int, y: int) -> float:
        return _height_at(self.heights, self.width, self.height, int(x), int(y))

    def adjust_height_at(self, x: int, y: int, delta: float, lo: float, hi: float):
        _adjust_height_at(self.heights, self.width, self.height, int(x), int(y), float(delta), float(lo), float(hi))

    def sample_bilinear(self, x: float, y: float) -> float:
        return _sample_bilinear(self.heights, self.width, self.height, float(x), float(y))

    def gradient_proxy(self, x: float, y: float) -> tuple:
        return _gradient_proxy(self.heights, self.width, self.height, float(x), float(y))

    def deposit_weighted(self, x: float, y: float, delta: float):
        _deposit_weighted(self.heights, self.width, self.height, float(x), float(y), float(delta))

    def clone(self) -> "HeightField":
        """Returns a deep copy with independent storage."""
        return HeightField(self.width, self.height, self.heights)

    def load_from(self, other: "HeightField"):
        """Overwrites this field's contents with those of a same-sized field."""
        if (other.width, other.height) != (self.width, self.height):
            raise ValueError(
                f"Cannot load a {other.width}x{other.height} field into a "
                f"{self.width}x{self.height} field"
            )
        np.copyto(self.heights, other.heights)
