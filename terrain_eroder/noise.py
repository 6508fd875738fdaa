# terrain_eroder/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides fractal value noise over a 2D height grid. It is designed
to be a pure, stateless utility.

Data Contract:
---------------
- Inputs:
    - field: A HeightField that noise is accumulated into.
    - seed: An integer selecting the noise pattern.
    - period, amplitude: Per-layer spatial period (cells per lattice point)
      and height scale.
- Outputs:
    - None; values are ADDED to the field, so layers stack.
- Side Effects: Mutates the target field only.
- Invariants: The lattice hash is a pure function of (seed, x, y). Identical
  arguments always give bit-identical fields, regardless of call order.
================================================================================
"""

import logging

import numpy as np
from numba import njit

from . import config as DEFAULTS

logger = logging.getLogger(__name__)

# 2**52, the number of distinct values produced by the lattice hash.
_HASH_RESOLUTION = 4503599627370496.0
_HASH_MASK = 0xFFFFFFFFFFFFF


@njit
def lattice_noise(seed, x, y):
    """
    Hashes an integer lattice point to a value in [0, 1).
    All arithmetic wraps at 64 bits.
    """
    s = seed + x * 374761393 + y * 668265263
    s = (s ^ (s >> 13)) * 1274126177
    s = s ^ (s >> 16)
    s = (s ^ (s >> 15)) * 2246822519
    s = s ^ (s >> 13)
    return ((s >> 11) & _HASH_MASK) / _HASH_RESOLUTION


@njit
def cubic_interpolate(a, b, c, d, t):
    """
    Cubic interpolation between b (t=0) and c (t=1).
    a and d are the outer control points and only shape the curve.
    """
    # The polynomial is not guaranteed to round to exactly c at t=1.
    if t == 1.0:
        return c
    return t * (t * (t * (-a + b - c + d) + (2.0 * a - 2.0 * b + c - d)) + (-a + c)) + b


@njit
def _generate_layer(heights, width, height, seed, period, amplitude):
    rows = np.empty(4)
    i = 0
    for y in range(height):
        for x in range(width):
            # Find which cell of the noise lattice this grid point falls in.
            xp = x / period
            yp = y / period
            x0 = int(np.floor(xp))
            y0 = int(np.floor(yp))
            xt = xp - x0
            yt = yp - y0

            # Interpolate along each of the four surrounding lattice rows...
            for s in range(4):
                ys = y0 - 1 + s
                rows[s] = cubic_interpolate(
                    lattice_noise(seed, x0 - 1, ys),
                    lattice_noise(seed, x0, ys),
                    lattice_noise(seed, x0 + 1, ys),
                    lattice_noise(seed, x0 + 2, ys),
                    xt,
                )

            # ...then across the rows for the whole cell.
            heights[i] += cubic_interpolate(rows[0], rows[1], rows[2], rows[3], yt) * amplitude
            i += 1


def generate_layer(field, seed: int, period: float, amplitude: float):
    """Adds one octave of bicubic value noise to the field."""
    _generate_layer(field.heights, field.width, field.height, int(seed), float(period), float(amplitude))


def generate(
    field,
    seed: int,
    octaves: int = DEFAULTS.NOISE_OCTAVES,
    period: float = DEFAULTS.NOISE_START_PERIOD,
    amplitude: float = DEFAULTS.NOISE_START_AMPLITUDE,
    persistence: float = DEFAULTS.NOISE_PERSISTENCE,
    period_factor: float = DEFAULTS.NOISE_PERIOD_FACTOR,
):
    """
    Accumulates a fractal stack of noise layers into the field.

    Each octave uses its own seed (seed + octave index) so the layers are
    uncorrelated. After every octave the amplitude is multiplied by
    `persistence` and the period by `period_factor`, moving to finer,
    fainter detail.
    """
    for octave in range(octaves):
        logger.debug(f"[Layer {octave + 1}] period={period:.2f}  amplitude={amplitude:.2f}")
        generate_layer(field, seed + octave, period, amplitude)
        amplitude *= persistence
        period *= period_factor
