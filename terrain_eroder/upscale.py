# terrain_eroder/upscale.py

"""
================================================================================
HEIGHT FIELD UPSCALER
================================================================================
Resamples a HeightField onto a grid `factor` times larger in each dimension
using bilinear sampling.

Data Contract:
---------------
- Inputs: a source HeightField and an integer factor >= 1.
- Outputs: a NEW HeightField of size (width * factor, height * factor).
- Side Effects: None. The source field is only read.
- Invariants: The four outer corners of the source and destination fields
  hold exactly the same heights.
================================================================================
"""

from numba import njit

from .heightfield import HeightField, _sample_bilinear


@njit
def _scale_kernel(src, width, height, dst, new_width, new_height):
    # Multiplying before dividing keeps x * (w - 1) / (nw - 1) an exact
    # integer ratio, so the last column lands exactly on w - 1.
    x_span = width - 1
    y_span = height - 1
    x_den = max(new_width - 1, 1)
    y_den = max(new_height - 1, 1)

    i = 0
    for y in range(new_height):
        sy = (y * y_span) / y_den
        for x in range(new_width):
            sx = (x * x_span) / x_den
            dst[i] = _sample_bilinear(src, width, height, sx, sy)
            i += 1


def scale(field: HeightField, factor: int) -> HeightField:
    """Returns a copy of `field` resampled to `factor` times its resolution."""
    if factor < 1:
        raise ValueError(f"Upscale factor must be at least 1, got {factor}")

    scaled = HeightField(field.width * factor, field.height * factor)
    _scale_kernel(field.heights, field.width, field.height, scaled.heights, scaled.width, scaled.height)
    return scaled
