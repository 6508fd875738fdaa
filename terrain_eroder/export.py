# terrain_eroder/export.py

"""
================================================================================
HEIGHT FIELD EXPORT UTILITIES
================================================================================
Converts finished height fields into files: an 8-bit grayscale PNG for
viewing, a raw .npy array of the heights, and the generation settings as JSON.

It is a thin I/O layer. No function here alters the field it is given.
================================================================================
"""
import json
import logging
import os

import numpy as np
from PIL import Image

from .heightfield import HeightField

logger = logging.getLogger(__name__)


def to_grayscale(field: HeightField) -> np.ndarray:
    """
    Normalizes the field to [0, 255] and returns a (height, width) uint8 array.
    The lowest point maps to 0 and the highest to 255. A flat field maps to 0.
    """
    values = field.as_array()
    low = values.min()
    span = values.max() - low
    if span <= 0:
        return np.zeros(field.shape, dtype=np.uint8)

    # Truncate rather than round, so only the very highest cell reaches 255.
    return ((values - low) / span * 255).astype(np.uint8)


def save_png(field: HeightField, path: str) -> str:
    """Saves the field as a normalized grayscale PNG and returns the path."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    img = Image.fromarray(to_grayscale(field), 'L')
    img.save(path, 'PNG')
    logger.info(f"Image saved as {path}")
    return path


def save_heights(field: HeightField, path: str) -> str:
    """Saves the raw (height, width) float64 heights as a .npy file."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    np.save(path, field.as_array())
    logger.info(f"Saved heights to {path} (shape: {field.shape})")
    return path


def save_settings(settings: dict, path: str) -> str:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'w') as f:
        json.dump(settings, f, indent=4)
    logger.info(f"Saved generation settings to {path}")
    return path
