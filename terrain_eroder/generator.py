# terrain_eroder/generator.py

"""
================================================================================
CORE TERRAIN GENERATOR
================================================================================
This module contains the TerrainGenerator class, which chains the three stages
of the pipeline: noise synthesis at working resolution, upscaling to
simulation resolution, and droplet erosion.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of parameters which can override the
      internal defaults. Expected keys include 'seed', 'grid_size', etc.
    - logger: A configured Python logging object for runtime messages.
    - rng (np.random.Generator, optional): Droplet spawn generator.
- Outputs (from methods):
    - HeightField instances of raw, unnormalized heights.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and configuration, the output is deterministic.
================================================================================
"""

import logging
import time

import numpy as np

from . import config as DEFAULTS
from . import noise
from .erosion import ErosionSimulator
from .heightfield import HeightField
from .upscale import scale as _scale


class TerrainGenerator:
    """
    Generates an eroded terrain height field from a seed.
    This class is backend-only and does not handle any file output.
    """
    def __init__(self, config: dict, logger: logging.Logger, rng: np.random.Generator = None):
        """
        Initializes the terrain generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            rng (np.random.Generator, optional): A pre-built droplet spawn
                generator. If None, one is seeded from the master seed.
        """
        self.logger = logger
        self.user_config = config
        self.logger.info("TerrainGenerator initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'erosion_seed_offset': self.user_config.get('erosion_seed_offset', DEFAULTS.EROSION_SEED_OFFSET),
            'grid_size': self.user_config.get('grid_size', DEFAULTS.DEFAULT_GRID_SIZE),
            'upscale_factor': self.user_config.get('upscale_factor', DEFAULTS.UPSCALE_FACTOR),
            'num_drops': self.user_config.get('num_drops', DEFAULTS.DEFAULT_NUM_DROPS),

            'noise_octaves': self.user_config.get('noise_octaves', DEFAULTS.NOISE_OCTAVES),
            'noise_start_period': self.user_config.get('noise_start_period', DEFAULTS.NOISE_START_PERIOD),
            'noise_start_amplitude': self.user_config.get('noise_start_amplitude', DEFAULTS.NOISE_START_AMPLITUDE),
            'noise_persistence': self.user_config.get('noise_persistence', DEFAULTS.NOISE_PERSISTENCE),
            'noise_period_factor': self.user_config.get('noise_period_factor', DEFAULTS.NOISE_PERIOD_FACTOR),
        }

        # --- Public Properties for easy access ---
        self.seed = self.settings['seed']
        self.grid_size = self.settings['grid_size']

        # --- Initialize Droplet Randomness ---
        if rng is not None:
            self.rng = rng
            self.logger.debug("Initialized with injected droplet generator.")
        else:
            self.rng = np.random.default_rng(self.seed + self.settings['erosion_seed_offset'])

        # The simulator picks up any erosion physics overrides from the same config.
        self.simulator = ErosionSimulator(config=self.user_config, logger=self.logger, rng=self.rng)
        self.settings.update(self.simulator.settings)

        self.logger.info(f"TerrainGenerator initialized with seed: {self.seed}")
        self.logger.info(
            f"Grid: {self.grid_size}x{self.grid_size} cells, upscaled x{self.settings['upscale_factor']}, "
            f"{self.settings['num_drops']} droplets"
        )

    def generate_base(self, width: int = None, height: int = None) -> HeightField:
        """Creates the noise field at working resolution."""
        if width is None:
            width = self.grid_size
        if height is None:
            height = self.grid_size

        self.logger.info("Generating initial terrain with noise...")
        field = HeightField(width, height)
        noise.generate(
            field, self.seed,
            octaves=self.settings['noise_octaves'],
            period=self.settings['noise_start_period'],
            amplitude=self.settings['noise_start_amplitude'],
            persistence=self.settings['noise_persistence'],
            period_factor=self.settings['noise_period_factor'],
        )
        return field

    def upscale(self, field: HeightField) -> HeightField:
        factor = self.settings['upscale_factor']
        self.logger.info(f"Upscaling {field.width}x{field.height} field by {factor}...")
        return _scale(field, factor)

    def erode(self, field: HeightField, progress: bool = False) -> HeightField:
        """Erodes a copy of `field` and returns it. The input is left untouched."""
        eroded = field.clone()
        return self.simulator.simulate(eroded, self.settings['num_drops'], progress=progress)

    def run(self, progress: bool = False) -> tuple:
        """
        Runs the full pipeline.

        Returns:
            tuple: (scaled, eroded) height fields at simulation resolution.
        """
        start_time = time.perf_counter()

        base = self.generate_base()
        scaled = self.upscale(base)
        eroded = self.erode(scaled, progress=progress)

        end_time = time.perf_counter()
        self.logger.info(f"Terrain generation complete in {end_time - start_time:.2f} seconds.")
        return scaled, eroded


def generate(width: int, height: int, seed: int) -> HeightField:
    """Returns a new width x height field of fractal noise for `seed`."""
    field = HeightField(width, height)
    noise.generate(field, seed)
    return field
