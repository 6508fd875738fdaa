# terrain_eroder/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the terrain
generator and the erosion simulator. These values are used if they are not
explicitly provided by the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC RUN.
Instead, pass a configuration dictionary to the TerrainGenerator or
ErosionSimulator instance.
================================================================================
"""

# --- Noise Generation ---
DEFAULT_SEED = 1337
# Offset applied to the master seed for the droplet spawn generator, so the
# erosion pass never shares a stream with anything derived from the noise seed.
EROSION_SEED_OFFSET = 7919

# Number of noise layers stacked on top of each other.
NOISE_OCTAVES = 4
# The first (coarsest) layer spans 16 cells per lattice point.
NOISE_START_PERIOD = 16.0
NOISE_START_AMPLITUDE = 100.0
# Applied after every octave: each layer is 0.3x as tall...
NOISE_PERSISTENCE = 0.3
# ...and has half the period (twice the frequency) of the previous one.
NOISE_PERIOD_FACTOR = 0.5

# --- Grid Dimensions ---
DEFAULT_GRID_SIZE = 64
# The base field is resampled by this factor before erosion for more detail.
UPSCALE_FACTOR = 4

# --- Erosion Simulation ---
DEFAULT_NUM_DROPS = 3000
# A droplet is integrated for at most this many fixed-size steps.
DROP_MAX_STEPS = 2000
DROP_TIME_STEP = 0.05
# Exponential smoothing of droplet velocity. Close to 1.0 = heavy inertia.
DROP_MOMENTUM = 0.999
# Material removed per step is EROSION_RATE * (speed + EROSION_BASE_SPEED).
EROSION_RATE = 0.1
EROSION_BASE_SPEED = 2.0
# Fraction of the carried sediment dropped where the droplet stops.
# The rest leaves the simulated domain.
SEDIMENT_REDEPOSIT_FRACTION = 0.1
# A droplet is considered stalled once it has taken more than
# STALL_MIN_STEPS steps and both velocity components are below STALL_VELOCITY.
STALL_MIN_STEPS = 100
STALL_VELOCITY = 0.01

# --- Output ---
DEFAULT_OUTPUT_DIR = "baked_terrain"
DEFAULT_OUTPUT_NAME = "terrain"
