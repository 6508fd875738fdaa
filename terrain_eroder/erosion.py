# terrain_eroder/erosion.py

"""
================================================================================
PARTICLE-BASED HYDRAULIC EROSION
================================================================================
Simulates water droplets one after another. Each droplet spawns at a random
position, rolls downhill under the cell's gradient proxy, removes material
along its path and finally drops a fraction of what it carried where it stops.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Overrides for the droplet physics defaults in config.py.
    - logger: A configured Python logging object for runtime messages.
    - rng (np.random.Generator, optional): Source of droplet spawn positions.
      Kept separate from the noise hash so runs can be pinned in tests.
- Outputs:
    - The input HeightField, eroded in place.
- Side Effects: Mutates the field. Logs messages using the provided logger.
- Invariants:
    - Droplets are fully resolved one at a time on a private working copy;
      the field only ever shows the state between two droplets.
    - A droplet steers by the terrain as it was when it spawned. Its own
      erosion only affects the droplets after it.
    - No droplet takes more than `drop_max_steps` steps.
    - Only a fraction of the eroded sediment is put back. Mass is NOT
      conserved; the remainder is treated as carried out of the domain.
================================================================================
"""

import collections
import logging

import numpy as np
from numba import njit
from tqdm import tqdm

from . import config as DEFAULTS
from .heightfield import HeightField, _deposit_weighted, _gradient_proxy

DropResult = collections.namedtuple("DropResult", ["steps", "x", "y", "sediment"])


@njit
def _simulate_drop(
    source, heights, width, height, x, y,
    max_steps, dt, momentum, erosion_rate, base_speed,
    redeposit_fraction, stall_min_steps, stall_velocity,
):
    vx = 0.0
    vy = 0.0
    sediment = 0.0
    steps = 0

    for step in range(max_steps):
        # The drop has left the grid.
        if x < 0.0 or y < 0.0 or x > width or y > height:
            break

        # The slope comes from the terrain as it was when the drop spawned.
        ax, ay = _gradient_proxy(source, width, height, x, y)

        vx = -ax * (1.0 - momentum) + vx * momentum
        vy = -ay * (1.0 - momentum) + vy * momentum

        x += vx * dt
        y += vy * dt

        # Faster water picks up more material.
        speed = np.sqrt(vx * vx + vy * vy)
        amount = erosion_rate * (speed + base_speed)
        _deposit_weighted(heights, width, height, x, y, -amount)
        sediment += amount
        steps = step + 1

        if step > stall_min_steps and abs(vx) < stall_velocity and abs(vy) < stall_velocity:
            break

    _deposit_weighted(heights, width, height, x, y, sediment * redeposit_fraction)
    return steps, x, y, sediment


class ErosionSimulator:
    """Runs sequential droplet erosion against a HeightField."""

    def __init__(self, config: dict = None, logger: logging.Logger = None, rng: np.random.Generator = None):
        """
        Initializes the simulator.

        Args:
            config (dict, optional): Parameters to override the droplet
                physics defaults.
            logger (logging.Logger, optional): The logger for all output.
            rng (np.random.Generator, optional): Spawn position generator.
                A fresh, OS-seeded generator is used if None.
        """
        config = config or {}
        self.logger = logger or logging.getLogger(__name__)
        self.rng = rng if rng is not None else np.random.default_rng()

        self.settings = {
            'drop_max_steps': config.get('drop_max_steps', DEFAULTS.DROP_MAX_STEPS),
            'drop_time_step': config.get('drop_time_step', DEFAULTS.DROP_TIME_STEP),
            'drop_momentum': config.get('drop_momentum', DEFAULTS.DROP_MOMENTUM),
            'erosion_rate': config.get('erosion_rate', DEFAULTS.EROSION_RATE),
            'erosion_base_speed': config.get('erosion_base_speed', DEFAULTS.EROSION_BASE_SPEED),
            'sediment_redeposit_fraction': config.get('sediment_redeposit_fraction', DEFAULTS.SEDIMENT_REDEPOSIT_FRACTION),
            'stall_min_steps': config.get('stall_min_steps', DEFAULTS.STALL_MIN_STEPS),
            'stall_velocity': config.get('stall_velocity', DEFAULTS.STALL_VELOCITY),
        }

        # Step counts of every droplet from the most recent simulate() call.
        self.drop_steps = []

    def simulate_drop(self, field: HeightField, x: float, y: float, working: HeightField = None) -> DropResult:
        """
        Runs a single droplet starting at (x, y).

        The droplet steers by the slope of `field` as it is now and erodes
        `working`, a same-sized copy of `field`. Without a `working` field a
        private copy is used and published back into `field` afterwards.
        """
        publish = working is None
        if publish:
            working = field.clone()

        s = self.settings
        steps, end_x, end_y, sediment = _simulate_drop(
            field.heights, working.heights, field.width, field.height, float(x), float(y),
            int(s['drop_max_steps']), float(s['drop_time_step']), float(s['drop_momentum']),
            float(s['erosion_rate']), float(s['erosion_base_speed']),
            float(s['sediment_redeposit_fraction']), int(s['stall_min_steps']), float(s['stall_velocity']),
        )

        if publish:
            field.load_from(working)
        return DropResult(steps, end_x, end_y, sediment)

    def simulate(self, field: HeightField, num_drops: int, progress: bool = False) -> HeightField:
        """
        Erodes `field` with `num_drops` droplets and returns it.

        Every droplet reads the slope of `field` and erodes a working copy,
        which is then published back into `field` before the next droplet
        spawns.
        """
        self.logger.info(f"Running erosion simulation with {num_drops} raindrops...")
        self.drop_steps = []
        working = field.clone()

        for _ in tqdm(range(num_drops), desc="Eroding", disable=not progress):
            x = self.rng.random() * field.width
            y = self.rng.random() * field.height
            result = self.simulate_drop(field, x, y, working=working)
            self.drop_steps.append(result.steps)
            field.load_from(working)

        if self.drop_steps:
            self.logger.debug(
                f"Droplet steps: mean={np.mean(self.drop_steps):.1f}, max={max(self.drop_steps)}"
            )
        return field


def simulate(field: HeightField, num_drops: int, rng: np.random.Generator = None) -> HeightField:
    """Erodes `field` in place with default physics and returns it."""
    return ErosionSimulator(rng=rng).simulate(field, num_drops)
