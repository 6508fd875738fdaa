"""Tests for the droplet erosion simulator."""

import numpy as np
import pytest

from terrain_eroder import noise
from terrain_eroder.erosion import ErosionSimulator, simulate
from terrain_eroder.heightfield import HeightField


@pytest.fixture
def noise_field():
    field = HeightField(32, 24)
    noise.generate(field, 21)
    return field


def test_zero_drops_leaves_field_untouched(noise_field):
    before = noise_field.heights.tobytes()
    simulator = ErosionSimulator(rng=np.random.default_rng(0))

    result = simulator.simulate(noise_field, 0)

    assert result is noise_field
    assert noise_field.heights.tobytes() == before
    assert simulator.drop_steps == []


def test_simulate_keeps_dimensions_and_caps_steps(noise_field):
    simulator = ErosionSimulator(rng=np.random.default_rng(1))
    simulator.simulate(noise_field, 25)

    assert (noise_field.width, noise_field.height) == (32, 24)
    assert noise_field.heights.size == 32 * 24
    assert len(simulator.drop_steps) == 25
    assert all(0 < steps <= 2000 for steps in simulator.drop_steps)
    assert np.all(np.isfinite(noise_field.heights))


def test_simulate_changes_the_terrain(noise_field):
    before = noise_field.heights.copy()
    simulate(noise_field, 10, rng=np.random.default_rng(2))

    assert not np.array_equal(noise_field.heights, before)


def test_simulate_stays_within_local_extremes(noise_field):
    # Every write is clamped to the extremes of its cell, where cells on the
    # border also see the 0.0 of the missing neighbours.
    low = min(noise_field.heights.min(), 0.0)
    high = max(noise_field.heights.max(), 0.0)
    simulate(noise_field, 20, rng=np.random.default_rng(3))

    assert noise_field.heights.min() >= low
    assert noise_field.heights.max() <= high


def test_simulate_is_reproducible_with_seeded_rng(noise_field):
    other = noise_field.clone()
    simulate(noise_field, 15, rng=np.random.default_rng(99))
    simulate(other, 15, rng=np.random.default_rng(99))

    assert noise_field.heights.tobytes() == other.heights.tobytes()


def test_different_rng_seeds_give_different_results(noise_field):
    other = noise_field.clone()
    simulate(noise_field, 15, rng=np.random.default_rng(5))
    simulate(other, 15, rng=np.random.default_rng(6))

    assert not np.array_equal(noise_field.heights, other.heights)


def test_simulate_matches_sequential_single_drops(noise_field):
    expected = noise_field.clone()
    replay_rng = np.random.default_rng(8)
    replay = ErosionSimulator(rng=replay_rng)
    for _ in range(6):
        x = replay_rng.random() * expected.width
        y = replay_rng.random() * expected.height
        replay.simulate_drop(expected, x, y)

    ErosionSimulator(rng=np.random.default_rng(8)).simulate(noise_field, 6)

    np.testing.assert_array_equal(noise_field.heights, expected.heights)


def test_drop_spawned_outside_never_steps(noise_field):
    before = noise_field.heights.copy()
    result = ErosionSimulator().simulate_drop(noise_field, -5.0, 3.0)

    assert result.steps == 0
    assert result.sediment == 0.0
    assert (result.x, result.y) == (-5.0, 3.0)
    np.testing.assert_array_equal(noise_field.heights, before)


def test_drop_on_flat_ground_stalls():
    field = HeightField(8, 8)
    result = ErosionSimulator().simulate_drop(field, 4.5, 4.5)

    # No slope, so the drop never moves and stops at the first stall check
    # after the minimum step count.
    assert result.steps == 102
    assert (result.x, result.y) == (4.5, 4.5)
    assert result.sediment == pytest.approx(102 * 0.1 * 2.0)
    assert not field.heights.any()


def test_step_cap_is_configurable():
    field = HeightField(8, 8)
    simulator = ErosionSimulator(config={'drop_max_steps': 50})

    assert simulator.simulate_drop(field, 2.0, 2.0).steps == 50


def test_drop_rolls_downhill():
    # Height grows with x, so the drop must move towards x = 0.
    xs, _ = np.meshgrid(np.arange(16.0), np.arange(16.0))
    field = HeightField(16, 16, xs * 10.0)
    result = ErosionSimulator().simulate_drop(field, 8.5, 8.5)

    assert result.x < 8.5
    assert result.y == pytest.approx(8.5)


def _reference_drop(field, x, y):
    """Step-by-step droplet that steers by `field` and erodes a copy of it."""
    eroded = field.clone()
    vx = vy = sediment = 0.0
    steps = 0
    for step in range(2000):
        if x < 0.0 or y < 0.0 or x > field.width or y > field.height:
            break
        ax, ay = field.gradient_proxy(x, y)
        vx = -ax * (1.0 - 0.999) + vx * 0.999
        vy = -ay * (1.0 - 0.999) + vy * 0.999
        x += vx * 0.05
        y += vy * 0.05
        amount = 0.1 * (np.sqrt(vx * vx + vy * vy) + 2.0)
        eroded.deposit_weighted(x, y, -amount)
        sediment += amount
        steps = step + 1
        if step > 100 and abs(vx) < 0.01 and abs(vy) < 0.01:
            break
    eroded.deposit_weighted(x, y, sediment * 0.1)
    return steps, x, y, sediment, eroded


def test_drop_steers_by_the_terrain_at_spawn_time():
    field = HeightField(32, 32)
    noise.generate(field, 21)
    steps, x, y, sediment, eroded = _reference_drop(field, 10.3, 12.7)

    result = ErosionSimulator().simulate_drop(field, 10.3, 12.7)

    assert result.steps == steps
    assert result.x == pytest.approx(x, abs=1e-9)
    assert result.y == pytest.approx(y, abs=1e-9)
    assert result.sediment == pytest.approx(sediment)
    np.testing.assert_allclose(field.heights, eroded.heights, atol=1e-9)


def test_drop_with_working_field_leaves_source_alone(noise_field):
    before = noise_field.heights.copy()
    working = noise_field.clone()

    ErosionSimulator().simulate_drop(noise_field, 10.3, 12.7, working=working)

    np.testing.assert_array_equal(noise_field.heights, before)
    assert not np.array_equal(working.heights, before)
