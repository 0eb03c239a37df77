"""Tests for Projectile/Particle update rules and spawning."""
from __future__ import annotations

import dataclasses
import math
import random

import pytest

from tick_fireworks.config import ShowConfig
from tick_fireworks.entities import (
    Particle,
    Projectile,
    advance_particle,
    advance_projectile,
    burst,
    particle_count,
    spawn_projectile,
)
from tick_fireworks.types import StepSignal
from tick_fireworks.vec import Vec2


def _projectile(
    position: Vec2 = (0.0, 0.0),
    target: Vec2 = (0.0, -100.0),
    speed: float = 5.0,
    color: str = "#f4d77b",
) -> Projectile:
    return Projectile(origin=position, position=position, target=target, speed=speed, color=color)


# --- Spawning ---

def test_spawn_projectile_ranges() -> None:
    config = ShowConfig()
    rng = random.Random(7)
    for _ in range(200):
        p = spawn_projectile(1000.0, 800.0, rng, config)
        x, y = p.origin
        assert 100.0 <= x <= 900.0
        assert y == 810.0
        assert p.position == p.origin
        assert abs(p.target[0] - x) <= 80.0
        assert 80.0 <= p.target[1] <= 440.0
        assert 3.6 <= p.speed <= 5.1
        assert p.color in config.palette
        assert p.trail == ()


# --- Projectile flight ---

def test_advance_moves_by_speed_toward_target() -> None:
    p, signal = advance_projectile(_projectile())
    assert signal is StepSignal.CONTINUE
    assert p.position == (0.0, -5.0)
    assert p.trail == ((0.0, 0.0),)


def test_advance_returns_new_value() -> None:
    original = _projectile()
    advanced, _ = advance_projectile(original)
    assert original.position == (0.0, 0.0)
    assert original.trail == ()
    assert advanced is not original


def test_trail_capped_at_seven_oldest_first() -> None:
    p = _projectile(target=(0.0, -1000.0))
    for _ in range(20):
        p, _ = advance_projectile(p)
        assert len(p.trail) <= 7
    assert len(p.trail) == 7
    # Most recent previous position is last.
    assert p.trail[-1] == pytest.approx((0.0, -95.0))
    assert p.trail[0] == pytest.approx((0.0, -65.0))


def test_explodes_when_closer_than_one_step_without_snapping() -> None:
    p = _projectile(position=(0.0, -97.0))
    exploded, signal = advance_projectile(p)
    assert signal is StepSignal.EXPLODE
    assert exploded.position == (0.0, -97.0)
    assert exploded.trail[-1] == (0.0, -97.0)


def test_exactly_one_step_away_keeps_flying() -> None:
    p = _projectile(position=(0.0, -95.0))
    moved, signal = advance_projectile(p)
    assert signal is StepSignal.CONTINUE
    assert moved.position == (0.0, -100.0)
    _, signal = advance_projectile(moved)
    assert signal is StepSignal.EXPLODE


def test_reference_flight_reaches_target_in_bounded_ticks() -> None:
    p = _projectile(position=(100.0, 500.0), target=(120.0, 50.0), speed=5.0)
    limit = math.ceil(p.distance_to_target() / p.speed)
    last = p.distance_to_target()
    ticks = 0
    signal = StepSignal.CONTINUE
    while signal is StepSignal.CONTINUE:
        p, signal = advance_projectile(p)
        ticks += 1
        assert ticks <= limit
        if signal is StepSignal.CONTINUE:
            assert p.distance_to_target() < last
            last = p.distance_to_target()
    assert signal is StepSignal.EXPLODE

    particles = burst(p, random.Random(11), ShowConfig())
    assert 44 <= len(particles) <= 82
    assert all(q.color == p.color for q in particles)
    assert all(q.position == p.position for q in particles)


# --- Bursts ---

def test_particle_count_normal_range() -> None:
    rng = random.Random(5)
    counts = {particle_count(rng, ShowConfig()) for _ in range(500)}
    assert min(counts) >= 44
    assert max(counts) <= 82


def test_burst_reduced_motion_is_eighteen() -> None:
    p = _projectile()
    particles = burst(p, random.Random(3), ShowConfig.for_motion(True))
    assert len(particles) == 18


def test_burst_particle_ranges() -> None:
    config = ShowConfig()
    particles = burst(_projectile(), random.Random(9), config, count=200)
    assert len(particles) == 200
    for q in particles:
        force = math.hypot(*q.velocity)
        assert 1.3 - 1e-9 <= force <= 5.8 + 1e-9
        assert q.alpha == 1.0
        assert 0.012 <= q.decay <= 0.022
        assert 1.5 <= q.size <= 3.1
        assert q.gravity == config.gravity
        assert q.friction == config.friction


# --- Particle motion ---

def _particle(alpha: float = 1.0, decay: float = 0.25) -> Particle:
    return Particle(
        position=(0.0, 0.0),
        velocity=(1.0, 0.0),
        alpha=alpha,
        decay=decay,
        size=2.0,
        color="#ffffff",
        gravity=0.5,
        friction=0.5,
    )


def test_particle_friction_then_gravity_then_move() -> None:
    q, signal = advance_particle(_particle())
    assert signal is StepSignal.CONTINUE
    assert q.velocity == (0.5, 0.5)
    assert q.position == (0.5, 0.5)
    assert q.alpha == 0.75


def test_particle_removed_when_alpha_reaches_zero() -> None:
    q, signal = advance_particle(_particle(alpha=0.25, decay=0.25))
    assert q.alpha == 0.0
    assert signal is StepSignal.REMOVE


def test_particle_alpha_non_increasing_until_removed() -> None:
    q = _particle(alpha=1.0, decay=0.1)
    previous = q.alpha
    for _ in range(100):
        q, signal = advance_particle(q)
        assert q.alpha <= previous
        previous = q.alpha
        if signal is StepSignal.REMOVE:
            assert q.alpha <= 0
            break
    else:
        pytest.fail("particle never faded out")


def test_entities_are_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        _particle().alpha = 0.5  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        _projectile().speed = 1.0  # type: ignore[misc]
