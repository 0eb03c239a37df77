"""Projectile and Particle value types with pure update rules."""
from __future__ import annotations

import math
import random as _random_mod
from dataclasses import dataclass, replace

from tick_fireworks import vec
from tick_fireworks.config import ShowConfig
from tick_fireworks.types import Color, StepSignal
from tick_fireworks.vec import Vec2


@dataclass(frozen=True, slots=True)
class Projectile:
    """A firework rising toward its burst point."""

    origin: Vec2
    position: Vec2
    target: Vec2
    speed: float
    color: Color
    trail: tuple[Vec2, ...] = ()

    def distance_to_target(self) -> float:
        return vec.distance(self.position, self.target)


@dataclass(frozen=True, slots=True)
class Particle:
    """One decaying point of light from an explosion."""

    position: Vec2
    velocity: Vec2
    alpha: float
    decay: float
    size: float
    color: Color
    gravity: float = 0.045
    friction: float = 0.985


def spawn_projectile(
    width: float,
    height: float,
    rng: _random_mod.Random,
    config: ShowConfig,
) -> Projectile:
    """Random projectile launched from just below the bottom edge."""
    x_lo, x_hi = config.launch_x_band
    y_lo, y_hi = config.target_y_band
    x = rng.uniform(width * x_lo, width * x_hi)
    origin = (x, height + config.launch_y_offset)
    target = (
        x + rng.uniform(-config.target_x_jitter, config.target_x_jitter),
        rng.uniform(height * y_lo, height * y_hi),
    )
    return Projectile(
        origin=origin,
        position=origin,
        target=target,
        speed=rng.uniform(*config.speed_range),
        color=rng.choice(config.palette),
    )


def advance_projectile(
    projectile: Projectile, trail_length: int = 7
) -> tuple[Projectile, StepSignal]:
    """One tick of flight.

    The current position is pushed onto the trail first. When the target is
    closer than one step the projectile explodes where it stands; it is not
    snapped onto the target.
    """
    trail = (projectile.trail + (projectile.position,))[-trail_length:]
    if projectile.distance_to_target() < projectile.speed:
        return replace(projectile, trail=trail), StepSignal.EXPLODE
    position = vec.step_toward(projectile.position, projectile.target, projectile.speed)
    return replace(projectile, position=position, trail=trail), StepSignal.CONTINUE


def particle_count(rng: _random_mod.Random, config: ShowConfig) -> int:
    lo, hi = config.particle_count
    if lo == hi:
        return lo
    return int(rng.uniform(lo, hi))


def burst(
    projectile: Projectile,
    rng: _random_mod.Random,
    config: ShowConfig,
    count: int | None = None,
) -> list[Particle]:
    """Particles for an exploding projectile, all in the projectile's color."""
    if count is None:
        count = particle_count(rng, config)
    particles: list[Particle] = []
    for _ in range(count):
        angle = rng.uniform(0.0, math.tau)
        force = rng.uniform(*config.particle_force)
        particles.append(
            Particle(
                position=projectile.position,
                velocity=vec.polar(angle, force),
                alpha=1.0,
                decay=rng.uniform(*config.particle_decay),
                size=rng.uniform(*config.particle_size),
                color=projectile.color,
                gravity=config.gravity,
                friction=config.friction,
            )
        )
    return particles


def advance_particle(particle: Particle) -> tuple[Particle, StepSignal]:
    vx, vy = vec.scale(particle.velocity, particle.friction)
    velocity = (vx, vy + particle.gravity)
    moved = replace(
        particle,
        position=vec.add(particle.position, velocity),
        velocity=velocity,
        alpha=particle.alpha - particle.decay,
    )
    if moved.alpha <= 0:
        return moved, StepSignal.REMOVE
    return moved, StepSignal.CONTINUE
