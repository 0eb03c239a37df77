"""System factories for the per-tick simulation step."""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable

from tick_fireworks.entities import (
    Particle,
    Projectile,
    advance_particle,
    advance_projectile,
    burst,
)
from tick_fireworks.types import FrameContext, StepSignal, System

if TYPE_CHECKING:
    from tick_fireworks.sky import Sky

ExplodeFn = Callable[["Sky", FrameContext, Projectile, list[Particle]], None]


def make_projectile_system(on_explode: ExplodeFn | None = None) -> System:
    """Advance projectiles; exploding ones burst into particles and are removed.

    Removal happens after every projectile has been updated, so the step
    sees the same container it started with.
    """

    def projectile_system(sky: Sky, ctx: FrameContext) -> None:
        survivors: list[Projectile] = []
        for projectile in sky.projectiles:
            moved, signal = advance_projectile(projectile, ctx.config.trail_length)
            if signal is StepSignal.EXPLODE:
                particles = burst(moved, ctx.random, ctx.config)
                sky.add_particles(particles)
                sky.explosions += 1
                if on_explode is not None:
                    on_explode(sky, ctx, moved, particles)
                continue
            survivors.append(moved)
        sky.projectiles = survivors

    return projectile_system


def make_particle_system() -> System:
    """Integrate particles and drop the ones that have faded out."""

    def particle_system(sky: Sky, ctx: FrameContext) -> None:
        live: list[Particle] = []
        for particle in sky.particles:
            moved, signal = advance_particle(particle)
            if signal is StepSignal.REMOVE:
                continue
            live.append(moved)
        sky.particles = live

    return particle_system


def make_particle_cap_system(cap: int | None = None) -> System:
    """Evict oldest particles past `cap` (defaults to the config's cap)."""

    def particle_cap_system(sky: Sky, ctx: FrameContext) -> None:
        sky.evict_oldest(cap if cap is not None else ctx.config.particle_cap)

    return particle_cap_system


def default_systems(on_explode: ExplodeFn | None = None) -> list[System]:
    return [
        make_projectile_system(on_explode),
        make_particle_system(),
        make_particle_cap_system(),
    ]


def run_systems(systems: Iterable[System], sky: Sky, ctx: FrameContext) -> None:
    for system in systems:
        system(sky, ctx)
