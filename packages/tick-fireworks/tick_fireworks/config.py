"""Show configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_PALETTE: tuple[str, ...] = (
    "#f4d77b",
    "#8be9ff",
    "#ff91d0",
    "#7eb6ff",
    "#c2ff9a",
    "#ffd1a8",
)

Range = tuple[float, float]


@dataclass(frozen=True)
class ShowConfig:
    """Immutable tuning for one fireworks display.

    The defaults are the normal-motion preset. Use ``for_motion(True)`` for
    the reduced-motion preset, which launches less often, bursts into fewer
    particles, never fires salvos, and drops the crackle layer.

    Attributes:
        reduced_motion: Whether this preset is the reduced-motion one.
        launch_interval_ms: Range for the gap between autonomous launches.
        particle_count: Range for particles per explosion (upper bound exclusive
            unless both ends are equal).
        salvo_chance: Probability that a launch queues a delayed second projectile.
        salvo_delay_ms: Range for the delay of that second projectile.
        crackle: Whether explosion sounds get the square-wave crackle layer.
        particle_cap: Live particle limit; the oldest are evicted past it.
        trail_length: Positions remembered per projectile.
        speed_range: Projectile speed in units per tick.
        resume_offset_ms: Grace period before the first launch after resume.
        resize_debounce_ms: Quiet period before a resize is applied.
        max_density: Cap on the device pixel density used for the buffer.
        intensity_divisor: Particle count that maps to explosion intensity 1.0.
        pan_limit: Absolute bound of the stereo pan position.
    """

    reduced_motion: bool = False
    launch_interval_ms: Range = (680.0, 1400.0)
    particle_count: tuple[int, int] = (44, 82)
    salvo_chance: float = 0.4
    salvo_delay_ms: Range = (120.0, 260.0)
    crackle: bool = True

    particle_cap: int = 1400
    trail_length: int = 7

    speed_range: Range = (3.6, 5.1)
    launch_x_band: Range = (0.1, 0.9)
    launch_y_offset: float = 10.0
    target_x_jitter: float = 80.0
    target_y_band: Range = (0.1, 0.55)

    particle_force: Range = (1.3, 5.8)
    particle_decay: Range = (0.012, 0.022)
    particle_size: Range = (1.5, 3.1)
    gravity: float = 0.045
    friction: float = 0.985

    resume_offset_ms: float = 250.0
    resize_debounce_ms: float = 120.0
    max_density: float = 2.0

    palette: tuple[str, ...] = DEFAULT_PALETTE
    intensity_divisor: float = 60.0
    pan_limit: float = 0.9

    def __post_init__(self) -> None:
        for name in (
            "launch_interval_ms",
            "particle_count",
            "salvo_delay_ms",
            "speed_range",
            "launch_x_band",
            "target_y_band",
            "particle_force",
            "particle_decay",
            "particle_size",
        ):
            lo, hi = getattr(self, name)
            if lo < 0 or lo > hi:
                raise ValueError(f"{name} must satisfy 0 <= min <= max, got {(lo, hi)}")
        if not 0.0 <= self.salvo_chance <= 1.0:
            raise ValueError(f"salvo_chance must be in [0, 1], got {self.salvo_chance}")
        if self.particle_cap < 1:
            raise ValueError(f"particle_cap must be >= 1, got {self.particle_cap}")
        if self.trail_length < 1:
            raise ValueError(f"trail_length must be >= 1, got {self.trail_length}")
        if not 0.0 < self.friction <= 1.0:
            raise ValueError(f"friction must be in (0, 1], got {self.friction}")
        if self.max_density <= 0:
            raise ValueError(f"max_density must be positive, got {self.max_density}")
        if not self.palette:
            raise ValueError("palette must not be empty")

    @classmethod
    def for_motion(cls, reduced_motion: bool, **overrides: object) -> ShowConfig:
        """Return the preset for the given motion preference."""
        base = cls()
        if reduced_motion:
            base = replace(
                base,
                reduced_motion=True,
                launch_interval_ms=(1800.0, 2800.0),
                particle_count=(18, 18),
                salvo_chance=0.0,
                crackle=False,
            )
        if overrides:
            base = replace(base, **overrides)  # type: ignore[arg-type]
        return base
