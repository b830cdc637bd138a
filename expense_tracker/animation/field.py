"""
Particle Field Simulation

Owns the particle set of one mounted background and implements the
per-frame work: draw dots, draw proximity connections, advance positions,
bounce off the surface edges.

Boundary handling is a reflection: when a particle's edge crosses a wall
while moving outward, that axis' velocity changes sign once and the
overshoot is mirrored back inside. A particle that is far outside (only
possible after the surface shrinks) is brought back at most one step's
distance inside the wall, so it re-enters next to the edge it was beyond.
"""

import random
from typing import Optional

from expense_tracker.animation.surface import DrawingContext, to_rgba
from expense_tracker.models.animation import AnimationConfig, Particle


def _uniform_within(rng: random.Random, low: float, high: float) -> float:
    """Uniform sample in [low, high]; the midpoint if the range is empty."""
    if high < low:
        return (low + high) / 2.0
    return rng.uniform(low, high)


def _nonzero_speed(rng: random.Random, speed_range: float) -> float:
    speed = 0.0
    while speed == 0.0:
        speed = rng.uniform(-speed_range, speed_range)
    return speed


def create_particles(
    config: AnimationConfig,
    width: float,
    height: float,
    rng: Optional[random.Random] = None,
) -> list[Particle]:
    """
    Seed `config.particle_count` particles inside a width x height canvas.

    Args:
        config: Count, speed, radius and palette to draw from
        width, height: Canvas extent
        rng: Random source; pass a seeded Random for reproducible fields

    Returns:
        Particles whose circles lie fully inside the canvas
    """
    rng = rng or random.Random()
    particles = []
    for _ in range(config.particle_count):
        jitter = rng.uniform(-config.radius_jitter, config.radius_jitter)
        radius = config.base_radius * (1 + jitter)
        particles.append(Particle(
            x=_uniform_within(rng, radius, width - radius),
            y=_uniform_within(rng, radius, height - radius),
            dx=_nonzero_speed(rng, config.speed_range),
            dy=_nonzero_speed(rng, config.speed_range),
            radius=radius,
            color=rng.choice(config.palette),
        ))
    return particles


def reflect(position: float, velocity: float, radius: float, extent: float) -> tuple[float, float]:
    """
    Bounce one axis of a particle off the walls at 0 and `extent`.

    Returns the corrected (position, velocity). The result always satisfies
    radius <= position <= extent - radius, or sits at the center when the
    canvas is narrower than the particle.
    """
    low = radius
    high = extent - radius
    if high < low:
        return extent / 2.0, velocity

    step = abs(velocity)
    if position < low:
        if velocity < 0:
            velocity = -velocity
        position = min(low + min(low - position, step), high)
    elif position > high:
        if velocity > 0:
            velocity = -velocity
        position = max(high - min(position - high, step), low)
    return position, velocity


class ParticleField:
    """The particle set of one mounted background plus its frame logic."""

    def __init__(self, particles: list[Particle], config: AnimationConfig):
        self.particles = particles
        self.config = config

    @classmethod
    def seeded(
        cls,
        config: AnimationConfig,
        width: float,
        height: float,
        rng: Optional[random.Random] = None,
    ) -> "ParticleField":
        return cls(create_particles(config, width, height, rng), config)

    def __len__(self) -> int:
        return len(self.particles)

    def _rgba(self, particle: Particle) -> tuple[int, int, int, int]:
        return to_rgba(particle.color, self.config.alpha)

    def draw(self, ctx: DrawingContext) -> None:
        """Clear the surface, then draw every dot and every close pair."""
        ctx.clear()
        for particle in self.particles:
            ctx.fill_circle(particle.x, particle.y, particle.radius, self._rgba(particle))
        self.draw_connections(ctx)

    def draw_connections(self, ctx: DrawingContext) -> int:
        """
        Join every unordered pair closer than the connection threshold.

        The line takes the color of the lower-indexed particle.
        O(n^2) per frame; n is at most a few dozen.
        """
        threshold = self.config.connection_threshold
        drawn = 0
        count = len(self.particles)
        for i in range(count):
            first = self.particles[i]
            for j in range(i + 1, count):
                second = self.particles[j]
                if first.distance_to(second) < threshold:
                    ctx.line(
                        first.x, first.y, second.x, second.y,
                        self._rgba(first),
                        self.config.line_width,
                    )
                    drawn += 1
        return drawn

    def step(self, width: float, height: float) -> None:
        """Advance every particle by its velocity, then bounce off the edges."""
        for particle in self.particles:
            particle.x += particle.dx
            particle.y += particle.dy
            particle.x, particle.dx = reflect(particle.x, particle.dx, particle.radius, width)
            particle.y, particle.dy = reflect(particle.y, particle.dy, particle.radius, height)
