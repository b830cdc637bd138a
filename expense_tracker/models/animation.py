"""
Animation Models for the Particle Field Background

The particle field is purely decorative. Particles are recreated on every
mount and never persisted, so these models carry no identity or
timestamps, only the simulation state and the tunables that derive it.

DESIGN DECISION: Thresholds are derived from the viewport width rather than
configured per deployment. AnimationConfig exists so callers and tests can
override them explicitly.
"""

import math
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field


# Viewports narrower than this get fewer, slower particles
SMALL_VIEWPORT_WIDTH = 600

DEFAULT_PALETTE = ["#6B8E23", "#66CDAA", "#20B2AA", "#4682B4", "#5F9EA0"]

# 0xBF / 0xFF, roughly 75% opacity
DEFAULT_ALPHA = 0xBF

HexColor = Annotated[str, Field(pattern=r"^#[0-9A-Fa-f]{6}$")]


class Particle(BaseModel):
    """
    A single simulated dot.

    Position and velocity are mutated in place every frame;
    radius and color are fixed at creation.
    """

    x: float
    y: float
    dx: float
    dy: float
    radius: float = Field(..., gt=0)
    color: HexColor

    def distance_to(self, other: "Particle") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


class AnimationConfig(BaseModel):
    """
    Tunables for one particle field.

    Use `for_viewport()` to get the values derived from the viewport width.
    """
    model_config = ConfigDict(frozen=True)

    particle_count: int = Field(
        default=50,
        ge=0,
        description="Number of particles created at mount"
    )
    speed_range: float = Field(
        default=2.0,
        gt=0,
        description="Velocity per axis is drawn from [-speed_range, speed_range]"
    )
    connection_threshold: float = Field(
        default=100.0,
        ge=0,
        description="Pairs closer than this are joined by a line"
    )
    base_radius: float = Field(
        default=5.0,
        gt=0,
        description="Radius before jitter"
    )
    radius_jitter: float = Field(
        default=0.3,
        ge=0,
        lt=1,
        description="Radius is base_radius * (1 +/- radius_jitter)"
    )
    palette: list[HexColor] = Field(
        default_factory=lambda: list(DEFAULT_PALETTE),
        min_length=1,
        description="Colors particles are drawn from"
    )
    alpha: int = Field(
        default=DEFAULT_ALPHA,
        ge=0,
        le=255,
        description="Opacity for dots and connection lines"
    )
    line_width: int = Field(
        default=1,
        ge=1,
        description="Connection line width"
    )

    @staticmethod
    def is_small_viewport(width: float) -> bool:
        return width < SMALL_VIEWPORT_WIDTH

    @classmethod
    def for_viewport(
        cls,
        width: float,
        palette: Optional[list[str]] = None,
    ) -> "AnimationConfig":
        """
        Derive the config for a viewport of the given width.

        Small viewports (width < 600): 25 particles, speed +/-1, threshold 75.
        Otherwise: 50 particles, speed +/-2, threshold 100.
        """
        small = cls.is_small_viewport(width)
        values = {
            "particle_count": 25 if small else 50,
            "speed_range": 1.0 if small else 2.0,
            "connection_threshold": 75.0 if small else 100.0,
        }
        if palette is not None:
            values["palette"] = palette
        return cls(**values)
