"""
Particle field background.

    handle = mount(1920, 1080, scheduler=ManualFrameScheduler())
    resize(handle, 1280, 720)
    stop(handle)
"""

from expense_tracker.animation.animator import (
    AnimationHandle,
    default_scheduler,
    default_surface_factory,
    mount,
    resize,
    stop,
)
from expense_tracker.animation.export import render_frames, render_gif
from expense_tracker.animation.field import ParticleField, create_particles, reflect
from expense_tracker.animation.scheduler import (
    AsyncioFrameScheduler,
    FrameScheduler,
    ManualFrameScheduler,
)
from expense_tracker.animation.surface import (
    DrawingContext,
    PillowContext,
    PillowSurface,
    RenderSurface,
    to_rgba,
)
from expense_tracker.animation.viewport import Viewport

__all__ = [
    "AnimationHandle",
    "AsyncioFrameScheduler",
    "DrawingContext",
    "FrameScheduler",
    "ManualFrameScheduler",
    "ParticleField",
    "PillowContext",
    "PillowSurface",
    "RenderSurface",
    "Viewport",
    "create_particles",
    "default_scheduler",
    "default_surface_factory",
    "mount",
    "reflect",
    "render_frames",
    "render_gif",
    "resize",
    "stop",
    "to_rgba",
]
