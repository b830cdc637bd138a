"""
Particle Field Animator

Mounts the decorative particle background, keeps it running one frame at a
time, and tears it down again.

Lifecycle:
1. mount() -> allocate a surface sized to the viewport, derive the config
   from the viewport width, seed the particles, register one resize
   listener, request the first frame
2. every frame -> draw, advance, bounce, request the next frame
3. resize() -> change surface dimensions only; particles are left where
   they are and the bounce step brings stragglers back
4. stop() -> clear the liveness flag, cancel the pending frame, release the
   resize listener

FAILURE POLICY: the background is decoration. If no surface or drawing
context is available the animator does nothing at all - no particles, no
frames, no exception. A context that disappears later ends the loop the
same way. Both cases are logged, never raised.
"""

import asyncio
import random
from typing import Any, Callable, Optional

import structlog

from expense_tracker.animation.field import ParticleField
from expense_tracker.animation.scheduler import (
    AsyncioFrameScheduler,
    FrameScheduler,
    ManualFrameScheduler,
)
from expense_tracker.animation.surface import DrawingContext, PillowSurface, RenderSurface
from expense_tracker.animation.viewport import Viewport
from expense_tracker.audit import AuditLogger
from expense_tracker.config import get_settings
from expense_tracker.models.animation import AnimationConfig
from expense_tracker.models.audit import AuditEventBuilder


logger = structlog.get_logger(__name__)

SurfaceFactory = Callable[[int, int], Optional[RenderSurface]]


def default_surface_factory(width: int, height: int) -> RenderSurface:
    settings = get_settings().animation
    return PillowSurface(width, height, background=settings.background_color)


def default_scheduler() -> FrameScheduler:
    """
    Timer-driven frames on the running event loop.

    Outside a loop there is nothing to drive timers, so frames are left to
    a ManualFrameScheduler that the caller can tick.
    """
    frame_rate = get_settings().animation.frame_rate
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.warning("background_no_event_loop", fallback="manual_scheduler")
        return ManualFrameScheduler(frame_interval=1 / frame_rate)
    return AsyncioFrameScheduler(frame_rate=frame_rate, loop=loop)


class AnimationHandle:
    """
    One running particle background.

    Owns the particle field and the render surface exclusively; nothing
    outside the frame callback mutates them.
    """

    def __init__(
        self,
        surface: Optional[RenderSurface],
        field: ParticleField,
        scheduler: FrameScheduler,
        viewport: Viewport,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._surface = surface
        self._field = field
        self._scheduler = scheduler
        self._viewport = viewport
        self._audit_logger = audit_logger
        self._active = False
        self._listening = False
        self._pending: Any = None
        self.frames_rendered = 0

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_degraded(self) -> bool:
        """True when there was never anything to draw on."""
        return self._surface is None

    @property
    def surface(self) -> Optional[RenderSurface]:
        return self._surface

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def scheduler(self) -> FrameScheduler:
        return self._scheduler

    @property
    def config(self) -> AnimationConfig:
        return self._field.config

    @property
    def particles(self):
        return self._field.particles

    def start(self) -> None:
        if self._active or self.is_degraded:
            return
        self._active = True
        self._viewport.add_resize_listener(self._on_viewport_resize)
        self._listening = True
        self._pending = self._scheduler.request_frame(self._on_frame)

    def _on_viewport_resize(self, width: int, height: int) -> None:
        self.resize(width, height)

    def _on_frame(self, timestamp: float) -> None:
        # Liveness is checked first: a callback that was already queued when
        # stop() ran must neither draw nor reschedule.
        if not self._active:
            return
        self._pending = None

        ctx = self._current_context()
        if ctx is None:
            self._degrade("drawing context lost")
            return

        self._field.draw(ctx)
        self._field.step(self._surface.width, self._surface.height)
        self.frames_rendered += 1

        self._pending = self._scheduler.request_frame(self._on_frame)

    def _current_context(self) -> Optional[DrawingContext]:
        if self._surface is None:
            return None
        return self._surface.get_context()

    def _degrade(self, reason: str) -> None:
        logger.warning("background_animation_degraded", reason=reason)
        if self._audit_logger:
            self._audit_logger.log_local(AuditEventBuilder.animation_degraded(reason))
        self._shutdown()

    def _shutdown(self) -> None:
        self._active = False
        if self._pending is not None:
            self._scheduler.cancel(self._pending)
            self._pending = None
        if self._listening:
            self._viewport.remove_resize_listener(self._on_viewport_resize)
            self._listening = False

    def resize(self, width: int, height: int) -> None:
        """Match the surface to a new viewport size. Particles are not moved."""
        if self._surface is None:
            return
        self._surface.set_size(width, height)
        logger.debug("background_resized", width=width, height=height)

    def stop(self) -> None:
        """Halt the loop and release the resize listener. Safe to call twice."""
        was_running = self._active or self._listening
        self._shutdown()
        if was_running:
            logger.debug("background_animation_stopped", frames=self.frames_rendered)
            if self._audit_logger:
                self._audit_logger.log_local(
                    AuditEventBuilder.animation_stopped(self.frames_rendered)
                )


def mount(
    viewport_width: int,
    viewport_height: int,
    *,
    config: Optional[AnimationConfig] = None,
    rng: Optional[random.Random] = None,
    scheduler: Optional[FrameScheduler] = None,
    surface_factory: Optional[SurfaceFactory] = None,
    viewport: Optional[Viewport] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> AnimationHandle:
    """
    Start a particle background sized to the viewport.

    Args:
        viewport_width, viewport_height: Current viewport size
        config: Explicit tunables; derived from the viewport width if None
        rng: Random source for seeding (use random.Random(seed) in tests)
        scheduler: Frame source; see default_scheduler() if None
        surface_factory: Builds the render surface; may return None
        viewport: Ambient viewport to listen to for resizes
        audit_logger: Receives started/stopped/degraded events

    Returns:
        The handle of the running (or degraded) animation
    """
    viewport = viewport or Viewport(viewport_width, viewport_height)
    config = config or AnimationConfig.for_viewport(viewport_width)
    surface_factory = surface_factory or default_surface_factory

    try:
        surface = surface_factory(viewport_width, viewport_height)
    except Exception as e:
        logger.warning("background_surface_unavailable", error=str(e))
        surface = None

    if surface is not None and surface.get_context() is None:
        surface = None

    if surface is None:
        handle = AnimationHandle(
            surface=None,
            field=ParticleField([], config),
            scheduler=scheduler or ManualFrameScheduler(),
            viewport=viewport,
            audit_logger=audit_logger,
        )
        logger.warning("background_animation_degraded", reason="no drawing context")
        if audit_logger:
            audit_logger.log_local(AuditEventBuilder.animation_degraded("no drawing context"))
        return handle

    if scheduler is None:
        scheduler = default_scheduler()

    field = ParticleField.seeded(config, surface.width, surface.height, rng)
    handle = AnimationHandle(
        surface=surface,
        field=field,
        scheduler=scheduler,
        viewport=viewport,
        audit_logger=audit_logger,
    )
    handle.start()

    logger.debug(
        "background_animation_started",
        width=surface.width,
        height=surface.height,
        particles=len(field),
        small_viewport=AnimationConfig.is_small_viewport(viewport_width),
    )
    if audit_logger:
        audit_logger.log_local(
            AuditEventBuilder.animation_started(surface.width, surface.height, len(field))
        )
    return handle


def resize(handle: AnimationHandle, new_width: int, new_height: int) -> None:
    """Resize the handle's surface to a new viewport size."""
    handle.resize(new_width, new_height)


def stop(handle: AnimationHandle) -> None:
    """Stop the handle's render loop. Idempotent."""
    handle.stop()

