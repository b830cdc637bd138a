"""
Headless rendering of the particle background to an animated GIF.

Streamlit has no per-frame canvas, so the front end shows a pre-rendered
loop instead: the real animator is mounted on a Pillow surface, driven by a
manual scheduler, and every frame is captured.
"""

import random
from io import BytesIO
from typing import Optional

import structlog

from expense_tracker.animation.animator import mount, stop
from expense_tracker.animation.scheduler import ManualFrameScheduler
from expense_tracker.animation.surface import PillowSurface
from expense_tracker.config import get_settings
from expense_tracker.models.animation import AnimationConfig


logger = structlog.get_logger(__name__)


def render_frames(
    width: int,
    height: int,
    frames: int,
    seed: Optional[int] = None,
    config: Optional[AnimationConfig] = None,
    background: Optional[str] = None,
) -> list:
    """
    Run the animator for `frames` frames and return a Pillow image per frame.
    """
    settings = get_settings().animation
    surface = PillowSurface(width, height, background=background or settings.background_color)
    scheduler = ManualFrameScheduler(frame_interval=1 / settings.frame_rate)

    handle = mount(
        width,
        height,
        config=config,
        rng=random.Random(seed),
        scheduler=scheduler,
        surface_factory=lambda w, h: surface,
    )

    images = []
    try:
        for _ in range(frames):
            if not scheduler.tick():
                break
            images.append(surface.snapshot())
    finally:
        stop(handle)
    return images


def render_gif(
    width: int,
    height: int,
    frames: Optional[int] = None,
    seed: Optional[int] = None,
    config: Optional[AnimationConfig] = None,
    background: Optional[str] = None,
) -> bytes:
    """
    Render the particle background as a looping GIF.

    Args:
        width, height: Viewport size to render at
        frames: Number of frames (BACKGROUND_GIF_FRAMES if None)
        seed: Seed for a reproducible particle layout
        config: Explicit tunables; derived from width if None
        background: Clear color (BACKGROUND_BACKGROUND_COLOR if None)

    Returns:
        GIF bytes, or b"" if nothing could be rendered
    """
    settings = get_settings().animation
    frames = frames or settings.gif_frames
    images = render_frames(width, height, frames, seed=seed, config=config, background=background)
    if not images:
        logger.warning("background_gif_empty", width=width, height=height)
        return b""

    buffer = BytesIO()
    images[0].save(
        buffer,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=max(1, round(1000 / settings.frame_rate)),
        loop=0,
    )
    logger.debug("background_gif_rendered", frames=len(images), size=buffer.tell())
    return buffer.getvalue()
