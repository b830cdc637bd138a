"""
Frame Schedulers

The animator never loops on its own. At the end of each frame it asks a
FrameScheduler for exactly one more callback, the same contract as a
browser's requestAnimationFrame. Schedulers only promise "skip future
callback" on cancel; the animator still checks its own liveness flag at
callback entry.
"""

import asyncio
import itertools
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import structlog


logger = structlog.get_logger(__name__)

FrameCallback = Callable[[float], None]


class FrameScheduler(ABC):
    """Source of one-shot per-frame callbacks."""

    @abstractmethod
    def request_frame(self, callback: FrameCallback) -> Any:
        """
        Schedule `callback(timestamp)` for the next frame.

        Returns an opaque token accepted by cancel().
        """
        pass

    @abstractmethod
    def cancel(self, token: Any) -> None:
        """Best-effort: skip the callback if it hasn't run yet."""
        pass


class ManualFrameScheduler(FrameScheduler):
    """
    Runs pending callbacks only when tick() is called.

    Used for headless rendering (GIF export) and deterministic tests.
    Callbacks requested during a tick run on the following tick.
    """

    def __init__(self, frame_interval: float = 1 / 60):
        self._pending: dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)
        self._frame_interval = frame_interval
        self.now = 0.0

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        token = next(self._ids)
        self._pending[token] = callback
        return token

    def cancel(self, token: Any) -> None:
        self._pending.pop(token, None)

    def tick(self) -> int:
        """Advance one frame. Returns how many callbacks ran."""
        due = list(self._pending.values())
        self._pending.clear()
        self.now += self._frame_interval
        for callback in due:
            callback(self.now)
        return len(due)

    def run(self, frames: int) -> int:
        """Tick up to `frames` times, stopping early once nothing is pending."""
        ticks = 0
        for _ in range(frames):
            if not self._pending:
                break
            self.tick()
            ticks += 1
        return ticks


class AsyncioFrameScheduler(FrameScheduler):
    """
    Timer-driven frames on an asyncio event loop.

    Must be used from code running inside the loop unless `loop` is given.
    """

    def __init__(
        self,
        frame_rate: int = 60,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        if frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {frame_rate}")
        self._interval = 1.0 / frame_rate
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        loop = self._get_loop()
        return loop.call_later(self._interval, self._run, callback)

    def cancel(self, token: Any) -> None:
        if token is not None:
            token.cancel()

    @staticmethod
    def _run(callback: FrameCallback) -> None:
        started = time.perf_counter()
        callback(started)
        elapsed = time.perf_counter() - started
        if elapsed > 0.05:
            logger.debug("slow_frame", elapsed_ms=round(elapsed * 1000, 1))
