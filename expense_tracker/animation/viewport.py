"""
Ambient viewport: current size plus resize listeners.
"""

from typing import Callable

ResizeListener = Callable[[int, int], None]


class Viewport:
    """The window the background is sized to."""

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self._listeners: list[ResizeListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_resize_listener(self, listener: ResizeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_resize_listener(self, listener: ResizeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def resize(self, width: int, height: int) -> None:
        """Record the new size and notify every listener."""
        self.width = int(width)
        self.height = int(height)
        # Listeners may unregister themselves while being notified
        for listener in list(self._listeners):
            listener(self.width, self.height)
