"""
Render Surfaces for the Particle Field

A RenderSurface is the canvas the animator draws into; a DrawingContext is
the object that actually issues draw calls. They are split so a surface can
exist without a usable context (the animator treats that as "render nothing").

PillowSurface renders into an in-memory Pillow image. Resizing replaces the
image but keeps the same context object, so a context held by the animator
is never invalidated mid-draw.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional

from PIL import Image, ImageColor, ImageDraw


RGBA = tuple[int, int, int, int]


@lru_cache(maxsize=64)
def to_rgba(color: str, alpha: int) -> RGBA:
    """'#RRGGBB' plus an alpha byte -> (r, g, b, a)."""
    r, g, b = ImageColor.getrgb(color)[:3]
    return (r, g, b, alpha)


class DrawingContext(ABC):
    """Draw calls the particle field needs, nothing more."""

    @abstractmethod
    def clear(self) -> None:
        """Erase the whole surface."""
        pass

    @abstractmethod
    def fill_circle(self, x: float, y: float, radius: float, color: RGBA) -> None:
        """Draw a filled circle centered on (x, y)."""
        pass

    @abstractmethod
    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: RGBA,
        width: int = 1,
    ) -> None:
        """Stroke a straight line between two points."""
        pass


class RenderSurface(ABC):
    """A resizable canvas that may or may not hand out a drawing context."""

    @property
    @abstractmethod
    def width(self) -> int:
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def set_size(self, width: int, height: int) -> None:
        """Change the surface dimensions. Existing pixels may be discarded."""
        pass

    @abstractmethod
    def get_context(self) -> Optional[DrawingContext]:
        """The drawing context, or None if the surface can't be drawn on."""
        pass


class PillowContext(DrawingContext):
    """Draws onto whatever image its PillowSurface currently holds."""

    def __init__(self, surface: "PillowSurface"):
        self._surface = surface

    def clear(self) -> None:
        image = self._surface.image
        image.paste(self._surface.background, (0, 0, image.width, image.height))

    def fill_circle(self, x: float, y: float, radius: float, color: RGBA) -> None:
        self._surface.draw.ellipse(
            [x - radius, y - radius, x + radius, y + radius],
            fill=color,
        )

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: RGBA,
        width: int = 1,
    ) -> None:
        self._surface.draw.line([(x1, y1), (x2, y2)], fill=color, width=width)


class PillowSurface(RenderSurface):
    """
    In-memory RGB canvas backed by Pillow.

    Draw calls use RGBA blending, so translucent dots and lines mix with
    whatever is underneath them the same way a browser canvas does.
    """

    def __init__(self, width: int, height: int, background: str = "#FFFFFF"):
        self.background = ImageColor.getrgb(background)[:3]
        self._image = self._new_image(width, height)
        self._draw: Optional[ImageDraw.ImageDraw] = None
        self._context = PillowContext(self)

    def _new_image(self, width: int, height: int) -> Image.Image:
        # Pillow can't allocate a zero-sized image
        return Image.new("RGB", (max(1, int(width)), max(1, int(height))), self.background)

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def draw(self) -> ImageDraw.ImageDraw:
        if self._draw is None:
            self._draw = ImageDraw.Draw(self._image, "RGBA")
        return self._draw

    def set_size(self, width: int, height: int) -> None:
        self._image = self._new_image(width, height)
        self._draw = None

    def get_context(self) -> Optional[DrawingContext]:
        return self._context

    def snapshot(self) -> Image.Image:
        """Copy of the current frame."""
        return self._image.copy()
