"""
Texture system for the tracer.

Implements:
- Solid color textures
- Image textures (pixel arrays, or files loaded with Pillow)
- Procedural 3D checker
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union
import logging
import math

import numpy as np
from PIL import Image

from .vec3 import Color, Point3

logger = logging.getLogger(__name__)


class Texture(ABC):
    """Abstract base class for textures."""

    @abstractmethod
    def value(self, u: float, v: float, point: Point3) -> Color:
        """Get the texture color at the given UV coordinates.

        Args:
            u: Horizontal texture coordinate [0, 1]
            v: Vertical texture coordinate [0, 1]
            point: 3D point in world space (for procedural textures)

        Returns:
            Color at this location
        """
        pass


class SolidColor(Texture):
    """A solid color texture."""

    def __init__(self, color: Color):
        self.color = color

    @classmethod
    def from_rgb(cls, r: float, g: float, b: float) -> SolidColor:
        return cls(Color(r, g, b))

    def value(self, u: float, v: float, point: Point3) -> Color:
        return self.color

    def __repr__(self) -> str:
        return f"SolidColor({self.color})"


class ImageTexture(Texture):
    """Nearest-texel lookup into an RGB pixel grid.

    ``u`` runs left to right and ``v`` bottom to top, so ``(0, 1)`` is the
    image's top-left pixel. Coordinates outside [0, 1] are clamped to the
    border texel, or wrapped around when ``repeat`` is set.
    """

    def __init__(self, pixels: np.ndarray, repeat: bool = False):
        """Wrap an in-memory pixel grid.

        Args:
            pixels: Array of shape (height, width, 3 or 4) holding linear
                values; an alpha channel is ignored
            repeat: Tile the image instead of clamping out-of-range u, v
        """
        pixels = np.asarray(pixels, dtype=np.float64)
        if pixels.ndim != 3 or pixels.shape[2] < 3 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError(f"expected a (height, width, 3) pixel array, got shape {pixels.shape}")

        self.pixels = pixels[:, :, :3]
        self.height, self.width = self.pixels.shape[:2]
        self.repeat = repeat
        self.filename: Optional[str] = None

    @classmethod
    def from_file(
        cls,
        filename: Union[str, Path],
        gamma: Optional[float] = 2.2,
        repeat: bool = False
    ) -> ImageTexture:
        """Load an image with Pillow.

        Args:
            filename: Path to the image file
            gamma: Exponent that turns stored 8-bit values into linear
                ones (2.2 for sRGB); None keeps the stored values, for
                images that already hold linear data
            repeat: Tile the image instead of clamping out-of-range u, v
        """
        path = Path(filename)
        if not path.exists():
            raise FileNotFoundError(f"Texture file not found: {path}")

        with Image.open(path) as img:
            pixels = np.asarray(img.convert('RGB'), dtype=np.float64) / 255.0
        if gamma is not None:
            pixels = np.power(pixels, gamma)

        texture = cls(pixels, repeat=repeat)
        texture.filename = str(path)
        logger.debug("Loaded texture %s (%dx%d, gamma=%s)", path, texture.width, texture.height, gamma)
        return texture

    def _texel(self, coord: float, size: int) -> int:
        if self.repeat:
            coord -= math.floor(coord)
        else:
            coord = min(max(coord, 0.0), 1.0)
        return min(int(coord * size), size - 1)

    def value(self, u: float, v: float, point: Point3) -> Color:
        i = self._texel(u, self.width)
        # Row 0 is the top of the image
        j = self.height - 1 - self._texel(v, self.height)
        return Color.from_array(self.pixels[j, i])


class CheckerTexture(Texture):
    """Solid 3D checker: cells of side ``1/scale`` alternate between two textures.

    Cells are picked by the parity of the summed integer cell coordinates,
    so the pattern is the same on any surface cutting through space.
    """

    def __init__(self, scale: float, even: Texture, odd: Texture):
        self.scale = scale
        self.even = even
        self.odd = odd

    @classmethod
    def from_colors(cls, scale: float, even: Color, odd: Color) -> CheckerTexture:
        return cls(scale, SolidColor(even), SolidColor(odd))

    def value(self, u: float, v: float, point: Point3) -> Color:
        cells = np.floor(point.to_array() * self.scale).astype(np.int64)
        texture = self.even if int(cells.sum()) % 2 == 0 else self.odd
        return texture.value(u, v, point)


def as_texture(albedo: Union[Texture, Color]) -> Texture:
    """Wrap a bare color in a SolidColor; pass textures through."""
    if isinstance(albedo, Texture):
        return albedo
    return SolidColor(albedo)
