"""
CPU colour mapping for generated heightmaps.

Converts normalized heights into RGBA images through a gradient lookup and
caches the result until the controller publishes new terrain.
"""

from typing import Optional, Sequence, Union

import matplotlib
import numpy as np
import structlog

from .core.generation import GenerationController

logger = structlog.get_logger()

DEFAULT_PALETTES = ("terrain", "gist_earth", "ocean")

Palette = Union[str, np.ndarray]


def palette_from_colormap(name: str, size: int = 256) -> np.ndarray:
    """Sample a matplotlib colormap into a (size, 4) uint8 lookup table."""
    cmap = matplotlib.colormaps[name]
    colors = cmap(np.linspace(0.0, 1.0, size))
    return np.round(colors * 255).astype(np.uint8)


def _as_palette(palette: Palette) -> np.ndarray:
    if isinstance(palette, str):
        return palette_from_colormap(palette)

    lut = np.asarray(palette)
    if lut.ndim != 2 or lut.shape[1] not in (3, 4) or len(lut) < 2:
        raise ValueError(f"Palette must have shape (N>=2, 3|4), got {lut.shape}")
    if lut.shape[1] == 3:
        alpha = np.full((len(lut), 1), 255, dtype=np.uint8)
        lut = np.hstack([lut.astype(np.uint8), alpha])
    return lut.astype(np.uint8)


def colorize(values: np.ndarray, lut: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
    """Map values in [0, 1] through a lookup table into an RGBA image."""
    index = np.rint(np.clip(values, 0.0, 1.0) * (len(lut) - 1)).astype(np.intp)
    if out is None:
        return lut[index]
    np.take(lut, index, axis=0, out=out)
    return out


def tile_image(
    image: np.ndarray, count: int = 3, spacing: int = 0, background: int = 0
) -> np.ndarray:
    """
    Lay out count x count copies of an image with gaps between them.

    With spacing=0 the tiles touch, which makes any seam visible.
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")
    h, w = image.shape[:2]
    out_h = count * h + (count - 1) * spacing
    out_w = count * w + (count - 1) * spacing
    canvas = np.full((out_h, out_w) + image.shape[2:], background, dtype=image.dtype)
    for i in range(count):
        for j in range(count):
            y = i * (h + spacing)
            x = j * (w + spacing)
            canvas[y:y + h, x:x + w] = image
    return canvas


class HeightmapRenderer:
    """
    Cached colour image of a controller's grid.

    The image is rebuilt only when the controller reports new terrain (or
    the palette changed) and no generation is running; otherwise the last
    image is returned as-is.
    """

    def __init__(self, controller: GenerationController, palette: Palette = "terrain"):
        self.controller = controller
        grid = controller.grid
        self._image = np.zeros((grid.height, grid.width, 4), dtype=np.uint8)
        self._stale = True
        self._palette_index = 0
        self.palette_name: Optional[str] = None
        self.lut = _as_palette(palette)
        if isinstance(palette, str):
            self.palette_name = palette
            if palette in DEFAULT_PALETTES:
                self._palette_index = DEFAULT_PALETTES.index(palette)
        self.render_count = 0

    def set_palette(self, palette: Palette) -> None:
        """Swap the gradient lookup and invalidate the cached image."""
        self.lut = _as_palette(palette)
        self.palette_name = palette if isinstance(palette, str) else None
        self._stale = True

    def cycle_palette(self, palettes: Sequence[str] = DEFAULT_PALETTES) -> str:
        """Advance to the next named palette and return its name."""
        self._palette_index = (self._palette_index + 1) % len(palettes)
        name = palettes[self._palette_index]
        self.set_palette(name)
        return name

    @property
    def needs_render(self) -> bool:
        return self._stale or self.controller.is_dirty

    def get_image(self) -> np.ndarray:
        """Return the RGBA image, re-rendering if terrain or palette changed."""
        if not self.needs_render or self.controller.is_generating():
            return self._image

        values = self.controller.read_snapshot()
        if values is None:
            return self._image

        colorize(values, self.lut, out=self._image)
        self._stale = False
        self.render_count += 1
        logger.debug("Heightmap image rendered", palette=self.palette_name, count=self.render_count)
        return self._image
