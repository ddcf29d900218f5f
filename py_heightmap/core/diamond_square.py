"""
Diamond-square heightmap generation with toroidal wraparound.

Fills a HeightGrid by recursive midpoint displacement. The four corners
share one sample and every edge midpoint on the outer boundary is copied to
the opposite boundary, so the finished grid tiles seamlessly.
"""

import time

import structlog

from .height_grid import HeightGrid
from .noise import NoiseLike, as_noise_source

logger = structlog.get_logger()


def _average(a: float, b: float, c: float, d: float) -> float:
    return (a + b + c + d) / 4.0


class DiamondSquareGenerator:
    """
    Plasma fractal generator.

    Rows of the grid play the role of the x axis (left/right) and columns
    the y axis (top/bottom). The noise source is sampled once for the
    corners at iteration 0 and once per computed point afterwards, with
    the iteration number growing by one per subdivision pass.
    """

    def __init__(
        self,
        noise: NoiseLike,
        noise_min: float = -1.0,
        noise_max: float = 1.0,
    ):
        """
        Initialize the generator.

        Args:
            noise: NoiseSource or (min, max, iteration) -> value callable
            noise_min: Lower displacement bound passed to the noise source
            noise_max: Upper displacement bound passed to the noise source
        """
        self.noise = as_noise_source(noise)
        self.noise_min = noise_min
        self.noise_max = noise_max

    def _noise(self, iteration: int) -> float:
        return self.noise.sample(self.noise_min, self.noise_max, iteration)

    def generate(self, grid: HeightGrid) -> HeightGrid:
        """
        Fill the grid in place.

        Clamping is left suppressed on return since the raw values are not
        yet in [0, 1]; normalization re-enables it. If the noise source
        raises, clamping is restored and the error propagates.
        """
        started = time.perf_counter()
        last = grid.size - 1

        grid.suppress_clamping(True)
        try:
            grid.fill(0.0)

            corner = self._noise(0)
            grid[0, 0] = grid[0, last] = grid[last, 0] = grid[last, last] = corner

            side = last
            squares = 1
            offset = 1
            while side > 1:
                for i in range(squares):
                    for j in range(squares):
                        self._subdivide(grid, i * side, j * side, side, offset)
                side //= 2
                squares *= 2
                offset += 1
        except Exception:
            grid.suppress_clamping(False)
            raise

        logger.debug(
            "Diamond-square pass complete",
            size=grid.size,
            passes=offset - 1,
            elapsed=round(time.perf_counter() - started, 4),
        )
        return grid

    def _subdivide(
        self, grid: HeightGrid, left: int, top: int, side: int, offset: int
    ) -> None:
        """Run the diamond step and the four square steps for one sub-square."""
        last = grid.size - 1
        half = side // 2
        right = left + side
        bottom = top + side
        mid_x = left + half
        mid_y = top + half

        # Diamond step
        center = _average(
            grid[left, top], grid[left, bottom], grid[right, top], grid[right, bottom]
        ) + self._noise(offset)
        grid[mid_x, mid_y] = center

        # Square step, top edge
        above = top - half if top - half >= 0 else last - half
        value = _average(
            grid[left, top], grid[right, top], center, grid[mid_x, above]
        ) + self._noise(offset)
        grid[mid_x, top] = value
        if top == 0:
            grid[mid_x, last] = value

        # Bottom edge
        below = top + half if bottom + half > last else bottom - half
        value = _average(
            grid[left, bottom], grid[right, bottom], center, grid[mid_x, below]
        ) + self._noise(offset)
        grid[mid_x, bottom] = value
        if bottom == last:
            grid[mid_x, 0] = value

        # Left edge
        before = left - half if left - half >= 0 else last - half
        value = _average(
            grid[left, top], grid[left, bottom], center, grid[before, mid_y]
        ) + self._noise(offset)
        grid[left, mid_y] = value
        if left == 0:
            grid[last, mid_y] = value

        # Right edge
        after = right + half if right + half <= last else half
        value = _average(
            grid[right, top], grid[right, bottom], center, grid[after, mid_y]
        ) + self._noise(offset)
        grid[right, mid_y] = value
        if right == last:
            grid[0, mid_y] = value


def diamond_square(
    grid: HeightGrid,
    noise: NoiseLike,
    noise_min: float = -1.0,
    noise_max: float = 1.0,
) -> HeightGrid:
    """Fill grid with a diamond-square fractal; see DiamondSquareGenerator."""
    return DiamondSquareGenerator(noise, noise_min, noise_max).generate(grid)
