"""
Rescale a generated heightmap into [0, 1].

The observed range is widened by a small margin before remapping so the
extremes of the terrain land just inside the display range.
"""

import numpy as np
import structlog

from .errors import DegenerateRangeError
from .height_grid import HeightGrid

logger = structlog.get_logger()

DEFAULT_MARGIN = 0.05
FLAT_VALUE = 0.5


def normalize(
    grid: HeightGrid, margin: float = DEFAULT_MARGIN, strict: bool = False
) -> HeightGrid:
    """
    Linearly remap grid values into [0, 1] in place.

    Args:
        grid: Fully populated grid, possibly outside [0, 1]
        margin: Fraction of the range added as headroom, split evenly
            between both ends
        strict: Raise DegenerateRangeError on flat terrain instead of
            filling the grid with 0.5

    Returns:
        The same grid, with clamping re-enabled
    """
    values = grid.values
    low = float(values.min())
    high = float(values.max())

    if not (np.isfinite(low) and np.isfinite(high)) or high == low:
        grid.suppress_clamping(False)
        if strict:
            raise DegenerateRangeError(low, high)
        logger.warning("Degenerate height range, using flat terrain", low=low, high=high)
        grid.fill(FLAT_VALUE)
        return grid

    spread = high - low
    low -= spread * margin / 2
    high += spread * margin / 2

    values -= low
    values /= high - low
    # Guard against rounding pushing values a hair outside the range
    np.clip(values, 0.0, 1.0, out=values)

    grid.suppress_clamping(False)
    logger.debug("Heightmap normalized", low=low, high=high, margin=margin)
    return grid
