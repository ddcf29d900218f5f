"""
Height grid data model.

A square buffer of elevation values stored row-major in a NumPy array.
Values are clamped to [0, 1] on write unless clamping has been suppressed,
which the diamond-square pass does while intermediate sums overshoot.
"""

import math
import operator
from typing import Tuple

import numpy as np

from .errors import InvalidDimensionError, OutOfRangeError


def _clamp(value: float) -> float:
    if math.isnan(value):
        raise ValueError("Height values must not be NaN")
    return float(np.clip(value, 0.0, 1.0))


def is_valid_side(side: int) -> bool:
    """Return True if side is 2^k + 1 for some k >= 1."""
    n = side - 1
    return n >= 2 and (n & (n - 1)) == 0


class HeightGrid:
    """
    Fixed-size grid of scalar heights.

    The grid is allocated once and overwritten in place on every
    generation; it is never resized. It has no concurrency awareness,
    a single writer at a time is the caller's contract.
    """

    def __init__(self, width: int, height: int):
        """
        Create a zero-filled grid.

        Args:
            width: Number of columns, must equal height
            height: Number of rows, must be 2^k + 1 with k >= 1

        Raises:
            InvalidDimensionError: if the size cannot be subdivided
        """
        if width != height or not is_valid_side(width):
            raise InvalidDimensionError(width, height)

        self.width = width
        self.height = height
        self.values = np.zeros((height, width), dtype=np.float64)
        self.clamping_suppressed = False

    @classmethod
    def from_resolution(cls, resolution: int) -> "HeightGrid":
        """Create a (2^resolution + 1) square grid."""
        side = 2**resolution + 1
        return cls(side, side)

    @property
    def size(self) -> int:
        """Side length of the square grid."""
        return self.width

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    def _check(self, row: int, col: int) -> Tuple[int, int]:
        row = operator.index(row)
        col = operator.index(col)
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise OutOfRangeError(row, col, self.width, self.height)
        return row, col

    def get(self, row: int, col: int) -> float:
        """Return the stored value at (row, col)."""
        row, col = self._check(row, col)
        return float(self.values[row, col])

    def set(self, row: int, col: int, value: float) -> None:
        """Store a value, clamping to [0, 1] unless clamping is suppressed."""
        row, col = self._check(row, col)
        if not self.clamping_suppressed:
            value = _clamp(value)
        self.values[row, col] = value

    def __getitem__(self, index: Tuple[int, int]) -> float:
        row, col = index
        return self.get(row, col)

    def __setitem__(self, index: Tuple[int, int], value: float) -> None:
        row, col = index
        self.set(row, col, value)

    def suppress_clamping(self, suppressed: bool = True) -> None:
        """Toggle the [0, 1] clamp applied on write."""
        self.clamping_suppressed = suppressed

    def fill(self, value: float) -> None:
        """Overwrite every cell in place."""
        if not self.clamping_suppressed:
            value = _clamp(value)
        self.values.fill(value)

    def copy_from(self, other: "HeightGrid") -> None:
        """Copy another grid's values into this buffer without reallocating."""
        if other.shape != self.shape:
            raise InvalidDimensionError(other.width, other.height)
        np.copyto(self.values, other.values)

    def snapshot(self) -> np.ndarray:
        """Return a read-only copy of the current values."""
        data = self.values.copy()
        data.flags.writeable = False
        return data

    def min(self) -> float:
        return float(self.values.min())

    def max(self) -> float:
        return float(self.values.max())

    def __repr__(self) -> str:
        return f"HeightGrid({self.width}x{self.height})"
