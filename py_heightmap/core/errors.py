"""Exception types raised by the heightmap core."""


class HeightmapError(Exception):
    """Base class for heightmap generation errors."""


class InvalidDimensionError(HeightmapError, ValueError):
    """Grid dimensions are not of the form 2^k + 1 (k >= 1) or not square."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(
            f"Grid must be square with side 2^k + 1 (k >= 1), got {width}x{height}"
        )


class OutOfRangeError(HeightmapError, IndexError):
    """Indexed access outside the grid bounds."""

    def __init__(self, row: int, col: int, width: int, height: int):
        self.row = row
        self.col = col
        super().__init__(
            f"Index ({row}, {col}) outside grid of {width}x{height}"
        )


class DegenerateRangeError(HeightmapError, ArithmeticError):
    """Normalization found a zero-width (or non-finite) value range."""

    def __init__(self, low: float, high: float):
        self.low = low
        self.high = high
        super().__init__(f"Cannot normalize value range [{low}, {high}]")
