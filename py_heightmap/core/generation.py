"""
Background heightmap generation.

The controller runs diamond-square plus normalization on a single worker
thread. At most one generation is in flight per grid; requests made while
one is running are dropped. Each run writes into a scratch grid and is
published into the front grid under a short lock, so a failed run leaves
the visible terrain untouched.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from typing import Optional

import numpy as np
import structlog

from ..config import Settings, get_settings
from .diamond_square import DiamondSquareGenerator
from .height_grid import HeightGrid
from .noise import NoiseLike, as_noise_source
from .normalizer import DEFAULT_MARGIN, normalize

logger = structlog.get_logger()


def generate_heightmap(
    grid: HeightGrid,
    noise: NoiseLike,
    noise_min: float = -1.0,
    noise_max: float = 1.0,
    margin: float = DEFAULT_MARGIN,
) -> HeightGrid:
    """Synchronously fill and normalize a grid."""
    DiamondSquareGenerator(noise, noise_min, noise_max).generate(grid)
    return normalize(grid, margin)


class GenerationController:
    """
    Owns a height grid and its asynchronous regeneration.

    States are Idle and Generating. The consumer polls is_generating() (or
    uses read_snapshot()) and keeps showing its cached output while a run
    is in progress.
    """

    def __init__(
        self,
        grid: HeightGrid,
        noise_min: float = -1.0,
        noise_max: float = 1.0,
        margin: float = DEFAULT_MARGIN,
    ):
        """
        Initialize the controller.

        Args:
            grid: Front grid read by consumers
            noise_min: Lower displacement bound for the generator
            noise_max: Upper displacement bound for the generator
            margin: Normalization headroom
        """
        self.grid = grid
        self.noise_min = noise_min
        self.noise_max = noise_max
        self.margin = margin

        # Allocated once and reused by every run
        self._scratch = HeightGrid(grid.width, grid.height)

        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="heightmap-gen"
        )
        self._future: Optional[Future] = None
        self._generating = False
        self._dirty = True
        self._closed = False

        self.last_error: Optional[BaseException] = None
        self.generation_count = 0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "GenerationController":
        """Build a controller and grid sized from settings."""
        settings = settings or get_settings()
        grid = HeightGrid.from_resolution(settings.resolution)
        return cls(
            grid,
            noise_min=settings.noise_min,
            noise_max=settings.noise_max,
            margin=settings.normalize_margin,
        )

    def request_generation(self, noise: NoiseLike) -> bool:
        """
        Start a background generation unless one is already running.

        Never blocks. Returns True if the request was accepted, False if it
        was dropped because a generation is in flight.
        """
        source = as_noise_source(noise)
        with self._lock:
            if self._closed:
                raise RuntimeError("GenerationController has been shut down")
            if self._generating:
                logger.debug("Generation in progress, request dropped")
                return False
            self._generating = True
            try:
                self._future = self._executor.submit(self._run, source)
            except Exception:
                self._generating = False
                raise

        logger.info("Heightmap generation started", size=self.grid.size)
        return True

    def _run(self, noise) -> None:
        started = time.perf_counter()
        try:
            generate_heightmap(
                self._scratch, noise, self.noise_min, self.noise_max, self.margin
            )
            with self._lock:
                self.grid.copy_from(self._scratch)
                self._dirty = True
                self.last_error = None
                self.generation_count += 1
            logger.info(
                "Heightmap generation completed",
                size=self.grid.size,
                elapsed=round(time.perf_counter() - started, 3),
                generation=self.generation_count,
            )
        except Exception as e:
            logger.error("Heightmap generation failed", error=str(e), exc_info=True)
            with self._lock:
                self.last_error = e
            raise
        finally:
            with self._lock:
                self._generating = False

    def is_generating(self) -> bool:
        """Non-blocking status query."""
        # Lock-free read; a single bool assignment is atomic
        return self._generating

    @property
    def is_dirty(self) -> bool:
        """True when published values are newer than the last consumer read."""
        return self._dirty

    def mark_clean(self) -> None:
        with self._lock:
            self._dirty = False

    def get_grid_for_read(self) -> Optional[HeightGrid]:
        """Return the front grid, or None while a generation is running."""
        # Cooperative check without the lock; read_snapshot() gives a consistent copy
        if self._generating:
            return None
        return self.grid

    def read_snapshot(self) -> Optional[np.ndarray]:
        """
        Return a consistent copy of the grid values and clear the dirty flag.

        Returns None while a generation is running.
        """
        with self._lock:
            if self._generating:
                return None
            snapshot = self.grid.snapshot()
            self._dirty = False
        return snapshot

    def poll(self) -> bool:
        """
        Collect a finished generation, if any.

        Meant to be called once per frame. Returns True when a generation
        completed successfully since the last poll. Failures are available
        through last_error.
        """
        with self._lock:
            future = self._future
            if future is None or not future.done():
                return False
            self._future = None
        return future.exception() is None

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the in-flight generation finishes; False on timeout."""
        future = self._future
        if future is None:
            return True
        wait_futures([future], timeout=timeout)
        return future.done()

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting requests and release the worker thread."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "GenerationController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
