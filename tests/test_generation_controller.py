"""Tests for background generation control."""

import numpy as np
import pytest

from py_heightmap.config import Settings
from py_heightmap.core import (
    DecayingUniformNoise,
    GenerationController,
    HeightGrid,
    generate_heightmap,
)

TIMEOUT = 10


@pytest.fixture
def controller():
    """Create a controller over a 33x33 grid."""
    ctrl = GenerationController(HeightGrid.from_resolution(5))
    yield ctrl
    ctrl.shutdown()


def expected_terrain(resolution, seed):
    """Generate the same terrain synchronously for comparison."""
    grid = HeightGrid.from_resolution(resolution)
    return generate_heightmap(grid, DecayingUniformNoise(seed)).values


class TestGenerationLifecycle:
    """Test the Idle -> Generating -> Idle cycle."""

    def test_initial_state(self, controller):
        assert not controller.is_generating()
        assert controller.last_error is None
        assert controller.generation_count == 0
        assert controller.poll() is False
        assert controller.wait() is True

    def test_generation_completes(self, controller):
        assert controller.request_generation(DecayingUniformNoise(5)) is True
        assert controller.wait(TIMEOUT)

        assert not controller.is_generating()
        assert controller.poll() is True
        assert controller.poll() is False
        assert controller.generation_count == 1
        assert controller.is_dirty

        values = controller.grid.values
        assert values.min() >= 0.0
        assert values.max() <= 1.0

    def test_output_matches_synchronous_generation(self, controller):
        controller.request_generation(DecayingUniformNoise(77))
        controller.wait(TIMEOUT)

        np.testing.assert_array_equal(controller.grid.values, expected_terrain(5, 77))

    def test_accepts_plain_callable(self, controller):
        controller.request_generation(lambda lo, hi, i: 0.0)
        controller.wait(TIMEOUT)

        assert controller.poll() is True
        assert np.all(controller.grid.values == 0.5)

    def test_front_buffer_reused(self, controller):
        buffer = controller.grid.values
        for seed in range(3):
            controller.request_generation(DecayingUniformNoise(seed))
            controller.wait(TIMEOUT)

        assert controller.grid.values is buffer
        assert controller.generation_count == 3

    def test_sequential_runs_produce_new_terrain(self, controller):
        controller.request_generation(DecayingUniformNoise(1))
        controller.wait(TIMEOUT)
        first = controller.grid.snapshot()

        controller.request_generation(DecayingUniformNoise(2))
        controller.wait(TIMEOUT)

        assert not np.array_equal(first, controller.grid.values)

    def test_from_settings(self):
        settings = Settings(resolution=3, noise_min=-0.5, noise_max=0.5, normalize_margin=0.1)

        with GenerationController.from_settings(settings) as ctrl:
            assert ctrl.grid.size == 9
            assert ctrl.noise_min == -0.5
            assert ctrl.noise_max == 0.5
            assert ctrl.margin == 0.1


class TestBusyBehaviour:
    """Test at-most-one in-flight generation."""

    def test_request_while_busy_is_dropped(self, controller, blocking_noise):
        assert controller.request_generation(blocking_noise) is True
        assert blocking_noise.started.wait(TIMEOUT)

        assert controller.is_generating()
        assert controller.request_generation(DecayingUniformNoise(999)) is False

        blocking_noise.release.set()
        assert controller.wait(TIMEOUT)

        # The dropped request did not influence the running one
        np.testing.assert_array_equal(controller.grid.values, expected_terrain(5, 11))
        assert controller.generation_count == 1

    def test_rapid_requests_start_one_generation(self, controller, blocking_noise):
        results = [controller.request_generation(blocking_noise)]
        results += [controller.request_generation(DecayingUniformNoise(i)) for i in range(9)]

        assert results.count(True) == 1
        assert results[0] is True

        blocking_noise.release.set()
        controller.wait(TIMEOUT)
        assert controller.generation_count == 1

    def test_reads_skipped_while_generating(self, controller, blocking_noise):
        controller.request_generation(blocking_noise)
        blocking_noise.started.wait(TIMEOUT)

        assert controller.get_grid_for_read() is None
        assert controller.read_snapshot() is None
        assert controller.poll() is False

        blocking_noise.release.set()
        controller.wait(TIMEOUT)

        assert controller.get_grid_for_read() is controller.grid
        assert controller.read_snapshot() is not None

    def test_front_grid_untouched_during_generation(self, controller, blocking_noise):
        controller.request_generation(DecayingUniformNoise(3))
        controller.wait(TIMEOUT)
        before = controller.grid.snapshot()

        controller.request_generation(blocking_noise)
        blocking_noise.started.wait(TIMEOUT)

        np.testing.assert_array_equal(controller.grid.values, before)
        blocking_noise.release.set()

    def test_wait_timeout(self, controller, blocking_noise):
        controller.request_generation(blocking_noise)
        blocking_noise.started.wait(TIMEOUT)

        assert controller.wait(timeout=0.05) is False
        blocking_noise.release.set()
        assert controller.wait(TIMEOUT) is True


class TestDirtyFlag:
    """Test the consumer-facing dirty flag."""

    def test_snapshot_clears_dirty(self, controller):
        controller.request_generation(DecayingUniformNoise(4))
        controller.wait(TIMEOUT)

        snapshot = controller.read_snapshot()

        assert not controller.is_dirty
        np.testing.assert_array_equal(snapshot, controller.grid.values)

    def test_new_generation_marks_dirty(self, controller):
        controller.request_generation(DecayingUniformNoise(4))
        controller.wait(TIMEOUT)
        controller.mark_clean()
        assert not controller.is_dirty

        controller.request_generation(DecayingUniformNoise(5))
        controller.wait(TIMEOUT)

        assert controller.is_dirty


class TestFailures:
    """Test background failure capture."""

    def test_failure_recorded(self, controller, failing_noise):
        controller.request_generation(DecayingUniformNoise(8))
        controller.wait(TIMEOUT)
        controller.poll()
        before = controller.grid.snapshot()

        assert controller.request_generation(failing_noise) is True
        controller.wait(TIMEOUT)

        assert not controller.is_generating()
        assert isinstance(controller.last_error, RuntimeError)
        assert controller.poll() is False
        assert controller.generation_count == 1
        np.testing.assert_array_equal(controller.grid.values, before)

    def test_success_clears_last_error(self, controller, failing_noise):
        controller.request_generation(failing_noise)
        controller.wait(TIMEOUT)
        assert controller.last_error is not None

        controller.request_generation(DecayingUniformNoise(1))
        controller.wait(TIMEOUT)

        assert controller.last_error is None
        assert controller.poll() is True

    def test_request_after_shutdown(self):
        ctrl = GenerationController(HeightGrid(5, 5))
        ctrl.shutdown()

        with pytest.raises(RuntimeError):
            ctrl.request_generation(DecayingUniformNoise(0))


class TestDeterminism:
    """Test reproducibility across controllers."""

    def test_independent_runs_bit_identical(self):
        outputs = []
        for _ in range(2):
            with GenerationController(HeightGrid.from_resolution(5)) as ctrl:
                ctrl.request_generation(DecayingUniformNoise(seed=4242))
                ctrl.wait(TIMEOUT)
                outputs.append(ctrl.grid.snapshot())

        np.testing.assert_array_equal(outputs[0], outputs[1])
