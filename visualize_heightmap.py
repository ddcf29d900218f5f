#!/usr/bin/env python3
"""
Visualize a generated heightmap as a tiled preview.
Tiling the terrain side by side makes seams (or their absence) visible.
"""

import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

sys.path.append(str(Path(__file__).parent))

from py_heightmap.config import get_settings
from py_heightmap.core import DecayingUniformNoise, GenerationController, HeightGrid
from py_heightmap.logging_config import configure_logging
from py_heightmap.renderer import HeightmapRenderer, tile_image


def print_statistics(values):
    """Print summary statistics for a normalized grid."""
    print(f"\nHeightmap statistics:")
    print(f"  Size: {values.shape[1]}x{values.shape[0]}")
    print(f"  Min height: {np.min(values):.4f}")
    print(f"  Max height: {np.max(values):.4f}")
    print(f"  Mean height: {np.mean(values):.4f}")
    print(f"  Std deviation: {np.std(values):.4f}")
    seams = np.array_equal(values[0], values[-1]) and np.array_equal(values[:, 0], values[:, -1])
    print(f"  Seamless edges: {'yes' if seams else 'NO'}")


def visualize_heightmap(resolution, seed, palette, tiles, spacing, output, show=False):
    """
    Generate and save a tiled heightmap preview.

    Args:
        resolution: Grid side is 2**resolution + 1
        seed: Noise seed
        palette: Matplotlib colormap name
        tiles: Tiles per axis
        spacing: Gap between tiles in pixels
        output: PNG path
        show: Open an interactive window after saving
    """
    settings = get_settings()
    grid = HeightGrid.from_resolution(resolution)
    print(f"Generating {grid.size}x{grid.size} heightmap (seed={seed})...")

    with GenerationController(
        grid,
        noise_min=settings.noise_min,
        noise_max=settings.noise_max,
        margin=settings.normalize_margin,
    ) as controller:
        controller.request_generation(DecayingUniformNoise(seed, decay=settings.noise_decay))
        controller.wait()
        controller.poll()
        if controller.last_error is not None:
            print(f"Generation failed: {controller.last_error}")
            return 1

        renderer = HeightmapRenderer(controller, palette)
        values = controller.grid.snapshot()
        image = renderer.get_image()

    print_statistics(values)

    preview = tile_image(image, count=tiles, spacing=spacing)

    fig, ax = plt.subplots(figsize=(10, 10))
    ax.imshow(preview, interpolation="nearest")
    ax.set_title(f"Diamond-square terrain - {grid.size}x{grid.size} - seed {seed}")
    ax.set_axis_off()

    plt.savefig(output, dpi=150, bbox_inches="tight")
    print(f"\nPreview saved to: {output}")

    if show:
        plt.show()
    plt.close(fig)
    return 0


def main(argv=None):
    """Parse arguments and render a preview."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--resolution", type=int, default=settings.resolution,
                        help="grid side is 2**resolution + 1")
    parser.add_argument("--seed", type=int, default=settings.seed)
    parser.add_argument("--palette", default=settings.palette)
    parser.add_argument("--tiles", type=int, default=settings.tile_count)
    parser.add_argument("--spacing", type=int, default=0,
                        help="gap between tiles; 0 shows seams directly")
    parser.add_argument("--output", default=None)
    parser.add_argument("--show", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level, settings.log_format)

    output = args.output or f"heightmap_{args.resolution}_{args.seed}.png"
    return visualize_heightmap(
        args.resolution, args.seed, args.palette, args.tiles, args.spacing, output, args.show
    )


if __name__ == "__main__":
    sys.exit(main())
