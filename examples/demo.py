#!/usr/bin/env python3
"""
Map Art Generator Demo Script

This script demonstrates the full conversion pipeline by:
1. Creating synthetic map art (no external images needed)
2. Building it with every build mode
3. Exporting .nbt / .zip structure files
4. Printing material lists and timings

Run with: python examples/demo.py
"""

import sys
from pathlib import Path
import numpy as np
import time

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mapart_generator import BuildMode, MapArtConverter, get_preset
from mapart_generator.exporters import crc32
from mapart_generator.palette import BASE_COLORS, WATER_INDEX, Shade, shaded_rgb

MAP = 128


def color_index(name: str) -> int:
    for i, color in enumerate(BASE_COLORS):
        if color.name == name:
            return i
    raise KeyError(name)


def create_test_map_hills() -> np.ndarray:
    """
    Rolling grass hills over sand, shaded by the slope of a sine wave.

    Returns:
        RGBA array of shape (128, 128, 4)
    """
    rgba = np.zeros((MAP, MAP, 4), dtype=np.uint8)
    grass = color_index("GRASS")
    sand = color_index("SAND")

    for x in range(MAP):
        height = 40 + int(12 * np.sin(x / 9.0))
        for z in range(MAP):
            index = grass if z < height + 50 else sand
            # Alternate shades along each column to force height steps
            phase = (z + x // 4) % 6
            if phase < 2:
                shade = Shade.LIGHT
            elif phase < 4:
                shade = Shade.FLAT
            else:
                shade = Shade.DARK
            rgba[z, x] = [*shaded_rgb(index, shade), 255]

    return rgba


def create_test_map_lake() -> np.ndarray:
    """
    A lake with a shallow rim and a deep centre, surrounded by stone.

    Returns:
        RGBA array of shape (128, 128, 4)
    """
    rgba = np.zeros((MAP, MAP, 4), dtype=np.uint8)
    stone = color_index("STONE")
    center = MAP // 2

    for z in range(MAP):
        for x in range(MAP):
            dist = np.sqrt((x - center) ** 2 + (z - center) ** 2)
            if dist < 30:
                rgba[z, x] = [*shaded_rgb(WATER_INDEX, Shade.DARK), 255]
            elif dist < 40:
                rgba[z, x] = [*shaded_rgb(WATER_INDEX, Shade.FLAT), 255]
            elif dist < 44:
                rgba[z, x] = [*shaded_rgb(WATER_INDEX, Shade.LIGHT), 255]
            elif dist < 60:
                rgba[z, x] = [*shaded_rgb(stone, Shade.FLAT), 255]

    return rgba


def create_test_map_banner() -> np.ndarray:
    """
    Colored wool stripes with transparent gaps and dark edges.

    Returns:
        RGBA array of shape (128, 128, 4)
    """
    rgba = np.zeros((MAP, MAP, 4), dtype=np.uint8)
    colors = [color_index(n) for n in ("COLOR_RED", "COLOR_ORANGE", "COLOR_YELLOW", "COLOR_LIGHT_BLUE")]

    for band, index in enumerate(colors):
        top = 8 + band * 30
        for z in range(top, top + 24):
            # First row below each gap is dark: only suppress builds render it
            shade = Shade.DARKEST if z == top else Shade.FLAT
            for x in range(8, MAP - 8):
                rgba[z, x] = [*shaded_rgb(index, shade), 255]

    return rgba


def run_demo():
    """Run the demonstration."""
    print("=" * 60)
    print("Map Art Generator - Demo")
    print("=" * 60)
    print()

    # Create output directory
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    test_maps = [
        ("hills", create_test_map_hills()),
        ("lake", create_test_map_lake()),
        ("banner", create_test_map_banner()),
    ]

    modes = [m for m in BuildMode if m != BuildMode.SUPPRESS_CHECKER]

    total_start = time.time()

    for name, rgba in test_maps:
        print(f"\n--- Processing: {name} ---")

        converter = MapArtConverter(block_mapping=get_preset("Fullblock"), support_mode="fragile")
        converter.load_array(rgba).set_options(base_name=name)

        result = converter.validate()
        print(f"Valid: {result.valid}")
        stats = converter.stats()
        print(f"Colors: {stats.unique_shade_count} shades of {stats.unique_base_color_count} base colors")
        print(f"Pixels needing suppress: {converter.suppressed_pixel_count}")
        print(f"Auto mode: {converter.build_mode.value}")

        print("\nBuild modes:")
        for mode in modes:
            converter.set_options(build_mode=mode)

            build_start = time.time()
            counts = converter.material_counts()
            path = converter.export(output_dir)
            build_time = time.time() - build_start

            print(f"  {mode.value}:")
            print(f"    Blocks: {sum(counts.values())} ({len(counts)} kinds)")
            print(f"    Saved: {path.name} ({path.stat().st_size} bytes)")
            print(f"    Time: {build_time*1000:.1f}ms")

    total_time = time.time() - total_start

    print("\n" + "=" * 60)
    print(f"Demo complete! Total time: {total_time:.2f}s")
    print(f"Output files in: {output_dir}")
    print("=" * 60)

    return 0


def benchmark_crc32():
    """Benchmark the compiled CRC-32 kernel against zlib."""
    import zlib

    print("\n--- CRC-32 Benchmark ---\n")

    for size in (1 << 10, 1 << 16, 1 << 20):
        data = np.random.default_rng(size).integers(0, 256, size, dtype=np.uint8).tobytes()

        start = time.time()
        ours = crc32(data)
        ours_time = time.time() - start

        start = time.time()
        ref = zlib.crc32(data)
        ref_time = time.time() - start

        print(f"Size: {size} bytes")
        print(f"  numba: {ours_time*1000:.2f}ms, zlib: {ref_time*1000:.2f}ms, match: {ours == ref}")
        print()


if __name__ == "__main__":
    run_demo()

    # Uncomment to run benchmark
    # benchmark_crc32()
