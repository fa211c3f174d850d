"""
Suppress Structure Builders

Suppress builds keep the structure (almost) flat and produce shade through
which filler block sits north of each color block instead of through a
staircase. Each variant trades build effort differently:

- pairs:      two structures, one per row parity, placed one after the other
- pairs_ew:   one structure that walks column pairs from east to west,
              each step on its own horizontal band
- dual_layer: one structure on two fixed layers (y=0 and y=layer_gap)
"""

from typing import List, Optional, Set, Tuple

from .blocks import is_filler_disabled, is_fragile_block, resolve_block_name
from .options import ConversionOptions, SupportMode
from .palette import Shade
from .structure import MAP_SIZE, Pixel, PixelGrid, Voxel, water_depth
from .support import apply_support

_AGGRESSIVE_SUPPORT = (SupportMode.STEPS, SupportMode.ALL)


class _VoxelSink:
    """Collects voxels, resolving block ids on the way in."""

    def __init__(self):
        self.voxels: List[Voxel] = []
        self.occupied: Set[Tuple[int, int, int]] = set()

    def add(self, x: int, y: int, z: int, block: str):
        self.voxels.append(Voxel(x, y, z, resolve_block_name(block)))
        self.occupied.add((x, y, z))

    def stack(self, x: int, base_y: int, z: int, block: str, depth: int):
        for d in range(depth):
            self.add(x, base_y + d, z, block)


def _filler(options: ConversionOptions) -> Optional[str]:
    if is_filler_disabled(options.filler_block):
        return None
    return options.filler_block


def _build_pairs_half(cells: PixelGrid, options: ConversionOptions, start_row: int) -> List[Voxel]:
    sink = _VoxelSink()
    filler = _filler(options)

    for z in range(start_row, MAP_SIZE, 2):
        for x in range(MAP_SIZE):
            px = cells[z][x]
            if px is None:
                continue

            if px.liquid:
                sink.stack(x, 0, z, px.block, water_depth(px.shade, x, z))
                continue

            sink.add(x, 0, z, px.block)
            if filler is None or px.shade == Shade.LIGHT:
                continue
            if px.shade == Shade.FLAT:
                sink.add(x, 0, z - 1, filler)
            else:
                sink.add(x, 1, z - 1, filler)
                if options.support_mode in _AGGRESSIVE_SUPPORT:
                    sink.add(x, 0, z - 1, filler)

    voxels = sink.voxels
    if options.support_mode != SupportMode.NONE:
        voxels = apply_support(voxels, options.filler_block, options.support_mode)
    return voxels


def build_suppress_pairs(
    cells: PixelGrid,
    options: ConversionOptions
) -> Tuple[List[Voxel], List[Voxel]]:
    """
    Build the two halves of a row-split suppress structure.

    Each half renders every other image row at y=0 and puts shade filler
    in the row north of it (which the other half leaves empty).

    Args:
        cells: Resolved pixel grid
        options: Conversion options (filler, support)

    Returns:
        (rows with even z, rows with odd z), support already applied
    """
    return _build_pairs_half(cells, options, 0), _build_pairs_half(cells, options, 1)


def build_suppress_pairs_ew_steps(cells: PixelGrid, options: ConversionOptions) -> List[List[Voxel]]:
    """
    Build the east-to-west zig-zag as a list of steps.

    Step 0 renders column 127; every later step renders the column pair
    (anchor + 1, anchor) while the anchor walks west to 0. Steps alternate
    which row parity is rendered, and each step starts one above the
    highest block of the previous step.

    Returns:
        One voxel list per step, support not applied
    """
    filler = _filler(options)
    support = options.support_mode
    steps: List[List[Voxel]] = []

    anchor, step, base_y = MAP_SIZE - 1, 0, 0
    while anchor >= 0:
        columns = [MAP_SIZE - 1] if step == 0 else [anchor + 1, anchor]
        color_parity = 1 if step % 2 == 0 else 0
        max_y_used = base_y
        sink = _VoxelSink()

        for x in columns:
            for z in range(color_parity, MAP_SIZE, 2):
                px = cells[z][x]
                if px is None:
                    continue

                if px.liquid:
                    depth = water_depth(px.shade, x, z)
                    sink.stack(x, base_y, z, px.block, depth)
                    max_y_used = max(max_y_used, base_y + depth - 1)
                    continue

                sink.add(x, base_y, z, px.block)

                needs_support = filler is not None and (
                    support in _AGGRESSIVE_SUPPORT
                    or (support == SupportMode.FRAGILE and is_fragile_block(px.block))
                )
                if needs_support:
                    if base_y > 0:
                        sink.add(x, base_y - 1, z, filler)
                    max_y_used = max(max_y_used, base_y)

                if filler is None or px.shade == Shade.LIGHT:
                    continue
                if px.shade == Shade.FLAT:
                    sink.add(x, base_y, z - 1, filler)
                else:
                    sink.add(x, base_y + 1, z - 1, filler)
                    max_y_used = max(max_y_used, base_y + 1)
                    if support in _AGGRESSIVE_SUPPORT:
                        sink.add(x, base_y, z - 1, filler)

        steps.append(sink.voxels)
        anchor -= 1
        base_y = max_y_used + 1
        step += 1

    return steps


def build_suppress_pairs_ew(cells: PixelGrid, options: ConversionOptions) -> List[Voxel]:
    """All steps of the east-to-west zig-zag in one list."""
    return [v for step in build_suppress_pairs_ew_steps(cells, options) for v in step]


# Dual layer shade ranks: 0 = nothing, 1 = brightest, 2 = middle, 3 = darkest
_RANK_NONE, _RANK_BRIGHT, _RANK_MIDDLE, _RANK_DARK = 0, 1, 2, 3


def _dual_rank(px: Optional[Pixel]) -> int:
    if px is None:
        return _RANK_NONE
    if px.shade == Shade.LIGHT:
        return _RANK_BRIGHT
    if px.shade == Shade.FLAT:
        return _RANK_MIDDLE
    return _RANK_DARK


def build_suppress_dual_layer(cells: PixelGrid, options: ConversionOptions) -> List[Voxel]:
    """
    Build the two-layer suppress structure.

    Layer 1 sits at y=0 and layer 2 at y=layer_gap. Even rows are dominant,
    odd rows submissive; where a block and its shade filler go depends on
    the row kind and the shade ranks of the north and south neighbors.
    Water always stacks from layer 1. Filler never replaces a placed block.

    Returns:
        Voxel list, support not applied
    """
    l1, l2 = 0, options.layer_gap
    filler = _filler(options)
    sink = _VoxelSink()

    def add_filler(x, y, z):
        # Never cover a block already placed in the north row
        if filler is not None and (x, y, z) not in sink.occupied:
            sink.add(x, y, z, filler)

    for x in range(MAP_SIZE):
        for z in range(MAP_SIZE):
            px = cells[z][x]
            if px is None:
                continue

            if px.liquid:
                sink.stack(x, l1, z, px.block, water_depth(px.shade, x, z))
                continue

            dominant = z % 2 == 0
            rank = _dual_rank(px)
            north = _dual_rank(cells[z - 1][x]) if z > 0 else _RANK_NONE
            south = _dual_rank(cells[z + 1][x]) if z + 1 < MAP_SIZE else _RANK_NONE

            if rank == _RANK_DARK:
                if (not dominant and south == _RANK_BRIGHT
                        and north in (_RANK_MIDDLE, _RANK_DARK)):
                    sink.add(x, l2, z, px.block)
                    add_filler(x, l2 + 1, z - 1)
                else:
                    sink.add(x, l1, z, px.block)
                    add_filler(x, l1 + 1 if north == _RANK_BRIGHT else l2, z - 1)

            elif rank == _RANK_MIDDLE:
                if dominant and north == _RANK_BRIGHT:
                    sink.add(x, l1, z, px.block)
                    add_filler(x, l1, z - 1)
                elif north != _RANK_NONE:
                    sink.add(x, l1, z, px.block)
                else:
                    sink.add(x, l2, z, px.block)
                    add_filler(x, l1 if south == _RANK_MIDDLE else l2, z - 1)

            else:
                sink.add(x, l1 if dominant else l2, z, px.block)

    return sink.voxels
