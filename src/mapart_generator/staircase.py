"""
Staircase Structure Builder

The map shades a block by comparing its height with the block directly
north of it: higher renders LIGHT, level renders FLAT, lower renders DARK.
A staircase build turns each image column into a north-to-south walk that
steps up or down by one for every non-flat pixel.

Water is the exception: its shade comes from depth, not height, so water
pixels become vertical stacks of 1, 3/5 or 7/10 blocks.

The base pass (build_staircase) produces absolute heights around y=64.
A variant post-pass then re-bases heights per column:

- classic:   each column's lowest block sits at y=0
- northline: no change, row 0 is the common baseline
- southline: each column's southernmost block sits at y=0
- valley:    every run of blocks is pulled as low as the shading allows
- cancer:    random heights that still satisfy every shade constraint
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Set
import numpy as np

from .blocks import is_filler_disabled, resolve_block_name
from .options import BuildMode
from .palette import Shade
from .structure import (
    MAP_SIZE, ColumnState, Pixel, PixelGrid, Voxel,
    group_by_column, group_by_row, water_depth,
)

# Starting reference height of the base pass
BASE_Y = 64

# Largest column span the cancer variant may produce
CANCER_MAX_SPAN = 128

_DARK_SHADES = (Shade.DARK, Shade.DARKEST)


def _place(voxels: List[Voxel], x: int, y: int, z: int, block: str):
    voxels.append(Voxel(x, y, z, resolve_block_name(block)))


def _step_column(
    voxels: List[Voxel],
    pixel: Optional[Pixel],
    north: ColumnState,
    x: int,
    z: int,
    filler: Optional[str]
) -> ColumnState:
    """
    Place one pixel given the state of the pixel north of it.

    Args:
        voxels: Output list
        pixel: Pixel at (x, z), None if transparent
        north: State carried from row z-1
        x, z: Pixel position
        filler: Filler block, None when disabled

    Returns:
        State to carry into row z+1
    """
    if pixel is None:
        return ColumnState(north.y, True)

    if pixel.liquid:
        depth = water_depth(pixel.shade, x, z)
        # Keep adjacent water rows as one body with a common floor
        bottom = north.water_bottom if north.water_bottom is not None else north.y
        top = bottom + depth - 1
        for d in range(depth):
            _place(voxels, x, bottom + d, z, pixel.block)
        # Rows south step from the top; dark rows use water_bottom instead
        return ColumnState(top, False, bottom, top, depth)

    needs_filler = north.transparent and filler is not None

    if pixel.shade == Shade.FLAT:
        if needs_filler:
            _place(voxels, x, north.y, z - 1, filler)
        _place(voxels, x, north.y, z, pixel.block)
        return ColumnState(north.y, False)

    if pixel.shade == Shade.LIGHT:
        _place(voxels, x, north.y + 1, z, pixel.block)
        return ColumnState(north.y + 1, False)

    # DARK / DARKEST
    if north.water_bottom is not None and north.water_depth > 1:
        dark_y = north.water_bottom
        if needs_filler:
            _place(voxels, x, dark_y + 1, z - 1, filler)
        _place(voxels, x, dark_y, z, pixel.block)
        return ColumnState(dark_y, False)

    ref = north.water_bottom if north.water_bottom is not None else north.y
    if needs_filler:
        _place(voxels, x, ref, z - 1, filler)
    _place(voxels, x, ref - 1, z, pixel.block)
    return ColumnState(ref - 1, False)


def build_staircase(cells: PixelGrid, filler_block: str) -> List[Voxel]:
    """
    Run the base north-to-south staircase pass over the whole image.

    Args:
        cells: Resolved pixel grid, cells[z][x]
        filler_block: Filler block id ("air"/"none" disables filler)

    Returns:
        Voxel list with absolute heights around BASE_Y
    """
    filler = None if is_filler_disabled(filler_block) else filler_block
    voxels: List[Voxel] = []

    row_state = [ColumnState(BASE_Y, True)] * MAP_SIZE
    for z in range(MAP_SIZE):
        row = cells[z]
        row_state = [
            _step_column(voxels, row[x], row_state[x], x, z, filler)
            for x in range(MAP_SIZE)
        ]

    return voxels


def normalize_classic(voxels: List[Voxel]):
    """Drop every column so its lowest block is at y=0."""
    for column in group_by_column(voxels).values():
        min_y = min(v.y for v in column)
        for v in column:
            v.y -= min_y


def align_southline(voxels: List[Voxel]):
    """Shift every column so its southernmost block is at y=0."""
    for column in group_by_column(voxels).values():
        max_z = None
        south_y = 0
        for v in column:
            if max_z is None or v.z > max_z:
                max_z = v.z
                south_y = v.y
        for v in column:
            v.y -= south_y


def _column_pixels(cells: PixelGrid, x: int) -> Dict[int, Pixel]:
    """Pixels of one image column keyed by row."""
    return {z: cells[z][x] for z in range(MAP_SIZE) if cells[z][x] is not None}


def _shift_filler_rows(
    rows: Dict[int, List[Voxel]],
    pixels: Dict[int, Pixel],
    delta_applied: Dict[int, int],
    rebase_orphans: bool
):
    """
    Move filler-only rows along with the row they support (the row south).

    Args:
        rows: Voxels of one column grouped by z
        pixels: Pixels of the column; rows not in here are filler-only
        delta_applied: Height change applied to each pixel row
        rebase_orphans: Drop filler rows whose supported row moved nowhere
            to y=0
    """
    for z in sorted(rows):
        if z in pixels:
            continue
        delta = delta_applied.get(z + 1)
        if delta:
            for v in rows[z]:
                v.y += delta
        elif delta is None and rebase_orphans:
            min_y = min(v.y for v in rows[z])
            for v in rows[z]:
                v.y -= min_y


@dataclass
class ValleySegment:
    """A run of level rows moved as one unit (optionally led by water)."""
    rows: List[int]
    top: int
    water_depth: Optional[int] = None

    @property
    def south(self) -> int:
        return self.rows[-1] + 1


def _valley_segments(
    primary: List[int],
    liquid_rows: Set[int],
    top: Dict[int, int],
    bottom: Dict[int, int]
) -> List[ValleySegment]:
    """
    Split a column into level segments.

    Contiguous non-water rows at the same height form one segment. A water
    row directly north whose top matches joins the segment as its first row.
    Water rows that join nothing become single-row segments.
    """
    solid = [z for z in primary if z not in liquid_rows]
    segments: List[ValleySegment] = []
    taken: Set[int] = set()

    i = 0
    while i < len(solid):
        height = top[solid[i]]
        j = i + 1
        while j < len(solid) and solid[j] == solid[j - 1] + 1 and top[solid[j]] == height:
            j += 1

        seg_rows = solid[i:j]
        depth = None
        north = seg_rows[0] - 1
        if north in liquid_rows and top[north] == height:
            depth = top[north] - bottom[north] + 1
            seg_rows.insert(0, north)

        taken.update(seg_rows)
        segments.append(ValleySegment(seg_rows, height, depth))
        i = j

    for z in primary:
        if z in liquid_rows and z not in taken:
            segments.append(ValleySegment([z], top[z], top[z] - bottom[z] + 1))
            taken.add(z)

    return segments


def _valley_target(
    seg: ValleySegment,
    pixels: Dict[int, Pixel],
    liquid_rows: Set[int],
    current_top: Dict[int, int]
) -> int:
    """
    Lowest top height a segment may take.

    Rests on the south neighbor (or y=0 when the south neighbor doesn't
    constrain it), then is lifted if its own shade requires it to be level
    with or above its north neighbor.
    """
    south_px = pixels.get(seg.south)
    if south_px is None or south_px.liquid or south_px.shade == Shade.LIGHT:
        target = 0
    else:
        south_y = current_top.get(seg.south)
        target = south_y + 1 if south_y is not None else 0

    first_solid = next((z for z in seg.rows if z not in liquid_rows), None)
    if first_solid is not None:
        north = first_solid - 1
        if north not in seg.rows and north in current_top:
            shade = pixels[first_solid].shade
            if shade == Shade.LIGHT:
                target = max(target, current_top[north] + 1)
            elif shade == Shade.FLAT:
                target = max(target, current_top[north])

    # Water must not reach below the structure floor
    if seg.water_depth is not None and seg.water_depth > 1:
        water_floor = target - (seg.water_depth - 1)
        if water_floor < 0:
            target -= water_floor

    return target


def _valley_column(
    x: int,
    column: List[Voxel],
    cells: PixelGrid,
    filler: Optional[str]
) -> List[Voxel]:
    """
    Re-base one column for the valley variant.

    Returns:
        New filler voxels placed under water-led segments
    """
    pixels = _column_pixels(cells, x)
    rows = group_by_row(column)

    primary = [z for z in sorted(rows) if z in pixels]
    liquid_rows = {z for z in primary if pixels[z].liquid}
    orig_top = {z: max(v.y for v in rows[z]) for z in primary}
    orig_bottom = {z: min(v.y for v in rows[z]) for z in primary}

    current_top = dict(orig_top)
    delta_applied = {z: 0 for z in primary}
    added: List[Voxel] = []

    def shift(seg: ValleySegment, delta: int):
        for z in seg.rows:
            for v in rows.get(z, ()):
                v.y += delta
            current_top[z] += delta
            delta_applied[z] += delta

    segments = _valley_segments(primary, liquid_rows, orig_top, orig_bottom)
    segments.sort(key=lambda s: s.top)

    for seg in segments:
        target = _valley_target(seg, pixels, liquid_rows, current_top)

        water_row = seg.rows[0] if seg.water_depth is not None else None
        deep_water = (
            water_row is not None
            and seg.water_depth > 1
            and pixels[water_row].shade != Shade.LIGHT
        )

        if deep_water:
            water_floor = target - (seg.water_depth - 1)
            south_y = current_top.get(seg.south)

            if len(seg.rows) == 1:
                south_px = pixels.get(seg.south)
                if (south_px is not None and south_px.shade in _DARK_SHADES
                        and water_floor != 0 and south_y is not None):
                    target = south_y + seg.water_depth - 1

            elif water_floor != 0 and south_y is not None:
                # Water floor lands on the south neighbor; the rest of the
                # segment stays level with the water top on filler columns
                shift(seg, south_y + seg.water_depth - 1 - seg.top)
                if filler is not None:
                    for z in seg.rows:
                        if z == water_row:
                            continue
                        support = Voxel(x, south_y, z, resolve_block_name(filler))
                        rows.setdefault(z, []).append(support)
                        added.append(support)
                continue

        delta = target - seg.top
        if delta:
            shift(seg, delta)

    _shift_filler_rows(rows, pixels, delta_applied, rebase_orphans=True)
    return added


def apply_valley(voxels: List[Voxel], cells: PixelGrid, filler_block: str):
    """Valley variant: settle every segment as low as its shading allows."""
    filler = None if is_filler_disabled(filler_block) else filler_block
    added: List[Voxel] = []
    for x, column in group_by_column(voxels).items():
        added.extend(_valley_column(x, column, cells, filler))
    voxels.extend(added)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _column_rng(x: int) -> np.random.Generator:
    """Random generator for one column, seeded by its X."""
    return np.random.default_rng(x * 7919 + 42)


def _cancer_column(x: int, column: List[Voxel], cells: PixelGrid):
    pixels = _column_pixels(cells, x)
    primary = sorted(pixels)
    if not primary:
        return

    rows = group_by_row(column)
    orig_top = {z: max(v.y for v in rows[z]) for z in primary if z in rows}
    orig_bottom = {z: min(v.y for v in rows[z]) for z in primary if z in rows}

    rng = _column_rng(x)
    new_top: Dict[int, int] = {}
    last_y = int(rng.integers(32, 96))

    for z in primary:
        px = pixels[z]
        if px.liquid:
            depth = orig_top.get(z, 0) - orig_bottom.get(z, 0) + 1
            top = last_y + int(rng.integers(0, 4))
            floor = top - depth + 1
            if floor < 0:
                top -= floor
            new_top[z] = top
            last_y = top
            continue

        if px.shade == Shade.LIGHT:
            target = last_y + int(rng.integers(1, 6))
        elif px.shade == Shade.FLAT:
            target = last_y
        else:
            target = last_y - int(rng.integers(1, 6))

        new_top[z] = target
        last_y = target

    lo = min(new_top.values())
    span = max(new_top.values()) - lo
    scale = CANCER_MAX_SPAN / span if span > CANCER_MAX_SPAN else 1.0

    delta_applied: Dict[int, int] = {}
    for z in primary:
        if z not in orig_top:
            continue
        delta = _round_half_up((new_top[z] - lo) * scale) - orig_top[z]
        delta_applied[z] = delta
        for v in rows[z]:
            v.y += delta

    _shift_filler_rows(rows, pixels, delta_applied, rebase_orphans=False)


def apply_cancer(voxels: List[Voxel], cells: PixelGrid):
    """
    Cancer variant: randomized heights that still render correctly.

    Every column gets its own generator seeded from its X so the output is
    reproducible.
    """
    for x, column in group_by_column(voxels).items():
        _cancer_column(x, column, cells)


def apply_staircase_variant(
    voxels: List[Voxel],
    mode: BuildMode,
    cells: PixelGrid,
    filler_block: str
):
    """
    Re-base the heights from build_staircase() for a staircase mode.

    Args:
        voxels: Output of build_staircase(), modified in place
        mode: One of the staircase modes (or FLAT)
        cells: Resolved pixel grid the voxels were built from
        filler_block: Filler block id
    """
    if mode in (BuildMode.FLAT, BuildMode.STAIRCASE_NORTHLINE):
        return
    if mode == BuildMode.STAIRCASE_CLASSIC:
        normalize_classic(voxels)
    elif mode == BuildMode.STAIRCASE_SOUTHLINE:
        align_southline(voxels)
    elif mode == BuildMode.STAIRCASE_VALLEY:
        apply_valley(voxels, cells, filler_block)
    elif mode == BuildMode.STAIRCASE_CANCER:
        apply_cancer(voxels, cells)
    else:
        raise ValueError(f"Not a staircase mode: {mode}")
