"""
Filler Support Placement

Adds filler blocks so that a built structure survives placement:
blocks that would float, fall or pop off get something underneath them,
and water gets walls so it doesn't flow away.
"""

from typing import Dict, List, Tuple

from .blocks import is_filler_disabled, is_fragile_block, is_liquid_block, resolve_block_name
from .options import SupportMode
from .structure import MAP_SIZE, Voxel, occupied_positions

# Neighbors that must be closed off around a water block (N, S, W, E, below)
_WATER_NEIGHBORS = ((0, 0, -1), (0, 0, 1), (-1, 0, 0), (1, 0, 0), (0, -1, 0))


def _support_steps(voxels: List[Voxel], filler: str) -> List[Voxel]:
    """Filler under every column that stands above a north or south neighbor."""
    top: Dict[Tuple[int, int], int] = {}
    for v in voxels:
        key = (v.x, v.z)
        if key not in top or v.y > top[key]:
            top[key] = v.y

    occupied = occupied_positions(voxels)
    added: List[Voxel] = []
    for (x, z), y in top.items():
        north = top.get((x, z - 1))
        south = top.get((x, z + 1))
        raised = (north is not None and y > north) or (south is not None and y > south)
        if raised and (x, y - 1, z) not in occupied:
            occupied.add((x, y - 1, z))
            added.append(Voxel(x, y - 1, z, filler))
    return added


def _support_below(voxels: List[Voxel], filler: str, fragile_only: bool) -> List[Voxel]:
    occupied = occupied_positions(voxels)
    added: List[Voxel] = []
    for v in voxels:
        if fragile_only and not is_fragile_block(v.block):
            continue
        below = (v.x, v.y - 1, v.z)
        if below not in occupied:
            occupied.add(below)
            added.append(Voxel(v.x, v.y - 1, v.z, filler))
    return added


def _support_water(voxels: List[Voxel], filler: str) -> List[Voxel]:
    occupied = occupied_positions(voxels)
    added: List[Voxel] = []
    for v in voxels:
        if not is_liquid_block(v.block):
            continue
        for dx, dy, dz in _WATER_NEIGHBORS:
            pos = (v.x + dx, v.y + dy, v.z + dz)
            # Structures are exactly one map wide
            if not 0 <= pos[0] < MAP_SIZE:
                continue
            if pos not in occupied:
                occupied.add(pos)
                added.append(Voxel(pos[0], pos[1], pos[2], filler))
    return added


def apply_support(voxels: List[Voxel], filler_block: str, mode: SupportMode) -> List[Voxel]:
    """
    Add support filler to a structure.

    Existing voxels are never moved or replaced; filler only goes into
    empty cells.

    Args:
        voxels: Built structure
        filler_block: Filler block id ("air"/"none" disables support)
        mode: Support policy

    Returns:
        New list with the input voxels followed by the added filler
    """
    if mode == SupportMode.NONE or is_filler_disabled(filler_block):
        return list(voxels)

    filler = resolve_block_name(filler_block)
    if mode == SupportMode.STEPS:
        added = _support_steps(voxels, filler)
    elif mode == SupportMode.ALL:
        added = _support_below(voxels, filler, fragile_only=False)
    elif mode == SupportMode.FRAGILE:
        added = _support_below(voxels, filler, fragile_only=True)
    elif mode == SupportMode.WATER:
        added = _support_water(voxels, filler)
    else:
        raise ValueError(f"Unknown support mode: {mode}")

    return list(voxels) + added
