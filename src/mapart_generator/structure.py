"""
Voxel Structure Data Types and Bounds Normalization

Coordinate system follows the game: X east, Y up, Z south. One image row
becomes one Z slice; row 0 is the northern edge of the map.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from .palette import Shade

# Width and height of one map, in pixels and in blocks
MAP_SIZE = 128


class Pixel(NamedTuple):
    """A classified, mapped pixel ready for building."""
    block: str
    shade: Shade
    liquid: bool


# cells[z][x], None for transparent pixels
PixelGrid = List[List[Optional[Pixel]]]


@dataclass
class Voxel:
    """One placed block. ``block`` is a resolved, namespaced id."""
    x: int
    y: int
    z: int
    block: str

    @property
    def position(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)


class ColumnState(NamedTuple):
    """
    Per-column state carried from one row to the next while building.

    ``y`` is the reference height the next row steps from. The water fields
    are only set when the row was a liquid column.
    """
    y: int
    transparent: bool
    water_bottom: Optional[int] = None
    water_top: Optional[int] = None
    water_depth: Optional[int] = None


class StructureSize(NamedTuple):
    """Bounding dimensions of a structure."""
    x: int
    y: int
    z: int


def water_depth(shade: int, x: int, z: int) -> int:
    """
    Number of stacked liquid blocks needed to render a shade.

    Deep water renders darker; a checkerboard of two depths per shade keeps
    the dithered look the game uses for water.
    """
    if shade == Shade.LIGHT:
        return 1
    even = (x + z) % 2 == 0
    if shade == Shade.FLAT:
        return 5 if even else 3
    return 10 if even else 7


def occupied_positions(voxels: Iterable[Voxel]) -> set:
    """Set of (x, y, z) positions taken by voxels."""
    return {v.position for v in voxels}


def group_by_column(voxels: Iterable[Voxel]) -> Dict[int, List[Voxel]]:
    """Group voxels by X in first-seen order."""
    columns: Dict[int, List[Voxel]] = {}
    for v in voxels:
        columns.setdefault(v.x, []).append(v)
    return columns


def group_by_row(voxels: Iterable[Voxel]) -> Dict[int, List[Voxel]]:
    """Group voxels by Z in first-seen order."""
    rows: Dict[int, List[Voxel]] = {}
    for v in voxels:
        rows.setdefault(v.z, []).append(v)
    return rows


def normalize_bounds(voxels: List[Voxel]) -> StructureSize:
    """
    Shift voxels so the lowest Y is 0 and no Z is negative.

    Z is only shifted when a filler row north of the map (z = -1) exists.
    The reported Z size never drops below a full map width so the structure
    lines up with the map grid when pasted.

    Args:
        voxels: Voxel list, modified in place

    Returns:
        StructureSize of the normalized structure
    """
    if not voxels:
        return StructureSize(MAP_SIZE, 1, MAP_SIZE)

    min_y = min(v.y for v in voxels)
    max_y = max(v.y for v in voxels)
    min_z = min(v.z for v in voxels)
    max_z = max(v.z for v in voxels)

    for v in voxels:
        v.y -= min_y
        if min_z < 0:
            v.z -= min_z

    if min_z < 0:
        raw_size_z = max_z - min_z + 1
        min_size_z = MAP_SIZE + 1
    else:
        raw_size_z = max_z + 1
        min_size_z = MAP_SIZE

    return StructureSize(MAP_SIZE, max_y - min_y + 1, max(raw_size_z, min_size_z))
