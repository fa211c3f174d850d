"""
Pixel Classification Module

Handles:
- Validating that every opaque pixel is an exact map color (or a custom color)
- Repairing off-palette pixels to the nearest map color
- Resolving pixels to the block that will be placed for them

Only exact matches count. Map colors are quantized, so any color that is
not one of the 244 shaded palette entries cannot appear on an in-game map.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Set, Tuple
import numpy as np
from numba import njit, prange

from .palette import BASE_COLORS, ColorLookup, Shade, is_liquid
from .structure import MAP_SIZE, Pixel, PixelGrid

# How many offending colors are spelled out in an error message
MAX_REPORTED_COLORS = 10

# Marker added to used_base_colors for pixels matched by a custom color
CUSTOM_COLOR_INDEX = -1

RGB = Tuple[int, int, int]


class ValidationError(ValueError):
    """The image cannot be converted as given (bad size or colors)."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class MappingError(ValueError):
    """A palette color used by the image has no block assigned."""

    def __init__(self, missing: Sequence[int]):
        self.missing = list(missing)
        names = ", ".join(f"{BASE_COLORS[i].name} ({i})" for i in self.missing)
        count = len(self.missing)
        super().__init__(
            f"{count} color{'' if count == 1 else 's'} in the image "
            f"{'has' if count == 1 else 'have'} no block assigned: {names}"
        )


@dataclass(frozen=True)
class CustomColor:
    """An explicit RGB -> block override, checked before the palette."""
    r: int
    g: int
    b: int
    block: str

    @property
    def rgb(self) -> RGB:
        return (self.r, self.g, self.b)


@dataclass
class ValidationResult:
    """Outcome of validate_pixels()."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    used_base_colors: Set[int] = field(default_factory=set)
    invalid_colors: List[RGB] = field(default_factory=list)


class RepairResult(NamedTuple):
    """Outcome of repair_pixels()."""
    pixels: np.ndarray
    converted_colors: List[RGB]


class ImageStats(NamedTuple):
    """Palette usage summary of a valid image."""
    unique_shade_count: int
    unique_base_color_count: int


def custom_color_table(custom_colors: Iterable[CustomColor]) -> Dict[RGB, str]:
    """Index custom colors by RGB. Later entries win."""
    return {cc.rgb: cc.block for cc in custom_colors}


def _unique_opaque_colors(pixels: np.ndarray) -> List[RGB]:
    """Distinct RGB values of opaque pixels, in raster (first-seen) order."""
    opaque = pixels[:, :, 3] != 0
    rgb = pixels[opaque][:, :3]
    if len(rgb) == 0:
        return []
    unique, first_index = np.unique(rgb, axis=0, return_index=True)
    order = np.argsort(first_index, kind="stable")
    return [tuple(int(c) for c in unique[i]) for i in order]


def _format_invalid(colors: List[RGB]) -> str:
    count = len(colors)
    shown = ", ".join(f"rgb({r},{g},{b})" for r, g, b in colors[:MAX_REPORTED_COLORS])
    more = "..." if count > MAX_REPORTED_COLORS else ""
    return (
        f"Found {count} color{'' if count == 1 else 's'} not in the map palette: "
        f"{shown}{more}"
    )


def validate_pixels(
    pixels: np.ndarray,
    custom_colors: Sequence[CustomColor],
    lookup: ColorLookup
) -> ValidationResult:
    """
    Check an RGBA buffer against the map palette.

    Args:
        pixels: RGBA array of shape (H, W, 4)
        custom_colors: Extra colors accepted besides the palette
        lookup: Shared reverse color lookup

    Returns:
        ValidationResult; never raises for bad input
    """
    height, width = pixels.shape[:2]
    if width != MAP_SIZE or height != MAP_SIZE:
        return ValidationResult(
            valid=False,
            errors=[f"Image must be {MAP_SIZE}x{MAP_SIZE} pixels (got {width}x{height})"],
        )

    custom = custom_color_table(custom_colors)
    used: Set[int] = set()
    invalid: List[RGB] = []

    for rgb in _unique_opaque_colors(pixels):
        match = lookup.match(*rgb)
        if match is not None:
            used.add(match.base_index)
        elif rgb in custom:
            used.add(CUSTOM_COLOR_INDEX)
        else:
            invalid.append(rgb)

    errors = [_format_invalid(invalid)] if invalid else []
    return ValidationResult(
        valid=not errors,
        errors=errors,
        used_base_colors=used,
        invalid_colors=invalid,
    )


@njit(cache=True, parallel=True)
def _nearest_color_kernel(colors: np.ndarray, candidates: np.ndarray) -> np.ndarray:
    """
    Index of the nearest candidate for each color (squared RGB distance).

    Ties resolve to the lowest candidate index.

    Args:
        colors: (M, 3) int32 colors to repair
        candidates: (N, 3) int32 palette colors

    Returns:
        (M,) int64 candidate indices
    """
    m = colors.shape[0]
    n = candidates.shape[0]
    result = np.empty(m, dtype=np.int64)

    for i in prange(m):
        best = 0
        best_dist = 1 << 30
        for j in range(n):
            dr = colors[i, 0] - candidates[j, 0]
            dg = colors[i, 1] - candidates[j, 1]
            db = colors[i, 2] - candidates[j, 2]
            dist = dr * dr + dg * dg + db * db
            if dist < best_dist:
                best_dist = dist
                best = j
        result[i] = best

    return result


def repair_pixels(
    pixels: np.ndarray,
    custom_colors: Sequence[CustomColor],
    lookup: ColorLookup
) -> RepairResult:
    """
    Replace every off-palette pixel with its nearest map color.

    Alpha is preserved and transparent pixels are left alone. The input
    array is not modified.

    Args:
        pixels: RGBA array of shape (128, 128, 4)
        custom_colors: Colors that are accepted as-is
        lookup: Shared reverse color lookup

    Returns:
        RepairResult(repaired copy, list of colors that were converted)
    """
    repaired = pixels.copy()
    custom = custom_color_table(custom_colors)

    bad = [
        rgb for rgb in _unique_opaque_colors(pixels)
        if rgb not in lookup and rgb not in custom
    ]
    if not bad:
        return RepairResult(repaired, [])

    candidates = lookup.candidates
    nearest = _nearest_color_kernel(
        np.array(bad, dtype=np.int32),
        np.ascontiguousarray(candidates, dtype=np.int32)
    )

    opaque = repaired[:, :, 3] != 0
    for rgb, ci in zip(bad, nearest):
        hit = opaque & np.all(repaired[:, :, :3] == np.array(rgb, dtype=np.uint8), axis=2)
        repaired[hit, :3] = candidates[ci].astype(np.uint8)

    return RepairResult(repaired, bad)


def find_unmapped_colors(
    used_base_colors: Iterable[int],
    block_mapping: Dict[int, str]
) -> List[int]:
    """Palette indices used by the image that have no block assigned."""
    return sorted(
        i for i in used_base_colors
        if i > 0 and not (block_mapping.get(i) or "").strip()
    )


def resolve_pixels(
    pixels: np.ndarray,
    block_mapping: Dict[int, str],
    custom_colors: Sequence[CustomColor],
    lookup: ColorLookup
) -> PixelGrid:
    """
    Resolve every pixel to the block that renders it.

    Custom colors take priority over the palette and always behave as
    flat, non-liquid pixels.

    Args:
        pixels: Validated RGBA array of shape (128, 128, 4)
        block_mapping: Palette index -> block id
        custom_colors: RGB -> block overrides
        lookup: Shared reverse color lookup

    Returns:
        cells[z][x] grid of Pixel or None (transparent/unmatched)

    Raises:
        MappingError: if a palette color in use has no block
    """
    custom = custom_color_table(custom_colors)
    cells: PixelGrid = [[None] * MAP_SIZE for _ in range(MAP_SIZE)]
    resolved: Dict[RGB, Optional[Pixel]] = {}
    used: Set[int] = set()

    for rgb in _unique_opaque_colors(pixels):
        if rgb in custom:
            resolved[rgb] = Pixel(custom[rgb], Shade.FLAT, False)
            continue
        match = lookup.match(*rgb)
        if match is None:
            resolved[rgb] = None
            continue
        used.add(match.base_index)
        block = (block_mapping.get(match.base_index) or "").strip()
        resolved[rgb] = Pixel(block, match.shade, is_liquid(match.base_index)) if block else None

    missing = find_unmapped_colors(used, block_mapping)
    if missing:
        raise MappingError(missing)

    for z in range(MAP_SIZE):
        row = pixels[z]
        for x in range(MAP_SIZE):
            r, g, b, a = row[x]
            if a == 0:
                continue
            cells[z][x] = resolved.get((int(r), int(g), int(b)))

    return cells


def image_stats(
    pixels: np.ndarray,
    custom_colors: Sequence[CustomColor],
    lookup: ColorLookup
) -> ImageStats:
    """Count distinct shaded colors and distinct base colors in use."""
    custom = custom_color_table(custom_colors)
    shades: Set[object] = set()
    bases: Set[int] = set()

    for rgb in _unique_opaque_colors(pixels):
        if rgb in custom:
            shades.add(("custom", rgb))
            continue
        match = lookup.match(*rgb)
        if match is not None:
            bases.add(match.base_index)
            shades.add((match.base_index, int(match.shade)))

    return ImageStats(len(shades), len(bases))


def has_non_flat_shades(
    pixels: np.ndarray,
    custom_colors: Sequence[CustomColor],
    lookup: ColorLookup
) -> bool:
    """True if any palette pixel needs a height step to render."""
    custom = custom_color_table(custom_colors)
    for rgb in _unique_opaque_colors(pixels):
        if rgb in custom:
            continue
        match = lookup.match(*rgb)
        if match is not None and match.shade != Shade.FLAT:
            return True
    return False


def count_suppressed_pixels(
    pixels: np.ndarray,
    custom_colors: Sequence[CustomColor],
    lookup: ColorLookup
) -> int:
    """
    Count transparent pixels whose next opaque pixel to the south is dark.

    A dark pixel right after a gap has no block north of it to step down
    from, so a staircase build cannot shade it; only suppress builds can.

    Returns:
        Number of such (gap pixel, dark pixel) pairs; 0 means no suppress
        build is needed
    """
    custom = custom_color_table(custom_colors)
    opaque = pixels[:, :, 3] != 0
    count = 0

    for x in range(MAP_SIZE):
        for z in range(MAP_SIZE):
            if opaque[z, x]:
                continue
            south = np.flatnonzero(opaque[z + 1:, x])
            if len(south) == 0:
                continue
            r, g, b = (int(c) for c in pixels[z + 1 + south[0], x, :3])
            if (r, g, b) in custom:
                continue
            match = lookup.match(r, g, b)
            if match is not None and match.shade in (Shade.DARK, Shade.DARKEST):
                count += 1

    return count
