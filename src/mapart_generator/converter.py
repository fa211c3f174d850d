"""
Main MapArtConverter Class

This is the primary interface for the map art pipeline.
It orchestrates:
1. Image loading
2. Palette validation (and optional nearest-color repair)
3. Block mapping resolution
4. Structure building (staircase or suppress family) and support filler
5. Bounds normalization and export as .nbt or .zip

Example Usage:
    converter = MapArtConverter(block_mapping=get_preset("Default"))
    converter.load_image("castle.png")
    converter.set_options(build_mode="staircase_valley", support_mode="steps")
    converter.export("out/")
"""

from collections import Counter
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Sequence, Union
import numpy as np

from .blocks import display_name
from .classifier import (
    CustomColor, ImageStats, ValidationError, ValidationResult, count_suppressed_pixels,
    has_non_flat_shades, image_stats, repair_pixels, resolve_pixels, validate_pixels,
)
from .exporters import ZipEntry, create_zip, gzip_compress, write_structure_nbt
from .ingestion import ImageLoader
from .options import BuildMode, ConversionOptions, SupportMode, output_filename
from .palette import ColorLookup
from .staircase import apply_staircase_variant, build_staircase
from .structure import PixelGrid, Voxel, normalize_bounds
from .suppress import (
    build_suppress_dual_layer, build_suppress_pairs,
    build_suppress_pairs_ew, build_suppress_pairs_ew_steps,
)
from .support import apply_support


class ConversionResult(NamedTuple):
    """Encoded output of a conversion."""
    data: bytes
    is_zip: bool
    filename: str


def _check_implemented(mode: BuildMode):
    if mode == BuildMode.SUPPRESS_CHECKER:
        raise NotImplementedError(f"Build mode '{mode.value}' is reserved and has no generator")


def build_structures(cells: PixelGrid, options: ConversionOptions) -> List[List[Voxel]]:
    """
    Build the structure(s) for a resolved pixel grid.

    Args:
        cells: Resolved pixel grid
        options: Conversion options

    Returns:
        One voxel list, or two for suppress_pairs; support applied,
        not yet normalized
    """
    mode = options.build_mode
    _check_implemented(mode)

    if mode == BuildMode.SUPPRESS_PAIRS:
        return list(build_suppress_pairs(cells, options))

    if mode == BuildMode.SUPPRESS_PAIRS_EW:
        voxels = build_suppress_pairs_ew(cells, options)
    elif mode == BuildMode.SUPPRESS_DUAL_LAYER:
        voxels = build_suppress_dual_layer(cells, options)
    else:
        voxels = build_staircase(cells, options.filler_block)
        apply_staircase_variant(voxels, mode, cells, options.filler_block)

    return [apply_support(voxels, options.filler_block, options.support_mode)]


def _encode(voxels: List[Voxel]) -> bytes:
    size = normalize_bounds(voxels)
    return gzip_compress(write_structure_nbt(voxels, size))


def _require_valid(pixels: np.ndarray, options: ConversionOptions, lookup: ColorLookup):
    result = validate_pixels(pixels, options.custom_colors, lookup)
    if not result.valid:
        raise ValidationError("; ".join(result.errors), result.errors)


def convert_to_nbt(
    pixels: np.ndarray,
    options: ConversionOptions,
    lookup: Optional[ColorLookup] = None
) -> ConversionResult:
    """
    Convert a 128x128 RGBA map art buffer to a structure file.

    Args:
        pixels: RGBA array of shape (128, 128, 4)
        options: Conversion options
        lookup: Shared color lookup (built on demand if omitted)

    Returns:
        ConversionResult with gzipped NBT bytes, or a zip of two NBT files
        for suppress_pairs

    Raises:
        ValidationError: wrong size or colors outside the palette
        MappingError: a palette color in use has no block
        NotImplementedError: reserved build mode
    """
    lookup = lookup or ColorLookup.build()
    _check_implemented(options.build_mode)
    _require_valid(pixels, options, lookup)

    cells = resolve_pixels(pixels, options.block_mapping, options.custom_colors, lookup)
    structures = build_structures(cells, options)

    if options.build_mode == BuildMode.SUPPRESS_PAIRS:
        odd_rows, even_rows = structures
        data = create_zip([
            ZipEntry(f"{options.base_name}-odd_rows.nbt", _encode(odd_rows)),
            ZipEntry(f"{options.base_name}-even_rows.nbt", _encode(even_rows)),
        ])
        is_zip = True
    else:
        data = _encode(structures[0])
        is_zip = False

    return ConversionResult(data, is_zip, output_filename(options.base_name, options.build_mode, is_zip))


def compute_material_counts(
    pixels: np.ndarray,
    options: ConversionOptions,
    lookup: Optional[ColorLookup] = None
) -> Dict[str, int]:
    """
    Count the blocks a build needs, keyed by display name.

    suppress_pairs counts both halves. suppress_pairs_ew is built one step
    at a time, so it reports the largest count any single step needs.

    Returns:
        {block display name: count}
    """
    lookup = lookup or ColorLookup.build()
    cells = resolve_pixels(pixels, options.block_mapping, options.custom_colors, lookup)

    if options.build_mode == BuildMode.SUPPRESS_PAIRS_EW:
        counts: Counter = Counter()
        for step in build_suppress_pairs_ew_steps(cells, options):
            step = apply_support(step, options.filler_block, options.support_mode)
            for name, n in Counter(display_name(v.block) for v in step).items():
                counts[name] = max(counts[name], n)
        return dict(counts)

    counts = Counter()
    for voxels in build_structures(cells, options):
        counts.update(display_name(v.block) for v in voxels)
    return dict(counts)


def effective_build_mode(
    pixels: np.ndarray,
    mode: BuildMode,
    custom_colors: Sequence[CustomColor],
    lookup: ColorLookup
) -> BuildMode:
    """Fall back to FLAT when no palette pixel needs a height step."""
    if not has_non_flat_shades(pixels, custom_colors, lookup):
        return BuildMode.FLAT
    return mode


class MapArtConverter:
    """
    High-level interface for map art conversion.

    Attributes:
        options: Current ConversionOptions
        auto_flat: Switch to flat mode for images with a single shade
    """

    def __init__(
        self,
        block_mapping: Optional[Dict[int, str]] = None,
        filler_block: str = "stone",
        build_mode: Union[str, BuildMode] = BuildMode.STAIRCASE_VALLEY,
        support_mode: Union[str, SupportMode] = SupportMode.NONE,
        custom_colors=(),
        layer_gap: int = 5,
        auto_flat: bool = True
    ):
        """
        Initialize the MapArtConverter.

        Args:
            block_mapping: Palette index -> block id
            filler_block: Support block ("air"/"none" disables filler)
            build_mode: Structure building strategy
            support_mode: Filler placement policy
            custom_colors: CustomColor overrides
            layer_gap: Second layer height for suppress_dual_layer
            auto_flat: Use flat mode when the image has no shade steps
        """
        self.options = ConversionOptions(
            block_mapping=block_mapping or {},
            filler_block=filler_block,
            custom_colors=custom_colors,
            build_mode=build_mode,
            support_mode=support_mode,
            layer_gap=layer_gap,
        )
        self.auto_flat = auto_flat
        self.repaired_colors: List[tuple] = []

        self._lookup = ColorLookup.build()
        self._image_loader: Optional[ImageLoader] = None
        self._pixels: Optional[np.ndarray] = None

    def load_image(self, image_path: Union[str, Path]) -> "MapArtConverter":
        """
        Load a map art image. Output files are named after it.

        Returns:
            self for method chaining
        """
        self._image_loader = ImageLoader().load(image_path)
        self._pixels = self._image_loader.color_image
        self.repaired_colors = []
        self.options = replace(self.options, base_name=self._image_loader.base_name)
        return self

    def load_array(self, rgba_array: np.ndarray) -> "MapArtConverter":
        """
        Load map art from an RGBA numpy array of shape (128, 128, 4).

        Returns:
            self for method chaining
        """
        self._image_loader = ImageLoader().load_from_array(rgba_array)
        self._pixels = self._image_loader.color_image
        self.repaired_colors = []
        return self

    def set_options(self, **kwargs) -> "MapArtConverter":
        """
        Update conversion options.

        Args:
            **kwargs: Any ConversionOptions field

        Returns:
            self for method chaining
        """
        self.options = replace(self.options, **kwargs)
        return self

    @property
    def pixels(self) -> np.ndarray:
        """Get the current (possibly repaired) RGBA buffer."""
        if self._pixels is None:
            raise RuntimeError("No image loaded. Call load_image() first.")
        return self._pixels

    @property
    def lookup(self) -> ColorLookup:
        return self._lookup

    def validate(self) -> ValidationResult:
        """Check the loaded image against the palette."""
        return validate_pixels(self.pixels, self.options.custom_colors, self._lookup)

    def repair(self) -> "MapArtConverter":
        """
        Snap every off-palette color to its nearest map color.

        The colors that were changed are kept in ``repaired_colors``.

        Returns:
            self for method chaining
        """
        result = repair_pixels(self.pixels, self.options.custom_colors, self._lookup)
        self._pixels = result.pixels
        self.repaired_colors = result.converted_colors
        return self

    def _effective_options(self) -> ConversionOptions:
        if not self.auto_flat:
            return self.options
        mode = effective_build_mode(
            self.pixels, self.options.build_mode, self.options.custom_colors, self._lookup
        )
        if mode == self.options.build_mode:
            return self.options
        return replace(self.options, build_mode=mode)

    @property
    def build_mode(self) -> BuildMode:
        """Build mode that convert() will actually use."""
        return self._effective_options().build_mode

    def convert(self) -> ConversionResult:
        """
        Build and encode the structure.

        Returns:
            ConversionResult
        """
        return convert_to_nbt(self.pixels, self._effective_options(), self._lookup)

    def material_counts(self) -> Dict[str, int]:
        """Get the blocks needed for the build, by display name."""
        _require_valid(self.pixels, self.options, self._lookup)
        return compute_material_counts(self.pixels, self._effective_options(), self._lookup)

    def stats(self) -> ImageStats:
        """Get palette usage of the loaded image."""
        return image_stats(self.pixels, self.options.custom_colors, self._lookup)

    @property
    def suppressed_pixel_count(self) -> int:
        """Number of dark pixels only a suppress build can shade."""
        return count_suppressed_pixels(self.pixels, self.options.custom_colors, self._lookup)

    def export(self, output_path: Union[str, Path]) -> Path:
        """
        Convert and write the result.

        Args:
            output_path: Target file, or an existing directory to write the
                suggested file name into

        Returns:
            Path to the written file
        """
        result = self.convert()
        output_path = Path(output_path)

        if output_path.is_dir():
            output_path = output_path / result.filename
        else:
            output_path = output_path.with_suffix(".zip" if result.is_zip else ".nbt")
            output_path.parent.mkdir(parents=True, exist_ok=True)

        output_path.write_bytes(result.data)
        return output_path
