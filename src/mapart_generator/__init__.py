"""
Map Art Generator
=================

Converts 128x128 map art images into Minecraft structure files.

Every opaque pixel is matched exactly against the 244 shaded map colors,
resolved to a block through a block mapping, and placed at a height that
makes the in-game map render the intended shade. The result is written as
a gzipped structure NBT (.nbt), or as a .zip of two structures for the
row-split suppress build.

Key Features:
- Exact palette validation with optional nearest-color repair
- Flat, five staircase and three suppress build modes
- Support filler policies for fragile blocks and water
- Byte-exact NBT and ZIP writers with Numba-compiled CRC-32

Example Usage:
    from mapart_generator import MapArtConverter, get_preset

    converter = MapArtConverter(block_mapping=get_preset("Default"))
    converter.load_image("castle.png")
    converter.set_options(build_mode="staircase_classic", support_mode="steps")
    converter.export("castle.nbt")
"""

__version__ = "1.0.0"
__author__ = "Map Art Generator Team"

from .classifier import CustomColor, MappingError, ValidationError
from .converter import (
    ConversionResult, MapArtConverter, compute_material_counts, convert_to_nbt,
)
from .options import BuildMode, ConversionOptions, SupportMode
from .palette import BASE_COLORS, ColorLookup, Shade
from .presets import get_preset, load_mapping

__all__ = [
    "MapArtConverter",
    "ConversionOptions",
    "ConversionResult",
    "convert_to_nbt",
    "compute_material_counts",
    "BuildMode",
    "SupportMode",
    "CustomColor",
    "ValidationError",
    "MappingError",
    "BASE_COLORS",
    "ColorLookup",
    "Shade",
    "get_preset",
    "load_mapping",
]
