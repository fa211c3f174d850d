"""
Conversion options.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

from .classifier import CustomColor


class BuildMode(Enum):
    """Available structure building strategies."""
    FLAT = "flat"                               # One level, no post-pass
    STAIRCASE_VALLEY = "staircase_valley"       # Lowest legal heights
    STAIRCASE_CLASSIC = "staircase_classic"     # Each column rests on y=0
    STAIRCASE_NORTHLINE = "staircase_northline" # Row 0 is the baseline
    STAIRCASE_SOUTHLINE = "staircase_southline" # Last row is the baseline
    STAIRCASE_CANCER = "staircase_cancer"       # Randomized legal heights
    SUPPRESS_PAIRS = "suppress_pairs"           # Two row-split structures
    SUPPRESS_PAIRS_EW = "suppress_pairs_ew"     # East-to-west stepped bands
    SUPPRESS_DUAL_LAYER = "suppress_dual_layer" # Two fixed layers
    SUPPRESS_CHECKER = "suppress_checker"       # Reserved


# Listed in the mode enumeration but have no generator
RESERVED_BUILD_MODES = frozenset({"suppress_checker", "suppress_plaid"})


class SupportMode(Enum):
    """Filler placement policies applied after building."""
    NONE = "none"
    STEPS = "steps"       # Under blocks standing above a N/S neighbor
    ALL = "all"           # Under every block
    FRAGILE = "fragile"   # Under blocks that need support
    WATER = "water"       # Around and below liquid blocks


FILENAME_SUFFIXES: Dict[str, str] = {
    "flat": "",
    "staircase_classic": "-staircase_classic",
    "staircase_northline": "-staircase_northline",
    "staircase_southline": "-staircase_southline",
    "staircase_valley": "-staircase_valley",
    "staircase_cancer": "-staircase_cancer",
    "suppress_checker": "-suppress_plaid_NS",
    "suppress_pairs": "-suppress_rowsplit",
    "suppress_pairs_ew": "-suppress_pairs_EW",
}

DEFAULT_LAYER_GAP = 5


def parse_build_mode(mode) -> BuildMode:
    """Accept a BuildMode or its string value."""
    if isinstance(mode, BuildMode):
        return mode
    if mode in RESERVED_BUILD_MODES:
        raise NotImplementedError(f"Build mode '{mode}' is reserved and has no generator")
    try:
        return BuildMode(mode)
    except ValueError:
        raise ValueError(f"Unknown build mode: {mode}") from None


def parse_support_mode(mode) -> SupportMode:
    """Accept a SupportMode or its string value."""
    if isinstance(mode, SupportMode):
        return mode
    try:
        return SupportMode(mode)
    except ValueError:
        raise ValueError(f"Unknown support mode: {mode}") from None


def output_filename(base_name: str, mode: BuildMode, is_zip: bool) -> str:
    """Suggested file name for a conversion result."""
    suffix = FILENAME_SUFFIXES.get(mode.value, f"-{mode.value}")
    return f"{base_name}{suffix}.{'zip' if is_zip else 'nbt'}"


@dataclass(frozen=True)
class ConversionOptions:
    """
    Everything a single conversion needs besides the image.

    Attributes:
        block_mapping: Palette index -> block id ("stone", "oak_leaves[...]")
        filler_block: Support block; "air" or "none" disables filler
        custom_colors: RGB -> block overrides, checked before the palette
        build_mode: Structure building strategy
        support_mode: Filler placement policy
        base_name: Output name stem (also names the entries of a zip)
        layer_gap: Height of the second layer for suppress_dual_layer
    """
    block_mapping: Dict[int, str] = field(default_factory=dict)
    filler_block: str = "stone"
    custom_colors: Tuple[CustomColor, ...] = ()
    build_mode: BuildMode = BuildMode.STAIRCASE_VALLEY
    support_mode: SupportMode = SupportMode.NONE
    base_name: str = "mapart"
    layer_gap: int = DEFAULT_LAYER_GAP

    def __post_init__(self):
        object.__setattr__(self, "build_mode", parse_build_mode(self.build_mode))
        object.__setattr__(self, "support_mode", parse_support_mode(self.support_mode))
        object.__setattr__(self, "custom_colors", tuple(self.custom_colors))
        object.__setattr__(self, "block_mapping", dict(self.block_mapping))
        if self.layer_gap < 1:
            raise ValueError(f"layer_gap must be at least 1 (got {self.layer_gap})")
