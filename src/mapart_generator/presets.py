"""
Built-in block mapping presets.

A preset maps every palette index (1-61) to the block that should be
placed for it. An empty string leaves the color unmapped.
"""

import json
from pathlib import Path
from typing import Callable, Dict, Union

from .palette import BASE_COLORS

BlockMapping = Dict[int, str]

_DEFAULT_OVERRIDES = {
    "SNOW": "white_carpet",
    "FIRE": "redstone_block",
    "WOOL": "white_candle",
    "WOOD": "oak_pressure_plate",
    "WATER": "oak_leaves[waterlogged=true]",
    "NETHER": "crimson_roots",
    "PLANT": "pink_petals",
    "DIAMOND": "prismarine_bricks",
    "TERRACOTTA_RED": "decorated_pot",
    "TERRACOTTA_ORANGE": "resin_clump[south=true]",
    "TERRACOTTA_CYAN": "mud",
}

_FULLBLOCK_OVERRIDES = {
    1: "grass_block", 2: "sandstone", 3: "mushroom_stem", 4: "tnt",
    5: "ice", 6: "iron_block", 7: "oak_leaves", 8: "white_concrete",
    10: "granite", 11: "andesite", 12: "oak_leaves[waterlogged=true]",
    13: "oak_planks", 14: "diorite", 15: "orange_concrete",
    16: "magenta_concrete", 17: "light_blue_concrete", 18: "yellow_concrete",
    19: "lime_concrete", 20: "pink_concrete", 21: "gray_concrete",
    22: "light_gray_concrete", 23: "cyan_concrete", 24: "purple_concrete",
    25: "blue_concrete", 26: "brown_concrete", 27: "green_concrete",
    28: "red_concrete", 29: "black_concrete", 30: "gold_block",
    31: "prismarine_bricks", 34: "spruce_planks", 35: "netherrack",
    36: "white_terracotta", 37: "orange_terracotta", 43: "gray_terracotta",
    44: "light_gray_terracotta", 53: "crimson_planks", 56: "warped_planks",
    61: "verdant_froglight",
}


def _first(blocks, suffix: str) -> str:
    for block in blocks:
        if block.endswith(suffix):
            return block
    return ""


def default_preset() -> BlockMapping:
    """
    Low-profile mapping: carpets and pressure plates where possible.
    """
    mapping: BlockMapping = {}
    for index in range(1, len(BASE_COLORS)):
        color = BASE_COLORS[index]
        block = _DEFAULT_OVERRIDES.get(color.name)
        if not block and color.name.startswith("COLOR_"):
            block = _first(color.blocks, "_carpet")
        if not block:
            block = _first(color.blocks, "_pressure_plate")
        if not block:
            block = color.blocks[0] if color.blocks else ""
        mapping[index] = block
    return mapping


def carpets_preset() -> BlockMapping:
    """Default preset restricted to carpets; all other colors unmapped."""
    return {
        index: block if block.endswith("_carpet") else ""
        for index, block in default_preset().items()
    }


def fullblock_preset() -> BlockMapping:
    """Default preset with full blocks substituted wherever one exists."""
    return {
        index: _FULLBLOCK_OVERRIDES.get(index, block)
        for index, block in default_preset().items()
    }


PRESETS: Dict[str, Callable[[], BlockMapping]] = {
    "Default": default_preset,
    "Carpets": carpets_preset,
    "Fullblock": fullblock_preset,
}


def get_preset(name: str) -> BlockMapping:
    """
    Build a named preset.

    Args:
        name: One of "Default", "Carpets", "Fullblock" (case-insensitive)

    Returns:
        Fresh mapping dict (safe to modify)
    """
    for key, builder in PRESETS.items():
        if key.lower() == name.lower():
            return builder()
    raise ValueError(
        f"Unknown preset: {name} (available: {', '.join(PRESETS)})"
    )


def load_mapping(path: Union[str, Path]) -> BlockMapping:
    """
    Load a block mapping from JSON.

    The file holds an object keyed by palette index, or by base color name:
        {"1": "grass_block", "WATER": "oak_leaves[waterlogged=true]"}
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Mapping file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Mapping file must contain a JSON object: {path}")

    names = {color.name: i for i, color in enumerate(BASE_COLORS)}
    mapping: BlockMapping = {}
    for key, block in raw.items():
        if key in names:
            index = names[key]
        else:
            try:
                index = int(key)
            except ValueError:
                raise ValueError(f"Unknown palette color in mapping: {key}") from None
        if not 0 <= index < len(BASE_COLORS):
            raise ValueError(f"Palette index out of range in mapping: {index}")
        mapping[index] = str(block or "")
    return mapping
