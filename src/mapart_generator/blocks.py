"""
Block Identifier Helpers

Block ids are written by users without a namespace ("stone") and may carry
a bracketed block-state suffix ("oak_leaves[waterlogged=true]"). The
structure file needs fully-qualified names, so everything placed in a
structure goes through resolve_block_name() first.
"""

from functools import lru_cache
from typing import Dict, Tuple

NAMESPACE = "minecraft:"

# Blocks that pop off when the block below them is removed
FRAGILE_BLOCKS = frozenset([
    # Carpets
    "white_carpet", "orange_carpet", "magenta_carpet", "light_blue_carpet",
    "yellow_carpet", "lime_carpet", "pink_carpet", "gray_carpet",
    "light_gray_carpet", "cyan_carpet", "purple_carpet", "blue_carpet",
    "brown_carpet", "green_carpet", "red_carpet", "black_carpet",
    "moss_carpet", "pale_moss_carpet",

    # Pressure plates
    "stone_pressure_plate", "oak_pressure_plate", "birch_pressure_plate",
    "spruce_pressure_plate", "jungle_pressure_plate", "acacia_pressure_plate",
    "dark_oak_pressure_plate", "crimson_pressure_plate",
    "warped_pressure_plate", "cherry_pressure_plate", "pale_oak_pressure_plate",
    "light_weighted_pressure_plate", "heavy_weighted_pressure_plate",
    "mangrove_pressure_plate",

    # Standing signs
    "oak_sign", "birch_sign", "spruce_sign", "jungle_sign", "acacia_sign",
    "dark_oak_sign", "crimson_sign", "warped_sign", "cherry_sign",
    "pale_oak_sign", "mangrove_sign",

    # Doors
    "oak_door", "birch_door", "spruce_door", "jungle_door", "acacia_door",
    "dark_oak_door", "crimson_door", "warped_door", "cherry_door",
    "pale_oak_door", "mangrove_door", "iron_door",

    # Trapdoors
    "oak_trapdoor", "birch_trapdoor", "spruce_trapdoor", "jungle_trapdoor",
    "acacia_trapdoor", "dark_oak_trapdoor", "crimson_trapdoor",
    "warped_trapdoor", "cherry_trapdoor", "pale_oak_trapdoor",
    "mangrove_trapdoor", "iron_trapdoor",

    # Candles
    "candle", "white_candle", "orange_candle", "magenta_candle",
    "light_blue_candle", "yellow_candle", "lime_candle", "pink_candle",
    "gray_candle", "light_gray_candle", "cyan_candle", "purple_candle",
    "blue_candle", "brown_candle", "green_candle", "red_candle",
    "black_candle",

    # Vegetation
    "pink_petals", "fern", "short_grass", "tall_grass", "dead_bush",
    "sugar_cane", "cactus", "vines", "lily_pad",
    "crimson_roots", "warped_roots", "nether_sprouts",
    "twisting_vines", "weeping_vines",
    "crimson_fungus", "warped_fungus",
    "hanging_roots", "sea_pickle", "nether_wart",
    "bamboo_sapling", "brown_mushroom", "red_mushroom",
    "chorus_plant", "chorus_flower",

    # Everything else with a placement condition
    "fire", "snow", "pointed_dripstone", "lantern",
    "bell", "turtle_egg", "leaf_litter",
    "open_eyeblossom", "closed_eyeblossom",
    "sculk_sensor", "calibrated_sculk_sensor", "sculk_vein",
    "scaffolding", "glow_lichen", "resin_clump",
])


def strip_namespace(block_id: str) -> str:
    """Remove a leading "minecraft:" from a block id."""
    if block_id.startswith(NAMESPACE):
        return block_id[len(NAMESPACE):]
    return block_id


def parse_block_state(block_id: str) -> Tuple[str, Dict[str, str]]:
    """
    Split a block id into its name and block-state properties.

    Args:
        block_id: e.g. "minecraft:oak_leaves[waterlogged=true]"

    Returns:
        (name, properties) where properties keep their written order
    """
    bracket = block_id.find("[")
    if bracket < 0:
        return block_id, {}

    name = block_id[:bracket]
    body = block_id[bracket + 1:]
    if body.endswith("]"):
        body = body[:-1]

    props: Dict[str, str] = {}
    for part in body.split(","):
        key, sep, value = part.partition("=")
        if sep:
            props[key.strip()] = value.strip()
    return name, props


def format_block_state(name: str, props: Dict[str, str]) -> str:
    """Inverse of parse_block_state()."""
    if not props:
        return name
    body = ",".join(f"{k}={v}" for k, v in props.items())
    return f"{name}[{body}]"


@lru_cache(maxsize=4096)
def resolve_block_name(block: str) -> str:
    """
    Turn a user block id into the id written to the structure file.

    Adds the namespace if missing and marks leaves as persistent so they
    don't decay once placed.
    """
    name, props = parse_block_state(block.strip())
    if "leaves" in name:
        props["persistent"] = "true"
    if ":" not in name:
        name = NAMESPACE + name
    return format_block_state(name, props)


def display_name(block_id: str) -> str:
    """
    Get the user-facing name of a resolved block id.

    Strips the namespace and the implicit persistent=true property.
    """
    name, props = parse_block_state(strip_namespace(block_id))
    props = {k: v for k, v in props.items() if not (k == "persistent" and v == "true")}
    return format_block_state(name, props)


def is_fragile_block(block_id: str) -> bool:
    """Check if a block needs support below it. Properties are ignored."""
    name, _ = parse_block_state(strip_namespace(block_id))
    return name in FRAGILE_BLOCKS


def is_liquid_block(block_id: str) -> bool:
    """Check if a resolved block id is water or waterlogged."""
    return block_id == NAMESPACE + "water" or "waterlogged=true" in block_id


def is_filler_disabled(filler_block: str) -> bool:
    """A filler of "air" or "none" (any case) turns filler placement off."""
    return filler_block.strip().lower() in ("air", "none")
