"""
Map Color Palette Module

The in-game map renders every block as one of 61 base colors (index 0 is
the "no color" bucket). Each base color is drawn in one of four shades,
chosen by the height of the block relative to its northern neighbor:

- DARK     (180/255) - block is lower than its north neighbor
- FLAT     (220/255) - block is level with its north neighbor
- LIGHT    (255/255) - block is higher than its north neighbor
- DARKEST  (135/255) - unobtainable in survival, treated like DARK

The base RGB stored for each color is therefore its LIGHT shade. A shaded
channel is computed as ``channel * multiplier // 255``.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterator, NamedTuple, Optional, Tuple
import numpy as np


class Shade(IntEnum):
    """Map shade levels, ordered as the game encodes them."""
    DARK = 0
    FLAT = 1
    LIGHT = 2
    DARKEST = 3


SHADE_MULTIPLIERS = (180, 220, 255, 135)

# Index of the only liquid base color
WATER_INDEX = 12


@dataclass(frozen=True)
class PaletteColor:
    """One base map color and the blocks that render as it."""
    name: str
    r: int
    g: int
    b: int
    is_liquid: bool
    blocks: Tuple[str, ...]

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)


BASE_COLORS: Tuple[PaletteColor, ...] = (
    PaletteColor("NONE", 0, 0, 0, False, (
        "glass", "glass_pane", "barrier", "chain", "end_rod", "ladder", "rail",
        "powered_rail", "detector_rail", "activator_rail", "lever", "torch",
        "wall_torch", "soul_torch", "soul_wall_torch", "redstone_wire",
        "repeater", "comparator", "tripwire_hook", "tripwire", "flower_pot",
        "cake", "stone_button", "oak_button", "spruce_button", "birch_button",
        "jungle_button", "acacia_button", "dark_oak_button", "mangrove_button",
        "cherry_button", "bamboo_button", "crimson_button", "warped_button",
        "pale_oak_button", "white_stained_glass_pane",
        "orange_stained_glass_pane", "magenta_stained_glass_pane",
        "light_blue_stained_glass_pane", "yellow_stained_glass_pane",
        "lime_stained_glass_pane", "pink_stained_glass_pane",
        "gray_stained_glass_pane", "light_gray_stained_glass_pane",
        "cyan_stained_glass_pane", "purple_stained_glass_pane",
        "blue_stained_glass_pane", "brown_stained_glass_pane",
        "green_stained_glass_pane", "red_stained_glass_pane",
        "black_stained_glass_pane", "structure_void", "light", "nether_portal",
        "player_head", "zombie_head", "skeleton_skull",
        "wither_skeleton_skull", "creeper_head", "dragon_head", "piglin_head",
    )),
    PaletteColor("GRASS", 127, 178, 56, False, (
        "grass_block", "slime_block",
    )),
    PaletteColor("SAND", 247, 233, 163, False, (
        "sand", "sandstone", "birch_planks", "glowstone", "end_stone",
        "end_stone_bricks", "bone_block", "scaffolding", "candle",
        "suspicious_sand", "birch_log", "birch_stripped_log", "birch_wood",
        "birch_stripped_wood", "birch_sign", "birch_pressure_plate",
        "birch_trapdoor", "birch_stairs", "birch_slab", "birch_fence_gate",
        "birch_fence", "birch_door", "turtle_egg", "ochre_froglight",
        "sandstone_slab", "sandstone_stairs", "sandstone_wall",
        "cut_sandstone", "cut_sandstone_slab", "chiseled_sandstone",
        "smooth_sandstone", "smooth_sandstone_slab", "smooth_sandstone_stairs",
        "end_stone_brick_slab", "end_stone_brick_stairs",
        "end_stone_brick_wall",
    )),
    PaletteColor("WOOL", 199, 199, 199, False, (
        "mushroom_stem", "cobweb", "white_candle",
    )),
    PaletteColor("FIRE", 255, 0, 0, False, (
        "tnt", "redstone_block", "lava", "fire",
    )),
    PaletteColor("ICE", 160, 160, 255, False, (
        "ice", "packed_ice", "blue_ice", "frosted_ice",
    )),
    PaletteColor("METAL", 167, 167, 167, False, (
        "iron_block", "iron_door", "iron_trapdoor", "iron_bars", "anvil",
        "brewing_stand", "heavy_weighted_pressure_plate", "lantern",
        "grindstone", "lodestone", "heavy_core", "pale_oak_leaves",
        "closed_eyeblossom",
    )),
    PaletteColor("PLANT", 0, 124, 0, False, (
        "oak_leaves", "spruce_leaves", "birch_leaves", "jungle_leaves",
        "acacia_leaves", "dark_oak_leaves", "lily_pad", "cactus", "vines",
        "sugar_cane", "fern", "short_grass", "tall_grass", "pink_petals",
    )),
    PaletteColor("SNOW", 255, 255, 255, False, (
        "white_wool", "snow_block", "snow", "white_carpet", "white_concrete",
        "white_concrete_powder", "white_stained_glass",
        "white_glazed_terracotta", "powder_snow", "white_shulker_box",
    )),
    PaletteColor("CLAY", 164, 168, 184, False, (
        "clay",
    )),
    PaletteColor("DIRT", 151, 109, 77, False, (
        "dirt", "coarse_dirt", "jungle_planks", "granite", "polished_granite",
        "farmland", "jungle_slab", "jungle_stairs", "packed_mud", "dirt_path",
        "granite_slab", "granite_stairs", "granite_wall",
        "polished_granite_slab", "polished_granite_stairs", "jungle_log",
        "jungle_stripped_log", "jungle_wood", "jungle_stripped_wood",
        "jungle_sign", "jungle_pressure_plate", "jungle_trapdoor",
        "jungle_fence_gate", "jungle_fence", "jungle_door", "jukebox",
        "brown_mushroom_block", "rooted_dirt", "hanging_roots",
    )),
    PaletteColor("STONE", 112, 112, 112, False, (
        "cobblestone", "stone", "stone_bricks", "andesite",
        "polished_andesite", "gravel", "furnace", "dispenser", "dropper",
        "observer", "hopper", "cobblestone_stairs", "stone_slab",
        "cobblestone_slab", "stone_brick_slab", "stonecutter", "spawner",
        "ender_chest", "cauldron", "stone_stairs", "bedrock", "gold_ore",
        "iron_ore", "coal_ore", "lapis_lazuli_ore", "diamond_ore",
        "mossy_cobblestone", "mossy_cobblestone_slab",
        "mossy_cobblestone_stairs", "mossy_cobblestone_wall",
        "stone_pressure_plate", "redstone_ore", "emerald_ore", "smooth_stone",
        "smooth_stone_slab", "smoker", "blast_furnace", "cobblestone_wall",
        "stone_brick_stairs", "stone_brick_wall", "mossy_stone_bricks",
        "mossy_stone_brick_slab", "mossy_stone_brick_stairs",
        "mossy_stone_brick_wall", "cracked_stone_bricks",
        "chiseled_stone_bricks", "andesite_slab", "andesite_stairs",
        "andesite_wall", "polished_andesite_slab", "polished_andesite_stairs",
        "copper_ore", "crafter", "pale_oak_wood", "pale_oak_log",
    )),
    PaletteColor("WATER", 64, 64, 255, True, (
        "water", "oak_leaves[waterlogged=true]",
        "spruce_leaves[waterlogged=true]", "birch_leaves[waterlogged=true]",
        "jungle_leaves[waterlogged=true]", "acacia_leaves[waterlogged=true]",
        "dark_oak_leaves[waterlogged=true]", "cherry_leaves[waterlogged=true]",
        "pale_oak_leaves[waterlogged=true]",
        "mangrove_leaves[waterlogged=true]", "azalea_leaves[waterlogged=true]",
        "flowering_azalea_leaves[waterlogged=true]",
    )),
    PaletteColor("WOOD", 143, 119, 72, False, (
        "oak_planks", "oak_slab", "oak_stairs", "oak_sign",
        "oak_pressure_plate", "oak_trapdoor", "oak_fence", "oak_fence_gate",
        "oak_door", "crafting_table", "bookshelf", "note_block", "chest",
        "trapped_chest", "daylight_detector", "loom", "composter", "lectern",
        "smithing_table", "fletching_table", "beehive", "oak_wood",
        "oak_stripped_log", "oak_stripped_wood", "barrel", "cartography_table",
        "chiseled_bookshelf", "petrified_oak_slab", "bamboo_sapling",
        "dead_bush",
    )),
    PaletteColor("QUARTZ", 255, 252, 245, False, (
        "quartz_block", "smooth_quartz", "chiseled_quartz_block",
        "quartz_pillar", "quartz_slab", "quartz_stairs", "diorite",
        "polished_diorite", "sea_lantern", "target", "pale_oak_planks",
        "diorite_slab", "diorite_stairs", "diorite_wall",
        "polished_diorite_slab", "polished_diorite_stairs",
        "smooth_quartz_slab", "smooth_quartz_stairs", "pale_oak_slab",
        "pale_oak_stairs", "pale_oak_fence", "pale_oak_fence_gate",
        "pale_oak_door", "pale_oak_trapdoor", "pale_oak_sign",
        "pale_oak_pressure_plate", "pale_oak_stripped_log",
        "pale_oak_stripped_wood",
    )),
    PaletteColor("COLOR_ORANGE", 216, 127, 51, False, (
        "acacia_planks", "acacia_slab", "acacia_stairs", "acacia_log",
        "pumpkin", "jack_o_lantern", "terracotta", "red_sand", "red_sandstone",
        "orange_wool", "orange_carpet", "orange_concrete",
        "orange_glazed_terracotta", "honey_block", "honeycomb_block",
        "lightning_rod", "copper_block", "acacia_sign", "acacia_trapdoor",
        "acacia_pressure_plate", "acacia_fence_gate", "acacia_fence",
        "acacia_door", "acacia_stripped_log", "acacia_stripped_wood",
        "orange_shulker_box", "orange_stained_glass", "orange_concrete_powder",
        "orange_candle", "carved_pumpkin", "red_sandstone_slab",
        "red_sandstone_stairs", "red_sandstone_wall", "cut_red_sandstone",
        "cut_red_sandstone_slab", "chiseled_red_sandstone",
        "smooth_red_sandstone", "smooth_red_sandstone_slab",
        "smooth_red_sandstone_stairs", "raw_copper_block", "creaking_heart",
        "open_eyeblossom", "waxed_copper_block", "cut_copper",
        "cut_copper_slab", "cut_copper_stairs", "waxed_cut_copper",
        "waxed_cut_copper_slab", "waxed_cut_copper_stairs",
    )),
    PaletteColor("COLOR_MAGENTA", 178, 76, 216, False, (
        "magenta_wool", "magenta_carpet", "magenta_concrete",
        "magenta_glazed_terracotta", "purpur_block", "purpur_pillar",
        "purpur_slab", "purpur_stairs", "magenta_shulker_box",
        "magenta_stained_glass", "magenta_concrete_powder", "magenta_candle",
    )),
    PaletteColor("COLOR_LIGHT_BLUE", 102, 153, 216, False, (
        "light_blue_wool", "light_blue_carpet", "light_blue_concrete",
        "light_blue_glazed_terracotta", "light_blue_shulker_box",
        "light_blue_stained_glass", "light_blue_concrete_powder",
        "light_blue_candle",
    )),
    PaletteColor("COLOR_YELLOW", 229, 229, 51, False, (
        "yellow_wool", "yellow_carpet", "yellow_concrete",
        "yellow_glazed_terracotta", "sponge", "wet_sponge", "hay_block",
        "bee_nest", "bamboo_planks", "yellow_shulker_box",
        "yellow_stained_glass", "yellow_concrete_powder", "yellow_candle",
    )),
    PaletteColor("COLOR_LIGHT_GREEN", 127, 204, 25, False, (
        "lime_wool", "lime_carpet", "lime_concrete", "lime_glazed_terracotta",
        "melon", "lime_shulker_box", "lime_stained_glass",
        "lime_concrete_powder", "lime_candle",
    )),
    PaletteColor("COLOR_PINK", 242, 127, 165, False, (
        "pink_wool", "pink_carpet", "pink_concrete", "pink_glazed_terracotta",
        "brain_coral_block", "pearlescent_froglight", "cherry_leaves",
        "pink_shulker_box", "pink_stained_glass", "pink_concrete_powder",
        "pink_candle",
    )),
    PaletteColor("COLOR_GRAY", 76, 76, 76, False, (
        "gray_wool", "gray_carpet", "gray_concrete", "gray_glazed_terracotta",
        "tinted_glass", "acacia_wood", "gray_shulker_box",
        "gray_stained_glass", "gray_concrete_powder", "gray_candle",
    )),
    PaletteColor("COLOR_LIGHT_GRAY", 153, 153, 153, False, (
        "light_gray_wool", "light_gray_carpet", "light_gray_concrete",
        "light_gray_glazed_terracotta", "structure_block", "jigsaw_block",
        "pale_moss_block", "pale_moss_carpet", "light_gray_shulker_box",
        "light_gray_stained_glass", "light_gray_concrete_powder",
        "light_gray_candle",
    )),
    PaletteColor("COLOR_CYAN", 76, 127, 153, False, (
        "cyan_wool", "cyan_carpet", "cyan_concrete", "cyan_glazed_terracotta",
        "prismarine", "sculk_sensor", "warped_roots", "nether_sprouts",
        "twisting_vines", "prismarine_slab", "prismarine_stairs",
        "prismarine_wall", "calibrated_sculk_sensor", "warped_fungus",
        "cyan_shulker_box", "cyan_stained_glass", "cyan_concrete_powder",
        "cyan_candle",
    )),
    PaletteColor("COLOR_PURPLE", 127, 63, 178, False, (
        "purple_wool", "purple_carpet", "purple_concrete",
        "purple_glazed_terracotta", "mycelium", "chorus_plant",
        "chorus_flower", "budding_amethyst", "amethyst_block", "shulker_box",
        "bubble_coral_block", "purple_shulker_box", "purple_stained_glass",
        "purple_concrete_powder", "purple_candle",
    )),
    PaletteColor("COLOR_BLUE", 51, 76, 178, False, (
        "blue_wool", "blue_carpet", "blue_concrete", "blue_glazed_terracotta",
        "tube_coral_block", "blue_shulker_box", "blue_stained_glass",
        "blue_concrete_powder", "blue_candle",
    )),
    PaletteColor("COLOR_BROWN", 102, 76, 51, False, (
        "dark_oak_planks", "dark_oak_slab", "dark_oak_stairs", "dark_oak_log",
        "dark_oak_wood", "spruce_log", "soul_sand", "soul_soil", "brown_wool",
        "brown_carpet", "brown_concrete", "brown_glazed_terracotta",
        "brown_mushroom", "command_block", "dark_oak_stripped_log",
        "dark_oak_stripped_wood", "dark_oak_sign", "dark_oak_pressure_plate",
        "dark_oak_trapdoor", "dark_oak_fence_gate", "dark_oak_fence",
        "dark_oak_door", "brown_shulker_box", "brown_stained_glass",
        "brown_concrete_powder", "brown_candle", "leaf_litter",
    )),
    PaletteColor("COLOR_GREEN", 102, 127, 51, False, (
        "green_wool", "green_carpet", "green_concrete",
        "green_glazed_terracotta", "end_portal_frame", "moss_block",
        "moss_carpet", "dried_kelp_block", "sea_pickle", "green_shulker_box",
        "green_stained_glass", "green_concrete_powder", "green_candle",
    )),
    PaletteColor("COLOR_RED", 153, 51, 51, False, (
        "red_wool", "red_carpet", "red_concrete", "red_glazed_terracotta",
        "bricks", "brick_slab", "brick_stairs", "brick_wall",
        "nether_wart_block", "nether_wart", "enchanting_table",
        "red_mushroom_block", "red_mushroom", "shroomlight", "mangrove_planks",
        "mangrove_log", "sniffer_egg", "mangrove_slab", "mangrove_stairs",
        "mangrove_fence", "mangrove_fence_gate", "mangrove_door",
        "mangrove_trapdoor", "mangrove_sign", "mangrove_pressure_plate",
        "mangrove_stripped_log", "mangrove_wood", "mangrove_stripped_wood",
        "red_shulker_box", "red_stained_glass", "red_concrete_powder",
        "red_candle", "fire_coral_block",
    )),
    PaletteColor("COLOR_BLACK", 25, 25, 25, False, (
        "black_wool", "black_carpet", "black_concrete",
        "black_glazed_terracotta", "obsidian", "coal_block", "dragon_egg",
        "blackstone", "polished_blackstone", "polished_blackstone_bricks",
        "netherite_block", "ancient_debris", "crying_obsidian",
        "respawn_anchor", "sculk", "sculk_catalyst", "sculk_shrieker",
        "sculk_vein", "basalt", "polished_basalt", "smooth_basalt",
        "black_shulker_box", "black_stained_glass", "black_concrete_powder",
        "black_candle",
    )),
    PaletteColor("GOLD", 250, 238, 77, False, (
        "gold_block", "light_weighted_pressure_plate", "bell",
        "raw_gold_block",
    )),
    PaletteColor("DIAMOND", 92, 219, 213, False, (
        "diamond_block", "prismarine_bricks", "dark_prismarine", "conduit",
        "beacon",
    )),
    PaletteColor("LAPIS", 74, 128, 255, False, (
        "lapis_block",
    )),
    PaletteColor("EMERALD", 0, 217, 58, False, (
        "emerald_block",
    )),
    PaletteColor("PODZOL", 129, 86, 49, False, (
        "podzol", "spruce_planks", "spruce_slab", "spruce_stairs",
        "spruce_log", "spruce_wood", "spruce_fence", "spruce_fence_gate",
        "spruce_door", "spruce_trapdoor", "spruce_pressure_plate",
        "spruce_sign", "oak_log", "jungle_log", "campfire", "mangrove_roots",
        "muddy_mangrove_roots", "spruce_stripped_log", "spruce_stripped_wood",
        "soul_campfire",
    )),
    PaletteColor("NETHER", 112, 2, 0, False, (
        "netherrack", "nether_bricks", "nether_brick_slab",
        "nether_brick_stairs", "nether_brick_fence", "nether_brick_wall",
        "red_nether_bricks", "nether_gold_ore", "nether_quartz_ore",
        "magma_block", "crimson_roots", "crimson_fungus", "weeping_vines",
        "chiseled_nether_bricks", "cracked_nether_bricks",
        "red_nether_brick_slab", "red_nether_brick_stairs",
        "red_nether_brick_wall",
    )),
    PaletteColor("TERRACOTTA_WHITE", 209, 177, 161, False, (
        "white_terracotta", "calcite", "cherry_planks", "cherry_slab",
        "cherry_stairs", "cherry_fence", "cherry_fence_gate", "cherry_door",
        "cherry_trapdoor", "cherry_log", "cherry_sign",
        "cherry_pressure_plate",
    )),
    PaletteColor("TERRACOTTA_ORANGE", 159, 82, 36, False, (
        "orange_terracotta", "redstone_lamp", "resin_block", "resin_bricks",
        "resin_brick_slab", "resin_brick_stairs", "resin_brick_wall",
        "resin_clump[south=true]",
    )),
    PaletteColor("TERRACOTTA_MAGENTA", 149, 87, 108, False, (
        "magenta_terracotta",
    )),
    PaletteColor("TERRACOTTA_LIGHT_BLUE", 112, 108, 138, False, (
        "light_blue_terracotta",
    )),
    PaletteColor("TERRACOTTA_YELLOW", 186, 133, 36, False, (
        "yellow_terracotta",
    )),
    PaletteColor("TERRACOTTA_LIGHT_GREEN", 103, 117, 53, False, (
        "lime_terracotta",
    )),
    PaletteColor("TERRACOTTA_PINK", 160, 77, 78, False, (
        "pink_terracotta", "cherry_wood",
    )),
    PaletteColor("TERRACOTTA_GRAY", 57, 41, 35, False, (
        "gray_terracotta", "tuff", "tuff_bricks", "polished_tuff", "tuff_slab",
        "tuff_brick_slab", "tuff_stairs", "tuff_brick_stairs", "chiseled_tuff",
        "chiseled_tuff_bricks", "cherry_log", "tuff_wall", "tuff_brick_wall",
        "polished_tuff_slab", "polished_tuff_stairs", "polished_tuff_wall",
    )),
    PaletteColor("TERRACOTTA_LIGHT_GRAY", 135, 107, 98, False, (
        "light_gray_terracotta", "exposed_copper", "waxed_exposed_copper",
        "exposed_cut_copper", "mud_bricks", "mud_brick_slab",
        "mud_brick_stairs", "mud_brick_wall", "exposed_copper_trapdoor",
        "exposed_cut_copper_slab", "exposed_cut_copper_stairs",
        "waxed_exposed_cut_copper", "waxed_exposed_cut_copper_slab",
        "waxed_exposed_cut_copper_stairs",
    )),
    PaletteColor("TERRACOTTA_CYAN", 87, 92, 92, False, (
        "cyan_terracotta", "mud",
    )),
    PaletteColor("TERRACOTTA_PURPLE", 122, 73, 88, False, (
        "purple_terracotta",
    )),
    PaletteColor("TERRACOTTA_BLUE", 76, 62, 92, False, (
        "blue_terracotta",
    )),
    PaletteColor("TERRACOTTA_BROWN", 76, 50, 35, False, (
        "brown_terracotta", "dripstone_block", "pointed_dripstone",
    )),
    PaletteColor("TERRACOTTA_GREEN", 76, 82, 42, False, (
        "green_terracotta",
    )),
    PaletteColor("TERRACOTTA_RED", 142, 60, 46, False, (
        "red_terracotta", "decorated_pot",
    )),
    PaletteColor("TERRACOTTA_BLACK", 37, 22, 16, False, (
        "black_terracotta",
    )),
    PaletteColor("CRIMSON_NYLIUM", 189, 48, 49, False, (
        "crimson_nylium",
    )),
    PaletteColor("CRIMSON_STEM", 148, 63, 97, False, (
        "crimson_planks", "crimson_stem", "stripped_crimson_stem",
        "crimson_slab", "crimson_stairs", "crimson_fence",
        "crimson_fence_gate", "crimson_door", "crimson_trapdoor",
        "crimson_sign", "crimson_pressure_plate",
    )),
    PaletteColor("CRIMSON_HYPHAE", 92, 25, 29, False, (
        "crimson_hyphae", "stripped_crimson_hyphae",
    )),
    PaletteColor("WARPED_NYLIUM", 22, 126, 134, False, (
        "warped_nylium", "oxidized_copper", "waxed_oxidized_copper",
        "oxidized_cut_copper", "oxidized_copper_trapdoor",
        "oxidized_cut_copper_slab", "oxidized_cut_copper_stairs",
        "waxed_oxidized_cut_copper", "waxed_oxidized_cut_copper_slab",
        "waxed_oxidized_cut_copper_stairs",
    )),
    PaletteColor("WARPED_STEM", 58, 142, 140, False, (
        "warped_planks", "warped_stem", "stripped_warped_stem", "warped_slab",
        "warped_stairs", "warped_fence", "warped_fence_gate", "warped_door",
        "warped_trapdoor", "warped_sign", "warped_pressure_plate",
        "weathered_copper", "waxed_weathered_copper", "weathered_cut_copper",
        "weathered_cut_copper_slab", "weathered_cut_copper_stairs",
        "waxed_weathered_cut_copper", "waxed_weathered_cut_copper_slab",
        "waxed_weathered_cut_copper_stairs",
    )),
    PaletteColor("WARPED_HYPHAE", 86, 44, 62, False, (
        "warped_hyphae", "stripped_warped_hyphae",
    )),
    PaletteColor("WARPED_WART_BLOCK", 20, 180, 133, False, (
        "warped_wart_block",
    )),
    PaletteColor("DEEPSLATE", 100, 100, 100, False, (
        "deepslate", "cobbled_deepslate", "deepslate_bricks",
        "deepslate_tiles", "polished_deepslate", "chiseled_deepslate",
        "cobbled_deepslate_slab", "deepslate_brick_slab",
        "deepslate_tile_slab", "reinforced_deepslate",
        "cobbled_deepslate_stairs", "cobbled_deepslate_wall",
        "deepslate_brick_stairs", "deepslate_brick_wall",
        "deepslate_tile_stairs", "deepslate_tile_wall",
        "cracked_deepslate_bricks", "cracked_deepslate_tiles",
        "deepslate_gold_ore", "deepslate_iron_ore", "deepslate_coal_ore",
        "deepslate_lapis_ore", "deepslate_diamond_ore",
        "deepslate_redstone_ore", "deepslate_emerald_ore",
        "deepslate_copper_ore",
    )),
    PaletteColor("RAW_IRON", 216, 175, 147, False, (
        "raw_iron_block",
    )),
    PaletteColor("GLOW_LICHEN", 127, 167, 150, False, (
        "glow_lichen[south=true]", "verdant_froglight",
    )),
)


def shaded_rgb(base_index: int, shade: int) -> Tuple[int, int, int]:
    """
    Get the on-map RGB of a base color at a given shade.

    Args:
        base_index: Palette index (0-61)
        shade: Shade level (0-3)

    Returns:
        (r, g, b) tuple
    """
    color = BASE_COLORS[base_index]
    m = SHADE_MULTIPLIERS[shade]
    return (color.r * m // 255, color.g * m // 255, color.b * m // 255)


def is_liquid(base_index: int) -> bool:
    """Check if a base color is rendered as a liquid column."""
    return BASE_COLORS[base_index].is_liquid


class ColorMatch(NamedTuple):
    """Result of a reverse color lookup."""
    base_index: int
    shade: Shade


class ColorLookup:
    """
    Reverse lookup from quantized map RGB to (palette index, shade).

    Build it once with ``ColorLookup.build()`` and share it between
    conversions; the table is never mutated after construction.
    """

    def __init__(self, table: Dict[Tuple[int, int, int], ColorMatch]):
        self._table = dict(table)
        keys = list(self._table.keys())
        self._candidates = np.array(keys, dtype=np.int32).reshape(-1, 3)
        self._candidates.setflags(write=False)

    @classmethod
    def build(cls) -> "ColorLookup":
        """
        Precompute every shaded color of base colors 1..61.

        Returns:
            New ColorLookup with 244 entries
        """
        table: Dict[Tuple[int, int, int], ColorMatch] = {}
        for index in range(1, len(BASE_COLORS)):
            for shade in Shade:
                table[shaded_rgb(index, shade)] = ColorMatch(index, shade)
        return cls(table)

    def match(self, r: int, g: int, b: int) -> Optional[ColorMatch]:
        """Find the palette entry for an exact RGB value, if any."""
        return self._table.get((int(r), int(g), int(b)))

    def __contains__(self, rgb) -> bool:
        return tuple(int(c) for c in rgb) in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[Tuple[Tuple[int, int, int], ColorMatch]]:
        return iter(self._table.items())

    @property
    def candidates(self) -> np.ndarray:
        """Read-only (N, 3) int32 array of all matchable RGB values."""
        return self._candidates
