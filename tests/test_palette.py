"""
Unit tests for the palette, block id helpers and presets.
"""

import json
import sys
import tempfile
from pathlib import Path
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mapart_generator.palette import (
    BASE_COLORS, SHADE_MULTIPLIERS, WATER_INDEX, ColorLookup, Shade, is_liquid, shaded_rgb,
)
from mapart_generator.blocks import (
    display_name, format_block_state, is_filler_disabled, is_fragile_block,
    is_liquid_block, parse_block_state, resolve_block_name,
)
from mapart_generator.presets import (
    carpets_preset, default_preset, fullblock_preset, get_preset, load_mapping,
)


class TestPalette(unittest.TestCase):
    """Tests for the base color table and shading."""

    def test_table_size(self):
        """Test the palette has 62 entries with NONE first."""
        assert len(BASE_COLORS) == 62
        assert BASE_COLORS[0].name == "NONE"
        assert SHADE_MULTIPLIERS == (180, 220, 255, 135)

    def test_only_water_is_liquid(self):
        """Test WATER is the single liquid color."""
        liquid = [i for i in range(len(BASE_COLORS)) if is_liquid(i)]
        assert liquid == [WATER_INDEX]
        assert BASE_COLORS[WATER_INDEX].name == "WATER"

    def test_light_shade_is_base_rgb(self):
        """Test the LIGHT shade reproduces the stored color."""
        for i, color in enumerate(BASE_COLORS):
            assert shaded_rgb(i, Shade.LIGHT) == color.rgb

    def test_grass_shades(self):
        """Test known shaded values of GRASS."""
        assert shaded_rgb(1, Shade.LIGHT) == (127, 178, 56)
        assert shaded_rgb(1, Shade.FLAT) == (109, 153, 48)
        assert shaded_rgb(1, Shade.DARK) == (89, 125, 39)
        assert shaded_rgb(1, Shade.DARKEST) == (67, 94, 29)


class TestColorLookup(unittest.TestCase):
    """Tests for the reverse color lookup."""

    @classmethod
    def setUpClass(cls):
        cls.lookup = ColorLookup.build()

    def test_size(self):
        """Test every shade of indices 1-61 is present and distinct."""
        assert len(self.lookup) == 61 * 4
        assert self.lookup.candidates.shape == (244, 3)

    def test_round_trip(self):
        """Test shaded_rgb() fed back through the lookup gives (index, shade)."""
        for index in range(1, len(BASE_COLORS)):
            for shade in Shade:
                match = self.lookup.match(*shaded_rgb(index, shade))
                assert match is not None
                assert match.base_index == index
                assert match.shade == shade

    def test_none_color_not_matched(self):
        """Test the NONE bucket never matches."""
        assert self.lookup.match(0, 0, 0) is None

    def test_contains(self):
        """Test membership by RGB tuple."""
        assert (109, 153, 48) in self.lookup
        assert (1, 2, 3) not in self.lookup

    def test_candidates_read_only(self):
        """Test the candidate array cannot be modified."""
        with self.assertRaises(ValueError):
            self.lookup.candidates[0, 0] = 1


class TestBlocks(unittest.TestCase):
    """Tests for block id helpers."""

    def test_resolve_adds_namespace(self):
        """Test bare ids get the minecraft namespace."""
        assert resolve_block_name("stone") == "minecraft:stone"
        assert resolve_block_name("minecraft:stone") == "minecraft:stone"
        assert resolve_block_name("create:gearbox") == "create:gearbox"

    def test_resolve_keeps_properties(self):
        """Test block-state suffixes survive resolution."""
        assert resolve_block_name("resin_clump[south=true]") == "minecraft:resin_clump[south=true]"

    def test_leaves_are_persistent(self):
        """Test leaves get persistent=true appended."""
        assert resolve_block_name("oak_leaves") == "minecraft:oak_leaves[persistent=true]"
        assert (resolve_block_name("oak_leaves[waterlogged=true]")
                == "minecraft:oak_leaves[waterlogged=true,persistent=true]")

    def test_parse_block_state(self):
        """Test splitting a block id into name and properties."""
        name, props = parse_block_state("minecraft:oak_leaves[waterlogged=true,persistent=true]")
        assert name == "minecraft:oak_leaves"
        assert props == {"waterlogged": "true", "persistent": "true"}
        assert format_block_state(name, props) == "minecraft:oak_leaves[waterlogged=true,persistent=true]"
        assert parse_block_state("stone") == ("stone", {})

    def test_display_name(self):
        """Test display names drop the namespace and persistence flag."""
        assert display_name("minecraft:oak_leaves[persistent=true]") == "oak_leaves"
        assert (display_name("minecraft:oak_leaves[waterlogged=true,persistent=true]")
                == "oak_leaves[waterlogged=true]")

    def test_fragile(self):
        """Test fragile detection ignores namespace and properties."""
        assert is_fragile_block("white_carpet")
        assert is_fragile_block("minecraft:pink_petals")
        assert is_fragile_block("minecraft:resin_clump[south=true]")
        assert not is_fragile_block("minecraft:stone")

    def test_liquid_blocks(self):
        """Test water and waterlogged ids count as liquid."""
        assert is_liquid_block("minecraft:water")
        assert is_liquid_block("minecraft:oak_leaves[waterlogged=true,persistent=true]")
        assert not is_liquid_block("minecraft:oak_leaves[persistent=true]")

    def test_filler_disabled(self):
        """Test air/none (any case, padded) disables filler."""
        assert is_filler_disabled("air")
        assert is_filler_disabled(" NONE ")
        assert not is_filler_disabled("stone")


class TestPresets(unittest.TestCase):
    """Tests for built-in block mappings."""

    def test_default_overrides(self):
        """Test named overrides of the default preset."""
        mapping = default_preset()
        assert len(mapping) == 61
        assert mapping[WATER_INDEX] == "oak_leaves[waterlogged=true]"
        assert mapping[8] == "white_carpet"          # SNOW
        assert mapping[15] == "orange_carpet"        # COLOR_ORANGE

    def test_carpets_only(self):
        """Test the carpet preset leaves everything else unmapped."""
        mapping = carpets_preset()
        assert mapping[15] == "orange_carpet"
        assert mapping[1] == ""
        assert all(b == "" or b.endswith("_carpet") for b in mapping.values())

    def test_fullblock(self):
        """Test full block substitutions."""
        mapping = fullblock_preset()
        assert mapping[1] == "grass_block"
        assert mapping[29] == "black_concrete"

    def test_get_preset(self):
        """Test lookup by name is case-insensitive and fresh."""
        a = get_preset("default")
        a[1] = "changed"
        assert get_preset("Default")[1] != "changed"
        with self.assertRaises(ValueError):
            get_preset("nope")

    def test_load_mapping(self):
        """Test JSON mappings keyed by index or color name."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "mapping.json"
            path.write_text(json.dumps({"1": "moss_block", "WATER": "water"}))
            mapping = load_mapping(path)

        assert mapping == {1: "moss_block", WATER_INDEX: "water"}

    def test_load_mapping_errors(self):
        """Test bad mapping files are rejected."""
        with self.assertRaises(FileNotFoundError):
            load_mapping("/nonexistent/mapping.json")

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "mapping.json"
            path.write_text(json.dumps({"NOT_A_COLOR": "stone"}))
            with self.assertRaises(ValueError):
                load_mapping(path)


if __name__ == "__main__":
    unittest.main()
