"""
Unit tests for the structure builders, support filler and normalization.
"""

import sys
from pathlib import Path
import unittest
from unittest import mock

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mapart_generator.options import BuildMode, ConversionOptions, SupportMode
from mapart_generator.palette import Shade
from mapart_generator.staircase import (
    BASE_Y, apply_staircase_variant, build_staircase,
)
from mapart_generator.structure import (
    MAP_SIZE, Pixel, Voxel, group_by_row, normalize_bounds, occupied_positions, water_depth,
)
from mapart_generator.suppress import (
    build_suppress_dual_layer, build_suppress_pairs,
    build_suppress_pairs_ew, build_suppress_pairs_ew_steps,
)
from mapart_generator.support import apply_support

STONE = "minecraft:stone"
WOOL = "minecraft:white_wool"
WATER = "minecraft:water"


def empty_cells():
    return [[None] * MAP_SIZE for _ in range(MAP_SIZE)]


def column(x: int, shades, start_z: int = 0, block: str = "white_wool"):
    """Pixel grid with one column of solid pixels."""
    cells = empty_cells()
    for i, shade in enumerate(shades):
        cells[start_z + i][x] = Pixel(block, shade, False)
    return cells


def as_set(voxels):
    return {(v.x, v.y, v.z, v.block) for v in voxels}


def row_tops(voxels, x):
    return {z: max(v.y for v in row) for z, row in group_by_row(v for v in voxels if v.x == x).items()}


def water_column(x: int, water_shade, shades):
    """Pixel grid with water at row 0 of column x followed by solid pixels."""
    cells = column(x, shades, start_z=1)
    cells[0][x] = Pixel("water", water_shade, True)
    return cells


class LowestRng:
    """Stand-in generator that always draws the lowest value."""

    def integers(self, low, high):
        return low


class TestStaircase(unittest.TestCase):
    """Tests for the base staircase pass and its variants."""

    def test_classic_flat_pixel(self):
        """Test a lone flat pixel gets a filler block north of it at the same height."""
        cells = column(5, [Shade.FLAT], start_z=10, block="grass_block")
        voxels = build_staircase(cells, "stone")
        apply_staircase_variant(voxels, BuildMode.STAIRCASE_CLASSIC, cells, "stone")

        assert as_set(voxels) == {
            (5, 0, 9, STONE),
            (5, 0, 10, "minecraft:grass_block"),
        }

    def test_classic_light_pixel(self):
        """Test a lone light pixel needs no filler."""
        cells = column(5, [Shade.LIGHT], start_z=10, block="grass_block")
        voxels = build_staircase(cells, "stone")
        apply_staircase_variant(voxels, BuildMode.STAIRCASE_CLASSIC, cells, "stone")

        assert as_set(voxels) == {(5, 0, 10, "minecraft:grass_block")}

    def test_classic_flat_column_is_level(self):
        """Test an all-flat column sits on one level."""
        cells = column(7, [Shade.FLAT] * MAP_SIZE)
        voxels = build_staircase(cells, "stone")
        apply_staircase_variant(voxels, BuildMode.STAIRCASE_CLASSIC, cells, "stone")

        assert len(voxels) == MAP_SIZE + 1
        assert {v.y for v in voxels} == {0}

    def test_filler_disabled(self):
        """Test air filler places nothing extra."""
        cells = column(0, [Shade.FLAT, Shade.DARK])
        voxels = build_staircase(cells, "air")
        assert all(v.block == WOOL for v in voxels)

    def test_base_heights(self):
        """Test light steps up and dark steps down from the north neighbor."""
        cells = column(0, [Shade.FLAT, Shade.LIGHT, Shade.DARK, Shade.DARKEST])
        voxels = build_staircase(cells, "stone")
        tops = row_tops(voxels, 0)

        assert tops == {-1: BASE_Y, 0: BASE_Y, 1: BASE_Y + 1, 2: BASE_Y, 3: BASE_Y - 1}

    def test_dark_after_gap_gets_filler(self):
        """Test a dark pixel below a gap gets filler one above it."""
        cells = column(0, [Shade.DARK], start_z=3)
        voxels = build_staircase(cells, "stone")

        assert as_set(voxels) == {(0, BASE_Y, 2, STONE), (0, BASE_Y - 1, 3, WOOL)}

    def test_water_depth(self):
        """Test liquid depth by shade and checkerboard parity."""
        assert water_depth(Shade.LIGHT, 0, 0) == 1
        assert water_depth(Shade.FLAT, 0, 0) == 5
        assert water_depth(Shade.FLAT, 1, 0) == 3
        assert water_depth(Shade.DARK, 2, 2) == 10
        assert water_depth(Shade.DARKEST, 2, 3) == 7

    def test_dark_under_deep_water(self):
        """Test a dark pixel south of deep water sits at the water floor."""
        cells = empty_cells()
        cells[0][0] = Pixel("water", Shade.FLAT, True)
        cells[1][0] = Pixel("white_wool", Shade.DARK, False)

        voxels = build_staircase(cells, "stone")
        water = sorted(v.y for v in voxels if v.block == "minecraft:water")
        wool = [v for v in voxels if v.block == WOOL]

        assert water == list(range(BASE_Y, BASE_Y + 5))
        assert len(wool) == 1 and wool[0].y == BASE_Y

    def test_southline(self):
        """Test the southernmost block of each column ends at y=0."""
        cells = column(0, [Shade.FLAT, Shade.LIGHT, Shade.LIGHT])
        voxels = build_staircase(cells, "stone")
        apply_staircase_variant(voxels, BuildMode.STAIRCASE_SOUTHLINE, cells, "stone")

        assert row_tops(voxels, 0) == {-1: -2, 0: -2, 1: -1, 2: 0}

    def test_northline_unchanged(self):
        """Test northline keeps the base heights."""
        cells = column(0, [Shade.FLAT, Shade.LIGHT])
        voxels = build_staircase(cells, "stone")
        before = as_set(voxels)
        apply_staircase_variant(voxels, BuildMode.STAIRCASE_NORTHLINE, cells, "stone")
        assert as_set(voxels) == before


class TestValley(unittest.TestCase):
    """Tests for the valley variant."""

    def test_flat_light_dark(self):
        """Test [flat, light, dark] settles with the dark row on the floor."""
        cells = column(0, [Shade.FLAT, Shade.LIGHT, Shade.DARK])
        voxels = build_staircase(cells, "stone")
        apply_staircase_variant(voxels, BuildMode.STAIRCASE_VALLEY, cells, "stone")

        tops = row_tops(voxels, 0)
        assert tops[1] > tops[0]
        assert tops[2] < tops[1]
        assert tops[2] == 0
        assert tops == {-1: 0, 0: 0, 1: 1, 2: 0}

    def test_light_run_stays_relative(self):
        """Test each light row still stands above its north neighbor."""
        shades = [Shade.FLAT, Shade.LIGHT, Shade.LIGHT, Shade.FLAT, Shade.DARK, Shade.DARK]
        cells = column(3, shades)
        voxels = build_staircase(cells, "stone")
        apply_staircase_variant(voxels, BuildMode.STAIRCASE_VALLEY, cells, "stone")

        tops = row_tops(voxels, 3)
        for z in range(1, len(shades)):
            if shades[z] == Shade.LIGHT:
                assert tops[z] > tops[z - 1]
            elif shades[z] == Shade.FLAT:
                assert tops[z] == tops[z - 1]
            else:
                assert tops[z] < tops[z - 1]
        assert min(v.y for v in voxels) == 0

    def test_valley_not_higher_than_classic(self):
        """Test valley never builds taller than classic."""
        shades = [Shade.DARK, Shade.DARK, Shade.LIGHT, Shade.LIGHT, Shade.DARK, Shade.FLAT]
        cells = column(0, shades)

        classic = build_staircase(cells, "stone")
        apply_staircase_variant(classic, BuildMode.STAIRCASE_CLASSIC, cells, "stone")
        valley = build_staircase(cells, "stone")
        apply_staircase_variant(valley, BuildMode.STAIRCASE_VALLEY, cells, "stone")

        assert max(v.y for v in valley) <= max(v.y for v in classic)
        assert min(v.y for v in valley) >= 0

    def _valley(self, cells):
        voxels = build_staircase(cells, "stone")
        apply_staircase_variant(voxels, BuildMode.STAIRCASE_VALLEY, cells, "stone")
        return voxels

    def test_water_joins_segment(self):
        """Test deep water leads the level row after it and is kept above the floor."""
        voxels = self._valley(water_column(0, Shade.DARK, [Shade.FLAT, Shade.DARK]))

        assert row_tops(voxels, 0) == {0: 9, 1: 9, 2: 0}
        assert as_set(voxels) == (
            {(0, y, 0, WATER) for y in range(10)}
            | {(0, 9, 1, WOOL), (0, 0, 2, WOOL)}
        )

    def test_lone_water_over_dark(self):
        """Test a lone water row drops its floor onto the dark row south of it."""
        voxels = self._valley(water_column(1, Shade.FLAT, [Shade.DARK, Shade.DARK, Shade.DARK]))

        assert as_set(voxels) == {
            (1, 2, 0, WATER), (1, 3, 0, WATER), (1, 4, 0, WATER),
            (1, 2, 1, WOOL), (1, 1, 2, WOOL), (1, 0, 3, WOOL),
        }

    def test_water_segment_over_dark(self):
        """Test a water-led segment rests its floor on the dark row and gets filler."""
        shades = [Shade.FLAT, Shade.DARK, Shade.DARK, Shade.DARK]
        voxels = self._valley(water_column(1, Shade.FLAT, shades))

        assert as_set(voxels) == {
            (1, 2, 0, WATER), (1, 3, 0, WATER), (1, 4, 0, WATER),
            (1, 4, 1, WOOL), (1, 2, 1, STONE),
            (1, 2, 2, WOOL), (1, 1, 3, WOOL), (1, 0, 4, WOOL),
        }


class TestCancer(unittest.TestCase):
    """Tests for the randomized variant."""

    def setUp(self):
        self.shades = [Shade.FLAT, Shade.LIGHT, Shade.LIGHT, Shade.DARK, Shade.FLAT, Shade.LIGHT]
        self.cells = column(3, self.shades)

    def _build(self):
        voxels = build_staircase(self.cells, "stone")
        apply_staircase_variant(voxels, BuildMode.STAIRCASE_CANCER, self.cells, "stone")
        return voxels

    def test_deterministic(self):
        """Test repeated builds are identical."""
        assert as_set(self._build()) == as_set(self._build())

    def test_shades_preserved(self):
        """Test random heights still render the requested shades."""
        voxels = self._build()
        tops = row_tops(voxels, 3)

        for z in range(1, len(self.shades)):
            if self.shades[z] == Shade.LIGHT:
                assert tops[z] > tops[z - 1]
            elif self.shades[z] == Shade.FLAT:
                assert tops[z] == tops[z - 1]
            else:
                assert tops[z] < tops[z - 1]

        assert min(tops[z] for z in range(len(self.shades))) == 0
        # Filler north of row 0 moves with it
        assert tops[-1] == tops[0]

    def test_water_floor(self):
        """Test water drawn below the floor is lifted to keep its full depth."""
        cells = column(0, [Shade.DARK] * 30)
        cells[30][0] = Pixel("water", Shade.DARK, True)
        cells[31][0] = Pixel("white_wool", Shade.FLAT, False)

        voxels = build_staircase(cells, "stone")
        with mock.patch("mapart_generator.staircase._column_rng", return_value=LowestRng()):
            apply_staircase_variant(voxels, BuildMode.STAIRCASE_CANCER, cells, "stone")

        tops = row_tops(voxels, 0)
        # Darks step down 1 from 32 to 2; water top lifted from 2 to 9
        assert all(tops[z] == 29 - z for z in range(30))
        assert tops[-1] == 30
        assert tops[30] == 7 and tops[31] == 7
        assert sorted(v.y for v in voxels if v.block == WATER) == list(range(-2, 8))


class TestSuppress(unittest.TestCase):
    """Tests for the suppress builders."""

    def test_pairs(self):
        """Test each half renders one row parity at y=0 with shade filler."""
        cells = empty_cells()
        cells[10][3] = Pixel("white_wool", Shade.FLAT, False)
        cells[10][5] = Pixel("white_wool", Shade.LIGHT, False)
        cells[11][4] = Pixel("white_wool", Shade.DARK, False)

        options = ConversionOptions(filler_block="stone")
        even_half, odd_half = build_suppress_pairs(cells, options)

        assert as_set(even_half) == {
            (3, 0, 10, WOOL), (3, 0, 9, STONE), (5, 0, 10, WOOL),
        }
        assert as_set(odd_half) == {(4, 0, 11, WOOL), (4, 1, 10, STONE)}

    def test_pairs_aggressive_support(self):
        """Test steps support adds a floor under dark filler."""
        cells = empty_cells()
        cells[11][4] = Pixel("white_wool", Shade.DARK, False)

        options = ConversionOptions(filler_block="stone", support_mode="steps")
        _, odd_half = build_suppress_pairs(cells, options)
        assert (4, 0, 10, STONE) in as_set(odd_half)

    def test_pairs_water(self):
        """Test water stacks from y=0."""
        cells = empty_cells()
        cells[0][0] = Pixel("water", Shade.DARK, True)

        even_half, _ = build_suppress_pairs(cells, ConversionOptions())
        assert sorted(v.y for v in even_half) == list(range(10))

    def test_pairs_ew_steps(self):
        """Test the east-to-west walk and its rising bands."""
        cells = empty_cells()
        cells[1][127] = Pixel("white_wool", Shade.FLAT, False)
        cells[0][126] = Pixel("white_wool", Shade.FLAT, False)

        options = ConversionOptions(filler_block="stone")
        steps = build_suppress_pairs_ew_steps(cells, options)

        assert len(steps) == 128
        assert as_set(steps[0]) == {(127, 0, 1, WOOL), (127, 0, 0, STONE)}
        assert as_set(steps[1]) == {(126, 1, 0, WOOL), (126, 1, -1, STONE)}
        assert all(not s for s in steps[2:])
        assert len(build_suppress_pairs_ew(cells, options)) == 4

    def test_dual_layer(self):
        """Test layer choice by row kind and neighbor shades."""
        cells = column(0, [Shade.LIGHT, Shade.DARK, Shade.DARK, Shade.LIGHT], start_z=1)
        options = ConversionOptions(filler_block="stone", layer_gap=5)

        assert as_set(build_suppress_dual_layer(cells, options)) == {
            (0, 5, 1, WOOL),                     # submissive light on layer 2
            (0, 0, 2, WOOL), (0, 1, 1, STONE),   # dominant dark below a light row
            (0, 5, 3, WOOL), (0, 6, 2, STONE),   # submissive dark promoted to layer 2
            (0, 0, 4, WOOL),                     # dominant light on layer 1
        }

    def test_dual_layer_middle_shade(self):
        """Test a dominant flat pixel after a gap goes to layer 2."""
        cells = column(0, [Shade.FLAT, Shade.FLAT])
        options = ConversionOptions(filler_block="stone", layer_gap=4)

        assert as_set(build_suppress_dual_layer(cells, options)) == {
            (0, 4, 0, WOOL), (0, 0, -1, STONE),
            (0, 0, 1, WOOL),
        }

    def test_dual_layer_filler_skips_blocks(self):
        """Test shade filler never lands on a block placed in the north row."""
        cells = empty_cells()
        cells[1][0] = Pixel("white_wool", Shade.FLAT, False)
        cells[2][0] = Pixel("white_wool", Shade.DARK, False)

        voxels = build_suppress_dual_layer(cells, ConversionOptions(filler_block="stone"))

        assert len(voxels) == 3
        assert as_set(voxels) == {
            (0, 5, 1, WOOL), (0, 5, 0, STONE),
            (0, 0, 2, WOOL),
        }

    def test_dual_layer_water(self):
        """Test water stacks from layer 1 whatever its row kind."""
        cells = empty_cells()
        cells[3][0] = Pixel("water", Shade.FLAT, True)
        cells[4][1] = Pixel("water", Shade.LIGHT, True)

        voxels = build_suppress_dual_layer(cells, ConversionOptions(filler_block="stone"))
        assert as_set(voxels) == {
            (0, 0, 3, WATER), (0, 1, 3, WATER), (0, 2, 3, WATER),
            (1, 0, 4, WATER),
        }


class TestSupport(unittest.TestCase):
    """Tests for support filler."""

    def test_all(self):
        """Test every block ends up with something under it."""
        cells = column(0, [Shade.FLAT, Shade.LIGHT, Shade.DARK, Shade.LIGHT])
        voxels = build_staircase(cells, "stone")
        supported = apply_support(voxels, "stone", SupportMode.ALL)

        occupied = occupied_positions(supported)
        for v in voxels:
            assert (v.x, v.y - 1, v.z) in occupied
        assert len(occupied) == len(supported)

    def test_steps(self):
        """Test filler goes only under raised columns."""
        voxels = [
            Voxel(0, 64, 0, WOOL),
            Voxel(0, 65, 1, WOOL),
            Voxel(0, 65, 2, WOOL),
        ]
        added = apply_support(voxels, "stone", SupportMode.STEPS)[3:]
        assert as_set(added) == {(0, 64, 1, STONE)}

    def test_fragile(self):
        """Test only fragile blocks get support."""
        voxels = [
            Voxel(0, 5, 0, "minecraft:white_carpet"),
            Voxel(1, 5, 0, STONE),
        ]
        added = apply_support(voxels, "dirt", SupportMode.FRAGILE)[2:]
        assert as_set(added) == {(0, 4, 0, "minecraft:dirt")}

    def test_water(self):
        """Test water gets closed in on the sides and below."""
        voxels = [Voxel(5, 1, 5, "minecraft:water")]
        added = apply_support(voxels, "glass", SupportMode.WATER)[1:]
        assert {(v.x, v.y, v.z) for v in added} == {
            (5, 1, 4), (5, 1, 6), (4, 1, 5), (6, 1, 5), (5, 0, 5),
        }

    def test_water_stays_on_map(self):
        """Test water walls are not placed outside the map columns."""
        voxels = [Voxel(0, 1, 5, WATER), Voxel(MAP_SIZE - 1, 1, 9, WATER)]
        added = apply_support(voxels, "glass", SupportMode.WATER)[2:]

        assert {(v.x, v.y, v.z) for v in added} == {
            (0, 1, 4), (0, 1, 6), (1, 1, 5), (0, 0, 5),
            (126, 1, 9), (127, 1, 8), (127, 1, 10), (127, 0, 9),
        }

    def test_all_under_water_stack(self):
        """Test a water stack gets exactly one filler, under its bottom block."""
        voxels = [Voxel(5, y, 5, WATER) for y in range(3, 8)]
        added = apply_support(voxels, "stone", SupportMode.ALL)[5:]
        assert as_set(added) == {(5, 2, 5, STONE)}

    def test_disabled(self):
        """Test none mode and air filler add nothing."""
        voxels = [Voxel(0, 5, 0, "minecraft:white_carpet")]
        assert len(apply_support(voxels, "stone", SupportMode.NONE)) == 1
        assert len(apply_support(voxels, "air", SupportMode.ALL)) == 1


class TestNormalize(unittest.TestCase):
    """Tests for bounds normalization."""

    def test_empty(self):
        """Test the empty structure size."""
        assert normalize_bounds([]) == (128, 1, 128)

    def test_shift_and_size(self):
        """Test y is re-based and a filler row north of the map widens z."""
        voxels = [Voxel(0, 64, -1, STONE), Voxel(0, 66, 0, WOOL)]
        size = normalize_bounds(voxels)

        assert size == (128, 3, 129)
        assert as_set(voxels) == {(0, 0, 0, STONE), (0, 2, 1, WOOL)}

    def test_idempotent(self):
        """Test a second pass moves nothing and only drops the north filler margin."""
        cells = column(0, [Shade.FLAT, Shade.LIGHT, Shade.DARK])
        voxels = build_staircase(cells, "stone")

        first = normalize_bounds(voxels)
        snapshot = as_set(voxels)
        second = normalize_bounds(voxels)

        assert snapshot == {
            (0, 0, 0, STONE), (0, 0, 1, WOOL), (0, 1, 2, WOOL), (0, 0, 3, WOOL),
        }
        assert as_set(voxels) == snapshot
        # The filler row is now at z=0, so the extra row is no longer reported
        assert first == (MAP_SIZE, 2, MAP_SIZE + 1)
        assert second == (MAP_SIZE, 2, MAP_SIZE)


if __name__ == "__main__":
    unittest.main()
